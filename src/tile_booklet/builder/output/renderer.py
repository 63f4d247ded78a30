"""
Module: builder.output.renderer

Purpose:
    PDF assembler. Concatenates rendered page images into a single
    multi-page PDF using ReportLab, one PDF page per image.

Key Functions:
    - assemble_pdf(): Main assembly function

Key Classes:
    - AssemblyError: Nothing to assemble

Dependencies:
    - reportlab: PDF generation
    - PIL: JPEG encoding of page images

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Sequence

from PIL import Image
from reportlab.pdfgen import canvas
from reportlab.lib.utils import ImageReader

from tile_booklet.common.path_utils import natural_sorted

logger = logging.getLogger(__name__)

# Constants
DEFAULT_DPI = 300
DEFAULT_QUALITY = 85


class AssemblyError(Exception):
    """No page images were available to assemble."""
    pass


def assemble_pdf(
    page_images: Sequence[Path],
    output_path: Path,
    *,
    quality: int = DEFAULT_QUALITY,
    dpi: int = DEFAULT_DPI,
) -> Path:
    """
    Assemble page images into one PDF.

    Pages are ordered by natural sort of their file names, so
    page_2.png comes before page_10.png regardless of input order.
    Each page is JPEG-encoded at the given quality and sized so that
    its pixels map to the page at the given DPI.

    Args:
        page_images: Rendered page images (page_<index>.png)
        output_path: Path to write PDF
        quality: JPEG quality for embedded pages (1-95)
        dpi: DPI for pixel-to-point conversion (default 300)

    Returns:
        output_path

    Raises:
        AssemblyError: If page_images is empty (no file is written)
        ValueError: If quality is out of range
        OSError: If an image cannot be read or the PDF cannot be written

    Example:
        >>> assemble_pdf(pages, Path("build/pdf/intermedium_4.pdf"), quality=85)
    """
    if not page_images:
        raise AssemblyError("No assembled pages found; nothing to assemble")
    if not 1 <= quality <= 95:
        raise ValueError(f"quality must be between 1 and 95: {quality}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    ordered = natural_sorted(page_images)

    c = canvas.Canvas(str(output_path))

    for page_path in ordered:
        with Image.open(page_path) as img:
            width_px, height_px = img.size
            reader = _pil_to_jpeg_reader(img, quality)

        width_pt = _px_to_pt(width_px, dpi)
        height_pt = _px_to_pt(height_px, dpi)
        c.setPageSize((width_pt, height_pt))
        c.drawImage(reader, 0, 0, width=width_pt, height=height_pt)
        c.showPage()

    c.save()

    logger.info(f"Combined {len(ordered)} pages into {output_path}")
    return output_path


def _pil_to_jpeg_reader(img: Image.Image, quality: int) -> ImageReader:
    """
    Encode a PIL image as JPEG and wrap it for ReportLab.

    ReportLab embeds JPEG data as-is (DCT), so the quality chosen here
    is the quality stored in the PDF.
    """
    buf = io.BytesIO()
    img.convert("RGB").save(buf, format="JPEG", quality=quality)
    buf.seek(0)
    return ImageReader(buf)


def _px_to_pt(px: int, dpi: int = DEFAULT_DPI) -> float:
    """
    Convert pixels to PDF points.

    PDF points are 1/72 inch.
    """
    return px * 72.0 / dpi
