"""
Module: builder.output.compressor

Purpose:
    PDF size compression through Ghostscript's pdfwrite device.

Key Functions:
    - compress_pdf(): Write a compressed copy of a PDF
    - find_ghostscript(): Locate the Ghostscript executable

Quality tiers (-dPDFSETTINGS):
    screen   - lower quality, smaller size (72 dpi)
    ebook    - better quality, slightly larger (150 dpi)
    printer  - "Print Optimized" (300 dpi)
    prepress - "Prepress Optimized" (300 dpi)
    default  - general purpose, possibly larger output

Dependencies:
    - Ghostscript (external executable)
    - core.tools: run_command

Used By:
    - builder.controller: Optional final stage
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from tile_booklet.core.tools import ToolResult, run_command

logger = logging.getLogger(__name__)

COMPRESSION_TIERS = ("screen", "ebook", "printer", "prepress", "default")
DEFAULT_TIER = "screen"

_GS_NAMES = ("gs", "gswin64c", "gswin32c")


def find_ghostscript() -> Optional[str]:
    """Return the path of the first Ghostscript executable on PATH."""
    for name in _GS_NAMES:
        found = shutil.which(name)
        if found:
            return found
    return None


def build_gs_command(gs: str, source: Path, output: Path, tier: str) -> list[str]:
    """Ghostscript command line for one compression pass."""
    return [
        gs,
        "-sDEVICE=pdfwrite",
        "-dCompatibilityLevel=1.4",
        f"-dPDFSETTINGS=/{tier}",
        "-dNOPAUSE",
        "-dQUIET",
        "-dBATCH",
        f"-sOutputFile={output}",
        str(source),
    ]


def compress_pdf(
    source: Path,
    output: Path,
    tier: str = DEFAULT_TIER,
    *,
    timeout: Optional[float] = None,
) -> ToolResult:
    """
    Write a compressed copy of a PDF.

    Args:
        source: Uncompressed PDF
        output: Path for the compressed PDF
        tier: One of COMPRESSION_TIERS
        timeout: Optional Ghostscript timeout in seconds

    Returns:
        ToolResult; failed if Ghostscript is missing or exits non-zero,
        in which case no partial output is left behind

    Raises:
        ValueError: If tier is unknown
    """
    if tier not in COMPRESSION_TIERS:
        raise ValueError(f"Unknown compression tier {tier!r}; use one of {', '.join(COMPRESSION_TIERS)}")

    gs = find_ghostscript()
    if gs is None:
        return ToolResult(
            tool="compress",
            ok=False,
            output=output,
            message="Ghostscript not found on PATH (tried gs, gswin64c, gswin32c)",
        )

    output.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Generating compressed PDF")
    result = run_command("compress", build_gs_command(gs, source, output, tier), output, timeout=timeout)

    if not result.ok:
        output.unlink(missing_ok=True)
        return result

    before = source.stat().st_size
    after = output.stat().st_size
    logger.debug(f"Compressed {source.name}: {before} -> {after} bytes ({tier})")
    return result
