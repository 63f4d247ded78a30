"""
Module: extractor.cropper

Purpose:
    Image cropper capability. Crops the content region out of a scanned
    page and cuts the result into grid cells, writing each to disk.

Key Functions:
    - crop_image(): Crop one region and save it
    - split_into_grid(): Crop every grid cell of an image and save as PNG

Dependencies:
    - PIL: Image manipulation
    - tile_booklet.core.models: CropBox, grid_boxes

Used By:
    - extractor.pipeline: via core.tools.invoke()
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from PIL import Image

from tile_booklet.core.models import CropBox, grid_boxes


def crop_image(source: Path, box: CropBox, output: Path) -> Tuple[int, int]:
    """
    Crop a region from an image file and save it.

    The output format follows the output file extension.

    Args:
        source: Image to crop
        box: Region to keep
        output: Where to write the cropped image

    Returns:
        (width, height) of the saved image

    Raises:
        ValueError: If the region falls outside the image
        OSError: If the image cannot be read or written

    Example:
        >>> crop_image(Path("p1.jpg"), CropBox.parse("2232x3117+124+129"), Path("cropped_p1.jpg"))
        (2232, 3117)
    """
    with Image.open(source) as img:
        if not box.fits_within(img.width, img.height):
            raise ValueError(
                f"Crop {box.to_geometry()} exceeds image size "
                f"{img.width}x{img.height} of {source.name}"
            )
        cropped = img.crop(box.box)

    output.parent.mkdir(parents=True, exist_ok=True)
    if output.suffix.lower() in (".jpg", ".jpeg") and cropped.mode not in ("RGB", "L"):
        cropped = cropped.convert("RGB")
    cropped.save(output)
    return cropped.size


def split_into_grid(
    cropped: Path,
    rows: int,
    cols: int,
    output_dir: Path,
    prefix: str,
) -> List[Tuple[int, int, Path]]:
    """
    Cut an image into rows x cols cells and save each as PNG.

    Cells are named "{prefix}_{row}_{col}.png".

    Args:
        cropped: Image to split
        rows: Grid rows
        cols: Grid columns
        output_dir: Directory for cell images
        prefix: File name prefix shared by all cells

    Returns:
        (row, col, path) for every cell in row-major order
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    cells: List[Tuple[int, int, Path]] = []

    with Image.open(cropped) as img:
        img.load()
        boxes = grid_boxes(img.width, img.height, rows, cols)
        for index, box in enumerate(boxes):
            row, col = divmod(index, cols)
            cell_path = output_dir / f"{prefix}_{row}_{col}.png"
            img.crop(box.box).save(cell_path, format="PNG")
            cells.append((row, col, cell_path))

    return cells
