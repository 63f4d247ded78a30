"""
Module: bounds

Purpose:
    Provides the CropBox dataclass - a pixel rectangle used both for the
    fixed content crop of a scanned page and for the cells of the grid
    that cuts a cropped page into fragments.

Key Functions:
    - CropBox.parse(geometry): Build from "WxH+X+Y" geometry
    - CropBox.to_geometry(): Format back to geometry string
    - grid_boxes(): Cut a width x height area into equal cells

Dependencies:
    - dataclasses (std)
    - re (std)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

_GEOMETRY_RE = re.compile(r"^\s*(\d+)x(\d+)\+(\d+)\+(\d+)\s*$")


@dataclass(frozen=True, slots=True)
class CropBox:
    """
    Content region of a scan, in pixels.

    The region is [left, left + width) x [top, top + height).

    Attributes:
        left: X-coordinate of left edge (inclusive)
        top: Y-coordinate of top edge (inclusive)
        width: Region width in pixels
        height: Region height in pixels

    Invariants:
        - left >= 0, top >= 0
        - width > 0, height > 0

    Example:
        >>> box = CropBox.parse("2232x3117+124+129")
        >>> box.box
        (124, 129, 2356, 3246)
    """

    left: int
    top: int
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate bounds on construction."""
        if self.left < 0:
            raise ValueError(f"left must be >= 0: {self.left}")
        if self.top < 0:
            raise ValueError(f"top must be >= 0: {self.top}")
        if self.width <= 0:
            raise ValueError(f"width must be positive: {self.width}")
        if self.height <= 0:
            raise ValueError(f"height must be positive: {self.height}")

    @classmethod
    def parse(cls, geometry: str) -> "CropBox":
        """
        Parse an ImageMagick geometry string ("WxH+X+Y").

        Raises:
            ValueError: If the string is not a full geometry
        """
        match = _GEOMETRY_RE.match(geometry)
        if not match:
            raise ValueError(f"Invalid crop geometry {geometry!r}, expected WxH+X+Y")
        width, height, left, top = (int(g) for g in match.groups())
        return cls(left=left, top=top, width=width, height=height)

    @property
    def right(self) -> int:
        """X-coordinate of right edge (exclusive)."""
        return self.left + self.width

    @property
    def bottom(self) -> int:
        """Y-coordinate of bottom edge (exclusive)."""
        return self.top + self.height

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """PIL crop box (left, upper, right, lower)."""
        return (self.left, self.top, self.right, self.bottom)

    def fits_within(self, width: int, height: int) -> bool:
        """Check whether the region lies entirely inside a width x height image."""
        return self.right <= width and self.bottom <= height

    def to_geometry(self) -> str:
        return f"{self.width}x{self.height}+{self.left}+{self.top}"


def grid_boxes(width: int, height: int, rows: int, cols: int) -> List[CropBox]:
    """
    Cut a width x height area into rows x cols equal cells.

    Cell size uses integer division, so any remainder pixels along the
    right and bottom edges are not covered by any cell.

    Args:
        width: Area width in pixels
        height: Area height in pixels
        rows: Number of grid rows
        cols: Number of grid columns

    Returns:
        Cells in row-major order (row 0 col 0, row 0 col 1, ...)

    Raises:
        ValueError: If the area is too small to give every cell a pixel

    Example:
        >>> cells = grid_boxes(2232, 3117, 3, 3)
        >>> cells[4].to_geometry()
        '744x1039+744+1039'
    """
    if rows <= 0 or cols <= 0:
        raise ValueError(f"Grid must have positive rows and cols: {rows}x{cols}")

    cell_width = width // cols
    cell_height = height // rows

    return [
        CropBox(left=col * cell_width, top=row * cell_height, width=cell_width, height=cell_height)
        for row in range(rows)
        for col in range(cols)
    ]
