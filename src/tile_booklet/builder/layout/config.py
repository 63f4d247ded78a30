"""
Module: builder.layout.config

Purpose:
    Configuration for page layout. Maps the tiles-per-page setting to a
    square grid and defines the pixel size of each grid cell.

Key Classes:
    - TileLayout: Grid shape for a tiles-per-page value
    - LayoutConfig: Immutable layout configuration

Key Functions:
    - get_tile_layout(): Look up the TileLayout for 1, 4 or 9 tiles

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.paginator: Slot positions
    - builder.output.montage: Page composition
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

# One fragment of a 2232x3117 crop cut 3x3
DEFAULT_CELL_WIDTH_PX = 744
DEFAULT_CELL_HEIGHT_PX = 1039
DEFAULT_BACKGROUND = "black"


@dataclass(frozen=True)
class TileLayout:
    """
    Grid shape used to place tiles on a page.

    Attributes:
        tiles: Tiles per page (rows * cols)
        rows: Grid rows
        cols: Grid columns
    """
    tiles: int
    rows: int
    cols: int

    @property
    def label(self) -> str:
        """ImageMagick-style tile label, e.g. "2x2"."""
        return f"{self.cols}x{self.rows}"


TILE_LAYOUTS: Dict[int, TileLayout] = {
    1: TileLayout(tiles=1, rows=1, cols=1),
    4: TileLayout(tiles=4, rows=2, cols=2),
    9: TileLayout(tiles=9, rows=3, cols=3),
}

SUPPORTED_TILES: Tuple[int, ...] = tuple(sorted(TILE_LAYOUTS))


def get_tile_layout(tiles: int) -> TileLayout:
    """
    Get the grid layout for a tiles-per-page value.

    Raises:
        ValueError: If tiles is not 1, 4 or 9

    Example:
        >>> get_tile_layout(4).label
        '2x2'
    """
    try:
        return TILE_LAYOUTS[tiles]
    except KeyError:
        raise ValueError(
            f"Invalid tiles option {tiles!r}. Use one of "
            f"{', '.join(str(t) for t in SUPPORTED_TILES)}."
        ) from None


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    Attributes:
        layout: Grid shape for each page
        cell_width: Width of one tile cell in pixels
        cell_height: Height of one tile cell in pixels
        background: Fill colour for placeholders and letterboxing

    Example:
        >>> config = LayoutConfig(get_tile_layout(4))
        >>> config.page_size
        (1488, 2078)
    """
    layout: TileLayout
    cell_width: int = DEFAULT_CELL_WIDTH_PX
    cell_height: int = DEFAULT_CELL_HEIGHT_PX
    background: str = DEFAULT_BACKGROUND

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.cell_width <= 0:
            raise ValueError(f"cell_width must be positive: {self.cell_width}")
        if self.cell_height <= 0:
            raise ValueError(f"cell_height must be positive: {self.cell_height}")

    @property
    def tiles_per_page(self) -> int:
        return self.layout.tiles

    @property
    def page_width(self) -> int:
        return self.cell_width * self.layout.cols

    @property
    def page_height(self) -> int:
        return self.cell_height * self.layout.rows

    @property
    def page_size(self) -> Tuple[int, int]:
        return (self.page_width, self.page_height)
