"""
Module: builder.layout

Purpose:
    Page layout for booklet building.
    Converts the global fragment list into slotted page plans.

Key Functions:
    - paginate(): Arrange fragments onto pages
    - slot_position(): Grid position of a slot

Key Classes:
    - LayoutConfig: Configuration for page layout
    - TileLayout: Grid shape for 1, 4 or 9 tiles
    - PagePlan: Single page layout plan
    - LayoutResult: Complete layout

Used By:
    - builder.controller: Main build controller
"""

from .config import (
    LayoutConfig,
    TileLayout,
    TILE_LAYOUTS,
    SUPPORTED_TILES,
    get_tile_layout,
)
from .models import PagePlan, LayoutResult, Slot
from .paginator import paginate, slot_position, EmptyLayoutError

__all__ = [
    # Config
    "LayoutConfig",
    "TileLayout",
    "TILE_LAYOUTS",
    "SUPPORTED_TILES",
    "get_tile_layout",
    # Models
    "PagePlan",
    "LayoutResult",
    "Slot",
    # Functions
    "paginate",
    "slot_position",
    "EmptyLayoutError",
]
