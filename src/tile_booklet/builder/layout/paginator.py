"""
Module: builder.layout.paginator

Purpose:
    Page layout planner. Assigns fragments to pages and slots.

Key Functions:
    - paginate(): Main pagination function
    - slot_position(): Row-major grid position of a slot

Algorithm:
    Linear slicing of one global order:
    1. page_count = ceil(fragment_count / tiles_per_page)
    2. Page p takes fragments[p*tiles : (p+1)*tiles]
    3. The last page is padded with PLACEHOLDER up to tiles entries
    Fragment i therefore lands on page i // tiles, slot i % tiles.

Dependencies:
    - builder.layout.models: PagePlan, LayoutResult
    - builder.layout.config: TileLayout

Used By:
    - builder.controller: Main build controller
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

from tile_booklet.core.models import Fragment, PLACEHOLDER

from .config import TileLayout, get_tile_layout
from .models import PagePlan, LayoutResult, Slot

logger = logging.getLogger(__name__)


class EmptyLayoutError(ValueError):
    """No fragments were given to lay out."""
    pass


def paginate(
    fragments: Sequence[Fragment],
    tiles_per_page: int,
) -> LayoutResult:
    """
    Arrange fragments onto pages of tiles_per_page slots.

    Args:
        fragments: Fragments in global order (source, then row-major)
        tiles_per_page: 1, 4 or 9

    Returns:
        LayoutResult with one PagePlan per page

    Raises:
        EmptyLayoutError: If fragments is empty
        ValueError: If tiles_per_page is not supported

    Example:
        >>> result = paginate(fragments[:10], 4)
        >>> [p.fragment_count for p in result.pages]
        [4, 4, 2]
    """
    layout = get_tile_layout(tiles_per_page)

    if not fragments:
        raise EmptyLayoutError("No fragments to lay out")

    page_count = math.ceil(len(fragments) / tiles_per_page)
    pages: List[PagePlan] = []

    for page_index in range(page_count):
        start = page_index * tiles_per_page
        slots: List[Slot] = list(fragments[start:start + tiles_per_page])

        # Only the last page can come up short
        padding = tiles_per_page - len(slots)
        slots.extend([PLACEHOLDER] * padding)

        pages.append(PagePlan(index=page_index, slots=tuple(slots)))

    logger.info(f"Generating {page_count} pages, with {layout.label.replace('x', '×')} tiles.")
    logger.debug(f"Paginated {len(fragments)} fragments; last page padded with {padding} placeholders")

    return LayoutResult(layout=layout, pages=tuple(pages))


def slot_position(slot: int, layout: TileLayout) -> Tuple[int, int]:
    """
    Grid (row, col) of a slot index, filling rows left to right.

    Raises:
        IndexError: If slot is outside the page grid

    Example:
        >>> slot_position(2, get_tile_layout(4))
        (1, 0)
    """
    if not 0 <= slot < layout.tiles:
        raise IndexError(f"Slot {slot} out of range for {layout.label} layout")
    return divmod(slot, layout.cols)
