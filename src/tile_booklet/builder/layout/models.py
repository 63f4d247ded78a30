"""
Module: builder.layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing slotted pages and the full plan.

Key Classes:
    - PagePlan: Fragments and placeholders for one output page
    - LayoutResult: Final layout output

Dependencies:
    - dataclasses (std)
    - tile_booklet.core.models: Fragment, Placeholder

Used By:
    - builder.layout.paginator: Creates PagePlans
    - builder.output.montage: Renders PagePlans
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union

from tile_booklet.core.models import Fragment, Placeholder

from .config import TileLayout

Slot = Union[Fragment, Placeholder]


@dataclass(frozen=True)
class PagePlan:
    """
    Layout plan for a single page.

    Slots are filled left-to-right, top-to-bottom in the page grid.

    Attributes:
        index: Page number (0-indexed)
        slots: Exactly tiles-per-page entries, fragments first
        
    Example:
        >>> page = PagePlan(index=2, slots=(f8, f9, PLACEHOLDER, PLACEHOLDER))
        >>> page.fragment_count, page.placeholder_count
        (2, 2)
    """

    index: int
    slots: Tuple[Slot, ...]

    @property
    def fragments(self) -> Tuple[Fragment, ...]:
        """Real fragments on this page, in slot order."""
        return tuple(s for s in self.slots if isinstance(s, Fragment))

    @property
    def fragment_count(self) -> int:
        return len(self.fragments)

    @property
    def placeholder_count(self) -> int:
        return len(self.slots) - self.fragment_count

    @property
    def file_name(self) -> str:
        """Rendered image name; numeric index keeps pages order-recoverable."""
        return f"page_{self.index}.png"


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output.

    Attributes:
        layout: Grid shape shared by every page
        pages: Tuple of PagePlans in page order

    Example:
        >>> result = paginate(fragments, 4)
        >>> result.page_count
        3
    """

    layout: TileLayout
    pages: Tuple[PagePlan, ...] = field(default_factory=tuple)

    @property
    def page_count(self) -> int:
        """Number of pages in layout."""
        return len(self.pages)

    @property
    def fragment_count(self) -> int:
        """Total real fragments across all pages."""
        return sum(p.fragment_count for p in self.pages)

    @property
    def placeholder_count(self) -> int:
        """Total padding slots (all on the last page)."""
        return sum(p.placeholder_count for p in self.pages)
