"""
Module: builder

Purpose:
    Booklet building pipeline: lays extracted fragments out onto pages
    of 1, 4 or 9 tiles, renders each page, and assembles the PDF.

Key Functions:
    - build_booklet(): Main entry point for booklet generation
    - paginate(): Fragment to page/slot assignment

Key Classes:
    - BuilderConfig: Configuration for building
    - BuildResult: Paths and counts of a finished build
    - BuildError: Build failure (NoFragmentsError, NoPagesError)

Dependencies:
    - PIL: Page composition
    - reportlab: PDF generation

Used By:
    - tile_booklet.cli: Command-line interface
"""

from .config import BuilderConfig
from .layout import paginate, LayoutResult, PagePlan
from .controller import (
    build_booklet,
    clean_build,
    BuildResult,
    BuildError,
    NoFragmentsError,
    NoPagesError,
)

__all__ = [
    # Config
    "BuilderConfig",
    # Layout
    "paginate",
    "LayoutResult",
    "PagePlan",
    # Controller
    "build_booklet",
    "clean_build",
    "BuildResult",
    "BuildError",
    "NoFragmentsError",
    "NoPagesError",
]
