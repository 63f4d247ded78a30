"""
Module: builder.output.montage

Purpose:
    Page renderer. Composes each PagePlan into one page image, laying
    tiles out left-to-right, top-to-bottom on a solid background.

Key Functions:
    - compose_page(): Build the page image in memory
    - render_page(): Compose and save one page
    - render_pages(): Render every page of a layout, in order

Dependencies:
    - PIL: Image composition
    - builder.layout: PagePlan, LayoutResult, LayoutConfig
    - core.tools: Uniform tool invocation

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from PIL import Image, ImageOps

from tile_booklet.core.models import Fragment
from tile_booklet.core.tools import invoke
from tile_booklet.builder.layout import LayoutConfig, LayoutResult, PagePlan, slot_position

logger = logging.getLogger(__name__)


def compose_page(page: PagePlan, config: LayoutConfig) -> Image.Image:
    """
    Compose a page image from its slots.

    Each fragment is scaled to fit its cell with aspect ratio preserved
    and centered; placeholder cells stay background-coloured.

    Args:
        page: Page plan with exactly tiles-per-page slots
        config: Layout configuration (grid, cell size, background)

    Returns:
        RGB image of size config.page_size

    Raises:
        ValueError: If the page has the wrong number of slots
        OSError: If a fragment cannot be read
    """
    if len(page.slots) != config.tiles_per_page:
        raise ValueError(
            f"Page {page.index} has {len(page.slots)} slots, "
            f"layout {config.layout.label} needs {config.tiles_per_page}"
        )

    canvas = Image.new("RGB", config.page_size, config.background)
    cell_size = (config.cell_width, config.cell_height)

    for slot, item in enumerate(page.slots):
        if not isinstance(item, Fragment):
            continue

        row, col = slot_position(slot, config.layout)
        with Image.open(item.path) as tile:
            tile = tile.convert("RGB")
            if tile.size != cell_size:
                tile = ImageOps.contain(tile, cell_size, Image.Resampling.LANCZOS)

        x = col * config.cell_width + (config.cell_width - tile.width) // 2
        y = row * config.cell_height + (config.cell_height - tile.height) // 2
        canvas.paste(tile, (x, y))

    return canvas


def render_page(page: PagePlan, config: LayoutConfig, output_dir: Path) -> Path:
    """
    Compose one page and save it as page_<index>.png.

    Returns:
        Path of the saved page image
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / page.file_name
    compose_page(page, config).save(output_path, format="PNG")
    return output_path


def clear_rendered_pages(output_dir: Path) -> int:
    """
    Remove page images left by an earlier run.

    A previous run with a different tiles setting can leave more pages
    behind than the current layout will overwrite.

    Returns:
        Number of files removed
    """
    if not output_dir.exists():
        return 0
    removed = 0
    for stale in output_dir.glob("page_*.png"):
        stale.unlink()
        removed += 1
    if removed:
        logger.debug(f"Removed {removed} stale page images from {output_dir}")
    return removed


def render_pages(layout: LayoutResult, config: LayoutConfig, output_dir: Path) -> List[Path]:
    """
    Render every page of a layout.

    Args:
        layout: Paginated layout
        config: Layout configuration
        output_dir: Directory for page images (stale pages are cleared)

    Returns:
        Page image paths in page-index order

    Raises:
        ToolError: If any page fails to render
    """
    clear_rendered_pages(output_dir)
    paths: List[Path] = []

    for page in layout.pages:
        logger.info(f"... page {page.index + 1} / {layout.page_count}")
        expected = output_dir / page.file_name
        result = invoke("montage", render_page, page, config, output_dir, output=expected)
        result.raise_for_failure()
        paths.append(expected)

    logger.debug(f"Rendered {len(paths)} pages to {output_dir}")
    return paths
