"""
Module: builder.controller

Purpose:
    Orchestrate the complete booklet building pipeline.
    Discover → Extract → Paginate → Render → Assemble → Compress

Key Functions:
    - build_booklet(): Main entry point for building a booklet

Key Classes:
    - BuildResult: Complete build result
    - BuildError: Exception for build failures
    - NoFragmentsError: Nothing survived extraction
    - NoPagesError: Nothing was rendered to assemble

Dependencies:
    - extractor: Fragment extraction with manifest cache
    - builder.layout: Pagination
    - builder.output: Page rendering, PDF assembly, compression

Used By:
    - tile_booklet.cli: Command-line entry point
"""

from __future__ import annotations

import json
import logging
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from tile_booklet import __version__
from tile_booklet.common.path_utils import list_source_images
from tile_booklet.core.models import SourceImage
from tile_booklet.core.tools import ToolError, invoke
from tile_booklet.extractor import (
    ExtractionError,
    ExtractionManifest,
    ExtractionResult,
    extract_fragments,
)

from .config import BuilderConfig
from .layout import EmptyLayoutError, LayoutConfig, LayoutResult, get_tile_layout, paginate
from .output import AssemblyError, assemble_pdf, compress_pdf, render_pages

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Error during build pipeline."""
    pass


class NoFragmentsError(BuildError):
    """No fragments survived extraction, so there is nothing to lay out."""
    pass


class NoPagesError(BuildError):
    """No page images were produced, so there is nothing to assemble."""
    pass


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        output_pdf: Path to the final PDF
        intermediate_pdf: Uncompressed PDF (None when compression is off)
        tiles_per_page: Tiles per page used for the layout
        page_count: Number of pages generated
        fragment_count: Fragments placed across all pages
        placeholder_count: Padding slots on the last page
        extraction_skipped: True when every source came from the manifest
        metadata: Build metadata dictionary

    Example:
        >>> result = build_booklet(config)
        >>> print(f"Generated {result.page_count} pages at {result.output_pdf}")
    """
    output_pdf: Path
    intermediate_pdf: Optional[Path]
    tiles_per_page: int
    page_count: int
    fragment_count: int
    placeholder_count: int
    extraction_skipped: bool
    metadata: dict


def build_booklet(config: BuilderConfig) -> BuildResult:
    """
    Build a booklet from start to finish.

    Pipeline:
    1. Create staging directories and remove earlier outputs
    2. Discover source images (natural order)
    3. Extract fragments (reusing manifest entries)
    4. Paginate fragments onto pages
    5. Render page images
    6. Assemble the PDF
    7. (Optional) Compress the PDF
    8. Write build metadata

    Staging directories are left in place when a step fails, so a
    later run can reuse whatever extraction already completed.

    Args:
        config: Build configuration

    Returns:
        BuildResult with paths and counts

    Raises:
        BuildError: If any step fails (NoFragmentsError and NoPagesError
            for the empty-input cases)

    Example:
        >>> config = BuilderConfig(input_dir=Path("input"), tiles_per_page=4)
        >>> result = build_booklet(config)
        >>> print(f"Generated {result.page_count} pages")
    """
    start_time = time.perf_counter()
    layout = get_tile_layout(config.tiles_per_page)
    logger.info(f"Starting build: {layout.label} tiles from {config.input_dir}")

    # 1. Staging tree
    for directory in (
        config.cropped_dir,
        config.fragments_dir,
        config.pages_dir,
        config.pdf_dir,
        config.output_dir,
    ):
        directory.mkdir(parents=True, exist_ok=True)

    # Outputs of an earlier run must not outlive a failed one
    config.output_pdf.unlink(missing_ok=True)
    config.intermediate_pdf.unlink(missing_ok=True)

    # 2. Sources
    try:
        sources = [SourceImage(p) for p in list_source_images(config.input_dir)]
    except FileNotFoundError as e:
        raise BuildError(str(e)) from e
    logger.info(f"Found {len(sources)} source images")

    # 3. Extract
    manifest = ExtractionManifest.load(config.manifest_path)
    try:
        extraction = extract_fragments(
            sources,
            config.cropped_dir,
            config.fragments_dir,
            manifest,
            config.extraction,
            force=config.force_extract,
        )
    except ExtractionError as e:
        raise BuildError(f"{e} (staging left in {config.build_dir})") from e

    # 4. Paginate
    try:
        layout_result = paginate(extraction.fragments, config.tiles_per_page)
    except EmptyLayoutError as e:
        raise NoFragmentsError(
            f"No fragments found in {config.fragments_dir} "
            f"({len(sources)} source images). Staging left in {config.build_dir}."
        ) from e

    # 5. Render
    layout_config = LayoutConfig(
        layout=layout,
        cell_width=config.cell_width,
        cell_height=config.cell_height,
    )
    try:
        page_images = render_pages(layout_result, layout_config, config.pages_dir)
    except ToolError as e:
        raise BuildError(f"Page rendering failed: {e}") from e

    # 6. Assemble
    logger.info("Combining all the pages")
    assembled_path = config.intermediate_pdf if config.compress else config.output_pdf
    try:
        assembly = invoke(
            "pdf",
            assemble_pdf,
            page_images,
            assembled_path,
            quality=config.quality,
            dpi=config.dpi,
            output=assembled_path,
        )
    except AssemblyError as e:
        raise NoPagesError(f"{e} in {config.pages_dir}") from e
    if not assembly.ok:
        raise BuildError(f"PDF assembly failed: {assembly.message}")

    # 7. Compress
    intermediate_pdf: Optional[Path] = None
    if config.compress:
        intermediate_pdf = config.intermediate_pdf
        compression = compress_pdf(intermediate_pdf, config.output_pdf, config.compress_tier)
        if not compression.ok:
            raise BuildError(
                f"PDF compression failed: {compression.message}. "
                f"Uncompressed PDF kept at {intermediate_pdf}."
            )

    elapsed = time.perf_counter() - start_time
    logger.info(f"Processing complete! File generated: {config.output_pdf} ({elapsed:.2f}s)")

    # 8. Metadata
    metadata = _build_metadata(config, extraction, layout_result, intermediate_pdf, elapsed)
    _write_metadata(config.metadata_path, metadata)

    return BuildResult(
        output_pdf=config.output_pdf,
        intermediate_pdf=intermediate_pdf,
        tiles_per_page=config.tiles_per_page,
        page_count=layout_result.page_count,
        fragment_count=layout_result.fragment_count,
        placeholder_count=layout_result.placeholder_count,
        extraction_skipped=extraction.skipped_all,
        metadata=metadata,
    )


def clean_build(config: BuilderConfig) -> bool:
    """
    Remove the whole staging tree (cropped images, fragments, pages,
    intermediate PDFs and the manifest).

    Returns:
        True if a build directory was removed
    """
    if not config.build_dir.exists():
        return False
    shutil.rmtree(config.build_dir)
    logger.info(f"Removed build directory {config.build_dir}")
    return True


def _build_metadata(
    config: BuilderConfig,
    extraction: ExtractionResult,
    layout: LayoutResult,
    intermediate_pdf: Optional[Path],
    elapsed: float,
) -> Dict[str, Any]:
    """Collect build information for build_metadata.json."""
    return {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "version": __version__,
        "tiles_per_page": config.tiles_per_page,
        "layout": layout.layout.label,
        "page_count": layout.page_count,
        "fragment_count": layout.fragment_count,
        "placeholder_count": layout.placeholder_count,
        "sources_extracted": len(extraction.extracted_sources),
        "sources_cached": len(extraction.skipped_sources),
        "sources_pruned": len(extraction.pruned_sources),
        "fragments_discarded": extraction.discarded_count,
        "crop": config.extraction.crop_box.to_geometry(),
        "min_fragment_bytes": config.extraction.min_fragment_bytes,
        "quality": config.quality,
        "compressed": config.compress,
        "compress_tier": config.compress_tier if config.compress else None,
        "intermediate_pdf": intermediate_pdf.as_posix() if intermediate_pdf else None,
        "output_pdf": config.output_pdf.as_posix(),
        "elapsed_seconds": round(elapsed, 3),
    }


def _write_metadata(path: Path, metadata: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
    logger.debug(f"Wrote build metadata to {path}")
