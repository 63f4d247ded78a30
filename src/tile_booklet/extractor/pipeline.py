"""
Module: extractor.pipeline

Purpose:
    Fragment extractor. Turns each scanned page into up to rows x cols
    fragment images via a fixed content crop, a grid split, and a
    size-based filter that drops near-blank cells.

Key Functions:
    - extract_fragments(): Main entry point for extraction

Key Classes:
    - ExtractionResult: Container for extraction output
    - ExtractionError: Raised when a source cannot be processed

Dependencies:
    - extractor.cropper: Crop and grid split (Pillow)
    - extractor.manifest: Per-source completion records
    - core.tools: Uniform tool invocation

Used By:
    - builder.controller: First stage of a booklet build
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from tile_booklet.core.models import Fragment, SourceImage
from tile_booklet.core.tools import invoke

from .config import ExtractionConfig
from .cropper import crop_image, split_into_grid
from .manifest import ExtractionManifest

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """Error while extracting fragments from a source image."""
    pass


@dataclass
class ExtractionResult:
    """
    Result of an extraction pass.

    Attributes:
        fragments: Surviving fragments in source order, then row-major
        extracted_sources: Names of sources processed this run
        skipped_sources: Names of sources reused from the manifest
        pruned_sources: Names of vanished sources whose outputs were removed
        discarded_count: Fragments deleted this run for being too small
    """
    fragments: List[Fragment]
    extracted_sources: List[str] = field(default_factory=list)
    skipped_sources: List[str] = field(default_factory=list)
    pruned_sources: List[str] = field(default_factory=list)
    discarded_count: int = 0

    @property
    def fragment_count(self) -> int:
        return len(self.fragments)

    @property
    def skipped_all(self) -> bool:
        """True when every source was served from the manifest."""
        return not self.extracted_sources


def cropped_path_for(source: SourceImage, cropped_dir: Path) -> Path:
    """Staging path of a source's cropped image ("cropped_<name>")."""
    return cropped_dir / f"cropped_{source.name}"


def fragment_prefix_for(source: SourceImage) -> str:
    """File name prefix shared by a source's fragments ("rect_<name>")."""
    return f"rect_{source.name}"


def extract_fragments(
    sources: Sequence[SourceImage],
    cropped_dir: Path,
    fragments_dir: Path,
    manifest: ExtractionManifest,
    config: ExtractionConfig,
    *,
    force: bool = False,
) -> ExtractionResult:
    """
    Extract fragments for every source image, in order.

    Pipeline per source:
    1. Reuse the manifest entry if it is still current (unless force)
    2. Remove stale fragments left by an earlier attempt
    3. Crop the content region
    4. Split into the grid and save each cell as PNG
    5. Delete cells whose encoded size is below min_fragment_bytes
    6. Record the completed source in the manifest

    Afterwards, manifest entries (and staged files) of sources that are
    no longer in the input are removed.

    A source may legitimately yield zero fragments; whether the run has
    anything to lay out is checked globally by the caller.

    Args:
        sources: Source images in natural order
        cropped_dir: Staging directory for cropped images
        fragments_dir: Staging directory for fragments
        manifest: Extraction manifest to consult and update
        config: Crop, grid and threshold settings
        force: Ignore the manifest and extract every source again

    Returns:
        ExtractionResult with the global fragment list

    Raises:
        ExtractionError: On duplicate source names or a failed crop/split
    """
    _check_unique_names(sources)
    cropped_dir.mkdir(parents=True, exist_ok=True)
    fragments_dir.mkdir(parents=True, exist_ok=True)

    result = ExtractionResult(fragments=[])

    for source in sources:
        if not force and manifest.is_current(source, config):
            logger.debug(f"Skipping {source.name}; already extracted")
            result.fragments.extend(manifest.fragments_for(source))
            result.skipped_sources.append(source.name)
            continue

        logger.info(f"Processing {source.path}")
        kept, discarded = _extract_source(source, cropped_dir, fragments_dir, manifest, config)
        result.fragments.extend(kept)
        result.extracted_sources.append(source.name)
        result.discarded_count += discarded

    result.pruned_sources = manifest.prune(s.name for s in sources)

    if result.skipped_all and sources:
        logger.info("Skipping cropping and splitting; images already present.")

    logger.info(
        f"Extraction complete: {result.fragment_count} fragments from "
        f"{len(sources)} sources ({len(result.skipped_sources)} cached, "
        f"{result.discarded_count} discarded)"
    )
    return result


def _extract_source(
    source: SourceImage,
    cropped_dir: Path,
    fragments_dir: Path,
    manifest: ExtractionManifest,
    config: ExtractionConfig,
) -> tuple[List[Fragment], int]:
    """Crop, split and filter a single source. Returns (kept, discarded_count)."""
    manifest.forget(source)
    prefix = fragment_prefix_for(source)
    for row in range(config.grid_rows):
        for col in range(config.grid_cols):
            (fragments_dir / f"{prefix}_{row}_{col}.png").unlink(missing_ok=True)

    cropped = cropped_path_for(source, cropped_dir)
    crop = invoke("crop", crop_image, source.path, config.crop_box, cropped, output=cropped)
    if not crop.ok:
        raise ExtractionError(f"Failed to crop {source.name}: {crop.message}")

    split = invoke(
        "split",
        split_into_grid,
        cropped,
        config.grid_rows,
        config.grid_cols,
        fragments_dir,
        prefix,
    )
    if not split.ok:
        raise ExtractionError(f"Failed to split {cropped.name}: {split.message}")

    kept: List[Fragment] = []
    discarded = 0
    for row, col, cell_path in split.value:
        size = cell_path.stat().st_size
        if size < config.min_fragment_bytes:
            cell_path.unlink()
            discarded += 1
            logger.debug(f"Discarded {cell_path.name} ({size} < {config.min_fragment_bytes} bytes)")
            continue
        kept.append(Fragment(
            path=cell_path,
            source_name=source.name,
            row=row,
            col=col,
            size_bytes=size,
        ))

    manifest.record(source, cropped, kept, config, discarded=discarded)
    return kept, discarded


def _check_unique_names(sources: Sequence[SourceImage]) -> None:
    """Staging files are keyed by file name, so names must not repeat."""
    seen: dict[str, Path] = {}
    for source in sources:
        if source.name in seen:
            raise ExtractionError(
                f"Duplicate source file name {source.name!r}: "
                f"{seen[source.name]} and {source.path}"
            )
        seen[source.name] = source.path
