"""
Tests for extractor.pipeline

Test Coverage:
- Crop + 3x3 split + size filter per source
- Global fragment order (source order, then row-major)
- Manifest reuse, forced re-extraction, stale entries
- Size threshold boundary (equal size survives)
- Failure reporting for bad sources
"""
from dataclasses import replace

import pytest

from tile_booklet.common.path_utils import list_source_images
from tile_booklet.core.models import SourceImage
from tile_booklet.extractor import (
    ExtractionError,
    ExtractionManifest,
    extract_fragments,
)


@pytest.fixture
def staging(tmp_path):
    return {
        "cropped_dir": tmp_path / "build" / "cropped_images",
        "fragments_dir": tmp_path / "build" / "rectangles",
        "manifest": ExtractionManifest.load(tmp_path / "build" / "manifest.json"),
    }


def _sources(folder):
    return [SourceImage(p) for p in list_source_images(folder)]


def test_extracts_content_cells_only(input_dir, staging, extraction_config):
    """Blank cells fall below the threshold and are deleted."""
    result = extract_fragments(_sources(input_dir), config=extraction_config, **staging)

    assert result.fragment_count == 11  # 9 + 2 + 0
    assert result.discarded_count == 16  # 0 + 7 + 9
    assert all(f.size_bytes >= extraction_config.min_fragment_bytes for f in result.fragments)
    on_disk = sorted(p.name for p in staging["fragments_dir"].iterdir())
    assert on_disk == sorted(f.path.name for f in result.fragments)


def test_global_order_is_source_then_row_major(input_dir, staging, extraction_config):
    result = extract_fragments(_sources(input_dir), config=extraction_config, **staging)

    order = [(f.source_name, f.row, f.col) for f in result.fragments]
    expected = [("page_1.png", r, c) for r in range(3) for c in range(3)]
    expected += [("page_2.png", 0, 0), ("page_2.png", 2, 2)]
    assert order == expected


def test_writes_cropped_images(input_dir, staging, extraction_config):
    extract_fragments(_sources(input_dir), config=extraction_config, **staging)

    names = sorted(p.name for p in staging["cropped_dir"].iterdir())
    assert names == ["cropped_page_1.png", "cropped_page_10.png", "cropped_page_2.png"]


def test_source_without_fragments_is_not_an_error(tmp_path, staging, extraction_config, scan_writer):
    scan_writer(tmp_path / "blank" / "empty.png", [])

    result = extract_fragments(_sources(tmp_path / "blank"), config=extraction_config, **staging)

    assert result.fragments == []
    assert result.extracted_sources == ["empty.png"]


def test_second_run_reuses_manifest(input_dir, staging, extraction_config):
    first = extract_fragments(_sources(input_dir), config=extraction_config, **staging)

    second = extract_fragments(_sources(input_dir), config=extraction_config, **staging)

    assert second.skipped_all
    assert second.skipped_sources == ["page_1.png", "page_2.png", "page_10.png"]
    assert second.fragments == first.fragments


def test_force_extracts_again(input_dir, staging, extraction_config):
    extract_fragments(_sources(input_dir), config=extraction_config, **staging)

    again = extract_fragments(_sources(input_dir), config=extraction_config, force=True, **staging)

    assert again.extracted_sources == ["page_1.png", "page_2.png", "page_10.png"]
    assert again.fragment_count == 11


def test_deleted_fragment_triggers_reextraction_of_that_source_only(input_dir, staging, extraction_config):
    first = extract_fragments(_sources(input_dir), config=extraction_config, **staging)
    first.fragments[-1].path.unlink()  # belongs to page_2.png

    second = extract_fragments(_sources(input_dir), config=extraction_config, **staging)

    assert second.extracted_sources == ["page_2.png"]
    assert second.fragment_count == 11
    assert second.fragments[-1].path.exists()


def test_changed_source_replaces_stale_fragments(input_dir, staging, extraction_config, scan_writer):
    extract_fragments(_sources(input_dir), config=extraction_config, **staging)
    scan_writer(input_dir / "page_2.png", [(1, 1)])

    result = extract_fragments(_sources(input_dir), config=extraction_config, **staging)

    page_2 = [f.grid_position for f in result.fragments if f.source_name == "page_2.png"]
    assert page_2 == [(1, 1)]
    leftovers = sorted(p.name for p in staging["fragments_dir"].glob("rect_page_2.png_*"))
    assert leftovers == ["rect_page_2.png_1_1.png"]


def test_threshold_boundary_equal_size_survives(tmp_path, staging, extraction_config, scan_writer):
    folder = tmp_path / "one"
    scan_writer(folder / "p.png", [(0, 0)])
    sources = _sources(folder)
    probe = extract_fragments(sources, config=replace(extraction_config, min_fragment_bytes=0), **staging)
    size = next(f.size_bytes for f in probe.fragments if f.grid_position == (0, 0))

    at_threshold = extract_fragments(
        sources, config=replace(extraction_config, min_fragment_bytes=size), force=True, **staging
    )
    above_threshold = extract_fragments(
        sources, config=replace(extraction_config, min_fragment_bytes=size + 1), force=True, **staging
    )

    assert (0, 0) in [f.grid_position for f in at_threshold.fragments]
    assert (0, 0) not in [f.grid_position for f in above_threshold.fragments]


def test_too_small_source_raises(tmp_path, staging, extraction_config):
    from PIL import Image

    folder = tmp_path / "small"
    folder.mkdir()
    Image.new("RGB", (20, 20), "white").save(folder / "tiny.png")

    with pytest.raises(ExtractionError, match="Failed to crop tiny.png"):
        extract_fragments(_sources(folder), config=extraction_config, **staging)


def test_unreadable_source_raises(tmp_path, staging, extraction_config):
    folder = tmp_path / "broken"
    folder.mkdir()
    (folder / "broken.jpg").write_bytes(b"not an image")

    with pytest.raises(ExtractionError):
        extract_fragments(_sources(folder), config=extraction_config, **staging)


def test_duplicate_names_rejected(tmp_path, staging, extraction_config, scan_writer):
    scan_writer(tmp_path / "dup" / "a" / "p.png", [])
    scan_writer(tmp_path / "dup" / "b" / "p.png", [])

    with pytest.raises(ExtractionError, match="Duplicate source file name"):
        extract_fragments(_sources(tmp_path / "dup"), config=extraction_config, **staging)


def test_vanished_source_outputs_removed(input_dir, staging, extraction_config):
    extract_fragments(_sources(input_dir), config=extraction_config, **staging)
    (input_dir / "page_1.png").unlink()

    result = extract_fragments(_sources(input_dir), config=extraction_config, **staging)

    assert result.pruned_sources == ["page_1.png"]
    assert [f.source_name for f in result.fragments] == ["page_2.png", "page_2.png"]
    assert not list(staging["fragments_dir"].glob("rect_page_1.png_*"))
    assert not (staging["cropped_dir"] / "cropped_page_1.png").exists()
    assert staging["manifest"].source_names == ["page_2.png", "page_10.png"]
