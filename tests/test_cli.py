"""
Tests for the tile-booklet command line.

Test Coverage:
- Argument validation (tiles, crop geometry, quality) and exit codes
- Successful run without compression
- Reported failure when nothing survives extraction or nothing is rendered
"""
from unittest.mock import patch

import pytest

from tile_booklet.cli import EXIT_BUILD_FAILED, EXIT_OK, EXIT_USAGE, build_parser, config_from_args, main
from tile_booklet.extractor.config import DEFAULT_CROP_BOX, DEFAULT_MIN_FRAGMENT_BYTES


@pytest.fixture
def run_args(tmp_path):
    """Common arguments pointing every directory into tmp_path."""
    def _args(input_dir, *extra):
        return [
            "--input", str(input_dir),
            "--build-dir", str(tmp_path / "build"),
            "--output-dir", str(tmp_path / "output"),
            "--crop", "90x120+5+5",
            "--min-fragment-bytes", "1000",
            "--no-compress",
            *extra,
        ]
    return _args


@pytest.mark.parametrize("tiles", ["5", "0", "16", "four"])
def test_invalid_tiles_is_usage_error(tiles):
    with pytest.raises(SystemExit) as exc_info:
        main(["-t", tiles])

    assert exc_info.value.code == 2


def test_tiles_required():
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 2


def test_bad_crop_geometry_is_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        main(["-t", "4", "--crop", "2232x3117"])

    assert exc_info.value.code == 2


def test_invalid_quality_is_usage_error(tmp_path, input_dir, run_args):
    code = main(["-t", "4", "--quality", "0", *run_args(input_dir)])

    assert code == EXIT_USAGE
    assert not (tmp_path / "build").exists()


def test_defaults():
    args = build_parser().parse_args(["-t", "9"])
    config = config_from_args(args)

    assert config.tiles_per_page == 9
    assert config.compress is True
    assert config.compress_tier == "screen"
    assert config.quality == 85
    assert config.extraction.crop_box == DEFAULT_CROP_BOX
    assert config.extraction.min_fragment_bytes == DEFAULT_MIN_FRAGMENT_BYTES
    assert config.output_pdf.name == "booklet_9.pdf"


def test_successful_run(tmp_path, input_dir, run_args):
    code = main(["-t", "4", "--name", "saint_seiya", *run_args(input_dir)])

    assert code == EXIT_OK
    assert (tmp_path / "output" / "saint_seiya_4.pdf").exists()


def test_no_fragments_is_build_failure(tmp_path, scan_writer, run_args, caplog):
    scan_writer(tmp_path / "blank" / "p.png", [])

    code = main(["-t", "9", *run_args(tmp_path / "blank")])

    assert code == EXIT_BUILD_FAILED
    assert "No fragments found" in caplog.text
    assert not (tmp_path / "output" / "booklet_9.pdf").exists()


def test_clean_removes_previous_staging(tmp_path, input_dir, run_args):
    stale = tmp_path / "build" / "rectangles" / "rect_old.png_0_0.png"
    stale.parent.mkdir(parents=True)
    stale.write_bytes(b"old")

    code = main(["-t", "1", "--clean", *run_args(input_dir)])

    assert code == EXIT_OK
    assert not stale.exists()


def test_no_pages_is_build_failure(tmp_path, input_dir, run_args, caplog):
    with patch("tile_booklet.builder.controller.render_pages", return_value=[]):
        code = main(["-t", "4", *run_args(input_dir)])

    assert code == EXIT_BUILD_FAILED
    assert "nothing to assemble" in caplog.text
    assert not (tmp_path / "output" / "booklet_4.pdf").exists()
