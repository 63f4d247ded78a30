"""
Module: extractor.manifest

Purpose:
    Explicit, inspectable cache of completed extraction work. Each source
    image gets one entry once it has been cropped, split and filtered, so a
    re-run only skips sources whose recorded output is still valid.

Key Classes:
    - ExtractionManifest: JSON manifest with one entry per source image

Dependencies:
    - extractor.file_locking: Locked JSON read/write (portalocker)

Used By:
    - extractor.pipeline: Skip-or-extract decision per source image
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from tile_booklet.core.models import Fragment, SourceImage

from .config import ExtractionConfig
from .file_locking import locked_read_json, locked_read_modify_write_json

logger = logging.getLogger(__name__)

MANIFEST_VERSION = 1
MANIFEST_FILENAME = "manifest.json"


def _empty_manifest() -> Dict[str, Any]:
    return {"version": MANIFEST_VERSION, "sources": {}}


def _version_of(data: Any) -> Any:
    return data.get("version") if isinstance(data, dict) else None


class ExtractionManifest:
    """
    Record of which source images have been fully extracted.

    An entry is written only after a source's cropped image and all of
    its fragments are on disk, so a crash mid-source leaves no entry and
    the source is extracted again on the next run.

    Entry layout (keyed by source file name):
        {
            "source": "input/p1.jpg",
            "size": 123456,
            "mtime_ns": 1700000000000000000,
            "config": "2232x3117+124+129|3x3|100000",
            "cropped": "build/cropped_images/cropped_p1.jpg",
            "fragments": [Fragment.to_dict(), ...],
            "discarded": 2,
            "completed_at": "2026-01-01T12:00:00"
        }

    Example:
        >>> manifest = ExtractionManifest.load(Path("build/manifest.json"))
        >>> if not manifest.is_current(source, config):
        ...     manifest.record(source, cropped, fragments, config)
    """

    def __init__(self, path: Path, data: Optional[Dict[str, Any]] = None):
        self.path = path
        self._data = data if data is not None else _empty_manifest()

    @classmethod
    def load(cls, path: Path) -> "ExtractionManifest":
        """
        Load a manifest from disk (empty if missing).

        An unreadable manifest is deleted, and one written by an
        incompatible version is ignored; either way every source will
        be extracted again.
        """
        try:
            data = locked_read_json(path, default=_empty_manifest)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding unreadable manifest {path}: {e}")
            path.unlink()
            data = _empty_manifest()
        if not isinstance(data, dict) or data.get("version") != MANIFEST_VERSION:
            logger.warning(
                f"Ignoring manifest {path} with version {_version_of(data)!r}, "
                f"expected {MANIFEST_VERSION}"
            )
            data = _empty_manifest()
        data.setdefault("sources", {})
        return cls(path, data)

    @property
    def source_names(self) -> List[str]:
        return list(self._data["sources"].keys())

    def entry(self, source: SourceImage) -> Optional[Dict[str, Any]]:
        return self._data["sources"].get(source.name)

    def is_current(self, source: SourceImage, config: ExtractionConfig) -> bool:
        """
        Check whether a source's recorded extraction can be reused.

        True only when the source file is unchanged (size and mtime), the
        extraction settings match, and every recorded output file exists.
        """
        entry = self.entry(source)
        if entry is None:
            return False

        try:
            stat = source.path.stat()
        except OSError:
            return False

        if entry.get("size") != stat.st_size or entry.get("mtime_ns") != stat.st_mtime_ns:
            logger.debug(f"{source.name}: source changed since last extraction")
            return False
        if entry.get("config") != config.signature:
            logger.debug(f"{source.name}: extraction settings changed")
            return False
        if not Path(entry.get("cropped", "")).exists():
            logger.debug(f"{source.name}: cropped image missing")
            return False
        for frag in entry.get("fragments", []):
            if not Path(frag["path"]).exists():
                logger.debug(f"{source.name}: fragment {frag['path']} missing")
                return False
        return True

    def fragments_for(self, source: SourceImage) -> List[Fragment]:
        """Recorded fragments of a source in row-major order."""
        entry = self.entry(source)
        if entry is None:
            return []
        fragments = [Fragment.from_dict(f) for f in entry.get("fragments", [])]
        return sorted(fragments, key=lambda f: f.grid_position)

    def record(
        self,
        source: SourceImage,
        cropped: Path,
        fragments: List[Fragment],
        config: ExtractionConfig,
        *,
        discarded: int = 0,
    ) -> None:
        """Mark a source as fully extracted and persist the manifest."""
        stat = source.path.stat()
        entry = {
            "source": source.path.as_posix(),
            "size": stat.st_size,
            "mtime_ns": stat.st_mtime_ns,
            "config": config.signature,
            "cropped": cropped.as_posix(),
            "fragments": [f.to_dict() for f in fragments],
            "discarded": discarded,
            "completed_at": datetime.now().isoformat(timespec="seconds"),
        }
        self._data["sources"][source.name] = entry

        def _update(existing: Dict[str, Any]) -> Dict[str, Any]:
            if _version_of(existing) != MANIFEST_VERSION:
                existing = _empty_manifest()
            existing.setdefault("sources", {})[source.name] = entry
            return existing

        locked_read_modify_write_json(self.path, _update, default=_empty_manifest)

    def forget(self, source: SourceImage) -> None:
        """Drop a source's entry (before re-extracting it)."""
        if self._data["sources"].pop(source.name, None) is None:
            return

        def _update(existing: Dict[str, Any]) -> Dict[str, Any]:
            existing.get("sources", {}).pop(source.name, None)
            return existing

        locked_read_modify_write_json(self.path, _update, default=_empty_manifest)

    def prune(self, keep: Iterable[str]) -> List[str]:
        """
        Drop entries for sources no longer in the input, deleting the
        cropped image and fragments each entry recorded.

        Args:
            keep: File names of the current sources

        Returns:
            Names of the pruned sources
        """
        keep = set(keep)
        stale = [name for name in self.source_names if name not in keep]
        if not stale:
            return []

        for name in stale:
            entry = self._data["sources"].pop(name)
            outputs = [entry.get("cropped")] + [f.get("path") for f in entry.get("fragments", [])]
            for output in outputs:
                if output:
                    Path(output).unlink(missing_ok=True)
            logger.info(f"Removed outputs of {name}; no longer in the input")

        def _update(existing: Dict[str, Any]) -> Dict[str, Any]:
            sources = existing.setdefault("sources", {})
            for name in stale:
                sources.pop(name, None)
            return existing

        locked_read_modify_write_json(self.path, _update, default=_empty_manifest)
        return stale
