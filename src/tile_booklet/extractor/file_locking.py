"""
Module: extractor.file_locking

Purpose:
    Locked JSON access for the extraction manifest. Uses portalocker for
    Mac, Windows, and Linux compatibility so that an interrupted or
    overlapping run cannot leave a half-written manifest behind.

Key Functions:
    - locked_read_json: Read JSON under a shared lock
    - locked_read_modify_write_json: Read-modify-write JSON under an exclusive lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - extractor.manifest: Loading and saving the cache manifest
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict

import portalocker

logger = logging.getLogger(__name__)


def locked_read_json(
    path: Path,
    default: Callable[[], Dict[str, Any]] = dict,
) -> Dict[str, Any]:
    """
    Read a JSON file while holding a shared lock.

    Args:
        path: Path to JSON file.
        default: Factory for the result when the file is missing or empty.

    Returns:
        Parsed JSON object.

    Raises:
        json.JSONDecodeError: If the file holds invalid JSON.
    """
    if not path.exists():
        return default()

    with open(path, 'r', encoding='utf-8') as f:
        portalocker.lock(f, portalocker.LOCK_SH)
        try:
            content = f.read()
        finally:
            portalocker.unlock(f)

    if not content.strip():
        return default()
    return json.loads(content)


def locked_read_modify_write_json(
    path: Path,
    modifier: Callable[[Dict[str, Any]], Dict[str, Any]],
    default: Callable[[], Dict[str, Any]] = dict,
) -> Dict[str, Any]:
    """
    Read JSON, apply modifier, write back - all with exclusive lock.

    Args:
        path: Path to JSON file.
        modifier: Function that takes existing data, returns modified data.
        default: Factory for default data if file doesn't exist.

    Returns:
        The modified data that was written.

    Example:
        >>> def mark_done(existing):
        ...     existing['sources']['p1.jpg'] = entry
        ...     return existing
        >>> locked_read_modify_write_json(manifest_path, mark_done)
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Use r+ mode for read-modify-write, create if needed
    if not path.exists():
        path.write_text(json.dumps(default(), indent=2), encoding='utf-8')

    with open(path, 'r+', encoding='utf-8') as f:
        portalocker.lock(f, portalocker.LOCK_EX)
        try:
            # Read existing
            f.seek(0)
            content = f.read()
            if content.strip():
                existing = json.loads(content)
            else:
                existing = default()

            # Modify
            modified = modifier(existing)

            # Write back
            f.seek(0)
            f.truncate()
            json.dump(modified, f, indent=2, ensure_ascii=False)

            logger.debug(f"Updated {path.name}")
            return modified
        finally:
            portalocker.unlock(f)
