"""Last snapshot cache operations for codetracker.

Contains functions for the fingerprint cache:
- load_last_snapshot: Load the cached fingerprints of the last snapshot
- save_last_snapshot: Save fingerprints of the current scan
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from codetracker.cache.models import LastSnapshot, SnapshotFileInfo, TranscriptState
from codetracker.cache.utils import write_text_atomic
from codetracker.paths import get_last_snapshot_file
from codetracker.scanner import FileInfo

logger = logging.getLogger(__name__)

_LAST_SNAPSHOT_KEYS = {"snapshot_id", "files", "transcript"}


def _is_bare_file_map(data: dict) -> bool:
    """Check if a cache document uses the old format (a bare path -> info map)."""
    if not data.keys() <= _LAST_SNAPSHOT_KEYS or "files" not in data:
        return True
    # a bare map can only look like the wrapper if a file is literally named "files"
    files = data["files"]
    return isinstance(files, dict) and isinstance(files.get("hash"), str)


def load_last_snapshot(project_root: Path) -> Optional[LastSnapshot]:
    """Load the last snapshot cache.

    Old caches stored only the file map; they load with an empty snapshot_id
    and no transcript state.

    Args:
        project_root: The root directory of the tracked project.

    Returns:
        LastSnapshot, or None if the cache is absent or unreadable.
    """
    cache_file = get_last_snapshot_file(project_root)
    if not cache_file.exists():
        return None

    try:
        data = json.loads(cache_file.read_text(encoding="utf-8"))
        if isinstance(data, dict) and _is_bare_file_map(data):
            return LastSnapshot(files=data)
        return LastSnapshot.model_validate(data)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.warning("Ignoring unreadable snapshot cache %s: %s", cache_file, e)
        return None


def save_last_snapshot(
    project_root: Path,
    files: dict[str, FileInfo],
    snapshot_id: str,
    transcript: Optional[TranscriptState] = None,
) -> None:
    """Save the fingerprints of the current scan.

    Only hash and size are stored; file content never reaches the cache.

    Args:
        project_root: The root directory of the tracked project.
        files: Files from the current scan.
        snapshot_id: Id of the snapshot the server recorded for this state.
        transcript: Transcript cursor to keep, or None to clear it.

    Raises:
        OSError: If the cache file cannot be written.
    """
    snapshot = LastSnapshot(
        snapshot_id=snapshot_id,
        files={
            path: SnapshotFileInfo(hash=info.hash, size=info.size)
            for path, info in files.items()
        },
        transcript=transcript,
    )
    write_text_atomic(
        get_last_snapshot_file(project_root),
        snapshot.model_dump_json(indent=2),
    )
