"""Change detection between a scan and the cached snapshot.

Contains:
- ChangeType: Added / Modified / Deleted wire codes
- Change: A per-path delta sent to the server
- calculate_changes: Compare current files with the previous fingerprints
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from codetracker.cache.models import SnapshotFileInfo
from codetracker.scanner import FileInfo


class ChangeType(str, Enum):
    """Type of a file change."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"


class Change(BaseModel):
    """A file change.

    Added and modified changes carry hash, content and size; modified and
    deleted changes carry previous_hash. Unset fields are None and are left
    out of the wire payload.
    """

    file_path: str
    type: ChangeType
    hash: Optional[str] = None
    content: Optional[str] = None
    size: Optional[int] = None
    previous_hash: Optional[str] = None

    @classmethod
    def added(cls, info: FileInfo) -> "Change":
        return cls(
            file_path=info.relative_path,
            type=ChangeType.ADDED,
            hash=info.hash,
            content=info.content,
            size=info.size,
        )

    @classmethod
    def modified(cls, info: FileInfo, previous_hash: str) -> "Change":
        return cls(
            file_path=info.relative_path,
            type=ChangeType.MODIFIED,
            hash=info.hash,
            content=info.content,
            size=info.size,
            previous_hash=previous_hash,
        )

    @classmethod
    def deleted(cls, file_path: str, previous_hash: str) -> "Change":
        return cls(file_path=file_path, type=ChangeType.DELETED, previous_hash=previous_hash)


def calculate_changes(
    current: dict[str, FileInfo],
    previous: Optional[dict[str, SnapshotFileInfo]],
) -> list[Change]:
    """Compare current files with the previous snapshot.

    Hash equality is the only modification criterion; sizes are not compared.

    Args:
        current: Files from the current scan, keyed by relative path.
        previous: Cached fingerprints, or None if there is no prior snapshot.

    Returns:
        Changes sorted by file path.
    """
    changes = []

    if previous is None:
        # First snapshot: everything is new
        for path in sorted(current):
            changes.append(Change.added(current[path]))
        return changes

    for path in sorted(current.keys() | previous.keys()):
        info = current.get(path)
        prev = previous.get(path)
        if prev is None:
            changes.append(Change.added(info))
        elif info is None:
            changes.append(Change.deleted(path, prev.hash))
        elif info.hash != prev.hash:
            changes.append(Change.modified(info, prev.hash))

    return changes
