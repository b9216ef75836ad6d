"""Cache module for codetracker.

This package persists hook state between processes:
- models: SnapshotFileInfo, TranscriptState, LastSnapshot, SessionData
- utils: Atomic file writes
- snapshot: Last snapshot fingerprint cache
- session: Session baton handed from pre-prompt to stop
"""

# Models
from codetracker.cache.models import (
    LastSnapshot,
    SessionData,
    SnapshotFileInfo,
    TranscriptState,
)

# General utilities
from codetracker.cache.utils import write_text_atomic

# Snapshot cache operations
from codetracker.cache.snapshot import (
    load_last_snapshot,
    save_last_snapshot,
)

# Session baton operations
from codetracker.cache.session import (
    delete_session,
    load_session,
    save_session,
)


__all__ = [
    # Models
    "LastSnapshot",
    "SessionData",
    "SnapshotFileInfo",
    "TranscriptState",
    # General utilities
    "write_text_atomic",
    # Snapshot cache operations
    "load_last_snapshot",
    "save_last_snapshot",
    # Session baton operations
    "delete_session",
    "load_session",
    "save_session",
]
