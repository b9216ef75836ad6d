"""Cache data models for codetracker.

Contains Pydantic models persisted under .codetracker/cache:
- SnapshotFileInfo: Fingerprint of one file (no content)
- TranscriptState: Cursor into the assistant transcript
- LastSnapshot: Fingerprints of the last posted snapshot
- SessionData: State handed from the pre-prompt hook to the stop hook
"""

from typing import Optional

from pydantic import BaseModel


class SnapshotFileInfo(BaseModel):
    """Cached fingerprint of a file."""

    hash: str
    size: int


class TranscriptState(BaseModel):
    """How many non-empty transcript lines were consumed under a session."""

    session_id: str
    last_line_count: int = 0


class LastSnapshot(BaseModel):
    """The last snapshot known to the server."""

    snapshot_id: str = ""
    files: dict[str, SnapshotFileInfo] = {}
    transcript: Optional[TranscriptState] = None


class SessionData(BaseModel):
    """An open turn, written by the pre-prompt hook and consumed by the stop hook."""

    pre_snapshot_id: str
    prompt: str
    claude_session_id: str
    started_at: str  # RFC 3339 UTC timestamp
