"""Request and response models for the codetracker server API.

Contains:
- SnapshotId: Snapshot id accepting a JSON string or number
- CreateSnapshotRequest / CreateSnapshotResponse: POST /api/snapshots
- CreateInteractionRequest / CreateInteractionResponse: POST /api/interactions
- ConversationEntry, SendConversationsRequest / SendConversationsResponse:
  POST /api/conversations
"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator

from codetracker.diff import Change


def _coerce_snapshot_id(value: Any) -> Any:
    """Canonicalize a wire snapshot id to a string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        # bool is an int subclass but never a valid id
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return value


# Servers send snapshot ids as strings or numbers
SnapshotId = Annotated[str, BeforeValidator(_coerce_snapshot_id)]


class CreateSnapshotRequest(BaseModel):
    """Request body for creating a snapshot."""

    project_hash: str
    message: str
    changes: list[Change]
    claude_session_id: Optional[str] = None
    parent_snapshot_id: Optional[str] = None


class CreateSnapshotResponse(BaseModel):
    """Response from creating a snapshot."""

    snapshot_id: SnapshotId = ""
    created_at: str = ""


class CreateInteractionRequest(BaseModel):
    """Request body for recording one prompt/response turn."""

    project_hash: str
    message: str
    changes: list[Change]
    parent_snapshot_id: str
    claude_session_id: str
    started_at: str
    ended_at: str
    conversation_start_id: Optional[int] = None
    conversation_end_id: Optional[int] = None


class CreateInteractionResponse(BaseModel):
    """Response from recording an interaction."""

    snapshot_id: SnapshotId = ""


class ConversationEntry(BaseModel):
    """A filtered transcript entry."""

    entry_type: str  # "user" or "assistant"
    entry_data: str


class SendConversationsRequest(BaseModel):
    """Request body for shipping transcript entries."""

    project_hash: str
    session_id: str
    entries: list[ConversationEntry]


class SendConversationsResponse(BaseModel):
    """Range of conversation ids the server assigned."""

    start_id: int
    end_id: int
