"""Server API module for codetracker.

This package provides the HTTP surface of the hooks:
- exceptions: APIError
- models: Request/response models and the SnapshotId type
- client: CodeTrackerClient
"""

# Exceptions
from codetracker.api.exceptions import APIError

# Models
from codetracker.api.models import (
    ConversationEntry,
    CreateInteractionRequest,
    CreateInteractionResponse,
    CreateSnapshotRequest,
    CreateSnapshotResponse,
    SendConversationsRequest,
    SendConversationsResponse,
    SnapshotId,
)

# Client
from codetracker.api.client import CodeTrackerClient, DEFAULT_TIMEOUT


__all__ = [
    # Exceptions
    "APIError",
    # Models
    "ConversationEntry",
    "CreateInteractionRequest",
    "CreateInteractionResponse",
    "CreateSnapshotRequest",
    "CreateSnapshotResponse",
    "SendConversationsRequest",
    "SendConversationsResponse",
    "SnapshotId",
    # Client
    "CodeTrackerClient",
    "DEFAULT_TIMEOUT",
]
