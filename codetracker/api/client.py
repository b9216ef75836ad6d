"""HTTP client for the codetracker server.

Contains:
- CodeTrackerClient: Stateless JSON POST client for snapshots, interactions
  and conversations
"""

import logging
from typing import Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from codetracker.api.exceptions import APIError
from codetracker.api.models import (
    CreateInteractionRequest,
    CreateInteractionResponse,
    CreateSnapshotRequest,
    CreateSnapshotResponse,
    SendConversationsRequest,
    SendConversationsResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

SNAPSHOTS_ENDPOINT = "/api/snapshots"
INTERACTIONS_ENDPOINT = "/api/interactions"
CONVERSATIONS_ENDPOINT = "/api/conversations"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class CodeTrackerClient:
    """Client for the codetracker server API.

    Each call opens its own short-lived connection; no state is kept between
    calls and failed calls are not retried.
    """

    def __init__(
        self,
        server_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            server_url: Base URL of the server, e.g. http://localhost:5000.
            api_key: Key sent in the X-API-Key header.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = server_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-API-Key": self.api_key,
        }

    def _post(self, endpoint: str, payload: BaseModel, response_model: type[ResponseT]) -> ResponseT:
        """POST a JSON payload and parse the response.

        Args:
            endpoint: Path relative to the server URL.
            payload: Request model; None fields are omitted.
            response_model: Model to parse the response into.

        Returns:
            The parsed response.

        Raises:
            APIError: On transport errors, non-2xx statuses or bad responses.
        """
        url = f"{self.base_url}{endpoint}"
        body = payload.model_dump_json(exclude_none=True)
        logger.debug("POST %s (%d bytes)", url, len(body))

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as http:
                response = http.post(url, content=body, headers=self._headers())
        except httpx.HTTPError as e:
            raise APIError(f"Request to {endpoint} failed: {e}")

        if not 200 <= response.status_code < 300:
            raise APIError(
                f"API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response_model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise APIError(
                f"Invalid response from {endpoint}: {e}",
                status_code=response.status_code,
                body=response.text,
            )

    def create_snapshot(self, request: CreateSnapshotRequest) -> CreateSnapshotResponse:
        """Create a snapshot (POST /api/snapshots)."""
        return self._post(SNAPSHOTS_ENDPOINT, request, CreateSnapshotResponse)

    def create_interaction(self, request: CreateInteractionRequest) -> CreateInteractionResponse:
        """Record an interaction (POST /api/interactions)."""
        return self._post(INTERACTIONS_ENDPOINT, request, CreateInteractionResponse)

    def send_conversations(self, request: SendConversationsRequest) -> SendConversationsResponse:
        """Ship transcript entries (POST /api/conversations)."""
        return self._post(CONVERSATIONS_ENDPOINT, request, SendConversationsResponse)
