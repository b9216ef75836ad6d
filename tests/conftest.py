"""Shared test fixtures and configuration."""

import json
import tempfile
from pathlib import Path

import httpx
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config():
    """Sample config.json contents with tracking switched on."""
    return {
        "version": "1.0",
        "server_url": "http://tracker.test",
        "ignore_patterns": ["node_modules/", "*.log", "build/**"],
        "track_extensions": [".py", ".md"],
        "max_file_size": 1048576,
        "auto_snapshot": {
            "enabled": True,
            "skip_patterns": ["^/stats"],
            "only_on_changes": False,
        },
        "conversation_tracking": {
            "enabled": True,
            "max_entries_per_request": 100,
        },
    }


@pytest.fixture
def sample_credentials():
    """Sample credentials.json contents."""
    return {
        "api_key": "key-123",
        "current_project_hash": "proj-abc",
        "username": "dev",
        "email": "dev@example.com",
    }


@pytest.fixture
def write_config(temp_dir):
    """Return a helper that writes .codetracker/config.json into temp_dir."""

    def _write(config: dict) -> Path:
        path = temp_dir / ".codetracker" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config))
        return path

    return _write


@pytest.fixture
def project(temp_dir, write_config, sample_config, sample_credentials):
    """A configured project root with valid credentials."""
    write_config(sample_config)
    (temp_dir / ".codetracker" / "credentials.json").write_text(json.dumps(sample_credentials))
    return temp_dir


class MockServer:
    """Records requests and answers them from a per-path response table."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        # path -> (status, JSON payload or raw text)
        self.responses: dict[str, tuple[int, object]] = {
            "/api/snapshots": (200, {"snapshot_id": "s1", "created_at": "2024-01-01T00:00:00Z"}),
            "/api/interactions": (200, {"snapshot_id": "s2"}),
            "/api/conversations": (200, {"start_id": 10, "end_id": 11}),
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, payload = self.responses.get(request.url.path, (404, "not found"))
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def bodies(self, path: str) -> list[dict]:
        """JSON bodies of the requests sent to a path."""
        return [json.loads(r.content) for r in self.requests if r.url.path == path]


@pytest.fixture
def mock_server():
    """A fake codetracker server for httpx.MockTransport."""
    return MockServer()
