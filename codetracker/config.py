"""Configuration and credentials for codetracker.

Handles reading the .codetracker/config.json and .codetracker/credentials.json
files of a project. Both are JSON documents validated with Pydantic models;
missing keys fall back to defaults.
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from codetracker.paths import get_config_file, get_credentials_file

DEFAULT_SERVER_URL = "http://localhost:5000"
DEFAULT_MAX_FILE_SIZE = 1024 * 1024  # 1 MiB
DEFAULT_MAX_ENTRIES_PER_REQUEST = 100


class ConfigError(Exception):
    """Raised when config or credentials cannot be loaded."""

    pass


def _none_to_empty_list(v: Optional[list[str]]) -> list[str]:
    return [] if v is None else v


class AutoSnapshotConfig(BaseModel):
    """Settings for automatic pre/post snapshots."""

    enabled: bool = False
    # Read for compatibility with existing config files; not acted on.
    min_interval_seconds: int = 0
    skip_patterns: list[str] = []
    only_on_changes: bool = False

    @field_validator("skip_patterns", mode="before")
    @classmethod
    def skip_patterns_default(cls, v):
        return _none_to_empty_list(v)


class ConversationTrackingConfig(BaseModel):
    """Settings for shipping transcript entries."""

    enabled: bool = False
    max_entries_per_request: int = DEFAULT_MAX_ENTRIES_PER_REQUEST

    @field_validator("max_entries_per_request")
    @classmethod
    def max_entries_default(cls, v: int) -> int:
        """Treat zero or negative values as unset."""
        return v if v > 0 else DEFAULT_MAX_ENTRIES_PER_REQUEST


class Config(BaseModel):
    """Contents of .codetracker/config.json."""

    version: str = ""
    server_url: str = DEFAULT_SERVER_URL
    ignore_patterns: list[str] = []
    track_extensions: list[str] = []
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    auto_snapshot: AutoSnapshotConfig = Field(default_factory=AutoSnapshotConfig)
    conversation_tracking: ConversationTrackingConfig = Field(
        default_factory=ConversationTrackingConfig
    )

    @field_validator("server_url", mode="before")
    @classmethod
    def server_url_default(cls, v):
        """Treat an empty or null URL as unset."""
        return v or DEFAULT_SERVER_URL

    @field_validator("max_file_size")
    @classmethod
    def max_file_size_default(cls, v: int) -> int:
        """Treat zero or negative sizes as unset."""
        return v if v > 0 else DEFAULT_MAX_FILE_SIZE

    @field_validator("ignore_patterns", "track_extensions", mode="before")
    @classmethod
    def lists_default(cls, v):
        return _none_to_empty_list(v)


class Credentials(BaseModel):
    """Contents of .codetracker/credentials.json."""

    api_key: str = ""
    current_project_hash: str = ""
    username: Optional[str] = None
    email: Optional[str] = None

    def is_valid(self) -> bool:
        """Check that the fields required to talk to the server are present."""
        return bool(self.api_key) and bool(self.current_project_hash)


def _read_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")


def load_config(project_root: Path) -> Config:
    """Load the project configuration.

    Args:
        project_root: The root directory of the tracked project.

    Returns:
        The parsed Config with defaults applied.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    config_file = get_config_file(project_root)
    data = _read_json(config_file)
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_file}: {e}")


def load_credentials(project_root: Path) -> Credentials:
    """Load the project credentials.

    Args:
        project_root: The root directory of the tracked project.

    Returns:
        The parsed Credentials. Validity is not checked here.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    credentials_file = get_credentials_file(project_root)
    data = _read_json(credentials_file)
    try:
        return Credentials.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid credentials in {credentials_file}: {e}")
