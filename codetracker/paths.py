"""Project root discovery and .codetracker file layout.

Contains functions for locating tracker files:
- get_project_root: Resolve the project root from the environment
- get_tracker_dir: Get the .codetracker directory
- get_config_file: Get path to config.json
- get_credentials_file: Get path to credentials.json
- get_cache_dir: Get the cache directory
- get_last_snapshot_file: Get path to the last snapshot cache
- get_session_file: Get path to the session baton
- get_log_file: Get path to the hook log file

None of these create directories; writers create parents on demand.
"""

import os
from pathlib import Path

PROJECT_DIR_ENV_VAR = "CLAUDE_PROJECT_DIR"
TRACKER_DIR_NAME = ".codetracker"


def get_project_root() -> Path:
    """Return the project root directory.

    Uses CLAUDE_PROJECT_DIR when set, otherwise the current working directory.

    Returns:
        Path to the project root.
    """
    project_dir = os.environ.get(PROJECT_DIR_ENV_VAR)
    if project_dir:
        return Path(project_dir)
    try:
        return Path.cwd()
    except OSError:
        return Path(".")


def get_tracker_dir(project_root: Path) -> Path:
    """Return the .codetracker directory.

    Args:
        project_root: The root directory of the tracked project.

    Returns:
        Path to the .codetracker directory.
    """
    return project_root / TRACKER_DIR_NAME


def get_config_file(project_root: Path) -> Path:
    """Return path to config.json."""
    return get_tracker_dir(project_root) / "config.json"


def get_credentials_file(project_root: Path) -> Path:
    """Return path to credentials.json."""
    return get_tracker_dir(project_root) / "credentials.json"


def get_cache_dir(project_root: Path) -> Path:
    """Return the cache directory."""
    return get_tracker_dir(project_root) / "cache"


def get_last_snapshot_file(project_root: Path) -> Path:
    """Return path to the last snapshot cache.

    Args:
        project_root: The root directory of the tracked project.

    Returns:
        Path to cache/last_snapshot.json.
    """
    return get_cache_dir(project_root) / "last_snapshot.json"


def get_session_file(project_root: Path) -> Path:
    """Return path to the session baton.

    Args:
        project_root: The root directory of the tracked project.

    Returns:
        Path to cache/current_session.json.
    """
    return get_cache_dir(project_root) / "current_session.json"


def get_log_file(project_root: Path) -> Path:
    """Return path to the hook log file."""
    return get_tracker_dir(project_root) / "logs" / "hooks.log"
