"""Session baton operations for codetracker.

The session file marks an open turn: it exists from the moment the
pre-prompt hook has posted its snapshot until the stop hook consumes it.

Contains:
- save_session: Create or overwrite the session file
- load_session: Load the session file
- delete_session: Remove the session file
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from codetracker.cache.models import SessionData
from codetracker.cache.utils import write_text_atomic
from codetracker.paths import get_session_file

logger = logging.getLogger(__name__)


def save_session(project_root: Path, session: SessionData) -> None:
    """Save the session baton.

    Args:
        project_root: The root directory of the tracked project.
        session: The open turn.

    Raises:
        OSError: If the file cannot be written.
    """
    write_text_atomic(get_session_file(project_root), session.model_dump_json(indent=2))


def load_session(project_root: Path) -> Optional[SessionData]:
    """Load the session baton.

    Args:
        project_root: The root directory of the tracked project.

    Returns:
        SessionData, or None if there is no readable session.
    """
    session_file = get_session_file(project_root)
    try:
        data = json.loads(session_file.read_text(encoding="utf-8"))
        return SessionData.model_validate(data)
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.warning("Ignoring unreadable session file %s: %s", session_file, e)
        return None


def delete_session(project_root: Path) -> None:
    """Remove the session baton if present."""
    session_file = get_session_file(project_root)
    try:
        session_file.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to remove session file %s: %s", session_file, e)
