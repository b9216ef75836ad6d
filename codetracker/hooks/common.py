"""Shared plumbing for the hook drivers.

Contains:
- HookOutcome: How a hook run ended
- HookInputError: Raised when stdin is not a usable JSON object
- PrePromptInput / StopInput: stdin payloads
- parse_hook_input: Parse stdin into an input model
- utc_now: Current time as an RFC 3339 UTC string
- compile_skip_patterns / matches_skip_pattern: Prompt skip rules
- configure_logging: Attach the hook log file handler
- contain: Run a driver, turning unexpected faults into an outcome
"""

import json
import logging
import os
import re
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel, ValidationError, field_validator

from codetracker.paths import get_log_file, get_tracker_dir

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "CODETRACKER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class HookOutcome(str, Enum):
    """How a hook run ended. Every outcome maps to exit code 0."""

    COMPLETED = "completed"
    INVALID_INPUT = "invalid_input"
    EMPTY_PROMPT = "empty_prompt"
    NOT_CONFIGURED = "not_configured"
    DISABLED = "disabled"
    SKIPPED = "skipped"
    NO_SESSION = "no_session"
    NO_CHANGES = "no_changes"
    API_FAILED = "api_failed"
    FAILED = "failed"


class HookInputError(Exception):
    """Raised when the hook input is not a usable JSON object."""

    pass


class PrePromptInput(BaseModel):
    """stdin payload of the pre-prompt hook."""

    prompt: str = ""
    session_id: str = ""
    timestamp: Optional[str] = None
    transcript_path: Optional[str] = None

    @field_validator("prompt", "session_id", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        """Treat a null prompt or session id as empty."""
        return "" if v is None else v


class StopInput(BaseModel):
    """stdin payload of the stop hook."""

    timestamp: Optional[str] = None
    transcript_path: Optional[str] = None


InputT = TypeVar("InputT", bound=BaseModel)


def parse_hook_input(raw_input: str, model: type[InputT]) -> InputT:
    """Parse the JSON read from stdin.

    Args:
        raw_input: Raw stdin text.
        model: Input model to validate against.

    Returns:
        The validated input.

    Raises:
        HookInputError: If the text is not valid JSON or does not fit the model.
    """
    try:
        return model.model_validate(json.loads(raw_input))
    except json.JSONDecodeError as e:
        raise HookInputError(f"Hook input is not valid JSON: {e}")
    except ValidationError as e:
        raise HookInputError(f"Unexpected hook input: {e}")


def utc_now() -> str:
    """Return the current UTC time in RFC 3339 format (seconds precision)."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def compile_skip_patterns(patterns: Iterable[str]) -> list[re.Pattern]:
    """Compile skip patterns case-insensitively, dropping invalid ones."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern, re.IGNORECASE))
        except re.error as e:
            logger.debug("Skipping invalid skip pattern %r: %s", pattern, e)
    return compiled


def matches_skip_pattern(prompt: str, patterns: Iterable[str]) -> bool:
    """Check if any skip pattern occurs in the prompt.

    Args:
        prompt: The user prompt.
        patterns: Regex strings from auto_snapshot.skip_patterns.

    Returns:
        True if the prompt should not be snapshotted.
    """
    return any(regex.search(prompt) for regex in compile_skip_patterns(patterns))


def configure_logging(project_root: Path) -> None:
    """Send hook logs to .codetracker/logs/hooks.log.

    Projects without a .codetracker directory are left untouched, and nothing
    is ever logged to stdout. The level comes from CODETRACKER_LOG_LEVEL
    (default WARNING).

    Args:
        project_root: The root directory of the tracked project.
    """
    root_logger = logging.getLogger("codetracker")
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    level = getattr(logging, level_name, None)
    root_logger.setLevel(level if isinstance(level, int) else logging.WARNING)
    root_logger.propagate = False
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
        existing.close()

    if not get_tracker_dir(project_root).is_dir():
        root_logger.addHandler(logging.NullHandler())
        return

    log_file = get_log_file(project_root)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        root_logger.addHandler(logging.NullHandler())
        return
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def contain(driver: Callable[[], HookOutcome]) -> HookOutcome:
    """Run a hook driver so that no fault escapes to the host tool.

    Args:
        driver: Zero-argument callable running one hook.

    Returns:
        The driver's outcome, or HookOutcome.FAILED if it raised.
    """
    try:
        return driver()
    except Exception:
        logger.exception("Hook failed unexpectedly")
        return HookOutcome.FAILED
