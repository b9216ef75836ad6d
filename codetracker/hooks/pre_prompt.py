"""Pre-prompt hook: snapshot the project before the assistant acts.

Runs when the user submits a prompt. Posts a snapshot of the changes since
the last known snapshot, then records the open turn for the stop hook.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import httpx

from codetracker.api import APIError, CodeTrackerClient, CreateSnapshotRequest
from codetracker.cache import (
    SessionData,
    TranscriptState,
    load_last_snapshot,
    save_last_snapshot,
    save_session,
)
from codetracker.config import ConfigError, load_config, load_credentials
from codetracker.diff import calculate_changes
from codetracker.hooks.common import (
    HookInputError,
    HookOutcome,
    PrePromptInput,
    configure_logging,
    contain,
    matches_skip_pattern,
    parse_hook_input,
    utc_now,
)
from codetracker.paths import get_project_root
from codetracker.scanner import Scanner
from codetracker.transcript import count_transcript_lines

logger = logging.getLogger(__name__)

PRE_MESSAGE_PREFIX = "[AUTO-PRE] "


def run_pre_prompt(
    raw_input: str,
    project_root: Path,
    transport: Optional[httpx.BaseTransport] = None,
) -> HookOutcome:
    """Run the pre-prompt hook.

    Args:
        raw_input: JSON read from stdin.
        project_root: The root directory of the tracked project.
        transport: Optional httpx transport for the API client.

    Returns:
        How the run ended.
    """
    try:
        hook_input = parse_hook_input(raw_input, PrePromptInput)
    except HookInputError as e:
        logger.warning("%s", e)
        return HookOutcome.INVALID_INPUT

    if not hook_input.prompt.strip():
        return HookOutcome.EMPTY_PROMPT

    try:
        config = load_config(project_root)
        credentials = load_credentials(project_root)
    except ConfigError as e:
        logger.info("Not configured: %s", e)
        return HookOutcome.NOT_CONFIGURED

    if not credentials.is_valid():
        logger.info("Credentials are missing api_key or current_project_hash")
        return HookOutcome.NOT_CONFIGURED

    if not config.auto_snapshot.enabled:
        return HookOutcome.DISABLED

    if matches_skip_pattern(hook_input.prompt, config.auto_snapshot.skip_patterns):
        logger.info("Prompt matched a skip pattern")
        return HookOutcome.SKIPPED

    current_files = Scanner(project_root, config).scan()
    last_snapshot = load_last_snapshot(project_root)
    changes = calculate_changes(current_files, last_snapshot.files if last_snapshot else None)

    request = CreateSnapshotRequest(
        project_hash=credentials.current_project_hash,
        message=PRE_MESSAGE_PREFIX + hook_input.prompt,
        changes=changes,
        claude_session_id=hook_input.session_id or None,
        parent_snapshot_id=(last_snapshot.snapshot_id or None) if last_snapshot else None,
    )

    client = CodeTrackerClient(config.server_url, credentials.api_key, transport=transport)
    try:
        response = client.create_snapshot(request)
    except APIError as e:
        logger.warning("Failed to create pre snapshot: %s", e)
        return HookOutcome.API_FAILED

    logger.debug("Pre snapshot %s posted with %d changes", response.snapshot_id, len(changes))

    # cursor for the stop hook: everything up to now belongs to earlier turns
    transcript_state = None
    if config.conversation_tracking.enabled and hook_input.transcript_path:
        transcript_state = TranscriptState(
            session_id=hook_input.session_id,
            last_line_count=count_transcript_lines(hook_input.transcript_path),
        )

    save_last_snapshot(project_root, current_files, response.snapshot_id, transcript_state)
    save_session(
        project_root,
        SessionData(
            pre_snapshot_id=response.snapshot_id,
            prompt=hook_input.prompt,
            claude_session_id=hook_input.session_id,
            started_at=hook_input.timestamp or utc_now(),
        ),
    )
    return HookOutcome.COMPLETED


def main() -> None:
    """Console entry point. Arguments are ignored; the exit code is always 0."""
    try:
        project_root = get_project_root()
        configure_logging(project_root)
        outcome = contain(lambda: run_pre_prompt(sys.stdin.read(), project_root))
        logger.info("pre-prompt hook finished: %s", outcome.value)
    finally:
        sys.exit(0)
