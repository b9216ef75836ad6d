"""Stop hook: record what the assistant turn changed.

Runs when the assistant finishes a turn. Consumes the session file left by
the pre-prompt hook, ships new transcript entries, and posts an interaction
carrying the changes made during the turn.
"""

import logging
import sys
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from codetracker.api import (
    APIError,
    CodeTrackerClient,
    CreateInteractionRequest,
    SendConversationsRequest,
)
from codetracker.cache import (
    SessionData,
    TranscriptState,
    delete_session,
    load_last_snapshot,
    load_session,
    save_last_snapshot,
)
from codetracker.config import Config, ConfigError, load_config, load_credentials
from codetracker.diff import calculate_changes
from codetracker.hooks.common import (
    HookInputError,
    HookOutcome,
    StopInput,
    configure_logging,
    contain,
    parse_hook_input,
    utc_now,
)
from codetracker.paths import get_project_root
from codetracker.scanner import Scanner
from codetracker.transcript import filter_entry, read_transcript_entries

logger = logging.getLogger(__name__)

POST_MESSAGE_PREFIX = "[AUTO-POST] "


@dataclass
class ConversationResult:
    """Outcome of shipping the transcript entries of one turn."""

    transcript: TranscriptState
    start_id: Optional[int] = None
    end_id: Optional[int] = None


def ship_conversation(
    client: CodeTrackerClient,
    config: Config,
    project_hash: str,
    session: SessionData,
    transcript_path: str,
    previous: Optional[TranscriptState],
) -> ConversationResult:
    """Send transcript entries written since the last cursor.

    The cursor continues from the cached line count when the cached session
    matches, and restarts at 0 otherwise. It advances by the number of lines
    read, whether or not they survive filtering or the POST succeeds.

    Args:
        client: API client.
        config: Project configuration.
        project_hash: Project the entries belong to.
        session: The open turn.
        transcript_path: Path to the JSONL transcript.
        previous: Cached transcript cursor, if any.

    Returns:
        ConversationResult with the new cursor and the server-assigned id range.
    """
    session_id = session.claude_session_id
    start_line = 0
    if previous is not None and previous.session_id == session_id:
        start_line = previous.last_line_count

    page = read_transcript_entries(
        transcript_path,
        start_line,
        config.conversation_tracking.max_entries_per_request,
    )
    result = ConversationResult(
        transcript=TranscriptState(
            session_id=session_id,
            last_line_count=start_line + page.lines_read,
        )
    )

    if not page.entries:
        return result

    types = Counter(str(entry.get("type", "unknown")) for entry in page.entries)
    logger.debug("Read %d transcript entries from line %d: %s", len(page.entries), start_line, dict(types))

    entries = [e for e in (filter_entry(data) for data in page.entries) if e is not None]
    if not entries:
        return result

    try:
        response = client.send_conversations(
            SendConversationsRequest(
                project_hash=project_hash,
                session_id=session_id,
                entries=entries,
            )
        )
    except APIError as e:
        logger.warning("Failed to send %d conversation entries: %s", len(entries), e)
        return result

    result.start_id = response.start_id
    result.end_id = response.end_id
    return result


def run_stop(
    raw_input: str,
    project_root: Path,
    transport: Optional[httpx.BaseTransport] = None,
) -> HookOutcome:
    """Run the stop hook.

    Args:
        raw_input: JSON read from stdin.
        project_root: The root directory of the tracked project.
        transport: Optional httpx transport for the API client.

    Returns:
        How the run ended.
    """
    try:
        hook_input = parse_hook_input(raw_input, StopInput)
    except HookInputError as e:
        logger.warning("%s", e)
        return HookOutcome.INVALID_INPUT

    session = load_session(project_root)
    if session is None:
        # no pre snapshot was taken for this turn
        return HookOutcome.NO_SESSION

    try:
        config = load_config(project_root)
        credentials = load_credentials(project_root)
    except ConfigError as e:
        logger.info("Not configured: %s", e)
        return HookOutcome.NOT_CONFIGURED

    if not credentials.is_valid():
        logger.info("Credentials are missing api_key or current_project_hash")
        return HookOutcome.NOT_CONFIGURED

    current_files = Scanner(project_root, config).scan()
    last_snapshot = load_last_snapshot(project_root)
    previous_files = last_snapshot.files if last_snapshot else None
    previous_transcript = last_snapshot.transcript if last_snapshot else None
    changes = calculate_changes(current_files, previous_files)

    if not changes and config.auto_snapshot.only_on_changes:
        delete_session(project_root)
        return HookOutcome.NO_CHANGES

    client = CodeTrackerClient(config.server_url, credentials.api_key, transport=transport)

    conversation = None
    if hook_input.transcript_path and config.conversation_tracking.enabled:
        conversation = ship_conversation(
            client,
            config,
            credentials.current_project_hash,
            session,
            hook_input.transcript_path,
            previous_transcript,
        )

    request = CreateInteractionRequest(
        project_hash=credentials.current_project_hash,
        message=POST_MESSAGE_PREFIX + session.prompt,
        changes=changes,
        parent_snapshot_id=session.pre_snapshot_id,
        claude_session_id=session.claude_session_id,
        started_at=session.started_at,
        ended_at=hook_input.timestamp or utc_now(),
        conversation_start_id=conversation.start_id if conversation else None,
        conversation_end_id=conversation.end_id if conversation else None,
    )
    try:
        response = client.create_interaction(request)
    except APIError as e:
        # the session file stays; the next stop hook retries against it
        logger.warning("Failed to create interaction: %s", e)
        return HookOutcome.API_FAILED

    snapshot_id = response.snapshot_id or session.pre_snapshot_id
    logger.debug("Interaction %s posted with %d changes", snapshot_id, len(changes))

    save_last_snapshot(
        project_root,
        current_files,
        snapshot_id,
        conversation.transcript if conversation else None,
    )
    delete_session(project_root)
    return HookOutcome.COMPLETED


def main() -> None:
    """Console entry point. Arguments are ignored; the exit code is always 0."""
    try:
        project_root = get_project_root()
        configure_logging(project_root)
        outcome = contain(lambda: run_stop(sys.stdin.read(), project_root))
        logger.info("stop hook finished: %s", outcome.value)
    finally:
        sys.exit(0)
