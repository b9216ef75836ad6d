"""CLI command showing the tracking state of the current project."""

from collections import Counter

import typer

from codetracker.cache import load_last_snapshot, load_session
from codetracker.config import ConfigError, load_config, load_credentials
from codetracker.diff import calculate_changes
from codetracker.paths import get_config_file, get_project_root
from codetracker.scanner import Scanner


def status_command() -> None:
    """Show configuration, pending changes and the open turn, if any."""
    project_root = get_project_root()

    try:
        config = load_config(project_root)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Create {get_config_file(project_root)} to start tracking.", err=True)
        raise typer.Exit(1)

    try:
        credentials_valid = load_credentials(project_root).is_valid()
    except ConfigError:
        credentials_valid = False

    typer.echo(f"Project: {project_root}")
    typer.echo(f"  Server: {config.server_url}")
    typer.echo(f"  Credentials: {'valid' if credentials_valid else 'missing or incomplete'}")
    typer.echo(f"  Auto snapshot: {'enabled' if config.auto_snapshot.enabled else 'disabled'}")
    typer.echo(
        f"  Conversation tracking: "
        f"{'enabled' if config.conversation_tracking.enabled else 'disabled'}"
    )
    typer.echo()

    current_files = Scanner(project_root, config).scan()
    last_snapshot = load_last_snapshot(project_root)
    changes = calculate_changes(current_files, last_snapshot.files if last_snapshot else None)
    counts = Counter(change.type.value for change in changes)

    typer.echo(f"Tracked files: {len(current_files)}")
    if last_snapshot and last_snapshot.snapshot_id:
        typer.echo(f"Last snapshot: {last_snapshot.snapshot_id}")
    else:
        typer.echo("Last snapshot: (none)")
    typer.echo(
        f"Pending changes: {len(changes)} "
        f"(A: {counts['A']}, M: {counts['M']}, D: {counts['D']})"
    )

    if last_snapshot and last_snapshot.transcript:
        transcript = last_snapshot.transcript
        typer.echo(
            f"Transcript cursor: {transcript.last_line_count} lines "
            f"(session {transcript.session_id})"
        )

    session = load_session(project_root)
    if session:
        typer.echo(f"Open turn: since {session.started_at} (pre snapshot {session.pre_snapshot_id})")
    else:
        typer.echo("Open turn: none")
