"""CLI entry point for codetracker.

This module provides the main CLI application that combines the hook
commands and the status report into a single interface.
"""

import typer

from codetracker.cli.hooks import HOOK_CONTEXT_SETTINGS, pre_prompt_command, stop_command
from codetracker.cli.status import status_command

# Main application
app = typer.Typer(
    name="codetracker",
    help="codetracker: record code state around AI assistant prompts",
    add_completion=False,
)

app.command("pre-prompt", context_settings=HOOK_CONTEXT_SETTINGS)(pre_prompt_command)
app.command("stop", context_settings=HOOK_CONTEXT_SETTINGS)(stop_command)
app.command("status")(status_command)


__all__ = [
    "app",
    "pre_prompt_command",
    "stop_command",
    "status_command",
]
