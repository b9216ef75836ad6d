"""CLI commands that run the hooks.

Both commands read one JSON object from stdin, write nothing to stdout and
always exit with code 0. Extra arguments from the host tool are tolerated.
"""

import sys

import typer

from codetracker.hooks.common import configure_logging, contain
from codetracker.hooks.pre_prompt import run_pre_prompt
from codetracker.hooks.stop import run_stop
from codetracker.paths import get_project_root

# Host tools may append arguments; the hooks ignore them
HOOK_CONTEXT_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}


def pre_prompt_command(ctx: typer.Context) -> None:
    """Snapshot the project before a prompt is handled (reads hook JSON on stdin)."""
    project_root = get_project_root()
    configure_logging(project_root)
    contain(lambda: run_pre_prompt(sys.stdin.read(), project_root))


def stop_command(ctx: typer.Context) -> None:
    """Record the changes of the finished turn (reads hook JSON on stdin)."""
    project_root = get_project_root()
    configure_logging(project_root)
    contain(lambda: run_stop(sys.stdin.read(), project_root))
