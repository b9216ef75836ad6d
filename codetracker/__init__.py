"""Prompt-level code snapshot hooks for AI coding assistants."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("codetracker-hooks")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
