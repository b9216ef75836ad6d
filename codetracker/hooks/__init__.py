"""Hook drivers for codetracker.

This package provides the two hook executables:
- common: Input models, outcomes, logging setup, fault containment
- pre_prompt: Snapshot before the prompt is handled
- stop: Interaction record after the turn completes
"""

from codetracker.hooks.common import (
    HookInputError,
    HookOutcome,
    PrePromptInput,
    StopInput,
    configure_logging,
    contain,
)
from codetracker.hooks.pre_prompt import run_pre_prompt
from codetracker.hooks.stop import run_stop


__all__ = [
    "HookInputError",
    "HookOutcome",
    "PrePromptInput",
    "StopInput",
    "configure_logging",
    "contain",
    "run_pre_prompt",
    "run_stop",
]
