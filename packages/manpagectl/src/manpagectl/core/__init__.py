"""Manpagectl core package."""
from .context import RunContext
from .logging import log_event
from .process import CommandResult, run_command
from .repo_root import find_repo_root, try_find_repo_root
from .serialize import dumps_json

__all__ = [
    "CommandResult",
    "RunContext",
    "dumps_json",
    "find_repo_root",
    "log_event",
    "run_command",
    "try_find_repo_root",
]
