from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..exit_codes import ERR_NOT_FOUND
from .logging import log_event

if TYPE_CHECKING:
    from .context import RunContext


@dataclass(frozen=True)
class CommandResult:
    code: int
    stdout: str
    stderr: str
    duration_ms: int

    @property
    def ok(self) -> bool:
        return self.code == 0


def run_command(
    cmd: list[str],
    cwd: Path,
    capture_output: bool = False,
    timeout_seconds: int = 0,
    ctx: RunContext | None = None,
) -> CommandResult:
    """Run ``cmd`` to completion and report how it exited.

    Without ``capture_output`` the child inherits stdout/stderr, so whatever it
    prints reaches the user unchanged and the result carries empty streams. A
    program that cannot be started is reported with status 127, like a shell.
    """
    started = time.monotonic()
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            text=True,
            capture_output=capture_output,
            check=False,
            timeout=(timeout_seconds if timeout_seconds > 0 else None),
        )
        result = CommandResult(
            code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    except subprocess.TimeoutExpired as exc:
        result = CommandResult(
            code=124,
            stdout=_as_text(exc.stdout),
            stderr=(_as_text(exc.stderr) + f"\ncommand timed out after {timeout_seconds}s").strip(),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    except (FileNotFoundError, PermissionError, NotADirectoryError) as exc:
        result = CommandResult(
            code=ERR_NOT_FOUND,
            stdout="",
            stderr=f"{cmd[0]}: {exc.strerror or exc}",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    if ctx and ctx.verbose and not ctx.quiet:
        log_event(
            ctx,
            "debug",
            "process",
            "run-command",
            command=" ".join(cmd),
            cwd=str(cwd),
            code=result.code,
            duration_ms=result.duration_ms,
        )
    return result


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
