from __future__ import annotations

import shutil
from pathlib import Path

from .process import run_command


def read_git_sha(repo_root: Path) -> str:
    if shutil.which("git") is None:
        return "unknown"
    res = run_command(["git", "rev-parse", "--short", "HEAD"], repo_root, capture_output=True)
    sha = res.stdout.strip() if res.code == 0 else ""
    return sha or "unknown"
