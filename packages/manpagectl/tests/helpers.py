from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from fixtures.tools.fake_extractor import BLOCKS_MARKDOWN
from fixtures.tools.fake_pandoc import marker

TESTS_ROOT = Path(__file__).resolve().parent
SRC_ROOT = TESTS_ROOT.parent / "src"
FIXTURES = TESTS_ROOT / "fixtures"
FAKE_PANDOC = FIXTURES / "tools/fake_pandoc.py"
FAKE_EXTRACTOR = FIXTURES / "tools/fake_extractor.py"

__all__ = [
    "BLOCKS_MARKDOWN",
    "FAKE_EXTRACTOR",
    "FAKE_PANDOC",
    "FIXTURES",
    "expected_manpage",
    "run_manpagectl",
    "run_module",
]


def expected_manpage(repo: Path, themes_heading: str = "base-header-level=2") -> bytes:
    blocks = marker("man", "-") + BLOCKS_MARKDOWN
    themes = marker("man", themes_heading) + (repo / "doc/themes.md").read_text(encoding="utf-8")
    return (
        (repo / "man/_preface.1").read_bytes()
        + b".SH BLOCKS\n\n"
        + blocks.encode("utf-8")
        + b".SH THEMES\n\n"
        + themes.encode("utf-8")
        + (repo / "man/_postface.1").read_bytes()
    )


def run_module(module: str, *args: str, cwd: Path, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    merged = os.environ.copy()
    merged.update(env or {})
    existing = merged.get("PYTHONPATH", "")
    merged["PYTHONPATH"] = f"{SRC_ROOT}{os.pathsep}{existing}" if existing else str(SRC_ROOT)
    return subprocess.run(
        [sys.executable, "-m", module, *args],
        cwd=cwd,
        env=merged,
        text=True,
        capture_output=True,
        check=False,
    )


def run_manpagectl(*args: str, cwd: Path, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    return run_module("manpagectl.cli", *args, cwd=cwd, env=env)
