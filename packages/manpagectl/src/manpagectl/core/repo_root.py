"""Repository root detection helpers.

`Path.cwd()` is only allowed in this module.
"""

from __future__ import annotations

from pathlib import Path

CONFIG_NAMES = ("manpage.toml", "manpage.yaml")


def is_repo_root(path: Path) -> bool:
    if any((path / name).is_file() for name in CONFIG_NAMES):
        return True
    return (path / "man").is_dir() and (path / "Cargo.toml").is_file()


def find_repo_root(start: Path | None = None) -> Path:
    cur = (start or Path.cwd()).resolve()
    if cur.is_file():
        cur = cur.parent
    while True:
        if is_repo_root(cur):
            return cur
        if cur.parent == cur:
            raise RuntimeError("unable to resolve repository root")
        cur = cur.parent


def try_find_repo_root(start: Path | None = None) -> Path | None:
    try:
        return find_repo_root(start)
    except RuntimeError:
        return None
