from __future__ import annotations

import json
import socket
import sys
from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

from helpers import FAKE_EXTRACTOR, FAKE_PANDOC

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

settings.register_profile(
    "manpagectl",
    deadline=None,
    max_examples=50,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("manpagectl")

PREFACE = '.TH I3STATUS-RS 1\n.SH NAME\ni3status-rs \\- generates a status line\n'
POSTFACE = ".SH SEE ALSO\ni3bar(1)\n"
THEMES = "# Themes\n\nThemes set colors.\n\n## Available themes\n\n- plain\n"


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture(autouse=True)
def clean_tool_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "MANPAGECTL_EXTRACTOR",
        "MANPAGECTL_CONVERTER",
        "RUN_ID",
        "FAKE_PANDOC_FAIL",
        "FAKE_EXTRACTOR_FAIL",
        "FAKE_EXTRACTOR_SKIP_WRITE",
    ):
        monkeypatch.delenv(name, raising=False)


def _toml_list(items: list[str]) -> str:
    return json.dumps(items)


@pytest.fixture
def manpage_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    (repo / "man").mkdir(parents=True)
    (repo / "doc").mkdir()
    (repo / "src").mkdir()
    (repo / "gen-manpage").mkdir()
    (repo / "Cargo.toml").write_text('[package]\nname = "i3status-rs"\n', encoding="utf-8")
    (repo / "man/_preface.1").write_text(PREFACE, encoding="utf-8")
    (repo / "man/_postface.1").write_text(POSTFACE, encoding="utf-8")
    (repo / "doc/themes.md").write_text(THEMES, encoding="utf-8")
    (repo / "manpage.toml").write_text(
        "[extractor]\n"
        f"command = {_toml_list([sys.executable, str(FAKE_EXTRACTOR)])}\n"
        "\n[converter]\n"
        f"command = {_toml_list([sys.executable, str(FAKE_PANDOC)])}\n",
        encoding="utf-8",
    )
    return repo


@pytest.fixture
def tool_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    log = tmp_path / "tools.log"
    monkeypatch.setenv("FAKE_TOOL_LOG", str(log))
    return log
