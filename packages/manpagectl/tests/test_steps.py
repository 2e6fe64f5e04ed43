from __future__ import annotations

from pathlib import Path

import pytest

from manpagectl.assemble import steps
from manpagectl.config import load_layout
from manpagectl.errors import ScriptError
from manpagectl.exit_codes import ERR_ARTIFACT, ERR_CONFIG


def test_section_header_matches_sed_insert() -> None:
    assert steps.section_header("BLOCKS") == b".SH BLOCKS\n\n"
    assert steps.section_header("THEMES") == b".SH THEMES\n\n"


def test_prepend_section_header_keeps_body(tmp_path: Path) -> None:
    frag = tmp_path / "blocks.1"
    frag.write_bytes(b".SS time\nbody\n")
    steps.prepend_section_header(frag, "BLOCKS")
    assert frag.read_bytes() == b".SH BLOCKS\n\n.SS time\nbody\n"


def test_prepend_section_header_on_empty_fragment(tmp_path: Path) -> None:
    frag = tmp_path / "themes.1"
    frag.write_bytes(b"")
    steps.prepend_section_header(frag, "THEMES")
    assert frag.read_bytes() == b".SH THEMES\n\n"


def test_prepend_section_header_missing_fragment(tmp_path: Path) -> None:
    with pytest.raises(ScriptError) as err:
        steps.prepend_section_header(tmp_path / "absent.1", "BLOCKS")
    assert err.value.code == ERR_ARTIFACT
    assert err.value.kind == "missing_artifact"


def test_concatenate_preserves_order_and_bytes(tmp_path: Path) -> None:
    parts = []
    for name, data in (("a", b"pre\n"), ("b", b"\x00blocks"), ("c", b""), ("d", b"post\n")):
        path = tmp_path / name
        path.write_bytes(data)
        parts.append(path)
    out = tmp_path / "nested/out.1"
    written = steps.concatenate(parts, out)
    assert out.read_bytes() == b"pre\n\x00blockspost\n"
    assert written == len(out.read_bytes())


def test_concatenate_overwrites_existing_output(tmp_path: Path) -> None:
    part = tmp_path / "part"
    part.write_bytes(b"new\n")
    out = tmp_path / "out.1"
    out.write_bytes(b"old content that is longer\n")
    steps.concatenate([part], out)
    assert out.read_bytes() == b"new\n"


def test_concatenate_checks_inputs_before_truncating_output(tmp_path: Path) -> None:
    out = tmp_path / "out.1"
    out.write_bytes(b"previous\n")
    with pytest.raises(ScriptError):
        steps.concatenate([tmp_path / "missing"], out)
    assert out.read_bytes() == b"previous\n"


def test_concatenate_rejects_input_as_output(tmp_path: Path) -> None:
    part = tmp_path / "part"
    part.write_bytes(b"x")
    with pytest.raises(ScriptError, match="input file is output file"):
        steps.concatenate([part], part)
    assert part.read_bytes() == b"x"


def test_remove_files_reports_only_existing(tmp_path: Path) -> None:
    present = tmp_path / "present"
    present.write_text("x", encoding="utf-8")
    removed = steps.remove_files([present, tmp_path / "absent"])
    assert removed == [present]
    assert not present.exists()


def test_resolve_output_path_default_and_explicit(manpage_repo: Path, tmp_path: Path) -> None:
    layout = load_layout(manpage_repo)
    assert steps.resolve_output_path(None, layout) == manpage_repo.resolve() / "man/i3status-rs.1"
    assert steps.resolve_output_path("", layout) == layout.default_output
    target = tmp_path / "custom.1"
    assert steps.resolve_output_path(str(target), layout) == target.resolve()


def test_converter_argv_matches_original_invocation(manpage_repo: Path) -> None:
    layout = load_layout(manpage_repo)
    argv = steps.converter_argv(layout, layout.themes_source, layout.themes_fragment, 2)
    assert argv[-6:] == ["-o", str(layout.themes_fragment), "-t", "man", "--base-header-level=2", str(layout.themes_source)]
    blocks = steps.converter_argv(layout, layout.blocks_markdown, layout.blocks_fragment)
    assert blocks[-5:] == ["-o", str(layout.blocks_fragment), "-t", "man", str(layout.blocks_markdown)]


def test_heading_argument_styles() -> None:
    assert steps.heading_argument("base-header-level", 2) == "--base-header-level=2"
    assert steps.heading_argument("shift-heading-level-by", 2) == "--shift-heading-level-by=1"
    with pytest.raises(ScriptError) as err:
        steps.heading_argument("level", 2)
    assert err.value.code == ERR_CONFIG


def test_extractor_argv_passes_source_and_markdown(manpage_repo: Path) -> None:
    layout = load_layout(manpage_repo)
    argv = steps.extractor_argv(layout)
    assert argv[-2:] == [str(manpage_repo.resolve() / "src"), str(manpage_repo.resolve() / "man/blocks.md")]


def test_concatenate_rejects_reserved_output(tmp_path: Path) -> None:
    part = tmp_path / "part"
    part.write_bytes(b"x")
    reserved = tmp_path / "blocks.md"
    with pytest.raises(ScriptError, match="intermediate file") as err:
        steps.concatenate([part], reserved, [reserved])
    assert err.value.code == ERR_ARTIFACT
    assert not reserved.exists()


def test_prepend_section_header_wraps_write_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    frag = tmp_path / "blocks.1"
    frag.write_bytes(b"body\n")

    def _fail(self: Path, data: bytes) -> int:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(Path, "write_bytes", _fail)
    with pytest.raises(ScriptError, match="header-blocks: cannot rewrite") as err:
        steps.prepend_section_header(frag, "BLOCKS")
    assert err.value.code == ERR_ARTIFACT


def test_remove_files_wraps_unlink_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    present = tmp_path / "present"
    present.write_text("x", encoding="utf-8")

    def _fail(self: Path, missing_ok: bool = False) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "unlink", _fail)
    with pytest.raises(ScriptError, match="cleanup: cannot remove") as err:
        steps.remove_files([present])
    assert err.value.kind == "missing_artifact"
