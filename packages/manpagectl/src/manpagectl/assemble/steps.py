"""Individual operations of the manpage build.

Each function does one thing to the filesystem or runs one external program and
raises `ScriptError` when it cannot; ordering lives in `pipeline`.
"""

from __future__ import annotations

import shlex
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from ..config.layout import HEADING_OPTIONS, ManpageLayout
from ..core.process import run_command
from ..errors import ScriptError
from ..exit_codes import ERR_ARTIFACT, ERR_CONFIG, ERR_NOT_FOUND, from_returncode

if TYPE_CHECKING:
    from ..core.context import RunContext

BLOCKS_TITLE = "BLOCKS"
THEMES_TITLE = "THEMES"
MAN_FORMAT = "man"


def section_header(title: str) -> bytes:
    # `sed '1i .SH TITLE\n'` inserts the directive and one empty line
    return f".SH {title}\n\n".encode("utf-8")


def resolve_output_path(arg: str | None, layout: ManpageLayout) -> Path:
    if arg:
        return Path(arg).expanduser().resolve()
    return layout.default_output


def heading_argument(option: str, base_header_level: int) -> str:
    if option == "base-header-level":
        return f"--base-header-level={base_header_level}"
    if option == "shift-heading-level-by":
        return f"--shift-heading-level-by={base_header_level - 1}"
    raise ScriptError(
        f"unsupported heading option `{option}`; expected one of {', '.join(HEADING_OPTIONS)}",
        ERR_CONFIG,
        kind="invalid_config",
    )


def extractor_argv(layout: ManpageLayout) -> list[str]:
    return [*layout.extractor_command, str(layout.source_dir), str(layout.blocks_markdown)]


def converter_argv(layout: ManpageLayout, source: Path, target: Path, base_header_level: int | None = None) -> list[str]:
    argv = [*layout.converter_command, "-o", str(target), "-t", MAN_FORMAT]
    if base_header_level is not None:
        argv.append(heading_argument(layout.heading_option, base_header_level))
    argv.append(str(source))
    return argv


def run_external(ctx: RunContext, step: str, argv: list[str], cwd: Path) -> int:
    """Run one external step; any non-zero status aborts the build."""
    if not cwd.is_dir():
        raise ScriptError(f"{step}: working directory does not exist: {cwd}", ERR_ARTIFACT, kind="missing_artifact")
    result = run_command(argv, cwd, ctx=ctx)
    if result.ok:
        return result.duration_ms
    message = f"{step}: `{shlex.join(argv)}` exited with status {result.code}"
    if result.code == ERR_NOT_FOUND and result.stderr:
        raise ScriptError(f"{message}: {result.stderr}", ERR_NOT_FOUND, kind="missing_tool")
    raise ScriptError(message, from_returncode(result.code), kind="step_failed")


def require_file(step: str, path: Path) -> None:
    if not path.is_file():
        raise ScriptError(f"{step}: missing file {path}", ERR_ARTIFACT, kind="missing_artifact")


def prepend_section_header(path: Path, title: str) -> None:
    step = f"header-{title.lower()}"
    require_file(step, path)
    try:
        body = path.read_bytes()
        path.write_bytes(section_header(title) + body)
    except OSError as exc:
        raise ScriptError(f"{step}: cannot rewrite {path}: {exc.strerror}", ERR_ARTIFACT, kind="missing_artifact") from exc


def concatenate(parts: Iterable[Path], output: Path, reserved: Iterable[Path] = ()) -> int:
    """Write ``parts`` back to back into ``output``; returns bytes written.

    ``reserved`` paths (intermediates removed after the build) may not be the
    output either.
    """
    sources = list(parts)
    check_output_path(output, reserved)
    for part in sources:
        require_file("concatenate", part)
        if part.resolve() == output.resolve():
            raise ScriptError(f"concatenate: input file is output file: {output}", ERR_ARTIFACT, kind="missing_artifact")
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        written = 0
        with output.open("wb") as sink:
            for part in sources:
                with part.open("rb") as src:
                    shutil.copyfileobj(src, sink)
                written += part.stat().st_size
    except OSError as exc:
        raise ScriptError(f"concatenate: cannot write {output}: {exc.strerror}", ERR_ARTIFACT, kind="missing_artifact") from exc
    return written


def check_output_path(output: Path, reserved: Iterable[Path]) -> None:
    target = output.resolve()
    for path in reserved:
        if path.resolve() == target:
            raise ScriptError(
                f"output {output} is an intermediate file removed by the build", ERR_ARTIFACT, kind="missing_artifact"
            )


def remove_files(paths: Iterable[Path]) -> list[Path]:
    removed: list[Path] = []
    for path in paths:
        if not path.is_file():
            continue
        try:
            path.unlink()
        except OSError as exc:
            raise ScriptError(f"cleanup: cannot remove {path}: {exc.strerror}", ERR_ARTIFACT, kind="missing_artifact") from exc
        removed.append(path)
    return removed
