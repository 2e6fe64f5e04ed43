"""Block reference extraction from the status-bar source tree.

Block names come from the `define_blocks!( ... )` invocation in
`<src>/blocks.rs`; each block's reference text is its module documentation
(`//!` lines) in `<src>/blocks/<name>.rs` or `<src>/blocks/<name>/mod.rs`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ..errors import ScriptError
from ..exit_codes import ERR_ARTIFACT

_INVOCATION_RE = re.compile(r"define_blocks!\s*\(")
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_HEADING_RE = re.compile(r"^(#{1,6})(\s|$)")
_DOC_PREFIX = "//!"
_FENCES = ("```", "~~~")
HEADING_SHIFT = 2


@dataclass(frozen=True)
class BlockDoc:
    name: str
    source: Path
    lines: tuple[str, ...]


def _invocation_body(text: str, origin: Path) -> str:
    match = _INVOCATION_RE.search(text)
    if match is None:
        raise ScriptError(f"{origin}: no define_blocks!( ... ) invocation", ERR_ARTIFACT, kind="missing_artifact")
    depth = 1
    for idx in range(match.end(), len(text)):
        ch = text[idx]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return text[match.end() : idx]
    raise ScriptError(f"{origin}: unterminated define_blocks!( ... )", ERR_ARTIFACT, kind="missing_artifact")


def declared_blocks(blocks_rs: Path) -> list[str]:
    """Names declared in ``blocks_rs``, in declaration order.

    Commented-out entries are skipped; `#[cfg(...)]` attributes are ignored so
    feature-gated blocks are still documented.
    """
    if not blocks_rs.is_file():
        raise ScriptError(f"missing block registry {blocks_rs}", ERR_ARTIFACT, kind="missing_artifact")
    body = _invocation_body(blocks_rs.read_text(encoding="utf-8"), blocks_rs)
    names: list[str] = []
    for raw in body.splitlines():
        line = raw.split("//", 1)[0].strip()
        line = re.sub(r"#\[[^\]]*\]", "", line).strip()
        for token in line.split(","):
            name = token.strip()
            if not name:
                continue
            if not _IDENT_RE.match(name):
                raise ScriptError(f"{blocks_rs}: unexpected block entry `{name}`", ERR_ARTIFACT, kind="missing_artifact")
            names.append(name)
    return names


def block_source(src_dir: Path, name: str) -> Path:
    for candidate in (src_dir / "blocks" / f"{name}.rs", src_dir / "blocks" / name / "mod.rs"):
        if candidate.is_file():
            return candidate
    raise ScriptError(f"block `{name}` has no source file under {src_dir / 'blocks'}", ERR_ARTIFACT, kind="missing_artifact")


def module_doc_lines(source: Path) -> list[str]:
    lines: list[str] = []
    for raw in source.read_text(encoding="utf-8").splitlines():
        stripped = raw.lstrip()
        if not stripped.startswith(_DOC_PREFIX):
            continue
        doc = stripped[len(_DOC_PREFIX) :]
        lines.append(doc[1:] if doc.startswith(" ") else doc)
    return lines


def shift_headings(lines: list[str], shift: int = HEADING_SHIFT) -> list[str]:
    out: list[str] = []
    fence: str | None = None
    for line in lines:
        marker = line.lstrip()[:3]
        if marker in _FENCES:
            if fence is None:
                fence = marker
            elif marker == fence:
                fence = None
            out.append(line)
            continue
        heading = _HEADING_RE.match(line)
        if fence is None and heading:
            level = min(len(heading.group(1)) + shift, 6)
            line = "#" * level + line[len(heading.group(1)) :]
        out.append(line)
    return out


def collect_block_docs(src_dir: Path) -> list[BlockDoc]:
    docs: list[BlockDoc] = []
    for name in declared_blocks(src_dir / "blocks.rs"):
        source = block_source(src_dir, name)
        lines = module_doc_lines(source)
        if not any(line.strip() for line in lines):
            raise ScriptError(f"block `{name}` has no module documentation in {source}", ERR_ARTIFACT, kind="missing_artifact")
        docs.append(BlockDoc(name=name, source=source, lines=tuple(lines)))
    return docs


def render_blocks_markdown(docs: list[BlockDoc]) -> str:
    sections: list[str] = []
    for doc in docs:
        body = "\n".join(shift_headings(list(doc.lines))).strip("\n")
        sections.append(f"## {doc.name}\n\n{body}\n")
    return "\n".join(sections)


def write_blocks_markdown(src_dir: Path, output: Path) -> list[BlockDoc]:
    docs = collect_block_docs(src_dir)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_blocks_markdown(docs), encoding="utf-8")
    return docs
