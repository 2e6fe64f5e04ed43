from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

HEADING_OPTIONS = ("base-header-level", "shift-heading-level-by")


@dataclass(frozen=True)
class ManpageLayout:
    repo_root: Path
    source_dir: Path
    generator_dir: Path
    preface: Path
    postface: Path
    themes_source: Path
    blocks_markdown: Path
    blocks_fragment: Path
    themes_fragment: Path
    default_output: Path
    extractor_command: tuple[str, ...]
    converter_command: tuple[str, ...]
    heading_option: str = "base-header-level"
    themes_base_header_level: int = 2
    clean_on_failure: bool = False

    @property
    def intermediates(self) -> tuple[Path, Path, Path]:
        return (self.blocks_markdown, self.blocks_fragment, self.themes_fragment)

    @property
    def static_inputs(self) -> tuple[Path, Path, Path]:
        return (self.preface, self.themes_source, self.postface)

    def rel(self, path: Path) -> str:
        try:
            return path.relative_to(self.repo_root).as_posix()
        except ValueError:
            return str(path)

    @classmethod
    def from_config(cls, repo_root: Path, config: dict[str, Any]) -> "ManpageLayout":
        root = repo_root.resolve()
        paths = config["paths"]

        def resolve(key: str) -> Path:
            raw = Path(paths[key]).expanduser()
            return raw if raw.is_absolute() else root / raw

        converter = config["converter"]
        return cls(
            repo_root=root,
            source_dir=resolve("source_dir"),
            generator_dir=resolve("generator_dir"),
            preface=resolve("preface"),
            postface=resolve("postface"),
            themes_source=resolve("themes"),
            blocks_markdown=resolve("blocks_markdown"),
            blocks_fragment=resolve("blocks_fragment"),
            themes_fragment=resolve("themes_fragment"),
            default_output=resolve("output"),
            extractor_command=tuple(config["extractor"]["command"]),
            converter_command=tuple(converter["command"]),
            heading_option=converter["heading_option"],
            themes_base_header_level=int(converter["themes_base_header_level"]),
            clean_on_failure=bool(config["cleanup"]["on_failure"]),
        )
