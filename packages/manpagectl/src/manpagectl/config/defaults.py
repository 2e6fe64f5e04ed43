"""Built-in layout of the status-bar repository's manpage build."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": {
        "source_dir": "src",
        "generator_dir": "gen-manpage",
        "preface": "man/_preface.1",
        "postface": "man/_postface.1",
        "themes": "doc/themes.md",
        "blocks_markdown": "man/blocks.md",
        "blocks_fragment": "man/blocks.1",
        "themes_fragment": "man/themes.1",
        "output": "man/i3status-rs.1",
    },
    "extractor": {"command": ["cargo", "run", "--"]},
    "converter": {
        "command": ["pandoc"],
        "heading_option": "base-header-level",
        "themes_base_header_level": 2,
    },
    "cleanup": {"on_failure": False},
}
