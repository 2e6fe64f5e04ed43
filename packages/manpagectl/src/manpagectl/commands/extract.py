from __future__ import annotations

import argparse
from pathlib import Path

from ..cli.output import emit
from ..extract import write_blocks_markdown


def configure_extract_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    p = sub.add_parser("extract-blocks", help="write the block reference Markdown from a source tree")
    p.add_argument("source_tree", help="source tree containing blocks.rs and blocks/")
    p.add_argument("output", help="Markdown file to write")
    p.add_argument("--json", dest="sub_json", action="store_true", help="emit JSON output")


def run_extract_command(ns: argparse.Namespace) -> int:
    output = Path(ns.output)
    docs = write_blocks_markdown(Path(ns.source_tree), output)
    if ns.json or ns.sub_json or ns.format == "json":
        emit(
            {
                "schema_version": 1,
                "tool": "manpagectl",
                "status": "ok",
                "output": str(output),
                "blocks": [doc.name for doc in docs],
            },
            True,
        )
    elif ns.verbose:
        print(f"wrote {len(docs)} blocks to {output}")
    return 0
