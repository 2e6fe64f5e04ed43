"""Drop-in replacement for `man/generate.sh`.

Usage: ``generate-manpage [OUTPUT]``. No flags. When an extractor or converter
fails, its own diagnostics are the only output.
"""

from __future__ import annotations

import sys

from ..assemble import assemble_manpage
from ..config import load_layout
from ..core.context import RunContext
from ..errors import ScriptError
from ..exit_codes import ERR_INTERNAL

SILENT_KINDS = {"step_failed"}


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    output = args[0] if args else None
    try:
        ctx = RunContext.from_args(None, quiet=True)
        assemble_manpage(ctx, load_layout(ctx.repo_root), output)
    except ScriptError as exc:
        if exc.kind not in SILENT_KINDS:
            print(f"generate-manpage: {exc}", file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(f"generate-manpage: internal error: {exc}", file=sys.stderr)
        return ERR_INTERNAL
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
