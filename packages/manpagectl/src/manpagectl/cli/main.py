from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..commands.assemble import configure_assemble_parser, run_assemble_command
from ..commands.doctor import configure_doctor_parser, run_doctor_command
from ..commands.extract import configure_extract_parser, run_extract_command
from ..config import load_layout
from ..core.context import RunContext
from ..core.logging import log_event
from ..errors import ScriptError
from ..exit_codes import ERR_INTERNAL
from .output import build_base_payload, emit, render_error, resolve_output_format

COMMANDS = {
    "assemble": run_assemble_command,
    "doctor": run_doctor_command,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="manpagectl", description="assemble the status-bar manpage")
    p.add_argument("--version", action="version", version=f"manpagectl {__version__}")
    p.add_argument("--json", action="store_true", help="emit JSON output")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--cwd", help="run against an explicit repository root")
    p.add_argument("--config", help="configuration file (default: manpage.toml or manpage.yaml at the root)")
    p.add_argument("--run-id", help="run identifier for log events")
    p.add_argument("--log-json", action="store_true", help="emit log events as JSON lines")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="log each pipeline step")
    vg.add_argument("--quiet", action="store_true", help="only emit child process diagnostics")
    sub = p.add_subparsers(dest="cmd", required=True)

    configure_assemble_parser(sub)
    configure_extract_parser(sub)
    configure_doctor_parser(sub)
    version_p = sub.add_parser("version", help="print version and git context")
    version_p.add_argument("--json", dest="sub_json", action="store_true", help="emit JSON output")
    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    fmt = resolve_output_format(cli_json=bool(ns.json or getattr(ns, "sub_json", False)), cli_format=ns.format)
    as_json = fmt == "json"
    try:
        if ns.cmd == "extract-blocks":
            # standalone generator: no repository context required
            return run_extract_command(ns)
        ctx = RunContext.from_args(ns.run_id, ns.cwd, fmt, ns.verbose, ns.quiet, ns.log_json)
        if ctx.verbose:
            log_event(ctx, "info", "cli", "start", cmd=ns.cmd, fmt=ctx.output_format)
        if ns.cmd == "version":
            emit({**build_base_payload(ctx), "version": __version__}, as_json)
            return 0
        layout = load_layout(ctx.repo_root, Path(ns.config).resolve() if ns.config else None)
        return COMMANDS[ns.cmd](ctx, layout, ns)
    except ScriptError as exc:
        if not ns.quiet:
            print(render_error(as_json=as_json, message=str(exc), code=exc.code, kind=exc.kind), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(render_error(as_json=as_json, message=f"internal error: {exc}", code=ERR_INTERNAL), file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
