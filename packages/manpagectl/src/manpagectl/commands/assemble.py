from __future__ import annotations

import argparse

from ..assemble import assemble_manpage, build_plan, resolve_output_path
from ..cli.output import build_base_payload, emit
from ..config.layout import ManpageLayout
from ..core.context import RunContext


def configure_assemble_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    p = sub.add_parser("assemble", help="build the manpage from preface, block reference, themes and postface")
    p.add_argument("output", nargs="?", default=None, help="output path (default: configured man/i3status-rs.1)")
    p.add_argument("--dry-run", action="store_true", help="print the planned steps without running them")
    p.add_argument(
        "--clean-on-failure",
        action="store_true",
        default=None,
        help="remove intermediates when a step fails (default: leave them for inspection)",
    )
    p.add_argument("--json", dest="sub_json", action="store_true", help="emit JSON output")


def run_assemble_command(ctx: RunContext, layout: ManpageLayout, ns: argparse.Namespace) -> int:
    as_json = ctx.as_json or ns.sub_json
    if ns.dry_run:
        output = resolve_output_path(ns.output, layout)
        plan = build_plan(ctx, layout, output)
        if as_json:
            emit(
                {**build_base_payload(ctx), "dry_run": True, "output": str(output), "steps": [s.as_payload() for s in plan]},
                True,
            )
        elif not ctx.quiet:
            for idx, step in enumerate(plan, start=1):
                print(f"{idx}. {step.name}: {step.description}")
                if step.argv is not None:
                    print(f"   $ {' '.join(step.argv)}")
        return 0
    report = assemble_manpage(ctx, layout, ns.output, ns.clean_on_failure)
    if as_json:
        emit({**build_base_payload(ctx, report.status), **report.as_payload(layout)}, True)
    elif not ctx.quiet:
        print(f"generated {report.output}")
    return 0
