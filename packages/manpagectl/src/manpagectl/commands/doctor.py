from __future__ import annotations

import argparse
import platform
import shutil
import subprocess
import sys

from ..cli.output import build_base_payload, emit
from ..config.layout import ManpageLayout
from ..core.context import RunContext
from ..exit_codes import ERR_PREREQ


def _tool_version(cmd: list[str]) -> str:
    try:
        out = subprocess.check_output(cmd, stderr=subprocess.STDOUT, text=True).strip()
        return out.splitlines()[0] if out else "unknown"
    except (OSError, subprocess.CalledProcessError):
        return "missing"


def build_report(ctx: RunContext, layout: ManpageLayout) -> dict[str, object]:
    extractor = shutil.which(layout.extractor_command[0])
    converter = shutil.which(layout.converter_command[0])
    inputs = {layout.rel(path): path.is_file() for path in layout.static_inputs}
    checks = {
        "extractor_on_path": extractor is not None,
        "converter_on_path": converter is not None,
        "source_dir_exists": layout.source_dir.is_dir(),
        "generator_dir_exists": layout.generator_dir.is_dir(),
        "static_inputs_exist": all(inputs.values()),
    }
    return {
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "tools": {
            "extractor": extractor or "missing",
            "converter": converter or "missing",
            "converter_version": _tool_version([*layout.converter_command, "--version"]) if converter else "missing",
        },
        "layout": {
            "source_dir": layout.rel(layout.source_dir),
            "generator_dir": layout.rel(layout.generator_dir),
            "output": layout.rel(layout.default_output),
            "intermediates": [layout.rel(p) for p in layout.intermediates],
            "heading_option": layout.heading_option,
        },
        "inputs": inputs,
        "checks": checks,
    }


def configure_doctor_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    p = sub.add_parser("doctor", help="check tools, layout and static inputs")
    p.add_argument("--json", dest="sub_json", action="store_true", help="emit JSON output")


def run_doctor_command(ctx: RunContext, layout: ManpageLayout, ns: argparse.Namespace) -> int:
    report = build_report(ctx, layout)
    ok = all(report["checks"].values())  # type: ignore[union-attr]
    payload = {**build_base_payload(ctx, "ok" if ok else "fail"), **report}
    if ctx.as_json or ns.sub_json:
        emit(payload, True)
    elif not ctx.quiet:
        for name, passed in sorted(report["checks"].items()):  # type: ignore[union-attr]
            print(f"{'ok' if passed else 'FAIL'} {name}")
    return 0 if ok else ERR_PREREQ
