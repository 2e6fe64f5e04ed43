from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from ..config.layout import ManpageLayout
from ..core.context import RunContext
from ..core.logging import log_event
from ..errors import ScriptError
from . import steps


@dataclass(frozen=True)
class PipelineStep:
    name: str
    description: str
    action: Callable[[], object]
    argv: tuple[str, ...] | None = None

    def as_payload(self) -> dict[str, object]:
        row: dict[str, object] = {"name": self.name, "description": self.description}
        if self.argv is not None:
            row["argv"] = list(self.argv)
        return row


@dataclass
class StepRecord:
    name: str
    duration_ms: int


@dataclass
class AssembleReport:
    output: Path
    status: str = "ok"
    steps: list[StepRecord] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)
    failed_step: str | None = None

    def as_payload(self, layout: ManpageLayout) -> dict[str, object]:
        return {
            "output": str(self.output),
            "status": self.status,
            "steps": [{"name": s.name, "duration_ms": s.duration_ms} for s in self.steps],
            "removed": [layout.rel(p) for p in self.removed],
            "failed_step": self.failed_step,
        }


def build_plan(ctx: RunContext, layout: ManpageLayout, output: Path) -> list[PipelineStep]:
    """Return the build steps in execution order.

    Order is fixed: extract, convert both documents, add section headers,
    concatenate preface/blocks/themes/postface, remove intermediates.
    """
    extract = steps.extractor_argv(layout)
    convert_blocks = steps.converter_argv(layout, layout.blocks_markdown, layout.blocks_fragment)
    convert_themes = steps.converter_argv(
        layout, layout.themes_source, layout.themes_fragment, layout.themes_base_header_level
    )
    parts = (layout.preface, layout.blocks_fragment, layout.themes_fragment, layout.postface)

    def _extract() -> None:
        steps.run_external(ctx, "extract", extract, layout.generator_dir)
        steps.require_file("extract", layout.blocks_markdown)

    return [
        PipelineStep(
            "extract",
            f"generate {layout.rel(layout.blocks_markdown)} from {layout.rel(layout.source_dir)}",
            _extract,
            tuple(extract),
        ),
        PipelineStep(
            "convert-blocks",
            f"convert {layout.rel(layout.blocks_markdown)} to {layout.rel(layout.blocks_fragment)}",
            lambda: steps.run_external(ctx, "convert-blocks", convert_blocks, layout.repo_root),
            tuple(convert_blocks),
        ),
        PipelineStep(
            "convert-themes",
            f"convert {layout.rel(layout.themes_source)} to {layout.rel(layout.themes_fragment)}",
            lambda: steps.run_external(ctx, "convert-themes", convert_themes, layout.repo_root),
            tuple(convert_themes),
        ),
        PipelineStep(
            "header-blocks",
            f"prepend `.SH {steps.BLOCKS_TITLE}` to {layout.rel(layout.blocks_fragment)}",
            lambda: steps.prepend_section_header(layout.blocks_fragment, steps.BLOCKS_TITLE),
        ),
        PipelineStep(
            "header-themes",
            f"prepend `.SH {steps.THEMES_TITLE}` to {layout.rel(layout.themes_fragment)}",
            lambda: steps.prepend_section_header(layout.themes_fragment, steps.THEMES_TITLE),
        ),
        PipelineStep(
            "concatenate",
            f"write {' + '.join(layout.rel(p) for p in parts)} to {layout.rel(output)}",
            lambda: steps.concatenate(parts, output, layout.intermediates),
        ),
        PipelineStep(
            "cleanup",
            f"remove {', '.join(layout.rel(p) for p in layout.intermediates)}",
            lambda: steps.remove_files(layout.intermediates),
        ),
    ]


def assemble_manpage(
    ctx: RunContext,
    layout: ManpageLayout,
    output_arg: str | None = None,
    clean_on_failure: bool | None = None,
) -> AssembleReport:
    output = steps.resolve_output_path(output_arg, layout)
    steps.check_output_path(output, layout.intermediates)
    clean = layout.clean_on_failure if clean_on_failure is None else clean_on_failure
    report = AssembleReport(output=output)
    for step in build_plan(ctx, layout, output):
        if ctx.verbose and not ctx.quiet:
            log_event(ctx, "debug", "assemble", "step-start", step=step.name)
        started = time.monotonic()
        try:
            outcome = step.action()
        except ScriptError:
            report.status = "error"
            report.failed_step = step.name
            if clean:
                report.removed = steps.remove_files(layout.intermediates)
            raise
        report.steps.append(StepRecord(step.name, int((time.monotonic() - started) * 1000)))
        if step.name == "cleanup" and isinstance(outcome, list):
            report.removed = outcome
        if ctx.verbose and not ctx.quiet:
            log_event(ctx, "debug", "assemble", "step-done", step=step.name)
    return report
