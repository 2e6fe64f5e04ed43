"""Manpage assembly: extract, convert, add headers, concatenate, clean up."""

from .pipeline import AssembleReport, PipelineStep, assemble_manpage, build_plan
from .steps import concatenate, prepend_section_header, resolve_output_path, section_header

__all__ = [
    "AssembleReport",
    "PipelineStep",
    "assemble_manpage",
    "build_plan",
    "concatenate",
    "prepend_section_header",
    "resolve_output_path",
    "section_header",
]
