"""CLI payload output helpers."""

from __future__ import annotations

from ..core.serialize import dumps_json

TOOL = "manpagectl"


def emit(payload: dict[str, object], as_json: bool) -> None:
    print(dumps_json(payload, pretty=not as_json))


def build_base_payload(ctx, status: str = "ok") -> dict[str, object]:
    return {
        "schema_version": 1,
        "tool": TOOL,
        "status": status,
        "run_id": ctx.run_id,
        "repo_root": str(ctx.repo_root),
        "format": ctx.output_format,
        "git_sha": ctx.git_sha,
    }


def resolve_output_format(*, cli_json: bool, cli_format: str | None) -> str:
    if cli_json:
        return "json"
    return cli_format or "text"


def render_error(*, as_json: bool, message: str, code: int, kind: str = "generic_error") -> str:
    if as_json:
        return dumps_json(
            {
                "schema_name": "manpagectl.error.v1",
                "schema_version": 1,
                "tool": TOOL,
                "status": "error",
                "errors": [{"code": code, "kind": kind, "message": message}],
            },
            pretty=False,
        )
    return message
