from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ..errors import ScriptError
from ..exit_codes import ERR_PREREQ
from .clock import utc_stamp
from .env import RUN_ID_ENV, getenv
from .git import read_git_sha
from .repo_root import find_repo_root

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    repo_root: Path
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool
    git_sha: str

    @property
    def as_json(self) -> bool:
        return self.output_format == "json"

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        cwd: str | None = None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
    ) -> "RunContext":
        if cwd:
            repo_root = Path(cwd).resolve()
            if not repo_root.is_dir():
                raise ScriptError(f"--cwd is not a directory: {repo_root}", ERR_PREREQ, kind="prereq")
        else:
            try:
                repo_root = find_repo_root()
            except RuntimeError as exc:
                raise ScriptError(f"{exc}; pass --cwd or add manpage.toml", ERR_PREREQ, kind="prereq") from exc
        # quiet runs never show the run id
        git_sha = "unknown" if quiet else read_git_sha(repo_root)
        default_run = f"manpage-{utc_stamp()}-{git_sha}"
        return cls(
            run_id=run_id or getenv(RUN_ID_ENV) or default_run,
            repo_root=repo_root,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
            git_sha=git_sha,
        )
