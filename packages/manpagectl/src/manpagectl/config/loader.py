from __future__ import annotations

import copy
import json
import shlex
from pathlib import Path
from typing import Any

import jsonschema
import yaml

try:
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

from ..core.env import CONVERTER_ENV, EXTRACTOR_ENV, getenv
from ..core.repo_root import CONFIG_NAMES
from ..errors import ScriptError
from ..exit_codes import ERR_CONFIG
from .defaults import DEFAULT_CONFIG

SCHEMA_PATH = Path(__file__).resolve().with_name("manpage-config.schema.json")


def load_schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def find_config_file(repo_root: Path) -> Path | None:
    for name in CONFIG_NAMES:
        candidate = repo_root / name
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScriptError(f"unable to read config {path}: {exc.strerror}", ERR_CONFIG, kind="invalid_config") from exc
    try:
        if path.suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = tomllib.loads(text)
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ScriptError(f"{path}: {exc}", ERR_CONFIG, kind="invalid_config") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ScriptError(f"{path}: root must be mapping", ERR_CONFIG, kind="invalid_config")
    return data


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def validate_config(payload: dict[str, Any], source: str) -> None:
    try:
        jsonschema.validate(payload, load_schema())
    except jsonschema.ValidationError as exc:
        where = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise ScriptError(f"{source}: {where}: {exc.message}", ERR_CONFIG, kind="invalid_config") from exc


def _env_command(name: str) -> list[str] | None:
    raw = getenv(name)
    if raw is None or not raw.strip():
        return None
    return shlex.split(raw)


def load_config(repo_root: Path, config_path: Path | None = None) -> dict[str, Any]:
    """Return the effective configuration for ``repo_root``.

    Layers, lowest first: built-in defaults, the config file (explicit
    ``config_path`` or ``manpage.toml``/``manpage.yaml`` at the root), then
    ``MANPAGECTL_EXTRACTOR``/``MANPAGECTL_CONVERTER``.
    """
    path = config_path or find_config_file(repo_root)
    source = "<defaults>"
    overrides: dict[str, Any] = {}
    if path is not None:
        if not path.is_file():
            raise ScriptError(f"config file not found: {path}", ERR_CONFIG, kind="invalid_config")
        source = str(path)
        overrides = read_config_file(path)
        validate_config(overrides, source)
    merged = merge_config(DEFAULT_CONFIG, overrides)
    for env_name, section in ((EXTRACTOR_ENV, "extractor"), (CONVERTER_ENV, "converter")):
        command = _env_command(env_name)
        if command is not None:
            merged[section]["command"] = command
    validate_config(merged, source)
    return merged
