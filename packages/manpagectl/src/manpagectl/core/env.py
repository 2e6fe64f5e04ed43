"""Centralized environment variable helpers."""

from __future__ import annotations

import os

EXTRACTOR_ENV = "MANPAGECTL_EXTRACTOR"
CONVERTER_ENV = "MANPAGECTL_CONVERTER"
RUN_ID_ENV = "RUN_ID"


def getenv(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)
