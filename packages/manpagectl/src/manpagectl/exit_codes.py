from __future__ import annotations

ERR_CONFIG = 10
ERR_PREREQ = 11
ERR_ARTIFACT = 13
ERR_INTERNAL = 99
# shell conventions for a program that could not be started / was killed
ERR_NOT_FOUND = 127
SIGNAL_BASE = 128


def from_returncode(returncode: int) -> int:
    """Map a child's ``returncode`` to the status a shell would exit with."""
    if returncode < 0:
        return SIGNAL_BASE + (-returncode)
    return returncode
