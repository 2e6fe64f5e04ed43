"""Layout and configuration loading."""

from .layout import ManpageLayout
from .loader import load_config

__all__ = ["ManpageLayout", "load_config", "load_layout"]


def load_layout(repo_root, config_path=None) -> ManpageLayout:
    return ManpageLayout.from_config(repo_root, load_config(repo_root, config_path))
