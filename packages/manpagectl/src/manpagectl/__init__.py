__version__ = "0.1.0"

__all__ = [
    "__version__",
    "assemble",
    "cli",
    "config",
    "core",
    "errors",
    "exit_codes",
    "extract",
]
