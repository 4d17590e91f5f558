__version__ = "0.1.0"

__all__ = [
    "__version__",
    "artifacts",
    "builder",
    "cargo_home",
    "cli",
    "config",
    "core",
    "scanner",
    "verify",
]
