"""Command-line entry points; ``stripcheck.cli.main`` is imported on first use."""

from __future__ import annotations

from importlib import import_module

__all__ = ["build_parser", "main"]


def build_parser():
    return import_module("stripcheck.cli.main").build_parser()


def main(argv: list[str] | None = None) -> int:
    return import_module("stripcheck.cli.main").main(argv)
