"""Progress and warning output, written to stderr."""

from __future__ import annotations

import sys


def info(message: str = "", quiet: bool = False) -> None:
    if not quiet:
        print(message, file=sys.stderr)


def warn(message: str) -> None:
    print(f"⚠ {message}", file=sys.stderr)


def fail(message: str) -> None:
    print(f"✗ {message}", file=sys.stderr)


def banner(title: str, quiet: bool = False) -> None:
    info("=" * 50, quiet)
    info(title, quiet)
    info("=" * 50, quiet)
