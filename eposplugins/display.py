"""Coloured console messages for the different kinds of progress output."""

from __future__ import annotations

import sys

_RESET = "\033[0m"
_RED = "\033[31m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_BLUE = "\033[34m"
_CYAN = "\033[36m"


def _emit(color: str, label: str, fmt: str, args: tuple) -> None:
    message = fmt % args if args else fmt
    sys.stdout.write(f"{color}{label}{message}{_RESET}\n")
    sys.stdout.flush()


def error(fmt: str, *args) -> None:
    """Print a red error message."""
    _emit(_RED, "[ERROR]    ", fmt, args)


def warn(fmt: str, *args) -> None:
    """Print a yellow warning message."""
    _emit(_YELLOW, "[WARNING]  ", fmt, args)


def info(fmt: str, *args) -> None:
    """Print a blue informational message."""
    _emit(_BLUE, "[INFO]     ", fmt, args)


def step(fmt: str, *args) -> None:
    """Print a cyan message announcing a step of the process."""
    _emit(_CYAN, "[STEP]     ", fmt, args)


def done(fmt: str, *args) -> None:
    """Print a green message reporting a completed step."""
    _emit(_GREEN, "[DONE]     ", fmt, args)