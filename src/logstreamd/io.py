"""Console helpers for command output."""

from __future__ import annotations

import sys
from typing import NoReturn

from . import log


def say(message: str) -> None:
    """Print a normal message to stdout.

    Args:
        message: Text to print.

    Example:
        >>> say("Hello")
        Hello
    """
    print(message)


def die(exc: BaseException, code: int = 1) -> NoReturn:
    """Report an error and exit.

    Args:
        exc: Failure to report; its recovery hint is included when present.
        code: Exit code to use.

    Returns:
        None. Exits the process via ``sys.exit``.
    """
    log.report(exc)
    sys.exit(code)
