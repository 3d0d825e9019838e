"""
처리되지 않은 예외를 파일로 저장하는 전역 예외 훅
"""
from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from types import TracebackType
from typing import Callable, Optional, Type

logger = logging.getLogger(__name__)

ExceptHook = Callable[[Type[BaseException], BaseException, Optional[TracebackType]], None]


def write_error_log(
    path: Path,
    exc_type: Type[BaseException],
    exc_value: BaseException,
    exc_traceback: Optional[TracebackType],
) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write("=" * 60 + "\n")
        f.write(f"Error type: {exc_type.__name__}\n")
        f.write(f"Message: {exc_value}\n\n")
        f.write("Traceback:\n")
        f.write("-" * 60 + "\n")
        traceback.print_exception(exc_type, exc_value, exc_traceback, file=f)
        f.write("=" * 60 + "\n")


def make_hook(error_log: Path) -> ExceptHook:
    def handle_exception(
        exc_type: Type[BaseException],
        exc_value: BaseException,
        exc_traceback: Optional[TracebackType],
    ) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        try:
            write_error_log(error_log, exc_type, exc_value, exc_traceback)
        except OSError as e:
            logger.warning("could not write error log %s: %s", error_log, e)
        logger.critical(
            "uncaught %s, details saved to %s",
            exc_type.__name__,
            error_log,
            exc_info=(exc_type, exc_value, exc_traceback),
        )

    return handle_exception


def install(error_log: Path) -> ExceptHook:
    """Route uncaught exceptions to ``error_log`` and the log. Returns the previous hook."""
    previous = sys.excepthook
    sys.excepthook = make_hook(error_log)
    return previous
