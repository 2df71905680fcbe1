"""
Text Logger Adapter.

Implementation of ILogger that writes to the Logs dock and mirrors every
line to the package logger.
"""

from __future__ import annotations
import contextlib
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from ...infrastructure.logging import get_logger
from ..application.interfaces.logger import ILogger

if TYPE_CHECKING:
    from PySide6.QtWidgets import QTextEdit

_LEVELS = {"INFO": logging.INFO, "WARN": logging.WARNING, "ERROR": logging.ERROR}


class TextLogger(ILogger):
    """Logger that writes to a QTextEdit widget."""

    def __init__(self, text_widget: Optional["QTextEdit"] = None):
        self._text_widget = text_widget
        self._mirror = get_logger("insight_dashboard.ui")

    def set_widget(self, text_widget: "QTextEdit") -> None:
        self._text_widget = text_widget

    def info(self, message: str) -> None:
        self._log("INFO", message)

    def warning(self, message: str) -> None:
        self._log("WARN", message)

    def error(self, message: str) -> None:
        self._log("ERROR", message)

    def _log(self, level: str, message: str) -> None:
        self._mirror.log(_LEVELS[level], "%s", message)
        if not self._text_widget:
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        # Widget may already be deleted on shutdown.
        with contextlib.suppress(RuntimeError):
            self._text_widget.append(f"[{timestamp}] {level}: {message}")
