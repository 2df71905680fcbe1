"""
Logger Interface.

Contract for the operator-visible activity log.
"""
from __future__ import annotations
from abc import ABC, abstractmethod


class ILogger(ABC):
    """Interface for dashboard activity logging."""

    @abstractmethod
    def info(self, message: str) -> None:
        ...

    @abstractmethod
    def warning(self, message: str) -> None:
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        """Log a failed request or action."""
        ...
