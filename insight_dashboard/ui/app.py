"""
Application Entry Point.

Composition root for dependency injection and application bootstrap.
"""
from __future__ import annotations
import argparse
import os
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from ..infrastructure.http.transport import RequestsTransport
from ..infrastructure.insightaxis.client import InsightAxisClient
from .adapters.text_logger import TextLogger
from .application.services.dashboard_service import DashboardService
from .presentation.layouts.main_window import MainWindow
from .state import DisplayState


class DashboardApp:
    """InsightAxisDB Dashboard Application."""

    def __init__(self, base_url: Optional[str] = None):
        self._setup_qt()
        self._wire_dependencies(base_url)

    def _setup_qt(self) -> None:
        # Reduce noisy QPA plugin messages in some environments
        os.environ.setdefault("QT_LOGGING_RULES", "qt.qpa.*=false;qt.scenegraph.*=false")
        self._qt_app = QApplication(sys.argv[:1])

    def _wire_dependencies(self, base_url: Optional[str]) -> None:
        """Wire dependencies using dependency injection."""
        # Infrastructure layer
        self._transport = RequestsTransport(base_url=base_url)
        self._backend = InsightAxisClient(self._transport)
        self._logger = TextLogger()

        # Application layer
        self._service = DashboardService(self._backend, self._logger, DisplayState())

        # Presentation layer
        self._main_window = MainWindow(self._service, self._logger, base_url=self._transport.base_url)

    def run(self) -> int:
        self._main_window.show()
        self._main_window.refresh_all()
        return self._qt_app.exec()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(prog="insight-dashboard-ui", description="InsightAxisDB dashboard")
    parser.add_argument("--url", default=None, help="Backend base URL (default: INSIGHTAXIS_URL or http://localhost:8080)")
    ns = parser.parse_args(sys.argv[1:] if argv is None else argv)
    try:
        app = DashboardApp(ns.url)
        return app.run()
    except Exception as e:
        print(f"Application failed to start: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
