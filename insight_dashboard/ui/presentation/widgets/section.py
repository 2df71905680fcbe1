"""
Section Widget Base.

Shared plumbing for dashboard tabs: background calls, region rendering and
user pickers.
"""

from __future__ import annotations
from typing import Any, Callable, List, Optional, Set, Tuple

from PySide6.QtWidgets import QComboBox, QMessageBox, QWidget

from ...application.interfaces.logger import ILogger
from ...application.services.dashboard_service import DashboardService
from ...shared.dto import ActionOutcome
from ..worker import ServiceWorker, submit
from .result_panel import ResultPanel


class SectionWidget(QWidget):
    """Base class for a tab that talks to :class:`DashboardService`."""

    def __init__(self, service: DashboardService, logger: ILogger, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._service = service
        self._logger = logger
        self._workers: Set[ServiceWorker] = set()

    def submit_call(self, fn: Callable[[], Any], on_done: Callable[[Any], None], panel: Optional[ResultPanel] = None) -> None:
        holder: List[ServiceWorker] = []

        def _release() -> None:
            for w in holder:
                self._workers.discard(w)

        def _done(result: Any) -> None:
            _release()
            on_done(result)

        def _invalid(message: str) -> None:
            _release()
            if panel is not None:
                panel.show_loading("")
            QMessageBox.warning(self, "Invalid Input", message)

        def _failed(message: str) -> None:
            _release()
            self._logger.error(message)
            if panel is not None:
                panel.show_message(message)

        worker = submit(fn, _done, _invalid, _failed)
        holder.append(worker)
        self._workers.add(worker)

    def render(self, panel: ResultPanel, fn: Callable[[], Any]) -> None:
        """Run a region call and render its snapshot into ``panel``."""
        panel.show_loading()
        self.submit_call(fn, panel.show_snapshot, panel)

    def act(self, fn: Callable[[], ActionOutcome], after: Optional[Callable[[], None]] = None) -> None:
        """Run a one-shot action and report its outcome in a message box."""

        def _done(outcome: ActionOutcome) -> None:
            if outcome.ok:
                QMessageBox.information(self, "Done", outcome.message)
                if after is not None:
                    after()
            else:
                QMessageBox.critical(self, "Request Failed", outcome.message)

        self.submit_call(fn, _done)

    def fill_users(self, combo: QComboBox) -> None:
        """Refresh a user picker, keeping the current selection when possible."""

        def _done(choices: List[Tuple[str, str]]) -> None:
            current = combo.currentData()
            combo.clear()
            combo.addItem("Select a user", None)
            for user_id, label in choices:
                combo.addItem(label, user_id)
            idx = combo.findData(current)
            combo.setCurrentIndex(idx if idx >= 0 else 0)

        self.submit_call(self._service.user_choices, _done)

    @staticmethod
    def selected_user(combo: QComboBox) -> str:
        data = combo.currentData()
        return str(data) if data else ""
