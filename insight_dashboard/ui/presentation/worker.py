"""
Background Worker.

Runs one service call on the global ``QThreadPool`` and reports back to the
UI thread through queued signals.
"""
from __future__ import annotations
from typing import Any, Callable

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from ...domain.errors import ValidationError


class WorkerSignals(QObject):
    """Signals emitted by :class:`ServiceWorker`."""

    finished = Signal(object)  # call result (RegionSnapshot / ActionOutcome / list)
    invalid = Signal(str)      # ValidationError message; nothing was sent
    failed = Signal(str)       # unexpected exception text


class ServiceWorker(QRunnable):
    def __init__(self, fn: Callable[[], Any]):
        super().__init__()
        self._fn = fn
        self.signals = WorkerSignals()

    def run(self) -> None:
        try:
            result = self._fn()
        except ValidationError as e:
            self.signals.invalid.emit(str(e))
            return
        except Exception as e:  # noqa: BLE001 - surfaced to the operator
            self.signals.failed.emit(f"{type(e).__name__}: {e}")
            return
        self.signals.finished.emit(result)


def submit(fn: Callable[[], Any], on_finished: Callable[[Any], None], on_invalid: Callable[[str], None], on_failed: Callable[[str], None]) -> ServiceWorker:
    """Start ``fn`` on the pool and wire its signals to UI-thread slots."""
    worker = ServiceWorker(fn)
    worker.signals.finished.connect(on_finished)
    worker.signals.invalid.connect(on_invalid)
    worker.signals.failed.connect(on_failed)
    QThreadPool.globalInstance().start(worker)
    return worker
