from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from .shared.dto import RegionSnapshot, TableView


@dataclass
class _Region:
    generation: int = 0
    view: Optional[TableView] = None
    error: Optional[str] = None


class DisplayState:
    """Per-region display state guarded by request generations.

    Each request takes a token from ``begin``. When it settles, ``commit`` or
    ``fail`` only apply if no newer request was issued for the same region in
    the meantime; otherwise a stale snapshot is returned and nothing changes.
    A failure keeps the previously rendered view.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._regions: Dict[str, _Region] = {}

    def _region(self, name: str) -> _Region:
        return self._regions.setdefault(name, _Region())

    def begin(self, region: str) -> int:
        with self._lock:
            r = self._region(region)
            r.generation += 1
            return r.generation

    def commit(self, region: str, token: int, view: TableView) -> RegionSnapshot:
        with self._lock:
            r = self._region(region)
            if token != r.generation:
                return RegionSnapshot(region, r.view, r.error, stale=True, generation=token)
            r.view = view
            r.error = None
            return RegionSnapshot(region, view, None, generation=token)

    def fail(self, region: str, token: int, message: str) -> RegionSnapshot:
        with self._lock:
            r = self._region(region)
            if token != r.generation:
                return RegionSnapshot(region, r.view, r.error, stale=True, generation=token)
            r.error = message
            return RegionSnapshot(region, r.view, message, generation=token)

    def snapshot(self, region: str) -> RegionSnapshot:
        with self._lock:
            r = self._region(region)
            return RegionSnapshot(region, r.view, r.error, generation=r.generation)
