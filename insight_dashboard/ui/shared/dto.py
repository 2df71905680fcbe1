"""
View Models.

Immutable, Qt-free structures handed from the service layer to widgets.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class TableView:
    """Tabular content for one display region.

    ``styles`` mirrors ``rows`` cell by cell with a style key (for example
    ``"segment-high"`` or ``"muted"``) or None for default rendering.
    """
    title: str
    columns: List[str]
    rows: List[List[str]]
    styles: List[List[Optional[str]]] = field(default_factory=list)
    caption: str = ""
    empty_message: str = ""

    def style_at(self, row: int, col: int) -> Optional[str]:
        try:
            return self.styles[row][col]
        except IndexError:
            return None


@dataclass(frozen=True)
class RegionSnapshot:
    """What a region should show after a request settles.

    Fields:
        region: Display region key.
        view: Last successfully rendered view (kept across failures).
        error: Inline error message from the latest request, if it failed.
        stale: True when a newer request for the region superseded this one;
            widgets must ignore stale snapshots.
        generation: Request generation this snapshot belongs to.
    """
    region: str
    view: Optional[TableView]
    error: Optional[str] = None
    stale: bool = False
    generation: int = 0


@dataclass(frozen=True)
class ActionOutcome:
    """Result of a one-shot action (create/delete/save)."""
    ok: bool
    message: str
