"""
Result Panel Widget.

Table display for one region with a caption and an inline error label.
"""

from __future__ import annotations
from typing import Dict, Optional

from PySide6.QtGui import QBrush, QColor
from PySide6.QtWidgets import QLabel, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget

from ...shared.dto import RegionSnapshot, TableView

# Style key -> (background, foreground)
STYLE_COLORS: Dict[str, tuple] = {
    "segment-high": ("#d4edda", "#155724"),
    "segment-medium": ("#fff3cd", "#856404"),
    "segment-low": ("#f8d7da", "#721c24"),
    "cohort-cell-high": ("#28a745", "#ffffff"),
    "cohort-cell-medium": ("#ffc107", "#212529"),
    "cohort-cell-low": ("#dc3545", "#ffffff"),
    "prediction-high": ("#d4edda", "#155724"),
    "prediction-medium": ("#fff3cd", "#856404"),
    "prediction-low": ("#f8d7da", "#721c24"),
    "muted": ("#f2f2f2", "#9e9e9e"),
}


class ResultPanel(QWidget):
    """Renders ``RegionSnapshot`` objects; stale snapshots are ignored."""

    def __init__(self, title: str = "", parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._generation = 0
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.lbl_title = QLabel(title, self)
        self.lbl_title.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.lbl_title)

        self.lbl_error = QLabel(self)
        self.lbl_error.setStyleSheet("color: #dc3545;")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.hide()
        layout.addWidget(self.lbl_error)

        self.table = QTableWidget(self)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        layout.addWidget(self.table, 1)

        self.lbl_caption = QLabel(self)
        self.lbl_caption.setWordWrap(True)
        layout.addWidget(self.lbl_caption)

    def show_loading(self, text: str = "Loading...") -> None:
        self.lbl_caption.setText(text)

    def show_snapshot(self, snap: RegionSnapshot) -> None:
        if snap.stale or snap.generation < self._generation:
            return
        self._generation = snap.generation
        if snap.view is not None:
            self._render_view(snap.view)
        if snap.error:
            self.lbl_error.setText(snap.error)
            self.lbl_error.show()
            if snap.view is None:
                self.lbl_caption.clear()
        else:
            self.lbl_error.clear()
            self.lbl_error.hide()

    def show_message(self, text: str) -> None:
        """Inline error outside the region flow (e.g. a crashed worker)."""
        self.lbl_error.setText(text)
        self.lbl_error.show()

    def _render_view(self, view: TableView) -> None:
        if view.title:
            self.lbl_title.setText(view.title)
        table = self.table
        table.clear()
        table.setColumnCount(len(view.columns))
        table.setHorizontalHeaderLabels(view.columns)
        table.setRowCount(len(view.rows))
        for i, row in enumerate(view.rows):
            for j, text in enumerate(row):
                item = QTableWidgetItem(text)
                colors = STYLE_COLORS.get(view.style_at(i, j) or "")
                if colors:
                    item.setBackground(QBrush(QColor(colors[0])))
                    item.setForeground(QBrush(QColor(colors[1])))
                table.setItem(i, j, item)
        table.resizeColumnsToContents()
        self.lbl_caption.setText(view.caption if view.rows else view.empty_message)
