"""
Users Widget.

Browse users, inspect a user's events, and create or delete users.
"""

from __future__ import annotations
from typing import Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ....application.dto import CreateUserRequest
from ...application.interfaces.logger import ILogger
from ...application.services.dashboard_service import DashboardService
from .result_panel import ResultPanel
from .section import SectionWidget


class UsersWidget(SectionWidget):
    """Users tab."""

    # Emitted after a user was created or deleted
    users_changed = Signal()

    def __init__(self, service: DashboardService, logger: ILogger, parent: Optional[QWidget] = None):
        super().__init__(service, logger, parent)
        self._build_ui()
        self._connect_signals()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        row = QHBoxLayout()
        self.btn_refresh = QPushButton("Load Users", self)
        row.addWidget(self.btn_refresh)
        self.txt_user_id = QLineEdit(self)
        self.txt_user_id.setPlaceholderText("User id")
        row.addWidget(self.txt_user_id, 1)
        self.btn_events = QPushButton("Show Events", self)
        row.addWidget(self.btn_events)
        self.btn_delete = QPushButton("Delete User", self)
        row.addWidget(self.btn_delete)
        layout.addLayout(row)

        self.users_panel = ResultPanel("Users", self)
        layout.addWidget(self.users_panel, 2)
        self.events_panel = ResultPanel("User Events", self)
        layout.addWidget(self.events_panel, 1)

        box = QGroupBox("Create User", self)
        form = QFormLayout(box)
        self.txt_new_id = QLineEdit(box)
        self.txt_name = QLineEdit(box)
        self.txt_email = QLineEdit(box)
        self.txt_country = QLineEdit(box)
        self.txt_age = QLineEdit(box)
        form.addRow("User ID:", self.txt_new_id)
        form.addRow("Name:", self.txt_name)
        form.addRow("Email:", self.txt_email)
        form.addRow("Country:", self.txt_country)
        form.addRow("Age:", self.txt_age)
        self.btn_create = QPushButton("Create User", box)
        form.addRow(self.btn_create)
        layout.addWidget(box)

    def _connect_signals(self) -> None:
        self.btn_refresh.clicked.connect(self.refresh)
        self.btn_events.clicked.connect(self._on_events_clicked)
        self.btn_delete.clicked.connect(self._on_delete_clicked)
        self.btn_create.clicked.connect(self._on_create_clicked)
        self.users_panel.table.cellDoubleClicked.connect(self._on_user_double_clicked)

    def refresh(self) -> None:
        self.render(self.users_panel, self._service.load_users)

    def _on_events_clicked(self) -> None:
        user_id = self.txt_user_id.text()
        self.render(self.events_panel, lambda: self._service.show_user_events(user_id))

    def _on_user_double_clicked(self, row: int, _col: int) -> None:
        item = self.users_panel.table.item(row, 0)
        if item is None:
            return
        self.txt_user_id.setText(item.text())
        self._on_events_clicked()

    def _on_delete_clicked(self) -> None:
        user_id = self.txt_user_id.text().strip()
        if not user_id:
            QMessageBox.warning(self, "Invalid Input", "User id is required")
            return
        res = QMessageBox.question(self, "Delete User", f"Delete user '{user_id}'?")
        if res != QMessageBox.StandardButton.Yes:
            return
        self.act(lambda: self._service.delete_user(user_id), after=self._after_change)

    def _on_create_clicked(self) -> None:
        req = CreateUserRequest(
            user_id=self.txt_new_id.text(),
            name=self.txt_name.text(),
            email=self.txt_email.text(),
            country=self.txt_country.text(),
            age=self.txt_age.text(),
        )
        self.act(lambda: self._service.create_user(req), after=self._after_create)

    def _after_create(self) -> None:
        for w in (self.txt_new_id, self.txt_name, self.txt_email, self.txt_country, self.txt_age):
            w.clear()
        self._after_change()

    def _after_change(self) -> None:
        self.refresh()
        self.users_changed.emit()
