"""
Events Widget.

Recent events, event distribution, and the create-event form.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ....application.dto import CreateEventRequest
from ...application.interfaces.logger import ILogger
from ...application.services.dashboard_service import DashboardService
from .result_panel import ResultPanel
from .section import SectionWidget

EVENT_TYPES = ["login", "logout", "view_item", "add_to_cart", "purchase"]
ITEM_EVENTS = {"view_item", "add_to_cart", "purchase"}
DEVICES = ["desktop", "mobile", "tablet"]
CATEGORIES = ["electronics", "clothing", "books", "home", "sports"]


class EventsWidget(SectionWidget):
    """Events tab."""

    def __init__(self, service: DashboardService, logger: ILogger, parent: Optional[QWidget] = None):
        super().__init__(service, logger, parent)
        self._build_ui()
        self._connect_signals()
        self._on_type_changed(self.cmb_type.currentText())

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        row = QHBoxLayout()
        self.btn_refresh = QPushButton("Load Events", self)
        row.addWidget(self.btn_refresh)
        self.btn_distribution = QPushButton("Event Distribution", self)
        row.addWidget(self.btn_distribution)
        row.addStretch(1)
        layout.addLayout(row)

        panels = QHBoxLayout()
        self.events_panel = ResultPanel("Recent Events", self)
        panels.addWidget(self.events_panel, 2)
        self.distribution_panel = ResultPanel("Event Distribution", self)
        panels.addWidget(self.distribution_panel, 1)
        layout.addLayout(panels, 1)

        box = QGroupBox("Create Event", self)
        form = QFormLayout(box)
        self.cmb_type = QComboBox(box)
        self.cmb_type.setEditable(True)
        self.cmb_type.addItems(EVENT_TYPES)
        self.cmb_user = QComboBox(box)
        self.cmb_user.addItem("Select a user", None)
        self.cmb_device = QComboBox(box)
        self.cmb_device.addItems(DEVICES)
        self.txt_item = QLineEdit(box)
        self.cmb_category = QComboBox(box)
        self.cmb_category.addItems(CATEGORIES)
        self.txt_price = QLineEdit(box)
        self.txt_quantity = QLineEdit("1", box)
        form.addRow("Event Type:", self.cmb_type)
        form.addRow("User:", self.cmb_user)
        form.addRow("Device:", self.cmb_device)
        form.addRow("Item ID:", self.txt_item)
        form.addRow("Category:", self.cmb_category)
        form.addRow("Price:", self.txt_price)
        form.addRow("Quantity:", self.txt_quantity)
        self.btn_create = QPushButton("Create Event", box)
        form.addRow(self.btn_create)
        layout.addWidget(box)

    def _connect_signals(self) -> None:
        self.btn_refresh.clicked.connect(self.refresh)
        self.btn_distribution.clicked.connect(self.refresh_distribution)
        self.btn_create.clicked.connect(self._on_create_clicked)
        self.cmb_type.currentTextChanged.connect(self._on_type_changed)

    def refresh(self) -> None:
        self.render(self.events_panel, self._service.load_events)

    def refresh_distribution(self) -> None:
        self.render(self.distribution_panel, self._service.load_event_distribution)

    def refresh_users(self) -> None:
        self.fill_users(self.cmb_user)

    def _on_type_changed(self, event_type: str) -> None:
        is_item = event_type in ITEM_EVENTS
        for w in (self.txt_item, self.cmb_category, self.txt_price):
            w.setEnabled(is_item)
        self.txt_quantity.setEnabled(event_type == "purchase")

    def _collect_properties(self) -> Dict[str, Any]:
        event_type = self.cmb_type.currentText().strip()
        props: Dict[str, Any] = {"device": self.cmb_device.currentText()}
        if event_type in ITEM_EVENTS:
            props["item_id"] = self.txt_item.text().strip()
            props["category"] = self.cmb_category.currentText()
            props["price"] = self.txt_price.text()
        if event_type == "purchase":
            props["quantity"] = self.txt_quantity.text()
        return props

    def _on_create_clicked(self) -> None:
        req = CreateEventRequest(
            event_name=self.cmb_type.currentText(),
            user_id=self.selected_user(self.cmb_user),
            properties=self._collect_properties(),
        )
        self.act(lambda: self._service.create_event(req), after=self._after_create)

    def _after_create(self) -> None:
        self.refresh()
        self.refresh_distribution()
