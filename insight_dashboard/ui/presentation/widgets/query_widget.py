"""
Query Widget.

Structured query form: one clause per line for filters, aggregates, selected
fields and ordering.
"""

from __future__ import annotations
from typing import List, Optional

from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLineEdit,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from ....application.query_builder import parse_aggregate, parse_filter, parse_order
from ....application.use_cases.query_data import QUERY_TARGETS
from ....domain.errors import ValidationError
from ....domain.models import FilterOperator
from ...application.interfaces.logger import ILogger
from ...application.services.dashboard_service import DashboardService
from .result_panel import ResultPanel
from .section import SectionWidget


def _lines(edit: QPlainTextEdit) -> List[str]:
    return [ln.strip() for ln in edit.toPlainText().splitlines() if ln.strip()]


class QueryWidget(SectionWidget):
    """Query tab."""

    def __init__(self, service: DashboardService, logger: ILogger, parent: Optional[QWidget] = None):
        super().__init__(service, logger, parent)
        self._build_ui()
        self.btn_run.clicked.connect(self._on_run_clicked)

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.cmb_target = QComboBox(self)
        self.cmb_target.addItems(list(QUERY_TARGETS))
        form.addRow("Target:", self.cmb_target)
        self.txt_user_id = QLineEdit(self)
        self.txt_user_id.setPlaceholderText("Required for user-events")
        form.addRow("User ID:", self.txt_user_id)

        self.txt_where = QPlainTextEdit(self)
        self.txt_where.setPlaceholderText("field:OPERATOR:value  e.g. country:EQ:US")
        self.txt_where.setToolTip("Operators: " + ", ".join(op.value for op in FilterOperator))
        form.addRow("Where:", self.txt_where)
        self.txt_aggregate = QPlainTextEdit(self)
        self.txt_aggregate.setPlaceholderText("field:TYPE:alias  e.g. eventId:COUNT:count")
        form.addRow("Aggregate:", self.txt_aggregate)
        self.txt_select = QLineEdit(self)
        self.txt_select.setPlaceholderText("Comma-separated fields")
        form.addRow("Select:", self.txt_select)
        self.txt_order = QLineEdit(self)
        self.txt_order.setPlaceholderText("field[:DESC], ...")
        form.addRow("Order by:", self.txt_order)

        paging = QHBoxLayout()
        self.spin_limit = QSpinBox(self)
        self.spin_limit.setRange(0, 100000)
        self.spin_limit.setSpecialValueText("none")
        paging.addWidget(self.spin_limit)
        self.spin_offset = QSpinBox(self)
        self.spin_offset.setRange(0, 100000)
        paging.addWidget(self.spin_offset)
        form.addRow("Limit / Offset:", paging)
        layout.addLayout(form)

        self.btn_run = QPushButton("Run Query", self)
        layout.addWidget(self.btn_run)
        self.result_panel = ResultPanel("Query Results", self)
        layout.addWidget(self.result_panel, 1)

    def _on_run_clicked(self) -> None:
        try:
            filters = [parse_filter(x) for x in _lines(self.txt_where)]
            aggregates = [parse_aggregate(x) for x in _lines(self.txt_aggregate)]
            select = [s.strip() for s in self.txt_select.text().split(",") if s.strip()]
            order = [parse_order(s.strip()) for s in self.txt_order.text().split(",") if s.strip()]
        except ValidationError as e:
            QMessageBox.warning(self, "Invalid Input", str(e))
            return
        target = self.cmb_target.currentText()
        user_id = self.txt_user_id.text()
        limit = self.spin_limit.value() or None
        offset = self.spin_offset.value() or None
        self.render(
            self.result_panel,
            lambda: self._service.run_query(
                target, filters, aggregates, select, order_by=order, limit=limit, offset=offset, user_id=user_id
            ),
        )
