"""
Segmentation Widget.

RFM segmentation and cohort retention.
"""

from __future__ import annotations
from typing import Optional

from PySide6.QtWidgets import (
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from ....domain.models import TimePeriod
from ...application.interfaces.logger import ILogger
from ...application.services.dashboard_service import DashboardService
from .result_panel import ResultPanel
from .section import SectionWidget


class SegmentationWidget(SectionWidget):
    """Segmentation tab."""

    def __init__(self, service: DashboardService, logger: ILogger, parent: Optional[QWidget] = None):
        super().__init__(service, logger, parent)
        self._build_ui()
        self.btn_rfm.clicked.connect(self._on_rfm_clicked)
        self.btn_cohorts.clicked.connect(self._on_cohorts_clicked)

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        rfm_box = QGroupBox("RFM Analysis", self)
        rfm_layout = QVBoxLayout(rfm_box)
        row = QHBoxLayout()
        row.addWidget(QLabel("Recency days:", rfm_box))
        self.spin_recency = QSpinBox(rfm_box)
        self.spin_recency.setRange(1, 3650)
        self.spin_recency.setValue(30)
        row.addWidget(self.spin_recency)
        row.addWidget(QLabel("Segments:", rfm_box))
        self.spin_segments = QSpinBox(rfm_box)
        self.spin_segments.setRange(1, 100)
        self.spin_segments.setValue(5)
        row.addWidget(self.spin_segments)
        self.btn_rfm = QPushButton("Run RFM Analysis", rfm_box)
        row.addWidget(self.btn_rfm)
        row.addStretch(1)
        rfm_layout.addLayout(row)
        self.rfm_panel = ResultPanel("RFM Segments", rfm_box)
        rfm_layout.addWidget(self.rfm_panel, 1)
        layout.addWidget(rfm_box, 1)

        cohort_box = QGroupBox("Cohort Analysis", self)
        cohort_layout = QVBoxLayout(cohort_box)
        row = QHBoxLayout()
        row.addWidget(QLabel("Period:", cohort_box))
        self.cmb_period = QComboBox(cohort_box)
        self.cmb_period.addItems([p.value for p in TimePeriod])
        self.cmb_period.setCurrentText(TimePeriod.WEEK.value)
        row.addWidget(self.cmb_period)
        row.addWidget(QLabel("Periods:", cohort_box))
        self.spin_periods = QSpinBox(cohort_box)
        self.spin_periods.setRange(1, 52)
        self.spin_periods.setValue(4)
        row.addWidget(self.spin_periods)
        row.addWidget(QLabel("Event:", cohort_box))
        self.txt_event = QLineEdit("login", cohort_box)
        row.addWidget(self.txt_event)
        self.btn_cohorts = QPushButton("Run Cohort Analysis", cohort_box)
        row.addWidget(self.btn_cohorts)
        cohort_layout.addLayout(row)
        self.cohort_panel = ResultPanel("Cohort Retention", cohort_box)
        cohort_layout.addWidget(self.cohort_panel, 1)
        layout.addWidget(cohort_box, 1)

    def _on_rfm_clicked(self) -> None:
        recency, segments = self.spin_recency.value(), self.spin_segments.value()
        self.render(self.rfm_panel, lambda: self._service.run_rfm(recency, segments))

    def _on_cohorts_clicked(self) -> None:
        period, periods, event = self.cmb_period.currentText(), self.spin_periods.value(), self.txt_event.text()
        self.render(self.cohort_panel, lambda: self._service.run_cohorts(period, periods, event))
