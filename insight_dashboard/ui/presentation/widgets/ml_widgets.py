"""
ML Widgets.

Recommendations tab and Predictions tab.
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

from ...application.interfaces.logger import ILogger
from ...application.services.dashboard_service import DashboardService
from .result_panel import ResultPanel
from .section import SectionWidget


def _count_spin(parent: QWidget) -> QSpinBox:
    spin = QSpinBox(parent)
    spin.setRange(1, 100)
    spin.setValue(5)
    return spin


def _user_combo(parent: QWidget) -> QComboBox:
    combo = QComboBox(parent)
    combo.addItem("Select a user", None)
    return combo


class RecommendationsWidget(SectionWidget):
    """Personal recommendations and popular items."""

    def __init__(self, service: DashboardService, logger: ILogger, parent: Optional[QWidget] = None):
        super().__init__(service, logger, parent)
        self._build_ui()
        self.btn_recommend.clicked.connect(self._on_recommend_clicked)
        self.btn_popular.clicked.connect(self._on_popular_clicked)

    def _build_ui(self) -> None:
        layout = QHBoxLayout(self)

        box = QGroupBox("User Recommendations", self)
        col = QVBoxLayout(box)
        row = QHBoxLayout()
        self.cmb_user = _user_combo(box)
        row.addWidget(self.cmb_user, 1)
        row.addWidget(QLabel("Max:", box))
        self.spin_max = _count_spin(box)
        row.addWidget(self.spin_max)
        self.btn_recommend = QPushButton("Get Recommendations", box)
        row.addWidget(self.btn_recommend)
        col.addLayout(row)
        self.recommend_panel = ResultPanel("Recommendations", box)
        col.addWidget(self.recommend_panel, 1)
        layout.addWidget(box, 1)

        box = QGroupBox("Popular Items", self)
        col = QVBoxLayout(box)
        row = QHBoxLayout()
        row.addWidget(QLabel("Max:", box))
        self.spin_popular = _count_spin(box)
        row.addWidget(self.spin_popular)
        self.btn_popular = QPushButton("Get Popular Items", box)
        row.addWidget(self.btn_popular)
        row.addStretch(1)
        col.addLayout(row)
        self.popular_panel = ResultPanel("Popular Items", box)
        col.addWidget(self.popular_panel, 1)
        layout.addWidget(box, 1)

    def refresh_users(self) -> None:
        self.fill_users(self.cmb_user)

    def _on_recommend_clicked(self) -> None:
        user_id, count = self.selected_user(self.cmb_user), self.spin_max.value()
        self.render(self.recommend_panel, lambda: self._service.recommendations(user_id, count))

    def _on_popular_clicked(self) -> None:
        count = self.spin_popular.value()
        self.render(self.popular_panel, lambda: self._service.popular_items(count))


class PredictionsWidget(SectionWidget):
    """Event likelihood and best time to engage."""

    def __init__(self, service: DashboardService, logger: ILogger, parent: Optional[QWidget] = None):
        super().__init__(service, logger, parent)
        self._build_ui()
        self.btn_predict.clicked.connect(self._on_predict_clicked)
        self.btn_best_time.clicked.connect(self._on_best_time_clicked)

    def _build_ui(self) -> None:
        layout = QHBoxLayout(self)

        box = QGroupBox("Event Prediction", self)
        col = QVBoxLayout(box)
        row = QHBoxLayout()
        self.cmb_user = _user_combo(box)
        row.addWidget(self.cmb_user, 1)
        self.txt_event = QLineEdit("purchase", box)
        row.addWidget(self.txt_event)
        self.btn_predict = QPushButton("Predict", box)
        row.addWidget(self.btn_predict)
        col.addLayout(row)
        self.prediction_panel = ResultPanel("Prediction", box)
        col.addWidget(self.prediction_panel, 1)
        layout.addWidget(box, 1)

        box = QGroupBox("Best Time to Engage", self)
        col = QVBoxLayout(box)
        row = QHBoxLayout()
        self.cmb_time_user = _user_combo(box)
        row.addWidget(self.cmb_time_user, 1)
        self.btn_best_time = QPushButton("Get Best Time", box)
        row.addWidget(self.btn_best_time)
        col.addLayout(row)
        self.best_time_panel = ResultPanel("Best Time", box)
        col.addWidget(self.best_time_panel, 1)
        layout.addWidget(box, 1)

    def refresh_users(self) -> None:
        self.fill_users(self.cmb_user)
        self.fill_users(self.cmb_time_user)

    def _on_predict_clicked(self) -> None:
        user_id, event = self.selected_user(self.cmb_user), self.txt_event.text()
        self.render(self.prediction_panel, lambda: self._service.prediction(user_id, event))

    def _on_best_time_clicked(self) -> None:
        user_id = self.selected_user(self.cmb_time_user)
        self.render(self.best_time_panel, lambda: self._service.best_time(user_id))
