"""
Main Window Layout.

Primary application window: one tab per dashboard section in the central
area and a fixed Logs dock along the bottom.
"""
from __future__ import annotations
from contextlib import suppress
from typing import Optional

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtWidgets import (
    QDockWidget,
    QMainWindow,
    QMenu,
    QMenuBar,
    QMessageBox,
    QSizePolicy,
    QTabWidget,
    QTextEdit,
    QWidget,
)

from ...application.interfaces.logger import ILogger
from ...application.services.dashboard_service import DashboardService
from ...shared.dto import ActionOutcome
from ..widgets.events_widget import EventsWidget
from ..widgets.ml_widgets import PredictionsWidget, RecommendationsWidget
from ..widgets.query_widget import QueryWidget
from ..widgets.segmentation_widget import SegmentationWidget
from ..widgets.users_widget import UsersWidget


class LogSink(QObject):
    """Forwards log lines to the log panel on the UI thread.

    Service calls log from pool threads; the queued signal keeps widget
    access on the thread that owns it.
    """

    line = Signal(str)

    def __init__(self, log_widget: QTextEdit):
        super().__init__(log_widget)
        self.line.connect(log_widget.append)

    def append(self, text: str) -> None:
        self.line.emit(text)


class MainWindow(QMainWindow):
    """Main dashboard window.

    - Central widget: tabs Users, Events, Query, Segmentation,
      Recommendations, Predictions
    - Dock widget: Logs (bottom, fixed)
    """

    def __init__(self, service: DashboardService, logger: ILogger, base_url: str = "", parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._service = service
        self._logger = logger
        self._base_url = base_url
        self._bottom_row_px = 180
        self.setWindowTitle("InsightAxisDB Dashboard")
        self.resize(1400, 900)
        self._build_layout()

    def _build_layout(self) -> None:
        self.tabs = QTabWidget(self)
        self.users_tab = UsersWidget(self._service, self._logger, self)
        self.events_tab = EventsWidget(self._service, self._logger, self)
        self.query_tab = QueryWidget(self._service, self._logger, self)
        self.segmentation_tab = SegmentationWidget(self._service, self._logger, self)
        self.recommendations_tab = RecommendationsWidget(self._service, self._logger, self)
        self.predictions_tab = PredictionsWidget(self._service, self._logger, self)
        self.tabs.addTab(self.users_tab, "Users")
        self.tabs.addTab(self.events_tab, "Events")
        self.tabs.addTab(self.query_tab, "Query")
        self.tabs.addTab(self.segmentation_tab, "Segmentation")
        self.tabs.addTab(self.recommendations_tab, "Recommendations")
        self.tabs.addTab(self.predictions_tab, "Predictions")
        self.setCentralWidget(self.tabs)

        self.log_panel = self._create_log_panel()
        self.log_dock = QDockWidget("Logs", self)
        self.log_dock.setObjectName("dock_logs")
        self.log_dock.setWidget(self.log_panel)
        # Fully fixed: no move/float/close buttons
        self.log_dock.setFeatures(QDockWidget.DockWidgetFeature.NoDockWidgetFeatures)
        self.log_dock.setAllowedAreas(Qt.DockWidgetArea.BottomDockWidgetArea)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, self.log_dock)
        with suppress(Exception):
            self.resizeDocks([self.log_dock], [self._bottom_row_px], Qt.Vertical)

        self._build_menus()
        self._connect_signals()
        self._show_welcome_message()

    def _create_log_panel(self) -> QTextEdit:
        log_widget = QTextEdit(self)
        log_widget.setReadOnly(True)
        log_widget.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        log_widget.setPlaceholderText("Dashboard activity logs will appear here...")
        return log_widget

    def _build_menus(self) -> None:
        """Create File and View menus.

        - File: Save Data, Load Data, Server Config
        - View: Refresh All
        """
        menubar: QMenuBar = self.menuBar() or QMenuBar(self)
        if self.menuBar() is None:
            self.setMenuBar(menubar)

        file_menu: QMenu = menubar.addMenu("File")
        action_save = file_menu.addAction("Save Data")
        action_save.triggered.connect(lambda: self.users_tab.act(self._service.save_data))
        action_load = file_menu.addAction("Load Data")
        action_load.triggered.connect(lambda: self.users_tab.act(self._service.load_data, after=self.refresh_all))
        action_config = file_menu.addAction("Server Config…")
        action_config.triggered.connect(self._on_show_config)
        file_menu.addSeparator()
        action_quit = file_menu.addAction("Quit")
        action_quit.triggered.connect(self.close)

        view_menu: QMenu = menubar.addMenu("View")
        action_refresh = view_menu.addAction("Refresh All")
        action_refresh.triggered.connect(self.refresh_all)

    def _connect_signals(self) -> None:
        self.users_tab.users_changed.connect(self._refresh_user_pickers)
        # Connect logger to log panel
        if hasattr(self._logger, "set_widget"):
            self._logger.set_widget(LogSink(self.log_panel))

    def _refresh_user_pickers(self) -> None:
        self.events_tab.refresh_users()
        self.recommendations_tab.refresh_users()
        self.predictions_tab.refresh_users()

    def refresh_all(self) -> None:
        """Reload the overview regions and every user picker."""
        self.users_tab.refresh()
        self.events_tab.refresh()
        self.events_tab.refresh_distribution()
        self._refresh_user_pickers()

    def _on_show_config(self) -> None:
        def _done(outcome: ActionOutcome) -> None:
            if outcome.ok:
                QMessageBox.information(self, "Server Config", outcome.message)
            else:
                QMessageBox.critical(self, "Request Failed", outcome.message)

        self.users_tab.submit_call(self._service.system_config, _done)

    def _show_welcome_message(self) -> None:
        self._logger.info("InsightAxisDB Dashboard initialized")
        if self._base_url:
            self._logger.info(f"Backend: {self._base_url}")
