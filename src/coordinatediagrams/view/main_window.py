"""
Main Application Window
=======================
Diagram selector and parameter panel on the left, the 3D view on the right.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: Switching diagrams tears the previous view down (update cycle and
   scene) before the next one is built, so only one scene is ever alive.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QComboBox, QLabel
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent

from coordinatediagrams.model.diagrams import DiagramDefinition, create_diagram, list_keys
from coordinatediagrams.view.widgets.diagram_view import DiagramView
from coordinatediagrams.view.widgets.parameter_panel import ParameterPanel

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Coordinate Diagrams"


class MainWindow(QMainWindow):
    def __init__(self, initial_key: Optional[str] = None) -> None:
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        self.diagram: Optional[DiagramDefinition] = None
        self.panel: Optional[ParameterPanel] = None
        self.view: Optional[DiagramView] = None

        # --- 1. SPLITTER ---
        self.splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(self.splitter)

        # --- 2. LEFT SIDE: selector + controls ---
        self.sidebar = QWidget()
        self.sidebar_layout = QVBoxLayout(self.sidebar)
        self.sidebar_layout.addWidget(QLabel(self.tr("Diagram:")))

        self.selector = QComboBox()
        for key in list_keys():
            self.selector.addItem(create_diagram(key).TITLE, key)
        self.sidebar_layout.addWidget(self.selector)
        self.splitter.addWidget(self.sidebar)

        # --- 3. RIGHT SIDE: placeholder until a diagram is shown ---
        self.view_container = QWidget()
        self.view_layout = QVBoxLayout(self.view_container)
        self.view_layout.setContentsMargins(0, 0, 0, 0)
        self.splitter.addWidget(self.view_container)
        self.splitter.setSizes([350, 1050])

        # --- SIGNAL CONNECTIONS ---
        self.selector.currentIndexChanged.connect(self._on_selector_changed)

        key = initial_key or list_keys()[0]
        index = self.selector.findData(key)
        if index == self.selector.currentIndex() or index < 0:
            self.show_diagram(key)
        else:
            self.selector.setCurrentIndex(index)

    def show_diagram(self, key: str) -> None:
        """Replace the current diagram with the one registered under `key`."""
        diagram = create_diagram(key)
        self._teardown()

        store = diagram.create_store()
        self.diagram = diagram
        self.panel = ParameterPanel(store, diagram.position_names)
        self.sidebar_layout.insertWidget(2, self.panel)
        self.view = DiagramView(diagram, store)
        self.view_layout.addWidget(self.view)
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - {diagram.TITLE}")
        logger.info("Showing diagram '%s'.", key)

    def _on_selector_changed(self, index: int) -> None:
        self.show_diagram(self.selector.itemData(index))

    def _teardown(self) -> None:
        if self.view is not None:
            self.view.dispose()
            self.view_layout.removeWidget(self.view)
            self.view.deleteLater()
            self.view = None
        if self.panel is not None:
            self.panel.detach()
            self.sidebar_layout.removeWidget(self.panel)
            self.panel.deleteLater()
            self.panel = None

    def closeEvent(self, event: QCloseEvent) -> None:
        self._teardown()
        super().closeEvent(event)
