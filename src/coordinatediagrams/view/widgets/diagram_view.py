"""
Diagram View
============
The 3D widget of one diagram: a QtInteractor with its scene manager and the
update cycle feeding it.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout
from PySide6.QtGui import QCloseEvent, QResizeEvent
from pyvistaqt import QtInteractor

from coordinatediagrams.controller.update_cycle import UpdateCycle
from coordinatediagrams.model.diagrams import DiagramDefinition
from coordinatediagrams.model.parameters import ParameterStore
from coordinatediagrams.view.widgets.scene_manager import SceneLifecycleManager

logger = logging.getLogger(__name__)


class DiagramView(QWidget):
    def __init__(self, diagram: DiagramDefinition, store: ParameterStore, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.diagram = diagram

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self.scene = SceneLifecycleManager(self.plotter)
        self.cycle = UpdateCycle(diagram, store, sink=self.scene)
        logger.info("Diagram view '%s' created.", diagram.KEY)

    def dispose(self) -> None:
        """Release the update cycle first, then the scene (idempotent)."""
        self.cycle.close()
        self.scene.dispose()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        size = event.size()
        self.scene.on_resize(size.width(), size.height())

    def closeEvent(self, event: QCloseEvent) -> None:
        self.dispose()
        super().closeEvent(event)
