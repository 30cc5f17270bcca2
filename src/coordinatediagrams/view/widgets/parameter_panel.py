"""
Parameter Panel
===============
Numeric controls of one diagram, built from its ParameterStore.

Position coordinates and differential extents are shown in two group boxes.
Every edit goes through `ParameterStore.set`; the store's (possibly clamped)
value is written back into the spin box so both always agree.
"""
from __future__ import annotations

import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGroupBox, QLabel, QGridLayout,
    QSizePolicy, QDoubleSpinBox, QPushButton
)

from coordinatediagrams.model.parameters import ParameterSpec, ParameterStore

logger = logging.getLogger(__name__)


class ParameterPanel(QWidget):
    """Spin boxes for every parameter of a store."""

    def __init__(self, store: ParameterStore, position_names: tuple[str, ...], parent: QWidget | None = None):
        super().__init__(parent)
        self.store = store
        self._spins: dict[str, QDoubleSpinBox] = {}
        self._grids: dict[QGridLayout, int] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        position_box = QGroupBox(self.tr("Position"), self)
        differential_box = QGroupBox(self.tr("Differentials"), self)
        position_grid = QGridLayout(position_box)
        differential_grid = QGridLayout(differential_box)
        for grid in (position_grid, differential_grid):
            grid.setVerticalSpacing(8)
            self._grids[grid] = 0

        for spec in store.specs:
            grid = position_grid if spec.name in position_names else differential_grid
            self._add_spin(grid, spec, store[spec.name])

        layout.addWidget(position_box)
        if self._grids[differential_grid]:
            layout.addWidget(differential_box)
        else:
            differential_box.hide()

        reset_button = QPushButton(self.tr("Reset"), self)
        reset_button.clicked.connect(lambda *_: self.store.reset())
        layout.addWidget(reset_button)
        layout.addStretch()

        self.store.add_listener(self._sync_from_store)

    # ---- utilities ----

    def _add_spin(self, grid: QGridLayout, spec: ParameterSpec, value: float) -> QDoubleSpinBox:
        row = self._grids[grid]
        self._grids[grid] += 1

        lab = QLabel(f"{spec.label}:", self)
        grid.addWidget(lab, row, 0)
        w = QDoubleSpinBox(self)
        w.setRange(spec.minimum, spec.maximum)
        w.setSingleStep(spec.step)
        w.setDecimals(1 if spec.step >= 0.1 else 3)
        w.setValue(value)
        w.setKeyboardTracking(False)
        w.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        if spec.unit:
            w.setSuffix(f" {spec.unit}")
        w.valueChanged.connect(lambda v, name=spec.name: self._on_spin_changed(name, v))
        grid.addWidget(w, row, 1)
        self._spins[spec.name] = w
        return w

    def detach(self) -> None:
        """Stop listening to the store (the panel is about to be deleted)."""
        self.store.remove_listener(self._sync_from_store)

    # ---- slots ----

    def _on_spin_changed(self, name: str, value: float) -> None:
        stored = self.store.set(name, value)
        if stored != value:
            # a rejected edit leaves the store unchanged, so no listener fires
            self._write_spin(self._spins[name], stored)

    def _sync_from_store(self, name: str = "", value: float = 0.0) -> None:
        # constraints may have moved other parameters too
        for key, w in self._spins.items():
            current = self.store[key]
            if w.value() != current:
                self._write_spin(w, current)

    @staticmethod
    def _write_spin(w: QDoubleSpinBox, value: float) -> None:
        w.blockSignals(True)
        w.setValue(value)
        w.blockSignals(False)
