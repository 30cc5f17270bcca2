"""
Parameter Store
===============
Holds the editable named scalars of a diagram (position and differential
extents) and keeps them inside their declared bounds.

Why is this file needed?
------------------------
1. Clamping: Values coming from a control are clamped and snapped to the step
   before anything downstream sees them. The geometry generators can then
   assume valid input.
2. Domain constraints: Some bounds depend on other parameters (a spherical
   element must satisfy θ + dθ <= 180°). Those are enforced here as well.
3. Notification: Listeners (the update cycle) are called once per effective
   change.

Classes:
    ParameterSpec: Declaration of one numeric control.
    DomainConstraint: "value + extent <= limit" style coupling of two parameters.
    ParameterStore: Current values + listeners.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from coordinatediagrams.errors import UnknownParameter

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str, float], None]


@dataclass(frozen=True)
class ParameterSpec:
    """Declaration of one numeric control: name, bounds, step and default."""
    name: str
    label: str
    minimum: float
    maximum: float
    step: float
    default: float
    unit: str = ""
    is_angle: bool = False  # degrees in the UI, radians in the engine

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError(f"{self.name}: minimum {self.minimum} > maximum {self.maximum}.")
        if self.step <= 0.0:
            raise ValueError(f"{self.name}: step must be positive.")

    def clamp(self, value: float) -> float:
        """Clamp into [minimum, maximum] and snap to the step grid."""
        value = float(value)
        if math.isnan(value):
            return self.default
        value = min(max(value, self.minimum), self.maximum)

        snapped = self.minimum + round((value - self.minimum) / self.step) * self.step
        if snapped > self.maximum:
            snapped -= self.step
        # drop float noise from the snapping (0.30000000000000004 -> 0.3)
        return round(min(max(snapped, self.minimum), self.maximum), 10)

    def to_engine(self, value: float) -> float:
        return math.radians(value) if self.is_angle else value


@dataclass(frozen=True)
class DomainConstraint:
    """
    Keeps `position + extent <= limit`.

    When violated, the extent is reduced first; if the extent alone cannot
    satisfy the bound (it would drop below its own minimum), the position is
    pulled back instead.
    """
    position: str
    extent: str
    limit: float


class ParameterStore:
    """
    Current values of a diagram's parameters.

    Args:
        specs: Parameter declarations, in display order.
        constraints: Coupled domain limits between parameters.
    """
    def __init__(
        self,
        specs: Iterable[ParameterSpec],
        constraints: Iterable[DomainConstraint] = ()
    ) -> None:
        self._specs: dict[str, ParameterSpec] = {spec.name: spec for spec in specs}
        self._constraints: tuple[DomainConstraint, ...] = tuple(constraints)
        self._values: dict[str, float] = {name: spec.clamp(spec.default) for name, spec in self._specs.items()}
        self._listeners: list[ChangeListener] = []
        self._apply_constraints(changed=None)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def specs(self) -> list[ParameterSpec]:
        return list(self._specs.values())

    def spec(self, name: str) -> ParameterSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise UnknownParameter(name) from None

    def get(self, name: str) -> float:
        self.spec(name)
        return self._values[name]

    def __getitem__(self, name: str) -> float:
        return self.get(name)

    def values(self) -> dict[str, float]:
        """Snapshot of the values as shown in the controls (degrees for angles)."""
        return dict(self._values)

    def engine_values(self) -> dict[str, float]:
        """Snapshot converted for the engine (radians for angles)."""
        return {name: self._specs[name].to_engine(value) for name, value in self._values.items()}

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set(self, name: str, value: float) -> float:
        """
        Update one parameter.

        The value is clamped to the declared bounds, then domain constraints
        are re-applied. Listeners are notified only if something changed.

        Returns:
            The value actually stored.
        """
        spec = self.spec(name)
        clamped = spec.clamp(value)
        if clamped != float(value):
            logger.debug("Clamped %s from %r to %r.", name, value, clamped)

        before = dict(self._values)
        self._values[name] = clamped
        self._apply_constraints(changed=name)

        if self._values == before:
            return self._values[name]

        self._notify(name)
        return self._values[name]

    def update(self, values: dict[str, float]) -> None:
        """Set several parameters, notifying once per effective change."""
        for name, value in values.items():
            self.set(name, value)

    def reset(self) -> None:
        """Restore every default, with a single notification."""
        before = dict(self._values)
        self._values = {name: spec.clamp(spec.default) for name, spec in self._specs.items()}
        self._apply_constraints(changed=None)
        if self._values != before:
            self._notify(None)

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _notify(self, name: Optional[str]) -> None:
        value = self._values[name] if name is not None else math.nan
        for listener in list(self._listeners):
            listener(name or "", value)

    def _apply_constraints(self, changed: Optional[str]) -> None:
        for constraint in self._constraints:
            pos_spec = self._specs[constraint.position]
            ext_spec = self._specs[constraint.extent]
            position = self._values[constraint.position]
            extent = self._values[constraint.extent]

            if position + extent <= constraint.limit + 1e-9:
                continue

            if changed == constraint.position:
                # the user moved the position, keep it and shrink the extent
                extent = ext_spec.clamp(constraint.limit - position)
                if position + extent > constraint.limit + 1e-9:
                    position = pos_spec.clamp(constraint.limit - extent)
            else:
                extent_room = constraint.limit - position
                if extent_room >= ext_spec.minimum:
                    extent = ext_spec.clamp(math.floor(extent_room / ext_spec.step + 1e-9) * ext_spec.step)
                else:
                    position = pos_spec.clamp(constraint.limit - extent)

            logger.debug(
                "Domain limit %s + %s <= %g applied: %g, %g.",
                constraint.position, constraint.extent, constraint.limit, position, extent
            )
            self._values[constraint.position] = position
            self._values[constraint.extent] = extent
