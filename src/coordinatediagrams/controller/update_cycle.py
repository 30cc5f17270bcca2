"""
Update Cycle
============
Rebuilds the geometry of the displayed element every time a parameter changes.

Why is this file needed?
------------------------
1. Ordering: The installed mesh and outline are disposed *before* their
   replacements are built and installed, on every path. At most one live
   ElementMesh and one live EdgeCurveSet exist per element at any time.
2. Synchrony: Generation runs to completion inside the change callback. A
   render tick therefore sees either the complete old element or the complete
   new one.
3. No debounce: Each effective control edit triggers exactly one rebuild; the
   cost is bounded by the fixed resolutions.

Classes:
    ElementSink: What the cycle installs geometry into (the scene manager).
    UpdateCycle: Listener wiring ParameterStore -> builders -> sink.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from coordinatediagrams.controller.edge_curves import EdgeCurveExtractor
from coordinatediagrams.controller.mesh_builder import ElementMeshBuilder
from coordinatediagrams.controller.point_builder import Arrow, PointAnnotations, build_point_annotations, surface_normal
from coordinatediagrams.model.diagrams import DiagramDefinition
from coordinatediagrams.model.element import EdgeCurveSet, ElementMesh
from coordinatediagrams.model.parameters import ParameterStore

logger = logging.getLogger(__name__)


class ElementSink(Protocol):
    """Receiver of generated geometry."""
    def install_element(self, mesh: ElementMesh, curves: EdgeCurveSet, normal: Optional[Arrow] = None) -> None: ...
    def remove_element(self) -> None: ...
    def set_annotations(self, annotations: Optional[PointAnnotations]) -> None: ...


class UpdateCycle:
    """
    Keeps the displayed element in sync with the parameter store.

    Args:
        diagram: Diagram declaration (system, kind, parameters).
        store: Parameter values; the cycle subscribes to it.
        sink: Where geometry is installed. May be None for headless use.
        mesh_builder: Tessellation strategy (resolution).
        curve_extractor: Outline strategy (sample counts).
    """
    def __init__(
        self,
        diagram: DiagramDefinition,
        store: ParameterStore,
        sink: Optional[ElementSink] = None,
        mesh_builder: Optional[ElementMeshBuilder] = None,
        curve_extractor: Optional[EdgeCurveExtractor] = None,
    ) -> None:
        self.diagram = diagram
        self.store = store
        self.sink = sink
        self.mesh_builder = mesh_builder or ElementMeshBuilder()
        self.curve_extractor = curve_extractor or EdgeCurveExtractor()

        self.mesh: Optional[ElementMesh] = None
        self.curves: Optional[EdgeCurveSet] = None
        self.annotations: Optional[PointAnnotations] = None
        self.rebuild_count: int = 0
        self._closed: bool = False

        self.store.add_listener(self._on_parameter_changed)
        self.rebuild()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def live_mesh_count(self) -> int:
        return int(self.mesh is not None and not self.mesh.disposed)

    @property
    def live_curve_count(self) -> int:
        return int(self.curves is not None and not self.curves.disposed)

    def set_parameter(self, name: str, value: float) -> float:
        """Entry point for the numeric controls. Returns the stored (clamped) value."""
        return self.store.set(name, value)

    def rebuild(self) -> None:
        """Dispose the installed geometry, regenerate it and install the result."""
        if self._closed:
            logger.warning("Rebuild requested on a closed update cycle, ignored.")
            return

        self._dispose_installed()

        spec = self.diagram.element_spec(self.store)
        if spec is None:
            u, v, w = self.diagram.position(self.store)
            self.annotations = build_point_annotations(self.diagram.SYSTEM, u, v, w)
            if self.sink is not None:
                self.sink.set_annotations(self.annotations)
        else:
            self.mesh = self.mesh_builder.build(spec)
            self.curves = self.curve_extractor.extract(spec)
            if self.sink is not None:
                self.sink.install_element(self.mesh, self.curves, surface_normal(spec))

        self.rebuild_count += 1
        logger.debug("Rebuild #%d of '%s' done.", self.rebuild_count, self.diagram.KEY)

    def close(self) -> None:
        """Unsubscribe from the store and release the installed geometry."""
        if self._closed:
            return
        self.store.remove_listener(self._on_parameter_changed)
        self._dispose_installed()
        self._closed = True
        logger.info("Update cycle of '%s' closed after %d rebuilds.", self.diagram.KEY, self.rebuild_count)

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _on_parameter_changed(self, name: str, value: float) -> None:
        logger.debug("Parameter %s -> %g", name or "<all>", value)
        self.rebuild()

    def _dispose_installed(self) -> None:
        if self.sink is not None:
            if self.mesh is not None or self.curves is not None:
                self.sink.remove_element()
            if self.annotations is not None:
                self.sink.set_annotations(None)

        if self.mesh is not None:
            self.mesh.dispose()
            self.mesh = None
        if self.curves is not None:
            self.curves.dispose()
            self.curves = None
        self.annotations = None
