"""Exceptions raised for programming errors inside the diagram engine.

User input never reaches these: parameter values are clamped before they are
used, and degenerate faces are skipped.
"""


class CoordinateDiagramsError(Exception):
    """Base class for all package errors."""


class UnknownCoordinateSystem(CoordinateDiagramsError, ValueError):
    """Raised when a mapping is requested for a system outside the closed set."""


class UnknownParameter(CoordinateDiagramsError, KeyError):
    """Raised when a parameter name is not declared by the store."""


class UnknownDiagram(CoordinateDiagramsError, KeyError):
    """Raised when no diagram is registered under the requested key."""


class InvalidResolution(CoordinateDiagramsError, ValueError):
    """Raised for tessellation or curve resolutions below one segment."""
