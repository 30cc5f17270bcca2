"""Interactive diagrams of coordinate systems and their differential elements."""
__version__ = "0.1.0"
