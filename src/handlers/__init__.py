"""
UI event handlers for the builder canvas.
"""

from .canvas import CanvasHandler
from .autosave import AutosaveTask

__all__ = ["CanvasHandler", "AutosaveTask"]
