"""Slides package — public API re-exports."""

from .styles import TextStyle, OptionalColor, OpaqueColor, RgbColor, Dimension, Link
from .text import StyleRun, ListMarker, TextBlock
from .table import TableModel
from .slide import BodyBlock, SlideDefinition, new_object_id

__all__ = [
    "SlideDefinition",
    "BodyBlock",
    "TableModel",
    "TextBlock",
    "StyleRun",
    "ListMarker",
    "TextStyle",
    "OptionalColor",
    "OpaqueColor",
    "RgbColor",
    "Dimension",
    "Link",
    "new_object_id",
]
