"""Positioned text layout: lines, grids and whole documents."""
from .line_mapping import LineMapping
from .line_grouper import LineGrouper, clean_text
from .grid import GridSegment, GridStructure, GridCollection
from .document_layout import DocumentLayout

__all__ = [
    "LineMapping",
    "LineGrouper",
    "clean_text",
    "GridSegment",
    "GridStructure",
    "GridCollection",
    "DocumentLayout",
]
