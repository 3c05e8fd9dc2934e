"""Search tree and the processors resolving fields against a document."""
from .tree import UNDEFINED_LINE, NodeLabel, NodeContent, TreeNode, TreeSnapshot, SearchTree
from .line_checker import LineContentChecker, horizontal_range
from .context import SearchContext, SearchSettings
from .offset_search import OffsetNodeProcessor
from .node_processors import (
    FieldNodeProcessor,
    UndefinedNodeProcessor,
    LineNodeProcessor,
    TerminalNodeProcessor,
)
from .table_processor import TableNodeProcessor
from .document_parser import DocumentParser

__all__ = [
    "UNDEFINED_LINE",
    "NodeLabel",
    "NodeContent",
    "TreeNode",
    "TreeSnapshot",
    "SearchTree",
    "LineContentChecker",
    "horizontal_range",
    "SearchContext",
    "SearchSettings",
    "OffsetNodeProcessor",
    "FieldNodeProcessor",
    "UndefinedNodeProcessor",
    "LineNodeProcessor",
    "TerminalNodeProcessor",
    "TableNodeProcessor",
    "DocumentParser",
]
