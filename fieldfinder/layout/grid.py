"""Split a page into a grid of segments to narrow field search."""
import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from fieldfinder.layout.line_mapping import LineMapping
from fieldfinder.models.schemas import TextUnit
from fieldfinder.tables.document_table import DocumentTable

logger = logging.getLogger(__name__)

DEFAULT_GRID_SIZE = 3


class GridSegment:
    """Lines and tables of one grid cell."""

    def __init__(self, row: int, column: int):
        self.row = row
        self.column = column
        self.lines = LineMapping()
        self.tables: List[DocumentTable] = []

    def __repr__(self) -> str:
        return f"GridSegment({self.row}, {self.column}, lines={len(self.lines)}, tables={len(self.tables)})"


class GridStructure:
    """
    A page broken into ``size`` x ``size`` segments.

    Rows split the page's lines into bands of ``len(lines) // size + 1``
    lines; columns split the horizontal range ``[0, max x]`` into equal
    widths. Every unit lands in exactly one segment; a line shows up in a
    segment of its band for every column it has units in. Tables go to the
    segment holding their anchor.
    """

    def __init__(
        self,
        lines: LineMapping,
        tables: Iterable[DocumentTable] = (),
        size: int = DEFAULT_GRID_SIZE
    ):
        """
        Initialize grid.

        Args:
            lines: Lines of one page
            tables: Tables of the same page
            size: Number of segment rows and columns
        """
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self.source = lines
        self.row_size = len(lines) // size + 1
        self.column_width = lines.max_x() / size
        self.segments = [[GridSegment(row, column) for column in range(size)] for row in range(size)]

        self._populate_lines()
        for table in tables:
            self.add_table(table)

    def __getitem__(self, coordinates: Tuple[int, int]) -> Optional[GridSegment]:
        row, column = coordinates
        if 0 <= row < self.size and 0 <= column < self.size:
            return self.segments[row][column]
        return None

    def row_band(self, row: int) -> List[GridSegment]:
        return list(self.segments[row])

    def column_of(self, x: float) -> int:
        """Grid column for a horizontal coordinate."""
        if self.column_width <= 0:
            return 0
        column = int(np.floor(x / self.column_width))
        return min(max(column, 0), self.size - 1)

    def add_table(self, table: DocumentTable) -> GridSegment:
        """Assign a table to the segment containing its anchor."""
        segment = self.segments[self._row_of_anchor(table.anchor)][self.column_of(table.anchor.x)]
        segment.tables.append(table)
        return segment

    def _populate_lines(self) -> None:
        for position, (number, units) in enumerate(self.source.items()):
            row = position // self.row_size
            if not units:
                continue
            columns = self._columns_of(units)
            for column in np.unique(columns):
                selected = [unit for unit, unit_column in zip(units, columns) if unit_column == column]
                self.segments[row][int(column)].lines.add_line(number, selected)

    def _columns_of(self, units: List[TextUnit]) -> np.ndarray:
        if self.column_width <= 0:
            return np.zeros(len(units), dtype=int)
        xs = np.array([unit.x for unit in units], dtype=float)
        columns = np.floor(xs / self.column_width).astype(int)
        return np.clip(columns, 0, self.size - 1)

    def _row_of_anchor(self, anchor: TextUnit) -> int:
        """Band of the last line starting at or above the anchor."""
        position = 0
        for index, (_, units) in enumerate(self.source.items()):
            if units and min(unit.y for unit in units) <= anchor.y:
                position = index
        return min(position // self.row_size, self.size - 1)


class GridCollection(dict):
    """Grid structures keyed by page number."""

    def segments(self, coordinates: Tuple[int, int]) -> List[GridSegment]:
        """Segment at the given coordinates on every page, in page order."""
        found = []
        for page in sorted(self):
            segment = self[page][coordinates]
            if segment is not None:
                found.append(segment)
        return found
