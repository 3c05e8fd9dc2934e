"""Table extracted from a document page."""
from typing import Iterator, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from fieldfinder.models.schemas import TextUnit


class DocumentTable(BaseModel):
    """
    A 2D grid of cell texts.

    The anchor is the position of the table's first non-empty cell and is
    used to assign the table to a grid segment. Rows may be ragged; missing
    cells read as None.
    """
    cells: List[List[Optional[str]]]
    anchor: TextUnit

    @property
    def page(self) -> int:
        return self.anchor.page

    @property
    def row_count(self) -> int:
        return len(self.cells)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.cells), default=0)

    def cell(self, row: int, column: int, wrap: bool = True) -> Optional[str]:
        """
        Get cell text.

        Args:
            row: Row index; negative values count from the last row when wrap is set
            column: Column index; negative values count from the last column when wrap is set
            wrap: Whether negative indexes wrap around

        Returns:
            Cell text, or None for an invalid index or an empty cell
        """
        if wrap:
            if row < 0:
                row += self.row_count
            if column < 0:
                column += self.column_count
        if not (0 <= row < self.row_count and 0 <= column < self.column_count):
            return None
        cells = self.cells[row]
        if column >= len(cells):
            return None
        return cells[column]

    def iter_cells(self) -> Iterator[Tuple[int, int, str]]:
        """Yield (row, column, text) for every non-empty cell, row by row."""
        for row_index, row in enumerate(self.cells):
            for column_index, text in enumerate(row):
                if text is not None:
                    yield row_index, column_index, text

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Optional[str]]],
        x: float,
        y: float,
        page: int = 1
    ) -> "DocumentTable":
        """Build a table whose first non-empty cell sits at (x, y)."""
        cells = [[_clean_cell(text) for text in row] for row in rows]
        first = next(
            (text for row in cells for text in row if text),
            "",
        )
        return cls(cells=cells, anchor=TextUnit(text=first, x=x, y=y, page=page))


def _clean_cell(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    for char in ('\r', '\x07'):
        text = text.replace(char, '')
    return text.strip()
