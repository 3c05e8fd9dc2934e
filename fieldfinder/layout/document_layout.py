"""Positioned text of a whole document: lines, tables and grids."""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from fieldfinder.layout.grid import DEFAULT_GRID_SIZE, GridCollection, GridStructure
from fieldfinder.layout.line_grouper import LineGrouper, RawWord
from fieldfinder.layout.line_mapping import LineMapping
from fieldfinder.models.schemas import TextUnit
from fieldfinder.phonetics import PhoneticEncoder
from fieldfinder.tables.document_table import DocumentTable

logger = logging.getLogger(__name__)


class DocumentLayout:
    """
    Document structure representation.

    Holds the merged line mapping of all pages, the document tables and
    one grid per page.
    """

    def __init__(
        self,
        lines: LineMapping,
        tables: Optional[List[DocumentTable]] = None,
        grids: Optional[GridCollection] = None
    ):
        self.lines = lines
        self.tables: List[DocumentTable] = list(tables or [])
        self.grids = grids if grids is not None else GridCollection()

    @classmethod
    def from_pages(
        cls,
        pages: Sequence[Iterable[RawWord]],
        tables: Iterable[DocumentTable] = (),
        grouper: Optional[LineGrouper] = None,
        grid_size: int = DEFAULT_GRID_SIZE
    ) -> "DocumentLayout":
        """
        Build a layout from raw words, one word list per page.

        Args:
            pages: Words of each page, in page order
            tables: Tables of the document; their anchor page selects the page grid
            grouper: Line grouper, default settings when omitted
            grid_size: Segments per grid row and column

        Returns:
            DocumentLayout
        """
        grouper = grouper or LineGrouper()
        page_mappings = grouper.group_pages(pages)
        tables = list(tables)

        grids = GridCollection()
        for page, mapping in enumerate(page_mappings, start=1):
            page_tables = [table for table in tables if table.page == page]
            grids[page] = GridStructure(mapping, page_tables, grid_size)

        layout = cls(LineGrouper.merge(page_mappings), tables, grids)
        logger.debug(
            "Layout built: %d pages, %d lines, %d tables",
            len(page_mappings), len(layout.lines), len(tables),
        )
        return layout

    @classmethod
    def from_lines(
        cls,
        lines: Dict[int, Iterable[Any]],
        tables: Iterable[DocumentTable] = (),
        grid_size: int = DEFAULT_GRID_SIZE
    ) -> "DocumentLayout":
        """
        Build a layout from lines that are already numbered.

        Units may be TextUnits, plain strings (placed left to right) or
        ``(text, x)`` / ``(text, x, y)`` tuples. Grids are built per page
        of the units.
        """
        mapping = LineMapping()
        for number, units in lines.items():
            mapping.add_line(number, _to_units(number, units))

        by_page: Dict[int, LineMapping] = {}
        for number, units in mapping.items():
            page = units[0].page if units else 1
            by_page.setdefault(page, LineMapping()).add_line(number, units)

        tables = list(tables)
        grids = GridCollection()
        for page in sorted(by_page):
            page_tables = [table for table in tables if table.page == page]
            grids[page] = GridStructure(by_page[page], page_tables, grid_size)

        return cls(mapping, tables, grids)

    def ensure_phonetic(self, encoder: PhoneticEncoder) -> None:
        """Fill in the phonetic text of every unit that has none yet."""
        for unit in self.lines.units():
            if unit.phonetic is None:
                unit.phonetic = encoder.encode(unit.text)


def _to_units(number: int, units: Iterable[Any]) -> List[TextUnit]:
    converted = []
    for position, unit in enumerate(units):
        if isinstance(unit, TextUnit):
            converted.append(unit)
        elif isinstance(unit, str):
            converted.append(TextUnit(text=unit, x=float(position), y=float(number)))
        else:
            values = list(unit)
            y = float(values[2]) if len(values) > 2 else float(number)
            converted.append(TextUnit(text=str(values[0]), x=float(values[1]), y=y))
    return converted
