"""Resolve table fields."""
import logging
import re
from typing import Optional, Tuple

from fieldfinder.extraction.patterns import compile_pattern, first_value
from fieldfinder.extraction.value_parser import extract_value
from fieldfinder.search.context import SearchContext
from fieldfinder.search.tree import NodeLabel
from fieldfinder.tables.document_table import DocumentTable

logger = logging.getLogger(__name__)


class TableNodeProcessor:
    """
    Find a field in the document tables.

    The field's pattern and check value locate a cell; the Terminal
    expression's (row offset, column offset) then point, relative to that
    cell, at the cell holding the value. Tables are tried in order until one
    yields a value.
    """

    def __init__(self, context: SearchContext):
        self.context = context
        self.tree = context.tree

    def process(self, field_handle: int) -> bool:
        """
        Process a table Field node.

        Returns:
            Whether a value was found
        """
        terminal = self.find_terminal(field_handle)
        if terminal is None:
            logger.debug("Table field '%s' has no terminal expression", self.context.field.name)
            return False

        content = self.tree.content(field_handle)
        regex = compile_pattern(content.text_expression)
        for table_index, table in enumerate(self.context.tables):
            cell = self.find_matching_cell(table, regex, content.check_value, content.use_phonetic)
            if cell is None:
                continue
            if self._extract_from_table(table, cell, terminal):
                logger.debug(
                    "Table field '%s' found in table %d at cell %s",
                    content.name, table_index, cell,
                )
                return True
        return False

    def find_terminal(self, field_handle: int) -> Optional[int]:
        """Follow the first child of every node down to the Terminal."""
        handle = field_handle
        while True:
            node = self.tree.node(handle)
            if node.content.label is NodeLabel.TERMINAL:
                return handle
            if not node.children:
                return None
            handle = node.children[0]

    def find_matching_cell(
        self,
        table: DocumentTable,
        regex: re.Pattern,
        check_value: Optional[str],
        use_phonetic: bool = False
    ) -> Optional[Tuple[int, int]]:
        """First cell, row by row, whose match is similar to the check value."""
        for row, column, text in table.iter_cells():
            if use_phonetic:
                text = self.context.encoder.encode(text)
            match = regex.search(text)
            if not match:
                continue
            if not check_value or self.context.scorer.is_similar(first_value(match), check_value, use_phonetic):
                return row, column
        return None

    def _extract_from_table(self, table: DocumentTable, cell: Tuple[int, int], terminal: int) -> bool:
        content = self.tree.content(terminal)
        row, column = cell
        target = table.cell(row + content.first_parameter, column + content.second_parameter, wrap=False)
        if target is None:
            return False

        result = extract_value(
            target,
            content.text_expression,
            self.context.field.base_value_type,
            self.context.settings.decimal_separator,
        )
        if result is None:
            return False
        if not result.is_valid:
            content.found_value = content.found_value or result.value
            return False

        content.found_value = result.value
        self.tree.mark_success(terminal)
        return True
