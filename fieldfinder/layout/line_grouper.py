"""Group positioned words into numbered lines."""
import logging
from typing import Any, Dict, Iterable, List, Sequence, Union

import numpy as np

from fieldfinder.layout.line_mapping import LineMapping
from fieldfinder.models.schemas import TextUnit

logger = logging.getLogger(__name__)

RawWord = Union[TextUnit, Dict[str, Any], Sequence[Any]]


class LineGrouper:
    """Build a line mapping from the words of one or more pages."""

    def __init__(self, vertical_tolerance: float = 6.0, min_text_length: int = 2):
        """
        Initialize line grouper.

        Args:
            vertical_tolerance: Largest vertical distance (in points) between a
                word and the first word of its line
            min_text_length: Words with shorter cleaned text are dropped
        """
        self.vertical_tolerance = vertical_tolerance
        self.min_text_length = min_text_length

    def group_page(self, words: Iterable[RawWord], page: int = 1, first_line: int = 1) -> LineMapping:
        """
        Group the words of a page into lines.

        Args:
            words: TextUnits, ``{"text", "x", "y"}`` dicts or ``(text, x, y)`` tuples
            page: Page number stored on every unit
            first_line: Number given to the topmost line

        Returns:
            LineMapping numbered from first_line
        """
        units = []
        for word in words:
            unit = self._to_unit(word, page)
            if len(unit.text) >= self.min_text_length:
                units.append(unit)

        mapping = LineMapping()
        if not units:
            return mapping

        ys = np.array([unit.y for unit in units], dtype=float)
        order = np.argsort(ys, kind="stable")

        line_number = first_line
        current: List[TextUnit] = []
        reference_y = ys[order[0]]
        for index in order:
            if current and abs(ys[index] - reference_y) > self.vertical_tolerance:
                mapping.add_line(line_number, current)
                line_number += 1
                current = []
                reference_y = ys[index]
            current.append(units[index])
        mapping.add_line(line_number, current)

        logger.debug("Page %d: %d words grouped into %d lines", page, len(units), len(mapping))
        return mapping

    def group_pages(self, pages: Sequence[Iterable[RawWord]]) -> List[LineMapping]:
        """
        Group several pages, continuing line numbers across page breaks.

        Returns:
            One mapping per page; numbers of page N start after the last line of page N-1
        """
        mappings = []
        last_line = 0
        for page_index, words in enumerate(pages, start=1):
            mapping = self.group_page(words, page=page_index, first_line=last_line + 1)
            if len(mapping):
                last_line = mapping.last_line
            mappings.append(mapping)
        return mappings

    @staticmethod
    def merge(mappings: Iterable[LineMapping]) -> LineMapping:
        """Combine page mappings with distinct line numbers into one."""
        merged = LineMapping()
        for mapping in mappings:
            for number, units in mapping.items():
                merged.add_line(number, units)
        return merged

    def _to_unit(self, word: RawWord, page: int) -> TextUnit:
        if isinstance(word, TextUnit):
            return word.model_copy(update={"text": clean_text(word.text), "page": page})
        if isinstance(word, dict):
            return TextUnit(
                text=clean_text(str(word.get("text", ""))),
                x=float(word.get("x", 0.0)),
                y=float(word.get("y", 0.0)),
                page=page,
            )
        text, x, y = word[:3]
        return TextUnit(text=clean_text(str(text)), x=float(x), y=float(y), page=page)


def clean_text(text: str) -> str:
    """Remove control characters left by document readers."""
    for char in ('\r', '\x07', '\t', '\f'):
        text = text.replace(char, '')
    return text.replace('\x0b', ' ').strip()
