"""Ordered mapping from line number to the text units on that line."""
from bisect import bisect_left, insort
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from fieldfinder.models.schemas import TextUnit


class LineMapping:
    """
    Lines of a document keyed by line number.

    Line numbers start at 1 (0 marks an unknown position in the search
    tree). Keys are kept in ascending order and the units of every line are
    sorted by horizontal coordinate, so positions "above" and "below" refer
    to the mapping order rather than raw line numbers.
    """

    def __init__(self, lines: Optional[Dict[int, Iterable[TextUnit]]] = None):
        self._lines: Dict[int, List[TextUnit]] = {}
        self._keys: List[int] = []
        for number, units in (lines or {}).items():
            self.add_line(number, units)

    def add_line(self, number: int, units: Iterable[TextUnit]) -> None:
        """Add or replace a line."""
        if number < 1:
            raise ValueError(f"Line numbers start at 1, got {number}")
        if number not in self._lines:
            insort(self._keys, number)
        self._lines[number] = sorted(units, key=lambda unit: unit.x)

    def __contains__(self, number: object) -> bool:
        return number in self._lines

    def __getitem__(self, number: int) -> List[TextUnit]:
        return self._lines[number]

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[int]:
        return iter(self._keys)

    def keys(self) -> List[int]:
        return list(self._keys)

    def items(self) -> Iterator[Tuple[int, List[TextUnit]]]:
        for number in self._keys:
            yield number, self._lines[number]

    def units(self) -> Iterator[TextUnit]:
        """Iterate over every unit, line by line."""
        for _, units in self.items():
            yield from units

    def index_of(self, number: int) -> int:
        """Position of a line in mapping order, -1 if absent."""
        index = bisect_left(self._keys, number)
        if index < len(self._keys) and self._keys[index] == number:
            return index
        return -1

    def insertion_index(self, number: int) -> int:
        """Position a line would take in mapping order."""
        return bisect_left(self._keys, number)

    def line_at(self, index: int) -> Optional[int]:
        """Line number at a mapping position, None when out of range."""
        if 0 <= index < len(self._keys):
            return self._keys[index]
        return None

    @property
    def last_line(self) -> int:
        return self._keys[-1] if self._keys else 0

    def max_x(self) -> float:
        return max((unit.x for unit in self.units()), default=0.0)

    def __repr__(self) -> str:
        return f"LineMapping(lines={len(self._keys)})"
