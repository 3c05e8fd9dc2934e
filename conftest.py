import pytest

from fieldfinder.layout import DocumentLayout
from fieldfinder.models import TextUnit
from fieldfinder.similarity import SimilarityScorer


@pytest.fixture
def scorer():
    return SimilarityScorer()


@pytest.fixture
def make_layout():
    """Build a layout from ``{line: [(text, x), ...]}``."""
    def _make(lines, tables=(), grid_size=3):
        converted = {}
        for number, units in lines.items():
            converted[number] = [
                unit if isinstance(unit, TextUnit) else TextUnit(text=unit[0], x=unit[1], y=float(number) * 10)
                for unit in units
            ]
        return DocumentLayout.from_lines(converted, tables, grid_size)
    return _make
