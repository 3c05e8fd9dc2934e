from collections import Counter

import pytest

from fieldfinder.layout import DocumentLayout, GridStructure, LineGrouper, LineMapping
from fieldfinder.layout.line_grouper import clean_text
from fieldfinder.models import TextUnit
from fieldfinder.phonetics import DefaultSoundexEncoder
from fieldfinder.tables import DocumentTable


def unit(text, x, y=0.0, page=1):
    return TextUnit(text=text, x=x, y=y, page=page)


def test_line_mapping_order():
    mapping = LineMapping()
    mapping.add_line(5, [unit("b", 50), unit("a", 10)])
    mapping.add_line(2, [unit("c", 0)])
    mapping.add_line(9, [])

    assert mapping.keys() == [2, 5, 9]
    assert [u.text for u in mapping[5]] == ["a", "b"]
    assert mapping.index_of(5) == 1
    assert mapping.index_of(3) == -1
    assert mapping.insertion_index(3) == 1
    assert mapping.line_at(2) == 9
    assert mapping.line_at(-1) is None
    assert mapping.line_at(3) is None
    assert mapping.last_line == 9
    assert mapping.max_x() == 50
    assert 5 in mapping and 3 not in mapping


def test_line_mapping_rejects_line_zero():
    with pytest.raises(ValueError):
        LineMapping().add_line(0, [unit("a", 0)])


def test_clean_text():
    assert clean_text("\tAB\x0bC\r") == "AB C"
    assert clean_text("\x07\f") == ""


def test_group_page():
    words = [
        ("Total", 10, 100.0),
        ("450", 80, 102.0),
        ("Invoice", 10, 50.0),
        ("x", 5, 50.0),
        {"text": "A-17", "x": 90, "y": 53.0},
    ]
    mapping = LineGrouper(vertical_tolerance=6.0, min_text_length=2).group_page(words)

    assert mapping.keys() == [1, 2]
    assert [u.text for u in mapping[1]] == ["Invoice", "A-17"]
    assert [u.text for u in mapping[2]] == ["Total", "450"]


def test_group_pages_continues_line_numbers():
    grouper = LineGrouper()
    pages = [
        [("Invoice", 10, 10), ("Date", 10, 30)],
        [("Total", 10, 10)],
    ]
    mappings = grouper.group_pages(pages)
    assert [m.keys() for m in mappings] == [[1, 2], [3]]
    assert mappings[1][3][0].page == 2

    merged = LineGrouper.merge(mappings)
    assert merged.keys() == [1, 2, 3]
    assert merged[3][0].text == "Total"


def seven_line_page():
    mapping = LineMapping()
    for number in range(1, 8):
        mapping.add_line(number, [
            unit(f"a{number}", 0, y=number * 10),
            unit(f"b{number}", 150, y=number * 10),
            unit(f"c{number}", 300, y=number * 10),
        ])
    # Line 4 only has a unit in the middle column
    mapping.add_line(4, [unit("middle", 120, y=40)])
    return mapping


def test_grid_covers_every_unit_once():
    mapping = seven_line_page()
    grid = GridStructure(mapping, size=3)
    assert grid.row_size == 3
    assert grid.column_width == 100

    seen = Counter()
    for row in range(3):
        for column in range(3):
            for u in grid[(row, column)].lines.units():
                seen[id(u)] += 1
    assert sorted(seen.values()) == [1] * len(list(mapping.units()))
    assert set(seen) == {id(u) for u in mapping.units()}


def test_grid_line_belongs_to_one_band():
    grid = GridStructure(seven_line_page(), size=3)
    bands = {}
    for row in range(3):
        for segment in grid.row_band(row):
            for number in segment.lines:
                assert bands.setdefault(number, row) == row
    assert bands == {1: 0, 2: 0, 3: 0, 4: 1, 5: 1, 6: 1, 7: 2}
    # Segments keep document line numbers
    assert grid[(1, 1)].lines.keys() == [4, 5, 6]
    assert grid[(1, 0)].lines.keys() == [5, 6]


def test_grid_invalid_coordinates():
    grid = GridStructure(seven_line_page(), size=3)
    assert grid[(3, 0)] is None
    assert grid[(0, -1)] is None
    assert grid[(-1, -1)] is None


def test_grid_table_assignment():
    table = DocumentTable.from_rows([["Qty", "Price"], ["3", "1.50"]], x=250, y=45)
    grid = GridStructure(seven_line_page(), [table], size=3)

    holders = [
        (row, column)
        for row in range(3)
        for column in range(3)
        if table in grid[(row, column)].tables
    ]
    assert holders == [(1, 2)]


def test_document_table_cells():
    table = DocumentTable.from_rows(
        [[None, "Qty", "Price\r"], ["Apple", "3"], ["Total", None, "4.50"]],
        x=10, y=20, page=2,
    )
    assert table.anchor.text == "Qty"
    assert table.page == 2
    assert (table.row_count, table.column_count) == (3, 3)
    assert table.cell(0, 2) == "Price"
    assert table.cell(-1, -1) == "4.50"
    assert table.cell(1, 2) is None
    assert table.cell(5, 0) is None
    assert table.cell(-1, 0, wrap=False) is None
    assert [(row, column) for row, column, _ in table.iter_cells()] == [
        (0, 1), (0, 2), (1, 0), (1, 1), (2, 0), (2, 2),
    ]


def test_layout_from_lines_and_pages():
    layout = DocumentLayout.from_lines({2: ["Total:", "450"], 1: [("Invoice", 10.0)]})
    assert layout.lines.keys() == [1, 2]
    assert [u.x for u in layout.lines[2]] == [0.0, 1.0]
    assert list(layout.grids) == [1]

    pages = [[("Invoice", 0, 10)], [("Total", 0, 10)]]
    layout = DocumentLayout.from_pages(pages)
    assert layout.lines.keys() == [1, 2]
    assert sorted(layout.grids) == [1, 2]
    assert layout.grids[2][(0, 0)].lines.keys() == [2]


def test_ensure_phonetic():
    layout = DocumentLayout.from_lines({1: ["Invoice"]})
    layout.ensure_phonetic(DefaultSoundexEncoder())
    assert layout.lines[1][0].phonetic == "I512"
