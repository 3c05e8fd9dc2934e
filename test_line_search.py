import pytest

from fieldfinder.layout import LineMapping
from fieldfinder.models import Expression, FieldSpec, TextUnit
from fieldfinder.phonetics import DefaultSoundexEncoder
from fieldfinder.search import (
    LineContentChecker,
    NodeLabel,
    OffsetNodeProcessor,
    SearchContext,
    SearchSettings,
    SearchTree,
    TerminalNodeProcessor,
    horizontal_range,
)


def units(*pairs):
    return [TextUnit(text=text, x=x) for text, x in pairs]


LINE = units(("Total", 10), ("450", 50), ("USD", 90))


def test_horizontal_range():
    assert horizontal_range(LINE, 50, 0) == (0, 2)
    assert horizontal_range(LINE, 50, 1) == (1, 2)
    assert horizontal_range(LINE, 50, -1) == (0, 1)
    assert horizontal_range(LINE, 60, 1) == (2, 2)
    assert horizontal_range(LINE, 5, -1) == (0, -1)


def test_horizontal_range_rejects_unknown_status():
    with pytest.raises(ValueError):
        horizontal_range(LINE, 50, 2)
    with pytest.raises(ValueError):
        LineContentChecker(LINE, None, horizontal_status=-2)


def test_checker_finds_pattern(scorer):
    checker = LineContentChecker(LINE, scorer)
    assert checker.check(r"\d+")
    assert checker.joined_matches == "450"
    assert checker.position == 50


def test_checker_respects_horizontal_status(scorer):
    checker = LineContentChecker(LINE, scorer, position=60, horizontal_status=1)
    assert not checker.check(r"\d+")
    assert checker.joined_matches is None
    assert checker.position == 0.0

    checker = LineContentChecker(LINE, scorer, position=50, horizontal_status=-1)
    assert checker.check(r"[a-z]+")
    assert checker.joined_matches == "Total"


def test_checker_joins_groups(scorer):
    checker = LineContentChecker(units(("10-20", 0)), scorer)
    assert checker.check(r"(\d+)-(\d+)")
    assert checker.joined_matches == "10|20"


def test_checker_skips_dissimilar_units(scorer):
    checker = LineContentChecker(units(("Subtotal", 10), ("Total", 50)), scorer)
    assert checker.check(r"\w*total", "Total")
    assert checker.position == 50


def test_checker_first_acceptable_unit_wins(scorer):
    checker = LineContentChecker(units(("Totl", 10), ("Total", 50)), scorer)
    assert checker.check(r"Tot\w*", "Total")
    assert checker.joined_matches == "Totl"
    assert checker.position == 10


def test_checker_phonetic_text(scorer):
    line = units(("Invoise", 10))
    line[0].phonetic = DefaultSoundexEncoder().encode("Invoise")
    assert LineContentChecker(line, scorer, use_phonetic=True).check("I512", "I512")
    assert not LineContentChecker(line, scorer).check("I512", "I512")


def numbered_lines(numbers, text="Value 7"):
    mapping = LineMapping()
    for number in numbers:
        mapping.add_line(number, [TextUnit(text=text, x=float(number))])
    return mapping


def offset_context(lines, field, scorer, **settings):
    tree = SearchTree()
    tree.populate([field])
    return SearchContext(
        tree=tree,
        field=field,
        lines=lines,
        scorer=scorer,
        encoder=tree.encoder,
        settings=SearchSettings(**settings),
    )


def test_candidate_lines_nearest_first(scorer):
    field = FieldSpec(name="Total", expressions=[r"(\d+)"])
    context = offset_context(numbered_lines(range(1, 21)), field, scorer)
    processor = OffsetNodeProcessor(context)

    candidates = processor.candidate_lines(10)
    assert candidates == [11, 9, 12, 8, 13, 7, 14, 6, 15, 5]
    assert processor.candidate_lines(2) == [3, 1, 4, 5, 6, 7]


def test_candidate_lines_bounded_by_radius(scorer):
    field = FieldSpec(name="Total", expressions=[r"(\d+)"])
    context = offset_context(numbered_lines(range(1, 40)), field, scorer, offset_radius=3)
    assert len(OffsetNodeProcessor(context).candidate_lines(20)) == 6


def test_candidate_lines_around_missing_anchor(scorer):
    field = FieldSpec(name="Total", expressions=[r"(\d+)"])
    context = offset_context(numbered_lines(range(2, 21, 2)), field, scorer, offset_radius=2)
    assert OffsetNodeProcessor(context).candidate_lines(5) == [6, 4, 8, 2]


def test_offset_search_adds_copies_with_duplicate_guard(scorer):
    field = FieldSpec(name="Total", value_type="Number", expressions=[r"(\d+)"])
    context = offset_context(numbered_lines(range(1, 6)), field, scorer)
    tree = context.tree
    line_node = tree.children(tree.find_field("Total"))[0]
    terminal = tree.children(line_node)[0]
    processor = OffsetNodeProcessor(context)

    assert processor.search(terminal, 3, 1) == 4
    assert processor.search(terminal, 3, 1) == 4
    assert processor.search(terminal, 3, 1) == 0

    siblings = tree.children(line_node)
    assert len(siblings) == 1 + 4 * 2
    for line in (1, 2, 4, 5):
        on_line = [h for h in siblings if line in tree.content(h).lines]
        assert len(on_line) == 2

    copy = tree.content(siblings[1])
    assert copy.label is NodeLabel.TERMINAL
    assert copy.text_expression == r"(\d+)"
    assert copy.found_value == "7"
    assert copy.horizontal_position == copy.lines[0]
    assert not copy.status


def test_offset_search_extends_chain_of_copied_search_node(scorer):
    field = FieldSpec(name="Total", expressions=[Expression(pattern="Value", first_parameter=1), r"(\d+)"])
    context = offset_context(numbered_lines([1, 2]), field, scorer)
    tree = context.tree
    line_node = tree.children(tree.find_field("Total"))[0]
    search = tree.children(line_node)[0]

    assert OffsetNodeProcessor(context).search(search, 1, 1) == 1

    copy = tree.children(line_node)[1]
    assert tree.content(copy).label is NodeLabel.SEARCH
    assert tree.content(copy).lines == [2]
    chain = tree.children(copy)
    assert len(chain) == 1
    assert tree.content(chain[0]).label is NodeLabel.TERMINAL


def test_terminal_keeps_trying_lines_after_missing_one(scorer):
    lines = LineMapping()
    lines.add_line(1, units(("filler", 0)))
    lines.add_line(2, units(("Value 7", 0)))
    lines.add_line(3, units(("filler", 0)))
    field = FieldSpec(name="Total", value_type="Number", expressions=[r"Value\s*(\d+)"])
    context = offset_context(lines, field, scorer)
    tree = context.tree
    terminal = tree.children(tree.children(tree.find_field("Total"))[0])[0]
    tree.content(terminal).lines = [99, 2]

    TerminalNodeProcessor(context).process(terminal, 1)

    assert tree.content(terminal).status
    assert tree.content(terminal).found_value == "7"
