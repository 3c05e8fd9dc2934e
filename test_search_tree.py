import pytest

from fieldfinder.models import Expression, FieldSpec
from fieldfinder.search import NodeLabel, NodeContent, SearchTree, UNDEFINED_LINE


def chain_field(name="Total", count=3):
    return FieldSpec(
        name=name,
        value_type="Number",
        expressions=[Expression(pattern=f"step{index}") for index in range(count)],
    )


def build_tree(*fields):
    tree = SearchTree()
    tree.populate(fields)
    return tree


def test_tree_shape():
    tree = build_tree(chain_field("Total", 3), FieldSpec(name="Label"))

    assert [tree.content(h).name for h in tree.field_handles()] == ["Total", "Label"]
    assert tree.content(tree.root).label is NodeLabel.ROOT
    assert tree.content(tree.root).name == "root"

    total = tree.find_field("Total")
    leaves = tree.leaves(total)
    assert len(leaves) == 1
    assert tree.depth(leaves[0], total) == 4

    labels = [tree.content(h).display_label for h in tree.iter_subtree(total)]
    assert labels == ["Field", "Line", "Search 0", "Search 1", "Terminal"]

    label = tree.find_field("Label")
    assert [tree.content(h).label for h in tree.iter_subtree(label)] == [NodeLabel.FIELD, NodeLabel.LINE]


def test_chain_carries_expression_parameters():
    field = FieldSpec(name="Total", expressions=[r"Total;1;1", r"(\d+);0;-1"])
    tree = build_tree(field)
    line = tree.children(tree.find_field("Total"))[0]
    search = tree.children(line)[0]
    terminal = tree.children(search)[0]

    assert tree.content(search).label is NodeLabel.SEARCH
    assert (tree.content(search).first_parameter, tree.content(search).second_parameter) == (1, 1)
    assert tree.content(terminal).label is NodeLabel.TERMINAL
    assert tree.content(terminal).search_level == 1
    assert tree.content(terminal).second_parameter == -1
    assert tree.content(terminal).lines == [UNDEFINED_LINE]


def test_phonetic_field_is_encoded():
    tree = build_tree(FieldSpec(name="Invoice", text_expression="soundex(Invoice)"))
    content = tree.content(tree.find_field("Invoice"))
    assert content.use_phonetic
    assert content.text_expression == "I512"
    assert content.check_value == "I512"


def test_terminal_never_gets_children():
    tree = build_tree(chain_field("Total", 1))
    terminal = tree.leaves(tree.find_field("Total"))[0]

    with pytest.raises(ValueError):
        tree.add_child(terminal, NodeContent(name="Total", label=NodeLabel.SEARCH))

    tree.add_search_values(chain_field("Total", 1), terminal)
    assert tree.children(terminal) == []


def test_add_search_values_errors():
    tree = build_tree(chain_field("Total", 2))
    with pytest.raises(ValueError):
        tree.add_search_values(None, tree.find_field("Total"))
    with pytest.raises(ValueError):
        tree.add_search_values(chain_field("Total", 2), 999)


def test_add_search_values_under_every_line():
    field = chain_field("Total", 2)
    tree = SearchTree()
    field_handle = tree.add_child(tree.root, NodeContent(name="Total", label=NodeLabel.FIELD))
    for line in (3, 8):
        tree.add_child(field_handle, NodeContent(name="Total", label=NodeLabel.LINE, lines=[line]))

    tree.add_search_values(field, field_handle)

    for line_handle in tree.children(field_handle):
        chain = list(tree.iter_subtree(line_handle))
        assert len(chain) == 3
        assert tree.content(chain[-1]).label is NodeLabel.TERMINAL
        assert tree.content(chain[-1]).lines == tree.content(line_handle).lines


def test_add_search_values_from_level():
    field = chain_field("Total", 3)
    tree = SearchTree()
    search = tree.add_child(tree.root, NodeContent(name="Total", label=NodeLabel.SEARCH, search_level=1))
    tree.add_search_values(field, search, 2)
    assert [tree.content(h).search_level for h in tree.children(search)] == [2]

    tree.add_search_values(field, search, 3)
    assert len(tree.children(search)) == 1


def test_mark_success_stops_below_root():
    tree = build_tree(chain_field("Total", 2))
    total = tree.find_field("Total")
    terminal = tree.leaves(total)[0]

    tree.mark_success(terminal)

    assert all(tree.content(h).status for h in tree.iter_subtree(total))
    assert not tree.content(tree.root).status


def test_snapshot_and_restore():
    tree = build_tree(chain_field("Total", 1))
    total = tree.find_field("Total")
    node_count = len(tree.nodes)
    snapshot = tree.snapshot(total)

    line = tree.children(total)[0]
    tree.content(line).lines = [4]
    extra = tree.add_child(total, NodeContent(name="Total", label=NodeLabel.LINE, lines=[7]))
    tree.mark_success(tree.leaves(total)[0])
    assert extra in tree.children(total)

    tree.restore(snapshot)

    assert len(tree.nodes) == node_count
    assert tree.children(total) == [line]
    assert tree.content(line).lines == [UNDEFINED_LINE]
    assert not tree.content(total).status


def test_values_of_successful_leaves():
    tree = build_tree(chain_field("Total", 1), FieldSpec(name="Missing"))
    total = tree.find_field("Total")
    second_line = tree.add_child(total, NodeContent(name="Total", label=NodeLabel.LINE))
    extra_terminal = tree.add_child(second_line, NodeContent(name="Total", label=NodeLabel.TERMINAL))

    first_terminal = tree.leaves(total)[0]
    for handle, value in ((first_terminal, "450"), (extra_terminal, "450")):
        tree.content(handle).found_value = value
        tree.mark_success(handle)

    assert tree.collect_values() == {"Total": "450", "Missing": ""}


def test_values_fall_back_to_inner_nodes():
    tree = build_tree(chain_field("Total", 2))
    total = tree.find_field("Total")
    line = tree.children(total)[0]
    search = tree.children(line)[0]

    tree.content(line).found_value = "Total"
    tree.content(search).found_value = "Amount"
    assert tree.field_value(total) == "Amount"

    tree.mark_success(line)
    assert tree.field_value(total) == "Total"
