"""
Search tree for field resolution.

Nodes live in an arena (a list) and refer to each other by integer
handle. The tree has one root, one Field node per configured field and
below every Field a chain mirroring the field's expressions::

    root
    └── Field
        └── Line
            └── Search 0
                └── ...
                    └── Terminal

Matching mutates the tree in place: Line and Search nodes gain siblings
through offset search, success flags travel up to the Field node and found
values are stored on the nodes that produced them.
"""
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from fieldfinder.models.schemas import NO_GRID, ROOT_NAME, FieldSpec
from fieldfinder.phonetics import DefaultSoundexEncoder, PhoneticEncoder

logger = logging.getLogger(__name__)

# Candidate line of a node whose position is not known yet
UNDEFINED_LINE = 0


class NodeLabel(str, Enum):
    """Role of a node in the tree."""
    ROOT = "Root"
    FIELD = "Field"
    LINE = "Line"
    SEARCH = "Search"
    TERMINAL = "Terminal"


@dataclass
class NodeContent:
    """Mutable state of a search node."""
    name: str
    label: NodeLabel
    # Expression index for Search and Terminal nodes
    search_level: int = 0
    value_type: str = "String"
    text_expression: Optional[str] = None
    check_value: Optional[str] = None
    first_parameter: int = 0
    second_parameter: int = 0
    lines: List[int] = field(default_factory=lambda: [UNDEFINED_LINE])
    horizontal_position: float = 0.0
    status: bool = False
    found_value: Optional[str] = None
    use_phonetic: bool = False
    grid_coordinates: Tuple[int, int] = NO_GRID
    # Set on siblings created by offset search
    is_offset_copy: bool = False

    def copy(self, **changes) -> "NodeContent":
        """Copy with its own lines list, optionally changing some values."""
        values = {"lines": list(self.lines)}
        values.update(changes)
        return replace(self, **values)

    @property
    def display_label(self) -> str:
        if self.label is NodeLabel.SEARCH:
            return f"Search {self.search_level}"
        return self.label.value


@dataclass
class TreeNode:
    handle: int
    content: NodeContent
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass
class TreeSnapshot:
    """Saved state of one subtree, used to undo a failed attempt."""
    node_count: int
    states: Dict[int, Tuple[List[int], NodeContent]]


class SearchTree:
    """Arena of search nodes with the operations matching needs."""

    def __init__(self, encoder: Optional[PhoneticEncoder] = None):
        """
        Initialize an empty tree holding only the root.

        Args:
            encoder: Phonetic encoder for fields and expressions in phonetic mode
        """
        self.encoder = encoder or DefaultSoundexEncoder()
        self.nodes: List[TreeNode] = []
        self.root = self._new_node(NodeContent(name=ROOT_NAME, label=NodeLabel.ROOT))

    def _new_node(self, content: NodeContent, parent: Optional[int] = None) -> int:
        handle = len(self.nodes)
        self.nodes.append(TreeNode(handle=handle, content=content, parent=parent))
        return handle

    def node(self, handle: int) -> TreeNode:
        if handle is None or not 0 <= handle < len(self.nodes):
            raise ValueError(f"Invalid node handle: {handle}")
        return self.nodes[handle]

    def content(self, handle: int) -> NodeContent:
        return self.node(handle).content

    def children(self, handle: int) -> List[int]:
        return self.node(handle).children

    def parent(self, handle: int) -> Optional[int]:
        return self.node(handle).parent

    def add_child(self, parent: int, content: NodeContent) -> int:
        """Append a new node under parent; Terminal nodes never get children."""
        parent_node = self.node(parent)
        if parent_node.content.label is NodeLabel.TERMINAL:
            raise ValueError(f"Terminal node {parent} of field '{parent_node.content.name}' cannot have children")
        handle = self._new_node(content, parent)
        parent_node.children.append(handle)
        return handle

    def clear_children(self, handle: int) -> None:
        """Detach all children; detached nodes stay in the arena unreachable."""
        self.node(handle).children = []

    def field_handles(self) -> List[int]:
        return list(self.node(self.root).children)

    def find_field(self, name: str) -> Optional[int]:
        for handle in self.node(self.root).children:
            if self.nodes[handle].content.name == name:
                return handle
        return None

    def iter_subtree(self, handle: int) -> Iterator[int]:
        """Handles of a node and all its descendants, depth first."""
        stack = [handle]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self.nodes[current].children))

    def leaves(self, handle: int) -> List[int]:
        return [current for current in self.iter_subtree(handle)
                if current != handle and self.nodes[current].is_leaf]

    def depth(self, handle: int, ancestor: int) -> int:
        """Number of edges between a node and one of its ancestors."""
        depth = 0
        current = handle
        while current != ancestor:
            current = self.node(current).parent
            if current is None:
                raise ValueError(f"Node {ancestor} is not an ancestor of {handle}")
            depth += 1
        return depth

    def mark_success(self, handle: int) -> None:
        """Set the success flag on a node and every ancestor below the root."""
        current = handle
        while current is not None and current != self.root:
            node = self.nodes[current]
            node.content.status = True
            current = node.parent

    # Construction

    def populate(self, fields: Iterable[FieldSpec]) -> None:
        """Add a Field node, its Line child and expression chain for every field."""
        for spec in fields:
            text_expression, check_value = spec.text_expression, spec.expected_name
            if spec.use_phonetic:
                text_expression = self.encoder.encode(text_expression)
                check_value = self.encoder.encode(check_value)

            field_content = NodeContent(
                name=spec.name,
                label=NodeLabel.FIELD,
                value_type=spec.value_type,
                text_expression=text_expression,
                check_value=check_value,
                use_phonetic=spec.use_phonetic,
                grid_coordinates=tuple(spec.grid_coordinates),
            )
            field_handle = self.add_child(self.root, field_content)
            self.add_child(field_handle, field_content.copy(label=NodeLabel.LINE))
            self.add_search_values(spec, field_handle)
            logger.debug("Field '%s': %d expressions", spec.name, len(spec.expressions))

    def add_search_values(self, spec: FieldSpec, handle: int, initial_index: int = 0) -> None:
        """
        Attach the expression chain from ``initial_index`` on.

        Field and Line nodes that already have children get the chain under
        every child; any other node gets it directly below itself.

        Args:
            spec: Field whose expressions are used
            handle: Node to extend
            initial_index: First expression to add
        """
        if spec is None:
            raise ValueError("Field specification is required to build search values")
        node = self.node(handle)
        if node.content.label is NodeLabel.TERMINAL:
            return
        if initial_index >= len(spec.expressions):
            return

        if node.content.label in (NodeLabel.FIELD, NodeLabel.LINE) and node.children:
            for child in list(node.children):
                self._add_chain(spec, child, initial_index)
        else:
            self._add_chain(spec, handle, initial_index)

    def _add_chain(self, spec: FieldSpec, handle: int, initial_index: int) -> None:
        last_index = len(spec.expressions) - 1
        parent = handle
        for index in range(initial_index, len(spec.expressions)):
            expression = spec.expressions[index]
            if expression is None:
                raise ValueError(f"Missing expression {index} for field '{spec.name}'")
            parent_content = self.nodes[parent].content
            pattern = expression.pattern
            if expression.use_phonetic:
                pattern = self.encoder.encode(pattern)

            content = NodeContent(
                name=spec.name,
                label=NodeLabel.TERMINAL if index == last_index else NodeLabel.SEARCH,
                search_level=index,
                value_type=spec.value_type,
                text_expression=pattern,
                first_parameter=expression.first_parameter,
                second_parameter=expression.second_parameter,
                lines=[parent_content.lines[0]],
                horizontal_position=parent_content.horizontal_position,
                use_phonetic=expression.use_phonetic,
                grid_coordinates=parent_content.grid_coordinates,
            )
            parent = self.add_child(parent, content)

    # Results

    def collect_values(self) -> Dict[str, str]:
        """Found values of every field, ``|``-joined; empty string when nothing was found."""
        return {
            self.nodes[handle].content.name: self.field_value(handle)
            for handle in self.field_handles()
        }

    def field_value(self, field_handle: int) -> str:
        values = [
            self.nodes[leaf].content.found_value
            for leaf in self.leaves(field_handle)
            if self.nodes[leaf].content.status and self.nodes[leaf].content.found_value
        ]
        if not values:
            values = self._pre_terminal_values(field_handle)
        return "|".join(_unique(values))

    def _pre_terminal_values(self, field_handle: int) -> List[str]:
        """Values of inner nodes, used when no terminal succeeded."""
        succeeded, failed = [], []
        for handle in self.iter_subtree(field_handle):
            node = self.nodes[handle]
            if node.is_leaf or not node.content.found_value:
                continue
            if node.content.status:
                succeeded.append(node.content.found_value)
            elif node.parent is not None and self.nodes[node.parent].content.label is not NodeLabel.FIELD:
                failed.append(node.content.found_value)
        return succeeded or failed

    # Rollback

    def snapshot(self, handle: int) -> TreeSnapshot:
        """Save children and content of a subtree."""
        states = {
            current: (list(self.nodes[current].children), self.nodes[current].content.copy())
            for current in self.iter_subtree(handle)
        }
        return TreeSnapshot(node_count=len(self.nodes), states=states)

    def restore(self, snapshot: TreeSnapshot) -> None:
        """Undo everything done to a subtree since its snapshot."""
        del self.nodes[snapshot.node_count:]
        for handle, (children, content) in snapshot.states.items():
            node = self.nodes[handle]
            node.children = list(children)
            node.content = content.copy()


def _unique(values: Iterable[str]) -> List[str]:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen
