"""Processors walking the search tree of a line based field."""
import logging
from typing import List, Tuple

from fieldfinder.extraction.patterns import compile_pattern, match_values
from fieldfinder.extraction.value_parser import extract_value
from fieldfinder.search.context import SearchContext
from fieldfinder.search.line_checker import LineContentChecker, horizontal_range
from fieldfinder.search.offset_search import OffsetNodeProcessor
from fieldfinder.search.tree import UNDEFINED_LINE, NodeLabel, TreeNode

logger = logging.getLogger(__name__)


class FieldNodeProcessor:
    """Resolve one field: locate its label if needed, then walk its Line nodes."""

    def __init__(self, context: SearchContext):
        self.context = context
        self.tree = context.tree

    def process(self, field_handle: int) -> bool:
        """
        Process a Field node.

        Returns:
            Whether the field was found
        """
        field_node = self.tree.node(field_handle)
        if field_node.content.lines[0] == UNDEFINED_LINE:
            UndefinedNodeProcessor(self.context).process(field_handle)
            if field_node.content.lines[0] == UNDEFINED_LINE:
                logger.debug("Label of field '%s' not found", field_node.content.name)
                return False

        line_processor = LineNodeProcessor(self.context)
        index = 0
        # Offset search may add Line nodes while looping
        while index < len(field_node.children):
            line_processor.process(field_node.children[index], 0)
            index += 1
        return field_node.content.status


class UndefinedNodeProcessor:
    """
    Find where a field's label is when its position is unknown.

    Every unit of every line is compared with the field's check value and
    only the best scoring candidates are kept. Each becomes a Line node;
    ties give several Line nodes.
    """

    def __init__(self, context: SearchContext):
        self.context = context
        self.tree = context.tree

    def find_candidates(self, field_handle: int) -> List[Tuple[float, int, float]]:
        """Accepted (ratio, line, x) candidates in document order."""
        content = self.tree.content(field_handle)
        regex = compile_pattern(content.text_expression)
        scorer = self.context.scorer
        describe = scorer.describe_phonetic if content.use_phonetic else scorer.describe
        candidates = []
        for line, units in self.context.lines.items():
            for unit in units:
                text = unit.phonetic if content.use_phonetic and unit.phonetic is not None else unit.text
                for value in match_values(regex, text):
                    description = describe(value, content.check_value)
                    if description.is_similar:
                        candidates.append((description.ratio, line, unit.x))
        return candidates

    def process(self, field_handle: int) -> None:
        candidates = self.find_candidates(field_handle)
        if not candidates:
            return

        content = self.tree.content(field_handle)
        best = max(ratio for ratio, _, _ in candidates)

        self.tree.clear_children(field_handle)
        content.lines = [line for line in content.lines if line != UNDEFINED_LINE]
        for ratio, line, x in candidates:
            if ratio != best or line in content.lines:
                continue
            content.lines.append(line)
            self.tree.add_child(field_handle, content.copy(
                label=NodeLabel.LINE,
                lines=[line],
                horizontal_position=x,
                status=False,
                found_value=None,
            ))

        logger.debug(
            "Field '%s' label found on lines %s (ratio %.2f)",
            content.name, content.lines, best,
        )
        self.tree.add_search_values(self.context.field, field_handle)


class LineNodeProcessor:
    """Match Line and Search nodes on their candidate lines and descend."""

    def __init__(self, context: SearchContext):
        self.context = context
        self.tree = context.tree
        self.offset_processor = OffsetNodeProcessor(context)

    def process(self, handle: int, level: int) -> None:
        node = self.tree.node(handle)
        if node.content.label is NodeLabel.TERMINAL:
            TerminalNodeProcessor(self.context).process(handle, level)
            return

        index = 0
        while index < len(node.content.lines):
            line = node.content.lines[index]
            index += 1
            if line in self.context.lines and self._try_match(node, line):
                if node.is_leaf:
                    # A field without expressions is found by its label alone
                    self.tree.mark_success(handle)
                self._set_offset_children_lines(node, line)
                child_index = 0
                while child_index < len(node.children):
                    self.process(node.children[child_index], level + 1)
                    child_index += 1
            else:
                self.offset_processor.search(handle, line, level)

    def _try_match(self, node: TreeNode, line: int) -> bool:
        content = node.content
        checker = LineContentChecker(
            self.context.lines[line],
            self.context.scorer,
            content.use_phonetic,
            content.horizontal_position,
            content.second_parameter,
        )
        matched = checker.check(content.text_expression, content.check_value)
        content.found_value = checker.joined_matches
        if matched:
            content.horizontal_position = checker.position
        return matched

    def _set_offset_children_lines(self, node: TreeNode, line: int) -> None:
        index = self.context.lines.index_of(line)
        for child in node.children:
            child_content = self.tree.content(child)
            child_content.horizontal_position = node.content.horizontal_position
            target = self.context.lines.line_at(index + child_content.first_parameter)
            if target is not None:
                child_content.lines = [target]


class TerminalNodeProcessor:
    """Extract the typed value of a Terminal node from its line."""

    def __init__(self, context: SearchContext):
        self.context = context
        self.tree = context.tree
        self.offset_processor = OffsetNodeProcessor(context)

    def process(self, handle: int, level: int) -> None:
        node = self.tree.node(handle)
        index = 0
        while index < len(node.content.lines):
            line = node.content.lines[index]
            index += 1
            if line not in self.context.lines:
                self.offset_processor.search(handle, line, level)
                continue
            if self._extract_in_line(node, line):
                return
            self.offset_processor.search(handle, line, level)

    def _extract_in_line(self, node: TreeNode, line: int) -> bool:
        content = node.content
        units = self.context.lines[line]
        start, finish = horizontal_range(units, content.horizontal_position, content.second_parameter)
        for unit in units[start:finish + 1]:
            result = extract_value(
                unit.text,
                content.text_expression,
                self.context.field.base_value_type,
                self.context.settings.decimal_separator,
            )
            if result is None:
                continue
            if result.is_valid:
                content.found_value = result.value
                self.tree.mark_success(node.handle)
                return True
            if content.found_value is None:
                content.found_value = result.value
        return False
