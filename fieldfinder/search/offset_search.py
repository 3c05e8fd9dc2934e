"""Search lines near a failed anchor and branch the tree there."""
import logging
from typing import List, Tuple

from fieldfinder.search.context import SearchContext
from fieldfinder.search.line_checker import LineContentChecker

logger = logging.getLogger(__name__)


class OffsetNodeProcessor:
    """
    Retry a failed node on the lines around its anchor.

    Up to ``offset_radius`` lines below and above the anchor are checked,
    nearest first, in mapping order. Every matching line gets a copy of the
    failed node as a new sibling, with the rest of the expression chain
    below it. A parent holds at most ``duplicate_limit`` children per line,
    which bounds how often the same place is retried.

    A copy that fails on its own line does not search again; the nodes of
    the chain below it still do.
    """

    def __init__(self, context: SearchContext):
        self.context = context
        self.tree = context.tree

    def candidate_lines(self, line: int) -> List[int]:
        """Lines around an anchor, at most two per distance, nearest first."""
        lines = self.context.lines
        index = lines.index_of(line)
        if index >= 0:
            below, above = index, index
        else:
            # The anchor falls between two mapped lines
            insertion = lines.insertion_index(line)
            below, above = insertion - 1, insertion

        candidates = []
        for distance in range(1, self.context.settings.offset_radius + 1):
            for position in (below + distance, above - distance):
                candidate = lines.line_at(position)
                if candidate is not None:
                    candidates.append(candidate)
        return candidates

    def search(self, handle: int, line: int, level: int) -> int:
        """
        Look for the node's pattern around a line.

        Args:
            handle: Node that failed to match
            line: Anchor line
            level: Search level of the failed node

        Returns:
            Number of sibling nodes added
        """
        node = self.tree.node(handle)
        if node.parent is None:
            return 0

        content = node.content
        if content.is_offset_copy:
            logger.debug(
                "Offset copy for '%s' (%s) failed on line %d, not searching again",
                content.name, content.display_label, line,
            )
            return 0

        found: List[Tuple[int, float, str]] = []
        for candidate in self.candidate_lines(line):
            checker = LineContentChecker(
                self.context.lines[candidate],
                self.context.scorer,
                content.use_phonetic,
            )
            if checker.check(content.text_expression, content.check_value):
                found.append((candidate, checker.position, checker.joined_matches))

        added = 0
        for candidate, position, joined_matches in found:
            if self._add_offset_node(node.parent, handle, candidate, position, joined_matches, level):
                added += 1

        logger.debug(
            "Offset search for '%s' (%s) around line %d: %d matches, %d nodes added",
            content.name, content.display_label, line, len(found), added,
        )
        return added

    def _add_offset_node(
        self,
        parent: int,
        template: int,
        line: int,
        position: float,
        found_value: str,
        level: int
    ) -> bool:
        siblings_on_line = sum(
            1 for child in self.tree.children(parent)
            if line in self.tree.content(child).lines
        )
        if siblings_on_line >= self.context.settings.duplicate_limit:
            return False

        content = self.tree.content(template).copy(
            lines=[line],
            horizontal_position=position,
            found_value=found_value,
            status=False,
            is_offset_copy=True,
        )
        child = self.tree.add_child(parent, content)
        self.tree.add_search_values(self.context.field, child, level)
        return True
