"""Check whether the text units of a line match an expression."""
from bisect import bisect_left, bisect_right
from typing import Optional, Sequence, Tuple

from fieldfinder.extraction.patterns import compile_pattern, match_values
from fieldfinder.models.schemas import TextUnit
from fieldfinder.similarity.scorer import SimilarityScorer

HORIZONTAL_STATUSES = (-1, 0, 1)


def horizontal_range(units: Sequence[TextUnit], position: float, status: int) -> Tuple[int, int]:
    """
    Index range of units allowed by a horizontal status.

    Units must be sorted by horizontal coordinate.

    Args:
        units: Units of one line
        position: Horizontal anchor
        status: 1 for units at or after the anchor, -1 for units at or
            before it, 0 for the whole line

    Returns:
        Inclusive (start, finish) indexes; start > finish for an empty range
    """
    if status not in HORIZONTAL_STATUSES:
        raise ValueError(f"Horizontal status is out of range: {status}")

    xs = [unit.x for unit in units]
    if status == 1:
        return bisect_left(xs, position), len(units) - 1
    if status == -1:
        return 0, bisect_right(xs, position) - 1
    return 0, len(units) - 1


class LineContentChecker:
    """
    Find the first unit of a line matching a pattern.

    Without a check value the first unit containing a match wins. With a
    check value the first unit holding at least one match similar to it
    wins; later units are not compared against it.
    """

    def __init__(
        self,
        units: Sequence[TextUnit],
        scorer: SimilarityScorer,
        use_phonetic: bool = False,
        position: float = 0.0,
        horizontal_status: int = 0
    ):
        """
        Initialize checker.

        Args:
            units: Units of one line, sorted by horizontal coordinate
            scorer: Similarity scorer for check values
            use_phonetic: Match against the phonetic text of the units
            position: Horizontal anchor for the status restriction
            horizontal_status: -1, 0 or 1
        """
        self.units = units
        self.scorer = scorer
        self.use_phonetic = use_phonetic
        self.start, self.finish = horizontal_range(units, position, horizontal_status)
        self.joined_matches: Optional[str] = None
        self.position = 0.0

    def check(self, pattern: str, check_value: Optional[str] = None) -> bool:
        """
        Look for the pattern in the allowed units.

        On success ``joined_matches`` holds the matched values joined with
        ``|`` and ``position`` the horizontal coordinate of the unit.

        Returns:
            True if a unit matched
        """
        regex = compile_pattern(pattern)
        for unit in self.units[self.start:self.finish + 1]:
            values = match_values(regex, self._text_of(unit))
            if not values:
                continue

            if check_value:
                values = [
                    value for value in values
                    if self.scorer.is_similar(value, check_value, self.use_phonetic)
                ]
                if not values:
                    continue

            self.joined_matches = "|".join(values)
            self.position = unit.x
            return True

        self.joined_matches = None
        self.position = 0.0
        return False

    def _text_of(self, unit: TextUnit) -> str:
        if self.use_phonetic and unit.phonetic is not None:
            return unit.phonetic
        return unit.text
