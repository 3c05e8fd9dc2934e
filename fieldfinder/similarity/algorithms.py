"""String similarity algorithms producing a ratio between 0 and 1."""
from difflib import SequenceMatcher
from typing import Dict, Type


class SimilarityAlgorithm:
    """
    Base class for similarity algorithms.

    Inputs are compared case-insensitively. The pair is put in a fixed
    order before scoring so ``ratio(a, b) == ratio(b, a)`` holds even for
    algorithms whose matching pass is order dependent.
    """

    name = "base"

    def ratio(self, first: str, second: str) -> float:
        """
        Score two strings.

        Args:
            first: Found text
            second: Text to compare with

        Returns:
            Similarity in range [0, 1]; equal strings score 1
        """
        first, second = (first or "").lower(), (second or "").lower()
        if first == second:
            return 1.0
        if not first or not second:
            return 0.0
        if first > second:
            first, second = second, first
        return self._score(first, second)

    def _score(self, first: str, second: str) -> float:
        raise NotImplementedError


class LevenshteinAlgorithm(SimilarityAlgorithm):
    """Edit distance turned into a ratio of the longer length."""

    name = "levenshtein"

    def _score(self, first: str, second: str) -> float:
        longest = max(len(first), len(second))
        return (longest - self.distance(first, second)) / longest

    @staticmethod
    def distance(first: str, second: str) -> int:
        """Number of single character edits turning one string into the other."""
        previous = list(range(len(second) + 1))
        for i, first_char in enumerate(first, start=1):
            current = [i]
            for j, second_char in enumerate(second, start=1):
                cost = 0 if first_char == second_char else 1
                current.append(min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + cost,
                ))
            previous = current
        return previous[-1]


class JaroAlgorithm(SimilarityAlgorithm):
    """Jaro similarity: matches within a window, penalised by transpositions."""

    name = "jaro"

    def _score(self, first: str, second: str) -> float:
        window = max(0, max(len(first), len(second)) // 2 - 1)
        first_matched = [False] * len(first)
        second_matched = [False] * len(second)

        matches = 0
        for i, char in enumerate(first):
            low = max(0, i - window)
            high = min(i + window + 1, len(second))
            for j in range(low, high):
                if not second_matched[j] and second[j] == char:
                    first_matched[i] = second_matched[j] = True
                    matches += 1
                    break

        if matches == 0:
            return 0.0

        transpositions = 0
        k = 0
        for i, char in enumerate(first):
            if not first_matched[i]:
                continue
            while not second_matched[k]:
                k += 1
            if char != second[k]:
                transpositions += 1
            k += 1

        return (
            matches / len(first)
            + matches / len(second)
            + (matches - transpositions / 2) / matches
        ) / 3


class JaroWinklerAlgorithm(JaroAlgorithm):
    """Jaro similarity boosted for a common prefix of up to four characters."""

    name = "jaro_winkler"

    BOOST_THRESHOLD = 0.7
    PREFIX_SCALE = 0.1
    MAX_PREFIX = 4

    def _score(self, first: str, second: str) -> float:
        jaro = super()._score(first, second)
        if jaro <= self.BOOST_THRESHOLD:
            return jaro

        prefix = 0
        for first_char, second_char in zip(first[:self.MAX_PREFIX], second[:self.MAX_PREFIX]):
            if first_char != second_char:
                break
            prefix += 1
        return jaro + self.PREFIX_SCALE * prefix * (1 - jaro)


class RatcliffObershelpAlgorithm(SimilarityAlgorithm):
    """Gestalt pattern matching as implemented by difflib."""

    name = "ratcliff_obershelp"

    def _score(self, first: str, second: str) -> float:
        return SequenceMatcher(None, first, second, autojunk=False).ratio()


SIMILARITY_ALGORITHMS: Dict[str, Type[SimilarityAlgorithm]] = {
    algorithm.name: algorithm
    for algorithm in (
        LevenshteinAlgorithm,
        JaroAlgorithm,
        JaroWinklerAlgorithm,
        RatcliffObershelpAlgorithm,
    )
}


def get_algorithm(name: str) -> SimilarityAlgorithm:
    """Create a similarity algorithm by its configured name."""
    try:
        return SIMILARITY_ALGORITHMS[name]()
    except KeyError:
        raise ValueError(f"Unknown similarity algorithm: {name}") from None
