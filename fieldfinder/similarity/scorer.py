"""Similarity gate deciding whether found text stands for the expected text."""
from itertools import product
from typing import List, Optional

from pydantic import BaseModel

from fieldfinder.similarity.algorithms import LevenshteinAlgorithm, SimilarityAlgorithm

DEFAULT_THRESHOLD = 0.66
DEFAULT_LENGTH_OFFSET = 1


class SimilarityDescription(BaseModel):
    """Outcome of comparing a found value with a check value."""
    value: str
    check_value: str
    ratio: float
    threshold: float = DEFAULT_THRESHOLD

    @property
    def is_similar(self) -> bool:
        return self.ratio >= self.threshold


class SimilarityScorer:
    """Score found values against check values with an injected algorithm."""

    def __init__(
        self,
        algorithm: Optional[SimilarityAlgorithm] = None,
        threshold: float = DEFAULT_THRESHOLD,
        length_offset: int = DEFAULT_LENGTH_OFFSET
    ):
        """Initialize scorer.

        Args:
            algorithm: Similarity algorithm, Levenshtein when omitted
            threshold: Minimum accepted ratio
            length_offset: Largest length difference of a pair that is scored at all
        """
        self.algorithm = algorithm or LevenshteinAlgorithm()
        self.threshold = threshold
        self.length_offset = length_offset

    def describe(self, value: str, check_value: str) -> SimilarityDescription:
        """
        Compare a found value with a check value.

        Pairs whose lengths differ by more than the length offset are not
        scored and get ratio 0.
        """
        value = value or ""
        check_value = check_value or ""
        ratio = 0.0
        if abs(len(value) - len(check_value)) <= self.length_offset:
            ratio = self.algorithm.ratio(value, check_value)
        return SimilarityDescription(
            value=value,
            check_value=check_value,
            ratio=ratio,
            threshold=self.threshold,
        )

    def describe_phonetic(self, value: str, check_value: str) -> SimilarityDescription:
        """
        Compare two phonetic codes.

        A branching word code such as ``067500|067400`` stands for any of its
        alternatives. Every combination of alternatives on both sides is
        scored and the best one is returned.
        """
        best = None
        for alternative in phonetic_alternatives(value):
            for check_alternative in phonetic_alternatives(check_value):
                description = self.describe(alternative, check_alternative)
                if best is None or description.ratio > best.ratio:
                    best = description
        return best

    def is_similar(self, value: str, check_value: str, phonetic: bool = False) -> bool:
        if phonetic:
            return self.describe_phonetic(value, check_value).is_similar
        return self.describe(value, check_value).is_similar


def phonetic_alternatives(code: Optional[str]) -> List[str]:
    """Spell out a phonetic code with ``|`` branches per word as plain codes."""
    words = [word.split("|") for word in (code or "").split(" ")]
    return [" ".join(combination) for combination in product(*words)]
