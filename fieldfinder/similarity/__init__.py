"""String similarity scoring."""
from .algorithms import (
    SimilarityAlgorithm,
    LevenshteinAlgorithm,
    JaroAlgorithm,
    JaroWinklerAlgorithm,
    RatcliffObershelpAlgorithm,
    SIMILARITY_ALGORITHMS,
    get_algorithm,
)
from .scorer import SimilarityDescription, SimilarityScorer, phonetic_alternatives

__all__ = [
    "SimilarityAlgorithm",
    "LevenshteinAlgorithm",
    "JaroAlgorithm",
    "JaroWinklerAlgorithm",
    "RatcliffObershelpAlgorithm",
    "SIMILARITY_ALGORITHMS",
    "get_algorithm",
    "SimilarityDescription",
    "SimilarityScorer",
    "phonetic_alternatives",
]
