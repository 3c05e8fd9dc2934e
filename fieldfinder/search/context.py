"""Settings and shared state of one field's resolution."""
from dataclasses import dataclass, field
from typing import List, Optional

from fieldfinder.config import Config, config as default_config
from fieldfinder.layout.line_mapping import LineMapping
from fieldfinder.models.schemas import FieldSpec
from fieldfinder.phonetics import PhoneticEncoder
from fieldfinder.search.tree import SearchTree
from fieldfinder.similarity.scorer import SimilarityScorer
from fieldfinder.tables.document_table import DocumentTable


@dataclass
class SearchSettings:
    offset_radius: int = 5
    duplicate_limit: int = 2
    decimal_separator: str = "."

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "SearchSettings":
        config = config or default_config
        return cls(
            offset_radius=config.offset_radius,
            duplicate_limit=config.duplicate_limit,
            decimal_separator=config.decimal_separator,
        )


@dataclass
class SearchContext:
    """Everything the node processors of one field work with."""
    tree: SearchTree
    field: FieldSpec
    lines: LineMapping
    scorer: SimilarityScorer
    encoder: PhoneticEncoder
    tables: List[DocumentTable] = field(default_factory=list)
    settings: SearchSettings = field(default_factory=SearchSettings)
