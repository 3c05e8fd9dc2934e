"""Main processing pipeline."""
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from fieldfinder.config import Config, config as default_config
from fieldfinder.layout.document_layout import DocumentLayout
from fieldfinder.layout.line_grouper import LineGrouper, RawWord
from fieldfinder.models.schemas import ExtractionResult, FieldConfiguration, FieldSpec, as_field_list
from fieldfinder.phonetics import get_encoder
from fieldfinder.search.context import SearchSettings
from fieldfinder.search.document_parser import DocumentParser
from fieldfinder.similarity import SimilarityScorer, get_algorithm
from fieldfinder.tables.document_table import DocumentTable

logger = logging.getLogger(__name__)

Fields = Union[FieldConfiguration, Iterable[FieldSpec]]


class FieldExtractionPipeline:
    """
    Pipeline finding configured fields in positioned document text.

    Configuration decides the similarity algorithm and gate, the phonetic
    encoder, the search limits and the layout settings; the fields
    themselves are passed per call.
    """

    def __init__(self, config_path: Optional[str] = None):
        """Initialize pipeline.

        Args:
            config_path: Optional path to configuration file
        """
        self.config = Config(config_path) if config_path else default_config

        self.scorer = SimilarityScorer(
            get_algorithm(self.config.similarity_algorithm),
            threshold=self.config.similarity_threshold,
            length_offset=self.config.length_offset,
        )
        self.encoder = get_encoder(self.config.phonetic_encoder)
        self.settings = SearchSettings.from_config(self.config)
        self.grouper = LineGrouper(
            vertical_tolerance=self.config.vertical_tolerance,
            min_text_length=self.config.min_text_length,
        )

    @staticmethod
    def load_fields(path: str) -> FieldConfiguration:
        """Load field specifications from a YAML file."""
        return FieldConfiguration.from_yaml(path)

    def build_layout(
        self,
        pages: Sequence[Iterable[RawWord]],
        tables: Iterable[DocumentTable] = ()
    ) -> DocumentLayout:
        """Group raw page words into a document layout with grids."""
        return DocumentLayout.from_pages(pages, tables, self.grouper, self.config.grid_size)

    def process_layout(self, layout: DocumentLayout, fields: Fields) -> Dict[str, str]:
        """
        Find every field in a document.

        Args:
            layout: Positioned text of the document
            fields: Fields to find

        Returns:
            Field name to found value; empty string for fields not found
        """
        parser = DocumentParser(layout, fields, self.scorer, self.encoder, self.settings)
        values = parser.parse()
        found = sum(1 for value in values.values() if value)
        logger.info("Fields found: %d/%d", found, len(values))
        return values

    def process_pages(
        self,
        pages: Sequence[Iterable[RawWord]],
        fields: Fields,
        tables: Iterable[DocumentTable] = ()
    ) -> Dict[str, str]:
        """Find every field in a document given as raw words per page."""
        logger.info("Step 1: Grouping %d pages into lines...", len(pages))
        layout = self.build_layout(pages, tables)
        logger.info("Step 2: Resolving fields...")
        return self.process_layout(layout, fields)

    def process_batch(
        self,
        documents: Mapping[str, Any],
        fields: Fields
    ) -> List[ExtractionResult]:
        """
        Process several documents one after another.

        A document that fails (for example on a malformed pattern) gets its
        error recorded and the batch continues.

        Args:
            documents: Document id to DocumentLayout, or to raw words per page
            fields: Fields to find in every document

        Returns:
            One result per document, in input order
        """
        fields = as_field_list(fields)
        results = []
        for index, (document_id, document) in enumerate(documents.items(), start=1):
            logger.info("--- Processing document %d/%d: %s ---", index, len(documents), document_id)
            try:
                layout = document if isinstance(document, DocumentLayout) else self.build_layout(document)
                values = self.process_layout(layout, fields)
                results.append(ExtractionResult(document_id=document_id, values=values))
            except (re.error, ValueError) as e:
                logger.warning("Document %s failed: %s", document_id, e)
                results.append(ExtractionResult(document_id=document_id, error=str(e)))
        return results
