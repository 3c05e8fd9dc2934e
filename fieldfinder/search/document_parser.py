"""Resolve every configured field of one document."""
import logging
from typing import Dict, Iterable, List, Optional, Union

from fieldfinder.layout.document_layout import DocumentLayout
from fieldfinder.layout.line_mapping import LineMapping
from fieldfinder.models.schemas import FieldConfiguration, FieldSpec, as_field_list
from fieldfinder.phonetics import DefaultSoundexEncoder, PhoneticEncoder
from fieldfinder.search.context import SearchContext, SearchSettings
from fieldfinder.search.node_processors import FieldNodeProcessor
from fieldfinder.search.table_processor import TableNodeProcessor
from fieldfinder.search.tree import SearchTree
from fieldfinder.similarity.scorer import SimilarityScorer
from fieldfinder.tables.document_table import DocumentTable

logger = logging.getLogger(__name__)


class DocumentParser:
    """
    Build the search tree of a document and resolve its fields.

    Fields with grid coordinates are first searched in that grid segment of
    every page; a failed attempt is rolled back before the next one, and
    the whole document is searched when no segment yields a value.
    """

    def __init__(
        self,
        layout: DocumentLayout,
        fields: Union[FieldConfiguration, Iterable[FieldSpec]],
        scorer: Optional[SimilarityScorer] = None,
        encoder: Optional[PhoneticEncoder] = None,
        settings: Optional[SearchSettings] = None
    ):
        """
        Initialize parser.

        Args:
            layout: Positioned text of the document
            fields: Fields to resolve, in output order
            scorer: Similarity scorer, default gate when omitted
            encoder: Phonetic encoder for fields in phonetic mode
            settings: Search settings, defaults when omitted
        """
        self.layout = layout
        self.fields: List[FieldSpec] = as_field_list(fields)
        self.scorer = scorer or SimilarityScorer()
        self.encoder = encoder or DefaultSoundexEncoder()
        self.settings = settings or SearchSettings()
        self.tree: Optional[SearchTree] = None

    def parse(self) -> Dict[str, str]:
        """
        Resolve all fields.

        Returns:
            Field name to ``|``-joined found values, empty string when a
            field was not found
        """
        if any(self._uses_phonetic(field) for field in self.fields):
            self.layout.ensure_phonetic(self.encoder)

        self.tree = SearchTree(self.encoder)
        self.tree.populate(self.fields)

        for field in self.fields:
            self._process_field(field, self.tree.find_field(field.name))

        return self.tree.collect_values()

    def _process_field(self, field: FieldSpec, handle: int) -> bool:
        if field.has_grid_restriction:
            segments = self.layout.grids.segments(tuple(field.grid_coordinates))
            for segment in segments:
                snapshot = self.tree.snapshot(handle)
                if self._resolve(field, handle, segment.lines, segment.tables):
                    logger.debug(
                        "Field '%s' found in grid segment %s",
                        field.name, tuple(field.grid_coordinates),
                    )
                    return True
                self.tree.restore(snapshot)
            logger.debug("Field '%s' not found in its grid segment, searching whole document", field.name)

        return self._resolve(field, handle, self.layout.lines, self.layout.tables)

    def _resolve(
        self,
        field: FieldSpec,
        handle: int,
        lines: LineMapping,
        tables: List[DocumentTable]
    ) -> bool:
        context = SearchContext(
            tree=self.tree,
            field=field,
            lines=lines,
            scorer=self.scorer,
            encoder=self.encoder,
            tables=list(tables),
            settings=self.settings,
        )
        if field.is_table:
            TableNodeProcessor(context).process(handle)
        else:
            FieldNodeProcessor(context).process(handle)
        return self.tree.content(handle).status

    @staticmethod
    def _uses_phonetic(field: FieldSpec) -> bool:
        return field.use_phonetic or any(expression.use_phonetic for expression in field.expressions)
