"""Data models for field configuration and positioned text."""
from .schemas import (
    ROOT_NAME,
    ValueType,
    TextUnit,
    Expression,
    FieldSpec,
    FieldConfiguration,
    ExtractionResult,
    parse_text_cell,
    parse_grid_cell,
    as_field_list,
)

__all__ = [
    "ROOT_NAME",
    "ValueType",
    "TextUnit",
    "Expression",
    "FieldSpec",
    "FieldConfiguration",
    "ExtractionResult",
    "parse_text_cell",
    "parse_grid_cell",
    "as_field_list",
]
