"""Pattern matching helpers and typed value extraction."""
from .patterns import compile_pattern, first_value, match_values
from .value_parser import (
    DATE_NOT_IDENTIFIED,
    ExtractedValue,
    extract_value,
    extract_number,
    extract_date,
    parse_number,
    format_number,
    month_number,
)

__all__ = [
    "compile_pattern",
    "first_value",
    "match_values",
    "DATE_NOT_IDENTIFIED",
    "ExtractedValue",
    "extract_value",
    "extract_number",
    "extract_date",
    "parse_number",
    "format_number",
    "month_number",
]
