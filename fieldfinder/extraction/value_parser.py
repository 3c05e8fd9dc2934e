"""
Typed value extraction.

Turns the text matched by a terminal expression into a String, Number or
Date value. Number formatting follows the configured decimal separator.
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from fieldfinder.extraction.patterns import compile_pattern, first_value
from fieldfinder.models.schemas import ValueType

logger = logging.getLogger(__name__)

DATE_NOT_IDENTIFIED = "Document date is not identified"

_NUMERIC_CHARS = re.compile(r"[\d.,\s]")
_DATE_PARTS = re.compile(r"(\d{2,4})")
_ALPHA_DATE = re.compile(
    r"\W?(\d{1,2})\W?\s*([а-яёa-z]{3,10})\.?\s*(\d{4})",
    re.IGNORECASE,
)
_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%y")

# Month stems: abbreviations are prefixes of the full and genitive forms
# ("янв" -> "январь", "января"; "sep" -> "sept", "september").
MONTH_STEMS = (
    ("jan", 1), ("feb", 2), ("mar", 3), ("apr", 4), ("may", 5), ("jun", 6),
    ("jul", 7), ("aug", 8), ("sep", 9), ("oct", 10), ("nov", 11), ("dec", 12),
    ("янв", 1), ("фев", 2), ("мар", 3), ("апр", 4), ("мая", 5), ("май", 5),
    ("июн", 6), ("июл", 7), ("авг", 8), ("сен", 9), ("окт", 10), ("ноя", 11),
    ("дек", 12),
)


@dataclass
class ExtractedValue:
    """A converted value; invalid values carry an explanatory placeholder."""
    value: str
    is_valid: bool = True


def extract_value(
    text: str,
    pattern: str,
    value_type: ValueType,
    decimal_separator: str = "."
) -> Optional[ExtractedValue]:
    """
    Match a pattern in text and convert the matched value.

    Args:
        text: Text of one unit or table cell
        pattern: Terminal expression pattern
        value_type: Type to convert to
        decimal_separator: Separator used when rendering numbers

    Returns:
        ExtractedValue, or None if the pattern does not match or matches
        an empty value
    """
    match = compile_pattern(pattern).search(text or "")
    if not match:
        return None

    raw = first_value(match)
    if not raw:
        return None

    if value_type == ValueType.NUMBER:
        return extract_number(raw, decimal_separator)
    if value_type == ValueType.DATE:
        return extract_date(raw)
    return ExtractedValue(value=raw)


def parse_number(text: str) -> Optional[Decimal]:
    """
    Parse a number out of text with arbitrary separators.

    Only digits, separators and spaces are kept. When both ``,`` and ``.``
    occur the last one is the decimal separator; a single ``,`` is a
    decimal separator; a separator repeated several times groups thousands.

    Args:
        text: Text containing a number

    Returns:
        Parsed number as Decimal, or None if parsing fails
    """
    if not text:
        return None

    cleaned = re.sub(r"\s", "", ''.join(_NUMERIC_CHARS.findall(text))).strip(".,")
    if not any(char.isdigit() for char in cleaned):
        return None

    if ',' in cleaned and '.' in cleaned:
        if cleaned.rfind(',') > cleaned.rfind('.'):
            cleaned = cleaned.replace('.', '').replace(',', '.')
        else:
            cleaned = cleaned.replace(',', '')
    elif ',' in cleaned:
        if cleaned.count(',') > 1:
            cleaned = cleaned.replace(',', '')
        else:
            cleaned = cleaned.replace(',', '.')
    elif cleaned.count('.') > 1:
        cleaned = cleaned.replace('.', '')

    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def format_number(value: Decimal, decimal_separator: str = ".") -> str:
    """Render a number without exponent using the given decimal separator."""
    return format(value, 'f').replace('.', decimal_separator)


def extract_number(raw: str, decimal_separator: str = ".") -> ExtractedValue:
    number = parse_number(raw)
    if number is None:
        logger.warning("Number is not identified in '%s'", raw)
        return ExtractedValue(value=f"Number is not identified: {raw}", is_valid=False)
    return ExtractedValue(value=format_number(number, decimal_separator))


def month_number(token: str) -> Optional[int]:
    """Month number of an English or Russian month name, None if unknown."""
    token = token.lower()
    for stem, number in MONTH_STEMS:
        if token.startswith(stem):
            return number
    return None


def extract_date(raw: str) -> ExtractedValue:
    """
    Convert matched text into a ``month/day/year`` date.

    Three or more 2-4 digit groups are read as day, month, year. Otherwise
    a day, a month name and a four digit year are looked for.
    """
    candidate = None
    parts = _DATE_PARTS.findall(raw)
    if len(parts) >= 3:
        candidate = f"{parts[1]}/{parts[0]}/{parts[2]}"
    else:
        match = _ALPHA_DATE.search(raw)
        if match:
            month = month_number(match.group(2))
            if month:
                candidate = f"{month:02d}/{int(match.group(1)):02d}/{match.group(3)}"

    if candidate is None:
        logger.warning("%s: '%s'", DATE_NOT_IDENTIFIED, raw)
        return ExtractedValue(value=DATE_NOT_IDENTIFIED, is_valid=False)

    if not is_calendar_date(candidate):
        logger.warning("Invalid date %s built from '%s'", candidate, raw)
        return ExtractedValue(value=f"Date is identified as {candidate}", is_valid=False)
    return ExtractedValue(value=candidate)


def is_calendar_date(value: str) -> bool:
    for date_format in _DATE_FORMATS:
        try:
            datetime.strptime(value, date_format)
            return True
        except ValueError:
            continue
    return False
