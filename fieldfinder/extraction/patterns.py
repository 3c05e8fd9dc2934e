"""Regular expression helpers shared by matching and value extraction."""
import re
from functools import lru_cache
from typing import List

PATTERN_FLAGS = re.IGNORECASE | re.MULTILINE


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a configured pattern; malformed patterns raise re.error."""
    return re.compile(pattern, PATTERN_FLAGS)


def first_value(match: re.Match) -> str:
    """First capturing group when the pattern has one and it took part, else the whole match."""
    if match.re.groups and match.group(1) is not None:
        return match.group(1)
    return match.group(0)


def match_values(regex: re.Pattern, text: str) -> List[str]:
    """
    Collect the values of every match in a text.

    Args:
        regex: Compiled pattern
        text: Text to search

    Returns:
        Every capturing group of every match, or every whole match when
        the pattern has no groups
    """
    values = []
    for match in regex.finditer(text):
        if regex.groups:
            values.extend(group or "" for group in match.groups())
        else:
            values.append(match.group(0))
    return values
