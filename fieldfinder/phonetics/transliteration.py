"""Cyrillic to Latin transliteration used before phonetic encoding."""

CYRILLIC_TO_LATIN = {
    "А": "A", "Б": "B", "В": "V", "Г": "G",
    "Д": "D", "Е": "E", "Ё": "JO", "Ж": "ZH",
    "З": "Z", "И": "I", "Й": "J", "К": "K",
    "Л": "L", "М": "M", "Н": "N", "О": "O",
    "П": "P", "Р": "R", "С": "S", "Т": "T",
    "У": "U", "Ф": "F", "Х": "H", "Ц": "Z",
    "Ч": "CH", "Ш": "SH", "Щ": "SCH", "Ъ": "",
    "Ы": "Y", "Ь": "", "Э": "E", "Ю": "JU",
    "Я": "JA",
}

_TRANSLATION_TABLE = str.maketrans(CYRILLIC_TO_LATIN)


def transliterate(text: str) -> str:
    """
    Replace upper case Cyrillic letters with their Latin spelling.

    Lower case input is not touched, callers upper-case first.

    Args:
        text: Upper case text

    Returns:
        Text with Latin letters only where a mapping exists
    """
    if not text:
        return ""
    return text.translate(_TRANSLATION_TABLE)
