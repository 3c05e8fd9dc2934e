"""Daitch-Mokotoff Soundex with branching codes."""
from typing import Dict, List, Tuple

from fieldfinder.phonetics.soundex import PhoneticEncoder

# (letters, at start of word, before a vowel, any other position)
# Empty code means "not coded"; alternatives are separated with "|".
_RULES = [
    ("AI", "0", "1", ""), ("AJ", "0", "1", ""), ("AY", "0", "1", ""),
    ("AU", "0", "7", ""),
    ("A", "0", "", ""),
    ("B", "7", "7", "7"),
    ("CHS", "5", "54", "54"),
    ("CH", "5|4", "5|4", "5|4"),
    ("CK", "5|45", "5|45", "5|45"),
    ("CSZ", "4", "4", "4"), ("CZS", "4", "4", "4"),
    ("CZ", "4", "4", "4"), ("CS", "4", "4", "4"),
    ("C", "5|4", "5|4", "5|4"),
    ("DRZ", "4", "4", "4"), ("DRS", "4", "4", "4"),
    ("DSH", "4", "4", "4"), ("DSZ", "4", "4", "4"),
    ("DZH", "4", "4", "4"), ("DZS", "4", "4", "4"),
    ("DS", "4", "4", "4"), ("DZ", "4", "4", "4"),
    ("DT", "3", "3", "3"),
    ("D", "3", "3", "3"),
    ("EI", "0", "1", ""), ("EJ", "0", "1", ""), ("EY", "0", "1", ""),
    ("EU", "1", "1", ""),
    ("E", "0", "", ""),
    ("FB", "7", "7", "7"),
    ("F", "7", "7", "7"),
    ("G", "5", "5", "5"),
    ("H", "5", "5", ""),
    ("IA", "1", "", ""), ("IE", "1", "", ""), ("IO", "1", "", ""), ("IU", "1", "", ""),
    ("I", "0", "", ""),
    ("J", "1|4", "1|4", "1|4"),
    ("KS", "5", "54", "54"),
    ("KH", "5", "5", "5"),
    ("K", "5", "5", "5"),
    ("L", "8", "8", "8"),
    ("MN", "66", "66", "66"),
    ("M", "6", "6", "6"),
    ("NM", "66", "66", "66"),
    ("N", "6", "6", "6"),
    ("OI", "0", "1", ""), ("OJ", "0", "1", ""), ("OY", "0", "1", ""),
    ("O", "0", "", ""),
    ("PF", "7", "7", "7"), ("PH", "7", "7", "7"),
    ("P", "7", "7", "7"),
    ("Q", "5", "5", "5"),
    ("RZ", "94|4", "94|4", "94|4"), ("RS", "94|4", "94|4", "94|4"),
    ("R", "9", "9", "9"),
    ("SCHTSCH", "2", "4", "4"), ("SCHTSH", "2", "4", "4"), ("SCHTCH", "2", "4", "4"),
    ("SHTCH", "2", "4", "4"), ("SHTSH", "2", "4", "4"),
    ("STSCH", "2", "4", "4"),
    ("SCHT", "2", "43", "43"), ("SCHD", "2", "43", "43"),
    ("SHCH", "2", "4", "4"),
    ("STCH", "2", "4", "4"),
    ("STRZ", "2", "4", "4"), ("STRS", "2", "4", "4"), ("STSH", "2", "4", "4"),
    ("SZCZ", "2", "4", "4"), ("SZCS", "2", "4", "4"),
    ("SCH", "4", "4", "4"),
    ("SHT", "2", "43", "43"),
    ("SZT", "2", "43", "43"), ("SHD", "2", "43", "43"), ("SZD", "2", "43", "43"),
    ("SH", "4", "4", "4"),
    ("SC", "2", "4", "4"),
    ("ST", "2", "43", "43"),
    ("SD", "2", "43", "43"),
    ("SZ", "4", "4", "4"),
    ("S", "4", "4", "4"),
    ("TTSCH", "4", "4", "4"),
    ("TTCH", "4", "4", "4"), ("TTSZ", "4", "4", "4"),
    ("TSCH", "4", "4", "4"),
    ("TCH", "4", "4", "4"), ("TRZ", "4", "4", "4"), ("TRS", "4", "4", "4"),
    ("TSH", "4", "4", "4"), ("TTS", "4", "4", "4"), ("TTZ", "4", "4", "4"),
    ("TZS", "4", "4", "4"), ("TSZ", "4", "4", "4"),
    ("TH", "3", "3", "3"),
    ("TS", "4", "4", "4"), ("TC", "4", "4", "4"), ("TZ", "4", "4", "4"),
    ("T", "3", "3", "3"),
    ("UI", "0", "1", ""), ("UJ", "0", "1", ""), ("UY", "0", "1", ""),
    ("UE", "0", "", ""),
    ("U", "0", "", ""),
    ("V", "7", "7", "7"),
    ("W", "7", "7", "7"),
    ("X", "5", "54", "54"),
    ("Y", "1", "", ""),
    ("ZHDZH", "2", "4", "4"),
    ("ZDZH", "2", "4", "4"),
    ("ZSCH", "4", "4", "4"),
    ("ZDZ", "2", "4", "4"),
    ("ZHD", "2", "43", "43"),
    ("ZSH", "4", "4", "4"),
    ("ZD", "2", "43", "43"),
    ("ZH", "4", "4", "4"), ("ZS", "4", "4", "4"),
    ("Z", "4", "4", "4"),
]

VOWELS = frozenset("AEIOUY")


def _index_rules(rules) -> Dict[str, List[Tuple[str, List[str], List[str], List[str]]]]:
    """Group rules by first letter, longest letter combination first."""
    index: Dict[str, List[Tuple[str, List[str], List[str], List[str]]]] = {}
    for letters, start, before_vowel, other in rules:
        index.setdefault(letters[0], []).append(
            (letters, start.split("|"), before_vowel.split("|"), other.split("|"))
        )
    for candidates in index.values():
        candidates.sort(key=lambda rule: len(rule[0]), reverse=True)
    return index


class DaitchMokotoffEncoder(PhoneticEncoder):
    """
    Daitch-Mokotoff Soundex.

    Letter combinations are matched longest first. Their code depends on
    whether they start the word, precede a vowel or neither. Ambiguous
    combinations produce several codes which are all returned, joined
    with ``|``. Each code is six digits wide.
    """

    name = "daitch_mokotoff"

    WIDTH = 6
    RULES = _index_rules(_RULES)

    def encode_word(self, word: str) -> str:
        letters = ''.join(char for char in word if 'A' <= char <= 'Z')
        if not letters:
            return ""

        # Each branch is (code so far, last emitted replacement)
        branches: List[Tuple[str, str]] = [("", "")]
        position = 0
        while position < len(letters):
            rule = self._find_rule(letters, position)
            if rule is None:
                position += 1
                continue

            combination, start, before_vowel, other = rule
            following = position + len(combination)
            if position == 0:
                replacements = start
            elif following < len(letters) and letters[following] in VOWELS:
                replacements = before_vowel
            else:
                replacements = other

            next_branches = []
            for code, last in branches:
                for replacement in replacements:
                    if replacement and not last.endswith(replacement):
                        next_branches.append((code + replacement, replacement))
                    else:
                        next_branches.append((code, replacement))
            branches = next_branches
            position = following

        codes = []
        for code, _ in branches:
            fixed = code.ljust(self.WIDTH, '0')[:self.WIDTH]
            if fixed not in codes:
                codes.append(fixed)
        return "|".join(codes)

    def _find_rule(self, letters: str, position: int):
        for rule in self.RULES.get(letters[position], []):
            if letters.startswith(rule[0], position):
                return rule
        return None
