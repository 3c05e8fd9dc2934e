"""Phonetic encoders: shared word splitting and the classic Soundex code."""
import re

from fieldfinder.phonetics.transliteration import transliterate

_WORD_PARTS = re.compile(r"^(\W*)(.*?)(\W*)$", re.DOTALL)


class PhoneticEncoder:
    """
    Base class for phonetic encoders.

    Text is split on single spaces and every word is encoded on its own;
    punctuation around a word is kept as is.
    """

    name = "base"

    def encode(self, value: str) -> str:
        """
        Encode every word of a text.

        Args:
            value: Source text

        Returns:
            Space separated codes, one per source word
        """
        if not value:
            return ""
        return " ".join(self._encode_token(word) for word in value.split(" "))

    def _encode_token(self, token: str) -> str:
        leading, core, trailing = _WORD_PARTS.match(token).groups()
        if not core:
            return token
        return f"{leading}{self.encode_word(transliterate(core.upper()))}{trailing}"

    def encode_word(self, word: str) -> str:
        """Encode a single upper case Latin word."""
        raise NotImplementedError


class DefaultSoundexEncoder(PhoneticEncoder):
    """American Soundex: first letter plus three digits."""

    name = "default"

    CODES = {
        'B': '1', 'F': '1', 'P': '1', 'V': '1',
        'C': '2', 'G': '2', 'J': '2', 'K': '2',
        'Q': '2', 'S': '2', 'X': '2', 'Z': '2',
        'D': '3', 'T': '3',
        'L': '4',
        'M': '5', 'N': '5',
        'R': '6',
    }
    VOWELS = frozenset('AEIOUY')
    WIDTH = 4

    def encode_word(self, word: str) -> str:
        if not word:
            return ""

        rest = [self.CODES.get(char, char) for char in word[1:] if char not in ('H', 'W')]

        collapsed = []
        for char in rest:
            if not collapsed or collapsed[-1] != char:
                collapsed.append(char)

        digits = ''.join(char for char in collapsed if char not in self.VOWELS)
        return (word[0] + digits).ljust(self.WIDTH, '0')[:self.WIDTH]
