"""Phonetic encoders for sound-alike matching."""
from typing import Dict, Type

from .soundex import PhoneticEncoder, DefaultSoundexEncoder
from .daitch_mokotoff import DaitchMokotoffEncoder
from .transliteration import transliterate

PHONETIC_ENCODERS: Dict[str, Type[PhoneticEncoder]] = {
    DefaultSoundexEncoder.name: DefaultSoundexEncoder,
    DaitchMokotoffEncoder.name: DaitchMokotoffEncoder,
}


def get_encoder(name: str) -> PhoneticEncoder:
    """Create a phonetic encoder by its configured name."""
    try:
        return PHONETIC_ENCODERS[name]()
    except KeyError:
        raise ValueError(f"Unknown phonetic encoder: {name}") from None


__all__ = [
    "PhoneticEncoder",
    "DefaultSoundexEncoder",
    "DaitchMokotoffEncoder",
    "PHONETIC_ENCODERS",
    "get_encoder",
    "transliterate",
]
