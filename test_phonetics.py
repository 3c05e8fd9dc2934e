import pytest

from fieldfinder.phonetics import (
    DaitchMokotoffEncoder,
    DefaultSoundexEncoder,
    get_encoder,
    transliterate,
)


def test_default_soundex_words():
    encoder = DefaultSoundexEncoder()
    assert encoder.encode("Invoice") == "I512"
    assert encoder.encode("Total amount") == "T340 A553"
    assert encoder.encode("Robert") == encoder.encode("Rupert") == "R163"


def test_default_soundex_keeps_punctuation():
    encoder = DefaultSoundexEncoder()
    assert encoder.encode("pronunciation,") == "P655,"
    assert encoder.encode("correctly.") == "C623."
    assert encoder.encode("--") == "--"
    assert encoder.encode("") == ""


def test_default_soundex_sound_alike():
    encoder = DefaultSoundexEncoder()
    assert encoder.encode("Invoise") == encoder.encode("Invoice")


def test_transliteration():
    assert transliterate("ЩУКА") == "SCHUKA"
    assert transliterate("ШВАРЦНЕГГЕР") == "SHVARZNEGGER"
    assert transliterate("ABC") == "ABC"
    assert transliterate("") == ""


def test_cyrillic_soundex_matches_latin():
    encoder = DefaultSoundexEncoder()
    assert encoder.encode("Иван") == encoder.encode("Ivan")


def test_daitch_mokotoff_single_code():
    encoder = DaitchMokotoffEncoder()
    assert encoder.encode("Schmidt") == "463000"
    assert encoder.encode("Arnold") == "096830"


def test_daitch_mokotoff_branches():
    encoder = DaitchMokotoffEncoder()
    assert encoder.encode("Chaim") == "560000|460000"
    assert encoder.encode("Schwarzenegger") == "479465|474659"


def test_daitch_mokotoff_latin_and_cyrillic_agree():
    encoder = DaitchMokotoffEncoder()
    latin = encoder.encode("Arnold Schwarzenegger")
    assert latin == "096830 479465|474659"
    assert encoder.encode("Арнольд Шварцнеггер") == latin


def test_get_encoder():
    assert isinstance(get_encoder("default"), DefaultSoundexEncoder)
    assert isinstance(get_encoder("daitch_mokotoff"), DaitchMokotoffEncoder)
    with pytest.raises(ValueError):
        get_encoder("metaphone")
