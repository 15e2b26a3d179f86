import pytest

from cipher_suite.grid import (
    AdfgvxCipher, FourSquareCipher, NihilistCipher, PlayfairCipher, PolybiusCipher,
    TapCodeCipher, playfair_digraphs, strip_playfair_fillers,
)


def test_playfair_digraphs_insert_filler_and_pad():
    assert playfair_digraphs("HELLO") == ["HE", "LX", "LO"]
    assert playfair_digraphs("jab") == ["IA", "BX"]
    assert playfair_digraphs("XX") == ["XQ", "XQ"]


def test_strip_playfair_fillers():
    assert strip_playfair_fillers("HELXLO") == "HELLO"
    assert strip_playfair_fillers("BOXA") == "BOXA"
    assert strip_playfair_fillers("ABCX") == "ABC"


def test_playfair_known_square():
    cipher = PlayfairCipher()
    assert cipher.encode("hello", "KEYWORD") == "GY IZ SC"
    assert cipher.decode("GY IZ SC", "KEYWORD") == "HELLO"


def test_playfair_decode_is_normalized():
    cipher = PlayfairCipher()
    text = "Jolly good, sixty!"
    assert cipher.decode(cipher.encode(text)) == cipher.normalize(text)


def test_four_square_round_trip_pads_odd_length():
    cipher = FourSquareCipher()
    encoded = cipher.encode("help me")
    assert len(encoded) == 6
    assert cipher.decode(encoded) == "HELPME"
    assert cipher.normalize("help me") == "HELPME"
    assert cipher.decode(cipher.encode("odd")) == "ODDX"


def test_polybius_coordinates():
    cipher = PolybiusCipher()
    assert cipher.encode("HELLO") == "23 15 31 31 34"
    assert cipher.encode("Hi there") == "23 24 / 44 23 15 42 15"
    assert cipher.decode("23 24 / 44 23 15 42 15") == "HI THERE"


def test_polybius_6x6_carries_digits():
    cipher = PolybiusCipher()
    assert cipher.encode("A1", 6) == "11 54"
    assert cipher.decode("11 54", 6) == "A1"


def test_polybius_passes_unknown_characters_through():
    cipher = PolybiusCipher()
    assert cipher.decode(cipher.encode("ok?")) == "OK?"


def test_adfgvx_output_alphabet_and_round_trip():
    cipher = AdfgvxCipher()
    encoded = cipher.encode("Attack at 1200")
    assert set(encoded) <= set("ADFGVX ")
    assert cipher.decode(encoded) == "ATTACKAT1200"


def test_adfgvx_keys_from_parameter_bag_shape():
    cipher = AdfgvxCipher()
    keys = {"key1": "NACHTBOMMENWERPER", "key2": "CARGO"}
    assert cipher.decode(cipher.encode("attack", keys), keys) == "ATTACK"


def test_nihilist_round_trip():
    cipher = NihilistCipher()
    encoded = cipher.encode("Dynamite winter palace", "RUSSIAN")
    assert all(token == "/" or token.isdigit() for token in encoded.split())
    assert cipher.decode(encoded, "RUSSIAN") == "DYNAMITE WINTER PALACE"


def test_tap_code():
    cipher = TapCodeCipher()
    assert cipher.encode("HI") == ".. ...  .. ...."
    assert cipher.decode(".. ...  .. ....") == "HI"


@pytest.mark.parametrize("style", [1, 2, 3, 4])
def test_tap_code_styles_fold_k_into_c(style):
    cipher = TapCodeCipher()
    assert cipher.decode(cipher.encode("Kick it", style), style) == "CICC IT"
