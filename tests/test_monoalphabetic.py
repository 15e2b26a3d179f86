import pytest

from cipher_suite.monoalphabetic import (
    AffineCipher, AtbashCipher, CaesarCipher, KeywordCipher, MultiCaesarCipher,
    ReverseCipher, Rot5Cipher, Rot13Cipher, Rot18Cipher,
)
from cipher_suite.params import AffineParam


def test_caesar_shifts_letters_and_keeps_everything_else():
    assert CaesarCipher().encode("Hello, World!", 3) == "Khoor, Zruog!"
    assert CaesarCipher().decode("Khoor, Zruog!", 3) == "Hello, World!"


def test_caesar_default_is_rot13():
    assert CaesarCipher().encode("abc") == "nop"


@pytest.mark.parametrize("shift", [29, -23, "3"])
def test_caesar_shift_is_reduced_mod_26(shift):
    assert CaesarCipher().encode("xyz", shift) == "abc"


def test_caesar_bad_shift_falls_back_to_default():
    assert CaesarCipher().encode("abc", "not a number") == "nop"


def test_rot13_is_its_own_inverse():
    cipher = Rot13Cipher()
    assert cipher.encode(cipher.encode("Why did the chicken?")) == "Why did the chicken?"


def test_rot5_only_touches_digits():
    assert Rot5Cipher().encode("2024 AD") == "7579 AD"


def test_rot18_letters_and_digits():
    assert Rot18Cipher().encode("Hello 123") == "Uryyb 678"


def test_atbash():
    assert AtbashCipher().encode("Hello") == "Svool"


def test_affine_known_vector():
    assert AffineCipher().encode("AFFINE CIPHER", (5, 8)) == "IHHWVC SWFRCP"
    assert AffineCipher().decode("IHHWVC SWFRCP", (5, 8)) == "AFFINE CIPHER"


def test_affine_non_coprime_multiplier_is_normalized_upwards():
    assert AffineParam().coerce((13, 8)) == (15, 8)
    assert AffineParam().coerce({"a": 2, "b": 1}) == (3, 1)
    cipher = AffineCipher()
    assert cipher.encode("attack", (13, 8)) == cipher.encode("attack", (15, 8))
    assert cipher.decode(cipher.encode("attack", "13,8"), "13,8") == "attack"


def test_keyword_substitution():
    assert KeywordCipher().encode("HELLO", "KEYWORD") == "AOGGJ"
    assert KeywordCipher().decode("aoggj", "KEYWORD") == "hello"


def test_multi_caesar_advances_on_letters_only():
    cipher = MultiCaesarCipher()
    assert cipher.encode("a a", [1, 2]) == "b c"
    assert cipher.decode(cipher.encode("Hi, there!", "3 7 13"), "3 7 13") == "Hi, there!"


def test_reverse():
    assert ReverseCipher().encode("stressed") == "desserts"


def test_case_is_preserved():
    assert CaesarCipher().encode("AbC", 1) == "BcD"
