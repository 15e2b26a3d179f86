import pytest

from cipher_suite.polyalphabetic import (
    AutokeyCipher, BeaufortCipher, GronsfeldCipher, PortaCipher, RunningKeyCipher,
    TrithemiusCipher, VigenereCipher,
)


def test_vigenere_known_vector():
    assert VigenereCipher().encode("ATTACKATDAWN", "LEMON") == "LXFOPVEFRNHR"


def test_vigenere_key_skips_non_letters_and_keeps_case():
    assert VigenereCipher().encode("Attack at dawn", "LEMON") == "Lxfopv ef rnhr"
    assert VigenereCipher().decode("Lxfopv ef rnhr", "lemon") == "Attack at dawn"


def test_empty_key_falls_back_to_default():
    cipher = VigenereCipher()
    assert cipher.encode("hello", "123") == cipher.encode("hello")


@pytest.mark.parametrize("cipher", [BeaufortCipher(), PortaCipher()])
def test_reciprocal_ciphers(cipher):
    text = "Meet me by the old oak tree."
    assert cipher.encode(cipher.encode(text)) == text


def test_autokey_round_trip():
    cipher = AutokeyCipher()
    encoded = cipher.encode("Attack at dawn!", "QUEEN")
    assert encoded != "Attack at dawn!"
    assert cipher.decode(encoded, "QUEEN") == "Attack at dawn!"


def test_gronsfeld_uses_digit_key():
    assert GronsfeldCipher().encode("abc", "123") == "bdf"


def test_trithemius_progressive_shift():
    assert TrithemiusCipher().encode("aaaa") == "abcd"


def test_running_key_cycles_a_short_key():
    cipher = RunningKeyCipher()
    assert cipher.encode("aaaa", "ab") == "abab"
    assert cipher.decode("abab", "ab") == "aaaa"
