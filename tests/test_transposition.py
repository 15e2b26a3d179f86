import pytest

from cipher_suite.alphabet import LETTERS
from cipher_suite.base import UNRESOLVED
from cipher_suite.params import DIGITS
from cipher_suite.transposition import (
    BookCipher, Checkerboard, ColumnarCipher, DoubleTranspositionCipher, HomophonicCipher,
    RailFenceCipher, ScytaleCipher, StraddlingCheckerboardCipher, homophone_pools,
)

MESSAGE = "WEAREDISCOVEREDFLEEATONCE"


def test_rail_fence_known_vector():
    assert RailFenceCipher().encode(MESSAGE, 3) == "WECRLTEERDSOEEFEAOCAIVDEN"
    assert RailFenceCipher().decode("WECRLTEERDSOEEFEAOCAIVDEN", 3) == MESSAGE


def test_columnar_irregular_columns_need_no_padding():
    assert ColumnarCipher().encode(MESSAGE, "ZEBRAS") == "EVLNACDTESEAROFODEECWIREE"
    assert ColumnarCipher().decode("EVLNACDTESEAROFODEECWIREE", "ZEBRAS") == MESSAGE


def test_transpositions_keep_every_character():
    text = "Meet me at 10:30, near the café! ☕"
    for cipher, key in ((ColumnarCipher(), "SECRET"), (DoubleTranspositionCipher(), "ONE,TWO"),
                        (ScytaleCipher(), 5), (RailFenceCipher(), 4)):
        encoded = cipher.encode(text, key)
        assert sorted(encoded) == sorted(text)
        assert cipher.decode(encoded, key) == text


def test_checkerboard_layout():
    board = Checkerboard("ESTONIA")
    assert board.encode("AT 1") == "8368691"
    assert board.decode("8368691") == "AT 1"
    assert board.encode("ae") == "80"


def test_checkerboard_dangling_prefix_is_unresolved():
    board = Checkerboard("ESTONIA")
    assert board.decode("2") == UNRESOLVED
    assert board.decode("69") == UNRESOLVED
    assert board.decode("02") == "E" + UNRESOLVED


def test_straddling_checkerboard_round_trip_is_normalized():
    cipher = StraddlingCheckerboardCipher()
    text = "Attack at 0900, dawn!"
    assert cipher.decode(cipher.encode(text)) == "ATTACK AT 0900 DAWN"
    assert cipher.normalize(text) == "ATTACK AT 0900 DAWN"


def test_homophonic_pools_do_not_overlap():
    pools = homophone_pools(3)
    codes = [code for pool in pools.values() for code in pool]
    assert len(codes) == len(set(codes))
    assert len(pools["E"]) == 3
    assert all(len(pool) == 1 for pool in homophone_pools(1).values())


def test_homophonic_round_trip():
    cipher = HomophonicCipher()
    encoded = cipher.encode("Hello World", 5)
    assert all(token == "/" or token.isdigit() for token in encoded.split())
    assert cipher.decode(encoded, 5) == "HELLO WORLD"


def test_homophonic_unknown_code():
    assert HomophonicCipher().decode("99 / 10") == UNRESOLVED + " A"


def test_book_cipher_known_words():
    cipher = BookCipher()
    assert cipher.encode("The fox") == "1 4"
    assert cipher.decode("1 4") == "the fox"


def test_book_cipher_spells_unknown_words():
    cipher = BookCipher()
    encoded = cipher.encode("bad")
    assert encoded == "3-10-9"
    assert cipher.decode(encoded) == "bad"


def test_book_cipher_single_letter_is_not_a_word_index():
    cipher = BookCipher()
    encoded = cipher.encode("a")
    assert encoded == "10-"
    assert cipher.decode(encoded) == "a"


def test_book_cipher_missing_initials():
    cipher = BookCipher()
    assert cipher.encode("hex") == "?-?-?"
    assert cipher.decode("?-?-?") == cipher.normalize("hex") == "???"


BOARD_KEYWORDS = ["ESTONIA", "ZEBRAS", "CIPHER", "ABCDEFGH", "QWERTYUI", "Z"]


@pytest.mark.parametrize("keyword", BOARD_KEYWORDS)
def test_checkerboard_codes_are_prefix_free(keyword):
    board = Checkerboard(keyword)
    assert sorted(board.encode_map) == list(LETTERS)
    codes = list(board.encode_map.values())
    assert len(set(codes)) == 26
    assert Checkerboard.SPACE_CODE not in codes
    assert Checkerboard.DIGIT_ESCAPE not in codes
    singles = [code for code in codes if len(code) == 1]
    assert len(singles) == 8
    assert not set(singles) & set(Checkerboard.SHIFT_DIGITS)
    assert all(code[0] in Checkerboard.SHIFT_DIGITS for code in codes if len(code) == 2)


@pytest.mark.parametrize("keyword", BOARD_KEYWORDS)
def test_checkerboard_round_trips_every_symbol(keyword):
    board = Checkerboard(keyword)
    text = LETTERS + " " + DIGITS
    assert board.decode(board.encode(text)) == text
    assert board.decode(board.encode(text[::-1])) == text[::-1]


@pytest.mark.parametrize("keyword", BOARD_KEYWORDS)
def test_checkerboard_messages_ending_on_two_digit_codes(keyword):
    board = Checkerboard(keyword)
    for letter, code in board.encode_map.items():
        if len(code) == 2:
            message = "A" + letter
            encoded = board.encode(message)
            assert encoded.endswith(code)
            assert board.decode(encoded) == message
    for digit in DIGITS:
        message = "A" + digit
        encoded = board.encode(message)
        assert encoded.endswith(Checkerboard.DIGIT_ESCAPE + digit)
        assert board.decode(encoded) == message
    assert board.decode(board.encode("A ")) == "A "


@pytest.mark.parametrize("keyword", ["ESTONIA", "ABCDEFGH", "QWERTYUI"])
def test_straddling_checkerboard_with_keyword(keyword):
    cipher = StraddlingCheckerboardCipher()
    encoded = cipher.encode("Meet at 0900 by the 2nd gate", keyword)
    assert set(encoded) <= set(DIGITS)
    assert cipher.decode(encoded, keyword) == "MEET AT 0900 BY THE 2ND GATE"
