import pytest

from cipher_suite.base import DECODE_FAILED, NOT_REVERSIBLE
from cipher_suite.encodings import (
    BaconEncoder, Base32Encoder, Base64Encoder, BinaryEncoder, DnaEncoder, EmojiEncoder,
    HexEncoder, HtmlEntityEncoder, LeetspeakEncoder, MorseEncoder, NatoEncoder, TokenAlphabet,
    UpsideDownEncoder, UrlEncoder, ZalgoEncoder,
)

UNICODE_TEXT = "Grüße 👋 from 東京"


def test_base64():
    assert Base64Encoder().encode("Hello") == "SGVsbG8="
    assert Base64Encoder().decode("SGVsbG8=") == "Hello"


def test_base64_rejects_garbage():
    assert Base64Encoder().decode("!!!") == DECODE_FAILED


def test_base32_accepts_lowercase():
    encoded = Base32Encoder().encode("hi")
    assert Base32Encoder().decode(encoded.lower()) == "hi"


def test_hex_and_binary():
    assert HexEncoder().encode("Hi") == "48 69"
    assert BinaryEncoder().encode("A") == "01000001"
    assert BinaryEncoder().decode("0100000") == DECODE_FAILED


def test_dna_and_emoji():
    assert DnaEncoder().encode("A") == "TAAT"
    assert EmojiEncoder().encode("A") == "😄😅"


@pytest.mark.parametrize("encoder", [
    Base64Encoder(), Base32Encoder(), HexEncoder(), BinaryEncoder(), UrlEncoder(),
    HtmlEntityEncoder(), DnaEncoder(), EmojiEncoder(),
])
def test_byte_encoders_are_exact_on_unicode(encoder):
    assert encoder.decode(encoder.encode(UNICODE_TEXT)) == UNICODE_TEXT


def test_url_encoding():
    assert UrlEncoder().encode("a b&c") == "a%20b%26c"


def test_html_entities():
    assert HtmlEntityEncoder().encode("<é>") == "&#60;&#233;&#62;"


def test_morse():
    encoded = MorseEncoder().encode("SOS")
    assert encoded == "••• −−− •••"
    assert MorseEncoder().decode(MorseEncoder().encode("hello world")) == "HELLO WORLD"


def test_morse_passes_unknown_characters_through():
    encoder = MorseEncoder()
    assert encoder.decode(encoder.encode("a+b")) == "A+B" == encoder.normalize("a+b")


def test_token_alphabet_needs_a_table():
    class Untabled(TokenAlphabet):
        id = "untabled"
        name = "Untabled"
        description = "No token table"

    with pytest.raises(TypeError):
        Untabled()

    class Digits(TokenAlphabet):
        id = "digit-words"
        name = "Digit Words"
        description = "Digits as words"
        separator = "-"
        WORDS = ["zero", "one", "two"]

        def token(self, char):
            return self.WORDS[int(char)] if char in "012" else None

        def untoken(self, token):
            return str(self.WORDS.index(token)) if token in self.WORDS else token

    encoder = Digits()
    assert encoder.encode("20x") == "two-zero-x"
    assert encoder.decode("two-zero-x") == "20x"


def test_bacon():
    assert BaconEncoder().encode("AB") == "AAAAA AAAAB"
    assert BaconEncoder().decode("AAAAA AAAAB / BBAAB") == "AB Z"


@pytest.mark.parametrize("encoder", [NatoEncoder(), LeetspeakEncoder(), UpsideDownEncoder(), ZalgoEncoder()])
def test_one_way_encoders(encoder):
    assert not encoder.reversible
    assert encoder.encode("hello")
    assert encoder.decode("anything") == NOT_REVERSIBLE


def test_upside_down_reverses_and_flips():
    assert UpsideDownEncoder().encode("hello") == "oʃʃǝɥ"


def test_nato():
    assert NatoEncoder().encode("sos") == "Sierra-Oscar-Sierra"


def test_leetspeak():
    assert LeetspeakEncoder().encode("elite") == "31173"


def test_zalgo_keeps_base_letters():
    assert ZalgoEncoder().encode("abc")[0] == "a"


def test_empty_input():
    assert Base64Encoder().encode("") == ""
    assert Base64Encoder().decode("") == ""
