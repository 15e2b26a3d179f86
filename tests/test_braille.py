from cipher_suite.braille import (
    ECC_MAGIC_BYTE, BrailleEncoder, EccBrailleEncoder, ErrorCorrection, ZeroWidthEncoder,
)
from cipher_suite.watermark import WatermarkEngine


def test_letter_braille_with_number_sign():
    encoder = BrailleEncoder()
    assert encoder.encode("Hi 5") == "⠓⠊⠀⠼⠑"
    assert encoder.decode("⠓⠊⠀⠼⠑") == "hi 5"


def test_letter_braille_normalize_lowercases():
    encoder = BrailleEncoder()
    text = "Room 101, please!"
    assert encoder.decode(encoder.encode(text)) == encoder.normalize(text) == "room 101, please!"


def test_zero_width_is_invisible_and_survives_cover_text():
    encoder = ZeroWidthEncoder()
    encoded = encoder.encode("A")
    assert len(encoded) == 17
    assert set(encoded) <= {WatermarkEngine.ZERO, WatermarkEngine.ONE, ZeroWidthEncoder.TERMINATOR}
    assert encoder.decode("cov" + encoded + "er") == "A"


def test_zero_width_astral_characters():
    encoder = ZeroWidthEncoder()
    assert encoder.decode(encoder.encode("hi 😀")) == "hi 😀"


def test_ecc_header_is_always_written():
    data = bytes([ECC_MAGIC_BYTE, 1, 2, 3])
    protected = ErrorCorrection.encode(data, 0)
    assert protected[:2] == bytes([ECC_MAGIC_BYTE, 0])
    assert ErrorCorrection.decode(protected) == (data, False, 0)


def test_ecc_without_header_is_passed_through():
    assert ErrorCorrection.decode(b"plain") == (b"plain", False, 0)


def test_ecc_braille_round_trip():
    encoder = EccBrailleEncoder()
    for text in ("Hello", "이것은 테스트", "mixed 🎉 content"):
        assert encoder.decode(encoder.encode(text)) == text


def test_ecc_braille_without_symbols_keeps_0xec_payloads():
    encoder = EccBrailleEncoder()
    encoded = encoder.encode("이", 0)
    assert len(encoded) == 2 + len("이".encode("utf-8"))
    assert encoder.decode(encoded) == "이"


def test_ecc_braille_repairs_a_damaged_cell():
    encoder = EccBrailleEncoder()
    encoded = encoder.encode("Hello")
    cell = encoded[5]
    damaged = chr(EccBrailleEncoder.BASE + ((ord(cell) - EccBrailleEncoder.BASE) ^ 0xFF))
    corrupted = encoded[:5] + damaged + encoded[6:]
    assert corrupted != encoded
    assert encoder.decode(corrupted) == "Hello"


def test_ecc_braille_ignores_non_braille_characters():
    encoder = EccBrailleEncoder()
    encoded = encoder.encode("Hello")
    spaced = " ".join(encoded[i:i + 4] for i in range(0, len(encoded), 4))
    assert encoder.decode(spaced) == "Hello"


def test_ecc_braille_reports_non_text_payload():
    assert EccBrailleEncoder().decode(chr(EccBrailleEncoder.BASE + 0xFF)) == "[Raw Data]: ff"
