"""
Braille and zero-width encoders.

- braille: Grade 1 letter Braille (6-dot cells, number sign for digits)
- zero-width: invisible steganography with zero-width characters
- braille-ecc: UTF-8 bytes as zig-zag 8-dot Braille, protected with
  Reed-Solomon error correction
"""

from typing import Any, List, Tuple

from reedsolo import ReedSolomonError, RSCodec

from .base import EncoderStrategy, register_encoder
from .console import log_info, log_warn
from .params import IntParam
from .watermark import WatermarkEngine

# ECC Magic byte for auto-detection of error-corrected payloads
ECC_MAGIC_BYTE = 0xEC
DEFAULT_ECC_SYMBOLS = 10

# ==========================================
#  Letter Braille
# ==========================================

BRAILLE_LETTERS = {
    'a': '⠁', 'b': '⠃', 'c': '⠉', 'd': '⠙', 'e': '⠑', 'f': '⠋', 'g': '⠛',
    'h': '⠓', 'i': '⠊', 'j': '⠚', 'k': '⠅', 'l': '⠇', 'm': '⠍', 'n': '⠝',
    'o': '⠕', 'p': '⠏', 'q': '⠟', 'r': '⠗', 's': '⠎', 't': '⠞', 'u': '⠥',
    'v': '⠧', 'w': '⠺', 'x': '⠭', 'y': '⠽', 'z': '⠵', ' ': '⠀',
    '.': '⠲', ',': '⠂', '!': '⠖', '?': '⠦'
}
NUMBER_SIGN = '⠼'
# Digits 1-9, 0 reuse the cells of a-j behind the number sign
BRAILLE_DIGITS = {d: BRAILLE_LETTERS[l] for d, l in zip("1234567890", "abcdefghij")}


@register_encoder
class BrailleEncoder(EncoderStrategy):
    """
    Letter Braille. Case is not represented, so decode yields lowercase.

    Every digit carries its own number sign. Characters without a cell are
    copied through; a raw Braille cell in the input is read back as the
    letter it spells.
    """

    id = "braille"
    name = "Braille"
    description = "Six-dot Braille letters"
    emoji = "⠃"
    category = "classic"
    tags = ("classic", "accessibility", "tactile")
    lossy = True

    CELL_TO_LETTER = {cell: char for char, cell in BRAILLE_LETTERS.items()}
    CELL_TO_DIGIT = {cell: digit for digit, cell in BRAILLE_DIGITS.items()}

    def _encode(self, text: str, _param) -> str:
        out: List[str] = []
        for char in text:
            lower = char.lower()
            if char in BRAILLE_DIGITS:
                out.append(NUMBER_SIGN + BRAILLE_DIGITS[char])
            elif lower in BRAILLE_LETTERS:
                out.append(BRAILLE_LETTERS[lower])
            else:
                out.append(char)
        return "".join(out)

    def _decode(self, text: str, _param) -> str:
        out: List[str] = []
        i = 0
        while i < len(text):
            char = text[i]
            following = text[i + 1:i + 2]
            if char == NUMBER_SIGN and following in self.CELL_TO_DIGIT:
                out.append(self.CELL_TO_DIGIT[following])
                i += 2
                continue
            out.append(self.CELL_TO_LETTER.get(char, char))
            i += 1
        return "".join(out)

    def normalize(self, text: str, param: Any = None) -> str:
        out: List[str] = []
        for char in text:
            lower = char.lower()
            if char in BRAILLE_DIGITS:
                out.append(char)
            elif lower in BRAILLE_LETTERS:
                out.append(lower)
            else:
                out.append(self.CELL_TO_LETTER.get(char, char))
        return "".join(out)


# ==========================================
#  Zero-width steganography
# ==========================================


@register_encoder
class ZeroWidthEncoder(EncoderStrategy):
    """
    Every UTF-16 code unit as 16 invisible bits, then a terminator.

    Decode ignores anything that is not a zero-width bit, so the hidden
    message survives being pasted into visible cover text.
    """

    id = "zero-width"
    name = "Zero-Width Steganography"
    description = "Invisible characters hiding the message"
    emoji = "👻"
    category = "steganography"
    tags = ("steganography", "invisible", "hidden")
    special = True

    TERMINATOR = '\u200D'

    def _encode(self, text: str, _param) -> str:
        data = text.encode('utf-16-be')
        bits = "".join(f"{b:08b}" for b in data)
        invisible = bits.replace('0', WatermarkEngine.ZERO).replace('1', WatermarkEngine.ONE)
        return invisible + self.TERMINATOR

    def _decode(self, text: str, _param) -> str:
        payload = text.split(self.TERMINATOR, 1)[0]
        bits = "".join(
            '0' if c == WatermarkEngine.ZERO else '1'
            for c in payload if c in (WatermarkEngine.ZERO, WatermarkEngine.ONE)
        )
        if len(bits) % 16:
            raise ValueError("zero-width payload is not whole 16-bit units")
        data = bytes(int(bits[i:i + 8], 2) for i in range(0, len(bits), 8))
        return data.decode('utf-16-be')


# ==========================================
#  ERROR CORRECTION: Reed-Solomon Engine
# ==========================================


class ErrorCorrection:
    """
    Reed-Solomon error correction wrapper.
    Adds ECC bytes to data for corruption recovery.

    Uses a magic byte prefix (0xEC) for auto-detection on decode.
    """

    @staticmethod
    def encode(data: bytes, ecc_symbols: int) -> bytes:
        """
        Add Reed-Solomon ECC to data.
        Returns: [MAGIC_BYTE] + [ECC_SYMBOLS_COUNT] + [RS_ENCODED_DATA]

        The header is written even for 0 symbols so that a payload whose
        first byte happens to be 0xEC is never mistaken for ECC data.
        """
        header = bytes([ECC_MAGIC_BYTE, max(ecc_symbols, 0)])
        if ecc_symbols <= 0:
            return header + data

        rsc = RSCodec(ecc_symbols)
        encoded = rsc.encode(data)
        return header + bytes(encoded)

    @staticmethod
    def decode(data: bytes) -> Tuple[bytes, bool, int]:
        """
        Decode and repair Reed-Solomon protected data.

        ECC is only applied when the magic byte is present; the symbol
        count travels in the second header byte.

        Returns:
            (decoded_data, had_ecc, errors_corrected), errors_corrected is
            -1 when the data is damaged beyond repair.
        """
        if len(data) < 2 or data[0] != ECC_MAGIC_BYTE:
            return data, False, 0

        ecc_symbols = data[1]
        data = data[2:]
        if ecc_symbols <= 0:
            return data, False, 0

        try:
            rsc = RSCodec(ecc_symbols)
            decoded, _, errata_pos = rsc.decode(data)
            errors_corrected = len(errata_pos) if errata_pos else 0
            return bytes(decoded), True, errors_corrected
        except ReedSolomonError as e:
            log_warn(f"ECC decode failed: {e}. Data may be corrupted beyond repair.")
            return data, True, -1


# ==========================================
#  Zig-zag 8-dot Braille with ECC
# ==========================================


@register_encoder
class EccBrailleEncoder(EncoderStrategy):
    """
    Scrambles bits into a linear zig-zag of 8-dot Braille.

    Even cells map byte bits onto dots 1,2,3,7,4,5,6,8 and odd cells onto
    4,5,6,8,1,2,3,7. The parameter is the number of Reed-Solomon symbols
    (0 disables error correction); decode reads it from the payload header.
    """

    id = "braille-ecc"
    name = "Braille + ECC"
    description = "8-dot zig-zag Braille with Reed-Solomon error correction"
    emoji = "🛡️"
    category = "steganography"
    tags = ("braille", "error-correction", "binary")
    special = True
    param = IntParam(default=DEFAULT_ECC_SYMBOLS, minimum=0, maximum=64)

    BASE = 0x2800
    DOTS = {1: 0x01, 2: 0x02, 3: 0x04, 4: 0x08, 5: 0x10, 6: 0x20, 7: 0x40, 8: 0x80}
    MAP_ZIG = [1, 2, 3, 7, 4, 5, 6, 8]
    MAP_ZAG = [4, 5, 6, 8, 1, 2, 3, 7]

    def _bytes_to_braille(self, data: bytes) -> str:
        """Convert raw bytes to Braille string using zig-zag mapping."""
        result = []
        for i, byte in enumerate(data):
            braille_val = 0
            mapping = self.MAP_ZIG if i % 2 == 0 else self.MAP_ZAG
            for bit in range(8):
                if (byte >> bit) & 1:
                    braille_val |= self.DOTS[mapping[bit]]
            result.append(chr(self.BASE + braille_val))
        return "".join(result)

    def _braille_to_bytes(self, text: str) -> bytes:
        """Convert Braille string back to raw bytes; non-Braille characters are skipped."""
        cells = [c for c in text if self.BASE <= ord(c) <= self.BASE + 0xFF]
        decoded_bytes = bytearray()
        for i, char in enumerate(cells):
            val = ord(char) - self.BASE
            byte_val = 0
            mapping = self.MAP_ZIG if i % 2 == 0 else self.MAP_ZAG
            for bit in range(8):
                if val & self.DOTS[mapping[bit]]:
                    byte_val |= (1 << bit)
            decoded_bytes.append(byte_val)
        return bytes(decoded_bytes)

    def _encode(self, text: str, ecc_symbols: int) -> str:
        data = ErrorCorrection.encode(text.encode('utf-8'), ecc_symbols)
        return self._bytes_to_braille(data)

    def _decode(self, text: str, _param) -> str:
        raw = self._braille_to_bytes(text)
        if not raw:
            return ""

        decoded_data, had_ecc, errors = ErrorCorrection.decode(raw)
        if errors > 0:
            log_info(f"Corrected {errors} error(s) using Reed-Solomon.")
        elif errors < 0:
            log_warn("Data corruption detected but could not be repaired.")

        try:
            return decoded_data.decode('utf-8')
        except UnicodeDecodeError:
            return f"[Raw Data]: {decoded_data.hex()}"
