from typing import List, Sequence, Tuple

from .alphabet import LETTERS, keyed_alphabet
from .base import EncoderStrategy, register_encoder
from .params import AffineParam, IntListParam, KeywordParam, ShiftParam

# ==========================================
#  Shared letter arithmetic
# ==========================================


def shift_char(char: str, shift: int) -> str:
    """Shift an ASCII letter within its own case; anything else is returned unchanged."""
    if 'a' <= char <= 'z':
        return chr((ord(char) - ord('a') + shift) % 26 + ord('a'))
    if 'A' <= char <= 'Z':
        return chr((ord(char) - ord('A') + shift) % 26 + ord('A'))
    return char


def shift_letters(text: str, shift: int) -> str:
    shift %= 26
    return "".join(shift_char(c, shift) for c in text)


def shift_digits(text: str, shift: int) -> str:
    shift %= 10
    return "".join(
        chr((ord(c) - ord('0') + shift) % 10 + ord('0')) if '0' <= c <= '9' else c
        for c in text
    )


def substitute(text: str, source: str, target: str) -> str:
    """Map uppercase ``source`` onto ``target`` letter by letter, keeping case."""
    table = {}
    for s, t in zip(source, target):
        table[s] = t
        table[s.lower()] = t.lower()
    return "".join(table.get(c, c) for c in text)


def mod_inverse(a: int, m: int = 26) -> int:
    return pow(a, -1, m)


# ==========================================
#  Shift ciphers
# ==========================================


@register_encoder
class CaesarCipher(EncoderStrategy):
    id = "caesar"
    name = "Caesar Cipher"
    description = "Shift alphabet by N positions"
    emoji = "🏛️"
    category = "cipher"
    tags = ("cipher", "cryptography", "ancient")
    param = ShiftParam(default=13)

    def _encode(self, text: str, shift: int) -> str:
        return shift_letters(text, shift)

    def _decode(self, text: str, shift: int) -> str:
        return shift_letters(text, -shift)


@register_encoder
class Rot13Cipher(EncoderStrategy):
    """ROT13 is its own inverse: encode and decode are the same operation."""

    id = "rot13"
    name = "ROT13"
    description = "Caesar cipher with 13-letter shift"
    emoji = "🔄"
    category = "cipher"
    tags = ("cipher", "cryptography", "simple")

    def _encode(self, text: str, _param) -> str:
        return shift_letters(text, 13)

    def _decode(self, text: str, _param) -> str:
        return shift_letters(text, 13)


@register_encoder
class RotNCipher(CaesarCipher):
    id = "rot-n"
    name = "ROT-N"
    description = "Rotate letters by a custom amount"
    emoji = "🔁"
    tags = ("cipher", "rotation", "parameterized")


@register_encoder
class Rot5Cipher(EncoderStrategy):
    id = "rot5"
    name = "ROT5"
    description = "Rotate digits only"
    emoji = "🔢"
    category = "cipher"
    tags = ("cipher", "rotation", "numbers")
    param = ShiftParam(default=5, modulus=10)

    def _encode(self, text: str, shift: int) -> str:
        return shift_digits(text, shift)

    def _decode(self, text: str, shift: int) -> str:
        return shift_digits(text, -shift)


@register_encoder
class Rot18Cipher(EncoderStrategy):
    id = "rot18"
    name = "ROT18"
    description = "ROT13 for letters plus ROT5 for digits"
    emoji = "🔄"
    category = "cipher"
    tags = ("cipher", "rotation", "symmetric")

    def _encode(self, text: str, _param) -> str:
        return shift_digits(shift_letters(text, 13), 5)

    _decode = _encode


@register_encoder
class MultiCaesarCipher(EncoderStrategy):
    """Caesar with a cycling list of shifts; the list advances on letters only."""

    id = "multi-caesar"
    name = "Multi-Caesar"
    description = "Rotating list of Caesar shifts"
    emoji = "🎡"
    category = "cipher"
    tags = ("cipher", "rotation", "polyalphabetic")
    param = IntListParam(default=(3, 7, 13))

    def _apply(self, text: str, shifts: Sequence[int], sign: int) -> str:
        out: List[str] = []
        index = 0
        for char in text:
            if char.isascii() and char.isalpha():
                out.append(shift_char(char, sign * shifts[index % len(shifts)]))
                index += 1
            else:
                out.append(char)
        return "".join(out)

    def _encode(self, text: str, shifts: List[int]) -> str:
        return self._apply(text, shifts, 1)

    def _decode(self, text: str, shifts: List[int]) -> str:
        return self._apply(text, shifts, -1)


# ==========================================
#  Substitution ciphers
# ==========================================


@register_encoder
class AtbashCipher(EncoderStrategy):
    id = "atbash"
    name = "Atbash Cipher"
    description = "Hebrew cipher - reverse alphabet (A=Z)"
    emoji = "🔀"
    category = "cipher"
    tags = ("cipher", "cryptography", "hebrew", "ancient")

    def _encode(self, text: str, _param) -> str:
        return substitute(text, LETTERS, LETTERS[::-1])

    _decode = _encode


@register_encoder
class AffineCipher(EncoderStrategy):
    """
    E(x) = (a*x + b) mod 26, D(y) = a^-1 * (y - b) mod 26.

    ``a`` is normalized by :class:`AffineParam`, so the cipher is always
    invertible.
    """

    id = "affine"
    name = "Affine Cipher"
    description = "Mathematical substitution cipher"
    emoji = "📐"
    category = "cipher"
    tags = ("cipher", "mathematical", "substitution")
    param = AffineParam(default=(5, 8))

    def _table(self, key: Tuple[int, int]) -> str:
        a, b = key
        return "".join(LETTERS[(a * x + b) % 26] for x in range(26))

    def _encode(self, text: str, key: Tuple[int, int]) -> str:
        return substitute(text, LETTERS, self._table(key))

    def _decode(self, text: str, key: Tuple[int, int]) -> str:
        a, b = key
        a_inv = mod_inverse(a)
        plain = "".join(LETTERS[(a_inv * (y - b)) % 26] for y in range(26))
        return substitute(text, LETTERS, plain)


@register_encoder
class KeywordCipher(EncoderStrategy):
    id = "keyword"
    name = "Keyword Cipher"
    description = "Substitution alphabet led by a keyword"
    emoji = "🗝️"
    category = "cipher"
    tags = ("cipher", "substitution", "keyword")
    param = KeywordParam(default="KEYWORD")

    def _encode(self, text: str, keyword: str) -> str:
        return substitute(text, LETTERS, keyed_alphabet(keyword))

    def _decode(self, text: str, keyword: str) -> str:
        return substitute(text, keyed_alphabet(keyword), LETTERS)


@register_encoder
class ReverseCipher(EncoderStrategy):
    id = "reverse"
    name = "Reverse Text"
    description = "Simply backwards"
    emoji = "↩️"
    category = "cipher"
    tags = ("cipher", "simple", "mirror")

    def _encode(self, text: str, _param) -> str:
        return text[::-1]

    _decode = _encode
