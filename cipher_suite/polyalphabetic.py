"""
Polyalphabetic ciphers.

All of them walk the text once and draw one key-stream value per ASCII
letter. Non-letters are copied through and do not consume the key stream,
which keeps encode and decode aligned. Case is preserved.
"""

from typing import Callable, Iterator, List

from .alphabet import LETTERS
from .base import EncoderStrategy, register_encoder
from .params import DIGITS, KeywordParam, ShiftParam, TextParam


def _is_letter(char: str) -> bool:
    return ('a' <= char <= 'z') or ('A' <= char <= 'Z')


def _letter_index(char: str) -> int:
    return ord(char.upper()) - ord('A')


def _with_case(index: int, like: str) -> str:
    out = LETTERS[index % 26]
    return out.lower() if like.islower() else out


def _cycle(values: List[int]) -> Iterator[int]:
    while True:
        yield from values


def apply_keystream(text: str, keystream: Iterator[int], combine: Callable[[int, int], int]) -> str:
    """Combine every letter with the next key-stream value; copy everything else."""
    out: List[str] = []
    for char in text:
        if _is_letter(char):
            out.append(_with_case(combine(_letter_index(char), next(keystream)), char))
        else:
            out.append(char)
    return "".join(out)


def _key_values(keyword: str) -> List[int]:
    return [ord(c) - ord('A') for c in keyword]


def _add(p: int, k: int) -> int:
    return p + k


def _sub(c: int, k: int) -> int:
    return c - k


# ==========================================
#  Vigenère family
# ==========================================


@register_encoder
class VigenereCipher(EncoderStrategy):
    id = "vigenere"
    name = "Vigenère Cipher"
    description = "Keyword-based polyalphabetic cipher"
    emoji = "🔐"
    category = "cipher"
    tags = ("cipher", "cryptography", "polyalphabetic")
    param = KeywordParam(default="KEY")

    def _encode(self, text: str, keyword: str) -> str:
        return apply_keystream(text, _cycle(_key_values(keyword)), _add)

    def _decode(self, text: str, keyword: str) -> str:
        return apply_keystream(text, _cycle(_key_values(keyword)), _sub)


@register_encoder
class BeaufortCipher(EncoderStrategy):
    """C = (K - P) mod 26. Applying the same formula again recovers P."""

    id = "beaufort"
    name = "Beaufort Cipher"
    description = "Symmetric Vigenère variant"
    emoji = "⚓"
    category = "cipher"
    tags = ("cipher", "polyalphabetic", "symmetric")
    param = KeywordParam(default="KEY")

    def _encode(self, text: str, keyword: str) -> str:
        return apply_keystream(text, _cycle(_key_values(keyword)), lambda p, k: k - p)

    _decode = _encode


@register_encoder
class AutokeyCipher(EncoderStrategy):
    """
    Key stream = primer followed by the plaintext letters themselves.

    Decoding has to rebuild the key as it goes: every recovered plaintext
    letter is appended to the key stream before the next lookup.
    """

    id = "autokey"
    name = "Autokey Cipher"
    description = "Vigenère whose key continues with the message"
    emoji = "🔑"
    category = "cipher"
    tags = ("cipher", "polyalphabetic", "autokey")
    param = KeywordParam(default="KEY")

    def _encode(self, text: str, primer: str) -> str:
        key = _key_values(primer)
        key.extend(_letter_index(c) for c in text if _is_letter(c))
        return apply_keystream(text, iter(key), _add)

    def _decode(self, text: str, primer: str) -> str:
        key = _key_values(primer)
        out: List[str] = []
        position = 0
        for char in text:
            if _is_letter(char):
                plain = (_letter_index(char) - key[position]) % 26
                key.append(plain)
                position += 1
                out.append(_with_case(plain, char))
            else:
                out.append(char)
        return "".join(out)


@register_encoder
class GronsfeldCipher(EncoderStrategy):
    id = "gronsfeld"
    name = "Gronsfeld Cipher"
    description = "Vigenère with a numeric key"
    emoji = "🔢"
    category = "cipher"
    tags = ("cipher", "polyalphabetic", "numeric")
    param = KeywordParam(default="31415", charset=DIGITS)

    def _encode(self, text: str, key: str) -> str:
        return apply_keystream(text, _cycle([int(d) for d in key]), _add)

    def _decode(self, text: str, key: str) -> str:
        return apply_keystream(text, _cycle([int(d) for d in key]), _sub)


@register_encoder
class TrithemiusCipher(EncoderStrategy):
    id = "trithemius"
    name = "Trithemius Cipher"
    description = "Progressive shift: start, start+1, start+2, ..."
    emoji = "📜"
    category = "cipher"
    tags = ("cipher", "polyalphabetic", "progressive")
    param = ShiftParam(default=0)

    @staticmethod
    def _stream(start: int) -> Iterator[int]:
        shift = start
        while True:
            yield shift
            shift = (shift + 1) % 26

    def _encode(self, text: str, start: int) -> str:
        return apply_keystream(text, self._stream(start), _add)

    def _decode(self, text: str, start: int) -> str:
        return apply_keystream(text, self._stream(start), _sub)


@register_encoder
class PortaCipher(EncoderStrategy):
    """
    Della Porta's reciprocal cipher.

    Key letter pairs (AB, CD, ..., YZ) select one of 13 alphabets. Each
    alphabet swaps the halves A-M / N-Z, so encoding twice is the identity.
    """

    id = "porta"
    name = "Porta Cipher"
    description = "Reciprocal polyalphabetic cipher"
    emoji = "🚪"
    category = "cipher"
    tags = ("cipher", "polyalphabetic", "reciprocal")
    param = KeywordParam(default="SECRET")

    @staticmethod
    def swap(p: int, k: int) -> int:
        table = k // 2
        if p < 13:
            return 13 + (p + table) % 13
        return (p - 13 - table) % 13

    def _encode(self, text: str, keyword: str) -> str:
        return apply_keystream(text, _cycle(_key_values(keyword)), self.swap)

    _decode = _encode


@register_encoder
class RunningKeyCipher(EncoderStrategy):
    """
    Vigenère keyed by a long text (a passage of a book).

    Only the letters of the key text are used. A key shorter than the
    message is cycled, the same as Vigenère.
    """

    id = "running-key"
    name = "Running Key Cipher"
    description = "Vigenère keyed by a passage of text"
    emoji = "📖"
    category = "cipher"
    tags = ("cipher", "polyalphabetic", "book")
    param = TextParam(default="THEQUICKBROWNFOXJUMPSOVERTHELAZYDOG")

    @staticmethod
    def _key(text: str) -> List[int]:
        values = [_letter_index(c) for c in text if _is_letter(c)]
        return values or _key_values("THEQUICKBROWNFOXJUMPSOVERTHELAZYDOG")

    def _encode(self, text: str, key: str) -> str:
        return apply_keystream(text, _cycle(self._key(key)), _add)

    def _decode(self, text: str, key: str) -> str:
        return apply_keystream(text, _cycle(self._key(key)), _sub)
