"""
Transposition ciphers and variable-length numeric codes.

The keyword transpositions write the text row-major under the key and read
whole columns in key order. The last row may be short; decode works out the
column lengths from the total length, so no padding is needed and every
character (spaces, punctuation, unicode) survives the round trip.
"""

import random
from typing import Any, Dict, List, Tuple

from .alphabet import DIGITS, LETTERS, column_order, keyed_alphabet, letter_of
from .base import UNRESOLVED, EncoderStrategy, register_encoder
from .params import DualKeywordParam, IntParam, KeywordParam, TextParam

# ==========================================
#  Columnar helpers
# ==========================================


def columnar_columns(text: str, order: List[int]) -> List[str]:
    """The columns of ``text`` written under ``len(order)`` columns, in read order."""
    width = len(order)
    return [text[col::width] for col in order]


def columnar_encrypt(text: str, order: List[int]) -> str:
    return "".join(columnar_columns(text, order))


def columnar_decrypt(text: str, order: List[int]) -> str:
    width = len(order)
    rows, remainder = divmod(len(text), width)
    columns: Dict[int, str] = {}
    pos = 0
    for col in order:
        length = rows + (1 if col < remainder else 0)
        columns[col] = text[pos:pos + length]
        pos += length
    out: List[str] = []
    for row in range(rows + 1):
        for col in range(width):
            if row < len(columns[col]):
                out.append(columns[col][row])
    return "".join(out)


# ==========================================
#  Zig-zag and columnar transpositions
# ==========================================


@register_encoder
class RailFenceCipher(EncoderStrategy):
    id = "rail-fence"
    name = "Rail Fence Cipher"
    description = "Zigzag transposition cipher"
    emoji = "🚃"
    category = "cipher"
    tags = ("cipher", "transposition", "zigzag")
    param = IntParam(default=3, minimum=2, maximum=64)

    @staticmethod
    def rail_pattern(length: int, rails: int) -> List[int]:
        """Rail index of every position along the zigzag."""
        pattern: List[int] = []
        rail, step = 0, 1
        for _ in range(length):
            pattern.append(rail)
            if rail == 0:
                step = 1
            elif rail == rails - 1:
                step = -1
            rail += step
        return pattern

    def _encode(self, text: str, rails: int) -> str:
        pattern = self.rail_pattern(len(text), rails)
        return "".join(
            char for _, char in sorted(zip(pattern, text), key=lambda pair: pair[0])
        )

    def _decode(self, text: str, rails: int) -> str:
        pattern = self.rail_pattern(len(text), rails)
        # Positions visited rail by rail, in the same order encode emitted them
        slots = sorted(range(len(text)), key=lambda i: (pattern[i], i))
        out = [""] * len(text)
        for char, slot in zip(text, slots):
            out[slot] = char
        return "".join(out)


@register_encoder
class ColumnarCipher(EncoderStrategy):
    id = "columnar"
    name = "Columnar Transposition"
    description = "Read columns in keyword order"
    emoji = "🏛"
    category = "cipher"
    tags = ("cipher", "transposition", "keyword")
    param = KeywordParam(default="ZEBRAS")

    def _encode(self, text: str, keyword: str) -> str:
        return columnar_encrypt(text, column_order(keyword))

    def _decode(self, text: str, keyword: str) -> str:
        return columnar_decrypt(text, column_order(keyword))


@register_encoder
class DoubleTranspositionCipher(EncoderStrategy):
    id = "double-transposition"
    name = "Double Transposition"
    description = "Columnar transposition applied twice with two keywords"
    emoji = "🔃"
    category = "cipher"
    tags = ("cipher", "transposition", "military")
    param = DualKeywordParam(default=("FIRST", "SECOND"))

    def _encode(self, text: str, keys: Tuple[str, str]) -> str:
        first = columnar_encrypt(text, column_order(keys[0]))
        return columnar_encrypt(first, column_order(keys[1]))

    def _decode(self, text: str, keys: Tuple[str, str]) -> str:
        first = columnar_decrypt(text, column_order(keys[1]))
        return columnar_decrypt(first, column_order(keys[0]))


@register_encoder
class ScytaleCipher(EncoderStrategy):
    """Spartan rod: rows as wide as the rod's diameter, read off column by column."""

    id = "scytale"
    name = "Scytale"
    description = "Wrap-around rod transposition"
    emoji = "🪄"
    category = "cipher"
    tags = ("cipher", "transposition", "ancient", "greek")
    param = IntParam(default=4, minimum=2, maximum=64)

    def _encode(self, text: str, diameter: int) -> str:
        return columnar_encrypt(text, list(range(diameter)))

    def _decode(self, text: str, diameter: int) -> str:
        return columnar_decrypt(text, list(range(diameter)))


# ==========================================
#  Straddling checkerboard
# ==========================================


class Checkerboard:
    """
    Straddling checkerboard.

    Top row: the first 8 letters of the keyed alphabet on digits 0-9,
    leaving 2 and 6 blank. Those two digits prefix the second and third
    rows, which carry the other 18 letters plus two control cells:
    ``SPACE_CODE`` and ``DIGIT_ESCAPE`` (followed by the literal digit).
    """

    SHIFT_DIGITS = ("2", "6")
    SPACE_CODE = "68"
    DIGIT_ESCAPE = "69"

    def __init__(self, keyword: str):
        alphabet = keyed_alphabet(keyword)
        self.encode_map: Dict[str, str] = {}
        top_slots = [d for d in DIGITS if d not in self.SHIFT_DIGITS]
        for digit, letter in zip(top_slots, alphabet[:8]):
            self.encode_map[letter] = digit
        lower_slots = [p + d for p in self.SHIFT_DIGITS for d in DIGITS]
        for code, letter in zip(lower_slots, alphabet[8:]):
            self.encode_map[letter] = code
        self.decode_map: Dict[str, str] = {code: letter for letter, code in self.encode_map.items()}

    def encode(self, text: str) -> str:
        out: List[str] = []
        for char in text:
            upper = char.upper()
            if upper in self.encode_map:
                out.append(self.encode_map[upper])
            elif char == " ":
                out.append(self.SPACE_CODE)
            elif char in DIGITS:
                out.append(self.DIGIT_ESCAPE + char)
        return "".join(out)

    def decode(self, digits: str) -> str:
        out: List[str] = []
        i = 0
        while i < len(digits):
            head = digits[i]
            if head not in DIGITS:
                out.append(head)
                i += 1
                continue
            if head not in self.SHIFT_DIGITS:
                out.append(self.decode_map.get(head, UNRESOLVED))
                i += 1
                continue
            code = digits[i:i + 2]
            if len(code) < 2 or code[1] not in DIGITS:
                # Prefix digit with nothing after it
                out.append(UNRESOLVED)
                i += 1
                continue
            if code == self.SPACE_CODE:
                out.append(" ")
                i += 2
            elif code == self.DIGIT_ESCAPE:
                literal = digits[i + 2:i + 3]
                out.append(literal if literal and literal in DIGITS else UNRESOLVED)
                i += 3 if literal else 2
            else:
                out.append(self.decode_map.get(code, UNRESOLVED))
                i += 2
        return "".join(out)


@register_encoder
class StraddlingCheckerboardCipher(EncoderStrategy):
    id = "straddling-checkerboard"
    name = "Straddling Checkerboard"
    description = "Variable-length digit substitution (one or two digits per letter)"
    emoji = "♟️"
    category = "cipher"
    tags = ("cipher", "numeric", "espionage")
    lossy = True
    param = KeywordParam(default="ESTONIA", max_length=8)

    def _encode(self, text: str, keyword: str) -> str:
        return Checkerboard(keyword).encode(text)

    def _decode(self, text: str, keyword: str) -> str:
        return Checkerboard(keyword).decode("".join(text.split()))

    def normalize(self, text: str, param: Any = None) -> str:
        return "".join(letter_of(c) or c for c in text if letter_of(c) or c == " " or c in DIGITS)


# ==========================================
#  Homophonic substitution
# ==========================================

# Code pool sizes follow English letter frequency
LETTER_FREQUENCY = {
    'E': 4, 'T': 3, 'A': 3, 'O': 3, 'I': 3, 'N': 3, 'S': 2, 'H': 2, 'R': 2,
    'D': 2, 'L': 2, 'C': 1, 'U': 1, 'M': 1, 'W': 1, 'F': 1, 'G': 1, 'Y': 1,
    'P': 1, 'B': 1, 'V': 1, 'K': 1, 'J': 1, 'X': 1, 'Q': 1, 'Z': 1
}


def homophone_pools(complexity: int) -> Dict[str, List[str]]:
    pools: Dict[str, List[str]] = {}
    code = 10
    for letter in LETTERS:
        count = min(LETTER_FREQUENCY.get(letter, 1), complexity)
        pools[letter] = [str(code + i) for i in range(count)]
        code += count
    return pools


@register_encoder
class HomophonicCipher(EncoderStrategy):
    """
    Each letter becomes one of several two-digit codes picked at random.

    Frequent letters get bigger pools (up to ``complexity``), flattening the
    frequency profile. Decode maps every code in a pool back to its letter.
    """

    id = "homophonic"
    name = "Homophonic Substitution"
    description = "Multiple codes per letter, chosen at random"
    emoji = "🎲"
    category = "cipher"
    tags = ("cipher", "substitution", "numeric")
    lossy = True
    param = IntParam(default=3, minimum=1, maximum=5)

    def _encode(self, text: str, complexity: int) -> str:
        pools = homophone_pools(complexity)
        tokens: List[str] = []
        for char in text:
            upper = char.upper()
            if upper in pools:
                tokens.append(random.choice(pools[upper]))
            elif char == " ":
                tokens.append("/")
        return " ".join(tokens)

    def _decode(self, text: str, complexity: int) -> str:
        reverse = {code: letter for letter, codes in homophone_pools(complexity).items() for code in codes}
        out: List[str] = []
        for token in text.split():
            if token == "/":
                out.append(" ")
            else:
                out.append(reverse.get(token, UNRESOLVED))
        return "".join(out)

    def normalize(self, text: str, param: Any = None) -> str:
        return "".join(letter_of(c) or c for c in text if letter_of(c) or c == " ")


# ==========================================
#  Book cipher
# ==========================================

DEFAULT_BOOK = "The quick brown fox jumps over the lazy dog and runs away quickly"


def _clean_word(word: str) -> str:
    return "".join(c for c in word.lower() if 'a' <= c <= 'z')


@register_encoder
class BookCipher(EncoderStrategy):
    """
    Words become their 1-based position in a reference text.

    A word missing from the reference is spelled out with the positions of
    words starting with each of its letters, joined by ``-``; a letter no
    reference word starts with becomes ``?``. Lookup is O(n*m) in the
    message and reference lengths.
    """

    id = "book"
    name = "Book Cipher"
    description = "Encode words as positions in a reference text"
    emoji = "📚"
    category = "cipher"
    tags = ("cipher", "book", "historical")
    lossy = True
    param = TextParam(default=DEFAULT_BOOK)

    @staticmethod
    def _index(book: str) -> Tuple[List[str], Dict[str, int], Dict[str, int]]:
        words = [_clean_word(w) for w in book.split()]
        positions: Dict[str, int] = {}
        initials: Dict[str, int] = {}
        for idx, word in enumerate(words, start=1):
            if word and word not in positions:
                positions[word] = idx
            if word and word[0] not in initials:
                initials[word[0]] = idx
        return words, positions, initials

    def _encode(self, text: str, book: str) -> str:
        _, positions, initials = self._index(book)
        refs: List[str] = []
        for word in text.split():
            clean = _clean_word(word)
            if not clean:
                refs.append("?")
            elif clean in positions:
                refs.append(str(positions[clean]))
            else:
                spelled = "-".join(str(initials[c]) if c in initials else "?" for c in clean)
                # A trailing dash keeps a one-letter spelling apart from a word index
                refs.append(spelled + "-" if len(clean) == 1 else spelled)
        return " ".join(refs)

    def _decode(self, text: str, book: str) -> str:
        words, _, _ = self._index(book)

        def lookup(ref: str) -> str:
            if ref.isdigit() and 1 <= int(ref) <= len(words) and words[int(ref) - 1]:
                return words[int(ref) - 1]
            return "?"

        out: List[str] = []
        for ref in text.split():
            if "-" in ref:
                out.append("".join(lookup(part)[0] for part in ref.split("-") if part))
            else:
                out.append(lookup(ref))
        return " ".join(out)

    def normalize(self, text: str, param: Any = None) -> str:
        _, positions, initials = self._index(self.coerce_param(param))
        words: List[str] = []
        for word in text.split():
            clean = _clean_word(word)
            if not clean:
                words.append("?")
            elif clean in positions:
                words.append(clean)
            else:
                words.append("".join(c if c in initials else "?" for c in clean))
        return " ".join(words)
