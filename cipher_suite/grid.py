"""
Grid and digraph ciphers built on Polybius squares.

All of these are lossy: they only carry what fits in their square
(uppercase letters, J folded into I on 5x5 grids) and ``normalize`` spells
out exactly what a decode gives back.
"""

from typing import Any, List, Optional, Tuple

from .alphabet import DIGITS, Square, column_order, letter_of
from .base import UNRESOLVED, EncoderStrategy, register_encoder
from .params import ChoiceParam, DualKeywordParam, KeywordParam
from .transposition import columnar_columns, columnar_decrypt


def square_letters(text: str) -> List[str]:
    """Letters of ``text`` folded for a 5x5 square (uppercase, J->I); the rest is dropped."""
    out: List[str] = []
    for char in text:
        letter = letter_of(char)
        if letter:
            out.append("I" if letter == "J" else letter)
    return out


# ==========================================
#  Playfair
# ==========================================


def playfair_filler(letter: str) -> str:
    return "Q" if letter == "X" else "X"


def playfair_digraphs(text: str) -> List[str]:
    """
    Split text into Playfair digraphs.

    A pair of equal letters gets a filler between them and an odd final
    letter is padded, so ``"HELLO"`` becomes ``HE LX LO``.
    """
    letters = square_letters(text)
    pairs: List[str] = []
    i = 0
    while i < len(letters):
        first = letters[i]
        second = letters[i + 1] if i + 1 < len(letters) else None
        if second is None or second == first:
            pairs.append(first + playfair_filler(first))
            i += 1
        else:
            pairs.append(first + second)
            i += 2
    return pairs


def strip_playfair_fillers(letters: str) -> str:
    """Drop fillers that sit between two equal letters, and a trailing pad."""
    out: List[str] = []
    last = len(letters) - 1
    for i, char in enumerate(letters):
        if i % 2 == 1 and char == playfair_filler(letters[i - 1]):
            if i == last or letters[i + 1] == letters[i - 1]:
                continue
        out.append(char)
    return "".join(out)


@register_encoder
class PlayfairCipher(EncoderStrategy):
    """
    Digraph substitution on a keyed 5x5 square.

    Same row: take the letter to the right. Same column: the letter below.
    Otherwise the pair marks a rectangle and each letter takes the corner in
    its own row. Decoding runs the rules backwards and then strips fillers,
    so a genuine X between doubled letters (or a final X) is lost.
    """

    id = "playfair"
    name = "Playfair Cipher"
    description = "Digraph cipher on a keyed 5x5 grid"
    emoji = "🎯"
    category = "cipher"
    tags = ("cipher", "digraph", "grid", "victorian")
    lossy = True
    param = KeywordParam(default="KEYWORD")

    @staticmethod
    def _swap(square: Square, pair: str, step: int) -> str:
        (r1, c1), (r2, c2) = square.position(pair[0]), square.position(pair[1])
        if r1 == r2:
            return square.at(r1, c1 + step) + square.at(r2, c2 + step)
        if c1 == c2:
            return square.at(r1 + step, c1) + square.at(r2 + step, c2)
        return square.at(r1, c2) + square.at(r2, c1)

    def _encode(self, text: str, keyword: str) -> str:
        square = Square(keyword, 5)
        return " ".join(self._swap(square, pair, 1) for pair in playfair_digraphs(text))

    def _decode(self, text: str, keyword: str) -> str:
        square = Square(keyword, 5)
        letters = "".join(square_letters(text))
        if len(letters) % 2:
            letters += playfair_filler(letters[-1])
        plain = "".join(
            self._swap(square, letters[i:i + 2], -1) for i in range(0, len(letters), 2)
        )
        return strip_playfair_fillers(plain)

    def normalize(self, text: str, param: Any = None) -> str:
        return strip_playfair_fillers("".join(playfair_digraphs(text)))


# ==========================================
#  Four-Square
# ==========================================


@register_encoder
class FourSquareCipher(EncoderStrategy):
    """
    Two plain squares (top-left, bottom-right) and two keyed squares.

    For a pair (a, b) the first output letter sits in key square 1 at a's
    row and b's column, the second in key square 2 at b's row and a's
    column. An odd message is padded with X, which decode keeps.
    """

    id = "four-square"
    name = "Four-Square Cipher"
    description = "Digraph cipher using four 5x5 squares"
    emoji = "🪟"
    category = "cipher"
    tags = ("cipher", "digraph", "grid")
    lossy = True
    param = DualKeywordParam(default=("EXAMPLE", "KEYWORD"))

    @staticmethod
    def _prepare(text: str) -> str:
        letters = "".join(square_letters(text))
        return letters + "X" if len(letters) % 2 else letters

    def _encode(self, text: str, keys: Tuple[str, str]) -> str:
        plain, first, second = Square("", 5), Square(keys[0], 5), Square(keys[1], 5)
        letters = self._prepare(text)
        out: List[str] = []
        for i in range(0, len(letters), 2):
            r1, c1 = plain.position(letters[i])
            r2, c2 = plain.position(letters[i + 1])
            out.append(first.at(r1, c2) + second.at(r2, c1))
        return "".join(out)

    def _decode(self, text: str, keys: Tuple[str, str]) -> str:
        plain, first, second = Square("", 5), Square(keys[0], 5), Square(keys[1], 5)
        letters = self._prepare(text)
        out: List[str] = []
        for i in range(0, len(letters), 2):
            r1, c2 = first.position(letters[i])
            r2, c1 = second.position(letters[i + 1])
            out.append(plain.at(r1, c1) + plain.at(r2, c2))
        return "".join(out)

    def normalize(self, text: str, param: Any = None) -> str:
        return self._prepare(text)


# ==========================================
#  Polybius square
# ==========================================


@register_encoder
class PolybiusCipher(EncoderStrategy):
    """
    Each character becomes its 1-based row and column digits.

    Tokens are joined with single spaces; a space becomes ``/`` and any
    character outside the square is emitted as its own token.
    """

    id = "polybius"
    name = "Polybius Square"
    description = "Letters as grid coordinates"
    emoji = "🔲"
    category = "cipher"
    tags = ("cipher", "grid", "numeric", "greek")
    lossy = True
    param = ChoiceParam(default=5, choices=(5, 6))

    def _encode(self, text: str, size: int) -> str:
        square = Square("", size)
        tokens: List[str] = []
        for char in text:
            if char in square:
                row, col = square.position(char)
                tokens.append(f"{row + 1}{col + 1}")
            elif char == " ":
                tokens.append("/")
            else:
                tokens.append(char)
        return " ".join(tokens)

    def _decode(self, text: str, size: int) -> str:
        square = Square("", size)
        valid = DIGITS[1:size + 1]
        out: List[str] = []
        for token in text.split(" "):
            if len(token) == 2 and token[0] in valid and token[1] in valid:
                out.append(square.at(int(token[0]) - 1, int(token[1]) - 1))
            elif token == "/":
                out.append(" ")
            else:
                out.append(token)
        return "".join(out)

    def normalize(self, text: str, param: Any = None) -> str:
        square = Square("", self.coerce_param(param))
        out: List[str] = []
        for char in text:
            if char in square:
                out.append(square.fold(char))
            elif char in (" ", "/"):
                out.append(" ")
            else:
                out.append(char)
        return "".join(out)


# ==========================================
#  ADFGVX
# ==========================================


@register_encoder
class AdfgvxCipher(EncoderStrategy):
    """
    WWI fractionating cipher.

    ``key1`` keys a 6x6 square of letters and digits whose rows and columns
    are labelled A D F G V X. The label stream is then written under
    ``key2`` and read off column by column (irregular columns, no padding),
    columns separated by spaces.
    """

    id = "adfgvx"
    name = "ADFGVX Cipher"
    description = "6x6 substitution followed by columnar transposition"
    emoji = "📡"
    category = "cipher"
    tags = ("cipher", "military", "wwi", "fractionating")
    lossy = True
    param = DualKeywordParam(default=("PRIVACY", "GERMAN"))

    LABELS = "ADFGVX"

    def _encode(self, text: str, keys: Tuple[str, str]) -> str:
        square = Square(keys[0], 6)
        labels: List[str] = []
        for char in text:
            if char in square:
                row, col = square.position(char)
                labels.append(self.LABELS[row] + self.LABELS[col])
        stream = "".join(labels)
        if not stream:
            return ""
        return " ".join(columnar_columns(stream, column_order(keys[1])))

    def _decode(self, text: str, keys: Tuple[str, str]) -> str:
        square = Square(keys[0], 6)
        stream = columnar_decrypt("".join(text.split()).upper(), column_order(keys[1]))
        out: List[str] = []
        for i in range(0, len(stream), 2):
            pair = stream[i:i + 2]
            if len(pair) == 2 and pair[0] in self.LABELS and pair[1] in self.LABELS:
                out.append(square.at(self.LABELS.index(pair[0]), self.LABELS.index(pair[1])))
            else:
                out.append(UNRESOLVED)
        return "".join(out)

    def normalize(self, text: str, param: Any = None) -> str:
        return "".join(letter_of(c) or c for c in text if letter_of(c) or c in DIGITS)


# ==========================================
#  Nihilist
# ==========================================


@register_encoder
class NihilistCipher(EncoderStrategy):
    """
    Polybius coordinates (11..55) of each letter plus the coordinates of a
    repeating keyword. Output is space-separated numbers, ``/`` for a space.
    """

    id = "nihilist"
    name = "Nihilist Cipher"
    description = "Polybius coordinates added to a repeating key"
    emoji = "🧨"
    category = "cipher"
    tags = ("cipher", "grid", "numeric", "russian")
    lossy = True
    param = KeywordParam(default="ZEBRA")

    @staticmethod
    def _coord(square: Square, letter: str) -> int:
        row, col = square.position(letter)
        return (row + 1) * 10 + col + 1

    def _setup(self, keyword: str) -> Tuple[Square, List[int]]:
        square = Square(keyword, 5)
        return square, [self._coord(square, c) for c in square_letters(keyword)]

    def _encode(self, text: str, keyword: str) -> str:
        square, key = self._setup(keyword)
        tokens: List[str] = []
        index = 0
        for char in text:
            letter = letter_of(char)
            if letter:
                tokens.append(str(self._coord(square, letter) + key[index % len(key)]))
                index += 1
            elif char == " ":
                tokens.append("/")
        return " ".join(tokens)

    def _decode(self, text: str, keyword: str) -> str:
        square, key = self._setup(keyword)
        out: List[str] = []
        index = 0
        for token in text.split():
            if token == "/":
                out.append(" ")
                continue
            if not token.isdigit():
                out.append(UNRESOLVED)
                continue
            row, col = divmod(int(token) - key[index % len(key)], 10)
            index += 1
            if 1 <= row <= 5 and 1 <= col <= 5:
                out.append(square.at(row - 1, col - 1))
            else:
                out.append(UNRESOLVED)
        return "".join(out)

    def normalize(self, text: str, param: Any = None) -> str:
        out: List[str] = []
        for char in text:
            letter = letter_of(char)
            if letter:
                out.append("I" if letter == "J" else letter)
            elif char == " ":
                out.append(" ")
        return "".join(out)


# ==========================================
#  Tap code
# ==========================================

TAP_GRID = "ABCDEFGHIJLMNOPQRSTUVWXYZ"
TAP_STYLES = {
    1: (".", " "),
    2: ("1", "-"),
    3: ("*", " "),
    4: ("👊", " "),
}


@register_encoder
class TapCodeCipher(EncoderStrategy):
    """Prison tap code: taps for the row, separator, taps for the column (K shares C)."""

    id = "tap-code"
    name = "Tap Code"
    description = "Knock code on a 5x5 grid"
    emoji = "👊"
    category = "cipher"
    tags = ("cipher", "grid", "prison", "communication")
    lossy = True
    param = ChoiceParam(default=1, choices=(1, 2, 3, 4))

    GAP = "  "

    @staticmethod
    def _fold(char: str) -> Optional[str]:
        letter = letter_of(char)
        if not letter:
            return None
        return "C" if letter == "K" else letter

    def _encode(self, text: str, style: int) -> str:
        tap, sep = TAP_STYLES[style]
        tokens: List[str] = []
        for char in text:
            letter = self._fold(char)
            if letter:
                row, col = divmod(TAP_GRID.index(letter), 5)
                tokens.append(tap * (row + 1) + sep + tap * (col + 1))
            elif char == " ":
                tokens.append("/")
            else:
                tokens.append(char)
        return self.GAP.join(tokens)

    @staticmethod
    def _count(part: str, tap: str) -> int:
        count = len(part) // len(tap)
        return count if 1 <= count <= 5 and part == tap * count else 0

    def _decode(self, text: str, style: int) -> str:
        tap, sep = TAP_STYLES[style]
        out: List[str] = []
        for token in text.split(self.GAP):
            if token == "/":
                out.append(" ")
                continue
            parts = token.split(sep)
            if len(parts) == 2:
                row, col = self._count(parts[0], tap), self._count(parts[1], tap)
                if row and col:
                    out.append(TAP_GRID[(row - 1) * 5 + col - 1])
                    continue
            out.append(token)
        return "".join(out)

    def normalize(self, text: str, param: Any = None) -> str:
        out: List[str] = []
        for char in text:
            letter = self._fold(char)
            if letter:
                out.append(letter)
            elif char in (" ", "/"):
                out.append(" ")
            else:
                out.append(char)
        return "".join(out)
