"""
Alphabet and grid helpers shared by the keyed ciphers.

- keyed_alphabet: keyword letters first, then the rest of the alphabet
- Square: 5x5 (I/J merged) or 6x6 (letters + digits) Polybius grid
- column_order: read order of columns for keyword transpositions
"""

from typing import Dict, List, Tuple

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DIGITS = "0123456789"
LETTERS_NO_J = "ABCDEFGHIKLMNOPQRSTUVWXYZ"


def keyed_alphabet(keyword: str, alphabet: str = LETTERS) -> str:
    """
    Permutation of ``alphabet`` starting with the keyword's unique symbols.

    The keyword is uppercased and anything outside ``alphabet`` is stripped;
    remaining symbols follow in natural order.
    """
    seen: Dict[str, None] = {}
    for char in keyword.upper():
        if char in alphabet and char not in seen:
            seen[char] = None
    for char in alphabet:
        if char not in seen:
            seen[char] = None
    return "".join(seen)


def column_order(keyword: str) -> List[int]:
    """Column indices sorted by (letter, original position)."""
    return sorted(range(len(keyword)), key=lambda i: (keyword[i], i))


class Square:
    """
    Polybius-style square laid out row-major from a keyed alphabet.

    size 5: 25 letters, J folded into I.
    size 6: 26 keyed letters followed by the digits 0-9.
    """

    def __init__(self, keyword: str = "", size: int = 5):
        if size not in (5, 6):
            raise ValueError(f"Unsupported square size {size}")
        self.size = size
        if size == 5:
            self.cells = keyed_alphabet(keyword.upper().replace("J", "I"), LETTERS_NO_J)
        else:
            self.cells = keyed_alphabet(keyword, LETTERS) + DIGITS
        self._positions: Dict[str, Tuple[int, int]] = {
            char: divmod(idx, size) for idx, char in enumerate(self.cells)
        }

    def fold(self, char: str) -> str:
        """Map a character onto the square's symbol set (uppercase, J->I on 5x5)."""
        char = char.upper()
        if self.size == 5 and char == "J":
            return "I"
        return char

    def __contains__(self, char: str) -> bool:
        return self.fold(char) in self._positions

    def position(self, char: str) -> Tuple[int, int]:
        return self._positions[self.fold(char)]

    def at(self, row: int, col: int) -> str:
        return self.cells[(row % self.size) * self.size + (col % self.size)]

    def rows(self) -> List[str]:
        return [self.cells[r * self.size:(r + 1) * self.size] for r in range(self.size)]


def letter_of(char: str) -> str:
    """Uppercase A-Z letter ``char`` folds to, or an empty string."""
    upper = char.upper()
    return upper if len(upper) == 1 and upper in LETTERS else ""
