"""
Typed parameter variants.

Each encoder family declares one of these as its ``param`` class attribute.
The variant owns the default value and turns whatever a caller (CLI flag,
parameter bag JSON, chain link) hands in into the normalized value the
algorithm expects. Coercion never raises: unusable input falls back to the
default with a warning.
"""

import json
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .console import log_warn

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DIGITS = "0123456789"


class Param:
    """Base parameter variant."""

    kind = "value"

    def __init__(self, default: Any):
        self.default = default

    def coerce(self, value: Any) -> Any:
        if value is None:
            return self.default
        return value

    def _fallback(self, value: Any, reason: str) -> Any:
        log_warn(f"{self.kind} parameter {value!r} rejected ({reason}); using default {self.default!r}")
        return self.default


class ShiftParam(Param):
    """Integer shift reduced modulo the alphabet size."""

    kind = "shift"

    def __init__(self, default: int = 13, modulus: int = 26):
        super().__init__(default)
        self.modulus = modulus

    def coerce(self, value: Any) -> int:
        if value is None:
            return self.default % self.modulus
        try:
            return int(value) % self.modulus
        except (TypeError, ValueError, OverflowError):
            return self._fallback(value, "not an integer") % self.modulus


class IntParam(Param):
    """Integer clamped into ``[minimum, maximum]``."""

    kind = "int"

    def __init__(self, default: int, minimum: int, maximum: int):
        super().__init__(default)
        self.minimum = minimum
        self.maximum = maximum

    def coerce(self, value: Any) -> int:
        if value is None:
            return self.default
        try:
            number = int(value)
        except (TypeError, ValueError, OverflowError):
            return self._fallback(value, "not an integer")
        clamped = max(self.minimum, min(self.maximum, number))
        if clamped != number:
            log_warn(f"{self.kind} parameter {number} clamped to {clamped}")
        return clamped


class KeywordParam(Param):
    """
    Keyword restricted to a character set.

    Letters are uppercased; characters outside ``charset`` are stripped. An
    empty result means the keyword was unusable and the default is used.
    """

    kind = "keyword"

    def __init__(self, default: str, charset: str = LETTERS, max_length: Optional[int] = None):
        super().__init__(default)
        self.charset = charset
        self.max_length = max_length

    def clean(self, value: Any) -> str:
        cleaned = "".join(c for c in str(value).upper() if c in self.charset)
        if self.max_length is not None:
            cleaned = cleaned[:self.max_length]
        return cleaned

    def coerce(self, value: Any) -> str:
        if value is None:
            return self.clean(self.default)
        cleaned = self.clean(value)
        if not cleaned:
            return self.clean(self._fallback(value, "no usable characters"))
        return cleaned


class TextParam(Param):
    """Free text (running key, reference book). Only emptiness is rejected."""

    kind = "text"

    def coerce(self, value: Any) -> str:
        if value is None:
            return self.default
        text = str(value)
        if not text.strip():
            return self._fallback(value, "empty")
        return text


class ChoiceParam(Param):
    """One value out of a fixed set."""

    kind = "choice"

    def __init__(self, default: Any, choices: Sequence[Any]):
        super().__init__(default)
        self.choices = tuple(choices)

    def coerce(self, value: Any) -> Any:
        if value is None:
            return self.default
        for choice in self.choices:
            if value == choice or str(value) == str(choice):
                return choice
        return self._fallback(value, f"expected one of {self.choices}")


def _split_pair(value: Any) -> Optional[Tuple[Any, Any]]:
    """Accept ``{"key1":..,"key2":..}``, ``(a, b)``, ``[a, b]`` or ``"a,b"``."""
    if isinstance(value, dict):
        if "key1" in value or "key2" in value:
            return value.get("key1"), value.get("key2")
        if "a" in value or "b" in value:
            return value.get("a"), value.get("b")
        return None
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return value[0], value[1]
    if isinstance(value, str) and "," in value:
        first, second = value.split(",", 1)
        return first.strip(), second.strip()
    return None


class DualKeywordParam(Param):
    """Two independent keywords, addressed as ``key1`` / ``key2`` in parameter bags."""

    kind = "dual-keyword"

    def __init__(self, default: Tuple[str, str], charset: str = LETTERS):
        super().__init__(tuple(default))
        self.first = KeywordParam(default[0], charset)
        self.second = KeywordParam(default[1], charset)

    def coerce(self, value: Any) -> Tuple[str, str]:
        if value is None:
            return self.first.coerce(None), self.second.coerce(None)
        pair = _split_pair(value)
        if pair is None:
            self._fallback(value, "expected two keywords")
            return self.first.coerce(None), self.second.coerce(None)
        return self.first.coerce(pair[0]), self.second.coerce(pair[1])


class AffineParam(Param):
    """
    Affine key ``(a, b)``.

    ``a`` must be coprime with 26. A non-invertible ``a`` is replaced by the
    next valid multiplier above it (wrapping past 25), so ``a = 13`` becomes
    ``15``.
    """

    kind = "affine"
    VALID_A = (1, 3, 5, 7, 9, 11, 15, 17, 19, 21, 23, 25)

    def __init__(self, default: Tuple[int, int] = (5, 8)):
        super().__init__(tuple(default))

    def normalize_a(self, a: int) -> int:
        a %= 26
        if a in self.VALID_A:
            return a
        for step in range(1, 27):
            candidate = (a + step) % 26
            if candidate in self.VALID_A:
                log_warn(f"affine multiplier {a} is not coprime with 26; using {candidate}")
                return candidate
        return self.default[0]

    def coerce(self, value: Any) -> Tuple[int, int]:
        if value is None:
            return self.default
        pair = _split_pair(value)
        if pair is None:
            return self._fallback(value, "expected (a, b)")
        try:
            a, b = int(pair[0]), int(pair[1])
        except (TypeError, ValueError, OverflowError):
            return self._fallback(value, "a and b must be integers")
        return self.normalize_a(a), b % 26


class IntListParam(Param):
    """A non-empty list of integers (multi-shift keys)."""

    kind = "int-list"

    def __init__(self, default: Iterable[int], modulus: int = 26):
        super().__init__(list(default))
        self.modulus = modulus

    def coerce(self, value: Any) -> List[int]:
        if value is None:
            return [v % self.modulus for v in self.default]
        items = value
        if isinstance(value, str):
            items = [part for part in value.replace(",", " ").split() if part]
        try:
            numbers = [int(v) % self.modulus for v in items]
        except (TypeError, ValueError, OverflowError):
            numbers = []
        if not numbers:
            return [v % self.modulus for v in self._fallback(value, "expected integers")]
        return numbers


class IdListParam(Param):
    """A non-empty list of encoder ids (shuffle palette)."""

    kind = "id-list"

    def __init__(self, default: Iterable[str]):
        super().__init__(list(default))

    def coerce(self, value: Any) -> List[str]:
        if value is None:
            return list(self.default)
        items = value
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                try:
                    items = json.loads(stripped)
                except json.JSONDecodeError:
                    items = []
            else:
                items = [part.strip() for part in stripped.split(",")]
        ids = [str(v) for v in items if str(v).strip()] if isinstance(items, (list, tuple)) else []
        if not ids:
            return list(self._fallback(value, "expected encoder ids"))
        return ids
