from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from .console import log_warn
from .params import Param

# Sentinel results. The engine never raises on well-typed input; callers
# compare against these instead.
NOT_REVERSIBLE = "[Not reversible]"
ENCODE_FAILED = "[Encode failed]"
DECODE_FAILED = "[Decode failed]"
UNRESOLVED = "�"

SENTINELS = (NOT_REVERSIBLE, ENCODE_FAILED, DECODE_FAILED)

# ==========================================
#  FRAMEWORK: Abstract Base Class & Catalog
# ==========================================


class EncoderStrategy(ABC):
    """
    Abstract base class that all encoders must implement.

    Subclasses declare their identity as class attributes and implement
    ``_encode`` (and ``_decode`` when reversible). The public ``encode`` /
    ``decode`` methods coerce the parameter through the declared ``param``
    variant and turn any algorithm failure into a sentinel string.
    """

    category = "misc"
    emoji = ""
    tags: Tuple[str, ...] = ()
    reversible = True
    special = False
    lossy = False
    custom = False
    param: Optional[Param] = None

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identifier used for lookup, persistence and chaining."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Short description for help text."""
        pass

    @property
    def has_settings(self) -> bool:
        return self.param is not None

    def coerce_param(self, param: Any = None) -> Any:
        if self.param is None:
            return None
        return self.param.coerce(param)

    def encode(self, text: str, param: Any = None) -> str:
        if not text:
            return ""
        try:
            return self._encode(text, self.coerce_param(param))
        except Exception as e:
            log_warn(f"{self.id}: encode failed: {e}")
            return ENCODE_FAILED

    def decode(self, text: str, param: Any = None) -> str:
        if not self.reversible:
            return NOT_REVERSIBLE
        if not text:
            return ""
        try:
            return self._decode(text, self.coerce_param(param))
        except Exception as e:
            log_warn(f"{self.id}: decode failed: {e}")
            return DECODE_FAILED

    def normalize(self, text: str, param: Any = None) -> str:
        """What ``decode(encode(text))`` yields; identity for lossless encoders."""
        return text

    def describe(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "emoji": self.emoji,
            "category": self.category,
            "tags": list(self.tags),
            "reversible": self.reversible,
            "hasSettings": self.has_settings,
            "special": self.special,
        }

    @abstractmethod
    def _encode(self, text: str, param: Any) -> str:
        pass

    def _decode(self, text: str, param: Any) -> str:
        raise NotImplementedError(f"{self.id} has no decoder")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"


# Built-in encoder classes, in catalog order. Filled at import time by the
# decorator below; registries instantiate from it and never mutate it.
BUILTIN_ENCODERS: List[type] = []


def register_encoder(cls):
    """Decorator to add an encoder class to the built-in catalog."""
    BUILTIN_ENCODERS.append(cls)
    return cls


def is_sentinel(result: str) -> bool:
    return result in SENTINELS


class UnknownEncoderError(KeyError):
    """No encoder with the requested id is registered."""

    def __str__(self) -> str:
        return f"Unknown encoder '{self.args[0]}'" if self.args else "Unknown encoder"
