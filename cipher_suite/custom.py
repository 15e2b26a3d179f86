"""
User-defined character-mapping encoders.

A ``CustomEncoderSpec`` is a plain table of input unit -> output unit. The
``MappingCodec`` built from it encodes with a greedy longest-key match and
decodes with a greedy longest-value match against the reverse table.

Known limitation: when two keys map to the same value, or when one value
is a prefix of a concatenation of others, decoding cannot tell them apart.
The reverse table keeps the last key written for a value.
"""

import base64
import binascii
import hashlib
import json
import random
import string
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import parse_qs, quote, urlsplit

from .base import EncoderStrategy
from .console import log_info, log_warn

MAX_CUSTOM_ENCODERS = 20
SHARE_FORMAT_VERSION = "1.0"
DEFAULT_SHARE_URL = "https://cipher-suite.app/custom"


class InvalidEncoderData(ValueError):
    """A custom encoder definition or share token could not be used."""


class CustomEncoderLimitError(ValueError):
    """Saving would exceed the maximum number of custom encoders."""


def new_encoder_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"custom-{int(time.time() * 1000)}-{suffix}"


@dataclass
class CustomEncoderSpec:
    id: str
    name: str
    mapping: Dict[str, str]
    case_sensitive: bool = False
    emoji: str = "🎨"
    description: str = "Custom user-created encoder"
    tags: List[str] = field(default_factory=list)
    created_at: Optional[int] = None

    def validate(self) -> "CustomEncoderSpec":
        if not self.id or not self.name or not self.mapping:
            raise InvalidEncoderData("Invalid encoder: missing required fields")
        if not isinstance(self.mapping, dict):
            raise InvalidEncoderData("Invalid encoder: mapping must be an object")
        for key, value in self.mapping.items():
            if not isinstance(key, str) or not isinstance(value, str) or not key or not value:
                raise InvalidEncoderData(f"Invalid encoder: bad mapping entry {key!r} -> {value!r}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "description": self.description,
            "mapping": dict(self.mapping),
            "caseSensitive": self.case_sensitive,
            "tags": list(self.tags),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomEncoderSpec":
        if not isinstance(data, dict):
            raise InvalidEncoderData("Invalid encoder: expected an object")
        spec = cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            mapping=data.get("mapping") or {},
            case_sensitive=bool(data.get("caseSensitive", False)),
            emoji=data.get("emoji") or "🎨",
            description=data.get("description") or "Custom user-created encoder",
            tags=list(data.get("tags") or []),
            created_at=data.get("createdAt"),
        )
        return spec.validate()


# ==========================================
#  Mapping codec
# ==========================================


class MappingCodec:
    """
    Encode/decode functions for one mapping table.

    Keys may be longer than one character. Encoding then matches the
    longest key at each position, so with ``{"a": "12", "aa": "99"}`` the
    input ``"aa"`` becomes ``"99"`` rather than ``"1212"``. A table of
    single-character keys behaves exactly like a per-character lookup.
    """

    def __init__(self, mapping: Dict[str, str], case_sensitive: bool = False):
        self.case_sensitive = case_sensitive
        self.forward: Dict[str, str] = {}
        self.reverse: Dict[str, str] = {}
        for key, value in mapping.items():
            self.forward[self._fold(key)] = value
        for key, value in self.forward.items():
            self.reverse[self._fold(value)] = key
        self.max_key = max((len(k) for k in self.forward), default=0)
        self.max_value = max((len(v) for v in self.reverse), default=0)

    def _fold(self, unit: str) -> str:
        return unit if self.case_sensitive else unit.lower()

    def _recase(self, source: str, result: str) -> str:
        # Single-character results take the case of the input unit
        if not self.case_sensitive and len(result) == 1 and source[0] != source[0].lower():
            return result.upper()
        return result

    def _translate(self, text: str, table: Dict[str, str], longest: int) -> str:
        out: List[str] = []
        i = 0
        while i < len(text):
            for length in range(min(longest, len(text) - i), 0, -1):
                chunk = text[i:i + length]
                found = table.get(self._fold(chunk))
                if found is not None:
                    out.append(self._recase(chunk, found))
                    i += length
                    break
            else:
                out.append(text[i])
                i += 1
        return "".join(out)

    def encode(self, text: str) -> str:
        return self._translate(text, self.forward, self.max_key)

    def decode(self, text: str) -> str:
        return self._translate(text, self.reverse, self.max_value)


class CustomEncoder(EncoderStrategy):
    """An encoder built from a ``CustomEncoderSpec``. The mapping is copied at build time."""

    category = "custom"
    custom = True

    def __init__(self, spec: CustomEncoderSpec):
        spec.validate()
        self.spec = spec
        self.emoji = spec.emoji
        self.tags = ("custom", *spec.tags)
        self.codec = MappingCodec(dict(spec.mapping), spec.case_sensitive)

    @property
    def id(self) -> str:
        return self.spec.id

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def description(self) -> str:
        return self.spec.description

    def _encode(self, text: str, _param) -> str:
        return self.codec.encode(text)

    def _decode(self, text: str, _param) -> str:
        return self.codec.decode(text)

    def describe(self) -> dict:
        info = super().describe()
        info["custom"] = True
        info["createdAt"] = self.spec.created_at
        return info


# ==========================================
#  Share tokens
# ==========================================


def export_encoder(spec: CustomEncoderSpec) -> str:
    """Shareable token: base64 of the versioned JSON definition."""
    data = {
        "version": SHARE_FORMAT_VERSION,
        "encoder": {
            "name": spec.name,
            "emoji": spec.emoji,
            "description": spec.description,
            "mapping": spec.mapping,
            "caseSensitive": spec.case_sensitive,
            "tags": spec.tags,
        },
    }
    return base64.b64encode(json.dumps(data, ensure_ascii=False).encode('utf-8')).decode('ascii')


def token_encoder_id(token: str) -> str:
    """An id derived from the token itself, the same on every run."""
    digest = hashlib.sha256(token.strip().encode("utf-8")).hexdigest()
    return f"custom-{digest[:16]}"


def import_encoder(token: str, encoder_id: Optional[str] = None) -> CustomEncoderSpec:
    """Parse a share token into a new spec, with ``encoder_id`` or a fresh id."""
    try:
        data = json.loads(base64.b64decode(token.strip(), validate=True).decode('utf-8'))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidEncoderData(f"Invalid encoder data: {e}") from e

    if not isinstance(data, dict) or data.get("version") != SHARE_FORMAT_VERSION:
        version = data.get("version") if isinstance(data, dict) else None
        raise InvalidEncoderData(f"Invalid encoder data: unsupported encoder version {version!r}")

    encoder = dict(data.get("encoder") or {})
    encoder["id"] = encoder_id or new_encoder_id()
    encoder["createdAt"] = int(time.time() * 1000)
    return CustomEncoderSpec.from_dict(encoder)


def share_link(spec: CustomEncoderSpec, base_url: str = DEFAULT_SHARE_URL) -> str:
    return f"{base_url}?encoder={quote(export_encoder(spec), safe='')}"


def parse_share_link(url: str) -> CustomEncoderSpec:
    """Read the ``encoder`` query parameter of a share link."""
    tokens = parse_qs(urlsplit(url).query).get("encoder")
    if not tokens:
        raise InvalidEncoderData("Invalid encoder data: link has no encoder parameter")
    return import_encoder(tokens[0])


# ==========================================
#  Manager
# ==========================================


class CustomEncoderManager:
    """
    Ordered collection of custom encoder specs, optionally persisted to a
    JSON file. Saving an existing id replaces it in place.
    """

    def __init__(self, path: Optional[str] = None, max_encoders: int = MAX_CUSTOM_ENCODERS):
        self.path = Path(path) if path else None
        self.max_encoders = max_encoders
        self._encoders: List[CustomEncoderSpec] = self._load()

    def _load(self) -> List[CustomEncoderSpec]:
        if self.path is None or not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            log_warn(f"Failed to load custom encoders: {e}")
            return []

        specs: List[CustomEncoderSpec] = []
        for entry in raw if isinstance(raw, list) else []:
            try:
                specs.append(CustomEncoderSpec.from_dict(entry))
            except InvalidEncoderData as e:
                log_warn(f"Skipping stored custom encoder: {e}")
        log_info(f"Loaded {len(specs)} custom encoder(s) from {self.path}")
        return specs

    def _persist(self):
        if self.path is None:
            return
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([s.to_dict() for s in self._encoders], f, ensure_ascii=False, indent=2)

    def save(self, spec: CustomEncoderSpec) -> CustomEncoderSpec:
        spec.validate()
        for idx, existing in enumerate(self._encoders):
            if existing.id == spec.id:
                self._encoders[idx] = spec
                self._persist()
                return spec
        if len(self._encoders) >= self.max_encoders:
            raise CustomEncoderLimitError(f"Maximum {self.max_encoders} custom encoders allowed")
        self._encoders.append(spec)
        self._persist()
        return spec

    def get(self, encoder_id: str) -> Optional[CustomEncoderSpec]:
        for spec in self._encoders:
            if spec.id == encoder_id:
                return spec
        return None

    def delete(self, encoder_id: str) -> bool:
        before = len(self._encoders)
        self._encoders = [s for s in self._encoders if s.id != encoder_id]
        self._persist()
        return len(self._encoders) != before

    def import_token(self, token: str) -> CustomEncoderSpec:
        return self.save(import_encoder(token))

    def encoders(self) -> List[CustomEncoder]:
        return [CustomEncoder(spec) for spec in self._encoders]

    def __iter__(self) -> Iterator[CustomEncoderSpec]:
        return iter(list(self._encoders))

    def __len__(self) -> int:
        return len(self._encoders)


# ==========================================
#  Templates
# ==========================================


def _letters(symbols: List[str]) -> Dict[str, str]:
    return dict(zip(string.ascii_lowercase, symbols))


TEMPLATES = [
    CustomEncoderSpec(
        id="template-1337",
        name="1337 Speak Elite",
        emoji="💻",
        description="Enhanced leetspeak with more substitutions",
        mapping={"a": "4", "e": "3", "i": "1", "o": "0", "s": "5",
                 "t": "7", "l": "1", "g": "9", "z": "2", "b": "8"},
        tags=["fun", "gaming"],
    ),
    CustomEncoderSpec(
        id="template-wingdings",
        name="Symbol Speak",
        emoji="🔣",
        description="Replace letters with symbols",
        mapping=_letters(list("★♠♣♦♥✿☀☁⚡♪♫☎✉⌛⭐") + ["🌙"] + list("☄☮☯✝☪✡☸✖☢⚠")),
        tags=["artistic", "symbols"],
    ),
    CustomEncoderSpec(
        id="template-arrows",
        name="Arrow Code",
        emoji="➡️",
        description="Directional arrows for each letter",
        mapping=_letters(list("→←↑↓↗↖↘↙⇒⇐⇑⇓⟹⟸⇨⇦⇧⇩➔➜➞➚➘✈⤴⤵")),
        tags=["artistic", "directional"],
    ),
    CustomEncoderSpec(
        id="template-morse-alt",
        name="Dots & Dashes",
        emoji="⚫",
        description="Alternative visual morse code",
        mapping=_letters([
            "⚫⚪", "⚪⚫⚫⚫", "⚪⚫⚪⚫", "⚪⚫⚫", "⚫", "⚫⚫⚪⚫", "⚪⚪⚫", "⚫⚫⚫⚫",
            "⚫⚫", "⚫⚪⚪⚪", "⚪⚫⚪", "⚫⚪⚫⚫", "⚪⚪", "⚪⚫", "⚪⚪⚪", "⚫⚪⚪⚫",
            "⚪⚪⚫⚪", "⚫⚪⚫", "⚫⚫⚫", "⚪", "⚫⚫⚪", "⚫⚫⚫⚪", "⚫⚪⚪", "⚪⚫⚫⚪",
            "⚪⚫⚪⚪", "⚪⚪⚫⚫",
        ]),
        tags=["classic", "visual"],
    ),
    CustomEncoderSpec(
        id="template-emoji-faces",
        name="Emoji Faces",
        emoji="😀",
        description="Different emoji faces for each letter",
        mapping=_letters([
            "😀", "😃", "😄", "😁", "😆", "😅", "🤣", "😂", "🙂", "🙃", "😉", "😊", "😇",
            "🥰", "😍", "🤩", "😘", "😗", "😚", "😋", "😛", "😜", "🤪", "😝", "🤑", "🤗",
        ]),
        tags=["fun", "emoji"],
    ),
]


def templates() -> List[CustomEncoderSpec]:
    """Fresh copies of the built-in templates."""
    return [
        CustomEncoderSpec.from_dict(t.to_dict()) for t in TEMPLATES
    ]
