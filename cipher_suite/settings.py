"""
Persisted encoder parameters.

A parameter bag is a flat JSON object keyed by encoder id. Encoders with
two-part keys can also be addressed by sub-path, e.g. ``"adfgvx.key1"``
and ``"adfgvx.key2"``; those are gathered into a dict for the encoder.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


class ParameterBag:

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    @classmethod
    def load(cls, path: str) -> "ParameterBag":
        """Read a bag from a JSON file. Raises ValueError on unreadable content."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Parameter file '{path}' is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Parameter file '{path}' must contain a JSON object")
        return cls(data)

    def save(self, path: str):
        Path(path).write_text(json.dumps(self._values, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any):
        self._values[key] = value

    def for_encoder(self, encoder_id: str) -> Any:
        """The parameter stored for ``encoder_id``, or None if there is none."""
        if encoder_id in self._values:
            return self._values[encoder_id]
        prefix = encoder_id + "."
        parts = {
            key[len(prefix):]: value
            for key, value in self._values.items()
            if key.startswith(prefix)
        }
        return parts or None

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)
