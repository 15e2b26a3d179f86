"""
Composition of encoders.

- ChainEncoder: run several encoders one after another (and back).
- ShuffleEncoder: encode every character with a randomly picked member of
  a palette, framing each unit with an invisible header so the output
  decodes on its own.
"""

import random
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from .base import (
    ENCODE_FAILED, UNRESOLVED, EncoderStrategy, UnknownEncoderError,
    is_sentinel, register_encoder,
)
from .console import log_info, log_warn
from .params import IdListParam
from .settings import ParameterBag
from .watermark import WatermarkEngine

# Members that take the chain-wide Caesar shift
CAESAR_FAMILY = ("caesar", "rot-n")

# ==========================================
#  Chain
# ==========================================


@dataclass
class ChainStep:
    encoder_id: str
    encoder_name: str
    result: str
    error: bool = False


@dataclass
class ChainResult:
    final_result: str
    steps: List[ChainStep] = field(default_factory=list)
    failed_step: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.failed_step is None


class ChainEncoder:
    """
    Applies encoders in sequence.

    A link is an encoder id, an encoder instance, an ``(id, param)`` pair or
    a ``{"id": ..., "param": ...}`` dict. The parameter for each link is, in
    order: the link's own parameter, ``caesar_shift`` for Caesar-family
    members, the parameter bag entry, the encoder default.
    """

    def __init__(self, registry):
        self.registry = registry

    def _link(self, link: Any) -> Tuple[EncoderStrategy, Any]:
        param = None
        if isinstance(link, dict):
            link, param = link.get("id"), link.get("param")
        elif isinstance(link, (tuple, list)):
            link, param = link[0], link[1] if len(link) > 1 else None
        encoder = link if isinstance(link, EncoderStrategy) else self.registry.get(link)
        return encoder, param

    def resolve(self, links: Sequence[Any]) -> List[Tuple[EncoderStrategy, Any]]:
        """Turn links into (encoder, explicit param) pairs. Unknown ids raise UnknownEncoderError."""
        return [self._link(link) for link in links]

    @staticmethod
    def _param(encoder: EncoderStrategy, explicit: Any, caesar_shift: int, params: Optional[ParameterBag]) -> Any:
        if explicit is not None:
            return explicit
        if encoder.id in CAESAR_FAMILY:
            return caesar_shift
        if params is not None:
            return params.for_encoder(encoder.id)
        return None

    @staticmethod
    def _bag(params: Any) -> Optional[ParameterBag]:
        if params is None or isinstance(params, ParameterBag):
            return params
        return ParameterBag(params)

    def encode(self, text: str, links: Sequence[Any], caesar_shift: int = 13, params: Any = None) -> ChainResult:
        bag = self._bag(params)
        result = ChainResult(final_result=text)
        current = text
        for index, (encoder, explicit) in enumerate(self.resolve(links)):
            output = encoder.encode(current, self._param(encoder, explicit, caesar_shift, bag))
            if output == ENCODE_FAILED:
                result.steps.append(ChainStep(encoder.id, encoder.name, output, error=True))
                result.failed_step = index
                log_warn(f"Chain stopped at step {index} ({encoder.id}): encode failed")
                break
            current = output
            result.steps.append(ChainStep(encoder.id, encoder.name, current))
        result.final_result = current
        return result

    def decode(self, text: str, links: Sequence[Any], caesar_shift: int = 13, params: Any = None) -> ChainResult:
        """
        Undo a chain, last link first.

        Stops at the first member that is one-way or fails to decode;
        ``failed_step`` is that member's index in ``links`` and
        ``final_result`` holds the text decoded so far.
        """
        bag = self._bag(params)
        resolved = self.resolve(links)
        result = ChainResult(final_result=text)
        current = text
        for index in range(len(resolved) - 1, -1, -1):
            encoder, explicit = resolved[index]
            if not encoder.reversible:
                result.steps.append(ChainStep(encoder.id, encoder.name, f"[{encoder.name} is not reversible]", error=True))
                result.failed_step = index
                break
            output = encoder.decode(current, self._param(encoder, explicit, caesar_shift, bag))
            if is_sentinel(output):
                result.steps.append(ChainStep(encoder.id, encoder.name, output, error=True))
                result.failed_step = index
                break
            current = output
            result.steps.append(ChainStep(encoder.id, encoder.name, current))
        if result.failed_step is not None:
            log_warn(f"Chain decode stopped at step {result.failed_step}")
        result.final_result = current
        return result

    def is_chain_reversible(self, links: Sequence[Any]) -> bool:
        return all(encoder.reversible for encoder, _ in self.resolve(links))


# ==========================================
#  Shuffle
# ==========================================


@register_encoder
class ShuffleEncoder(EncoderStrategy):
    """
    Per-character random encoding.

    Output layout, every header being a zero-width watermark header::

        [shuffle:<id>,<id>,...] then per character [<index>.<length>]<payload>

    ``index`` points into the palette listed in the preamble; ``-`` marks a
    literal unit carrying the character itself. A character is sent
    literally when the picked member is one-way or does not give the
    character back exactly. Because every payload is length-prefixed, the
    output decodes no matter what the members emit.
    """

    id = "shuffle"
    name = "Shuffle"
    description = "Each character encoded by a random palette member"
    emoji = "🔀"
    category = "special"
    tags = ("special", "random", "mixed")
    special = True
    param = IdListParam(default=["binary", "morse", "caesar", "emoji", "braille"])

    PREAMBLE = "shuffle:"
    LITERAL = "-"

    # Bound by the registry that instantiates this encoder
    registry = None

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def _member(self, encoder_id: str) -> Optional[EncoderStrategy]:
        if self.registry is None or encoder_id == self.id:
            return None
        try:
            return self.registry.get(encoder_id)
        except UnknownEncoderError:
            return None

    def _encode(self, text: str, palette: List[str]) -> str:
        members = []
        for encoder_id in palette:
            encoder = self._member(encoder_id)
            if encoder is None:
                log_warn(f"shuffle: skipping unknown palette member '{encoder_id}'")
            else:
                members.append(encoder)
        if not members:
            raise ValueError("no usable encoders in the shuffle palette")

        parts = [WatermarkEngine.header(self.PREAMBLE + ",".join(m.id for m in members))]
        literals = 0
        for char in text:
            index = self.rng.randrange(len(members))
            encoder = members[index]
            payload = encoder.encode(char)
            if (not encoder.reversible or is_sentinel(payload) or not payload
                    or encoder.decode(payload) != char):
                label, payload = self.LITERAL, char
                literals += 1
            else:
                label = str(index)
            parts.append(WatermarkEngine.header(f"{label}.{len(payload)}"))
            parts.append(payload)
        if literals:
            log_info(f"shuffle: {literals} character(s) sent as literals")
        return "".join(parts)

    def _decode(self, text: str, _palette) -> str:
        # The palette travels in the preamble; the parameter is not needed here
        label, pos = WatermarkEngine.read_header(text)
        if label is None or not label.startswith(self.PREAMBLE):
            raise ValueError("missing shuffle preamble")
        ids = label[len(self.PREAMBLE):].split(",")
        members = [self._member(encoder_id) for encoder_id in ids]

        out: List[str] = []
        while pos < len(text):
            label, end = WatermarkEngine.read_header(text, pos)
            if label is None:
                out.append(UNRESOLVED)
                pos = self._resync(text, pos + 1)
                continue
            unit, length = self._parse_label(label)
            payload = text[end:end + length] if length is not None else ""
            if length is None or len(payload) < length:
                out.append(UNRESOLVED)
                pos = self._resync(text, end)
                continue
            pos = end + length
            out.append(self._decode_unit(unit, payload, members))
        return "".join(out)

    @staticmethod
    def _parse_label(label: str) -> Tuple[str, Optional[int]]:
        unit, sep, length = label.partition(".")
        if not sep or not length.isdigit():
            return unit, None
        return unit, int(length)

    def _decode_unit(self, unit: str, payload: str, members: List[Optional[EncoderStrategy]]) -> str:
        if unit == self.LITERAL:
            return payload
        if not unit.isdigit() or int(unit) >= len(members) or members[int(unit)] is None:
            return UNRESOLVED
        decoded = members[int(unit)].decode(payload)
        return UNRESOLVED if is_sentinel(decoded) else decoded

    @staticmethod
    def _resync(text: str, start: int) -> int:
        """Position of the next header at or after ``start``."""
        while start < len(text):
            label, _ = WatermarkEngine.read_header(text, start)
            if label is not None:
                return start
            start += 1
        return len(text)
