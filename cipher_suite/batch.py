"""
Batch runs over a registry.

- batch_encode / batch_decode: many texts through one encoder.
- multi_encode: one text through many encoders.
- comparison_matrix: every text against every encoder.

Nothing here raises for a bad id or a failed run. Each result carries a
``success`` flag and, on failure, a sentinel output.
"""

import csv
import io
import json
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .base import EncoderStrategy, UnknownEncoderError, is_sentinel
from .console import log_info, log_warn
from .settings import ParameterBag

ENCODER_NOT_FOUND = "[Encoder not found]"


@dataclass
class BatchResult:
    encoder_id: str
    input: str
    output: str
    success: bool
    encoder_name: Optional[str] = None
    index: int = 0
    error: Optional[str] = None
    elapsed_ms: float = 0.0

    @property
    def expansion_ratio(self) -> float:
        return len(self.output) / max(len(self.input), 1)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["expansion_ratio"] = self.expansion_ratio
        return data


@dataclass
class ComparisonMatrix:
    """Rows follow ``texts``; each row maps encoder id to its result."""

    texts: List[str]
    encoder_ids: List[str]
    rows: List[Dict[str, BatchResult]] = field(default_factory=list)

    def output(self, row: int, encoder_id: str) -> str:
        return self.rows[row][encoder_id].output


def _lookup(registry, encoder_id: str) -> Optional[EncoderStrategy]:
    try:
        return registry.get(encoder_id)
    except UnknownEncoderError:
        log_warn(f"Batch: unknown encoder '{encoder_id}'")
        return None


def _missing(encoder_id: str, text: str, index: int) -> BatchResult:
    return BatchResult(encoder_id, text, ENCODER_NOT_FOUND, False, index=index, error="Encoder not found")


def _run(encoder: EncoderStrategy, text: str, param: Any, index: int, decode: bool) -> BatchResult:
    start = time.perf_counter()
    output = encoder.decode(text, param) if decode else encoder.encode(text, param)
    elapsed = (time.perf_counter() - start) * 1000
    failed = is_sentinel(output)
    return BatchResult(
        encoder_id=encoder.id,
        input=text,
        output=output,
        success=not failed,
        encoder_name=encoder.name,
        index=index,
        error=output if failed else None,
        elapsed_ms=elapsed,
    )


def _many_texts(registry, texts: Sequence[str], encoder_id: str, param: Any, decode: bool) -> List[BatchResult]:
    encoder = _lookup(registry, encoder_id)
    if encoder is None:
        return [_missing(encoder_id, text, i) for i, text in enumerate(texts)]
    results = [_run(encoder, text, param, i, decode) for i, text in enumerate(texts)]
    failures = sum(1 for r in results if not r.success)
    log_info(f"Batch {'decode' if decode else 'encode'} with {encoder_id}: {len(results)} texts, {failures} failed")
    return results


def batch_encode(registry, texts: Sequence[str], encoder_id: str, param: Any = None) -> List[BatchResult]:
    """Encode every text with one encoder."""
    return _many_texts(registry, texts, encoder_id, param, decode=False)


def batch_decode(registry, texts: Sequence[str], encoder_id: str, param: Any = None) -> List[BatchResult]:
    """Decode every text with one encoder. One-way encoders fail with the not-reversible sentinel."""
    return _many_texts(registry, texts, encoder_id, param, decode=True)


def multi_encode(registry, text: str, encoder_ids: Sequence[str], params: Any = None) -> List[BatchResult]:
    """
    Encode one text with each encoder in turn.

    ``params`` is a ParameterBag or a plain dict keyed the same way; an
    encoder without an entry runs with its default.
    """
    bag = params if params is None or isinstance(params, ParameterBag) else ParameterBag(params)
    results: List[BatchResult] = []
    for index, encoder_id in enumerate(encoder_ids):
        encoder = _lookup(registry, encoder_id)
        if encoder is None:
            results.append(_missing(encoder_id, text, index))
            continue
        param = bag.for_encoder(encoder_id) if bag is not None else None
        results.append(_run(encoder, text, param, index, decode=False))
    return results


def comparison_matrix(registry, texts: Sequence[str], encoder_ids: Sequence[str]) -> ComparisonMatrix:
    """Encode every text with every known encoder, using defaults. Unknown ids are left out."""
    encoders = [e for e in (_lookup(registry, i) for i in encoder_ids) if e is not None]
    matrix = ComparisonMatrix(texts=list(texts), encoder_ids=[e.id for e in encoders])
    for index, text in enumerate(texts):
        matrix.rows.append({e.id: _run(e, text, None, index, decode=False) for e in encoders})
    return matrix


# ==========================================
#  Export
# ==========================================

CSV_HEADER = ["index", "input", "output", "encoder", "success", "elapsed_ms"]


def export_results(results: Sequence[BatchResult], fmt: str = "json") -> str:
    """Render results as ``json``, ``csv`` or ``text``."""
    if fmt == "csv":
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for r in results:
            writer.writerow([r.index, r.input, r.output, r.encoder_name or r.encoder_id,
                             "yes" if r.success else "no", f"{r.elapsed_ms:.2f}"])
        return buffer.getvalue()
    if fmt == "text":
        return "\n".join(
            f"[{r.encoder_name or r.encoder_id}]\nInput: {r.input}\nOutput: {r.output}\n" for r in results
        )
    if fmt != "json":
        raise ValueError(f"Unknown export format '{fmt}'")
    return json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False)
