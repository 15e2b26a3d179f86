"""
Cipher Suite: classical ciphers, encodings and custom character maps
behind one encoder contract, with chaining and per-character shuffling.
"""

__version__ = "1.0.0"

from .base import (
    DECODE_FAILED, ENCODE_FAILED, NOT_REVERSIBLE, UNRESOLVED,
    EncoderStrategy, UnknownEncoderError, is_sentinel,
)
from .batch import BatchResult, batch_decode, batch_encode, comparison_matrix, export_results, multi_encode
from .compose import ChainEncoder, ChainResult, ShuffleEncoder
from .custom import (
    CustomEncoder, CustomEncoderLimitError, CustomEncoderManager, CustomEncoderSpec,
    InvalidEncoderData, export_encoder, import_encoder, parse_share_link, share_link,
)
from .registry import EncoderRegistry, build_default_registry, load_plugins
from .settings import ParameterBag
from .watermark import WatermarkEngine
