import argparse
import sys
from typing import List, Optional

from . import __version__
from .base import is_sentinel
from .braille import DEFAULT_ECC_SYMBOLS
from .compose import ChainEncoder, ShuffleEncoder
from .console import log_info, log_warn, set_verbose
from .custom import InvalidEncoderData, import_encoder, token_encoder_id
from .registry import EncoderRegistry, build_default_registry
from .settings import ParameterBag
from .watermark import WatermarkEngine

DEFAULT_METHOD = "braille-ecc"
CHAIN_LABEL = "chain:"

# ==========================================
#  CLI LOGIC
# ==========================================


def list_encoders(registry: EncoderRegistry):
    """Print all available encoders."""
    print("\nAvailable Encoders:")
    print("=" * 72)
    for encoder in registry:
        direction = "⇄" if encoder.reversible else "→"
        settings = "⚙" if encoder.has_settings else " "
        print(f"  {encoder.id:<24} {direction} {settings}  {encoder.description}")
    print("=" * 72)
    print(f"\nTotal: {len(registry)} encoder(s) registered.")


def _split_ids(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cipher-suite",
        description=f"Cipher Suite v{__version__} (ciphers, encodings, chains, shuffle, custom maps)",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument("-m", "--method", default=None,
                        help=f"Encoder id (default: {DEFAULT_METHOD}). Auto-detected on decode.\n"
                             "Use --list to see every id.")

    # Main action group
    action_group = parser.add_mutually_exclusive_group(required=True)
    action_group.add_argument("-e", "--encode", action="store_true", help="Encode mode")
    action_group.add_argument("-d", "--decode", action="store_true", help="Decode mode")
    action_group.add_argument("-l", "--list", action="store_true", help="List all available encoders")

    # Parameters
    parser.add_argument("-p", "--param", metavar="VALUE",
                        help="Parameter for the selected encoder (shift, keyword, 'key1,key2', ...)")
    parser.add_argument("--params", metavar="FILE",
                        help="JSON parameter bag: {\"vigenere\": \"LEMON\", \"adfgvx.key1\": \"...\"}")

    # Composition
    compose_group = parser.add_mutually_exclusive_group()
    compose_group.add_argument("--chain", metavar="IDS",
                               help="Comma-separated encoder ids applied in order")
    compose_group.add_argument("--shuffle", metavar="IDS", nargs="?", const="",
                               help="Encode each character with a random encoder from IDS")
    parser.add_argument("--caesar-shift", type=int, default=13, metavar="N",
                        help="Shift handed to Caesar members of a chain (default: 13)")

    # Custom encoders and plugins
    parser.add_argument("--custom", action="append", default=[], metavar="TOKEN",
                        help="Add a custom encoder from a share token (repeatable)")
    parser.add_argument("--plugin-dir", type=str, metavar="PATH",
                        help="Extra plugin directory (must contain manifest.json)")

    # ECC options
    parser.add_argument("--ecc-symbols", type=int, default=DEFAULT_ECC_SYMBOLS, metavar="N",
                        help=f"Reed-Solomon ECC symbols for braille-ecc (default: {DEFAULT_ECC_SYMBOLS}).")
    parser.add_argument("--no-ecc", action="store_true",
                        help="Disable error correction (equivalent to --ecc-symbols 0)")

    parser.add_argument("--no-watermark", action="store_true",
                        help="Do not prefix encoded output with the invisible encoder watermark")

    # Verbose output
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose output (info and warning messages)")

    # I/O options
    io_group = parser.add_mutually_exclusive_group()
    io_group.add_argument("-t", "--text", help="Direct text input")
    io_group.add_argument("-i", "--input", help="Input file path")

    parser.add_argument("-o", "--output", help="Output file path")
    return parser


def read_input(args) -> str:
    if args.text is not None:
        return args.text
    if args.input:
        try:
            with open(args.input, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            sys.exit(f"Error: File '{args.input}' not found.")
    if not sys.stdin.isatty():
        return sys.stdin.read()
    print("[CIPHER] Paste input below. Ctrl+D (Unix) or Ctrl+Z (Win) to end:")
    try:
        return sys.stdin.read()
    except KeyboardInterrupt:
        sys.exit(0)


def _method_param(args, method: str, bag: ParameterBag):
    if args.param is not None:
        return args.param
    if method == "braille-ecc":
        return 0 if args.no_ecc else args.ecc_symbols
    if args.no_ecc or args.ecc_symbols != DEFAULT_ECC_SYMBOLS:
        log_warn(f"Encoder '{method}' does not support ECC. Ignoring ECC options.")
    return bag.for_encoder(method)


def run_chain(registry: EncoderRegistry, ids: List[str], text: str, args, bag: ParameterBag, decode: bool) -> str:
    chain = ChainEncoder(registry)
    if decode:
        outcome = chain.decode(text, ids, caesar_shift=args.caesar_shift, params=bag)
    else:
        outcome = chain.encode(text, ids, caesar_shift=args.caesar_shift, params=bag)
    for step in outcome.steps:
        log_info(f"{step.encoder_id}: {step.result!r}")
    if not outcome.ok:
        failed = ids[outcome.failed_step]
        sys.exit(f"Chain {'decode' if decode else 'encode'} stopped at step {outcome.failed_step} ({failed}). "
                 f"Partial result: {outcome.final_result}")
    return outcome.final_result


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    custom = []
    for token in args.custom:
        try:
            custom.append(import_encoder(token, token_encoder_id(token)))
        except InvalidEncoderData as e:
            sys.exit(f"Error: {e}")

    registry = build_default_registry(custom=custom, plugin_dir=args.plugin_dir)
    for spec in custom:
        log_info(f"Custom encoder '{spec.name}' available as '{spec.id}'")

    # Handle --list action
    if args.list:
        list_encoders(registry)
        sys.exit(0)

    bag = ParameterBag()
    if args.params:
        try:
            bag = ParameterBag.load(args.params)
        except (OSError, ValueError) as e:
            sys.exit(f"Error: {e}")

    # 1. READ INPUT
    source_text = read_input(args)

    # 2. SELECT ENCODER(S)
    chain_ids: Optional[List[str]] = _split_ids(args.chain) if args.chain else None
    method = args.method or DEFAULT_METHOD
    param = None
    if args.shuffle is not None:
        method = "shuffle"
        param = _split_ids(args.shuffle) or None

    if args.decode:
        detected, clean_text = WatermarkEngine.detect(source_text)
        if detected and detected.startswith(CHAIN_LABEL):
            chain_ids = _split_ids(detected[len(CHAIN_LABEL):])
            source_text = clean_text
        elif detected and detected in registry:
            if args.method and args.method != detected:
                log_warn(f"User specified '{args.method}' but invisible watermark says '{detected}'. Using detected method.")
            method = detected
            source_text = clean_text
        elif detected and detected.startswith(ShuffleEncoder.PREAMBLE):
            # Bare shuffle output: the preamble is part of the payload
            method = ShuffleEncoder.id
        elif detected:
            log_warn(f"Watermark names unknown encoder '{detected}'. Falling back to '{method}'.")

    # 3. TRANSFORM
    try:
        if chain_ids:
            result = run_chain(registry, chain_ids, source_text, args, bag, args.decode)
            label = CHAIN_LABEL + ",".join(chain_ids)
        else:
            encoder = registry.get(method)
            if param is None:
                param = _method_param(args, method, bag)
            if args.encode:
                result = encoder.encode(source_text, param)
            else:
                result = encoder.decode(source_text, param)
            if is_sentinel(result):
                sys.exit(f"{'Decode' if args.decode else 'Encode'} Error ({method}): {result}")
            label = method
    except KeyError as e:
        sys.exit(f"Error: {e}")

    if args.encode and not args.no_watermark:
        result = WatermarkEngine.inject(result, label)

    # 4. WRITE OUTPUT
    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(result)
                if args.decode:
                    f.write("\n")
        except OSError as e:
            sys.exit(f"Error writing output: {e}")
    else:
        print(result)


if __name__ == "__main__":
    main()
