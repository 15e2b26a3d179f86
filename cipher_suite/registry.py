import importlib.util
import json
import threading
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

# Importing the encoder modules fills the built-in catalog
from . import braille, compose, encodings, grid, monoalphabetic, polyalphabetic, transposition  # noqa: F401
from .base import BUILTIN_ENCODERS, EncoderStrategy, UnknownEncoderError
from .compose import ShuffleEncoder
from .console import log_info, log_warn
from .custom import CustomEncoder, CustomEncoderSpec, InvalidEncoderData

BUNDLED_PLUGIN_DIR = Path(__file__).parent / "plugins"

# ==========================================
#  REGISTRY: id -> encoder lookup
# ==========================================


class EncoderRegistry:
    """
    Lookup table of encoder instances by id.

    Built-ins are instantiated once per registry from the class catalog.
    Writers (custom encoders, plugins) build a new map under a lock and swap
    it in; readers use whichever map is current and never see a partial
    update.
    """

    def __init__(self, builtins: Optional[Iterable[EncoderStrategy]] = None,
                 custom: Iterable[CustomEncoderSpec] = ()):
        self._lock = threading.Lock()
        if builtins is None:
            builtins = [cls() for cls in BUILTIN_ENCODERS]
        encoders: Dict[str, EncoderStrategy] = {}
        for encoder in builtins:
            encoders[encoder.id] = self._bind(encoder)
        self._encoders = encoders
        for spec in custom:
            self.add_custom(spec)

    def _bind(self, encoder: EncoderStrategy) -> EncoderStrategy:
        if isinstance(encoder, ShuffleEncoder):
            encoder.registry = self
        return encoder

    def _swap(self, update):
        with self._lock:
            encoders = dict(self._encoders)
            update(encoders)
            self._encoders = encoders

    def get(self, encoder_id: str) -> EncoderStrategy:
        try:
            return self._encoders[encoder_id]
        except KeyError:
            raise UnknownEncoderError(encoder_id) from None

    __getitem__ = get

    def __contains__(self, encoder_id: str) -> bool:
        return encoder_id in self._encoders

    def __iter__(self) -> Iterator[EncoderStrategy]:
        return iter(list(self._encoders.values()))

    def __len__(self) -> int:
        return len(self._encoders)

    def ids(self) -> List[str]:
        return list(self._encoders)

    def register(self, encoder: EncoderStrategy) -> EncoderStrategy:
        """Add (or replace) an encoder instance, e.g. from a plugin."""
        if encoder.id in self._encoders:
            log_warn(f"Encoder '{encoder.id}' is being replaced")
        self._bind(encoder)
        self._swap(lambda encoders: encoders.__setitem__(encoder.id, encoder))
        return encoder

    def add_custom(self, spec: CustomEncoderSpec) -> CustomEncoder:
        existing = self._encoders.get(spec.id)
        if existing is not None and not existing.custom:
            raise InvalidEncoderData(f"Custom encoder id '{spec.id}' clashes with a built-in encoder")
        encoder = CustomEncoder(spec)
        self._swap(lambda encoders: encoders.__setitem__(spec.id, encoder))
        return encoder

    def remove_custom(self, encoder_id: str) -> bool:
        encoder = self._encoders.get(encoder_id)
        if encoder is None or not encoder.custom:
            return False
        self._swap(lambda encoders: encoders.pop(encoder_id, None))
        return True


# ==========================================
#  PLUGIN SYSTEM: Dynamic Encoder Loading
# ==========================================


def load_plugins(registry: EncoderRegistry, plugin_dir: Optional[str] = None) -> List[str]:
    """
    Load encoder plugins from a directory with manifest.json.

    Args:
        registry: Registry the plugin encoders are added to
        plugin_dir: Path to plugins directory (default: the bundled plugins)

    Returns:
        List of successfully loaded encoder ids (or file names for entries
        that do not name an encoder)
    """
    plugin_dir = Path(plugin_dir) if plugin_dir is not None else BUNDLED_PLUGIN_DIR

    if not plugin_dir.exists():
        log_warn(f"Plugin directory not found: {plugin_dir}")
        return []

    manifest_path = plugin_dir / "manifest.json"
    if not manifest_path.exists():
        log_warn(f"No manifest.json in {plugin_dir}. Skipping plugin loading.")
        return []

    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            manifest = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log_warn(f"Failed to read manifest.json: {e}")
        return []

    def register_encoder(cls):
        """Decorator handed to plugins: instantiate and add to this registry."""
        registry.register(cls())
        return cls

    loaded = []
    for entry in manifest.get("plugins", []):
        filename = entry.get("file")
        expected_encoder = entry.get("encoder")

        if not filename:
            continue

        filepath = plugin_dir / filename
        if not filepath.exists():
            log_warn(f"Plugin file not found: {filepath}")
            continue

        try:
            spec = importlib.util.spec_from_file_location(f"cipher_suite_plugin_{filepath.stem}", filepath)
            if spec and spec.loader:
                module = importlib.util.module_from_spec(spec)
                # Make our framework available to plugins
                module.EncoderStrategy = EncoderStrategy
                module.register_encoder = register_encoder
                spec.loader.exec_module(module)

                if expected_encoder and expected_encoder in registry:
                    loaded.append(expected_encoder)
                elif expected_encoder:
                    log_warn(f"Plugin {filename} did not register encoder '{expected_encoder}'")
                else:
                    loaded.append(filename)
        except Exception as e:
            log_warn(f"Failed to load plugin {filename}: {e}")

    return loaded


def build_default_registry(custom: Iterable[CustomEncoderSpec] = (), plugin_dir: Optional[str] = None,
                           load_bundled_plugins: bool = True) -> EncoderRegistry:
    """Registry with every built-in, the given custom encoders and plugins."""
    registry = EncoderRegistry(custom=custom)
    loaded: List[str] = []
    if load_bundled_plugins:
        loaded += load_plugins(registry)
    if plugin_dir is not None:
        loaded += load_plugins(registry, plugin_dir)
    if loaded:
        log_info(f"Loaded plugins: {', '.join(loaded)}")
    return registry
