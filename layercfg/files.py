"""
File-backed layer stack.

Every layer of a :class:`~layercfg.models.StackManifest` lives in its own INI
file. Loading reads all of them into layers and stacks them by priority;
saving writes the writable layers back.

Typical setup without a manifest:
    defaults.ini   priority 0,   read-only
    config.ini     priority 100, writable
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .ini import load_ini, save_ini
from .layer import Layer
from .logging_setup import get_logger
from .models import LayerSpec, StackManifest
from .settings import Settings
from .stack import LayerStack

log = get_logger("layercfg.files")

DEFAULTS_PRIORITY = 0
CONFIG_PRIORITY = 100


def load_layer_file(path: Path, name: Optional[str] = None) -> Layer:
    """Read one INI file into a new (still writable) layer."""
    layer = Layer(name or path.stem)
    with path.open("rb") as fp:
        load_ini(layer, fp)
    log.info("Loaded layer %s from %s (%d values)", layer.name, path, len(layer))
    return layer


def save_layer_file(layer: Layer, path: Path) -> None:
    """Write a layer to an INI file atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    # Atomic write: write to temp, then rename
    temp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with temp_path.open("wb") as fp:
            save_ini(layer, fp, header=True, sort_keys=True)
        temp_path.replace(path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    log.info("Saved layer %s to %s", layer.name, path)


def manifest_from_settings(settings: Settings) -> StackManifest:
    """
    Manifest file if configured, otherwise the defaults/config file pair.
    """
    if settings.manifest is not None:
        manifest = StackManifest.model_validate_json(settings.manifest.read_text(encoding="utf-8"))
        # relative layer paths are relative to the manifest
        base = settings.manifest.parent
        for spec in manifest.layers:
            if not spec.path.is_absolute():
                spec.path = base / spec.path
        return manifest

    layers: List[LayerSpec] = []
    if settings.defaults_file is not None:
        layers.append(LayerSpec(name="defaults", path=settings.defaults_file, priority=DEFAULTS_PRIORITY))
    if settings.config_file is not None:
        layers.append(LayerSpec(name="config", path=settings.config_file, priority=CONFIG_PRIORITY, writable=True))
    return StackManifest(layers=layers)


class FileLayerStore:
    """Layer stack backed by the INI files named in a manifest."""

    def __init__(self, manifest: StackManifest):
        self.manifest = manifest
        self.stack = LayerStack()
        self._layers: Dict[str, Tuple[LayerSpec, Layer]] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileLayerStore":
        store = cls(manifest_from_settings(settings))
        store.load()
        return store

    def _load_spec(self, spec: LayerSpec) -> Layer:
        if not spec.path.exists():
            if spec.required:
                raise FileNotFoundError(f"Required config layer {spec.name} not found: {spec.path}")
            log.warning("Config file not found: %s (layer %s starts empty)", spec.path, spec.name)
            return Layer(spec.name)
        try:
            return load_layer_file(spec.path, spec.name)
        except (OSError, UnicodeDecodeError) as e:
            log.error("Failed to load %s: %s", spec.path, e)
            raise

    def load(self) -> LayerStack:
        """Read all layer files and (re)build the stack."""
        for _, layer in self._layers.values():
            self.stack.remove_layer(layer)
        self._layers = {}

        for spec in self.manifest.layers:
            layer = self._load_spec(spec)
            if spec.writable:
                self.stack.add_writable_layer(layer, spec.priority)
            else:
                layer.lock_read_only()
                self.stack.add_layer(layer, spec.priority)
            self._layers[spec.name] = (spec, layer)
        return self.stack

    def layer(self, name: str) -> Layer:
        return self._layers[name][1]

    def save(self) -> List[Path]:
        """Write every writable layer back to its file. Returns the written paths."""
        written = []
        for spec, layer in self._layers.values():
            if spec.writable and layer.is_writable():
                save_layer_file(layer, spec.path)
                written.append(spec.path)
        return written
