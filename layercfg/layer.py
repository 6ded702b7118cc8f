"""
Single in-memory config layer.

A layer holds one flat mapping from dotted key to string value. It starts
writable; once locked read-only it stays that way for its whole lifetime.
"""

from __future__ import annotations
import threading
from enum import Enum
from typing import Dict, Optional

from .errors import ReadOnlyError
from .keys import KeyList, SEPARATOR, normalize_prefix
from .logging_setup import get_logger

log = get_logger("layercfg.layer")


class LayerState(Enum):
    WRITABLE = "writable"
    READ_ONLY = "read-only"


class Layer:
    """Config layer storing key-value pairs in memory. All methods are thread-safe."""

    def __init__(self, name: str):
        self._name = name
        self._values: Dict[str, str] = {}
        self._state = LayerState.WRITABLE
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> LayerState:
        with self._lock:
            return self._state

    def lock_read_only(self) -> None:
        """Make the layer read-only. Call once after loading values; there is no way back."""
        with self._lock:
            if self._state is LayerState.READ_ONLY:
                return
            self._state = LayerState.READ_ONLY
        log.debug("Layer %s locked read-only", self._name)

    def is_writable(self) -> bool:
        with self._lock:
            return self._state is LayerState.WRITABLE

    def _check_writable(self, action: str) -> None:
        # caller holds the lock
        if self._state is not LayerState.WRITABLE:
            raise ReadOnlyError(f"trying to {action} read-only layer {self._name!r}")

    def get_string(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set_string(self, key: str, value: str) -> None:
        with self._lock:
            self._check_writable("write")
            self._values[key] = value

    def delete_value(self, key: str) -> None:
        with self._lock:
            self._check_writable("delete from")
            self._values.pop(key, None)

    def clear(self) -> None:
        """Delete all values from the layer."""
        with self._lock:
            self._check_writable("clear")
            self._values = {}

    def list_keys(self, prefix: str, out: KeyList, direct: bool) -> None:
        prefix = normalize_prefix(prefix)
        cut = len(prefix)

        with self._lock:
            for key in self._values:
                if not key.startswith(prefix):
                    continue
                key = key[cut:]
                if direct:
                    key = key.split(SEPARATOR, 1)[0]
                out.add(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __repr__(self) -> str:
        return f"Layer(name={self._name!r}, state={self.state.value})"
