"""
Priority-ordered collection of config layers.

Reads return the value of the highest-priority layer that has the key.
Writes go to the highest-priority layer that was added as writable and is
still writable itself. Layers added with equal priority keep their
insertion order, so the first one added wins.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import List, Optional

from .errors import NotWritableError
from .keys import KeyList
from .layer import Layer
from .logging_setup import get_logger

log = get_logger("layercfg.stack")


@dataclass
class _StackEntry:
    layer: Layer
    priority: int
    writable: bool


class LayerStack:
    """
    Layers are referenced, not owned: the same layer may sit in several
    stacks and can be reused after removal.

    Each stack operation holds the stack lock while delegating to the layers,
    which take their own locks. Do not call back into the same stack from
    inside a layer call.
    """

    def __init__(self) -> None:
        self._entries: List[_StackEntry] = []
        self._lock = threading.Lock()

    def _add(self, layer: Layer, priority: int, writable: bool) -> None:
        with self._lock:
            # insert before the first entry with strictly lower priority
            idx = len(self._entries)
            for i, entry in enumerate(self._entries):
                if entry.priority < priority:
                    idx = i
                    break
            self._entries.insert(idx, _StackEntry(layer, priority, writable))
        log.debug("Added layer %s (priority=%d, writable=%s) at position %d", layer.name, priority, writable, idx)

    def add_layer(self, layer: Layer, priority: int) -> None:
        """Add a layer that is only ever read from."""
        self._add(layer, priority, False)

    def add_writable_layer(self, layer: Layer, priority: int) -> None:
        """
        Add a layer that ``set_string`` may write to. Writing still requires
        the layer itself to be writable at that moment.
        """
        self._add(layer, priority, True)

    def remove_layer(self, layer: Layer) -> bool:
        """Remove a layer (matched by identity). Returns True if it was in the stack."""
        with self._lock:
            for i, entry in enumerate(self._entries):
                if entry.layer is layer:
                    del self._entries[i]
                    break
            else:
                return False
        log.debug("Removed layer %s", layer.name)
        return True

    def layers(self) -> List[Layer]:
        """Snapshot of the layers in resolution order, highest priority first."""
        with self._lock:
            return [entry.layer for entry in self._entries]

    def is_writable(self) -> bool:
        with self._lock:
            return any(entry.writable and entry.layer.is_writable() for entry in self._entries)

    def get_string(self, key: str) -> Optional[str]:
        with self._lock:
            for entry in self._entries:
                value = entry.layer.get_string(key)
                if value is not None:
                    return value
        return None

    def set_string(self, key: str, value: str) -> None:
        with self._lock:
            for entry in self._entries:
                if entry.writable and entry.layer.is_writable():
                    entry.layer.set_string(key, value)
                    return
        raise NotWritableError(f"no writable layer to store {key!r}")

    def delete_value(self, key: str) -> None:
        # Only supplied for interface compatibility. Deletion through the
        # stack is not supported; delete on the layer itself.
        pass

    def list_keys(self, prefix: str, out: KeyList, direct: bool) -> None:
        with self._lock:
            for entry in self._entries:
                entry.layer.list_keys(prefix, out, direct)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
