"""
The capability set shared by layers, layer stacks and views.

Anything holding string-keyed values implements these five methods. The
INI codec and :class:`~layercfg.view.View` only ever talk to this protocol,
so they work the same over a bare layer, a stack or another view.
"""

from __future__ import annotations
from typing import Optional, Protocol, runtime_checkable

from .keys import KeyList


@runtime_checkable
class Viewable(Protocol):
    def is_writable(self) -> bool:
        """Test if values can be written."""
        ...

    def get_string(self, key: str) -> Optional[str]:
        """Raw string value for ``key``, ``None`` if not present."""
        ...

    def set_string(self, key: str, value: str) -> None:
        """Store a raw string value. Raises if the target is not writable."""
        ...

    def delete_value(self, key: str) -> None:
        """Remove the value for ``key``. Raises if the target is not writable."""
        ...

    def list_keys(self, prefix: str, out: KeyList, direct: bool) -> None:
        """
        Collect the keys below ``prefix`` into ``out``.

        With ``direct`` only the immediate child segment is collected,
        otherwise the whole remainder. For the keys ``test.key.1``,
        ``test.key.2`` and ``test.value.3`` and prefix ``test``, direct
        listing yields ``key`` and ``value``, full listing yields
        ``key.1``, ``key.2`` and ``value.3``.
        """
        ...
