"""
Prefix-scoped views over a Viewable.

A view prepends its prefix to every key, so with prefix ``a.b`` a call for
``c.d`` reaches ``a.b.c.d`` on the wrapped target. Wrapping a view in a view
does not chain: the new view composes both prefixes and points straight at
the innermost target.
"""

from __future__ import annotations
import re
from typing import List, Optional

from .errors import ReadOnlyError, ReadOnlyViewError
from .keys import KeyList, normalize_prefix
from .viewable import Viewable

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_INT_RE = re.compile(
    r"(?P<sign>[+-]?)(?:"
    r"0[xX](?P<hex>[0-9a-fA-F]+)"
    r"|0[oO](?P<oct>[0-7]+)"
    r"|0[bB](?P<bin>[01]+)"
    r"|(?P<legacy_oct>0[0-7]*)"
    r"|(?P<dec>[1-9][0-9]*)"
    r")"
)

_TRUE_LITERALS = frozenset(["1", "t", "T", "TRUE", "true", "True"])
_FALSE_LITERALS = frozenset(["0", "f", "F", "FALSE", "false", "False"])


def parse_int(text: str) -> Optional[int]:
    """
    Parse an integer literal with an optional radix prefix.

    ``0x`` is hex, ``0o`` and a bare leading ``0`` are octal, ``0b`` is
    binary, anything else decimal. Returns ``None`` if the text is not a
    literal or does not fit into a signed 64 bit integer.
    """
    m = _INT_RE.fullmatch(text)
    if m is None:
        return None
    if m.group("hex") is not None:
        value = int(m.group("hex"), 16)
    elif m.group("oct") is not None:
        value = int(m.group("oct"), 8)
    elif m.group("bin") is not None:
        value = int(m.group("bin"), 2)
    elif m.group("legacy_oct") is not None:
        value = int(m.group("legacy_oct"), 8)
    else:
        value = int(m.group("dec"))
    if m.group("sign") == "-":
        value = -value
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def parse_bool(text: str) -> Optional[bool]:
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    return None


class _EmptyViewable:
    """Target of :func:`empty_view`: holds nothing and refuses writes."""

    def is_writable(self) -> bool:
        return False

    def get_string(self, key: str) -> Optional[str]:
        return None

    def set_string(self, key: str, value: str) -> None:
        raise ReadOnlyError("empty viewable is not writable")

    def delete_value(self, key: str) -> None:
        raise ReadOnlyError("empty viewable is not writable")

    def list_keys(self, prefix: str, out: KeyList, direct: bool) -> None:
        pass


_EMPTY = _EmptyViewable()


class View:
    """
    View on a config entity.

    The view has its own writable flag on top of the target's. A view
    created read-only refuses writes with :class:`ReadOnlyViewError` even if
    the target would accept them. Views hold no lock; thread safety comes
    from the target.
    """

    __slots__ = ("_prefix", "_target", "_writable")

    def __init__(self, target: Viewable, prefix: str = "", writable: bool = True):
        prefix = normalize_prefix(prefix)
        if isinstance(target, View):
            prefix = target._prefix + prefix
            target = target._target
        self._prefix = prefix
        self._target = target
        self._writable = writable

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def target(self) -> Viewable:
        return self._target

    def _derive_key(self, key: str) -> str:
        return self._prefix + key

    def is_writable(self) -> bool:
        return self._writable and self._target.is_writable()

    def get_string(self, key: str) -> Optional[str]:
        return self._target.get_string(self._derive_key(key))

    def set_string(self, key: str, value: str) -> None:
        if not self._writable:
            raise ReadOnlyViewError(f"trying to write {key!r} through a read-only view")
        self._target.set_string(self._derive_key(key), value)

    def delete_value(self, key: str) -> None:
        if not self._writable:
            raise ReadOnlyViewError(f"trying to delete {key!r} through a read-only view")
        self._target.delete_value(self._derive_key(key))

    def get_int(self, key: str) -> Optional[int]:
        """Integer value for ``key``. Unparsable values are reported as not found."""
        raw = self.get_string(key)
        if raw is None:
            return None
        return parse_int(raw)

    def set_int(self, key: str, value: int) -> None:
        self.set_string(key, str(int(value)))

    def get_bool(self, key: str) -> Optional[bool]:
        """Bool value for ``key``. Unparsable values are reported as not found."""
        raw = self.get_string(key)
        if raw is None:
            return None
        return parse_bool(raw)

    def set_bool(self, key: str, value: bool) -> None:
        self.set_string(key, "true" if value else "false")

    def list_keys(self, prefix: str, out: KeyList, direct: bool) -> None:
        self._target.list_keys(self._derive_key(prefix), out, direct)

    def keys(self, prefix: str = "", direct: bool = False) -> List[str]:
        out = KeyList()
        self.list_keys(prefix, out, direct)
        return out.to_list()

    def sub_view(self, prefix: str) -> "View":
        """Create a writable subview."""
        return View(self, prefix, True)

    def sub_view_read_only(self, prefix: str) -> "View":
        """Create a read-only subview."""
        return View(self, prefix, False)

    def __repr__(self) -> str:
        return f"View(prefix={self._prefix!r}, target={self._target!r}, writable={self._writable})"


def empty_view() -> View:
    """Create an empty, permanently read-only view."""
    return View(_EMPTY, "", False)
