"""
INI-style text format for config key spaces.

Format:
    ; comment line
    top.level.key=value
    [server]
    port=8080            -> server.port

Backslash escapes are understood in keys and values: ``\\:`` ``\\;`` ``\\=``
``\\r`` ``\\n`` ``\\t`` ``\\f`` ``\\0`` ``\\ `` and ``\\\\``. When saving, backslashes
and newlines are escaped in keys and values, and ``=`` additionally in keys.

The codec works on streams handed in by the caller and never opens or
closes them.
"""

from __future__ import annotations
import io
import re
from typing import IO, Any, Optional

from .errors import NotWritableError
from .keys import KeyList, normalize_prefix
from .logging_setup import get_logger
from .viewable import Viewable

log = get_logger("layercfg.ini")

INI_HEADER = ";\n; This INI file was autogenerated\n;\n\n"

_UNESCAPES = {
    ":": ":",
    ";": ";",
    "=": "=",
    "r": "\r",
    "n": "\n",
    "t": "\t",
    "f": "\f",
    "0": "\0",
    " ": " ",
    "\\": "\\",
}

_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)

_TRIM = " \t\f"


def _unescape_match(m: re.Match) -> str:
    return _UNESCAPES.get(m.group(1), m.group(0))


def unescape_ini_string(s: str) -> str:
    """Resolve backslash escapes; unknown sequences are kept as they are."""
    return _ESCAPE_RE.sub(_unescape_match, s)


def escape_ini_string(s: str, equal: bool) -> str:
    # backslashes first, otherwise the newline escapes would be doubled
    s = s.replace("\\", "\\\\")
    s = s.replace("\n", "\\n")
    if equal:
        s = s.replace("=", "\\=")
    return s


def index_of_unescaped_eq(line: str) -> int:
    """
    Position of the first ``=`` that is not part of an escape sequence, or -1.

    A backslash always starts a two-character escape pair, so ``\\\\=`` is an
    escaped backslash followed by a real separator. This is stricter than
    treating every ``=`` preceded by a backslash as escaped, and keeps keys
    ending in a backslash loadable after a save.

    A zero-length key is not valid, so an ``=`` at position 0 belongs to the key.
    """
    i = 0
    n = len(line)
    while i < n:
        c = line[i]
        if c == "\\":
            i += 2
            continue
        if c == "=" and i > 0:
            return i
        i += 1
    return -1


def _read_lines(reader: IO[Any], encoding: str):
    while True:
        line = reader.readline()
        if not line:
            return
        if isinstance(line, bytes):
            line = line.decode(encoding)
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            # windows line endings
            line = line[:-1]
        yield line


def load_ini(target: Viewable, reader: IO[Any], encoding: str = "utf-8") -> None:
    """
    Load INI config from ``reader`` and store the values in ``target``.

    ``reader`` only needs ``readline()``, returning either ``bytes`` (decoded
    with ``encoding``) or ``str``. Errors raised by the reader propagate;
    values stored before the error stay stored. Lines without an unescaped
    ``=`` are skipped.

    Raises:
        NotWritableError: ``target`` is not writable. Nothing is read then.
    """
    if not target.is_writable():
        raise NotWritableError("cannot load ini config to read-only target")

    section = ""
    applied = 0
    dropped = 0
    for line in _read_lines(reader, encoding):
        if not line or line.startswith(";"):
            continue

        if len(line) >= 2 and line.startswith("[") and line.endswith("]"):
            section = normalize_prefix(line[1:-1])
            continue

        pos = index_of_unescaped_eq(line)
        if pos < 0:
            dropped += 1
            continue

        key = line[:pos].strip(_TRIM)
        value = line[pos + 1:].lstrip(_TRIM)

        target.set_string(section + unescape_ini_string(key), unescape_ini_string(value))
        applied += 1

    log.debug("Loaded ini: %d values applied, %d malformed lines dropped", applied, dropped)


def save_ini(target: Viewable, writer: IO[Any], header: bool = True, sort_keys: bool = False,
             encoding: str = "utf-8") -> None:
    """
    Serialize ``target`` to ``writer`` in INI format.

    Text streams receive ``str``, anything else is written UTF-8 encoded
    ``bytes``. Keys come out in enumeration order unless ``sort_keys`` is set.
    Keys removed while saving are skipped.
    """
    binary = not isinstance(writer, io.TextIOBase)

    def emit(s: str) -> None:
        writer.write(s.encode(encoding) if binary else s)

    if header:
        emit(INI_HEADER)

    keylist = KeyList()
    target.list_keys("", keylist, False)
    keys = sorted(keylist) if sort_keys else keylist.to_list()

    written = 0
    for key in keys:
        value = target.get_string(key)
        if value is None:
            continue
        emit(f"{escape_ini_string(key, True)}={escape_ini_string(value, False)}\n")
        written += 1

    log.debug("Saved ini: %d values written", written)


def loads_ini(target: Viewable, text: str) -> None:
    """Load INI config from a string."""
    load_ini(target, io.StringIO(text))


def dumps_ini(target: Viewable, header: bool = True, sort_keys: bool = False) -> str:
    """Serialize ``target`` to an INI string."""
    buf = io.StringIO()
    save_ini(target, buf, header=header, sort_keys=sort_keys)
    return buf.getvalue()
