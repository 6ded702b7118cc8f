"""
Exceptions raised by the configuration store.

All of them signal a precondition violation by the caller (writing something
that cannot be written). Lookups that find nothing never raise; they return
``None`` instead.
"""


class ConfigError(RuntimeError):
    """Base class for configuration precondition violations."""


class ReadOnlyError(ConfigError):
    """Write, delete or clear on a read-only layer."""


class ReadOnlyViewError(ReadOnlyError):
    """Write or delete through a view created read-only."""


class NotWritableError(ConfigError):
    """Target has nowhere to put the value (no writable layer, read-only load target)."""
