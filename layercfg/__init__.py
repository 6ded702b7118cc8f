"""
layercfg package
----------------
Layered, dotted-key configuration store. Flat string values from several
sources (defaults, files, runtime overrides) are resolved by priority and
accessed through prefix-scoped views. Config spaces persist as INI-like text.
"""

__version__ = "0.1.0"

from .errors import ConfigError, NotWritableError, ReadOnlyError, ReadOnlyViewError
from .keys import KeyList, SEPARATOR
from .viewable import Viewable
from .layer import Layer, LayerState
from .stack import LayerStack
from .view import View, empty_view
from .ini import load_ini, save_ini, loads_ini, dumps_ini

__all__ = [
    "ConfigError",
    "NotWritableError",
    "ReadOnlyError",
    "ReadOnlyViewError",
    "KeyList",
    "SEPARATOR",
    "Viewable",
    "Layer",
    "LayerState",
    "LayerStack",
    "View",
    "empty_view",
    "load_ini",
    "save_ini",
    "loads_ini",
    "dumps_ini",
]
