from __future__ import annotations
from typing import Dict, Iterator, List

SEPARATOR = "."


def normalize_prefix(prefix: str) -> str:
    """Append the separator unless the prefix is empty or already ends with it."""
    if prefix and not prefix.endswith(SEPARATOR):
        prefix += SEPARATOR
    return prefix


class KeyList:
    """
    Accumulator that ``list_keys`` implementations collect keys into.

    Backed by a dict, so adding a key twice keeps a single entry. Iteration
    order is whatever the producers happened to add first and must not be
    relied upon.
    """

    def __init__(self) -> None:
        self._keys: Dict[str, bool] = {}

    def add(self, key: str) -> None:
        self._keys[key] = True

    def to_list(self) -> List[str]:
        return list(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __repr__(self) -> str:
        return f"KeyList({self.to_list()!r})"
