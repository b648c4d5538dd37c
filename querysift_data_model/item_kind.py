"""Classification of collection items by shape."""
from collections.abc import Mapping
from enum import Enum
from numbers import Real
from typing import Any


class ItemKind(Enum):
    STRING = 1
    NUMBER = 2
    BOOLEAN = 3
    MAPPING = 4
    SEQUENCE = 5
    OTHER = 6

    def is_primitive(self) -> bool:
        return self in (ItemKind.STRING, ItemKind.NUMBER, ItemKind.BOOLEAN)


def classify_item(item: Any) -> ItemKind:
    """
    Derive the kind of an item once so callers can switch on it.

    ``bool`` is checked before numbers because ``bool`` is a subclass of ``int``.
    Strings are never treated as sequences.
    """
    if isinstance(item, str):
        return ItemKind.STRING
    if isinstance(item, bool):
        return ItemKind.BOOLEAN
    if isinstance(item, Real):
        return ItemKind.NUMBER
    if isinstance(item, Mapping):
        return ItemKind.MAPPING
    if isinstance(item, (list, tuple, set, frozenset)):
        return ItemKind.SEQUENCE
    return ItemKind.OTHER
