import math
from numbers import Integral, Real
from typing import Any, Mapping, Optional

from querysift_data_model.item_kind import ItemKind, classify_item


def fold_case(text: str) -> str:
    """Lowercase ``text`` for case-insensitive substring comparison."""
    return text.lower()


def to_plain_string(value: Any) -> str:
    """Stringify a primitive item: ``True -> 'true'``, ``42 -> '42'``, ``1.0 -> '1'``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Real):
        number = float(value)
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        if isinstance(value, Integral):
            return str(int(value))
        if number.is_integer() and abs(number) < 1e21:
            return str(int(number))
        return repr(number)
    return str(value)


def to_locale_string(value: Any) -> str:
    """
    Stringify a property value the way a UI would display it.

    Numbers get thousands separators and at most three fraction digits
    (``1234.5678 -> '1,234.568'``); booleans become ``'true'``/``'false'``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Real):
        number = float(value)
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "∞" if number > 0 else "-∞"
        if isinstance(value, Integral):
            return f"{int(value):,}"
        return f"{number:,.3f}".rstrip("0").rstrip(".")
    return str(value)


class ValueExtractor:
    """
    Derives comparable strings from items and property values.

    Admission policy:
        strict=True  -> only ``str`` values are admitted
        strict=False -> ``str``, numbers and booleans are admitted
    Anything else yields ``None`` ("no value"), which never matches.
    """

    def admit(self, value: Any, strict: bool) -> Optional[str]:
        """Apply the admission policy to a property value."""
        kind = classify_item(value)
        if kind == ItemKind.STRING:
            return value
        if strict:
            return None
        if kind in (ItemKind.NUMBER, ItemKind.BOOLEAN):
            return to_locale_string(value)
        return None

    def extract(self, item: Mapping[str, Any], key: str, strict: bool) -> Optional[str]:
        """Read ``item[key]`` and apply the admission policy; missing keys yield None."""
        return self.admit(item.get(key), strict)

    def value_matches(self, value: Any, folded_query: str, strict: bool) -> bool:
        extracted = self.admit(value, strict)
        if extracted:
            return folded_query in fold_case(extracted)
        return False

    def property_matches(self, item: Mapping[str, Any], key: str, folded_query: str, strict: bool) -> bool:
        """Whether the admitted value of ``item[key]`` contains ``folded_query``."""
        return self.value_matches(item.get(key), folded_query, strict)

    def primitive_matches(self, item: Any, kind: ItemKind, folded_query: str, strict: bool) -> bool:
        """
        Match a primitive item against the folded query.

        Primitive items are stringified plainly, not with thousands separators.
        """
        if kind == ItemKind.STRING:
            return folded_query in fold_case(item)
        if strict:
            return False
        return folded_query in fold_case(to_plain_string(item))
