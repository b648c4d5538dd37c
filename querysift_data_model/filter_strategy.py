from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Tuple, Union

from querysift_exception_model.exception import InvalidFilterStrategyException

# (item_value, raw_query, item) -> bool
MatchFunc = Callable[[Any, str, Any], bool]
# (raw_query, item) -> bool
PredicateFunc = Callable[[str, Any], bool]


@dataclass(frozen=True)
class CustomMatcher:
    """
    A named matcher used as an element of a matcher list.

    The engine reads ``item[name]`` and hands it to ``match`` together with the raw,
    un-folded query and the whole item. The returned value is trusted as is.

    Attributes:
        name (str): Property of the item whose value is passed to ``match``.
        match (MatchFunc): Free-form predicate ``(item_value, raw_query, item) -> bool``.
    """
    name: str
    match: MatchFunc

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidFilterStrategyException("CustomMatcher name must be a non-empty string", self.name)
        if not callable(self.match):
            raise InvalidFilterStrategyException("CustomMatcher match must be callable", self.match)


MatcherElement = Union[str, CustomMatcher]


@dataclass(frozen=True)
class FilterStrategy:
    """
    Explicit tagged union describing how structured items are matched.

    Exactly one of the payload fields is populated, according to ``type``:

    * NONE: every own property of an item is scanned.
    * PROPERTY: only ``property_name`` is compared.
    * MATCHER_LIST: ``matchers`` are tried in order, first success wins.
    * PREDICATE: ``predicate(raw_query, item)`` decides alone, for every item.

    Use the ``create_*`` factories rather than the constructor.
    """
    class StrategyType(Enum):
        NONE = 1
        PROPERTY = 2
        MATCHER_LIST = 3
        PREDICATE = 4

    type: StrategyType
    property_name: Optional[str] = None
    matchers: Tuple[MatcherElement, ...] = ()
    predicate: Optional[PredicateFunc] = None

    def __post_init__(self):
        """
        Validate that the populated payload matches the strategy type.

        Raises:
            InvalidFilterStrategyException: If the payload is missing or malformed.
        """
        if self.is_property():
            if not isinstance(self.property_name, str) or not self.property_name:
                raise InvalidFilterStrategyException("Property name must be a non-empty string",
                                                     self.property_name)
        elif self.is_matcher_list():
            for element in self.matchers:
                if isinstance(element, str):
                    if not element:
                        raise InvalidFilterStrategyException("Matcher list property names must not be empty",
                                                             element)
                elif not isinstance(element, CustomMatcher):
                    raise InvalidFilterStrategyException(
                        "Matcher list elements must be property names or CustomMatcher instances", element)
        elif self.is_predicate():
            if not callable(self.predicate):
                raise InvalidFilterStrategyException("Predicate strategy requires a callable", self.predicate)

    def is_none(self) -> bool:
        return self.type == self.StrategyType.NONE

    def is_property(self) -> bool:
        return self.type == self.StrategyType.PROPERTY

    def is_matcher_list(self) -> bool:
        return self.type == self.StrategyType.MATCHER_LIST

    def is_predicate(self) -> bool:
        return self.type == self.StrategyType.PREDICATE

    @staticmethod
    def create_none() -> "FilterStrategy":
        return FilterStrategy(type=FilterStrategy.StrategyType.NONE)

    @staticmethod
    def create_property(property_name: str) -> "FilterStrategy":
        return FilterStrategy(type=FilterStrategy.StrategyType.PROPERTY, property_name=property_name)

    @staticmethod
    def create_matcher_list(matchers: Sequence[MatcherElement]) -> "FilterStrategy":
        return FilterStrategy(type=FilterStrategy.StrategyType.MATCHER_LIST, matchers=tuple(matchers))

    @staticmethod
    def create_predicate(predicate: PredicateFunc) -> "FilterStrategy":
        return FilterStrategy(type=FilterStrategy.StrategyType.PREDICATE, predicate=predicate)

    def describe(self) -> str:
        """Short human-readable form used in log messages."""
        if self.is_property():
            return f"property({self.property_name})"
        if self.is_matcher_list():
            names = [m if isinstance(m, str) else f"{m.name}*" for m in self.matchers]
            return f"matchers({', '.join(names)})"
        if self.is_predicate():
            return "predicate"
        return "all-properties"
