"""
Evaluates a resolved filter strategy against every item of a collection.

    ┌──────────────────────────────┐
    │ MatchContext (once per pass) │  strategy, raw query, folded query, strict
    └──────────────────────────────┘
                   │
                   ▼
    ┌──────────────────────────────┐     ┌──────────────────────────────────┐
    │ strategy is PREDICATE?       │────►│ predicate(raw_query, item)       │
    └──────────────────────────────┘ yes └──────────────────────────────────┘
                   │ no
                   ▼
    ┌──────────────────────────────┐
    │ kind = classify_item(item)   │
    └──────────────────────────────┘
        │ STRING/NUMBER/BOOLEAN     │ MAPPING                │ SEQUENCE/OTHER
        ▼                           ▼                        ▼
    primitive substring test    NONE: any property        no match
    (strategy ignored)          PROPERTY: one property
                                MATCHER_LIST: first success
"""
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from querysift_data_model.filter_strategy import CustomMatcher, FilterStrategy
from querysift_data_model.item_kind import ItemKind, classify_item
from querysift_engine.matching.value_extractor import ValueExtractor, fold_case


@dataclass(frozen=True)
class MatchContext:
    """Inputs of one recomputation pass, read once before the scan starts."""
    strategy: FilterStrategy
    raw_query: str
    folded_query: str
    strict: bool

    @staticmethod
    def create(strategy: FilterStrategy, query: str, strict: bool) -> "MatchContext":
        return MatchContext(strategy=strategy, raw_query=query, folded_query=fold_case(query), strict=bool(strict))


class MatchEvaluator:
    """Applies a ``MatchContext`` to items.

    Caller-supplied predicates and custom matchers are not wrapped: anything they
    raise propagates and aborts the scan.
    """

    def __init__(self, extractor: Optional[ValueExtractor] = None):
        self._extractor = extractor or ValueExtractor()

    def evaluate(self, items: Sequence[Any], context: MatchContext) -> List[Any]:
        """Return a new list with the items that match, in their original order."""
        return [item for item in items if self.matches(item, context)]

    def matches(self, item: Any, context: MatchContext) -> bool:
        strategy = context.strategy
        if strategy.is_predicate():
            return bool(strategy.predicate(context.raw_query, item))

        kind = classify_item(item)
        if kind in (ItemKind.STRING, ItemKind.NUMBER, ItemKind.BOOLEAN):
            return self._extractor.primitive_matches(item, kind, context.folded_query, context.strict)
        elif kind == ItemKind.MAPPING:
            return self._mapping_matches(item, context)
        elif kind in (ItemKind.SEQUENCE, ItemKind.OTHER):
            return False
        raise AssertionError(f"Unhandled item kind: {kind}")

    def _mapping_matches(self, item: Mapping[str, Any], context: MatchContext) -> bool:
        strategy = context.strategy
        if strategy.is_none():
            return any(
                self._extractor.value_matches(value, context.folded_query, context.strict)
                for value in item.values()
            )
        if strategy.is_property():
            return self._extractor.property_matches(item, strategy.property_name, context.folded_query,
                                                    context.strict)
        if strategy.is_matcher_list():
            return any(self._element_matches(item, element, context) for element in strategy.matchers)
        raise AssertionError(f"Unhandled strategy type: {strategy.type}")

    def _element_matches(self, item: Mapping[str, Any], element: Any, context: MatchContext) -> bool:
        if isinstance(element, CustomMatcher):
            return bool(element.match(item.get(element.name), context.raw_query, item))
        return self._extractor.property_matches(item, element, context.folded_query, context.strict)
