"""
Public entry points of the filtering engine.

    filter_items(query, items, filter_by, strict)      one-shot pass
    use_search(query, items, filter_by, strict)        reactive pass

Every argument may be a plain value or a reactive ``Cell``. A pass dereferences
the current values, then:

    ┌───────────────────────────────┐     ┌─────────────────────────────────────┐
    │ is_empty_query(query)?        │────►│ return list(items)                  │
    └───────────────────────────────┘ yes │ (strategy and strictness not read)  │
                   │ no                   └─────────────────────────────────────┘
                   ▼
    ┌───────────────────────────────┐
    │ StrategyResolver.resolve()    │  once per pass
    └───────────────────────────────┘
                   │
                   ▼
    ┌───────────────────────────────┐
    │ MatchEvaluator.evaluate()     │  linear scan, stable order
    └───────────────────────────────┘

The empty-query early return also skips a predicate strategy, so an empty query
always yields every item even when the predicate would reject some of them.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from querysift_data_model.filter_strategy import CustomMatcher, FilterStrategy
from querysift_engine.config import settings
from querysift_engine.core.reactive.cell import Computed, unref
from querysift_engine.engine.metrics import SearchMetrics
from querysift_engine.matching.match_evaluator import MatchContext, MatchEvaluator
from querysift_engine.matching.strategy_resolver import StrategyResolver
from querysift_exception_model.exception import InvalidQueryException

logger = logging.getLogger(__name__)


def is_empty_query(query: Optional[str]) -> bool:
    """
    Whether ``query`` means "no filtering": None, empty or whitespace-only.

    Raises:
        InvalidQueryException: If the query is neither a string nor None.
    """
    if query is None:
        return True
    if not isinstance(query, str):
        raise InvalidQueryException("Query must be a string or None", query)
    return not query.strip()


def _is_predicate_config(filter_by: Any) -> bool:
    if isinstance(filter_by, FilterStrategy):
        return filter_by.is_predicate()
    return callable(filter_by) and not isinstance(filter_by, CustomMatcher)


class SearchEngine:
    """Runs filter passes over in-memory collections.

    Attributes:
        _resolver: Turns the filter-by configuration into a strategy.
        _evaluator: Applies the strategy to each item.
        _metrics: Optional Prometheus metrics; None disables recording.
        _logger: Logger instance for recording diagnostic information.
    """

    def __init__(self,
                 resolver: Optional[StrategyResolver] = None,
                 evaluator: Optional[MatchEvaluator] = None,
                 metrics: Optional[SearchMetrics] = None,
                 logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._resolver = resolver or StrategyResolver(self._logger)
        self._evaluator = evaluator or MatchEvaluator()
        self._metrics = metrics

    @property
    def metrics(self) -> Optional[SearchMetrics]:
        return self._metrics

    def run(self, query: Any, items: Any, filter_by: Any = None, strict: Any = False) -> List[Any]:
        """Run one full pass with the current values of the inputs.

        Args:
            query: Query string or a cell holding it.
            items: Sequence of items or a cell holding it. Never mutated.
            filter_by: ``FilterStrategy``, raw filter configuration, or a cell holding either.
            strict: Strictness flag or a cell holding it.

        Returns:
            List[Any]: A new list of the matching items in their original order.

        Raises:
            InvalidQueryException: If the query is neither a string nor None.
            InvalidFilterStrategyException: If the filter configuration is malformed.
        """
        current_query = unref(query)
        current_items = unref(items)

        if is_empty_query(current_query):
            if _is_predicate_config(unref(filter_by)):
                self._logger.debug("Empty query returns all items without consulting the predicate strategy")
            if self._metrics:
                self._metrics.record_short_circuit()
            return list(current_items)

        strategy = self._resolver.resolve(unref(filter_by))
        context = MatchContext.create(strategy, current_query, unref(strict))

        start = time.time()
        results = self._evaluator.evaluate(current_items, context)
        elapsed = time.time() - start

        self._logger.debug(f"Filter pass matched {len(results)} of {len(current_items)} items "
                           f"in {elapsed:.3f}s")
        if self._metrics:
            self._metrics.record_pass(len(current_items), len(results), elapsed)
        return results


@dataclass
class SearchResults:
    """Reactive result of ``use_search``; ``results.value`` is the current filtered list."""
    results: Computed

    @property
    def value(self) -> List[Any]:
        return self.results.value

    def subscribe(self, callback: Callable[[List[Any]], None]) -> Callable[[], None]:
        return self.results.subscribe(callback)

    def dispose(self) -> None:
        self.results.dispose()


_default_engine: Optional[SearchEngine] = None


def get_default_engine() -> SearchEngine:
    """Return the process-wide engine, creating it on first use."""
    global _default_engine
    if _default_engine is None:
        metrics = SearchMetrics() if settings.metrics_enabled else None
        _default_engine = SearchEngine(metrics=metrics)
    return _default_engine


def filter_items(query: Any, items: Any, filter_by: Any = None, strict: Any = False,
                 engine: Optional[SearchEngine] = None) -> List[Any]:
    """Filter ``items`` once against the current ``query``."""
    return (engine or get_default_engine()).run(query, items, filter_by, strict)


def use_search(query: Any, items: Any, filter_by: Any = None, strict: Any = False,
               engine: Optional[SearchEngine] = None) -> SearchResults:
    """
    Build a reactive search over ``items``.

    Any argument given as a ``Cell`` is tracked: writing a new value to it recomputes
    the full result synchronously and notifies subscribers of ``SearchResults``.
    """
    engine = engine or get_default_engine()
    computed = Computed(
        lambda: engine.run(query, items, filter_by, strict),
        dependencies=(query, items, filter_by, strict),
        name="search-results",
    )
    return SearchResults(results=computed)
