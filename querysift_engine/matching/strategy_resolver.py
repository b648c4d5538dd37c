import logging
from collections.abc import Mapping
from typing import Any, List, Optional

from querysift_data_model.filter_strategy import CustomMatcher, FilterStrategy, MatcherElement
from querysift_exception_model.exception import InvalidFilterStrategyException


class StrategyResolver:
    """Turns a filter-by configuration into a ``FilterStrategy``.

    An explicit ``FilterStrategy`` is returned unchanged. Raw configuration values
    are coerced:

        None, ""                   -> NONE
        "name"                     -> PROPERTY
        ["name", CustomMatcher]    -> MATCHER_LIST
        [{"name", "match"}]        -> MATCHER_LIST (mapping elements become CustomMatcher)
        callable(query, item)      -> PREDICATE

    A bare callable inside a list is rejected since it cannot be told apart from a
    whole-query predicate.

    Attributes:
        _logger: Logger instance for recording diagnostic information.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    def resolve(self, filter_by: Any) -> FilterStrategy:
        """Resolve ``filter_by`` into a strategy.

        Args:
            filter_by: A ``FilterStrategy`` or a raw configuration value.

        Returns:
            FilterStrategy: The strategy active for one recomputation pass.

        Raises:
            InvalidFilterStrategyException: If the configuration has no strategy form.
        """
        strategy = self._coerce(filter_by)
        self._logger.debug(f"Resolved filter strategy: {strategy.describe()}")
        return strategy

    def _coerce(self, filter_by: Any) -> FilterStrategy:
        if isinstance(filter_by, FilterStrategy):
            return filter_by
        if filter_by is None or filter_by == "":
            return FilterStrategy.create_none()
        if isinstance(filter_by, str):
            return FilterStrategy.create_property(filter_by)
        if isinstance(filter_by, (list, tuple)):
            return FilterStrategy.create_matcher_list(self._coerce_elements(filter_by))
        if callable(filter_by):
            return FilterStrategy.create_predicate(filter_by)
        raise InvalidFilterStrategyException("Unsupported filter configuration", filter_by)

    def _coerce_elements(self, elements: Any) -> List[MatcherElement]:
        coerced: List[MatcherElement] = []
        for element in elements:
            if isinstance(element, (str, CustomMatcher)):
                coerced.append(element)
            elif isinstance(element, Mapping):
                coerced.append(self._matcher_from_mapping(element))
            else:
                raise InvalidFilterStrategyException(
                    "Matcher list elements must be property names, CustomMatcher instances or "
                    "{'name', 'match'} mappings", element)
        return coerced

    @staticmethod
    def _matcher_from_mapping(element: Mapping) -> CustomMatcher:
        # "filter_by" is accepted as an alias of "match"
        match = element.get("match", element.get("filter_by"))
        try:
            return CustomMatcher(name=element["name"], match=match)
        except KeyError as e:
            raise InvalidFilterStrategyException("Matcher mapping requires a 'name' key", dict(element), e)
