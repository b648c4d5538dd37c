class InvalidFilterStrategyException(Exception):
    """
    Exception raised when a filter configuration cannot be turned into a filter strategy.

    Raised while building or resolving a ``FilterStrategy``: an empty property name,
    a predicate that is not callable, or a matcher-list element that is neither a
    property name nor a custom matcher.

    Attributes:
        strategy -- the offending configuration value
        cause -- underlying exception, if any
        message -- explanation of the error
    """

    def __init__(self, message, strategy=None, cause=None):
        self.strategy = strategy
        self.cause = cause
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        parts = []
        if self.strategy is not None:
            parts.append(f"strategy={self.strategy!r}")
        if self.cause is not None:
            parts.append(f"cause={self.cause}")
        if parts:
            return f"{self.message} ({', '.join(parts)})"
        return self.message


class InvalidQueryException(Exception):
    """
    Exception raised when the search query is neither a string nor None.
    """

    def __init__(self, message, query=None):
        self.query = query
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        if self.query is not None:
            return f"{self.message} (query={self.query!r}, type={type(self.query).__name__})"
        return self.message


class ItemSourceLoadException(Exception):
    """
    Exception raised when a collection of items cannot be loaded from a file.

    Attributes:
        path -- path of the file that failed to load
        cause -- underlying exception, if any
        message -- explanation of the error
    """

    def __init__(self, message, path=None, cause=None):
        self.path = path
        self.cause = cause
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        if self.path is not None and self.cause is not None:
            return f"{self.message} (path={self.path}, cause={self.cause})"
        elif self.path is not None:
            return f"{self.message} (path={self.path})"
        return self.message
