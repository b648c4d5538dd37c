"""
Minimal synchronous reactive primitives.

    Cell.set(v) ──► subscribers(v) ──► Computed._on_dependency_changed()
                                              │
                                              ▼
                                       value = fn()   (full recompute)
                                              │
                                              ▼
                                     Computed subscribers(value)

A ``Cell`` holds a mutable value. A ``Computed`` derives its value from a function
of other cells/computeds and recomputes from scratch, synchronously, inside the
write that changed one of its dependencies. Exceptions raised by the function or
by a subscriber propagate out of that write.
"""
import logging
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")

Subscriber = Callable[[Any], None]

logger = logging.getLogger(__name__)


class _Observable:
    """Subscriber bookkeeping shared by cells and computeds."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register ``callback`` to be called with the new value on every change.

        Returns:
            A function that removes the subscription when called.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self, value: Any) -> None:
        # copy, subscribers may unsubscribe while being notified
        for callback in list(self._subscribers):
            callback(value)


class Cell(_Observable, Generic[T]):
    """A mutable value that notifies subscribers when it changes."""

    def __init__(self, value: T = None, name: Optional[str] = None):
        super().__init__(name)
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        self.set(new_value)

    def set(self, new_value: T) -> bool:
        """
        Replace the value and notify subscribers if it changed.

        Returns:
            True if subscribers were notified.
        """
        if _same_value(self._value, new_value):
            return False
        self._value = new_value
        logger.debug(f"Cell {self.name or id(self)} changed")
        self._notify(new_value)
        return True

    def trigger(self) -> None:
        """Notify subscribers without changing the value, e.g. after an in-place mutation."""
        self._notify(self._value)

    def __repr__(self):
        return f"Cell({self._value!r})"


class Computed(_Observable, Generic[T]):
    """
    A read-only value derived from ``fn`` and recomputed whenever a dependency changes.

    Attributes:
        recompute_count: Number of times ``fn`` has been evaluated.
    """

    def __init__(self, fn: Callable[[], T], dependencies: Iterable[Any] = (), name: Optional[str] = None):
        super().__init__(name)
        self._fn = fn
        self._value: Optional[T] = None
        self._disposed = False
        self.recompute_count = 0
        # a failed first evaluation must leave no subscriptions behind
        self._evaluate()
        self._unsubscribers = [
            dep.subscribe(self._on_dependency_changed) for dep in dependencies if is_ref(dep)
        ]

    @property
    def value(self) -> T:
        return self._value

    @property
    def disposed(self) -> bool:
        return self._disposed

    def recompute(self) -> T:
        """Force a full recomputation and notify subscribers."""
        self._evaluate()
        self._notify(self._value)
        return self._value

    def dispose(self) -> None:
        """Detach from all dependencies; the last value stays readable."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._subscribers = []
        self._disposed = True

    def _on_dependency_changed(self, _value: Any) -> None:
        if self._disposed:
            return
        self.recompute()

    def _evaluate(self) -> None:
        self._value = self._fn()
        self.recompute_count += 1

    def __repr__(self):
        return f"Computed({self._value!r})"


def is_ref(value: Any) -> bool:
    """Whether ``value`` is a reactive cell or computed."""
    return isinstance(value, (Cell, Computed))


def unref(value: Any) -> Any:
    """Dereference a cell or computed to its current value; plain values pass through."""
    if is_ref(value):
        return value.value
    return value


def _same_value(old: Any, new: Any) -> bool:
    if old is new:
        return True
    try:
        return bool(old == new) and type(old) is type(new)
    except (TypeError, ValueError):
        # e.g. ambiguous truth value of array comparisons
        return False
