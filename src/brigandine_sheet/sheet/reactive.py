"""Push-based reactive values for the character sheet.

A small signal graph with three kinds of nodes:

- ``Signal``: a mutable leaf holding a value.
- ``Computed``: a derived value. It is marked dirty as soon as any value it
  read changes and recomputes lazily on its next read, so a read never
  returns a stale result.
- ``Watcher``: a deferred reaction. When anything its source read changes,
  it is queued and run once the outermost mutation (or ``batch()`` block)
  has completed, before control returns to the caller.

Dependencies are tracked dynamically: whatever a computation reads while it
runs becomes its dependency set for the next change. The graph is
single-threaded; there is no locking.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

T = TypeVar("T")

# Node currently evaluating (innermost last); reads register against it.
_active_observers: list["_Observer"] = []

# Watchers waiting for the current batch to end, in scheduling order.
_pending_watchers: dict["Watcher[Any]", None] = {}
_batch_depth = 0
_flushing = False


class _Source:
    """Something that can be read and therefore depended upon."""

    def __init__(self) -> None:
        self._observers: set[_Observer] = set()
        self.version = 0

    def _track(self) -> None:
        if _active_observers:
            observer = _active_observers[-1]
            self._observers.add(observer)
            observer._sources.add(self)

    def _notify(self) -> None:
        for observer in list(self._observers):
            observer._invalidate()


class _Observer(ABC):
    """Something that reads sources and must react when they change."""

    def __init__(self) -> None:
        self._sources: set[_Source] = set()

    @abstractmethod
    def _invalidate(self) -> None:
        """Called when one of the sources read on the last run has changed."""

    def _untrack_all(self) -> None:
        for source in self._sources:
            source._observers.discard(self)
        self._sources.clear()

    def _evaluate(self, fn: Callable[[], T]) -> T:
        # Rebuild the dependency set from scratch on every run
        self._untrack_all()
        _active_observers.append(self)
        try:
            return fn()
        finally:
            _active_observers.pop()


class Signal(_Source, Generic[T]):
    """
    A mutable leaf value.

    Call the signal to read it; reading inside a ``Computed`` or ``Watcher``
    registers a dependency. Writes that do not change the value (by ``==``)
    are ignored and notify nobody.

    Example:
        >>> base = Signal(3)
        >>> base()
        3
        >>> base.set(5)
        >>> base()
        5
    """

    def __init__(self, value: T, *, name: str | None = None) -> None:
        super().__init__()
        self._value = value
        self.name = name

    def __call__(self) -> T:
        self._track()
        return self._value

    def peek(self) -> T:
        """Read the value without registering a dependency."""
        return self._value

    def set(self, value: T) -> None:
        """Replace the value and propagate the change to every dependent."""
        if value == self._value:
            return
        with batch():
            self._value = value
            self.version += 1
            self._notify()

    def update(self, fn: Callable[[T], T]) -> None:
        """Replace the value with ``fn(current value)``."""
        self.set(fn(self._value))

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"<Signal{label}={self._value!r}>"


class Computed(_Source, _Observer, Generic[T]):
    """
    A read-only value derived from other signals or computed values.

    The function must be pure; it is re-run only when one of the values it
    read last time has changed since.
    """

    def __init__(self, fn: Callable[[], T], *, name: str | None = None) -> None:
        _Source.__init__(self)
        _Observer.__init__(self)
        self._fn = fn
        self._value: T | None = None
        self._dirty = True
        self.name = name

    def __call__(self) -> T:
        self._track()
        if self._dirty:
            self._value = self._evaluate(self._fn)
            self._dirty = False
            self.version += 1
        return self._value  # type: ignore[return-value]

    def _invalidate(self) -> None:
        if self._dirty:
            return
        self._dirty = True
        self._notify()

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        state = "dirty" if self._dirty else repr(self._value)
        return f"<Computed{label}={state}>"


class Watcher(_Observer, Generic[T]):
    """
    Deferred reaction to changes of ``source()``.

    ``source`` is evaluated immediately to record its dependencies and the
    starting value; ``callback`` is *not* called for that first value. After
    that, every change of a dependency queues the watcher, and when the queue
    is flushed the source is re-evaluated: ``callback(new_value)`` runs if the
    value differs from the previous one.
    """

    def __init__(
        self,
        source: Callable[[], T],
        callback: Callable[[T], None],
        *,
        name: str | None = None,
    ) -> None:
        super().__init__()
        self._source_fn = source
        self._callback = callback
        self.name = name
        self.active = True
        self._last = self._evaluate(source)

    def _invalidate(self) -> None:
        if self.active:
            _pending_watchers[self] = None

    def _run(self) -> None:
        if not self.active:
            return
        value = self._evaluate(self._source_fn)
        if value == self._last:
            return
        self._last = value
        self._callback(value)

    def dispose(self) -> None:
        """Stop reacting. A disposed watcher never runs its callback again."""
        self.active = False
        self._untrack_all()
        _pending_watchers.pop(self, None)

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"<Watcher{label} active={self.active}>"


def watch(
    source: Callable[[], T], callback: Callable[[T], None], *, name: str | None = None
) -> Watcher[T]:
    """Create a ``Watcher`` calling ``callback`` whenever ``source()`` changes."""
    return Watcher(source, callback, name=name)


@contextmanager
def batch() -> Iterator[None]:
    """
    Group several leaf writes so that watchers run once, after the block.

    Computed values still see every write immediately. Batches nest; the
    pending watchers are flushed when the outermost one exits.
    """
    global _batch_depth
    _batch_depth += 1
    try:
        yield
    finally:
        _batch_depth -= 1
        if _batch_depth == 0:
            _flush_watchers()


def _flush_watchers() -> None:
    global _flushing
    if _flushing:
        # The running flush picks up watchers queued by callbacks
        return
    _flushing = True
    try:
        while _pending_watchers:
            watcher = next(iter(_pending_watchers))
            del _pending_watchers[watcher]
            watcher._run()
    finally:
        _flushing = False
