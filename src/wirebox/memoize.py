"""Single-assignment caching for factory delegates.

A ``MemoizedFactory`` is the unit a ``Container`` stores per key. It keeps the
un-memoized delegate around so scoped copies can re-wrap it, and exposes its
``owner`` as a swappable cell so merges can re-target dependency resolution at
the newest container without rebuilding closures.
"""

from __future__ import annotations

import logging
import threading
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING, Any, TypeGuard

from wirebox._internal.resolution_stack import resolving
from wirebox.lock_mode import LockMode

if TYPE_CHECKING:
    from wirebox.container import Container
    from wirebox.types import Delegate, Key

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class MemoizedFactory:
    """Cache the result of a delegate so it runs at most once.

    The delegate is called with ``owner`` on first access. ``None`` is a valid
    cached value; emptiness is tracked with a private sentinel.
    """

    __slots__ = ("_lock", "_value", "delegate", "key", "owner")

    def __init__(
        self,
        owner: Container | None,
        delegate: Delegate,
        *,
        key: Key = None,
        lock_mode: LockMode = LockMode.THREAD,
    ) -> None:
        self.owner = owner
        self.delegate = delegate
        self.key = key
        self._value: Any = _UNSET
        self._lock: AbstractContextManager[Any] = (
            threading.Lock() if lock_mode is LockMode.THREAD else nullcontext()
        )

    @property
    def is_resolved(self) -> bool:
        """Return whether the cache slot is occupied."""
        return self._value is not _UNSET

    def __call__(self) -> Any:
        value = self._value
        if value is not _UNSET:
            return value

        # The cycle check runs before the lock: re-entry from the same thread
        # would otherwise block on a lock it already holds.
        with resolving(self), self._lock:
            if self._value is _UNSET:
                self._value = self.delegate(self.owner)
                logger.debug("Resolved service for key %r", self.key)
            return self._value

    def __repr__(self) -> str:
        state = "resolved" if self.is_resolved else "pending"
        return f"MemoizedFactory(key={self.key!r}, {state})"


def memoize(
    owner: Container | None,
    delegate: Delegate,
    *,
    key: Key = None,
    lock_mode: LockMode = LockMode.THREAD,
) -> MemoizedFactory:
    """Wrap ``delegate`` in a fresh ``MemoizedFactory`` bound to ``owner``."""
    return MemoizedFactory(owner, delegate, key=key, lock_mode=lock_mode)


def is_memoized(candidate: object) -> TypeGuard[MemoizedFactory]:
    """Return true when candidate is a memoized factory."""
    return isinstance(candidate, MemoizedFactory)


__all__ = ["MemoizedFactory", "is_memoized", "memoize"]
