from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

from wirebox.exceptions import WireboxCircularDependencyError

if TYPE_CHECKING:
    from wirebox.memoize import MemoizedFactory

# Context variable for resolution tracking. Threads start from an empty context,
# so every thread gets its own stack.
_resolution_stack: ContextVar[tuple[MemoizedFactory, ...]] = ContextVar(
    "wirebox_resolution_stack",
    default=(),
)


def current_stack() -> tuple[MemoizedFactory, ...]:
    """Return memoized factories being resolved in the current context, outermost first."""
    return _resolution_stack.get()


@contextmanager
def resolving(factory: MemoizedFactory) -> Iterator[None]:
    """Track ``factory`` as being resolved for the duration of the block.

    Raises:
        WireboxCircularDependencyError: If ``factory`` is already being resolved
            in the current context.

    """
    stack = _resolution_stack.get()
    if any(entry is factory for entry in stack):
        start = next(index for index, entry in enumerate(stack) if entry is factory)
        keys = tuple(entry.key for entry in stack[start:]) + (factory.key,)
        raise WireboxCircularDependencyError(keys)

    token = _resolution_stack.set((*stack, factory))
    try:
        yield
    finally:
        _resolution_stack.reset(token)
