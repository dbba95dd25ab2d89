"""Test helpers shared across wirebox test modules."""

from collections.abc import Callable
from typing import Any


class CallCounter:
    """Wrap a function and record every call made through the wrapper."""

    def __init__(self, fn: Callable[..., Any]) -> None:
        self.fn = fn
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self.fn(*args)

    @property
    def call_count(self) -> int:
        return len(self.calls)
