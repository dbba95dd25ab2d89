from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, Generic, TypeVar

R = TypeVar("R")


class hybridmethod(Generic[R]):  # noqa: N801
    """Expose a method on both the class and its instances.

    Accessed on an instance it behaves like a regular method. Accessed on the
    class it binds to ``owner.empty()``, so ``Container.provides(...)`` reads
    as "an empty container that provides ...".
    """

    def __init__(self, func: Callable[..., R]) -> None:
        self.func = func
        functools.update_wrapper(self, func)  # type: ignore[arg-type]

    def __get__(self, instance: Any, owner: type[Any]) -> Callable[..., R]:
        if instance is None:
            instance = owner.empty()
        return self.func.__get__(instance, owner)
