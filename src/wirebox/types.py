from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any, Final, TypeAlias, TypeVar

if TYPE_CHECKING:
    from wirebox.container import Container

T = TypeVar("T")

Key: TypeAlias = Hashable
"""A unique, hashable identifier of a service. Equality is by value."""

Delegate: TypeAlias = "Callable[[Container], Any]"
"""An un-memoized factory body that resolves its arguments against the given container."""

CONTAINER: Final = "$container"
"""Reserved key that resolves to the container performing the resolution.

Use it as a dependency when a service needs to look up other services
dynamically::

    container = Container.provides_value("value", 1).provides(
        injectable("service", [CONTAINER], lambda c: c.get("value") + 1),
    )
    container.get("service")  # 2
"""
