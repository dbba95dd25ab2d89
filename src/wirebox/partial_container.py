"""Groups of services defined independently of where their dependencies come from.

A ``PartialContainer`` holds un-memoized injectables and tracks which keys it
still needs from outside. It cannot resolve anything on its own; providing it
to a ``Container`` binds every injectable against that container and memoizes
it for that destination only.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from wirebox._internal.hybrid_method import hybridmethod
from wirebox.exceptions import WireboxInvalidArgumentsError
from wirebox.injectable import Injectable, class_injectable, value_injectable
from wirebox.memoize import MemoizedFactory, memoize
from wirebox.types import CONTAINER, Delegate, Key

if TYPE_CHECKING:
    from wirebox.container import Container

logger = logging.getLogger(__name__)


class PartialContainer:
    """Hold injectables whose dependencies are satisfied later by a ``Container``.

    ``required_keys`` lists the keys a destination container must provide. A
    dependency of an injectable on its own key is always external: it refers to
    the definition already present in the container this partial container is
    provided to.

    Example::

        http = (
            PartialContainer.provides(injectable("client", ["base_url"], HttpClient))
            .provides(injectable("api", ["client"], Api))
        )
        http.required_keys  # frozenset({"base_url"})

        container = Container.provides_value("base_url", "https://example.org").provides(http)
        container.get("api")
    """

    def __init__(self, injectables: Mapping[Key, Injectable] | None = None) -> None:
        """Initialize a partial container from injectables keyed by their key.

        Args:
            injectables: Injectables in registration order. Required keys are
                computed as if each injectable had been provided in turn.

        """
        items: dict[Key, Injectable] = {}
        required: frozenset[Key] = frozenset()
        for key, item in (injectables or {}).items():
            if not isinstance(item, Injectable):
                msg = (
                    f"PartialContainer expects Injectable values, got {type(item).__name__} "
                    f"for key {key!r}."
                )
                raise WireboxInvalidArgumentsError(msg)
            if item.key != key:
                msg = f"Injectable for key {item.key!r} is registered under key {key!r}."
                raise WireboxInvalidArgumentsError(msg)
            required = _required_after(required, items, item)
            items[key] = item
        self._injectables: Mapping[Key, Injectable] = MappingProxyType(items)
        self._required_keys = required

    @classmethod
    def empty(cls) -> Self:
        """Return a partial container without injectables."""
        return cls()

    @property
    def injectables(self) -> Mapping[Key, Injectable]:
        """Read-only view of the injectables keyed by service key."""
        return self._injectables

    @property
    def required_keys(self) -> frozenset[Key]:
        """Keys that must be provided by the container this is bound to."""
        return self._required_keys

    @hybridmethod
    def provides(self, item: Injectable) -> PartialContainer:
        """Return a new partial container that also provides ``item``.

        Raises:
            WireboxInvalidArgumentsError: If ``item`` is not an ``Injectable``.

        """
        if not isinstance(item, Injectable):
            msg = f"PartialContainer.provides expects an Injectable, got {type(item).__name__}."
            raise WireboxInvalidArgumentsError(msg)

        partial = PartialContainer()
        partial._injectables = MappingProxyType({**self._injectables, item.key: item})
        partial._required_keys = _required_after(self._required_keys, self._injectables, item)
        return partial

    @hybridmethod
    def provides_value(self, key: Key, value: Any) -> PartialContainer:
        """Return a new partial container providing ``value`` under ``key``."""
        return self.provides(value_injectable(key, value))

    @hybridmethod
    def provides_class(self, key: Key, cls: type[Any]) -> PartialContainer:
        """Return a new partial container providing an instance of ``cls`` under ``key``."""
        return self.provides(class_injectable(key, cls))

    def bind(self, parent: Container) -> dict[Key, MemoizedFactory]:
        """Memoize every injectable against ``parent``.

        Each call produces independent caches. A dependency resolves from
        ``parent`` when it is the injectable's own key, from the sibling
        memoized factory when this partial container defines it, and from
        ``parent`` otherwise.

        Args:
            parent: The container supplying external dependencies.

        Returns:
            Memoized factories keyed by service key, ready to be merged into a
            container.

        """
        logger.debug("Binding partial container keys %r", self.keys())
        factories: dict[Key, MemoizedFactory] = {}
        for key, item in self._injectables.items():
            factories[key] = memoize(
                parent,
                _bound_delegate(item, parent, factories),
                key=key,
                lock_mode=parent.lock_mode,
            )
        return factories

    def keys(self) -> list[Key]:
        """Return the keys defined by this partial container in registration order."""
        return list(self._injectables)

    def __contains__(self, key: object) -> bool:
        return key in self._injectables

    def __len__(self) -> int:
        return len(self._injectables)

    def __repr__(self) -> str:
        return (
            f"PartialContainer(keys={self.keys()!r}, "
            f"required_keys={sorted(map(repr, self._required_keys))})"
        )


def _required_after(
    required: Iterable[Key],
    defined: Mapping[Key, Injectable],
    item: Injectable,
) -> frozenset[Key]:
    key = item.key
    added = {
        dependency
        for dependency in item.dependencies
        if dependency == key or dependency not in defined
    }
    return frozenset(({*required} - {key}) | added) - {CONTAINER}


def _bound_delegate(
    item: Injectable,
    parent: Container,
    siblings: Mapping[Key, MemoizedFactory],
) -> Delegate:
    key = item.key

    def delegate(_owner: Container) -> Any:
        args = []
        for dependency in item.dependencies:
            if dependency == key:
                args.append(parent.get(dependency))
            elif dependency in siblings:
                args.append(siblings[dependency]())
            else:
                args.append(parent.get(dependency))
        return item(*args)

    return delegate
