from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from typing_extensions import Self

from wirebox._internal.hybrid_method import hybridmethod
from wirebox.exceptions import WireboxInvalidArgumentsError, WireboxKeyNotFoundError
from wirebox.injectable import (
    Injectable,
    class_injectable,
    concat_injectable,
    value_injectable,
)
from wirebox.lock_mode import LockMode
from wirebox.memoize import MemoizedFactory, is_memoized, memoize
from wirebox.partial_container import PartialContainer
from wirebox.types import CONTAINER, Delegate, Key

logger = logging.getLogger(__name__)


class Container:
    """Resolve lazily-built singleton services by key.

    A container is an immutable mapping from key to ``MemoizedFactory``. Every
    registration method returns a new container and leaves the receiver
    untouched; the only state that changes after construction is each memoized
    factory's cache slot and ``owner`` cell.

    Build containers by chaining registrations. ``provides``,
    ``provides_value`` and ``provides_class`` also work on the class itself,
    starting from an empty container::

        container = (
            Container.provides_value("host", "localhost")
            .provides(injectable("database", ["host"], Database))
            .provides(injectable("repository", ["database"], Repository))
        )
        repository = container.get("repository")

    Registering a key again overrides it. When the new factory lists its own
    key as a dependency it receives the value of the previous definition, which
    lets a service decorate its predecessor.

    The reserved key ``CONTAINER`` resolves to the container itself, so
    ``CONTAINER in container`` is always true even though ``keys()`` and
    ``len()`` only cover registered services.
    """

    def __init__(
        self,
        factories: Mapping[Key, MemoizedFactory | Delegate] | None = None,
        *,
        lock_mode: LockMode = LockMode.THREAD,
    ) -> None:
        """Initialize a container from memoized factories or plain delegates.

        Args:
            factories: Mapping of key to either a ``MemoizedFactory`` (shared as
                is and re-owned by this container) or a delegate
                ``Callable[[Container], Any]`` (wrapped in a fresh memoized
                factory bound to this container).
            lock_mode: Locking strategy for cache slots of factories created for
                this container and every container derived from it.

        """
        self._lock_mode = lock_mode
        memoized: dict[Key, MemoizedFactory] = {}
        for key, factory in (factories or {}).items():
            if is_memoized(factory):
                # Shared factories resolve against the newest container so overrides
                # provided later are visible to them.
                factory.owner = self
                memoized[key] = factory
            else:
                memoized[key] = memoize(self, factory, key=key, lock_mode=lock_mode)
        self._factories: Mapping[Key, MemoizedFactory] = MappingProxyType(memoized)

    @classmethod
    def empty(cls) -> Self:
        """Return a container without services."""
        return cls()

    @classmethod
    def from_mapping(
        cls,
        services: Mapping[Key, Any],
        *,
        lock_mode: LockMode = LockMode.THREAD,
    ) -> Self:
        """Build a container providing each mapping value under its key.

        Args:
            services: Literal values keyed by the key they should be provided under.
            lock_mode: Locking strategy for the container and those derived from it.

        """
        return cls(
            {key: _constant(value) for key, value in services.items()},
            lock_mode=lock_mode,
        )

    @property
    def factories(self) -> Mapping[Key, MemoizedFactory]:
        """Read-only view of the memoized factories keyed by service key."""
        return self._factories

    @property
    def lock_mode(self) -> LockMode:
        """Locking strategy inherited by derived containers."""
        return self._lock_mode

    def get(self, key: Key) -> Any:
        """Return the singleton service for ``key``, building it on first access.

        Dependencies are resolved recursively through the memoized factories.
        Requesting ``CONTAINER`` returns this container.

        Args:
            key: The key of the service to resolve.

        Raises:
            WireboxKeyNotFoundError: If ``key`` is not provided by this container.
            WireboxCircularDependencyError: If resolution re-enters a service that
                is still being built.

        """
        if key == CONTAINER:
            return self
        factory = self._factories.get(key)
        if factory is None:
            raise WireboxKeyNotFoundError(key)
        return factory()

    @hybridmethod
    def provides(self, item: Injectable | Container | PartialContainer) -> Container:
        """Return a new container that also provides ``item``.

        Args:
            item: An ``Injectable`` to add one service, or a ``Container`` or
                ``PartialContainer`` to merge. On key collisions the incoming
                definitions win. Services of a merged ``Container`` share their
                cache with the source; services of a ``PartialContainer`` are
                memoized freshly for the new container.

        Raises:
            WireboxInvalidArgumentsError: If ``item`` is of an unsupported type.

        """
        if isinstance(item, PartialContainer):
            return self._merged_with(item.bind(self))
        if isinstance(item, Container):
            logger.debug("Merging container with keys %r", list(item.keys()))
            return self._merged_with(item.factories)
        if isinstance(item, Injectable):
            return self._provides_service(item)

        msg = (
            "Container.provides expects an Injectable, a Container or a PartialContainer, "
            f"got {type(item).__name__}."
        )
        raise WireboxInvalidArgumentsError(msg)

    @hybridmethod
    def provides_value(self, key: Key, value: Any) -> Container:
        """Return a new container providing ``value`` under ``key``."""
        return self._provides_service(value_injectable(key, value))

    @hybridmethod
    def provides_class(self, key: Key, cls: type[Any]) -> Container:
        """Return a new container providing an instance of ``cls`` under ``key``.

        Constructor arguments are resolved from the keys in ``cls.dependencies``.
        """
        return self._provides_service(class_injectable(key, cls))

    def append(self, item: Injectable) -> Container:
        """Return a new container whose list under ``item.key`` gains ``item``'s value.

        The list registered so far (including earlier appends) is resolved
        first, then the injectable's own dependencies.
        """
        if not isinstance(item, Injectable):
            msg = f"Container.append expects an Injectable, got {type(item).__name__}."
            raise WireboxInvalidArgumentsError(msg)
        return self._provides_service(concat_injectable(item.key, item.dependencies, item.fn))

    def append_value(self, key: Key, value: Any) -> Container:
        """Return a new container whose list under ``key`` gains ``value``."""
        return self._provides_service(concat_injectable(key, value_injectable(key, value).fn))

    def append_class(self, key: Key, cls: type[Any]) -> Container:
        """Return a new container whose list under ``key`` gains an instance of ``cls``."""
        item = class_injectable(key, cls)
        return self._provides_service(concat_injectable(key, item.dependencies, item.fn))

    def copy(self, scoped_keys: Iterable[Key] = ()) -> Container:
        """Return a copy that re-creates the services listed in ``scoped_keys``.

        Services not listed are shared with this container, cache included.
        Listed services are re-memoized from their original delegate, so the
        copy builds its own instance on first access.

        Args:
            scoped_keys: Keys whose services should be independent in the copy.

        Raises:
            WireboxKeyNotFoundError: If a scoped key is not provided.
            WireboxInvalidArgumentsError: If ``scoped_keys`` is a single string.

        """
        if isinstance(scoped_keys, str | bytes):
            msg = "Container.copy expects an iterable of keys, not a single string."
            raise WireboxInvalidArgumentsError(msg)

        factories: dict[Key, MemoizedFactory | Delegate] = dict(self._factories)
        scoped = list(scoped_keys)
        for key in scoped:
            factory = self._factories.get(key)
            if factory is None:
                raise WireboxKeyNotFoundError(key)
            factories[key] = factory.delegate
        if scoped:
            logger.debug("Copying container with scoped keys %r", scoped)
        return Container(factories, lock_mode=self._lock_mode)

    def run(self, item: Injectable | PartialContainer) -> Self:
        """Eagerly resolve ``item`` for its side effects and return this container.

        Args:
            item: An ``Injectable`` to resolve, or a ``PartialContainer`` whose
                keys are all resolved. Neither is added to this container.

        Raises:
            WireboxInvalidArgumentsError: If ``item`` is of an unsupported type.

        """
        if isinstance(item, PartialContainer):
            runnable = self.provides(item)
            for key in item.keys():
                runnable.get(key)
        elif isinstance(item, Injectable):
            self.provides(item).get(item.key)
        else:
            msg = (
                "Container.run expects an Injectable or a PartialContainer, "
                f"got {type(item).__name__}."
            )
            raise WireboxInvalidArgumentsError(msg)
        return self

    def keys(self) -> Iterator[Key]:
        """Iterate over the provided keys in registration order."""
        return iter(self._factories)

    def __contains__(self, key: object) -> bool:
        return key == CONTAINER or key in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        return f"Container(keys={list(self._factories)!r})"

    def _provides_service(self, item: Injectable) -> Container:
        key = item.key
        dependencies = item.dependencies
        # The receiver is the frozen snapshot a self-dependency resolves against.
        previous = self

        def delegate(owner: Container) -> Any:
            return item(
                *[
                    previous.get(dependency) if dependency == key else owner.get(dependency)
                    for dependency in dependencies
                ],
            )

        if item.depends_on_itself:
            logger.debug("Providing key %r on top of its previous definition", key)
        else:
            logger.debug("Providing key %r", key)
        return Container({**self._factories, key: delegate}, lock_mode=self._lock_mode)

    def _merged_with(self, factories: Mapping[Key, MemoizedFactory]) -> Container:
        return Container({**self._factories, **factories}, lock_mode=self._lock_mode)


def _constant(value: Any) -> Delegate:
    def delegate(_owner: Container) -> Any:
        return value

    return delegate
