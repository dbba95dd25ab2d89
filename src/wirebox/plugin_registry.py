from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

PluginObserver = Callable[[T], None]

logger = logging.getLogger(__name__)


class PluginRegistry(Generic[T]):
    """Collect plugins and notify observers as they are registered.

    Observers are called synchronously, in the order they were added, for every
    plugin registered after they subscribed. Plugins registered earlier are not
    replayed. Use ``list_plugins`` to catch up on those.

    A registry is typically provided as a service so several modules can
    contribute plugins to it::

        container = Container.provides_value("formatters", PluginRegistry[Formatter]())
        container.get("formatters").register(JsonFormatter())
    """

    def __init__(self) -> None:
        self._plugins: list[T] = []
        self._observers: list[PluginObserver[T]] = []

    def register(self, plugin: T) -> None:
        """Add ``plugin`` and notify every observer."""
        self._plugins.append(plugin)
        logger.debug("Registered plugin %r", plugin)
        for observer in list(self._observers):
            observer(plugin)

    def observe(self, observer: PluginObserver[T]) -> None:
        """Call ``observer`` for every plugin registered from now on."""
        self._observers.append(observer)

    def list_plugins(self) -> list[T]:
        """Return the registered plugins in registration order."""
        return list(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)
