from wirebox.container import Container
from wirebox.exceptions import (
    WireboxAppendTargetError,
    WireboxArityMismatchError,
    WireboxCircularDependencyError,
    WireboxError,
    WireboxInvalidArgumentsError,
    WireboxKeyNotFoundError,
)
from wirebox.injectable import (
    Injectable,
    class_injectable,
    concat_injectable,
    injectable,
    is_injectable,
    value_injectable,
)
from wirebox.lock_mode import LockMode
from wirebox.memoize import MemoizedFactory, is_memoized, memoize
from wirebox.partial_container import PartialContainer
from wirebox.plugin_registry import PluginRegistry
from wirebox.types import CONTAINER, Key

__all__ = [
    "CONTAINER",
    "Container",
    "Injectable",
    "Key",
    "LockMode",
    "MemoizedFactory",
    "PartialContainer",
    "PluginRegistry",
    "WireboxAppendTargetError",
    "WireboxArityMismatchError",
    "WireboxCircularDependencyError",
    "WireboxError",
    "WireboxInvalidArgumentsError",
    "WireboxKeyNotFoundError",
    "class_injectable",
    "concat_injectable",
    "injectable",
    "is_injectable",
    "is_memoized",
    "memoize",
    "value_injectable",
]
