"""Factory records and their constructors.

An ``Injectable`` pairs a callable with the key it provides and the ordered
keys of its dependencies. Arity is checked when the record is built, so a
mismatched dependency list fails at import time of the module declaring it
rather than on first resolution.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from inspect import Parameter
from typing import Any, overload

from wirebox.exceptions import (
    WireboxAppendTargetError,
    WireboxArityMismatchError,
    WireboxInvalidArgumentsError,
)
from wirebox.types import Key

logger = logging.getLogger(__name__)

_POSITIONAL_KINDS = (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)


@dataclass(frozen=True, slots=True)
class Injectable:
    """A factory function tagged with its key and dependency keys.

    Calling the record calls ``fn`` with the resolved dependency values in the
    order of ``dependencies``. A dependency equal to ``key`` refers to the
    previous definition of the same key in the container it is provided to.
    """

    key: Key
    """The key this factory provides."""
    dependencies: tuple[Key, ...]
    """Ordered keys whose resolved values are passed positionally to ``fn``."""
    fn: Callable[..., Any]
    """The constructor function."""

    def __call__(self, *args: Any) -> Any:
        return self.fn(*args)

    @property
    def depends_on_itself(self) -> bool:
        """Return whether the factory receives the previous value of its own key."""
        return self.key in self.dependencies


@overload
def injectable(key: Key, fn: Callable[[], Any], /) -> Injectable: ...


@overload
def injectable(
    key: Key,
    dependencies: Sequence[Key],
    fn: Callable[..., Any],
    /,
) -> Injectable: ...


def injectable(
    key: Key,
    dependencies_or_fn: Sequence[Key] | Callable[..., Any] | None = None,
    maybe_fn: Callable[..., Any] | None = None,
    /,
) -> Injectable:
    """Build an ``Injectable`` for ``key``.

    Call it as ``injectable(key, fn)`` for a factory without dependencies, or
    as ``injectable(key, dependencies, fn)`` where ``fn`` takes one positional
    argument per dependency key.

    Args:
        key: The key the factory provides.
        dependencies_or_fn: Either the dependency keys or the factory function.
        maybe_fn: The factory function when dependency keys are given.

    Raises:
        WireboxInvalidArgumentsError: If no factory function is supplied or the
            dependency keys are not a list or tuple.
        WireboxArityMismatchError: If ``fn`` cannot accept the dependencies.

    """
    dependencies, fn = _split_arguments("injectable", dependencies_or_fn, maybe_fn)
    validate_arity(key, dependencies, fn)
    return Injectable(key=key, dependencies=dependencies, fn=fn)


def class_injectable(key: Key, cls: type[Any]) -> Injectable:
    """Build an ``Injectable`` that instantiates ``cls``.

    Dependency keys are read from the class attribute ``dependencies`` (empty
    when absent) and must match the constructor parameters::

        class Repository:
            dependencies = ("database",)

            def __init__(self, database: Database) -> None:
                self.database = database

    """
    if not inspect.isclass(cls):
        msg = f"class_injectable expects a class for key {key!r}, got {cls!r}."
        raise WireboxInvalidArgumentsError(msg)
    dependencies = _as_dependency_tuple("class_injectable", getattr(cls, "dependencies", ()))
    validate_arity(key, dependencies, cls)
    return Injectable(key=key, dependencies=dependencies, fn=cls)


@overload
def concat_injectable(key: Key, fn: Callable[[], Any], /) -> Injectable: ...


@overload
def concat_injectable(
    key: Key,
    dependencies: Sequence[Key],
    fn: Callable[..., Any],
    /,
) -> Injectable: ...


def concat_injectable(
    key: Key,
    dependencies_or_fn: Sequence[Key] | Callable[..., Any] | None = None,
    maybe_fn: Callable[..., Any] | None = None,
    /,
) -> Injectable:
    """Build an ``Injectable`` that appends one element to the list under ``key``.

    The resulting factory depends on ``key`` itself first, followed by the
    given dependencies. On resolution it takes the previous list, computes
    ``fn(*dependencies)`` and returns a new list with that element appended.

    Raises:
        WireboxInvalidArgumentsError: If no factory function is supplied.
        WireboxArityMismatchError: If ``fn`` cannot accept the dependencies.

    """
    dependencies, fn = _split_arguments("concat_injectable", dependencies_or_fn, maybe_fn)
    validate_arity(key, dependencies, fn)

    def concat(previous: Any, *args: Any) -> list[Any]:
        if not isinstance(previous, list | tuple):
            raise WireboxAppendTargetError(key, previous)
        return [*previous, fn(*args)]

    return Injectable(key=key, dependencies=(key, *dependencies), fn=concat)


def value_injectable(key: Key, value: Any) -> Injectable:
    """Build a zero-dependency ``Injectable`` that always returns ``value``."""

    def provide_value() -> Any:
        return value

    return Injectable(key=key, dependencies=(), fn=provide_value)


def is_injectable(candidate: object) -> bool:
    """Return true when candidate is an ``Injectable`` record."""
    return isinstance(candidate, Injectable)


def validate_arity(key: Key, dependencies: tuple[Key, ...], fn: Callable[..., Any]) -> None:
    """Check that ``fn`` accepts exactly one positional argument per dependency.

    Positional parameters with defaults and ``*args`` may absorb extra
    dependencies. Required keyword-only parameters can never be satisfied.
    Callables without an introspectable signature are accepted as is.

    Raises:
        WireboxArityMismatchError: If the signature does not fit.

    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        logger.debug("Skipping arity validation for key %r: no signature for %r", key, fn)
        return

    parameters = tuple(signature.parameters.values())
    positional = [parameter for parameter in parameters if parameter.kind in _POSITIONAL_KINDS]
    required = [parameter for parameter in positional if parameter.default is Parameter.empty]
    accepts_var_positional = any(
        parameter.kind is Parameter.VAR_POSITIONAL for parameter in parameters
    )
    has_required_keyword_only = any(
        parameter.kind is Parameter.KEYWORD_ONLY and parameter.default is Parameter.empty
        for parameter in parameters
    )

    count = len(dependencies)
    if (
        has_required_keyword_only
        or count < len(required)
        or (count > len(positional) and not accepts_var_positional)
    ):
        raise WireboxArityMismatchError(
            key,
            len(required),
            dependencies,
            max_arity=None if accepts_var_positional else len(positional),
        )


def _split_arguments(
    helper_name: str,
    dependencies_or_fn: Sequence[Key] | Callable[..., Any] | None,
    maybe_fn: Callable[..., Any] | None,
) -> tuple[tuple[Key, ...], Callable[..., Any]]:
    if callable(dependencies_or_fn) and maybe_fn is None:
        return (), dependencies_or_fn

    if dependencies_or_fn is None or not callable(maybe_fn):
        msg = (
            f"[{helper_name}] Received invalid arguments. The factory function must be either "
            "the second or third argument."
        )
        raise WireboxInvalidArgumentsError(msg)

    return _as_dependency_tuple(helper_name, dependencies_or_fn), maybe_fn


def _as_dependency_tuple(helper_name: str, dependencies: object) -> tuple[Key, ...]:
    if not isinstance(dependencies, list | tuple):
        msg = (
            f"[{helper_name}] Dependencies must be a list or tuple of keys, "
            f"got {type(dependencies).__name__}."
        )
        raise WireboxInvalidArgumentsError(msg)
    return tuple(dependencies)


__all__ = [
    "Injectable",
    "class_injectable",
    "concat_injectable",
    "injectable",
    "is_injectable",
    "validate_arity",
    "value_injectable",
]
