from __future__ import annotations

from typing import Any


class WireboxError(Exception):
    """Represent a base class for all wirebox-specific failures.

    Catch this type when you want to handle any wirebox error path without
    matching each concrete exception class individually.
    """


class WireboxKeyNotFoundError(WireboxError):
    """Signal that a key has no registered factory.

    Raised by ``Container.get`` and ``Container.copy`` when the requested key
    was never provided. This is a configuration bug, not a recoverable state.

    Typical fixes include providing the missing key before resolution, or
    checking that key constants are initialized before they are used in a
    dependency list.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        msg = (
            f"Could not find a service for key {key!r}. Make sure it is provided before the "
            "container is used, and that every dependency key is defined before the injectable "
            "that refers to it is built."
        )
        super().__init__(msg)


class WireboxArityMismatchError(WireboxError):
    """Signal a factory whose signature does not fit its dependency keys.

    Raised by ``injectable``, ``class_injectable`` and ``concat_injectable``
    when the callable cannot accept one positional argument per dependency key.
    """

    def __init__(
        self,
        key: Any,
        arity: int,
        dependencies: tuple[Any, ...],
        *,
        max_arity: int | None,
    ) -> None:
        self.key = key
        self.arity = arity
        self.max_arity = max_arity
        self.dependencies = dependencies
        msg = (
            f"Function arity does not match the number of dependencies for key {key!r}. "
            f"Function {_describe_arity(self.arity, self.max_arity)}, but {len(dependencies)} "
            f"dependencies were specified. Dependencies: {list(dependencies)!r}"
        )
        super().__init__(msg)


def _describe_arity(arity: int, max_arity: int | None) -> str:
    if max_arity is None:
        return f"accepts at least {arity} positional arguments"
    if max_arity == arity:
        return f"has arity {arity}"
    return f"accepts {arity} to {max_arity} positional arguments"


class WireboxInvalidArgumentsError(WireboxError):
    """Signal malformed arguments passed to a registration helper.

    Raised when a factory function is missing, when a dependency list is not a
    list or tuple, or when ``provides``/``run`` receive an object that is not an
    injectable or a container.
    """


class WireboxAppendTargetError(WireboxError):
    """Signal an append onto a service that is not a list or tuple.

    Raised on resolution of an appended key whose previous value cannot be
    extended. Typical fix is providing an initial list under the key, for
    example ``Container.provides_value("plugins", [])``.
    """

    def __init__(self, key: Any, value: Any) -> None:
        self.key = key
        self.value = value
        msg = (
            f"Cannot append to key {key!r}: the current value is {type(value).__name__}, "
            "expected a list or tuple."
        )
        super().__init__(msg)


class WireboxCircularDependencyError(WireboxError):
    """Signal that resolving a key re-entered itself.

    Only the explicit self-override pattern (a factory depending on its own
    key) is supported. Any other loop in the dependency graph is reported with
    the chain of keys that formed it.
    """

    def __init__(self, keys: tuple[Any, ...]) -> None:
        self.keys = keys
        chain = " -> ".join(repr(key) for key in keys)
        msg = f"Circular dependency detected while resolving: {chain}"
        super().__init__(msg)
