"""Errors: what goes wrong at registration time and at resolution time.

Arity mismatches fail as soon as the injectable is built. Missing keys,
appends onto non-lists and dependency cycles fail when the service is first
resolved. Every error derives from ``WireboxError``.
"""

from __future__ import annotations

from wirebox import (
    Container,
    WireboxAppendTargetError,
    WireboxArityMismatchError,
    WireboxCircularDependencyError,
    WireboxError,
    WireboxKeyNotFoundError,
    injectable,
)


def main() -> None:
    try:
        injectable("sum", ["a", "b"], lambda a: a)
    except WireboxArityMismatchError as error:
        print(f"arity={error.arity} dependencies={len(error.dependencies)}")  # => arity=1 dependencies=2

    try:
        Container().get("missing")
    except WireboxKeyNotFoundError as error:
        print(f"missing={error.key}")  # => missing=missing

    try:
        Container.provides_value("plugins", "json").append_value("plugins", "csv").get("plugins")
    except WireboxAppendTargetError as error:
        print(f"append_target={type(error.value).__name__}")  # => append_target=str

    looping = Container.provides(injectable("a", ["b"], lambda b: b)).provides(
        injectable("b", ["a"], lambda a: a),
    )
    try:
        looping.get("a")
    except WireboxCircularDependencyError as error:
        print(error)  # => Circular dependency detected while resolving: 'a' -> 'b' -> 'a'

    print(f"base={issubclass(WireboxKeyNotFoundError, WireboxError)}")  # => base=True


if __name__ == "__main__":
    main()
