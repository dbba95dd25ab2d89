"""Overrides: re-register a key to replace or decorate its previous definition.

A factory that lists its own key as a dependency receives the value of the
definition it replaces. Services registered earlier see the override as long
as they have not been built yet; once built, their cached instance is kept.
"""

from __future__ import annotations

from wirebox import Container, injectable


def build() -> Container:
    return Container.provides_value("greeting", "hello").provides(
        injectable("message", ["greeting"], lambda greeting: f"{greeting}, world"),
    )


def main() -> None:
    replaced = build().provides_value("greeting", "hi")
    print(replaced.get("message"))  # => hi, world

    decorated = build().provides(
        injectable("message", ["message"], lambda message: message.upper()),
    )
    print(decorated.get("message"))  # => HELLO, WORLD

    base = build()
    print(base.get("message"))  # => hello, world

    late = base.provides_value("greeting", "hey")
    print(late.get("greeting"))  # => hey
    print(late.get("message"))  # => hello, world


if __name__ == "__main__":
    main()
