"""Multibinding: contribute elements to a list service from several places.

Start from an initial list, then ``append_value``, ``append_class`` or
``append`` elements to it. Elements keep registration order and may have
their own dependencies. A ``PluginRegistry`` service covers the case where
contributors run for their side effects instead.
"""

from __future__ import annotations

from wirebox import Container, PluginRegistry, injectable


class JsonFormatter:
    dependencies = ("indent",)

    def __init__(self, indent: int) -> None:
        self.name = f"json(indent={indent})"


def main() -> None:
    container = (
        Container.provides_value("formatters", ["plain"])
        .provides_value("indent", 2)
        .append_value("formatters", "csv")
        .append_class("formatters", JsonFormatter)
        .append(injectable("formatters", ["indent"], lambda indent: f"yaml(indent={indent})"))
    )
    names = [item if isinstance(item, str) else item.name for item in container.get("formatters")]
    print(names)  # => ['plain', 'csv', 'json(indent=2)', 'yaml(indent=2)']

    with_registry = Container.provides(injectable("registry", PluginRegistry))
    registry = with_registry.get("registry")
    registry.observe(lambda plugin: print(f"registered={plugin}"))  # => registered=toml

    with_registry.run(injectable("toml", ["registry"], lambda r: r.register("toml")))
    print(f"plugins={registry.list_plugins()}")  # => plugins=['toml']


if __name__ == "__main__":
    main()
