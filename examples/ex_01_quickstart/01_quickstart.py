"""Quickstart: register services by key and resolve the top-level one.

Each registration returns a new container. Services are built lazily on first
``get`` and cached, so every later lookup returns the same instance.
"""

from __future__ import annotations

from wirebox import Container, injectable


class Database:
    def __init__(self, host: str) -> None:
        self.host = host


class UserRepository:
    dependencies = ("database",)

    def __init__(self, database: Database) -> None:
        self.database = database


class UserService:
    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository


def main() -> None:
    container = (
        Container.provides_value("host", "localhost")
        .provides(injectable("database", ["host"], Database))
        .provides_class("repository", UserRepository)
        .provides(injectable("service", ["repository"], UserService))
    )
    service = container.get("service")

    print(f"db_host={service.repository.database.host}")  # => db_host=localhost

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database
    print(f"same_instance={container.get('service') is service}")  # => same_instance=True
    print(f"keys={list(container.keys())}")  # => keys=['host', 'database', 'repository', 'service']


if __name__ == "__main__":
    main()
