"""Partial containers: define a reusable group of services with open dependencies.

A partial container knows which keys it still needs from outside. Providing
it to a container binds its services there; every destination container gets
its own instances.
"""

from __future__ import annotations

from wirebox import Container, PartialContainer, injectable


class HttpClient:
    dependencies = ("base_url",)

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url


class UsersApi:
    dependencies = ("http_client",)

    def __init__(self, client: HttpClient) -> None:
        self.url = f"{client.base_url}/users"


def main() -> None:
    http = PartialContainer.provides_class("http_client", HttpClient).provides_class(
        "users_api",
        UsersApi,
    )
    print(f"required={sorted(http.required_keys)}")  # => required=['base_url']

    production = Container.provides_value("base_url", "https://api.example.org").provides(http)
    staging = Container.provides_value("base_url", "https://staging.example.org").provides(http)

    print(production.get("users_api").url)  # => https://api.example.org/users
    print(staging.get("users_api").url)  # => https://staging.example.org/users

    shared = production.get("http_client") is staging.get("http_client")
    print(f"shared_client={shared}")  # => shared_client=False

    versioning = PartialContainer.provides(
        injectable("base_url", ["base_url"], lambda url: f"{url}/v2"),
    )
    versioned = production.provides(versioning).provides(http)
    print(versioned.get("users_api").url)  # => https://api.example.org/v2/users


if __name__ == "__main__":
    main()
