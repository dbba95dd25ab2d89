"""Scoped copies: re-create selected services for a unit of work.

``copy(scoped_keys)`` shares every service with the source container except
the listed ones, which the copy builds again on first access. Services that
depend on a scoped key and are themselves scoped see the copy's instance.
"""

from __future__ import annotations

import itertools

from wirebox import Container, injectable

_ids = itertools.count(1)


class Engine:
    pass


class Session:
    dependencies = ("engine",)

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.id = next(_ids)


class Repository:
    dependencies = ("session",)

    def __init__(self, session: Session) -> None:
        self.session = session


def main() -> None:
    app = (
        Container.provides(injectable("engine", Engine))
        .provides_class("session", Session)
        .provides_class("repository", Repository)
    )
    print(f"app_session={app.get('session').id}")  # => app_session=1

    request = app.copy(["session", "repository"])
    repository = request.get("repository")
    print(f"request_session={repository.session.id}")  # => request_session=2
    print(f"same_engine={repository.session.engine is app.get('engine')}")  # => same_engine=True

    another = app.copy(["session", "repository"])
    print(f"another_session={another.get('repository').session.id}")  # => another_session=3
    print(f"app_session={app.get('session').id}")  # => app_session=1


if __name__ == "__main__":
    main()
