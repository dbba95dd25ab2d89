"""Pytest fixtures for tests that resolve services from a wirebox container.

Enable the plugin from a root ``conftest.py``::

    pytest_plugins = ["wirebox.integrations.pytest_plugin"]

then override ``wirebox_container`` with the application container. Tests that
must not share some singletons with other tests mark them as scoped::

    @pytest.mark.wirebox_scoped("session")
    def test_login(wirebox_scoped_container: Container) -> None:
        session = wirebox_scoped_container.get("session")
"""

from __future__ import annotations

import pytest

from wirebox.container import Container

WIREBOX_SCOPED_MARKER = "wirebox_scoped"


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``wirebox_scoped`` marker."""
    config.addinivalue_line(
        "markers",
        f"{WIREBOX_SCOPED_MARKER}(*keys): re-create the given keys in wirebox_scoped_container.",
    )


@pytest.fixture()
def wirebox_container() -> Container:
    """Fixture hook for the plugin-managed test container.

    Users must override this fixture in their own test suite to provide the
    container under test.

    """
    msg = (
        "The wirebox pytest plugin requires overriding the 'wirebox_container' fixture in your "
        "test suite. Define @pytest.fixture() def wirebox_container() -> Container: ... "
        "and return a configured container."
    )
    raise RuntimeError(msg)


@pytest.fixture()
def wirebox_scoped_container(
    request: pytest.FixtureRequest,
    wirebox_container: Container,
) -> Container:
    """Return a copy of ``wirebox_container`` that re-creates the marked keys.

    Keys come from every ``@pytest.mark.wirebox_scoped(*keys)`` marker applied to
    the test, its class or its module. Without markers the copy shares every
    service with ``wirebox_container``.

    """
    scoped_keys: list[object] = []
    for marker in request.node.iter_markers(WIREBOX_SCOPED_MARKER):
        scoped_keys.extend(key for key in marker.args if key not in scoped_keys)
    return wirebox_container.copy(scoped_keys)
