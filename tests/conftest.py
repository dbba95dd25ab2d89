"""Shared pytest fixtures for wirebox tests."""

import pytest

from wirebox.container import Container
from wirebox.lock_mode import LockMode
from wirebox.partial_container import PartialContainer

pytest_plugins = ["pytester", "wirebox.integrations.pytest_plugin"]


@pytest.fixture()
def container() -> Container:
    """Empty container with the default lock mode."""
    return Container()


@pytest.fixture()
def container_unlocked() -> Container:
    """Empty container without cache-slot locking."""
    return Container(lock_mode=LockMode.NONE)


@pytest.fixture()
def partial_container() -> PartialContainer:
    """Empty partial container."""
    return PartialContainer()
