import threading
from datetime import datetime

import pytest

from tests.helpers import CallCounter
from wirebox.container import Container
from wirebox.exceptions import WireboxInvalidArgumentsError, WireboxKeyNotFoundError
from wirebox.injectable import Injectable, injectable
from wirebox.lock_mode import LockMode
from wirebox.memoize import MemoizedFactory
from wirebox.partial_container import PartialContainer
from wirebox.types import CONTAINER


class Database:
    def __init__(self, host: str) -> None:
        self.host = host


class Repository:
    dependencies = ("database",)

    def __init__(self, database: Database) -> None:
        self.database = database


class TestCreatingContainers:
    def test_class_level_provides_starts_from_empty_container(self) -> None:
        service = CallCounter(lambda: "service")

        container = Container.provides(injectable("service", service))

        assert container.get("service") == "service"
        assert list(container.keys()) == ["service"]

    def test_from_mapping_provides_each_value(self) -> None:
        container = Container.from_mapping({"a": 1, "b": "two"})

        assert container.get("a") == 1
        assert container.get("b") == "two"

    def test_class_level_provides_value(self) -> None:
        assert Container.provides_value("value", 42).get("value") == 42

    def test_class_level_provides_class(self) -> None:
        container = Container.provides_value("database", Database("localhost")).provides_class(
            "repository",
            Repository,
        )

        repository = container.get("repository")
        assert isinstance(repository, Repository)
        assert repository.database.host == "localhost"

    def test_constructor_wraps_plain_delegates(self) -> None:
        container = Container({"answer": lambda _container: 42})

        assert isinstance(container.factories["answer"], MemoizedFactory)
        assert container.get("answer") == 42

    def test_constructor_reowns_memoized_factories(self) -> None:
        source = Container.provides_value("value", 1)
        factory = source.factories["value"]

        target = Container({"value": factory})

        assert factory.owner is target
        assert target.factories["value"] is factory

    def test_providing_a_partial_container(self) -> None:
        partial = PartialContainer.provides(injectable("one", lambda: 1)).provides(
            injectable("two", lambda: 2),
        )

        container = Container.provides(partial)

        assert container.get("one") == 1
        assert container.get("two") == 2

    def test_providing_another_container(self) -> None:
        other = Container.provides_value("one", 1).provides_value("two", 2)

        container = Container.provides(other)

        assert container.get("one") == 1
        assert container.get("two") == 2


class TestProvidingServices:
    def test_provides_returns_a_new_container(self, container: Container) -> None:
        with_service = container.provides(injectable("service", lambda: "service"))

        assert with_service is not container
        assert "service" not in container
        assert with_service.get("service") == "service"

    def test_factory_is_called_once(self, container: Container) -> None:
        factory = CallCounter(lambda: object())
        with_service = container.provides(injectable("service", factory))

        first = with_service.get("service")
        second = with_service.get("service")

        assert first is second
        assert factory.call_count == 1

    def test_dependencies_are_resolved_and_called_once(self, container: Container) -> None:
        dependency = CallCounter(lambda: "dependency")
        service = CallCounter(lambda dep: f"{dep} + service")

        with_service = container.provides(injectable("dependency", dependency)).provides(
            injectable("service", ["dependency"], service),
        )

        assert with_service.get("service") == "dependency + service"
        assert with_service.get("service") == "dependency + service"
        assert dependency.call_count == 1
        assert service.call_count == 1

    def test_none_is_cached_like_any_other_value(self, container: Container) -> None:
        factory = CallCounter(lambda: None)
        with_service = container.provides(injectable("nothing", factory))

        assert with_service.get("nothing") is None
        assert with_service.get("nothing") is None
        assert factory.call_count == 1

    def test_provides_rejects_unsupported_items(self, container: Container) -> None:
        with pytest.raises(WireboxInvalidArgumentsError, match="Injectable"):
            container.provides(lambda: 1)  # type: ignore[arg-type]

    def test_lock_mode_is_inherited(self, container_unlocked: Container) -> None:
        derived = container_unlocked.provides_value("a", 1).append_value("list", 2)

        assert derived.lock_mode is LockMode.NONE
        assert derived.copy().lock_mode is LockMode.NONE


class TestOverrides:
    def test_new_service_overwrites_old_service(self, container: Container) -> None:
        old = CallCounter(lambda: "old service")
        new = CallCounter(lambda: "new service")

        overridden = container.provides(injectable("service", old)).provides(
            injectable("service", new),
        )

        assert overridden.get("service") == "new service"
        assert old.call_count == 0

    def test_new_service_may_inject_old_service(self, container: Container) -> None:
        old = CallCounter(lambda: "old service")

        overridden = container.provides(injectable("service", old)).provides(
            injectable("service", ["service"], lambda previous: f"replaced {previous}"),
        )

        assert overridden.get("service") == "replaced old service"
        assert old.call_count == 1

    def test_self_override_chain_can_be_stacked(self, container: Container) -> None:
        chained = (
            container.provides_value("number", 1)
            .provides(injectable("number", ["number"], lambda n: n + 1))
            .provides(injectable("number", ["number"], lambda n: n * 10))
        )

        assert chained.get("number") == 20

    def test_self_override_on_missing_key_fails(self, container: Container) -> None:
        broken = container.provides(injectable("service", ["service"], lambda s: s))

        with pytest.raises(WireboxKeyNotFoundError):
            broken.get("service")

    def test_overriding_value_is_supplied_to_earlier_services(self) -> None:
        container = (
            Container.provides_value("value", 1)
            .provides(injectable("service", ["value"], lambda value: value))
            .provides_value("value", 2)
        )

        assert container.get("service") == 2

    def test_overriding_value_is_ignored_once_service_was_built(self) -> None:
        parent = Container.provides_value("value", 1).provides(
            injectable("service", ["value"], lambda value: value),
        )
        assert parent.get("service") == 1

        child = parent.provides_value("value", 2)

        assert child.get("service") == 1
        assert child.get("value") == 2

    def test_overriding_with_partial_container_and_container(self) -> None:
        parent = Container.provides_value("value", 1)

        assert parent.provides_value("value", "two").get("value") == "two"
        assert (
            parent.provides(PartialContainer.provides_value("value", "three")).get("value")
            == "three"
        )
        assert parent.provides(Container.from_mapping({"value": "four"})).get("value") == "four"
        assert parent.get("value") == 1


class TestMergingContainers:
    def test_merged_services_share_the_cache(self, container: Container) -> None:
        service = CallCounter(lambda: object())
        source = container.provides(injectable("service", service))
        built = source.get("service")

        merged = Container.provides_value("other", 1).provides(source)

        assert merged.get("service") is built
        assert service.call_count == 1

    def test_incoming_container_wins_on_collision(self) -> None:
        base = Container.provides_value("service", "base")
        incoming = Container.provides_value("service", "incoming")

        assert base.provides(incoming).get("service") == "incoming"

    def test_partial_container_services_are_memoized_per_destination(self) -> None:
        service = CallCounter(lambda: object())
        partial = PartialContainer.provides(injectable("service", service))

        first = Container.provides(partial)
        second = Container.provides(partial)

        assert first.get("service") is first.get("service")
        assert first.get("service") is not second.get("service")
        assert service.call_count == 2

    def test_partial_container_does_not_rebuild_existing_services(
        self,
        container: Container,
    ) -> None:
        dependency = CallCounter(lambda: "dependency")
        with_dependency = container.provides(injectable("dependency", dependency))
        with_dependency.get("dependency")

        combined = with_dependency.provides(PartialContainer.provides_value("other", 42))
        combined.get("dependency")

        assert combined.get("other") == 42
        assert dependency.call_count == 1


class TestGet:
    def test_missing_key_raises_with_key_in_message(self, container: Container) -> None:
        with pytest.raises(WireboxKeyNotFoundError, match="'TestService'") as exc_info:
            container.get("TestService")

        assert exc_info.value.key == "TestService"

    def test_container_key_returns_the_container(self, container: Container) -> None:
        assert container.get(CONTAINER) is container

    def test_container_key_as_dependency(self) -> None:
        initial = Container.provides_value("value", 1)

        extended = initial.provides(
            injectable("service", [CONTAINER], lambda c: c.get("value") + 1),
        )

        assert extended.get("service") == 2
        assert CONTAINER in extended

    def test_non_string_keys(self) -> None:
        class Token:
            pass

        container = Container.provides_value(Token, "by type").provides_value(7, "by number")

        assert container.get(Token) == "by type"
        assert container.get(7) == "by number"


class TestCopy:
    def test_copy_shares_instances(self, container: Container) -> None:
        factory = CallCounter(datetime.now)
        source = container.provides(injectable("service", factory))

        copy = source.copy()

        assert isinstance(copy.get("service"), datetime)
        assert copy.get("service") is source.get("service")
        assert factory.call_count == 1

    def test_copy_recreates_scoped_services(self, container: Container) -> None:
        factory = CallCounter(object)
        other = CallCounter(object)
        source = container.provides(injectable("scoped", factory)).provides(
            injectable("shared", other),
        )

        copy = source.copy(["scoped"])

        assert copy.get("scoped") is not source.get("scoped")
        assert copy.get("scoped") is copy.get("scoped")
        assert copy.get("shared") is source.get("shared")
        assert factory.call_count == 2
        assert other.call_count == 1

    def test_copy_of_unknown_key_fails(self, container: Container) -> None:
        with pytest.raises(WireboxKeyNotFoundError):
            container.copy(["missing"])

    def test_copy_rejects_a_bare_string(self) -> None:
        with pytest.raises(WireboxInvalidArgumentsError):
            Container.provides_value("ab", 1).copy("ab")


class TestRun:
    def test_run_invokes_the_factory(self, container: Container) -> None:
        factory = CallCounter(datetime.now)

        result = container.run(injectable("service", factory))

        assert result is container
        assert factory.call_count == 1
        assert "service" not in container

    def test_run_invokes_every_factory_of_a_partial_container(self, container: Container) -> None:
        one = CallCounter(lambda: "one")
        two = CallCounter(lambda: 2)
        partial = PartialContainer.provides(injectable("one", one)).provides(
            injectable("two", two),
        )

        container.run(partial)

        assert one.call_count == 1
        assert two.call_count == 1

    def test_run_resolves_dependencies_from_the_container(self) -> None:
        seen: list[int] = []
        container = Container.provides_value("value", 5)

        container.run(injectable("side_effect", ["value"], seen.append))

        assert seen == [5]

    def test_run_rejects_unsupported_items(self, container: Container) -> None:
        with pytest.raises(WireboxInvalidArgumentsError):
            container.run(Container())  # type: ignore[arg-type]


class TestIntrospection:
    def test_factories_are_read_only(self) -> None:
        container = Container.provides_value("service", "value")

        assert container.factories["service"]() == "value"
        with pytest.raises(TypeError):
            container.factories["other"] = container.factories["service"]  # type: ignore[index]

    def test_len_contains_and_repr(self) -> None:
        container = Container.from_mapping({"a": 1, "b": 2})

        assert len(container) == 2
        assert "a" in container
        assert "c" not in container
        assert repr(container) == "Container(keys=['a', 'b'])"

    def test_injectable_records_are_accepted_directly(self) -> None:
        item = Injectable(key="raw", dependencies=(), fn=lambda: "raw value")

        assert Container.provides(item).get("raw") == "raw value"

    def test_container_key_is_contained_but_not_listed(self) -> None:
        container = Container.provides_value("a", 1)

        assert CONTAINER in container
        assert CONTAINER not in list(container.keys())
        assert len(container) == 1
        assert CONTAINER in Container()


def test_from_mapping_accepts_lock_mode() -> None:
    container = Container.from_mapping({"a": 1}, lock_mode=LockMode.NONE)

    assert container.lock_mode is LockMode.NONE
    assert container.provides_value("b", 2).lock_mode is LockMode.NONE
    assert not isinstance(container.factories["a"]._lock, type(threading.Lock()))
    assert container.get("a") == 1


def test_from_mapping_defaults_to_thread_lock_mode() -> None:
    assert Container.from_mapping({"a": 1}).lock_mode is LockMode.THREAD
