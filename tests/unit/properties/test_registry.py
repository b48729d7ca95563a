"""Unit tests for global / dynamic properties."""

from __future__ import annotations

import itertools
import threading
from typing import Any

import pytest

from keen_client.errors import ConfigurationError, PropertyError
from keen_client.properties import GlobalPropertyRegistry, is_dynamic, resolve_dynamic


def _sequence(*values: Any):
    it = iter(values)
    return lambda: next(it)


# ---------------------------------------------------------------------------
# resolve_dynamic
# ---------------------------------------------------------------------------


class TestResolveDynamic:
    def test_returns_value(self) -> None:
        assert resolve_dynamic("ts", lambda: 42) == 42

    def test_null_result_raises(self) -> None:
        with pytest.raises(PropertyError, match="returned null"):
            resolve_dynamic("ts", lambda: None)

    def test_provider_failure_is_wrapped(self) -> None:
        def boom() -> Any:
            raise RuntimeError("clock broken")

        with pytest.raises(PropertyError, match="execution failure") as exc_info:
            resolve_dynamic("ts", boom)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.property_name == "ts"

    def test_is_dynamic(self) -> None:
        assert is_dynamic(lambda: 1)
        assert not is_dynamic({"a": 1})
        assert not is_dynamic("text")


# ---------------------------------------------------------------------------
# register
# ---------------------------------------------------------------------------


class TestRegister:
    def test_static_value(self) -> None:
        reg = GlobalPropertyRegistry()
        reg.register("app", {"name": "shop", "version": 3})
        assert "app" in reg
        assert len(reg) == 1

    def test_null_value_rejected(self) -> None:
        reg = GlobalPropertyRegistry()
        with pytest.raises(PropertyError, match="non-null"):
            reg.register("app", None)
        assert "app" not in reg

    @pytest.mark.parametrize("name", ["", "a.b", "$x"])
    def test_invalid_name_is_configuration_error(self, name: str) -> None:
        reg = GlobalPropertyRegistry()
        with pytest.raises(ConfigurationError):
            reg.register(name, 1)
        assert len(reg) == 0

    def test_dynamic_provider_is_run_once_at_registration(self) -> None:
        calls = itertools.count()
        reg = GlobalPropertyRegistry()
        reg.register("n", lambda: next(calls))
        assert next(calls) == 1

    def test_dynamic_provider_returning_null_fails_registration(self) -> None:
        reg = GlobalPropertyRegistry()
        with pytest.raises(PropertyError):
            reg.register("sessionId", lambda: None)
        assert "sessionId" not in reg

    def test_dynamic_provider_raising_fails_registration(self) -> None:
        def broken() -> Any:
            raise ValueError("no session")

        reg = GlobalPropertyRegistry()
        with pytest.raises(PropertyError):
            reg.register("sessionId", broken)
        assert reg.names() == []

    def test_duplicate_name_rejected(self) -> None:
        reg = GlobalPropertyRegistry()
        reg.register("app", "a")
        with pytest.raises(PropertyError, match="already registered"):
            reg.register("app", "b")
        assert reg.materialize({}) == {"app": "a"}

    def test_static_value_is_copied(self) -> None:
        value = {"tags": ["a"]}
        reg = GlobalPropertyRegistry()
        reg.register("meta", value)
        value["tags"].append("b")
        assert reg.materialize({}) == {"meta": {"tags": ["a"]}}


# ---------------------------------------------------------------------------
# materialize
# ---------------------------------------------------------------------------


class TestMaterialize:
    def test_merges_static_and_dynamic(self) -> None:
        reg = GlobalPropertyRegistry()
        reg.register("app", "shop")
        reg.register("n", lambda: 7)
        assert reg.materialize({"item": "book"}) == {"item": "book", "app": "shop", "n": 7}

    def test_dynamic_value_recomputed_per_event(self) -> None:
        reg = GlobalPropertyRegistry()
        reg.register("source", _sequence("validation", "web", "mobile"))
        assert reg.materialize({})["source"] == "web"
        assert reg.materialize({})["source"] == "mobile"

    def test_base_payload_untouched(self) -> None:
        reg = GlobalPropertyRegistry()
        reg.register("app", "shop")
        base = {"item": "book"}
        reg.materialize(base)
        assert base == {"item": "book"}

    def test_later_null_fails_whole_merge(self) -> None:
        reg = GlobalPropertyRegistry()
        reg.register("app", "shop")
        reg.register("source", _sequence("validation", "web", None))
        first = reg.materialize({"n": 1})
        base = {"n": 2}
        with pytest.raises(PropertyError):
            reg.materialize(base)
        assert first == {"n": 1, "app": "shop", "source": "web"}
        assert base == {"n": 2}

    def test_collision_with_event_property(self) -> None:
        reg = GlobalPropertyRegistry()
        reg.register("app", "shop")
        with pytest.raises(PropertyError, match="collides"):
            reg.materialize({"app": "mine"})

    def test_independent_registries(self) -> None:
        a, b = GlobalPropertyRegistry(), GlobalPropertyRegistry()
        a.register("tenant", "a")
        assert b.materialize({}) == {}

    def test_concurrent_register_and_materialize(self) -> None:
        reg = GlobalPropertyRegistry()
        errors: list[BaseException] = []

        def writer() -> None:
            for i in range(200):
                reg.register(f"p{i}", i)

        def reader() -> None:
            try:
                for _ in range(200):
                    merged = reg.materialize({})
                    for key, value in merged.items():
                        assert key == f"p{value}"
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
        assert len(reg) == 200
