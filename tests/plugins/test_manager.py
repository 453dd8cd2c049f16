"""Unit tests for plugin manager."""

from __future__ import annotations

import pytest

from hookable import Hookable, PluginError
from hookable.plugins import Plugin, PluginManager, hookimpl


class _TrackedPlugin(Plugin):
    """Plugin test double that tracks setup/teardown and hook calls."""

    def __init__(
        self,
        name: str,
        *,
        dependencies: list[str] | None = None,
        events: list[str] | None = None,
    ) -> None:
        super().__init__()
        self.name = name
        self.dependencies = dependencies or []
        self._events = events if events is not None else []

    def setup(self, registry: Hookable) -> None:
        self._events.append(f"setup:{self.name}")
        super().setup(registry)

    def teardown(self, registry: Hookable) -> None:
        self._events.append(f"teardown:{self.name}")
        super().teardown(registry)

    @hookimpl("render")
    def render(self, value: list[str]) -> list[str]:
        return [*value, self.name]


@pytest.fixture
def manager() -> PluginManager:
    return PluginManager(Hookable())


def test_register_and_get(manager: PluginManager) -> None:
    plugin = _TrackedPlugin("alpha")

    manager.register(plugin)

    assert manager.has("alpha") is True
    assert manager.get("alpha") is plugin
    assert manager.get_all() == [plugin]


def test_register_duplicate_name_raises(manager: PluginManager) -> None:
    manager.register(_TrackedPlugin("alpha"))

    with pytest.raises(PluginError) as excinfo:
        manager.register(_TrackedPlugin("alpha"))

    assert excinfo.value.context == {"plugin": "alpha"}


def test_unregister_unknown_is_noop(manager: PluginManager) -> None:
    manager.unregister("missing")

    assert manager.get("missing") is None


def test_initialize_attaches_in_dependency_order(manager: PluginManager) -> None:
    events: list[str] = []
    manager.register(_TrackedPlugin("c", dependencies=["b"], events=events))
    manager.register(_TrackedPlugin("a", events=events))
    manager.register(_TrackedPlugin("b", dependencies=["a"], events=events))

    manager.initialize()

    assert events == ["setup:a", "setup:b", "setup:c"]
    assert manager.initialized is True
    # all three share the default priority, so attach order is dispatch order
    assert manager.registry.apply("render", []) == ["a", "b", "c"]


def test_initialize_is_idempotent(manager: PluginManager) -> None:
    events: list[str] = []
    manager.register(_TrackedPlugin("a", events=events))

    manager.initialize()
    manager.initialize()

    assert events == ["setup:a"]


def test_shutdown_detaches_in_reverse_order(manager: PluginManager) -> None:
    events: list[str] = []
    manager.register(_TrackedPlugin("a", events=events))
    manager.register(_TrackedPlugin("b", dependencies=["a"], events=events))
    manager.initialize()

    manager.shutdown()
    manager.shutdown()

    assert events == ["setup:a", "setup:b", "teardown:b", "teardown:a"]
    assert manager.initialized is False
    assert manager.registry.has("render") is False


def test_disabled_plugin_is_not_attached(manager: PluginManager) -> None:
    plugin = _TrackedPlugin("a")
    plugin.disable()
    manager.register(plugin)
    manager.register(_TrackedPlugin("b"))

    manager.initialize()

    assert manager.registry.apply("render", []) == ["b"]


def test_unregister_detaches_attached_plugin(manager: PluginManager) -> None:
    manager.register(_TrackedPlugin("a"))
    manager.register(_TrackedPlugin("b"))
    manager.initialize()

    manager.unregister("a")

    assert manager.registry.apply("render", []) == ["b"]
    manager.shutdown()
    assert manager.registry.has("render") is False


def test_missing_dependency_raises(manager: PluginManager) -> None:
    manager.register(_TrackedPlugin("a", dependencies=["ghost"]))

    with pytest.raises(PluginError, match="Missing dependency for 'a': 'ghost'"):
        manager.initialize()

    assert manager.initialized is False


def test_dependency_cycle_raises(manager: PluginManager) -> None:
    manager.register(_TrackedPlugin("a", dependencies=["b"]))
    manager.register(_TrackedPlugin("b", dependencies=["a"]))
    manager.register(_TrackedPlugin("c"))

    with pytest.raises(PluginError) as excinfo:
        manager.initialize()

    assert excinfo.value.message == "Dependency cycle detected"
    assert excinfo.value.context == {"plugins": ["a", "b"]}
    assert manager.registry.has("render") is False
