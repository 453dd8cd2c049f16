"""Unit tests for the Plugin base class."""

from __future__ import annotations

from typing import Any

from hookable import Hookable
from hookable.plugins import Plugin, hookimpl


class SeoPlugin(Plugin):
    """Plugin with a filter and an action implementation."""

    name = "seo"
    version = "1.2.0"
    description = "Title tweaks"
    dependencies = ["core"]

    def __init__(self) -> None:
        super().__init__()
        self.booted: list[Any] = []

    @hookimpl("the_title", priority=20)
    def suffix_title(self, value: str) -> str:
        return f"{value} | Site"

    @hookimpl("boot", accepted_args=2)
    def on_boot(self, app: Any, env: str) -> None:
        self.booted.append((app, env))


def test_default_metadata() -> None:
    plugin = Plugin()

    assert plugin.name == "plugin"
    assert plugin.version == "0.1.0"
    assert plugin.description == ""
    assert plugin.dependencies == []
    assert plugin.enabled is True
    assert plugin.hookimpls() == []


def test_dependencies_are_copied_per_instance() -> None:
    first, second = SeoPlugin(), SeoPlugin()

    first.dependencies.append("cache")

    assert second.dependencies == ["core"]
    assert SeoPlugin.dependencies == ["core"]


def test_enable_disable() -> None:
    plugin = SeoPlugin()

    plugin.disable()
    assert plugin.enabled is False
    plugin.enable()
    assert plugin.enabled is True


def test_setup_attaches_marked_methods() -> None:
    registry = Hookable()
    plugin = SeoPlugin()

    plugin.setup(registry)

    assert plugin.attached is True
    assert registry.exists("the_title", plugin.suffix_title) == 20
    assert registry.apply("the_title", "Home") == "Home | Site"
    assert registry.call("boot", "app", "prod", "ignored")
    assert plugin.booted == [("app", "prod")]


def test_teardown_detaches_only_own_callbacks() -> None:
    registry = Hookable()
    registry.add("the_title", str.strip, 5)
    plugin = SeoPlugin()
    plugin.setup(registry)

    plugin.teardown(registry)

    assert plugin.attached is False
    assert registry.has("boot") is False
    assert registry.has("the_title", plugin.suffix_title) is False
    assert registry.apply("the_title", " Home ") == "Home"


def test_two_instances_attach_independently() -> None:
    registry = Hookable()
    first, second = SeoPlugin(), SeoPlugin()
    first.setup(registry)
    second.setup(registry)

    assert registry.apply("the_title", "Home") == "Home | Site | Site"

    first.teardown(registry)

    assert registry.apply("the_title", "Home") == "Home | Site"
