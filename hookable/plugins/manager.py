"""Plugin manager implementation.

This module provides plugin registration, dependency resolution and the
attach/detach lifecycle of plugins against one ``Hookable`` registry.
"""

from __future__ import annotations

import logging
from collections import deque

from hookable.exceptions import PluginError
from hookable.registry import Hookable

from .base import Plugin

logger = logging.getLogger(__name__)


class PluginManager:
    """Manage plugin registration, dependency order and attachment."""

    def __init__(self, registry: Hookable) -> None:
        self.registry = registry
        self._plugins: dict[str, Plugin] = {}
        self._initialized: bool = False
        self._init_order: list[str] = []

    @property
    def initialized(self) -> bool:
        return self._initialized

    def register(self, plugin: Plugin) -> None:
        """Register a plugin instance.

        Raises:
            PluginError: A plugin with the same name is already registered.
        """
        if plugin.name in self._plugins:
            raise PluginError(
                f"Plugin already registered: {plugin.name}",
                context={"plugin": plugin.name},
            )
        self._plugins[plugin.name] = plugin

    def unregister(self, name: str) -> None:
        """Unregister a plugin by name, detaching it first if attached."""
        plugin = self._plugins.pop(name, None)
        if plugin is not None and plugin.attached:
            plugin.teardown(self.registry)
        if name in self._init_order:
            self._init_order.remove(name)

    def get(self, name: str) -> Plugin | None:
        return self._plugins.get(name)

    def get_all(self) -> list[Plugin]:
        """Return all registered plugins in registration order."""
        return list(self._plugins.values())

    def has(self, name: str) -> bool:
        return name in self._plugins

    def initialize(self) -> None:
        """Attach all enabled plugins in dependency order.

        Raises:
            PluginError: A dependency is missing or dependencies form a cycle.
        """
        if self._initialized:
            return

        order = self._resolve_order()
        for name in order:
            plugin = self._plugins[name]
            if not plugin.enabled:
                logger.debug("Skipping disabled plugin %r", name)
                continue
            plugin.setup(self.registry)

        self._init_order = order
        self._initialized = True
        logger.info("Initialized %d plugins", len(order))

    def shutdown(self) -> None:
        """Detach plugins in reverse initialization order."""
        if not self._initialized:
            return

        for name in reversed(self._init_order):
            self._plugins[name].teardown(self.registry)

        self._initialized = False
        self._init_order = []

    def _resolve_order(self) -> list[str]:
        """Resolve initialization order using a topological sort."""
        for plugin in self._plugins.values():
            for dependency in plugin.dependencies:
                if dependency not in self._plugins:
                    raise PluginError(
                        f"Missing dependency for '{plugin.name}': '{dependency}'",
                        context={"plugin": plugin.name, "dependency": dependency},
                    )

        dependents: dict[str, list[str]] = {name: [] for name in self._plugins}
        indegree: dict[str, int] = {name: 0 for name in self._plugins}
        for plugin_name, plugin in self._plugins.items():
            for dependency in plugin.dependencies:
                dependents[dependency].append(plugin_name)
                indegree[plugin_name] += 1

        queue: deque[str] = deque(name for name, degree in indegree.items() if degree == 0)
        order: list[str] = []
        while queue:
            current = queue.popleft()
            order.append(current)
            for dependent in dependents[current]:
                indegree[dependent] -= 1
                if indegree[dependent] == 0:
                    queue.append(dependent)

        if len(order) != len(self._plugins):
            blocked = sorted(name for name, degree in indegree.items() if degree)
            raise PluginError("Dependency cycle detected", context={"plugins": blocked})

        return order
