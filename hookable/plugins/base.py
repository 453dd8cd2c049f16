"""Plugin base class definitions.

A plugin bundles ``@hookimpl`` methods; ``setup`` attaches them to a
registry and ``teardown`` detaches exactly what ``setup`` attached.
"""

from __future__ import annotations

import logging

from hookable.registry import Hookable

from .hookspecs import HookImpl, collect_hookimpls

logger = logging.getLogger(__name__)


class Plugin:
    """Base class for registry plugins.

    Subclasses override the metadata fields and mark methods with
    ``@hookimpl``.
    """

    name: str = "plugin"
    version: str = "0.1.0"
    description: str = ""
    dependencies: list[str] = []

    def __init__(self) -> None:
        self.enabled = True
        self.dependencies = list(self.__class__.dependencies)
        self._attached: list[HookImpl] = []

    @property
    def attached(self) -> bool:
        return bool(self._attached)

    def hookimpls(self) -> list[HookImpl]:
        """Return the marked methods of this plugin, bound to it."""
        return list(collect_hookimpls(self))

    def setup(self, registry: Hookable) -> None:
        """Attach every marked method to ``registry``."""
        for impl in self.hookimpls():
            registry.add(impl.hook_name, impl.callback, impl.priority, impl.accepted_args)
            self._attached.append(impl)
        logger.debug("Plugin %r attached %d callbacks", self.name, len(self._attached))

    def teardown(self, registry: Hookable) -> None:
        """Detach the callbacks attached by :meth:`setup`."""
        for impl in reversed(self._attached):
            registry.remove(impl.hook_name, impl.callback, impl.priority)
        self._attached.clear()

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False
