"""Plugin layer for attaching groups of callbacks to a registry."""

from .base import Plugin
from .hookspecs import HookImpl, HookImplOptions, collect_hookimpls, hookimpl
from .manager import PluginManager

__all__ = [
    "HookImpl",
    "HookImplOptions",
    "Plugin",
    "PluginManager",
    "collect_hookimpls",
    "hookimpl",
]
