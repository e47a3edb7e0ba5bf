"""Plugin discovery and loading.

Plugins come from setuptools entry points in the ``builderfolio.plugins``
group or are registered directly with :meth:`PluginManager.register_plugin`.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from builderfolio.plugins.hookspecs import BuilderfolioHookSpec

PROJECT_NAME = "builderfolio"
ENTRY_POINT_GROUP = "builderfolio.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Thin wrapper over a pluggy manager bound to the builderfolio hook specs."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(BuilderfolioHookSpec)

    @property
    def hook(self) -> pluggy.HookRelay:
        """Relay the event bus calls hooks through."""
        return self._pm.hook

    def discover_and_load(self) -> list[str]:
        """Register entry-point plugins; return every registered plugin name."""
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        if count:
            self._instantiate_classes()
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin: %s", plugin_name)

    def list_plugin_names(self) -> list[str]:
        names = []
        for plugin in self._pm.get_plugins():
            names.append(self._pm.get_name(plugin) or type(plugin).__name__)
        return names

    def _instantiate_classes(self) -> None:
        # An entry point may name a class; its hooks need a bound instance.
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            name = self._pm.get_name(plugin)
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Could not instantiate plugin %s", name, exc_info=True)
                continue
            self.register_plugin(instance, name=name)
