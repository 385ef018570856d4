"""
Plugin registry for managing available checkpoint plugins.

Provides registration by name and alias, and builds the ordered checkpoint
chain a configuration asks for.
"""

from typing import Any, Dict, List, Optional, Type

from .core.config import GeneratorConfig
from .core.errors import ConfigError, TableMapperError
from .plugins import BUILTIN_PLUGINS, CheckpointPlugin


class RegistryError(TableMapperError):
    """Exception raised for registry-related errors."""


class PluginRegistry:
    """Registry for managing available checkpoint plugins."""

    def __init__(self):
        """Initialize empty registry."""
        self._plugins: Dict[str, Type[CheckpointPlugin]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        name: str,
        plugin_class: Type[CheckpointPlugin],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a plugin class.

        Args:
            name: Primary plugin name
            plugin_class: Class deriving from CheckpointPlugin
            aliases: Alternative names for this plugin
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If the class is invalid or an alias conflicts
        """
        if not (isinstance(plugin_class, type) and issubclass(plugin_class, CheckpointPlugin)):
            raise RegistryError("Plugin class must inherit from CheckpointPlugin")

        key = name.lower()

        if key in self._plugins and not replace:
            return

        self._plugins[key] = plugin_class

        for alias in aliases or []:
            alias_key = alias.lower()
            if alias_key == key:
                continue

            if not replace:
                if alias_key in self._plugins:
                    raise RegistryError(f"Alias '{alias}' conflicts with existing plugin")
                if alias_key in self._aliases and self._aliases[alias_key] != key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )

            self._aliases[alias_key] = key

    def unregister(self, name: str):
        """Unregister a plugin and its aliases."""
        key = name.lower()
        self._plugins.pop(key, None)
        for alias in [a for a, target in self._aliases.items() if target == key]:
            del self._aliases[alias]

    def get_plugin_class(self, name: str) -> Type[CheckpointPlugin]:
        """
        Get plugin class by name or alias.

        Raises:
            RegistryError: If no plugin is registered under the name
        """
        key = name.lower()

        if key in self._plugins:
            return self._plugins[key]

        if key in self._aliases:
            return self._plugins[self._aliases[key]]

        raise RegistryError(
            f"No plugin registered as: {name}. Available: {', '.join(self.list_plugins())}"
        )

    def create_plugin(self, name: str, options: Optional[Dict[str, Any]] = None) -> CheckpointPlugin:
        """
        Create a configured plugin instance.

        Raises:
            RegistryError: If the plugin is unknown or rejects its options
        """
        plugin_class = self.get_plugin_class(name)
        try:
            return plugin_class(options or {})
        except ConfigError as e:
            raise RegistryError(f"Failed to create plugin {name}: {e}") from e

    def build_checkpoints(self, config: GeneratorConfig) -> List[CheckpointPlugin]:
        """Instantiate the configured plugins, in configuration order."""
        checkpoints = []
        for entry in config.plugins:
            if isinstance(entry, str):
                entry = {"name": entry}
            if "name" not in entry:
                raise RegistryError(f"Plugin entry without name: {entry}")
            checkpoints.append(self.create_plugin(entry["name"], entry.get("options")))
        return checkpoints

    def list_plugins(self) -> List[str]:
        """Get list of registered primary plugin names."""
        return sorted(self._plugins.keys())

    def get_aliases_for_plugin(self, name: str) -> List[str]:
        key = name.lower()
        return sorted(alias for alias, target in self._aliases.items() if target == key)

    def is_supported(self, name: str) -> bool:
        key = name.lower()
        return key in self._plugins or key in self._aliases

    def get_plugin_info(self, name: str) -> Dict[str, Any]:
        """
        Get information about a registered plugin.

        Raises:
            RegistryError: If plugin not found
        """
        plugin_class = self.get_plugin_class(name)
        key = self._aliases.get(name.lower(), name.lower())

        return {
            "name": key,
            "class": plugin_class.__name__,
            "description": plugin_class.description,
            "aliases": self.get_aliases_for_plugin(key),
            "module": plugin_class.__module__,
        }


# Global registry instance - created once
_global_registry: Optional[PluginRegistry] = None

_BUILTIN_ALIASES = {
    "veto": ["reject"],
    "statement_timeout": ["timeout"],
    "mapper_annotation": ["annotate"],
}


def get_registry() -> PluginRegistry:
    """Get the global plugin registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = PluginRegistry()
        _auto_register_plugins()
    return _global_registry


def _auto_register_plugins():
    """Register the built-in plugins with their aliases."""
    for plugin_class in BUILTIN_PLUGINS:
        _global_registry.register(
            plugin_class.name, plugin_class, aliases=_BUILTIN_ALIASES.get(plugin_class.name)
        )


def register_plugin(name: str, plugin_class: Type[CheckpointPlugin],
                    aliases: Optional[List[str]] = None):
    """Register a plugin in the global registry."""
    get_registry().register(name, plugin_class, aliases)


def list_plugins() -> List[str]:
    """List all plugins from global registry."""
    return get_registry().list_plugins()
