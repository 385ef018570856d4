"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files, providing
defaults, per-table overrides and validation of generator settings.
"""

import json
import re
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import ConfigError
from .schema import Table

JAVA_PACKAGE_PATTERN = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$")

# Keys a table may override in its ``properties`` bag
TABLE_PROPERTY_KEYS = {"immutable", "constructor_based", "root_class", "root_interface"}
COLUMN_OVERRIDE_KEYS = {
    "java_property", "java_type", "jdbc_type", "type_handler", "delimited", "generated_always",
}


class ModelType(Enum):
    """How record, key and large-object types are split."""

    CONDITIONAL = "conditional"
    FLAT = "flat"
    HIERARCHICAL = "hierarchical"


class ClientType(Enum):
    """Where statements for the mapper interface live."""

    XML = "xml"      # every statement in the mapping document
    MIXED = "mixed"  # selective statements built by the SQL provider type


@dataclass
class TableConfig:
    """Per-table generation settings."""

    table_name: str
    schema: Optional[str] = None
    catalog: Optional[str] = None
    domain_object_name: Optional[str] = None
    alias: Optional[str] = None

    # Overrides the context model type when set
    model_type: Optional[str] = None

    # Operation kind values to suppress
    disabled_operations: List[str] = field(default_factory=list)
    selective_update: bool = True

    # Column handling
    ignored_columns: List[str] = field(default_factory=list)
    column_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    # Explicit artifact names
    mapper_name: Optional[str] = None
    sql_provider_name: Optional[str] = None

    properties: Dict[str, Any] = field(default_factory=dict)

    def matches(self, table: Table) -> bool:
        """Check whether this configuration applies to a table."""
        identity = table.identity
        if self.table_name.lower() != identity.name.lower():
            return False
        if self.schema and (identity.schema or "").lower() != self.schema.lower():
            return False
        if self.catalog and (identity.catalog or "").lower() != self.catalog.lower():
            return False
        return True


@dataclass
class GeneratorConfig:
    """Context-level configuration shared by every table."""

    # Target packages per artifact kind
    model_package: str = "model"
    record_package: Optional[str] = None
    example_package: Optional[str] = None
    client_package: Optional[str] = "mapper"
    sql_map_package: Optional[str] = "mapper"

    client_type: str = "xml"
    mapper_suffix: str = "Mapper"
    sql_provider_suffix: str = "SqlProvider"

    # Model shape
    model_type: str = "conditional"
    simple_model: bool = False
    sharding: bool = False
    immutable: bool = False
    constructor_based: bool = False
    root_class: Optional[str] = None
    root_interface: Optional[str] = None

    # SQL settings
    beginning_delimiter: str = '"'
    ending_delimiter: str = '"'

    # Code style settings
    indent_size: int = 4
    add_comments: bool = True

    # Execution
    workers: int = 4

    plugins: List[Dict[str, Any]] = field(default_factory=list)
    tables: List[TableConfig] = field(default_factory=list)

    # Custom settings (plugin specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    def table_config_for(self, table: Table) -> TableConfig:
        """Return the table's configuration, or defaults when none matches."""
        for table_config in self.tables:
            if table_config.matches(table):
                return table_config
        return TableConfig(table_name=table.identity.name)

    def property_for(self, table_config: TableConfig, key: str) -> Any:
        """Table property if set there, otherwise the context value."""
        if key in table_config.properties:
            return table_config.properties[key]
        return getattr(self, key)

    def is_immutable(self, table_config: TableConfig) -> bool:
        return bool(self.property_for(table_config, "immutable"))

    def is_constructor_based(self, table_config: TableConfig) -> bool:
        if self.is_immutable(table_config):
            return True
        return bool(self.property_for(table_config, "constructor_based"))

    def model_type_for(self, table_config: TableConfig) -> ModelType:
        return ModelType(table_config.model_type or self.model_type)

    @property
    def client(self) -> ClientType:
        return ClientType(self.client_type)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = {
            "model_package": "model",
            "client_package": "mapper",
            "sql_map_package": "mapper",
            "client_type": "xml",
            "model_type": "conditional",
            "add_comments": True,
        }

    def get_config(self, custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = self._defaults.copy()

        if config_file:
            base_config.update(self._load_config_file(config_file))

        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get('custom', {}))
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        config_args['tables'] = [
            self._dict_to_table_config(t) if isinstance(t, dict) else t
            for t in config_args.get('tables', [])
        ]

        return GeneratorConfig(**config_args)

    def _dict_to_table_config(self, table_dict: Dict[str, Any]) -> TableConfig:
        """Convert a table dictionary; unknown keys land in ``properties``."""
        if "table_name" not in table_dict:
            raise ConfigError(f"Table configuration without table_name: {table_dict}")

        known_fields = {f.name for f in fields(TableConfig)}
        table_args = {}
        properties = dict(table_dict.get("properties", {}))

        for key, value in table_dict.items():
            if key in known_fields:
                table_args[key] = value
            else:
                properties[key] = value

        table_args["properties"] = properties
        return TableConfig(**table_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        custom = config_dict.pop("custom")
        config_dict.update(custom)

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e


def validate_config(config: GeneratorConfig, tables: List[Table]) -> List[str]:
    """
    Validate configuration against the introspected tables.

    Every problem is collected; nothing stops at the first error.

    Returns:
        List of validation errors (empty if no issues)
    """
    from .rules import OperationKind

    errors = []
    valid_model_types = {m.value for m in ModelType}
    valid_operations = {k.value for k in OperationKind}

    if config.model_type not in valid_model_types:
        errors.append(f"Invalid model_type: {config.model_type}")

    if config.client_type not in {c.value for c in ClientType}:
        errors.append(f"Invalid client_type: {config.client_type}")

    if config.workers < 1:
        errors.append(f"workers must be at least 1, got {config.workers}")

    for key in ("model_package", "record_package", "example_package",
                "client_package", "sql_map_package"):
        value = getattr(config, key)
        if value and not JAVA_PACKAGE_PATTERN.match(value):
            errors.append(f"Invalid {key}: {value}")

    for table_config in config.tables:
        label = table_config.table_name
        matching = [t for t in tables if table_config.matches(t)]

        if not matching:
            errors.append(f"Table configuration '{label}' matches no introspected table")

        if table_config.model_type and table_config.model_type not in valid_model_types:
            errors.append(f"Invalid model_type for table '{label}': {table_config.model_type}")

        for operation in table_config.disabled_operations:
            if operation not in valid_operations:
                errors.append(f"Unknown operation '{operation}' disabled for table '{label}'")

        for key in table_config.properties:
            if key not in TABLE_PROPERTY_KEYS:
                errors.append(f"Unknown property '{key}' for table '{label}'")

        for table in matching:
            for column_name in table_config.ignored_columns:
                if table.get_column(column_name) is None:
                    errors.append(
                        f"Ignored column '{column_name}' does not exist in table '{table}'"
                    )
            for column_name in table_config.column_overrides:
                if table.get_column(column_name) is None:
                    errors.append(
                        f"Column override '{column_name}' does not exist in table '{table}'"
                    )

        for column_name, overrides in table_config.column_overrides.items():
            for key in overrides:
                if key not in COLUMN_OVERRIDE_KEYS:
                    errors.append(
                        f"Unknown override '{key}' for column '{column_name}' in table '{label}'"
                    )

    return errors


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    return get_config_manager().get_config(custom_config, config_file)


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "model_package": "com.example.model",
    "client_package": "com.example.mapper",
    "sql_map_package": "com.example.mapper",
    "model_type": "conditional",
    "plugins": [{"name": "statement_timeout", "options": {"seconds": 30}}],
    "tables": [
        {"table_name": "user_account", "disabled_operations": ["select_all"]},
    ],
}
