"""
Table Mapper Code Generation Module

Generates record types, mapper interfaces and XML mapping documents from
introspected tables.
"""

from typing import Any, Dict, List, Union
from pathlib import Path

from .core.config import GeneratorConfig, ConfigManager, load_config
from .core.errors import ConfigValidationError, MalformedFragmentError, TableMapperError
from .core.generator import GenerationResult, ModelFragment, RenderedFile
from .core.rules import OperationKind, TypeRole, decide
from .core.schema import Column, Table
from .pipeline import ExtensionPipeline, TablePipeline, TableState
from .plugins import CheckpointPlugin
from .registry import PluginRegistry, get_registry, list_plugins, register_plugin
from .writer import ArtifactWriter

__version__ = "0.1.0"


def generate_tables(
    tables: List[Table],
    config: Union[GeneratorConfig, Dict[str, Any], str, Path, None] = None,
    checkpoints=None,
) -> GenerationResult:
    """
    Generate artifacts for already introspected tables.

    Args:
        tables: Tables from the schema supplier
        config: Configuration object, override dict or JSON config path
        checkpoints: Checkpoint chain; built from the configured plugins when None

    Returns:
        GenerationResult with rendered files
    """
    if not isinstance(config, GeneratorConfig):
        if isinstance(config, dict):
            config = load_config(custom_config=config)
        else:
            config = load_config(config_file=config)
    return ExtensionPipeline(config, checkpoints=checkpoints).run(tables)


__all__ = [
    "ArtifactWriter",
    "CheckpointPlugin",
    "Column",
    "ConfigManager",
    "ConfigValidationError",
    "ExtensionPipeline",
    "GeneratorConfig",
    "GenerationResult",
    "MalformedFragmentError",
    "ModelFragment",
    "OperationKind",
    "PluginRegistry",
    "RenderedFile",
    "Table",
    "TableMapperError",
    "TablePipeline",
    "TableState",
    "TypeRole",
    "decide",
    "generate_tables",
    "get_registry",
    "list_plugins",
    "load_config",
    "register_plugin",
]
