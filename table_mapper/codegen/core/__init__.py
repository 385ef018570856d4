"""
Core generation components.

Schema model, configuration, naming and the rules engine shared by every
generator.
"""

from .errors import (
    ConfigError,
    ConfigurationMissing,
    ConfigValidationError,
    GeneratorError,
    MalformedFragmentError,
    SchemaLoaderError,
    TableMapperError,
)
from .schema import Column, FullyQualifiedTable, Table, TypeCategory
from .naming import NameSanitizer, NamingCase
from .config import (
    ClientType,
    ConfigManager,
    GeneratorConfig,
    ModelType,
    TableConfig,
    load_config,
    validate_config,
)
from .rules import OperationKind, OperationSet, TypeRole, Variant, decide
from .names import NameResolver, ResolvedNames
from .templates import TemplateEngine, TemplateError
from .generator import GenerationResult, ModelFragment, RenderedFile, TableArtifacts, TableContext

__all__ = [
    # Errors
    "TableMapperError",
    "ConfigError",
    "ConfigurationMissing",
    "ConfigValidationError",
    "GeneratorError",
    "MalformedFragmentError",
    "SchemaLoaderError",
    # Schema model
    "Column",
    "FullyQualifiedTable",
    "Table",
    "TypeCategory",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "ClientType",
    "ConfigManager",
    "GeneratorConfig",
    "ModelType",
    "TableConfig",
    "load_config",
    "validate_config",
    # Rules engine and derived names
    "OperationKind",
    "OperationSet",
    "TypeRole",
    "Variant",
    "decide",
    "NameResolver",
    "ResolvedNames",
    # Template system
    "TemplateEngine",
    "TemplateError",
    # Generation contracts
    "GenerationResult",
    "ModelFragment",
    "RenderedFile",
    "TableArtifacts",
    "TableContext",
]
