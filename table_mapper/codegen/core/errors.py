"""
Exceptions raised while generating mapping artifacts.

Hierarchy:
    TableMapperError
    ├── ConfigError
    │   ├── ConfigurationMissing     A required config section is absent; the
    │   │                            dependent artifact family is skipped.
    │   └── ConfigValidationError    Every configuration-time problem, reported at once.
    ├── GeneratorError
    │   └── MalformedFragmentError   A generator produced a structurally invalid node;
    │                                aborts that table only.
    └── SchemaLoaderError            Schema document could not be read.

Lookups that miss (a column name, an unresolved identifier) return None
instead of raising.
"""

from typing import List, Optional


class TableMapperError(Exception):
    """Base class for all table_mapper errors."""


class ConfigError(TableMapperError):
    """Exception raised for configuration-related errors."""


class ConfigurationMissing(ConfigError):
    """
    Raised when a configuration section needed by an artifact family is absent.

    Args:
        section: Name of the missing section (e.g. ``client_package``).
    """

    def __init__(self, section: str) -> None:
        super().__init__(f"Missing configuration section: {section}")
        self.section = section


class ConfigValidationError(ConfigError):
    """Carries every validation error found before generation begins."""

    def __init__(self, errors: List[str]) -> None:
        super().__init__(f"{len(errors)} configuration error(s)")
        self.errors = list(errors)

    def __str__(self) -> str:
        lines = [super().__str__()]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)


class GeneratorError(TableMapperError):
    """Base exception for code generation errors."""


class MalformedFragmentError(GeneratorError):
    """
    Raised when a fragment fails structural validation.

    Args:
        reason: What is wrong with the node.
        table: Identifier of the table whose pipeline produced it.
    """

    def __init__(self, reason: str, table: Optional[str] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.table = table

    def __str__(self) -> str:
        if self.table:
            return f"{self.reason} | table={self.table}"
        return self.reason


class SchemaLoaderError(TableMapperError):
    """Exception raised for schema document loading errors."""
