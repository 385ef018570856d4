"""
Table Mapper

Generates Java record types, mapper interfaces and MyBatis XML mapping
documents from a relational schema description.
"""

from pathlib import Path
from typing import Any, Dict, Union

from .codegen import GenerationResult, generate_tables
from .introspection import load_tables, tables_from_document

__version__ = "0.1.0"


def generate_from_schema(schema_source: Union[str, Path], config=None) -> GenerationResult:
    """
    Generate artifacts from a schema document.

    Args:
        schema_source: Path or URL of the JSON schema document
        config: Configuration object, override dict or JSON config path

    Returns:
        GenerationResult with rendered files
    """
    return generate_tables(load_tables(schema_source), config)


def quick_generate(schema: Dict[str, Any], **options) -> Dict[str, str]:
    """
    Quick generation from an in-memory schema document.

    Args:
        schema: Parsed schema document
        **options: Configuration overrides

    Returns:
        Mapping of relative file path to file content

    Raises:
        RuntimeError: If any table failed to generate
    """
    result = generate_tables(tables_from_document(schema), options)
    if not result.success:
        details = "; ".join(f"{table}: {error}" for table, error in result.failures.items())
        raise RuntimeError(f"Code generation failed: {details}")
    return {rendered.path: rendered.content for rendered in result.files}


__all__ = ["generate_from_schema", "quick_generate", "load_tables", "tables_from_document"]
