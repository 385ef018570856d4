"""
Schema supplier: builds tables from a JSON schema document.

Document layout::

    {
      "tables": [
        {
          "name": "user_account",
          "schema": "public",
          "remarks": "Registered users",
          "columns": [
            {"name": "id", "jdbc_type": "BIGINT", "nullable": false,
             "generated_always": true},
            {"name": "display_name", "jdbc_type": "VARCHAR"}
          ],
          "primary_key": ["id"]
        }
      ]
    }

A bare list of table objects is accepted as well. Column order and
primary-key order are preserved as written.
"""

from pathlib import Path
from typing import Any, Dict, List, Union

from .codegen.core.errors import SchemaLoaderError
from .codegen.core.schema import Column, FullyQualifiedTable, Table
from .logging_config import get_logger
from .utils import load_json

logger = get_logger(__name__)

COLUMN_KEYS = {
    "name": "actual_name",
    "jdbc_type": "jdbc_type",
    "nullable": "nullable",
    "generated_always": "generated_always",
    "delimited": "delimited",
    "type_handler": "type_handler",
    "java_property": "java_property",
    "java_type": "java_type",
    "remarks": "remarks",
}


def column_from_dict(data: Dict[str, Any]) -> Column:
    if not isinstance(data, dict) or not data.get("name"):
        raise SchemaLoaderError(f"Column entry needs a name: {data!r}")
    return Column(**{COLUMN_KEYS[key]: value for key, value in data.items() if key in COLUMN_KEYS})


def table_from_dict(data: Dict[str, Any]) -> Table:
    """
    Build one table, promoting its primary-key columns in listed order.

    Raises:
        SchemaLoaderError: If the entry has no name or malformed columns
    """
    if not isinstance(data, dict) or not data.get("name"):
        raise SchemaLoaderError(f"Table entry needs a name: {data!r}")

    table = Table(
        identity=FullyQualifiedTable(
            name=data["name"],
            schema=data.get("schema"),
            catalog=data.get("catalog"),
        ),
        remarks=data.get("remarks"),
        table_type=data.get("type", "TABLE"),
    )
    for column_data in data.get("columns", []):
        table.add_column(column_from_dict(column_data))

    for column_name in data.get("primary_key", []):
        if not table.promote_to_primary_key(column_name):
            logger.warning(f"{table}: primary key column '{column_name}' not found")
    return table


def tables_from_document(document: Union[Dict[str, Any], List[Any]]) -> List[Table]:
    """Build every table in a parsed schema document."""
    if isinstance(document, dict):
        entries = document.get("tables")
        if not isinstance(entries, list):
            raise SchemaLoaderError("Schema document must contain a 'tables' list")
    elif isinstance(document, list):
        entries = document
    else:
        raise SchemaLoaderError(f"Unsupported schema document type: {type(document).__name__}")

    tables = [table_from_dict(entry) for entry in entries]
    logger.debug(f"Introspected {len(tables)} tables")
    return tables


def load_tables(source: Union[str, Path]) -> List[Table]:
    """
    Read tables from a schema file or URL.

    Raises:
        SchemaLoaderError: If the document cannot be loaded or is malformed
        FileNotFoundError: If a local file doesn't exist
    """
    _, document = load_json(source)
    return tables_from_document(document)
