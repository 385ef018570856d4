"""
Core schema representation for code generation.

Normalises table metadata from the schema supplier into tables and columns
carrying the semantic attributes generators rely on.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum

from .naming import property_name, domain_object_name


class TypeCategory(Enum):
    """Semantic column type families."""

    NUMERIC = "numeric"
    STRING = "string"
    TEMPORAL = "temporal"
    BINARY = "binary"
    OTHER = "other"


# JDBC type name -> (category, default Java type)
JDBC_TYPE_MAP: Dict[str, tuple] = {
    "BIT": (TypeCategory.NUMERIC, "java.lang.Boolean"),
    "BOOLEAN": (TypeCategory.NUMERIC, "java.lang.Boolean"),
    "TINYINT": (TypeCategory.NUMERIC, "java.lang.Byte"),
    "SMALLINT": (TypeCategory.NUMERIC, "java.lang.Short"),
    "INTEGER": (TypeCategory.NUMERIC, "java.lang.Integer"),
    "BIGINT": (TypeCategory.NUMERIC, "java.lang.Long"),
    "REAL": (TypeCategory.NUMERIC, "java.lang.Float"),
    "FLOAT": (TypeCategory.NUMERIC, "java.lang.Double"),
    "DOUBLE": (TypeCategory.NUMERIC, "java.lang.Double"),
    "DECIMAL": (TypeCategory.NUMERIC, "java.math.BigDecimal"),
    "NUMERIC": (TypeCategory.NUMERIC, "java.math.BigDecimal"),
    "CHAR": (TypeCategory.STRING, "java.lang.String"),
    "VARCHAR": (TypeCategory.STRING, "java.lang.String"),
    "NCHAR": (TypeCategory.STRING, "java.lang.String"),
    "NVARCHAR": (TypeCategory.STRING, "java.lang.String"),
    "LONGVARCHAR": (TypeCategory.STRING, "java.lang.String"),
    "LONGNVARCHAR": (TypeCategory.STRING, "java.lang.String"),
    "CLOB": (TypeCategory.STRING, "java.lang.String"),
    "NCLOB": (TypeCategory.STRING, "java.lang.String"),
    "DATE": (TypeCategory.TEMPORAL, "java.util.Date"),
    "TIME": (TypeCategory.TEMPORAL, "java.util.Date"),
    "TIMESTAMP": (TypeCategory.TEMPORAL, "java.util.Date"),
    "BINARY": (TypeCategory.BINARY, "byte[]"),
    "VARBINARY": (TypeCategory.BINARY, "byte[]"),
    "LONGVARBINARY": (TypeCategory.BINARY, "byte[]"),
    "BLOB": (TypeCategory.BINARY, "byte[]"),
    "OTHER": (TypeCategory.OTHER, "java.lang.Object"),
}

# JDBC types whose values are handled apart from ordinary scalar columns
LARGE_OBJECT_JDBC_TYPES = {
    "BINARY", "BLOB", "CLOB", "LONGNVARCHAR", "LONGVARBINARY", "LONGVARCHAR",
    "NCLOB", "VARBINARY",
}

PRIMITIVE_JAVA_TYPES = {
    "boolean", "byte", "char", "double", "float", "int", "long", "short",
}


@dataclass
class Column:
    """A single introspected column."""

    actual_name: str
    jdbc_type: str = "OTHER"
    nullable: bool = True
    generated_always: bool = False
    delimited: bool = False
    type_handler: Optional[str] = None
    java_property: str = ""
    java_type: str = ""
    remarks: Optional[str] = None

    def __post_init__(self):
        """Derive the property name and Java type when not supplied."""
        self.jdbc_type = self.jdbc_type.upper()
        if not self.java_property:
            self.java_property = property_name(self.actual_name)
        if not self.java_type:
            self.java_type = JDBC_TYPE_MAP.get(self.jdbc_type, JDBC_TYPE_MAP["OTHER"])[1]

    @property
    def category(self) -> TypeCategory:
        return JDBC_TYPE_MAP.get(self.jdbc_type, JDBC_TYPE_MAP["OTHER"])[0]

    @property
    def is_large_object(self) -> bool:
        return self.jdbc_type in LARGE_OBJECT_JDBC_TYPES

    @property
    def is_primitive(self) -> bool:
        """Primitive-typed properties cannot represent an absent value."""
        return self.java_type in PRIMITIVE_JAVA_TYPES

    def matches(self, name: str) -> bool:
        """Delimited names match exactly, undelimited ones ignore case."""
        if self.delimited:
            return self.actual_name == name
        return self.actual_name.lower() == name.lower()


@dataclass
class FullyQualifiedTable:
    """Catalog/schema/name triple plus the derived domain object name."""

    name: str
    schema: Optional[str] = None
    catalog: Optional[str] = None
    domain_object_name: str = ""
    alias: Optional[str] = None

    def __post_init__(self):
        if not self.domain_object_name:
            self.domain_object_name = domain_object_name(self.name)

    @property
    def name_at_runtime(self) -> str:
        """Qualified name as written into SQL statements."""
        return ".".join(part for part in (self.catalog, self.schema, self.name) if part)

    @property
    def aliased_name_at_runtime(self) -> str:
        if self.alias:
            return f"{self.name_at_runtime} {self.alias}"
        return self.name_at_runtime

    def __str__(self) -> str:
        return self.name_at_runtime


@dataclass
class Table:
    """
    A table and its columns, partitioned into primary-key, base and
    large-object subsets.

    Every column belongs to exactly one subset. Primary-key order is the
    order in which columns were promoted, not lexical order.
    """

    identity: FullyQualifiedTable
    remarks: Optional[str] = None
    table_type: str = "TABLE"
    primary_key_columns: List[Column] = field(default_factory=list)
    base_columns: List[Column] = field(default_factory=list)
    blob_columns: List[Column] = field(default_factory=list)

    @property
    def domain_object_name(self) -> str:
        return self.identity.domain_object_name

    def add_column(self, column: Column) -> None:
        """Place a column into the base or large-object subset."""
        if column.is_large_object:
            self.blob_columns.append(column)
        else:
            self.base_columns.append(column)

    def promote_to_primary_key(self, column_name: str) -> bool:
        """
        Move a column into the primary-key subset.

        Base columns are searched before large-object columns, and the first
        exact match is moved. An unknown name is silently ignored.

        Returns:
            True if a column was moved
        """
        for subset in (self.base_columns, self.blob_columns):
            for index, column in enumerate(subset):
                if column.actual_name == column_name:
                    self.primary_key_columns.append(subset.pop(index))
                    return True
        return False

    def get_column(self, column_name: Optional[str]) -> Optional[Column]:
        """Find a column by name in any subset; None when absent."""
        if column_name is None:
            return None
        for column in self.all_columns:
            if column.matches(column_name):
                return column
        return None

    @property
    def all_columns(self) -> List[Column]:
        return self.primary_key_columns + self.base_columns + self.blob_columns

    @property
    def non_blob_columns(self) -> List[Column]:
        return self.primary_key_columns + self.base_columns

    @property
    def non_primary_key_columns(self) -> List[Column]:
        return self.base_columns + self.blob_columns

    @property
    def has_primary_key(self) -> bool:
        return len(self.primary_key_columns) > 0

    @property
    def has_base_columns(self) -> bool:
        return len(self.base_columns) > 0

    @property
    def has_blob_columns(self) -> bool:
        return len(self.blob_columns) > 0

    @property
    def has_any_columns(self) -> bool:
        return bool(self.primary_key_columns or self.base_columns or self.blob_columns)

    def __str__(self) -> str:
        return str(self.identity)


def without_generated_always(columns: List[Column]) -> List[Column]:
    """Columns that may appear in insert/update statements."""
    return [column for column in columns if not column.generated_always]
