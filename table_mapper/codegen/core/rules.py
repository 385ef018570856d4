"""
Rules engine deciding which artifacts to generate for a table.

``decide`` is a pure function of the table shape and configuration. Its
result, an ``OperationSet``, is computed once per table and never changes
afterwards.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, FrozenSet, List, Mapping

from .config import GeneratorConfig, ModelType, TableConfig
from .schema import Column, Table, without_generated_always


class OperationKind(Enum):
    """Generation operations, declared in canonical order."""

    # Supporting mapping-document elements
    BASE_RESULT_MAP = "base_result_map"
    RESULT_MAP_WITH_BLOBS = "result_map_with_blobs"
    EXAMPLE_WHERE_CLAUSE = "example_where_clause"
    UPDATE_BY_EXAMPLE_WHERE_CLAUSE = "update_by_example_where_clause"
    BASE_COLUMN_LIST = "base_column_list"
    BLOB_COLUMN_LIST = "blob_column_list"

    # Statements
    COUNT_BY_EXAMPLE = "count_by_example"
    DELETE_BY_EXAMPLE = "delete_by_example"
    DELETE_BY_PRIMARY_KEY = "delete_by_primary_key"
    INSERT = "insert"
    INSERT_SELECTIVE = "insert_selective"
    SELECT_ALL = "select_all"
    SELECT_BY_EXAMPLE = "select_by_example"
    SELECT_BY_EXAMPLE_WITH_BLOBS = "select_by_example_with_blobs"
    SELECT_BY_PRIMARY_KEY = "select_by_primary_key"
    UPDATE_BY_EXAMPLE_SELECTIVE = "update_by_example_selective"
    UPDATE_BY_EXAMPLE_WITH_BLOBS = "update_by_example_with_blobs"
    UPDATE_BY_EXAMPLE = "update_by_example"
    UPDATE_BY_PRIMARY_KEY_SELECTIVE = "update_by_primary_key_selective"
    UPDATE_BY_PRIMARY_KEY_WITH_BLOBS = "update_by_primary_key_with_blobs"
    UPDATE_BY_PRIMARY_KEY = "update_by_primary_key"

    @property
    def is_statement(self) -> bool:
        return self not in SUPPORT_KINDS

    @property
    def is_by_key(self) -> bool:
        return "by_primary_key" in self.value

    @property
    def is_selective(self) -> bool:
        return self.value.endswith("_selective")


SUPPORT_KINDS = frozenset({
    OperationKind.BASE_RESULT_MAP,
    OperationKind.RESULT_MAP_WITH_BLOBS,
    OperationKind.EXAMPLE_WHERE_CLAUSE,
    OperationKind.UPDATE_BY_EXAMPLE_WHERE_CLAUSE,
    OperationKind.BASE_COLUMN_LIST,
    OperationKind.BLOB_COLUMN_LIST,
})

CANONICAL_ORDER: List[OperationKind] = list(OperationKind)


class Variant(Enum):
    """Column variant an enabled operation is generated in."""

    PLAIN = "plain"
    WITH_BLOBS = "with_blobs"
    WITHOUT_BLOBS = "without_blobs"
    SELECTIVE = "selective"


class TypeRole(Enum):
    """Roles of the artifacts emitted per table."""

    RECORD = "record"
    PRIMARY_KEY = "primary_key"
    RECORD_WITH_BLOBS = "record_with_blobs"
    MAPPER = "mapper"
    SQL_PROVIDER = "sql_provider"
    MAPPING_DOCUMENT = "mapping_document"

    @property
    def is_model(self) -> bool:
        return self in MODEL_ROLES


MODEL_ROLES = frozenset({TypeRole.RECORD, TypeRole.PRIMARY_KEY, TypeRole.RECORD_WITH_BLOBS})


@dataclass(frozen=True)
class Decision:
    """Whether an operation is generated, and in which variant."""

    enabled: bool
    variant: Variant = Variant.PLAIN


@dataclass(frozen=True)
class OperationSet:
    """
    Immutable per-table decision.

    Carries the enabled operations and the model type split (which of the
    record, key and large-object record types exist).
    """

    decisions: Mapping[OperationKind, Decision]
    model_roles: FrozenSet[TypeRole]
    model_type: ModelType

    def is_enabled(self, kind: OperationKind) -> bool:
        return self.decisions[kind].enabled

    def variant(self, kind: OperationKind) -> Variant:
        return self.decisions[kind].variant

    def enabled_kinds(self) -> List[OperationKind]:
        """Enabled operations in canonical order."""
        return [kind for kind in CANONICAL_ORDER if self.decisions[kind].enabled]

    @property
    def generate_primary_key_class(self) -> bool:
        return TypeRole.PRIMARY_KEY in self.model_roles

    @property
    def generate_base_record_class(self) -> bool:
        return TypeRole.RECORD in self.model_roles

    @property
    def generate_record_with_blobs_class(self) -> bool:
        return TypeRole.RECORD_WITH_BLOBS in self.model_roles

    @property
    def base_record_role(self) -> TypeRole:
        """Type mapped by the base result map and non-large-object statements."""
        for role in (TypeRole.RECORD, TypeRole.PRIMARY_KEY):
            if role in self.model_roles:
                return role
        return self.all_fields_role

    @property
    def all_fields_role(self) -> TypeRole:
        """The most derived model type, holding every column."""
        for role in (TypeRole.RECORD_WITH_BLOBS, TypeRole.RECORD, TypeRole.PRIMARY_KEY):
            if role in self.model_roles:
                return role
        return TypeRole.RECORD

    def model_role(self, kind: OperationKind) -> TypeRole:
        """
        Model type a statement reads rows into or takes as its record.

        Statements without the large-object columns use the base record;
        every other statement uses the type holding all columns.
        """
        if self.variant(kind) == Variant.WITHOUT_BLOBS:
            return self.base_record_role
        return self.all_fields_role


def _model_roles(table: Table, model_type: ModelType, simple: bool) -> FrozenSet[TypeRole]:
    """Collapse the record/key/large-object split according to the model type."""
    if model_type == ModelType.FLAT:
        return frozenset({TypeRole.RECORD})

    if model_type == ModelType.HIERARCHICAL:
        return frozenset({TypeRole.PRIMARY_KEY, TypeRole.RECORD, TypeRole.RECORD_WITH_BLOBS})

    roles = set()
    pk_count = len(table.primary_key_columns)
    if pk_count > 0 and (pk_count > 1 or not simple):
        roles.add(TypeRole.PRIMARY_KEY)
    if table.has_base_columns or (pk_count > 0 and TypeRole.PRIMARY_KEY not in roles):
        roles.add(TypeRole.RECORD)
    if table.has_blob_columns:
        roles.add(TypeRole.RECORD_WITH_BLOBS)
    if not roles:
        roles.add(TypeRole.RECORD)
    return frozenset(roles)


def _writable(columns: List[Column]) -> bool:
    """Whether an insert or update over these columns assigns anything."""
    return bool(without_generated_always(columns))


# Column-subset preconditions per operation; an operation whose subset is
# empty is disabled regardless of configuration. Mutations only count the
# columns they may assign.
_PRECONDITIONS: Dict[OperationKind, Callable[[Table], bool]] = {
    OperationKind.COUNT_BY_EXAMPLE: lambda t: t.has_any_columns,
    OperationKind.DELETE_BY_EXAMPLE: lambda t: t.has_any_columns,
    OperationKind.DELETE_BY_PRIMARY_KEY: lambda t: t.has_primary_key,
    OperationKind.INSERT: lambda t: _writable(t.all_columns),
    OperationKind.INSERT_SELECTIVE: lambda t: _writable(t.all_columns),
    OperationKind.SELECT_ALL: lambda t: t.has_any_columns,
    OperationKind.SELECT_BY_EXAMPLE: lambda t: bool(t.non_blob_columns),
    OperationKind.SELECT_BY_EXAMPLE_WITH_BLOBS: lambda t: t.has_blob_columns,
    OperationKind.SELECT_BY_PRIMARY_KEY: lambda t: (
        t.has_primary_key and bool(t.non_primary_key_columns)
    ),
    OperationKind.UPDATE_BY_EXAMPLE_SELECTIVE: lambda t: _writable(t.all_columns),
    OperationKind.UPDATE_BY_EXAMPLE_WITH_BLOBS: lambda t: (
        t.has_blob_columns and _writable(t.all_columns)
    ),
    OperationKind.UPDATE_BY_EXAMPLE: lambda t: _writable(t.non_blob_columns),
    OperationKind.UPDATE_BY_PRIMARY_KEY_SELECTIVE: lambda t: (
        t.has_primary_key and _writable(t.non_primary_key_columns)
    ),
    OperationKind.UPDATE_BY_PRIMARY_KEY_WITH_BLOBS: lambda t: (
        t.has_primary_key and t.has_blob_columns and _writable(t.non_primary_key_columns)
    ),
    OperationKind.UPDATE_BY_PRIMARY_KEY: lambda t: (
        t.has_primary_key and _writable(t.base_columns)
    ),
}

_VARIANTS: Dict[OperationKind, Variant] = {
    OperationKind.SELECT_BY_EXAMPLE: Variant.WITHOUT_BLOBS,
    OperationKind.SELECT_BY_EXAMPLE_WITH_BLOBS: Variant.WITH_BLOBS,
    OperationKind.UPDATE_BY_EXAMPLE: Variant.WITHOUT_BLOBS,
    OperationKind.UPDATE_BY_EXAMPLE_WITH_BLOBS: Variant.WITH_BLOBS,
    OperationKind.UPDATE_BY_PRIMARY_KEY: Variant.WITHOUT_BLOBS,
    OperationKind.UPDATE_BY_PRIMARY_KEY_WITH_BLOBS: Variant.WITH_BLOBS,
    OperationKind.INSERT_SELECTIVE: Variant.SELECTIVE,
    OperationKind.UPDATE_BY_EXAMPLE_SELECTIVE: Variant.SELECTIVE,
    OperationKind.UPDATE_BY_PRIMARY_KEY_SELECTIVE: Variant.SELECTIVE,
    OperationKind.RESULT_MAP_WITH_BLOBS: Variant.WITH_BLOBS,
    OperationKind.BLOB_COLUMN_LIST: Variant.WITH_BLOBS,
}


def decide(table: Table, config: GeneratorConfig, table_config: TableConfig) -> OperationSet:
    """
    Decide the operations and model types generated for a table.

    An operation is enabled unless the table configuration suppresses it,
    and is always disabled when its required column subset is empty. A
    table without primary-key columns therefore has every by-key operation
    disabled, while by-example operations stay governed by configuration.

    Args:
        table: Table after configuration (ignored columns removed)
        config: Context configuration
        table_config: Table configuration

    Returns:
        Immutable OperationSet
    """
    model_type = config.model_type_for(table_config)
    disabled = set(table_config.disabled_operations)

    decisions: Dict[OperationKind, Decision] = {}

    for kind, precondition in _PRECONDITIONS.items():
        enabled = kind.value not in disabled and precondition(table)
        if kind.is_selective and not table_config.selective_update:
            enabled = False
        variant = _VARIANTS.get(kind, Variant.PLAIN)
        if kind in (OperationKind.SELECT_ALL, OperationKind.SELECT_BY_PRIMARY_KEY):
            variant = Variant.WITH_BLOBS if table.has_blob_columns else Variant.WITHOUT_BLOBS
        decisions[kind] = Decision(enabled, variant)

    def on(kind: OperationKind) -> bool:
        return decisions[kind].enabled

    # Supporting elements exist only for the statements that reference them,
    # and the base ones only when there are base columns to list
    has_base_list = bool(table.non_blob_columns)
    decisions[OperationKind.BASE_RESULT_MAP] = Decision(
        has_base_list and (
            on(OperationKind.SELECT_BY_EXAMPLE)
            or on(OperationKind.SELECT_BY_PRIMARY_KEY)
            or on(OperationKind.SELECT_ALL)
        )
    )
    decisions[OperationKind.RESULT_MAP_WITH_BLOBS] = Decision(
        table.has_blob_columns and (
            on(OperationKind.SELECT_BY_EXAMPLE_WITH_BLOBS)
            or on(OperationKind.SELECT_BY_PRIMARY_KEY)
            or on(OperationKind.SELECT_ALL)
        ),
        Variant.WITH_BLOBS,
    )
    decisions[OperationKind.EXAMPLE_WHERE_CLAUSE] = Decision(
        on(OperationKind.COUNT_BY_EXAMPLE)
        or on(OperationKind.DELETE_BY_EXAMPLE)
        or on(OperationKind.SELECT_BY_EXAMPLE)
        or on(OperationKind.SELECT_BY_EXAMPLE_WITH_BLOBS)
    )
    decisions[OperationKind.UPDATE_BY_EXAMPLE_WHERE_CLAUSE] = Decision(
        on(OperationKind.UPDATE_BY_EXAMPLE)
        or on(OperationKind.UPDATE_BY_EXAMPLE_SELECTIVE)
        or on(OperationKind.UPDATE_BY_EXAMPLE_WITH_BLOBS)
    )
    decisions[OperationKind.BASE_COLUMN_LIST] = Decision(
        has_base_list and (
            on(OperationKind.SELECT_BY_EXAMPLE)
            or on(OperationKind.SELECT_BY_EXAMPLE_WITH_BLOBS)
            or on(OperationKind.SELECT_BY_PRIMARY_KEY)
            or on(OperationKind.SELECT_ALL)
        )
    )
    decisions[OperationKind.BLOB_COLUMN_LIST] = Decision(
        table.has_blob_columns and (
            on(OperationKind.SELECT_BY_EXAMPLE_WITH_BLOBS)
            or on(OperationKind.SELECT_BY_PRIMARY_KEY)
            or on(OperationKind.SELECT_ALL)
        ),
        Variant.WITH_BLOBS,
    )

    ordered = {kind: decisions[kind] for kind in CANONICAL_ORDER}
    return OperationSet(
        decisions=MappingProxyType(ordered),
        model_roles=_model_roles(table, model_type, config.simple_model),
        model_type=model_type,
    )
