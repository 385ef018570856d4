"""
Mapping-document statement generators.

Statements are not one class per operation: a single ``StatementGenerator``
is driven by a ``StatementSpec`` naming the statement shape and the column
subset it iterates. Large-object and plain variants of an operation differ
only in that subset.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from ...logging_config import get_logger
from ..core.errors import ConfigurationMissing
from ..core.generator import ModelFragment, TableContext
from ..core.rules import OperationKind, TypeRole, Variant
from ..core.schema import Column, Table, without_generated_always
from ..dom.xml import Document, TextElement, XmlElement
from .base import (
    OperationGenerator,
    add_lines,
    aliased_column_name,
    escaped_column_name,
    key_where_lines,
    needs_presence_guard,
    null_test,
    parameter_clause,
    renamed_column_name,
    select_list_phrase,
    wrap_items,
)

logger = get_logger(__name__)

ColumnSelector = Callable[[Table], List[Column]]


class Shape(Enum):
    """Structural families of mapping statements."""

    COUNT = "count"
    INSERT = "insert"
    PROJECTION = "projection"                    # select all rows
    FILTERED_PROJECTION = "filtered_projection"  # select by example
    FILTERED_MUTATION = "filtered_mutation"      # delete/update by example
    KEYED_PROJECTION = "keyed_projection"        # select by primary key
    KEYED_MUTATION = "keyed_mutation"            # delete/update by primary key


def _all(table: Table) -> List[Column]:
    return table.all_columns


def _non_blob(table: Table) -> List[Column]:
    return table.non_blob_columns


def _non_primary_key(table: Table) -> List[Column]:
    return table.non_primary_key_columns


def _base(table: Table) -> List[Column]:
    return table.base_columns


@dataclass(frozen=True)
class StatementSpec:
    kind: OperationKind
    element: str
    shape: Shape
    columns: Optional[ColumnSelector] = None
    selective: bool = False


STATEMENT_SPECS: Dict[OperationKind, StatementSpec] = {spec.kind: spec for spec in (
    StatementSpec(OperationKind.COUNT_BY_EXAMPLE, "select", Shape.COUNT),
    StatementSpec(OperationKind.DELETE_BY_EXAMPLE, "delete", Shape.FILTERED_MUTATION),
    StatementSpec(OperationKind.DELETE_BY_PRIMARY_KEY, "delete", Shape.KEYED_MUTATION),
    StatementSpec(OperationKind.INSERT, "insert", Shape.INSERT, _all),
    StatementSpec(OperationKind.INSERT_SELECTIVE, "insert", Shape.INSERT, _all, selective=True),
    StatementSpec(OperationKind.SELECT_ALL, "select", Shape.PROJECTION),
    StatementSpec(OperationKind.SELECT_BY_EXAMPLE, "select", Shape.FILTERED_PROJECTION),
    StatementSpec(OperationKind.SELECT_BY_EXAMPLE_WITH_BLOBS, "select", Shape.FILTERED_PROJECTION),
    StatementSpec(OperationKind.SELECT_BY_PRIMARY_KEY, "select", Shape.KEYED_PROJECTION),
    StatementSpec(OperationKind.UPDATE_BY_EXAMPLE_SELECTIVE, "update", Shape.FILTERED_MUTATION,
                  _all, selective=True),
    StatementSpec(OperationKind.UPDATE_BY_EXAMPLE_WITH_BLOBS, "update", Shape.FILTERED_MUTATION, _all),
    StatementSpec(OperationKind.UPDATE_BY_EXAMPLE, "update", Shape.FILTERED_MUTATION, _non_blob),
    StatementSpec(OperationKind.UPDATE_BY_PRIMARY_KEY_SELECTIVE, "update", Shape.KEYED_MUTATION,
                  _non_primary_key, selective=True),
    StatementSpec(OperationKind.UPDATE_BY_PRIMARY_KEY_WITH_BLOBS, "update", Shape.KEYED_MUTATION,
                  _non_primary_key),
    StatementSpec(OperationKind.UPDATE_BY_PRIMARY_KEY, "update", Shape.KEYED_MUTATION, _base),
)}

# Parameter object name used by by-example updates
RECORD_PREFIX = "record."


def key_parameter_type(context: TableContext) -> str:
    """parameterType for statements addressed by primary key."""
    if context.operations.generate_primary_key_class:
        return context.names.primary_key_type
    key_columns = context.table.primary_key_columns
    if len(key_columns) > 1:
        return "map"
    return key_columns[0].java_type


def record_parameter_type(context: TableContext, kind: OperationKind) -> str:
    """parameterType for statements taking a record."""
    return context.type_for(context.operations.model_role(kind)).qualified_name


def _include(refid: str) -> XmlElement:
    return XmlElement("include").add_attribute("refid", refid)


def _example_guard(refid: str) -> XmlElement:
    guard = XmlElement("if").add_attribute("test", "_parameter != null")
    return guard.add_element(_include(refid))


def _select_column_includes(element: XmlElement, context: TableContext, with_blobs: bool) -> None:
    """Column list references; a table of large objects only has no base list."""
    includes = []
    if context.table.non_blob_columns:
        includes.append(context.names.base_column_list_id)
    if with_blobs:
        includes.append(context.names.blob_column_list_id)
    for index, refid in enumerate(includes):
        if index:
            element.add_element(TextElement(","))
        element.add_element(_include(refid))


class StatementGenerator(OperationGenerator):
    """Builds one mapping statement from its spec."""

    target = TypeRole.MAPPING_DOCUMENT

    def __init__(self, spec: StatementSpec):
        self.spec = spec
        self.kind = spec.kind

    def generate(self, context: TableContext) -> Optional[ModelFragment]:
        statement_id = context.names.statement_id(self.kind)
        if statement_id is None or context.names.mapping_namespace is None:
            return None

        element = XmlElement(self.spec.element).add_attribute("id", statement_id)
        builder = getattr(self, f"_build_{self.spec.shape.value}")
        if builder(element, context) is False:
            logger.debug(f"{context.table}: no {self.kind.value} statement for this column set")
            return None
        return self.fragment(element)

    def _columns(self, context: TableContext) -> List[Column]:
        return without_generated_always(self.spec.columns(context.table))

    def _result_map(self, context: TableContext, with_blobs: bool) -> str:
        if with_blobs:
            return context.names.result_map_with_blobs_id
        return context.names.base_result_map_id

    def _build_count(self, element: XmlElement, context: TableContext):
        element.add_attribute("parameterType", context.names.example_type)
        element.add_attribute("resultType", "java.lang.Long")
        element.add_text(f"select count(*) from {context.names.aliased_runtime_table_name}")
        element.add_element(_example_guard(context.names.example_where_clause_id))

    def _build_insert(self, element: XmlElement, context: TableContext):
        columns = self._columns(context)
        if not columns:
            return False
        config = context.config
        element.add_attribute("parameterType", record_parameter_type(context, self.kind))
        table_name = context.names.runtime_table_name

        if not self.spec.selective:
            add_lines(element, wrap_items(
                f"insert into {table_name} (",
                [escaped_column_name(c, config) for c in columns], ")",
            ))
            add_lines(element, wrap_items(
                "values (", [parameter_clause(c) for c in columns], ")",
            ))
            return None

        element.add_text(f"insert into {table_name}")
        names = XmlElement("trim").add_attribute("prefix", "(").add_attribute(
            "suffix", ")").add_attribute("suffixOverrides", ",")
        values = XmlElement("trim").add_attribute("prefix", "values (").add_attribute(
            "suffix", ")").add_attribute("suffixOverrides", ",")
        for column in columns:
            names.add_element(self._guarded(column, f"{escaped_column_name(column, config)},"))
            values.add_element(self._guarded(column, f"{parameter_clause(column)},"))
        element.add_element(names)
        element.add_element(values)

    def _build_projection(self, element: XmlElement, context: TableContext):
        with_blobs = context.operations.variant(self.kind) == Variant.WITH_BLOBS
        element.add_attribute("resultMap", self._result_map(context, with_blobs))
        element.add_text("select")
        _select_column_includes(element, context, with_blobs)
        element.add_text(f"from {context.names.aliased_runtime_table_name}")

    def _build_filtered_projection(self, element: XmlElement, context: TableContext):
        with_blobs = context.operations.variant(self.kind) == Variant.WITH_BLOBS
        element.add_attribute("parameterType", context.names.example_type)
        element.add_attribute("resultMap", self._result_map(context, with_blobs))
        element.add_text("select")
        element.add_element(XmlElement("if").add_attribute("test", "distinct").add_text("distinct"))
        _select_column_includes(element, context, with_blobs)
        element.add_text(f"from {context.names.aliased_runtime_table_name}")
        element.add_element(_example_guard(context.names.example_where_clause_id))
        order_by = XmlElement("if").add_attribute("test", "orderByClause != null")
        element.add_element(order_by.add_text("order by ${orderByClause}"))

    def _build_filtered_mutation(self, element: XmlElement, context: TableContext):
        table_name = context.names.aliased_runtime_table_name
        if self.spec.columns is None:
            element.add_attribute("parameterType", context.names.example_type)
            element.add_text(f"delete from {table_name}")
            element.add_element(_example_guard(context.names.example_where_clause_id))
            return None

        columns = self._columns(context)
        if not columns:
            return False
        alias = context.table.identity.alias
        element.add_attribute("parameterType", "map")
        element.add_text(f"update {table_name}")
        assignments = [
            f"{aliased_column_name(c, alias, context.config)} = "
            f"{parameter_clause(c, RECORD_PREFIX)}"
            for c in columns
        ]
        if self.spec.selective:
            element.add_element(self._set_block(columns, assignments, RECORD_PREFIX))
        else:
            for index, assignment in enumerate(assignments):
                prefix = "set " if index == 0 else "  "
                suffix = "," if index < len(assignments) - 1 else ""
                element.add_text(f"{prefix}{assignment}{suffix}")
        element.add_element(_example_guard(context.names.update_by_example_where_clause_id))

    def _build_keyed_projection(self, element: XmlElement, context: TableContext):
        with_blobs = context.operations.variant(self.kind) == Variant.WITH_BLOBS
        element.add_attribute("parameterType", key_parameter_type(context))
        element.add_attribute("resultMap", self._result_map(context, with_blobs))
        element.add_text("select")
        _select_column_includes(element, context, with_blobs)
        element.add_text(f"from {context.names.aliased_runtime_table_name}")
        add_lines(element, key_where_lines(
            context.table.primary_key_columns, context.config, context.table.identity.alias,
        ))

    def _build_keyed_mutation(self, element: XmlElement, context: TableContext):
        table = context.table
        table_name = context.names.runtime_table_name
        if self.spec.columns is None:
            element.add_attribute("parameterType", key_parameter_type(context))
            element.add_text(f"delete from {table_name}")
            add_lines(element, key_where_lines(table.primary_key_columns, context.config))
            return None

        columns = self._columns(context)
        if not columns:
            return False
        element.add_attribute("parameterType", record_parameter_type(context, self.kind))
        element.add_text(f"update {table_name}")
        assignments = [
            f"{escaped_column_name(c, context.config)} = {parameter_clause(c)}" for c in columns
        ]
        if self.spec.selective:
            element.add_element(self._set_block(columns, assignments))
        else:
            for index, assignment in enumerate(assignments):
                prefix = "set " if index == 0 else "  "
                suffix = "," if index < len(assignments) - 1 else ""
                element.add_text(f"{prefix}{assignment}{suffix}")
        add_lines(element, key_where_lines(table.primary_key_columns, context.config))

    def _set_block(self, columns: List[Column], assignments: List[str],
                   prefix: str = "") -> XmlElement:
        block = XmlElement("set")
        for column, assignment in zip(columns, assignments):
            block.add_element(self._guarded(column, f"{assignment},", prefix))
        return block

    @staticmethod
    def _guarded(column: Column, text: str, prefix: str = ""):
        """Wrap text in a presence test unless the column is primitive."""
        if not needs_presence_guard(column):
            return TextElement(text)
        guard = XmlElement("if").add_attribute("test", null_test(column, prefix))
        return guard.add_text(text)


class ResultMapGenerator(OperationGenerator):
    """Base result map and the large-object result map."""

    target = TypeRole.MAPPING_DOCUMENT

    def __init__(self, with_blobs: bool):
        self.with_blobs = with_blobs
        self.kind = (
            OperationKind.RESULT_MAP_WITH_BLOBS if with_blobs else OperationKind.BASE_RESULT_MAP
        )

    def generate(self, context: TableContext) -> Optional[ModelFragment]:
        if context.names.mapping_namespace is None:
            return None
        names = context.names
        operations = context.operations
        table = context.table

        element = XmlElement("resultMap")
        if self.with_blobs:
            element.add_attribute("id", names.result_map_with_blobs_id)
            result_type = context.type_for(operations.all_fields_role)
        else:
            element.add_attribute("id", names.base_result_map_id)
            result_type = context.type_for(operations.base_record_role)
        element.add_attribute("type", result_type.qualified_name)

        if context.constructor_based:
            columns = table.all_columns if self.with_blobs else table.non_blob_columns
            element.add_element(self._constructor(columns, context))
            return self.fragment(element)

        if self.with_blobs:
            if operations.is_enabled(OperationKind.BASE_RESULT_MAP):
                element.add_attribute("extends", names.base_result_map_id)
                columns = table.blob_columns
            else:
                columns = table.all_columns
        else:
            columns = table.non_blob_columns

        alias = table.identity.alias
        primary_keys = set(id(c) for c in table.primary_key_columns)
        for column in columns:
            tag = "id" if id(column) in primary_keys else "result"
            child = XmlElement(tag)
            child.add_attribute("column", renamed_column_name(column, alias))
            child.add_attribute("jdbcType", column.jdbc_type)
            child.add_attribute("property", column.java_property)
            if column.type_handler:
                child.add_attribute("typeHandler", column.type_handler)
            element.add_element(child)
        return self.fragment(element)

    @staticmethod
    def _constructor(columns: List[Column], context: TableContext) -> XmlElement:
        constructor = XmlElement("constructor")
        alias = context.table.identity.alias
        primary_keys = set(id(c) for c in context.table.primary_key_columns)
        for column in columns:
            child = XmlElement("idArg" if id(column) in primary_keys else "arg")
            child.add_attribute("column", renamed_column_name(column, alias))
            child.add_attribute("jdbcType", column.jdbc_type)
            child.add_attribute("javaType", column.java_type)
            if column.type_handler:
                child.add_attribute("typeHandler", column.type_handler)
            constructor.add_element(child)
        return constructor


class WhereClauseGenerator(OperationGenerator):
    """Reusable criteria ``<sql>`` fragment evaluated against an example object."""

    target = TypeRole.MAPPING_DOCUMENT

    def __init__(self, for_update: bool):
        self.for_update = for_update
        self.kind = (
            OperationKind.UPDATE_BY_EXAMPLE_WHERE_CLAUSE if for_update
            else OperationKind.EXAMPLE_WHERE_CLAUSE
        )

    def generate(self, context: TableContext) -> Optional[ModelFragment]:
        if context.names.mapping_namespace is None:
            return None
        names = context.names
        sql_id = (
            names.update_by_example_where_clause_id if self.for_update
            else names.example_where_clause_id
        )
        collection = "example.oredCriteria" if self.for_update else "oredCriteria"

        list_loop = XmlElement("foreach")
        for name, value in (("close", ")"), ("collection", "criterion.value"),
                            ("item", "listItem"), ("open", "("), ("separator", ",")):
            list_loop.add_attribute(name, value)
        list_loop.add_text("#{listItem}")

        choose = XmlElement("choose")
        choose.add_element(self._when("criterion.noValue", "and ${criterion.condition}"))
        choose.add_element(self._when(
            "criterion.singleValue", "and ${criterion.condition} #{criterion.value}"))
        choose.add_element(self._when(
            "criterion.betweenValue",
            "and ${criterion.condition} #{criterion.value} and #{criterion.secondValue}"))
        list_value = self._when("criterion.listValue", "and ${criterion.condition}")
        choose.add_element(list_value.add_element(list_loop))

        criteria_loop = XmlElement("foreach").add_attribute(
            "collection", "criteria.criteria").add_attribute("item", "criterion")
        trim = XmlElement("trim").add_attribute("prefix", "(").add_attribute(
            "prefixOverrides", "and").add_attribute("suffix", ")")
        valid = XmlElement("if").add_attribute("test", "criteria.valid")
        ored_loop = XmlElement("foreach").add_attribute("collection", collection).add_attribute(
            "item", "criteria").add_attribute("separator", "or")

        where = XmlElement("where").add_element(
            ored_loop.add_element(valid.add_element(trim.add_element(
                criteria_loop.add_element(choose)))))
        return self.fragment(XmlElement("sql").add_attribute("id", sql_id).add_element(where))

    @staticmethod
    def _when(test: str, text: str) -> XmlElement:
        return XmlElement("when").add_attribute("test", test).add_text(text)


class ColumnListGenerator(OperationGenerator):
    """``<sql>`` fragment listing the base or large-object columns."""

    target = TypeRole.MAPPING_DOCUMENT

    def __init__(self, with_blobs: bool):
        self.with_blobs = with_blobs
        self.kind = OperationKind.BLOB_COLUMN_LIST if with_blobs else OperationKind.BASE_COLUMN_LIST

    def generate(self, context: TableContext) -> Optional[ModelFragment]:
        if context.names.mapping_namespace is None:
            return None
        table = context.table
        columns = table.blob_columns if self.with_blobs else table.non_blob_columns
        if not columns:
            return None
        sql_id = (
            context.names.blob_column_list_id if self.with_blobs
            else context.names.base_column_list_id
        )
        alias = table.identity.alias
        element = XmlElement("sql").add_attribute("id", sql_id)
        add_lines(element, wrap_items(
            "", [select_list_phrase(c, alias, context.config) for c in columns],
        ))
        return self.fragment(element)


def build_document(context: TableContext) -> Document:
    """
    Empty mapping document for a table.

    Raises:
        ConfigurationMissing: If no mapping package is configured
    """
    namespace = context.names.mapping_namespace
    if namespace is None:
        raise ConfigurationMissing("sql_map_package")
    root = XmlElement("mapper").add_attribute("namespace", namespace)
    return Document(root)


SUPPORT_GENERATORS = (
    ResultMapGenerator(with_blobs=False),
    ResultMapGenerator(with_blobs=True),
    WhereClauseGenerator(for_update=False),
    WhereClauseGenerator(for_update=True),
    ColumnListGenerator(with_blobs=False),
    ColumnListGenerator(with_blobs=True),
)


def statement_generators(exclude=()) -> List[OperationGenerator]:
    """Supporting elements followed by one generator per statement kind."""
    generators: List[OperationGenerator] = list(SUPPORT_GENERATORS)
    generators.extend(
        StatementGenerator(spec) for kind, spec in STATEMENT_SPECS.items() if kind not in exclude
    )
    return generators
