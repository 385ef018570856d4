"""
Mapper interface and SQL provider generators.

With the ``mixed`` client the selective row-addressed statements are built
at runtime by the SQL provider type; the mapper method then carries a
provider annotation instead of pointing at a mapping-document statement.
"""

from typing import List, Optional

from ..core.config import ClientType
from ..core.errors import ConfigurationMissing
from ..core.generator import ModelFragment, TableContext
from ..core.naming import getter_name
from ..core.rules import OperationKind, TypeRole
from ..core.schema import without_generated_always
from ..dom.java import (
    INT,
    LONG,
    STRING,
    Annotation,
    CompilationUnit,
    JavaType,
    Method,
    Parameter,
    UnitKind,
    list_of,
)
from .base import OperationGenerator, escaped_column_name, needs_presence_guard, parameter_clause

PARAM_ANNOTATION = JavaType("org.apache.ibatis.annotations.Param")
INSERT_PROVIDER = JavaType("org.apache.ibatis.annotations.InsertProvider")
UPDATE_PROVIDER = JavaType("org.apache.ibatis.annotations.UpdateProvider")
SQL_BUILDER = JavaType("org.apache.ibatis.jdbc.SQL")

# Statements the SQL provider builds for the mixed client
PROVIDER_KINDS = (
    OperationKind.INSERT_SELECTIVE,
    OperationKind.UPDATE_BY_PRIMARY_KEY_SELECTIVE,
)


def _param(java_type: JavaType, name: str, annotate: bool) -> Parameter:
    annotations = [Annotation(PARAM_ANNOTATION, f'"{name}"')] if annotate else []
    return Parameter(java_type, name, annotations)


def key_parameters(context: TableContext) -> List[Parameter]:
    """Parameters addressing one row by primary key."""
    if context.operations.generate_primary_key_class:
        return [Parameter(context.type_for(TypeRole.PRIMARY_KEY), "key")]
    columns = context.table.primary_key_columns
    annotate = len(columns) > 1
    return [_param(JavaType(c.java_type), c.java_property, annotate) for c in columns]


def _record_type(context: TableContext, kind: OperationKind) -> JavaType:
    return context.type_for(context.operations.model_role(kind))


class MapperMethodGenerator(OperationGenerator):
    """Abstract mapper-interface method for one statement kind."""

    target = TypeRole.MAPPER

    def __init__(self, kind: OperationKind, provided: bool = False):
        self.kind = kind
        self.provided = provided

    def generate(self, context: TableContext) -> Optional[ModelFragment]:
        names = context.names
        if names.mapper_type is None:
            return None
        method_name = names.statement_id(self.kind)
        if method_name is None:
            return None

        kind = self.kind
        example = Parameter(context.example_type, "example")
        method = Method(method_name, return_type=INT, body=None)

        if kind == OperationKind.COUNT_BY_EXAMPLE:
            method.return_type = LONG
            method.add_parameter(example)
        elif kind == OperationKind.DELETE_BY_EXAMPLE:
            method.add_parameter(example)
        elif kind == OperationKind.DELETE_BY_PRIMARY_KEY:
            method.parameters.extend(key_parameters(context))
        elif kind in (OperationKind.INSERT, OperationKind.INSERT_SELECTIVE):
            method.add_parameter(Parameter(_record_type(context, kind), "record"))
        elif kind == OperationKind.SELECT_ALL:
            method.return_type = list_of(_record_type(context, kind))
        elif kind in (OperationKind.SELECT_BY_EXAMPLE, OperationKind.SELECT_BY_EXAMPLE_WITH_BLOBS):
            method.return_type = list_of(_record_type(context, kind))
            method.add_parameter(example)
        elif kind == OperationKind.SELECT_BY_PRIMARY_KEY:
            method.return_type = _record_type(context, kind)
            method.parameters.extend(key_parameters(context))
        elif kind in (OperationKind.UPDATE_BY_EXAMPLE_SELECTIVE,
                      OperationKind.UPDATE_BY_EXAMPLE_WITH_BLOBS,
                      OperationKind.UPDATE_BY_EXAMPLE):
            method.add_parameter(_param(_record_type(context, kind), "record", True))
            method.add_parameter(_param(context.example_type, "example", True))
        else:
            method.add_parameter(Parameter(_record_type(context, kind), "record"))

        if self.provided:
            provider = context.type_for(TypeRole.SQL_PROVIDER)
            annotation_type = INSERT_PROVIDER if kind == OperationKind.INSERT_SELECTIVE else UPDATE_PROVIDER
            method.add_annotation(Annotation(
                annotation_type, f'type={provider.simple_name}.class, method="{method_name}"'
            ))

        fragment = self.fragment(method)
        for java_type in method.referenced_types():
            fragment.add_import(java_type)
        return fragment


class ProviderMethodGenerator(OperationGenerator):
    """SQL builder method for a selective statement of the mixed client."""

    target = TypeRole.SQL_PROVIDER

    def __init__(self, kind: OperationKind):
        self.kind = kind

    def generate(self, context: TableContext) -> Optional[ModelFragment]:
        names = context.names
        if names.sql_provider_type is None:
            return None

        table = context.table
        config = context.config
        record_type = _record_type(context, self.kind)
        method = Method(
            names.statement_id(self.kind),
            return_type=STRING,
            parameters=[Parameter(record_type, "record")],
        )
        method.add_body_line(f"{SQL_BUILDER.simple_name} sql = new {SQL_BUILDER.simple_name}();")

        if self.kind == OperationKind.INSERT_SELECTIVE:
            method.add_body_line(f'sql.INSERT_INTO("{names.runtime_table_name}");')
            columns = without_generated_always(table.all_columns)
        else:
            method.add_body_line(f'sql.UPDATE("{names.runtime_table_name}");')
            columns = without_generated_always(table.non_primary_key_columns)
        method.add_body_line("")

        for column in columns:
            column_name = _java_string(escaped_column_name(column, config))
            if self.kind == OperationKind.INSERT_SELECTIVE:
                statement = f'sql.VALUES("{column_name}", "{parameter_clause(column)}");'
            else:
                statement = f'sql.SET("{column_name} = {parameter_clause(column)}");'

            if needs_presence_guard(column):
                getter = getter_name(column.java_property, column.java_type)
                method.add_body_line(f"if (record.{getter}() != null) {{")
                method.add_body_line(statement)
                method.add_body_line("}")
            else:
                method.add_body_line(statement)
            method.add_body_line("")

        if self.kind == OperationKind.UPDATE_BY_PRIMARY_KEY_SELECTIVE:
            for column in table.primary_key_columns:
                column_name = _java_string(escaped_column_name(column, config))
                method.add_body_line(f'sql.WHERE("{column_name} = {parameter_clause(column)}");')
            method.add_body_line("")

        method.add_body_line("return sql.toString();")

        fragment = self.fragment(method)
        fragment.add_import(SQL_BUILDER)
        fragment.add_import(record_type)
        return fragment


def _java_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def build_mapper_unit(context: TableContext) -> CompilationUnit:
    """
    Empty mapper interface.

    Raises:
        ConfigurationMissing: If no client package is configured
    """
    mapper_type = context.type_for(TypeRole.MAPPER)
    if mapper_type is None:
        raise ConfigurationMissing("client_package")
    unit = CompilationUnit(mapper_type, kind=UnitKind.INTERFACE)
    root_interface = context.config.property_for(context.table_config, "root_interface")
    if root_interface:
        unit.super_interfaces.append(JavaType(root_interface))
    return unit


def build_provider_unit(context: TableContext) -> Optional[CompilationUnit]:
    """Empty SQL provider class; only the mixed client has one."""
    if context.config.client != ClientType.MIXED:
        return None
    provider_type = context.type_for(TypeRole.SQL_PROVIDER)
    if provider_type is None:
        raise ConfigurationMissing("client_package")
    return CompilationUnit(provider_type)


def client_generators(client_type: ClientType) -> List[OperationGenerator]:
    """Mapper and provider generators in canonical statement order."""
    generators: List[OperationGenerator] = []
    for kind in OperationKind:
        if not kind.is_statement:
            continue
        provided = client_type == ClientType.MIXED and kind in PROVIDER_KINDS
        generators.append(MapperMethodGenerator(kind, provided=provided))
        if provided:
            generators.append(ProviderMethodGenerator(kind))
    return generators
