"""
Model type generators: record, primary-key and large-object record.

In the conditional and hierarchical models the types form a chain
key -> record -> record with large objects, each declaring only its own
columns. The optional root class sits on top of the chain.
"""

from typing import Iterator, List, Optional

from ..core.config import ModelType
from ..core.generator import ModelFragment, TableContext
from ..core.naming import getter_name, setter_name
from ..core.rules import TypeRole
from ..core.schema import Column
from ..dom.java import CompilationUnit, Field, JavaType, Method, Parameter
from .base import OperationGenerator

CHAIN = (TypeRole.PRIMARY_KEY, TypeRole.RECORD, TypeRole.RECORD_WITH_BLOBS)


def columns_for_role(context: TableContext, role: TypeRole) -> List[Column]:
    """Columns declared directly on the model type with this role."""
    table = context.table
    operations = context.operations
    if operations.model_type == ModelType.FLAT:
        return table.all_columns if role == TypeRole.RECORD else []

    if role == TypeRole.PRIMARY_KEY:
        return list(table.primary_key_columns)
    if role == TypeRole.RECORD:
        if operations.generate_primary_key_class:
            return list(table.base_columns)
        return table.primary_key_columns + table.base_columns
    if role == TypeRole.RECORD_WITH_BLOBS:
        columns = list(table.blob_columns)
        if not operations.generate_base_record_class and not operations.generate_primary_key_class:
            columns = table.primary_key_columns + table.base_columns + columns
        return columns
    return []


def parent_role(context: TableContext, role: TypeRole) -> Optional[TypeRole]:
    """Nearest generated model type above this one in the chain."""
    roles = context.operations.model_roles
    index = CHAIN.index(role)
    for candidate in reversed(CHAIN[:index]):
        if candidate in roles:
            return candidate
    return None


def inherited_columns(context: TableContext, role: TypeRole) -> List[Column]:
    parent = parent_role(context, role)
    if parent is None:
        return []
    return inherited_columns(context, parent) + columns_for_role(context, parent)


def build_model_unit(context: TableContext, role: TypeRole) -> CompilationUnit:
    """Empty model class with its place in the type chain."""
    unit = CompilationUnit(context.type_for(role))
    parent = parent_role(context, role)
    if parent is not None:
        unit.super_class = context.type_for(parent)
    else:
        root_class = context.config.property_for(context.table_config, "root_class")
        if root_class:
            unit.super_class = JavaType(root_class)

    if context.config.add_comments:
        unit.javadoc.append(f"This class corresponds to the database table {context.table}")
        if context.table.remarks:
            unit.javadoc.append(context.table.remarks)
    return unit


class ModelMemberGenerator(OperationGenerator):
    """Fields, constructors and accessors for one model type."""

    def __init__(self, role: TypeRole):
        self.target = role

    def generate(self, context: TableContext) -> Optional[ModelFragment]:
        return next(self.fragments(context), None)

    def fragments(self, context: TableContext) -> Iterator[ModelFragment]:
        columns = columns_for_role(context, self.target)
        immutable = context.immutable
        comments = context.config.add_comments
        table = context.table

        for column in columns:
            java_field = Field(column.java_property, JavaType(column.java_type), final=immutable)
            if comments:
                java_field.javadoc.append(
                    f"This field corresponds to the database column {table}.{column.actual_name}"
                )
                if column.remarks:
                    java_field.javadoc.append(column.remarks)
            yield self._member(java_field)

        if context.constructor_based:
            yield self._member(self._constructor(context, columns))
            if not immutable:
                yield self._member(Method(
                    context.type_for(self.target).simple_name, constructor=True, body=["super();"],
                ))

        for column in columns:
            java_type = JavaType(column.java_type)
            getter = Method(getter_name(column.java_property, column.java_type), return_type=java_type)
            getter.add_body_line(f"return {column.java_property};")
            if comments:
                getter.javadoc.append(f"@return the value of {table}.{column.actual_name}")
            yield self._member(getter)

            if immutable:
                continue
            setter = Method(setter_name(column.java_property))
            setter.add_parameter(Parameter(java_type, column.java_property))
            setter.add_body_line(f"this.{column.java_property} = {column.java_property};")
            if comments:
                setter.javadoc.append(
                    f"@param {column.java_property} the value for {table}.{column.actual_name}"
                )
            yield self._member(setter)

    def _constructor(self, context: TableContext, columns: List[Column]) -> Method:
        inherited = inherited_columns(context, self.target)
        constructor = Method(context.type_for(self.target).simple_name, constructor=True)
        for column in inherited + columns:
            constructor.add_parameter(Parameter(JavaType(column.java_type), column.java_property))
        if inherited:
            arguments = ", ".join(column.java_property for column in inherited)
            constructor.add_body_line(f"super({arguments});")
        for column in columns:
            constructor.add_body_line(f"this.{column.java_property} = {column.java_property};")
        return constructor

    def _member(self, node) -> ModelFragment:
        fragment = self.fragment(node)
        for java_type in node.referenced_types():
            fragment.add_import(java_type)
        return fragment


def model_generators() -> List[OperationGenerator]:
    return [ModelMemberGenerator(role) for role in CHAIN]
