"""
Generator base class and shared column formatting helpers.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional

from ..core.config import GeneratorConfig
from ..core.generator import ModelFragment, TableContext
from ..core.rules import OperationKind, OperationSet, TypeRole
from ..core.schema import Column
from ..dom.xml import TextElement, XmlElement

# Generated SQL lines are wrapped past this width
LINE_WIDTH = 80
CONTINUATION_INDENT = "  "


class OperationGenerator(ABC):
    """
    One generation strategy.

    ``kind`` is the operation the generator belongs to; generators for model
    members have none and apply whenever their target type is generated.
    """

    kind: Optional[OperationKind] = None
    target: TypeRole = TypeRole.MAPPING_DOCUMENT

    def can_apply(self, operations: OperationSet) -> bool:
        """Look up this generator's own entry in the operation set."""
        if self.kind is None:
            return self.target in operations.model_roles
        return operations.is_enabled(self.kind)

    @abstractmethod
    def generate(self, context: TableContext) -> Optional[ModelFragment]:
        """
        Build the fragment for a table.

        Returns:
            The fragment, or None when a precondition does not hold
        """

    def fragments(self, context: TableContext) -> Iterator[ModelFragment]:
        """Fragments in attachment order; most generators produce one."""
        fragment = self.generate(context)
        if fragment is not None:
            yield fragment

    def fragment(self, node) -> ModelFragment:
        return ModelFragment(target=self.target, node=node, kind=self.kind)

    def __repr__(self) -> str:
        label = self.kind.value if self.kind else "members"
        return f"{type(self).__name__}({label} -> {self.target.value})"


# Column formatting


def escaped_column_name(column: Column, config: GeneratorConfig) -> str:
    if column.delimited:
        return f"{config.beginning_delimiter}{column.actual_name}{config.ending_delimiter}"
    return column.actual_name


def aliased_column_name(column: Column, alias: Optional[str], config: GeneratorConfig) -> str:
    escaped = escaped_column_name(column, config)
    if alias:
        return f"{alias}.{escaped}"
    return escaped


def renamed_column_name(column: Column, alias: Optional[str]) -> str:
    """Column label in result sets (``alias_column`` when the table is aliased)."""
    if alias:
        return f"{alias}_{column.actual_name}"
    return column.actual_name


def select_list_phrase(column: Column, alias: Optional[str], config: GeneratorConfig) -> str:
    if alias:
        return (
            f"{aliased_column_name(column, alias, config)} as "
            f"{renamed_column_name(column, alias)}"
        )
    return escaped_column_name(column, config)


def parameter_clause(column: Column, prefix: str = "") -> str:
    """``#{prop,jdbcType=X}`` placeholder for a column value."""
    clause = f"#{{{prefix}{column.java_property},jdbcType={column.jdbc_type}"
    if column.type_handler:
        clause += f",typeHandler={column.type_handler}"
    return clause + "}"


def null_test(column: Column, prefix: str = "") -> str:
    return f"{prefix}{column.java_property} != null"


def needs_presence_guard(column: Column) -> bool:
    """Primitive-typed values cannot be absent, so they are never guarded."""
    return not column.is_primitive


def wrap_items(head: str, items: Iterable[str], tail: str = "",
               separator: str = ", ") -> List[str]:
    """
    Join items after ``head``, starting a continuation line past the width.

    >>> wrap_items("insert into t (", ["a", "b"], ")")
    ['insert into t (a, b)']
    """
    lines = []
    current = head
    items = list(items)
    for index, item in enumerate(items):
        piece = item + (separator if index < len(items) - 1 else tail)
        if len(current) + len(piece) > LINE_WIDTH and current.strip() and current != head:
            lines.append(current.rstrip())
            current = CONTINUATION_INDENT
        current += piece
    if not items:
        current += tail
    lines.append(current)
    return lines


def add_lines(element: XmlElement, lines: Iterable[str]) -> XmlElement:
    for line in lines:
        element.add_element(TextElement(line))
    return element


def key_where_lines(columns: List[Column], config: GeneratorConfig,
                    alias: Optional[str] = None, prefix: str = "") -> List[str]:
    """``where a = #{a} and b = #{b}`` predicate over key columns, one per line."""
    lines = []
    for index, column in enumerate(columns):
        keyword = "where" if index == 0 else "  and"
        lines.append(
            f"{keyword} {aliased_column_name(column, alias, config)} = "
            f"{parameter_clause(column, prefix)}"
        )
    return lines
