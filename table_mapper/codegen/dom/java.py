"""
Source object model for generated Java code.

Nodes are plain data. Imports are collected in construction order and only
deduplicated and sorted when a unit is rendered.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Set, Tuple

from ..core.schema import PRIMITIVE_JAVA_TYPES

ARRAY_SUFFIX = "[]"


@dataclass(frozen=True)
class JavaType:
    """
    A (possibly parameterised) Java type reference.

    ``qualified_name`` is the fully qualified name without type arguments,
    e.g. ``java.util.List`` or ``byte[]``.
    """

    qualified_name: str
    arguments: Tuple["JavaType", ...] = ()

    @property
    def base_name(self) -> str:
        name = self.qualified_name
        while name.endswith(ARRAY_SUFFIX):
            name = name[:-len(ARRAY_SUFFIX)]
        return name

    @property
    def package(self) -> str:
        base = self.base_name
        if "." not in base:
            return ""
        return base.rsplit(".", 1)[0]

    @property
    def simple_name(self) -> str:
        dims = self.qualified_name[len(self.base_name):]
        return self.base_name.rsplit(".", 1)[-1] + dims

    @property
    def short_name(self) -> str:
        """Name as written in source, with type arguments."""
        if not self.arguments:
            return self.simple_name
        args = ", ".join(arg.short_name for arg in self.arguments)
        return f"{self.simple_name}<{args}>"

    @property
    def is_primitive(self) -> bool:
        return self.qualified_name in PRIMITIVE_JAVA_TYPES

    @property
    def needs_import(self) -> bool:
        package = self.package
        return bool(package) and package != "java.lang" and self.base_name not in PRIMITIVE_JAVA_TYPES

    def import_names(self) -> Set[str]:
        """Qualified names this reference needs imported, including type arguments."""
        names = {self.base_name} if self.needs_import else set()
        for argument in self.arguments:
            names |= argument.import_names()
        return names

    def __str__(self) -> str:
        return self.short_name


def list_of(element: JavaType) -> JavaType:
    return JavaType("java.util.List", (element,))


VOID = None
INT = JavaType("int")
LONG = JavaType("long")
STRING = JavaType("java.lang.String")


class Visibility(Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PACKAGE = ""
    PRIVATE = "private"


class UnitKind(Enum):
    CLASS = "class"
    INTERFACE = "interface"


@dataclass
class Annotation:
    """An annotation use such as ``@Param("id")``."""

    type: JavaType
    value: Optional[str] = None

    def __str__(self) -> str:
        if self.value is None:
            return f"@{self.type.simple_name}"
        return f"@{self.type.simple_name}({self.value})"


@dataclass
class Parameter:
    type: JavaType
    name: str
    annotations: List[Annotation] = field(default_factory=list)

    def referenced_types(self) -> Iterator[JavaType]:
        yield self.type
        for annotation in self.annotations:
            yield annotation.type


@dataclass
class Field:
    name: str
    type: JavaType
    visibility: Visibility = Visibility.PRIVATE
    static: bool = False
    final: bool = False
    initial_value: Optional[str] = None
    javadoc: List[str] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)

    def referenced_types(self) -> Iterator[JavaType]:
        yield self.type
        for annotation in self.annotations:
            yield annotation.type


@dataclass
class Method:
    """
    A method or constructor.

    ``body`` of None renders an abstract declaration terminated by ``;``.
    Body lines are written without indentation; the renderer indents them
    by brace depth.
    """

    name: str
    return_type: Optional[JavaType] = VOID
    parameters: List[Parameter] = field(default_factory=list)
    body: Optional[List[str]] = field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    constructor: bool = False
    static: bool = False
    javadoc: List[str] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)
    exceptions: List[JavaType] = field(default_factory=list)

    def add_parameter(self, parameter: Parameter) -> None:
        self.parameters.append(parameter)

    def add_body_line(self, line: str) -> None:
        if self.body is None:
            self.body = []
        self.body.append(line)

    def add_annotation(self, annotation: Annotation) -> None:
        self.annotations.append(annotation)

    def referenced_types(self) -> Iterator[JavaType]:
        if self.return_type is not None:
            yield self.return_type
        for parameter in self.parameters:
            yield from parameter.referenced_types()
        for annotation in self.annotations:
            yield annotation.type
        yield from self.exceptions


@dataclass
class CompilationUnit:
    """A top-level (or nested) class or interface."""

    type: JavaType
    kind: UnitKind = UnitKind.CLASS
    visibility: Visibility = Visibility.PUBLIC
    abstract: bool = False
    static: bool = False
    super_class: Optional[JavaType] = None
    super_interfaces: List[JavaType] = field(default_factory=list)
    fields: List[Field] = field(default_factory=list)
    methods: List[Method] = field(default_factory=list)
    inner_units: List["CompilationUnit"] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)
    static_imports: List[str] = field(default_factory=list)
    file_comments: List[str] = field(default_factory=list)
    javadoc: List[str] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)

    @property
    def is_interface(self) -> bool:
        return self.kind == UnitKind.INTERFACE

    def add_field(self, java_field: Field) -> None:
        self.fields.append(java_field)

    def add_method(self, method: Method) -> None:
        self.methods.append(method)

    def add_import(self, qualified_name: str) -> None:
        self.imports.append(qualified_name)

    def add_static_import(self, qualified_name: str) -> None:
        self.static_imports.append(qualified_name)

    def referenced_types(self) -> Iterator[JavaType]:
        if self.super_class is not None:
            yield self.super_class
        yield from self.super_interfaces
        for annotation in self.annotations:
            yield annotation.type
        for java_field in self.fields:
            yield from java_field.referenced_types()
        for method in self.methods:
            yield from method.referenced_types()
        for inner in self.inner_units:
            yield from inner.referenced_types()

    def import_set(self) -> List[str]:
        """
        Imports for the rendered file.

        Explicit imports plus every type referenced by a member, each once,
        in lexical order. Types from ``java.lang`` or the unit's own package
        are left out.
        """
        names: Set[str] = set()
        for explicit in self.imports:
            names |= JavaType(explicit).import_names()
        for referenced in self.referenced_types():
            names |= referenced.import_names()

        own_package = self.type.package
        return sorted(
            name for name in names
            if name.rsplit(".", 1)[0] != own_package and name != self.type.qualified_name
        )

    def static_import_set(self) -> List[str]:
        return sorted(set(self.static_imports))
