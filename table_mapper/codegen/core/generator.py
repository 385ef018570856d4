"""
Generation contracts shared by generators, plugins and the pipeline.

Defines the fragment a generator produces, the per-table context it reads,
and the containers results are reported in.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Union

from ..dom.java import CompilationUnit, Field, JavaType, Method
from ..dom.xml import Document, XmlElement
from .config import GeneratorConfig, TableConfig
from .errors import MalformedFragmentError
from .names import ResolvedNames
from .rules import OperationKind, OperationSet, TypeRole
from .schema import Table

FragmentNode = Union[XmlElement, Field, Method]


@dataclass
class ModelFragment:
    """
    One unit of generated structure before it is attached.

    Markup fragments target the mapping document; source fragments target
    one of the compilation units by role. ``kind`` is None for model
    members, which are not tied to an operation.
    """

    target: TypeRole
    node: FragmentNode
    kind: Optional[OperationKind] = None
    imports: Set[str] = field(default_factory=set)
    static_imports: Set[str] = field(default_factory=set)

    @property
    def is_markup(self) -> bool:
        return isinstance(self.node, XmlElement)

    def add_import(self, java_type: Union[JavaType, str]) -> None:
        if isinstance(java_type, JavaType):
            self.imports |= java_type.import_names()
        else:
            self.imports.add(java_type)

    def validate(self) -> None:
        """
        Check the fragment can be attached to its target.

        Raises:
            MalformedFragmentError: If the node does not suit its target or is
                structurally invalid
        """
        if self.target == TypeRole.MAPPING_DOCUMENT:
            if not isinstance(self.node, XmlElement):
                raise MalformedFragmentError(
                    f"Mapping document fragment must be an element, got {type(self.node).__name__}"
                )
            self.node.validate()
            return

        if not isinstance(self.node, (Field, Method)):
            raise MalformedFragmentError(
                f"{self.target.value} fragment must be a field or method, "
                f"got {type(self.node).__name__}"
            )
        if not self.node.name or not self.node.name.isidentifier():
            raise MalformedFragmentError(f"Invalid member name: {self.node.name!r}")
        if isinstance(self.node, Field) and self.node.type is None:
            raise MalformedFragmentError(f"Field {self.node.name} has no type")


@dataclass(frozen=True)
class TableContext:
    """Everything a generator reads for one table. Never mutated."""

    table: Table
    names: ResolvedNames
    operations: OperationSet
    config: GeneratorConfig
    table_config: TableConfig

    def type_for(self, role: TypeRole) -> Optional[JavaType]:
        """Java type of the artifact with this role; None when unnamed."""
        qualified = {
            TypeRole.RECORD: self.names.record_type,
            TypeRole.PRIMARY_KEY: self.names.primary_key_type,
            TypeRole.RECORD_WITH_BLOBS: self.names.record_with_blobs_type,
            TypeRole.MAPPER: self.names.mapper_type,
            TypeRole.SQL_PROVIDER: self.names.sql_provider_type,
        }.get(role)
        return JavaType(qualified) if qualified else None

    @property
    def example_type(self) -> JavaType:
        return JavaType(self.names.example_type)

    @property
    def immutable(self) -> bool:
        return self.config.is_immutable(self.table_config)

    @property
    def constructor_based(self) -> bool:
        return self.config.is_constructor_based(self.table_config)


@dataclass
class TableArtifacts:
    """Assembled object-model trees for one table."""

    table: str
    units: Dict[TypeRole, CompilationUnit] = field(default_factory=dict)
    document: Optional[Document] = None
    vetoed: int = 0

    def unit(self, role: TypeRole) -> Optional[CompilationUnit]:
        return self.units.get(role)


@dataclass
class RenderedFile:
    """A rendered artifact and its path relative to the output root."""

    path: str
    content: str
    role: TypeRole
    table: str


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(self, files: List[RenderedFile] = None, warnings: List[str] = None,
                 metadata: Dict[str, Any] = None):
        """
        Initialize generation result.

        Args:
            files: Rendered files, in table order
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files or []
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.artifacts: Dict[str, TableArtifacts] = {}
        self.failures: Dict[str, Exception] = {}

    @property
    def success(self) -> bool:
        return not self.failures

    def files_for(self, table: str) -> List[RenderedFile]:
        return [f for f in self.files if f.table == table]
