"""
Checkpoint plugins.

A plugin sees every candidate fragment together with its table before the
fragment is attached. Returning False vetoes the fragment; returning True
or None accepts it. A plugin may rewrite the fragment in place.
"""

from typing import Any, Dict, Optional

from ..logging_config import get_logger
from .core.errors import ConfigError
from .core.generator import ModelFragment
from .core.rules import OperationKind, TypeRole
from .core.schema import Table
from .dom.java import Annotation, JavaType, Method

logger = get_logger(__name__)

STATEMENT_ELEMENTS = {"select", "insert", "update", "delete"}


class CheckpointPlugin:
    """Base class for checkpoint plugins."""

    name = "plugin"
    description = ""

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        self.options = options or {}

    def accept(self, fragment: ModelFragment, table: Table) -> Optional[bool]:
        """Inspect or rewrite a fragment. False rejects it."""
        return None

    def __call__(self, fragment: ModelFragment, table: Table) -> Optional[bool]:
        return self.accept(fragment, table)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.options!r})"


class VetoPlugin(CheckpointPlugin):
    """
    Rejects fragments by operation kind, target artifact or table.

    Options:
        operations: operation kind values to reject
        targets: artifact role values to reject
        tables: table names the plugin applies to (default: all)
    """

    name = "veto"
    description = "Reject fragments for configured operations or artifacts"

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        super().__init__(options)
        try:
            self.operations = {OperationKind(v) for v in self.options.get("operations", [])}
            self.targets = {TypeRole(v) for v in self.options.get("targets", [])}
        except ValueError as e:
            raise ConfigError(f"Invalid veto plugin option: {e}") from e
        self.tables = {t.lower() for t in self.options.get("tables", [])}

    def accept(self, fragment: ModelFragment, table: Table) -> Optional[bool]:
        if self.tables and table.identity.name.lower() not in self.tables:
            return None
        if fragment.kind in self.operations or fragment.target in self.targets:
            logger.debug(f"{table}: veto {fragment.target.value} fragment "
                         f"({fragment.kind.value if fragment.kind else 'member'})")
            return False
        return None


class StatementTimeoutPlugin(CheckpointPlugin):
    """Adds a ``timeout`` attribute to every mapping statement."""

    name = "statement_timeout"
    description = "Add a timeout attribute to mapping statements"

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        super().__init__(options)
        seconds = self.options.get("seconds")
        if not isinstance(seconds, int) or seconds <= 0:
            raise ConfigError(f"statement_timeout needs a positive integer 'seconds', got {seconds!r}")
        self.seconds = seconds

    def accept(self, fragment: ModelFragment, table: Table) -> Optional[bool]:
        if fragment.is_markup and fragment.node.name in STATEMENT_ELEMENTS:
            if fragment.node.get_attribute("timeout") is None:
                fragment.node.add_attribute("timeout", str(self.seconds))
        return None


class MapperAnnotationPlugin(CheckpointPlugin):
    """
    Annotates every mapper-interface method.

    Options:
        annotation: fully qualified annotation type
        value: optional annotation argument text
    """

    name = "mapper_annotation"
    description = "Annotate mapper methods with a configured annotation"

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        super().__init__(options)
        annotation = self.options.get("annotation")
        if not annotation or "." not in annotation:
            raise ConfigError(
                f"mapper_annotation needs a fully qualified 'annotation', got {annotation!r}"
            )
        self.annotation_type = JavaType(annotation)
        self.value = self.options.get("value")

    def accept(self, fragment: ModelFragment, table: Table) -> Optional[bool]:
        if fragment.target == TypeRole.MAPPER and isinstance(fragment.node, Method):
            fragment.node.add_annotation(Annotation(self.annotation_type, self.value))
            fragment.add_import(self.annotation_type)
        return None


BUILTIN_PLUGINS = (VetoPlugin, StatementTimeoutPlugin, MapperAnnotationPlugin)
