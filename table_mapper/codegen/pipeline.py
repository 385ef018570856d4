"""
Extension pipeline driving generation for each table.

Per table: Introspected -> Initialized -> Generating -> Assembled -> Rendered.
Tables share no mutable state and are processed by a bounded worker pool;
a failure in one table never stops the others.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from enum import Enum
from pathlib import PurePosixPath
from typing import Callable, Dict, List, Optional, Sequence

from ..logging_config import get_logger
from .core.config import GeneratorConfig, TableConfig, validate_config
from .core.errors import (
    ConfigurationMissing,
    ConfigValidationError,
    GeneratorError,
    MalformedFragmentError,
)
from .core.generator import (
    GenerationResult,
    ModelFragment,
    RenderedFile,
    TableArtifacts,
    TableContext,
)
from .core.names import NameResolver
from .core.rules import TypeRole, decide
from .core.schema import Column, FullyQualifiedTable, Table
from .dom.java import Method
from .dom.render import render_document, render_java_file
from .elements import (
    OperationGenerator,
    build_document,
    build_generators,
    build_mapper_unit,
    build_model_unit,
    build_provider_unit,
)
from .elements.model import CHAIN

logger = get_logger(__name__)

Checkpoint = Callable[[ModelFragment, Table], Optional[bool]]


class TableState(Enum):
    INTROSPECTED = "introspected"
    INITIALIZED = "initialized"
    GENERATING = "generating"
    ASSEMBLED = "assembled"
    RENDERED = "rendered"
    FAILED = "failed"


class WarningCollector:
    """Append-only warning sink shared by every table pipeline."""

    def __init__(self):
        self._lock = threading.Lock()
        self._warnings: List[str] = []

    def add(self, table: str, message: str) -> None:
        with self._lock:
            self._warnings.append(f"{table}: {message}")
        logger.warning(f"{table}: {message}")

    @property
    def warnings(self) -> List[str]:
        with self._lock:
            return list(self._warnings)


def run_checkpoints(checkpoints: Sequence[Checkpoint], fragment: ModelFragment,
                    table: Table) -> bool:
    """
    Offer a fragment to each checkpoint in order.

    No answer (None) counts as acceptance; the first explicit False rejects
    the fragment and later checkpoints are not consulted.
    """
    for checkpoint in checkpoints:
        if checkpoint(fragment, table) is False:
            return False
    return True


def configure_table(table: Table, table_config: TableConfig) -> Table:
    """
    Apply a table configuration to an introspected table.

    Returns a new table without ignored columns and with column overrides
    applied; the input table is left untouched.
    """
    identity = table.identity
    configured = Table(
        identity=FullyQualifiedTable(
            name=identity.name,
            schema=identity.schema,
            catalog=identity.catalog,
            domain_object_name=table_config.domain_object_name or identity.domain_object_name,
            alias=table_config.alias or identity.alias,
        ),
        remarks=table.remarks,
        table_type=table.table_type,
    )
    ignored = table_config.ignored_columns

    def prepare(column: Column) -> Optional[Column]:
        if any(column.matches(name) for name in ignored):
            return None
        for name, overrides in table_config.column_overrides.items():
            if column.matches(name):
                overrides = dict(overrides)
                if "jdbc_type" in overrides:
                    overrides.setdefault("java_type", "")
                return replace(column, **overrides)
        return replace(column)

    for column in table.primary_key_columns:
        prepared = prepare(column)
        if prepared is not None:
            configured.primary_key_columns.append(prepared)
    for column in table.base_columns + table.blob_columns:
        prepared = prepare(column)
        if prepared is not None:
            configured.add_column(prepared)
    return configured


def java_path(unit_type: str) -> str:
    return str(PurePosixPath(*unit_type.split("."))) + ".java"


def mapping_path(package: str, file_name: str) -> str:
    parts = package.split(".") if package else []
    return str(PurePosixPath(*parts, file_name))


class TablePipeline:
    """Generation lifecycle of a single table."""

    def __init__(self, table: Table, config: GeneratorConfig,
                 generators: Sequence[OperationGenerator],
                 checkpoints: Sequence[Checkpoint] = (),
                 warnings: Optional[WarningCollector] = None):
        self.table = table
        self.config = config
        self.generators = generators
        self.checkpoints = checkpoints
        self.warnings = warnings or WarningCollector()
        self.state = TableState.INTROSPECTED
        self.context: Optional[TableContext] = None
        self.artifacts: Optional[TableArtifacts] = None
        self.files: List[RenderedFile] = []

    @property
    def identifier(self) -> str:
        return str(self.table)

    def _advance(self, expected: TableState, new: TableState) -> None:
        if self.state != expected:
            raise GeneratorError(
                f"{self.identifier}: cannot move to {new.value} from {self.state.value}"
            )
        self.state = new

    def initialize(self) -> TableContext:
        """Resolve names and decide operations; both are fixed from here on."""
        table_config = self.config.table_config_for(self.table)
        table = configure_table(self.table, table_config)
        self.context = TableContext(
            table=table,
            names=NameResolver(self.config).resolve(table, table_config),
            operations=decide(table, self.config, table_config),
            config=self.config,
            table_config=table_config,
        )
        self._advance(TableState.INTROSPECTED, TableState.INITIALIZED)
        logger.debug(
            f"{self.identifier}: initialized with "
            f"{len(self.context.operations.enabled_kinds())} enabled operations"
        )
        return self.context

    def generate(self) -> TableArtifacts:
        """Run every applicable generator and attach the accepted fragments."""
        self._advance(TableState.INITIALIZED, TableState.GENERATING)
        context = self.context
        artifacts = TableArtifacts(self.identifier)

        for role in CHAIN:
            if role in context.operations.model_roles:
                artifacts.units[role] = build_model_unit(context, role)

        try:
            artifacts.units[TypeRole.MAPPER] = build_mapper_unit(context)
            provider = build_provider_unit(context)
            if provider is not None:
                artifacts.units[TypeRole.SQL_PROVIDER] = provider
        except ConfigurationMissing as e:
            self.warnings.add(self.identifier, f"{e}; client types skipped")

        try:
            artifacts.document = build_document(context)
        except ConfigurationMissing as e:
            self.warnings.add(self.identifier, f"{e}; mapping document skipped")

        operations = context.operations
        for generator in self.generators:
            if not generator.can_apply(operations):
                continue
            if not self._has_target(artifacts, generator.target):
                continue
            for fragment in generator.fragments(context):
                if not run_checkpoints(self.checkpoints, fragment, context.table):
                    artifacts.vetoed += 1
                    logger.debug(f"{self.identifier}: fragment vetoed by checkpoint: {generator!r}")
                    continue
                self._attach(artifacts, fragment)

        self.artifacts = artifacts
        self._advance(TableState.GENERATING, TableState.ASSEMBLED)
        return artifacts

    @staticmethod
    def _has_target(artifacts: TableArtifacts, target: TypeRole) -> bool:
        if target == TypeRole.MAPPING_DOCUMENT:
            return artifacts.document is not None
        return artifacts.unit(target) is not None

    def _attach(self, artifacts: TableArtifacts, fragment: ModelFragment) -> None:
        try:
            fragment.validate()
        except MalformedFragmentError as e:
            e.table = self.identifier
            raise

        if fragment.target == TypeRole.MAPPING_DOCUMENT:
            if artifacts.document is None:
                raise MalformedFragmentError("document fragment without a document", self.identifier)
            artifacts.document.root.add_element(fragment.node)
            return

        unit = artifacts.unit(fragment.target)
        if unit is None:
            raise MalformedFragmentError(
                f"no {fragment.target.value} type to attach {fragment.node.name} to",
                self.identifier,
            )
        if fragment.is_markup:
            raise MalformedFragmentError("markup fragment aimed at a source type", self.identifier)
        if isinstance(fragment.node, Method):
            unit.add_method(fragment.node)
        else:
            unit.add_field(fragment.node)
        for name in sorted(fragment.imports):
            unit.add_import(name)
        for name in sorted(fragment.static_imports):
            unit.add_static_import(name)

    def render(self) -> List[RenderedFile]:
        """Hand the finished trees to the renderer."""
        self._advance(TableState.ASSEMBLED, TableState.RENDERED)
        artifacts = self.artifacts
        files = []
        for role, unit in artifacts.units.items():
            files.append(RenderedFile(
                path=java_path(unit.type.qualified_name),
                content=render_java_file(unit, self.config.indent_size),
                role=role,
                table=self.identifier,
            ))
        if artifacts.document is not None:
            names = self.context.names
            files.append(RenderedFile(
                path=mapping_path(names.mapping_package, names.mapping_file_name),
                content=render_document(artifacts.document),
                role=TypeRole.MAPPING_DOCUMENT,
                table=self.identifier,
            ))
        self.files = files
        return files

    def run(self) -> List[RenderedFile]:
        try:
            self.initialize()
            self.generate()
            return self.render()
        except Exception:
            self.state = TableState.FAILED
            raise


class ExtensionPipeline:
    """Runs table pipelines on a bounded worker pool."""

    def __init__(self, config: GeneratorConfig,
                 checkpoints: Optional[Sequence[Checkpoint]] = None,
                 workers: Optional[int] = None):
        """
        Args:
            config: Resolved configuration
            checkpoints: Checkpoint chain; built from ``config.plugins`` when None
            workers: Pool size; defaults to ``config.workers``
        """
        self.config = config
        if checkpoints is None:
            from .registry import get_registry
            checkpoints = get_registry().build_checkpoints(config)
        self.checkpoints = list(checkpoints)
        self.workers = workers or config.workers

    def validate(self, tables: Sequence[Table]) -> None:
        """
        Raises:
            ConfigValidationError: With every configuration problem found
        """
        errors = validate_config(self.config, list(tables))
        if errors:
            raise ConfigValidationError(errors)

    def run(self, tables: Sequence[Table],
            cancel: Optional[threading.Event] = None) -> GenerationResult:
        """
        Generate artifacts for every table.

        Setting ``cancel`` stops further tables from being submitted; tables
        already running finish normally.

        Returns:
            GenerationResult with files in table order and per-table failures
        """
        self.validate(tables)

        collector = WarningCollector()
        generators = build_generators(self.config)
        result = GenerationResult(metadata={
            "table_count": len(tables),
            "workers": self.workers,
            "client_type": self.config.client_type,
            "model_type": self.config.model_type,
        })

        slots = threading.BoundedSemaphore(self.workers)
        submitted: Dict[object, TablePipeline] = {}

        def run_one(pipeline: TablePipeline) -> List[RenderedFile]:
            try:
                return pipeline.run()
            finally:
                slots.release()

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            for table in tables:
                slots.acquire()
                if cancel is not None and cancel.is_set():
                    slots.release()
                    logger.info("Generation cancelled; no further tables submitted")
                    break
                pipeline = TablePipeline(table, self.config, generators, self.checkpoints, collector)
                submitted[executor.submit(run_one, pipeline)] = pipeline

            for future, pipeline in submitted.items():
                try:
                    files = future.result()
                except Exception as e:
                    logger.error(f"Generation failed for {pipeline.identifier}: {e}")
                    result.failures[pipeline.identifier] = e
                    continue
                result.files.extend(files)
                result.artifacts[pipeline.identifier] = pipeline.artifacts

        result.warnings = collector.warnings
        result.metadata["file_count"] = len(result.files)
        result.metadata["cancelled"] = len(submitted) < len(tables)
        return result
