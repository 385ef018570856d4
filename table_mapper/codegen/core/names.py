"""
Deterministic identifier derivation for a table.

Every name is a concatenation of a configured package, the table's domain
object name and a fixed role suffix. When sharding is enabled the infix
``Sharding`` is placed immediately before the role suffix; table identity
and statement verbs are left alone.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from ...logging_config import get_logger
from .config import GeneratorConfig, TableConfig
from .errors import ConfigurationMissing
from .rules import OperationKind
from .schema import Table

logger = get_logger(__name__)

SHARDING_INFIX = "Sharding"
SHARDING_TABLE_PLACEHOLDER = "${shardingTable.name}"

KEY_SUFFIX = "Key"
BLOBS_SUFFIX = "WithBLOBs"
EXAMPLE_SUFFIX = "Example"
RESULT_MAP_SUFFIX = "Map"

RESULT_MAP_WITH_BLOBS_ID = "ResultMapWithBLOBs"
EXAMPLE_WHERE_CLAUSE_ID = "Example_Where_Clause"
UPDATE_BY_EXAMPLE_WHERE_CLAUSE_ID = "Update_By_Example_Where_Clause"
BASE_COLUMN_LIST_ID = "Base_Column_List"
BLOB_COLUMN_LIST_ID = "Blob_Column_List"

STATEMENT_IDS: Mapping[OperationKind, str] = MappingProxyType({
    OperationKind.COUNT_BY_EXAMPLE: "countByExample",
    OperationKind.DELETE_BY_EXAMPLE: "deleteByExample",
    OperationKind.DELETE_BY_PRIMARY_KEY: "deleteByPrimaryKey",
    OperationKind.INSERT: "insert",
    OperationKind.INSERT_SELECTIVE: "insertSelective",
    OperationKind.SELECT_ALL: "selectAll",
    OperationKind.SELECT_BY_EXAMPLE: "selectByExample",
    OperationKind.SELECT_BY_EXAMPLE_WITH_BLOBS: "selectByExampleWithBLOBs",
    OperationKind.SELECT_BY_PRIMARY_KEY: "selectByPrimaryKey",
    OperationKind.UPDATE_BY_EXAMPLE_SELECTIVE: "updateByExampleSelective",
    OperationKind.UPDATE_BY_EXAMPLE_WITH_BLOBS: "updateByExampleWithBLOBs",
    OperationKind.UPDATE_BY_EXAMPLE: "updateByExample",
    OperationKind.UPDATE_BY_PRIMARY_KEY_SELECTIVE: "updateByPrimaryKeySelective",
    OperationKind.UPDATE_BY_PRIMARY_KEY_WITH_BLOBS: "updateByPrimaryKeyWithBLOBs",
    OperationKind.UPDATE_BY_PRIMARY_KEY: "updateByPrimaryKey",
})


def qualify(package: Optional[str], simple_name: str) -> str:
    """Join a package and a simple type name."""
    if package:
        return f"{package}.{simple_name}"
    return simple_name


def simple_name(qualified: str) -> str:
    return qualified.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class ResolvedNames:
    """
    Every identifier derived for one table.

    Optional entries are None when the configuration section they depend
    on is absent; generators treat that as "no fragment".
    """

    record_type: str
    primary_key_type: str
    record_with_blobs_type: str
    example_type: str
    mapper_type: Optional[str]
    sql_provider_type: Optional[str]
    mapping_namespace: Optional[str]
    mapping_package: Optional[str]
    mapping_file_name: Optional[str]
    runtime_table_name: str
    aliased_runtime_table_name: str
    base_result_map_id: str
    result_map_with_blobs_id: str = RESULT_MAP_WITH_BLOBS_ID
    example_where_clause_id: str = EXAMPLE_WHERE_CLAUSE_ID
    update_by_example_where_clause_id: str = UPDATE_BY_EXAMPLE_WHERE_CLAUSE_ID
    base_column_list_id: str = BASE_COLUMN_LIST_ID
    blob_column_list_id: str = BLOB_COLUMN_LIST_ID
    statement_ids: Mapping[OperationKind, str] = field(default_factory=lambda: STATEMENT_IDS)

    def statement_id(self, kind: OperationKind) -> Optional[str]:
        """Statement id for a kind; None for supporting elements."""
        return self.statement_ids.get(kind)


class NameResolver:
    """Derives identifiers for a table from the configuration."""

    def __init__(self, config: GeneratorConfig):
        self.config = config

    def _stem(self, table: Table, suffix: str) -> str:
        infix = SHARDING_INFIX if self.config.sharding else ""
        return f"{table.domain_object_name}{infix}{suffix}"

    def client_package(self) -> str:
        if not self.config.client_package:
            raise ConfigurationMissing("client_package")
        return self.config.client_package

    def sql_map_package(self) -> str:
        if not self.config.sql_map_package:
            raise ConfigurationMissing("sql_map_package")
        return self.config.sql_map_package

    def resolve(self, table: Table, table_config: TableConfig) -> ResolvedNames:
        """
        Derive all names for a table.

        Missing client or mapping-document configuration is logged and
        leaves the dependent names unset.

        Args:
            table: Table to name
            table_config: Matching table configuration

        Returns:
            ResolvedNames for the table
        """
        config = self.config
        model_package = config.model_package
        record_package = config.record_package or model_package
        example_package = config.example_package or model_package

        mapper_type = None
        sql_provider_type = None
        try:
            client_package = self.client_package()
        except ConfigurationMissing as e:
            logger.debug(f"{table}: {e}; no client type names")
        else:
            mapper_type = qualify(
                client_package,
                table_config.mapper_name or self._stem(table, config.mapper_suffix),
            )
            sql_provider_type = qualify(
                client_package,
                table_config.sql_provider_name or self._stem(table, config.sql_provider_suffix),
            )

        mapping_namespace = None
        mapping_package = None
        mapping_file_name = None
        try:
            mapping_package = self.sql_map_package()
        except ConfigurationMissing as e:
            logger.debug(f"{table}: {e}; no mapping document names")
        else:
            mapper_simple = simple_name(mapper_type) if mapper_type else self._stem(
                table, config.mapper_suffix
            )
            mapping_file_name = f"{mapper_simple}.xml"
            mapping_namespace = mapper_type or qualify(mapping_package, mapper_simple)

        identity = table.identity
        runtime = identity.name_at_runtime
        aliased = identity.aliased_name_at_runtime
        if config.sharding:
            runtime = SHARDING_TABLE_PLACEHOLDER
            aliased = f"{runtime} {identity.alias}" if identity.alias else runtime

        return ResolvedNames(
            record_type=qualify(record_package, table.domain_object_name),
            primary_key_type=qualify(model_package, self._stem(table, KEY_SUFFIX)),
            record_with_blobs_type=qualify(model_package, self._stem(table, BLOBS_SUFFIX)),
            example_type=qualify(example_package, self._stem(table, EXAMPLE_SUFFIX)),
            mapper_type=mapper_type,
            sql_provider_type=sql_provider_type,
            mapping_namespace=mapping_namespace,
            mapping_package=mapping_package,
            mapping_file_name=mapping_file_name,
            runtime_table_name=runtime,
            aliased_runtime_table_name=aliased,
            base_result_map_id=self._stem(table, RESULT_MAP_SUFFIX),
        )
