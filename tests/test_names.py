"""Tests for derived identifiers."""

from dataclasses import replace

from table_mapper.codegen.core.config import GeneratorConfig, TableConfig
from table_mapper.codegen.core.names import SHARDING_TABLE_PLACEHOLDER, NameResolver
from table_mapper.codegen.core.rules import OperationKind, decide
from table_mapper.codegen.core.schema import Column

from conftest import make_table


def resolve(config, table, table_config=None):
    return NameResolver(config).resolve(table, table_config or TableConfig(table.identity.name))


def test_type_names(config, document_table):
    names = resolve(config, document_table)

    assert names.record_type == "com.example.model.Document"
    assert names.primary_key_type == "com.example.model.DocumentKey"
    assert names.record_with_blobs_type == "com.example.model.DocumentWithBLOBs"
    assert names.example_type == "com.example.model.DocumentExample"
    assert names.mapper_type == "com.example.mapper.DocumentMapper"
    assert names.sql_provider_type == "com.example.mapper.DocumentSqlProvider"


def test_mapping_document_names(config, document_table):
    names = resolve(config, document_table)

    assert names.mapping_namespace == "com.example.mapper.DocumentMapper"
    assert names.mapping_package == "com.example.mapper"
    assert names.mapping_file_name == "DocumentMapper.xml"
    assert names.base_result_map_id == "DocumentMap"
    assert names.statement_id(OperationKind.SELECT_BY_PRIMARY_KEY) == "selectByPrimaryKey"
    assert names.statement_id(OperationKind.BASE_RESULT_MAP) is None


def test_separate_record_and_example_packages(config, document_table):
    config.record_package = "com.example.record"
    config.example_package = "com.example.query"

    names = resolve(config, document_table)

    assert names.record_type == "com.example.record.Document"
    assert names.primary_key_type == "com.example.model.DocumentKey"
    assert names.example_type == "com.example.query.DocumentExample"


def test_explicit_names_override_computed_ones(config, document_table):
    table_config = TableConfig("document", mapper_name="DocDao", sql_provider_name="DocSql")

    names = resolve(config, document_table, table_config)

    assert names.mapper_type == "com.example.mapper.DocDao"
    assert names.sql_provider_type == "com.example.mapper.DocSql"
    assert names.mapping_file_name == "DocDao.xml"


def test_missing_client_package_leaves_client_names_unset(config, document_table):
    config.client_package = None

    names = resolve(config, document_table)

    assert names.mapper_type is None
    assert names.sql_provider_type is None
    assert names.mapping_namespace == "com.example.mapper.DocumentMapper"


def test_missing_sql_map_package_leaves_document_names_unset(config, document_table):
    config.sql_map_package = None

    names = resolve(config, document_table)

    assert names.mapping_namespace is None
    assert names.mapping_file_name is None
    assert names.mapper_type == "com.example.mapper.DocumentMapper"


def test_sharding_inserts_infix_before_role_suffix(config, document_table):
    plain = resolve(config, document_table)
    sharded = resolve(replace(config, sharding=True), document_table)

    assert sharded.primary_key_type == "com.example.model.DocumentShardingKey"
    assert sharded.record_with_blobs_type == "com.example.model.DocumentShardingWithBLOBs"
    assert sharded.example_type == "com.example.model.DocumentShardingExample"
    assert sharded.mapper_type == "com.example.mapper.DocumentShardingMapper"
    assert sharded.sql_provider_type == "com.example.mapper.DocumentShardingSqlProvider"
    assert sharded.mapping_file_name == "DocumentShardingMapper.xml"
    assert sharded.base_result_map_id == "DocumentShardingMap"
    assert sharded.runtime_table_name == SHARDING_TABLE_PLACEHOLDER
    assert sharded.aliased_runtime_table_name == SHARDING_TABLE_PLACEHOLDER

    assert sharded.record_type == plain.record_type
    assert dict(sharded.statement_ids) == dict(plain.statement_ids)


def test_sharding_leaves_table_and_rules_untouched(config, document_table):
    sharded_config = replace(config, sharding=True)
    table_config = TableConfig("document")

    resolve(sharded_config, document_table)

    assert document_table.identity.name == "document"
    assert [c.actual_name for c in document_table.all_columns] == ["id", "name", "payload"]
    sharded_rules = decide(document_table, sharded_config, table_config)
    plain_rules = decide(document_table, config, table_config)
    assert dict(sharded_rules.decisions) == dict(plain_rules.decisions)
    assert sharded_rules.model_roles == plain_rules.model_roles


def test_sharding_keeps_alias():
    table = make_table("orders", [Column("id", "INTEGER")], primary_key=["id"], alias="o")

    names = resolve(GeneratorConfig(sharding=True), table)

    assert names.aliased_runtime_table_name == f"{SHARDING_TABLE_PLACEHOLDER} o"
