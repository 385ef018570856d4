"""Tests for the built-in checkpoint plugins."""

from dataclasses import replace

import pytest

from table_mapper.codegen import ExtensionPipeline, generate_tables
from table_mapper.codegen.core.errors import ConfigError
from table_mapper.codegen.core.rules import TypeRole
from table_mapper.codegen.plugins import (
    MapperAnnotationPlugin,
    StatementTimeoutPlugin,
    VetoPlugin,
)


def test_veto_by_operation(account_table, config):
    veto = VetoPlugin({"operations": ["select_all", "count_by_example"]})
    result = generate_tables([account_table], config, checkpoints=[veto])
    by_path = {f.path: f.content for f in result.files}

    xml = by_path["com/example/mapper/AccountMapper.xml"]
    mapper = by_path["com/example/mapper/AccountMapper.java"]
    assert 'id="selectAll"' not in xml and "selectAll(" not in mapper
    assert 'id="countByExample"' not in xml and "countByExample(" not in mapper
    assert 'id="selectByPrimaryKey"' in xml


def test_veto_by_target_and_table(account_table, document_table, config):
    veto = VetoPlugin({"targets": ["mapper"], "tables": ["ACCOUNT"]})
    result = generate_tables([account_table, document_table], config, checkpoints=[veto])

    assert result.artifacts["account"].unit(TypeRole.MAPPER).methods == []
    assert not result.artifacts["account"].document.is_empty
    assert result.artifacts["document"].unit(TypeRole.MAPPER).methods != []


def test_veto_rejects_unknown_values():
    with pytest.raises(ConfigError):
        VetoPlugin({"operations": ["select_everything"]})


def test_statement_timeout_annotates_statements_only(account_table, config):
    plugin = StatementTimeoutPlugin({"seconds": 30})
    result = generate_tables([account_table], config, checkpoints=[plugin])
    xml = result.files[-1].content

    assert '<select id="selectAll" resultMap="AccountMap" timeout="30">' in xml
    assert '<delete id="deleteByPrimaryKey" parameterType="com.example.model.AccountKey" timeout="30">' in xml
    assert '<sql id="Base_Column_List">' in xml
    assert '<resultMap id="AccountMap" type="com.example.model.Account">' in xml


@pytest.mark.parametrize("seconds", [None, 0, -5, "30"])
def test_statement_timeout_requires_positive_seconds(seconds):
    with pytest.raises(ConfigError):
        StatementTimeoutPlugin({"seconds": seconds})


def test_mapper_annotation(account_table, config):
    plugin = MapperAnnotationPlugin({"annotation": "org.apache.ibatis.annotations.Mapper"})
    result = generate_tables([account_table], config, checkpoints=[plugin])
    mapper = {f.path: f.content for f in result.files}["com/example/mapper/AccountMapper.java"]

    assert "import org.apache.ibatis.annotations.Mapper;" in mapper
    assert "    @Mapper\n    int deleteByPrimaryKey(AccountKey key);" in mapper


def test_mapper_annotation_requires_qualified_name():
    with pytest.raises(ConfigError):
        MapperAnnotationPlugin({"annotation": "Mapper"})


def test_configured_plugins_run_in_order(account_table, config):
    config = replace(config, plugins=[
        {"name": "timeout", "options": {"seconds": 10}},
        {"name": "veto", "options": {"targets": ["mapping_document"]}},
    ])
    pipeline = ExtensionPipeline(config)
    result = pipeline.run([account_table])

    assert [type(p).__name__ for p in pipeline.checkpoints] == ["StatementTimeoutPlugin", "VetoPlugin"]
    assert result.artifacts["account"].document.is_empty
