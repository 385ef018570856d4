"""Tests for configuration loading and validation."""

import json

import pytest

from table_mapper.codegen.core.config import (
    ConfigManager,
    GeneratorConfig,
    ModelType,
    TableConfig,
    validate_config,
)
from table_mapper.codegen.core.errors import ConfigError, ConfigValidationError
from table_mapper.codegen.pipeline import ExtensionPipeline


def test_defaults_file_and_overrides_merge(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"model_package": "com.acme.model", "workers": 2}))

    config = ConfigManager().get_config({"workers": 8}, config_file=path)

    assert config.model_package == "com.acme.model"
    assert config.client_package == "mapper"
    assert config.workers == 8


def test_unknown_keys_land_in_custom():
    config = ConfigManager().get_config({"team": "billing"})

    assert config.custom == {"team": "billing"}


def test_table_entries_become_table_configs():
    config = ConfigManager().get_config({"tables": [
        {"table_name": "orders", "disabled_operations": ["select_all"], "immutable": True},
    ]})

    table_config = config.tables[0]
    assert isinstance(table_config, TableConfig)
    assert table_config.disabled_operations == ["select_all"]
    assert table_config.properties == {"immutable": True}
    assert config.is_immutable(table_config)
    assert config.is_constructor_based(table_config)


def test_table_property_overrides_context_value():
    config = GeneratorConfig(constructor_based=True)
    table_config = TableConfig("orders", properties={"constructor_based": False})

    assert config.is_constructor_based(TableConfig("other"))
    assert not config.is_constructor_based(table_config)


def test_table_model_type_overrides_context():
    config = GeneratorConfig(model_type="flat")

    assert config.model_type_for(TableConfig("a")) == ModelType.FLAT
    assert config.model_type_for(TableConfig("a", model_type="hierarchical")) == ModelType.HIERARCHICAL


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        ConfigManager().get_config(config_file=tmp_path / "absent.json")


def test_non_object_config_file_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")

    with pytest.raises(ConfigError):
        ConfigManager().get_config(config_file=path)


def test_save_config_round_trips_custom_keys(tmp_path):
    manager = ConfigManager()
    config = manager.get_config({"team": "billing", "tables": [{"table_name": "orders"}]})
    path = tmp_path / "saved.json"

    manager.save_config(config, path)
    saved = json.loads(path.read_text())

    assert saved["team"] == "billing"
    assert "custom" not in saved
    assert saved["tables"][0]["table_name"] == "orders"


def test_validation_reports_every_problem(document_table):
    config = GeneratorConfig(
        model_type="sideways",
        workers=0,
        model_package="com..broken",
        tables=[
            TableConfig(
                "document",
                disabled_operations=["drop_table"],
                ignored_columns=["missing"],
                column_overrides={"ghost": {"java_type": "int"}, "name": {"colour": "red"}},
            ),
            TableConfig("nowhere"),
        ],
    )

    errors = validate_config(config, [document_table])

    assert len(errors) == 8
    assert any("model_type" in e for e in errors)
    assert any("workers" in e for e in errors)
    assert any("model_package" in e for e in errors)
    assert any("drop_table" in e for e in errors)
    assert any("Ignored column 'missing'" in e for e in errors)
    assert any("Column override 'ghost'" in e for e in errors)
    assert any("colour" in e for e in errors)
    assert any("'nowhere' matches no introspected table" in e for e in errors)


def test_pipeline_raises_collected_validation_errors(document_table):
    config = GeneratorConfig(tables=[
        TableConfig("document", ignored_columns=["a", "b"]),
    ])

    with pytest.raises(ConfigValidationError) as excinfo:
        ExtensionPipeline(config, checkpoints=[]).run([document_table])

    assert len(excinfo.value.errors) == 2


def test_valid_configuration_has_no_errors(config, document_table):
    config.tables = [TableConfig("DOCUMENT", ignored_columns=["NAME"])]

    assert validate_config(config, [document_table]) == []
