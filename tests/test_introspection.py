"""Tests for reading tables from schema documents."""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from table_mapper import quick_generate
from table_mapper.codegen.core.errors import SchemaLoaderError
from table_mapper.introspection import load_tables, table_from_dict, tables_from_document
from table_mapper.utils import is_url, load_json

SCHEMA = {
    "tables": [
        {
            "name": "user_account",
            "schema": "public",
            "remarks": "Registered users",
            "columns": [
                {"name": "id", "jdbc_type": "BIGINT", "nullable": False, "generated_always": True},
                {"name": "display_name", "jdbc_type": "VARCHAR"},
                {"name": "avatar", "jdbc_type": "BLOB"},
            ],
            "primary_key": ["id"],
        },
    ],
}


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(SCHEMA), encoding="utf-8")
    return path


def test_table_from_dict_partitions_columns():
    table = table_from_dict(SCHEMA["tables"][0])

    assert str(table) == "public.user_account"
    assert table.domain_object_name == "UserAccount"
    assert [c.actual_name for c in table.primary_key_columns] == ["id"]
    assert [c.java_property for c in table.base_columns] == ["displayName"]
    assert [c.actual_name for c in table.blob_columns] == ["avatar"]
    assert table.primary_key_columns[0].generated_always


def test_unknown_primary_key_column_is_ignored():
    table = table_from_dict({"name": "t", "columns": [{"name": "a"}], "primary_key": ["missing"]})

    assert table.primary_key_columns == []
    assert [c.actual_name for c in table.base_columns] == ["a"]


def test_bare_list_document():
    tables = tables_from_document([{"name": "a"}, {"name": "b"}])

    assert [t.identity.name for t in tables] == ["a", "b"]


@pytest.mark.parametrize("document", [
    {"no_tables": []},
    "tables",
    [{"columns": []}],
    [{"name": "t", "columns": [{"jdbc_type": "VARCHAR"}]}],
])
def test_malformed_documents(document):
    with pytest.raises(SchemaLoaderError):
        tables_from_document(document)


def test_load_tables_from_file(schema_file):
    tables = load_tables(schema_file)

    assert len(tables) == 1
    assert tables[0].remarks == "Registered users"


def test_load_tables_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_tables(tmp_path / "absent.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SchemaLoaderError):
        load_json(path)


def test_url_detection():
    assert is_url("https://example.com/schema.json")
    assert not is_url("schema.json")
    assert not is_url("C:/schemas/schema.json")


@patch("table_mapper.utils.requests.get")
def test_load_from_url(mock_get):
    response = Mock()
    response.json.return_value = SCHEMA
    response.raise_for_status.return_value = None
    mock_get.return_value = response

    tables = load_tables("https://example.com/schema.json")

    mock_get.assert_called_once_with("https://example.com/schema.json", timeout=30)
    assert tables[0].identity.name == "user_account"


@patch("table_mapper.utils.requests.get")
def test_url_timeout(mock_get):
    mock_get.side_effect = requests.exceptions.Timeout()

    with pytest.raises(SchemaLoaderError, match="timeout"):
        load_json("https://example.com/schema.json")


def test_quick_generate():
    files = quick_generate(SCHEMA, model_package="com.acme.model", client_package="com.acme.dao",
                           sql_map_package="com.acme.dao")

    assert sorted(files) == [
        "com/acme/dao/UserAccountMapper.java",
        "com/acme/dao/UserAccountMapper.xml",
        "com/acme/model/UserAccount.java",
        "com/acme/model/UserAccountKey.java",
        "com/acme/model/UserAccountWithBLOBs.java",
    ]
    assert "insert into public.user_account (display_name, avatar)" in files["com/acme/dao/UserAccountMapper.xml"]
