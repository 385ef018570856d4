"""Shared fixtures for table_mapper tests."""

import re

import pytest

from table_mapper.codegen.core.config import GeneratorConfig, TableConfig
from table_mapper.codegen.core.schema import Column, FullyQualifiedTable, Table
from table_mapper.codegen.elements import build_generators
from table_mapper.codegen.pipeline import TablePipeline


def make_table(name, columns, primary_key=(), schema=None, alias=None):
    """Build a table the way the schema supplier does."""
    table = Table(identity=FullyQualifiedTable(name=name, schema=schema, alias=alias))
    for column in columns:
        table.add_column(column)
    for column_name in primary_key:
        table.promote_to_primary_key(column_name)
    return table


def initialized_context(table, config):
    """Table context after name resolution and rule evaluation."""
    pipeline = TablePipeline(table, config, build_generators(config))
    return pipeline.initialize()


def _simple_name(java_type):
    match = re.fullmatch(r"(?:List<)?([\w.]+?)>?", java_type)
    return match.group(1).rsplit(".", 1)[-1]


def dangling_references(result):
    """
    References in generated mappers and mapping documents that nothing emits.

    Covers include refids, result map ids, model type names, mapper methods
    without a statement, and select methods whose return type differs from
    the type of the result map their statement uses. Criteria (example)
    types are supplied by the caller and are not checked. Assumes the xml
    client, where every mapper method has a statement.
    """
    files = {f.path: f.content for f in result.files}
    emitted = {path[:-len(".java")].replace("/", ".") for path in files if path.endswith(".java")}
    problems = []

    for path, xml in files.items():
        if not path.endswith(".xml"):
            continue
        sql_ids = set(re.findall(r'<sql id="([^"]+)"', xml))
        result_maps = dict(re.findall(r'<resultMap id="([^"]+)" type="([^"]+)"', xml))
        statement_ids = set(re.findall(r'<(?:select|insert|update|delete) id="(\w+)"', xml))

        problems += [f"include {r}" for r in re.findall(r'refid="([^"]+)"', xml) if r not in sql_ids]
        problems += [
            f"result map {r}" for r in re.findall(r'(?:resultMap|extends)="([^"]+)"', xml)
            if r not in result_maps
        ]
        problems += [
            f"type {t}" for t in re.findall(r'(?:type|parameterType)="(com\.[^"]+)"', xml)
            if t not in emitted and not t.endswith("Example")
        ]

        mapper = files.get(path[:-len(".xml")] + ".java")
        if mapper is None:
            continue
        problems += [
            f"import {name}" for name in re.findall(r"^import (com\.[\w.]+);", mapper, re.M)
            if name not in emitted and not name.endswith("Example")
        ]
        returns = {name: returned for returned, name in re.findall(r"^    ([\w<>.]+) (\w+)\(", mapper, re.M)}
        problems += [f"statement {name}" for name in returns if name not in statement_ids]
        for statement_id, map_id in re.findall(r'<select id="(\w+)"[^>]*? resultMap="([^"]+)"', xml):
            mapped = _simple_name(result_maps.get(map_id, "missing"))
            if statement_id in returns and _simple_name(returns[statement_id]) != mapped:
                problems.append(f"{statement_id} returns {returns[statement_id]}, maps {mapped}")
    return problems


@pytest.fixture
def config():
    return GeneratorConfig(
        model_package="com.example.model",
        client_package="com.example.mapper",
        sql_map_package="com.example.mapper",
        add_comments=False,
    )


@pytest.fixture
def document_table():
    """id (pk, generated always), name (nullable string), payload (large object)."""
    return make_table("document", [
        Column("id", "INTEGER", nullable=False, generated_always=True),
        Column("name", "VARCHAR"),
        Column("payload", "BLOB"),
    ], primary_key=["id"])


@pytest.fixture
def account_table():
    """id (pk), name (nullable), active (primitive boolean)."""
    return make_table("account", [
        Column("id", "INTEGER", nullable=False),
        Column("name", "VARCHAR"),
        Column("active", "BOOLEAN", nullable=False, java_type="boolean"),
    ], primary_key=["id"])


@pytest.fixture
def keyless_table():
    return make_table("audit_log", [
        Column("event", "VARCHAR"),
        Column("created_at", "TIMESTAMP"),
    ])


@pytest.fixture
def table_config():
    return TableConfig(table_name="document")
