"""Tests for the table and column model."""

from table_mapper.codegen.core.schema import Column, FullyQualifiedTable, Table, TypeCategory

from conftest import make_table


def test_add_column_partitions_large_objects():
    table = make_table("doc", [Column("id", "INTEGER"), Column("body", "CLOB")])

    assert [c.actual_name for c in table.base_columns] == ["id"]
    assert [c.actual_name for c in table.blob_columns] == ["body"]
    assert table.primary_key_columns == []


def test_promote_to_primary_key_moves_column():
    table = make_table("doc", [Column("id", "INTEGER"), Column("body", "CLOB")])

    assert table.promote_to_primary_key("body") is True

    assert [c.actual_name for c in table.primary_key_columns] == ["body"]
    assert table.blob_columns == []
    assert len(table.all_columns) == 2


def test_promote_unknown_column_is_noop():
    table = make_table("doc", [Column("id", "INTEGER")])

    assert table.promote_to_primary_key("missing") is False
    assert table.primary_key_columns == []
    assert [c.actual_name for c in table.base_columns] == ["id"]


def test_primary_key_order_is_promotion_order():
    table = make_table("line", [
        Column("a_id", "INTEGER"), Column("b_id", "INTEGER"), Column("qty", "INTEGER"),
    ], primary_key=["b_id", "a_id"])

    assert [c.actual_name for c in table.primary_key_columns] == ["b_id", "a_id"]


def test_get_column_lookup_miss_returns_none():
    table = make_table("doc", [Column("id", "INTEGER")])

    assert table.get_column("nope") is None
    assert table.get_column(None) is None


def test_undelimited_lookup_ignores_case():
    table = make_table("doc", [Column("UserId", "INTEGER")])

    assert table.get_column("userid") is not None


def test_delimited_lookup_is_exact():
    table = make_table("doc", [Column("UserId", "INTEGER", delimited=True)])

    assert table.get_column("userid") is None
    assert table.get_column("UserId") is not None


def test_column_derives_property_and_type():
    column = Column("created_at", "timestamp")

    assert column.jdbc_type == "TIMESTAMP"
    assert column.java_property == "createdAt"
    assert column.java_type == "java.util.Date"
    assert column.category == TypeCategory.TEMPORAL
    assert not column.is_primitive


def test_unknown_jdbc_type_maps_to_object():
    column = Column("geom", "GEOMETRY")

    assert column.java_type == "java.lang.Object"
    assert column.category == TypeCategory.OTHER


def test_runtime_names():
    identity = FullyQualifiedTable(name="orders", schema="sales", alias="o")

    assert identity.name_at_runtime == "sales.orders"
    assert identity.aliased_name_at_runtime == "sales.orders o"
    assert identity.domain_object_name == "Orders"


def test_subset_views():
    table = Table(identity=FullyQualifiedTable(name="t"))
    assert not table.has_any_columns

    table.add_column(Column("id", "INTEGER"))
    table.add_column(Column("data", "BLOB"))
    table.promote_to_primary_key("id")

    assert table.has_primary_key
    assert not table.has_base_columns
    assert [c.actual_name for c in table.non_primary_key_columns] == ["data"]
    assert [c.actual_name for c in table.non_blob_columns] == ["id"]
