"""Tests for statement, result map, mapper and provider generators."""

from dataclasses import replace

from table_mapper.codegen.core.rules import OperationKind, TypeRole
from table_mapper.codegen.core.schema import Column
from table_mapper.codegen.dom.render import render
from table_mapper.codegen.dom.xml import TextElement, XmlElement
from table_mapper.codegen.elements import build_generators
from table_mapper.codegen.elements.client import (
    MapperMethodGenerator,
    ProviderMethodGenerator,
)
from table_mapper.codegen.elements.statements import (
    STATEMENT_SPECS,
    ColumnListGenerator,
    ResultMapGenerator,
    StatementGenerator,
)

from conftest import initialized_context, make_table


def statement(context, kind):
    fragment = StatementGenerator(STATEMENT_SPECS[kind]).generate(context)
    assert fragment is not None
    return fragment.node


def test_update_by_primary_key_selective_guards_nullable_columns(account_table, config):
    context = initialized_context(account_table, config)
    element = statement(context, OperationKind.UPDATE_BY_PRIMARY_KEY_SELECTIVE)

    set_block = element.children[1]
    guard, unguarded = set_block.children
    assert isinstance(guard, XmlElement) and guard.get_attribute("test") == "name != null"
    assert isinstance(unguarded, TextElement)
    assert unguarded.content == "active = #{active,jdbcType=BOOLEAN},"

    assert render(element) == (
        '<update id="updateByPrimaryKeySelective" parameterType="com.example.model.Account">\n'
        '  update account\n'
        '  <set>\n'
        '    <if test="name != null">\n'
        '      name = #{name,jdbcType=VARCHAR},\n'
        '    </if>\n'
        '    active = #{active,jdbcType=BOOLEAN},\n'
        '  </set>\n'
        '  where id = #{id,jdbcType=INTEGER}\n'
        '</update>'
    )


def test_insert_leaves_out_generated_always_columns(document_table, config):
    context = initialized_context(document_table, config)
    element = statement(context, OperationKind.INSERT)

    assert element.get_attribute("parameterType") == "com.example.model.DocumentWithBLOBs"
    assert [child.content for child in element.children] == [
        "insert into document (name, payload)",
        "values (#{name,jdbcType=VARCHAR}, #{payload,jdbcType=BLOB})",
    ]


def test_insert_selective_trims_both_lists(account_table, config):
    context = initialized_context(account_table, config)
    element = statement(context, OperationKind.INSERT_SELECTIVE)

    names, values = element.children[1:]
    assert names.get_attribute("suffixOverrides") == ","
    assert values.get_attribute("prefix") == "values ("
    assert render(names.children[0]) == '<if test="id != null">\n  id,\n</if>'
    assert render(values.children[2]) == "#{active,jdbcType=BOOLEAN},"


def test_select_by_primary_key_includes_large_objects(document_table, config):
    context = initialized_context(document_table, config)
    element = statement(context, OperationKind.SELECT_BY_PRIMARY_KEY)

    assert render(element) == (
        '<select id="selectByPrimaryKey" parameterType="com.example.model.DocumentKey" '
        'resultMap="ResultMapWithBLOBs">\n'
        '  select\n'
        '  <include refid="Base_Column_List" />\n'
        '  ,\n'
        '  <include refid="Blob_Column_List" />\n'
        '  from document\n'
        '  where id = #{id,jdbcType=INTEGER}\n'
        '</select>'
    )


def test_single_column_key_without_key_class_uses_column_type(account_table, config):
    context = initialized_context(account_table, replace(config, simple_model=True))
    element = statement(context, OperationKind.DELETE_BY_PRIMARY_KEY)

    assert element.get_attribute("parameterType") == "java.lang.Integer"
    assert [child.content for child in element.children] == [
        "delete from account",
        "where id = #{id,jdbcType=INTEGER}",
    ]


def test_composite_key_predicate_joins_with_and(config):
    table = make_table("line_item", [
        Column("order_id", "BIGINT"),
        Column("line_no", "INTEGER"),
        Column("sku", "VARCHAR"),
    ], primary_key=["order_id", "line_no"])
    context = initialized_context(table, replace(config, model_type="flat"))
    element = statement(context, OperationKind.DELETE_BY_PRIMARY_KEY)

    assert element.get_attribute("parameterType") == "map"
    assert [child.content for child in element.children][1:] == [
        "where order_id = #{orderId,jdbcType=BIGINT}",
        "  and line_no = #{lineNo,jdbcType=INTEGER}",
    ]


def test_update_by_example_addresses_record_parameter(account_table, config):
    context = initialized_context(account_table, config)
    element = statement(context, OperationKind.UPDATE_BY_EXAMPLE)

    assert element.get_attribute("parameterType") == "map"
    texts = [child.content for child in element.children if isinstance(child, TextElement)]
    assert texts == [
        "update account",
        "set id = #{record.id,jdbcType=INTEGER},",
        "  name = #{record.name,jdbcType=VARCHAR},",
        "  active = #{record.active,jdbcType=BOOLEAN}",
    ]
    guard = element.children[-1]
    assert render(guard) == (
        '<if test="_parameter != null">\n'
        '  <include refid="Update_By_Example_Where_Clause" />\n'
        '</if>'
    )


def test_delimited_columns_are_quoted(config):
    table = make_table("orders", [
        Column("id", "INTEGER"),
        Column("order", "VARCHAR", delimited=True),
    ], primary_key=["id"])
    context = initialized_context(table, config)
    element = statement(context, OperationKind.INSERT)

    assert element.children[0].content == 'insert into orders (id, "order")'


def test_base_result_map_marks_key_columns(document_table, config):
    context = initialized_context(document_table, config)
    element = ResultMapGenerator(with_blobs=False).generate(context).node

    assert element.get_attribute("type") == "com.example.model.Document"
    assert [child.name for child in element.children] == ["id", "result"]
    assert render(element.children[1]) == (
        '<result column="name" jdbcType="VARCHAR" property="name" />'
    )


def test_blob_result_map_extends_base_map(document_table, config):
    context = initialized_context(document_table, config)
    element = ResultMapGenerator(with_blobs=True).generate(context).node

    assert element.get_attribute("extends") == context.names.base_result_map_id
    assert element.get_attribute("type") == "com.example.model.DocumentWithBLOBs"
    assert [child.get_attribute("column") for child in element.children] == ["payload"]


def test_constructor_based_result_map(account_table, config):
    context = initialized_context(account_table, replace(config, immutable=True))
    element = ResultMapGenerator(with_blobs=False).generate(context).node

    constructor = element.children[0]
    assert constructor.name == "constructor"
    assert [arg.name for arg in constructor.children] == ["idArg", "arg", "arg"]
    assert constructor.children[2].get_attribute("javaType") == "boolean"


def test_aliased_column_list(config):
    table = make_table("document", [
        Column("id", "INTEGER"),
        Column("name", "VARCHAR"),
    ], primary_key=["id"], alias="d")
    context = initialized_context(table, config)
    element = ColumnListGenerator(with_blobs=False).generate(context).node

    assert [child.content for child in element.children] == ["d.id as d_id, d.name as d_name"]


def test_mapper_method_signatures(document_table, config):
    context = initialized_context(document_table, config)

    select = MapperMethodGenerator(OperationKind.SELECT_BY_PRIMARY_KEY).generate(context).node
    assert select.return_type.qualified_name == "com.example.model.DocumentWithBLOBs"
    assert [(p.type.simple_name, p.name) for p in select.parameters] == [("DocumentKey", "key")]

    count = MapperMethodGenerator(OperationKind.COUNT_BY_EXAMPLE).generate(context)
    assert count.node.return_type.qualified_name == "long"
    assert count.node.parameters[0].type.qualified_name == "com.example.model.DocumentExample"
    assert "com.example.model.DocumentExample" in count.imports

    update = MapperMethodGenerator(OperationKind.UPDATE_BY_EXAMPLE).generate(context).node
    assert [str(p.annotations[0]) for p in update.parameters] == ['@Param("record")', '@Param("example")']
    assert update.parameters[0].type.simple_name == "Document"


def test_provider_method_guards_non_primitive_columns(account_table, config):
    context = initialized_context(account_table, replace(config, client_type="mixed"))
    fragment = ProviderMethodGenerator(OperationKind.INSERT_SELECTIVE).generate(context)
    body = fragment.node.body

    assert fragment.target == TypeRole.SQL_PROVIDER
    assert body[:2] == ["SQL sql = new SQL();", 'sql.INSERT_INTO("account");']
    assert "if (record.getName() != null) {" in body
    active = body.index('sql.VALUES("active", "#{active,jdbcType=BOOLEAN}");')
    assert not body[active - 1].startswith("if")
    assert body[-1] == "return sql.toString();"
    assert "org.apache.ibatis.jdbc.SQL" in fragment.imports


def test_provider_update_ends_with_key_predicate(account_table, config):
    context = initialized_context(account_table, replace(config, client_type="mixed"))
    body = ProviderMethodGenerator(OperationKind.UPDATE_BY_PRIMARY_KEY_SELECTIVE).generate(context).node.body

    assert body[1] == 'sql.UPDATE("account");'
    assert 'sql.WHERE("id = #{id,jdbcType=INTEGER}");' in body
    assert 'sql.SET("id = #{id,jdbcType=INTEGER}");' not in body


def test_mixed_client_routes_selective_statements_to_provider(config):
    generators = build_generators(replace(config, client_type="mixed"))
    statement_kinds = {g.kind for g in generators if isinstance(g, StatementGenerator)}
    provider_kinds = {g.kind for g in generators if isinstance(g, ProviderMethodGenerator)}

    assert provider_kinds == {
        OperationKind.INSERT_SELECTIVE, OperationKind.UPDATE_BY_PRIMARY_KEY_SELECTIVE,
    }
    assert not statement_kinds & provider_kinds
    assert OperationKind.UPDATE_BY_EXAMPLE_SELECTIVE in statement_kinds


def test_generators_follow_canonical_order(config):
    generators = build_generators(config)
    kinds = [g.kind for g in generators if g.kind is not None]
    positions = [list(OperationKind).index(kind) for kind in kinds]

    assert positions == sorted(positions)
    assert all(g.kind is None for g in generators[:3])
