"""Tests for the source object model and its rendering."""

from table_mapper.codegen.dom.java import (
    Annotation,
    CompilationUnit,
    Field,
    JavaType,
    Method,
    Parameter,
    UnitKind,
    list_of,
)
from table_mapper.codegen.dom.render import render, render_java_file


def test_java_type_names():
    listed = list_of(JavaType("com.example.model.Document"))

    assert listed.short_name == "List<Document>"
    assert listed.import_names() == {"java.util.List", "com.example.model.Document"}
    assert JavaType("byte[]").simple_name == "byte[]"
    assert not JavaType("byte[]").needs_import
    assert not JavaType("java.lang.String").needs_import
    assert JavaType("int").is_primitive


def test_imports_are_deduplicated_and_sorted_at_render_time():
    unit = CompilationUnit(JavaType("com.example.mapper.DocumentMapper"), kind=UnitKind.INTERFACE)
    unit.add_import("java.util.List")
    unit.add_import("com.example.model.Document")
    unit.add_import("java.util.List")
    unit.add_import("com.example.mapper.Sibling")

    assert unit.imports == [
        "java.util.List", "com.example.model.Document", "java.util.List", "com.example.mapper.Sibling",
    ]
    assert unit.import_set() == ["com.example.model.Document", "java.util.List"]


def test_referenced_types_are_imported():
    unit = CompilationUnit(JavaType("com.example.model.Document"))
    unit.add_field(Field("createdAt", JavaType("java.util.Date")))
    method = Method("find", return_type=JavaType("java.math.BigDecimal"))
    method.add_parameter(Parameter(JavaType("java.lang.Long"), "id"))
    method.add_body_line("return null;")
    unit.add_method(method)

    assert unit.import_set() == ["java.math.BigDecimal", "java.util.Date"]


def test_class_rendering():
    unit = CompilationUnit(JavaType("com.example.model.Document"), super_class=JavaType("com.example.model.DocumentKey"))
    unit.add_field(Field("name", JavaType("java.lang.String")))
    getter = Method("getName", return_type=JavaType("java.lang.String"))
    getter.add_body_line("return name;")
    unit.add_method(getter)

    assert render_java_file(unit) == (
        "package com.example.model;\n"
        "\n"
        "public class Document extends DocumentKey {\n"
        "    private String name;\n"
        "\n"
        "    public String getName() {\n"
        "        return name;\n"
        "    }\n"
        "}\n"
    )


def test_interface_methods_are_abstract_without_visibility():
    unit = CompilationUnit(JavaType("com.example.mapper.DocumentMapper"), kind=UnitKind.INTERFACE)
    method = Method("deleteByPrimaryKey", return_type=JavaType("int"), body=None)
    method.add_parameter(Parameter(
        JavaType("java.lang.Integer"), "id",
        [Annotation(JavaType("org.apache.ibatis.annotations.Param"), '"id"')],
    ))
    unit.add_method(method)

    assert render(unit) == (
        "public interface DocumentMapper {\n"
        '    int deleteByPrimaryKey(@Param("id") Integer id);\n'
        "}"
    )
    assert unit.import_set() == ["org.apache.ibatis.annotations.Param"]


def test_nested_blocks_indent_by_brace_depth():
    method = Method("insertSelective", return_type=JavaType("java.lang.String"))
    method.add_body_line("if (record.getName() != null) {")
    method.add_body_line('sql.VALUES("name", "#{name}");')
    method.add_body_line("}")
    method.add_body_line("return sql.toString();")

    assert render(method, indent_size=2) == (
        "public String insertSelective() {\n"
        "  if (record.getName() != null) {\n"
        '    sql.VALUES("name", "#{name}");\n'
        "  }\n"
        "  return sql.toString();\n"
        "}"
    )


def test_empty_class_renders_braces():
    assert render(CompilationUnit(JavaType("a.Empty"))) == "public class Empty {\n}"


def test_javadoc_is_indented_with_its_member():
    unit = CompilationUnit(JavaType("com.example.model.Account"))
    unit.add_field(Field("name", JavaType("java.lang.String"), javadoc=["Display name", ""]))

    assert render(unit) == (
        "public class Account {\n"
        "    /**\n"
        "     * Display name\n"
        "     *\n"
        "     */\n"
        "    private String name;\n"
        "}"
    )
