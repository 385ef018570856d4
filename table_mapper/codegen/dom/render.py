"""
Deterministic text rendering for the source and markup object models.

``render`` is a pure recursive function of a finished tree: rendering the
same tree twice yields identical text.
"""

from typing import List, Union
from xml.sax.saxutils import escape

from ..core.templates import get_default_template_engine
from .java import CompilationUnit, Field, Method, Parameter, Visibility
from .xml import Document, TextElement, XmlElement

JAVA_INDENT_SIZE = 4
XML_INDENT = "  "

_ATTRIBUTE_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\t": "&#9;"}

RenderableNode = Union[XmlElement, TextElement, Document, CompilationUnit, Field, Method]


def render(node: RenderableNode, indent_level: int = 0,
           indent_size: int = JAVA_INDENT_SIZE) -> str:
    """
    Render an object-model node.

    Args:
        node: Markup or source node
        indent_level: Nesting depth of the node
        indent_size: Spaces per level for source nodes; markup always uses two

    Returns:
        Rendered text without a trailing newline
    """
    if isinstance(node, XmlElement):
        return _render_element(node, indent_level)
    if isinstance(node, TextElement):
        return XML_INDENT * indent_level + escape(node.content)
    if isinstance(node, Document):
        return render_document(node)

    indent = " " * indent_size
    if isinstance(node, CompilationUnit):
        return _render_unit(node, indent_level, indent)
    if isinstance(node, Field):
        return _render_field(node, indent_level, indent)
    if isinstance(node, Method):
        return _render_method(node, indent_level, indent, in_interface=False)

    raise TypeError(f"Cannot render {type(node).__name__}")


def render_document(document: Document) -> str:
    """Render a full mapping document with XML prolog and DOCTYPE."""
    engine = get_default_template_engine()
    return engine.render_template("xml_document", {
        "root_name": document.root.name,
        "public_id": document.public_id,
        "system_id": document.system_id,
        "file_comments": document.file_comments,
        "body": _render_element(document.root, 0),
    }) + "\n"


def render_java_file(unit: CompilationUnit, indent_size: int = JAVA_INDENT_SIZE) -> str:
    """Render a top-level compilation unit with package and imports."""
    engine = get_default_template_engine()
    return engine.render_template("java_file", {
        "file_comments": unit.file_comments,
        "package": unit.type.package,
        "static_imports": unit.static_import_set(),
        "imports": unit.import_set(),
        "body": _render_unit(unit, 0, " " * indent_size),
    }) + "\n"


# Markup


def _quote_attribute(value: str) -> str:
    return '"' + escape(value, _ATTRIBUTE_ENTITIES) + '"'


def _render_element(element: XmlElement, level: int) -> str:
    pad = XML_INDENT * level
    parts = [pad, "<", element.name]
    for attribute in element.attributes:
        parts.append(f" {attribute.name}={_quote_attribute(attribute.value)}")

    if element.is_self_closing:
        parts.append(" />")
        return "".join(parts)

    parts.append(">")
    for child in element.children:
        parts.append("\n")
        parts.append(render(child, level + 1))
    parts.append(f"\n{pad}</{element.name}>")
    return "".join(parts)


# Source


def _javadoc(lines: List[str], pad: str) -> List[str]:
    if not lines:
        return []
    engine = get_default_template_engine()
    return [engine.render_template("javadoc", {"lines": lines, "indent": len(pad)})]


def _modifiers(visibility: Visibility, *flags) -> str:
    words = [visibility.value] if visibility.value else []
    words.extend(word for word, present in flags if present)
    return " ".join(words)


def _render_parameter(parameter: Parameter) -> str:
    annotations = "".join(f"{annotation} " for annotation in parameter.annotations)
    return f"{annotations}{parameter.type.short_name} {parameter.name}"


def _render_field(java_field: Field, level: int, indent: str) -> str:
    pad = indent * level
    lines = _javadoc(java_field.javadoc, pad)
    lines.extend(f"{pad}{annotation}" for annotation in java_field.annotations)

    modifiers = _modifiers(
        java_field.visibility, ("static", java_field.static), ("final", java_field.final)
    )
    declaration = f"{java_field.type.short_name} {java_field.name}"
    if modifiers:
        declaration = f"{modifiers} {declaration}"
    if java_field.initial_value is not None:
        declaration += f" = {java_field.initial_value}"
    lines.append(f"{pad}{declaration};")
    return "\n".join(lines)


def _render_method(method: Method, level: int, indent: str, in_interface: bool) -> str:
    pad = indent * level
    lines = _javadoc(method.javadoc, pad)
    lines.extend(f"{pad}{annotation}" for annotation in method.annotations)

    visibility = Visibility.PACKAGE if in_interface else method.visibility
    signature = _modifiers(visibility, ("static", method.static))
    if not method.constructor:
        return_type = method.return_type.short_name if method.return_type else "void"
        signature = f"{signature} {return_type}" if signature else return_type

    parameters = ", ".join(_render_parameter(p) for p in method.parameters)
    call = f"{method.name}({parameters})"
    signature = f"{signature} {call}" if signature else call
    if method.exceptions:
        signature += " throws " + ", ".join(e.short_name for e in method.exceptions)

    if method.body is None:
        lines.append(f"{pad}{signature};")
        return "\n".join(lines)

    lines.append(f"{pad}{signature} {{")
    depth = level + 1
    for line in method.body:
        if line.startswith("}"):
            depth -= 1
        lines.append(indent * depth + line if line else "")
        if line.endswith("{"):
            depth += 1
    lines.append(f"{pad}}}")
    return "\n".join(lines)


def _render_unit(unit: CompilationUnit, level: int, indent: str) -> str:
    pad = indent * level
    lines = _javadoc(unit.javadoc, pad)
    lines.extend(f"{pad}{annotation}" for annotation in unit.annotations)

    header = _modifiers(
        unit.visibility, ("abstract", unit.abstract and not unit.is_interface),
        ("static", unit.static),
    )
    header = f"{header} {unit.kind.value} {unit.type.simple_name}".lstrip()
    if unit.is_interface:
        if unit.super_interfaces:
            header += " extends " + ", ".join(t.short_name for t in unit.super_interfaces)
    else:
        if unit.super_class is not None:
            header += f" extends {unit.super_class.short_name}"
        if unit.super_interfaces:
            header += " implements " + ", ".join(t.short_name for t in unit.super_interfaces)
    lines.append(f"{pad}{header} {{")

    members = [_render_field(f, level + 1, indent) for f in unit.fields]
    members.extend(
        _render_method(m, level + 1, indent, in_interface=unit.is_interface) for m in unit.methods
    )
    members.extend(_render_unit(inner, level + 1, indent) for inner in unit.inner_units)

    if members:
        lines.append("\n\n".join(members))
    lines.append(f"{pad}}}")
    return "\n".join(lines)
