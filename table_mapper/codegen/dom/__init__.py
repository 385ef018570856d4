"""
Object models for generated Java source and XML mapping documents.
"""

from .java import Annotation, CompilationUnit, Field, JavaType, Method, Parameter, UnitKind, Visibility
from .xml import Attribute, Document, TextElement, XmlElement
from .render import render, render_document, render_java_file

__all__ = [
    "Annotation",
    "CompilationUnit",
    "Field",
    "JavaType",
    "Method",
    "Parameter",
    "UnitKind",
    "Visibility",
    "Attribute",
    "Document",
    "TextElement",
    "XmlElement",
    "render",
    "render_document",
    "render_java_file",
]
