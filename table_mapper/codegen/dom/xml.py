"""
Markup object model for generated mapping documents.

Attribute order is insertion order and is never re-sorted. An element
renders self-closing exactly when it has no children.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..core.errors import MalformedFragmentError

XML_NAME_PATTERN = re.compile(r"^[A-Za-z_][\w.\-]*$")

MAPPER_PUBLIC_ID = "-//mybatis.org//DTD Mapper 3.0//EN"
MAPPER_SYSTEM_ID = "http://mybatis.org/dtd/mybatis-3-mapper.dtd"


@dataclass(frozen=True)
class Attribute:
    name: str
    value: str


@dataclass
class TextElement:
    """Literal text content, one rendered line."""

    content: str

    def copy(self) -> "TextElement":
        return TextElement(self.content)


Node = Union["XmlElement", TextElement]


class XmlElement:
    """A markup element with ordered attributes and children."""

    def __init__(self, name: str):
        self.name = name
        self.attributes: List[Attribute] = []
        self.children: List[Node] = []

    def add_attribute(self, name: str, value: str) -> "XmlElement":
        self.attributes.append(Attribute(name, value))
        return self

    def get_attribute(self, name: str) -> Optional[str]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return None

    def add_element(self, child: Node) -> "XmlElement":
        self.children.append(child)
        return self

    def add_text(self, content: str) -> "XmlElement":
        return self.add_element(TextElement(content))

    @property
    def is_self_closing(self) -> bool:
        return not self.children

    def copy(self) -> "XmlElement":
        """Deep copy: later changes to either tree never reach the other."""
        clone = XmlElement(self.name)
        clone.attributes = list(self.attributes)
        clone.children = [child.copy() for child in self.children]
        return clone

    def validate(self) -> None:
        """
        Check the subtree is well formed.

        Raises:
            MalformedFragmentError: On an invalid name, a duplicate or
                unset attribute, or a child that is not a markup node
        """
        if not isinstance(self.name, str) or not XML_NAME_PATTERN.match(self.name):
            raise MalformedFragmentError(f"Invalid element name: {self.name!r}")

        seen = set()
        for attribute in self.attributes:
            if not XML_NAME_PATTERN.match(attribute.name or ""):
                raise MalformedFragmentError(
                    f"Invalid attribute name {attribute.name!r} on <{self.name}>"
                )
            if attribute.name in seen:
                raise MalformedFragmentError(
                    f"Duplicate attribute {attribute.name!r} on <{self.name}>"
                )
            if attribute.value is None:
                raise MalformedFragmentError(
                    f"Attribute {attribute.name!r} on <{self.name}> has no value"
                )
            seen.add(attribute.name)

        for child in self.children:
            if isinstance(child, XmlElement):
                child.validate()
            elif isinstance(child, TextElement):
                if child.content is None:
                    raise MalformedFragmentError(f"Empty text node under <{self.name}>")
            else:
                raise MalformedFragmentError(
                    f"Unsupported child {type(child).__name__} under <{self.name}>"
                )

    def __repr__(self) -> str:
        return f"XmlElement({self.name!r}, attributes={len(self.attributes)}, children={len(self.children)})"


@dataclass
class Document:
    """A mapping document: root element plus DOCTYPE identifiers."""

    root: XmlElement
    public_id: Optional[str] = MAPPER_PUBLIC_ID
    system_id: Optional[str] = MAPPER_SYSTEM_ID
    file_comments: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.root.children
