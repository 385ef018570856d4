"""
Naming utilities for generated identifiers.

Converts database column and table names into Java property, type and
accessor names, guarding against reserved words.
"""

import re
from enum import Enum
from typing import Dict, List, Set, Tuple


class NamingCase(Enum):
    """Identifier styles produced from database names."""
    CAMEL_CASE = "camel"      # userName
    PASCAL_CASE = "pascal"    # UserName
    SNAKE_CASE = "snake"      # user_name


JAVA_RESERVED_WORDS = {
    'abstract', 'assert', 'boolean', 'break', 'byte', 'case', 'catch', 'char',
    'class', 'const', 'continue', 'default', 'do', 'double', 'else', 'enum',
    'extends', 'final', 'finally', 'float', 'for', 'goto', 'if', 'implements',
    'import', 'instanceof', 'int', 'interface', 'long', 'native', 'new',
    'package', 'private', 'protected', 'public', 'return', 'short', 'static',
    'strictfp', 'super', 'switch', 'synchronized', 'this', 'throw', 'throws',
    'transient', 'try', 'void', 'volatile', 'while', 'true', 'false', 'null',
}

FALLBACK_NAME = "field"

_INVALID_CHARS = re.compile(r'[^A-Za-z0-9]+')
_WORD_BOUNDARY = re.compile(r'([a-z0-9])([A-Z])')


def split_words(name: str) -> List[str]:
    """
    Lowercase words of a database name.

    Underscores, spaces and punctuation separate words, as does a lower to
    upper case change. All-caps names (``ORDER_ID``) are treated as words
    rather than acronyms.
    """
    if name.isupper():
        name = name.lower()
    name = _WORD_BOUNDARY.sub(r'\1_\2', name)
    return [word.lower() for word in _INVALID_CHARS.sub('_', name).split('_') if word]


class NameSanitizer:
    """Turns database names into valid identifiers of a given style."""

    def __init__(self, reserved_words: Set[str] = None):
        """
        Args:
            reserved_words: Words that get ``suffix_on_conflict`` appended
        """
        self.reserved_words = reserved_words if reserved_words is not None else JAVA_RESERVED_WORDS
        self._cache: Dict[Tuple[str, NamingCase, str], str] = {}

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.CAMEL_CASE,
                      suffix_on_conflict: str = "_") -> str:
        """
        Convert a name to an identifier.

        The result depends only on the arguments; nothing is remembered
        between calls except for caching.

        Args:
            name: Database name
            target_case: Identifier style
            suffix_on_conflict: Suffix appended to reserved words

        Returns:
            A valid identifier, never empty
        """
        key = (name, target_case, suffix_on_conflict)
        if key not in self._cache:
            self._cache[key] = self._sanitize(name, target_case, suffix_on_conflict)
        return self._cache[key]

    def _sanitize(self, name: str, target_case: NamingCase, suffix_on_conflict: str) -> str:
        words = split_words(name) or [FALLBACK_NAME]

        if target_case == NamingCase.SNAKE_CASE:
            identifier = "_".join(words)
        elif target_case == NamingCase.PASCAL_CASE:
            identifier = "".join(word.capitalize() for word in words)
        else:
            identifier = words[0] + "".join(word.capitalize() for word in words[1:])

        if identifier[0].isdigit():
            identifier = f"_{identifier}"
        if identifier in self.reserved_words:
            identifier += suffix_on_conflict
        return identifier


_default_sanitizer = NameSanitizer()


def property_name(column_name: str) -> str:
    """Java property name for a column (camelCase)."""
    return _default_sanitizer.sanitize_name(column_name, NamingCase.CAMEL_CASE)


def domain_object_name(table_name: str) -> str:
    """Java type name for a table (PascalCase)."""
    return _default_sanitizer.sanitize_name(table_name, NamingCase.PASCAL_CASE)


def getter_name(prop: str, java_type: str) -> str:
    """Accessor name; primitive booleans use the ``is`` prefix."""
    prefix = "is" if java_type == "boolean" else "get"
    return prefix + _capitalize_property(prop)


def setter_name(prop: str) -> str:
    return "set" + _capitalize_property(prop)


def _capitalize_property(prop: str) -> str:
    # JavaBeans keeps a lowercase first letter when the second is uppercase (eMail -> geteMail)
    if len(prop) > 1 and prop[1].isupper():
        return prop
    return prop[:1].upper() + prop[1:]
