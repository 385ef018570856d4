"""
Jinja2 skeletons for generated files.

Only the fixed frame of a file comes from a template: the Java package and
import header, the XML prolog with its DOCTYPE, and javadoc blocks. The
structured body is rendered from the object models and passed in as text.
"""

from typing import Any, Dict, Iterable, Optional

from jinja2 import DictLoader, Environment, TemplateError as Jinja2Error

from .errors import GeneratorError

JAVA_FILE_TEMPLATE = """\
{% for line in file_comments %}
{{ line }}
{% endfor %}
{% if package %}
package {{ package }};

{% endif %}
{% if static_imports %}
{% for name in static_imports %}
import static {{ name }};
{% endfor %}

{% endif %}
{% if imports %}
{% for name in imports %}
import {{ name }};
{% endfor %}

{% endif %}
{{ body }}
"""

XML_DOCUMENT_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
{% if public_id %}
<!DOCTYPE {{ root_name }} PUBLIC "{{ public_id }}" "{{ system_id }}">
{% elif system_id %}
<!DOCTYPE {{ root_name }} SYSTEM "{{ system_id }}">
{% endif %}
{% for line in file_comments %}
<!-- {{ line }} -->
{% endfor %}
{{ body }}
"""

JAVADOC_TEMPLATE = """\
{{ lines | javadoc | indent_lines(indent) }}"""

BUILTIN_TEMPLATES = {
    "java_file": JAVA_FILE_TEMPLATE,
    "xml_document": XML_DOCUMENT_TEMPLATE,
    "javadoc": JAVADOC_TEMPLATE,
}


class TemplateError(GeneratorError):
    """Exception raised for template-related errors."""


def indent_lines(value: str, spaces: int = 4) -> str:
    """Indent every non-blank line."""
    pad = " " * spaces
    return "\n".join(pad + line if line.strip() else line for line in str(value).split("\n"))


def javadoc(lines: Iterable[str]) -> str:
    """Wrap lines in a ``/** ... */`` block; empty lines keep a bare ``*``."""
    body = "\n".join(f" * {line}" if line else " *" for line in lines)
    return f"/**\n{body}\n */"


class TemplateEngine:
    """Renders named file skeletons."""

    def __init__(self, templates: Optional[Dict[str, str]] = None):
        """
        Args:
            templates: Extra or replacement templates by name
        """
        mapping = dict(BUILTIN_TEMPLATES)
        mapping.update(templates or {})

        # Bodies arrive already escaped by the renderer
        self._env = Environment(
            loader=DictLoader(mapping),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["indent_lines"] = indent_lines
        self._env.filters["javadoc"] = javadoc

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a skeleton.

        Raises:
            TemplateError: If the template is unknown or fails to render
        """
        try:
            return self._env.get_template(template_name).render(**context)
        except Jinja2Error as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e


_default_engine: Optional[TemplateEngine] = None


def get_default_template_engine() -> TemplateEngine:
    """Shared engine with the built-in templates."""
    global _default_engine
    if _default_engine is None:
        _default_engine = TemplateEngine()
    return _default_engine
