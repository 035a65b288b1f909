"""
Render context handed to every entity renderer.

Holds the document-level facts an entity needs to render itself (target
namespace, prefixes, description switches) together with the Jinja2
environment that owns the XML templates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from wsdl_automation.model.types import is_basic_type

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def _cdata_filter(text: str | None) -> Markup:
    """Wrap text in a CDATA section, splitting any embedded terminator."""
    body = (text or "").replace("]]>", "]]]]><![CDATA[>")
    return Markup(f"<![CDATA[{body}]]>")


@lru_cache(maxsize=4)
def template_environment(template_dir: str = str(TEMPLATE_DIR)) -> Environment:
    """Jinja2 environment for the XML templates (shared, read-only)."""
    env = Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(["xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["cdata"] = _cdata_filter
    return env


@dataclass(frozen=True)
class RenderContext:
    """Document-level settings visible to entity renderers.

    Attributes:
        namespace: Target namespace (also the SOAP action prefix)
        include_desc: Embed descriptions as documentation elements
        optimize: Compact output; suppresses descriptions
        tns_prefix: Prefix bound to the target namespace
        xsd_prefix: Prefix bound to the XML Schema namespace
    """

    namespace: str
    include_desc: bool = False
    optimize: bool = True
    tns_prefix: str = "tns"
    xsd_prefix: str = "s"
    environment: Environment = field(default_factory=template_environment, compare=False)

    def translate_type(self, type_name: str) -> str:
        """Qualify a type name: basic types under the schema prefix, others under tns."""
        prefix = self.xsd_prefix if is_basic_type(type_name) else self.tns_prefix
        return f"{prefix}:{type_name}"

    def describes(self, description: str | None) -> bool:
        """True when a description should be rendered as documentation."""
        return bool(self.include_desc and not self.optimize and description)

    def render(self, template_name: str, **values: Any) -> str:
        """Render one XML template with the context bound as ``ctx``."""
        template = self.environment.get_template(template_name)
        return template.render(
            ctx=self,
            tns=self.tns_prefix,
            xs=self.xsd_prefix,
            qname=self.translate_type,
            **values,
        )
