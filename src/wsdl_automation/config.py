"""
Configuration for WSDL generation.

Two dataclasses cover everything a generation run needs:

- :class:`ParseOptions`: immutable switches that shape how directives turn
  into entities (array-suffix inference, default ``global`` flag, return
  value naming). Threaded explicitly through the interpreter and the entity
  constructors so concurrent generators never share mutable defaults.
- :class:`GeneratorConfig`: the document-level settings (namespace,
  endpoint, prefix table, render mode, sources, pre-supplied entities).

Both load from YAML::

    namespace: urn:demo
    endpoint: https://example.com/soap
    service_name: Demo
    optimize: false
    include_desc: true
    source_files:
      - src/DemoService.php
    parse:
      disable_array_suffix: false
      return_name_template: "%method%Result"
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from wsdl_automation.errors import ConfigError

DEFAULT_NAMESPACES: dict[str, str] = {
    "soap": "http://schemas.xmlsoap.org/wsdl/soap/",
    "s": "http://www.w3.org/2001/XMLSchema",
    "wsdl": "http://schemas.xmlsoap.org/wsdl/",
    "soapenc": "http://schemas.xmlsoap.org/soap/encoding/",
}


@dataclass(frozen=True)
class ParseOptions:
    """Switches applied while interpreting directives.

    Attributes:
        disable_array_suffix: Do not infer arrays from an ``Array`` name suffix
        global_default: Default ``is_global`` flag for new operations
        return_name_template: Name of return parts; ``%method%`` is replaced
            by the operation name
    """

    disable_array_suffix: bool = False
    global_default: bool = False
    return_name_template: str = "return"

    def return_name(self, method: str) -> str:
        return self.return_name_template.replace("%method%", method)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ParseOptions":
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown parse options: {', '.join(unknown)}")
        return cls(**data)


@dataclass
class GeneratorConfig:
    """Settings for one :class:`~wsdl_automation.generator.WsdlGenerator`.

    Attributes:
        namespace: Target namespace of the document (also the SOAP action prefix)
        endpoint: SOAP endpoint URI written to ``soap:address``
        namespaces: Prefix table declared on the root element
        optimize: Compact output (strip line breaks and tabs)
        include_desc: Embed descriptions as documentation (forced off when compact)
        service_name: Service name; may also come from an ``@service`` directive
        source_files: Files to scan for directives
        types: Pre-supplied type definitions
        operations: Pre-supplied operations
        cache_documents: Store compact documents in the document cache
        parse: Directive interpretation switches
        tns_prefix: Prefix bound to the target namespace
        xsd_prefix: Prefix bound to the XML Schema namespace
    """

    namespace: str = ""
    endpoint: str = ""
    namespaces: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_NAMESPACES))
    optimize: bool = True
    include_desc: bool = False
    service_name: str = ""
    source_files: list[Path] = field(default_factory=list)
    types: list[Any] = field(default_factory=list)
    operations: list[Any] = field(default_factory=list)
    cache_documents: bool = False
    parse: ParseOptions = field(default_factory=ParseOptions)
    tns_prefix: str = "tns"
    xsd_prefix: str = "s"

    def __post_init__(self):
        """Normalize paths and apply the compact-mode description rule."""
        if isinstance(self.source_files, (str, Path)):
            self.source_files = [self.source_files]
        self.source_files = [Path(p) for p in self.source_files]

        if isinstance(self.parse, dict):
            self.parse = ParseOptions.from_dict(self.parse)

        if self.optimize:
            self.include_desc = False

    def validate(self) -> None:
        """Raise :class:`ConfigError` when required settings are missing."""
        if not self.namespace:
            raise ConfigError("A target namespace is required")
        if not self.endpoint:
            raise ConfigError("An endpoint URI is required")

    def with_overrides(self, **changes: Any) -> "GeneratorConfig":
        """Return a copy with some settings replaced (``None`` values are ignored)."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "GeneratorConfig":
        """Load configuration from a YAML file.

        Relative ``source_files`` are resolved against the file's directory.
        """
        yaml_path = Path(yaml_path)
        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read {yaml_path}: {e}", cause=e) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {yaml_path.name}: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigError(f"{yaml_path.name} must contain a mapping at the root")

        sources = data.get("source_files") or []
        if isinstance(sources, str):
            sources = [sources]
        data["source_files"] = [
            p if Path(p).is_absolute() else yaml_path.parent / p for p in sources
        ]
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeneratorConfig":
        """Create config from dictionary."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert the serializable settings to a dictionary."""
        return {
            "namespace": self.namespace,
            "endpoint": self.endpoint,
            "namespaces": dict(self.namespaces),
            "optimize": self.optimize,
            "include_desc": self.include_desc,
            "service_name": self.service_name,
            "source_files": [str(p) for p in self.source_files],
            "cache_documents": self.cache_documents,
            "parse": {
                "disable_array_suffix": self.parse.disable_array_suffix,
                "global_default": self.parse.global_default,
                "return_name_template": self.parse.return_name_template,
            },
            "tns_prefix": self.tns_prefix,
            "xsd_prefix": self.xsd_prefix,
        }
