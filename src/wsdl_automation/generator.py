"""
Document Assembler: builds a WSDL 1.1 document from entity registries.

The generator owns the type and operation registries of one service. It
fills them from pre-supplied seeds and from the directives found in its
source files, checks that a document can be built, and concatenates the
sections that every entity renders for itself.

Manifesto:
    One generator, one service, one document. Registries are never shared
    between generators, and every rendering decision (namespace, prefixes,
    description switches) flows through a single RenderContext.

Architecture:
    ::

        GeneratorConfig ──► WsdlGenerator
                               │
                               ├──► parse_source()   seeds + @directives
                               │
                               ├──► validate         operations, types, name
                               │
                               ├──► render sections
                               │      header
                               │      types      (TypeDefinition.render)
                               │      messages   (Operation.render_messages)
                               │      portType   (Operation.render_port_type)
                               │      binding    (Operation.render_binding)
                               │      service
                               │      footer
                               │
                               └──► compact (strip) | readable (MarkupFormatter)

Examples:
    >>> config = GeneratorConfig(namespace="urn:demo", endpoint="http://localhost/soap")
    >>> generator = WsdlGenerator(config)
    >>> generator.parse_source(source=php_text)
    >>> wsdl = generator.generate(readable=True)

Guardrails:
    - Do NOT emit a document without operations, types or service name
      ✅ Raise the matching AssemblyError before rendering
    - Do NOT cache readable documents
      ✅ Only compact output is stored

Tags:
    generator, wsdl, assembler, soap

Doc-Types:
    - API Reference
    - ARCHITECTURE (section: "Document Assembly")
"""

from __future__ import annotations

from typing import TextIO

from wsdl_automation.cache import DocumentCache, cache_key
from wsdl_automation.config import GeneratorConfig
from wsdl_automation.errors import MissingServiceNameError, NoOperationsError, NoTypesError
from wsdl_automation.formatter import format_xml
from wsdl_automation.logging import LogContext, get_logger
from wsdl_automation.model.context import RenderContext
from wsdl_automation.model.entities import Operation, TypeDefinition
from wsdl_automation.parser.interpreter import Diagnostic, ParseSession
from wsdl_automation.parser.interpreter import parse_source as interpret_source

log = get_logger(__name__)

FOOTER = "</wsdl:definitions>"


def optimize_xml(xml: str) -> str:
    """Strip line breaks and tabs."""
    return xml.replace("\n", "").replace("\r", "").replace("\t", "")


def optimize_wsdl(xml: str, readable: bool = False) -> str:
    """Return ``xml`` re-indented when ``readable``, compact otherwise."""
    return format_xml(xml) if readable else optimize_xml(xml)


class WsdlGenerator:
    """Assemble the WSDL document of one service.

    Args:
        config: Generator settings (namespace and endpoint are required)
        cache: Optional document cache, used when ``config.cache_documents``

    Raises:
        ConfigError: Namespace or endpoint missing
    """

    def __init__(self, config: GeneratorConfig, cache: DocumentCache | None = None):
        config.validate()
        self.config = config
        self.cache = cache
        self.context = self._context(config.optimize)
        self._reset()

    def _context(self, optimize: bool) -> RenderContext:
        return RenderContext(
            namespace=self.config.namespace,
            include_desc=self.config.include_desc,
            optimize=optimize,
            tns_prefix=self.config.tns_prefix,
            xsd_prefix=self.config.xsd_prefix,
        )

    def _reset(self) -> None:
        self._types: list[TypeDefinition] = list(self.config.types)
        self._operations: list[Operation] = list(self.config.operations)
        self._service_name = self.config.service_name
        self._description: str | None = None
        self._diagnostics: list[Diagnostic] = []
        self._parsed = False

    # ------------------------------------------------------------------ #
    # Registries
    # ------------------------------------------------------------------ #

    @property
    def types(self) -> tuple[TypeDefinition, ...]:
        return tuple(self._types)

    @property
    def operations(self) -> tuple[Operation, ...]:
        return tuple(self._operations)

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Directives rejected while parsing."""
        return tuple(self._diagnostics)

    def get_type(self, name: str) -> TypeDefinition | None:
        return next((t for t in self._types if t.name == name), None)

    def get_operation(self, name: str) -> Operation | None:
        return next((o for o in self._operations if o.name == name), None)

    def translate_type(self, type_name: str) -> str:
        """Qualify a type name with the schema or target namespace prefix."""
        return self.context.translate_type(type_name)

    # ------------------------------------------------------------------ #
    # Parsing
    # ------------------------------------------------------------------ #

    def parse_source(self, force: bool = False, source: str | None = None) -> None:
        """Rebuild the registries from the seeds and the directives.

        Args:
            force: Parse again even when the registries are already filled
            source: Parse this text instead of the configured files
        """
        if source is None and self._parsed and not force:
            return

        self._reset()
        if source is not None:
            self._interpret(source, "<string>")
            self._parsed = True
            return

        for path in self.config.source_files:
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                log.warning("source_unreadable", path=str(path), error=str(e))
                continue
            self._interpret(text, str(path))
        self._parsed = True

    def _interpret(self, text: str, origin: str) -> None:
        session = ParseSession(
            service_name=self._service_name,
            description=self._description,
            known_types={t.name for t in self._types},
        )
        interpret_source(
            text,
            self.config.parse,
            include_desc=self.config.include_desc,
            origin=origin,
            session=session,
        )
        self._types.extend(session.types)
        self._operations.extend(session.operations)
        self._service_name = session.service_name
        self._description = session.description
        self._diagnostics.extend(session.diagnostics)
        log.debug(
            "source_parsed",
            origin=origin,
            types=len(session.types),
            operations=len(session.operations),
            rejected=len(session.diagnostics),
        )

    # ------------------------------------------------------------------ #
    # Assembly
    # ------------------------------------------------------------------ #

    def generate(self, force: bool = False, readable: bool | None = None) -> str:
        """Build the WSDL document.

        Args:
            force: Reparse the sources and bypass the cache
            readable: Override the configured output mode (``None`` keeps
                ``not config.optimize``)

        Returns:
            The document, compact or re-indented

        Raises:
            NoOperationsError: No operation was found
            NoTypesError: No complex type was found
            MissingServiceNameError: No service name configured or declared
            FormatterError: Readable mode and the document is not well-formed
        """
        optimize = self.config.optimize if readable is None else not readable
        use_cache = self.cache is not None and self.config.cache_documents and optimize
        key = cache_key(self.config) if use_cache else ""

        if use_cache and not force:
            cached = self.cache.get(key)
            if cached is not None:
                log.debug("document_cache_hit", key=key)
                return cached

        self.parse_source(force)
        self._validate()

        with LogContext(wsdl_service=self._service_name):
            ctx = self._context(optimize)
            sections = [
                self.render_header(ctx),
                self.render_type_schema(ctx),
                self.render_messages(ctx),
                self.render_port_type(ctx),
                self.render_binding(ctx),
                self.render_service(ctx),
                self.render_footer(ctx),
            ]
            document = "\n".join(section for section in sections if section)
            document = optimize_xml(document) if optimize else format_xml(document)

            if use_cache:
                self.cache.put(key, document)

            log.info(
                "document_generated",
                types=len(self._types),
                operations=len(self._operations),
                readable=not optimize,
                size=len(document),
            )
        return document

    def write(self, stream: TextIO, force: bool = False, readable: bool | None = None) -> None:
        """Generate the document and write it to a text stream."""
        stream.write(self.generate(force, readable))

    def _validate(self) -> None:
        if not self._operations:
            raise NoOperationsError().with_context(sources=[str(p) for p in self.config.source_files])
        if not self._types:
            raise NoTypesError().with_context(sources=[str(p) for p in self.config.source_files])
        if not self._service_name:
            raise MissingServiceNameError()

    # ------------------------------------------------------------------ #
    # Sections
    # ------------------------------------------------------------------ #

    def render_header(self, ctx: RenderContext | None = None) -> str:
        ctx = ctx or self.context
        return ctx.render("header.xml", namespaces=self.config.namespaces)

    def render_type_schema(self, ctx: RenderContext | None = None) -> str:
        """Schema of every complex type; empty when there are none."""
        ctx = ctx or self.context
        if not self._types:
            return ""
        return ctx.render("types.xml", types=[t.render(ctx) for t in self._types])

    def render_messages(self, ctx: RenderContext | None = None) -> str:
        ctx = ctx or self.context
        return "\n".join(o.render_messages(ctx) for o in self._operations)

    def render_port_type(self, ctx: RenderContext | None = None) -> str:
        ctx = ctx or self.context
        return ctx.render(
            "port_type.xml",
            service_name=self._service_name,
            operations=[o.render_port_type(ctx) for o in self._operations],
        )

    def render_binding(self, ctx: RenderContext | None = None) -> str:
        ctx = ctx or self.context
        return ctx.render(
            "binding.xml",
            service_name=self._service_name,
            operations=[o.render_binding(ctx) for o in self._operations],
        )

    def render_service(self, ctx: RenderContext | None = None) -> str:
        ctx = ctx or self.context
        return ctx.render(
            "service.xml",
            service_name=self._service_name,
            description=self._description,
            endpoint=self.config.endpoint,
        )

    def render_footer(self, ctx: RenderContext | None = None) -> str:
        return FOOTER


__all__ = [
    "FOOTER",
    "WsdlGenerator",
    "format_xml",
    "optimize_wsdl",
    "optimize_xml",
]
