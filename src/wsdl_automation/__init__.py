"""
WSDL Automation - WSDL 1.1 generation from documentation comments.

Reads ``@keyword`` directives embedded in PHP-style ``/** ... */`` comments,
builds a model of types, parameters and operations, and writes an
RPC/encoded SOAP service description, compact or re-indented.

Example:
    >>> from wsdl_automation import GeneratorConfig, WsdlGenerator
    >>> config = GeneratorConfig(
    ...     namespace="urn:demo",
    ...     endpoint="http://localhost/soap",
    ...     source_files=["DemoService.php"],
    ... )
    >>> wsdl = WsdlGenerator(config).generate(readable=True)
"""

__version__ = "0.1.0"

from wsdl_automation.config import GeneratorConfig, ParseOptions
from wsdl_automation.errors import (
    AssemblyError,
    ConfigError,
    DirectiveError,
    FormatterError,
    MissingServiceNameError,
    NoOperationsError,
    NoTypesError,
    WsdlError,
)
from wsdl_automation.formatter import FormatterOptions, MarkupFormatter, format_xml
from wsdl_automation.generator import WsdlGenerator, optimize_wsdl, optimize_xml
from wsdl_automation.model import Field, Operation, Parameter, RenderContext, TypeDefinition
from wsdl_automation.parser import extract_blocks, parse_source

__all__ = [
    "AssemblyError",
    "ConfigError",
    "DirectiveError",
    "Field",
    "FormatterError",
    "FormatterOptions",
    "GeneratorConfig",
    "MarkupFormatter",
    "MissingServiceNameError",
    "NoOperationsError",
    "NoTypesError",
    "Operation",
    "Parameter",
    "ParseOptions",
    "RenderContext",
    "TypeDefinition",
    "WsdlError",
    "WsdlGenerator",
    "__version__",
    "extract_blocks",
    "format_xml",
    "optimize_wsdl",
    "optimize_xml",
    "parse_source",
]
