"""
Parser module for WSDL directives.

Extracts ``@keyword`` directives from documentation comments and
interprets them into entities.
"""

from wsdl_automation.parser.extractor import (
    Directive,
    DirectiveBlock,
    extract_blocks,
    find_blocks,
    split_directives,
)
from wsdl_automation.parser.interpreter import (
    Accumulator,
    Diagnostic,
    DirectiveInterpreter,
    ParseSession,
    parse_source,
)

__all__ = [
    "Accumulator",
    "Diagnostic",
    "Directive",
    "DirectiveBlock",
    "DirectiveInterpreter",
    "ParseSession",
    "extract_blocks",
    "find_blocks",
    "parse_source",
    "split_directives",
]
