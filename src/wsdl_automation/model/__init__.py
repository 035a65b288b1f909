"""
Entity model for service contracts.

Provides the immutable entities (types, fields, parameters, operations)
and the render context they draw on.
"""

from wsdl_automation.model.context import RenderContext
from wsdl_automation.model.entities import (
    Field,
    Identity,
    Operation,
    Parameter,
    Renderable,
    TypeDefinition,
)
from wsdl_automation.model.types import BASIC_TYPES, NON_NILLABLE_TYPES

__all__ = [
    "BASIC_TYPES",
    "NON_NILLABLE_TYPES",
    "Field",
    "Identity",
    "Operation",
    "Parameter",
    "RenderContext",
    "Renderable",
    "TypeDefinition",
]
