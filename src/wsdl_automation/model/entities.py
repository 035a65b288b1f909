"""
Entity model of a service contract.

Four immutable variants describe everything a WSDL document is built from:

- :class:`Parameter`: an operation argument or return value
- :class:`Field`: one member of a structured type
- :class:`TypeDefinition`: a structured or array schema type
- :class:`Operation`: a remote call with ordered parameters

Each variant embeds an :class:`Identity` record by value (unique id, name,
description, directive configuration) and renders itself against a
:class:`~wsdl_automation.model.context.RenderContext`.

Architecture:
    ::

        Identity (uid, name, description, config)
            │ embedded by
            ├── Parameter ──► <wsdl:part>
            ├── Field ──────► <s:element>
            ├── TypeDefinition ──► <s:complexType>
            └── Operation ──► port-type / binding / message views

Examples:
    >>> flag = Field.create("flag", "boolean")
    >>> flag.nillable, flag.min_occurs, flag.max_occurs
    (False, 1, 1)
    >>> TypeDefinition.create("PersonArray").element_type
    'Person'

Tags:
    model, entities, wsdl, xsd

Doc-Types:
    - API Reference
    - ARCHITECTURE (section: "Entity Model")
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence

from wsdl_automation.config import ParseOptions
from wsdl_automation.model.context import RenderContext
from wsdl_automation.model.types import (
    DEFAULT_TYPE,
    array_element_type,
    is_nillable_by_default,
    parse_flag,
)


class Renderable(Protocol):
    """Anything that renders itself to markup."""

    def render(self, ctx: RenderContext) -> str:
        ...


@dataclass(frozen=True)
class Identity:
    """Identity shared by every entity.

    Attributes:
        name: Entity name (never empty)
        description: Optional free text
        config: Directive configuration (``@pw_set`` values, lower-case keys)
        uid: Generated unique identifier, meaningless beyond uniqueness
    """

    name: str
    description: str | None = None
    config: Mapping[str, Any] = field(default_factory=dict)
    uid: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        if not self.name:
            raise ValueError("An entity name must not be empty")
        object.__setattr__(self, "config", dict(self.config))


class _Identified:
    """Read-through accessors for the embedded identity."""

    identity: Identity

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def description(self) -> str | None:
        return self.identity.description

    @property
    def config(self) -> Mapping[str, Any]:
        return self.identity.config

    @property
    def uid(self) -> str:
        return self.identity.uid


# =============================================================================
# Parameter / Field
# =============================================================================


@dataclass(frozen=True)
class Parameter(_Identified):
    """A named, typed value passed into or returned from an operation."""

    identity: Identity
    type_name: str = DEFAULT_TYPE

    @classmethod
    def create(
        cls,
        name: str,
        type_name: str = DEFAULT_TYPE,
        *,
        description: str | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> "Parameter":
        return cls(Identity(name, description, config or {}), type_name or DEFAULT_TYPE)

    def render(self, ctx: RenderContext) -> str:
        """Render as a message part."""
        return ctx.render("part.xml", parameter=self)

    def to_field(self) -> "Field":
        """Elevate this parameter into a type member."""
        return Field.create(
            self.name,
            self.type_name,
            description=self.description,
            config=self.config,
        )


def _occurs(value: Any, key: str) -> int | str:
    text = str(value).strip()
    if text.lower() == "unbounded":
        return "unbounded"
    try:
        occurs = int(text)
    except ValueError:
        raise ValueError(f"{key} must be an integer or 'unbounded', got {value!r}") from None
    if occurs < 0:
        raise ValueError(f"{key} must not be negative")
    return occurs


@dataclass(frozen=True)
class Field(_Identified):
    """One member of a structured type.

    ``nillable`` defaults to false for the non-nillable primitives
    (``boolean``, ``int``, ...) and true for everything else; the
    ``nillable``, ``minoccurs`` and ``maxoccurs`` configuration keys
    override the defaults.
    """

    identity: Identity
    type_name: str = DEFAULT_TYPE
    nillable: bool = True
    min_occurs: int | str = 1
    max_occurs: int | str = 1

    @classmethod
    def create(
        cls,
        name: str,
        type_name: str = DEFAULT_TYPE,
        *,
        description: str | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> "Field":
        config = dict(config or {})
        type_name = type_name or DEFAULT_TYPE

        nillable = is_nillable_by_default(type_name)
        if "nillable" in config:
            nillable = parse_flag(config["nillable"])

        min_occurs = _occurs(config["minoccurs"], "minOccurs") if "minoccurs" in config else 1
        max_occurs = _occurs(config["maxoccurs"], "maxOccurs") if "maxoccurs" in config else 1

        return cls(
            Identity(name, description, config),
            type_name,
            nillable=nillable,
            min_occurs=min_occurs,
            max_occurs=max_occurs,
        )

    def render(self, ctx: RenderContext) -> str:
        """Render as a schema element declaration."""
        return ctx.render("element.xml", field=self)

    def to_parameter(self) -> Parameter:
        """Lower this member into an operation parameter."""
        return Parameter(self.identity, self.type_name)


# =============================================================================
# TypeDefinition
# =============================================================================


@dataclass(frozen=True)
class TypeDefinition(_Identified):
    """A named structured or array schema type.

    Attributes:
        is_array: True for ``soapenc:Array`` restrictions
        element_type: Array element type name (``None`` unless ``is_array``)
        fields: Ordered members (ignored for arrays)
    """

    identity: Identity
    is_array: bool = False
    element_type: str | None = None
    fields: tuple[Field, ...] = ()

    @classmethod
    def create(
        cls,
        name: str,
        element_type: str | None = None,
        fields: Sequence[Field | Parameter] = (),
        *,
        is_array: bool | None = None,
        description: str | None = None,
        config: Mapping[str, Any] | None = None,
        options: ParseOptions | None = None,
    ) -> "TypeDefinition":
        """Build a type, inferring arrays from an ``Array`` name suffix.

        Args:
            name: Type name
            element_type: Explicit array element type
            fields: Members; parameters are elevated to fields
            is_array: Explicit array declaration (bracket notation)
            description: Optional description
            config: Directive configuration; ``isarray`` always wins
            options: Parse options (suffix inference switch)
        """
        options = options or ParseOptions()
        config = dict(config or {})

        array = bool(is_array)
        if is_array is None and not options.disable_array_suffix:
            inferred = array_element_type(name)
            if inferred is not None:
                array = True
                element_type = element_type or inferred

        if "isarray" in config:
            array = parse_flag(config["isarray"])

        if array and not element_type:
            raise ValueError(f"Array type {name!r} needs an element type")

        members = tuple(
            member.to_field() if isinstance(member, Parameter) else member
            for member in fields
        )
        return cls(
            Identity(name, description, config),
            is_array=array,
            element_type=element_type if array else None,
            fields=members,
        )

    def get_field(self, name: str) -> Field | None:
        return next((f for f in self.fields if f.name == name), None)

    def render(self, ctx: RenderContext) -> str:
        """Render as ``complexType``: array restriction or member sequence."""
        rendered = [] if self.is_array else [f.render(ctx) for f in self.fields]
        return ctx.render("complex_type.xml", definition=self, fields=rendered)


# =============================================================================
# Operation
# =============================================================================

ENCODING_STYLE = "http://schemas.xmlsoap.org/soap/encoding/"


@dataclass(frozen=True)
class Operation(_Identified):
    """A remote call with an ordered parameter list and optional return value."""

    identity: Identity
    parameters: tuple[Parameter, ...] = ()
    returns: Parameter | None = None
    is_global: bool = False

    @classmethod
    def create(
        cls,
        name: str,
        parameters: Sequence[Parameter | Field] = (),
        returns: Parameter | None = None,
        *,
        description: str | None = None,
        config: Mapping[str, Any] | None = None,
        options: ParseOptions | None = None,
    ) -> "Operation":
        options = options or ParseOptions()
        config = dict(config or {})
        is_global = parse_flag(config["global"]) if "global" in config else options.global_default
        params = tuple(
            p.to_parameter() if isinstance(p, Field) else p for p in parameters
        )
        return cls(Identity(name, description, config), params, returns, is_global)

    def get_parameter(self, name: str) -> Parameter | None:
        return next((p for p in self.parameters if p.name == name), None)

    @property
    def parameter_names(self) -> list[str]:
        return [p.name for p in self.parameters]

    @property
    def parameter_order(self) -> str | None:
        """Space-separated call order, only when there is more than one parameter."""
        if len(self.parameters) > 1:
            return " ".join(self.parameter_names)
        return None

    def render_port_type(self, ctx: RenderContext) -> str:
        return ctx.render("port_operation.xml", operation=self)

    def render_binding(self, ctx: RenderContext) -> str:
        return ctx.render(
            "binding_operation.xml",
            operation=self,
            encoding_style=ENCODING_STYLE,
            input_parts=" ".join(self.parameter_names),
            output_parts=self.returns.name if self.returns else "",
        )

    def render_messages(self, ctx: RenderContext) -> str:
        """Render the ``<name>SoapIn`` / ``<name>SoapOut`` message pair."""
        return ctx.render(
            "messages.xml",
            operation=self,
            parts=[p.render(ctx) for p in self.parameters],
            result=self.returns.render(ctx) if self.returns else "",
        )
