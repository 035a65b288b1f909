"""Type vocabulary shared by the entity model and the renderers."""

from __future__ import annotations

# A subset of the XML Schema built-in types
# (see http://www.w3.org/TR/2001/PR-xmlschema-2-20010330/)
BASIC_TYPES: frozenset[str] = frozenset({
    "anyType",
    "anyURI",
    "base64Binary",
    "boolean",
    "byte",
    "date",
    "decimal",
    "double",
    "duration",
    "dateTime",
    "float",
    "gDay",
    "gMonthDay",
    "gYearMonth",
    "gYear",
    "hexBinary",
    "int",
    "integer",
    "long",
    "NOTATION",
    "number",
    "QName",
    "short",
    "string",
    "time",
})

# Elements of these types default to nillable="false"
NON_NILLABLE_TYPES: frozenset[str] = frozenset({
    "boolean",
    "decimal",
    "double",
    "float",
    "int",
    "integer",
    "long",
    "number",
    "short",
})

ARRAY_SUFFIX = "array"

DEFAULT_TYPE = "string"


def is_basic_type(name: str) -> bool:
    return name in BASIC_TYPES


def is_nillable_by_default(type_name: str) -> bool:
    return type_name not in NON_NILLABLE_TYPES


def array_element_type(name: str) -> str | None:
    """Element type implied by an ``...Array`` type name, or ``None``.

    >>> array_element_type("StringArray")
    'String'
    >>> array_element_type("Person") is None
    True
    """
    if len(name) > len(ARRAY_SUFFIX) and name.lower().endswith(ARRAY_SUFFIX):
        return name[: -len(ARRAY_SUFFIX)]
    return None


def parse_flag(value: object) -> bool:
    """Directive-style boolean: ``"1"`` and ``"true"`` are true, anything else false."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true")
