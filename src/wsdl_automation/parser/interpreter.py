"""
Directive Interpreter.

Turns the ordered directives of one documentation block into at most one
entity: a :class:`~wsdl_automation.model.entities.TypeDefinition` (the block
declares ``@pw_complex``) or an
:class:`~wsdl_automation.model.entities.Operation` (the block documents a
function).

Manifesto:
    A broken comment must never break the document. Every directive error
    is scoped to the block it appears in: the block is dropped, a
    diagnostic is recorded, and interpretation continues with the next
    block.

Architecture:
    ::

        DirectiveBlock.directives
              │
              ▼
        Accumulator(cfg={}, elements=(), returns=None)
              │  step() per directive, left to right
              │    pw_set     ─► cfg | {key: value}
              │    pw_element ─► elements + Field(cfg);   cfg = {}
              │    param      ─► elements + Parameter(cfg); cfg = {}
              │    return     ─► returns = Parameter(cfg);  cfg = {}
              │    pw_complex ─► emit TypeDefinition, done
              │    ignore     ─► DirectiveError (block dropped)
              ▼
        finish(): emit Operation when the block documents a function

Guardrails:
    - Do NOT let a DirectiveError escape ``interpret``
      ✅ Catch at the block boundary, log, record a Diagnostic
    - Do NOT merge duplicate type definitions
      ✅ Reject the second declaration

Tags:
    parser, interpreter, directives

Doc-Types:
    - API Reference
    - ARCHITECTURE (section: "Directive Interpretation")
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping

from wsdl_automation.config import ParseOptions
from wsdl_automation.errors import DirectiveError
from wsdl_automation.logging import get_logger
from wsdl_automation.model.entities import Field, Operation, Parameter, TypeDefinition
from wsdl_automation.parser.extractor import Directive, DirectiveBlock, extract_blocks

log = get_logger(__name__)

IGNORE_KEYWORDS = frozenset({"ignore", "pw_ignore"})


@dataclass(frozen=True)
class Diagnostic:
    """A directive that was rejected, and why."""

    keyword: str
    message: str
    method: str = ""
    origin: str = "<string>"
    line: int = 1

    def __str__(self) -> str:
        where = f"{self.origin}:{self.line}"
        target = f" ({self.method})" if self.method else ""
        return f"{where}{target} @{self.keyword}: {self.message}"


@dataclass
class ParseSession:
    """Results collected while interpreting the blocks of one parse.

    Attributes:
        service_name: Set by ``@service``
        description: Service description (first ``@service`` text wins)
        known_types: Type names registered before this parse
        types: Type definitions emitted by this parse
        operations: Operations emitted by this parse
        diagnostics: Rejected directives
    """

    service_name: str = ""
    description: str | None = None
    known_types: set[str] = field(default_factory=set)
    types: list[TypeDefinition] = field(default_factory=list)
    operations: list[Operation] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def has_type(self, name: str) -> bool:
        return name in self.known_types or any(t.name == name for t in self.types)


@dataclass(frozen=True)
class Accumulator:
    """Pending state of one block.

    ``cfg`` collects ``@pw_set`` values until the next element, parameter or
    return directive consumes (and clears) it.
    """

    cfg: Mapping[str, str] = field(default_factory=dict)
    elements: tuple[Parameter | Field, ...] = ()
    returns: Parameter | None = None
    emitted: TypeDefinition | None = None
    done: bool = False

    def configure(self, key: str, value: str) -> "Accumulator":
        return replace(self, cfg={**self.cfg, key: value})

    def append(self, element: Parameter | Field) -> "Accumulator":
        return replace(self, cfg={}, elements=self.elements + (element,))

    def set_return(self, parameter: Parameter) -> "Accumulator":
        return replace(self, cfg={}, returns=parameter)

    def emit(self, definition: TypeDefinition) -> "Accumulator":
        return replace(self, emitted=definition, done=True)


def _split(argument: str, limit: int) -> list[str]:
    """Split on whitespace into at most ``limit`` parts."""
    return [part for part in re.split(r"\s+", argument.strip(), maxsplit=limit - 1) if part]


def _variable_name(token: str) -> str:
    name = token[1:] if token.startswith("$") else token
    return name.rstrip(";")


class DirectiveInterpreter:
    """Interpret directive blocks into entities.

    Args:
        options: Parse switches (array-suffix inference, defaults)
        include_desc: Keep descriptions found in directive text
    """

    def __init__(self, options: ParseOptions | None = None, include_desc: bool = False):
        self.options = options or ParseOptions()
        self.include_desc = include_desc

    # ------------------------------------------------------------------ #
    # Block level
    # ------------------------------------------------------------------ #

    def interpret(self, block: DirectiveBlock, session: ParseSession) -> TypeDefinition | Operation | None:
        """Interpret one block and record its entity (if any) in the session.

        Returns:
            The emitted entity, or ``None`` when the block yields nothing
        """
        try:
            entity = self._reduce(block, session)
        except DirectiveError as e:
            if e.keyword in IGNORE_KEYWORDS:
                log.debug("block_ignored", method=block.method, origin=block.origin, line=block.line)
                return None
            diagnostic = Diagnostic(
                keyword=e.keyword,
                message=e.message,
                method=block.method,
                origin=block.origin,
                line=block.line,
            )
            session.diagnostics.append(diagnostic)
            log.warning(
                "directive_rejected",
                keyword=e.keyword,
                argument=e.argument,
                reason=e.message,
                method=block.method,
                origin=block.origin,
                line=block.line,
            )
            return None

        if isinstance(entity, TypeDefinition):
            session.types.append(entity)
            log.debug("type_registered", name=entity.name, is_array=entity.is_array)
        elif isinstance(entity, Operation):
            session.operations.append(entity)
            log.debug("operation_registered", name=entity.name, parameters=len(entity.parameters))
        return entity

    def _reduce(self, block: DirectiveBlock, session: ParseSession) -> TypeDefinition | Operation | None:
        acc = Accumulator()
        for directive in block.directives:
            acc = self.step(acc, directive, block.method, session)
            if acc.done:
                break
        return self.finish(acc, block)

    def step(
        self,
        acc: Accumulator,
        directive: Directive,
        method: str,
        session: ParseSession,
    ) -> Accumulator:
        """Apply one directive to the accumulator.

        Raises:
            DirectiveError: The directive is malformed, out of context, or
                an ``ignore`` marker
        """
        keyword, argument = directive
        if keyword == "service":
            self._service(argument, session)
            return acc
        if keyword == "pw_set":
            key, value = self._set(argument)
            return acc.configure(key, value)
        if keyword == "pw_element":
            return acc.append(self._element(argument, acc.cfg))
        if keyword == "pw_complex":
            return acc.emit(self._complex(argument, acc, session))
        if keyword == "param":
            return acc.append(self._param(argument, method, acc.cfg))
        if keyword == "return":
            return acc.set_return(self._return(argument, method, acc.cfg))
        if keyword in IGNORE_KEYWORDS:
            raise DirectiveError(keyword, "Block ignored")
        return acc

    def finish(self, acc: Accumulator, block: DirectiveBlock) -> TypeDefinition | Operation | None:
        """Turn the final accumulator into the block's entity."""
        if acc.emitted is not None:
            return acc.emitted
        if not block.method:
            return None
        description = block.description if self.include_desc and block.description else None
        return Operation.create(
            block.method,
            acc.elements,
            acc.returns,
            description=description,
            config=acc.cfg,
            options=self.options,
        )

    # ------------------------------------------------------------------ #
    # Keywords
    # ------------------------------------------------------------------ #

    def _service(self, argument: str, session: ParseSession) -> None:
        info = _split(argument, 2)
        if not info:
            raise DirectiveError("service", "Invalid service definition", argument=argument)
        session.service_name = info[0]
        if self.include_desc and len(info) > 1 and not session.description:
            session.description = info[1].strip()

    def _set(self, argument: str) -> tuple[str, str]:
        info = _split(argument, 3)
        if not info or "=" not in info[0]:
            raise DirectiveError("pw_set", "Invalid set definition", argument=argument)
        key, value = info[0].split("=", 1)
        if not key:
            raise DirectiveError("pw_set", "Invalid set definition", argument=argument)
        return key.lower(), value

    def _typed_name(self, keyword: str, argument: str) -> tuple[str, str, str | None]:
        """Parse ``<type> $<name>; [description]``."""
        info = _split(argument, 3)
        if len(info) < 2 or not _variable_name(info[1]):
            raise DirectiveError(keyword, f"Invalid {keyword} definition", argument=argument)
        description = info[2].strip() if self.include_desc and len(info) > 2 else None
        return info[0], _variable_name(info[1]), description

    def _element(self, argument: str, cfg: Mapping[str, str]) -> Field:
        type_name, name, description = self._typed_name("pw_element", argument)
        return self._build(
            "pw_element", argument, Field.create, name, type_name,
            description=description, config=cfg,
        )

    def _param(self, argument: str, method: str, cfg: Mapping[str, str]) -> Parameter:
        if not method:
            raise DirectiveError("param", "@param outside of a function", argument=argument)
        type_name, name, description = self._typed_name("param", argument)
        return self._build(
            "param", argument, Parameter.create, name, type_name,
            description=description, config=cfg,
        )

    def _return(self, argument: str, method: str, cfg: Mapping[str, str]) -> Parameter:
        if not method:
            raise DirectiveError("return", "@return outside of a function", argument=argument)
        info = _split(argument, 2)
        if not info:
            raise DirectiveError("return", "Invalid return definition", argument=argument)
        description = info[1].strip() if self.include_desc and len(info) > 1 else None
        return self._build(
            "return", argument, Parameter.create, self.options.return_name(method), info[0],
            description=description, config=cfg,
        )

    def _complex(self, argument: str, acc: Accumulator, session: ParseSession) -> TypeDefinition:
        """Parse ``<name>[[]] [<elementType>] [description]``."""
        info = _split(argument, 3)
        if not info:
            raise DirectiveError("pw_complex", "Invalid complex definition", argument=argument)

        element_type: str | None = None
        description: str | None = None
        is_array: bool | None = None

        if info[0].endswith("[]"):
            if len(info) < 2:
                raise DirectiveError("pw_complex", "Invalid array definition", argument=argument)
            name = info[0][:-2]
            element_type = info[1]
            is_array = True
            if self.include_desc and len(info) > 2:
                description = info[2].strip()
        else:
            name = info[0]
            if self.include_desc and len(info) > 1:
                description = " ".join(info[1:]).strip()

        if not name:
            raise DirectiveError("pw_complex", "Invalid complex definition", argument=argument)
        if session.has_type(name):
            raise DirectiveError("pw_complex", f"Duplicate type {name!r}", argument=argument)

        return self._build(
            "pw_complex", argument, TypeDefinition.create, name, element_type, acc.elements,
            is_array=is_array, description=description, config=acc.cfg, options=self.options,
        )

    @staticmethod
    def _build(keyword: str, argument: str, factory, *args: Any, **kwargs: Any):
        """Call an entity factory, reporting invalid values as directive errors."""
        try:
            return factory(*args, **kwargs)
        except ValueError as e:
            raise DirectiveError(keyword, str(e), argument=argument) from e


def parse_source(
    source: str,
    options: ParseOptions | None = None,
    *,
    include_desc: bool = False,
    known_types: Iterable[str] = (),
    origin: str = "<string>",
    session: ParseSession | None = None,
) -> ParseSession:
    """Extract and interpret every block of a source text.

    Args:
        source: Raw source text
        options: Parse switches
        include_desc: Keep descriptions found in directive text
        known_types: Type names that already exist (duplicates are rejected)
        origin: Name used for diagnostics
        session: Session to extend (a new one when omitted)

    Returns:
        The parse session holding emitted entities and diagnostics
    """
    if session is None:
        session = ParseSession(known_types=set(known_types))
    interpreter = DirectiveInterpreter(options, include_desc)
    for block in extract_blocks(source, origin):
        interpreter.interpret(block, session)
    return session
