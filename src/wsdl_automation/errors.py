"""
Structured error types for WSDL generation.

Every failure raised by this package extends :class:`WsdlError`, which
carries a category, a free-form context mapping and an optional chained
cause. The hierarchy mirrors the three ways a generation run can go wrong:

- **Directive errors:** a malformed ``@keyword`` line. Recoverable: the
  interpreter catches them at the comment-block boundary, logs them and
  drops the block.
- **Assembly errors:** the registries cannot produce a document (no
  operations, no types, no service name). Fatal: they always reach the
  caller.
- **Formatter errors:** the markup handed to the formatter is not
  well-formed. Fatal, and a sign of a rendering defect.

Architecture:
    ::

        WsdlError (category, context, cause)
        ├── DirectiveError          PARSE       (recoverable, block-local)
        ├── AssemblyError           VALIDATION
        │   ├── NoOperationsError
        │   ├── NoTypesError
        │   └── MissingServiceNameError
        ├── FormatterError          INTERNAL    (reason, line)
        └── ConfigError             CONFIG

Examples:
    >>> error = NoOperationsError()
    >>> error.category.value
    'VALIDATION'
    >>> error.to_dict()["error_type"]
    'NoOperationsError'

Tags:
    error-handling, exception-hierarchy, wsdl

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    PARSE = "PARSE"               # Malformed directive text
    VALIDATION = "VALIDATION"     # Incomplete model at render time
    CONFIG = "CONFIG"             # Missing or invalid settings
    SOURCE = "SOURCE"             # Unreadable source files
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


class WsdlError(Exception):
    """Base exception for all WSDL generation errors.

    Subclasses set ``default_category`` so that callers can route errors
    without inspecting the concrete type.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> WsdlError:
        """Add context to this error (fluent API)."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# DIRECTIVE ERRORS (Recoverable)
# =============================================================================


class DirectiveError(WsdlError):
    """A single ``@keyword`` line could not be interpreted.

    Never propagates past the directive interpreter.
    """

    default_category = ErrorCategory.PARSE

    def __init__(self, keyword: str, message: str, *, argument: str = ""):
        super().__init__(message, context={"keyword": keyword, "argument": argument})
        self.keyword = keyword
        self.argument = argument


# =============================================================================
# ASSEMBLY ERRORS (Fatal)
# =============================================================================


class AssemblyError(WsdlError):
    """The registries cannot be rendered into a document."""

    default_category = ErrorCategory.VALIDATION


class NoOperationsError(AssemblyError):
    def __init__(self, message: str = "No operations are available"):
        super().__init__(message)


class NoTypesError(AssemblyError):
    def __init__(self, message: str = "No complex types are available"):
        super().__init__(message)


class MissingServiceNameError(AssemblyError):
    def __init__(self, message: str = "Could not determine the webservice name"):
        super().__init__(message)


# =============================================================================
# FORMATTER / CONFIG ERRORS
# =============================================================================


class FormatterError(WsdlError):
    """Malformed markup reached the formatter.

    Attributes:
        reason: The underlying XML parser message.
        line: Line number at which parsing failed.
    """

    default_category = ErrorCategory.INTERNAL

    def __init__(self, reason: str, line: int, *, cause: Exception | None = None):
        super().__init__(
            f"XML error: {reason} at line {line}",
            context={"line": line},
            cause=cause,
        )
        self.reason = reason
        self.line = line


class ConfigError(WsdlError):
    """Missing or invalid generator configuration."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "AssemblyError",
    "ConfigError",
    "DirectiveError",
    "ErrorCategory",
    "FormatterError",
    "MissingServiceNameError",
    "NoOperationsError",
    "NoTypesError",
    "WsdlError",
]
