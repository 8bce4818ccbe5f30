"""
Structured error types for buildversion.

Every failure the tool can report is a ``BuildVersionError`` carrying a
category, structured context and an optional chained cause, so the CLI can
log one consistent record no matter where the run stopped.

Manifesto:
    - **Typed hierarchy:** parameter, version, revision and artifact errors
      are distinct types, so callers catch exactly what they can handle
    - **Rich context:** errors carry the offending parameter, token or path
    - **Error chaining:** the original ``OSError``/``ValueError`` is kept as
      ``cause`` and ``__cause__``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                     BuildVersionError                         │
        │               (category, context, cause)                      │
        ├──────────────────────────────────────────────────────────────┤
        │  SchemaError        ParameterError       VersionFormatError   │
        │  (CONFIG)           (CONFIG)             (VALIDATION)         │
        │                          │                     │              │
        │              UnknownParameterError       BuildNumberError     │
        │              UnrecognizedTokenError                           │
        │              InvalidParameterValueError                       │
        │                                                               │
        │  RevisionError      ArtifactError                             │
        │  (SOURCE)           (STORAGE)                                 │
        └──────────────────────────────────────────────────────────────┘

Fatal-to-run errors (parameter, version and revision errors) propagate to
the CLI. ``ArtifactError`` is never raised by the writers; it is recorded
on the artifact result so sibling artifacts are still attempted.

Tags:
    error-handling, exception-hierarchy, error-context, buildversion

Doc-Types:
    - API Reference
    - Error Handling Guide

Usage:
    from buildversion.errors import UnknownParameterError

    try:
        merge_command_line(params, argv)
    except UnknownParameterError as e:
        print(e.to_dict())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories used for classification and exit-code decisions.

    Examples:
        >>> ErrorCategory.CONFIG.value
        'CONFIG'
    """

    CONFIG = "CONFIG"
    VALIDATION = "VALIDATION"
    SOURCE = "SOURCE"
    STORAGE = "STORAGE"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured context attached to an error.

    Attributes:
        parameter: Canonical or raw parameter name involved
        token: Command-line token being processed
        path: Filesystem path involved (revision file, artifact)
        metadata: Additional key-value pairs
    """

    parameter: str | None = None
    token: str | None = None
    path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["parameter", "token", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class BuildVersionError(Exception):
    """
    Base exception for all buildversion errors.

    Subclasses set ``default_category``; the instance category can still be
    overridden per raise.

    Examples:
        >>> error = BuildVersionError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = BuildVersionError("Bad file").with_context(path="VersionInfo.cs")
        >>> error.context.path
        'VersionInfo.cs'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> BuildVersionError:
        """
        Add context to this error (fluent API).

        Usage:
            raise RevisionError("HEAD missing").with_context(path=".git/HEAD")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# PARAMETER ERRORS
# =============================================================================


class SchemaError(BuildVersionError):
    """Parameter schema violates its naming invariants."""

    default_category = ErrorCategory.CONFIG


class ParameterError(BuildVersionError):
    """
    Command-line parameters could not be merged.

    Never recoverable within a run; the store may be partially updated.
    """

    default_category = ErrorCategory.CONFIG


class UnknownParameterError(ParameterError):
    """A flag names no field in the schema."""

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(
            message or f"Unknown parameter {name}",
            context=ErrorContext(parameter=name),
        )


class UnrecognizedTokenError(ParameterError):
    """A bare token appeared where no operand or trailing capture applies."""

    def __init__(self, token: str, message: str | None = None):
        self.token = token
        super().__init__(
            message or f"Unknown parameter {token}",
            context=ErrorContext(token=token),
        )


class InvalidParameterValueError(ParameterError):
    """A raw value could not be coerced into the field's type (strict stores only)."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, name: str, value: Any, message: str | None = None):
        self.name = name
        self.value = value
        super().__init__(
            message or f"Invalid value for {name}: {value!r}",
            context=ErrorContext(parameter=name),
        )


# =============================================================================
# VERSION ERRORS
# =============================================================================


class VersionFormatError(BuildVersionError):
    """Version text is not a ``num.num.num`` triplet."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, version: str, message: str | None = None, **kwargs: Any):
        self.version = version
        super().__init__(
            message
            or f"Specified version number must be in form 'num.num.num'. Given version = {version}",
            **kwargs,
        )


class BuildNumberError(VersionFormatError):
    """Build component cannot be incremented because it is not an integer."""


# =============================================================================
# SOURCE / STORAGE ERRORS
# =============================================================================


class RevisionError(BuildVersionError):
    """Current revision could not be read from the repository metadata."""

    default_category = ErrorCategory.SOURCE


class ArtifactError(BuildVersionError):
    """One output artifact could not be written or patched."""

    default_category = ErrorCategory.STORAGE


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "BuildVersionError",
    "SchemaError",
    "ParameterError",
    "UnknownParameterError",
    "UnrecognizedTokenError",
    "InvalidParameterValueError",
    "VersionFormatError",
    "BuildNumberError",
    "RevisionError",
    "ArtifactError",
]
