"""
Structured error types for skill-spine.

Every failure the pipeline can raise is a ``SkillSpineError`` carrying a
category, structured context and an optional chained cause. Soft problems
(malformed sections, unknown severities, dangling handoffs) are *not*
exceptions; they are recorded as ``Diagnostic`` records by the corpus layer.

Manifesto:
    - **Typed hierarchy:** One class per failure domain, never bare Exception
    - **Best effort:** Only an unavailable corpus root is fatal
    - **Rich context:** Errors carry the document path for logging
    - **Error chaining:** The original OSError/UnicodeDecodeError is kept as cause

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                    SkillSpineError                       │
        │            (category, context, cause)                    │
        ├──────────────────────────────────────────────────────────┤
        │  SourceError           ParseError          ConfigError   │
        │  (SOURCE)              (PARSE)             (CONFIG)      │
        │     │                     │                   │          │
        │  CorpusNotFoundError   DocumentParseError  InvalidConfig │
        │  DocumentReadError                                       │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = DocumentReadError("cannot read", path="skills/a.md")
    >>> error.context.path
    'skills/a.md'
    >>> error.to_dict()["category"]
    'STORAGE'

Tags:
    error-handling, exception-hierarchy, error-context, skill-spine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging."""

    SOURCE = "SOURCE"           # Corpus root, missing directories
    STORAGE = "STORAGE"         # Unreadable files, bad encodings
    PARSE = "PARSE"             # Unusable document structure
    CONFIG = "CONFIG"           # Missing/invalid settings
    INTERNAL = "INTERNAL"       # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        path: File the error relates to
        source_id: Logical document id (``path#ordinal``)
        skill: Skill name, when already known
        metadata: Additional key-value pairs
    """

    path: str | None = None
    source_id: str | None = None
    skill: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["path", "source_id", "skill"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SkillSpineError(Exception):
    """Base exception for all skill-spine errors.

    Subclasses set ``default_category``; callers may attach context with the
    fluent ``with_context()``.

    Examples:
        >>> err = SkillSpineError("boom").with_context(path="a.md", line=3)
        >>> err.context.metadata["line"]
        3
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
        path: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if path is not None:
            self.context.path = str(path)

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SkillSpineError:
        """Add context to this error (fluent API)."""
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
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
# SOURCE ERRORS
# =============================================================================


class SourceError(SkillSpineError):
    """Error reading the skill corpus."""

    default_category = ErrorCategory.SOURCE


class CorpusNotFoundError(SourceError):
    """The corpus root does not exist or is not a directory.

    This is the only error that aborts a build.
    """

    def __init__(self, root: Any, message: str | None = None):
        self.root = str(root)
        super().__init__(message or f"Skill corpus not found: {root}", path=self.root)


class DocumentReadError(SourceError):
    """A single Markdown file could not be read or decoded."""

    default_category = ErrorCategory.STORAGE


# =============================================================================
# PARSE ERRORS
# =============================================================================


class ParseError(SkillSpineError):
    """Error parsing a skill document."""

    default_category = ErrorCategory.PARSE


class DocumentParseError(ParseError):
    """The document has no usable structure (e.g. no ``#`` title)."""


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(SkillSpineError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None, **kwargs: Any):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}", **kwargs)


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SkillSpineError",
    "SourceError",
    "CorpusNotFoundError",
    "DocumentReadError",
    "ParseError",
    "DocumentParseError",
    "ConfigError",
    "InvalidConfigError",
]
