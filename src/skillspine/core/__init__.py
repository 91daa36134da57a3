"""
Core primitives shared by every skill-spine module.

- ``errors``: typed error hierarchy
- ``logging``: structlog configuration
- ``settings``: pydantic-settings configuration
- ``result``: Ok/Err envelope for batch work
"""

from skillspine.core.errors import (
    ConfigError,
    CorpusNotFoundError,
    DocumentParseError,
    DocumentReadError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    ParseError,
    SkillSpineError,
    SourceError,
)
from skillspine.core.logging import LogContext, configure_logging, get_logger
from skillspine.core.result import Err, Ok, Result, partition_results, try_result
from skillspine.core.settings import SkillSpineSettings

__all__ = [
    "ConfigError",
    "CorpusNotFoundError",
    "DocumentParseError",
    "DocumentReadError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidConfigError",
    "ParseError",
    "SkillSpineError",
    "SourceError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "Err",
    "Ok",
    "Result",
    "partition_results",
    "try_result",
    "SkillSpineSettings",
]
