"""Settings for skill-spine.

``SkillSpineSettings`` is the single configuration object of the pipeline.
It is created once (from env vars, a ``.env`` file, a YAML file or plain
keyword arguments) and passed explicitly to the loader and builder; there is
no module-level singleton.

Manifesto:
    Configuration is explicit and validated once, at startup.

    - **Pydantic validation:** Type-checked at startup
    - **Environment-driven:** ``SKILLSPINE_`` env vars and ``.env`` files
    - **YAML files:** ``SkillSpineSettings.from_yaml("skillspine.yaml")``
    - **Sensible defaults:** Works out of the box on a checkout of the corpus

Examples:
    >>> settings = SkillSpineSettings(skills_root="dist", max_workers=4)
    >>> settings.max_workers
    4

Tags:
    settings, configuration, pydantic, environment, skill-spine

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skillspine.core.errors import ConfigError, InvalidConfigError

DEFAULT_SEPARATOR_PATTERN = r"<\|RELATED_DOC_SEP[^\n]*?\|>"

DEFAULT_SKIP_PATTERNS = ["node_modules", ".git", "mcp-server", "__pycache__"]


class SkillSpineSettings(BaseSettings):
    """Configuration for loading and indexing a skill corpus.

    Fields
    ──────
    skills_root       : Directory tree holding the Markdown skill documents
    pattern           : Glob for skill files (matched recursively)
    skip_patterns     : Path fragments that exclude a file
    separator_pattern : Regex for the related-document separator token
    max_workers       : Parser thread pool size (1 = sequential)
    log_level         : Structlog log level
    json_logs         : Force JSON (True) / console (False) logs, None = auto
    """

    model_config = SettingsConfigDict(
        env_prefix="SKILLSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Corpus ───────────────────────────────────────────────────
    skills_root: Path = Field(default_factory=lambda: Path("."))
    pattern: str = "*.md"
    skip_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_SKIP_PATTERNS))
    separator_pattern: str = DEFAULT_SEPARATOR_PATTERN

    # ── Execution ────────────────────────────────────────────────
    max_workers: int = Field(default=8, ge=1)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level

    @classmethod
    def from_yaml(cls, yaml_path: Path | str, **overrides: Any) -> SkillSpineSettings:
        """Load settings from a YAML file.

        Keyword overrides win over file values; env vars still apply to
        fields neither sets.

        Raises:
            ConfigError: File cannot be read or is not valid YAML
            InvalidConfigError: Not a mapping, or a value fails validation
        """
        path = Path(yaml_path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read settings file: {path}", cause=e, path=str(path)) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in settings file: {path}", cause=e, path=str(path)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfigError(str(path), type(data).__name__, "Settings file must contain a mapping")

        data.update(overrides)
        try:
            return cls(**data)
        except ValidationError as e:
            raise InvalidConfigError(str(path), data, f"Invalid settings in {path}: {e}", cause=e) from e


__all__ = [
    "SkillSpineSettings",
    "DEFAULT_SEPARATOR_PATTERN",
    "DEFAULT_SKIP_PATTERNS",
]
