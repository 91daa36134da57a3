"""
Shared pytest fixtures for skill-spine tests.

This module provides:
- Paths to the Markdown fixture corpus
- Parsed fixture skills and a built index
- Logging reset between tests
- Small helpers for writing throwaway corpora under ``tmp_path``
"""

from pathlib import Path

import pytest
import structlog

from skillspine.core.logging import clear_context
from skillspine.core.settings import SkillSpineSettings
from skillspine.corpus.parser import SkillParser
from skillspine.index.builder import IndexBuilder


FIXTURES = Path(__file__).parent / "fixtures"


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop any structlog configuration a test (or a CLI run) installed."""
    yield
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Fixture corpus
# =============================================================================


@pytest.fixture(scope="session")
def skills_root() -> Path:
    """Root of the fixture corpus (3 files, 4 skills)."""
    return FIXTURES / "skills"


@pytest.fixture(scope="session")
def stakeholder_path(skills_root) -> Path:
    return skills_root / "communications" / "stakeholder-management.md"


@pytest.fixture(scope="session")
def stakeholder_text(stakeholder_path) -> str:
    return stakeholder_path.read_text(encoding="utf-8")


@pytest.fixture
def parser() -> SkillParser:
    return SkillParser()


@pytest.fixture
def settings(skills_root) -> SkillSpineSettings:
    return SkillSpineSettings(skills_root=skills_root, max_workers=4)


@pytest.fixture
def report(settings):
    """BuildReport for the fixture corpus."""
    return IndexBuilder(settings).build()


@pytest.fixture
def index(report):
    return report.index


# =============================================================================
# Throwaway corpora
# =============================================================================


def minimal_skill(name: str, category: str = "testing", handoffs: str = "") -> str:
    """A small but complete skill document."""
    table = ""
    if handoffs:
        table = (
            "## Collaboration\n\n"
            "### When to Hand Off\n\n"
            "| Trigger | Delegate To | Context |\n"
            "|---------|-------------|--------|\n"
            f"{handoffs}\n"
        )
    return (
        f"# {name}\n\n"
        f"> {name} in one line.\n\n"
        f"**Category:** {category} | **Version:** 1.0.0\n\n"
        "## Identity\n\nA test persona.\n\n"
        "## Patterns\n\n- Keep it simple\n\n"
        "## Sharp Edges (Gotchas)\n\n"
        "### [LOW] Something small\n\n**Situation:** It happens.\n\n---\n\n"
        f"{table}"
    )


@pytest.fixture
def make_skill():
    return minimal_skill


@pytest.fixture
def write_corpus(tmp_path):
    """Write ``{relative_path: text}`` under ``tmp_path/corpus`` and return the root."""

    def _write(files: dict[str, str]) -> Path:
        root = tmp_path / "corpus"
        root.mkdir(exist_ok=True)
        for relative, text in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return root

    return _write
