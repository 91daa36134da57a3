"""
skill-spine: parse, index and query Markdown skill documents.

A skill document describes one specialist persona: identity, patterns,
anti-patterns, sharp edges (gotchas) and a handoff table naming the skills it
delegates to. skill-spine turns a directory of them into typed records and an
immutable, queryable index.

Example:
    >>> from skillspine import build_index
    >>> report = build_index("dist", max_workers=4)
    >>> report.index.get("Stakeholder Management").sharp_edges[0].severity
    <Severity.HIGH: 'HIGH'>
"""

from skillspine.core.errors import SkillSpineError
from skillspine.core.settings import SkillSpineSettings
from skillspine.corpus.models import Severity, Skill
from skillspine.corpus.parser import SkillParser, parse_skill
from skillspine.index.builder import BuildReport, IndexBuilder, build_index
from skillspine.index.index import SkillIndex

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BuildReport",
    "IndexBuilder",
    "Severity",
    "Skill",
    "SkillIndex",
    "SkillParser",
    "SkillSpineError",
    "SkillSpineSettings",
    "build_index",
    "parse_skill",
]
