"""
Skill corpus parsing: Load -> Split -> Extract.

Example:
    >>> from skillspine.corpus import SkillLoader, SkillParser
    >>> parser = SkillParser()
    >>> skills = [parser.parse(doc).skill for doc in SkillLoader("dist")]
"""

from skillspine.corpus.loader import SkillLoader, split_documents
from skillspine.corpus.models import (
    AntiPattern,
    Diagnostic,
    DiagnosticKind,
    HandoffRule,
    Pattern,
    ReceivesFrom,
    Section,
    SectionKind,
    Severity,
    SharpEdge,
    Skill,
    SourceDocument,
)
from skillspine.corpus.parser import ParseOutcome, SkillParser, parse_skill
from skillspine.corpus.sections import SectionMap, split_sections

__all__ = [
    "SkillLoader",
    "split_documents",
    "AntiPattern",
    "Diagnostic",
    "DiagnosticKind",
    "HandoffRule",
    "Pattern",
    "ReceivesFrom",
    "Section",
    "SectionKind",
    "Severity",
    "SharpEdge",
    "Skill",
    "SourceDocument",
    "ParseOutcome",
    "SkillParser",
    "parse_skill",
    "SectionMap",
    "split_sections",
]
