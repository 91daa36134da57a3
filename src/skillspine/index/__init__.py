"""
Skill index: the read-only query surface over a parsed corpus.

Example:
    >>> from skillspine.index import build_index
    >>> report = build_index("dist")
    >>> [r.delegate_to for r in report.index.find_by_trigger("graphql api")]
"""

from skillspine.index.builder import BuildReport, IndexBuilder, build_index
from skillspine.index.index import HandoffEdge, SkillIndex

__all__ = [
    "BuildReport",
    "IndexBuilder",
    "build_index",
    "HandoffEdge",
    "SkillIndex",
]
