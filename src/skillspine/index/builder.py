"""
Index builder: Load -> Parse (thread pool) -> Join -> Index.

Manifesto:
    Parsing one skill document touches nothing but its own text, so the
    documents are parsed on a bounded thread pool. Handoff validation needs
    every skill, so all workers are joined before the index is built, and
    the results are put back in load order first. A concurrent build and a
    sequential build of the same corpus produce identical indexes.

Architecture:
    ::

        SkillLoader.iter_documents()         (main thread, lazy)
              │
              ▼
        ThreadPoolExecutor(max_workers)      one task per SourceDocument
              │   try_result(parser.parse)   -> Ok(ParseOutcome) | Err(error)
              ▼
        join + reorder by load position
              │
              ├──► partition_results()       skills / failed documents
              ▼
        SkillIndex.build(skills)             -> dangling handoff diagnostics
              │
              ▼
        BuildReport(index, diagnostics, stats)

Guardrails:
    - Do NOT let one failing document abort the build
      ✅ Wrap every parse in ``try_result``; failures become diagnostics
    - Do NOT index before the join
      ✅ ``SkillIndex.build`` runs once, after every future has resolved
    - Only a missing corpus root is fatal
      ✅ ``CorpusNotFoundError`` propagates out of ``build()``

Tags:
    builder, thread-pool, concurrency, index, skill-spine

Doc-Types:
    - API Reference
    - Architecture
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from skillspine.core.errors import SkillSpineError
from skillspine.core.logging import get_logger
from skillspine.core.result import Err, Ok, Result, partition_results, try_result
from skillspine.core.settings import SkillSpineSettings
from skillspine.corpus.loader import SkillLoader
from skillspine.corpus.models import Diagnostic, DiagnosticKind, SourceDocument
from skillspine.corpus.parser import ParseOutcome, SkillParser
from skillspine.index.index import SkillIndex

logger = get_logger(__name__)


@dataclass
class BuildReport:
    """Outcome of one index build.

    ``ok`` is False when any file could not be read or any handoff points at
    a skill that does not exist.
    """

    index: SkillIndex
    diagnostics: list[Diagnostic] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)
    stopped: bool = False

    @property
    def ok(self) -> bool:
        blocking = {DiagnosticKind.IO_ERROR, DiagnosticKind.DANGLING_HANDOFF}
        return not any(d.kind in blocking for d in self.diagnostics)

    def by_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "stopped": self.stopped,
            "stats": dict(self.stats),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class IndexBuilder:
    """Build a ``SkillIndex`` from a corpus directory.

    Examples:
        >>> settings = SkillSpineSettings(skills_root="dist", max_workers=4)
        >>> report = IndexBuilder(settings).build()
        >>> report.index.get("stakeholder-management").category
        'communications'
    """

    def __init__(self, settings: SkillSpineSettings | None = None, parser: SkillParser | None = None):
        self.settings = settings or SkillSpineSettings()
        self.parser = parser or SkillParser()

    def build(self, root: Path | str | None = None, *, stop: threading.Event | None = None) -> BuildReport:
        """Load, parse and index the corpus.

        Args:
            root: Corpus root, defaults to ``settings.skills_root``
            stop: When set, no further files are read; documents already
                submitted finish and the partial corpus is indexed

        Raises:
            CorpusNotFoundError: The corpus root does not exist
        """
        loader = SkillLoader.from_settings(self.settings, root=root, stop=stop)
        started = time.monotonic()
        logger.info("index_build_started", root=str(loader.root), max_workers=self.settings.max_workers)

        documents, results = self._parse_all(loader)

        diagnostics: list[Diagnostic] = list(loader.diagnostics)
        outcomes: list[ParseOutcome] = []
        for document, result in zip(documents, results):
            match result:
                case Ok(outcome):
                    outcomes.append(outcome)
                    diagnostics.extend(outcome.diagnostics)
                case Err(error):
                    diagnostics.append(self._failure(document, error))

        skills = [outcome.skill for outcome in outcomes]
        index = SkillIndex.build(skills)
        diagnostics.extend(index.diagnostics())

        _, failed = partition_results(results)
        stats = {
            "documents": len(documents),
            "skills": len(index),
            "failed": len(failed),
            "unreadable": sum(1 for d in loader.diagnostics if d.kind is DiagnosticKind.IO_ERROR),
            "sharp_edges": sum(len(s.sharp_edges) for s in skills),
            "handoffs": sum(len(s.handoffs) for s in skills),
            "dangling": sum(1 for d in diagnostics if d.kind is DiagnosticKind.DANGLING_HANDOFF),
            "duration_ms": round((time.monotonic() - started) * 1000, 1),
        }
        stopped = stop is not None and stop.is_set()

        logger.info("index_built", stopped=stopped, warnings=len(diagnostics), **stats)
        return BuildReport(index=index, diagnostics=diagnostics, stats=stats, stopped=stopped)

    def _parse_all(self, loader: SkillLoader) -> tuple[list[SourceDocument], list[Result[ParseOutcome]]]:
        """Parse every document; results come back in load order."""
        documents: list[SourceDocument] = []
        if self.settings.max_workers == 1:
            documents.extend(loader.iter_documents())
            return documents, [try_result(lambda doc=doc: self.parser.parse(doc)) for doc in documents]

        futures = []
        with ThreadPoolExecutor(max_workers=self.settings.max_workers, thread_name_prefix="skill-parse") as pool:
            for document in loader.iter_documents():
                documents.append(document)
                futures.append(pool.submit(try_result, lambda doc=document: self.parser.parse(doc)))
        # try_result never raises, so result() only returns Ok/Err
        return documents, [future.result() for future in futures]

    @staticmethod
    def _failure(document: SourceDocument, error: Exception) -> Diagnostic:
        logger.warning("document_failed", source=document.source_id, error=str(error))
        if isinstance(error, SkillSpineError):
            detail = error.to_dict()
        else:
            detail = {"error_type": type(error).__name__, "message": str(error)}
        return Diagnostic(
            kind=DiagnosticKind.PARSE_WARNING,
            message=f"Document skipped: {error}",
            source=document.source_id,
            detail=detail,
        )


def build_index(root: Path | str, **settings: Any) -> BuildReport:
    """One-shot helper: ``build_index("dist", max_workers=4)``."""
    return IndexBuilder(SkillSpineSettings(skills_root=root, **settings)).build()
