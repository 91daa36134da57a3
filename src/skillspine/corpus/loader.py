"""
Skill corpus loader.

Walks a directory tree for Markdown skill files and yields them lazily. Two
views are offered:

- ``iter_files()``: ``(path, raw_text)`` per readable file
- ``iter_documents()``: ``SourceDocument`` per separator-delimited block

Both re-read from disk every time they are iterated.

Manifesto:
    One unreadable file must not block indexing the rest. Read failures are
    logged and recorded as ``IO_ERROR`` diagnostics and the walk continues.
    Only a missing corpus root is fatal.

    Files produced by concatenating related skill docs carry a literal
    separator token (``<|RELATED_DOC_SEP-...|>``). The loader treats it as a
    hard document boundary so the section splitter never sees two documents
    at once.

Examples:
    >>> loader = SkillLoader(Path("dist"))
    >>> for doc in loader:
    ...     print(doc.source_id)
    dist/communications/stakeholder-management.md#0

Tags:
    loader, filesystem, lazy-iteration, skill-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterator
from pathlib import Path

from skillspine.core.errors import CorpusNotFoundError, DocumentReadError
from skillspine.core.logging import get_logger
from skillspine.core.settings import (
    DEFAULT_SEPARATOR_PATTERN,
    DEFAULT_SKIP_PATTERNS,
    SkillSpineSettings,
)
from skillspine.corpus.models import Diagnostic, DiagnosticKind, SourceDocument

logger = get_logger(__name__)


def split_documents(text: str, separator: re.Pattern[str] | str = DEFAULT_SEPARATOR_PATTERN) -> list[str]:
    """Split raw file text on the related-doc separator.

    Blank blocks (e.g. a trailing separator) are dropped.

    >>> split_documents("# A\\n<|RELATED_DOC_SEP-1|>\\n# B\\n")
    ['# A\\n', '\\n# B\\n']
    """
    if isinstance(separator, str):
        separator = re.compile(separator)
    return [block for block in separator.split(text) if block.strip()]


class SkillLoader:
    """Lazy, restartable reader for a skill corpus directory.

    Attributes:
        root: Corpus root directory
        diagnostics: ``IO_ERROR`` records from the most recent iteration
    """

    def __init__(
        self,
        root: Path | str,
        *,
        pattern: str = "*.md",
        skip_patterns: list[str] | None = None,
        separator: str = DEFAULT_SEPARATOR_PATTERN,
        stop: threading.Event | None = None,
    ):
        self.root = Path(root)
        self.pattern = pattern
        self.skip_patterns = list(DEFAULT_SKIP_PATTERNS if skip_patterns is None else skip_patterns)
        self.separator = re.compile(separator)
        self.stop = stop
        self.diagnostics: list[Diagnostic] = []

    @classmethod
    def from_settings(
        cls,
        settings: SkillSpineSettings,
        root: Path | str | None = None,
        stop: threading.Event | None = None,
    ) -> SkillLoader:
        return cls(
            root if root is not None else settings.skills_root,
            pattern=settings.pattern,
            skip_patterns=settings.skip_patterns,
            separator=settings.separator_pattern,
            stop=stop,
        )

    def _should_skip(self, path: Path) -> bool:
        parts = set(path.relative_to(self.root).parts)
        return any(pattern in parts for pattern in self.skip_patterns)

    def _stopped(self) -> bool:
        return self.stop is not None and self.stop.is_set()

    def paths(self) -> list[Path]:
        """All candidate files under the root, sorted.

        Raises:
            CorpusNotFoundError: Root is missing or not a directory
        """
        if not self.root.is_dir():
            raise CorpusNotFoundError(self.root)
        return sorted(
            p for p in self.root.rglob(self.pattern)
            if p.is_file() and not self._should_skip(p)
        )

    def read(self, path: Path) -> str:
        """Read one file as UTF-8.

        Raises:
            DocumentReadError: The file cannot be opened or decoded
        """
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(f"Cannot read skill file: {e}", cause=e, path=str(path)) from e

    def iter_files(self) -> Iterator[tuple[Path, str]]:
        """Yield ``(path, raw_text)`` for every readable skill file.

        Unreadable files are skipped and recorded in ``diagnostics``.
        """
        self.diagnostics = []
        for path in self.paths():
            if self._stopped():
                logger.info("load_stopped", root=str(self.root))
                return
            try:
                text = self.read(path)
            except DocumentReadError as e:
                logger.warning("document_skipped", path=str(path), reason=str(e.cause))
                self.diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.IO_ERROR,
                        message=e.message,
                        source=str(path),
                        detail=e.to_dict(),
                    )
                )
                continue
            yield path, text

    def iter_documents(self) -> Iterator[SourceDocument]:
        """Yield one ``SourceDocument`` per separator-delimited block."""
        for path, text in self.iter_files():
            blocks = split_documents(text, self.separator)
            if len(blocks) > 1:
                logger.debug("multi_document_file", path=str(path), documents=len(blocks))
            skill_id = path.stem if len(blocks) == 1 else None
            for ordinal, block in enumerate(blocks):
                yield SourceDocument(path=path, ordinal=ordinal, text=block, skill_id=skill_id)

    def __iter__(self) -> Iterator[SourceDocument]:
        return self.iter_documents()
