"""Tests for IndexBuilder: concurrency, failure isolation and reporting."""

import threading

import pytest

from skillspine.core.errors import CorpusNotFoundError
from skillspine.core.settings import SkillSpineSettings
from skillspine.corpus.models import DiagnosticKind
from skillspine.corpus.parser import SkillParser
from skillspine.index.builder import BuildReport, IndexBuilder, build_index


class ExplodingParser(SkillParser):
    """Raises a non-library exception for one document."""

    def parse(self, document):
        if "Explode" in document.text:
            raise RuntimeError("parser bug")
        return super().parse(document)


class TestFixtureCorpus:
    def test_stats(self, report):
        assert report.stats["documents"] == 4
        assert report.stats["skills"] == 4
        assert report.stats["failed"] == 0
        assert report.stats["unreadable"] == 0
        assert report.stats["sharp_edges"] == 11
        assert report.stats["handoffs"] == 8
        assert report.stats["dangling"] == 1
        assert report.stopped is False

    def test_diagnostics(self, report):
        kinds = [d.kind for d in report.diagnostics]
        assert kinds == [DiagnosticKind.SEVERITY_MISMATCH, DiagnosticKind.DANGLING_HANDOFF]

    def test_dangling_handoff_fails_report(self, report):
        assert report.ok is False
        assert len(report.by_kind(DiagnosticKind.DANGLING_HANDOFF)) == 1

    def test_to_dict(self, report):
        d = report.to_dict()
        assert d["ok"] is False
        assert d["stats"]["skills"] == 4
        assert d["diagnostics"][1]["kind"] == "DANGLING_HANDOFF"


class TestConcurrency:
    def test_concurrent_matches_sequential(self, skills_root):
        sequential = IndexBuilder(SkillSpineSettings(skills_root=skills_root, max_workers=1)).build()
        concurrent = IndexBuilder(SkillSpineSettings(skills_root=skills_root, max_workers=8)).build()

        assert concurrent.index.to_dict() == sequential.index.to_dict()
        assert concurrent.diagnostics == sequential.diagnostics

    def test_many_documents_keep_load_order(self, write_corpus, make_skill):
        files = {f"c/skill-{i:02d}.md": make_skill(f"Skill {i:02d}") for i in range(40)}
        root = write_corpus(files)

        report = IndexBuilder(SkillSpineSettings(max_workers=6)).build(root)

        assert [s.name for s in report.index] == [f"Skill {i:02d}" for i in range(40)]
        assert report.ok is True


class TestFailureIsolation:
    def test_untitled_document_skipped(self, write_corpus, make_skill):
        root = write_corpus({"a/good.md": make_skill("Good"), "a/untitled.md": "## Identity\nNo title\n"})

        report = IndexBuilder(SkillSpineSettings(max_workers=2)).build(root)

        assert [s.id for s in report.index] == ["good"]
        assert report.stats["failed"] == 1
        (diagnostic,) = report.by_kind(DiagnosticKind.PARSE_WARNING)
        assert diagnostic.message.startswith("Document skipped")
        assert diagnostic.source.endswith("untitled.md#0")
        assert diagnostic.detail["error_type"] == "DocumentParseError"
        assert report.ok is True

    def test_unexpected_exception_is_contained(self, write_corpus, make_skill):
        root = write_corpus({"a/good.md": make_skill("Good"), "a/bad.md": make_skill("Explode")})

        report = IndexBuilder(SkillSpineSettings(max_workers=2), parser=ExplodingParser()).build(root)

        assert [s.id for s in report.index] == ["good"]
        (diagnostic,) = report.by_kind(DiagnosticKind.PARSE_WARNING)
        assert diagnostic.detail == {"error_type": "RuntimeError", "message": "parser bug"}

    def test_unreadable_file(self, write_corpus, make_skill):
        root = write_corpus({"a/good.md": make_skill("Good")})
        (root / "a" / "bad.md").write_bytes(b"\xff\xfe\x80")

        report = IndexBuilder(SkillSpineSettings(max_workers=2)).build(root)

        assert len(report.index) == 1
        assert report.stats["unreadable"] == 1
        assert report.ok is False

    def test_missing_root_is_fatal(self, tmp_path):
        with pytest.raises(CorpusNotFoundError):
            IndexBuilder().build(tmp_path / "missing")


class TestStop:
    def test_stop_before_start(self, skills_root):
        stop = threading.Event()
        stop.set()

        report = IndexBuilder(SkillSpineSettings(max_workers=2)).build(skills_root, stop=stop)

        assert report.stopped is True
        assert len(report.index) == 0
        assert report.stats["documents"] == 0


class TestBuildIndexHelper:
    def test_one_shot(self, skills_root):
        report = build_index(skills_root, max_workers=1)
        assert isinstance(report, BuildReport)
        assert report.index.get("copywriting").category == "marketing"
