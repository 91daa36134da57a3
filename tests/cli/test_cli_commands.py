"""
Tests for the skill-spine CLI commands (typer CliRunner).
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from skillspine import __version__
from skillspine.cli.app import app
from skillspine.index.index import SkillIndex

runner = CliRunner()


def invoke(*args: str):
    return runner.invoke(app, ["--log-level", "ERROR", *args])


def invoke_json(*args: str):
    result = invoke(*args, "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestRoot:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == f"skill-spine {__version__}"

    def test_missing_root(self, tmp_path):
        result = invoke("list", str(tmp_path / "missing"))
        assert result.exit_code == 1

    def test_invalid_log_level(self, skills_root):
        result = runner.invoke(app, ["--log-level", "chatty", "list", str(skills_root)])
        assert result.exit_code == 1


class TestIndexCommand:
    def test_json(self, skills_root):
        data = invoke_json("index", str(skills_root))
        assert [s["id"] for s in data["skills"]] == [
            "stakeholder-management",
            "backend",
            "frontend",
            "copywriting",
        ]
        assert data["stats"]["dangling_handoffs"] == 1

    def test_output_file(self, skills_root, tmp_path):
        out = tmp_path / "out" / "index.json"
        result = invoke("index", str(skills_root), "--output", str(out), "--workers", "1")
        assert result.exit_code == 0, result.output
        assert len(SkillIndex.from_json(out.read_text(encoding="utf-8"))) == 4

    def test_stats_table(self, skills_root):
        result = invoke("index", str(skills_root))
        assert result.exit_code == 0
        assert "Index" in result.stdout
        assert "sharp_edges" in result.stdout

    def test_config_file(self, skills_root, tmp_path):
        config = tmp_path / "skillspine.yaml"
        config.write_text("max_workers: 1\nskip_patterns: [marketing]\n")
        data = invoke_json("index", str(skills_root), "--config", str(config))
        assert "copywriting" not in [s["id"] for s in data["skills"]]

    def test_bad_config_file(self, skills_root, tmp_path):
        config = tmp_path / "skillspine.yaml"
        config.write_text("- not a mapping\n")
        result = invoke("index", str(skills_root), "--config", str(config))
        assert result.exit_code == 1

    def test_invalid_config_value(self, skills_root, tmp_path):
        config = tmp_path / "skillspine.yaml"
        config.write_text("max_workers: 0\n")
        result = invoke("index", str(skills_root), "--config", str(config))
        assert result.exit_code == 1


class TestQueryCommands:
    def test_list_category(self, skills_root):
        data = invoke_json("list", str(skills_root), "--category", "development")
        assert [item["id"] for item in data] == ["backend", "frontend"]

    def test_list_table(self, skills_root):
        result = invoke("list", str(skills_root))
        assert result.exit_code == 0
        assert "Skills" in result.stdout

    def test_search(self, skills_root):
        data = invoke_json("search", str(skills_root), "api python")
        assert [item["id"] for item in data] == ["backend"]

    def test_show(self, skills_root):
        data = invoke_json("show", str(skills_root), "Stakeholder Management")
        assert data["category"] == "communications"
        assert data["sharp_edges"][0]["severity"] == "HIGH"

    def test_show_text(self, skills_root):
        result = invoke("show", str(skills_root), "backend")
        assert result.exit_code == 0
        assert "Backend" in result.stdout
        assert "UNKNOWN" in result.stdout

    def test_show_unknown(self, skills_root):
        result = invoke("show", str(skills_root), "nope")
        assert result.exit_code == 1

    def test_handoff(self, skills_root):
        data = invoke_json("handoff", str(skills_root), "new graphql endpoint")
        assert [(r["source_skill"], r["delegate_to"]) for r in data] == [
            ("copywriting", "backend"),
            ("frontend", "Backend"),
        ]

    @pytest.mark.parametrize(("severity", "count"), [("high", 4), ("CRITICAL", 1), ("unknown", 1)])
    def test_edges_by_severity(self, skills_root, severity, count):
        data = invoke_json("edges", str(skills_root), "--severity", severity)
        assert len(data) == count

    def test_edges_by_skill(self, skills_root):
        data = invoke_json("edges", str(skills_root), "--skill", "copywriting")
        assert [e["title"] for e in data] == ["Features instead of outcomes"]


class TestCheckCommand:
    def test_dangling_handoff_exits_nonzero(self, skills_root):
        result = invoke("check", str(skills_root))
        assert result.exit_code == 1
        assert "FAILED" in result.stdout

    def test_kind_filter(self, skills_root):
        result = invoke("check", str(skills_root), "--kind", "DANGLING_HANDOFF", "--json")
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert [d["kind"] for d in data["diagnostics"]] == ["DANGLING_HANDOFF"]
        assert data["ok"] is False

    def test_clean_corpus(self, write_corpus, make_skill):
        root = write_corpus(
            {
                "a/one.md": make_skill("One", handoffs="| `two|second` | two | ctx |"),
                "a/two.md": make_skill("Two"),
            }
        )
        result = invoke("check", str(root))
        assert result.exit_code == 0, result.output
        assert "OK" in result.stdout
