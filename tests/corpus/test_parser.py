"""Tests for SkillParser.

Covers the document-level properties:
- Skill name equals the ``#`` title
- Severities are recognized values or UNKNOWN
- Parsing is idempotent
- Every handoff table row yields a rule, empty rows included
"""

from pathlib import Path

import pytest

from skillspine.core.errors import DocumentParseError
from skillspine.corpus.models import DiagnosticKind, Severity, SectionKind, Skill, SourceDocument
from skillspine.corpus.parser import SkillParser, parse_skill


@pytest.fixture
def stakeholder(parser, stakeholder_text, stakeholder_path):
    return parser.parse_text(stakeholder_text, stakeholder_path)


class TestStakeholderManagement:
    """The reference document parses into the expected record."""

    def test_header(self, stakeholder):
        skill = stakeholder.skill
        assert skill.name == "Stakeholder Management"
        assert skill.id == "stakeholder-management"
        assert skill.category == "communications"
        assert skill.version == "1.0.0"
        assert skill.tags == frozenset({"investors", "board", "updates", "communication"})
        assert skill.summary.startswith("Keep investors, board members and the team aligned")

    def test_sharp_edges(self, stakeholder):
        edges = stakeholder.skill.sharp_edges
        assert len(edges) >= 7
        assert edges[0].severity is Severity.HIGH
        assert edges[0].situation.startswith("Founder sends monthly updates for 6 months")
        assert edges[1].severity is Severity.CRITICAL
        assert all(edge.severity in Severity.recognized() for edge in edges)

    def test_first_edge_solution_keeps_fence(self, stakeholder):
        solution = stakeholder.skill.sharp_edges[0].solution
        assert solution.startswith("```")
        assert "## Lowlights" in solution
        assert "---" in solution

    def test_empty_handoff_rows_kept_as_null_rules(self, stakeholder):
        handoffs = stakeholder.skill.handoffs
        assert len(handoffs) == 3
        for rule in handoffs:
            assert rule.source_skill == "stakeholder-management"
            assert rule.trigger is None
            assert rule.delegate_to is None

    def test_prose_sections(self, stakeholder):
        skill = stakeholder.skill
        assert skill.identity.startswith("You are a founder-side communications lead")
        assert skill.expertise[0] == "Monthly investor updates"
        assert [p.name for p in skill.patterns] == ["Consistent Update Template", "Lead With The Ask"]
        assert skill.patterns[0].when == "Sending recurring investor or board updates"
        assert "## Highlights" in skill.patterns[0].description
        (anti,) = skill.anti_patterns
        assert anti.name == "The Highlight Reel"
        assert anti.problem == "Only reporting wins."
        assert anti.why_bad == "Readers stop believing the wins too."
        assert anti.instead.startswith("Always include a Lowlights section")
        assert skill.decisions.startswith("Send bad news as soon as it is material.")

    def test_collaboration(self, stakeholder):
        skill = stakeholder.skill
        assert [r.skill for r in skill.receives_from] == ["fundraising"]
        assert skill.pairs_with == ("fundraising", "copywriting")

    def test_no_warnings(self, stakeholder):
        assert stakeholder.diagnostics == ()

    def test_source(self, stakeholder, stakeholder_path):
        assert stakeholder.skill.source_path == stakeholder_path.as_posix()
        assert stakeholder.skill.source_id.endswith("stakeholder-management.md#0")


class TestProperties:
    @pytest.mark.parametrize("title", ["Copywriting", "C# Tooling", "API Design (REST)"])
    def test_name_equals_title(self, parser, make_skill, title):
        assert parser.parse_text(make_skill(title)).skill.name == title

    def test_document_skill_id_wins_over_title(self, parser, make_skill):
        text = make_skill("Stripe", handoffs="| `refund` | support |  |")
        document = SourceDocument(Path("integrations/stripe-payments.md"), 0, text, skill_id="stripe-payments")
        skill = parser.parse(document).skill
        assert skill.id == "stripe-payments"
        assert skill.name == "Stripe"
        assert skill.handoffs[0].source_skill == "stripe-payments"

    def test_idempotent(self, parser, stakeholder_text):
        assert parser.parse_text(stakeholder_text).skill == parser.parse_text(stakeholder_text).skill

    def test_handoff_row_count(self, parser, make_skill):
        rows = "\n".join(
            [
                "| `api|rest` | backend | ctx |",
                "| `` |  |  |",
                "| `ui` | frontend |  |",
                "|  | orphan | no trigger |",
            ]
        )
        skill = parser.parse_text(make_skill("Router", handoffs=rows)).skill
        assert len(skill.handoffs) == 4
        assert skill.handoffs[3].trigger is None
        assert skill.handoffs[3].delegate_to == "orphan"


class TestDiagnostics:
    def test_missing_title_raises(self, parser):
        with pytest.raises(DocumentParseError) as exc_info:
            parser.parse_text("## Identity\nNo title here\n", "orphan.md")
        assert exc_info.value.context.path == "orphan.md"
        assert exc_info.value.context.source_id == "orphan.md#0"

    def test_empty_title_raises(self, parser):
        with pytest.raises(DocumentParseError):
            parser.parse_text("#   \n")

    def test_missing_header_fields_and_sections(self, parser):
        outcome = parser.parse_text("# Bare\n")
        messages = [d.message for d in outcome.diagnostics]
        assert outcome.skill.name == "Bare"
        assert "Missing header field: category" in messages
        assert "Missing header field: version" in messages
        assert "Missing section: identity" in messages
        assert all(d.kind == DiagnosticKind.PARSE_WARNING for d in outcome.diagnostics)

    def test_repeated_section_uses_first(self, parser, make_skill):
        text = make_skill("Twice") + "\n## Identity\n\nSecond identity.\n"
        outcome = parser.parse_text(text)
        assert outcome.skill.identity == "A test persona."
        assert any("Repeated section" in d.message for d in outcome.diagnostics)

    def test_severity_mismatch_reported(self, parser, skills_root):
        text = (skills_root / "development" / "web-stack.md").read_text(encoding="utf-8")
        outcome = parser.parse_text(text.split("<|RELATED_DOC_SEP")[0])
        assert outcome.skill.name == "Backend"
        assert outcome.skill.sharp_edges[0].severity is Severity.UNKNOWN
        assert [d.kind for d in outcome.diagnostics] == [DiagnosticKind.SEVERITY_MISMATCH]

    def test_placeholder_patterns(self, parser, skills_root):
        text = (skills_root / "marketing" / "copywriting.md").read_text(encoding="utf-8")
        assert parser.parse_text(text).skill.patterns == ()

    def test_custom_expected_sections(self, make_skill):
        parser = SkillParser(expected_sections=(SectionKind.DECISIONS,))
        outcome = parser.parse_text(make_skill("X"))
        assert [d.message for d in outcome.diagnostics] == ["Missing section: decisions"]


class TestRoundTrip:
    def test_to_dict_from_dict(self, stakeholder_text):
        skill = parse_skill(stakeholder_text)
        assert Skill.from_dict(skill.to_dict()) == skill
