"""Tests for the Collaboration section parser."""

import pytest

from skillspine.corpus.handoffs import (
    extract_handoffs,
    extract_pairs_with,
    extract_receives_from,
    is_delimiter_row,
    parse_table,
    split_row,
)
from skillspine.corpus.models import HandoffRule


COLLABORATION = """\
### When to Hand Off

| Trigger | Delegate To | Context |
|---------|-------------|--------|
| `api|endpoint|rest|graphql` | backend | Needs an API |
| `` |  |  |
| `ui` | **Frontend** |  |

### Receives Work From

- **fundraising**: Round status
- **product**

### Works Well With

- copywriting
- *seo*
"""


class TestSplitRow:
    def test_pipes_inside_code_span_stay_in_cell(self):
        assert split_row("| `a|b|c` | x | y |") == ["`a|b|c`", "x", "y"]

    def test_escaped_pipe(self):
        assert split_row(r"| a \| b | c |") == ["a | b", "c"]

    def test_without_outer_pipes(self):
        assert split_row("a | b") == ["a", "b"]

    def test_empty_cells(self):
        assert split_row("| `` |  |  |") == ["``", "", ""]

    def test_unmatched_backtick_does_not_swallow_row(self):
        assert split_row("| `open | x |") == ["`open", "x"]


class TestTable:
    def test_delimiter_detection(self):
        assert is_delimiter_row(["---", ":--:", "--:"])
        assert not is_delimiter_row(["", "", ""])
        assert not is_delimiter_row(["a", "---"])

    def test_parse_table_skips_header_and_delimiter(self):
        lines = ["intro", "| A | B |", "|---|---|", "| 1 | 2 |", "", "| not | part |"]
        header, rows = parse_table(lines)
        assert header == ["A", "B"]
        assert rows == [["1", "2"]]

    def test_dash_row_after_delimiter_is_body(self):
        lines = ["| A | B |", "|---|---|", "| 1 | 2 |", "| - | - |"]
        _, rows = parse_table(lines)
        assert rows == [["1", "2"], ["-", "-"]]


class TestExtractHandoffs:
    def test_rows_become_rules(self):
        rules = extract_handoffs(COLLABORATION, source_skill="copywriting")
        assert rules[0] == HandoffRule(
            source_skill="copywriting",
            trigger="api|endpoint|rest|graphql",
            delegate_to="backend",
            context="Needs an API",
            row=0,
        )

    def test_every_row_kept(self):
        rules = extract_handoffs(COLLABORATION, source_skill="s")
        assert len(rules) == 3
        assert [r.row for r in rules] == [0, 1, 2]

    def test_all_empty_row(self):
        empty = extract_handoffs(COLLABORATION, source_skill="s")[1]
        assert empty.trigger is None
        assert empty.delegate_to is None
        assert empty.context is None

    def test_emphasis_stripped_from_delegate(self):
        rule = extract_handoffs(COLLABORATION, source_skill="s")[2]
        assert rule.delegate_to == "Frontend"
        assert rule.context is None

    def test_dash_placeholder_row_kept(self):
        body = (
            "### When to Hand Off\n\n"
            "| Trigger | Delegate To | Context |\n"
            "|---|---|---|\n"
            "| `api` | backend | |\n"
            "| - | - | - |\n"
        )
        rules = extract_handoffs(body, source_skill="s")
        assert len(rules) == 2
        assert rules[1].trigger is None
        assert rules[1].delegate_to is None
        assert rules[1].context is None

    def test_no_table(self):
        assert extract_handoffs(None, source_skill="s") == []
        assert extract_handoffs("### Works Well With\n- x", source_skill="s") == []


class TestHandoffRuleMatching:
    def test_alternation_is_regex(self):
        rule = HandoffRule(source_skill="s", trigger="api|endpoint|rest|graphql", delegate_to="backend")
        assert rule.matches("We need a GraphQL schema")
        assert not rule.matches("Write a blog post")

    def test_invalid_regex_falls_back_to_substring(self):
        rule = HandoffRule(source_skill="s", trigger="c++ (templates", delegate_to="cpp")
        assert rule.pattern() is None
        assert rule.matches("help with C++ (templates please")

    @pytest.mark.parametrize("trigger", [None, ""])
    def test_empty_trigger_never_matches(self, trigger):
        rule = HandoffRule(source_skill="s", trigger=trigger, delegate_to=None)
        assert not rule.matches("anything")


class TestUpstreamAndPairs:
    def test_receives_from(self):
        received = extract_receives_from(COLLABORATION)
        assert [(r.skill, r.context) for r in received] == [("fundraising", "Round status"), ("product", None)]

    def test_pairs_with(self):
        assert extract_pairs_with(COLLABORATION) == ["copywriting", "seo"]
