"""
Tests for the rule matcher.

Precedence is exclude > include > range.  Pure functions, NO I/O.
"""

from __future__ import annotations

import pytest

from statement_engines.matcher import (
    describe_rule,
    matched_line_ids,
    matches,
    matching_records,
    record_code,
)
from tests.conftest import make_record, make_rule


PAYABLES = make_rule(
    "payables",
    ranges=[(2010, 2999)],
    excludes=[2030, 2045, 2050, 2051, 2052, 2100, 2101, 2102, 2103,
              2120, 2121, 2122, 2123],
)


class TestRangeMatching:

    @pytest.mark.parametrize("code", [1000, 1050, 1099])
    def test_inside_range(self, code):
        assert matches(code, make_rule("cash", ranges=[(1000, 1099)]))

    @pytest.mark.parametrize("code", [999, 1100])
    def test_outside_range(self, code):
        assert not matches(code, make_rule("cash", ranges=[(1000, 1099)]))

    def test_any_of_several_ranges(self):
        rule = make_rule("admin", ranges=[(5300, 5359), (5370, 5399)])
        assert matches(5300, rule)
        assert matches(5399, rule)
        assert not matches(5365, rule)


class TestPrecedence:

    def test_exclude_carves_out_of_range(self):
        assert matches(2010, PAYABLES)
        assert matches(2999, PAYABLES)
        assert not matches(2030, PAYABLES)
        assert not matches(2121, PAYABLES)

    def test_include_adds_outside_range(self):
        rule = make_rule("inventory", ranges=[(1500, 1505)], includes=[1510])
        assert matches(1510, rule)
        assert not matches(1509, rule)

    def test_exclude_beats_include(self):
        rule = make_rule("conflict", ranges=[(2000, 2999)], includes=[3500], excludes=[3500, 2500])
        assert not matches(3500, rule)
        assert not matches(2500, rule)
        assert matches(2501, rule)

    def test_includes_only(self):
        rule = make_rule("short_term_loans", includes=[2030])
        assert matches(2030, rule)
        assert not matches(2031, rule)


class TestMalformedRules:
    """A malformed rule matches nothing at all, not even its valid parts."""

    def test_inverted_range_matches_nothing(self):
        rule = make_rule("bad", ranges=[(2999, 2010)])
        assert not matches(2500, rule)
        assert not matches(2010, rule)

    def test_one_bad_range_disables_whole_rule(self):
        rule = make_rule("bad", ranges=[(1000, 1099), (2999, 2010)], includes=[1510])
        assert not matches(1050, rule)
        assert not matches(1510, rule)

    def test_vacuous_rule_matches_nothing(self):
        rule = make_rule("empty", excludes=[1000])
        assert not matches(1000, rule)
        assert not matches(1001, rule)


class TestMatchedLineIds:

    def test_all_matches_in_rule_order(self):
        rules = [
            make_rule("wide", ranges=[(1000, 1999)]),
            make_rule("cash", ranges=[(1000, 1099)]),
            make_rule("receivables", ranges=[(1140, 1215)]),
        ]
        assert matched_line_ids(1050, rules) == ("wide", "cash")
        assert matched_line_ids(1150, rules) == ("wide", "receivables")
        assert matched_line_ids(2000, rules) == ()


class TestMatchingRecords:

    def test_captures_in_input_order(self):
        records = [
            make_record("2999"),
            make_record("2030"),
            make_record("1000"),
            make_record("2010"),
        ]
        captured = matching_records(records, PAYABLES)
        assert [r.code for r in captured] == ["2999", "2010"]

    def test_invalid_codes_never_captured(self):
        rule = make_rule("all", ranges=[(0, 99999)])
        records = [make_record("9000"), make_record("ABC"), make_record("1000")]
        assert [r.code for r in matching_records(records, rule)] == ["1000"]

    def test_record_code(self):
        assert record_code(make_record("1140")) == 1140
        assert record_code(make_record("01140")) is None
        assert record_code(make_record("7000")) is None
        assert record_code(make_record("")) is None


class TestDescribeRule:

    def test_full_description(self):
        rule = make_rule("mixed", ranges=[(1000, 1099)], includes=[1510], excludes=[1050, 1020])
        assert describe_rule(rule) == "Ranges: 1000-1099 | Includes: 1510 | Excludes: 1020, 1050"

    def test_several_ranges(self):
        rule = make_rule("admin", ranges=[(5300, 5359), (5370, 5399)])
        assert describe_rule(rule) == "Ranges: 5300-5359, 5370-5399"

    def test_empty_rule(self):
        assert describe_rule(make_rule("empty")) == "No rules defined"
