"""
Tests for StatementMappingService.

Full statement runs against the packaged seed set and against rule sets
written to tmp_path.
"""

from __future__ import annotations

import textwrap
from decimal import Decimal

import pytest

from statement_engines.suggestions import CODE_CONFIDENCE, KEYWORD_CONFIDENCE
from statement_kernel.exceptions import (
    InvalidAccountCodeError,
    InvalidRuleDefinitionError,
    RuleSetNotFoundError,
)
from statement_kernel.models.mapping import StatementArea
from statement_modules.notes import NotesConfig, StatementMappingService, render_to_dict
from tests.conftest import make_record, make_rule


@pytest.fixture
def service() -> StatementMappingService:
    return StatementMappingService()


@pytest.fixture
def scenario_records():
    return [
        make_record("1000", "Bank", credit="25000"),
        make_record("1140", "Trade receivables", credit="175014.81"),
        make_record("2010", "Trade payables", debit="89500"),
    ]


class TestGenerate:

    def test_end_to_end_with_seed_rules(self, service, scenario_records):
        report = service.generate(scenario_records, run_id="run-1")

        classification = report.classification
        assert classification.section("cash").current_total == Decimal("25000")
        assert classification.section("receivables").current_total == Decimal("175014.81")
        assert classification.section("payables").current_total == Decimal("89500")
        assert report.coverage.unmapped_accounts == ()
        assert report.coverage.ambiguous_accounts == ()
        assert report.coverage.coverage_percentage == Decimal("100")
        assert report.has_issues is False

        assert report.metadata.organization == "default"
        assert report.metadata.run_id == "run-1"
        assert report.metadata.record_count == 3
        assert report.metadata.rule_set_checksum == service.load_rules().checksum

        current_assets = report.statement.group(StatementArea.CURRENT_ASSETS)
        assert current_assets.current_total == Decimal("200014.81")

    def test_run_id_generated(self, service, scenario_records):
        report = service.generate(scenario_records)
        assert report.metadata.run_id

    def test_explicit_rule_set(self, service, core_rules, scenario_records):
        report = service.generate(scenario_records, rule_set=core_rules)
        assert report.metadata.organization == "test-org"
        assert [s.line_id for s in report.classification.sections] == [
            "cash", "receivables", "payables",
        ]

    def test_issues_surface(self, service, core_rules):
        records = [make_record("1000", debit="1"), make_record("1100", debit="2")]
        report = service.generate(records, rule_set=core_rules)
        assert report.coverage.unmapped_count == 1
        assert report.has_issues is True

    def test_run_context_bound_to_logs(self, service, scenario_records, captured_logs):
        service.generate(scenario_records, run_id="run-ctx")

        logs = captured_logs()
        run_logs = [r for r in logs if r.get("run_id") == "run-ctx"]
        messages = {r["message"] for r in run_logs}
        assert {"statement_run_started", "classification_completed",
                "coverage_validated", "statement_run_completed"} <= messages
        assert all(r["organization"] == "default" for r in run_logs)
        assert all(r["rule_set_checksum"] for r in run_logs)

    def test_context_released_after_run(self, service, scenario_records):
        from statement_kernel.logging_config import LogContext

        service.generate(scenario_records, run_id="run-x")
        assert "run_id" not in LogContext.get_all()

    def test_abort_policy(self, scenario_records):
        service = StatementMappingService(NotesConfig(invalid_code_policy="abort"))
        with pytest.raises(InvalidAccountCodeError):
            service.generate([*scenario_records, make_record("9000")])

    def test_skip_policy_reports_invalid(self, service, scenario_records):
        report = service.generate([*scenario_records, make_record("9000", "Suspense")])
        assert [i.record.name for i in report.classification.invalid_accounts] == ["Suspense"]
        assert [i.record.name for i in report.coverage.invalid_accounts] == ["Suspense"]
        assert report.has_issues is True

    def test_empty_lines_dropped_from_statement_only(self, scenario_records):
        service = StatementMappingService(NotesConfig(include_empty_lines=False))
        report = service.generate(scenario_records)

        statement_lines = [
            s.line_id for g in report.statement.groups for s in g.sections
        ]
        assert statement_lines == ["cash", "receivables", "payables"]
        assert report.classification.section("inventory") is not None

    def test_zero_accounts_dropped_from_statement_only(self, scenario_records):
        records = [*scenario_records, make_record("1010", "Petty cash")]
        service = StatementMappingService(NotesConfig(include_zero_accounts=False))
        report = service.generate(records)

        cash = report.statement.group(StatementArea.CURRENT_ASSETS).sections[0]
        assert [r.code for r in cash.accounts] == ["1000"]
        assert report.classification.section("cash").account_count == 2

    def test_report_renders_to_plain_data(self, service, scenario_records):
        data = render_to_dict(service.generate(scenario_records, run_id="r"))
        assert data["metadata"]["run_id"] == "r"
        assert data["coverage"]["coverage_percentage"] == "100"
        assert data["statement"]["groups"][0]["area"] == "current_assets"


class TestOrganizationRules:

    def test_loads_organization_file(self, tmp_path):
        (tmp_path / "acme.yaml").write_text(textwrap.dedent("""\
            organization: acme
            rules:
              - line_id: cash
                area: current_assets
                ranges:
                  - {from: 1000, to: 1199}
        """), encoding="utf-8")
        service = StatementMappingService(
            NotesConfig(organization="acme", config_dir=tmp_path)
        )

        report = service.generate([make_record("1140", credit="10")])
        assert report.classification.section("cash").current_total == Decimal("10")
        assert report.metadata.organization == "acme"

    def test_missing_rules(self, tmp_path):
        service = StatementMappingService(NotesConfig(organization="acme", config_dir=tmp_path))
        with pytest.raises(RuleSetNotFoundError):
            service.generate([make_record("1000")])


class TestRuleTools:

    def test_preview_rule(self, service, captured_logs):
        records = [make_record("2010"), make_record("2030"), make_record("2999")]
        rule = make_rule("payables", ranges=[(2010, 2999)], excludes=[2030])

        captured = service.preview_rule(records, rule)

        assert [r.code for r in captured] == ["2010", "2999"]
        preview = next(r for r in captured_logs() if r["message"] == "rule_preview")
        assert preview["captured_count"] == 2

    def test_preview_rejects_malformed_rule(self, service):
        with pytest.raises(InvalidRuleDefinitionError):
            service.preview_rule([make_record("1000")], make_rule("empty"))

    def test_check_rules(self, service, core_rules):
        assert service.check_rules(core_rules).is_valid

    def test_check_rules_reports_errors(self, service):
        from statement_config.loader import build_rule_set

        rule_set = build_rule_set("acme", [make_rule("bad", ranges=[(9, 1)])])
        result = service.check_rules(rule_set)
        assert not result.is_valid

    def test_suggest_for_unmapped(self, service, core_rules):
        records = [
            make_record("1000", "Bank"),
            make_record("5300", "Postage"),
            make_record("1420", "Prepaid insurance"),
        ]
        suggestions = service.suggest_for_unmapped(records, rule_set=core_rules)

        assert [(s.record.code, s.line_id, s.confidence) for s in suggestions] == [
            ("1420", "prepaid_expenses", KEYWORD_CONFIDENCE),
            ("5300", "administrative_expenses", CODE_CONFIDENCE),
        ]
