"""
Pytest fixtures for the statement mapping test suite.

Provides:
- Structured logging setup and log capture
- Account record and mapping rule factories
- The packaged seed rule set

No database, no files beyond the packaged YAML seed sets.
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from statement_config import get_default_rule_set
from statement_config.loader import build_rule_set
from statement_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from statement_kernel.models.account import AccountRecord
from statement_kernel.models.mapping import MappingRule, MappingRuleSet, StatementArea


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture statement_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            classify(records, rules)
            logs = captured_logs()
            assert any(r["message"] == "classification_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("statement_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Factories
# =============================================================================


def make_record(
    code: str,
    name: str = "",
    debit="0",
    credit="0",
    opening="0",
    closing=None,
) -> AccountRecord:
    """Factory for AccountRecord used in pure tests."""
    return AccountRecord.of(
        code,
        name or f"Account {code}",
        debit=debit,
        credit=credit,
        opening_balance=opening,
        closing_balance=closing,
    )


def make_rule(
    line_id: str,
    ranges=(),
    includes=(),
    excludes=(),
    area: StatementArea | None = None,
    **kwargs,
) -> MappingRule:
    """Factory for MappingRule used in pure tests."""
    return MappingRule.of(
        line_id,
        ranges=ranges,
        includes=includes,
        excludes=excludes,
        area=area,
        **kwargs,
    )


@pytest.fixture
def seed_rules() -> MappingRuleSet:
    """The packaged default rule set."""
    return get_default_rule_set()


@pytest.fixture
def core_rules() -> MappingRuleSet:
    """Cash, receivables, and payables with the loan/tax carve-outs."""
    return build_rule_set(
        "test-org",
        [
            make_rule("cash", ranges=[(1000, 1099)], area=StatementArea.CURRENT_ASSETS),
            make_rule("receivables", ranges=[(1140, 1215)], area=StatementArea.CURRENT_ASSETS),
            make_rule(
                "payables",
                ranges=[(2010, 2999)],
                excludes=[2030, 2045, 2050, 2051, 2052, 2100, 2101, 2102, 2103,
                          2120, 2121, 2122, 2123],
                area=StatementArea.CURRENT_LIABILITIES,
            ),
        ],
    )


@pytest.fixture
def zero() -> Decimal:
    return Decimal("0")
