"""
Tests for the balance policy.

Sign conventions per account category, and single vs comparative
detection over a batch.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from statement_engines.balance import (
    DEFAULT_POLICY,
    comparative_balance,
    current_balance,
    is_comparative,
)
from statement_kernel.models.account import AccountCategory
from tests.conftest import make_record


class TestIncomeStatementBalances:

    def test_revenue_is_credit_minus_debit(self):
        assert current_balance(make_record("4000", credit="500")) == Decimal("500")

    def test_expense_is_debit_minus_credit(self):
        assert current_balance(make_record("5000", debit="300")) == Decimal("300")

    def test_revenue_with_returns_nets(self):
        record = make_record("4010", debit="120", credit="1000")
        assert current_balance(record) == Decimal("880")

    def test_expense_credit_balance_goes_negative(self):
        record = make_record("5400", debit="100", credit="250")
        assert current_balance(record) == Decimal("-150")

    def test_closing_column_ignored_for_income_accounts(self):
        record = make_record("4000", credit="500", closing="9999")
        assert current_balance(record) == Decimal("500")


class TestBalanceSheetBalances:

    def test_opening_plus_closing(self):
        record = make_record("1000", debit="9", credit="9", opening="100", closing="50")
        assert current_balance(record) == Decimal("150")

    def test_explicit_zero_closing_used(self):
        record = make_record("2010", credit="89500", opening="10", closing="0")
        assert current_balance(record) == Decimal("10")

    def test_missing_closing_falls_back_to_net_activity_magnitude(self):
        assert current_balance(make_record("1000", credit="25000")) == Decimal("25000")
        assert current_balance(make_record("2010", debit="89500")) == Decimal("89500")

    def test_fallback_nets_both_sides(self):
        record = make_record("3100", debit="400", credit="1000")
        assert current_balance(record) == Decimal("600")

    def test_precision_preserved(self):
        record = make_record("1140", credit="175014.81")
        assert current_balance(record) == Decimal("175014.81")


class TestComparativeBalance:

    @pytest.mark.parametrize("code", ["1000", "2010", "3000", "4000", "5000"])
    def test_opening_column_for_every_category(self, code):
        record = make_record(code, debit="1", credit="2", opening="1234.56")
        assert comparative_balance(record) == Decimal("1234.56")

    def test_prior_pnl_flagged_only_for_income_accounts(self):
        revenue = make_record("4000", opening="10")
        asset = make_record("1000", opening="10")
        assert DEFAULT_POLICY.uses_opening_for_prior_pnl(revenue, AccountCategory.REVENUE)
        assert not DEFAULT_POLICY.uses_opening_for_prior_pnl(asset, AccountCategory.ASSET)

    def test_prior_pnl_not_flagged_without_opening(self):
        expense = make_record("5000", debit="10")
        assert not DEFAULT_POLICY.uses_opening_for_prior_pnl(expense, AccountCategory.EXPENSE)


class TestComparativeDetection:

    def test_all_zero_openings_is_single_period(self):
        records = [make_record("1000", debit="5"), make_record("4000", credit="5")]
        assert is_comparative(records) is False

    def test_one_non_zero_opening_is_comparative(self):
        records = [make_record("1000"), make_record("2010", opening="-0.01")]
        assert is_comparative(records) is True

    def test_empty_batch_is_single_period(self):
        assert is_comparative([]) is False

    def test_accepts_generators(self):
        assert is_comparative(make_record(c, opening="1") for c in ("1000",)) is True
