"""
Tests for account records and code categorization.

Pure value objects. NO I/O.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from statement_kernel.exceptions import InvalidAccountCodeError
from statement_kernel.models.account import (
    AccountCategory,
    AccountRecord,
    categorize,
    parse_account_code,
    to_decimal,
)


class TestCategorize:
    """Leading digit decides the category."""

    @pytest.mark.parametrize(
        "code, expected",
        [
            ("1000", AccountCategory.ASSET),
            ("1999", AccountCategory.ASSET),
            ("2010", AccountCategory.LIABILITY),
            ("3100", AccountCategory.EQUITY),
            ("4000", AccountCategory.REVENUE),
            ("5360", AccountCategory.EXPENSE),
            ("1", AccountCategory.ASSET),
            ("50001", AccountCategory.EXPENSE),
        ],
    )
    def test_leading_digit(self, code, expected):
        assert categorize(code) == expected

    def test_surrounding_whitespace_ignored(self):
        assert categorize("  4010 ") == AccountCategory.REVENUE

    @pytest.mark.parametrize("code", ["6000", "7100", "9999", "0100"])
    def test_unknown_leading_digit_rejected(self, code):
        with pytest.raises(InvalidAccountCodeError) as exc_info:
            categorize(code)
        assert exc_info.value.reason == f"unrecognized leading digit '{code[0]}'"
        assert exc_info.value.account_code == code

    @pytest.mark.parametrize("code", ["", "   ", None])
    def test_empty_code_rejected(self, code):
        with pytest.raises(InvalidAccountCodeError, match="code is empty"):
            categorize(code)

    @pytest.mark.parametrize("code", ["A100", "10-00", "1000.5", "１０００"])
    def test_non_numeric_code_rejected(self, code):
        with pytest.raises(InvalidAccountCodeError, match="digits only"):
            categorize(code)

    def test_balance_sheet_partition(self):
        balance_sheet = {c for c in AccountCategory if c.is_balance_sheet}
        income = {c for c in AccountCategory if c.is_income_statement}
        assert balance_sheet == {
            AccountCategory.ASSET,
            AccountCategory.LIABILITY,
            AccountCategory.EQUITY,
        }
        assert income == {AccountCategory.REVENUE, AccountCategory.EXPENSE}


class TestParseAccountCode:

    def test_numeric_value(self):
        assert parse_account_code("2030") == 2030

    def test_leading_zeros_dropped(self):
        assert parse_account_code("01000") == 1000

    def test_invalid_code_raises(self):
        with pytest.raises(InvalidAccountCodeError):
            parse_account_code("CASH")


class TestToDecimal:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, Decimal("0")),
            ("", Decimal("0")),
            ("  ", Decimal("0")),
            ("175014.81", Decimal("175014.81")),
            (25000, Decimal("25000")),
            (0.1, Decimal("0.1")),
            (Decimal("-12.50"), Decimal("-12.50")),
        ],
    )
    def test_conversion(self, raw, expected):
        assert to_decimal(raw) == expected

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(0.1) != Decimal(0.1)

    def test_garbage_rejected(self):
        with pytest.raises(ValueError, match="Cannot convert"):
            to_decimal("twelve")


class TestAccountRecord:

    def test_of_coerces_amounts(self):
        record = AccountRecord.of(
            1140, "Trade receivables",
            debit="0", credit="175014.81", opening_balance=None,
        )
        assert record.code == "1140"
        assert record.credit == Decimal("175014.81")
        assert record.debit == Decimal("0")
        assert record.opening_balance == Decimal("0")
        assert record.closing_balance is None

    def test_closing_balance_kept_when_given(self):
        record = AccountRecord.of("1000", closing_balance="0")
        assert record.closing_balance == Decimal("0")

    def test_is_frozen(self):
        record = AccountRecord.of("1000")
        with pytest.raises(AttributeError):
            record.debit = Decimal("1")

    def test_derived_properties(self):
        record = AccountRecord.of("5360", "Interest expense", opening_balance="10")
        assert record.category == AccountCategory.EXPENSE
        assert record.numeric_code == 5360
        assert record.has_opening_balance is True

    def test_zero_opening_is_not_an_opening_balance(self):
        assert AccountRecord.of("1000", opening_balance="0.00").has_opening_balance is False

    def test_invalid_code_only_fails_on_category_access(self):
        record = AccountRecord.of("9000", "Suspense")
        with pytest.raises(InvalidAccountCodeError):
            _ = record.category
