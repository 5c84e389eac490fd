"""
Module: statement_kernel.models.account
Responsibility: Normalized shape of one trial balance row and the single
    category derivation rule for account codes.
Architecture position: Kernel > Models.  No imports outside the kernel.

Invariants enforced:
    - AccountRecord is immutable once built; the engine never mutates it.
    - All amounts are Decimal.  Floats are converted through ``str`` so
      binary representation error never reaches a total.
    - Category is a pure function of the leading digit of the code:
      1=asset, 2=liability, 3=equity, 4=revenue, 5=expense.

Failure modes:
    - InvalidAccountCodeError from ``categorize`` / ``numeric_code`` when the
      code is empty, contains non-digits, or starts with a digit outside 1-5.
    - ValueError from ``AccountRecord.of`` when an amount cannot be read as
      a number.

Audit relevance:
    Duplicate codes inside one upload are tolerated and kept as separate
    records.  Collapsing them would silently change statement totals.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from statement_kernel.exceptions import InvalidAccountCodeError


class AccountCategory(str, Enum):
    """Account categories derived from the leading digit of a code."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def is_balance_sheet(self) -> bool:
        return self in _BALANCE_SHEET

    @property
    def is_income_statement(self) -> bool:
        return not self.is_balance_sheet


_BALANCE_SHEET = frozenset(
    {AccountCategory.ASSET, AccountCategory.LIABILITY, AccountCategory.EQUITY}
)

_LEADING_DIGIT_CATEGORY: dict[str, AccountCategory] = {
    "1": AccountCategory.ASSET,
    "2": AccountCategory.LIABILITY,
    "3": AccountCategory.EQUITY,
    "4": AccountCategory.REVENUE,
    "5": AccountCategory.EXPENSE,
}


def _clean_code(code: str | None) -> str:
    if code is None:
        raise InvalidAccountCodeError("", "code is empty")
    cleaned = str(code).strip()
    if not cleaned:
        raise InvalidAccountCodeError(str(code), "code is empty")
    if not (cleaned.isascii() and cleaned.isdigit()):
        raise InvalidAccountCodeError(cleaned, "code must contain digits only")
    return cleaned


def categorize(code: str) -> AccountCategory:
    """
    Derive the account category from the leading digit of ``code``.

    Raises:
        InvalidAccountCodeError: if the code is empty, non-numeric, or its
            leading digit is not one of 1-5.
    """
    cleaned = _clean_code(code)
    category = _LEADING_DIGIT_CATEGORY.get(cleaned[0])
    if category is None:
        raise InvalidAccountCodeError(
            cleaned, f"unrecognized leading digit '{cleaned[0]}'"
        )
    return category


def parse_account_code(code: str) -> int:
    """Numeric value of an account code, used for range matching."""
    return int(_clean_code(code))


def to_decimal(value: Decimal | str | int | float | None) -> Decimal:
    """Convert a raw amount to Decimal.  None and blank strings become zero."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str) and not value.strip():
        return Decimal("0")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Cannot convert {value!r} to Decimal") from exc


@dataclass(frozen=True)
class AccountRecord:
    """
    One trial balance row after parsing.

    Contract:
        ``debit`` and ``credit`` are current-period magnitudes.
        ``opening_balance`` carries the comparative-period figure.
        ``closing_balance`` is None when the source does not separate
        opening/closing figures from debit/credit activity.

    Non-goals:
        - Does NOT check that debits equal credits.
        - Does NOT carry a currency.
    """

    code: str
    name: str = ""
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    opening_balance: Decimal = Decimal("0")
    closing_balance: Decimal | None = None

    @classmethod
    def of(
        cls,
        code: str | int,
        name: str = "",
        *,
        debit: Decimal | str | int | float | None = None,
        credit: Decimal | str | int | float | None = None,
        opening_balance: Decimal | str | int | float | None = None,
        closing_balance: Decimal | str | int | float | None = None,
    ) -> AccountRecord:
        """Factory that coerces raw amounts to Decimal."""
        return cls(
            code=str(code).strip(),
            name=name,
            debit=to_decimal(debit),
            credit=to_decimal(credit),
            opening_balance=to_decimal(opening_balance),
            closing_balance=(
                None if closing_balance is None else to_decimal(closing_balance)
            ),
        )

    @property
    def category(self) -> AccountCategory:
        return categorize(self.code)

    @property
    def numeric_code(self) -> int:
        return parse_account_code(self.code)

    @property
    def has_opening_balance(self) -> bool:
        return self.opening_balance != Decimal("0")
