"""
statement_engines.balance -- Category-keyed balance policy.

Responsibility:
    Compute the signed balance to report for one account record, separately
    for the current period and the comparative period, and detect whether a
    batch of records carries a comparative period at all.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import statement_kernel.

Invariants enforced:
    - Balance-sheet categories (asset, liability, equity) are stock
      measures:
        current     = opening_balance + closing_balance
        comparative = opening_balance
      When the source does not separate a closing figure
      (``closing_balance is None``), current is the absolute net movement
      ``|credit - debit|``.
    - Income-statement categories (revenue, expense) are flow measures:
        revenue current = credit - debit
        expense current = debit - credit
        comparative     = opening_balance (zero when absent)
    - A batch is comparative iff any record has a non-zero opening balance.
    - Decimal-only arithmetic; no rounding.

Failure modes:
    - InvalidAccountCodeError from the module-level helpers when the record
      code cannot be categorized.  ``BalancePolicy`` methods take an
      already-derived category and never raise.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from statement_kernel.models.account import AccountCategory, AccountRecord

ZERO = Decimal("0")


@dataclass(frozen=True)
class BalancePolicy:
    """
    Sign conventions per account category.

    Immutable; one shared default instance is enough for every run.
    """

    def current_balance(
        self, record: AccountRecord, category: AccountCategory,
    ) -> Decimal:
        if category == AccountCategory.REVENUE:
            return record.credit - record.debit
        if category == AccountCategory.EXPENSE:
            return record.debit - record.credit
        if record.closing_balance is None:
            return abs(record.credit - record.debit)
        return record.opening_balance + record.closing_balance

    def comparative_balance(
        self, record: AccountRecord, category: AccountCategory,
    ) -> Decimal:
        # Both conventions read the opening column for the prior period.
        return record.opening_balance

    def uses_opening_for_prior_pnl(
        self, record: AccountRecord, category: AccountCategory,
    ) -> bool:
        """True when a P&L comparative figure was taken from the opening column."""
        return category.is_income_statement and record.has_opening_balance


DEFAULT_POLICY = BalancePolicy()


def is_comparative(records: Iterable[AccountRecord]) -> bool:
    """True if any record carries a non-zero opening balance."""
    return any(record.has_opening_balance for record in records)


def current_balance(record: AccountRecord) -> Decimal:
    """Current-period balance of ``record`` under the default policy."""
    return DEFAULT_POLICY.current_balance(record, record.category)


def comparative_balance(record: AccountRecord) -> Decimal:
    """Comparative-period balance of ``record`` under the default policy."""
    return DEFAULT_POLICY.comparative_balance(record, record.category)
