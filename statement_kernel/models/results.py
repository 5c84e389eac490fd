"""
Statement Mapping Result Models (``statement_kernel.models.results``).

Responsibility
--------------
Frozen dataclass value objects produced by the classification engines:
statement sections, classification results, and coverage reports.

Architecture position
---------------------
**Kernel layer** -- pure data definitions with ZERO I/O.  Built fresh on
every run by ``statement_engines`` and never persisted by the engine.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``comparative_total`` is ``None`` for single-period runs.  A missing
  comparative column is not the same thing as a zero one.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from statement_kernel.models.account import AccountRecord
from statement_kernel.models.mapping import StatementArea


@dataclass(frozen=True)
class StatementSection:
    """One statement line with the accounts that rolled up into it."""

    line_id: str
    accounts: tuple[AccountRecord, ...]
    current_total: Decimal
    comparative_total: Decimal | None = None
    title: str = ""
    note_number: int | None = None
    area: StatementArea | None = None

    @property
    def account_count(self) -> int:
        return len(self.accounts)

    @property
    def is_empty(self) -> bool:
        return not self.accounts


@dataclass(frozen=True)
class InvalidAccount:
    """A record skipped because its code could not be categorized."""

    record: AccountRecord
    reason: str


@dataclass(frozen=True)
class ClassificationResult:
    """Output of one classification run over a rule snapshot."""

    sections: tuple[StatementSection, ...]
    is_comparative: bool
    invalid_accounts: tuple[InvalidAccount, ...] = ()
    skipped_rules: tuple[str, ...] = ()
    advisories: tuple[str, ...] = ()

    def section(self, line_id: str) -> StatementSection | None:
        for section in self.sections:
            if section.line_id == line_id:
                return section
        return None

    @property
    def has_warnings(self) -> bool:
        return bool(self.invalid_accounts or self.skipped_rules or self.advisories)


@dataclass(frozen=True)
class UnmappedAccount:
    """An account no active rule captured."""

    record: AccountRecord
    balance: Decimal


@dataclass(frozen=True)
class AmbiguousMapping:
    """An account captured by two or more statement lines at once."""

    record: AccountRecord
    matched_line_ids: tuple[str, ...]


@dataclass(frozen=True)
class CoverageReport:
    """
    Coverage of an account set by a rule set.

    ``coverage_percentage`` counts accounts, not money.
    """

    total_accounts: int
    mapped_count: int
    unmapped_accounts: tuple[UnmappedAccount, ...]
    ambiguous_accounts: tuple[AmbiguousMapping, ...]
    coverage_percentage: Decimal
    invalid_accounts: tuple[InvalidAccount, ...] = ()

    @property
    def unmapped_count(self) -> int:
        return len(self.unmapped_accounts)

    @property
    def is_complete(self) -> bool:
        return not (
            self.unmapped_accounts or self.ambiguous_accounts or self.invalid_accounts
        )
