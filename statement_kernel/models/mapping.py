"""
Module: statement_kernel.models.mapping
Responsibility: Data-driven mapping rules that decide which statement line an
    account code rolls up into, and the per-organization rule-set snapshot.
Architecture position: Kernel > Models.  Pure value objects, zero I/O.

Invariants enforced:
    - Rules are declarative data (ranges, includes, excludes), never
      executable predicates, so a rule set can be serialized and replayed.
    - A rule set is an immutable snapshot; one classification run reads one
      snapshot.
    - Rule order inside a set is the display order of statement rows.

Failure modes:
    - Construction never raises for malformed ranges.  ``definition_problems``
      reports them; the config layer rejects them at save time and the
      engine treats them as matching nothing.

Audit relevance:
    ``MappingRuleSet.checksum`` ties every statement run back to the exact
    rule configuration that produced it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property


class StatementArea(str, Enum):
    """Statement grouping a line rolls up into, in presentation order."""

    CURRENT_ASSETS = "current_assets"
    NON_CURRENT_ASSETS = "non_current_assets"
    CURRENT_LIABILITIES = "current_liabilities"
    NON_CURRENT_LIABILITIES = "non_current_liabilities"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSES = "expenses"

    @property
    def is_balance_sheet(self) -> bool:
        return self not in (StatementArea.REVENUE, StatementArea.EXPENSES)


@dataclass(frozen=True)
class AccountRange:
    """Inclusive range over the numeric value of account codes."""

    start: int
    end: int

    def __contains__(self, code: int) -> bool:
        return self.start <= code <= self.end

    @property
    def is_well_formed(self) -> bool:
        return self.start <= self.end

    def overlaps(self, other: AccountRange) -> bool:
        return self.start <= other.end and self.end >= other.start

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class MappingRule:
    """
    Mapping configuration for one statement line.

    Contract:
        Precedence is exclude > include > range.  A rule with no ranges and
        no includes is vacuous and matches nothing.

    Non-goals:
        - Does NOT resolve overlaps with other rules.  Two lines capturing the
          same account is a configuration defect reported by coverage.
    """

    line_id: str
    ranges: tuple[AccountRange, ...] = ()
    includes: frozenset[int] = field(default_factory=frozenset)
    excludes: frozenset[int] = field(default_factory=frozenset)
    title: str = ""
    note_number: int | None = None
    area: StatementArea | None = None
    is_active: bool = True
    keywords: tuple[str, ...] = ()

    @classmethod
    def of(
        cls,
        line_id: str,
        ranges: Iterable[tuple[int, int]] = (),
        includes: Iterable[int] = (),
        excludes: Iterable[int] = (),
        **kwargs,
    ) -> MappingRule:
        """Build a rule from plain tuples and iterables."""
        return cls(
            line_id=line_id,
            ranges=tuple(AccountRange(start, end) for start, end in ranges),
            includes=frozenset(includes),
            excludes=frozenset(excludes),
            **kwargs,
        )

    @property
    def is_vacuous(self) -> bool:
        return not self.ranges and not self.includes

    def definition_problems(self) -> list[str]:
        """Structural problems that make this rule unusable."""
        problems: list[str] = []
        for index, rng in enumerate(self.ranges, start=1):
            if not rng.is_well_formed:
                problems.append(
                    f"range {index}: 'from' ({rng.start}) cannot be greater "
                    f"than 'to' ({rng.end})"
                )
            if rng.start < 0 or rng.end < 0:
                problems.append(
                    f"range {index}: account codes cannot be negative"
                )
        if self.is_vacuous:
            problems.append("rule has no ranges and no includes")
        return problems

    @cached_property
    def is_well_formed(self) -> bool:
        return not self.definition_problems()


@dataclass(frozen=True)
class MappingRuleSet:
    """
    Immutable rule snapshot for one organization.

    ``rules`` is in display order.  Inactive rules stay in the snapshot so
    the configuration can be round-tripped, but are ignored by the engine.
    """

    organization: str
    rules: tuple[MappingRule, ...]
    version: int = 1
    checksum: str = ""
    description: str = ""

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def active_rules(self) -> tuple[MappingRule, ...]:
        return tuple(rule for rule in self.rules if rule.is_active)

    @property
    def line_ids(self) -> tuple[str, ...]:
        return tuple(rule.line_id for rule in self.rules)

    def get(self, line_id: str) -> MappingRule | None:
        for rule in self.rules:
            if rule.line_id == line_id:
                return rule
        return None
