"""
Pure statement assembly functions.

These functions turn classified statement sections into a statement grouped
by area (current assets, non-current assets, ... expenses) and render any
result to plain dicts for the external renderer. ZERO I/O. ZERO side effects.

All monetary values are Decimal. All inputs/outputs are frozen dataclasses.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from decimal import Decimal
from enum import Enum
from pathlib import Path

from statement_engines.balance import comparative_balance, current_balance
from statement_kernel.models.mapping import StatementArea
from statement_kernel.models.results import ClassificationResult, StatementSection
from statement_modules.notes.models import AreaGroup, AssembledStatement

ZERO = Decimal("0")

# Presentation order; lines without an area are emitted last.
AREA_ORDER: tuple[StatementArea | None, ...] = (*StatementArea, None)


def _sum_current(sections: Sequence[StatementSection]) -> Decimal:
    return sum((s.current_total for s in sections), ZERO)


def _sum_comparative(sections: Sequence[StatementSection]) -> Decimal:
    return sum((s.comparative_total or ZERO for s in sections), ZERO)


def group_by_area(
    sections: Sequence[StatementSection],
    is_comparative: bool,
) -> tuple[AreaGroup, ...]:
    """
    Group sections by statement area, keeping line order inside each group.

    Areas with no configured lines are omitted.
    """
    groups: list[AreaGroup] = []
    for area in AREA_ORDER:
        members = tuple(s for s in sections if s.area == area)
        if not members:
            continue
        groups.append(
            AreaGroup(
                area=area,
                sections=members,
                current_total=_sum_current(members),
                comparative_total=_sum_comparative(members) if is_comparative else None,
            )
        )
    return tuple(groups)


def compute_net_income(
    sections: Sequence[StatementSection],
) -> tuple[Decimal, Decimal]:
    """
    Net income for the current and comparative period.

    Revenue lines minus expense lines.  Both are already in their natural
    sign from the balance policy, so the subtraction is direct.
    """
    revenue = [s for s in sections if s.area == StatementArea.REVENUE]
    expenses = [s for s in sections if s.area == StatementArea.EXPENSES]
    current = _sum_current(revenue) - _sum_current(expenses)
    comparative = _sum_comparative(revenue) - _sum_comparative(expenses)
    return current, comparative


def drop_zero_accounts(
    section: StatementSection,
    is_comparative: bool,
) -> StatementSection:
    """
    Remove accounts that carry nothing in any reported period.

    An account stays when its current balance is non-zero or, in a
    comparative run, its comparative balance is.  Line totals are left as
    they are.
    """
    kept = tuple(
        record for record in section.accounts
        if current_balance(record) != ZERO
        or (is_comparative and comparative_balance(record) != ZERO)
    )
    if len(kept) == len(section.accounts):
        return section
    return dataclasses.replace(section, accounts=kept)


def build_statement(
    result: ClassificationResult,
    include_empty_lines: bool = True,
    include_zero_accounts: bool = True,
) -> AssembledStatement:
    """
    Assemble a classification result into an area-grouped statement.

    ``include_zero_accounts=False`` strips zero-balance accounts from each
    line before ``include_empty_lines`` is applied, so a line left with no
    accounts is dropped too when empty lines are excluded.
    """
    sections = result.sections
    if not include_zero_accounts:
        sections = tuple(
            drop_zero_accounts(s, result.is_comparative) for s in sections
        )
    if not include_empty_lines:
        sections = tuple(s for s in sections if not s.is_empty)

    net_income, comparative_net_income = compute_net_income(sections)
    return AssembledStatement(
        groups=group_by_area(sections, result.is_comparative),
        is_comparative=result.is_comparative,
        net_income=net_income,
        comparative_net_income=(
            comparative_net_income if result.is_comparative else None
        ),
    )


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any result dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - Enum -> .value
    - Path -> str
    - Nested frozen dataclasses -> nested dicts
    - Tuples and frozensets -> lists (frozensets sorted)
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (frozenset, set)):
        return [render_to_dict(item) for item in sorted(obj)]
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
