"""
statement_engines.matcher -- Rule matcher deciding account-to-line membership.

Responsibility:
    Decide whether an account code belongs to a statement line, given that
    line's mapping rule.  Also offers previews ("which accounts would this
    rule capture") and a readable description of a rule.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import statement_kernel.

Invariants enforced:
    - Precedence, first decisive step wins:
        1. code in excludes  -> no match
        2. code in includes  -> match
        3. code inside any inclusive range -> match
        4. otherwise -> no match
    - A malformed rule (a range with from > to, a negative bound, or no
      ranges and no includes) matches nothing.  The matcher never raises
      for rule content.
    - Overlaps between different rules are NOT resolved here.

Failure modes:
    - Records with uncategorizable codes never match in previews.

Usage:
    from statement_engines.matcher import matches

    if matches(1140, receivables_rule):
        ...
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from statement_kernel.exceptions import InvalidAccountCodeError
from statement_kernel.models.account import AccountRecord, categorize, parse_account_code
from statement_kernel.models.mapping import MappingRule


def matches(code: int, rule: MappingRule) -> bool:
    """Return True if ``code`` belongs to the statement line of ``rule``."""
    if not rule.is_well_formed:
        return False
    if code in rule.excludes:
        return False
    if code in rule.includes:
        return True
    return any(code in rng for rng in rule.ranges)


def matched_line_ids(code: int, rules: Iterable[MappingRule]) -> tuple[str, ...]:
    """Line ids of every rule matching ``code``, in rule order."""
    return tuple(rule.line_id for rule in rules if matches(code, rule))


def record_code(record: AccountRecord) -> int | None:
    """Numeric code of a record, or None if the code cannot be categorized."""
    try:
        categorize(record.code)
        return parse_account_code(record.code)
    except InvalidAccountCodeError:
        return None


def matching_records(
    records: Sequence[AccountRecord],
    rule: MappingRule,
) -> tuple[AccountRecord, ...]:
    """Records the rule would capture, in input order."""
    captured: list[AccountRecord] = []
    for record in records:
        code = record_code(record)
        if code is not None and matches(code, rule):
            captured.append(record)
    return tuple(captured)


def describe_rule(rule: MappingRule) -> str:
    """Readable summary, e.g. ``Ranges: 2010-2999 | Excludes: 2030, 2045``."""
    parts: list[str] = []
    if rule.ranges:
        parts.append("Ranges: " + ", ".join(str(rng) for rng in rule.ranges))
    if rule.includes:
        parts.append("Includes: " + ", ".join(str(c) for c in sorted(rule.includes)))
    if rule.excludes:
        parts.append("Excludes: " + ", ".join(str(c) for c in sorted(rule.excludes)))
    return " | ".join(parts) or "No rules defined"
