"""
statement_engines.suggestions -- Suggest statement lines for accounts.

Responsibility:
    Propose a statement line for each account by checking it against a
    reference rule set (typically the seed defaults) and scoring the
    proposal with the account name.  Used to help an operator place
    unmapped accounts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Suggestions never change a rule set; they are advisory output only.
    - Confidence: 0.95 when the reference line matches the code and the
      account name contains one of the line's keywords, 0.80 when only the
      code matches, 0.50 when several reference lines match the code.
    - Output is sorted by confidence, highest first, stable on input order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from statement_engines.classifier import prepare_records, resolve_rules
from statement_engines.matcher import matches
from statement_kernel.models.account import AccountRecord
from statement_kernel.models.mapping import MappingRule, MappingRuleSet

KEYWORD_CONFIDENCE = Decimal("0.95")
CODE_CONFIDENCE = Decimal("0.80")
AMBIGUOUS_CONFIDENCE = Decimal("0.50")


@dataclass(frozen=True)
class MappingSuggestion:
    """A proposed statement line for one account."""

    record: AccountRecord
    line_id: str
    confidence: Decimal
    alternatives: tuple[str, ...] = ()


def _name_hits(name: str, rule: MappingRule) -> bool:
    lowered = name.casefold()
    return any(keyword.casefold() in lowered for keyword in rule.keywords if keyword)


def suggest_mappings(
    records: Sequence[AccountRecord],
    reference_rules: MappingRuleSet | Sequence[MappingRule],
) -> tuple[MappingSuggestion, ...]:
    """Suggest a line for every record a reference rule captures."""
    rules = resolve_rules(reference_rules)
    prepared, _invalid = prepare_records(records)

    suggestions: list[MappingSuggestion] = []
    for account in prepared:
        candidates = [rule for rule in rules if matches(account.code, rule)]
        if not candidates:
            continue

        if len(candidates) == 1:
            rule = candidates[0]
            confidence = (
                KEYWORD_CONFIDENCE if _name_hits(account.record.name, rule)
                else CODE_CONFIDENCE
            )
            suggestions.append(
                MappingSuggestion(
                    record=account.record,
                    line_id=rule.line_id,
                    confidence=confidence,
                )
            )
            continue

        # Prefer a candidate whose keywords hit the name; keep the rest visible.
        named = [rule for rule in candidates if _name_hits(account.record.name, rule)]
        best = named[0] if named else candidates[0]
        suggestions.append(
            MappingSuggestion(
                record=account.record,
                line_id=best.line_id,
                confidence=AMBIGUOUS_CONFIDENCE,
                alternatives=tuple(
                    rule.line_id for rule in candidates if rule is not best
                ),
            )
        )

    return tuple(sorted(suggestions, key=lambda s: s.confidence, reverse=True))
