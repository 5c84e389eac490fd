"""
statement_engines.classifier -- Classify trial balance records into statement lines.

Responsibility:
    Run every account record through every active statement line's rule,
    group the matches, and sum current and comparative balances per line.
    Emits statement sections in the configured display order.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import statement_kernel and sibling engine modules.

Invariants enforced:
    - Sections preserve rule display order; a line with no matched accounts
      still appears with zero totals.
    - Single-period batches (no non-zero opening balance anywhere) skip the
      comparative computation entirely: ``comparative_total is None``.
    - Decimal summation, totals unrounded.
    - Records are never mutated, deduplicated, or reordered within a line.
    - An account matched by several lines is counted in each of them.  The
      coverage validator reports it; the classifier does not pick a winner.

Failure modes:
    - Records with invalid codes are skipped and listed in
      ``invalid_accounts`` (default ``InvalidCodePolicy.SKIP``).  With
      ``InvalidCodePolicy.ABORT`` the first one raises
      ``InvalidAccountCodeError``.
    - Malformed rules match nothing and are listed in ``skipped_rules``.

Audit relevance:
    Every run emits a STATEMENT_ENGINE_TRACE record whose input fingerprint
    includes the rule-set checksum.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from statement_engines.balance import DEFAULT_POLICY, BalancePolicy, is_comparative
from statement_engines.matcher import matches
from statement_engines.tracer import traced_engine
from statement_kernel.exceptions import InvalidAccountCodeError
from statement_kernel.logging_config import get_logger
from statement_kernel.models.account import (
    AccountCategory,
    AccountRecord,
    categorize,
    parse_account_code,
)
from statement_kernel.models.mapping import MappingRule, MappingRuleSet
from statement_kernel.models.results import (
    ClassificationResult,
    InvalidAccount,
    StatementSection,
)

logger = get_logger("engines.classifier")

PRIOR_PNL_FROM_OPENING = (
    "Comparative income-statement figures were read from the opening balance "
    "column; confirm the export carries prior-year P&L there and not "
    "carried-forward balances."
)


class InvalidCodePolicy(str, Enum):
    """What to do with a record whose code cannot be categorized."""

    SKIP = "skip"
    ABORT = "abort"


@dataclass(frozen=True)
class PreparedAccount:
    """A record with its category and numeric code derived once."""

    record: AccountRecord
    category: AccountCategory
    code: int


def prepare_records(
    records: Sequence[AccountRecord],
    invalid_code_policy: InvalidCodePolicy = InvalidCodePolicy.SKIP,
) -> tuple[tuple[PreparedAccount, ...], tuple[InvalidAccount, ...]]:
    """Categorize every record once, splitting off invalid codes."""
    prepared: list[PreparedAccount] = []
    invalid: list[InvalidAccount] = []
    for record in records:
        try:
            category = categorize(record.code)
        except InvalidAccountCodeError as exc:
            if invalid_code_policy == InvalidCodePolicy.ABORT:
                raise
            logger.warning(
                "account_code_skipped",
                extra={
                    "account_code": record.code,
                    "account_name": record.name,
                    "reason": exc.reason,
                },
            )
            invalid.append(InvalidAccount(record=record, reason=exc.reason))
            continue
        prepared.append(
            PreparedAccount(
                record=record,
                category=category,
                code=parse_account_code(record.code),
            )
        )
    return tuple(prepared), tuple(invalid)


def resolve_rules(
    rules: MappingRuleSet | Sequence[MappingRule],
) -> tuple[MappingRule, ...]:
    """Active rules in display order."""
    if isinstance(rules, MappingRuleSet):
        return rules.active_rules()
    return tuple(rule for rule in rules if rule.is_active)


def _skipped_rules(rules: Sequence[MappingRule]) -> tuple[str, ...]:
    skipped: list[str] = []
    for rule in rules:
        problems = rule.definition_problems()
        if problems:
            logger.warning(
                "mapping_rule_skipped",
                extra={"line_id": rule.line_id, "problems": problems},
            )
            skipped.append(rule.line_id)
    return tuple(skipped)


def _build_section(
    rule: MappingRule,
    accounts: Sequence[PreparedAccount],
    comparative: bool,
    policy: BalancePolicy,
) -> StatementSection:
    current_total = Decimal("0")
    comparative_total = Decimal("0") if comparative else None
    for account in accounts:
        current_total += policy.current_balance(account.record, account.category)
        if comparative_total is not None:
            comparative_total += policy.comparative_balance(
                account.record, account.category,
            )
    return StatementSection(
        line_id=rule.line_id,
        accounts=tuple(account.record for account in accounts),
        current_total=current_total,
        comparative_total=comparative_total,
        title=rule.title,
        note_number=rule.note_number,
        area=rule.area,
    )


def _trace_summary(result: ClassificationResult) -> dict:
    return {
        "line_count": len(result.sections),
        "skipped_rule_count": len(result.skipped_rules),
        "is_comparative": result.is_comparative,
    }


@traced_engine(
    "classifier", "1.0",
    fingerprint_fields=("records", "rules"),
    summarize=_trace_summary,
)
def classify(
    records: Sequence[AccountRecord],
    rules: MappingRuleSet | Sequence[MappingRule],
    *,
    invalid_code_policy: InvalidCodePolicy = InvalidCodePolicy.SKIP,
    policy: BalancePolicy = DEFAULT_POLICY,
) -> ClassificationResult:
    """
    Classify ``records`` into statement sections, one per active rule.

    Args:
        records: Trial balance rows for one upload.
        rules: Rule snapshot (a ``MappingRuleSet`` or rules in display order).
        invalid_code_policy: Skip (default) or abort on uncategorizable codes.
        policy: Balance sign conventions.

    Returns:
        ClassificationResult with sections in display order.

    Raises:
        InvalidAccountCodeError: only with ``InvalidCodePolicy.ABORT``.
    """
    active = resolve_rules(rules)
    prepared, invalid = prepare_records(records, invalid_code_policy)
    comparative = is_comparative(records)

    sections = tuple(
        _build_section(
            rule,
            [account for account in prepared if matches(account.code, rule)],
            comparative,
            policy,
        )
        for rule in active
    )

    advisories: list[str] = []
    if comparative and any(
        policy.uses_opening_for_prior_pnl(account.record, account.category)
        for account in prepared
    ):
        logger.warning("comparative_pnl_from_opening_column")
        advisories.append(PRIOR_PNL_FROM_OPENING)

    result = ClassificationResult(
        sections=sections,
        is_comparative=comparative,
        invalid_accounts=invalid,
        skipped_rules=_skipped_rules(active),
        advisories=tuple(advisories),
    )

    logger.info(
        "classification_completed",
        extra={
            "record_count": len(records),
            "line_count": len(sections),
            "invalid_count": len(invalid),
            "is_comparative": comparative,
        },
    )
    return result
