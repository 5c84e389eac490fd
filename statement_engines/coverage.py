"""
statement_engines.coverage -- Coverage validator for a rule snapshot.

Responsibility:
    Cross-check the full account set against the full rule set: which
    accounts no line captures, which accounts several lines capture, and
    what share of accounts is mapped.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Reads the same inputs the classifier reads and never mutates them.

Invariants enforced:
    - Ambiguous accounts are reported with every colliding line id, in
      display order.  No "first match wins" resolution.
    - coverage_percentage = mapped / total * 100 by account count over
      every record; invalid records count as not mapped.  0 for an empty
      batch.
    - Duplicate codes are counted as separate accounts.

Failure modes:
    - Records with invalid codes are listed in ``invalid_accounts`` and pull
      the percentage down.  Never raises.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from statement_engines.balance import DEFAULT_POLICY, BalancePolicy
from statement_engines.classifier import prepare_records, resolve_rules
from statement_engines.matcher import matched_line_ids
from statement_engines.tracer import traced_engine
from statement_kernel.logging_config import get_logger
from statement_kernel.models.account import AccountRecord
from statement_kernel.models.mapping import MappingRule, MappingRuleSet
from statement_kernel.models.results import (
    AmbiguousMapping,
    CoverageReport,
    UnmappedAccount,
)

logger = get_logger("engines.coverage")

HUNDRED = Decimal("100")


def coverage_percentage(total: int, unmapped: int) -> Decimal:
    """Share of mapped accounts, by count."""
    if total <= 0:
        return Decimal("0")
    return Decimal(total - unmapped) / Decimal(total) * HUNDRED


def _trace_summary(report: CoverageReport) -> dict:
    return {
        "unmapped_count": report.unmapped_count,
        "ambiguous_count": len(report.ambiguous_accounts),
        "coverage_percentage": str(report.coverage_percentage),
    }


@traced_engine(
    "coverage", "1.0",
    fingerprint_fields=("records", "rules"),
    summarize=_trace_summary,
)
def validate_coverage(
    records: Sequence[AccountRecord],
    rules: MappingRuleSet | Sequence[MappingRule],
    *,
    policy: BalancePolicy = DEFAULT_POLICY,
) -> CoverageReport:
    """
    Report unmapped and ambiguous accounts for ``records`` under ``rules``.

    Returns:
        CoverageReport.  Read-only advisory output.
    """
    active = resolve_rules(rules)
    prepared, invalid = prepare_records(records)

    unmapped: list[UnmappedAccount] = []
    ambiguous: list[AmbiguousMapping] = []
    for account in prepared:
        line_ids = matched_line_ids(account.code, active)
        if not line_ids:
            unmapped.append(
                UnmappedAccount(
                    record=account.record,
                    balance=policy.current_balance(account.record, account.category),
                )
            )
        elif len(line_ids) > 1:
            ambiguous.append(
                AmbiguousMapping(record=account.record, matched_line_ids=line_ids)
            )

    total = len(records)
    mapped = len(prepared) - len(unmapped)
    report = CoverageReport(
        total_accounts=total,
        mapped_count=mapped,
        unmapped_accounts=tuple(unmapped),
        ambiguous_accounts=tuple(ambiguous),
        coverage_percentage=coverage_percentage(total, total - mapped),
        invalid_accounts=invalid,
    )

    if ambiguous:
        logger.warning(
            "ambiguous_mappings_detected",
            extra={
                "ambiguous_count": len(ambiguous),
                "account_codes": [a.record.code for a in ambiguous],
            },
        )
    logger.info(
        "coverage_validated",
        extra={
            "total_accounts": total,
            "unmapped_count": len(unmapped),
            "ambiguous_count": len(ambiguous),
            "invalid_count": len(invalid),
            "coverage_percentage": str(report.coverage_percentage),
        },
    )
    return report
