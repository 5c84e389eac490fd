"""
Module: statement_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    classification engines.  This is the canonical import surface for
    higher layers (statement_modules) and external collaborators.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import statement_kernel (and sibling engine modules).
    MUST NOT import statement_config or statement_modules.

Invariants enforced:
    - Determinism: identical inputs always produce identical outputs.
    - Decimal-only arithmetic for every balance and total.
    - No engine mutates records or rules.

Usage:
    from statement_engines import classify, validate_coverage, matches
    from statement_kernel.models.account import categorize

    result = classify(records, rule_set)
    report = validate_coverage(records, rule_set)
"""

from statement_engines.balance import (
    DEFAULT_POLICY,
    BalancePolicy,
    comparative_balance,
    current_balance,
    is_comparative,
)
from statement_engines.classifier import (
    PRIOR_PNL_FROM_OPENING,
    InvalidCodePolicy,
    classify,
)
from statement_engines.coverage import coverage_percentage, validate_coverage
from statement_engines.matcher import (
    describe_rule,
    matched_line_ids,
    matches,
    matching_records,
)
from statement_engines.suggestions import MappingSuggestion, suggest_mappings
from statement_kernel.models.account import categorize

__all__ = [
    # Balance policy
    "BalancePolicy",
    "DEFAULT_POLICY",
    "comparative_balance",
    "current_balance",
    "is_comparative",
    # Classifier
    "InvalidCodePolicy",
    "PRIOR_PNL_FROM_OPENING",
    "classify",
    # Coverage
    "coverage_percentage",
    "validate_coverage",
    # Matcher
    "describe_rule",
    "matched_line_ids",
    "matches",
    "matching_records",
    # Suggestions
    "MappingSuggestion",
    "suggest_mappings",
    # Categorization
    "categorize",
]
