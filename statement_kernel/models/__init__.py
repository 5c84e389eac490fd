"""Domain models for the statement kernel."""

from statement_kernel.models.account import (
    AccountCategory,
    AccountRecord,
    categorize,
    parse_account_code,
    to_decimal,
)
from statement_kernel.models.mapping import (
    AccountRange,
    MappingRule,
    MappingRuleSet,
    StatementArea,
)
from statement_kernel.models.results import (
    AmbiguousMapping,
    ClassificationResult,
    CoverageReport,
    InvalidAccount,
    StatementSection,
    UnmappedAccount,
)

__all__ = [
    "AccountCategory",
    "AccountRecord",
    "categorize",
    "parse_account_code",
    "to_decimal",
    "AccountRange",
    "MappingRule",
    "MappingRuleSet",
    "StatementArea",
    "AmbiguousMapping",
    "ClassificationResult",
    "CoverageReport",
    "InvalidAccount",
    "StatementSection",
    "UnmappedAccount",
]
