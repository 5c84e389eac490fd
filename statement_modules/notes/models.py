"""
Statement Notes Domain Models (``statement_modules.notes.models``).

Responsibility
--------------
Frozen dataclass value objects for assembled statements: statement lines
grouped by area with subtotals, and the report that bundles a statement
with its coverage check.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Returned by
``StatementMappingService`` to the external renderer.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal``.
* Comparative fields are ``None`` when the run is single-period.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from statement_kernel.models.mapping import StatementArea
from statement_kernel.models.results import (
    ClassificationResult,
    CoverageReport,
    StatementSection,
)


@dataclass(frozen=True)
class StatementMetadata:
    """Identifies which rules and which upload produced a statement."""

    organization: str
    rule_set_version: int
    rule_set_checksum: str
    record_count: int
    run_id: str = ""


@dataclass(frozen=True)
class AreaGroup:
    """Statement lines rolling up into one statement area."""

    area: StatementArea | None  # None = lines without a configured area
    sections: tuple[StatementSection, ...]
    current_total: Decimal
    comparative_total: Decimal | None = None

    @property
    def label(self) -> str:
        return self.area.value if self.area else "unassigned"


@dataclass(frozen=True)
class AssembledStatement:
    """Statement lines grouped by area, with income statement result."""

    groups: tuple[AreaGroup, ...]
    is_comparative: bool
    net_income: Decimal
    comparative_net_income: Decimal | None = None

    def group(self, area: StatementArea | None) -> AreaGroup | None:
        for group in self.groups:
            if group.area == area:
                return group
        return None


@dataclass(frozen=True)
class StatementMappingReport:
    """Everything one statement run produces for its collaborators."""

    metadata: StatementMetadata
    classification: ClassificationResult
    coverage: CoverageReport
    statement: AssembledStatement

    @property
    def has_issues(self) -> bool:
        return self.classification.has_warnings or not self.coverage.is_complete
