"""
Statement Notes Service (``statement_modules.notes.service``).

Responsibility
--------------
Orchestrates one statement run for an organization: resolve the rule
snapshot through ``statement_config``, classify the trial balance, validate
coverage against the same snapshot, and assemble the area-grouped statement.
Also serves rule previews and mapping suggestions for the operator UI.

Architecture position
---------------------
**Modules layer** -- thin glue between configuration and the pure engines.
``StatementMappingService`` is the public entry point for collaborators
(HTTP layer, renderers).  Constructor: ``config``.

Invariants enforced
-------------------
* One run reads exactly one rule snapshot; classification and coverage
  are computed over the same records and the same snapshot.
* Read-only -- records and rules are never mutated.
* A run never aborts on bad rows unless the config asks for
  ``InvalidCodePolicy.ABORT``.

Failure modes
-------------
* Rule set missing or invalid  -> ``RuleSetNotFoundError`` /
  ``RuleSetValidationError`` propagate before any record is read.
* ``InvalidAccountCodeError`` propagates only under the ABORT policy.
* ``InvalidRuleDefinitionError`` from ``preview_rule`` for a malformed
  edited rule.

Audit relevance
---------------
Every run is bound to a ``run_id`` and the rule-set checksum in the log
context, so every engine trace and warning of the run can be tied back to
the configuration that produced the statement.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import uuid4

from statement_config import get_default_rule_set, get_rule_set
from statement_config.validator import (
    RuleSetValidationResult,
    require_valid_rule,
    validate_rule_set,
)
from statement_engines.classifier import classify
from statement_engines.coverage import validate_coverage
from statement_engines.matcher import matching_records
from statement_engines.suggestions import MappingSuggestion, suggest_mappings
from statement_kernel.logging_config import LogContext, get_logger
from statement_kernel.models.account import AccountRecord
from statement_kernel.models.mapping import MappingRule, MappingRuleSet
from statement_modules.notes.config import NotesConfig
from statement_modules.notes.models import StatementMappingReport, StatementMetadata
from statement_modules.notes.statements import build_statement

logger = get_logger("modules.notes.service")


class StatementMappingService:
    """
    Statement mapping for one organization.

    Contract:
        ``generate`` is deterministic for a given record list and rule
        snapshot (apart from the generated ``run_id``).
    """

    def __init__(self, config: NotesConfig | None = None):
        self._config = config or NotesConfig.with_defaults()

    @property
    def config(self) -> NotesConfig:
        return self._config

    def load_rules(self) -> MappingRuleSet:
        """Current rule snapshot for the configured organization."""
        return get_rule_set(
            self._config.organization, config_dir=self._config.config_dir,
        )

    def generate(
        self,
        records: Sequence[AccountRecord],
        rule_set: MappingRuleSet | None = None,
        run_id: str | None = None,
    ) -> StatementMappingReport:
        """
        Classify ``records`` and validate coverage in one run.

        Args:
            records: Trial balance rows of one upload.
            rule_set: Snapshot to use.  Loaded from configuration when None.
            run_id: Identifier for log correlation.  Generated when None.
        """
        rules = rule_set if rule_set is not None else self.load_rules()
        run = run_id or str(uuid4())

        with LogContext.bind(
            organization=rules.organization,
            rule_set_checksum=rules.checksum or None,
            run_id=run,
        ):
            logger.info(
                "statement_run_started",
                extra={
                    "record_count": len(records),
                    "rule_count": len(rules.active_rules()),
                },
            )

            classification = classify(
                records, rules,
                invalid_code_policy=self._config.invalid_code_policy,
            )
            coverage = validate_coverage(records, rules)
            statement = build_statement(
                classification,
                include_empty_lines=self._config.include_empty_lines,
                include_zero_accounts=self._config.include_zero_accounts,
            )

            report = StatementMappingReport(
                metadata=StatementMetadata(
                    organization=rules.organization,
                    rule_set_version=rules.version,
                    rule_set_checksum=rules.checksum,
                    record_count=len(records),
                    run_id=run,
                ),
                classification=classification,
                coverage=coverage,
                statement=statement,
            )

            logger.info(
                "statement_run_completed",
                extra={
                    "is_comparative": classification.is_comparative,
                    "unmapped_count": coverage.unmapped_count,
                    "ambiguous_count": len(coverage.ambiguous_accounts),
                    "invalid_count": len(classification.invalid_accounts),
                    "coverage_percentage": str(coverage.coverage_percentage),
                    "has_issues": report.has_issues,
                },
            )
        return report

    def preview_rule(
        self,
        records: Sequence[AccountRecord],
        rule: MappingRule,
    ) -> tuple[AccountRecord, ...]:
        """
        Accounts a (possibly unsaved) rule would capture.

        Raises:
            InvalidRuleDefinitionError: if the edited rule is malformed.
        """
        captured = matching_records(records, require_valid_rule(rule))
        logger.info(
            "rule_preview",
            extra={"line_id": rule.line_id, "captured_count": len(captured)},
        )
        return captured

    def check_rules(self, rule_set: MappingRuleSet) -> RuleSetValidationResult:
        """Save-time validation for an edited rule set."""
        result = validate_rule_set(rule_set)
        logger.info(
            "rule_set_checked",
            extra={
                "organization": rule_set.organization,
                "error_count": len(result.errors),
                "warning_count": len(result.warnings),
            },
        )
        return result

    def suggest_for_unmapped(
        self,
        records: Sequence[AccountRecord],
        rule_set: MappingRuleSet | None = None,
        reference: MappingRuleSet | None = None,
    ) -> tuple[MappingSuggestion, ...]:
        """
        Suggest lines for accounts the organization's rules leave unmapped.

        ``reference`` defaults to the packaged seed rule set.
        """
        rules = rule_set if rule_set is not None else self.load_rules()
        reference_rules = reference if reference is not None else get_default_rule_set()

        coverage = validate_coverage(records, rules)
        unmapped = [u.record for u in coverage.unmapped_accounts]
        return suggest_mappings(unmapped, reference_rules)
