"""
statement_config -- single public entrypoint for mapping rule sets.

Responsibility:
    Provides the way to obtain an organization's rule snapshot at runtime
    through ``get_rule_set()``.  Seed rule sets ship as YAML data in
    ``statement_config/sets/``; the external configuration store may write
    per-organization files next to them.

Architecture position:
    Configuration -- YAML-driven rule sets, save-time validation.
    Sits above ``statement_kernel`` and ``statement_engines`` and below
    ``statement_modules``.  Engines MUST NEVER import from here; they
    receive rule snapshots as arguments.

Invariants enforced:
    - Validation: a rule set with definition errors is never returned.
    - Deterministic checksums: the same YAML always produces the same
      ``MappingRuleSet.checksum``.
    - No caching: every call returns a fresh immutable snapshot.

Failure modes:
    - ``RuleSetNotFoundError`` -- no file for the organization and no
      ``default.yaml`` to fall back to.
    - ``RuleSetValidationError`` -- the set failed validation.
    - ``DuplicateLineError`` -- a line id appears twice in the YAML.

Audit relevance:
    Every successful ``get_rule_set()`` call emits a
    ``STATEMENT_RULESET_TRACE`` log entry with organization, version,
    checksum, rule count, and the file the set was read from.
"""

from __future__ import annotations

from pathlib import Path

from statement_config.loader import load_rule_set
from statement_config.validator import RuleSetValidationResult, validate_rule_set
from statement_kernel.exceptions import RuleSetNotFoundError, RuleSetValidationError
from statement_kernel.logging_config import get_logger
from statement_kernel.models.mapping import MappingRuleSet

_logger = get_logger("config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_ORGANIZATION = "default"


def get_rule_set(
    organization: str = DEFAULT_ORGANIZATION,
    config_dir: Path | None = None,
) -> MappingRuleSet:
    """Load, validate, and return the rule snapshot for ``organization``.

    Resolution order: ``<config_dir>/<organization>.yaml``, then
    ``<config_dir>/default.yaml`` (served under the requested organization
    name).

    Raises:
        RuleSetNotFoundError: If neither file exists.
        RuleSetValidationError: If the set has validation errors.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    path = _find_rule_set_file(sets_dir, organization)

    rule_set = load_rule_set(path, organization=organization)

    validation = validate_rule_set(rule_set)
    if not validation.is_valid:
        raise RuleSetValidationError(organization, validation.errors)
    for warning in validation.warnings:
        _logger.warning(
            "rule_set_warning",
            extra={"organization": organization, "warning": warning},
        )

    _logger.info(
        "STATEMENT_RULESET_TRACE",
        extra={
            "trace_type": "STATEMENT_RULESET_TRACE",
            "organization": rule_set.organization,
            "rule_set_version": rule_set.version,
            "checksum": rule_set.checksum,
            "rule_count": len(rule_set.rules),
            "active_rule_count": len(rule_set.active_rules()),
            "source_file": path.name,
        },
    )
    return rule_set


def get_default_rule_set(config_dir: Path | None = None) -> MappingRuleSet:
    """The seed rule set shipped with the package."""
    return get_rule_set(DEFAULT_ORGANIZATION, config_dir=config_dir)


def _find_rule_set_file(sets_dir: Path, organization: str) -> Path:
    if not sets_dir.is_dir():
        raise RuleSetNotFoundError(organization, str(sets_dir))

    candidate = sets_dir / f"{organization}.yaml"
    if candidate.is_file():
        return candidate

    fallback = sets_dir / f"{DEFAULT_ORGANIZATION}.yaml"
    if fallback.is_file():
        _logger.info(
            "rule_set_default_fallback",
            extra={"organization": organization},
        )
        return fallback

    raise RuleSetNotFoundError(organization, str(sets_dir))


__all__ = [
    "DEFAULT_ORGANIZATION",
    "RuleSetValidationResult",
    "get_default_rule_set",
    "get_rule_set",
    "validate_rule_set",
]
