"""
Rule Set Validator (``statement_config.validator``).

Responsibility
--------------
Validates a ``MappingRuleSet`` at save/load time, before any classification
run uses it.  This is where malformed rules are rejected; the engine itself
only ever skips them.

Architecture position
---------------------
**Config layer** -- build-time validation.  Called by
``statement_config.get_rule_set`` after loading.  Depends on kernel models
and the pure matcher only.

Invariants enforced
-------------------
Errors (the set MUST NOT be used):
* A range with ``from > to``.
* A negative range bound.
* A rule with no ranges and no includes.
* A code that is both included and excluded by the same rule.
* A ``line_id`` configured more than once.

Warnings (the set may be used but should be reviewed):
* Overlapping ranges inside one rule.
* Two active rules able to capture the same code (reported per pair).
* Excludes that fall outside every range of the rule (no effect).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from statement_engines.matcher import matches
from statement_kernel.exceptions import InvalidRuleDefinitionError
from statement_kernel.models.mapping import MappingRule, MappingRuleSet


@dataclass
class RuleSetValidationResult:
    """
    Result of rule-set validation.

    ``is_valid`` returns ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_rule(rule: MappingRule) -> RuleSetValidationResult:
    """Validate a single rule in isolation."""
    result = RuleSetValidationResult()
    _validate_definition(rule, result)
    _validate_include_exclude_conflict(rule, result)
    _validate_internal_overlaps(rule, result)
    _validate_dead_excludes(rule, result)
    return result


def require_valid_rule(rule: MappingRule) -> MappingRule:
    """
    Save-time gate for a single edited rule.

    Raises:
        InvalidRuleDefinitionError: if the rule has validation errors.
    """
    result = validate_rule(rule)
    if not result.is_valid:
        raise InvalidRuleDefinitionError(rule.line_id, result.errors)
    return rule


def validate_rule_set(rule_set: MappingRuleSet) -> RuleSetValidationResult:
    """
    Validate every rule of a set and the set as a whole.

    Postconditions:
        - Returns a result with errors and warnings.
        - A set with errors MUST NOT be handed to a statement run.
    """
    result = RuleSetValidationResult()

    _validate_line_uniqueness(rule_set, result)
    for rule in rule_set.rules:
        single = validate_rule(rule)
        result.errors.extend(single.errors)
        result.warnings.extend(single.warnings)
    _validate_cross_rule_overlaps(rule_set, result)

    return result


def _validate_definition(rule: MappingRule, result: RuleSetValidationResult) -> None:
    for problem in rule.definition_problems():
        result.add_error(f"Line '{rule.line_id}': {problem}")


def _validate_include_exclude_conflict(
    rule: MappingRule, result: RuleSetValidationResult
) -> None:
    conflicting = sorted(rule.includes & rule.excludes)
    if conflicting:
        result.add_error(
            f"Line '{rule.line_id}': accounts cannot be both included and "
            f"excluded: {', '.join(str(c) for c in conflicting)}"
        )


def _validate_internal_overlaps(
    rule: MappingRule, result: RuleSetValidationResult
) -> None:
    ranges = rule.ranges
    for i in range(len(ranges)):
        for j in range(i + 1, len(ranges)):
            if ranges[i].overlaps(ranges[j]):
                result.add_warning(
                    f"Line '{rule.line_id}': overlapping ranges "
                    f"{ranges[i]} and {ranges[j]}"
                )


def _validate_dead_excludes(
    rule: MappingRule, result: RuleSetValidationResult
) -> None:
    dead = sorted(
        code for code in rule.excludes
        if not any(code in rng for rng in rule.ranges)
        and code not in rule.includes
    )
    if dead:
        result.add_warning(
            f"Line '{rule.line_id}': excludes outside every range have no "
            f"effect: {', '.join(str(c) for c in dead)}"
        )


def _validate_line_uniqueness(
    rule_set: MappingRuleSet, result: RuleSetValidationResult
) -> None:
    seen: set[str] = set()
    for rule in rule_set.rules:
        if rule.line_id in seen:
            result.add_error(f"Duplicate line: '{rule.line_id}' appears more than once")
        seen.add(rule.line_id)


def _candidate_codes(rule: MappingRule) -> set[int]:
    """Boundary codes where an overlap with another rule must show up."""
    codes = set(rule.includes)
    for rng in rule.ranges:
        codes.add(rng.start)
        codes.add(rng.end)
    return codes


def _first_shared_code(a: MappingRule, b: MappingRule) -> int | None:
    """Smallest code both rules capture, or None.

    Checks explicit codes and range boundaries first, then walks the
    intersection of overlapping ranges skipping excluded codes.
    """
    for code in sorted(_candidate_codes(a) | _candidate_codes(b)):
        if matches(code, a) and matches(code, b):
            return code
    for ra in a.ranges:
        for rb in b.ranges:
            if not ra.overlaps(rb):
                continue
            low, high = max(ra.start, rb.start), min(ra.end, rb.end)
            blocked = a.excludes | b.excludes
            if high - low + 1 > len(blocked):
                code = low
                while code in blocked:
                    code += 1
                return code
            for code in range(low, high + 1):
                if code not in blocked:
                    return code
    return None


def _validate_cross_rule_overlaps(
    rule_set: MappingRuleSet, result: RuleSetValidationResult
) -> None:
    active = [r for r in rule_set.active_rules() if r.is_well_formed]
    for i in range(len(active)):
        for j in range(i + 1, len(active)):
            code = _first_shared_code(active[i], active[j])
            if code is not None:
                result.add_warning(
                    f"Lines '{active[i].line_id}' and '{active[j].line_id}' "
                    f"both capture account {code}"
                )
