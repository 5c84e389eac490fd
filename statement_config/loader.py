"""
Rule Set Loader (``statement_config.loader``).

Responsibility
--------------
Loads YAML rule-set files and parses them into typed
``statement_kernel.models.mapping`` value objects.  Runtime callers go
through ``statement_config.get_rule_set()``; this module is the parsing
layer underneath it.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on the kernel models
only; never imports engines or modules.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``statement_kernel``.
* Rule order in the YAML list is preserved as display order.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  canonical rule data for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Non-integer range bounds or codes  -> ``ValueError``.
* Unknown statement area  -> ``ValueError``.
* Same ``line_id`` twice  -> ``DuplicateLineError``.

YAML shape
----------
::

    organization: default
    version: 1
    rules:
      - line_id: payables
        title: Trade and other payables
        note_number: 16
        area: current_liabilities
        ranges:
          - {from: 2010, to: 2999}
        excludes: [2030, 2045]
        keywords: [payable]
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from statement_kernel.exceptions import DuplicateLineError
from statement_kernel.models.mapping import (
    AccountRange,
    MappingRule,
    MappingRuleSet,
    StatementArea,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_code(value: Any) -> int:
    """Parse an account code bound.  Booleans and fractions are rejected."""
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse account code from {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"Cannot parse account code from {value!r}")


def parse_range(data: dict[str, Any]) -> AccountRange:
    """Parse an ``{from, to}`` mapping.  Bounds are NOT order-checked here."""
    return AccountRange(start=parse_code(data["from"]), end=parse_code(data["to"]))


def parse_area(value: Any) -> StatementArea | None:
    if value is None:
        return None
    try:
        return StatementArea(value)
    except ValueError as exc:
        raise ValueError(f"Unknown statement area {value!r}") from exc


def parse_rule(data: dict[str, Any]) -> MappingRule:
    """
    Parse a ``MappingRule`` from a dict.

    ``line_id`` is required; everything else is optional.
    """
    return MappingRule(
        line_id=str(data["line_id"]),
        ranges=tuple(parse_range(r) for r in data.get("ranges") or ()),
        includes=frozenset(parse_code(c) for c in data.get("includes") or ()),
        excludes=frozenset(parse_code(c) for c in data.get("excludes") or ()),
        title=data.get("title", ""),
        note_number=data.get("note_number"),
        area=parse_area(data.get("area")),
        is_active=bool(data.get("is_active", True)),
        keywords=tuple(data.get("keywords") or ()),
    )


def rule_to_dict(rule: MappingRule) -> dict[str, Any]:
    """Canonical, JSON-friendly form of a rule (inverse of ``parse_rule``)."""
    return {
        "line_id": rule.line_id,
        "ranges": [{"from": r.start, "to": r.end} for r in rule.ranges],
        "includes": sorted(rule.includes),
        "excludes": sorted(rule.excludes),
        "title": rule.title,
        "note_number": rule.note_number,
        "area": rule.area.value if rule.area else None,
        "is_active": rule.is_active,
        "keywords": list(rule.keywords),
    }


def compute_checksum(data: Any) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def rule_set_checksum(organization: str, rules: tuple[MappingRule, ...]) -> str:
    return compute_checksum({
        "organization": organization,
        "rules": [rule_to_dict(rule) for rule in rules],
    })


def parse_rule_set(data: dict[str, Any], organization: str | None = None) -> MappingRuleSet:
    """
    Parse a ``MappingRuleSet`` from a dict.

    Args:
        data: Parsed YAML document.
        organization: Overrides the document's ``organization`` key, used
            when a default set is served for an organization without one.

    Raises:
        DuplicateLineError: if a line id appears twice.
    """
    org = organization or data.get("organization", "default")
    rules = tuple(parse_rule(item) for item in data.get("rules") or ())

    seen: set[str] = set()
    for rule in rules:
        if rule.line_id in seen:
            raise DuplicateLineError(org, rule.line_id)
        seen.add(rule.line_id)

    return MappingRuleSet(
        organization=org,
        rules=rules,
        version=int(data.get("version", 1)),
        checksum=rule_set_checksum(org, rules),
        description=data.get("description", ""),
    )


def build_rule_set(
    organization: str,
    rules: list[MappingRule] | tuple[MappingRule, ...],
    version: int = 1,
) -> MappingRuleSet:
    """Snapshot programmatically built rules with a checksum."""
    frozen = tuple(rules)
    return MappingRuleSet(
        organization=organization,
        rules=frozen,
        version=version,
        checksum=rule_set_checksum(organization, frozen),
    )


def load_rule_set(path: Path, organization: str | None = None) -> MappingRuleSet:
    """Load and parse a rule-set YAML file."""
    return parse_rule_set(load_yaml_file(path), organization=organization)
