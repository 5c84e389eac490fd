"""
Statement Notes Configuration Schema.

Controls which rule set a run uses and how the run treats records whose
codes cannot be categorized.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Self

from statement_engines.classifier import InvalidCodePolicy
from statement_kernel.logging_config import get_logger

logger = get_logger("modules.notes.config")


@dataclass
class NotesConfig:
    """
    Configuration schema for the statement notes module.
    """

    # Organization whose rule set is loaded
    organization: str = "default"

    # Skip (and report) or abort on uncategorizable account codes
    invalid_code_policy: InvalidCodePolicy = InvalidCodePolicy.SKIP

    # Whether lines with no matched accounts are kept in rendered output
    include_empty_lines: bool = True

    # Whether zero-balance accounts are listed under their line
    include_zero_accounts: bool = True

    # Override for the rule-set directory (None = packaged seed sets)
    config_dir: Path | None = None

    def __post_init__(self):
        if not self.organization or not self.organization.strip():
            raise ValueError("organization cannot be empty")
        if isinstance(self.invalid_code_policy, str):
            self.invalid_code_policy = InvalidCodePolicy(self.invalid_code_policy)
        if isinstance(self.config_dir, str):
            self.config_dir = Path(self.config_dir)

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("notes_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary."""
        logger.info(
            "notes_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
