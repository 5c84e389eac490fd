"""
Statement Notes Module (``statement_modules.notes``).

Responsibility
--------------
Read-only module that maps an organization's trial balance onto its
statement lines (notes), checks coverage of the rule set, and groups the
lines into statement areas for the balance sheet and income statement.

Architecture position
---------------------
**Modules layer** -- all classification and aggregation is delegated to the
pure functions in ``statement_engines``; rule snapshots come from
``statement_config``.

Failure modes
-------------
* Missing rule set -> ``RuleSetNotFoundError`` before any work is done.
* Unmapped, ambiguous, or invalid accounts -> reported in the result,
  never raised.
"""

from statement_modules.notes.config import NotesConfig
from statement_modules.notes.models import (
    AreaGroup,
    AssembledStatement,
    StatementMappingReport,
    StatementMetadata,
)
from statement_modules.notes.service import StatementMappingService
from statement_modules.notes.statements import build_statement, render_to_dict

__all__ = [
    # Service
    "StatementMappingService",
    # Config
    "NotesConfig",
    # Models
    "AreaGroup",
    "AssembledStatement",
    "StatementMappingReport",
    "StatementMetadata",
    # Pure functions
    "build_statement",
    "render_to_dict",
]
