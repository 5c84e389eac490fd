"""
Typed Exception Hierarchy for the Statement Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the mapping engine decide per error whether to skip a record,
reject a rule edit, or abort a run. That decision must be made by type, not
by parsing message strings:

    try:
        category = categorize(record.code)
    except InvalidAccountCodeError as e:
        warnings.append({"code": e.code, "account_code": e.account_code})

Every exception carries:
  1. A CODE class attribute (machine-readable, API-safe)
  2. Structured attributes (not just a message string)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    StatementMappingError (base)
    |
    +-- AccountCodeError
    |   +-- InvalidAccountCodeError
    |
    +-- RuleDefinitionError
    |   +-- InvalidRuleDefinitionError
    |
    +-- RuleSetError
        +-- RuleSetNotFoundError
        +-- DuplicateLineError
        +-- RuleSetValidationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                     | When Raised
-----------|--------------------------|------------------------------------------
Account    | INVALID_ACCOUNT_CODE     | Code empty, non-numeric, or leading digit
           |                          | outside 1-5
-----------|--------------------------|------------------------------------------
Rule       | INVALID_RULE_DEFINITION  | Range with from > to, negative bound, or
           |                          | a rule with no ranges and no includes
-----------|--------------------------|------------------------------------------
Rule set   | RULE_SET_NOT_FOUND       | No YAML rule set for an organization and
           |                          | no default set to fall back to
           | DUPLICATE_LINE           | Same line_id configured twice in one set
           | RULE_SET_INVALID         | Rule set failed save-time validation

===============================================================================
HANDLING POLICY
===============================================================================

1. InvalidAccountCodeError is never fatal to a statement run by default.
   The classifier skips the record and lists it alongside its output.

2. InvalidRuleDefinitionError is raised by the configuration layer when a
   rule is loaded or saved. The engine, if handed such a rule anyway, treats
   it as matching nothing.

3. Ambiguous mappings (one account captured by two lines) are NOT
   exceptions. They are reported by the coverage validator.
"""


class StatementMappingError(Exception):
    """
    Base exception for all statement mapping errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "STATEMENT_MAPPING_ERROR"


# Account-related exceptions


class AccountCodeError(StatementMappingError):
    """Base exception for account code errors."""

    code: str = "ACCOUNT_CODE_ERROR"


class InvalidAccountCodeError(AccountCodeError):
    """Account code cannot be categorized."""

    code: str = "INVALID_ACCOUNT_CODE"

    def __init__(self, account_code: str, reason: str):
        self.account_code = account_code
        self.reason = reason
        super().__init__(f"Invalid account code {account_code!r}: {reason}")


# Rule-related exceptions


class RuleDefinitionError(StatementMappingError):
    """Base exception for mapping rule definition errors."""

    code: str = "RULE_DEFINITION_ERROR"


class InvalidRuleDefinitionError(RuleDefinitionError):
    """
    Mapping rule is malformed.

    Raised at rule load/save time only. The engine never raises this.
    """

    code: str = "INVALID_RULE_DEFINITION"

    def __init__(self, line_id: str, problems: list[str]):
        self.line_id = line_id
        self.problems = problems
        super().__init__(
            f"Invalid mapping rule '{line_id}': " + "; ".join(problems)
        )


# Rule-set exceptions


class RuleSetError(StatementMappingError):
    """Base exception for rule set errors."""

    code: str = "RULE_SET_ERROR"


class RuleSetNotFoundError(RuleSetError):
    """No rule set is available for the organization."""

    code: str = "RULE_SET_NOT_FOUND"

    def __init__(self, organization: str, search_dir: str):
        self.organization = organization
        self.search_dir = search_dir
        super().__init__(
            f"No rule set found for organization '{organization}' in {search_dir}"
        )


class DuplicateLineError(RuleSetError):
    """A statement line is configured more than once in a rule set."""

    code: str = "DUPLICATE_LINE"

    def __init__(self, organization: str, line_id: str):
        self.organization = organization
        self.line_id = line_id
        super().__init__(
            f"Line '{line_id}' is configured more than once for '{organization}'"
        )


class RuleSetValidationError(RuleSetError):
    """Rule set failed validation and must not be used."""

    code: str = "RULE_SET_INVALID"

    def __init__(self, organization: str, errors: list[str]):
        self.organization = organization
        self.errors = errors
        super().__init__(
            f"Rule set for '{organization}' failed validation:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )
