"""
Typed Exception Hierarchy for the Envelope Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from EnvelopeKernelError:

    EnvelopeKernelError (base)
    |
    +-- PeriodError
    |   +-- InvalidPeriodError
    |
    +-- BudgetError
    |   +-- InvalidBudgetTypeError
    |
    +-- AccountError
    |   +-- InvalidAccountRoleError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                 | When Raised
----------------|----------------------|------------------------------------------
Period          | INVALID_PERIOD       | Period string is not YYYY-MM
----------------|----------------------|------------------------------------------
Budget          | INVALID_BUDGET_TYPE  | Budget type outside the closed variant
----------------|----------------------|------------------------------------------
Account         | INVALID_ACCOUNT_ROLE | Account role is not operational/capital
----------------|----------------------|------------------------------------------
Configuration   | CONFIGURATION_ERROR  | Engine configuration value rejected

===============================================================================
HANDLING PATTERNS
===============================================================================

Aggregation never raises for well-formed input.  These errors surface only
where raw strings are parsed into domain values (API arguments, YAML, ORM
rows).  Failures of the four read collaborators are NOT wrapped: they reach
the caller of ``compute_monthly_overview`` unmodified.

    try:
        overview = calculator.compute_monthly_overview(raw_month)
    except InvalidPeriodError as e:
        return {"error": e.code, "value": e.value}
"""


class EnvelopeKernelError(Exception):
    """
    Base exception for all envelope kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "ENVELOPE_KERNEL_ERROR"


# Period-related exceptions


class PeriodError(EnvelopeKernelError):
    """Base exception for period-related errors."""

    code: str = "PERIOD_ERROR"


class InvalidPeriodError(PeriodError):
    """Period value is not a valid calendar month."""

    code: str = "INVALID_PERIOD"

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f'Invalid period format: "{value}". Expected YYYY-MM (e.g., "2026-02").'
        )


# Budget-related exceptions


class BudgetError(EnvelopeKernelError):
    """Base exception for budget-related errors."""

    code: str = "BUDGET_ERROR"


class InvalidBudgetTypeError(BudgetError):
    """Budget type is not one of spending, savings, goal, periodic."""

    code: str = "INVALID_BUDGET_TYPE"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid budget type: {value!r}")


# Account-related exceptions


class AccountError(EnvelopeKernelError):
    """Base exception for account-related errors."""

    code: str = "ACCOUNT_ERROR"


class InvalidAccountRoleError(AccountError):
    """Account role is not one of operational, capital."""

    code: str = "INVALID_ACCOUNT_ROLE"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid account role: {value!r}")


# Configuration exceptions


class ConfigurationError(EnvelopeKernelError):
    """An engine configuration value was rejected."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, value: object, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid configuration {key}={value!r}: {reason}")
