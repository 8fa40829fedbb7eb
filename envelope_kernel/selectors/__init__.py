"""Selectors for the envelope kernel (read side)."""

from envelope_kernel.selectors.account_selector import AccountSelector
from envelope_kernel.selectors.allocation_selector import AllocationSelector
from envelope_kernel.selectors.budget_selector import BudgetSelector
from envelope_kernel.selectors.transaction_selector import TransactionSelector

__all__ = [
    "AccountSelector",
    "AllocationSelector",
    "BudgetSelector",
    "TransactionSelector",
]
