"""ORM models for the envelope kernel."""

from envelope_kernel.models.account import Account
from envelope_kernel.models.allocation import Allocation
from envelope_kernel.models.budget import Budget
from envelope_kernel.models.transaction import Transaction

__all__ = [
    "Account",
    "Allocation",
    "Budget",
    "Transaction",
]
