"""
Envelope Kernel

Read-only foundation for the envelope-budgeting aggregation engine:
- Calendar-month periods and budget/account value types
- Immutable snapshot DTOs for accounts, budgets, allocations, transactions
- Structured JSON logging and typed exceptions
- Reference SQLAlchemy schema with read-only selectors
"""

__version__ = "0.1.0"
