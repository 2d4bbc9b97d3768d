"""
Card Ledger - Personal Finance Ledger & Credit-Card Billing Service

A FastAPI-based service that keeps account balances consistent across
expenses, incomes and transfers, tracks credit-card installment purchases,
computes billing cycles and freezes monthly credit-card statements.
"""

__version__ = "0.1.0"
