"""Core business logic services for BillSplit."""

from .balance_service import BalanceService
from .expense_service import ExpenseDistributionService
from .settlement_service import SettlementCalculator
from .user_service import UserDirectory
from .bill_service import BillStore

__all__ = [
    "BalanceService",
    "ExpenseDistributionService",
    "SettlementCalculator",
    "UserDirectory",
    "BillStore",
]
