"""Budget ledger use cases"""
from .record_deduction import RecordDeduction
from .record_adjustment import RecordAdjustment
from .list_transactions import ListBudgetTransactions
from .audit_ledger import AuditLedger
from .dtos import (
    RecordDeductionCommandDTO,
    RecordAdjustmentCommandDTO,
    BudgetTransactionResponseDTO,
    TransactionDTO,
    ListTransactionsResponseDTO,
    LedgerDiscrepancyDTO,
    LedgerAuditResultDTO,
)

__all__ = [
    "RecordDeduction",
    "RecordAdjustment",
    "ListBudgetTransactions",
    "AuditLedger",
    "RecordDeductionCommandDTO",
    "RecordAdjustmentCommandDTO",
    "BudgetTransactionResponseDTO",
    "TransactionDTO",
    "ListTransactionsResponseDTO",
    "LedgerDiscrepancyDTO",
    "LedgerAuditResultDTO",
]
