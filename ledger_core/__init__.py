"""Core business logic package for the savings ledger."""

from .exceptions import (
    AccountNotFoundError,
    InsufficientBalanceError,
    InvalidAmountError,
    NonZeroBalanceError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from .models import ACCOUNT_LABELS, ACCOUNT_TYPES, Category, CategoryRef, Expense, LedgerState
from .presenter import LoggingPresenter, Notification, NotificationKind, Presenter, RecordingPresenter
from .services import LedgerService
from .storage import JSONStorage, LedgerRepository
from .totals import Totals

__all__ = [
    "ACCOUNT_LABELS",
    "ACCOUNT_TYPES",
    "AccountNotFoundError",
    "Category",
    "CategoryRef",
    "Expense",
    "InsufficientBalanceError",
    "InvalidAmountError",
    "JSONStorage",
    "LedgerRepository",
    "LedgerService",
    "LedgerState",
    "LoggingPresenter",
    "NonZeroBalanceError",
    "Notification",
    "NotificationKind",
    "PersistenceError",
    "Presenter",
    "RecordNotFoundError",
    "RecordingPresenter",
    "Totals",
    "ValidationError",
]
