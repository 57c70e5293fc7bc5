"""Framework-agnostic ledger service used by the API and the console."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from . import accounts, expenses, operations
from .exceptions import (
    AccountNotFoundError,
    InsufficientBalanceError,
    NonZeroBalanceError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from .expenses import ALL_CATEGORIES, ExpenseView
from .formatting import DEFAULT_CURRENCY_SYMBOL, paid_from_options
from .models import Category, Expense, LedgerState
from .presenter import LoggingPresenter, Notification, NotificationKind, Presenter
from .storage import LedgerRepository
from .totals import Totals, account_subtotals, compute_totals

logger = logging.getLogger(__name__)

T = TypeVar("T")

_BLOCKING_ERRORS = (InsufficientBalanceError, NonZeroBalanceError)
_VALIDATION_ERRORS = (ValidationError, AccountNotFoundError)


def _now_ms() -> int:
    return int(time.time() * 1000)


class LedgerService:
    """Owns the current ledger state and writes it through on every change."""

    def __init__(
        self,
        repository: LedgerRepository,
        presenter: Optional[Presenter] = None,
        *,
        clock: Callable[[], int] = _now_ms,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    ) -> None:
        self._repository = repository
        self._presenter = presenter or LoggingPresenter()
        self._clock = clock
        self._currency_symbol = currency_symbol
        self._state = LedgerState()
        self.load()  # Hydrate in-memory state from persistence on construction.

    # Public API -----------------------------------------------------------
    @property
    def state(self) -> LedgerState:
        return self._state

    def add_expense(
        self,
        name: object,
        amount: object,
        category: object,
        paid_from: operations.PaidFrom,
        date: object,
    ) -> Expense:
        return self._apply(
            lambda state: operations.create_expense(
                state, name, amount, category, paid_from, date, self._clock()
            ),
            "Expense added successfully!",
        )

    def delete_expense(self, expense_id: object) -> Optional[Expense]:
        """Delete an expense and refund its category; unknown ids change nothing."""
        new_state, expense, refunded = operations.remove_expense(self._state, expense_id)
        if expense is None:
            self._notify(NotificationKind.SUCCESS, f"Expense {expense_id} not found; nothing deleted.")
            return None
        self._commit(new_state)
        message = "Expense deleted successfully!"
        if not refunded:
            message = f"Expense deleted; '{expense.paid_from.name}' no longer exists so nothing was refunded."
        self._notify(NotificationKind.SUCCESS, message)
        return expense

    def add_money(self, account_type: str, index: object, amount: object) -> Category:
        def step(state: LedgerState) -> Tuple[LedgerState, Category]:
            new_state = accounts.deposit(state, account_type, index, amount)
            return new_state, accounts.get_category(new_state, account_type, index)[2]

        return self._apply(step, "Money added successfully!")

    def remove_money(self, account_type: str, index: object, amount: object) -> Category:
        def step(state: LedgerState) -> Tuple[LedgerState, Category]:
            new_state = accounts.withdraw(state, account_type, index, amount)
            return new_state, accounts.get_category(new_state, account_type, index)[2]

        return self._apply(step, "Money removed successfully!")

    def add_category(self, account_type: str, name: object) -> Category:
        return self._apply(
            lambda state: accounts.add_category(state, account_type, name),
            "Category added successfully!",
        )

    def delete_category(self, account_type: str, index: object) -> Category:
        return self._apply(
            lambda state: accounts.delete_category(state, account_type, index),
            "Category deleted successfully!",
        )

    def get_expense(self, expense_id: object) -> Expense:
        expense = expenses.find_expense(self._state, expense_id)
        if expense is None:
            raise RecordNotFoundError(f"Expense {expense_id} not found")
        return expense

    def list_expenses(self, category: str = ALL_CATEGORIES) -> ExpenseView:
        return expenses.filter_by_category(self._state, category)

    def spend_categories(self) -> List[str]:
        return expenses.spend_categories(self._state)

    def totals(self) -> Totals:
        return compute_totals(self._state)

    def account_subtotals(self) -> Dict[str, Decimal]:
        return account_subtotals(self._state)

    def paid_from_options(self) -> List[Dict[str, object]]:
        return paid_from_options(self._state, self._currency_symbol)

    def snapshot(self) -> Dict[str, object]:
        """Return serialisable snapshot useful for testing or exports."""
        payload = self._state.to_dict()
        payload["totals"] = self.totals().to_dict()
        return payload

    def load(self) -> None:
        """Load the ledger from persistence, seeding defaults on first run."""
        stored = self._repository.load()
        if stored is None or not stored.accounts:
            # Only the categories are seeded; saved expenses and counters stay.
            logger.info("No saved categories found; seeding default categories")
            base = stored or LedgerState()
            self._state = replace(base, accounts=operations.seed_default_state().accounts)
            self._persist()
        else:
            self._state = stored

    reload = load

    # Internal helpers -----------------------------------------------------
    def _apply(self, step: Callable[[LedgerState], Tuple[LedgerState, T]], message: str) -> T:
        try:
            new_state, result = step(self._state)
        except _BLOCKING_ERRORS as exc:
            self._notify(NotificationKind.BLOCKED, str(exc))
            raise
        except _VALIDATION_ERRORS as exc:
            self._notify(NotificationKind.VALIDATION_FAILURE, str(exc))
            raise
        self._commit(new_state)
        self._notify(NotificationKind.SUCCESS, message)
        return result

    def _commit(self, new_state: LedgerState) -> None:
        # In-memory state stays authoritative even when the save below fails.
        self._state = new_state
        self._persist()

    def _persist(self) -> None:
        try:
            self._repository.save(self._state)
        except PersistenceError:
            logger.error("Saving the ledger failed; keeping in-memory state")
            raise

    def _notify(self, kind: NotificationKind, message: str) -> None:
        self._presenter.notify(Notification(kind=kind, message=message))
