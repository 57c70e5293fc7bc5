"""Ordered log of recorded expenses."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterator, List, Optional, Tuple

from .models import CategoryRef, Expense, LedgerState, ZERO
from .validators import parse_amount, validate_date, validate_required_str

__all__ = [
    "ALL_CATEGORIES",
    "ExpenseView",
    "delete",
    "filter_by_category",
    "find_expense",
    "next_expense_id",
    "record",
    "spend_categories",
    "sum_amounts",
    "validate_expense_fields",
]

ALL_CATEGORIES = "All"


class ExpenseView:
    """Lazy, restartable view over the expenses of one spending category.

    Iterating twice walks the underlying tuple twice; nothing is copied or
    cached, and insertion order is kept.
    """

    def __init__(self, expenses: Tuple[Expense, ...], category: str = ALL_CATEGORIES) -> None:
        self._expenses = expenses
        self._category = category

    @property
    def category(self) -> str:
        return self._category

    def __iter__(self) -> Iterator[Expense]:
        if self._category == ALL_CATEGORIES:
            return iter(self._expenses)
        return (expense for expense in self._expenses if expense.category == self._category)

    def __bool__(self) -> bool:
        return any(True for _ in self)

    def total(self) -> Decimal:
        return sum((expense.amount for expense in self), start=ZERO)

    def __repr__(self) -> str:
        return f"ExpenseView(category={self._category!r})"


def validate_expense_fields(
    name: object, amount: object, spend_category: object, when: object
) -> Tuple[str, Decimal, str, date]:
    """Validate every user-supplied expense field before anything is mutated."""
    return (
        validate_required_str(name, "name", 100),
        parse_amount(amount, "amount"),
        validate_required_str(spend_category, "category", 50),
        validate_date(when, "date"),
    )


def record(
    state: LedgerState,
    name: object,
    amount: object,
    spend_category: object,
    paid_from: CategoryRef,
    when: object,
    expense_id: int,
) -> Tuple[LedgerState, Expense]:
    """Append an expense to the log.

    The balance deduction is the orchestrator's job; see
    :func:`ledger_core.operations.create_expense`.
    """
    clean_name, value, clean_category, clean_date = validate_expense_fields(
        name, amount, spend_category, when
    )
    expense = Expense(
        id=expense_id,
        name=clean_name,
        amount=value,
        category=clean_category,
        paid_from=paid_from,
        date=clean_date,
    )
    return replace(state, expenses=state.expenses + (expense,)), expense


def delete(state: LedgerState, expense_id: object) -> Tuple[LedgerState, Optional[Expense]]:
    expense = find_expense(state, expense_id)
    if expense is None:
        return state, None
    remaining = tuple(item for item in state.expenses if item.id != expense.id)
    return replace(state, expenses=remaining), expense


def _coerce_id(expense_id: object) -> Optional[int]:
    # Only whole ids: 12.9 must not match expense 12.
    if isinstance(expense_id, bool):
        return None
    if isinstance(expense_id, int):
        return expense_id
    if isinstance(expense_id, str) and expense_id.strip().isdecimal():
        return int(expense_id.strip())
    return None


def find_expense(state: LedgerState, expense_id: object) -> Optional[Expense]:
    wanted = _coerce_id(expense_id)
    if wanted is None:
        return None
    for expense in state.expenses:
        if expense.id == wanted:
            return expense
    return None


def sum_amounts(state: LedgerState) -> Decimal:
    return sum((expense.amount for expense in state.expenses), start=ZERO)


def filter_by_category(state: LedgerState, spend_category: str = ALL_CATEGORIES) -> ExpenseView:
    return ExpenseView(state.expenses, spend_category or ALL_CATEGORIES)


def spend_categories(state: LedgerState) -> List[str]:
    seen: List[str] = []
    for expense in state.expenses:
        if expense.category not in seen:
            seen.append(expense.category)
    return seen


def next_expense_id(state: LedgerState, now_ms: int) -> int:
    """Timestamp-based id that still grows when the clock stalls or goes backwards."""
    last = max((expense.id for expense in state.expenses), default=0)
    return max(int(now_ms), last + 1)
