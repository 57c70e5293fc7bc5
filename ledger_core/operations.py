"""Reducers that keep accounts and the expense log consistent with each other.

Spending touches two places at once: a category balance and the expense log.
The functions here validate everything first and then build the new state in
one go, so callers only ever see the state before or the state after.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Tuple, Union

from . import accounts, expenses
from .exceptions import AccountNotFoundError, InsufficientBalanceError
from .models import ACCOUNT_LABELS, ACCOUNT_TYPES, Category, CategoryRef, Expense, LedgerState, ZERO

__all__ = ["PaidFrom", "create_expense", "remove_expense", "seed_default_state"]

logger = logging.getLogger(__name__)

# Either a display name ("GCash - Groceries") or a structured (account, index) pick.
PaidFrom = Union[str, Tuple[str, int], CategoryRef]


def seed_default_state() -> LedgerState:
    """State used on first run: one empty category per account, named after it."""
    return LedgerState(
        accounts={
            account: (Category(name=ACCOUNT_LABELS[account], balance=ZERO),)
            for account in ACCOUNT_TYPES
        }
    )


def _locate(state: LedgerState, paid_from: PaidFrom) -> Tuple[str, int]:
    if isinstance(paid_from, CategoryRef):
        located = accounts.resolve_reference(state, paid_from)
        if located is None:
            raise AccountNotFoundError(
                f"Category '{paid_from.name}' no longer exists in {paid_from.account_type}"
            )
        return located
    if isinstance(paid_from, str):
        return accounts.find_category_by_full_name(state, paid_from)
    if isinstance(paid_from, (tuple, list)) and len(paid_from) == 2:
        account_type, index = paid_from
        account, position, _ = accounts.get_category(state, account_type, index)
        return account, position
    raise AccountNotFoundError("Please select a valid account")


def create_expense(
    state: LedgerState,
    name: object,
    amount: object,
    spend_category: object,
    paid_from: PaidFrom,
    when: object,
    now_ms: int,
) -> Tuple[LedgerState, Expense]:
    """Record an expense and deduct it from the category that paid for it."""
    account, position = _locate(state, paid_from)
    # Validate the remaining fields up front so the deduction never runs alone.
    _, value, _, _ = expenses.validate_expense_fields(name, amount, spend_category, when)
    category = state.categories(account)[position]
    if category.balance < value:
        raise InsufficientBalanceError(
            f"Not enough balance in '{category.name}': balance {category.balance:.2f}, needed {value:.2f}"
        )

    ref = CategoryRef(account_type=account, name=category.name)
    debited = replace(
        state,
        accounts=accounts.replace_category(
            state, account, position, replace(category, balance=category.balance - value)
        ),
    )
    new_state, expense = expenses.record(
        debited,
        name,
        value,
        spend_category,
        ref,
        when,
        expenses.next_expense_id(state, now_ms),
    )
    logger.info("Recorded expense %s (%.2f) paid from %r", expense.id, expense.amount, ref.name)
    return new_state, expense


def remove_expense(
    state: LedgerState, expense_id: object
) -> Tuple[LedgerState, Optional[Expense], bool]:
    """Delete an expense and give its amount back to the paying category.

    Returns ``(state, expense, refunded)``. An unknown id is a no-op. When the
    paying category no longer exists the refund is dropped.
    """
    expense = expenses.find_expense(state, expense_id)
    if expense is None:
        logger.debug("Expense %s not found; nothing to delete", expense_id)
        return state, None, False

    refunded = False
    credited = state
    located = accounts.resolve_reference(state, expense.paid_from)
    if located is not None:
        account, position = located
        category = state.categories(account)[position]
        credited = replace(
            state,
            accounts=accounts.replace_category(
                state, account, position, replace(category, balance=category.balance + expense.amount)
            ),
        )
        refunded = True
    else:
        logger.warning(
            "Category %r for expense %s no longer exists; %.2f was not refunded",
            expense.paid_from.name,
            expense.id,
            expense.amount,
        )

    new_state, _ = expenses.delete(credited, expense.id)
    return new_state, expense, refunded
