"""Savings accounts and their categorized balances.

Every function takes a :class:`LedgerState` and returns a new one; nothing is
modified in place. Validation happens before the new state is built, so a
failing call leaves the caller's state untouched.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Tuple

from .exceptions import (
    AccountNotFoundError,
    InsufficientBalanceError,
    NonZeroBalanceError,
    ValidationError,
)
from .models import ACCOUNT_TYPES, Category, CategoryRef, LedgerState, ZERO
from .validators import (
    parse_amount,
    validate_account_type,
    validate_index,
    validate_required_str,
)

__all__ = [
    "FULL_NAME_SEPARATOR",
    "add_category",
    "delete_category",
    "deposit",
    "find_category_by_full_name",
    "get_category",
    "replace_category",
    "resolve_reference",
    "withdraw",
]

logger = logging.getLogger(__name__)

FULL_NAME_SEPARATOR = " - "
CATEGORY_NAME_MAX_LENGTH = 60


def get_category(state: LedgerState, account_type: str, index: object) -> Tuple[str, int, Category]:
    account = validate_account_type(account_type)
    categories = state.categories(account)
    position = validate_index(index, categories)
    return account, position, categories[position]


def add_category(state: LedgerState, account_type: str, name: object) -> Tuple[LedgerState, Category]:
    account = validate_account_type(account_type)
    cleaned = validate_required_str(name, "name", CATEGORY_NAME_MAX_LENGTH)
    categories = state.categories(account)
    if any(category.name == cleaned for category in categories):
        raise ValidationError(f"Category '{cleaned}' already exists in {account}")

    category = Category(name=cleaned, balance=ZERO)
    new_state = replace(state, accounts=state.with_categories(account, categories + (category,)))
    logger.debug("Added category %r to %s", cleaned, account)
    return new_state, category


def delete_category(state: LedgerState, account_type: str, index: object) -> Tuple[LedgerState, Category]:
    account, position, category = get_category(state, account_type, index)
    if category.balance != ZERO:
        raise NonZeroBalanceError(
            f"Cannot delete '{category.name}' while it holds a balance of {category.balance:.2f}"
        )
    categories = state.categories(account)
    remaining = categories[:position] + categories[position + 1:]
    logger.debug("Deleted category %r from %s", category.name, account)
    return replace(state, accounts=state.with_categories(account, remaining)), category


def deposit(state: LedgerState, account_type: str, index: object, amount: object) -> LedgerState:
    """Add money to a category; the only way the lifetime inflow grows."""
    value = parse_amount(amount)
    account, position, category = get_category(state, account_type, index)
    updated = replace(category, balance=category.balance + value)
    return replace(
        state,
        accounts=replace_category(state, account, position, updated),
        total_money_added=state.total_money_added + value,
    )


def withdraw(state: LedgerState, account_type: str, index: object, amount: object) -> LedgerState:
    """Take money out of a category without recording an expense."""
    value = parse_amount(amount)
    account, position, category = get_category(state, account_type, index)
    if value > category.balance:
        raise InsufficientBalanceError(
            f"Not enough money in '{category.name}': balance {category.balance:.2f}, requested {value:.2f}"
        )
    updated = replace(category, balance=category.balance - value)
    return replace(
        state,
        accounts=replace_category(state, account, position, updated),
        total_money_removed=state.total_money_removed + value,
    )


def find_category_by_full_name(state: LedgerState, full_name: object) -> Tuple[str, int]:
    """Resolve a display name such as ``"GCash - Groceries"`` to ``(account, index)``.

    The text before the first separator names the account. Default categories
    carry the bare account label (``"GCash"``). Names that do not follow the
    convention are found by scanning the accounts in order.
    """
    if not isinstance(full_name, str) or not full_name.strip():
        raise AccountNotFoundError("Please select a valid account")
    target = full_name.strip()
    prefix = target.split(FULL_NAME_SEPARATOR, 1)[0].strip().lower()

    candidates = [prefix] if prefix in ACCOUNT_TYPES else []
    candidates.extend(account for account in ACCOUNT_TYPES if account != prefix)
    for account in candidates:
        position = _index_of(state, account, target)
        if position is not None:
            return account, position
    raise AccountNotFoundError(f"No savings category named '{target}'")


def resolve_reference(state: LedgerState, ref: CategoryRef) -> Optional[Tuple[str, int]]:
    """Look up where ``ref`` currently lives, or ``None`` if it was deleted."""
    position = _index_of(state, ref.account_type, ref.name)
    if position is None:
        return None
    return ref.account_type, position


def _index_of(state: LedgerState, account_type: str, name: str) -> Optional[int]:
    for position, category in enumerate(state.categories(account_type)):
        if category.name == name:
            return position
    return None


def replace_category(state: LedgerState, account: str, position: int, category: Category):
    categories = list(state.categories(account))
    categories[position] = category
    return state.with_categories(account, tuple(categories))
