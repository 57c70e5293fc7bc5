"""Figures derived from the ledger state; nothing here is stored."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict

from .expenses import sum_amounts
from .models import LedgerState, ZERO


@dataclass(frozen=True)
class Totals:
    total_spent: Decimal
    remaining_balance: Decimal
    total_saved: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {
            "total_spent": f"{self.total_spent:.2f}",
            "remaining_balance": f"{self.remaining_balance:.2f}",
            "total_saved": f"{self.total_saved:.2f}",
        }


def compute_totals(state: LedgerState) -> Totals:
    spent = sum_amounts(state)
    saved = state.total_money_added
    return Totals(total_spent=spent, remaining_balance=saved - spent, total_saved=saved)


def account_subtotals(state: LedgerState) -> Dict[str, Decimal]:
    """Sum of category balances per account."""
    return {
        account: sum((category.balance for category in categories), start=ZERO)
        for account, categories in state.accounts.items()
    }


def held_balance(state: LedgerState) -> Decimal:
    return sum(account_subtotals(state).values(), start=ZERO)


def conservation_gap(state: LedgerState) -> Decimal:
    """Money unaccounted for: zero whenever the ledger is consistent.

    Only a refund dropped because its category was deleted makes this
    non-zero; such a gap is positive.
    """
    expected = state.total_money_added - state.total_money_removed - sum_amounts(state)
    return expected - held_balance(state)
