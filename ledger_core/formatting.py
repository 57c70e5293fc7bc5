"""Display helpers: money with two decimals and a symbol prefix, ISO dates."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Union

from .models import ACCOUNT_TYPES, LedgerState

DEFAULT_CURRENCY_SYMBOL = "₱"


def format_money(value: Union[Decimal, int, str], symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if amount < 0:
        return f"-{symbol}{-amount:.2f}"
    return f"{symbol}{amount:.2f}"


def format_date(value: date) -> str:
    return value.isoformat()


def paid_from_options(state: LedgerState, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> List[Dict[str, object]]:
    """Categories that can pay for an expense, in account order.

    Each option carries the structured selection (``account_type`` and
    ``index``) alongside the display name and a label such as
    ``"GCash (₱500.00)"``.
    """
    options: List[Dict[str, object]] = []
    for account in ACCOUNT_TYPES:
        for index, category in enumerate(state.categories(account)):
            options.append(
                {
                    "account_type": account,
                    "index": index,
                    "value": category.name,
                    "label": f"{category.name} ({format_money(category.balance, symbol)})",
                }
            )
    return options
