"""Data models for the savings ledger domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Tuple

__all__ = [
    "ACCOUNT_LABELS",
    "ACCOUNT_TYPES",
    "ZERO",
    "Category",
    "CategoryRef",
    "Expense",
    "LedgerState",
    "parse_date",
]

# Order matters: it drives the paid-from selector and the fallback name scan.
ACCOUNT_TYPES: Tuple[str, ...] = ("gcash", "seabank", "cash")

ACCOUNT_LABELS: Dict[str, str] = {
    "gcash": "GCash",
    "seabank": "SeaBank",
    "cash": "Cash",
}

ZERO = Decimal("0.00")


def parse_date(value: str) -> date:
    """Parse an ISO calendar date (YYYY-MM-DD)."""
    return date.fromisoformat(value.strip())


@dataclass(frozen=True)
class Category:
    name: str
    balance: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "balance": f"{self.balance:.2f}"}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(name=data["name"], balance=Decimal(str(data.get("balance", "0"))))


@dataclass(frozen=True)
class CategoryRef:
    """Points an expense at the savings category that paid for it.

    The reference is by name, not position, so it is re-resolved whenever it
    is used and keeps working after other categories are inserted or removed.
    """

    account_type: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"account_type": self.account_type, "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryRef":
        return cls(account_type=data["account_type"], name=data["name"])


@dataclass(frozen=True)
class Expense:
    id: int
    name: str
    amount: Decimal
    category: str
    paid_from: CategoryRef
    date: date

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "name": self.name,
            "amount": f"{self.amount:.2f}",
            "category": self.category,
            "paid_from": self.paid_from.to_dict(),
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data."""
        return cls(
            id=int(data["id"]),
            name=data["name"],
            amount=Decimal(str(data["amount"])),
            category=data["category"],
            paid_from=CategoryRef.from_dict(data["paid_from"]),
            date=parse_date(data["date"]),
        )


@dataclass(frozen=True)
class LedgerState:
    """Complete, immutable snapshot of the ledger.

    Operations never modify a state in place; they return a new one. The
    ``accounts`` mapping is treated as read-only by every caller.
    """

    accounts: Mapping[str, Tuple[Category, ...]] = field(
        default_factory=lambda: {account: () for account in ACCOUNT_TYPES}
    )
    expenses: Tuple[Expense, ...] = ()
    total_money_added: Decimal = ZERO
    total_money_removed: Decimal = ZERO

    def categories(self, account_type: str) -> Tuple[Category, ...]:
        return tuple(self.accounts.get(account_type, ()))

    def with_categories(
        self, account_type: str, categories: Tuple[Category, ...]
    ) -> Dict[str, Tuple[Category, ...]]:
        """Return a copy of ``accounts`` with one account's categories replaced."""
        accounts = dict(self.accounts)
        accounts[account_type] = tuple(categories)
        return accounts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accounts": {
                account: [category.to_dict() for category in categories]
                for account, categories in self.accounts.items()
            },
            "expenses": [expense.to_dict() for expense in self.expenses],
            "total_money_added": f"{self.total_money_added:.2f}",
            "total_money_removed": f"{self.total_money_removed:.2f}",
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedgerState":
        raw_accounts: Dict[str, List[Dict[str, Any]]] = data.get("accounts", {})
        accounts = {account: () for account in ACCOUNT_TYPES}
        for account, records in raw_accounts.items():
            accounts[account] = tuple(Category.from_dict(record) for record in records)
        return cls(
            accounts=accounts,
            expenses=tuple(Expense.from_dict(record) for record in data.get("expenses", [])),
            total_money_added=Decimal(str(data.get("total_money_added", "0"))),
            total_money_removed=Decimal(str(data.get("total_money_removed", "0"))),
        )
