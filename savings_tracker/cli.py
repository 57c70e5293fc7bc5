"""Console interface for the savings ledger."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from ledger_core.config import Settings, configure_logging
from ledger_core.exceptions import (
    AccountNotFoundError,
    InsufficientBalanceError,
    NonZeroBalanceError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from ledger_core.expenses import ALL_CATEGORIES
from ledger_core.formatting import format_date, format_money
from ledger_core.models import ACCOUNT_LABELS, ACCOUNT_TYPES, Expense
from ledger_core.presenter import Notification, NotificationKind, Presenter
from ledger_core.services import LedgerService
from ledger_core.storage import JSONStorage, LedgerRepository


class ConsolePresenter(Presenter):
    """Prints success banners; failures are reported by `main` as they propagate."""

    def notify(self, notification: Notification) -> None:
        if notification.kind is NotificationKind.SUCCESS:
            print(notification.message)


def _parse_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if not amount.is_finite() or amount <= 0:
        raise argparse.ArgumentTypeError("Amount must be greater than zero")
    return value


def _load_service(data_dir: Path, settings: Settings) -> LedgerService:
    storage = JSONStorage(data_dir)
    return LedgerService(
        LedgerRepository(storage), ConsolePresenter(), currency_symbol=settings.currency_symbol
    )


def _format_expense(expense: Expense, symbol: str) -> str:
    return (
        f"[{expense.id}] {format_date(expense.date)} {expense.name} "
        f"{format_money(expense.amount, symbol)}\n"
        f"  Category: {expense.category} | Paid from: {expense.paid_from.name}"
    )


def handle_category(args: argparse.Namespace, service: LedgerService, symbol: str) -> None:
    if args.command == "add":
        service.add_category(args.account, args.name)
    elif args.command == "delete":
        service.delete_category(args.account, args.index)
    elif args.command == "list":
        accounts = [args.account.lower()] if args.account else list(ACCOUNT_TYPES)
        for account in accounts:
            print(f"{ACCOUNT_LABELS.get(account, account)}:")
            categories = service.state.categories(account)
            if not categories:
                print("  No categories yet.")
            for index, category in enumerate(categories):
                print(f"  {index}. {category.name} {format_money(category.balance, symbol)}")


def handle_money(args: argparse.Namespace, service: LedgerService, symbol: str) -> None:
    if args.command == "add":
        category = service.add_money(args.account, args.index, args.amount)
    else:
        category = service.remove_money(args.account, args.index, args.amount)
    print(f"{category.name}: {format_money(category.balance, symbol)}")


def handle_expense(args: argparse.Namespace, service: LedgerService, symbol: str) -> None:
    if args.command == "add":
        paid_from = (args.account, args.index) if args.account else args.paid_from
        if not paid_from:
            raise ValidationError("Provide --paid-from or --account with --index")
        expense = service.add_expense(args.name, args.amount, args.category, paid_from, args.date)
        print(_format_expense(expense, symbol))
    elif args.command == "list":
        view = service.list_expenses(args.category or ALL_CATEGORIES)
        if not view:
            print("No expenses found.")
            return
        items = list(view)
        print(f"Found {len(items)} expenses (total {format_money(view.total(), symbol)}):")
        for expense in items:
            print(_format_expense(expense, symbol))
    elif args.command == "delete":
        service.delete_expense(args.id)


def handle_totals(args: argparse.Namespace, service: LedgerService, symbol: str) -> None:
    totals = service.totals()
    print(f"Total savings: {format_money(totals.total_saved, symbol)}")
    print(f"Total spent: {format_money(totals.total_spent, symbol)}")
    print(f"Remaining balance: {format_money(totals.remaining_balance, symbol)}")
    if args.accounts:
        for account, subtotal in service.account_subtotals().items():
            print(f"  {ACCOUNT_LABELS.get(account, account)}: {format_money(subtotal, symbol)}")


def build_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    settings = settings or Settings.from_env()
    parser = argparse.ArgumentParser(description="Savings ledger CLI")
    parser.add_argument(
        "--data-dir",
        default=settings.data_dir,
        type=Path,
        help="Directory to store JSON data (default: ./data)",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")

    subparsers = parser.add_subparsers(dest="entity", required=True)

    category_parser = subparsers.add_parser("category", help="Manage savings categories")
    category_sub = category_parser.add_subparsers(dest="command", required=True)

    category_add = category_sub.add_parser("add", help="Add a category to an account")
    category_add.add_argument("account", choices=ACCOUNT_TYPES)
    category_add.add_argument("name")

    category_delete = category_sub.add_parser("delete", help="Delete an empty category")
    category_delete.add_argument("account", choices=ACCOUNT_TYPES)
    category_delete.add_argument("index", type=int)

    category_list = category_sub.add_parser("list", help="List categories and balances")
    category_list.add_argument("account", nargs="?", choices=ACCOUNT_TYPES)

    money_parser = subparsers.add_parser("money", help="Move money in or out of a category")
    money_sub = money_parser.add_subparsers(dest="command", required=True)
    for command, help_text in (("add", "Add money"), ("remove", "Remove money")):
        money_cmd = money_sub.add_parser(command, help=help_text)
        money_cmd.add_argument("account", choices=ACCOUNT_TYPES)
        money_cmd.add_argument("index", type=int)
        money_cmd.add_argument("amount", type=_parse_amount)

    expense_parser = subparsers.add_parser("expense", help="Manage expenses")
    expense_sub = expense_parser.add_subparsers(dest="command", required=True)

    expense_add = expense_sub.add_parser("add", help="Record a new expense")
    expense_add.add_argument("name")
    expense_add.add_argument("amount", type=_parse_amount)
    expense_add.add_argument("category")
    expense_add.add_argument("--paid-from", help="Category display name, e.g. 'GCash - Groceries'")
    expense_add.add_argument("--account", choices=ACCOUNT_TYPES)
    expense_add.add_argument("--index", type=int, default=0)
    expense_add.add_argument("--date", type=_parse_date, default=date.today().isoformat())

    expense_list = expense_sub.add_parser("list", help="List expenses")
    expense_list.add_argument("--category", default=ALL_CATEGORIES)

    expense_delete = expense_sub.add_parser("delete", help="Delete an expense")
    expense_delete.add_argument("id", type=int)

    totals_parser = subparsers.add_parser("totals", help="Show savings, spending and remaining balance")
    totals_parser.add_argument("--accounts", action="store_true", help="Include per-account balances")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    symbol = settings.currency_symbol

    try:
        service = _load_service(args.data_dir, settings)
        if args.entity == "category":
            handle_category(args, service, symbol)
        elif args.entity == "money":
            handle_money(args, service, symbol)
        elif args.entity == "expense":
            handle_expense(args, service, symbol)
        elif args.entity == "totals":
            handle_totals(args, service, symbol)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except (ValidationError, AccountNotFoundError) as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except (InsufficientBalanceError, NonZeroBalanceError) as exc:
        print(f"Blocked: {exc}", file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
