"""Flask REST API exposing the savings ledger service."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from ledger_core.config import Settings
from ledger_core.exceptions import (
    AccountNotFoundError,
    InsufficientBalanceError,
    NonZeroBalanceError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from ledger_core.expenses import ALL_CATEGORIES
from ledger_core.models import ACCOUNT_LABELS, ACCOUNT_TYPES
from ledger_core.presenter import RecordingPresenter
from ledger_core.services import LedgerService
from ledger_core.storage import JSONStorage, LedgerRepository


def create_app(data_dir: Optional[Path] = None, settings: Optional[Settings] = None) -> Flask:
    app = Flask(__name__)
    settings = settings or Settings.from_env()

    if settings.is_development:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": settings.allowed_origins}}, supports_credentials=True)
    else:
        CORS(app)

    storage = JSONStorage(Path(data_dir or settings.data_dir))
    presenter = RecordingPresenter()
    ledger = LedgerService(
        LedgerRepository(storage), presenter, currency_symbol=settings.currency_symbol
    )
    app.extensions["ledger"] = ledger

    def _success(payload: Any, status: int = 200):
        notification = presenter.last.to_dict() if presenter.notifications else None
        presenter.clear()
        if status == 204:
            return ("", status)
        if isinstance(payload, dict) and notification:
            payload = {**payload, "notification": notification}
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        presenter.clear()
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(AccountNotFoundError)
    def handle_account_not_found(exc: AccountNotFoundError):
        return _handle_error(exc, 404, "Account not found")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(InsufficientBalanceError)
    def handle_insufficient_balance(exc: InsufficientBalanceError):
        return _handle_error(exc, 409, "Insufficient balance")

    @app.errorhandler(NonZeroBalanceError)
    def handle_non_zero_balance(exc: NonZeroBalanceError):
        return _handle_error(exc, 409, "Category still holds money")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _paid_from(payload: Dict[str, Any]):
        selection = payload.get("paid_from")
        if isinstance(selection, dict):
            return (selection.get("account_type"), selection.get("index"))
        return selection

    @app.get("/state")
    def get_state():
        return _success(ledger.snapshot())

    @app.get("/totals")
    def get_totals():
        return _success(ledger.totals().to_dict())

    @app.get("/accounts")
    def list_accounts():
        subtotals = ledger.account_subtotals()
        items = [
            {
                "account_type": account,
                "label": ACCOUNT_LABELS[account],
                "balance": f"{subtotals.get(account, 0):.2f}",
                "categories": [category.to_dict() for category in ledger.state.categories(account)],
            }
            for account in ACCOUNT_TYPES
        ]
        return _success({"items": items})

    @app.post("/accounts/<account_type>/categories")
    def create_category(account_type: str):
        payload = _json_body()
        category = ledger.add_category(account_type, payload.get("name"))
        return _success(category.to_dict(), 201)

    @app.delete("/accounts/<account_type>/categories/<int:index>")
    def delete_category(account_type: str, index: int):
        ledger.delete_category(account_type, index)
        return _success({}, 204)

    @app.post("/accounts/<account_type>/categories/<int:index>/deposit")
    def deposit(account_type: str, index: int):
        payload = _json_body()
        category = ledger.add_money(account_type, index, payload.get("amount"))
        return _success(category.to_dict())

    @app.post("/accounts/<account_type>/categories/<int:index>/withdraw")
    def withdraw(account_type: str, index: int):
        payload = _json_body()
        category = ledger.remove_money(account_type, index, payload.get("amount"))
        return _success(category.to_dict())

    @app.get("/paid-from")
    def list_paid_from():
        return _success({"items": ledger.paid_from_options()})

    @app.get("/expenses")
    def list_expenses():
        category = request.args.get("category") or ALL_CATEGORIES
        view = ledger.list_expenses(category)
        return _success({
            "items": [expense.to_dict() for expense in view],
            "total": f"{view.total():.2f}",
            "categories": ledger.spend_categories(),
        })

    @app.post("/expenses")
    def create_expense():
        payload = _json_body()
        expense = ledger.add_expense(
            payload.get("name"),
            payload.get("amount"),
            payload.get("category"),
            _paid_from(payload),
            payload.get("date"),
        )
        return _success(expense.to_dict(), 201)

    @app.get("/expenses/<int:expense_id>")
    def get_expense(expense_id: int):
        expense = ledger.get_expense(expense_id)
        return _success(expense.to_dict())

    @app.delete("/expenses/<int:expense_id>")
    def delete_expense(expense_id: int):
        ledger.delete_expense(expense_id)
        return _success({}, 204)

    return app
