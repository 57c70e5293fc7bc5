from __future__ import annotations

import json
from decimal import Decimal

import pytest

from ledger_core.exceptions import (
    AccountNotFoundError,
    InsufficientBalanceError,
    NonZeroBalanceError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from ledger_core.presenter import NotificationKind, RecordingPresenter
from ledger_core.services import LedgerService
from ledger_core.storage import LedgerRepository
from ledger_core.totals import conservation_gap


def test_first_run_seeds_and_saves_defaults(service, storage):
    saved = json.loads((storage.base_path / "savings_categories.json").read_text(encoding="utf-8"))

    assert saved == {
        "gcash": [{"name": "GCash", "balance": "0.00"}],
        "seabank": [{"name": "SeaBank", "balance": "0.00"}],
        "cash": [{"name": "Cash", "balance": "0.00"}],
    }
    assert service.totals().total_saved == 0


def test_deposit_spend_and_undo_scenario(service, presenter):
    service.add_money("gcash", 0, "500")
    assert service.state.categories("gcash")[0].balance == Decimal("500")
    assert service.state.total_money_added == Decimal("500")

    expense = service.add_expense("Groceries", "200", "Food", "GCash", "2024-06-01")
    totals = service.totals()
    assert service.state.categories("gcash")[0].balance == Decimal("300")
    assert totals.total_spent == Decimal("200")
    assert totals.remaining_balance == Decimal("300")
    assert presenter.last.message == "Expense added successfully!"

    service.delete_expense(expense.id)
    totals = service.totals()
    assert service.state.categories("gcash")[0].balance == Decimal("500")
    assert totals.total_spent == 0
    assert totals.total_saved == Decimal("500")


def test_every_change_is_written_through(service, repository):
    service.add_money("seabank", 0, "75.10")
    service.add_category("seabank", "SeaBank - Travel")
    service.add_expense("Coffee", "5.10", "Food", "SeaBank", "2024-06-03")

    reloaded = LedgerService(repository, RecordingPresenter())

    assert reloaded.state == service.state
    assert reloaded.totals() == service.totals()


def test_withdraw_too_much_is_blocked(service, presenter):
    service.add_money("gcash", 0, 500)

    with pytest.raises(InsufficientBalanceError):
        service.remove_money("gcash", 0, 600)

    assert service.state.categories("gcash")[0].balance == Decimal("500")
    assert presenter.last.kind is NotificationKind.BLOCKED


def test_delete_category_requires_zero_balance(service, presenter):
    service.add_category("cash", "Cash - Jar")
    service.add_money("cash", 1, 50)

    with pytest.raises(NonZeroBalanceError):
        service.delete_category("cash", 1)
    assert presenter.last.kind is NotificationKind.BLOCKED

    service.remove_money("cash", 1, 50)
    removed = service.delete_category("cash", 1)

    assert removed.name == "Cash - Jar"
    assert presenter.last.message == "Category deleted successfully!"
    assert service.state.total_money_added == Decimal("50")


def test_duplicate_category_is_a_validation_failure(service, presenter):
    service.add_category("gcash", "GCash - Groceries")

    with pytest.raises(ValidationError):
        service.add_category("gcash", "GCash - Groceries")

    assert presenter.last.kind is NotificationKind.VALIDATION_FAILURE
    assert len(service.state.categories("gcash")) == 2


def test_unknown_paid_from_is_a_validation_failure(service, presenter):
    with pytest.raises(AccountNotFoundError):
        service.add_expense("Lunch", "10", "Food", "GCash - Missing", "2024-06-01")
    assert presenter.last.kind is NotificationKind.VALIDATION_FAILURE


def test_deleting_missing_expense_notifies_without_changes(service, presenter):
    before = service.state
    presenter.clear()

    assert service.delete_expense(123) is None
    assert service.state is before
    assert presenter.last.kind is NotificationKind.SUCCESS
    assert presenter.last.message == "Expense 123 not found; nothing deleted."



def test_get_expense_raises_for_unknown_id(service):
    with pytest.raises(RecordNotFoundError):
        service.get_expense(1)


def test_list_expenses_filters_by_spending_category(service):
    service.add_money("cash", 0, 100)
    service.add_expense("Lunch", "10", "Food", "Cash", "2024-06-01")
    service.add_expense("Bus", "5", "Transport", "Cash", "2024-06-01")

    assert [e.name for e in service.list_expenses("Food")] == ["Lunch"]
    assert [e.name for e in service.list_expenses()] == ["Lunch", "Bus"]
    assert service.spend_categories() == ["Food", "Transport"]


def test_dropped_refund_is_reported(service, presenter):
    service.add_category("gcash", "GCash - Gift")
    service.add_money("gcash", 1, 40)
    expense = service.add_expense("Gift", "40", "Gifts", "GCash - Gift", "2024-06-01")
    service.delete_category("gcash", 1)

    service.delete_expense(expense.id)

    assert "nothing was refunded" in presenter.last.message
    assert service.state.expenses == ()


def test_paid_from_options(service):
    service.add_money("gcash", 0, 500)

    options = service.paid_from_options()

    assert options[0] == {
        "account_type": "gcash",
        "index": 0,
        "value": "GCash",
        "label": "GCash (₱500.00)",
    }
    assert [option["value"] for option in options] == ["GCash", "SeaBank", "Cash"]


class FlakyRepository(LedgerRepository):
    def __init__(self, storage):
        super().__init__(storage)
        self.fail = False

    def save(self, state):
        if self.fail:
            raise PersistenceError("disk full")
        super().save(state)


def test_failed_save_keeps_in_memory_state(storage, presenter):
    repository = FlakyRepository(storage)
    service = LedgerService(repository, presenter)
    repository.fail = True

    with pytest.raises(PersistenceError):
        service.add_money("gcash", 0, 10)

    assert service.state.total_money_added == Decimal("10")
    assert LedgerRepository(storage).load().total_money_added == 0

    repository.fail = False
    service.add_money("gcash", 0, 5)
    assert LedgerRepository(storage).load().total_money_added == Decimal("15")


def test_logging_presenter_is_the_default(repository, caplog):
    service = LedgerService(repository)

    with caplog.at_level("INFO", logger="ledger_core.presenter"):
        service.add_money("cash", 0, 5)
        with pytest.raises(InsufficientBalanceError):
            service.remove_money("cash", 0, 50)

    messages = [record.getMessage() for record in caplog.records if record.name == "ledger_core.presenter"]
    assert len(messages) == 2
    assert messages[0] == "[success] Money added successfully!"
    assert messages[1].startswith("[blocked] Not enough money")


def test_failed_expense_save_keeps_disk_consistent(service, repository, storage):
    service.add_money("gcash", 0, 500)
    (storage.base_path / "savings_categories.json.tmp").mkdir()

    with pytest.raises(PersistenceError):
        service.add_expense("TV", "200", "Home", "GCash", "2024-06-01")

    reloaded = LedgerService(repository, RecordingPresenter())
    assert reloaded.state.expenses == ()
    assert reloaded.state.categories("gcash")[0].balance == Decimal("500")
    assert conservation_gap(reloaded.state) == 0


def test_missing_categories_are_reseeded_without_losing_expenses(service, repository, storage):
    service.add_money("gcash", 0, 500)
    expense = service.add_expense("Groceries", "200", "Food", "GCash", "2024-06-01")
    (storage.base_path / "savings_categories.json").unlink()

    reloaded = LedgerService(repository, RecordingPresenter())

    assert reloaded.state.expenses == (expense,)
    assert reloaded.state.total_money_added == Decimal("500")
    assert [c.name for c in reloaded.state.categories("gcash")] == ["GCash"]
    assert reloaded.state.categories("gcash")[0].balance == 0
    assert (storage.base_path / "savings_categories.json").exists()
