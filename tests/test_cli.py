from __future__ import annotations

import pytest

from savings_tracker.cli import main


@pytest.fixture
def run(tmp_path, capsys, monkeypatch):
    data_dir = str(tmp_path / "data")
    monkeypatch.setattr("savings_tracker.cli.configure_logging", lambda level: None)

    def _run(*argv):
        code = main(["--data-dir", data_dir, "--log-level", "WARNING", *argv])
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    return _run


def test_totals_on_fresh_ledger(run):
    code, out, _ = run("totals")

    assert code == 0
    assert "Total savings: ₱0.00" in out
    assert "Remaining balance: ₱0.00" in out


def test_add_money_and_spend(run):
    assert run("money", "add", "gcash", "0", "500")[0] == 0
    code, out, _ = run("expense", "add", "Groceries", "200", "Food", "--paid-from", "GCash", "--date", "2024-06-01")

    assert code == 0
    assert "Expense added successfully!" in out
    assert "Paid from: GCash" in out

    code, out, _ = run("totals", "--accounts")
    assert "Total spent: ₱200.00" in out
    assert "Remaining balance: ₱300.00" in out
    assert "GCash: ₱300.00" in out


def test_blocked_withdrawal_returns_error_code(run):
    code, _, err = run("money", "remove", "cash", "0", "10")

    assert code == 1
    assert "Blocked" in err


def test_category_lifecycle(run):
    assert run("category", "add", "seabank", "SeaBank - Trip")[0] == 0
    code, out, _ = run("category", "list", "seabank")
    assert "1. SeaBank - Trip ₱0.00" in out

    code, _, err = run("category", "add", "seabank", "SeaBank - Trip")
    assert code == 1
    assert "Validation error" in err

    assert run("category", "delete", "seabank", "1")[0] == 0


def test_expense_list_and_delete(run):
    run("money", "add", "cash", "0", "50")
    run("expense", "add", "Bus", "15", "Transport", "--account", "cash", "--date", "2024-06-01")

    code, out, _ = run("expense", "list", "--category", "Transport")
    assert code == 0
    assert "Found 1 expenses (total ₱15.00)" in out
    expense_id = out.split("[", 1)[1].split("]", 1)[0]

    assert run("expense", "delete", expense_id)[0] == 0
    code, out, _ = run("expense", "list")
    assert "No expenses found." in out
    code, out, _ = run("expense", "delete", expense_id)
    assert code == 0
    assert "nothing deleted" in out
