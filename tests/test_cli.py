"""Tests for the command line interface."""

import json

import pytest

from ledgerbook.cli.main import cli


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Run the CLI against the temporary database."""

    def _invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)

    return _invoke


def test_help_does_not_touch_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "reconcile" in result.output


def test_whoami_creates_default_user(invoke):
    result = invoke("user", "whoami")

    assert result.exit_code == 0
    assert "local@localhost" in result.output


def test_user_option_selects_user(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", "Ana@Example.com", "user", "whoami"]
    )

    assert "ana@example.com" in result.output


class TestAccountCommands:
    def test_create_and_list(self, invoke):
        result = invoke("account", "create", "1001", "Checking", "--type", "asset", "--balance", "1,000.00")
        assert result.exit_code == 0
        assert "Created account 'Checking'" in result.output

        result = invoke("account", "list")
        assert result.exit_code == 0
        assert "Checking" in result.output
        assert "1,000.00 USD" in result.output

    def test_list_empty(self, invoke):
        result = invoke("account", "list")

        assert result.exit_code == 0
        assert "No accounts found" in result.output

    def test_duplicate_code(self, invoke):
        invoke("account", "create", "1001", "Checking")
        result = invoke("account", "create", "1001", "Again")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_recompute_balance(self, invoke, temp_db):
        invoke("account", "create", "1001", "Checking", "--type", "asset", "--balance", "1000")
        account = temp_db.get_account_by_code("1001")

        result = invoke("account", "recompute", str(account.id))

        assert result.exit_code == 0
        assert "Account balance updated from 1,000.00 to 0.00" in result.output

        result = invoke("account", "balance", str(account.id))
        assert result.output.strip() == "0.00 USD"


class TestLedgerCommands:
    @pytest.fixture
    def accounts(self, invoke):
        invoke("account", "create", "1001", "Checking", "--type", "asset", "--balance", "1000")
        invoke("account", "create", "6100", "Groceries", "--type", "expense")

    def test_reconcile(self, invoke, accounts, temp_db):
        account = temp_db.get_account_by_code("1001")

        result = invoke("reconcile", str(account.id), "1100", "--date", "2024-03-31")

        assert result.exit_code == 0
        assert "Reconciled: 1,000.00 -> 1,100.00" in result.output

        result = invoke("reconcile", str(account.id), "1100")
        assert "Account is already reconciled" in result.output

    def test_reconcile_missing_account(self, invoke, accounts):
        result = invoke("reconcile", "999", "5")

        assert result.exit_code == 1
        assert "Error: Account 999 not found" in result.output

    def test_import_then_assign(self, invoke, accounts, temp_db, tmp_path):
        account = temp_db.get_account_by_code("1001")
        statement = {
            "account_id": account.id,
            "statement_date": "2024-01-31",
            "opening_balance": "1000.00",
            "closing_balance": "955.00",
            "transactions": [
                {"date": "2024-01-10", "description": "Market", "amount": "-45.00"},
            ],
        }
        path = tmp_path / "statement.json"
        path.write_text(json.dumps(statement))

        result = invoke("import", str(path))
        assert result.exit_code == 0
        assert "Imported 1 transactions" in result.output

        result = invoke("assign", "list", "1001")
        assert "1 incomplete transaction" in result.output
        txn_id = temp_db.list_incomplete_transactions("1001")[0].id

        result = invoke("assign", "leg", str(txn_id), "6100", "--debit")
        assert result.exit_code == 0

        result = invoke("assign", "leg", str(txn_id), "6100", "--debit")
        assert result.exit_code == 1
        assert "Debit account is already assigned" in result.output

    def test_import_unbalanced(self, invoke, accounts, temp_db, tmp_path):
        account = temp_db.get_account_by_code("1001")
        path = tmp_path / "statement.json"
        path.write_text(
            json.dumps(
                {
                    "account_id": account.id,
                    "statement_date": "2024-01-31",
                    "opening_balance": 1000,
                    "closing_balance": 2000,
                    "transactions": [{"date": "2024-01-10", "description": "x", "amount": 5}],
                }
            )
        )

        result = invoke("import", str(path))

        assert result.exit_code == 1
        assert "Statement doesn't balance" in result.output

    def test_transaction_add_and_reports(self, invoke, accounts):
        result = invoke(
            "transaction", "add", "--amount", "20", "--debit", "6100", "--credit", "1001",
            "--name", "Market", "--date", "2024-01-10",
        )
        assert result.exit_code == 0

        result = invoke("report", "pnl", "--start-date", "2024-01-01", "--end-date", "2024-01-31")
        assert result.exit_code == 0
        assert "Net profit: -20.00" in result.output

        result = invoke("report", "trial-balance")
        assert result.exit_code == 0
        assert "Balanced" in result.output

    def test_period_and_dates_conflict(self, invoke, accounts):
        result = invoke("report", "balance-sheet", "--period", "this-year", "--start-date", "2024-01-01")

        assert result.exit_code == 1
