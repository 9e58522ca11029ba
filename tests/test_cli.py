"""Tests for the Typer CLI."""

import pytest
from typer.testing import CliRunner

from receipt_split.cli import app
from receipt_split.exceptions import StorageError, ValidationError

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(tmp_path, monkeypatch):
    """Point the CLI at temporary storage."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "data" / "cli.db"))
    monkeypatch.setenv("RECEIPTS_DIR", str(tmp_path / "data" / "receipts"))
    monkeypatch.setenv("REPORTS_DIR", str(tmp_path / "data" / "reports"))
    monkeypatch.delenv("ROSTER", raising=False)
    return tmp_path


def add_dinner(receipt_photo, *extra):
    return runner.invoke(
        app,
        [
            "add",
            "--description", "Cena",
            "--amount", "90",
            "--paid-by", "Juan",
            "-p", "Juan", "-p", "María", "-p", "Pedro",
            "--receipt", str(receipt_photo),
            "--yes",
            *extra,
        ],
    )


def test_users():
    result = runner.invoke(app, ["users"])

    assert result.exit_code == 0
    assert "Juan" in result.output
    assert "María" in result.output


class TestAdd:
    """Tests for the add command."""

    def test_records_expense(self, receipt_photo):
        result = add_dinner(receipt_photo)

        assert result.exit_code == 0, result.output
        assert "Expense recorded" in result.output

        listing = runner.invoke(app, ["list"])
        assert "Cena" in listing.output
        assert "$90.00" in listing.output

    def test_missing_receipt(self, cli_env):
        result = runner.invoke(
            app,
            [
                "add", "-d", "Taxi", "-a", "20", "--paid-by", "1",
                "-p", "1", "-p", "2", "-r", str(cli_env / "nope.jpg"), "--yes",
            ],
        )

        assert result.exit_code == 1
        assert "Receipt photo not found" in result.output

    def test_unknown_user(self, receipt_photo):
        result = runner.invoke(
            app,
            [
                "add", "-d", "Taxi", "-a", "20", "--paid-by", "Lucía",
                "-p", "1", "-r", str(receipt_photo), "--yes",
            ],
        )

        assert result.exit_code == 1
        assert "Unknown user" in result.output

    def test_unknown_user_verbose_reraises(self, receipt_photo):
        result = runner.invoke(
            app,
            [
                "add", "-d", "Taxi", "-a", "20", "--paid-by", "Lucía",
                "-p", "1", "-r", str(receipt_photo), "--yes", "--verbose",
            ],
        )

        assert result.exit_code == 1
        assert isinstance(result.exception, ValidationError)
        assert "Unknown user" in str(result.exception)

    def test_declined_confirmation(self, receipt_photo):
        result = runner.invoke(
            app,
            [
                "add", "-d", "Taxi", "-a", "20", "--paid-by", "1",
                "-p", "1", "-p", "2", "-r", str(receipt_photo),
            ],
            input="n\n",
        )

        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert "No expenses recorded" in runner.invoke(app, ["list"]).output


def test_balance(receipt_photo):
    add_dinner(receipt_photo)

    result = runner.invoke(app, ["balance"])

    assert result.exit_code == 0
    assert "María owes Juan" in result.output
    assert "Pedro owes Juan" in result.output
    assert "$30.00" in result.output


def test_balance_without_expenses():
    result = runner.invoke(app, ["balance"])

    assert result.exit_code == 0
    assert "No expenses to calculate" in result.output


def test_report(receipt_photo, cli_env):
    add_dinner(receipt_photo)
    output = cli_env / "report.pdf"

    result = runner.invoke(app, ["report", "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert output.read_bytes().startswith(b"%PDF")


def test_gallery(receipt_photo):
    add_dinner(receipt_photo)

    result = runner.invoke(app, ["gallery"])

    assert result.exit_code == 0
    assert "Cena" in result.output
    assert "missing" not in result.output


def test_clear(receipt_photo):
    add_dinner(receipt_photo)

    result = runner.invoke(app, ["clear", "--yes"])

    assert result.exit_code == 0
    assert "No expenses recorded" in runner.invoke(app, ["list"]).output


class TestCorruptDatabase:
    """A database file that is not SQLite fails cleanly."""

    @pytest.fixture(autouse=True)
    def corrupt_db(self, cli_env):
        path = cli_env / "data" / "cli.db"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"this is not a sqlite database\n" * 50)
        return path

    def test_list_reports_error(self):
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "Could not open database" in result.output

    def test_add_reports_error(self, receipt_photo):
        result = add_dinner(receipt_photo)

        assert result.exit_code == 1
        assert "Could not open database" in result.output

    def test_verbose_reraises(self):
        result = runner.invoke(app, ["balance", "--verbose"])

        assert result.exit_code == 1
        assert isinstance(result.exception, StorageError)
