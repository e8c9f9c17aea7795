"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerbook.config import ReportSettings
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.cash_count import CashCountService
from ledgerbook.domain.entities import MovementInput
from ledgerbook.domain.journal import JournalService
from ledgerbook.domain.reports import ReportService
from ledgerbook.domain.user import UserService

# Keeps password hashing fast in tests
TEST_ITERATIONS = 1_000


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with default settings."""
    return ReportService(temp_db, ReportSettings())


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with cheap password hashing."""
    return UserService(temp_db, iterations=TEST_ITERATIONS)


@pytest.fixture
def cash_count_service(temp_db):
    """Create a CashCountService with default settings."""
    return CashCountService(temp_db, ReportSettings())


@pytest.fixture
def sample_user(user_service):
    """Create a sample user for testing."""
    user_id = user_service.create_user(username="admin", password="secreto")
    return user_service.get_user(user_id)


@pytest.fixture
def chart(account_service):
    """Create the default chart of accounts and return accounts by code."""
    from ledgerbook.cli.commands.init_accounts import DEFAULT_CHART

    for code, name, account_type, subtype, nature in DEFAULT_CHART:
        account_service.create_account(
            code=code, name=name, type=account_type, nature=nature, subtype=subtype
        )
    return {acc.code: acc for acc in account_service.list_accounts(active=None)}


@pytest.fixture
def post(journal_service, chart, sample_user):
    """Return a helper that records an entry from (code, debit, credit) tuples."""

    def _post(lines, memo="Test entry", entry_date=date(2024, 1, 15)):
        movements = [
            MovementInput(
                account_id=chart[code].id,
                debit=Decimal(str(debit)),
                credit=Decimal(str(credit)),
            )
            for code, debit, credit in lines
        ]
        return journal_service.create_entry(
            entry_date=entry_date, memo=memo, movements=movements, created_by=sample_user.id
        )

    return _post


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
