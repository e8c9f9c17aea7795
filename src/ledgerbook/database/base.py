"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

from ledgerbook.domain.entities import (
    Account,
    AccountNature,
    AccountSubtype,
    AccountType,
    CashCount,
    Denomination,
    JournalEntry,
    MovementInput,
    MovementLine,
    User,
)


class Database(ABC):
    """Abstract ledger store for ledgerbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        type: AccountType,
        nature: AccountNature,
        subtype: Optional[AccountSubtype] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by code."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        active: Optional[bool] = None,
        type: Optional[AccountType] = None,
        subtype: Optional[AccountSubtype] = None,
    ) -> list[Account]:
        """List accounts ordered by code, optionally filtered."""
        pass

    @abstractmethod
    def set_account_active(self, account_id: int, active: bool) -> None:
        """Activate or deactivate an account."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, username: str, password_hash: str) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List users ordered by username."""
        pass

    # Journal operations
    @abstractmethod
    def append_journal_entry(
        self,
        date: date,
        memo: str,
        created_by: int,
        movements: list[MovementInput],
    ) -> int:
        """Atomically insert an entry with its movements.

        The next sequence number is assigned inside the same transaction.
        Nothing is persisted if any insert fails.

        Returns:
            The assigned sequence number

        Raises:
            StoreError: If the transaction failed and was rolled back
        """
        pass

    @abstractmethod
    def get_journal_entry(self, sequence_number: int) -> Optional[JournalEntry]:
        """Get journal entry by sequence number."""
        pass

    @abstractmethod
    def list_journal_entries(self) -> list[JournalEntry]:
        """List journal entries, newest sequence number first."""
        pass

    @abstractmethod
    def list_movement_lines(self, account_id: Optional[int] = None) -> list[MovementLine]:
        """List movements joined with entry and account data.

        Ordered by account code, then entry sequence number, then movement ID.
        """
        pass

    # Cash count operations
    @abstractmethod
    def create_cash_count(
        self,
        user_id: int,
        system_balance: Decimal,
        physical_total: Decimal,
        difference: Decimal,
        quantities: dict[Denomination, int],
        notes: Optional[str] = None,
    ) -> int:
        """Store a cash count with its denomination quantities. Returns ID."""
        pass

    @abstractmethod
    def get_cash_count(self, count_id: int) -> Optional[CashCount]:
        """Get cash count by ID."""
        pass

    @abstractmethod
    def list_cash_counts(self, limit: Optional[int] = None) -> list[CashCount]:
        """List cash counts, newest first."""
        pass
