"""Journal entry validation and domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import JournalEntry, MovementInput
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_inactive,
    account_not_found,
    entry_not_found,
    unbalanced_entry,
    user_not_found,
)

logger = logging.getLogger(__name__)

# Maximum accepted difference between total debits and total credits
BALANCE_TOLERANCE = Decimal("0.01")


def validate_entry(
    entry_date: Optional[date],
    memo: Optional[str],
    movements: Sequence[MovementInput],
) -> None:
    """Check that a proposed journal entry may be accepted.

    Args:
        entry_date: Entry date
        memo: Entry description
        movements: Proposed debit/credit lines

    Raises:
        ValidationError: Naming the first violated rule
    """
    if entry_date is None:
        raise ValidationError("Entry date is required")
    if memo is None or not memo.strip():
        raise ValidationError("Entry memo is required")
    if not movements:
        raise ValidationError("Entry must have at least one movement")

    for index, movement in enumerate(movements, start=1):
        if movement.account_id is None:
            raise ValidationError(f"Movement {index} has no account")
        if movement.debit < 0 or movement.credit < 0:
            raise ValidationError(f"Movement {index} has a negative amount")

    total_debit = sum((m.debit for m in movements), Decimal("0"))
    total_credit = sum((m.credit for m in movements), Decimal("0"))
    if abs(total_debit - total_credit) > BALANCE_TOLERANCE:
        raise ValidationError(unbalanced_entry(total_debit, total_credit))


class JournalService:
    """Service for recording and reading journal entries."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_entry(
        self,
        entry_date: Optional[date],
        memo: Optional[str],
        movements: Sequence[MovementInput],
        created_by: int,
    ) -> int:
        """Validate and store a journal entry.

        Args:
            entry_date: Entry date
            memo: Entry description
            movements: Debit/credit lines, kept in the given order
            created_by: ID of the user recording the entry

        Returns:
            Assigned sequence number

        Raises:
            ValidationError: If the entry is incomplete, negative, unbalanced or
                posts to an inactive account
            NotFoundError: If an account or the user does not exist
            StoreError: If the store failed; nothing is persisted
        """
        validate_entry(entry_date, memo, movements)

        for movement in movements:
            account = self.db.get_account(movement.account_id)
            if account is None:
                raise NotFoundError(account_not_found(movement.account_id))
            if not account.active:
                raise ValidationError(account_inactive(account.code))

        if self.db.get_user(created_by) is None:
            raise NotFoundError(user_not_found(created_by))

        sequence_number = self.db.append_journal_entry(
            date=entry_date,
            memo=memo.strip(),
            created_by=created_by,
            movements=list(movements),
        )
        logger.info("Accepted journal entry %d (%s)", sequence_number, memo.strip())
        return sequence_number

    def get_entry(self, sequence_number: int) -> JournalEntry:
        """Get a journal entry by sequence number.

        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = self.db.get_journal_entry(sequence_number)
        if entry is None:
            raise NotFoundError(entry_not_found(sequence_number))
        return entry

    def list_entries(self) -> list[JournalEntry]:
        """List journal entries, newest first."""
        return self.db.list_journal_entries()
