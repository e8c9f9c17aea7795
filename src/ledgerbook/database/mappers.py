"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so string columns become the
domain enums in exactly one place.
"""

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    User as ORMUser,
    JournalEntry as ORMJournalEntry,
    Movement as ORMMovement,
    CashCount as ORMCashCount,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        subtype=domain.AccountSubtype(orm_account.subtype) if orm_account.subtype else None,
        nature=domain.AccountNature(orm_account.nature),
        active=orm_account.active,
        created_at=orm_account.created_at,
    )


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        username=orm_user.username,
        password_hash=orm_user.password_hash,
        created_at=orm_user.created_at,
    )


def movement_to_domain(orm_movement: ORMMovement) -> domain.Movement:
    """Convert SQLAlchemy Movement model to domain Movement entity."""
    return domain.Movement(
        id=orm_movement.id,
        entry_id=orm_movement.entry_id,
        account_id=orm_movement.account_id,
        debit=orm_movement.debit,
        credit=orm_movement.credit,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        sequence_number=orm_entry.sequence_number,
        date=orm_entry.date,
        memo=orm_entry.memo,
        created_by=orm_entry.created_by,
        created_at=orm_entry.created_at,
        movements=tuple(movement_to_domain(m) for m in orm_entry.movements),
    )


def movement_line_to_domain(
    orm_movement: ORMMovement, orm_entry: ORMJournalEntry, orm_account: ORMAccount
) -> domain.MovementLine:
    """Build a MovementLine from a movement and its joined entry and account."""
    return domain.MovementLine(
        movement_id=orm_movement.id,
        sequence_number=orm_entry.sequence_number,
        date=orm_entry.date,
        memo=orm_entry.memo,
        account_id=orm_account.id,
        account_code=orm_account.code,
        account_name=orm_account.name,
        account_type=domain.AccountType(orm_account.type),
        account_subtype=domain.AccountSubtype(orm_account.subtype) if orm_account.subtype else None,
        account_nature=domain.AccountNature(orm_account.nature),
        debit=orm_movement.debit,
        credit=orm_movement.credit,
    )


def cash_count_to_domain(orm_count: ORMCashCount) -> domain.CashCount:
    """Convert SQLAlchemy CashCount model to domain CashCount entity."""
    # Bills first, then coins, each from the largest value down
    rows = sorted(
        orm_count.denominations,
        key=lambda row: (row.kind != domain.CashKind.BILL.value, -row.denomination),
    )
    quantities = {
        domain.Denomination(domain.CashKind(row.kind), row.denomination): row.quantity
        for row in rows
    }
    return domain.CashCount(
        id=orm_count.id,
        user_id=orm_count.user_id,
        counted_at=orm_count.counted_at,
        system_balance=orm_count.system_balance,
        physical_total=orm_count.physical_total,
        difference=orm_count.difference,
        notes=orm_count.notes,
        quantities=quantities,
    )
