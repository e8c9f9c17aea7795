"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class StoreError(DomainError):
    """The ledger store failed and the in-flight transaction was rolled back."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_not_found(code: str) -> str:
    """Return message for missing account by code."""
    return f"Account '{code}' not found"


def account_inactive(code: str) -> str:
    """Return message for postings against a deactivated account."""
    return f"Account '{code}' is inactive and cannot receive movements"


def duplicate_account_code(code: str) -> str:
    """Return message for duplicate account code."""
    return f"Account with code '{code}' already exists"


def entry_not_found(sequence_number: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {sequence_number} not found"


def user_not_found(user: int | str) -> str:
    """Return message for missing user."""
    return f"User '{user}' not found"


def duplicate_username(username: str) -> str:
    """Return message for duplicate username."""
    return f"User '{username}' already exists"


def cash_count_not_found(count_id: int) -> str:
    """Return message for missing cash count."""
    return f"Cash count {count_id} not found"


def unbalanced_entry(total_debit: Decimal, total_credit: Decimal) -> str:
    """Return message when debits and credits differ."""
    return (
        f"Debits and credits must be equal "
        f"(debit {total_debit:.2f}, credit {total_credit:.2f})"
    )
