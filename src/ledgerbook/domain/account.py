"""Account domain service."""

import logging
from typing import Optional
from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    ALLOWED_SUBTYPES,
    Account as AccountEntity,
    AccountNature,
    AccountSubtype,
    AccountType,
)
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_code_not_found,
    account_not_found,
    duplicate_account_code,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        code: str,
        name: str,
        type: AccountType | str,
        nature: AccountNature | str,
        subtype: Optional[AccountSubtype | str] = None,
    ) -> int:
        """Create a new account.

        Args:
            code: Unique account code (e.g., "1101")
            name: Account name
            type: Account type
            nature: Debtor or creditor
            subtype: Subtype allowed for the type, if any

        Returns:
            Account ID

        Raises:
            ValidationError: If a field is blank, the type/subtype combination is
                invalid or an asset, liability or expense account has no subtype
            ConflictError: If the code already exists
        """
        code = code.strip()
        name = name.strip()
        if not code:
            raise ValidationError("Account code is required")
        if not name:
            raise ValidationError("Account name is required")

        try:
            account_type = AccountType(type)
            account_nature = AccountNature(nature)
            account_subtype = AccountSubtype(subtype) if subtype else None
        except ValueError as e:
            raise ValidationError(str(e)) from e

        allowed = ALLOWED_SUBTYPES[account_type]
        if account_subtype is None and allowed:
            choices = ", ".join(sorted(s.value for s in allowed))
            raise ValidationError(
                f"{account_type.value.capitalize()} accounts need a subtype ({choices})"
            )
        if account_subtype is not None and account_subtype not in allowed:
            raise ValidationError(
                f"Subtype '{account_subtype.value}' is not valid for {account_type.value} accounts"
            )

        if self.db.get_account_by_code(code) is not None:
            raise ConflictError(duplicate_account_code(code))

        account_id = self.db.create_account(
            code=code,
            name=name,
            type=account_type,
            nature=account_nature,
            subtype=account_subtype,
        )
        logger.debug("Created account %s '%s'", code, name)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def get_account_by_code(self, code: str) -> Optional[AccountEntity]:
        """Get account by code."""
        return self.db.get_account_by_code(code)

    def list_accounts(
        self,
        active: Optional[bool] = True,
        type: Optional[AccountType | str] = None,
        subtype: Optional[AccountSubtype | str] = None,
    ) -> list[AccountEntity]:
        """List accounts ordered by code.

        Args:
            active: True for active accounts only (default), False for inactive
                only, None for all
            type: Optional account type filter
            subtype: Optional subtype filter

        Returns:
            List of account entities
        """
        return self.db.list_accounts(
            active=active,
            type=AccountType(type) if type else None,
            subtype=AccountSubtype(subtype) if subtype else None,
        )

    def resolve_account(self, account: str | int) -> AccountEntity:
        """Resolve an account by code, falling back to numeric ID.

        Raises:
            NotFoundError: If no account matches
        """
        if isinstance(account, int):
            found = self.db.get_account(account)
            if found is None:
                raise NotFoundError(account_not_found(account))
            return found

        found = self.db.get_account_by_code(account.strip())
        if found is not None:
            return found

        try:
            account_id = int(account)
        except (ValueError, TypeError):
            raise NotFoundError(account_code_not_found(account))

        found = self.db.get_account(account_id)
        if found is None:
            raise NotFoundError(account_code_not_found(account))
        return found

    def deactivate_account(self, account_id: int) -> None:
        """Deactivate an account. Accounts are never deleted.

        Raises:
            NotFoundError: If account not found
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        self.db.set_account_active(account_id, False)
        logger.info("Deactivated account %s", account.code)

    def activate_account(self, account_id: int) -> None:
        """Reactivate a deactivated account.

        Raises:
            NotFoundError: If account not found
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        self.db.set_account_active(account_id, True)
