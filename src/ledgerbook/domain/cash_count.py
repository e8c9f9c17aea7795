"""Cash count (arqueo de caja) domain service."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from ledgerbook.config import ReportSettings
from ledgerbook.database.base import Database
from ledgerbook.domain.entities import CashCount, CashKind, Denomination
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    cash_count_not_found,
    user_not_found,
)
from ledgerbook.domain.reports import ReportService

logger = logging.getLogger(__name__)

BILLS = tuple(Denomination(CashKind.BILL, Decimal(v)) for v in ("1000", "500", "200", "100", "50", "20"))
COINS = tuple(Denomination(CashKind.COIN, Decimal(v)) for v in ("20", "10", "5", "2", "1", "0.50"))
DENOMINATIONS = BILLS + COINS

DEFAULT_HISTORY_LIMIT = 10


def parse_denomination(text: str | Denomination) -> Denomination:
    """Resolve "bill:20", "coin:0.50" or a bare value used by only one kind.

    Raises:
        ValidationError: If the denomination is unknown or a bare value names
            both a bill and a coin
    """
    raw = str(text).strip()
    kind_text, sep, value_text = raw.rpartition(":")
    try:
        value = Decimal(value_text.strip())
    except InvalidOperation:
        raise ValidationError(f"Unknown denomination {raw}")

    if sep:
        try:
            kind = CashKind(kind_text.strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown denomination {raw}")
        matches = [d for d in DENOMINATIONS if d.kind == kind and d.value == value]
    else:
        matches = [d for d in DENOMINATIONS if d.value == value]

    if not matches:
        raise ValidationError(f"Unknown denomination {raw}")
    if len(matches) > 1:
        raise ValidationError(
            f"Denomination {raw} is both a bill and a coin; use bill:{raw} or coin:{raw}"
        )
    return matches[0]


def physical_total(quantities: Mapping[Denomination, int]) -> Decimal:
    """Sum of denomination value times quantity."""
    return sum((d.value * q for d, q in quantities.items()), Decimal("0"))


class CashCountService:
    """Service for recording physical cash counts against the ledger."""

    def __init__(self, db: Database, settings: Optional[ReportSettings] = None):
        """Initialize cash count service.

        Args:
            db: Database instance
            settings: Settings naming the cash account
        """
        self.db = db
        self.settings = settings or ReportSettings()
        self.reports = ReportService(db, self.settings)

    def system_balance(self) -> Decimal:
        """Ledger balance of the cash account.

        Raises:
            NotFoundError: If the cash account does not exist
        """
        return self.reports.account_balance(self.settings.cash_account_code)

    def record_count(
        self,
        user_id: int,
        quantities: Mapping[Denomination | str, int],
        notes: Optional[str] = None,
    ) -> int:
        """Record a physical count.

        Args:
            user_id: ID of the user counting
            quantities: Quantity per denomination, keyed by Denomination or by
                text such as "bill:20", "coin:20" or "500"
            notes: Optional observations

        Returns:
            Cash count ID

        Raises:
            ValidationError: If a denomination is unknown or a quantity is negative
            NotFoundError: If the user or the cash account does not exist
        """
        normalized: dict[Denomination, int] = {}
        for raw_denomination, quantity in quantities.items():
            denomination = parse_denomination(raw_denomination)
            if int(quantity) != quantity or quantity < 0:
                raise ValidationError(
                    f"Quantity for {raw_denomination} must be a non-negative whole number"
                )
            if quantity:
                normalized[denomination] = normalized.get(denomination, 0) + int(quantity)

        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

        system = self.system_balance()
        counted = physical_total(normalized)
        difference = counted - system
        count_id = self.db.create_cash_count(
            user_id=user_id,
            system_balance=system,
            physical_total=counted,
            difference=difference,
            quantities=normalized,
            notes=notes.strip() if notes and notes.strip() else None,
        )
        if difference:
            logger.warning("Cash count %d differs from the ledger by %s", count_id, difference)
        return count_id

    def get_count(self, count_id: int) -> CashCount:
        """Get a cash count.

        Raises:
            NotFoundError: If the count does not exist
        """
        count = self.db.get_cash_count(count_id)
        if count is None:
            raise NotFoundError(cash_count_not_found(count_id))
        return count

    def history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[CashCount]:
        """Most recent cash counts, newest first."""
        return self.db.list_cash_counts(limit=limit)
