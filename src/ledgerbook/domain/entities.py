"""Domain model entities for ledgerbook.

These are pure data classes representing bookkeeping concepts, independent of
the database schema. Report results are also plain frozen dataclasses so the
report engine stays a set of pure functions.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Top-level classification of an account."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"


class AccountNature(str, Enum):
    """Side on which an account naturally increases."""

    DEBTOR = "debtor"
    CREDITOR = "creditor"


class AccountSubtype(str, Enum):
    """Second-level classification used to bucket report sections."""

    CIRCULATING = "circulating"
    NON_CIRCULATING = "non_circulating"
    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"
    COST_OF_SALES = "cost_of_sales"
    OPERATING = "operating"


# Subtypes each account type accepts. A type with a non-empty set requires one
# of them; types mapped to an empty set take none.
ALLOWED_SUBTYPES: dict[AccountType, frozenset[AccountSubtype]] = {
    AccountType.ASSET: frozenset({AccountSubtype.CIRCULATING, AccountSubtype.NON_CIRCULATING}),
    AccountType.LIABILITY: frozenset({AccountSubtype.SHORT_TERM, AccountSubtype.LONG_TERM}),
    AccountType.EQUITY: frozenset(),
    AccountType.INCOME: frozenset(),
    AccountType.EXPENSE: frozenset({AccountSubtype.COST_OF_SALES, AccountSubtype.OPERATING}),
}


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    id: int
    code: str
    name: str
    type: AccountType
    subtype: Optional[AccountSubtype]
    nature: AccountNature
    active: bool
    created_at: datetime


@dataclass(frozen=True)
class User:
    """Registered user, referenced as the author of entries."""

    id: int
    username: str
    password_hash: str
    created_at: datetime


@dataclass(frozen=True)
class MovementInput:
    """One proposed debit/credit line of a journal entry."""

    account_id: Optional[int]
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")


@dataclass(frozen=True)
class Movement:
    """Stored movement belonging to a journal entry."""

    id: int
    entry_id: int
    account_id: int
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class JournalEntry:
    """Stored journal entry with its movements."""

    id: int
    sequence_number: int
    date: date
    memo: str
    created_by: int
    created_at: datetime
    movements: tuple[Movement, ...] = ()

    @property
    def total_debit(self) -> Decimal:
        return sum((m.debit for m in self.movements), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((m.credit for m in self.movements), Decimal("0"))


@dataclass(frozen=True)
class MovementLine:
    """Movement joined with its entry and account, as read by the reports."""

    movement_id: int
    sequence_number: int
    date: date
    memo: str
    account_id: int
    account_code: str
    account_name: str
    account_type: AccountType
    account_subtype: Optional[AccountSubtype]
    account_nature: AccountNature
    debit: Decimal
    credit: Decimal


class CashKind(str, Enum):
    """Physical form of a denomination."""

    BILL = "bill"
    COIN = "coin"


@dataclass(frozen=True)
class Denomination:
    """A bill or coin value. The 20 bill and the 20 coin are distinct."""

    kind: CashKind
    value: Decimal

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"


@dataclass(frozen=True)
class CashCount:
    """Physical cash count compared against the ledger's cash balance."""

    id: int
    user_id: int
    counted_at: datetime
    system_balance: Decimal
    physical_total: Decimal
    difference: Decimal
    notes: Optional[str]
    quantities: dict[Denomination, int] = field(default_factory=dict)


# Report results


@dataclass(frozen=True)
class LedgerLine:
    """Movement row of a general ledger account."""

    sequence_number: int
    date: date
    memo: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal


@dataclass(frozen=True)
class LedgerAccount:
    """General ledger section for one account."""

    account_code: str
    account_name: str
    lines: tuple[LedgerLine, ...]
    final_balance: Decimal


@dataclass(frozen=True)
class TrialBalanceRow:
    """Trial balance figures for one account (or the totals row)."""

    account_code: str
    account_name: str
    total_debit: Decimal
    total_credit: Decimal
    debtor_balance: Decimal
    creditor_balance: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Trial balance rows plus the column totals footer."""

    rows: tuple[TrialBalanceRow, ...]
    totals: TrialBalanceRow


@dataclass(frozen=True)
class BalanceLine:
    """Account and its normalized balance."""

    account_code: str
    account_name: str
    balance: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Balance sheet buckets with section subtotals and grand totals."""

    circulating: tuple[BalanceLine, ...]
    non_circulating: tuple[BalanceLine, ...]
    short_term: tuple[BalanceLine, ...]
    long_term: tuple[BalanceLine, ...]
    equity: tuple[BalanceLine, ...]
    total_circulating: Decimal
    total_non_circulating: Decimal
    total_short_term: Decimal
    total_long_term: Decimal
    total_equity: Decimal
    total_assets: Decimal
    total_liabilities_and_equity: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    """Subtype-driven income statement."""

    income: tuple[BalanceLine, ...]
    cost_of_sales: tuple[BalanceLine, ...]
    selling_expenses: tuple[BalanceLine, ...]
    administrative_expenses: tuple[BalanceLine, ...]
    net_sales: Decimal
    total_cost_of_sales: Decimal
    gross_profit: Decimal
    total_selling_expenses: Decimal
    total_administrative_expenses: Decimal
    total_operating_expenses: Decimal
    net_income: Decimal

    @property
    def operating_expenses(self) -> tuple[BalanceLine, ...]:
        return tuple(
            sorted(
                self.selling_expenses + self.administrative_expenses,
                key=lambda line: line.account_code,
            )
        )


@dataclass(frozen=True)
class DetailedIncomeStatement:
    """Keyword-driven income statement with inventory and statutory taxes."""

    gross_sales: Decimal
    sales_returns: Decimal
    sales_allowances: Decimal
    sales_discounts: Decimal
    net_sales: Decimal
    opening_inventory: Decimal
    purchases: Decimal
    purchase_expenses: Decimal
    total_purchases: Decimal
    purchase_discounts: Decimal
    purchase_returns: Decimal
    purchase_allowances: Decimal
    net_purchases: Decimal
    goods_available: Decimal
    closing_inventory: Decimal
    cost_of_sales: Decimal
    gross_profit: Decimal
    selling_expenses: Decimal
    administrative_expenses: Decimal
    total_operating_expenses: Decimal
    pre_tax_income: Decimal
    isr: Decimal
    ptu: Decimal
    total_taxes: Decimal
    net_income: Decimal
