"""Report engine.

Every report is a pure function of the chart of accounts and the full list of
stored movements; nothing is cached between calls. Accounts are always ordered
by code and movements by entry sequence number.
"""

from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from ledgerbook.config import ReportSettings
from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    Account,
    AccountNature,
    AccountSubtype,
    AccountType,
    BalanceLine,
    BalanceSheet,
    DetailedIncomeStatement,
    IncomeStatement,
    LedgerAccount,
    LedgerLine,
    MovementLine,
    TrialBalance,
    TrialBalanceRow,
)
from ledgerbook.domain.errors import NotFoundError, account_code_not_found

ZERO = Decimal("0")
CENT = Decimal("0.01")

BALANCE_SHEET_TYPES = (AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY)
INCOME_STATEMENT_TYPES = (AccountType.INCOME, AccountType.EXPENSE)


def _chronological(lines: Iterable[MovementLine]) -> list[MovementLine]:
    return sorted(lines, key=lambda line: (line.account_code, line.sequence_number, line.movement_id))


def _totals_by_account(lines: Iterable[MovementLine]) -> dict[int, tuple[Decimal, Decimal, int]]:
    """Map account ID to (total debit, total credit, movement count)."""
    debit: dict[int, Decimal] = defaultdict(lambda: ZERO)
    credit: dict[int, Decimal] = defaultdict(lambda: ZERO)
    count: dict[int, int] = defaultdict(int)
    for line in lines:
        debit[line.account_id] += line.debit
        credit[line.account_id] += line.credit
        count[line.account_id] += 1
    return {account_id: (debit[account_id], credit[account_id], count[account_id]) for account_id in count}


def _by_code(accounts: Iterable[Account]) -> list[Account]:
    return sorted(accounts, key=lambda account: account.code)


def _sum_positive(lines: Iterable[BalanceLine]) -> Decimal:
    return sum((line.balance for line in lines if line.balance > 0), ZERO)


def _sum_nonzero(lines: Iterable[BalanceLine]) -> Decimal:
    return sum((line.balance for line in lines if line.balance != 0), ZERO)


def general_ledger(
    lines: Sequence[MovementLine], account_code: Optional[str] = None
) -> list[LedgerAccount]:
    """Build the general ledger (libro mayor).

    Accounts without movements are omitted.

    Args:
        lines: Movement lines
        account_code: Optional account code to restrict the ledger to

    Returns:
        One LedgerAccount per account with movements, ordered by code
    """
    grouped: dict[str, list[MovementLine]] = defaultdict(list)
    for line in _chronological(lines):
        if account_code is not None and line.account_code != account_code:
            continue
        grouped[line.account_code].append(line)

    ledger = []
    for code in sorted(grouped):
        account_lines = grouped[code]
        balance = ZERO
        ledger_lines = []
        for line in account_lines:
            balance += line.debit - line.credit
            ledger_lines.append(
                LedgerLine(
                    sequence_number=line.sequence_number,
                    date=line.date,
                    memo=line.memo,
                    debit=line.debit,
                    credit=line.credit,
                    running_balance=balance,
                )
            )
        ledger.append(
            LedgerAccount(
                account_code=code,
                account_name=account_lines[0].account_name,
                lines=tuple(ledger_lines),
                final_balance=balance,
            )
        )
    return ledger


def trial_balance(accounts: Sequence[Account], lines: Sequence[MovementLine]) -> TrialBalance:
    """Build the trial balance (balanza de comprobación).

    Only active accounts with at least one movement are listed. Exactly one of
    debtor_balance/creditor_balance is non-zero per account.
    """
    totals = _totals_by_account(lines)
    rows = []
    for account in _by_code(accounts):
        if not account.active or account.id not in totals:
            continue
        total_debit, total_credit, _ = totals[account.id]
        net = total_debit - total_credit
        rows.append(
            TrialBalanceRow(
                account_code=account.code,
                account_name=account.name,
                total_debit=total_debit,
                total_credit=total_credit,
                debtor_balance=net if net > 0 else ZERO,
                creditor_balance=-net if net < 0 else ZERO,
            )
        )

    footer = TrialBalanceRow(
        account_code="",
        account_name="Totals",
        total_debit=sum((r.total_debit for r in rows), ZERO),
        total_credit=sum((r.total_credit for r in rows), ZERO),
        debtor_balance=sum((r.debtor_balance for r in rows), ZERO),
        creditor_balance=sum((r.creditor_balance for r in rows), ZERO),
    )
    return TrialBalance(rows=tuple(rows), totals=footer)


def balance_sheet(accounts: Sequence[Account], lines: Sequence[MovementLine]) -> BalanceSheet:
    """Build the balance sheet (balance general).

    Balances are debit minus credit, sign-flipped for creditor accounts, and
    reported as absolute values. Active accounts without movements are listed
    with a zero balance.
    """
    totals = _totals_by_account(lines)
    buckets: dict[str, list[BalanceLine]] = {
        "circulating": [],
        "non_circulating": [],
        "short_term": [],
        "long_term": [],
        "equity": [],
    }

    for account in _by_code(accounts):
        if not account.active or account.type not in BALANCE_SHEET_TYPES:
            continue
        total_debit, total_credit, _ = totals.get(account.id, (ZERO, ZERO, 0))
        signed = total_debit - total_credit
        if account.nature == AccountNature.CREDITOR:
            signed = -signed
        line = BalanceLine(account_code=account.code, account_name=account.name, balance=abs(signed))

        if account.type == AccountType.ASSET:
            if account.subtype == AccountSubtype.CIRCULATING:
                buckets["circulating"].append(line)
            else:
                buckets["non_circulating"].append(line)
        elif account.type == AccountType.LIABILITY:
            if account.subtype == AccountSubtype.SHORT_TERM:
                buckets["short_term"].append(line)
            else:
                buckets["long_term"].append(line)
        else:
            buckets["equity"].append(line)

    total_circulating = _sum_positive(buckets["circulating"])
    total_non_circulating = _sum_nonzero(buckets["non_circulating"])
    total_short_term = _sum_positive(buckets["short_term"])
    total_long_term = _sum_positive(buckets["long_term"])
    total_equity = _sum_positive(buckets["equity"])

    return BalanceSheet(
        circulating=tuple(buckets["circulating"]),
        non_circulating=tuple(buckets["non_circulating"]),
        short_term=tuple(buckets["short_term"]),
        long_term=tuple(buckets["long_term"]),
        equity=tuple(buckets["equity"]),
        total_circulating=total_circulating,
        total_non_circulating=total_non_circulating,
        total_short_term=total_short_term,
        total_long_term=total_long_term,
        total_equity=total_equity,
        total_assets=total_circulating + total_non_circulating,
        # Long-term liabilities are reported but not part of this total.
        total_liabilities_and_equity=total_short_term + total_equity,
    )


def is_selling_expense(name: str, keywords: Sequence[str]) -> bool:
    """Return True if an operating expense name looks sale-related."""
    lowered = name.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def income_statement(
    accounts: Sequence[Account],
    lines: Sequence[MovementLine],
    settings: Optional[ReportSettings] = None,
) -> IncomeStatement:
    """Build the income statement from account types and subtypes.

    Rows with zero or negative amounts are returned but excluded from totals.
    """
    settings = settings or ReportSettings()
    totals = _totals_by_account(lines)
    income: list[BalanceLine] = []
    cost_of_sales: list[BalanceLine] = []
    selling: list[BalanceLine] = []
    administrative: list[BalanceLine] = []

    for account in _by_code(accounts):
        if account.type not in INCOME_STATEMENT_TYPES:
            continue
        total_debit, total_credit, _ = totals.get(account.id, (ZERO, ZERO, 0))
        if account.type == AccountType.INCOME:
            amount = total_credit - total_debit
        else:
            amount = total_debit - total_credit
        line = BalanceLine(account_code=account.code, account_name=account.name, balance=amount)

        if account.type == AccountType.INCOME:
            income.append(line)
        elif account.subtype == AccountSubtype.COST_OF_SALES:
            cost_of_sales.append(line)
        elif account.subtype == AccountSubtype.OPERATING:
            if is_selling_expense(account.name, settings.selling_keywords):
                selling.append(line)
            else:
                administrative.append(line)

    net_sales = _sum_positive(income)
    total_cost_of_sales = _sum_positive(cost_of_sales)
    gross_profit = net_sales - total_cost_of_sales
    total_selling = _sum_positive(selling)
    total_administrative = _sum_positive(administrative)
    total_operating = total_selling + total_administrative

    return IncomeStatement(
        income=tuple(income),
        cost_of_sales=tuple(cost_of_sales),
        selling_expenses=tuple(selling),
        administrative_expenses=tuple(administrative),
        net_sales=net_sales,
        total_cost_of_sales=total_cost_of_sales,
        gross_profit=gross_profit,
        total_selling_expenses=total_selling,
        total_administrative_expenses=total_administrative,
        total_operating_expenses=total_operating,
        net_income=gross_profit - total_operating,
    )


def _names_contain(name: str, *fragments: str) -> bool:
    return all(fragment in name for fragment in fragments)


def detailed_income_statement(
    accounts: Sequence[Account],
    lines: Sequence[MovementLine],
    settings: Optional[ReportSettings] = None,
) -> DetailedIncomeStatement:
    """Build the detailed income statement with inventory and taxes.

    Sales and purchase adjustments are recognised by Spanish keywords in the
    account names ("venta", "compra", "devol", "rebaj", "desc", "gasto").
    """
    settings = settings or ReportSettings()
    totals = _totals_by_account(lines)

    inventory_name = settings.inventory_account_name.casefold()
    inventory_debits = sorted(
        (
            line
            for line in lines
            if line.account_name.casefold() == inventory_name and line.debit > 0
        ),
        key=lambda line: (line.date, line.sequence_number, line.movement_id),
    )
    if inventory_debits:
        opening_inventory = inventory_debits[0].debit
    else:
        opening_inventory = settings.opening_inventory_default
    purchases = sum((line.debit for line in inventory_debits), ZERO) - opening_inventory
    closing_inventory = settings.closing_inventory

    gross_sales = sales_returns = sales_allowances = sales_discounts = ZERO
    purchase_expenses = purchase_returns = purchase_allowances = purchase_discounts = ZERO
    selling_expenses = administrative_expenses = ZERO

    for account in accounts:
        name = account.name.lower()
        total_debit, total_credit, _ = totals.get(account.id, (ZERO, ZERO, 0))

        if account.type == AccountType.INCOME:
            if _names_contain(name, "devol", "venta"):
                sales_returns += total_debit
            elif _names_contain(name, "rebaj", "venta"):
                sales_allowances += total_debit
            elif _names_contain(name, "desc", "venta"):
                sales_discounts += total_debit
            elif "venta" in name:
                gross_sales += total_credit
        elif account.type == AccountType.EXPENSE:
            if account.subtype == AccountSubtype.COST_OF_SALES:
                if _names_contain(name, "gasto", "compra"):
                    purchase_expenses += total_debit
                elif _names_contain(name, "devol", "compra"):
                    purchase_returns += total_credit
                elif _names_contain(name, "rebaj", "compra"):
                    purchase_allowances += total_credit
                elif _names_contain(name, "desc", "compra"):
                    purchase_discounts += total_credit
            elif account.subtype == AccountSubtype.OPERATING:
                if is_selling_expense(name, settings.selling_keywords):
                    selling_expenses += total_debit
                else:
                    administrative_expenses += total_debit

    net_sales = gross_sales - sales_returns - sales_allowances - sales_discounts
    total_purchases = purchases + purchase_expenses
    net_purchases = total_purchases - purchase_discounts - purchase_returns - purchase_allowances
    goods_available = opening_inventory + net_purchases
    cost_of_sales = goods_available - closing_inventory
    gross_profit = net_sales - cost_of_sales
    total_operating = selling_expenses + administrative_expenses
    pre_tax_income = gross_profit - total_operating

    if pre_tax_income > 0:
        isr = (pre_tax_income * settings.isr_rate).quantize(CENT, rounding=ROUND_HALF_UP)
        ptu = (pre_tax_income * settings.ptu_rate).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        isr = ptu = ZERO
    total_taxes = isr + ptu

    return DetailedIncomeStatement(
        gross_sales=gross_sales,
        sales_returns=sales_returns,
        sales_allowances=sales_allowances,
        sales_discounts=sales_discounts,
        net_sales=net_sales,
        opening_inventory=opening_inventory,
        purchases=purchases,
        purchase_expenses=purchase_expenses,
        total_purchases=total_purchases,
        purchase_discounts=purchase_discounts,
        purchase_returns=purchase_returns,
        purchase_allowances=purchase_allowances,
        net_purchases=net_purchases,
        goods_available=goods_available,
        closing_inventory=closing_inventory,
        cost_of_sales=cost_of_sales,
        gross_profit=gross_profit,
        selling_expenses=selling_expenses,
        administrative_expenses=administrative_expenses,
        total_operating_expenses=total_operating,
        pre_tax_income=pre_tax_income,
        isr=isr,
        ptu=ptu,
        total_taxes=total_taxes,
        net_income=pre_tax_income - total_taxes,
    )


def account_balance(lines: Sequence[MovementLine], account_code: str) -> Decimal:
    """Return debit minus credit of one account over all its movements."""
    return sum(
        (line.debit - line.credit for line in lines if line.account_code == account_code),
        ZERO,
    )


class ReportService:
    """Service that loads ledger state and runs the report engine."""

    def __init__(self, db: Database, settings: Optional[ReportSettings] = None):
        """Initialize report service.

        Args:
            db: Database instance
            settings: Report parameters (defaults to ReportSettings())
        """
        self.db = db
        self.settings = settings or ReportSettings()

    def _load(self) -> tuple[list[Account], list[MovementLine]]:
        return self.db.list_accounts(active=None), self.db.list_movement_lines()

    def general_ledger(self, account_code: Optional[str] = None) -> list[LedgerAccount]:
        """General ledger, optionally for a single account code.

        Raises:
            NotFoundError: If account_code does not exist
        """
        if account_code is None:
            return general_ledger(self.db.list_movement_lines())
        account = self.db.get_account_by_code(account_code)
        if account is None:
            raise NotFoundError(account_code_not_found(account_code))
        return general_ledger(self.db.list_movement_lines(account_id=account.id), account_code)

    def trial_balance(self) -> TrialBalance:
        accounts, lines = self._load()
        return trial_balance(accounts, lines)

    def balance_sheet(self) -> BalanceSheet:
        accounts, lines = self._load()
        return balance_sheet(accounts, lines)

    def income_statement(self) -> IncomeStatement:
        accounts, lines = self._load()
        return income_statement(accounts, lines, self.settings)

    def detailed_income_statement(self) -> DetailedIncomeStatement:
        accounts, lines = self._load()
        return detailed_income_statement(accounts, lines, self.settings)

    def account_balance(self, account_code: str) -> Decimal:
        """Debit minus credit of one account.

        Raises:
            NotFoundError: If account_code does not exist
        """
        account = self.db.get_account_by_code(account_code)
        if account is None:
            raise NotFoundError(account_code_not_found(account_code))
        return account_balance(self.db.list_movement_lines(account_id=account.id), account_code)
