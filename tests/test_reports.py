"""Tests for the report engine."""

import pytest
from dataclasses import replace
from datetime import date, datetime, UTC
from decimal import Decimal

from ledgerbook.config import ReportSettings
from ledgerbook.domain.entities import (
    Account,
    AccountNature,
    AccountSubtype,
    AccountType,
    MovementInput,
    MovementLine,
)
from ledgerbook.domain.errors import NotFoundError
from ledgerbook.domain.reports import (
    ReportService,
    account_balance,
    balance_sheet,
    detailed_income_statement,
    general_ledger,
    income_statement,
    is_selling_expense,
    trial_balance,
)

D = Decimal


def _account(id, code, name, type, nature, subtype=None, active=True):
    return Account(
        id=id,
        code=code,
        name=name,
        type=AccountType(type),
        subtype=AccountSubtype(subtype) if subtype else None,
        nature=AccountNature(nature),
        active=active,
        created_at=datetime.now(UTC),
    )


def _line(movement_id, sequence_number, account, debit="0", credit="0", day=1, memo="Asiento"):
    return MovementLine(
        movement_id=movement_id,
        sequence_number=sequence_number,
        date=date(2024, 1, day),
        memo=memo,
        account_id=account.id,
        account_code=account.code,
        account_name=account.name,
        account_type=account.type,
        account_subtype=account.subtype,
        account_nature=account.nature,
        debit=D(debit),
        credit=D(credit),
    )


CAJA = _account(1, "1101", "Caja", "asset", "debtor", "circulating")
CAPITAL = _account(2, "3101", "Capital social", "equity", "creditor")

# The "Opening" entry: Caja debit 1000, Capital credit 1000
OPENING = [
    _line(1, 1, CAJA, debit="1000", memo="Opening"),
    _line(2, 1, CAPITAL, credit="1000", memo="Opening"),
]


class TestGeneralLedger:
    """Tests for general_ledger."""

    def test_opening_entry(self):
        ledger = general_ledger(OPENING)

        assert [a.account_code for a in ledger] == ["1101", "3101"]
        caja = ledger[0]
        assert len(caja.lines) == 1
        assert caja.lines[0].running_balance == D("1000")
        assert caja.final_balance == D("1000")
        assert ledger[1].final_balance == D("-1000")

    def test_running_balance_follows_sequence_order(self):
        lines = [
            _line(5, 3, CAJA, credit="300", day=5),
            _line(1, 1, CAJA, debit="1000", day=1),
            _line(3, 2, CAJA, debit="50", day=3),
        ]

        caja = general_ledger(lines)[0]

        assert [line.sequence_number for line in caja.lines] == [1, 2, 3]
        assert [line.running_balance for line in caja.lines] == [D("1000"), D("1050"), D("750")]
        assert caja.final_balance == D("750")

    def test_filter_by_account(self):
        ledger = general_ledger(OPENING, account_code="3101")

        assert [a.account_code for a in ledger] == ["3101"]

    def test_empty(self):
        assert general_ledger([]) == []


class TestTrialBalance:
    """Tests for trial_balance."""

    def test_opening_entry(self):
        report = trial_balance([CAJA, CAPITAL], OPENING)

        caja, capital = report.rows
        assert (caja.account_code, caja.debtor_balance, caja.creditor_balance) == ("1101", D("1000"), D("0"))
        assert (capital.account_code, capital.debtor_balance, capital.creditor_balance) == (
            "3101",
            D("0"),
            D("1000"),
        )
        assert report.totals.account_name == "Totals"
        assert report.totals.debtor_balance == report.totals.creditor_balance == D("1000")
        assert report.totals.total_debit == report.totals.total_credit == D("1000")

    def test_skips_accounts_without_movements_and_inactive_accounts(self):
        bancos = _account(3, "1102", "Bancos", "asset", "debtor", "circulating")
        old = _account(4, "1103", "Clientes", "asset", "debtor", "circulating", active=False)
        lines = OPENING + [_line(3, 2, old, debit="10"), _line(4, 2, CAPITAL, credit="10")]

        report = trial_balance([CAJA, CAPITAL, bancos, old], lines)

        assert [row.account_code for row in report.rows] == ["1101", "3101"]

    def test_zero_net_account_is_listed_with_zero_balances(self):
        lines = OPENING + [_line(3, 2, CAJA, credit="1000"), _line(4, 2, CAPITAL, debit="1000")]

        report = trial_balance([CAJA, CAPITAL], lines)

        caja = report.rows[0]
        assert caja.total_debit == caja.total_credit == D("1000")
        assert caja.debtor_balance == caja.creditor_balance == D("0")


class TestBalanceSheet:
    """Tests for balance_sheet."""

    def test_opening_entry(self):
        report = balance_sheet([CAJA, CAPITAL], OPENING)

        assert [(l.account_name, l.balance) for l in report.circulating] == [("Caja", D("1000"))]
        assert [(l.account_name, l.balance) for l in report.equity] == [("Capital social", D("1000"))]
        assert report.total_assets == report.total_liabilities_and_equity == D("1000")

    def test_buckets_by_subtype(self):
        edificio = _account(3, "1202", "Edificios", "asset", "debtor", "non_circulating")
        depreciacion = _account(4, "1205", "Depreciación acumulada", "asset", "creditor", "non_circulating")
        proveedores = _account(5, "2101", "Proveedores", "liability", "creditor", "short_term")
        documentos = _account(6, "2201", "Documentos por pagar", "liability", "creditor", "long_term")
        ventas = _account(7, "4101", "Ventas", "income", "creditor")
        lines = [
            _line(1, 1, edificio, debit="5000"),
            _line(2, 1, documentos, credit="5000"),
            _line(3, 2, CAJA, debit="300"),
            _line(4, 2, proveedores, credit="300"),
            _line(5, 3, depreciacion, credit="100"),
            _line(6, 3, CAPITAL, debit="100"),
            _line(7, 4, CAJA, debit="50"),
            _line(8, 4, ventas, credit="50"),
        ]

        report = balance_sheet(
            [CAJA, CAPITAL, edificio, depreciacion, proveedores, documentos, ventas], lines
        )

        assert [l.account_code for l in report.non_circulating] == ["1202", "1205"]
        assert report.non_circulating[1].balance == D("100")
        assert report.total_non_circulating == D("5100")
        assert report.total_circulating == D("350")
        assert [l.account_code for l in report.short_term] == ["2101"]
        assert report.total_short_term == D("300")
        assert [l.account_code for l in report.long_term] == ["2201"]
        assert report.total_long_term == D("5000")
        assert report.total_equity == D("100")
        assert report.total_assets == D("5450")
        # Long-term liabilities stay out of the liabilities + equity total
        assert report.total_liabilities_and_equity == D("400")

    def test_lists_zero_balance_accounts_and_skips_inactive(self):
        bancos = _account(3, "1102", "Bancos", "asset", "debtor", "circulating")
        old = _account(4, "1103", "Clientes", "asset", "debtor", "circulating", active=False)

        report = balance_sheet([CAJA, CAPITAL, bancos, old], OPENING)

        assert [(l.account_code, l.balance) for l in report.circulating] == [
            ("1101", D("1000")),
            ("1102", D("0")),
        ]
        assert report.total_circulating == D("1000")

    def test_overdrawn_account_reports_magnitude(self):
        lines = [_line(1, 1, CAJA, credit="200"), _line(2, 1, CAPITAL, debit="200")]

        report = balance_sheet([CAJA, CAPITAL], lines)

        assert report.circulating[0].balance == D("200")


def _income_accounts():
    return {
        "ventas": _account(10, "4101", "Ventas", "income", "creditor"),
        "devoluciones": _account(11, "4102", "Devoluciones sobre ventas", "income", "debtor"),
        "gastos_compra": _account(12, "5101", "Gastos de compra", "expense", "debtor", "cost_of_sales"),
        "devol_compras": _account(13, "5102", "Devoluciones sobre compras", "expense", "creditor", "cost_of_sales"),
        "gastos_venta": _account(14, "6101", "Gastos de venta", "expense", "debtor", "operating"),
        "renta": _account(15, "6102", "Renta de oficinas", "expense", "debtor", "operating"),
    }


class TestIncomeStatement:
    """Tests for the subtype driven income_statement."""

    def test_totals(self):
        a = _income_accounts()
        lines = [
            _line(1, 1, a["ventas"], credit="40000"),
            _line(2, 2, a["devoluciones"], debit="1000"),
            _line(3, 3, a["gastos_compra"], debit="500"),
            _line(4, 4, a["devol_compras"], credit="300"),
            _line(5, 5, a["gastos_venta"], debit="2000"),
            _line(6, 6, a["renta"], debit="3000"),
        ]

        report = income_statement(list(a.values()) + [CAJA], lines)

        assert [l.account_code for l in report.income] == ["4101", "4102"]
        assert report.income[1].balance == D("-1000")
        # Rows with negative amounts stay out of the totals
        assert report.net_sales == D("40000")
        assert report.total_cost_of_sales == D("500")
        assert report.gross_profit == D("39500")
        assert [l.account_code for l in report.selling_expenses] == ["6101"]
        assert [l.account_code for l in report.administrative_expenses] == ["6102"]
        assert report.total_operating_expenses == D("5000")
        assert report.net_income == D("34500")
        assert [l.account_code for l in report.operating_expenses] == ["6101", "6102"]

    def test_includes_inactive_accounts(self):
        ventas = _account(10, "4101", "Ventas", "income", "creditor", active=False)

        report = income_statement([ventas], [_line(1, 1, ventas, credit="100")])

        assert report.net_sales == D("100")

    def test_custom_selling_keywords(self):
        a = _income_accounts()
        settings = replace(ReportSettings(), selling_keywords=("renta",))

        report = income_statement(
            [a["gastos_venta"], a["renta"]],
            [_line(1, 1, a["gastos_venta"], debit="10"), _line(2, 2, a["renta"], debit="20")],
            settings,
        )

        assert report.total_selling_expenses == D("20")
        assert report.total_administrative_expenses == D("10")


@pytest.mark.parametrize(
    "name,expected",
    [("Gastos de venta", True), ("SELLING costs", True), ("Sales commissions", True), ("Renta", False)],
)
def test_is_selling_expense(name, expected):
    assert is_selling_expense(name, ReportSettings().selling_keywords) is expected


class TestDetailedIncomeStatement:
    """Tests for the keyword driven detailed_income_statement."""

    def _year(self):
        a = _income_accounts()
        inventario = _account(20, "1104", "Inventario", "asset", "debtor", "circulating")
        accounts = list(a.values()) + [inventario, CAJA]
        lines = [
            _line(1, 1, inventario, debit="20000", day=2),
            _line(2, 2, inventario, debit="10000", day=10),
            _line(3, 3, a["gastos_compra"], debit="500"),
            _line(4, 4, a["ventas"], credit="40000"),
            _line(5, 5, a["devoluciones"], debit="1000"),
            _line(6, 6, a["devol_compras"], credit="300"),
            _line(7, 7, a["gastos_venta"], debit="2000"),
            _line(8, 8, a["renta"], debit="3000"),
        ]
        return accounts, lines

    def test_full_year(self):
        accounts, lines = self._year()

        report = detailed_income_statement(accounts, lines, ReportSettings())

        assert report.gross_sales == D("40000")
        assert report.sales_returns == D("1000")
        assert report.net_sales == D("39000")
        assert report.opening_inventory == D("20000")
        assert report.purchases == D("10000")
        assert report.purchase_expenses == D("500")
        assert report.total_purchases == D("10500")
        assert report.purchase_returns == D("300")
        assert report.net_purchases == D("10200")
        assert report.goods_available == D("30200")
        assert report.closing_inventory == D("17000")
        assert report.cost_of_sales == D("13200")
        assert report.gross_profit == D("25800")
        assert report.selling_expenses == D("2000")
        assert report.administrative_expenses == D("3000")
        assert report.pre_tax_income == D("20800")
        assert report.isr == D("6240.00")
        assert report.ptu == D("2080.00")
        assert report.total_taxes == D("8320.00")
        assert report.net_income == D("12480.00")

    def test_opening_inventory_is_earliest_inventory_debit(self):
        accounts, lines = self._year()
        inventario = accounts[-2]
        earlier = _line(9, 9, inventario, debit="7000", day=1)

        report = detailed_income_statement(accounts, lines + [earlier])

        assert report.opening_inventory == D("7000")
        assert report.purchases == D("30000")

    def test_opening_inventory_defaults_without_inventory_debits(self):
        a = _income_accounts()

        report = detailed_income_statement(
            list(a.values()),
            [_line(1, 1, a["ventas"], credit="100")],
            ReportSettings(opening_inventory_default=D("500"), closing_inventory=D("0")),
        )

        assert report.opening_inventory == D("500")
        assert report.purchases == D("-500")
        assert report.goods_available == D("0")

    def test_no_taxes_on_a_loss(self):
        a = _income_accounts()

        report = detailed_income_statement(
            list(a.values()),
            [_line(1, 1, a["renta"], debit="900")],
            ReportSettings(opening_inventory_default=D("0"), closing_inventory=D("0")),
        )

        assert report.pre_tax_income == D("-900")
        assert report.isr == report.ptu == report.total_taxes == D("0")
        assert report.net_income == D("-900")

    def test_tax_rates_are_configurable_and_rounded(self):
        accounts, lines = self._year()
        settings = ReportSettings(isr_rate=D("0.333"), ptu_rate=D("0"))

        report = detailed_income_statement(accounts, lines, settings)

        assert report.isr == D("6926.40")
        assert report.ptu == D("0")


def test_account_balance():
    assert account_balance(OPENING, "1101") == D("1000")
    assert account_balance(OPENING, "3101") == D("-1000")
    assert account_balance(OPENING, "9999") == D("0")


class TestReportService:
    """Tests for ReportService against the store."""

    def test_opening_example(self, journal_service, account_service, user_service):
        caja = account_service.create_account(
            code="1101", name="Caja", type="asset", nature="debtor", subtype="circulating"
        )
        capital = account_service.create_account(
            code="3101", name="Capital social", type="equity", nature="creditor"
        )
        user_id = user_service.create_user("admin", "secreto")

        sequence_number = journal_service.create_entry(
            date(2024, 1, 1),
            "Opening",
            [MovementInput(account_id=caja, debit=D("1000")), MovementInput(account_id=capital, credit=D("1000"))],
            user_id,
        )
        service = ReportService(journal_service.db)

        assert sequence_number == 1
        ledger = service.general_ledger("1101")
        assert [line.running_balance for line in ledger[0].lines] == [D("1000")]
        sheet = service.balance_sheet()
        assert [(l.account_name, l.balance) for l in sheet.circulating] == [("Caja", D("1000"))]
        assert sheet.total_assets == sheet.total_liabilities_and_equity == D("1000")

    def test_properties_over_a_ledger(self, post, report_service):
        post([("1101", 50000, 0), ("3101", 0, 50000)])
        post([("1104", 20000, 0), ("1101", 0, 20000)])
        post([("1104", 10000, 0), ("2101", 0, 10000)])
        post([("1101", 1160, 0), ("4101", 0, 1000), ("2103", 0, 160)])
        post([("6102", 750.25, 0), ("1101", 0, 750.25)])

        trial = report_service.trial_balance()
        ledger = report_service.general_ledger()

        assert trial.totals.total_debit == trial.totals.total_credit
        assert trial.totals.debtor_balance == trial.totals.creditor_balance
        nets = {row.account_code: row.debtor_balance - row.creditor_balance for row in trial.rows}
        assert {a.account_code: a.final_balance for a in ledger} == nets

        assert report_service.trial_balance() == trial
        assert report_service.general_ledger() == ledger
        assert report_service.balance_sheet() == report_service.balance_sheet()
        assert report_service.income_statement() == report_service.income_statement()
        assert report_service.detailed_income_statement() == report_service.detailed_income_statement()

    def test_deactivated_account_leaves_trial_balance(self, post, report_service, account_service, chart):
        post([("1102", 100, 0), ("3101", 0, 100)])
        account_service.deactivate_account(chart["1102"].id)

        codes = [row.account_code for row in report_service.trial_balance().rows]

        assert codes == ["3101"]
        assert "1102" in [a.account_code for a in report_service.general_ledger()]

    def test_general_ledger_unknown_account(self, report_service):
        with pytest.raises(NotFoundError):
            report_service.general_ledger("0000")

    def test_account_balance(self, post, report_service):
        post([("1101", 1000, 0), ("3101", 0, 1000)])
        post([("6101", 250, 0), ("1101", 0, 250)])

        assert report_service.account_balance("1101") == D("750")
        with pytest.raises(NotFoundError):
            report_service.account_balance("0000")
