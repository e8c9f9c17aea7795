"""JSON-ready payloads for the reports.

Amounts are rendered as strings with two decimals and dates in ISO format so
payloads survive json.dumps without losing precision.
"""

from dataclasses import fields
from decimal import Decimal
from typing import Any

from ledgerbook.domain.entities import (
    BalanceLine,
    BalanceSheet,
    CashCount,
    DetailedIncomeStatement,
    IncomeStatement,
    JournalEntry,
    LedgerAccount,
    TrialBalance,
    TrialBalanceRow,
)

CENT = Decimal("0.01")


def money(value: Decimal) -> str:
    """Format a Decimal amount with two decimals."""
    return str(Decimal(value).quantize(CENT))


def _balance_line(line: BalanceLine) -> dict[str, Any]:
    return {
        "account_code": line.account_code,
        "account_name": line.account_name,
        "balance": money(line.balance),
    }


def general_ledger_payload(ledger: list[LedgerAccount]) -> list[dict[str, Any]]:
    return [
        {
            "account_code": account.account_code,
            "account_name": account.account_name,
            "movements": [
                {
                    "sequence_number": line.sequence_number,
                    "date": line.date.isoformat(),
                    "memo": line.memo,
                    "debit": money(line.debit),
                    "credit": money(line.credit),
                    "running_balance": money(line.running_balance),
                }
                for line in account.lines
            ],
            "final_balance": money(account.final_balance),
        }
        for account in ledger
    ]


def _trial_row(row: TrialBalanceRow) -> dict[str, Any]:
    return {
        "account_code": row.account_code,
        "account_name": row.account_name,
        "total_debit": money(row.total_debit),
        "total_credit": money(row.total_credit),
        "debtor_balance": money(row.debtor_balance),
        "creditor_balance": money(row.creditor_balance),
    }


def trial_balance_payload(report: TrialBalance) -> dict[str, Any]:
    totals = _trial_row(report.totals)
    del totals["account_code"], totals["account_name"]
    return {"rows": [_trial_row(row) for row in report.rows], "totals": totals}


def balance_sheet_payload(report: BalanceSheet) -> dict[str, Any]:
    return {
        "assets": {
            "circulating": [_balance_line(line) for line in report.circulating],
            "non_circulating": [_balance_line(line) for line in report.non_circulating],
        },
        "liabilities": {
            "short_term": [_balance_line(line) for line in report.short_term],
            "long_term": [_balance_line(line) for line in report.long_term],
        },
        "equity": [_balance_line(line) for line in report.equity],
        "totals": {
            "circulating": money(report.total_circulating),
            "non_circulating": money(report.total_non_circulating),
            "short_term": money(report.total_short_term),
            "long_term": money(report.total_long_term),
            "equity": money(report.total_equity),
            "assets": money(report.total_assets),
            "liabilities_and_equity": money(report.total_liabilities_and_equity),
        },
    }


def income_statement_payload(report: IncomeStatement) -> dict[str, Any]:
    return {
        "income": [_balance_line(line) for line in report.income],
        "cost_of_sales": [_balance_line(line) for line in report.cost_of_sales],
        "operating_expenses": [_balance_line(line) for line in report.operating_expenses],
        "net_sales": money(report.net_sales),
        "total_cost_of_sales": money(report.total_cost_of_sales),
        "gross_profit": money(report.gross_profit),
        "selling_expenses": money(report.total_selling_expenses),
        "administrative_expenses": money(report.total_administrative_expenses),
        "total_operating_expenses": money(report.total_operating_expenses),
        "net_income": money(report.net_income),
    }


def detailed_income_statement_payload(report: DetailedIncomeStatement) -> dict[str, Any]:
    return {f.name: money(getattr(report, f.name)) for f in fields(report)}


def journal_entry_payload(entry: JournalEntry, account_codes: dict[int, str]) -> dict[str, Any]:
    return {
        "sequence_number": entry.sequence_number,
        "date": entry.date.isoformat(),
        "memo": entry.memo,
        "created_by": entry.created_by,
        "movements": [
            {
                "account_code": account_codes.get(m.account_id, str(m.account_id)),
                "debit": money(m.debit),
                "credit": money(m.credit),
            }
            for m in entry.movements
        ],
    }


def cash_count_payload(count: CashCount) -> dict[str, Any]:
    return {
        "id": count.id,
        "user_id": count.user_id,
        "counted_at": count.counted_at.isoformat(),
        "system_balance": money(count.system_balance),
        "physical_total": money(count.physical_total),
        "difference": money(count.difference),
        "notes": count.notes,
        "quantities": [
            {"kind": d.kind.value, "denomination": money(d.value), "quantity": q}
            for d, q in count.quantities.items()
        ],
    }
