"""Domain layer for ledgerbook application.

Services are imported lazily so the database layer can import entities
without pulling the services (which depend on the database) in a cycle.
"""

_SERVICES = {
    "AccountService": "ledgerbook.domain.account",
    "JournalService": "ledgerbook.domain.journal",
    "ReportService": "ledgerbook.domain.reports",
    "UserService": "ledgerbook.domain.user",
    "CashCountService": "ledgerbook.domain.cash_count",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
