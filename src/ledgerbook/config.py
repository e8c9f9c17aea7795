"""Report configuration.

Values come from environment variables and can be overridden per command on
the CLI. Amounts are parsed with the same rules as entry amounts.
"""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from ledgerbook.domain.errors import ValidationError

ENV_OPENING_INVENTORY = "LEDGERBOOK_OPENING_INVENTORY"
ENV_CLOSING_INVENTORY = "LEDGERBOOK_CLOSING_INVENTORY"
ENV_ISR_RATE = "LEDGERBOOK_ISR_RATE"
ENV_PTU_RATE = "LEDGERBOOK_PTU_RATE"
ENV_INVENTORY_ACCOUNT = "LEDGERBOOK_INVENTORY_ACCOUNT"
ENV_CASH_ACCOUNT = "LEDGERBOOK_CASH_ACCOUNT"


@dataclass(frozen=True)
class ReportSettings:
    """Parameters of the income statements and the cash count."""

    opening_inventory_default: Decimal = Decimal("20000")
    closing_inventory: Decimal = Decimal("17000")
    isr_rate: Decimal = Decimal("0.30")
    ptu_rate: Decimal = Decimal("0.10")
    inventory_account_name: str = "Inventario"
    cash_account_code: str = "1101"
    selling_keywords: tuple[str, ...] = ("venta", "sale", "selling")


def _decimal_setting(env: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        raise ValidationError(f"{name} must be a number, got '{raw}'")
    if value < 0:
        raise ValidationError(f"{name} must not be negative, got '{raw}'")
    return value


def load_report_settings(env: Optional[Mapping[str, str]] = None) -> ReportSettings:
    """Build report settings from environment variables.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        ReportSettings with defaults for unset variables

    Raises:
        ValidationError: If a numeric variable is malformed or negative
    """
    if env is None:
        env = os.environ
    defaults = ReportSettings()
    return ReportSettings(
        opening_inventory_default=_decimal_setting(
            env, ENV_OPENING_INVENTORY, defaults.opening_inventory_default
        ),
        closing_inventory=_decimal_setting(env, ENV_CLOSING_INVENTORY, defaults.closing_inventory),
        isr_rate=_decimal_setting(env, ENV_ISR_RATE, defaults.isr_rate),
        ptu_rate=_decimal_setting(env, ENV_PTU_RATE, defaults.ptu_rate),
        inventory_account_name=env.get(ENV_INVENTORY_ACCOUNT) or defaults.inventory_account_name,
        cash_account_code=env.get(ENV_CASH_ACCOUNT) or defaults.cash_account_code,
    )
