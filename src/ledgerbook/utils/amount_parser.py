"""Amount and posting parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

# Currency markers accepted around amounts: "$", "€" and the MXN code
_CURRENCY = re.compile(r"(?i)mxn|[$€]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a monetary amount string into a Decimal.

    Handles "1000", "1000.50", "$1,234.56", "MXN 1,234.56" and "(123.45)"
    (negative in parentheses). Amounts are kept to cents, so more than two
    decimal places is an error rather than a silent rounding.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    is_negative = text.startswith("(") and text.endswith(")")
    if is_negative:
        text = text[1:-1]
    text = _CURRENCY.sub("", text).replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")
    if amount.as_tuple().exponent < -2:
        raise ValueError(f"Amount '{amount_str.strip()}' has more than two decimal places")
    return -amount if is_negative else amount


def parse_posting(posting: str) -> tuple[str, Decimal]:
    """Split an "ACCOUNT:AMOUNT" posting into the account and the amount.

    The account part is returned as given (a code or an ID); it is split on
    the first colon so amounts may carry currency text.

    Raises:
        ValueError: If either part is missing or the amount is invalid
    """
    account, sep, amount = posting.partition(":")
    if not sep or not account.strip() or not amount.strip():
        raise ValueError(f"'{posting}' is not in ACCOUNT:AMOUNT form")
    return account.strip(), parse_amount(amount)
