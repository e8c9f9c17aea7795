"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date
from ledgerbook.utils.amount_parser import parse_amount, parse_posting

__all__ = ["parse_date", "parse_amount", "parse_posting"]
