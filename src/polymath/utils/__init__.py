"""Utility functions for polymath."""

from polymath.utils.date_parser import parse_date, to_date
from polymath.utils.amount_parser import parse_amount, coerce_number

__all__ = ["parse_date", "to_date", "parse_amount", "coerce_number"]
