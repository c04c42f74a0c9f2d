"""Utility functions for salarizare."""

from salarizare.utils.date_parser import parse_date, parse_month
from salarizare.utils.amount_parser import parse_number, coerce_variable

__all__ = ["parse_date", "parse_month", "parse_number", "coerce_variable"]
