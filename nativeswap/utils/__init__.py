"""Formatting helpers shared by the API routers and services."""

from .addresses import truncate_address
from .units import format_balance, format_units, parse_units, percentage_of_balance

__all__ = [
    "truncate_address",
    "parse_units",
    "format_units",
    "format_balance",
    "percentage_of_balance",
]
