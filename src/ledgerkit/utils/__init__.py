"""Utility functions for ledgerkit."""

from ledgerkit.utils.amount_parser import parse_amount

__all__ = ["parse_amount"]
