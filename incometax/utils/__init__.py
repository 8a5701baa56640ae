"""Utility modules."""

from incometax.utils.money import floor_to_unit, percent_to_fraction, to_decimal

__all__ = ["floor_to_unit", "percent_to_fraction", "to_decimal"]
