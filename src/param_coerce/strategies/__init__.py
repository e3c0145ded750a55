"""Strategies sub-package — concrete ConversionStrategy + StrategyMatcher
implementations, one module per conversion rule.

empty    – ``""`` → ``None``
identity – return the raw value (instance shortcut and final pass-through)
table    – wrap a ``ResultSet`` as a ``TableModel``
dates    – date-parsing cascade for ``date`` / ``time`` / ``datetime``
pattern  – ``dataFormat`` numbers and dates via the pattern formatter
registry – converter-registry fallback (terminal on failure)
"""

from .dates import DateCascadeStrategy, wrap_datetime
from .empty import EmptyTextMatcher, EmptyTextStrategy
from .identity import IdentityStrategy
from .pattern import PatternMatcher, PatternStrategy
from .registry import ConverterMatcher, RegistryStrategy
from .table import TableAdapterStrategy, TableMatcher

__all__ = [
    # identity
    "IdentityStrategy",
    # table
    "TableMatcher",
    "TableAdapterStrategy",
    # empty
    "EmptyTextMatcher",
    "EmptyTextStrategy",
    # dates
    "DateCascadeStrategy",
    "wrap_datetime",
    # pattern
    "PatternMatcher",
    "PatternStrategy",
    # registry
    "ConverterMatcher",
    "RegistryStrategy",
]
