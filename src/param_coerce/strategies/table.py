"""Result-set adapter strategy.

Exports
-------
TableMatcher
    Fires when the target is ``TableModel`` (or a supertype of it) and the raw
    value is a ``ResultSet``.

TableAdapterStrategy
    Wraps the result set in ``ResultSetTableModel``.
"""

from __future__ import annotations

from ..core import ConversionRequest, ConversionStrategy, Outcome, StrategyMatcher
from ..tables import ResultSet, ResultSetTableModel, TableModel


class TableMatcher(StrategyMatcher):
    def matches(self, request: ConversionRequest) -> bool:
        target = request.runtime_type
        return (
            isinstance(target, type)
            and issubclass(TableModel, target)
            and isinstance(request.raw_value, ResultSet)
        )


class TableAdapterStrategy(ConversionStrategy):
    def convert(self, request: ConversionRequest) -> Outcome:
        return Outcome.success(ResultSetTableModel(request.raw_value))
