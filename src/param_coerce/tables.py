"""Tabular interfaces and the result-set adapter.

A query result can arrive as a raw input (for example a sub-report fed by a
data source).  When the declared type is the generic ``TableModel`` the
``table`` strategy wraps the proprietary ``ResultSet`` in
``ResultSetTableModel`` instead of trying to stringify it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence


class ResultSet(ABC):
    """Row/column result of a data-source query."""

    @abstractmethod
    def row_count(self) -> int: ...

    @abstractmethod
    def column_count(self) -> int: ...

    @abstractmethod
    def column_headers(self) -> Sequence[str]: ...

    @abstractmethod
    def value_at(self, row: int, column: int) -> Any: ...


class TableModel(ABC):
    """Generic tabular interface consumed by the execution engine."""

    @abstractmethod
    def row_count(self) -> int: ...

    @abstractmethod
    def column_count(self) -> int: ...

    @abstractmethod
    def column_name(self, column: int) -> str: ...

    @abstractmethod
    def value_at(self, row: int, column: int) -> Any: ...

    def column_type(self, column: int) -> type:
        return object


class ResultSetTableModel(TableModel):
    """Expose a ``ResultSet`` through the ``TableModel`` interface."""

    def __init__(self, result_set: ResultSet) -> None:
        self.result_set = result_set

    def row_count(self) -> int:
        return self.result_set.row_count()

    def column_count(self) -> int:
        return self.result_set.column_count()

    def column_name(self, column: int) -> str:
        headers = self.result_set.column_headers()
        return headers[column] if column < len(headers) else f"column{column}"

    def value_at(self, row: int, column: int) -> Any:
        return self.result_set.value_at(row, column)
