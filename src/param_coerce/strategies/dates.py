"""Date/time shortcut — run the date-parsing cascade for date-family targets.

Exports
-------
wrap_datetime
    Narrow a parsed ``datetime`` to ``date`` / ``time`` / ``datetime``.

DateCascadeStrategy
    ``request.coercer.cascade.try_parse`` + ``wrap_datetime``.  A cascade
    failure is returned as a failed ``Outcome`` so that a ``dataFormat``
    pattern or the converter registry still get their turn.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from ..core import ConversionRequest, ConversionStrategy, Outcome


def wrap_datetime(value: datetime, target: Any) -> date | time | datetime:
    """Represent *value* as *target* (one of ``date``, ``time``, ``datetime``)."""
    if target is date:
        return value.date()
    if target is time:
        return value.timetz()
    return value


class DateCascadeStrategy(ConversionStrategy):
    def convert(self, request: ConversionRequest) -> Outcome:
        outcome = request.coercer.cascade.try_parse(request.declaration, request.text)
        if not outcome.ok:
            return outcome
        return Outcome.success(wrap_datetime(outcome.value, request.runtime_type))
