"""Shared StrategyMatcher implementations.

Only matchers that are genuinely reusable across several strategies live
here.  Matchers tightly coupled to a single strategy (e.g. ``TableMatcher``)
are co-located with that strategy in the ``strategies`` sub-package.

Exports
-------
AlwaysMatcher
    Unconditional match — catch-all / fallback sentinel.

InstanceMatcher
    The raw value already is an instance of the target type.

TargetTypeMatcher
    The target type is one of a fixed set of classes.

is_numeric_type / is_date_type
    Classification helpers for target types.
"""

from __future__ import annotations

import numbers
from datetime import date, datetime, time
from typing import Any, Iterable

from .core import ConversionRequest, StrategyMatcher, runtime_type

#: The date/time family handled by the date-parsing cascade.
DATE_TYPES: frozenset[type] = frozenset({date, time, datetime})


def is_numeric_type(tp: Any) -> bool:
    """``int``, ``float``, ``Decimal``, ``Fraction``… but not ``bool``."""
    tp = runtime_type(tp)
    return isinstance(tp, type) and issubclass(tp, numbers.Number) and not issubclass(tp, bool)


def is_date_type(tp: Any) -> bool:
    return tp in DATE_TYPES


class AlwaysMatcher(StrategyMatcher):
    """Unconditional match — use as a catch-all / fallback node.

    ::

        AlwaysMatcher().matches(anything)   # True
    """

    def matches(self, request: ConversionRequest) -> bool:
        return True


class InstanceMatcher(StrategyMatcher):
    """Match when ``raw_value`` is already an instance of the target type.

    Parameterised aliases (``list[int]``) are checked against their origin.
    Targets that are not classes never match.
    """

    def matches(self, request: ConversionRequest) -> bool:
        target = request.runtime_type
        return isinstance(target, type) and isinstance(request.raw_value, target)


class TargetTypeMatcher(StrategyMatcher):
    """Match when the target type is one of *types*.

    ::

        TargetTypeMatcher(DATE_TYPES).matches(request_for_datetime)   # True
    """

    def __init__(self, types: Iterable[type]) -> None:
        self._types = frozenset(types)

    def matches(self, request: ConversionRequest) -> bool:
        return request.runtime_type in self._types
