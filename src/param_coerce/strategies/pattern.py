"""``dataFormat`` pattern strategy — locale-aware numbers and dates.

The pattern is a best-effort hint: when it does not fit the text, or the
parsed value cannot be normalised to the target type, the strategy reports a
failed ``Outcome`` and the converter registry gets its turn.

Exports
-------
PatternMatcher
    Fires when the declaration carries a ``dataFormat`` and the target is
    numeric or date-family.

PatternStrategy
    Parse with ``request.coercer.formatter``, then normalise the ``Decimal`` /
    ``datetime`` through the converter registry (``to_text`` → ``from_text``)
    so that the result has exactly the target type.
"""

from __future__ import annotations

from ..core import ConversionRequest, ConversionStrategy, Outcome, StrategyMatcher
from ..matchers import is_date_type, is_numeric_type


class PatternMatcher(StrategyMatcher):
    def matches(self, request: ConversionRequest) -> bool:
        if not request.declaration.data_format:
            return False
        target = request.runtime_type
        return is_numeric_type(target) or is_date_type(target)


class PatternStrategy(ConversionStrategy):
    def convert(self, request: ConversionRequest) -> Outcome:
        coercer = request.coercer
        pattern = request.declaration.data_format
        target = request.runtime_type
        try:
            if is_numeric_type(target):
                parsed = coercer.formatter.parse_number(pattern, request.text)
            else:
                parsed = coercer.formatter.parse_datetime(pattern, request.text)
            text = coercer.converters.to_text(parsed)
            return Outcome.success(coercer.converters.from_text(text, target))
        except (LookupError, ValueError) as exc:
            # PatternParseError is a ValueError
            return Outcome.failure(f"pattern {pattern!r}: {exc}")
