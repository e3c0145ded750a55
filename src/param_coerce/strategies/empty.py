"""Empty-text strategy — ``""`` converts to ``None`` for every target."""

from __future__ import annotations

from ..core import ConversionRequest, ConversionStrategy, Outcome, StrategyMatcher


class EmptyTextMatcher(StrategyMatcher):
    def matches(self, request: ConversionRequest) -> bool:
        return request.text == ""


class EmptyTextStrategy(ConversionStrategy):
    # no converter treats an empty string as meaningful input
    def convert(self, request: ConversionRequest) -> Outcome:
        return Outcome.success(None)
