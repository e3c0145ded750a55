"""Converter-registry fallback — the only strategy allowed to fail hard.

Exports
-------
ConverterMatcher
    Fires when ``request.coercer.converters`` has a converter for the target.

RegistryStrategy
    Calls the converter.  A rejection is terminal: it raises
    ``ConversionError`` naming the parameter and the offending text.
"""

from __future__ import annotations

from ..core import ConversionRequest, ConversionStrategy, Outcome, StrategyMatcher
from ..errors import ConversionError


class ConverterMatcher(StrategyMatcher):
    def matches(self, request: ConversionRequest) -> bool:
        return request.coercer.converters.get(request.runtime_type) is not None


class RegistryStrategy(ConversionStrategy):
    def convert(self, request: ConversionRequest) -> Outcome:
        try:
            return Outcome.success(request.coercer.converters.from_text(request.text, request.runtime_type))
        except (LookupError, ValueError) as exc:
            raise ConversionError(request.declaration.name, request.text) from exc
