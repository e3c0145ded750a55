"""Built-in string converters — the last-resort fallback of the Type Converter.

This module defines the standard ``str → value`` conversion functions used by
the ``registry`` strategy and by the pattern strategy to normalise a parsed
``Decimal`` / ``datetime`` into the precise target type.

Exports
-------
BUILTIN_CONVERTERS
    Dictionary mapping target types to converter functions.
    Default types: str, int, float, Decimal, bool, date, time, datetime.

ConverterRegistry
    Exact-type lookup over a converter dict, plus ``to_text`` / ``from_text``
    helpers.

Custom converters can be registered by passing a dict to
``build_default_coercer(converters=...)``.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping

Converter = Callable[[str], Any]

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


# ─────────────────────────────────────────────────────────────────────────────
# Built-in converters
# ─────────────────────────────────────────────────────────────────────────────


def _to_decimal(text: str) -> Decimal:
    try:
        return Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"not a decimal number: {text!r}") from None


def _to_int(text: str) -> int:
    """Accept plain integers and integral decimals (``"1234.00"``)."""
    try:
        return int(text)
    except ValueError:
        number = _to_decimal(text)
        if not number.is_finite() or number != number.to_integral_value():
            raise ValueError(f"not an integral number: {text!r}") from None
        return int(number)


def _to_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"not a boolean: {text!r}")


def _to_date(text: str) -> date:
    return datetime.fromisoformat(text.strip()).date()


def _to_time(text: str) -> time:
    text = text.strip()
    if "T" in text or " " in text:
        return datetime.fromisoformat(text).timetz()
    return time.fromisoformat(text)


BUILTIN_CONVERTERS: dict[type, Converter] = {
    str: str,
    int: _to_int,
    float: float,
    Decimal: _to_decimal,
    bool: _to_bool,
    date: _to_date,
    time: _to_time,
    datetime: lambda x: datetime.fromisoformat(x.strip()),
}


# ─────────────────────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────────────────────


class ConverterRegistry:
    """Exact-type lookup from target type to a ``str → value`` converter.

    The registry is populated once (usually by the factory) and only read
    afterwards, so a single instance may be shared by concurrent batches.

    ::

        registry = ConverterRegistry()
        registry.from_text("42", int)        # → 42
        registry.get(SomeUnknownType)        # → None
    """

    def __init__(self, converters: Mapping[type, Converter] | None = None) -> None:
        self._converters: dict[type, Converter] = dict(BUILTIN_CONVERTERS)
        if converters:
            self._converters.update(converters)

    def register(self, target: type, converter: Converter) -> None:
        """Add or replace the converter for *target*."""
        self._converters[target] = converter

    def get(self, target: type) -> Converter | None:
        return self._converters.get(target)

    def __contains__(self, target: object) -> bool:
        return target in self._converters

    @staticmethod
    def to_text(value: Any) -> str:
        """Render *value* in the canonical text form the converters accept."""
        if isinstance(value, Decimal):
            return format(value, "f")
        if isinstance(value, (date, time)):
            return value.isoformat()
        return str(value)

    def from_text(self, text: str, target: type) -> Any:
        """Convert *text* to *target*.

        Raises ``LookupError`` if no converter is registered and
        ``ValueError`` (or a subclass) if the converter rejects *text*.
        """
        converter = self.get(target)
        if converter is None:
            raise LookupError(f"no converter registered for {target!r}")
        try:
            return converter(text)
        except (TypeError, ArithmeticError) as exc:
            raise ValueError(str(exc)) from exc
