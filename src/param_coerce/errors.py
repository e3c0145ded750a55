"""Error types raised by the coercion engine.

``CoercionError`` is the root of everything a caller of ``Coercer.apply``
may see recorded in a ``ValidationResult``.  ``SchemaError`` shares the root
but is never recorded: it aborts the whole batch.
"""

from __future__ import annotations

from typing import Any


class CoercionError(Exception):
    """Base class for all coercion failures."""


class ConversionError(CoercionError):
    """A string could not be coerced to the declared type.

    Attributes:
        parameter: Name of the offending parameter.
        value:     The stringified raw value.
    """

    def __init__(self, parameter: str, value: Any) -> None:
        self.parameter = parameter
        self.value = value
        super().__init__(f"Unable to convert parameter {parameter!r}: invalid value {value!r}")


class DateParseError(CoercionError):
    """Every attempt of the date-parsing cascade failed."""

    def __init__(self, message: str = "Unable to parse Date") -> None:
        super().__init__(message)


class SchemaError(CoercionError):
    """The declaration itself is unusable (e.g. no target type)."""


class PatternParseError(ValueError):
    """A ``dataFormat`` pattern did not match the text, or is unsupported."""
