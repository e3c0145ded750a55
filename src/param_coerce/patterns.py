"""Locale-aware ``dataFormat`` patterns — parsing and formatting.

A *format pattern* is an LDML-style template (``#,##0.00``, ``dd/MM/yyyy``,
``yyyy-MM-dd'T'HH:mm:ss.SSS``) that describes how a number or a point in
time is rendered as text.  ``PatternFormatter`` wraps Babel so that both
directions use the same CLDR locale data.

Numbers
    ``babel.numbers.parse_pattern`` supplies the affixes and the scale
    (``%`` → 2, ``‰`` → 3); ``babel.numbers.parse_decimal`` parses the digits
    with the locale's grouping and decimal symbols into a ``Decimal``.

Dates
    Babel can format any pattern but only parses the locale's own formats, so
    the pattern is tokenized with ``babel.dates.tokenize_pattern`` and compiled
    into a ``regex`` pattern.  Month, weekday, and AM/PM names come from the
    Babel ``Locale``.  Parsing is non-lenient: the whole text must match and
    every calendar field must be in range.

Compiled patterns are cached per (pattern, locale) with ``functools.lru_cache``
and are immutable, so a formatter is safe to share between threads.

Exports
-------
PatternFormatter
    ``parse_number`` / ``format_number`` / ``parse_datetime`` /
    ``format_datetime`` for a single locale.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Mapping, Tuple

import regex
from babel import Locale
from babel.dates import format_date, format_datetime, format_time, tokenize_pattern
from babel.numbers import (
    NumberFormatError,
    NumberPattern,
    format_decimal,
    get_minus_sign_symbol,
    parse_decimal,
    parse_pattern,
)
from dateutil import tz

from .errors import PatternParseError

_OFFSET = r"Z|[+-]\d{2}:?\d{2}"

#: Numeric field letters → the widest value they may carry.
_NUMERIC_FIELDS: dict[str, int] = {
    "d": 2, "H": 2, "k": 2, "K": 2, "h": 2, "m": 2, "s": 2,
}


# ─────────────────────────────────────────────────────────────────────────────
# Compiled date pattern
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class _DatePattern:
    """A date pattern compiled for one locale.

    Attributes:
        expr:   Compiled regex; group ``g<i>`` carries field ``fields[i]``.
        fields: ``(letter, count)`` for every captured field, in order.
        names:  Per-field lookup of lower-cased names → numbers (months, AM/PM).
    """

    expr: Any
    fields: Tuple[Tuple[str, int], ...]
    names: Mapping[int, Mapping[str, int]]


def _alternation(names: Mapping[str, int]) -> str:
    # longest first so "June" wins over "Jun"
    ordered = sorted(names, key=len, reverse=True)
    return "(?i:" + "|".join(regex.escape(n) for n in ordered) + ")"


def _name_table(values: Mapping[int, str]) -> dict[str, int]:
    return {name.lower(): key for key, name in values.items()}


def _period_table(locale: Locale) -> dict[str, int]:
    """AM/PM markers → hour offset, from every CLDR width the locale has."""
    table = {"am": 0, "pm": 12}
    sources = [
        locale.periods,
        locale.day_periods.get("format", {}).get("abbreviated", {}),
    ]
    for source in sources:
        for key, offset in (("am", 0), ("pm", 12)):
            if key in source:
                table[source[key].lower()] = offset
    return table


@functools.lru_cache(maxsize=256)
def _compile_date_pattern(pattern: str, locale_id: str) -> _DatePattern:
    locale = Locale.parse(locale_id)
    parts: list[str] = []
    fields: list[Tuple[str, int]] = []
    names: dict[int, dict[str, int]] = {}

    for kind, value in tokenize_pattern(pattern):
        if kind == "chars":
            parts.append(regex.escape(value))
            continue
        letter, count = value
        index = len(fields)
        if letter == "y":
            body = r"\d{2}" if count == 2 else r"\d{1,%d}" % max(count, 4)
        elif letter in ("M", "L"):
            if count <= 2:
                body = r"\d{1,2}"
            else:
                context = "format" if letter == "M" else "stand-alone"
                width = "abbreviated" if count == 3 else "wide"
                table = _name_table(locale.months[context][width])
                names[index] = table
                body = _alternation(table)
        elif letter in _NUMERIC_FIELDS:
            body = r"\d{1,%d}" % max(count, _NUMERIC_FIELDS[letter])
        elif letter == "S":
            body = r"\d{1,%d}" % max(count, 3)
        elif letter == "E":
            width = "wide" if count >= 4 else "abbreviated"
            body = _alternation(_name_table(locale.days["format"][width]))
        elif letter == "a":
            table = _period_table(locale)
            names[index] = table
            body = _alternation(table)
        elif letter in ("Z", "X", "x"):
            body = _OFFSET
        else:
            raise PatternParseError(f"unsupported pattern field {letter * count!r} in {pattern!r}")
        parts.append(f"(?P<g{index}>{body})")
        fields.append((letter, count))

    return _DatePattern(expr=regex.compile("".join(parts)), fields=tuple(fields), names=names)


def _parse_offset(text: str) -> tz.tzutc | tz.tzoffset:
    if text == "Z":
        return tz.UTC
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    seconds = sign * (int(digits[:2]) * 3600 + int(digits[2:]) * 60)
    return tz.UTC if seconds == 0 else tz.tzoffset(None, seconds)


def _build_datetime(compiled: _DatePattern, match: Any) -> datetime:
    year, month, day = 1970, 1, 1
    hour = minute = second = micro = 0
    half_day: int | None = None
    tzinfo = None

    for index, (letter, count) in enumerate(compiled.fields):
        raw = match.group(f"g{index}")
        if letter == "y":
            year = 2000 + int(raw) if count == 2 else int(raw)
        elif letter in ("M", "L"):
            month = compiled.names[index][raw.lower()] if index in compiled.names else int(raw)
        elif letter == "d":
            day = int(raw)
        elif letter == "H":
            hour = int(raw)
            if hour > 23:
                raise PatternParseError(f"hour out of range: {raw}")
        elif letter == "k":
            hour = int(raw)
            if not 1 <= hour <= 24:
                raise PatternParseError(f"hour out of range: {raw}")
            hour %= 24
        elif letter in ("h", "K"):
            hour = int(raw)
            low, high = (1, 12) if letter == "h" else (0, 11)
            if not low <= hour <= high:
                raise PatternParseError(f"hour out of range: {raw}")
            hour %= 12
        elif letter == "m":
            minute = int(raw)
        elif letter == "s":
            second = int(raw)
        elif letter == "S":
            # fractional seconds, CLDR style
            micro = int((raw + "000000")[:6])
        elif letter == "a":
            half_day = compiled.names[index][raw.lower()]
        elif letter in ("Z", "X", "x"):
            tzinfo = _parse_offset(raw)

    if half_day is not None:
        hour = hour % 12 + half_day

    try:
        return datetime(year, month, day, hour, minute, second, micro, tzinfo=tzinfo)
    except ValueError as exc:
        raise PatternParseError(str(exc)) from exc


@functools.lru_cache(maxsize=256)
def _number_pattern(pattern: str) -> NumberPattern:
    try:
        return parse_pattern(pattern)
    except ValueError as exc:
        raise PatternParseError(f"invalid number pattern {pattern!r}: {exc}") from exc


# ─────────────────────────────────────────────────────────────────────────────
# PatternFormatter
# ─────────────────────────────────────────────────────────────────────────────


class PatternFormatter:
    """Parse and format numbers and dates with a ``dataFormat`` pattern.

    Every ``parse_*`` failure is reported as ``PatternParseError``; callers
    that treat the pattern as a best-effort hint catch exactly that.

    ::

        fmt = PatternFormatter("en_US")
        fmt.parse_number("#,##0.00", "1,234.50")          # Decimal('1234.50')
        fmt.parse_datetime("dd MMM yyyy", "20 Jul 2024")  # datetime(2024, 7, 20)
    """

    def __init__(self, locale: str | Locale = "en_US") -> None:
        self.locale = Locale.parse(locale)
        # CLDR symbols of the Latin-digit numbering system
        self._symbols = self.locale.number_symbols["latn"]

    # -- numbers ------------------------------------------------------------

    def _localize_affix(self, affix: str) -> str:
        return (
            affix.replace("'", "")
            .replace("%", self._symbols["percentSign"])
            .replace("‰", self._symbols["perMille"])
        )

    def parse_number(self, pattern: str, text: str) -> Decimal:
        """Parse *text* into an arbitrary-precision ``Decimal``."""
        number_pattern = _number_pattern(pattern)
        prefix = self._localize_affix(number_pattern.prefix[0])
        suffix = self._localize_affix(number_pattern.suffix[0])

        body = text.strip()
        negative = False
        for minus in {"-", get_minus_sign_symbol(self.locale)}:
            if body.startswith(minus):
                negative = True
                body = body[len(minus):]
                break

        if prefix:
            if not body.startswith(prefix):
                raise PatternParseError(f"{text!r} lacks prefix {prefix!r}")
            body = body[len(prefix):]
        if suffix:
            if not body.endswith(suffix):
                raise PatternParseError(f"{text!r} lacks suffix {suffix!r}")
            body = body[:-len(suffix)]

        try:
            value = parse_decimal(body.strip(), locale=self.locale)
        except NumberFormatError as exc:
            raise PatternParseError(str(exc)) from exc

        if number_pattern.scale:
            value = value.scaleb(-number_pattern.scale)
        return -value if negative else value

    def format_number(self, pattern: str, value: Any) -> str:
        return format_decimal(value, format=pattern, locale=self.locale)

    # -- dates --------------------------------------------------------------

    def parse_datetime(self, pattern: str, text: str, *, prefix_only: bool = False) -> datetime:
        """Parse *text* with a date pattern.

        The result is naive unless the pattern has an offset field.

        ``prefix_only=True`` accepts trailing text after the match; the
        date-parsing cascade uses it for its fixed patterns.
        """
        compiled = _compile_date_pattern(pattern, str(self.locale))
        match = compiled.expr.match(text) if prefix_only else compiled.expr.fullmatch(text)
        if match is None:
            raise PatternParseError(f"{text!r} does not match pattern {pattern!r}")
        return _build_datetime(compiled, match)

    def format_datetime(self, pattern: str, value: date | time) -> str:
        if isinstance(value, datetime):
            return format_datetime(value, format=pattern, locale=self.locale)
        if isinstance(value, date):
            return format_date(value, format=pattern, locale=self.locale)
        return format_time(value, format=pattern, locale=self.locale)

