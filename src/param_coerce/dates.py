"""Date-parsing cascade — text → point in time with timezone policy.

The cascade is an ordered tuple of ``DateAttempt`` objects.  Each attempt
returns an ``Outcome``; the first success wins and the remaining attempts are
not consulted.  Only when every attempt failed does ``parse`` raise
``DateParseError``.

Default attempts::

    StrictTimezoneAttempt   yyyy-MM-dd'T'HH:mm:ss.SSS, placed per TimezoneSpec
    EpochMillisAttempt      legacy integer milliseconds since 1970-01-01 UTC
    DateOnlyAttempt         yyyy-MM-dd, naive midnight

The fixed patterns match a *prefix* of the text; anything after the matched
part is ignored.

Result types
------------
* ``server`` and date-only parses yield *naive* datetimes (local wall time).
* ``utc``, named zones, offset-carrying ``client`` input, and epoch values
  yield *aware* datetimes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, tzinfo
from typing import Optional, Sequence

import regex
from dateutil import tz

from .core import Outcome, ParameterDeclaration, TimezoneSpec
from .errors import DateParseError, PatternParseError
from .patterns import PatternFormatter

logger = logging.getLogger(__name__)

NAIVE_PATTERN = "yyyy-MM-dd'T'HH:mm:ss.SSS"
OFFSET_PATTERN = "yyyy-MM-dd'T'HH:mm:ss.SSSZ"
DATE_PATTERN = "yyyy-MM-dd"

#: A ``dataFormat`` made of year/month/day tokens only (no time of day).
ONLY_DATE_FORMAT = regex.compile(r"(y{4}|[dM]{2})([-/])([dM]{2})([-/])(y{4}|[dM]{2})")

_EPOCH = datetime(1970, 1, 1, tzinfo=tz.UTC)
_INTEGER = regex.compile(r"[+-]?\d+")


def is_only_date_format(data_format: Optional[str]) -> bool:
    """``yyyy-MM-dd``, ``dd/MM/yyyy`` … → True; anything with a time → False."""
    return data_format is not None and ONLY_DATE_FORMAT.fullmatch(data_format) is not None


def resolve_zone(zone_id: str) -> tzinfo:
    """Look up *zone_id*; unknown ids fall back to UTC."""
    zone = tz.gettz(zone_id)
    if zone is None:
        logger.warning("Unknown timezone %r, interpreting as UTC", zone_id)
        return tz.UTC
    return zone


# ─────────────────────────────────────────────────────────────────────────────
# Attempts
# ─────────────────────────────────────────────────────────────────────────────


class DateAttempt(ABC):
    """One step of the cascade."""

    name: str

    @abstractmethod
    def attempt(self, declaration: ParameterDeclaration, text: str) -> Outcome: ...


class _PatternAttempt(DateAttempt, ABC):
    def __init__(self, formatter: Optional[PatternFormatter] = None) -> None:
        # fixed numeric patterns, so the locale never matters
        self._formatter = formatter or PatternFormatter("en")

    def _parse(self, pattern: str, text: str) -> Outcome:
        try:
            return Outcome.success(self._formatter.parse_datetime(pattern, text, prefix_only=True))
        except PatternParseError as exc:
            return Outcome.failure(str(exc))


class StrictTimezoneAttempt(_PatternAttempt):
    """Full timestamp, interpreted according to the declaration's timezone.

    ``client`` with a date-only ``dataFormat`` parses the date alone, so a
    difference between client and server offsets can never move the day.
    """

    name = "strict"

    def attempt(self, declaration: ParameterDeclaration, text: str) -> Outcome:
        spec = declaration.timezone

        if spec.kind == TimezoneSpec.SERVER:
            return self._parse(NAIVE_PATTERN, text)

        if spec.kind == TimezoneSpec.CLIENT:
            pattern = DATE_PATTERN if is_only_date_format(declaration.data_format) else OFFSET_PATTERN
            outcome = self._parse(pattern, text)
            if outcome.ok:
                return outcome
            return self._parse(NAIVE_PATTERN, text)

        zone = tz.UTC if spec.kind == TimezoneSpec.UTC else resolve_zone(spec.zone_id)
        outcome = self._parse(NAIVE_PATTERN, text)
        if not outcome.ok:
            return outcome
        return Outcome.success(outcome.value.replace(tzinfo=zone))


class EpochMillisAttempt(DateAttempt):
    """Legacy encoding: milliseconds since the epoch as a bare integer."""

    name = "epoch-millis"

    def attempt(self, declaration: ParameterDeclaration, text: str) -> Outcome:
        if _INTEGER.fullmatch(text) is None:
            return Outcome.failure(f"{text!r} is not an integer")
        try:
            return Outcome.success(_EPOCH + timedelta(milliseconds=int(text)))
        except (OverflowError, ValueError):
            # ValueError: beyond the int string-conversion digit limit
            return Outcome.failure(f"{text!r} is out of range")


class DateOnlyAttempt(_PatternAttempt):
    name = "date-only"

    def attempt(self, declaration: ParameterDeclaration, text: str) -> Outcome:
        return self._parse(DATE_PATTERN, text)


# ─────────────────────────────────────────────────────────────────────────────
# Cascade
# ─────────────────────────────────────────────────────────────────────────────


class DateParsingCascade:
    """Run ``attempts`` in order until one succeeds.

    ::

        cascade = DateParsingCascade()
        cascade.parse(declaration, "2024-07-20T10:15:00.000")
        cascade.parse(declaration, "1700000000000")
    """

    def __init__(self, attempts: Optional[Sequence[DateAttempt]] = None) -> None:
        if attempts is None:
            attempts = (StrictTimezoneAttempt(), EpochMillisAttempt(), DateOnlyAttempt())
        self.attempts = tuple(attempts)

    def try_parse(self, declaration: ParameterDeclaration, text: str) -> Outcome:
        """Like ``parse`` but returns the failed ``Outcome`` instead of raising."""
        for step in self.attempts:
            outcome = step.attempt(declaration, text)
            if outcome.ok:
                return outcome
            logger.debug("date attempt %s failed for %r: %s", step.name, text, outcome.reason)
        return Outcome.failure("Unable to parse Date")

    def parse(self, declaration: ParameterDeclaration, text: str) -> datetime:
        outcome = self.try_parse(declaration, text)
        if not outcome.ok:
            raise DateParseError(outcome.reason)
        return outcome.value
