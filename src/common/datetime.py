"""Datetime utilities.

Front-matter dates arrive in three shapes. Each string is tried against the
patterns below in a fixed order and the first match wins; anything else is
rejected rather than guessed at.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

DATE_ONLY = "date-only"
DATETIME_NO_TZ = "datetime-no-tz"
DATETIME_WITH_TZ = "datetime-with-tz"

_DATE_ONLY_RE = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")
_DATETIME_RE = re.compile(
    r"^([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]{1,6}))?$"
)
_DATETIME_TZ_RE = re.compile(
    r"^([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]{1,6}))?"
    r"(?:(Z)|([+-])([0-9]{2}):([0-9]{2}))$"
)


class UnparsableDateError(ValueError):
    """Raised when a date string matches none of the supported formats."""


@dataclass(frozen=True)
class NormalizedDate:
    """A UTC instant plus the precision the source string carried."""

    instant: datetime
    precision: str
    fraction_digits: int = 0

    def isoformat(self) -> str:
        """Canonical UTC rendering, e.g. ``2025-12-06T19:58:03.136Z``."""
        text = self.instant.strftime("%Y-%m-%dT%H:%M:%S")
        if self.fraction_digits:
            micros = f"{self.instant.microsecond:06d}"
            text += "." + micros[: self.fraction_digits]
        return text + "Z"


def _build(groups: tuple[str | None, ...]) -> tuple[datetime, int]:
    year, month, day, hour, minute, second, fraction = groups[:7]
    digits = len(fraction) if fraction else 0
    micros = int(fraction.ljust(6, "0")) if fraction else 0
    try:
        value = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), micros,
            tzinfo=timezone.utc,
        )
    except ValueError as exc:
        raise UnparsableDateError(str(exc)) from exc
    return value, digits


def normalize_date(value: str | None) -> NormalizedDate:
    """Parse a raw front-matter date into a canonical UTC instant.

    Args:
        value: Raw date string. ``None`` and empty strings are rejected.

    Returns:
        NormalizedDate with the UTC instant and its precision tag.

    Raises:
        UnparsableDateError: If the string matches none of the supported formats.
    """
    if not isinstance(value, str) or not value.strip():
        raise UnparsableDateError(f"empty or non-string date: {value!r}")
    text = value.strip()

    match = _DATE_ONLY_RE.match(text)
    if match:
        try:
            instant = datetime(*(int(g) for g in match.groups()), tzinfo=timezone.utc)
        except ValueError as exc:
            raise UnparsableDateError(str(exc)) from exc
        return NormalizedDate(instant, DATE_ONLY)

    match = _DATETIME_RE.match(text)
    if match:
        instant, digits = _build(match.groups())
        return NormalizedDate(instant, DATETIME_NO_TZ, digits)

    match = _DATETIME_TZ_RE.match(text)
    if match:
        instant, digits = _build(match.groups())
        zulu, sign, off_hours, off_minutes = match.groups()[7:]
        if not zulu:
            if int(off_hours) > 23 or int(off_minutes) > 59:
                raise UnparsableDateError(f"invalid UTC offset in {text!r}")
            offset = timedelta(hours=int(off_hours), minutes=int(off_minutes))
            try:
                instant = instant - offset if sign == "+" else instant + offset
            except OverflowError as exc:
                raise UnparsableDateError(f"date out of range after UTC conversion: {text!r}") from exc
        return NormalizedDate(instant, DATETIME_WITH_TZ, digits)

    raise UnparsableDateError(f"unsupported date format: {text!r}")
