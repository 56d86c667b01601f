"""Time-scale conversions: calendar date to the Julian Day family."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .angles import limit_zero2one

__all__ = [
    "J2000",
    "JulianDates",
    "julian_day",
    "julian_century",
    "julian_ephemeris_day",
    "julian_ephemeris_century",
    "julian_ephemeris_millennium",
    "julian_dates",
    "dayfrac_to_local_hr",
    "format_fractional_hour",
]

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0
SECONDS_PER_DAY = 86400.0
GREGORIAN_CUTOVER_JD = 2299160.0


@dataclass(frozen=True)
class JulianDates:
    """Julian Day and its ephemeris-time derivatives for one instant."""

    jd: float
    jc: float
    jde: float
    jce: float
    jme: float


def julian_day(
    year: int,
    month: int,
    day: int,
    hour: float,
    minute: float,
    second: float,
    delta_ut1: float,
    timezone: float,
) -> float:
    """Return the Julian Day of a local calendar instant.

    Parameters
    ----------
    year, month, day, hour, minute, second:
        Local civil time fields.
    delta_ut1:
        UT1 - UTC in seconds.
    timezone:
        Offset of the local time from UTC in hours (east positive).
    """

    y = year
    m = month
    day_decimal = day + (hour - timezone + (minute + (second + delta_ut1) / 60.0) / 60.0) / 24.0

    if m < 3:
        m += 12
        y -= 1

    jd = (
        math.floor(365.25 * (y + 4716.0))
        + math.floor(30.6001 * (m + 1))
        + day_decimal
        - 1524.5
    )

    if jd > GREGORIAN_CUTOVER_JD:
        a = math.floor(y / 100)
        jd += 2 - a + math.floor(a / 4)

    return jd


def julian_century(jd: float) -> float:
    return (jd - J2000) / DAYS_PER_CENTURY


def julian_ephemeris_day(jd: float, delta_t: float) -> float:
    return jd + delta_t / SECONDS_PER_DAY


def julian_ephemeris_century(jde: float) -> float:
    return (jde - J2000) / DAYS_PER_CENTURY


def julian_ephemeris_millennium(jce: float) -> float:
    return jce / 10.0


def julian_dates(jd: float, delta_t: float) -> JulianDates:
    jde = julian_ephemeris_day(jd, delta_t)
    jce = julian_ephemeris_century(jde)
    return JulianDates(
        jd=jd,
        jc=julian_century(jd),
        jde=jde,
        jce=jce,
        jme=julian_ephemeris_millennium(jce),
    )


def dayfrac_to_local_hr(dayfrac: float, timezone: float) -> float:
    """Convert a UT day fraction into local fractional hours in ``[0, 24)``."""

    return 24.0 * limit_zero2one(dayfrac + timezone / 24.0)


def format_fractional_hour(hours: Optional[float]) -> str:
    """Render fractional hours as ``HH:MM:SS.mmm`` (``N/A`` when undefined)."""

    if hours is None or not math.isfinite(hours) or hours < 0:
        return "N/A"
    total_ms = round(hours * 3_600_000)
    total_sec, ms = divmod(total_ms, 1000)
    h, rem = divmod(total_sec, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"
