"""Sunrise, solar transit and sunset (RTS) times.

The engine samples the geocentric Sun at 0h UT on the day before, the day of
and the day after the requested date, derives approximate event times from the
hour angle at the horizon, then refines every event once by interpolating the
samples. Days on which the Sun never crosses the horizon are reported through
:class:`Daylight` and ``None`` event times rather than an exception.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

from .angles import (
    deg2rad,
    limit_degrees180pm,
    limit_minutes,
    limit_zero2one,
    rad2deg,
)
from .observer import SUN_RADIUS
from .sun import GeocentricPosition, sun_mean_longitude
from .timescale import SECONDS_PER_DAY, dayfrac_to_local_hr, julian_day

__all__ = [
    "Daylight",
    "RiseTransitSet",
    "sun_hour_angle_at_rise_set",
    "approx_sun_transit_time",
    "approx_sun_rise_and_set",
    "rts_alpha_delta_prime",
    "rts_sun_altitude",
    "sun_rise_and_set",
    "equation_of_time",
    "calculate_eot_and_sun_rise_transit_set",
    "zenith_crossing_cosine",
    "custom_zenith_times",
]

LOGGER = logging.getLogger(__name__)

SIDEREAL_DEGREES_PER_DAY = 360.985647

PositionCalculator = Callable[[float, float], GeocentricPosition]

# Sample and event indices.
JD_MINUS, JD_ZERO, JD_PLUS = 0, 1, 2
SUN_TRANSIT, SUN_RISE, SUN_SET = 0, 1, 2


class Daylight(str, Enum):
    """How the Sun relates to the rise/set horizon on a given day."""

    normal = "ok"
    polar_day = "polar_day"
    polar_night = "polar_night"


@dataclass(frozen=True)
class RiseTransitSet:
    """Rise/transit/set outcome for one local calendar day.

    Times are local fractional hours, hour angles and altitude are degrees and
    the equation of time is in minutes. Rise, transit and set fields are
    ``None`` unless ``daylight`` is :attr:`Daylight.normal`. ``culmination``
    (the local hour of the upper meridian passage) and ``transit_altitude``
    are set on every day; ``culmination`` equals ``suntransit`` when defined.
    """

    daylight: Daylight
    equation_of_time: float
    sunrise: Optional[float] = None
    suntransit: Optional[float] = None
    sunset: Optional[float] = None
    sunrise_hour_angle: Optional[float] = None
    sunset_hour_angle: Optional[float] = None
    transit_altitude: Optional[float] = None
    culmination: Optional[float] = None


def _rise_set_cosine(latitude: float, delta_zero: float, h0_prime: float) -> float:
    latitude_rad = deg2rad(latitude)
    delta_zero_rad = deg2rad(delta_zero)
    return (math.sin(deg2rad(h0_prime)) - math.sin(latitude_rad) * math.sin(delta_zero_rad)) / (
        math.cos(latitude_rad) * math.cos(delta_zero_rad)
    )


def sun_hour_angle_at_rise_set(
    latitude: float, delta_zero: float, h0_prime: float
) -> Optional[float]:
    """Hour angle H0 in ``[0, 180]`` degrees, or ``None`` if the horizon is never crossed."""

    argument = _rise_set_cosine(latitude, delta_zero, h0_prime)
    if abs(argument) > 1:
        return None
    return rad2deg(math.acos(argument))


def approx_sun_transit_time(alpha_zero: float, longitude: float, nu: float) -> float:
    return (alpha_zero - longitude - nu) / 360.0


def approx_sun_rise_and_set(transit: float, h0: float) -> Tuple[float, float, float]:
    """Return approximate ``(transit, rise, set)`` day fractions in ``[0, 1)``."""

    h0_dfrac = h0 / 360.0
    return (
        limit_zero2one(transit),
        limit_zero2one(transit - h0_dfrac),
        limit_zero2one(transit + h0_dfrac),
    )


def rts_alpha_delta_prime(ad: Sequence[float], n: float) -> float:
    """Interpolate a three-day sample at day fraction *n*.

    Day-to-day differences of two or more are folded into ``[0, 1)`` so that a
    right ascension crossing 360/0 does not produce a spurious jump.
    """

    a = ad[JD_ZERO] - ad[JD_MINUS]
    b = ad[JD_PLUS] - ad[JD_ZERO]
    if abs(a) >= 2.0:
        a = limit_zero2one(a)
    if abs(b) >= 2.0:
        b = limit_zero2one(b)
    return ad[JD_ZERO] + n * (a + b + (b - a) * n) / 2.0


def rts_sun_altitude(latitude: float, delta_prime: float, h_prime: float) -> float:
    latitude_rad = deg2rad(latitude)
    delta_prime_rad = deg2rad(delta_prime)
    return rad2deg(
        math.asin(
            math.sin(latitude_rad) * math.sin(delta_prime_rad)
            + math.cos(latitude_rad) * math.cos(delta_prime_rad) * math.cos(deg2rad(h_prime))
        )
    )


def sun_rise_and_set(
    m_rts: Sequence[float],
    h_rts: Sequence[float],
    delta_prime: Sequence[float],
    latitude: float,
    h_prime: Sequence[float],
    h0_prime: float,
    sun: int,
) -> float:
    """Correct the rise (``sun=SUN_RISE``) or set day fraction by one Newton step."""

    return m_rts[sun] + (h_rts[sun] - h0_prime) / (
        360.0
        * math.cos(deg2rad(delta_prime[sun]))
        * math.cos(deg2rad(latitude))
        * math.sin(deg2rad(h_prime[sun]))
    )


def equation_of_time(m: float, alpha: float, delta_psi: float, epsilon: float) -> float:
    """Equation of time in minutes, folded into ``[-20, 20]``."""

    return limit_minutes(4.0 * (m - 0.0057183 - alpha + delta_psi * math.cos(deg2rad(epsilon))))


def calculate_eot_and_sun_rise_transit_set(
    year: int,
    month: int,
    day: int,
    latitude: float,
    longitude: float,
    delta_t: float,
    timezone: float,
    atmospheric_refraction: float,
    geocentric: GeocentricPosition,
    position_at: PositionCalculator,
) -> RiseTransitSet:
    """Compute the equation of time and the local RTS times of one day.

    Parameters
    ----------
    year, month, day:
        Local calendar date of interest.
    latitude, longitude:
        Observer coordinates in degrees (east-positive longitude).
    delta_t:
        TT - UT1 in seconds.
    timezone:
        Local offset from UTC in hours, used for the returned times.
    atmospheric_refraction:
        Refraction at the horizon in degrees.
    geocentric:
        Sun position at the requested instant (for the equation of time).
    position_at:
        Callable returning the geocentric position for ``(jd, delta_t)``.
    """

    h0_prime = -(SUN_RADIUS + atmospheric_refraction)
    eot = equation_of_time(
        sun_mean_longitude(geocentric.jme),
        geocentric.alpha,
        geocentric.delta_psi,
        geocentric.epsilon,
    )

    midnight_jd = julian_day(year, month, day, 0, 0, 0, 0, 0)
    samples = [position_at(midnight_jd + offset, delta_t) for offset in (-1, 0, 1)]
    nu = samples[JD_ZERO].nu
    alpha = [sample.alpha for sample in samples]
    delta = [sample.delta for sample in samples]

    m0 = approx_sun_transit_time(alpha[JD_ZERO], longitude, nu)

    def refine(m: float) -> Tuple[float, float, float]:
        nu_rts = nu + SIDEREAL_DEGREES_PER_DAY * m
        n = m + delta_t / SECONDS_PER_DAY
        alpha_prime = rts_alpha_delta_prime(alpha, n)
        delta_prime = rts_alpha_delta_prime(delta, n)
        h_prime = limit_degrees180pm(nu_rts + longitude - alpha_prime)
        return h_prime, delta_prime, rts_sun_altitude(latitude, delta_prime, h_prime)

    h0 = sun_hour_angle_at_rise_set(latitude, delta[JD_ZERO], h0_prime)
    if h0 is None:
        m_transit = limit_zero2one(m0)
        h_transit, _, transit_altitude = refine(m_transit)
        if _rise_set_cosine(latitude, delta[JD_ZERO], h0_prime) < -1:
            daylight = Daylight.polar_day
        else:
            daylight = Daylight.polar_night
        LOGGER.debug(
            json.dumps(
                {
                    "event": "rts_no_horizon_crossing",
                    "date": f"{year:04d}-{month:02d}-{day:02d}",
                    "latitude": latitude,
                    "daylight": daylight.value,
                }
            )
        )
        return RiseTransitSet(
            daylight=daylight,
            equation_of_time=eot,
            transit_altitude=transit_altitude,
            culmination=dayfrac_to_local_hr(m_transit - h_transit / 360.0, timezone),
        )

    m_rts = approx_sun_rise_and_set(m0, h0)
    h_prime, delta_prime, h_rts = zip(*(refine(m) for m in m_rts))

    transit = m_rts[SUN_TRANSIT] - h_prime[SUN_TRANSIT] / 360.0
    transit_hour = dayfrac_to_local_hr(transit, timezone)
    rise = sun_rise_and_set(m_rts, h_rts, delta_prime, latitude, h_prime, h0_prime, SUN_RISE)
    set_ = sun_rise_and_set(m_rts, h_rts, delta_prime, latitude, h_prime, h0_prime, SUN_SET)

    return RiseTransitSet(
        daylight=Daylight.normal,
        equation_of_time=eot,
        sunrise=dayfrac_to_local_hr(rise, timezone),
        suntransit=transit_hour,
        sunset=dayfrac_to_local_hr(set_, timezone),
        sunrise_hour_angle=h_prime[SUN_RISE],
        sunset_hour_angle=h_prime[SUN_SET],
        transit_altitude=h_rts[SUN_TRANSIT],
        culmination=transit_hour,
    )


def zenith_crossing_cosine(latitude: float, delta: float, zenith: float) -> float:
    """Cosine of the hour angle at which the Sun reaches *zenith*.

    Below -1 the Sun stays closer to the zenith all day, above 1 it never gets there.
    """

    lat_rad = deg2rad(latitude)
    delta_rad = deg2rad(delta)
    return (math.cos(deg2rad(zenith)) - math.sin(lat_rad) * math.sin(delta_rad)) / (
        math.cos(lat_rad) * math.cos(delta_rad)
    )


def custom_zenith_times(
    latitude: float,
    delta: float,
    transit: float,
    zenith: float,
) -> Optional[Tuple[float, float]]:
    """Closed-form ``(morning, evening)`` hours at which the Sun reaches *zenith*.

    Uses the declination *delta* held constant over the day around the local
    *transit* hour; returns ``None`` when the Sun never reaches that zenith angle.
    """

    cos_h0 = zenith_crossing_cosine(latitude, delta, zenith)
    if cos_h0 < -1 or cos_h0 > 1:
        return None
    h0_hours = rad2deg(math.acos(cos_h0)) / 15.0
    return transit - h0_hours, transit + h0_hours
