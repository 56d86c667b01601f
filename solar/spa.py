"""SPA orchestrator: input validation and the fixed calculation pipeline."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .earth import heliocentric_position
from .nutation import (
    ecliptic_mean_obliquity,
    ecliptic_true_obliquity,
    fundamental_arguments,
    nutation_longitude_and_obliquity,
)
from .observer import (
    TopocentricPosition,
    greenwich_mean_sidereal_time,
    greenwich_sidereal_time,
    surface_incidence_angle,
    topocentric_position,
)
from .rts import Daylight, RiseTransitSet, calculate_eot_and_sun_rise_transit_set
from .sun import (
    GeocentricPosition,
    aberration_correction,
    apparent_sun_longitude,
    geocentric_declination,
    geocentric_latitude,
    geocentric_longitude,
    geocentric_right_ascension,
)
from .timescale import JulianDates, format_fractional_hour, julian_dates, julian_day

__all__ = [
    "REFRACTION_CORRECTION",
    "SpaFunction",
    "ValidationCode",
    "SpaValidationError",
    "SpaInput",
    "SpaResult",
    "validate_inputs",
    "geocentric_solar_position",
    "spa_calculate",
]

LOGGER = logging.getLogger(__name__)

REFRACTION_CORRECTION = 0.5667  # Atmospheric refraction at the horizon in degrees.


class SpaFunction(IntEnum):
    """Which optional stages :func:`spa_calculate` runs."""

    ZA = 0
    ZA_INC = 1
    ZA_RTS = 2
    ALL = 3

    @property
    def includes_incidence(self) -> bool:
        return self in (SpaFunction.ZA_INC, SpaFunction.ALL)

    @property
    def includes_rts(self) -> bool:
        return self in (SpaFunction.ZA_RTS, SpaFunction.ALL)


class ValidationCode(IntEnum):
    """Numbered input validation outcomes; ``OK`` means the input is usable."""

    OK = 0
    YEAR = 1
    MONTH = 2
    DAY = 3
    HOUR = 4
    MINUTE = 5
    SECOND = 6
    DELTA_T = 7
    TIMEZONE = 8
    LONGITUDE = 9
    LATITUDE = 10
    ELEVATION = 11
    PRESSURE = 12
    TEMPERATURE = 13
    ATMOSPHERIC_REFRACTION = 16
    DELTA_UT1 = 17


class SpaValidationError(ValueError):
    """Raised when an input field lies outside its documented range."""

    def __init__(self, code: ValidationCode) -> None:
        super().__init__(f"invalid SPA input: {code.name.lower()} (code {int(code)})")
        self.code = code

    @property
    def field(self) -> str:
        return self.code.name.lower()


@dataclass(frozen=True)
class SpaInput:
    """Observer, instant and atmosphere for a single SPA evaluation.

    Calendar fields are local civil time; ``timezone`` is the offset from UTC in
    hours. ``delta_ut1`` and ``delta_t`` are in seconds, ``elevation`` in meters,
    ``pressure`` in millibars, ``temperature`` in degrees Celsius and all angles
    in degrees. ``timezone_id`` is carried for display only.
    """

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: float
    latitude: float
    longitude: float
    timezone: float = 0.0
    delta_ut1: float = 0.0
    delta_t: float = 67.0
    elevation: float = 0.0
    pressure: float = 1013.0
    temperature: float = 15.0
    slope: float = 0.0
    azimuth_rotation: float = 0.0
    atmospheric_refraction: float = REFRACTION_CORRECTION
    timezone_id: Optional[str] = None
    function: SpaFunction = SpaFunction.ALL


@dataclass(frozen=True)
class SpaResult:
    """Everything one :func:`spa_calculate` pass produced."""

    inputs: SpaInput
    julian: JulianDates
    geocentric: GeocentricPosition
    topocentric: TopocentricPosition
    incidence: Optional[float] = None
    rts: Optional[RiseTransitSet] = None

    @property
    def zenith(self) -> float:
        return self.topocentric.zenith

    @property
    def azimuth(self) -> float:
        return self.topocentric.azimuth

    @property
    def azimuth_astro(self) -> float:
        return self.topocentric.azimuth_astro

    @property
    def elevation(self) -> float:
        return self.topocentric.e

    @property
    def right_ascension(self) -> float:
        return self.geocentric.alpha

    @property
    def declination(self) -> float:
        return self.geocentric.delta

    @property
    def hour_angle(self) -> float:
        return self.topocentric.h

    @property
    def sunrise(self) -> Optional[float]:
        return self.rts.sunrise if self.rts else None

    @property
    def suntransit(self) -> Optional[float]:
        return self.rts.suntransit if self.rts else None

    @property
    def sunset(self) -> Optional[float]:
        return self.rts.sunset if self.rts else None

    @property
    def equation_of_time(self) -> Optional[float]:
        return self.rts.equation_of_time if self.rts else None

    @property
    def daylight(self) -> Optional[Daylight]:
        return self.rts.daylight if self.rts else None


def validate_inputs(spa: SpaInput) -> ValidationCode:
    """Return the first violated range as a :class:`ValidationCode`."""

    if spa.year < -2000 or spa.year > 6000:
        return ValidationCode.YEAR
    if spa.month < 1 or spa.month > 12:
        return ValidationCode.MONTH
    if spa.day < 1 or spa.day > 31:
        return ValidationCode.DAY
    if spa.hour < 0 or spa.hour > 24:
        return ValidationCode.HOUR
    if spa.minute < 0 or spa.minute > 59:
        return ValidationCode.MINUTE
    if spa.second < 0 or spa.second >= 60:
        return ValidationCode.SECOND
    if spa.pressure < 0 or spa.pressure > 5000:
        return ValidationCode.PRESSURE
    if spa.temperature <= -273 or spa.temperature > 6000:
        return ValidationCode.TEMPERATURE
    if spa.delta_ut1 <= -1 or spa.delta_ut1 >= 1:
        return ValidationCode.DELTA_UT1
    if spa.hour == 24 and spa.minute > 0:
        return ValidationCode.MINUTE
    if spa.hour == 24 and spa.second > 0:
        return ValidationCode.SECOND
    if abs(spa.delta_t) > 8000:
        return ValidationCode.DELTA_T
    if abs(spa.timezone) > 18:
        return ValidationCode.TIMEZONE
    if abs(spa.longitude) > 180:
        return ValidationCode.LONGITUDE
    if abs(spa.latitude) > 90:
        return ValidationCode.LATITUDE
    if abs(spa.atmospheric_refraction) > 5:
        return ValidationCode.ATMOSPHERIC_REFRACTION
    if spa.elevation < -6500000:
        return ValidationCode.ELEVATION
    return ValidationCode.OK


def geocentric_solar_position(jd: float, delta_t: float) -> GeocentricPosition:
    """Apparent geocentric Sun position and sidereal time for Julian Day *jd*."""

    julian = julian_dates(jd, delta_t)
    helio = heliocentric_position(julian.jme)

    theta = geocentric_longitude(helio.longitude)
    beta = geocentric_latitude(helio.latitude)

    nutation = nutation_longitude_and_obliquity(julian.jce, fundamental_arguments(julian.jce))
    epsilon0 = ecliptic_mean_obliquity(julian.jme)
    epsilon = ecliptic_true_obliquity(nutation.delta_epsilon, epsilon0)

    delta_tau = aberration_correction(helio.radius)
    lamda = apparent_sun_longitude(theta, nutation.delta_psi, delta_tau)

    nu0 = greenwich_mean_sidereal_time(julian.jd, julian.jc)
    nu = greenwich_sidereal_time(nu0, nutation.delta_psi, epsilon)

    return GeocentricPosition(
        jme=julian.jme,
        radius=helio.radius,
        theta=theta,
        beta=beta,
        delta_psi=nutation.delta_psi,
        delta_epsilon=nutation.delta_epsilon,
        epsilon0=epsilon0,
        epsilon=epsilon,
        delta_tau=delta_tau,
        lamda=lamda,
        nu0=nu0,
        nu=nu,
        alpha=geocentric_right_ascension(lamda, epsilon, beta),
        delta=geocentric_declination(beta, epsilon, lamda),
    )


def spa_calculate(spa: SpaInput) -> SpaResult:
    """Run the SPA pipeline for *spa*.

    Raises
    ------
    SpaValidationError
        If any input is outside its documented range. No partial result is
        produced in that case.
    """

    code = validate_inputs(spa)
    if code is not ValidationCode.OK:
        raise SpaValidationError(code)

    jd = julian_day(
        spa.year,
        spa.month,
        spa.day,
        spa.hour,
        spa.minute,
        spa.second,
        spa.delta_ut1,
        spa.timezone,
    )
    julian = julian_dates(jd, spa.delta_t)
    geocentric = geocentric_solar_position(jd, spa.delta_t)
    topocentric = topocentric_position(
        geocentric,
        latitude=spa.latitude,
        longitude=spa.longitude,
        elevation=spa.elevation,
        pressure=spa.pressure,
        temperature=spa.temperature,
        atmospheric_refraction=spa.atmospheric_refraction,
    )

    incidence = None
    if spa.function.includes_incidence:
        incidence = surface_incidence_angle(
            topocentric.zenith,
            topocentric.azimuth_astro,
            spa.azimuth_rotation,
            spa.slope,
        )

    rts = None
    if spa.function.includes_rts:
        rts = calculate_eot_and_sun_rise_transit_set(
            spa.year,
            spa.month,
            spa.day,
            latitude=spa.latitude,
            longitude=spa.longitude,
            delta_t=spa.delta_t,
            timezone=spa.timezone,
            atmospheric_refraction=spa.atmospheric_refraction,
            geocentric=geocentric,
            position_at=geocentric_solar_position,
        )

    result = SpaResult(
        inputs=spa,
        julian=julian,
        geocentric=geocentric,
        topocentric=topocentric,
        incidence=incidence,
        rts=rts,
    )
    if LOGGER.isEnabledFor(logging.DEBUG):
        LOGGER.debug(
            json.dumps(
                {
                    "event": "spa_calculated",
                    "jd": jd,
                    "function": spa.function.name,
                    "zenith": round(result.zenith, 6),
                    "azimuth": round(result.azimuth, 6),
                    "sunrise": format_fractional_hour(result.sunrise),
                    "transit": format_fractional_hour(result.suntransit),
                    "sunset": format_fractional_hour(result.sunset),
                }
            )
        )
    return result
