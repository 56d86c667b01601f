"""NREL Solar Position Algorithm and sunrise/sunset queries for the Riseset API."""

from .astro import (
    TWILIGHT_ZENITHS,
    SolarPosition,
    SpaOptions,
    SunTimes,
    TwilightTimes,
    compute_sun_times,
    solar_noon,
    solar_position,
    sun_times,
    sunrise,
    sunset,
    twilight,
)
from .spa import SpaFunction, SpaInput, SpaResult, SpaValidationError, ValidationCode, spa_calculate

__all__ = [
    "compute_sun_times",
    "sunrise",
    "sunset",
    "solar_noon",
    "solar_position",
    "twilight",
    "sun_times",
    "spa_calculate",
    "SpaOptions",
    "SolarPosition",
    "SunTimes",
    "TwilightTimes",
    "SpaInput",
    "SpaResult",
    "SpaFunction",
    "SpaValidationError",
    "ValidationCode",
    "TWILIGHT_ZENITHS",
]
