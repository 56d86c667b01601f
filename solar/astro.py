"""Public sunrise, sunset, twilight and solar position queries."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, timezone
from typing import Dict, Optional, Tuple

from .rts import Daylight, custom_zenith_times, zenith_crossing_cosine
from .spa import (
    REFRACTION_CORRECTION,
    SpaFunction,
    SpaInput,
    SpaResult,
    SpaValidationError,
    spa_calculate,
)

__all__ = [
    "SpaOptions",
    "SolarPosition",
    "TimeWindow",
    "DayWindows",
    "TwilightTimes",
    "SunTimes",
    "TWILIGHT_ZENITHS",
    "sunrise",
    "sunset",
    "solar_noon",
    "solar_position",
    "twilight",
    "sun_times",
    "compute_sun_times",
]

LOGGER = logging.getLogger(__name__)

ZENITH_CIVIL_TWILIGHT = 96.0
ZENITH_NAUTICAL_TWILIGHT = 102.0
ZENITH_ASTRONOMICAL_TWILIGHT = 108.0
ZENITH_GOLDEN_HOUR = 84.0
ZENITH_BLUE_HOUR = 94.0

TWILIGHT_ZENITHS: Dict[str, float] = {
    "civil": ZENITH_CIVIL_TWILIGHT,
    "nautical": ZENITH_NAUTICAL_TWILIGHT,
    "astronomical": ZENITH_ASTRONOMICAL_TWILIGHT,
}


@dataclass(frozen=True)
class SpaOptions:
    """Optional observer and atmosphere parameters of a query.

    ``timezone`` (hours) overrides the offset of the queried datetime;
    ``timezone_id`` only labels the returned datetimes.
    """

    elevation: float = 0.0
    pressure: float = 1013.0
    temperature: float = 15.0
    delta_ut1: float = 0.0
    delta_t: float = 67.0
    slope: float = 0.0
    azimuth_rotation: float = 0.0
    atmospheric_refraction: float = REFRACTION_CORRECTION
    timezone: Optional[float] = None
    timezone_id: Optional[str] = None


@dataclass(frozen=True)
class SolarPosition:
    """Sun position snapshot; all values in degrees."""

    zenith: float
    azimuth: float
    azimuth_astro: float
    elevation: float
    right_ascension: float
    declination: float
    hour_angle: float
    incidence: Optional[float] = None


@dataclass(frozen=True)
class TimeWindow:
    start: Optional[datetime]
    end: Optional[datetime]


@dataclass(frozen=True)
class DayWindows:
    morning: TimeWindow
    evening: TimeWindow


@dataclass(frozen=True)
class TwilightTimes:
    """Dawn/dusk instants of the twilight bands plus golden and blue hours."""

    civil_dawn: Optional[datetime]
    civil_dusk: Optional[datetime]
    nautical_dawn: Optional[datetime]
    nautical_dusk: Optional[datetime]
    astronomical_dawn: Optional[datetime]
    astronomical_dusk: Optional[datetime]
    golden_hour: DayWindows
    blue_hour: DayWindows


@dataclass(frozen=True)
class SunTimes:
    sunrise: Optional[datetime]
    sunset: Optional[datetime]
    solar_noon: Optional[datetime]
    twilight: Optional[TwilightTimes]


class _Query:
    """A validated SPA pass together with the local day it is anchored to."""

    def __init__(self, result: SpaResult, local: datetime) -> None:
        self.result = result
        self.midnight = datetime.combine(local.date(), time(0), tzinfo=local.tzinfo)

    def to_datetime(self, hours: Optional[float]) -> Optional[datetime]:
        if hours is None or not math.isfinite(hours) or hours < 0 or hours > 24:
            return None
        return self.midnight + timedelta(hours=hours)

    def to_instant(self, hours: Optional[float]) -> Optional[datetime]:
        """Like :meth:`to_datetime` but lets the instant fall on a neighbouring day."""

        if hours is None or not math.isfinite(hours):
            return None
        return self.midnight + timedelta(hours=hours)


def _localize(when: datetime, options: SpaOptions) -> datetime:
    if when.tzinfo is None or when.utcoffset() is None:
        raise ValueError("datetime must be timezone-aware")
    if options.timezone is None:
        offset = when.utcoffset()
    elif abs(options.timezone) < 24:
        offset = timedelta(hours=options.timezone)
    else:
        # Out-of-range offsets are rejected by SPA validation; keep the instant as is.
        return when
    if options.timezone_id:
        tzinfo = timezone(offset, options.timezone_id)
    else:
        tzinfo = timezone(offset)
    return when.astimezone(tzinfo)


def _spa_input(
    local: datetime,
    latitude: float,
    longitude: float,
    options: SpaOptions,
    function: SpaFunction,
) -> SpaInput:
    if options.timezone is not None:
        tz_hours = options.timezone
    else:
        tz_hours = local.utcoffset().total_seconds() / 3600.0
    return SpaInput(
        year=local.year,
        month=local.month,
        day=local.day,
        hour=local.hour,
        minute=local.minute,
        second=local.second + local.microsecond / 1_000_000,
        latitude=latitude,
        longitude=longitude,
        timezone=tz_hours,
        delta_ut1=options.delta_ut1,
        delta_t=options.delta_t,
        elevation=options.elevation,
        pressure=options.pressure,
        temperature=options.temperature,
        slope=options.slope,
        azimuth_rotation=options.azimuth_rotation,
        atmospheric_refraction=options.atmospheric_refraction,
        timezone_id=options.timezone_id,
        function=function,
    )


def _run(
    latitude: float,
    longitude: float,
    when: datetime,
    options: Optional[SpaOptions],
    function: SpaFunction,
) -> Optional[_Query]:
    options = options or SpaOptions()
    local = _localize(when, options)
    try:
        result = spa_calculate(_spa_input(local, latitude, longitude, options, function))
    except SpaValidationError as exc:
        LOGGER.warning(
            json.dumps(
                {
                    "event": "spa_invalid_input",
                    "code": int(exc.code),
                    "field": exc.field,
                    "lat": latitude,
                    "lon": longitude,
                    "when": when.isoformat(),
                }
            )
        )
        return None
    return _Query(result, local)


def _twilight_times(query: _Query) -> Optional[TwilightTimes]:
    result = query.result
    transit = result.suntransit
    if transit is None:
        return None

    latitude = result.inputs.latitude
    declination = result.geocentric.delta

    def crossings(zenith: float) -> Tuple[Optional[datetime], Optional[datetime]]:
        hours = custom_zenith_times(latitude, declination, transit, zenith)
        if hours is None:
            return None, None
        return query.to_datetime(hours[0]), query.to_datetime(hours[1])

    civil = crossings(ZENITH_CIVIL_TWILIGHT)
    nautical = crossings(ZENITH_NAUTICAL_TWILIGHT)
    astronomical = crossings(ZENITH_ASTRONOMICAL_TWILIGHT)
    golden = crossings(ZENITH_GOLDEN_HOUR)
    blue = crossings(ZENITH_BLUE_HOUR)
    rise = query.to_datetime(result.sunrise)
    set_ = query.to_datetime(result.sunset)

    return TwilightTimes(
        civil_dawn=civil[0],
        civil_dusk=civil[1],
        nautical_dawn=nautical[0],
        nautical_dusk=nautical[1],
        astronomical_dawn=astronomical[0],
        astronomical_dusk=astronomical[1],
        golden_hour=DayWindows(
            morning=TimeWindow(start=rise, end=golden[0]),
            evening=TimeWindow(start=golden[1], end=set_),
        ),
        blue_hour=DayWindows(
            morning=TimeWindow(start=blue[0], end=rise),
            evening=TimeWindow(start=set_, end=blue[1]),
        ),
    )


def sunrise(
    latitude: float,
    longitude: float,
    when: datetime,
    options: Optional[SpaOptions] = None,
) -> Optional[datetime]:
    """Local sunrise on the calendar day of *when*, or ``None`` if there is none."""

    query = _run(latitude, longitude, when, options, SpaFunction.ZA_RTS)
    if query is None:
        return None
    return query.to_datetime(query.result.sunrise)


def sunset(
    latitude: float,
    longitude: float,
    when: datetime,
    options: Optional[SpaOptions] = None,
) -> Optional[datetime]:
    """Local sunset on the calendar day of *when*, or ``None`` if there is none."""

    query = _run(latitude, longitude, when, options, SpaFunction.ZA_RTS)
    if query is None:
        return None
    return query.to_datetime(query.result.sunset)


def solar_noon(
    latitude: float,
    longitude: float,
    when: datetime,
    options: Optional[SpaOptions] = None,
) -> Optional[datetime]:
    query = _run(latitude, longitude, when, options, SpaFunction.ZA_RTS)
    if query is None:
        return None
    return query.to_datetime(query.result.suntransit)


def solar_position(
    latitude: float,
    longitude: float,
    when: datetime,
    options: Optional[SpaOptions] = None,
) -> Optional[SolarPosition]:
    """Topocentric Sun position at the instant *when*.

    Right ascension, declination and hour angle are the geocentric values;
    ``incidence`` is the angle of incidence on the surface described by the
    ``slope`` and ``azimuth_rotation`` options.
    """

    query = _run(latitude, longitude, when, options, SpaFunction.ZA_INC)
    if query is None:
        return None
    result = query.result
    return SolarPosition(
        zenith=result.zenith,
        azimuth=result.azimuth,
        azimuth_astro=result.azimuth_astro,
        elevation=result.elevation,
        right_ascension=result.right_ascension,
        declination=result.declination,
        hour_angle=result.hour_angle,
        incidence=result.incidence,
    )


def twilight(
    latitude: float,
    longitude: float,
    when: datetime,
    options: Optional[SpaOptions] = None,
) -> Optional[TwilightTimes]:
    query = _run(latitude, longitude, when, options, SpaFunction.ZA_RTS)
    if query is None:
        return None
    return _twilight_times(query)


def sun_times(
    latitude: float,
    longitude: float,
    when: datetime,
    options: Optional[SpaOptions] = None,
) -> SunTimes:
    """Sunrise, sunset, solar noon and twilight from a single SPA pass."""

    query = _run(latitude, longitude, when, options, SpaFunction.ALL)
    if query is None:
        return SunTimes(sunrise=None, sunset=None, solar_noon=None, twilight=None)
    result = query.result
    return SunTimes(
        sunrise=query.to_datetime(result.sunrise),
        sunset=query.to_datetime(result.sunset),
        solar_noon=query.to_datetime(result.suntransit),
        twilight=_twilight_times(query),
    )


def compute_sun_times(
    date_utc: date,
    lat: float,
    lon: float,
    elev_m: float,
    twilight: str,
    pressure_hpa: float = 1013.0,
    temperature_c: float = 15.0,
    offset_hours: Optional[float] = None,
    delta_t: float = 67.0,
) -> Dict[str, object]:
    """Compute sunrise and sunset for the given date and location.

    Parameters
    ----------
    date_utc:
        Calendar date. It is interpreted in the ``offset_hours`` zone when
        given, otherwise in the observer's nominal solar zone
        (``round(lon / 15)`` hours) so that the day brackets local solar noon.
    lat, lon:
        Geographic coordinates in degrees (east-positive longitude).
    elev_m:
        Observer elevation above mean sea level in meters.
    twilight:
        ``official`` for the refraction-corrected horizon, or one of
        :data:`TWILIGHT_ZENITHS` for the corresponding dawn/dusk.
    pressure_hpa, temperature_c:
        Surface atmosphere used for refraction.
    offset_hours:
        Local offset from UTC; ``None`` returns UTC datetimes.
    delta_t:
        TT - UT1 in seconds.

    Returns
    -------
    dict
        Dictionary containing ``sunrise``, ``sunset``, ``solar_noon`` and
        ``status`` keys. ``status`` is ``ok``, ``polar_day`` or ``polar_night``
        for the selected twilight definition; ``sunrise`` and ``sunset`` are
        both set exactly when it is ``ok``. ``solar_noon`` is the Sun's upper
        culmination, reported on polar days and nights too.

    Raises
    ------
    ValueError
        For an unknown twilight selector or inputs outside the SPA ranges.
    """

    if twilight != "official" and twilight not in TWILIGHT_ZENITHS:
        raise ValueError(f"Unsupported twilight selector: {twilight}")

    tz_hours = float(round(lon / 15.0)) if offset_hours is None else offset_hours
    when = datetime.combine(date_utc, time(12), tzinfo=timezone(timedelta(hours=tz_hours)))
    options = SpaOptions(
        elevation=elev_m,
        pressure=pressure_hpa,
        temperature=temperature_c,
        delta_t=delta_t,
    )
    local = _localize(when, options)
    result = spa_calculate(_spa_input(local, lat, lon, options, SpaFunction.ZA_RTS))
    query = _Query(result, local)
    rts = result.rts

    if twilight == "official":
        rise = query.to_datetime(result.sunrise)
        set_ = query.to_datetime(result.sunset)
        status = rts.daylight.value
    else:
        zenith = TWILIGHT_ZENITHS[twilight]
        hours = custom_zenith_times(lat, result.geocentric.delta, rts.culmination, zenith)
        if hours is None:
            rise = set_ = None
            if zenith_crossing_cosine(lat, result.geocentric.delta, zenith) < -1:
                status = Daylight.polar_day.value
            else:
                status = Daylight.polar_night.value
        else:
            rise = query.to_instant(hours[0])
            set_ = query.to_instant(hours[1])
            status = Daylight.normal.value

    noon = query.to_instant(rts.culmination)
    if offset_hours is None:
        rise, set_, noon = (
            moment.astimezone(UTC) if moment is not None else None for moment in (rise, set_, noon)
        )

    return {
        "sunrise": rise,
        "sunset": set_,
        "solar_noon": noon,
        "status": status,
    }
