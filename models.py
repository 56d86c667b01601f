"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Twilight(str, Enum):
    """Enumeration of supported twilight definitions."""

    official = "official"
    civil = "civil"
    nautical = "nautical"
    astronomical = "astronomical"


class _ObserverParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    elev_m: float = Field(0.0, ge=-500.0, description="Observer elevation in meters")
    pressure_hpa: float = Field(
        1013.0,
        ge=300.0,
        le=1100.0,
        description="Surface atmospheric pressure in hectopascals",
    )
    temperature_c: float = Field(
        15.0,
        ge=-80.0,
        le=60.0,
        description="Surface air temperature in degrees Celsius",
    )
    delta_t: Optional[float] = Field(
        None,
        ge=-8000.0,
        le=8000.0,
        description="TT - UT1 in seconds; defaults to the configured value",
    )


class SunQueryParams(_ObserverParams):
    """Validated query parameters for the ``/sun`` endpoint."""

    date_utc: date = Field(..., alias="date", description="Calendar date (YYYY-MM-DD)")
    offset_hours: Optional[float] = Field(
        None,
        description="Optional fixed offset in hours applied to derive local times",
    )
    twilight: Twilight = Field(Twilight.official, description="Twilight definition")

    @field_validator("offset_hours")
    def validate_offset_hours(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        if not -18.0 <= value <= 18.0:
            raise ValueError("offset_hours must be within ±18 hours")
        return value


class PositionQueryParams(_ObserverParams):
    """Validated query parameters for the ``/position`` endpoint."""

    time_utc: datetime = Field(
        ..., alias="time", description="Instant (ISO-8601); naive values are UTC"
    )
    slope: float = Field(0.0, ge=-360.0, le=360.0, description="Surface slope in degrees")
    azimuth_rotation: float = Field(
        0.0,
        ge=-360.0,
        le=360.0,
        description="Surface azimuth rotation from south in degrees",
    )


class TwilightQueryParams(BaseModel):
    """Validated query parameters for the ``/twilight`` endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    date_utc: date = Field(..., alias="date", description="Calendar date (YYYY-MM-DD)")
    offset_hours: Optional[float] = Field(
        None, ge=-18.0, le=18.0, description="Optional fixed offset in hours"
    )


class SunResponse(BaseModel):
    """Successful sunrise/sunset response payload."""

    ok: bool = True
    status: str = Field(..., description="Computation status")
    date_utc: date = Field(..., description="Requested calendar date")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    elevation_m: float = Field(..., description="Elevation above mean sea level")
    twilight: Twilight = Field(..., description="Applied twilight definition")
    sunrise_utc: Optional[str] = Field(
        None, description="Sunrise time in UTC (ISO-8601)"
    )
    sunset_utc: Optional[str] = Field(
        None, description="Sunset time in UTC (ISO-8601)"
    )
    solar_noon_utc: Optional[str] = Field(
        None, description="Solar transit time in UTC (ISO-8601)"
    )
    offset_hours: Optional[float] = Field(
        None, description="User-specified offset in hours"
    )
    sunrise_local: Optional[str] = Field(
        None, description="Sunrise expressed in local time when offset provided"
    )
    sunset_local: Optional[str] = Field(
        None, description="Sunset expressed in local time when offset provided"
    )
    source: Literal["NREL-SPA"] = Field(
        "NREL-SPA", description="Algorithm identifier"
    )


class PositionResponse(BaseModel):
    """Topocentric solar position; all angles in degrees."""

    ok: bool = True
    time_utc: str = Field(..., description="Instant of the position (ISO-8601)")
    latitude: float
    longitude: float
    zenith: float
    azimuth: float = Field(..., description="Eastward from north")
    azimuth_astro: float = Field(..., description="Westward from south")
    elevation: float
    right_ascension: float
    declination: float
    hour_angle: float
    incidence: Optional[float] = Field(None, description="Surface incidence angle")


class TimeWindowModel(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None


class DayWindowsModel(BaseModel):
    morning: TimeWindowModel
    evening: TimeWindowModel


class TwilightResponse(BaseModel):
    """Twilight bands; every instant is ISO-8601 or ``null`` if it does not occur."""

    ok: bool = True
    date_utc: date
    latitude: float
    longitude: float
    available: bool = Field(..., description="False on days without a solar transit")
    civil_dawn: Optional[str] = None
    civil_dusk: Optional[str] = None
    nautical_dawn: Optional[str] = None
    nautical_dusk: Optional[str] = None
    astronomical_dawn: Optional[str] = None
    astronomical_dusk: Optional[str] = None
    golden_hour: Optional[DayWindowsModel] = None
    blue_hour: Optional[DayWindowsModel] = None


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    algorithm: str
    term_counts: Dict[str, List[int]]


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
