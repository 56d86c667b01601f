"""FastAPI application exposing sunrise, sunset, twilight and solar position."""

from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models import (
    DayWindowsModel,
    ErrorResponse,
    HealthResponse,
    PositionQueryParams,
    PositionResponse,
    SunQueryParams,
    SunResponse,
    TimeWindowModel,
    TwilightQueryParams,
    TwilightResponse,
)
from solar import SpaOptions, SpaValidationError, compute_sun_times, solar_position, twilight
from solar.astro import DayWindows
from solar.settings import ConfigurationError, get_settings
from solar.terms import B_TERMS, L_TERMS, PE_TERMS, R_TERMS

SETTINGS = get_settings()

logging.basicConfig(level=SETTINGS.log_level, format="%(message)s")
LOGGER = logging.getLogger("sunrise-api")

APP_DESCRIPTION = (
    "High-precision sunrise, sunset and solar position calculations based on the "
    "NREL Solar Position Algorithm"
)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - exercised in integration tests
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        LOGGER.error(json.dumps({"event": "settings_invalid", "error": str(exc)}))
        raise
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "delta_t": settings.delta_t,
                "term_counts": _term_counts(),
            }
        )
    )
    yield


app = FastAPI(
    title="Riseset API",
    description=APP_DESCRIPTION,
    version="2.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _term_counts() -> dict:
    counts = {term_set.name: list(term_set.term_counts) for term_set in (L_TERMS, B_TERMS, R_TERMS)}
    counts["nutation"] = [len(PE_TERMS)]
    return counts


def _format_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _format_local(dt: Optional[datetime], offset_hours: Optional[float]) -> Optional[str]:
    if dt is None or offset_hours is None:
        return None
    offset = timezone(timedelta(hours=offset_hours))
    return dt.astimezone(offset).isoformat()


def _format_windows(windows: DayWindows) -> DayWindowsModel:
    return DayWindowsModel(
        morning=TimeWindowModel(
            start=_format_utc(windows.morning.start), end=_format_utc(windows.morning.end)
        ),
        evening=TimeWindowModel(
            start=_format_utc(windows.evening.start), end=_format_utc(windows.evening.end)
        ),
    )


def _delta_t(value: Optional[float]) -> float:
    return SETTINGS.delta_t if value is None else value


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        code = detail.get("code") or f"http_{exc.status_code}"
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        code = f"http_{exc.status_code}"
        message = ", ".join(str(item) for item in detail)
    else:
        code = f"http_{exc.status_code}"
        message = str(detail)
    return _error_response(exc.status_code, code, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, algorithm="NREL-SPA", term_counts=_term_counts())


@app.get(
    "/sun",
    response_model=SunResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def sun_endpoint(params: SunQueryParams = Depends()) -> SunResponse:
    start_time = time.perf_counter()
    try:
        result = compute_sun_times(
            date_utc=params.date_utc,
            lat=params.lat,
            lon=params.lon,
            elev_m=params.elev_m,
            twilight=params.twilight.value,
            pressure_hpa=params.pressure_hpa,
            temperature_c=params.temperature_c,
            offset_hours=params.offset_hours,
            delta_t=_delta_t(params.delta_t),
        )
    except SpaValidationError as exc:
        raise HTTPException(
            status_code=400, detail={"code": f"spa_{int(exc.code)}", "error": str(exc)}
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = SunResponse(
        status=result["status"],
        date_utc=params.date_utc,
        latitude=params.lat,
        longitude=params.lon,
        elevation_m=params.elev_m,
        twilight=params.twilight,
        sunrise_utc=_format_utc(result.get("sunrise")),
        sunset_utc=_format_utc(result.get("sunset")),
        solar_noon_utc=_format_utc(result.get("solar_noon")),
        offset_hours=params.offset_hours,
        sunrise_local=_format_local(result.get("sunrise"), params.offset_hours),
        sunset_local=_format_local(result.get("sunset"), params.offset_hours),
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "sun",
                "lat": params.lat,
                "lon": params.lon,
                "date": params.date_utc.isoformat(),
                "twilight": params.twilight.value,
                "status": response.status,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response


@app.get(
    "/position",
    response_model=PositionResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def position_endpoint(params: PositionQueryParams = Depends()) -> PositionResponse:
    start_time = time.perf_counter()
    when = params.time_utc
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    options = SpaOptions(
        elevation=params.elev_m,
        pressure=params.pressure_hpa,
        temperature=params.temperature_c,
        delta_t=_delta_t(params.delta_t),
        slope=params.slope,
        azimuth_rotation=params.azimuth_rotation,
    )
    position = solar_position(params.lat, params.lon, when, options)
    if position is None:
        raise HTTPException(
            status_code=400,
            detail={"code": "spa_invalid_input", "error": "Inputs outside the SPA ranges"},
        )

    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.info(
        json.dumps(
            {
                "event": "position",
                "lat": params.lat,
                "lon": params.lon,
                "time": _format_utc(when),
                "zenith": round(position.zenith, 6),
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return PositionResponse(
        time_utc=_format_utc(when),
        latitude=params.lat,
        longitude=params.lon,
        zenith=position.zenith,
        azimuth=position.azimuth,
        azimuth_astro=position.azimuth_astro,
        elevation=position.elevation,
        right_ascension=position.right_ascension,
        declination=position.declination,
        hour_angle=position.hour_angle,
        incidence=position.incidence,
    )


@app.get(
    "/twilight",
    response_model=TwilightResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def twilight_endpoint(params: TwilightQueryParams = Depends()) -> TwilightResponse:
    start_time = time.perf_counter()
    if params.offset_hours is None:
        tz = UTC
    else:
        tz = timezone(timedelta(hours=params.offset_hours))
    when = datetime.combine(params.date_utc, datetime.min.time(), tzinfo=tz).replace(hour=12)
    times = twilight(params.lat, params.lon, when, SpaOptions(delta_t=SETTINGS.delta_t))

    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.info(
        json.dumps(
            {
                "event": "twilight",
                "lat": params.lat,
                "lon": params.lon,
                "date": params.date_utc.isoformat(),
                "available": times is not None,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )

    if times is None:
        return TwilightResponse(
            date_utc=params.date_utc,
            latitude=params.lat,
            longitude=params.lon,
            available=False,
        )
    return TwilightResponse(
        date_utc=params.date_utc,
        latitude=params.lat,
        longitude=params.lon,
        available=True,
        civil_dawn=_format_utc(times.civil_dawn),
        civil_dusk=_format_utc(times.civil_dusk),
        nautical_dawn=_format_utc(times.nautical_dawn),
        nautical_dusk=_format_utc(times.nautical_dusk),
        astronomical_dawn=_format_utc(times.astronomical_dawn),
        astronomical_dusk=_format_utc(times.astronomical_dusk),
        golden_hour=_format_windows(times.golden_hour),
        blue_hour=_format_windows(times.blue_hour),
    )
