"""Geocentric apparent position of the Sun."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .angles import deg2rad, limit_degrees, rad2deg

__all__ = [
    "GeocentricPosition",
    "geocentric_longitude",
    "geocentric_latitude",
    "aberration_correction",
    "apparent_sun_longitude",
    "geocentric_right_ascension",
    "geocentric_declination",
    "sun_mean_longitude",
    "sun_equatorial_horizontal_parallax",
]

ABERRATION_CONSTANT_ARCSEC = 20.4898
EQUATORIAL_PARALLAX_ARCSEC = 8.794


@dataclass(frozen=True)
class GeocentricPosition:
    """Apparent geocentric Sun coordinates and the quantities they derive from.

    Angles are in degrees, ``radius`` in AU, ``epsilon0`` in arc-seconds.
    """

    jme: float
    radius: float
    theta: float
    beta: float
    delta_psi: float
    delta_epsilon: float
    epsilon0: float
    epsilon: float
    delta_tau: float
    lamda: float
    nu0: float
    nu: float
    alpha: float
    delta: float


def geocentric_longitude(l: float) -> float:
    theta = l + 180.0
    if theta >= 360.0:
        theta -= 360.0
    return theta


def geocentric_latitude(b: float) -> float:
    return -b


def aberration_correction(r: float) -> float:
    return -ABERRATION_CONSTANT_ARCSEC / (3600.0 * r)


def apparent_sun_longitude(theta: float, delta_psi: float, delta_tau: float) -> float:
    return theta + delta_psi + delta_tau


def geocentric_right_ascension(lamda: float, epsilon: float, beta: float) -> float:
    """Right ascension in ``[0, 360)`` degrees."""

    lamda_rad = deg2rad(lamda)
    epsilon_rad = deg2rad(epsilon)
    return limit_degrees(
        rad2deg(
            math.atan2(
                math.sin(lamda_rad) * math.cos(epsilon_rad)
                - math.tan(deg2rad(beta)) * math.sin(epsilon_rad),
                math.cos(lamda_rad),
            )
        )
    )


def geocentric_declination(beta: float, epsilon: float, lamda: float) -> float:
    beta_rad = deg2rad(beta)
    epsilon_rad = deg2rad(epsilon)
    return rad2deg(
        math.asin(
            math.sin(beta_rad) * math.cos(epsilon_rad)
            + math.cos(beta_rad) * math.sin(epsilon_rad) * math.sin(deg2rad(lamda))
        )
    )


def sun_mean_longitude(jme: float) -> float:
    return limit_degrees(
        280.4664567
        + jme
        * (
            360007.6982779
            + jme
            * (
                0.03032028
                + jme * (1 / 49931.0 + jme * (-1 / 15300.0 + jme * (-1 / 2000000.0)))
            )
        )
    )


def sun_equatorial_horizontal_parallax(r: float) -> float:
    return EQUATORIAL_PARALLAX_ARCSEC / (3600.0 * r)
