"""Observer-dependent corrections: sidereal time, parallax, refraction, azimuth."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .angles import deg2rad, limit_degrees, rad2deg
from .sun import GeocentricPosition, sun_equatorial_horizontal_parallax

__all__ = [
    "SUN_RADIUS",
    "TopocentricPosition",
    "greenwich_mean_sidereal_time",
    "greenwich_sidereal_time",
    "observer_hour_angle",
    "right_ascension_parallax_and_topocentric_dec",
    "topocentric_right_ascension",
    "topocentric_local_hour_angle",
    "topocentric_elevation_angle",
    "atmospheric_refraction_correction",
    "topocentric_elevation_angle_corrected",
    "topocentric_zenith_angle",
    "topocentric_azimuth_angle_astro",
    "topocentric_azimuth_angle",
    "surface_incidence_angle",
    "topocentric_position",
]

SUN_RADIUS = 0.26667  # Apparent solar semi-diameter in degrees.
EARTH_RADIUS_M = 6378140.0
EARTH_AXIS_RATIO = 0.99664719  # Polar/equatorial radius ratio (1 - flattening).


@dataclass(frozen=True)
class TopocentricPosition:
    """Sun position as seen by the observer; all angles in degrees."""

    h: float
    xi: float
    delta_alpha: float
    delta_prime: float
    alpha_prime: float
    h_prime: float
    e0: float
    delta_e: float
    e: float
    zenith: float
    azimuth_astro: float
    azimuth: float


def greenwich_mean_sidereal_time(jd: float, jc: float) -> float:
    return limit_degrees(
        280.46061837
        + 360.98564736629 * (jd - 2451545.0)
        + jc * jc * (0.000387933 - jc / 38710000.0)
    )


def greenwich_sidereal_time(nu0: float, delta_psi: float, epsilon: float) -> float:
    return nu0 + delta_psi * math.cos(deg2rad(epsilon))


def observer_hour_angle(nu: float, longitude: float, alpha_deg: float) -> float:
    return limit_degrees(nu + longitude - alpha_deg)


def right_ascension_parallax_and_topocentric_dec(
    latitude: float,
    elevation: float,
    xi: float,
    h: float,
    delta: float,
) -> Tuple[float, float]:
    """Return ``(delta_alpha, delta_prime)`` for an oblate Earth, in degrees."""

    lat_rad = deg2rad(latitude)
    xi_rad = deg2rad(xi)
    h_rad = deg2rad(h)
    delta_rad = deg2rad(delta)

    u = math.atan(EARTH_AXIS_RATIO * math.tan(lat_rad))
    y = EARTH_AXIS_RATIO * math.sin(u) + elevation * math.sin(lat_rad) / EARTH_RADIUS_M
    x = math.cos(u) + elevation * math.cos(lat_rad) / EARTH_RADIUS_M

    denominator = math.cos(delta_rad) - x * math.sin(xi_rad) * math.cos(h_rad)
    delta_alpha_rad = math.atan2(-x * math.sin(xi_rad) * math.sin(h_rad), denominator)
    delta_prime = rad2deg(
        math.atan2(
            (math.sin(delta_rad) - y * math.sin(xi_rad)) * math.cos(delta_alpha_rad),
            denominator,
        )
    )
    return rad2deg(delta_alpha_rad), delta_prime


def topocentric_right_ascension(alpha_deg: float, delta_alpha: float) -> float:
    return alpha_deg + delta_alpha


def topocentric_local_hour_angle(h: float, delta_alpha: float) -> float:
    return h - delta_alpha


def topocentric_elevation_angle(latitude: float, delta_prime: float, h_prime: float) -> float:
    lat_rad = deg2rad(latitude)
    delta_prime_rad = deg2rad(delta_prime)
    return rad2deg(
        math.asin(
            math.sin(lat_rad) * math.sin(delta_prime_rad)
            + math.cos(lat_rad) * math.cos(delta_prime_rad) * math.cos(deg2rad(h_prime))
        )
    )


def atmospheric_refraction_correction(
    pressure: float,
    temperature: float,
    atmospheric_refraction: float,
    e0: float,
) -> float:
    """Refraction lift in degrees; zero once the Sun is fully below the horizon."""

    if e0 < -(SUN_RADIUS + atmospheric_refraction):
        return 0.0
    return (
        (pressure / 1010.0)
        * (283.0 / (273.0 + temperature))
        * 1.02
        / (60.0 * math.tan(deg2rad(e0 + 10.3 / (e0 + 5.11))))
    )


def topocentric_elevation_angle_corrected(e0: float, delta_e: float) -> float:
    return e0 + delta_e


def topocentric_zenith_angle(e: float) -> float:
    return 90.0 - e


def topocentric_azimuth_angle_astro(h_prime: float, latitude: float, delta_prime: float) -> float:
    """Azimuth measured westward from south, in ``[0, 360)``."""

    h_prime_rad = deg2rad(h_prime)
    lat_rad = deg2rad(latitude)
    return limit_degrees(
        rad2deg(
            math.atan2(
                math.sin(h_prime_rad),
                math.cos(h_prime_rad) * math.sin(lat_rad)
                - math.tan(deg2rad(delta_prime)) * math.cos(lat_rad),
            )
        )
    )


def topocentric_azimuth_angle(azimuth_astro: float) -> float:
    """Azimuth measured eastward from north, in ``[0, 360)``."""

    return limit_degrees(azimuth_astro + 180.0)


def surface_incidence_angle(
    zenith: float,
    azimuth_astro: float,
    azimuth_rotation: float,
    slope: float,
) -> float:
    """Angle between the Sun and the normal of a tilted surface, in degrees."""

    zenith_rad = deg2rad(zenith)
    slope_rad = deg2rad(slope)
    cosine = math.cos(zenith_rad) * math.cos(slope_rad) + math.sin(slope_rad) * math.sin(
        zenith_rad
    ) * math.cos(deg2rad(azimuth_astro - azimuth_rotation))
    return rad2deg(math.acos(float(np.clip(cosine, -1.0, 1.0))))


def topocentric_position(
    geocentric: GeocentricPosition,
    latitude: float,
    longitude: float,
    elevation: float,
    pressure: float,
    temperature: float,
    atmospheric_refraction: float,
) -> TopocentricPosition:
    """Apply parallax and refraction to a geocentric Sun position."""

    h = observer_hour_angle(geocentric.nu, longitude, geocentric.alpha)
    xi = sun_equatorial_horizontal_parallax(geocentric.radius)
    delta_alpha, delta_prime = right_ascension_parallax_and_topocentric_dec(
        latitude, elevation, xi, h, geocentric.delta
    )
    h_prime = topocentric_local_hour_angle(h, delta_alpha)

    e0 = topocentric_elevation_angle(latitude, delta_prime, h_prime)
    delta_e = atmospheric_refraction_correction(pressure, temperature, atmospheric_refraction, e0)
    e = topocentric_elevation_angle_corrected(e0, delta_e)
    azimuth_astro = topocentric_azimuth_angle_astro(h_prime, latitude, delta_prime)

    return TopocentricPosition(
        h=h,
        xi=xi,
        delta_alpha=delta_alpha,
        delta_prime=delta_prime,
        alpha_prime=topocentric_right_ascension(geocentric.alpha, delta_alpha),
        h_prime=h_prime,
        e0=e0,
        delta_e=delta_e,
        e=e,
        zenith=topocentric_zenith_angle(e),
        azimuth_astro=azimuth_astro,
        azimuth=topocentric_azimuth_angle(azimuth_astro),
    )
