"""Nutation in longitude/obliquity and the obliquity of the ecliptic."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .angles import third_order_polynomial
from .terms import PE_TERMS, Y_TERMS

__all__ = [
    "Nutation",
    "mean_elongation_moon_sun",
    "mean_anomaly_sun",
    "mean_anomaly_moon",
    "argument_latitude_moon",
    "ascending_longitude_moon",
    "fundamental_arguments",
    "nutation_longitude_and_obliquity",
    "ecliptic_mean_obliquity",
    "ecliptic_true_obliquity",
]

# Periodic-term sums are in units of 0.0001 arc-seconds.
_TERM_UNITS_PER_DEGREE = 36000000.0

_MEAN_OBLIQUITY_COEFFICIENTS = (
    84381.448,
    -4680.93,
    -1.55,
    1999.25,
    -51.38,
    -249.67,
    -39.05,
    7.12,
    27.87,
    5.79,
    2.45,
)


@dataclass(frozen=True)
class Nutation:
    """Nutation in longitude (delta_psi) and obliquity (delta_epsilon), degrees."""

    delta_psi: float
    delta_epsilon: float


def mean_elongation_moon_sun(jce: float) -> float:
    return third_order_polynomial(1.0 / 189474.0, -0.0019142, 445267.11148, 297.85036, jce)


def mean_anomaly_sun(jce: float) -> float:
    return third_order_polynomial(-1.0 / 300000.0, -0.0001603, 35999.05034, 357.52772, jce)


def mean_anomaly_moon(jce: float) -> float:
    return third_order_polynomial(1.0 / 56250.0, 0.0086972, 477198.867398, 134.96298, jce)


def argument_latitude_moon(jce: float) -> float:
    return third_order_polynomial(1.0 / 327270.0, -0.0036825, 483202.017538, 93.27191, jce)


def ascending_longitude_moon(jce: float) -> float:
    return third_order_polynomial(1.0 / 450000.0, 0.0020708, -1934.136261, 125.04452, jce)


def fundamental_arguments(jce: float) -> Tuple[float, float, float, float, float]:
    """Return the five lunar/solar arguments ``x0..x4`` in degrees."""

    return (
        mean_elongation_moon_sun(jce),
        mean_anomaly_sun(jce),
        mean_anomaly_moon(jce),
        argument_latitude_moon(jce),
        ascending_longitude_moon(jce),
    )


def nutation_longitude_and_obliquity(jce: float, x: Sequence[float]) -> Nutation:
    """Evaluate the 63-term nutation series for the arguments *x*."""

    xy_term_sum = np.radians(Y_TERMS @ np.asarray(x, dtype=float))
    sum_psi = np.sum((PE_TERMS[:, 0] + jce * PE_TERMS[:, 1]) * np.sin(xy_term_sum))
    sum_epsilon = np.sum((PE_TERMS[:, 2] + jce * PE_TERMS[:, 3]) * np.cos(xy_term_sum))
    return Nutation(
        delta_psi=float(sum_psi) / _TERM_UNITS_PER_DEGREE,
        delta_epsilon=float(sum_epsilon) / _TERM_UNITS_PER_DEGREE,
    )


def ecliptic_mean_obliquity(jme: float) -> float:
    """Mean obliquity of the ecliptic in arc-seconds."""

    u = jme / 10.0
    result = 0.0
    for coefficient in reversed(_MEAN_OBLIQUITY_COEFFICIENTS):
        result = result * u + coefficient
    return result


def ecliptic_true_obliquity(delta_epsilon: float, epsilon0: float) -> float:
    """True obliquity in degrees from nutation [deg] and mean obliquity [arcsec]."""

    return delta_epsilon + epsilon0 / 3600.0
