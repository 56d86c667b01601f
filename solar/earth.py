"""Earth heliocentric position from the VSOP87-derived periodic terms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .angles import limit_degrees, rad2deg
from .terms import B_TERMS, L_TERMS, R_TERMS, PeriodicTermSet

__all__ = [
    "HeliocentricPosition",
    "earth_periodic_term_summation",
    "earth_values",
    "earth_heliocentric_longitude",
    "earth_heliocentric_latitude",
    "earth_radius_vector",
    "heliocentric_position",
]


@dataclass(frozen=True)
class HeliocentricPosition:
    """Earth heliocentric longitude/latitude [deg] and radius vector [AU]."""

    longitude: float
    latitude: float
    radius: float


def earth_periodic_term_summation(terms: np.ndarray, jme: float) -> float:
    """Sum ``A * cos(B + C * jme)`` over one sub-series of ``(A, B, C)`` rows."""

    return float(np.sum(terms[:, 0] * np.cos(terms[:, 1] + terms[:, 2] * jme)))


def earth_values(term_sums: Sequence[float], jme: float) -> float:
    """Combine sub-series sums as a power series in *jme*, scaled by 1e-8."""

    total = sum(term_sum * jme**i for i, term_sum in enumerate(term_sums))
    return total / 1.0e8


def _evaluate(term_set: PeriodicTermSet, jme: float) -> float:
    sums = [earth_periodic_term_summation(series, jme) for series in term_set.series]
    return earth_values(sums, jme)


def earth_heliocentric_longitude(jme: float) -> float:
    return limit_degrees(rad2deg(_evaluate(L_TERMS, jme)))


def earth_heliocentric_latitude(jme: float) -> float:
    return rad2deg(_evaluate(B_TERMS, jme))


def earth_radius_vector(jme: float) -> float:
    return _evaluate(R_TERMS, jme)


def heliocentric_position(jme: float) -> HeliocentricPosition:
    return HeliocentricPosition(
        longitude=earth_heliocentric_longitude(jme),
        latitude=earth_heliocentric_latitude(jme),
        radius=earth_radius_vector(jme),
    )
