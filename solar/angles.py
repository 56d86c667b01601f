"""Angle conversion and range-limiting helpers shared by the SPA stages."""

from __future__ import annotations

import math

__all__ = [
    "deg2rad",
    "rad2deg",
    "limit_degrees",
    "limit_degrees180",
    "limit_degrees180pm",
    "limit_zero2one",
    "limit_minutes",
    "third_order_polynomial",
]


def deg2rad(degrees: float) -> float:
    return math.pi / 180.0 * degrees


def rad2deg(radians: float) -> float:
    return 180.0 / math.pi * radians


def limit_degrees(degrees: float) -> float:
    """Wrap *degrees* into ``[0, 360)``."""

    limited = degrees / 360.0
    limited = 360.0 * (limited - math.floor(limited))
    if limited < 0:
        limited += 360.0
    return limited


def limit_degrees180(degrees: float) -> float:
    """Wrap *degrees* into ``[0, 180)``."""

    limited = degrees / 180.0
    limited = 180.0 * (limited - math.floor(limited))
    if limited < 0:
        limited += 180.0
    return limited


def limit_degrees180pm(degrees: float) -> float:
    """Wrap *degrees* into ``[-180, 180]``."""

    limited = degrees / 360.0
    limited = 360.0 * (limited - math.floor(limited))
    if limited < -180.0:
        limited += 360.0
    elif limited > 180.0:
        limited -= 360.0
    return limited


def limit_zero2one(value: float) -> float:
    """Return the fractional part of *value* in ``[0, 1)``."""

    limited = value - math.floor(value)
    if limited < 0:
        limited += 1.0
    return limited


def limit_minutes(minutes: float) -> float:
    """Fold a time difference in minutes into ``[-20, 20]`` by whole days."""

    limited = minutes
    if limited < -20.0:
        limited += 1440.0
    elif limited > 20.0:
        limited -= 1440.0
    return limited


def third_order_polynomial(a: float, b: float, c: float, d: float, x: float) -> float:
    return ((a * x + b) * x + c) * x + d
