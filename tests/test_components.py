from __future__ import annotations

import math

import erfa
import numpy as np
import pytest

from solar.earth import earth_radius_vector, heliocentric_position
from solar.nutation import (
    ecliptic_mean_obliquity,
    fundamental_arguments,
    nutation_longitude_and_obliquity,
)
from solar.observer import (
    atmospheric_refraction_correction,
    greenwich_mean_sidereal_time,
    surface_incidence_angle,
    topocentric_azimuth_angle,
)
from solar.rts import (
    custom_zenith_times,
    equation_of_time,
    rts_alpha_delta_prime,
    sun_hour_angle_at_rise_set,
    zenith_crossing_cosine,
)
from solar.sun import geocentric_longitude, geocentric_right_ascension
from solar.terms import B_TERMS, L_TERMS, PE_TERMS, R_TERMS, Y_TERMS
from solar.timescale import julian_dates, julian_day

REFERENCE_JDS = [2451545.0, 2452930.312847, 2460000.5, 2447000.25]


def test_term_tables_shape_and_immutability():
    assert L_TERMS.term_counts == (64, 34, 20, 7, 3, 1)
    assert B_TERMS.term_counts == (5, 2)
    assert R_TERMS.term_counts == (40, 10, 6, 2, 1)
    assert Y_TERMS.shape == (63, 5)
    assert PE_TERMS.shape == (63, 4)
    with pytest.raises(ValueError):
        L_TERMS.series[0][0, 0] = 0.0


def test_heliocentric_reference_values():
    dates = julian_dates(julian_day(2003, 10, 17, 12, 30, 30, 0.0, -7.0), 67.0)
    helio = heliocentric_position(dates.jme)
    assert helio.longitude == pytest.approx(24.0182616917, abs=1e-7)
    assert helio.latitude == pytest.approx(-0.0001011219, abs=1e-8)
    assert helio.radius == pytest.approx(0.9965422974, abs=1e-8)


@pytest.mark.parametrize("jd", REFERENCE_JDS)
def test_radius_vector_matches_erfa(jd):
    dates = julian_dates(jd, 67.0)
    pvh, _ = erfa.epv00(dates.jde, 0.0)
    distance = float(np.linalg.norm(np.array(pvh["p"])))
    assert earth_radius_vector(dates.jme) == pytest.approx(distance, abs=5e-5)


@pytest.mark.parametrize("jd", REFERENCE_JDS)
def test_nutation_matches_erfa_iau1980(jd):
    dates = julian_dates(jd, 67.0)
    nutation = nutation_longitude_and_obliquity(dates.jce, fundamental_arguments(dates.jce))
    dpsi, deps = erfa.nut80(dates.jde, 0.0)
    assert nutation.delta_psi == pytest.approx(math.degrees(dpsi), abs=1e-5)
    assert nutation.delta_epsilon == pytest.approx(math.degrees(deps), abs=1e-5)


@pytest.mark.parametrize("jd", REFERENCE_JDS)
def test_mean_obliquity_matches_erfa(jd):
    dates = julian_dates(jd, 67.0)
    expected = math.degrees(erfa.obl80(dates.jde, 0.0))
    assert ecliptic_mean_obliquity(dates.jme) / 3600.0 == pytest.approx(expected, abs=1e-4)


@pytest.mark.parametrize("jd", REFERENCE_JDS)
def test_mean_sidereal_time_matches_erfa(jd):
    dates = julian_dates(jd, 0.0)
    expected = math.degrees(erfa.gmst82(jd, 0.0))
    assert greenwich_mean_sidereal_time(jd, dates.jc) == pytest.approx(expected, abs=1e-5)


def test_geocentric_longitude_wraps():
    assert geocentric_longitude(190.0) == pytest.approx(10.0)
    assert geocentric_longitude(10.0) == pytest.approx(190.0)


def test_right_ascension_is_normalized():
    assert 0.0 <= geocentric_right_ascension(-10.0, 23.44, 0.0) < 360.0
    assert geocentric_right_ascension(90.0, 23.44, 0.0) == pytest.approx(90.0)


def test_refraction_skipped_below_horizon():
    assert atmospheric_refraction_correction(1013.0, 15.0, 0.5667, -5.0) == 0.0
    lift = atmospheric_refraction_correction(1013.0, 15.0, 0.5667, 0.0)
    assert 0.4 < lift < 0.6


def test_incidence_on_flat_surface_equals_zenith():
    assert surface_incidence_angle(37.5, 120.0, 0.0, 0.0) == pytest.approx(37.5)
    assert surface_incidence_angle(0.0, 0.0, 0.0, 0.0) == pytest.approx(0.0, abs=1e-6)


def test_navigator_azimuth_conversion():
    assert topocentric_azimuth_angle(0.0) == pytest.approx(180.0)
    assert topocentric_azimuth_angle(270.0) == pytest.approx(90.0)


def test_hour_angle_at_equator_equinox():
    h0 = sun_hour_angle_at_rise_set(0.0, 0.0, -0.83337)
    assert h0 == pytest.approx(90.83337, abs=1e-6)


def test_hour_angle_keeps_the_full_half_circle():
    assert sun_hour_angle_at_rise_set(0.0, 0.0, -90.0) == pytest.approx(180.0)
    assert sun_hour_angle_at_rise_set(0.0, 0.0, 90.0) == pytest.approx(0.0)


def test_hour_angle_degenerate_cases_return_none():
    assert sun_hour_angle_at_rise_set(80.0, 20.0, -0.83337) is None
    assert sun_hour_angle_at_rise_set(80.0, -20.0, -0.83337) is None
    assert sun_hour_angle_at_rise_set(-80.0, 20.0, -0.83337) is None


def test_zenith_crossing_cosine_sign_distinguishes_polar_day_and_night():
    assert zenith_crossing_cosine(80.0, 20.0, 96.0) < -1
    assert zenith_crossing_cosine(80.0, -20.0, 96.0) > 1


def test_interpolation_is_quadratic_through_samples():
    samples = [10.0, 11.0, 12.5]
    assert rts_alpha_delta_prime(samples, 0.0) == pytest.approx(11.0)
    assert rts_alpha_delta_prime(samples, 1.0) == pytest.approx(12.5)
    assert rts_alpha_delta_prime(samples, -1.0) == pytest.approx(10.0)


def test_interpolation_across_right_ascension_wrap_stays_small():
    value = rts_alpha_delta_prime([359.2, 0.1, 1.0], 0.5)
    assert abs(value) < 2.0


def test_custom_zenith_times_equator():
    morning, evening = custom_zenith_times(0.0, 0.0, 12.0, 90.0)
    assert morning == pytest.approx(6.0, abs=1e-9)
    assert evening == pytest.approx(18.0, abs=1e-9)
    assert custom_zenith_times(80.0, 20.0, 12.0, 96.0) is None


def test_equation_of_time_is_folded():
    assert -20.0 <= equation_of_time(359.9, 0.1, 0.0, 23.44) <= 20.0
    assert equation_of_time(10.0, 10.0, 0.0, 23.44) == pytest.approx(-4.0 * 0.0057183)
