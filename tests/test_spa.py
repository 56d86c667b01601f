from __future__ import annotations

import dataclasses

import pytest

from solar.rts import Daylight
from solar.spa import (
    SpaFunction,
    SpaInput,
    SpaValidationError,
    ValidationCode,
    spa_calculate,
    validate_inputs,
)

GOLDEN = SpaInput(
    year=2003,
    month=10,
    day=17,
    hour=12,
    minute=30,
    second=30,
    latitude=39.742476,
    longitude=-105.1786,
    timezone=-7.0,
    delta_ut1=0.0,
    delta_t=67.0,
    elevation=1830.14,
    pressure=820.0,
    temperature=11.0,
    slope=30.0,
    azimuth_rotation=-10.0,
    atmospheric_refraction=0.5667,
)


@pytest.fixture(scope="module")
def golden_result():
    return spa_calculate(GOLDEN)


def test_golden_position(golden_result):
    assert golden_result.julian.jd == pytest.approx(2452930.312847, abs=1e-6)
    assert golden_result.geocentric.delta_psi == pytest.approx(-0.00399840, abs=1e-7)
    assert golden_result.geocentric.delta_epsilon == pytest.approx(0.00166657, abs=1e-7)
    assert golden_result.geocentric.epsilon == pytest.approx(23.440465, abs=1e-6)
    assert golden_result.hour_angle == pytest.approx(11.105902, abs=1e-5)
    assert golden_result.zenith == pytest.approx(50.11162, abs=1e-5)
    assert golden_result.azimuth == pytest.approx(194.34024, abs=1e-5)
    assert golden_result.azimuth_astro == pytest.approx(14.34024, abs=1e-5)
    assert golden_result.incidence == pytest.approx(25.18700, abs=1e-5)


def test_golden_rise_transit_set(golden_result):
    assert golden_result.daylight is Daylight.normal
    assert golden_result.equation_of_time == pytest.approx(14.641503, abs=1e-5)
    assert golden_result.suntransit == pytest.approx(11.768045, abs=1e-4)
    # 06:12:43 and 17:20:19 local
    assert golden_result.sunrise == pytest.approx(6.2121, abs=5e-4)
    assert golden_result.sunset == pytest.approx(17.3388, abs=5e-4)
    assert golden_result.sunrise < golden_result.suntransit < golden_result.sunset


def test_zenith_and_elevation_are_complementary(golden_result):
    assert golden_result.zenith + golden_result.elevation == pytest.approx(90.0)


@pytest.mark.parametrize(
    "changes, code",
    [
        ({"year": 7000}, ValidationCode.YEAR),
        ({"month": 13}, ValidationCode.MONTH),
        ({"day": 0}, ValidationCode.DAY),
        ({"hour": 25}, ValidationCode.HOUR),
        ({"hour": 24, "minute": 1}, ValidationCode.MINUTE),
        ({"hour": 24, "minute": 0, "second": 1}, ValidationCode.SECOND),
        ({"second": 60}, ValidationCode.SECOND),
        ({"delta_t": 9000.0}, ValidationCode.DELTA_T),
        ({"timezone": 19.0}, ValidationCode.TIMEZONE),
        ({"longitude": 181.0}, ValidationCode.LONGITUDE),
        ({"latitude": 91.0}, ValidationCode.LATITUDE),
        ({"elevation": -7_000_000.0}, ValidationCode.ELEVATION),
        ({"pressure": -1.0}, ValidationCode.PRESSURE),
        ({"temperature": -273.0}, ValidationCode.TEMPERATURE),
        ({"atmospheric_refraction": 6.0}, ValidationCode.ATMOSPHERIC_REFRACTION),
        ({"delta_ut1": 1.0}, ValidationCode.DELTA_UT1),
    ],
)
def test_out_of_range_inputs_are_rejected(changes, code):
    spa = dataclasses.replace(GOLDEN, **changes)
    assert validate_inputs(spa) is code
    with pytest.raises(SpaValidationError) as excinfo:
        spa_calculate(spa)
    assert excinfo.value.code is code
    assert excinfo.value.field == code.name.lower()


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        spa_calculate(dataclasses.replace(GOLDEN, latitude=-90.5))


def test_hour_24_exactly_is_accepted():
    spa = dataclasses.replace(GOLDEN, hour=24, minute=0, second=0)
    assert validate_inputs(spa) is ValidationCode.OK


def test_first_violation_wins():
    spa = dataclasses.replace(GOLDEN, month=0, latitude=100.0)
    assert validate_inputs(spa) is ValidationCode.MONTH


@pytest.mark.parametrize(
    "function, has_incidence, has_rts",
    [
        (SpaFunction.ZA, False, False),
        (SpaFunction.ZA_INC, True, False),
        (SpaFunction.ZA_RTS, False, True),
        (SpaFunction.ALL, True, True),
    ],
)
def test_function_selects_optional_stages(function, has_incidence, has_rts):
    result = spa_calculate(dataclasses.replace(GOLDEN, function=function))
    assert (result.incidence is not None) is has_incidence
    assert (result.rts is not None) is has_rts
    assert result.zenith == pytest.approx(50.11162, abs=1e-5)


@pytest.mark.parametrize("latitude", [-60.0, -20.0, 0.0, 35.0, 65.0])
@pytest.mark.parametrize("hour", [0, 6, 12, 18])
def test_angles_stay_in_range(latitude, hour):
    result = spa_calculate(
        dataclasses.replace(GOLDEN, latitude=latitude, hour=hour, function=SpaFunction.ZA)
    )
    assert 0.0 <= result.zenith <= 180.0
    assert 0.0 <= result.azimuth < 360.0
    assert 0.0 <= result.azimuth_astro < 360.0
    assert 0.0 <= result.right_ascension < 360.0
    assert -90.0 <= result.declination <= 90.0
    assert 0.0 <= result.hour_angle < 360.0


def test_polar_night_has_no_rise_transit_or_set():
    spa = SpaInput(
        year=2024, month=12, day=21, hour=12, minute=0, second=0,
        latitude=69.6496, longitude=18.9560,
    )
    result = spa_calculate(spa)
    assert result.daylight is Daylight.polar_night
    assert result.sunrise is None
    assert result.suntransit is None
    assert result.sunset is None
    assert -20.0 <= result.equation_of_time <= 20.0
    # The Sun still culminates, just below the horizon.
    assert 10.0 < result.rts.culmination < 11.5
    assert -5.0 < result.rts.transit_altitude < 0.0


def test_polar_day_is_distinguished():
    spa = SpaInput(
        year=2022, month=6, day=1, hour=12, minute=0, second=0,
        latitude=67.9323866, longitude=13.0887329,
    )
    assert spa_calculate(spa).daylight is Daylight.polar_day


def test_culmination_matches_transit_on_normal_days():
    result = spa_calculate(GOLDEN)
    assert result.rts.culmination == result.suntransit
