from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from solar import (
    SpaOptions,
    SpaValidationError,
    compute_sun_times,
    solar_noon,
    solar_position,
    sun_times,
    sunrise,
    sunset,
    twilight,
)

LONDON = (51.5074, -0.1278)
REINE = (67.9323866, 13.0887329)
TROMSO = (69.6496, 18.9560)


def _seconds_between(left: datetime, right: datetime) -> float:
    return abs((left - right).total_seconds())


def _day_length_seconds(sunrise: datetime, sunset: datetime) -> float:
    delta = (sunset - sunrise).total_seconds()
    if delta < 0:
        delta += 86400.0
    return delta


def test_sunrise_greenwich_winter():
    when = datetime(2000, 1, 21, 12, 0, tzinfo=UTC)
    result = sunrise(51.1788, -1.8262, when)
    assert result is not None
    assert _seconds_between(result, datetime(2000, 1, 21, 7, 59, 50, tzinfo=UTC)) < 30


def test_sunset_greenwich_winter():
    when = datetime(2000, 1, 21, 12, 0, tzinfo=UTC)
    result = sunset(51.1788, -1.8262, when)
    assert result is not None
    assert _seconds_between(result, datetime(2000, 1, 21, 16, 37, 34, tzinfo=UTC)) < 30


def test_sunrise_in_local_offset():
    when = datetime(2019, 4, 13, 21, 51, tzinfo=timezone(timedelta(hours=2)))
    result = sunrise(46.0207, 7.7491, when)
    assert result is not None
    assert result.utcoffset() == timedelta(hours=2)
    assert _seconds_between(result, datetime(2019, 4, 13, 4, 47, 16, tzinfo=UTC)) < 30


def test_midnight_sun_has_no_sunrise_or_sunset():
    when = datetime(2022, 6, 1, 12, 0, tzinfo=UTC)
    assert sunrise(*REINE, when) is None
    assert sunset(*REINE, when) is None
    assert solar_noon(*REINE, when) is None
    assert twilight(*REINE, when) is None


def test_high_latitude_equinox_has_sunrise_and_sunset():
    when = datetime(2022, 3, 21, 12, 0, tzinfo=UTC)
    assert sunrise(*REINE, when) is not None
    assert sunset(*REINE, when) is not None


def test_polar_night_has_no_sunrise_or_sunset():
    when = datetime(2024, 12, 21, 12, 0, tzinfo=UTC)
    assert sunrise(*TROMSO, when) is None
    assert sunset(*TROMSO, when) is None


def test_solar_noon_london_summer():
    result = solar_noon(*LONDON, datetime(2024, 6, 21, 12, 0, tzinfo=UTC))
    assert result is not None
    assert 11 <= result.astimezone(UTC).hour <= 13


def test_solar_position_ranges():
    result = solar_position(*LONDON, datetime(2024, 6, 21, 12, 0, tzinfo=UTC))
    assert result is not None
    assert 0 < result.zenith < 180
    assert 0 <= result.azimuth < 360
    assert -90 < result.elevation < 90
    assert result.zenith + result.elevation == pytest.approx(90.0)
    assert result.incidence == pytest.approx(result.zenith)


def test_solar_position_is_independent_of_the_offset_used():
    instant = datetime(2024, 6, 21, 12, 0, tzinfo=UTC)
    shifted = instant.astimezone(timezone(timedelta(hours=5, minutes=30)))
    utc_position = solar_position(*LONDON, instant)
    shifted_position = solar_position(*LONDON, shifted)
    assert shifted_position.zenith == pytest.approx(utc_position.zenith, abs=1e-6)
    assert shifted_position.azimuth == pytest.approx(utc_position.azimuth, abs=1e-6)
    assert shifted_position.elevation == pytest.approx(utc_position.elevation, abs=1e-6)


def test_solar_position_on_tilted_surface():
    when = datetime(2003, 10, 17, 12, 30, 30, tzinfo=timezone(timedelta(hours=-7)))
    options = SpaOptions(
        elevation=1830.14,
        pressure=820.0,
        temperature=11.0,
        slope=30.0,
        azimuth_rotation=-10.0,
    )
    result = solar_position(39.742476, -105.1786, when, options)
    assert result.zenith == pytest.approx(50.11162, abs=1e-5)
    assert result.azimuth == pytest.approx(194.34024, abs=1e-5)
    assert result.incidence == pytest.approx(25.18700, abs=1e-5)


def test_twilight_ordering_at_equinox():
    when = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)
    times = twilight(*LONDON, when)
    rise = sunrise(*LONDON, when)
    set_ = sunset(*LONDON, when)
    assert times is not None
    ordered = [
        times.astronomical_dawn,
        times.nautical_dawn,
        times.civil_dawn,
        rise,
        set_,
        times.civil_dusk,
        times.nautical_dusk,
        times.astronomical_dusk,
    ]
    assert all(moment is not None for moment in ordered)
    assert ordered == sorted(ordered)


def test_golden_and_blue_hours_frame_the_horizon_events():
    when = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)
    times = twilight(*LONDON, when)
    rise = sunrise(*LONDON, when)
    set_ = sunset(*LONDON, when)
    assert times.golden_hour.morning.start == rise
    assert times.golden_hour.evening.end == set_
    assert times.golden_hour.morning.start < times.golden_hour.morning.end
    assert times.golden_hour.evening.start < times.golden_hour.evening.end
    assert times.blue_hour.morning.end == rise
    assert times.blue_hour.evening.start == set_
    assert times.civil_dawn < times.blue_hour.morning.start < rise


def test_summer_nights_without_astronomical_darkness():
    times = twilight(*LONDON, datetime(2024, 6, 21, 12, 0, tzinfo=UTC))
    assert times is not None
    assert times.civil_dawn is not None
    assert times.astronomical_dawn is None
    assert times.astronomical_dusk is None


def test_sun_times_matches_individual_queries():
    when = datetime(2024, 6, 21, 12, 0, tzinfo=UTC)
    combined = sun_times(*LONDON, when)
    assert combined.sunrise == sunrise(*LONDON, when)
    assert combined.sunset == sunset(*LONDON, when)
    assert combined.solar_noon == solar_noon(*LONDON, when)
    assert combined.twilight == twilight(*LONDON, when)
    assert combined.sunrise < combined.solar_noon < combined.sunset


def test_invalid_inputs_yield_none():
    when = datetime(2024, 6, 21, 12, 0, tzinfo=UTC)
    assert sunrise(91.0, 0.0, when) is None
    assert solar_position(0.0, 181.0, when) is None
    assert twilight(91.0, 0.0, when) is None
    combined = sun_times(91.0, 0.0, when)
    assert combined.sunrise is None and combined.twilight is None
    assert sunrise(*LONDON, when, SpaOptions(delta_t=9000.0)) is None


def test_naive_datetime_is_rejected():
    with pytest.raises(ValueError):
        sunrise(*LONDON, datetime(2024, 6, 21, 12, 0))


def test_timezone_option_overrides_datetime_offset():
    when = datetime(2024, 6, 21, 12, 0, tzinfo=UTC)
    result = sunrise(*LONDON, when, SpaOptions(timezone=1.0, timezone_id="BST"))
    assert result.utcoffset() == timedelta(hours=1)
    assert result.tzname() == "BST"
    assert _seconds_between(result, sunrise(*LONDON, when)) < 1


def test_beijing_sunrise_sunset():
    result = compute_sun_times(
        date_utc=date(2025, 10, 21),
        lat=39.9042,
        lon=116.4074,
        elev_m=43.5,
        twilight="official",
    )
    assert result["status"] == "ok"
    sunrise_at = result["sunrise"]
    sunset_at = result["sunset"]
    assert sunrise_at is not None and sunset_at is not None
    day_length = _day_length_seconds(sunrise_at, sunset_at)
    assert (10 * 3600 - 300) <= day_length <= (16 * 3600 + 300)
    assert sunrise_at < result["solar_noon"] < sunset_at


def test_civil_twilight_widens_the_day():
    official = compute_sun_times(date(2025, 10, 21), 39.9042, 116.4074, 43.5, "official")
    civil = compute_sun_times(date(2025, 10, 21), 39.9042, 116.4074, 43.5, "civil")
    assert civil["status"] == "ok"
    assert civil["sunrise"] < official["sunrise"]
    assert civil["sunset"] > official["sunset"]


def test_compute_sun_times_with_offset():
    result = compute_sun_times(
        date(2025, 10, 21), 39.9042, 116.4074, 43.5, "official", offset_hours=8.0
    )
    assert result["sunrise"].utcoffset() == timedelta(hours=8)
    assert result["sunrise"].date() == date(2025, 10, 21)


def test_polar_day_svalbard():
    result = compute_sun_times(
        date_utc=date(2025, 6, 21),
        lat=78.2232,
        lon=15.6469,
        elev_m=0.0,
        twilight="civil",
    )
    assert result["status"] == "polar_day"
    assert result["sunrise"] is None
    assert result["sunset"] is None


def test_polar_night_svalbard():
    result = compute_sun_times(
        date_utc=date(2025, 12, 21),
        lat=78.2232,
        lon=15.6469,
        elev_m=0.0,
        twilight="civil",
    )
    assert result["status"] == "polar_night"
    assert result["sunrise"] is None
    assert result["sunset"] is None


def test_compute_sun_times_rejects_bad_inputs():
    with pytest.raises(ValueError):
        compute_sun_times(date(2025, 1, 1), 10.0, 10.0, 0.0, "dusk")
    with pytest.raises(SpaValidationError):
        compute_sun_times(date(2025, 1, 1), 91.0, 10.0, 0.0, "official")


def test_compute_sun_times_without_offset_follows_the_solar_day():
    result = compute_sun_times(date(2025, 10, 21), 39.9042, 116.4074, 43.5, "official")
    assert result["sunrise"].utcoffset() == timedelta(0)
    assert result["sunrise"] < result["solar_noon"] < result["sunset"]
    # 06:31 in Beijing is still the previous day in UTC.
    assert result["sunrise"].date() == date(2025, 10, 20)
    assert result["sunset"].date() == date(2025, 10, 21)


@pytest.mark.parametrize("selector", ["official", "civil", "nautical", "astronomical"])
@pytest.mark.parametrize("offset_hours", [None, -6.0, 0.0, 8.0])
def test_ok_status_carries_both_times(selector, offset_hours):
    result = compute_sun_times(
        date(2025, 10, 21), 39.9042, 116.4074, 43.5, selector, offset_hours=offset_hours
    )
    assert result["status"] == "ok"
    assert result["sunrise"] is not None
    assert result["sunset"] is not None


def test_twilight_crossings_may_leave_the_local_day():
    result = compute_sun_times(
        date(2025, 10, 21), 39.9042, 116.4074, 43.5, "civil", offset_hours=-6.0
    )
    assert result["sunrise"] < result["solar_noon"] < result["sunset"]
    assert result["sunset"].date() == date(2025, 10, 22)


def test_civil_twilight_during_polar_night():
    civil = compute_sun_times(date(2024, 12, 21), *TROMSO, 0.0, "civil", offset_hours=1.0)
    assert civil["status"] == "ok"
    assert civil["sunrise"] < civil["solar_noon"] < civil["sunset"]
    assert civil["sunset"] - civil["sunrise"] < timedelta(hours=8)

    official = compute_sun_times(date(2024, 12, 21), *TROMSO, 0.0, "official", offset_hours=1.0)
    assert official["status"] == "polar_night"
    assert official["sunrise"] is None and official["sunset"] is None
    assert _seconds_between(official["solar_noon"], civil["solar_noon"]) < 1
