from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from moonmap.astro import (HALF_SYNODIC_MONTH_DAYS, LUNAR_EPOCH_UTC, SYNODIC_MONTH_DAYS, calculate_phase,
                           days_since_lunar_epoch, phase_to_percent)

utc_times = st.datetimes(min_value=datetime(1980, 1, 1), max_value=datetime(2100, 1, 1),
                         timezones=st.just(timezone.utc))


def _wrapped_distance(a: float, b: float) -> float:
    d = abs(a - b)
    return min(d, 2.0 - d)


def test_epoch_is_new_moon():
    assert calculate_phase(LUNAR_EPOCH_UTC) == pytest.approx(-1.0, abs=1e-9)


def test_half_lunation_after_epoch_is_full_moon():
    dt = LUNAR_EPOCH_UTC + timedelta(days=HALF_SYNODIC_MONTH_DAYS)
    assert calculate_phase(dt) == pytest.approx(0.0, abs=1e-6)


def test_known_full_moon():
    # Total lunar eclipse of 2000-01-21, full moon at about 04:40 UTC
    dt = datetime(2000, 1, 21, 4, 40, tzinfo=timezone.utc)
    assert calculate_phase(dt) == pytest.approx(0.0, abs=0.05)


def test_phase_grows_linearly():
    quarter = LUNAR_EPOCH_UTC + timedelta(days=SYNODIC_MONTH_DAYS / 4)
    assert calculate_phase(quarter) == pytest.approx(-0.5, abs=1e-6)


def test_timezone_is_respected():
    utc_time = datetime(2021, 4, 23, 20, 0, tzinfo=timezone.utc)
    local_time = utc_time.astimezone(timezone(timedelta(hours=2)))
    assert calculate_phase(local_time) == pytest.approx(calculate_phase(utc_time), abs=1e-12)


def test_before_epoch_stays_in_range():
    phase = calculate_phase(datetime(1995, 1, 15, 0, 0, tzinfo=timezone.utc))
    assert -1.0 <= phase < 1.0
    assert days_since_lunar_epoch(datetime(1999, 12, 31, tzinfo=timezone.utc)) < 0


def test_naive_datetime_is_rejected():
    with pytest.raises(ValueError):
        calculate_phase(datetime(2021, 4, 23, 20, 0))


@given(dt=utc_times)
def test_phase_in_range(dt):
    assert -1.0 <= calculate_phase(dt) <= 1.0


@given(dt=utc_times)
def test_phase_is_periodic(dt):
    later = dt + timedelta(days=SYNODIC_MONTH_DAYS)
    assert _wrapped_distance(calculate_phase(dt), calculate_phase(later)) < 1e-6


def test_phase_to_percent():
    assert phase_to_percent(0.6) == "+60.0%"
    assert phase_to_percent(-0.25) == "-25.0%"
