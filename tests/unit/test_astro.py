# THIS FILE IS PART OF THE CIVILTIME DATE AND TIME LIBRARY.
# Copyright (C) NIWA & British Crown (Met Office) & Contributors.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.


import pytest
from pytest import param

from civiltime.arithmetic import update_ts
from civiltime.astro import (
    SUNRISE_ALTITUDE,
    astro_rise_set_altitude,
    astro_rise_set_altitude_rc,
    decimal_hour_to_hms,
    hms_to_decimal_hour,
    hmsf_to_decimal_hour,
    ts_to_j2000,
    ts_to_julian_day,
)
from civiltime.timeobj import Time

HOUR_TOLERANCE = 0.01


def test_ts_to_julian_day():
    assert ts_to_julian_day(0) == 2440587.5
    assert ts_to_julian_day(86400) == 2440588.5


def test_ts_to_j2000():
    # 2000-01-01 12:00:00 UTC
    assert ts_to_j2000(946728000) == 0.0
    assert ts_to_j2000(946728000 - 43200) == -0.5


@pytest.mark.parametrize(
    'hms, expected',
    [
        param((2, 19, 48), 2.33, id='positive'),
        param((-2, 20, 0), -2.333333, id='negative'),
        param((0, 0, 0), 0.0, id='zero'),
    ]
)
def test_hms_to_decimal_hour(hms, expected):
    assert hms_to_decimal_hour(*hms) == pytest.approx(expected, abs=1e-6)


def test_hmsf_to_decimal_hour():
    assert hmsf_to_decimal_hour(1, 30, 0, 1800000000) == pytest.approx(2.0)
    assert hmsf_to_decimal_hour(-1, 30, 0, 0) == pytest.approx(-1.5)


@pytest.mark.parametrize(
    'hours, expected',
    [
        param(2.33, (2, 19, 48), id='positive'),
        param(-2.33, (-2, 19, 48), id='negative'),
        param(0.9999999, (1, 0, 0), id='rounds-up'),
    ]
)
def test_decimal_hour_to_hms(hours, expected):
    assert decimal_hour_to_hms(hours) == expected


@pytest.mark.parametrize(
    'date, lon, lat, h_rise, h_set, ts_rise, ts_set',
    [
        param(
            (2006, 12, 12, 0, 0, 0), 31.7667, 35.2333,
            4.86, 14.69, 1165899111, 1165934475,
            id='jerusalem-december'
        ),
        param(
            (2007, 4, 13, 11, 10, 54), 9.61, 59.21,
            4.23, 18.51, 1176437611, 1176489051,
            id='norway-april'
        ),
    ]
)
def test_rise_set(date, lon, lat, h_rise, h_set, ts_rise, ts_set):
    time = Time(*date)
    update_ts(time)
    rc, got_h_rise, got_h_set, got_rise, got_set, transit = (
        astro_rise_set_altitude_rc(time, lon, lat, SUNRISE_ALTITUDE, 1)
    )
    assert rc == 0
    assert got_h_rise == pytest.approx(h_rise, abs=HOUR_TOLERANCE)
    assert got_h_set == pytest.approx(h_set, abs=HOUR_TOLERANCE)
    assert got_rise == ts_rise
    assert got_set == ts_set
    assert transit == (got_rise + got_set) // 2


def test_rise_set_without_rc():
    time = Time(y=2006, m=12, d=12)
    full = astro_rise_set_altitude_rc(
        time, 31.7667, 35.2333, SUNRISE_ALTITUDE, 1)
    assert astro_rise_set_altitude(
        time, 31.7667, 35.2333, SUNRISE_ALTITUDE, 1) == full[1:]


def test_polar_night():
    time = Time(y=2021, m=12, d=21)
    rc, h_rise, h_set, ts_rise, ts_set, transit = astro_rise_set_altitude_rc(
        time, 0.0, 80.0, SUNRISE_ALTITUDE, 1)
    assert rc == -1
    assert h_rise == h_set
    assert ts_rise == ts_set == transit


def test_midnight_sun():
    time = Time(y=2021, m=6, d=21)
    rc, h_rise, h_set, ts_rise, ts_set, _ = astro_rise_set_altitude_rc(
        time, 0.0, 80.0, SUNRISE_ALTITUDE, 1)
    assert rc == 1
    assert h_set - h_rise == pytest.approx(24.0)
    # local noon -/+ 12 hours
    assert ts_rise == 1624233600
    assert ts_set == 1624320000


def test_input_time_not_modified():
    time = Time(y=2006, m=12, d=12, h=7, i=30, s=15)
    astro_rise_set_altitude_rc(time, 31.7667, 35.2333, SUNRISE_ALTITUDE, 1)
    assert (time.h, time.i, time.s) == (7, 30, 15)
    assert time.sse == 0
    assert not time.sse_uptodate
