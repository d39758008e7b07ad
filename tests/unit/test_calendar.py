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

from civiltime.calendar import (
    date_from_iso_date,
    day_of_week,
    day_of_year,
    daynr_from_ymd,
    days_in_month,
    iso_date_from_date,
    iso_day_of_week,
    iso_week_from_date,
    sse_from_ymdhis_utc,
    valid_date,
    valid_time,
    ymd_from_daynr,
    ymdhis_from_sse_utc,
)


@pytest.mark.parametrize(
    'y, m, expected',
    [
        (2000, 2, 29),
        (1900, 2, 28),
        (2004, 2, 29),
        (2021, 4, 30),
        (2021, 12, 31),
        (0, 2, 29),
    ]
)
def test_days_in_month(y, m, expected):
    assert days_in_month(y, m) == expected


@pytest.mark.parametrize(
    'ymd, expected',
    [
        param((1970, 1, 1), 4, id='epoch-thursday'),
        param((2021, 1, 1), 5, id='friday'),
        param((2008, 2, 3), 0, id='sunday'),
        param((2000, 2, 29), 2, id='leap-day'),
        param((1582, 10, 15), 5, id='gregorian-start'),
        param((-1, 12, 31), 5, id='negative-year'),
    ]
)
def test_day_of_week(ymd, expected):
    assert day_of_week(*ymd) == expected


def test_iso_day_of_week_sunday_is_seven():
    assert iso_day_of_week(2008, 2, 3) == 7
    assert iso_day_of_week(2008, 2, 4) == 1


@pytest.mark.parametrize(
    'ymd, expected',
    [
        ((2021, 1, 1), 0),
        ((2021, 12, 31), 364),
        ((2020, 12, 31), 365),
        ((2020, 3, 1), 60),
    ]
)
def test_day_of_year(ymd, expected):
    assert day_of_year(*ymd) == expected


@pytest.mark.parametrize(
    'ymd, expected',
    [
        ((2008, 12, 28), (2008, 52, 7)),
        ((2008, 12, 29), (2009, 1, 1)),
        ((2010, 1, 3), (2009, 53, 7)),
        ((2005, 1, 2), (2004, 53, 7)),
        ((2007, 1, 1), (2007, 1, 1)),
        ((2016, 1, 1), (2015, 53, 5)),
    ]
)
def test_iso_date_from_date(ymd, expected):
    assert iso_date_from_date(*ymd) == expected
    iso_year, iso_week, iso_day = expected
    assert iso_week_from_date(*ymd) == (iso_week, iso_year)
    assert date_from_iso_date(iso_year, iso_week, iso_day) == ymd


@pytest.mark.parametrize(
    'iso, ymd',
    [
        ((2015, 53, 5), (2016, 1, 1)),
        ((2015, 0, 1), (2014, 12, 22)),
        ((2009, 1, 1), (2008, 12, 29)),
    ]
)
def test_date_from_iso_date(iso, ymd):
    assert date_from_iso_date(*iso) == ymd


def test_daynr_round_trip_across_eras():
    for daynr in (-800000, -146097, -1, 0, 59, 11016, 146097, 2932896):
        assert daynr_from_ymd(*ymd_from_daynr(daynr)) == daynr


@pytest.mark.parametrize(
    'ymd, expected',
    [
        ((2021, 2, 29), False),
        ((2020, 2, 29), True),
        ((2020, 13, 1), False),
        ((2020, 0, 1), False),
        ((2020, 1, 0), False),
        ((2020, 1, 31), True),
    ]
)
def test_valid_date(ymd, expected):
    assert valid_date(*ymd) is expected


@pytest.mark.parametrize(
    'hms, expected',
    [
        ((23, 59, 59), True),
        ((24, 0, 0), False),
        ((0, 60, 0), False),
        ((0, 0, 60), False),
        ((-1, 0, 0), False),
    ]
)
def test_valid_time(hms, expected):
    assert valid_time(*hms) is expected


@pytest.mark.parametrize(
    'fields, sse',
    [
        ((1970, 1, 1, 0, 0, 0), 0),
        ((2014, 3, 30, 1, 0, 0), 1396141200),
        ((1969, 12, 31, 23, 59, 59), -1),
        ((2038, 1, 19, 3, 14, 8), 2 ** 31),
        ((1569, 12, 30, 0, 0, 0), -12622953600),
    ]
)
def test_sse_conversion(fields, sse):
    assert sse_from_ymdhis_utc(*fields) == sse
    assert ymdhis_from_sse_utc(sse) == fields
