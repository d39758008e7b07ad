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

from civiltime.timeobj import INT64_MAX, INT64_MIN, Time, ZoneType
from civiltime.tz.offset import (
    TimeOffset,
    fetch_timezone_offset,
    get_current_offset,
    get_time_zone_info,
    get_time_zone_offset_info,
    get_timezone_info,
    same_timezone,
    timestamp_is_in_dst,
)
from civiltime.tz.tzfile import TzInfo, read_tzfile

SUMMER_2014 = 1400000000


@pytest.mark.parametrize(
    'ts, expected',
    [
        param(0, TimeOffset(0, False, 'GMT', INT64_MIN, 1396141200),
              id='before-first-transition'),
        param(SUMMER_2014,
              TimeOffset(3600, True, 'BST', 1396141200, 1414285200),
              id='listed-transition'),
        param(1414285200,
              TimeOffset(0, False, 'GMT', 1414285200, 1427590800),
              id='at-last-transition'),
        param(1901149200,
              TimeOffset(3600, True, 'BST', 1901149200, 1919293200),
              id='posix-rule'),
    ]
)
def test_get_time_zone_info(london_tz, ts, expected):
    assert get_time_zone_info(ts, london_tz) == expected


def test_last_transition_uses_its_own_type(tzif):
    """The POSIX rule only applies after the last listed transition."""
    tz = read_tzfile(
        tzif([(100, 1)], [(0, False, 'GMT'), (3600, True, 'BST')],
             posix='GMT0'),
        'Test/Last',
    )
    assert get_time_zone_info(100, tz) == TimeOffset(
        3600, True, 'BST', 100, INT64_MAX)
    assert get_time_zone_info(101, tz) == TimeOffset(
        0, False, 'GMT', 100, INT64_MAX)


def test_zone_without_transitions(utc_tz):
    ttinfo, transition, next_transition = fetch_timezone_offset(utc_tz, 0)
    assert ttinfo.offset == 0
    assert (transition, next_transition) == (INT64_MIN, INT64_MAX)


def test_zone_without_types():
    empty = TzInfo(name='Empty')
    assert get_time_zone_info(0, empty).abbr == 'UTC'
    assert get_time_zone_offset_info(0, empty) is None
    assert timestamp_is_in_dst(0, empty) == -1


def test_get_timezone_info(london_tz):
    assert get_timezone_info(SUMMER_2014, london_tz) == (3600, 'BST', True)
    assert get_time_zone_offset_info(SUMMER_2014, london_tz) == (
        3600, 1396141200, True)
    assert get_time_zone_offset_info(SUMMER_2014, None) is None


def test_timestamp_is_in_dst(london_tz):
    assert timestamp_is_in_dst(SUMMER_2014, london_tz) == 1
    assert timestamp_is_in_dst(0, london_tz) == 0


def test_get_current_offset(london_tz):
    assert get_current_offset(
        Time(zone_type=ZoneType.ABBR, z=3600, dst=1)) == 7200
    assert get_current_offset(
        Time(zone_type=ZoneType.OFFSET, z=-18000)) == -18000
    assert get_current_offset(
        Time(zone_type=ZoneType.ID, tz_info=london_tz, sse=SUMMER_2014)
    ) == 3600
    assert get_current_offset(Time()) == 0


def test_same_timezone(london_tz):
    cest = Time(zone_type=ZoneType.ABBR, z=3600, dst=1)
    plus_two = Time(zone_type=ZoneType.ABBR, z=7200, dst=0)
    assert same_timezone(cest, plus_two)
    assert not same_timezone(
        cest, Time(zone_type=ZoneType.OFFSET, z=7200))
    london = Time(zone_type=ZoneType.ID, tz_info=london_tz)
    assert same_timezone(london, london.clone())
    assert not same_timezone(Time(), Time())
