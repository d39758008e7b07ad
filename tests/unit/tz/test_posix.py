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

from civiltime.exceptions import PosixStringError
from civiltime.timeobj import INT64_MAX, INT64_MIN
from civiltime.tz.posix import (
    PosixRuleType,
    PosixTransInfo,
    calc_transition,
    fetch_posix_offset,
    get_transitions_for_year,
    parse_posix_str,
    posix_transitions_for_year,
)


@pytest.mark.parametrize(
    'posix, std, std_offset, dst, dst_offset',
    [
        param('UTC0', 'UTC', 0, None, 0, id='utc'),
        param('<+0330>-3:30', '+0330', 12600, None, 0, id='quoted'),
        param('EST5EDT,M3.2.0,M11.1.0', 'EST', -18000, 'EDT', -14400,
              id='us-eastern'),
        param('CET-1CEST,M3.5.0,M10.5.0/3', 'CET', 3600, 'CEST', 7200,
              id='central-europe'),
        param('<-02>2<-01>,M3.5.0/-1,M10.5.0/0', '-02', -7200, '-01', -3600,
              id='negative-rule-time'),
        param('LHST-10:30LHDT-11,M10.1.0,M4.1.0', 'LHST', 37800, 'LHDT',
              39600, id='half-hour-std'),
    ]
)
def test_parse_posix_str(posix, std, std_offset, dst, dst_offset):
    result = parse_posix_str(posix)
    assert result.std == std
    assert result.std_offset == std_offset
    assert result.dst == dst
    assert result.dst_offset == dst_offset
    assert result.has_dst is (dst is not None)


def test_parse_rule_forms():
    result = parse_posix_str('IST-2IDT,J60/26,59/-1')
    assert result.dst_begin == PosixTransInfo(
        PosixRuleType.JULIAN_NO_FEB29, days=60, hour=26 * 3600)
    assert result.dst_end == PosixTransInfo(
        PosixRuleType.JULIAN_FEB29, days=59, hour=-3600)


def test_default_rules():
    result = parse_posix_str('EST5EDT')
    assert result.dst_offset == -14400
    assert (result.dst_begin.month, result.dst_begin.week) == (3, 2)
    assert (result.dst_end.month, result.dst_end.week) == (11, 1)
    assert result.dst_end.hour == 7200


@pytest.mark.parametrize(
    'posix',
    [
        param('', id='empty'),
        param('EST', id='no-offset'),
        param('5EST', id='no-name'),
        param('EST5EDT,M3.2.0', id='no-end-rule'),
        param('EST5EDT,M13.2.0,M11.1.0', id='bad-month'),
        param('EST5EDT,M3.6.0,M11.1.0', id='bad-week'),
        param('EST5EDT,J0,J100', id='julian-zero'),
        param('EST5EDT;M3.2.0,M11.1.0', id='bad-separator'),
        param('EST5EDT,M3.2.0/200,M11.1.0', id='rule-time-too-large'),
        param('EST5EDT,M3.2.0,M11.1.0x', id='trailing'),
    ]
)
def test_parse_posix_str_errors(posix):
    with pytest.raises(PosixStringError):
        parse_posix_str(posix)


@pytest.mark.parametrize(
    'rule, year, day',
    [
        param(PosixTransInfo(PosixRuleType.MWD, month=10, week=5, dow=0),
              2014, 298, id='last-sunday-october'),
        param(PosixTransInfo(PosixRuleType.MWD, month=3, week=1, dow=0),
              2014, 60, id='first-sunday-march'),
        param(PosixTransInfo(PosixRuleType.JULIAN_FEB29, days=59),
              2020, 59, id='zero-based-feb29'),
        param(PosixTransInfo(PosixRuleType.JULIAN_NO_FEB29, days=60),
              2021, 59, id='julian-common-year'),
    ]
)
def test_calc_transition(rule, year, day):
    assert calc_transition(rule, year) == day * 86400


def test_transitions_for_year_northern(london_tz):
    transitions = get_transitions_for_year(london_tz, 2014)
    assert [t.time for t in transitions] == [1396141200, 1414285200]
    assert [t.is_dst for t in transitions] == [True, False]
    assert [t.type_index for t in transitions] == [1, 0]


def test_transitions_for_year_southern():
    posix = parse_posix_str('AEST-10AEDT,M10.1.0,M4.1.0/3')
    transitions = posix_transitions_for_year(posix, 2021)
    assert [t.time for t in transitions] == [1617465600, 1633190400]
    assert [t.is_dst for t in transitions] == [False, True]


def test_transitions_without_dst(utc_tz):
    assert get_transitions_for_year(utc_tz, 2021) == []


@pytest.mark.parametrize(
    'ts, expected',
    [
        param(1414285199, (1, 1396141200, 1414285200), id='summer-2014'),
        param(1414285200, (0, 1414285200, 1427590800), id='winter-2014'),
        param(1901149200, (1, 1901149200, 1919293200), id='summer-2030'),
    ]
)
def test_fetch_posix_offset(london_tz, ts, expected):
    assert fetch_posix_offset(london_tz, ts) == expected


def test_fetch_posix_offset_no_dst(utc_tz):
    assert fetch_posix_offset(utc_tz, 0) == (0, INT64_MIN, INT64_MAX)
