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

from civiltime.errors import (
    ERR_DOUBLE_DATE,
    ERR_DOUBLE_TIME,
    ERR_EMPTY_STRING,
    ERR_NUMBER_OUT_OF_RANGE,
    ERR_TZID_NOT_FOUND,
    ERR_UNEXPECTED_CHARACTER,
    WARN_DOUBLE_TZ,
    WARN_INVALID_DATE,
    WARN_INVALID_TIME,
)
from civiltime.parsing.scanner import (
    Cursor,
    parse,
    parse_with_db,
    parse_zone,
)
from civiltime.timeobj import (
    FIRST_DAY_OF_MONTH,
    INT64_MAX,
    INT64_MIN,
    LAST_DAY_OF_MONTH,
    SPECIAL_DAY_OF_WEEK_IN_MONTH,
    SPECIAL_WEEKDAY,
    UNSET,
    Time,
    ZoneType,
)


def ymdhis(time):
    return (time.y, time.m, time.d, time.h, time.i, time.s)


@pytest.mark.parametrize(
    'text, expected',
    [
        param('2008-07-01', (2008, 7, 1, UNSET, UNSET, UNSET),
              id='iso-date'),
        param('22:35', (UNSET, UNSET, UNSET, 22, 35, 0), id='short-time'),
        param('2008-07-01T22:35:17+0100', (2008, 7, 1, 22, 35, 17),
              id='iso-datetime'),
        param('1 Jan 2020', (2020, 1, 1, UNSET, UNSET, UNSET),
              id='day-month-year'),
        param('Jan 5th, 2021', (2021, 1, 5, UNSET, UNSET, UNSET),
              id='textual-date'),
        param('1 IV 2020', (2020, 4, 1, UNSET, UNSET, UNSET),
              id='roman-month'),
        param('May 2008', (2008, 5, 1, UNSET, UNSET, UNSET),
              id='month-year'),
        param('2008.197', (2008, 1, 197, UNSET, UNSET, UNSET),
              id='year-day-of-year'),
        param('10/Oct/2000:13:55:36 -0700', (2000, 10, 10, 13, 55, 36),
              id='common-log-format'),
        param('5pm', (UNSET, UNSET, UNSET, 17, 0, 0), id='tiny-12-hour'),
        param('12am', (UNSET, UNSET, UNSET, 0, 0, 0), id='midnight-12-hour'),
        param('noon', (UNSET, UNSET, UNSET, 12, 0, 0), id='noon'),
        param('back of 7pm', (UNSET, UNSET, UNSET, 19, 15, 0),
              id='back-of'),
        param('front of 7', (UNSET, UNSET, UNSET, 6, 45, 0), id='front-of'),
        param('12/22/69', (2069, 12, 22, UNSET, UNSET, UNSET),
              id='american-2069'),
        param('12/22/1978', (1978, 12, 22, UNSET, UNSET, UNSET),
              id='american-four-digit-year'),
        param('22DEC78', (1978, 12, 22, UNSET, UNSET, UNSET),
              id='datefull-compact'),
        param('22-december-78', (1978, 12, 22, UNSET, UNSET, UNSET),
              id='datefull-dashes'),
        param('22.12.1978', (1978, 12, 22, UNSET, UNSET, UNSET),
              id='pointed-four-digit-year'),
        param('22.12.78', (1978, 12, 22, UNSET, UNSET, UNSET),
              id='pointed-two-digit-year'),
        param('22.7.78', (1978, 7, 22, UNSET, UNSET, UNSET),
              id='pointed-short-month'),
        param('2008-6', (2008, 6, 1, UNSET, UNSET, UNSET),
              id='year-month-no-day'),
        param('08-06-30', (2008, 6, 30, UNSET, UNSET, UNSET),
              id='two-digit-year-iso'),
        param('+10000-01-01', (10000, 1, 1, UNSET, UNSET, UNSET),
              id='expanded-year'),
        param('2008-197', (2008, 1, 197, UNSET, UNSET, UNSET),
              id='year-dash-day-of-year'),
        param('jan-03-2008', (2008, 1, 3, UNSET, UNSET, UNSET),
              id='pg-text-short'),
        param('2008-jan-03', (2008, 1, 3, UNSET, UNSET, UNSET),
              id='pg-text-reverse'),
        param('2008:07:01 22:35:17', (2008, 7, 1, 22, 35, 17),
              id='exif'),
        param('19970523091528', (1997, 5, 23, 9, 15, 28),
              id='mysql-1997'),
        param('20500410101010', (2050, 4, 10, 10, 10, 10),
              id='mysql-2050'),
        param('19980717T14:08:55', (1998, 7, 17, 14, 8, 55),
              id='compact-date-colon-time'),
        param('154530', (UNSET, UNSET, UNSET, 15, 45, 30),
              id='time-no-colon'),
        param('1545', (UNSET, UNSET, UNSET, 15, 45, 0),
              id='gnu-no-colon'),
        param('May 18th 5:05pm UTC', (UNSET, 5, 18, 17, 5, 0),
              id='date-short-with-time-12'),
        param('8\u202fpm', (UNSET, UNSET, UNSET, 20, 0, 0),
              id='nnbsp-meridian'),
        param('8:43\u202f\u202fpm', (UNSET, UNSET, UNSET, 20, 43, 0),
              id='double-nnbsp-meridian'),
        param('8:43.43\u202fpm', (UNSET, UNSET, UNSET, 20, 43, 43),
              id='nnbsp-long-12'),
    ]
)
def test_parse_absolute(text, expected):
    time, errors = parse(text)
    assert errors.error_count == 0
    assert ymdhis(time) == expected


def test_parse_fraction_and_offset():
    time, errors = parse('2008-07-01T22:35:17.123456+02:00')
    assert errors.error_count == 0
    assert time.us == 123456
    assert time.z == 7200
    assert time.zone_type == ZoneType.OFFSET


def test_parse_weekday_and_abbreviation():
    time, errors = parse('Sat, 05 Jul 2008 12:00:00 GMT')
    assert errors.error_count == 0
    assert ymdhis(time) == (2008, 7, 5, 12, 0, 0)
    assert time.relative.weekday == 6
    assert time.relative.weekday_behavior == 1
    assert time.zone_type == ZoneType.ABBR
    assert (time.z, time.tz_abbr) == (0, 'GMT')


def test_parse_iso_week_day():
    time, errors = parse('2008-W01-1')
    assert errors.error_count == 0
    assert (time.y, time.m, time.d) == (2008, 1, 1)
    assert time.relative.d == -1
    assert time.have_relative


@pytest.mark.parametrize(
    'text, field, value',
    [
        param('yesterday', 'd', -1, id='yesterday'),
        param('tomorrow', 'd', 1, id='tomorrow'),
        param('+1 week 2 days', 'd', 9, id='weeks-and-days'),
        param('3 days ago', 'd', -3, id='ago'),
        param('1 fortnight ago', 'd', -14, id='fortnight'),
        param('next week', 'd', 7, id='next-week'),
        param('-2 months', 'm', -2, id='negative-months'),
        param('+5 years', 'y', 5, id='years'),
        param('10 min', 'i', 10, id='minutes'),
        param('250 ms', 'us', 250000, id='milliseconds'),
        param('7 us', 'us', 7, id='microseconds'),
    ]
)
def test_parse_relative(text, field, value):
    time, errors = parse(text)
    assert errors.error_count == 0
    assert time.have_relative
    assert getattr(time.relative, field) == value


def test_parse_last_weekday():
    time, _ = parse('last saturday')
    assert time.relative.d == -7
    assert time.relative.weekday == 6
    assert time.relative.have_weekday_relative
    assert time.h == 0


def test_parse_this_week():
    time, _ = parse('this week')
    assert time.relative.d == 0
    assert time.relative.weekday == 1
    assert time.relative.weekday_behavior == 2


def test_parse_first_day_of():
    time, errors = parse('first day of next month')
    assert errors.error_count == 0
    assert time.relative.first_last_day_of == FIRST_DAY_OF_MONTH
    assert time.relative.m == 1
    time, _ = parse('last day of february')
    assert time.relative.first_last_day_of == LAST_DAY_OF_MONTH
    assert time.m == 2


def test_parse_weekday_of():
    time, errors = parse('second monday of next month')
    assert errors.error_count == 0
    relative = time.relative
    assert relative.special_type == SPECIAL_DAY_OF_WEEK_IN_MONTH
    assert (relative.d, relative.weekday, relative.m) == (7, 1, 1)


def test_parse_weekdays():
    time, _ = parse('2 weekdays ago')
    assert time.relative.have_special_relative
    assert time.relative.special_type == SPECIAL_WEEKDAY
    assert time.relative.special_amount == -2


@pytest.mark.parametrize(
    'text, seconds, micro',
    [
        param('@1234567890', 1234567890, 0, id='seconds'),
        param('@-1.5', -1, -500000, id='negative-fraction'),
        param('@-0.4', 0, -400000, id='negative-below-one'),
        param('@1234567890.1234567', 1234567890, 123456,
              id='fraction-truncated'),
        param('@-9223372036854775808', INT64_MIN, 0, id='int64-min'),
        param('@9223372036854775807', INT64_MAX, 0, id='int64-max'),
    ]
)
def test_parse_timestamp(text, seconds, micro):
    time, errors = parse(text)
    assert errors.error_count == 0
    assert (time.y, time.m, time.d, time.h) == (1970, 1, 1, 0)
    assert time.relative.s == seconds
    assert time.relative.us == micro
    assert time.zone_type == ZoneType.OFFSET
    assert time.z == 0


def test_parse_timestamp_relative_overflow():
    time, errors = parse('@9223372036854775807 9sec')
    assert errors.has_error(ERR_NUMBER_OUT_OF_RANGE)
    assert time.relative.s == INT64_MAX


def test_parse_fraction_truncated():
    time, errors = parse('2008-07-01T22:35:17.123456789')
    assert errors.error_count == 0
    assert ymdhis(time) == (2008, 7, 1, 22, 35, 17)
    assert time.us == 123456


def test_parse_ago_applies_to_preceding_units():
    time, errors = parse('6 months ago 4 days')
    assert errors.error_count == 0
    assert (time.relative.m, time.relative.d) == (-6, 4)


@pytest.mark.parametrize(
    'text, offset',
    [
        param('T17:21:49\u202fGMT+0230', 9000, id='nnbsp'),
        param('T17:21:49\u202f\u202fGMT+0230', 9000, id='double-nnbsp'),
        param('T17:21:49\u00a0GMT+0230', 9000, id='nbsp'),
        param('T17:21:49\u202f\u00a0GMT+0230', 9000, id='mixed'),
    ]
)
def test_parse_unicode_spaces_before_zone(text, offset):
    time, errors = parse(text)
    assert errors.error_count == 0
    assert (time.h, time.i, time.s) == (17, 21, 49)
    assert time.z == offset


def test_parse_common_log_format_nnbsp():
    time, errors = parse('10/Oct/2000:13:55:36\u202f-0230')
    assert errors.error_count == 0
    assert ymdhis(time) == (2000, 10, 10, 13, 55, 36)
    assert time.z == -9000


def test_parse_long_garbage():
    _, errors = parse('x' * 20000)
    assert errors.error_count > 0
    assert errors.has_error(ERR_TZID_NOT_FOUND)


@pytest.mark.parametrize(
    'text',
    [
        param('December', id='month-only'),
        param('May 18th', id='no-year'),
        param('dec', id='month-abbreviation'),
    ]
)
def test_parse_partial_date_is_not_invalid(text):
    _, errors = parse(text)
    assert errors.error_count == 0
    assert errors.warning_count == 0


def test_parse_abbreviation():
    time, errors = parse('CEST')
    assert errors.error_count == 0
    assert time.zone_type == ZoneType.ABBR
    assert (time.z, time.dst, time.tz_abbr) == (3600, 1, 'CEST')


def test_parse_unresolved_identifier():
    time, errors = parse('2008-07-01 Europe/Amsterdam')
    assert errors.error_count == 0
    assert time.zone_type == ZoneType.ID
    assert time.tz_info is None
    assert time.tz_key == 'Europe/Amsterdam'


def test_parse_with_db(db):
    time, errors = parse_with_db('2014-07-01 Europe/London', db)
    assert errors.error_count == 0
    assert time.tz_info.name == 'Europe/London'
    _, errors = parse_with_db('Mars/Olympus', db)
    assert errors.has_error(ERR_TZID_NOT_FOUND)


@pytest.mark.parametrize(
    'text, tz_id',
    [
        param('01:00:03.12345 America/Indiana/Knox', 'America/Indiana/Knox',
              id='three-parts'),
        param('2005-07-14\t22:30:41\tAmerica/Los_Angeles',
              'America/Los_Angeles', id='tab-separated'),
        param('Africa/Dar_es_Salaam', 'Africa/Dar_es_Salaam',
              id='underscores'),
        param('America/Port-au-Prince', 'America/Port-au-Prince',
              id='dashes'),
        param('Antarctica/DumontDUrville', 'Antarctica/DumontDUrville',
              id='mixed-case'),
    ]
)
def test_parse_zone_identifiers(db, text, tz_id):
    time, errors = parse_with_db(text, db)
    assert errors.error_count == 0
    assert time.zone_type == ZoneType.ID
    assert time.tz_info.name == tz_id


def test_parse_with_custom_loader(london_tz):
    calls = []

    def loader(tz_id, db):
        calls.append(tz_id)
        return london_tz, 0

    time, errors = parse_with_db('Europe/London', {}, loader)
    assert errors.error_count == 0
    assert calls == ['Europe/London']
    assert time.tz_info is london_tz


@pytest.mark.parametrize(
    'text, code',
    [
        param('', ERR_EMPTY_STRING, id='empty'),
        param('  \t', ERR_EMPTY_STRING, id='blank'),
        param('2008-07-01 2008-07-02', ERR_DOUBLE_DATE, id='double-date'),
        param('10:00 11:00', ERR_DOUBLE_TIME, id='double-time'),
        param('xyzzy', ERR_TZID_NOT_FOUND, id='unknown-word'),
        param('@99999999999999999999999', ERR_NUMBER_OUT_OF_RANGE,
              id='timestamp-overflow'),
    ]
)
def test_parse_errors(text, code):
    _, errors = parse(text)
    assert errors.has_error(code)


def test_parse_error_position():
    _, errors = parse('  2008-07-01 #')
    assert errors.error_count == 1
    error = errors.error_messages[0]
    assert error.code == ERR_UNEXPECTED_CHARACTER
    assert (error.position, error.character) == (11, '#')


@pytest.mark.parametrize(
    'text, code',
    [
        param('10:00 +0100 +0200', WARN_DOUBLE_TZ, id='double-tz'),
        param('2008-02-30', WARN_INVALID_DATE, id='invalid-date'),
        param('24:30', WARN_INVALID_TIME, id='invalid-time'),
    ]
)
def test_parse_warnings(text, code):
    _, errors = parse(text)
    assert errors.error_count == 0
    assert errors.has_warning(code)


@pytest.mark.parametrize(
    'text, offset, rest, zone_type',
    [
        param('+05:30 rest', 19800, ' rest', ZoneType.OFFSET, id='colon'),
        param('-0530', -19800, '', ZoneType.OFFSET, id='hhmm'),
        param('+5:30', 19800, '', ZoneType.OFFSET, id='h-colon-mm'),
        param('-05', -18000, '', ZoneType.OFFSET, id='hours'),
        param('+053015', 19815, '', ZoneType.OFFSET, id='hhmmss'),
        param('GMT+01:00', 3600, '', ZoneType.OFFSET, id='gmt-prefix'),
        param('EST rest', -18000, ' rest', ZoneType.ABBR, id='abbr'),
        param('(CEST)', 3600, '', ZoneType.ABBR, id='parenthesised'),
    ]
)
def test_parse_zone(text, offset, rest, zone_type):
    time = Time.unset()
    assert parse_zone(text, time) == (offset, rest, False)
    assert time.zone_type == zone_type


def test_parse_zone_not_found():
    time = Time.unset()
    assert parse_zone('+1234567', time)[2]
    assert parse_zone('xyzzy', Time.unset())[2]


def test_parse_zone_with_db(db):
    time = Time.unset()
    offset, rest, not_found = parse_zone('America/New_York', time, db)
    assert (offset, rest, not_found) == (0, '', False)
    assert time.zone_type == ZoneType.ID
    assert time.tz_info.name == 'America/New_York'


def test_cursor():
    tok = Cursor('12:30.1234567 pm')
    assert tok.get_nr(2) == 12
    assert tok.get_nr(2) == 30
    assert tok.get_frac_nr() == 123456
    assert tok.meridian(12) == 0
    assert tok.at_end()
    assert Cursor('a.m.').meridian(12) == -12
    assert Cursor('p').meridian(1) == 12
    assert Cursor('fortnights').lookup_relunit() == ('d', 14)
    assert Cursor('-- -7').get_signed_digits(4) == -7
    assert Cursor('abc').get_nr_ex(2) == (UNSET, 0)
