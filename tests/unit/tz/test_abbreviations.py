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

from civiltime.tz.abbreviations import (
    MAX_ABBR_LEN,
    TIMEZONE_LOOKUP,
    UTC_ENTRY,
    abbr_search,
    timezone_abbreviations_list,
    timezone_id_from_abbr,
)


@pytest.mark.parametrize(
    'word, gmtoffset, isdst, tz_id',
    [
        param('CEST', -1, 0, 'Europe/Berlin', id='first-entry'),
        param('ist', 19800, 0, 'Asia/Kolkata', id='matching-offset'),
        param('ist', 1, 0, 'Asia/Jerusalem', id='offset-mismatch'),
        param('xyz', 3600, 0, 'Europe/Paris', id='fallback'),
        param('xyz', 3600, 1, 'Europe/London', id='fallback-dst'),
    ]
)
def test_abbr_search(word, gmtoffset, isdst, tz_id):
    assert abbr_search(word, gmtoffset, isdst).full_tz_name == tz_id


@pytest.mark.parametrize('word', ['UTC', 'gmt', 'Utc'])
def test_abbr_search_utc(word):
    assert abbr_search(word) is UTC_ENTRY


def test_abbr_search_dst_flag():
    entry = abbr_search('bst')
    assert entry.type == 1
    assert entry.gmtoffset == 3600


def test_abbr_search_unknown():
    assert abbr_search('xyz') is None
    assert abbr_search('xyz', 3601, 0) is None


@pytest.mark.parametrize(
    'abbr, gmtoffset, isdst, expected',
    [
        ('EDT', -14400, 1, 'America/New_York'),
        ('a', 3600, 0, ''),
        ('z', 0, 0, 'UTC'),
        ('', -25200, 0, 'America/Denver'),
        ('', 1, 0, ''),
    ]
)
def test_timezone_id_from_abbr(abbr, gmtoffset, isdst, expected):
    assert timezone_id_from_abbr(abbr, gmtoffset, isdst) == expected


def test_timezone_abbreviations_list():
    entries = timezone_abbreviations_list()
    assert len(entries) == len(TIMEZONE_LOOKUP)
    assert all(len(entry.name) <= MAX_ABBR_LEN for entry in entries)
    assert all(entry.name == entry.name.lower() for entry in entries)
