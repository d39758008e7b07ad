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

import struct

import pytest
import tzdata

from civiltime.errors import CANNOT_OPEN_FILE, NO_SUCH_TIMEZONE
from civiltime.exceptions import TzDatabaseError, TzFileError
from civiltime.tz import db as db_module
from civiltime.tz.db import (
    TzDBIndexEntry,
    load_db_blob,
    parse_tzfile,
    system_db,
    timezone_id_is_valid,
    timezone_identifiers_list,
    zoneinfo,
)
from civiltime.tz.offset import get_timezone_info

GMT_BST = [(0, False, 'GMT'), (3600, True, 'BST')]


def make_db_blob(zones, version='2099z'):
    """Return a single blob database holding the given (id, TZif) pairs."""
    index = b''
    data = b''
    for tz_id, blob in zones:
        index += tz_id.encode('ascii') + b'\0' + struct.pack('>L', len(data))
        data += blob
    return (
        struct.pack('>L', len(zones)) + index
        + version.encode('ascii') + b'\0' + data
    )


def test_builtin_db(db):
    assert db.version == tzdata.IANA_VERSION
    assert 'Europe/London' in db
    assert db.find('europe/london').id == 'Europe/London'
    assert 'Mars/Olympus' not in db
    ids = [entry.id for entry in timezone_identifiers_list(db)]
    assert ids == sorted(ids)
    assert 'UTC' in ids


def test_builtin_db_load(db):
    tz, _ = parse_tzfile('EUROPE/LONDON', db)
    assert tz.name == 'Europe/London'
    assert db.load('Europe/London') is tz
    # 2014-07-01T00:00:00Z
    assert get_timezone_info(1404172800, tz) == (3600, 'BST', True)


def test_parse_tzfile_missing(db):
    assert parse_tzfile('Mars/Olympus', db) == (None, NO_SUCH_TIMEZONE)
    assert parse_tzfile('Europe/London', None) == (None, NO_SUCH_TIMEZONE)


def test_timezone_id_is_valid(db):
    assert timezone_id_is_valid('America/New_York', db)
    assert not timezone_id_is_valid('America/Nowhere', db)
    assert not timezone_id_is_valid('UTC', None)


def test_load_db_blob(tzif):
    blob = make_db_blob([
        ('Test/One', tzif([(0, 1)], GMT_BST, posix='GMT0')),
        ('Test/Two', tzif([], [(7200, False, 'TWO')], posix='TWO-2')),
    ])
    test_db = load_db_blob(blob)
    assert test_db.version == '2099z'
    assert len(test_db) == 2
    assert test_db.load('test/two').type[0].offset == 7200
    assert test_db.load('Test/One').trans == [0]
    assert repr(test_db) == '<TzDB blob (2 zones)>'


@pytest.mark.parametrize(
    'blob',
    [
        b'\0\0',
        struct.pack('>L', 1) + b'Test/One',
        struct.pack('>L', 1) + b'Test/One\0' + struct.pack('>L', 99)
        + b'2099z\0TZif',
    ]
)
def test_load_db_blob_malformed(blob):
    with pytest.raises(TzDatabaseError):
        load_db_blob(blob)


@pytest.fixture
def zoneinfo_dir(tmp_path, tzif):
    (tmp_path / 'Europe').mkdir()
    (tmp_path / 'Europe' / 'Test').write_bytes(
        tzif([(0, 1)], GMT_BST, posix='GMT0'))
    (tmp_path / 'posixrules').write_bytes(tzif([], GMT_BST[:1]))
    (tmp_path / 'README').write_text('not a zone')
    (tmp_path / '+VERSION').write_text('2099z\n')
    return tmp_path


def test_zoneinfo(zoneinfo_dir):
    test_db = zoneinfo(str(zoneinfo_dir))
    assert test_db.version == '2099z'
    assert test_db.index == [TzDBIndexEntry('Europe/Test', 0)]
    assert test_db.load('europe/test').name == 'Europe/Test'


def test_zoneinfo_unreadable_zone(zoneinfo_dir):
    test_db = zoneinfo(str(zoneinfo_dir))
    (zoneinfo_dir / 'Europe' / 'Test').unlink()
    with pytest.raises(TzFileError) as exc_ctx:
        test_db.load('Europe/Test')
    assert exc_ctx.value.code == CANNOT_OPEN_FILE
    assert parse_tzfile('Europe/Test', test_db) == (None, CANNOT_OPEN_FILE)


def test_zoneinfo_not_a_directory(tmp_path):
    with pytest.raises(TzDatabaseError):
        zoneinfo(str(tmp_path / 'missing'))


def test_system_db(monkeypatch, zoneinfo_dir):
    monkeypatch.setitem(db_module._FLAGS, 'zoneinfo_dir', str(zoneinfo_dir))
    assert db_module.get_zoneinfo_dir() == str(zoneinfo_dir)
    assert 'Europe/Test' in system_db()
