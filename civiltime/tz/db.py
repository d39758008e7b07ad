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
"""Timezone databases.

A database maps zone identifiers to TZif blobs. Three sources exist:

* builtin_db: the zones shipped with the "tzdata" distribution.
* zoneinfo: a directory of TZif files, e.g. /usr/share/zoneinfo.
* load_db_blob: a single blob holding an index and the concatenated files.

Databases never change once built. Zones are loaded on first use and then
cached by the database which owns them.
"""

from bisect import bisect_left
from functools import lru_cache
from importlib import resources
import os
import struct
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

import tzdata

from civiltime import LOG, LoggerAdaptor
from civiltime.errors import CANNOT_OPEN_FILE, NO_SUCH_TIMEZONE
from civiltime.exceptions import TzDatabaseError, TzFileError
from civiltime.tz.tzfile import PHP_MAGIC, TZIF_MAGIC, TzInfo, read_tzfile

DEFAULT_ZONEINFO_DIR = '/usr/share/zoneinfo'

_FLAGS = {
    'zoneinfo_dir': os.getenv('CIVILTIME_ZONEINFO', DEFAULT_ZONEINFO_DIR),
}

# Entries of a zoneinfo directory which are not zones.
_SKIP_DIRS = {'posix', 'right'}
_SKIP_FILES = {'posixrules', 'localtime', 'Factory', 'leapseconds'}

_U32 = struct.Struct('>L')


def get_zoneinfo_dir() -> str:
    """Return the directory used by system_db."""
    return _FLAGS['zoneinfo_dir']


def set_zoneinfo_dir(directory: str) -> None:
    """Set the directory used by system_db."""
    _FLAGS['zoneinfo_dir'] = directory


class TzDBIndexEntry(NamedTuple):
    id: str
    pos: int


class TzDB:
    """A read only collection of timezones.

    Args:
        version:
            The database version string, e.g. "2024a".
        index:
            The zones in the database.
        read_blob:
            Returns the TZif data of an index entry.
        source:
            Where the data came from, used in log messages.

    """

    def __init__(
        self,
        version: str,
        index: Iterable[TzDBIndexEntry],
        read_blob: Callable[[TzDBIndexEntry], bytes],
        source: str,
    ):
        self.version = version
        self.index: List[TzDBIndexEntry] = sorted(
            index, key=lambda entry: entry.id)
        self._ids = [entry.id.lower() for entry in self.index]
        self._read_blob = read_blob
        self.source = source
        self._cache: Dict[str, TzInfo] = {}
        self.log = LoggerAdaptor(LOG, {'prefix': source})
        self.log.debug(f'{len(self.index)} zones, version {version}')

    def __len__(self):
        return len(self.index)

    def __contains__(self, tz_id: str) -> bool:
        return self.find(tz_id) is not None

    def __repr__(self):
        return f'<TzDB {self.source} ({len(self)} zones)>'

    def find(self, tz_id: str) -> Optional[TzDBIndexEntry]:
        """Return the index entry for tz_id, matched case insensitively."""
        key = tz_id.lower()
        pos = bisect_left(self._ids, key)
        if pos < len(self._ids) and self._ids[pos] == key:
            return self.index[pos]
        return None

    def read_blob(self, tz_id: str) -> bytes:
        entry = self.find(tz_id)
        if entry is None:
            raise TzFileError(NO_SUCH_TIMEZONE, tz_id)
        try:
            return self._read_blob(entry)
        except OSError:
            raise TzFileError(CANNOT_OPEN_FILE, tz_id) from None

    def load(self, tz_id: str) -> TzInfo:
        """Return the zone tz_id, loading it on first use.

        Raises:
            TzFileError: if the zone does not exist or is corrupt.

        """
        entry = self.find(tz_id)
        if entry is None:
            raise TzFileError(NO_SUCH_TIMEZONE, tz_id)
        try:
            return self._cache[entry.id]
        except KeyError:
            pass
        tz = read_tzfile(self.read_blob(entry.id), entry.id)
        self._cache[entry.id] = tz
        return tz


def parse_tzfile(
    tz_id: str, db: Optional[TzDB]
) -> Tuple[Optional[TzInfo], int]:
    """Load a zone from a database.

    Returns:
        (tz, code): tz is None if the zone could not be loaded, code is
        the error code in that case. A loaded zone may still come with a
        non zero code, SLIM_FILE or EMPTY_POSIX_STRING.

    """
    if db is None:
        return None, NO_SUCH_TIMEZONE
    try:
        tz = db.load(tz_id)
    except TzFileError as exc:
        db.log.debug(str(exc))
        return None, exc.code
    return tz, tz.load_warning


def timezone_id_is_valid(tz_id: str, db: Optional[TzDB]) -> bool:
    """Return True if tz_id names a loadable zone of db."""
    if db is None or tz_id not in db:
        return False
    try:
        blob = db.read_blob(tz_id)
    except TzFileError:
        return False
    return blob[:4] == TZIF_MAGIC or blob[:3] == PHP_MAGIC


def timezone_identifiers_list(db: TzDB) -> List[TzDBIndexEntry]:
    """Return the index entries of db sorted by identifier."""
    return list(db.index)


def _read_file(path: str) -> bytes:
    with open(path, 'rb') as handle:
        return handle.read()


def zoneinfo(directory: str) -> TzDB:
    """Build a database from a directory of TZif files.

    Files without the TZif magic are skipped.

    Raises:
        TzDatabaseError: if the directory cannot be read.

    """
    if not os.path.isdir(directory):
        raise TzDatabaseError(f'not a zoneinfo directory: {directory}')
    log = LoggerAdaptor(LOG, {'prefix': directory})
    index = []
    for root, dirs, files in os.walk(directory):
        dirs[:] = sorted(
            name for name in dirs
            if name not in _SKIP_DIRS and not name.startswith('.')
        )
        for name in sorted(files):
            if name in _SKIP_FILES or name.startswith('.'):
                continue
            path = os.path.join(root, name)
            try:
                with open(path, 'rb') as handle:
                    magic = handle.read(4)
            except OSError as exc:
                log.warning(f'skipping {path}: {exc}')
                continue
            if magic != TZIF_MAGIC:
                continue
            tz_id = os.path.relpath(path, directory).replace(os.sep, '/')
            index.append(TzDBIndexEntry(tz_id, 0))

    version = '0.system'
    version_file = os.path.join(directory, '+VERSION')
    if os.path.isfile(version_file):
        version = _read_file(version_file).decode().strip()

    return TzDB(
        version,
        index,
        lambda entry: _read_file(os.path.join(directory, entry.id)),
        directory,
    )


def system_db() -> TzDB:
    """Return the database of the configured zoneinfo directory."""
    return zoneinfo(get_zoneinfo_dir())


def _read_zstr(blob: bytes, pos: int) -> Tuple[str, int]:
    end = blob.find(b'\0', pos)
    if end == -1:
        raise TzDatabaseError('unterminated string in database blob')
    return blob[pos:end].decode('ascii'), end + 1


def load_db_blob(blob: bytes, source: str = 'blob') -> TzDB:
    """Build a database from the single blob layout.

    The layout is a big-endian u32 entry count, that many entries of a NUL
    terminated identifier followed by a u32 offset, a NUL terminated
    version and finally the data the offsets point into.

    Raises:
        TzDatabaseError: if the blob is malformed.

    """
    try:
        count, = _U32.unpack_from(blob, 0)
        pos = _U32.size
        entries = []
        for _ in range(count):
            tz_id, pos = _read_zstr(blob, pos)
            offset, = _U32.unpack_from(blob, pos)
            pos += _U32.size
            entries.append(TzDBIndexEntry(tz_id, offset))
        version, pos = _read_zstr(blob, pos)
    except (struct.error, UnicodeDecodeError) as exc:
        raise TzDatabaseError(f'malformed database blob: {exc}') from None
    data = blob[pos:]

    # Each zone runs up to the start of the next one.
    starts = sorted({entry.pos for entry in entries} | {len(data)})
    ends = dict(zip(starts, starts[1:]))
    for entry in entries:
        if entry.pos >= len(data):
            raise TzDatabaseError(f'{entry.id}: offset beyond the data')

    def read_blob(entry: TzDBIndexEntry) -> bytes:
        return data[entry.pos:ends[entry.pos]]

    return TzDB(version, entries, read_blob, source)


def _read_builtin(entry: TzDBIndexEntry) -> bytes:
    resource = resources.files('tzdata.zoneinfo')
    for part in entry.id.split('/'):
        resource = resource.joinpath(part)
    return resource.read_bytes()


@lru_cache(maxsize=None)
def builtin_db() -> TzDB:
    """Return the database shipped with the tzdata distribution."""
    zones = resources.files('tzdata').joinpath('zones').read_text()
    index = [
        TzDBIndexEntry(line.strip(), 0)
        for line in zones.splitlines()
        if line.strip()
    ]
    return TzDB(tzdata.IANA_VERSION, index, _read_builtin, 'builtin')
