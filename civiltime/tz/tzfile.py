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
"""TZif (zoneinfo) reader.

Reads the binary format described in RFC 8536 (versions 1 to 4) as well as
the PHP flavoured variant which replaces the "TZif" preamble with
"PHP<version>", a backwards compatibility flag and a country code, and
appends a location footer after the POSIX string.
"""

from dataclasses import dataclass, field, replace
import struct
from typing import List, NamedTuple, Optional, Tuple

from civiltime import LOG
from civiltime.errors import (
    CANNOT_OPEN_FILE,
    CORRUPT_DATA_LENGTH,
    CORRUPT_NO_64BIT_PREAMBLE,
    CORRUPT_NO_ABBREVIATION,
    CORRUPT_POSIX_STRING,
    CORRUPT_TRANSITION_INDEX,
    CORRUPT_TRANSITIONS_DONT_INCREASE,
    EMPTY_POSIX_STRING,
    NO_ERROR,
    SLIM_FILE,
    UNSUPPORTED_VERSION,
)
from civiltime.exceptions import PosixStringError, TzFileError
from civiltime.tz.posix import (
    PosixStr,
    integrate_posix_types,
    parse_posix_str,
)

TZIF_MAGIC = b'TZif'
PHP_MAGIC = b'PHP'
PREAMBLE_LENGTH = 20

_HEADER = struct.Struct('>6L')
_TTINFO = struct.Struct('>lBB')
_LOCATION = struct.Struct('>3L')

UNKNOWN_COUNTRY = '??'


class TzCounts(NamedTuple):
    """The six counts of a TZif data block header."""
    ttisgmtcnt: int = 0
    ttisstdcnt: int = 0
    leapcnt: int = 0
    timecnt: int = 0
    typecnt: int = 0
    charcnt: int = 0


@dataclass(frozen=True)
class TTInfo:
    """A local time type."""
    offset: int
    isdst: bool
    abbr_idx: int
    isstd: bool = False
    isgmt: bool = False


class TLInfo(NamedTuple):
    """A leap second record."""
    trans: int
    offset: int


@dataclass(frozen=True)
class TzLocation:
    country_code: str = UNKNOWN_COUNTRY
    latitude: float = 0.0
    longitude: float = 0.0
    comments: str = ''


@dataclass
class TzInfo:
    """A loaded timezone.

    Instances are built by read_tzfile and are not changed afterwards, so
    they can be shared freely between Time values and threads.
    """
    name: str
    version: int = 1
    bit32: TzCounts = TzCounts()
    bit64: TzCounts = TzCounts()
    trans: List[int] = field(default_factory=list)
    trans_idx: List[int] = field(default_factory=list)
    type: List[TTInfo] = field(default_factory=list)
    timezone_abbr: str = ''
    leap_times: List[TLInfo] = field(default_factory=list)
    bc: bool = False
    location: TzLocation = TzLocation()
    posix_string: str = ''
    posix_info: Optional[PosixStr] = None
    load_warning: int = NO_ERROR

    @property
    def timecnt(self) -> int:
        return len(self.trans)

    @property
    def typecnt(self) -> int:
        return len(self.type)

    @property
    def is_slim(self) -> bool:
        return self.load_warning == SLIM_FILE

    def abbr(self, abbr_idx: int) -> str:
        """Return the NUL terminated abbreviation starting at abbr_idx."""
        end = self.timezone_abbr.find('\0', abbr_idx)
        if end == -1:
            end = len(self.timezone_abbr)
        return self.timezone_abbr[abbr_idx:end]

    def find_or_add_type(self, offset: int, isdst: bool, abbr: str) -> int:
        """Return the index of a matching local time type.

        A new type is appended if none matches. Only used while loading.
        """
        for index, ttinfo in enumerate(self.type):
            if (
                ttinfo.offset == offset
                and ttinfo.isdst == isdst
                and self.abbr(ttinfo.abbr_idx) == abbr
            ):
                return index
        abbr_idx = len(self.timezone_abbr)
        self.timezone_abbr += abbr + '\0'
        self.type.append(TTInfo(offset, isdst, abbr_idx))
        self.bit64 = self.bit64._replace(
            typecnt=len(self.type), charcnt=len(self.timezone_abbr))
        return len(self.type) - 1

    def clone(self) -> 'TzInfo':
        """Return a deep copy."""
        return replace(
            self,
            trans=list(self.trans),
            trans_idx=list(self.trans_idx),
            type=list(self.type),
            leap_times=list(self.leap_times),
            posix_info=(
                replace(self.posix_info) if self.posix_info else None
            ),
        )

    def dump(self) -> str:
        """Return a human readable description of the zone."""
        counts = self.bit64 if self.version >= 2 else self.bit32
        lines = [
            f'Country Code:      {self.location.country_code}',
            f'Geo Location:      {self.location.latitude},'
            f'{self.location.longitude}',
            f'Comments:\n{self.location.comments}',
            f'BC:                {int(self.bc)}',
            f'UTC/Local count:   {counts.ttisgmtcnt}',
            f'Std/Wall count:    {counts.ttisstdcnt}',
            f'Leap.sec. count:   {counts.leapcnt}',
            f'Trans. count:      {self.timecnt}',
            f'Local types count: {self.typecnt}',
            f'Zone Abbr. count:  {counts.charcnt}',
        ]
        if self.type:
            lines.append(
                f'{"":>8} ({"":>12}) = {0:3d} '
                + self._dump_type(0))
        for trans, idx in zip(self.trans, self.trans_idx):
            lines.append(
                f'{trans & 0xFFFFFFFFFFFFFFFF:016X} ({trans:12d}) '
                f'= {idx:3d} ' + self._dump_type(idx))
        for leap in self.leap_times:
            lines.append(
                f'{leap.trans & 0xFFFFFFFFFFFFFFFF:016X} '
                f'({leap.trans:12d}) = {leap.offset}')
        if self.posix_string:
            lines.append(f'POSIX string:      {self.posix_string}')
        if self.posix_info:
            posix = self.posix_info
            lines.append(
                f'  std: {posix.std} ({posix.std_offset}) '
                f'[{posix.type_index_std_type}]')
            if posix.dst is not None:
                lines.append(
                    f'  dst: {posix.dst} ({posix.dst_offset}) '
                    f'[{posix.type_index_dst_type}]')
        return '\n'.join(lines)

    def _dump_type(self, idx: int) -> str:
        ttinfo = self.type[idx]
        return (
            f"[{ttinfo.offset:5d} {int(ttinfo.isdst):1d} "
            f"{ttinfo.abbr_idx:3d} '{self.abbr(ttinfo.abbr_idx)}' "
            f"({int(ttinfo.isstd)},{int(ttinfo.isgmt)})]"
        )


class _Cursor:
    """Sequential big-endian reads over a byte string."""

    def __init__(self, data: bytes, tz_id: Optional[str]):
        self.data = data
        self.pos = 0
        self.tz_id = tz_id

    def take(self, length: int) -> bytes:
        if length < 0 or self.pos + length > len(self.data):
            raise TzFileError(CORRUPT_DATA_LENGTH, self.tz_id)
        chunk = self.data[self.pos:self.pos + length]
        self.pos += length
        return chunk

    def unpack(self, fmt: struct.Struct) -> tuple:
        return fmt.unpack(self.take(fmt.size))

    def unpack_array(self, code: str, count: int) -> tuple:
        fmt = struct.Struct(f'>{count}{code}')
        return fmt.unpack(self.take(fmt.size))

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos


def _read_preamble(cursor: _Cursor, tz: TzInfo) -> bool:
    """Read the 20 byte preamble, return True for the PHP variant."""
    preamble = cursor.take(PREAMBLE_LENGTH)
    if preamble[:3] == PHP_MAGIC:
        if preamble[3:4] not in (b'1', b'2', b'3', b'4'):
            raise TzFileError(UNSUPPORTED_VERSION, cursor.tz_id)
        tz.version = int(preamble[3:4])
        tz.bc = bool(preamble[4])
        country = preamble[5:7].decode('ascii', 'replace').rstrip('\0')
        tz.location = TzLocation(country_code=country or UNKNOWN_COUNTRY)
        return True
    if preamble[:4] == TZIF_MAGIC:
        version = preamble[4:5]
        if version == b'\0':
            tz.version = 1
        elif version in (b'2', b'3', b'4'):
            tz.version = int(version)
        else:
            raise TzFileError(UNSUPPORTED_VERSION, cursor.tz_id)
        tz.bc = False
        return False
    raise TzFileError(UNSUPPORTED_VERSION, cursor.tz_id)


def _skip_32bit_block(cursor: _Cursor, counts: TzCounts) -> None:
    cursor.take(
        counts.timecnt * 5
        + counts.typecnt * 6
        + counts.charcnt
        + counts.leapcnt * 8
        + counts.ttisstdcnt
        + counts.ttisgmtcnt
    )


def _read_block(
    cursor: _Cursor, tz: TzInfo, counts: TzCounts, bit64: bool
) -> None:
    """Read the data block described by counts into tz."""
    time_code = 'q' if bit64 else 'l'
    trans = list(cursor.unpack_array(time_code, counts.timecnt))
    trans_idx = list(cursor.take(counts.timecnt))
    types = []
    for _ in range(counts.typecnt):
        offset, isdst, abbr_idx = cursor.unpack(_TTINFO)
        types.append(TTInfo(offset, bool(isdst), abbr_idx))
    abbr = cursor.take(counts.charcnt).decode('ascii', 'replace')
    leaps = []
    for _ in range(counts.leapcnt):
        leap_trans, = cursor.unpack_array(time_code, 1)
        leap_offset, = cursor.unpack_array('l', 1)
        leaps.append(TLInfo(leap_trans, leap_offset))
    isstd = cursor.take(counts.ttisstdcnt)
    isgmt = cursor.take(counts.ttisgmtcnt)

    for index, value in enumerate(isstd[:len(types)]):
        types[index] = replace(types[index], isstd=bool(value))
    for index, value in enumerate(isgmt[:len(types)]):
        types[index] = replace(types[index], isgmt=bool(value))

    # Equal neighbours are collapsed keeping the later entry.
    clean_trans: List[int] = []
    clean_idx: List[int] = []
    for value, idx in zip(trans, trans_idx):
        if clean_trans and value <= clean_trans[-1]:
            if value < clean_trans[-1]:
                raise TzFileError(
                    CORRUPT_TRANSITIONS_DONT_INCREASE, cursor.tz_id)
            clean_trans.pop()
            clean_idx.pop()
        if idx >= counts.typecnt:
            raise TzFileError(CORRUPT_TRANSITION_INDEX, cursor.tz_id)
        clean_trans.append(value)
        clean_idx.append(idx)
    for ttinfo in types:
        if ttinfo.abbr_idx >= max(counts.charcnt, 1):
            raise TzFileError(CORRUPT_NO_ABBREVIATION, cursor.tz_id)

    tz.trans = clean_trans
    tz.trans_idx = clean_idx
    tz.type = types
    tz.timezone_abbr = abbr
    tz.leap_times = leaps


def _read_posix_string(cursor: _Cursor) -> str:
    if not cursor.remaining:
        return ''
    if cursor.take(1) != b'\n':
        raise TzFileError(CORRUPT_POSIX_STRING, cursor.tz_id)
    end = cursor.data.find(b'\n', cursor.pos)
    if end == -1:
        raise TzFileError(CORRUPT_POSIX_STRING, cursor.tz_id)
    posix = cursor.take(end - cursor.pos).decode('ascii', 'replace')
    cursor.take(1)
    return posix


def _read_location(cursor: _Cursor, tz: TzInfo) -> None:
    latitude, longitude, comments_len = cursor.unpack(_LOCATION)
    comments = cursor.take(comments_len).decode('utf-8', 'replace')
    tz.location = replace(
        tz.location,
        latitude=latitude / 100000 - 90,
        longitude=longitude / 100000 - 180,
        comments=comments,
    )


def read_tzfile(data: bytes, tz_id: str) -> TzInfo:
    """Parse a TZif (or PHP flavoured TZif) blob.

    Args:
        data:
            The complete file contents.
        tz_id:
            The identifier to give the zone.

    Returns:
        The loaded zone. Conditions which do not prevent its use are
        reported in its load_warning attribute (SLIM_FILE,
        EMPTY_POSIX_STRING).

    Raises:
        TzFileError: if the blob is corrupt or of an unsupported version.

    """
    cursor = _Cursor(data, tz_id)
    tz = TzInfo(name=tz_id)
    is_php = _read_preamble(cursor, tz)

    tz.bit32 = TzCounts(*cursor.unpack(_HEADER))
    if tz.version >= 2:
        _skip_32bit_block(cursor, tz.bit32)
        if cursor.remaining < PREAMBLE_LENGTH + _HEADER.size:
            raise TzFileError(CORRUPT_NO_64BIT_PREAMBLE, tz_id)
        if cursor.take(PREAMBLE_LENGTH)[:4] != TZIF_MAGIC:
            raise TzFileError(CORRUPT_NO_64BIT_PREAMBLE, tz_id)
        counts = TzCounts(*cursor.unpack(_HEADER))
        _read_block(cursor, tz, counts, bit64=True)
        tz.posix_string = _read_posix_string(cursor)
    else:
        counts = tz.bit32
        _read_block(cursor, tz, counts, bit64=False)
    tz.bit64 = counts._replace(timecnt=len(tz.trans))

    if is_php:
        _read_location(cursor, tz)
    if cursor.remaining:
        raise TzFileError(CORRUPT_DATA_LENGTH, tz_id)

    if tz.posix_string:
        try:
            tz.posix_info = parse_posix_str(tz.posix_string)
        except PosixStringError as exc:
            LOG.debug(f'{tz_id}: {exc}')
            raise TzFileError(CORRUPT_POSIX_STRING, tz_id) from None
        integrate_posix_types(tz.posix_info, tz)
    elif tz.version >= 2:
        tz.load_warning = EMPTY_POSIX_STRING

    if tz.version >= 2 and tz.bit32.timecnt == 0 and tz.trans:
        tz.load_warning = SLIM_FILE
        LOG.warning(f'{tz_id}: this tzfile is a "slim" file')

    LOG.debug(
        f'loaded {tz_id} (version {tz.version}, {tz.timecnt} transitions,'
        f' {tz.typecnt} types, {len(tz.leap_times)} leap seconds)'
    )
    return tz


def tzfile_from_path(path: str, tz_id: Optional[str] = None) -> TzInfo:
    """Load a zone from a TZif file on disk."""
    try:
        with open(path, 'rb') as handle:
            data = handle.read()
    except OSError:
        raise TzFileError(CANNOT_OPEN_FILE, tz_id or path) from None
    return read_tzfile(data, tz_id or path)


def leap_seconds_at(tz: TzInfo, ts: int) -> Tuple[int, Optional[TLInfo]]:
    """Return the leap second correction applying at ts."""
    for leap in reversed(tz.leap_times):
        if ts > leap.trans:
            return leap.offset, leap
    return 0, None
