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

"""Standard pytest fixtures for unit tests."""

import struct
from typing import Callable, Optional, Sequence, Tuple

import pytest

from civiltime.tz.db import builtin_db
from civiltime.tz.tzfile import TzInfo, read_tzfile

# (utc offset, is dst, abbreviation)
TypeSpec = Tuple[int, bool, str]

# London 2014: BST from 2014-03-30T01:00Z to 2014-10-26T01:00Z
LONDON_2014 = (1396141200, 1414285200)


def _block(
    transitions: Sequence[Tuple[int, int]],
    types: Sequence[TypeSpec],
    leaps: Sequence[Tuple[int, int]],
    bit64: bool,
) -> bytes:
    abbrs = b''
    abbr_idx = {}
    for _, _, abbr in types:
        if abbr not in abbr_idx:
            abbr_idx[abbr] = len(abbrs)
            abbrs += abbr.encode('ascii') + b'\0'
    time_code = 'q' if bit64 else 'l'
    header = struct.pack(
        '>6L', 0, 0, len(leaps), len(transitions), len(types), len(abbrs))
    body = b''.join(
        struct.pack(f'>{time_code}', ts) for ts, _ in transitions)
    body += bytes(idx for _, idx in transitions)
    body += b''.join(
        struct.pack('>lBB', offset, int(isdst), abbr_idx[abbr])
        for offset, isdst, abbr in types
    )
    body += abbrs
    body += b''.join(
        struct.pack(f'>{time_code}l', ts, corr) for ts, corr in leaps)
    return header + body


def make_tzif(
    transitions: Sequence[Tuple[int, int]],
    types: Sequence[TypeSpec],
    posix: Optional[str] = None,
    version: bytes = b'2',
    leaps: Sequence[Tuple[int, int]] = (),
    slim: bool = False,
) -> bytes:
    """Return a TZif blob.

    Args:
        transitions:
            (utc time, type index) pairs.
        types:
            The local time types.
        posix:
            The footer string of a version 2+ file.
        version:
            b'\\0' for version 1, b'2', b'3' or b'4'.
        leaps:
            (utc time, correction) pairs.
        slim:
            Leave the version 1 data block empty.

    """
    preamble = b'TZif' + version + b'\0' * 15
    if version == b'\0':
        return preamble + _block(transitions, types, leaps, bit64=False)
    if slim:
        v1 = _block((), types[:1], (), bit64=False)
    else:
        v1 = _block(transitions, types, leaps, bit64=False)
    v2 = _block(transitions, types, leaps, bit64=True)
    footer = b'\n' + (posix or '').encode('ascii') + b'\n'
    return preamble + v1 + preamble + v2 + footer


@pytest.fixture
def tzif() -> Callable[..., bytes]:
    """Fixture returning the TZif blob builder."""
    return make_tzif


@pytest.fixture
def london_tz() -> TzInfo:
    """A London-like zone: two 2014 transitions and a POSIX rule."""
    return read_tzfile(
        make_tzif(
            [(LONDON_2014[0], 1), (LONDON_2014[1], 0)],
            [(0, False, 'GMT'), (3600, True, 'BST')],
            posix='GMT0BST,M3.5.0/1,M10.5.0',
        ),
        'Europe/London',
    )


@pytest.fixture
def utc_tz() -> TzInfo:
    return read_tzfile(
        make_tzif([], [(0, False, 'UTC')], posix='UTC0'), 'UTC')


@pytest.fixture(scope='session')
def db():
    """The database shipped with tzdata."""
    return builtin_db()
