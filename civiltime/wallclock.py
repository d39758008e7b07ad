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
"""Wall clock related utilities."""

from datetime import datetime, timezone
from typing import Optional, Tuple

from metomi.isodatetime.timezone import get_local_time_zone

from civiltime.arithmetic import (
    set_timezone_from_offset,
    unixtime_to_gmt,
    unixtime_to_local,
    update_ts,
)
from civiltime.calendar import SECS_PER_HOUR
from civiltime.errors import ErrorContainer
from civiltime.parsing.scanner import parse_with_db
from civiltime.timeobj import Time, fill_holes
from civiltime.tz.db import TzDB

_FLAGS = {r'utc_mode': False}


def get_utc_mode():
    """Return value of UTC mode."""
    return _FLAGS['utc_mode']


def set_utc_mode(mode):
    """Set value of UTC mode."""
    _FLAGS['utc_mode'] = bool(mode)


def get_local_offset() -> int:
    """Return the UTC offset of the local time zone in seconds."""
    hours, minutes = get_local_time_zone()
    return hours * SECS_PER_HOUR + minutes * 60


def now(override_use_utc: Optional[bool] = None) -> Time:
    """Return the current time as a Time.

    Keyword arguments:
    override_use_utc (default None) - a boolean (or None) that, if
    True, gives the date and time in UTC. If False, it gives the date
    and time at the local UTC offset. If None, the _FLAGS['utc_mode']
    boolean is used.

    """
    current = datetime.now(timezone.utc)
    sse = int(current.timestamp())
    time = Time()
    if override_use_utc or (override_use_utc is None and _FLAGS['utc_mode']):
        set_timezone_from_offset(time, 0)
    else:
        set_timezone_from_offset(time, get_local_offset())
    unixtime_to_local(time, sse)
    time.us = current.microsecond
    return time


def get_current_time_string(
    display_sub_seconds: bool = False,
    override_use_utc: Optional[bool] = None,
) -> str:
    """Return the current time as an ISO 8601 extended string.

    Examples:
        >>> set_utc_mode(True)
        >>> get_current_time_string().endswith('Z')
        True
        >>> set_utc_mode(False)

    """
    time = now(override_use_utc=override_use_utc)
    text = (
        f'{time.y:04d}-{time.m:02d}-{time.d:02d}'
        f'T{time.h:02d}:{time.i:02d}:{time.s:02d}'
    )
    if display_sub_seconds:
        text += f'.{time.us:06d}'
    if time.z == 0:
        return text + 'Z'
    sign = '-' if time.z < 0 else '+'
    hours, minutes = divmod(abs(time.z) // 60, 60)
    return f'{text}{sign}{hours:02d}:{minutes:02d}'


def strtotime(
    text: str,
    base: Optional[Time] = None,
    db: Optional[TzDB] = None,
) -> Tuple[Optional[int], ErrorContainer]:
    """Return the Unix timestamp a free form string refers to.

    Args:
        text:
            The string, e.g. "+1 week 2 days".
        base:
            The time relative parts count from, the current time (see
            now) by default.
        db:
            Database used to resolve zone identifiers in the string.

    Returns:
        (timestamp, errors): the timestamp is None if the string has
        errors.

    """
    parsed, errors = parse_with_db(text, db)
    if errors.error_count:
        return None, errors
    if base is None:
        base = now()
    fill_holes(parsed, base)
    update_ts(parsed, base.tz_info)
    return parsed.sse, errors


def utc_time_from_timestamp(sse: int) -> Time:
    """Return a UTC Time for a Unix timestamp.

    Examples:
        >>> str(utc_time_from_timestamp(86400))
        '1970-01-02 00:00:00.000000'

    """
    time = Time()
    unixtime_to_gmt(time, sse)
    return time
