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
"""Resolve the UTC offset of a zone at an instant."""

from bisect import bisect_right
from typing import TYPE_CHECKING, NamedTuple, Optional, Tuple

from civiltime.calendar import SECS_PER_HOUR
from civiltime.timeobj import INT64_MAX, INT64_MIN, ZoneType
from civiltime.tz.posix import fetch_posix_offset
from civiltime.tz.tzfile import TTInfo, TzInfo, leap_seconds_at

if TYPE_CHECKING:
    from civiltime.timeobj import Time


class TimeOffset(NamedTuple):
    """The local time type in force at an instant."""
    offset: int
    is_dst: bool
    abbr: str
    transition_time: int
    next_transition_time: int
    leap_secs: int = 0


def fetch_timezone_offset(
    tz: TzInfo, ts: int
) -> Tuple[Optional[TTInfo], int, int]:
    """Return (type, transition_time, next_transition_time) at ts.

    Instants before the first transition use the first local time type.
    Instants at or after the last transition use the POSIX rule when the
    zone has one.
    """
    if not tz.trans:
        if tz.posix_info is not None:
            index, _, next_time = fetch_posix_offset(tz, ts)
            return tz.type[index], INT64_MIN, next_time
        if tz.type:
            return tz.type[0], INT64_MIN, INT64_MAX
        return None, INT64_MIN, INT64_MAX

    if ts < tz.trans[0]:
        return tz.type[0], INT64_MIN, tz.trans[0]

    last = tz.trans[-1]
    if ts > last:
        if tz.posix_info is not None:
            index, transition, next_time = fetch_posix_offset(tz, ts)
            return tz.type[index], max(transition, last), next_time
        return tz.type[tz.trans_idx[-1]], last, INT64_MAX
    if ts == last:
        # the last transition itself still uses its own type
        next_time = INT64_MAX
        if tz.posix_info is not None:
            next_time = fetch_posix_offset(tz, ts)[2]
        return tz.type[tz.trans_idx[-1]], last, next_time

    k = bisect_right(tz.trans, ts) - 1
    return tz.type[tz.trans_idx[k]], tz.trans[k], tz.trans[k + 1]


def get_time_zone_info(ts: int, tz: TzInfo) -> TimeOffset:
    """Return the offset, DST flag and abbreviation of tz at ts.

    Zones without any local time type report UTC.
    """
    ttinfo, transition, next_transition = fetch_timezone_offset(tz, ts)
    leap_secs, _ = leap_seconds_at(tz, ts)
    if ttinfo is None:
        return TimeOffset(
            0, False, 'UTC', transition, next_transition, leap_secs)
    return TimeOffset(
        ttinfo.offset,
        ttinfo.isdst,
        tz.abbr(ttinfo.abbr_idx),
        transition,
        next_transition,
        leap_secs,
    )


def get_timezone_info(ts: int, tz: TzInfo) -> Tuple[int, str, bool]:
    """Return (offset, abbr, is_dst) of tz at ts."""
    info = get_time_zone_info(ts, tz)
    return info.offset, info.abbr, info.is_dst


def get_time_zone_offset_info(
    ts: int, tz: Optional[TzInfo]
) -> Optional[Tuple[int, int, bool]]:
    """Return (offset, transition_time, is_dst), or None.

    None is returned when there is no zone (offset or abbreviation based
    times carry no TzInfo) or the zone has no local time types.
    """
    if tz is None:
        return None
    ttinfo, transition, _ = fetch_timezone_offset(tz, ts)
    if ttinfo is None:
        return None
    return ttinfo.offset, transition, ttinfo.isdst


def timestamp_is_in_dst(ts: int, tz: TzInfo) -> int:
    """Return 1 if ts is in DST, 0 if not and -1 if unknown."""
    ttinfo, _, _ = fetch_timezone_offset(tz, ts)
    if ttinfo is None:
        return -1
    return int(ttinfo.isdst)


def get_current_offset(time: 'Time') -> int:
    """Return the UTC offset in force for time, whatever its zone type."""
    if time.zone_type in (ZoneType.ABBR, ZoneType.OFFSET):
        return time.z + time.dst * SECS_PER_HOUR
    if time.zone_type == ZoneType.ID and time.tz_info is not None:
        return get_time_zone_info(time.sse, time.tz_info).offset
    return 0


def same_timezone(one: 'Time', two: 'Time') -> bool:
    """Return True if both times are in the same zone.

    Offset and abbreviation zones compare by their effective offset, zone
    identifiers by name.
    """
    if one.zone_type != two.zone_type:
        return False
    if one.zone_type in (ZoneType.ABBR, ZoneType.OFFSET):
        return (
            one.z + one.dst * SECS_PER_HOUR
            == two.z + two.dst * SECS_PER_HOUR
        )
    if one.zone_type == ZoneType.ID:
        return one.tz_key == two.tz_key
    return False
