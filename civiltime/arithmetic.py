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
"""Normalisation, civil time <-> SSE conversion and relative arithmetic.

There are two flavours of addition:

add / sub
    Every unit of the delta is applied to the civil fields and the result
    is resolved in the zone again, so ``00:00 + PT5H`` is ``05:00`` local
    time even across a spring-forward gap.

add_wall / sub_wall
    The calendar units (years, months, days) are applied to the civil
    fields, the clock units (hours, minutes, seconds, microseconds) are
    added to the instant as elapsed seconds.

Both return a new Time and leave their input untouched.
"""

from typing import Optional, Tuple

from civiltime.calendar import (
    SECS_PER_DAY,
    SECS_PER_HOUR,
    day_of_week,
    daynr_from_ymd,
    days_in_month,
    hms_to_seconds,
    ymd_from_daynr,
    ymdhis_from_sse_utc,
)
from civiltime.exceptions import CivilTimeError
from civiltime.timeobj import (
    FIRST_DAY_OF_MONTH,
    FIRST_LAST_NONE,
    INT64_MIN,
    LAST_DAY_OF_MONTH,
    SPECIAL_DAY_OF_WEEK_IN_MONTH,
    SPECIAL_LAST_DAY_OF_WEEK_IN_MONTH,
    SPECIAL_WEEKDAY,
    UNSET,
    RelTime,
    Time,
    ZoneType,
)
from civiltime.tz.offset import (
    get_time_zone_info,
    get_time_zone_offset_info,
    same_timezone,
)
from civiltime.tz.tzfile import TzInfo

US_PER_SEC = 1000000

# How far either side of an instant to look for a DST change when the
# parsed DST flag disagrees with the resolved one.
_DST_LOOKAROUND = 7200


def _range_limit(start: int, adj: int, value: int, carry: int):
    """Bring value into [start, start + adj) carrying the excess.

    Examples:
        >>> _range_limit(0, 60, 61, 0)
        (1, 1)
        >>> _range_limit(0, 60, -1, 0)
        (59, -1)
        >>> _range_limit(1, 12, 0, 2000)
        (12, 1999)

    """
    overflow, value = divmod(value - start, adj)
    return value + start, carry + overflow


def _tdiv(num: int, den: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(num) // abs(den)
    return quotient if (num >= 0) == (den >= 0) else -quotient


def _tmod(num: int, den: int) -> int:
    """Remainder taking the sign of num."""
    return num - den * _tdiv(num, den)


def do_normalize(time: Time) -> None:
    """Carry out of range civil fields into the next larger unit.

    Fields left UNSET are not touched, so a time without a clock part keeps
    its hour, minute and second unset.
    """
    if time.us != UNSET:
        time.us, time.s = _range_limit(0, US_PER_SEC, time.us, time.s)
    if time.s != UNSET:
        time.s, time.i = _range_limit(0, 60, time.s, time.i)
        time.i, time.h = _range_limit(0, 60, time.i, time.h)
        time.h, time.d = _range_limit(0, 24, time.h, time.d)
    if UNSET in (time.y, time.m, time.d):
        return
    time.m, time.y = _range_limit(1, 12, time.m, time.y)
    daynr = daynr_from_ymd(time.y, time.m, 1) + time.d - 1
    time.y, time.m, time.d = ymd_from_daynr(daynr)


def _range_limit_days_relative(
    base_y: int, base_m: int, rt: RelTime
) -> None:
    """Borrow whole months into a negative day count.

    The month lengths come from the months before the base date when the
    delta runs forward and from the months after it when it is inverted.
    """
    base_m, base_y = _range_limit(1, 12, base_m, base_y)
    year, month = base_y, base_m
    if not rt.invert:
        while rt.d < 0:
            month -= 1
            if month < 1:
                month += 12
                year -= 1
            rt.d += days_in_month(year, month)
            rt.m -= 1
    else:
        while rt.d < 0:
            rt.d += days_in_month(year, month)
            rt.m -= 1
            month += 1
            if month > 12:
                month -= 12
                year += 1


def do_rel_normalize(base: Time, rt: RelTime) -> None:
    """Normalise a relative delta whose fields were computed against base.

    Examples:
        >>> rt = RelTime(m=1, d=-14)
        >>> do_rel_normalize(Time(y=2015, m=4, d=2), rt)
        >>> rt.m, rt.d
        (0, 17)

    """
    rt.us, rt.s = _range_limit(0, US_PER_SEC, rt.us, rt.s)
    rt.s, rt.i = _range_limit(0, 60, rt.s, rt.i)
    rt.i, rt.h = _range_limit(0, 60, rt.i, rt.h)
    rt.h, rt.d = _range_limit(0, 24, rt.h, rt.d)
    rt.m, rt.y = _range_limit(0, 12, rt.m, rt.y)
    _range_limit_days_relative(base.y, base.m, rt)
    rt.m, rt.y = _range_limit(0, 12, rt.m, rt.y)


def epoch_days_from_time(time: Time) -> int:
    """Return the day number of the civil date of time.

    Examples:
        >>> epoch_days_from_time(Time(y=2000, m=3, d=1))
        11017

    """
    return daynr_from_ymd(time.y, time.m, time.d)


def time_compare(one: Time, two: Time) -> int:
    """Compare two instants, returning -1, 0 or 1."""
    if one.sse == two.sse:
        if one.us == two.us:
            return 0
        return -1 if one.us < two.us else 1
    return -1 if one.sse < two.sse else 1


# Relative adjustments applied by update_ts.

def _adjust_for_weekday(time: Time) -> None:
    rel = time.relative
    current_dow = day_of_week(time.y, time.m, time.d)
    if rel.weekday_behavior == 2:
        # "this week" runs Monday to Sunday.
        if current_dow == 0 and rel.weekday != 0:
            rel.weekday -= 7
        if rel.weekday == 0 and current_dow != 0:
            rel.weekday = 7
        time.d -= current_dow
        time.d += rel.weekday
        return
    difference = rel.weekday - current_dow
    if (
        (rel.d < 0 and difference < 0)
        or (rel.d >= 0 and difference <= -rel.weekday_behavior)
    ):
        difference += 7
    if rel.weekday >= 0:
        time.d += difference
    else:
        time.d -= 7 - (abs(rel.weekday) - current_dow)
    rel.have_weekday_relative = False


def _adjust_special_weekday(time: Time) -> None:
    """Move by a number of business days (Monday to Friday)."""
    count = time.relative.special_amount
    dow = day_of_week(time.y, time.m, time.d)
    weeks = _tdiv(count, 5)
    rem = _tmod(count, 5)
    time.d += weeks * 7

    if count > 0:
        if rem == 0:
            # back to Friday if we stopped on the weekend
            if dow == 0:
                time.d -= 2
            elif dow == 6:
                time.d -= 1
        elif dow == 6:
            time.d += 1
        elif dow + rem > 5:
            time.d += 2
    else:
        if rem == 0:
            if dow == 6:
                time.d += 2
            elif dow == 0:
                time.d += 1
        elif dow == 0:
            time.d -= 1
        elif dow + rem < 1:
            time.d -= 2
    time.d += rem


def _adjust_special_early(time: Time) -> None:
    rel = time.relative
    if rel.have_special_relative:
        if rel.special_type == SPECIAL_DAY_OF_WEEK_IN_MONTH:
            time.d = 1
            time.m += rel.m
            rel.m = 0
        elif rel.special_type == SPECIAL_LAST_DAY_OF_WEEK_IN_MONTH:
            time.d = 1
            time.m += rel.m + 1
            rel.m = 0
    do_normalize(time)


def _adjust_relative(time: Time) -> None:
    rel = time.relative
    if rel.have_weekday_relative:
        _adjust_for_weekday(time)
    do_normalize(time)

    if time.have_relative:
        time.us += rel.us
        time.s += rel.s
        time.i += rel.i
        time.h += rel.h
        time.d += rel.d
        time.m += rel.m
        time.y += rel.y

    if rel.first_last_day_of == FIRST_DAY_OF_MONTH:
        time.d = 1
    elif rel.first_last_day_of == LAST_DAY_OF_MONTH:
        time.d = 0
        time.m += 1
    do_normalize(time)


def _adjust_special(time: Time) -> None:
    rel = time.relative
    if rel.have_special_relative and rel.special_type == SPECIAL_WEEKDAY:
        _adjust_special_weekday(time)
    do_normalize(time)
    rel.clear_special()


def _offset_info(ts: int, tz: TzInfo) -> Tuple[int, int, bool]:
    info = get_time_zone_offset_info(ts, tz)
    if info is None:
        return 0, 0, False
    return info


def _adjust_timezone(time: Time, tz: Optional[TzInfo]) -> None:
    """Turn the local seconds in time.sse into UTC seconds.

    Times in a named zone resolve the offset at the local instant. In a
    DST gap the offset from before the gap is used. In a repeated hour the
    offset in force at the wall clock reading taken as UTC is used unless
    the parsed DST flag says otherwise.
    """
    if time.zone_type == ZoneType.OFFSET:
        time.is_localtime = True
        time.sse -= time.z
        return
    if time.zone_type == ZoneType.ABBR:
        time.is_localtime = True
        time.sse -= time.z + time.dst * SECS_PER_HOUR
        return
    if time.zone_type == ZoneType.ID:
        tz = time.tz_info
    if tz is None:
        return

    current_offset, _, current_is_dst = _offset_info(time.sse, tz)
    after_offset, after_transition, _ = _offset_info(
        time.sse - current_offset, tz)
    actual_offset = after_offset
    actual_transition = after_transition

    if current_offset == after_offset and time.have_zone:
        if current_offset >= 0 and time.dst > 0 and not current_is_dst:
            # zone at or east of UTC, DST may have started just before
            earlier_offset, earlier_transition, _ = _offset_info(
                time.sse - current_offset - _DST_LOOKAROUND, tz)
            if (
                earlier_offset != after_offset
                and time.sse - earlier_offset < after_transition
            ):
                actual_offset = earlier_offset
                actual_transition = earlier_transition
        elif current_offset <= 0 and current_is_dst and time.dst <= 0:
            # zone west of UTC, DST may end just after
            later_offset, later_transition, _ = _offset_info(
                time.sse - current_offset + _DST_LOOKAROUND, tz)
            if (
                later_offset != after_offset
                and time.sse - later_offset >= later_transition
            ):
                actual_offset = later_offset
                actual_transition = later_transition

    time.is_localtime = True
    in_transition = (
        actual_transition != INT64_MIN
        and time.sse - actual_offset
        >= actual_transition + (current_offset - actual_offset)
        and time.sse - actual_offset < actual_transition
    )
    if current_offset != actual_offset and not in_transition:
        time.sse -= actual_offset
    else:
        time.sse -= current_offset
    set_timezone(time, tz)


def update_ts(time: Time, tz: Optional[TzInfo] = None) -> None:
    """Apply pending relative parts and recompute time.sse.

    Args:
        time:
            A time with all civil fields set, updated in place.
        tz:
            The zone to interpret a time without zone attribution in. Times
            carrying a zone identifier use their own zone instead.

    """
    _adjust_special_early(time)
    _adjust_relative(time)
    _adjust_special(time)

    time.sse = (
        hms_to_seconds(time.h, time.i, time.s)
        + epoch_days_from_time(time) * SECS_PER_DAY
    )
    _adjust_timezone(time, tz)

    time.sse_uptodate = True
    time.have_relative = False
    time.relative.have_weekday_relative = False
    time.relative.have_special_relative = False
    time.relative.first_last_day_of = FIRST_LAST_NONE


def unixtime_to_gmt(time: Time, ts: int) -> None:
    """Set the civil fields of time to the UTC representation of ts."""
    time.y, time.m, time.d, time.h, time.i, time.s = ymdhis_from_sse_utc(ts)
    time.z = 0
    time.dst = 0
    time.sse = ts
    time.sse_uptodate = True
    time.tim_uptodate = True
    time.is_localtime = False


def unixtime_to_local(time: Time, ts: int) -> None:
    """Set the civil fields of time to ts seen in the zone of time."""
    if time.zone_type in (ZoneType.ABBR, ZoneType.OFFSET):
        z, dst = time.z, time.dst
        unixtime_to_gmt(time, ts + z + dst * SECS_PER_HOUR)
        time.sse = ts
        time.z = z
        time.dst = dst
    elif time.zone_type == ZoneType.ID and time.tz_info is not None:
        tz = time.tz_info
        info = get_time_zone_info(ts, tz)
        unixtime_to_gmt(time, ts + info.offset)
        time.sse = ts
        time.dst = int(info.is_dst)
        time.z = info.offset
        time.tz_info = tz
        time.tz_abbr_update(info.abbr)
    else:
        time.is_localtime = False
        time.have_zone = 0
        return
    time.is_localtime = True
    time.have_zone = 1


def update_from_sse(time: Time) -> None:
    """Recompute the civil fields from time.sse.

    The zone offset and DST flag are kept as they were; use set_timezone
    to refresh them for a zone identifier.
    """
    sse, z, dst = time.sse, time.z, time.dst
    if time.zone_type in (ZoneType.ABBR, ZoneType.OFFSET):
        unixtime_to_gmt(time, sse + z + dst * SECS_PER_HOUR)
    elif time.zone_type == ZoneType.ID and time.tz_info is not None:
        offset = get_time_zone_info(sse, time.tz_info).offset
        unixtime_to_gmt(time, sse + offset)
    else:
        unixtime_to_gmt(time, sse)
    time.sse = sse
    time.is_localtime = True
    time.have_zone = 1
    time.z = z
    time.dst = dst


def set_timezone(time: Time, tz: TzInfo) -> None:
    """Attach zone tz to time, resolving offset and abbreviation at sse."""
    info = get_time_zone_info(time.sse, tz)
    time.z = info.offset
    time.dst = int(info.is_dst)
    time.tz_info = tz
    time.tz_abbr_update(info.abbr)
    time.have_zone = 1
    time.zone_type = ZoneType.ID


def set_timezone_from_offset(time: Time, utc_offset: int) -> None:
    """Attach a fixed UTC offset (seconds east of UTC) to time."""
    time.tz_abbr = None
    time.z = utc_offset
    time.dst = 0
    time.tz_info = None
    time.zone_type = ZoneType.OFFSET
    time.have_zone = 1
    time.sse_uptodate = False
    time.tim_uptodate = False


def set_timezone_from_abbr(
    time: Time, abbr: str, utc_offset: int, dst: int
) -> None:
    """Attach a zone abbreviation to time.

    Args:
        time:
            The time to update.
        abbr:
            The abbreviation, stored upper cased.
        utc_offset:
            The standard offset in seconds east of UTC.
        dst:
            1 if the abbreviation denotes daylight saving time, which adds
            an hour to utc_offset.

    """
    time.tz_abbr_update(abbr)
    time.z = utc_offset
    time.dst = dst
    time.tz_info = None
    time.zone_type = ZoneType.ABBR
    time.have_zone = 1
    time.sse_uptodate = False
    time.tim_uptodate = False


def _set_relative(time: Time, interval: RelTime, bias: int) -> None:
    time.relative = RelTime(
        y=interval.y * bias,
        m=interval.m * bias,
        d=interval.d * bias,
        h=interval.h * bias,
        i=interval.i * bias,
        s=interval.s * bias,
        us=interval.us * bias,
    )


def add(old_time: Time, interval: RelTime) -> Time:
    """Return old_time moved by interval through its civil fields.

    Intervals with a weekday or special part ("next monday", "+2 weekdays")
    are applied as they are; plain intervals honour interval.invert.
    """
    time = old_time.clone()
    if interval.have_weekday_relative or interval.have_special_relative:
        time.relative = interval.clone()
    else:
        _set_relative(time, interval, -1 if interval.invert else 1)
    time.have_relative = True
    time.sse_uptodate = False

    update_ts(time, None)
    update_from_sse(time)
    time.have_relative = False
    return time


def sub(old_time: Time, interval: RelTime) -> Time:
    """Return old_time moved back by interval through its civil fields.

    Weekday and special parts of interval are ignored.
    """
    time = old_time.clone()
    _set_relative(time, interval, 1 if interval.invert else -1)
    time.have_relative = True
    time.sse_uptodate = False

    update_ts(time, None)
    update_from_sse(time)
    time.have_relative = False
    return time


def _clamp_day(time: Time) -> None:
    """Clamp the day to the length of the month the relative lands on."""
    rel = time.relative
    if not (rel.y or rel.m):
        return
    month, year = _range_limit(1, 12, time.m + rel.m, time.y + rel.y)
    last_day = days_in_month(year, month)
    if time.d > last_day:
        time.d = last_day


def _wall(old_time: Time, interval: RelTime, bias: int) -> Time:
    """Shared body of add_wall (bias 1) and sub_wall (bias -1)."""
    time = old_time.clone()
    time.have_relative = True
    time.sse_uptodate = False

    if interval.have_weekday_relative or interval.have_special_relative:
        time.relative = interval.clone()
        update_ts(time, None)
        update_from_sse(time)
    else:
        if interval.invert:
            bias = -bias
        time.relative = RelTime(
            y=interval.y * bias,
            m=interval.m * bias,
            d=interval.d * bias,
        )
        if time.relative.y or time.relative.m or time.relative.d:
            _clamp_day(time)
            update_ts(time, None)

        if interval.us == 0:
            time.sse += bias * hms_to_seconds(
                interval.h, interval.i, interval.s)
            update_from_sse(time)
        else:
            us, s = _range_limit(0, US_PER_SEC, interval.us, interval.s)
            time.sse += bias * hms_to_seconds(interval.h, interval.i, s)
            update_from_sse(time)
            time.us += us * bias
            do_normalize(time)
            update_ts(time, None)
        do_normalize(time)

    if time.zone_type == ZoneType.ID and time.tz_info is not None:
        set_timezone(time, time.tz_info)
    time.have_relative = False
    return time


def add_wall(old_time: Time, interval: RelTime) -> Time:
    """Return old_time moved by interval with wall clock semantics.

    Years and months that land past the end of the target month clamp to
    its last day (2000-01-31 + P1M is 2000-02-29), the clock part of the
    interval is elapsed time.

    Examples:
        >>> from civiltime.arithmetic import add_wall, update_ts
        >>> start = Time(y=2000, m=1, d=31, zone_type=ZoneType.OFFSET)
        >>> update_ts(start)
        >>> str(add_wall(start, RelTime(m=1)))
        '2000-02-29 00:00:00.000000'

    """
    return _wall(old_time, interval, 1)


def sub_wall(old_time: Time, interval: RelTime) -> Time:
    """Inverse of add_wall."""
    return _wall(old_time, interval, -1)


def diff_days(one: Time, two: Time) -> int:
    """Return the number of whole days between one and two.

    For two times in the same zone the civil dates are compared, so days
    of 23 or 25 hours count as one day. Otherwise the elapsed seconds are
    divided into 86400 second days.
    """
    if same_timezone(one, two):
        if time_compare(one, two) < 0:
            earliest, latest = one, two
        else:
            earliest, latest = two, one
        days = abs(
            epoch_days_from_time(earliest) - epoch_days_from_time(latest))
        earliest_time = (
            hms_to_seconds(earliest.h, earliest.i, earliest.s) * US_PER_SEC
            + earliest.us
        )
        latest_time = (
            hms_to_seconds(latest.h, latest.i, latest.s) * US_PER_SEC
            + latest.us
        )
        if latest_time < earliest_time and days > 0:
            days -= 1
        return days
    return abs(_tdiv(one.sse - two.sse, SECS_PER_DAY))


def _same_zone_id(one: Time, two: Time) -> bool:
    return (
        one.zone_type == ZoneType.ID
        and two.zone_type == ZoneType.ID
        and one.tz_key is not None
        and one.tz_key == two.tz_key
    )


def _civil_key(time: Time):
    return (time.y, time.m, time.d, time.h, time.i, time.s, time.us)


def _sort_old_to_new(one: Time, two: Time, rt: RelTime):
    """Return (older, newer), setting rt.invert when they were swapped."""
    if _same_zone_id(one, two):
        swap = _civil_key(one) > _civil_key(two)
    else:
        swap = (one.sse, one.us) > (two.sse, two.us)
    if swap:
        rt.invert = True
        return two, one
    return one, two


def _diff_fields(one: Time, two: Time, rt: RelTime) -> None:
    rt.y = two.y - one.y
    rt.m = two.m - one.m
    rt.d = two.d - one.d
    rt.h = two.h - one.h
    rt.i = two.i - one.i
    rt.s = two.s - one.s
    rt.us = two.us - one.us


def _diff_with_tzid(one: Time, two: Time) -> RelTime:
    rt = RelTime(invert=False)
    one, two = _sort_old_to_new(one, two, rt)

    # change of UTC offset between the two instants
    dst_corr = two.z - one.z
    _diff_fields(one, two, rt)
    rt.days = diff_days(one, two)

    # inside a repeated hour the civil order and instant order disagree
    if two.sse < one.sse:
        flipped = abs(rt.i * 60 + rt.s - dst_corr)
        rt.h = flipped // SECS_PER_HOUR
        rt.i = (flipped - rt.h * SECS_PER_HOUR) // 60
        rt.s = flipped % 60
        rt.invert = not rt.invert

    do_rel_normalize(one if rt.invert else two, rt)

    if one.dst == 1 and two.dst == 0:
        # fall back
        if (
            two.tz_info is not None
            and two.sse - one.sse + dst_corr < SECS_PER_DAY
        ):
            rt.h -= _tdiv(dst_corr, SECS_PER_HOUR)
            rt.i -= _tdiv(_tmod(dst_corr, SECS_PER_HOUR), 60)
    elif one.dst == 0 and two.dst == 1:
        # spring forward
        if two.tz_info is not None:
            info = get_time_zone_offset_info(two.sse - two.z, two.tz_info)
            if info is not None:
                transition = info[1]
                if (
                    not (
                        one.sse + SECS_PER_DAY > transition
                        and one.sse + SECS_PER_DAY <= transition + dst_corr
                    )
                    and two.sse >= transition
                    and (two.sse - one.sse + dst_corr) % SECS_PER_DAY
                    > two.sse - transition
                ):
                    rt.h -= _tdiv(dst_corr, SECS_PER_HOUR)
                    rt.i -= _tdiv(_tmod(dst_corr, SECS_PER_HOUR), 60)
    elif two.sse - one.sse >= SECS_PER_DAY and two.tz_info is not None:
        # in the window just before the next transition
        info = get_time_zone_offset_info(two.sse - two.z, two.tz_info)
        if info is not None:
            trans_offset, transition, _ = info
            dst_corr = one.z - trans_offset
            if transition - dst_corr <= two.sse < transition:
                rt.d -= 1
                rt.h = 24
    return rt


def diff(one: Time, two: Time) -> RelTime:
    """Return the relative delta that takes one to two.

    The fields of the result are always positive, rt.invert is set when two
    is before one and rt.days holds the whole number of days between them.

    Examples:
        >>> from civiltime.arithmetic import diff, update_ts
        >>> one = Time(y=2016, m=3, d=1, zone_type=ZoneType.OFFSET)
        >>> two = Time(y=2016, m=3, d=31, zone_type=ZoneType.OFFSET)
        >>> update_ts(one); update_ts(two)
        >>> rt = diff(one, two)
        >>> rt.m, rt.d, rt.days, rt.invert
        (0, 30, 30, False)

    """
    if _same_zone_id(one, two):
        return _diff_with_tzid(one, two)

    rt = RelTime(invert=False)
    one, two = _sort_old_to_new(one, two, rt)

    _diff_fields(one, two, rt)
    if one.zone_type != ZoneType.ID:
        rt.h += one.dst
    if two.zone_type != ZoneType.ID:
        rt.h -= two.dst
    rt.s += one.z - two.z
    rt.days = diff_days(one, two)

    do_rel_normalize(one if rt.invert else two, rt)
    return rt


def interval_to_seconds(interval: RelTime) -> int:
    """Return the fixed length part of interval in seconds.

    The whole day count of a diff result is used when present. Years and
    months without it have no fixed length.

    Raises:
        CivilTimeError:
            If the interval has years or months but no day count.

    """
    if interval.days != UNSET:
        days = interval.days
    elif interval.y or interval.m:
        raise CivilTimeError(
            'an interval with years or months has no fixed length')
    else:
        days = interval.d
    seconds = (
        days * SECS_PER_DAY
        + hms_to_seconds(interval.h, interval.i, interval.s)
    )
    return -seconds if interval.invert else seconds
