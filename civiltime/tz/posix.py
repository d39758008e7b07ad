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
"""POSIX TZ strings: parsing and transition evaluation.

A POSIX TZ string describes the rule a zone follows after the last
transition listed in its TZif file, for example::

    EST5EDT,M3.2.0,M11.1.0
    <+0330>-3:30
    <-02>2<-01>,M3.5.0/-1,M10.5.0/0

Offsets in the string count hours west of Greenwich, they are stored here
as seconds east of UTC like every other offset in this library.
"""

from dataclasses import dataclass, replace
from enum import IntEnum
import re
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Tuple

from civiltime import LOG
from civiltime.calendar import (
    SECS_PER_DAY,
    SECS_PER_HOUR,
    days_in_month,
    day_of_week,
    daynr_from_ymd,
    is_leap,
    ymdhis_from_sse_utc,
)
from civiltime.exceptions import PosixStringError
from civiltime.timeobj import INT64_MAX, INT64_MIN

if TYPE_CHECKING:
    from civiltime.tz.tzfile import TzInfo


_RE_NAME = re.compile(r'<([A-Za-z0-9+\-]{3,})>|([A-Za-z]{3,})')
_RE_OFFSET = re.compile(r'([+-]?)(\d{1,3})(?::(\d{1,2})(?::(\d{1,2}))?)?')
_RE_DATE = re.compile(r'J(\d{1,3})|(\d{1,3})|M(\d{1,2})\.(\d)\.(\d)')

# Rules used when a DST abbreviation is given without rules.
DEFAULT_DST_BEGIN = 'M3.2.0'
DEFAULT_DST_END = 'M11.1.0'
DEFAULT_TRANSITION_TIME = 2 * SECS_PER_HOUR

# Transition times may run up to 167 hours (RFC 8536 section 3.3.1).
MAX_TRANSITION_HOURS = 167


class PosixRuleType(IntEnum):
    """The three date forms of a POSIX transition rule."""
    JULIAN_NO_FEB29 = 1
    JULIAN_FEB29 = 2
    MWD = 3


@dataclass(frozen=True)
class PosixTransInfo:
    """One DST transition rule.

    Args:
        type:
            The date form.
        days:
            Day number for the Julian forms (1..365 or 0..365).
        month, week, dow:
            For the Mm.w.d form, week 5 means "the last".
        hour:
            Seconds after local midnight, may be negative or exceed a day.

    """
    type: PosixRuleType
    days: int = 0
    month: int = 0
    week: int = 0
    dow: int = 0
    hour: int = DEFAULT_TRANSITION_TIME


@dataclass
class PosixStr:
    """A parsed POSIX TZ string."""
    std: str
    std_offset: int
    dst: Optional[str] = None
    dst_offset: int = 0
    dst_begin: Optional[PosixTransInfo] = None
    dst_end: Optional[PosixTransInfo] = None
    type_index_std_type: int = -1
    type_index_dst_type: int = -1

    @property
    def has_dst(self) -> bool:
        return self.dst_end is not None


class PosixTransition(NamedTuple):
    """A transition instant with the local time type it switches to."""
    time: int
    is_dst: bool
    type_index: int


def _parse_name(posix: str, pos: int) -> Tuple[str, int]:
    match = _RE_NAME.match(posix, pos)
    if not match:
        raise PosixStringError(posix, f'expected a zone name at {pos}')
    return match.group(1) or match.group(2), match.end()


def _parse_offset(posix: str, pos: int) -> Tuple[Optional[int], int]:
    """Return the offset in seconds east of UTC, or None if absent."""
    match = _RE_OFFSET.match(posix, pos)
    if not match:
        return None, pos
    sign, hours, minutes, seconds = match.groups()
    hours = int(hours)
    minutes = int(minutes or 0)
    seconds = int(seconds or 0)
    if hours > 24 or minutes > 59 or seconds > 59:
        raise PosixStringError(posix, f'offset out of range at {pos}')
    value = hours * SECS_PER_HOUR + minutes * 60 + seconds
    # West of Greenwich is positive.
    return (value if sign == '-' else -value), match.end()


def _parse_rule(posix: str, pos: int) -> Tuple[PosixTransInfo, int]:
    match = _RE_DATE.match(posix, pos)
    if not match:
        raise PosixStringError(posix, f'expected a transition rule at {pos}')
    julian, zero_based, month, week, dow = match.groups()
    if julian is not None:
        info = PosixTransInfo(PosixRuleType.JULIAN_NO_FEB29, days=int(julian))
        if not 1 <= info.days <= 365:
            raise PosixStringError(posix, 'Julian day out of range')
    elif zero_based is not None:
        info = PosixTransInfo(PosixRuleType.JULIAN_FEB29, days=int(zero_based))
        if not 0 <= info.days <= 365:
            raise PosixStringError(posix, 'day of year out of range')
    else:
        info = PosixTransInfo(
            PosixRuleType.MWD, month=int(month), week=int(week), dow=int(dow)
        )
        if (
            not 1 <= info.month <= 12
            or not 1 <= info.week <= 5
            or not 0 <= info.dow <= 6
        ):
            raise PosixStringError(posix, 'Mm.w.d rule out of range')
    pos = match.end()
    if posix[pos:pos + 1] == '/':
        time_match = _RE_OFFSET.match(posix, pos + 1)
        if not time_match:
            raise PosixStringError(posix, f'expected a time at {pos + 1}')
        sign, hours, minutes, seconds = time_match.groups()
        if int(hours) > MAX_TRANSITION_HOURS:
            raise PosixStringError(posix, 'transition time out of range')
        value = (
            int(hours) * SECS_PER_HOUR
            + int(minutes or 0) * 60
            + int(seconds or 0)
        )
        info = replace(info, hour=-value if sign == '-' else value)
        pos = time_match.end()
    return info, pos


def parse_posix_str(posix: str) -> PosixStr:
    """Parse a POSIX TZ string.

    Args:
        posix:
            The string, e.g. "CET-1CEST,M3.5.0,M10.5.0/3".

    Raises:
        PosixStringError: if the string is empty or malformed.

    Examples:
        >>> ps = parse_posix_str('EST5EDT,M3.2.0,M11.1.0')
        >>> ps.std, ps.std_offset, ps.dst, ps.dst_offset
        ('EST', -18000, 'EDT', -14400)
        >>> ps.dst_begin.month, ps.dst_begin.week, ps.dst_begin.hour
        (3, 2, 7200)
        >>> parse_posix_str('<+0330>-3:30').std_offset
        12600

    """
    posix = posix.strip()
    if not posix:
        raise PosixStringError(posix, 'empty string')
    std, pos = _parse_name(posix, 0)
    std_offset, pos = _parse_offset(posix, pos)
    if std_offset is None:
        raise PosixStringError(posix, 'missing standard time offset')
    result = PosixStr(std=std, std_offset=std_offset)
    if pos == len(posix):
        return result

    result.dst, pos = _parse_name(posix, pos)
    dst_offset, pos = _parse_offset(posix, pos)
    result.dst_offset = (
        std_offset + SECS_PER_HOUR if dst_offset is None else dst_offset
    )
    if pos == len(posix):
        result.dst_begin, _ = _parse_rule(DEFAULT_DST_BEGIN, 0)
        result.dst_end, _ = _parse_rule(DEFAULT_DST_END, 0)
        return result

    if posix[pos] != ',':
        raise PosixStringError(posix, f'unexpected character at {pos}')
    result.dst_begin, pos = _parse_rule(posix, pos + 1)
    if posix[pos:pos + 1] != ',':
        raise PosixStringError(posix, 'missing DST end rule')
    result.dst_end, pos = _parse_rule(posix, pos + 1)
    if pos != len(posix):
        raise PosixStringError(posix, f'trailing data at {pos}')
    return result


def integrate_posix_types(posix: PosixStr, tz: 'TzInfo') -> None:
    """Point the POSIX rule at the matching local time types of tz.

    Types that the TZif file does not list are appended to it.
    """
    posix.type_index_std_type = tz.find_or_add_type(
        posix.std_offset, False, posix.std)
    if posix.dst is not None:
        posix.type_index_dst_type = tz.find_or_add_type(
            posix.dst_offset, True, posix.dst)


def calc_transition(rule: PosixTransInfo, year: int) -> int:
    """Return the seconds from the start of year to the rule's day.

    The time of day of the rule is not included.

    Examples:
        >>> rule = PosixTransInfo(PosixRuleType.MWD, month=3, week=2, dow=0)
        >>> calc_transition(rule, 2021) // 86400  # March 14th
        72
        >>> rule = PosixTransInfo(PosixRuleType.JULIAN_NO_FEB29, days=60)
        >>> calc_transition(rule, 2020) // 86400  # March 1st
        60

    """
    if rule.type == PosixRuleType.JULIAN_NO_FEB29:
        days = rule.days - 1
        if is_leap(year) and rule.days >= 60:
            days += 1
        return days * SECS_PER_DAY
    if rule.type == PosixRuleType.JULIAN_FEB29:
        return rule.days * SECS_PER_DAY
    day = rule.dow - day_of_week(year, rule.month, 1)
    if day < 0:
        day += 7
    month_length = days_in_month(year, rule.month)
    for _ in range(1, rule.week):
        if day + 7 >= month_length:
            break
        day += 7
    start_of_month = (
        daynr_from_ymd(year, rule.month, 1) - daynr_from_ymd(year, 1, 1)
    )
    return (start_of_month + day) * SECS_PER_DAY


def posix_transitions_for_year(
    posix: PosixStr, year: int
) -> List[PosixTransition]:
    """Return the DST transitions of a year in chronological order.

    Zones without DST have none.

    Examples:
        >>> ps = parse_posix_str('EST5EDT,M3.2.0,M11.1.0')
        >>> [t.time for t in posix_transitions_for_year(ps, 2010)]
        [1268550000, 1289109600]

    """
    if not posix.has_dst:
        return []
    year_begin = daynr_from_ymd(year, 1, 1) * SECS_PER_DAY
    begin = (
        year_begin
        + calc_transition(posix.dst_begin, year)
        + posix.dst_begin.hour
        - posix.std_offset
    )
    end = (
        year_begin
        + calc_transition(posix.dst_end, year)
        + posix.dst_end.hour
        - posix.dst_offset
    )
    into_dst = PosixTransition(begin, True, posix.type_index_dst_type)
    out_of_dst = PosixTransition(end, False, posix.type_index_std_type)
    if begin < end:
        return [into_dst, out_of_dst]
    return [out_of_dst, into_dst]


def get_transitions_for_year(tz: 'TzInfo', year: int) -> List[PosixTransition]:
    """Return the POSIX derived transitions of tz for a year."""
    if tz.posix_info is None:
        return []
    return posix_transitions_for_year(tz.posix_info, year)


def fetch_posix_offset(tz: 'TzInfo', ts: int) -> Tuple[int, int, int]:
    """Evaluate the POSIX rule of tz at ts.

    Returns:
        (type_index, transition_time, next_transition_time)

    """
    posix = tz.posix_info
    if not posix.has_dst:
        last = tz.trans[-1] if tz.trans else INT64_MIN
        return posix.type_index_std_type, last, INT64_MAX

    year = ymdhis_from_sse_utc(ts + posix.std_offset)[0]
    transitions: List[PosixTransition] = []
    for candidate in (year - 1, year, year + 1):
        transitions.extend(posix_transitions_for_year(posix, candidate))
    for previous, current in zip(transitions, transitions[1:]):
        if ts < current.time:
            return previous.type_index, previous.time, current.time
    LOG.debug(f'{tz.name}: {ts} is beyond the POSIX transitions')
    return transitions[-1].type_index, transitions[-1].time, INT64_MAX
