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
"""Civil time and relative time records.

Fields that have not been set hold the UNSET sentinel rather than None so
that arithmetic can skip them cheaply and callers can compare against it.
"""

import copy
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from civiltime.tz.tzfile import TzInfo


UNSET = -9999999

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Relative "special" kinds.
SPECIAL_NONE = 0
SPECIAL_WEEKDAY = 1
SPECIAL_DAY_OF_WEEK_IN_MONTH = 2
SPECIAL_LAST_DAY_OF_WEEK_IN_MONTH = 3

# Values for RelTime.first_last_day_of.
FIRST_LAST_NONE = 0
FIRST_DAY_OF_MONTH = 1
LAST_DAY_OF_MONTH = 2

# fill_holes options.
NONE = 0x00
OVERRIDE_TIME = 0x01
NO_CLONE = 0x02


class ZoneType(IntEnum):
    """How the zone of a Time value was specified."""
    NONE = 0
    OFFSET = 1
    ABBR = 2
    ID = 3


@dataclass
class RelTime:
    """A relative delta in calendar units plus weekday/special anchors."""
    y: int = 0
    m: int = 0
    d: int = 0
    h: int = 0
    i: int = 0
    s: int = 0
    us: int = 0
    weekday: int = 0
    weekday_behavior: int = 0
    first_last_day_of: int = FIRST_LAST_NONE
    invert: bool = False
    days: int = UNSET
    special_type: int = SPECIAL_NONE
    special_amount: int = 0
    have_weekday_relative: bool = False
    have_special_relative: bool = False

    def clone(self) -> 'RelTime':
        return copy.copy(self)

    def clear_special(self) -> None:
        self.special_type = SPECIAL_NONE
        self.special_amount = 0


@dataclass
class Time:
    """A broken down civil time with its zone attribution."""
    y: int = 0
    m: int = 0
    d: int = 0
    h: int = 0
    i: int = 0
    s: int = 0
    us: int = 0
    z: int = 0
    dst: int = 0
    tz_abbr: Optional[str] = None
    tz_info: Optional['TzInfo'] = None
    relative: RelTime = field(default_factory=RelTime)
    sse: int = 0
    have_time: bool = False
    have_date: bool = False
    have_zone: int = 0
    have_relative: bool = False
    have_weeknr_day: bool = False
    sse_uptodate: bool = False
    tim_uptodate: bool = False
    is_localtime: bool = False
    zone_type: ZoneType = ZoneType.NONE

    @classmethod
    def unset(cls) -> 'Time':
        """Return a Time with every civil and zone field UNSET."""
        time = cls(
            y=UNSET, m=UNSET, d=UNSET, h=UNSET, i=UNSET, s=UNSET, us=UNSET,
            z=UNSET, dst=UNSET,
        )
        time.relative.days = UNSET
        return time

    @property
    def tz_key(self) -> Optional[str]:
        """The zone identifier this value refers to, if any."""
        if self.zone_type == ZoneType.ID:
            if self.tz_info is not None:
                return self.tz_info.name
            return self.tz_abbr
        return None

    def clone(self) -> 'Time':
        """Return a copy sharing the (immutable) timezone object."""
        new = copy.copy(self)
        new.relative = self.relative.clone()
        return new

    def tz_abbr_update(self, abbr: Optional[str]) -> None:
        """Store a zone abbreviation, upper cased."""
        self.tz_abbr = abbr.upper() if abbr is not None else None

    def reset_fields(self) -> None:
        """Reset the civil fields to the epoch (format specifier "!")."""
        self.y = 1970
        self.m = 1
        self.d = 1
        self.h = self.i = self.s = 0
        self.us = 0
        self.tz_info = None

    def reset_unset_fields(self) -> None:
        """Reset unset civil fields to the epoch (format specifier "|")."""
        if self.y == UNSET:
            self.y = 1970
        if self.m == UNSET:
            self.m = 1
        if self.d == UNSET:
            self.d = 1
        if self.h == UNSET:
            self.h = 0
        if self.i == UNSET:
            self.i = 0
        if self.s == UNSET:
            self.s = 0
        if self.us == UNSET:
            self.us = 0

    def __str__(self):
        return (
            f'{self.y:04d}-{self.m:02d}-{self.d:02d} '
            f'{self.h:02d}:{self.i:02d}:{self.s:02d}.{self.us:06d}'
        )


def time_ctor() -> Time:
    return Time()


def rel_time_ctor() -> RelTime:
    return RelTime()


def fill_holes(parsed: Time, now: Time, options: int = NONE) -> None:
    """Fill the unset fields of parsed with the values from now.

    Args:
        parsed:
            The result of one of the parsers, updated in place.
        now:
            The reference time, usually the current time.
        options:
            OVERRIDE_TIME keeps the time of now even when only a date was
            parsed. NO_CLONE is accepted for compatibility; timezone
            objects are immutable and always shared.

    """
    if (
        not options & OVERRIDE_TIME
        and parsed.have_date
        and not parsed.have_time
    ):
        parsed.h = 0
        parsed.i = 0
        parsed.s = 0
        parsed.us = 0
    if any(
        value != UNSET
        for value in (
            parsed.y, parsed.m, parsed.d, parsed.h, parsed.i, parsed.s
        )
    ):
        if parsed.us == UNSET:
            parsed.us = 0
    elif parsed.us == UNSET:
        parsed.us = now.us if now.us != UNSET else 0
    for attr in ('y', 'm', 'd', 'h', 'i', 's', 'z', 'dst'):
        if getattr(parsed, attr) == UNSET:
            value = getattr(now, attr)
            setattr(parsed, attr, value if value != UNSET else 0)
    if parsed.tz_abbr is None:
        parsed.tz_abbr = now.tz_abbr
    if parsed.tz_info is None:
        parsed.tz_info = now.tz_info
    if parsed.zone_type == ZoneType.NONE and now.zone_type != ZoneType.NONE:
        parsed.zone_type = now.zone_type
        parsed.is_localtime = True
