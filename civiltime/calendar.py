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
"""Proleptic Gregorian calendar arithmetic.

Day numbers count days since 1970-01-01, so they double as "epoch days".
Python integers are unbounded which lets every function here work across
the full signed 64-bit year range without overflow handling.
"""

from typing import Tuple

SECS_PER_DAY = 86400
SECS_PER_HOUR = 3600

DAYS_PER_ERA = 146097
YEARS_PER_ERA = 400
# Days from 0000-03-01 to 1970-01-01.
_EPOCH_SHIFT = 719468

DAYS_IN_MONTH_COMMON = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
DAYS_IN_MONTH_LEAP = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Cumulative days before the start of each month (index 1..12).
_DAY_TABLE_COMMON = (0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)
_DAY_TABLE_LEAP = (0, 0, 31, 60, 91, 121, 152, 182, 213, 244, 274, 305, 335)


def is_leap(y: int) -> bool:
    """Return True if y is a leap year.

    Examples:
        >>> is_leap(2000), is_leap(1900), is_leap(2024), is_leap(-4)
        (True, False, True, True)

    """
    return (y % 4 == 0 and y % 100 != 0) or y % 400 == 0


def days_in_month(y: int, m: int) -> int:
    """Return the number of days in month m (1..12) of year y."""
    if is_leap(y):
        return DAYS_IN_MONTH_LEAP[m - 1]
    return DAYS_IN_MONTH_COMMON[m - 1]


def days_in_year(y: int) -> int:
    return 366 if is_leap(y) else 365


def daynr_from_ymd(y: int, m: int, d: int) -> int:
    """Return the number of days between 1970-01-01 and y-m-d.

    Month and day must be in range; years are unrestricted (year 0 and
    negative years are valid proleptic Gregorian years).

    Examples:
        >>> daynr_from_ymd(1970, 1, 1)
        0
        >>> daynr_from_ymd(2000, 3, 1)
        11017
        >>> daynr_from_ymd(1969, 12, 31)
        -1

    """
    if m <= 2:
        y -= 1
    era = y // YEARS_PER_ERA
    yoe = y - era * YEARS_PER_ERA
    doy = (153 * (m - 3 if m > 2 else m + 9) + 2) // 5 + d - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * DAYS_PER_ERA + doe - _EPOCH_SHIFT


def ymd_from_daynr(daynr: int) -> Tuple[int, int, int]:
    """Inverse of daynr_from_ymd.

    Examples:
        >>> ymd_from_daynr(0)
        (1970, 1, 1)
        >>> ymd_from_daynr(-146099)
        (1569, 12, 30)

    """
    z = daynr + _EPOCH_SHIFT
    era = z // DAYS_PER_ERA
    doe = z - era * DAYS_PER_ERA
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    y = yoe + era * YEARS_PER_ERA
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    d = doy - (153 * mp + 2) // 5 + 1
    m = mp + 3 if mp < 10 else mp - 9
    if m <= 2:
        y += 1
    return y, m, d


def day_of_week(y: int, m: int, d: int) -> int:
    """Return the day of the week, 0 (Sunday) to 6 (Saturday)."""
    # 1970-01-01 was a Thursday.
    return (daynr_from_ymd(y, m, d) + 4) % 7


def iso_day_of_week(y: int, m: int, d: int) -> int:
    """Return the ISO 8601 day of the week, 1 (Monday) to 7 (Sunday)."""
    return day_of_week(y, m, d) or 7


def day_of_year(y: int, m: int, d: int) -> int:
    """Return the zero based day of the year."""
    table = _DAY_TABLE_LEAP if is_leap(y) else _DAY_TABLE_COMMON
    return table[m] + d - 1


def valid_date(y: int, m: int, d: int) -> bool:
    if m < 1 or m > 12 or d < 1:
        return False
    return d <= days_in_month(y, m)


def valid_time(h: int, i: int, s: int) -> bool:
    return 0 <= h <= 23 and 0 <= i <= 59 and 0 <= s <= 59


def iso_date_from_date(y: int, m: int, d: int) -> Tuple[int, int, int]:
    """Return (iso_year, iso_week, iso_day) for a calendar date.

    Week one is the week containing the first Thursday of the year.

    Examples:
        >>> iso_date_from_date(2008, 12, 28)
        (2008, 52, 7)
        >>> iso_date_from_date(2008, 12, 29)
        (2009, 1, 1)
        >>> iso_date_from_date(2010, 1, 3)
        (2009, 53, 7)

    """
    daynr = daynr_from_ymd(y, m, d)
    iso_day = (daynr + 3) % 7 + 1
    thursday = daynr + 4 - iso_day
    iso_year = ymd_from_daynr(thursday)[0]
    iso_week = (thursday - daynr_from_ymd(iso_year, 1, 1)) // 7 + 1
    return iso_year, iso_week, iso_day


def iso_week_from_date(y: int, m: int, d: int) -> Tuple[int, int]:
    """Return (iso_week, iso_year) for a calendar date."""
    iso_year, iso_week, _ = iso_date_from_date(y, m, d)
    return iso_week, iso_year


def daynr_from_weeknr(iy: int, iw: int, id_: int) -> int:
    """Return the zero based day of iso_year iy for ISO week iw, day id_.

    Week and day are not range checked, so out of range values land in the
    adjacent years (the result is then negative or larger than the year).
    """
    # Day of the week of January 1st, used to find Monday of week one.
    dow = day_of_week(iy, 1, 1)
    day = 0 - (dow - 7 if dow > 4 else dow)
    return day + (iw - 1) * 7 + id_


def date_from_iso_date(iy: int, iw: int, id_: int) -> Tuple[int, int, int]:
    """Inverse of iso_date_from_date.

    Examples:
        >>> date_from_iso_date(2015, 53, 5)
        (2016, 1, 1)
        >>> date_from_iso_date(2009, 1, 1)
        (2008, 12, 29)
        >>> date_from_iso_date(2015, 0, 1)
        (2014, 12, 22)

    """
    return ymd_from_daynr(
        daynr_from_ymd(iy, 1, 1) + daynr_from_weeknr(iy, iw, id_)
    )


def sse_from_ymdhis_utc(
    y: int, m: int, d: int, h: int, i: int, s: int
) -> int:
    """Return the seconds since the epoch for a UTC civil time."""
    return (
        daynr_from_ymd(y, m, d) * SECS_PER_DAY
        + h * SECS_PER_HOUR + i * 60 + s
    )


def ymdhis_from_sse_utc(sse: int) -> Tuple[int, int, int, int, int, int]:
    """Return (y, m, d, h, i, s) in UTC for seconds since the epoch.

    Examples:
        >>> ymdhis_from_sse_utc(-12622953600)
        (1569, 12, 30, 0, 0, 0)
        >>> ymdhis_from_sse_utc(1396137600)
        (2014, 3, 30, 0, 0, 0)

    """
    days, remainder = divmod(sse, SECS_PER_DAY)
    y, m, d = ymd_from_daynr(days)
    h, remainder = divmod(remainder, SECS_PER_HOUR)
    i, s = divmod(remainder, 60)
    return y, m, d, h, i, s


def hms_to_seconds(h: int, i: int, s: int) -> int:
    return h * SECS_PER_HOUR + i * 60 + s
