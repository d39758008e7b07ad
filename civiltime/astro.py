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
"""Sun rise, set and transit times plus decimal hour conversions.

The solar position series follow Paul Schlyter's "How to compute planetary
positions" (the sunriset.c algorithm): days are counted from 2000 Jan 0.0
and all angles are in degrees.
"""

import math
from typing import Tuple

from civiltime.arithmetic import update_ts
from civiltime.calendar import SECS_PER_DAY, SECS_PER_HOUR
from civiltime.timeobj import Time

# Julian day of the Unix epoch and days from it to J2000.0.
JULIAN_DAY_UNIX_EPOCH = 2440587.5
J2000_UNIX_EPOCH_DAYS = 10957.5

# Altitude of the sun's upper limb at standard sunrise, degrees.
SUNRISE_ALTITUDE = -35.0 / 60.0

RADEG = 180.0 / math.pi
DEGRAD = math.pi / 180.0
INV360 = 1.0 / 360.0

US_PER_HOUR = 3600 * 1000000


def ts_to_julian_day(ts: int) -> float:
    """Return the Julian day of a Unix timestamp.

    Examples:
        >>> ts_to_julian_day(0)
        2440587.5

    """
    return ts / SECS_PER_DAY + JULIAN_DAY_UNIX_EPOCH


def ts_to_j2000(ts: int) -> float:
    """Return the days since J2000.0 (2000-01-01 12:00 UTC) of a timestamp.

    Examples:
        >>> ts_to_j2000(946728000)
        0.0

    """
    return ts / SECS_PER_DAY - J2000_UNIX_EPOCH_DAYS


def hms_to_decimal_hour(hour: int, minute: int, second: int) -> float:
    """Return hours as a decimal, a negative hour negates the whole value.

    Examples:
        >>> round(hms_to_decimal_hour(-2, 20, 0), 6)
        -2.333333

    """
    if hour >= 0:
        return hour + minute / 60 + second / SECS_PER_HOUR
    return hour - minute / 60 - second / SECS_PER_HOUR


def hmsf_to_decimal_hour(
    hour: int, minute: int, second: int, us: int
) -> float:
    if hour >= 0:
        return (
            hour + minute / 60 + second / SECS_PER_HOUR + us / US_PER_HOUR
        )
    return hour - minute / 60 - second / SECS_PER_HOUR - us / US_PER_HOUR


def decimal_hour_to_hms(hours: float) -> Tuple[int, int, int]:
    """Split decimal hours into (hour, minute, second).

    The sign is carried by the hour, minute and second stay positive.

    Examples:
        >>> decimal_hour_to_hms(2.33), decimal_hour_to_hms(-2.33)
        ((2, 19, 48), (-2, 19, 48))

    """
    seconds = round(abs(hours) * SECS_PER_HOUR)
    hour, seconds = divmod(seconds, SECS_PER_HOUR)
    minute, second = divmod(seconds, 60)
    if hours < 0:
        hour = -hour
    return hour, minute, second


def _sind(x: float) -> float:
    return math.sin(x * DEGRAD)


def _cosd(x: float) -> float:
    return math.cos(x * DEGRAD)


def _acosd(x: float) -> float:
    return RADEG * math.acos(x)


def _atan2d(y: float, x: float) -> float:
    return RADEG * math.atan2(y, x)


def _revolution(x: float) -> float:
    """Reduce an angle to 0..360 degrees."""
    return x - 360.0 * math.floor(x * INV360)


def _rev180(x: float) -> float:
    """Reduce an angle to -180..180 degrees."""
    return x - 360.0 * math.floor(x * INV360 + 0.5)


def _gmst0(d: float) -> float:
    """Greenwich mean sidereal time at 0h UT, in degrees.

    This is the sun's mean longitude (mean anomaly plus argument of
    perihelion) plus 180 degrees.
    """
    return _revolution(
        (180.0 + 356.0470 + 282.9404) + (0.9856002585 + 4.70935e-5) * d)


def _sunpos(d: float) -> Tuple[float, float]:
    """Return the sun's ecliptic longitude and distance (AU) at day d."""
    # mean anomaly, argument of perihelion, eccentricity
    m = _revolution(356.0470 + 0.9856002585 * d)
    w = 282.9404 + 4.70935e-5 * d
    e = 0.016709 - 1.151e-9 * d

    ecc_anomaly = m + e * RADEG * _sind(m) * (1.0 + e * _cosd(m))
    x = _cosd(ecc_anomaly) - e
    y = math.sqrt(1.0 - e * e) * _sind(ecc_anomaly)
    distance = math.sqrt(x * x + y * y)
    true_anomaly = _atan2d(y, x)
    return _revolution(true_anomaly + w), distance


def _sun_ra_dec(d: float) -> Tuple[float, float, float]:
    """Return the sun's right ascension, declination and distance."""
    lon, distance = _sunpos(d)
    x = distance * _cosd(lon)
    y = distance * _sind(lon)
    obliquity = 23.4393 - 3.563e-7 * d
    z = y * _sind(obliquity)
    y = y * _cosd(obliquity)
    ra = _atan2d(y, x)
    dec = _atan2d(z, math.sqrt(x * x + y * y))
    return ra, dec, distance


def astro_rise_set_altitude_rc(
    time: Time,
    lon: float,
    lat: float,
    altit: float,
    upper_limb: int,
) -> Tuple[int, float, float, int, int, int]:
    """Compute when the sun crosses an altitude on the day of time.

    Args:
        time:
            The day to compute for, in its own zone. It is not modified.
        lon:
            Longitude in degrees, east positive.
        lat:
            Latitude in degrees, north positive.
        altit:
            The altitude in degrees, SUNRISE_ALTITUDE for the standard
            sunrise and sunset.
        upper_limb:
            Non zero to use the sun's upper limb instead of its centre.

    Returns:
        (rc, h_rise, h_set, ts_rise, ts_set, ts_transit): the hours are
        decimal hours UT. rc is 0 normally, -1 if the sun stays below the
        altitude all day and 1 if it stays above it.

    """
    local = time.clone()
    local.h = 12
    local.i = local.s = 0
    update_ts(local)

    utc = Time(y=local.y, m=local.m, d=local.d)
    update_ts(utc)

    # d of 12h local mean solar time
    d = ts_to_j2000(utc.sse) + 2 - lon / 360.0
    sidtime = _revolution(_gmst0(d) + 180.0 + lon)
    sun_ra, sun_dec, sun_r = _sun_ra_dec(d)

    # time when the sun is due south, hours UT
    tsouth = 12.0 - _rev180(sidtime - sun_ra) / 15.0
    if upper_limb:
        altit -= 0.2666 / sun_r

    cost = (
        (_sind(altit) - _sind(lat) * _sind(sun_dec))
        / (_cosd(lat) * _cosd(sun_dec))
    )
    ts_transit = utc.sse + int(tsouth * SECS_PER_HOUR)
    if cost >= 1.0:
        rc = -1
        arc = 0.0
        ts_rise = ts_set = ts_transit
    elif cost <= -1.0:
        rc = 1
        arc = 12.0
        ts_rise = local.sse - 12 * SECS_PER_HOUR
        ts_set = local.sse + 12 * SECS_PER_HOUR
    else:
        rc = 0
        arc = _acosd(cost) / 15.0
        ts_rise = int((tsouth - arc) * SECS_PER_HOUR + utc.sse)
        ts_set = int((tsouth + arc) * SECS_PER_HOUR + utc.sse)
        ts_transit = (ts_rise + ts_set) // 2
    return rc, tsouth - arc, tsouth + arc, ts_rise, ts_set, ts_transit


def astro_rise_set_altitude(
    time: Time,
    lon: float,
    lat: float,
    altit: float,
    upper_limb: int,
) -> Tuple[float, float, int, int, int]:
    """Return (h_rise, h_set, ts_rise, ts_set, ts_transit).

    See astro_rise_set_altitude_rc, which also says whether the sun
    rises or sets at all.
    """
    return astro_rise_set_altitude_rc(
        time, lon, lat, altit, upper_limb)[1:]
