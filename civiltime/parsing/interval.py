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
"""ISO 8601 durations, intervals and recurrences.

Supported forms, separated by "/":

* Durations: ``P1Y2M10DT2H30M``, ``P2W`` (weeks count as seven days and
  can be combined with days) and the alternative ``P0001-02-03T04:05:06``.
* Date times: ``20080301T130000Z`` or ``2008-03-01T13:00:00Z``. Times
  with another offset are converted to UTC, times without one are
  taken as UTC. The first one seen is the start, a later one the end.
* Recurrences: ``R5``.

Examples:
    >>> begin, end, period, recurrences, errors = parse_interval(
    ...     'R5/2008-03-01T13:00:00Z/P1Y2M10DT2H30M')
    >>> str(begin), end, recurrences
    ('2008-03-01 13:00:00.000000', None, 5)
    >>> period.y, period.m, period.d, period.h, period.i
    (1, 2, 10, 2, 30)

"""

import re
from typing import List, Optional, Pattern, Tuple

from metomi.isodatetime.data import Duration, TimePoint
from metomi.isodatetime.exceptions import IsodatetimeError
from metomi.isodatetime.parsers import DurationParser, TimePointParser

from civiltime import LOG
from civiltime.errors import (
    ERR_EMPTY_STRING,
    ERR_UNEXPECTED_CHARACTER,
    ERR_UNEXPECTED_DATA,
    ErrorContainer,
)
from civiltime.timeobj import RelTime, Time, ZoneType

_TRIM = ' \t\n\v\f\r'


def _blank_time() -> Time:
    time = Time.unset()
    time.us = 0
    time.z = 0
    time.dst = 0
    time.zone_type = ZoneType.OFFSET
    return time


class IntervalParser:

    """Parser for ISO 8601 durations, intervals and recurrences.

    Date times and durations are read by metomi-isodatetime parsers and
    mapped onto Time and RelTime.

    """

    FORMAT_REGEXES: List[Pattern] = [
        re.compile(r"^R(?P<reps>\d+)/(?P<start>[^PR/][^/]*)/(?P<end>[^PR/]"
                   "[^/]*)$"),
        re.compile(r"^R(?P<reps>\d+)/(?P<start>[^PR/][^/]*)/(?P<intv>P[^/]"
                   "*)$"),
        re.compile(r"^R(?P<reps>\d+)/(?P<intv>P[^/]*)/(?P<end>[^PR/][^/]*)"
                   "$"),
        re.compile(r"^R(?P<reps>\d+)/(?P<intv>P[^/]*)$"),
        re.compile(r"^R(?P<reps>\d+)$"),
        re.compile(r"^(?P<start>[^PR/][^/]*)/(?P<end>[^PR/][^/]*)$"),
        re.compile(r"^(?P<start>[^PR/][^/]*)/(?P<intv>P[^/]*)$"),
        re.compile(r"^(?P<intv>P[^/]*)/(?P<end>[^PR/][^/]*)$"),
        re.compile(r"^(?P<intv>P[^/]*)$"),
        re.compile(r"^(?P<start>[^PR/][^/]*)$"),
    ]

    # weeks followed by other designators, which DurationParser rejects
    WEEKS_REGEX = re.compile(r"(?<=[PYM])(?P<weeks>\d+)W(?=[\dT])")

    __slots__ = ('timepoint_parser', 'duration_parser')

    def __init__(
        self,
        parsers: Optional[Tuple[TimePointParser, DurationParser]] = None
    ):
        if parsers is None:
            parsers = self.initiate_parsers()
        self.timepoint_parser, self.duration_parser = parsers

    @staticmethod
    def initiate_parsers() -> Tuple[TimePointParser, DurationParser]:
        """Initiate the parsers required by this class.

        Date times without a time zone are assumed to be in UTC.
        """
        timepoint_parser = TimePointParser(
            allow_only_basic=False,
            allow_truncated=False,
            num_expanded_year_digits=0,
            assumed_time_zone=(0, 0)
        )
        return timepoint_parser, DurationParser()

    def parse(self, text: str) -> Tuple[
        Optional[Time], Optional[Time], Optional[RelTime], int,
        ErrorContainer
    ]:
        errors = ErrorContainer()
        stripped = text.strip(_TRIM)
        if not stripped:
            errors.add_error(ERR_EMPTY_STRING, 'Empty string')
            return None, None, None, 0, errors

        for regex in self.FORMAT_REGEXES:
            match = regex.match(stripped)
            if match:
                break
        else:
            errors.add_error(
                ERR_UNEXPECTED_CHARACTER, 'Unexpected character',
                0, stripped[0])
            return None, None, None, 0, errors

        LOG.debug('interval format: %s', regex.pattern)
        result_map = match.groupdict()
        begin = end = None
        period = None
        recurrences = 0
        if result_map.get('reps') is not None:
            recurrences = int(result_map['reps'])
        if result_map.get('start') is not None:
            begin = self._get_time(stripped, match.start('start'),
                                   result_map['start'], errors)
        if result_map.get('intv') is not None:
            period = self._get_period(stripped, match.start('intv'),
                                      result_map['intv'], errors)
        if result_map.get('end') is not None:
            end = self._get_time(stripped, match.start('end'),
                                 result_map['end'], errors)
        return begin, end, period, recurrences, errors

    __call__ = parse

    def _get_time(
        self, text: str, position: int, expr: str, errors: ErrorContainer
    ) -> Optional[Time]:
        try:
            point = self.timepoint_parser.parse(expr)
        except IsodatetimeError as exc:
            LOG.debug(exc)
            errors.add_error(
                ERR_UNEXPECTED_CHARACTER, 'Unexpected character',
                position, text[position])
            return None
        return time_from_timepoint(point)

    def _get_period(
        self, text: str, position: int, expr: str, errors: ErrorContainer
    ) -> Optional[RelTime]:
        if expr.endswith(('P', 'T')):
            # designators without any number
            errors.add_error(
                ERR_UNEXPECTED_DATA, 'Unexpected data found.',
                position + len(expr) - 1, expr[-1])
            return None
        weeks = 0
        weeks_match = self.WEEKS_REGEX.search(expr)
        if weeks_match:
            weeks = int(weeks_match.group('weeks'))
            expr = (
                expr[:weeks_match.start()] + expr[weeks_match.end():])
        try:
            duration = self.duration_parser.parse(expr)
        except IsodatetimeError as exc:
            LOG.debug(exc)
            errors.add_error(
                ERR_UNEXPECTED_DATA, 'Unexpected data found.',
                position, text[position])
            return None
        period = reltime_from_duration(duration)
        period.d += 7 * weeks
        return period


def time_from_timepoint(point: TimePoint) -> Time:
    """Return a UTC Time for a parsed time point."""
    point = point.to_utc().to_calendar_date()
    hour, minute, second = point.get_hour_minute_second()
    time = _blank_time()
    time.y = point.year
    time.m = point.month_of_year
    time.d = point.day_of_month
    time.h = int(hour)
    time.i = int(minute)
    time.s = int(second)
    time.is_localtime = True
    time.have_date = True
    time.have_time = True
    return time


def reltime_from_duration(duration: Duration) -> RelTime:
    """Return a RelTime holding the designators of a parsed duration.

    Weeks count as seven days. A fractional second is kept in
    microseconds, fractions of larger units are dropped.
    """
    seconds = duration.seconds or 0
    period = RelTime(
        y=duration.years or 0,
        m=duration.months or 0,
        d=(duration.days or 0) + 7 * (duration.weeks or 0),
        h=int(duration.hours or 0),
        i=int(duration.minutes or 0),
        s=int(seconds),
    )
    period.us = round((seconds - int(seconds)) * 1000000)
    return period


_PARSER = IntervalParser()


def parse_interval(text: str) -> Tuple[
    Optional[Time], Optional[Time], Optional[RelTime], int, ErrorContainer
]:
    """Parse an ISO 8601 duration, interval or recurring interval.

    Args:
        text:
            e.g. "P1W", "2008-03-01T13:00:00Z/P1Y" or
            "R5/2008-03-01T13:00:00Z/P1M".

    Returns:
        (begin, end, period, recurrences, errors): begin, end and period
        are None when the string does not contain them, recurrences is
        0 without an "R" part. Set period.invert to count backwards.

    """
    return _PARSER.parse(text)
