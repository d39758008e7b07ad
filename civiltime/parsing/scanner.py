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
"""Free form date/time string scanner (strtotime).

The scanner walks the input trying every grammar rule at the current
position. The longest match wins, ties go to the rule listed first. Each
rule's action fills fields of a Time which starts with everything UNSET,
so callers can tell what the string actually specified (see fill_holes).

Examples:
    >>> time, errors = parse('2008-07-01T22:35:17+0100')
    >>> str(time), time.z, errors.error_count
    ('2008-07-01 22:35:17.000000', 3600, 0)
    >>> time, errors = parse('last saturday')
    >>> time.relative.d, time.relative.weekday
    (-7, 6)

"""

import re
from typing import Callable, List, NamedTuple, Optional, Tuple

from civiltime import LOG
from civiltime.calendar import (
    SECS_PER_HOUR,
    daynr_from_weeknr,
    valid_date,
    valid_time,
)
from civiltime.errors import (
    ERR_DOUBLE_DATE,
    ERR_DOUBLE_TIME,
    ERR_DOUBLE_TZ,
    ERR_EMPTY_STRING,
    ERR_NUMBER_OUT_OF_RANGE,
    ERR_TZID_NOT_FOUND,
    ERR_UNEXPECTED_CHARACTER,
    ERR_UNEXPECTED_DATA,
    WARN_DOUBLE_TZ,
    WARN_INVALID_DATE,
    WARN_INVALID_TIME,
    ErrorContainer,
)
from civiltime.timeobj import (
    FIRST_DAY_OF_MONTH,
    INT64_MAX,
    INT64_MIN,
    LAST_DAY_OF_MONTH,
    SPECIAL_DAY_OF_WEEK_IN_MONTH,
    SPECIAL_LAST_DAY_OF_WEEK_IN_MONTH,
    SPECIAL_WEEKDAY,
    UNSET,
    Time,
    ZoneType,
)
from civiltime.tz.abbreviations import MAX_ABBR_LEN, abbr_search
from civiltime.tz.db import TzDB, parse_tzfile
from civiltime.tz.tzfile import TzInfo

TzLoader = Callable[[str, Optional[TzDB]], Tuple[Optional[TzInfo], int]]

MSG_TZID_NOT_FOUND = 'The timezone could not be found in the database'

# Characters stripped from both ends of the input.
_TRIM = ' \t\n\v\f\r'
# Blanks inside the input: space, tab, NBSP and narrow NBSP.
_BLANKS = ' \t\u00a0\u202f'
# Characters that end a relative unit word.
_RELUNIT_END = ' ,\t;:/.-()'

_MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'sept': 9, 'oct': 10, 'nov': 11,
    'dec': 12,
    'i': 1, 'ii': 2, 'iii': 3, 'iv': 4, 'v': 5, 'vi': 6, 'vii': 7,
    'viii': 8, 'ix': 9, 'x': 10, 'xi': 11, 'xii': 12,
    'january': 1, 'february': 2, 'march': 3, 'april': 4, 'june': 6,
    'july': 7, 'august': 8, 'september': 9, 'october': 10,
    'november': 11, 'december': 12,
}

# word: (amount, behavior)
_RELTEXT = {
    'first': (1, 0), 'next': (1, 0), 'second': (2, 0), 'third': (3, 0),
    'fourth': (4, 0), 'fifth': (5, 0), 'sixth': (6, 0),
    'seventh': (7, 0), 'eight': (8, 0), 'eighth': (8, 0),
    'ninth': (9, 0), 'tenth': (10, 0), 'eleventh': (11, 0),
    'twelfth': (12, 0), 'last': (-1, 0), 'previous': (-1, 0),
    'this': (0, 1),
}


class _RelUnit(NamedTuple):
    """A relative unit: the RelTime field it adds to and a multiplier.

    The pseudo fields "weekday" and "special" mark weekday names and the
    business day unit, for those the multiplier is the weekday number or
    the special relative type.
    """
    field: str
    multiplier: int


def _relunit_table():
    table = {}
    for names, unit in (
        (('ms', 'msec', 'msecs', 'millisecond', 'milliseconds'),
         _RelUnit('us', 1000)),
        (('µs', 'us', 'usec', 'usecs', 'µsec', 'µsecs',
          'microsecond', 'microseconds'),
         _RelUnit('us', 1)),
        (('sec', 'secs', 'second', 'seconds'), _RelUnit('s', 1)),
        (('min', 'mins', 'minute', 'minutes'), _RelUnit('i', 1)),
        (('hour', 'hours'), _RelUnit('h', 1)),
        (('day', 'days'), _RelUnit('d', 1)),
        (('week', 'weeks'), _RelUnit('d', 7)),
        (('fortnight', 'fortnights', 'forthnight', 'forthnights'),
         _RelUnit('d', 14)),
        (('month', 'months'), _RelUnit('m', 1)),
        (('year', 'years'), _RelUnit('y', 1)),
        (('weekday', 'weekdays'), _RelUnit('special', SPECIAL_WEEKDAY)),
    ):
        for name in names:
            table[name] = unit
    for number, day in enumerate((
        'sunday', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday',
        'saturday',
    )):
        unit = _RelUnit('weekday', number)
        table[day] = unit
        table[day + 's'] = unit
        table[day[:3]] = unit
    return table


_RELUNITS = _relunit_table()


# Regular expression building blocks. Alternatives are ordered longest
# first since the re module takes the first alternative that matches.
SPACE = r'[ \t\u00a0\u202f]+'
FRAC = r'\.[0-9]+'
HOUR24 = r'(?:2[0-4]|[01]?[0-9])'
HOUR24LZ = r'(?:[01][0-9]|2[0-4])'
HOUR12 = r'(?:1[0-2]|0?[1-9])'
MINUTE = r'(?:[0-5]?[0-9])'
MINUTELZ = r'(?:[0-5][0-9])'
SECOND = r'(?:60|[0-5]?[0-9])'
SECONDLZ = r'(?:60|[0-5][0-9])'
MERIDIAN = r'(?:[AaPp]\.?[Mm]\.?)(?=[\t \u00a0\u202f]|$)'
TZ = r'(?:[A-Z][a-z]+(?:[_/-][A-Za-z]+)+|\(?[A-Za-z]{1,6}\)?)'
TZCORRECTION = (
    rf'(?:GMT)?[+-](?:{HOUR24LZ}:{MINUTELZ}:{SECONDLZ}'
    rf'|{HOUR24LZ}{MINUTELZ}{SECONDLZ}|{HOUR24}(?::?{MINUTE})?)'
)

DAYSUF = r'(?:st|nd|rd|th)'
MONTH = r'(?:1[0-2]|0?[0-9])'
DAY = rf'(?:3[01]|[0-2]?[0-9]){DAYSUF}?'
YEAR = r'[0-9]{1,4}'
YEAR2 = r'[0-9]{2}'
YEAR4 = r'[0-9]{4}'
YEAR4WITHSIGN = r'[+-]?[0-9]{4}'
YEARX = r'[+-][0-9]{5,19}'
DAYOFYEAR = r'(?:36[0-6]|3[0-5][0-9]|[12][0-9]{2}|0[1-9][0-9]|00[1-9])'
WEEKOFYEAR = r'(?:0[1-9]|[1-4][0-9]|5[0-3])'
MONTHLZ = r'(?:0[0-9]|1[0-2])'
DAYLZ = r'(?:0[0-9]|[12][0-9]|3[01])'

DAYFULLS = (
    r'(?i:sundays|mondays|tuesdays|wednesdays|thursdays|fridays'
    r'|saturdays)'
)
DAYFULL = (
    r'(?i:sunday|monday|tuesday|wednesday|thursday|friday|saturday)'
)
DAYABBR = r'(?i:sun|mon|tue|wed|thu|fri|sat)'
DAYSPECIAL = r'(?i:weekdays|weekday)'
DAYTEXT = rf'(?:{DAYFULLS}|{DAYFULL}|{DAYABBR}|{DAYSPECIAL})'

MONTHFULL = (
    r'(?i:january|february|march|april|may|june|july|august|september'
    r'|october|november|december)'
)
MONTHABBR = r'(?i:jan|feb|mar|apr|may|jun|jul|aug|sept|sep|oct|nov|dec)'
MONTHROMAN = r'(?:XII|XI|X|IX|VIII|VII|VI|V|IV|III|II|I)'
MONTHTEXT = rf'(?:{MONTHFULL}|{MONTHABBR}|{MONTHROMAN})'

TIMETINY12 = rf'{HOUR12}(?:{SPACE})?{MERIDIAN}'
TIMESHORT12 = rf'{HOUR12}[:.]{MINUTE}(?:{SPACE})?{MERIDIAN}'
TIMELONG12 = rf'{HOUR12}[:.]{MINUTE}[:.]{SECOND}(?:{SPACE})?{MERIDIAN}'
TIMETINY24 = rf'[tT]{HOUR24}'
TIMESHORT24 = rf'[tT]?{HOUR24}[:.]{MINUTE}'
TIMELONG24 = rf'[tT]?{HOUR24}[:.]{MINUTE}[:.]{SECOND}'
ISO8601LONG = rf'[tT]?{HOUR24}[:.]{MINUTE}[:.]{SECOND}{FRAC}'
ISO8601NORMTZ = (
    rf'[tT]?{HOUR24}[:.]{MINUTE}[:.]{SECONDLZ}(?:{SPACE})?'
    rf'(?:{TZCORRECTION}|{TZ})'
)
DATENOYEAR = rf'{MONTHTEXT}[ .\t-]*{DAY}[,.stndrh\t ]*'

RELTEXTNUMBER = (
    r'(?i:first|second|third|fourth|fifth|sixth|seventh|eighth|eight'
    r'|ninth|tenth|eleventh|twelfth)'
)
RELTEXTTEXT = r'(?i:next|last|previous|this)'
RELTEXTUNIT = (
    r'(?:(?i:(?:millisecond|microsecond|fortnight|forthnight|minute'
    r'|second|month|msec|µsec|usec|hour|year|day|sec|min)s?)'
    rf'|(?i:weeks)|{DAYTEXT}|(?i:ms|µs|us))'
)
RELNUMBER = r'[+-]*[ \t]*[0-9]{1,13}'


class _SkipToken(Exception):
    """Abandon the action of the current token (double date or time)."""


class Cursor:
    """Read position over a piece of input text."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ''

    def _skip(self, chars: str) -> None:
        text = self.text
        while self.pos < len(text) and text[self.pos] in chars:
            self.pos += 1

    def _skip_to_digit(self) -> bool:
        text = self.text
        while self.pos < len(text) and not _is_digit(text[self.pos]):
            self.pos += 1
        return self.pos < len(text)

    def _take_digits(self, max_length: int) -> str:
        text = self.text
        start = self.pos
        while (
            self.pos < len(text)
            and self.pos - start < max_length
            and _is_digit(text[self.pos])
        ):
            self.pos += 1
        return text[start:self.pos]

    def _take_word(self) -> str:
        text = self.text
        start = self.pos
        while self.pos < len(text) and _is_alpha(text[self.pos]):
            self.pos += 1
        return text[start:self.pos]

    def eat_spaces(self) -> None:
        self._skip(_BLANKS)

    def get_nr_ex(self, max_length: int) -> Tuple[int, int]:
        """Return the next number of at most max_length digits.

        Non digits before the number are skipped.

        Returns:
            (number, digits_read), number is UNSET if there are no digits
            left in the token.

        """
        if not self._skip_to_digit():
            return UNSET, 0
        digits = self._take_digits(max_length)
        return int(digits), len(digits)

    def get_nr(self, max_length: int) -> int:
        return self.get_nr_ex(max_length)[0]

    def get_signed_digits(self, max_length: int) -> Optional[int]:
        """Return the next number, any "-" signs before it fold into it.

        Returns None if the token has no digits left.
        """
        negative = False
        text = self.text
        while self.pos < len(text) and not _is_digit(text[self.pos]):
            if text[self.pos] == '-':
                negative = not negative
            self.pos += 1
        if self.pos >= len(text):
            return None
        value = int(self._take_digits(max_length))
        return -value if negative else value

    def get_frac_nr(self) -> int:
        """Return the fraction that follows as microseconds.

        Only the first six digits count, later ones are dropped.
        """
        text = self.text
        while self.pos < len(text) and text[self.pos] not in '.:':
            if _is_digit(text[self.pos]):
                break
            self.pos += 1
        if self.pos >= len(text):
            return UNSET
        self.pos += 1
        digits = self._take_digits(len(text))
        self._skip('.:0123456789')
        return int((digits + '000000')[:6])

    def skip_day_suffix(self) -> None:
        if self.peek() in _BLANKS:
            return
        if self.text[self.pos:self.pos + 2].lower() in (
            'nd', 'rd', 'st', 'th'
        ):
            self.pos += 2

    def lookup_month(self) -> int:
        return _MONTHS.get(self._take_word().lower(), 0)

    def get_month(self) -> int:
        self._skip(' \t-./')
        return self.lookup_month()

    def meridian(self, hour: int) -> int:
        """Consume an am/pm marker, return the correction for hour."""
        text = self.text
        while self.pos < len(text) and text[self.pos] not in 'AaPp':
            self.pos += 1
        if self.pos >= len(text):
            return 0
        if text[self.pos] in 'Aa':
            correction = -12 if hour == 12 else 0
        else:
            correction = 0 if hour == 12 else 12
        self.pos += 1
        self._skip('.')
        self._skip('Mm')
        self._skip('.')
        return correction

    def lookup_relunit(self) -> Optional[_RelUnit]:
        text = self.text
        start = self.pos
        while self.pos < len(text) and text[self.pos] not in _RELUNIT_END:
            self.pos += 1
        return _RELUNITS.get(text[start:self.pos].lower())

    def lookup_relative_text(self) -> Tuple[int, int]:
        """Return (amount, behavior) for an ordinal word such as "next"."""
        self._skip(' \t-/')
        return _RELTEXT.get(self._take_word().lower(), (0, 0))


def _is_digit(char: str) -> bool:
    return '0' <= char <= '9'


def _is_alpha(char: str) -> bool:
    return 'a' <= char <= 'z' or 'A' <= char <= 'Z'


def _leading_int(text: str) -> int:
    """Return the integer value of the digits text starts with, or 0."""
    end = 0
    while end < len(text) and _is_digit(text[end]):
        end += 1
    return int(text[:end]) if end else 0


def process_year(year: int, length: int) -> int:
    """Expand a year written with fewer than four digits.

    Examples:
        >>> process_year(69, 2), process_year(70, 2), process_year(78, 4)
        (2069, 1970, 78)

    """
    if year == UNSET or length >= 4 or year >= 100:
        return year
    return year + (2000 if year < 70 else 1900)


def _parse_tz_cor(text: str, pos: int) -> Tuple[int, int, bool]:
    """Parse the digits of a "+hh:mm" style offset starting at pos.

    Returns:
        (seconds, new_pos, found)

    """
    start = pos
    while pos < len(text) and (_is_digit(text[pos]) or text[pos] == ':'):
        pos += 1
    chunk = text[start:pos]
    length = len(chunk)
    if length in (1, 2):
        return _leading_int(chunk) * SECS_PER_HOUR, pos, True
    if length in (3, 4):
        if chunk[1] == ':':
            minutes = _leading_int(chunk[2:])
        elif chunk[2] == ':':
            minutes = _leading_int(chunk[3:])
        else:
            value = _leading_int(chunk)
            return (
                value // 100 * SECS_PER_HOUR + value % 100 * 60, pos, True
            )
        return _leading_int(chunk) * SECS_PER_HOUR + minutes * 60, pos, True
    if length == 5 and chunk[2] == ':':
        return (
            _leading_int(chunk) * SECS_PER_HOUR
            + _leading_int(chunk[3:]) * 60,
            pos,
            True
        )
    if length == 6:
        value = _leading_int(chunk)
        return (
            value // 10000 * SECS_PER_HOUR
            + value // 100 % 100 * 60
            + value % 100,
            pos,
            True
        )
    if length == 8 and chunk[2] == ':' and chunk[5] == ':':
        return (
            _leading_int(chunk) * SECS_PER_HOUR
            + _leading_int(chunk[3:]) * 60
            + _leading_int(chunk[6:]),
            pos,
            True
        )
    return 0, pos, False


def _parse_zone_at(
    text: str,
    pos: int,
    time: Time,
    db: Optional[TzDB],
    tz_loader: TzLoader,
) -> Tuple[int, int, bool]:
    """Parse a zone specification in text at pos.

    Returns:
        (offset, new_pos, not_found)

    """
    while pos < len(text) and text[pos] in _BLANKS + '(':
        pos += 1
    if text.startswith('GMT', pos) and text[pos + 3:pos + 4] in ('+', '-'):
        pos += 3
    sign = text[pos:pos + 1]
    if sign in ('+', '-'):
        time.is_localtime = True
        time.zone_type = ZoneType.OFFSET
        time.dst = 0
        offset, pos, found = _parse_tz_cor(text, pos + 1)
        if sign == '-':
            offset = -offset
        not_found = not found
    else:
        time.is_localtime = True
        start = pos
        while pos < len(text) and (
            _is_alpha(text[pos])
            or _is_digit(text[pos])
            or text[pos] in '/_-+'
        ):
            pos += 1
        word = text[start:pos]
        offset = 0
        found = False
        entry = None
        if word and len(word) < MAX_ABBR_LEN:
            entry = abbr_search(word)
        if entry is not None:
            offset = entry.gmtoffset - entry.type * SECS_PER_HOUR
            found = True
            time.zone_type = ZoneType.ABBR
            time.dst = entry.type
            time.tz_abbr_update(word)
        if word and (not found or word == 'UTC'):
            if db is not None:
                tz, _ = tz_loader(word, db)
                if tz is not None:
                    time.tz_info = tz
                    time.zone_type = ZoneType.ID
                    found = True
            elif not found and '/' in word:
                # Resolved later against a database.
                time.tz_info = None
                time.tz_abbr = word
                time.zone_type = ZoneType.ID
                found = True
        not_found = not found
    while pos < len(text) and text[pos] == ')':
        pos += 1
    return offset, pos, not_found


def parse_zone(
    text: str,
    time: Time,
    db: Optional[TzDB] = None,
    tz_loader: TzLoader = parse_tzfile,
) -> Tuple[int, str, bool]:
    """Consume a leading zone specification from text.

    Accepts "+hh[:mm[:ss]]" style offsets (optionally after "GMT"),
    abbreviations such as "CEST" and zone identifiers. The zone type,
    DST flag, abbreviation and zone of time are updated to match.

    Args:
        text:
            The text starting with the zone specification.
        time:
            The Time to attribute the zone to.
        db:
            Database used to resolve identifiers, without one an
            identifier containing "/" is recorded unresolved.
        tz_loader:
            Called as tz_loader(tz_id, db) to load a zone.

    Returns:
        (offset, rest, not_found): the UTC offset in seconds, the text
        after the zone and whether the zone could not be identified.

    Examples:
        >>> time = Time.unset()
        >>> parse_zone('+05:30 rest', time)
        (19800, ' rest', False)
        >>> time.zone_type
        <ZoneType.OFFSET: 1>

    """
    offset, pos, not_found = _parse_zone_at(text, 0, time, db, tz_loader)
    return offset, text[pos:], not_found


class _Rule(NamedTuple):
    name: str
    regex: re.Pattern
    action: Optional[Callable[['_Scanner', Cursor], None]]


class _Scanner:
    """Scanner state for one input string."""

    def __init__(
        self, text: str, db: Optional[TzDB], tz_loader: TzLoader
    ):
        self.text = text
        self.db = db
        self.tz_loader = tz_loader
        self.time = Time.unset()
        self.errors = ErrorContainer()
        self.token_start = 0

    def _char(self) -> str:
        if self.token_start < len(self.text):
            return self.text[self.token_start]
        return ''

    def add_error(self, code: int, message: str) -> None:
        self.errors.add_error(code, message, self.token_start, self._char())

    def add_warning(self, code: int, message: str) -> None:
        self.errors.add_warning(
            code, message, self.token_start, self._char())

    def scan(self) -> None:
        text = self.text
        pos = 0
        while pos < len(text):
            self.token_start = pos
            best = None
            for rule in RULES:
                match = rule.regex.match(text, pos)
                if match is None or match.end() == pos:
                    continue
                if best is None or match.end() > best[1].end():
                    best = (rule, match)
            if best is None:
                self.add_error(
                    ERR_UNEXPECTED_CHARACTER, 'Unexpected character')
                pos += 1
                continue
            rule, match = best
            pos = match.end()
            if rule.action is None:
                continue
            LOG.debug('%s: "%s"', rule.name, match.group())
            try:
                rule.action(self, Cursor(match.group()))
            except _SkipToken:
                pass

    # State changes shared by the actions.

    def have_time(self) -> None:
        if self.time.have_time:
            self.add_error(ERR_DOUBLE_TIME, 'Double time specification')
            raise _SkipToken()
        self.time.have_time = True
        self.time.h = self.time.i = self.time.s = self.time.us = 0

    def unhave_time(self) -> None:
        self.time.have_time = False
        self.time.h = self.time.i = self.time.s = self.time.us = 0

    def have_date(self) -> None:
        if self.time.have_date:
            self.add_error(ERR_DOUBLE_DATE, 'Double date specification')
            raise _SkipToken()
        self.time.have_date = True

    def unhave_date(self) -> None:
        self.time.have_date = False
        self.time.y = self.time.m = self.time.d = 0

    def have_relative(self) -> None:
        self.time.have_relative = True

    def have_weekday_relative(self) -> None:
        self.time.have_relative = True
        self.time.relative.have_weekday_relative = True

    def have_special_relative(self) -> None:
        self.time.have_relative = True
        self.time.relative.have_special_relative = True

    def have_tz(self) -> None:
        if self.time.have_zone:
            if self.time.have_zone > 1:
                self.add_error(ERR_DOUBLE_TZ, 'Double timezone specification')
            else:
                self.add_warning(
                    WARN_DOUBLE_TZ, 'Double timezone specification')
            self.time.have_zone += 1
            raise _SkipToken()
        self.time.have_zone += 1

    def signed_nr(self, tok: Cursor, max_length: int) -> int:
        value = tok.get_signed_digits(max_length)
        if value is None:
            self.add_error(ERR_UNEXPECTED_DATA, 'Found unexpected data')
            return 0
        if value > INT64_MAX or value < INT64_MIN:
            self.add_error(ERR_NUMBER_OUT_OF_RANGE, 'Number out of range')
            return INT64_MAX if value > 0 else INT64_MIN
        return value

    def relative_add(self, field: str, delta: int) -> None:
        """Add delta to a relative field unless that overflows int64."""
        value = getattr(self.time.relative, field) + delta
        if value > INT64_MAX or value < INT64_MIN:
            self.add_error(ERR_NUMBER_OUT_OF_RANGE, 'Number out of range')
            return
        setattr(self.time.relative, field, value)

    def set_relative(
        self, tok: Cursor, amount: int, behavior: int, keep_time: bool
    ) -> None:
        unit = tok.lookup_relunit()
        if unit is None:
            return
        relative = self.time.relative
        if unit.field == 'weekday':
            self.have_weekday_relative()
            if not keep_time:
                self.unhave_time()
            self.relative_add(
                'd', (amount - 1 if amount > 0 else amount) * 7)
            relative.weekday = unit.multiplier
            relative.weekday_behavior = behavior
        elif unit.field == 'special':
            self.have_special_relative()
            if not keep_time:
                self.unhave_time()
            relative.special_type = unit.multiplier
            relative.special_amount = amount
        else:
            self.relative_add(unit.field, amount * unit.multiplier)

    def zone(self, tok: Cursor) -> None:
        """Parse the zone that follows in the token."""
        offset, tok.pos, not_found = _parse_zone_at(
            tok.text, tok.pos, self.time, self.db, self.tz_loader)
        self.time.z = offset
        if not_found:
            self.add_error(ERR_TZID_NOT_FOUND, MSG_TZID_NOT_FOUND)

    # Rule actions.

    def yesterday(self, tok: Cursor) -> None:
        self.have_relative()
        self.unhave_time()
        self.time.relative.d = -1

    def now(self, tok: Cursor) -> None:
        pass

    def noon(self, tok: Cursor) -> None:
        self.unhave_time()
        self.have_time()
        self.time.h = 12

    def midnight_today(self, tok: Cursor) -> None:
        self.unhave_time()

    def tomorrow(self, tok: Cursor) -> None:
        self.have_relative()
        self.unhave_time()
        self.time.relative.d = 1

    def _start_timestamp(self) -> None:
        self.have_relative()
        self.unhave_date()
        self.unhave_time()
        self.have_tz()

    def _end_timestamp(self, seconds: int) -> None:
        time = self.time
        time.y, time.m, time.d = 1970, 1, 1
        time.h = time.i = time.s = time.us = 0
        self.relative_add('s', seconds)
        time.is_localtime = True
        time.zone_type = ZoneType.OFFSET
        time.z = 0
        time.dst = 0

    def timestamp(self, tok: Cursor) -> None:
        self._start_timestamp()
        self._end_timestamp(self.signed_nr(tok, 24))

    def timestamp_ms(self, tok: Cursor) -> None:
        self._start_timestamp()
        negative = tok.text[1:2] == '-'
        seconds = self.signed_nr(tok, 24)
        # only the first six digits of the fraction count
        micro = int((tok.text[tok.pos + 1:] + '000000')[:6])
        self._end_timestamp(seconds)
        self.time.relative.us = -micro if negative else micro

    def first_last_day_of(self, tok: Cursor) -> None:
        self.have_relative()
        if tok.text[0] in 'lL':
            self.time.relative.first_last_day_of = LAST_DAY_OF_MONTH
        else:
            self.time.relative.first_last_day_of = FIRST_DAY_OF_MONTH

    def back_front_of(self, tok: Cursor) -> None:
        self.unhave_time()
        self.have_time()
        if tok.text[0] in 'bB':
            self.time.h = tok.get_nr(2)
            self.time.i = 15
        else:
            self.time.h = tok.get_nr(2) - 1
            self.time.i = 45
        if not tok.at_end():
            tok.eat_spaces()
            self.time.h += tok.meridian(self.time.h)

    def weekday_of(self, tok: Cursor) -> None:
        self.have_relative()
        self.have_special_relative()
        amount, behavior = tok.lookup_relative_text()
        tok.eat_spaces()
        if amount > 0:
            self.time.relative.special_type = SPECIAL_DAY_OF_WEEK_IN_MONTH
            self.set_relative(tok, amount, 1, keep_time=False)
        else:
            self.time.relative.special_type = (
                SPECIAL_LAST_DAY_OF_WEEK_IN_MONTH)
            self.set_relative(tok, amount, behavior, keep_time=False)

    def time12(self, tok: Cursor) -> None:
        self.have_time()
        time = self.time
        time.h = tok.get_nr(2)
        if tok.peek() in (':', '.'):
            time.i = tok.get_nr(2)
            if tok.peek() in (':', '.'):
                time.s = tok.get_nr(2)
        time.h += tok.meridian(time.h)

    def mssqltime(self, tok: Cursor) -> None:
        self.have_time()
        time = self.time
        time.h = tok.get_nr(2)
        time.i = tok.get_nr(2)
        if tok.peek() in (':', '.'):
            time.s = tok.get_nr(2)
            if tok.peek() in (':', '.'):
                time.us = tok.get_frac_nr()
        tok.eat_spaces()
        time.h += tok.meridian(time.h)

    def time24(self, tok: Cursor) -> None:
        self.have_time()
        time = self.time
        time.h = tok.get_nr(2)
        if tok.peek() in (':', '.'):
            time.i = tok.get_nr(2)
            if tok.peek() in (':', '.'):
                time.s = tok.get_nr(2)
                if tok.peek() == '.':
                    time.us = tok.get_frac_nr()
        if not tok.at_end():
            self.zone(tok)

    def gnunocolon(self, tok: Cursor) -> None:
        time = self.time
        if not time.have_time:
            time.h = tok.get_nr(2)
            time.i = tok.get_nr(2)
            time.s = 0
        elif time.have_time == 1:
            # A time is already known so this is a year, "Apr 18 18:36 2004".
            time.y = tok.get_nr(4)
        else:
            self.add_error(ERR_DOUBLE_TIME, 'Double time specification')
            return
        time.have_time += 1

    def iso8601nocolon(self, tok: Cursor) -> None:
        self.have_time()
        time = self.time
        time.h = tok.get_nr(2)
        time.i = tok.get_nr(2)
        time.s = tok.get_nr(2)
        if not tok.at_end():
            self.zone(tok)

    def american(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.m = tok.get_nr(2)
        time.d = tok.get_nr(2)
        if tok.peek() == '/':
            year, length = tok.get_nr_ex(4)
            time.y = process_year(year, length)

    def iso8601date4(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.y = self.signed_nr(tok, 4)
        time.m = tok.get_nr(2)
        time.d = tok.get_nr(2)

    def iso8601datex(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.y = self.signed_nr(tok, 19)
        time.m = tok.get_nr(2)
        time.d = tok.get_nr(2)

    def gnudateshort(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        year, length = tok.get_nr_ex(4)
        time.m = tok.get_nr(2)
        time.d = tok.get_nr(2)
        time.y = process_year(year, length)

    def gnudateshorter(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        year, length = tok.get_nr_ex(4)
        time.m = tok.get_nr(2)
        time.d = 1
        time.y = process_year(year, length)

    def datefull(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.d = tok.get_nr(2)
        tok.skip_day_suffix()
        time.m = tok.get_month()
        year, length = tok.get_nr_ex(4)
        time.y = process_year(year, length)

    def pointeddate4(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.d = tok.get_nr(2)
        time.m = tok.get_nr(2)
        time.y = tok.get_nr(4)

    def pointeddate2(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.d = tok.get_nr(2)
        time.m = tok.get_nr(2)
        year, length = tok.get_nr_ex(2)
        time.y = process_year(year, length)

    def datenoday(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.m = tok.get_month()
        year, length = tok.get_nr_ex(4)
        time.d = 1
        time.y = process_year(year, length)

    def datenodayrev(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        year, length = tok.get_nr_ex(4)
        time.m = tok.get_month()
        time.d = 1
        time.y = process_year(year, length)

    def datetextual(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.m = tok.get_month()
        time.d = tok.get_nr(2)
        year, length = tok.get_nr_ex(4)
        time.y = process_year(year, length)

    def datenoyearrev(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.d = tok.get_nr(2)
        tok.skip_day_suffix()
        time.m = tok.get_month()

    def datenocolon(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        year, length = tok.get_nr_ex(4)
        time.m = tok.get_nr(2)
        time.d = tok.get_nr(2)
        time.y = process_year(year, length)

    def combined(self, tok: Cursor) -> None:
        """xmlrpc, soap, wddx and exif: a full date and time."""
        self.have_time()
        self.have_date()
        time = self.time
        time.y = tok.get_nr(4)
        time.m = tok.get_nr(2)
        time.d = tok.get_nr(2)
        time.h = tok.get_nr(2)
        time.i = tok.get_nr(2)
        time.s = tok.get_nr(2)
        if tok.peek() == '.':
            time.us = tok.get_frac_nr()
            if not tok.at_end():
                self.time.have_zone += 1
                self.zone(tok)

    def pgydotd(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        year, length = tok.get_nr_ex(4)
        time.d = tok.get_nr(3)
        time.m = 1
        time.y = process_year(year, length)

    def isoweekday(self, tok: Cursor) -> None:
        self.have_date()
        self.have_relative()
        time = self.time
        time.y = tok.get_nr(4)
        week = tok.get_nr(2)
        day = tok.get_nr(1)
        time.m = 1
        time.d = 1
        time.relative.d = daynr_from_weeknr(time.y, week, day)

    def isoweek(self, tok: Cursor) -> None:
        self.have_date()
        self.have_relative()
        time = self.time
        time.y = tok.get_nr(4)
        week = tok.get_nr(2)
        time.m = 1
        time.d = 1
        time.relative.d = daynr_from_weeknr(time.y, week, 1)

    def pgtextshort(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.m = tok.get_month()
        time.d = tok.get_nr(2)
        year, length = tok.get_nr_ex(4)
        time.y = process_year(year, length)

    def pgtextreverse(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        year, length = tok.get_nr_ex(4)
        time.m = tok.get_month()
        time.d = tok.get_nr(2)
        time.y = process_year(year, length)

    def clf(self, tok: Cursor) -> None:
        self.have_time()
        self.have_date()
        time = self.time
        time.d = tok.get_nr(2)
        time.m = tok.get_month()
        time.y = tok.get_nr(4)
        time.h = tok.get_nr(2)
        time.i = tok.get_nr(2)
        time.s = tok.get_nr(2)
        tok.eat_spaces()
        time.have_zone += 1
        self.zone(tok)

    def year4(self, tok: Cursor) -> None:
        self.time.y = tok.get_nr(4)

    def ago(self, tok: Cursor) -> None:
        relative = self.time.relative
        relative.y = -relative.y
        relative.m = -relative.m
        relative.d = -relative.d
        relative.h = -relative.h
        relative.i = -relative.i
        relative.s = -relative.s
        relative.weekday = -relative.weekday
        if relative.weekday == 0:
            relative.weekday = -7
        if (
            relative.have_special_relative
            and relative.special_type == SPECIAL_WEEKDAY
        ):
            relative.special_amount = -relative.special_amount
        relative.us = -relative.us

    def daytext(self, tok: Cursor) -> None:
        self.have_relative()
        self.have_weekday_relative()
        self.unhave_time()
        unit = tok.lookup_relunit()
        relative = self.time.relative
        relative.weekday = unit.multiplier if unit is not None else 0
        if relative.weekday_behavior != 2:
            relative.weekday_behavior = 1

    def _relative_text_loop(self, tok: Cursor, week: bool) -> None:
        while not tok.at_end():
            before = tok.pos
            amount, behavior = tok.lookup_relative_text()
            tok.eat_spaces()
            self.set_relative(tok, amount, behavior, keep_time=False)
            if week:
                relative = self.time.relative
                relative.weekday_behavior = 2
                # "monday next week" keeps its weekday.
                if not relative.have_weekday_relative:
                    self.have_weekday_relative()
                    relative.weekday = 1
            if tok.pos == before:
                break

    def relativetextweek(self, tok: Cursor) -> None:
        self.have_relative()
        self._relative_text_loop(tok, week=True)

    def relativetext(self, tok: Cursor) -> None:
        self.have_relative()
        self._relative_text_loop(tok, week=False)

    def month(self, tok: Cursor) -> None:
        self.have_date()
        self.time.m = tok.lookup_month()

    def timezone(self, tok: Cursor) -> None:
        self.have_tz()
        self.zone(tok)

    def dateshortwithtime12(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.m = tok.get_month()
        time.d = tok.get_nr(2)
        self.have_time()
        time.h = tok.get_nr(2)
        time.i = tok.get_nr(2)
        if tok.peek() in (':', '.'):
            time.s = tok.get_nr(2)
            if tok.peek() == '.':
                time.us = tok.get_frac_nr()
        time.h += tok.meridian(time.h)

    def dateshortwithtime24(self, tok: Cursor) -> None:
        self.have_date()
        time = self.time
        time.m = tok.get_month()
        time.d = tok.get_nr(2)
        self.have_time()
        time.h = tok.get_nr(2)
        time.i = tok.get_nr(2)
        if tok.peek() == ':':
            time.s = tok.get_nr(2)
            if tok.peek() == '.':
                time.us = tok.get_frac_nr()
        if not tok.at_end():
            self.zone(tok)

    def relative(self, tok: Cursor) -> None:
        self.have_relative()
        while not tok.at_end():
            before = tok.pos
            amount = self.signed_nr(tok, 24)
            tok.eat_spaces()
            self.set_relative(tok, amount, 1, keep_time=True)
            if tok.pos == before:
                break


def _rules(*specs) -> List[_Rule]:
    return [
        _Rule(name, re.compile(pattern), action)
        for name, pattern, action in specs
    ]


# Priority order: on equal match lengths the earlier rule wins.
RULES = _rules(
    ('yesterday', r'(?i:yesterday)', _Scanner.yesterday),
    ('now', r'(?i:now)', _Scanner.now),
    ('noon', r'(?i:noon)', _Scanner.noon),
    ('midnight | today', r'(?i:midnight|today)', _Scanner.midnight_today),
    ('tomorrow', r'(?i:tomorrow)', _Scanner.tomorrow),
    ('timestamp', r'@-?[0-9]+', _Scanner.timestamp),
    ('timestampms', r'@-?[0-9]+\.[0-9]*', _Scanner.timestamp_ms),
    ('firstdayof | lastdayof', r'(?i:first day of|last day of)',
     _Scanner.first_last_day_of),
    ('backof | frontof',
     rf'(?i:back of |front of ){HOUR24}(?:(?:{SPACE})?{MERIDIAN})?',
     _Scanner.back_front_of),
    ('weekdayof',
     rf'(?:{RELTEXTNUMBER}|{RELTEXTTEXT}){SPACE}'
     rf'(?:{DAYFULLS}|{DAYFULL}|{DAYABBR}){SPACE}(?i:of)',
     _Scanner.weekday_of),
    ('timelong12', TIMELONG12, _Scanner.time12),
    ('timeshort12', TIMESHORT12, _Scanner.time12),
    ('timetiny12', TIMETINY12, _Scanner.time12),
    ('mssqltime',
     rf'{HOUR12}:{MINUTELZ}:{SECONDLZ}[:.][0-9]+{MERIDIAN}',
     _Scanner.mssqltime),
    ('iso8601long', ISO8601LONG, _Scanner.time24),
    ('timelong24', TIMELONG24, _Scanner.time24),
    ('timeshort24', TIMESHORT24, _Scanner.time24),
    ('timetiny24', TIMETINY24, _Scanner.time24),
    ('gnunocolon', rf'[tT]?{HOUR24LZ}{MINUTELZ}', _Scanner.gnunocolon),
    ('iso8601nocolon', rf'[tT]?{HOUR24LZ}{MINUTELZ}{SECONDLZ}',
     _Scanner.iso8601nocolon),
    ('american', rf'{MONTH}/{DAY}/{YEAR}', _Scanner.american),
    ('americanshort', rf'{MONTH}/{DAY}', _Scanner.american),
    ('iso8601date4', rf'{YEAR4WITHSIGN}-{MONTHLZ}-{DAYLZ}',
     _Scanner.iso8601date4),
    ('iso8601dateslash', rf'{YEAR4}/{MONTHLZ}/{DAYLZ}/?',
     _Scanner.iso8601date4),
    ('dateslash', rf'{YEAR4}/{MONTH}/{DAY}', _Scanner.iso8601date4),
    ('iso8601date2', rf'{YEAR2}-{MONTHLZ}-{DAYLZ}', _Scanner.gnudateshort),
    ('iso8601datex', rf'{YEARX}-{MONTHLZ}-{DAYLZ}', _Scanner.iso8601datex),
    ('gnudateshorter', rf'{YEAR4}-{MONTH}', _Scanner.gnudateshorter),
    ('gnudateshort', rf'{YEAR}-{MONTH}-{DAY}', _Scanner.gnudateshort),
    ('datefull', rf'{DAY}[ \t.-]*{MONTHTEXT}[ \t.-]*{YEAR}',
     _Scanner.datefull),
    ('pointeddate4', rf'{DAY}[.\t-]{MONTH}[.-]{YEAR4}',
     _Scanner.pointeddate4),
    ('pointeddate2', rf'{DAY}[.\t]{MONTH}\.{YEAR2}', _Scanner.pointeddate2),
    ('datenoday', rf'{MONTHTEXT}[ .\t-]*{YEAR4}', _Scanner.datenoday),
    ('datenodayrev', rf'{YEAR4}[ .\t-]*{MONTHTEXT}', _Scanner.datenodayrev),
    ('datetextual', rf'{MONTHTEXT}[ .\t-]*{DAY}[,.stndrh\t ]*{YEAR}',
     _Scanner.datetextual),
    ('datenoyear', DATENOYEAR, _Scanner.datetextual),
    ('datenoyearrev', rf'{DAY}[ .\t-]*{MONTHTEXT}', _Scanner.datenoyearrev),
    ('datenocolon', rf'{YEAR4}{MONTHLZ}{DAYLZ}', _Scanner.datenocolon),
    ('xmlrpc', rf'{YEAR4}{MONTHLZ}{DAYLZ}T{HOUR24}{MINUTELZ}{SECONDLZ}',
     _Scanner.combined),
    ('xmlrpcnocolon',
     rf'{YEAR4}{MONTHLZ}{DAYLZ}t{HOUR24}{MINUTELZ}{SECONDLZ}',
     _Scanner.combined),
    ('soap',
     rf'{YEAR4}-{MONTHLZ}-{DAYLZ}T{HOUR24LZ}:{MINUTELZ}:{SECONDLZ}{FRAC}'
     rf'(?:{TZCORRECTION})?',
     _Scanner.combined),
    ('wddx', rf'{YEAR4}-{MONTH}-{DAY}T{HOUR24}:{MINUTE}:{SECOND}',
     _Scanner.combined),
    ('exif',
     rf'{YEAR4}:{MONTHLZ}:{DAYLZ} {HOUR24LZ}:{MINUTELZ}:{SECONDLZ}',
     _Scanner.combined),
    ('pgydotd', rf'{YEAR4}[.-]?{DAYOFYEAR}', _Scanner.pgydotd),
    ('isoweekday', rf'{YEAR4}-?W{WEEKOFYEAR}-?[0-7]', _Scanner.isoweekday),
    ('isoweek', rf'{YEAR4}-?W{WEEKOFYEAR}', _Scanner.isoweek),
    ('pgtextshort', rf'{MONTHABBR}-{DAYLZ}-{YEAR}', _Scanner.pgtextshort),
    ('pgtextreverse', rf'{YEAR}-{MONTHABBR}-{DAYLZ}',
     _Scanner.pgtextreverse),
    ('clf',
     rf'{DAY}/{MONTHABBR}/{YEAR4}:{HOUR24LZ}:{MINUTELZ}:{SECONDLZ}'
     rf'{SPACE}{TZCORRECTION}',
     _Scanner.clf),
    ('year4', YEAR4, _Scanner.year4),
    ('ago', r'(?i:ago)', _Scanner.ago),
    ('daytext', DAYTEXT, _Scanner.daytext),
    ('relativetextweek', rf'{RELTEXTTEXT}{SPACE}(?i:week)',
     _Scanner.relativetextweek),
    ('relativetext',
     rf'(?:{RELTEXTNUMBER}|{RELTEXTTEXT}){SPACE}{RELTEXTUNIT}',
     _Scanner.relativetext),
    ('monthfull | monthabbr', rf'(?:{MONTHFULL}|{MONTHABBR})',
     _Scanner.month),
    ('tzcorrection', TZCORRECTION, _Scanner.timezone),
    ('tz', TZ, _Scanner.timezone),
    ('dateshortwithtimelong12', DATENOYEAR + TIMELONG12,
     _Scanner.dateshortwithtime12),
    ('dateshortwithtimeshort12', DATENOYEAR + TIMESHORT12,
     _Scanner.dateshortwithtime12),
    ('dateshortwithtimelongtz', DATENOYEAR + ISO8601NORMTZ,
     _Scanner.dateshortwithtime24),
    ('dateshortwithtimelong', DATENOYEAR + TIMELONG24,
     _Scanner.dateshortwithtime24),
    ('dateshortwithtimeshort', DATENOYEAR + TIMESHORT24,
     _Scanner.dateshortwithtime24),
    ('relative', rf'{RELNUMBER}(?:{SPACE})?(?:{RELTEXTUNIT}|(?i:week))',
     _Scanner.relative),
    ('skip', r'[ .,\t\n\u00a0\u202f]', None),
)


def parse_with_db(
    text: str,
    db: Optional[TzDB],
    tz_loader: TzLoader = parse_tzfile,
) -> Tuple[Time, ErrorContainer]:
    """Parse a free form date/time string.

    Args:
        text:
            The string, e.g. "next monday 09:00 Europe/London".
        db:
            Database used to resolve zone identifiers in the string.
        tz_loader:
            Called as tz_loader(tz_id, db) to load a zone.

    Returns:
        (time, errors): fields the string does not specify are UNSET,
        errors holds the diagnostics with their positions. Positions
        count characters of the input with surrounding whitespace
        removed.

    """
    stripped = text.strip(_TRIM)
    if not stripped:
        errors = ErrorContainer()
        errors.add_error(ERR_EMPTY_STRING, 'Empty string')
        return Time.unset(), errors

    scanner = _Scanner(stripped, db, tz_loader)
    scanner.scan()
    time = scanner.time
    scanner.token_start = len(stripped)
    if (
        time.have_time
        and UNSET not in (time.h, time.i, time.s)
        and not valid_time(time.h, time.i, time.s)
    ):
        scanner.add_warning(WARN_INVALID_TIME, 'The parsed time was invalid')
    if (
        time.have_date
        and UNSET not in (time.y, time.m, time.d)
        and not valid_date(time.y, time.m, time.d)
    ):
        scanner.add_warning(WARN_INVALID_DATE, 'The parsed date was invalid')
    return time, scanner.errors


def parse(text: str) -> Tuple[Time, ErrorContainer]:
    """Parse a free form date/time string without a zone database.

    Zone identifiers are kept unresolved, see parse_zone.
    """
    return parse_with_db(text, None)
