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
"""Parse a date/time string against an explicit format (createFromFormat).

Each format character is looked up in a format map. In the bare flavour
(parse_from_format) characters missing from the map must appear
literally in the input. In the prefixed flavour
(parse_from_format_with_prefix) only characters following the prefix are
specifiers and everything else is a literal.

Examples:
    >>> time, errors = parse_from_format('Y-m-d H:i:s', '2021-03-04 05:06:07')
    >>> str(time), errors.error_count
    ('2021-03-04 05:06:07.000000', 0)
    >>> time, errors = parse_from_format_with_prefix(
    ...     '%Y-%m-%dT%H:%i:%sZ', '2018-01-26T11:56:02Z')
    >>> str(time), errors.error_count
    ('2018-01-26 11:56:02.000000', 0)

"""

from enum import IntEnum
from typing import Dict, Optional, Tuple

from civiltime import LOG
from civiltime.arithmetic import do_normalize
from civiltime.calendar import date_from_iso_date, valid_date, valid_time
from civiltime.errors import (
    ERR_DATA_MISSING,
    ERR_EXPECT_ESCAPED_CHAR,
    ERR_FORMAT_LITERAL_MISMATCH,
    ERR_HOUR_LARGER_THAN_12,
    ERR_INVALID_DAY_OF_WEEK,
    ERR_INVALID_SPECIFIER,
    ERR_INVALID_TZ_OFFSET,
    ERR_INVALID_WEEK,
    ERR_MERIDIAN_BEFORE_HOUR,
    ERR_MIX_ISO_WITH_NATURAL,
    ERR_NO_DAY_OF_WEEK,
    ERR_NO_ESCAPED_CHAR,
    ERR_NO_EXPANDED_YEAR,
    ERR_NO_FOUR_DIGIT_YEAR,
    ERR_NO_FOUR_DIGIT_YEAR_ISO,
    ERR_NO_MERIDIAN,
    ERR_NO_SEP_SYMBOL,
    ERR_NO_SIX_DIGIT_MICROSECOND,
    ERR_NO_TEXTUAL_DAY,
    ERR_NO_TEXTUAL_MONTH,
    ERR_NO_THREE_DIGIT_DAY_OF_YEAR,
    ERR_NO_THREE_DIGIT_MILLISECOND,
    ERR_NO_TWO_DIGIT_DAY,
    ERR_NO_TWO_DIGIT_HOUR,
    ERR_NO_TWO_DIGIT_MINUTE,
    ERR_NO_TWO_DIGIT_MONTH,
    ERR_NO_TWO_DIGIT_SECOND,
    ERR_NO_TWO_DIGIT_WEEK,
    ERR_NO_TWO_DIGIT_YEAR,
    ERR_NUMBER_OUT_OF_RANGE,
    ERR_TRAILING_DATA,
    ERR_TZID_NOT_FOUND,
    ERR_UNEXPECTED_DATA,
    ERR_WRONG_FORMAT_SEP,
    WARN_INVALID_DATE,
    WARN_INVALID_TIME,
    WARN_TRAILING_DATA,
    ErrorContainer,
)
from civiltime.parsing.scanner import (
    MSG_TZID_NOT_FOUND,
    Cursor,
    TzLoader,
    parse_zone,
    process_year,
)
from civiltime.timeobj import (
    INT64_MAX,
    INT64_MIN,
    UNSET,
    Time,
    ZoneType,
)
from civiltime.tz.db import TzDB, parse_tzfile


class FormatSpec(IntEnum):
    """What a format character stands for."""
    DAY_TWO_DIGIT = 1
    DAY_TWO_DIGIT_PADDED = 2
    DAY_SUFFIX = 3
    DAY_OF_YEAR = 4
    TEXTUAL_DAY_3_LETTER = 5
    TEXTUAL_DAY_FULL = 6
    MONTH_TWO_DIGIT = 7
    MONTH_TWO_DIGIT_PADDED = 8
    TEXTUAL_MONTH_3_LETTER = 9
    TEXTUAL_MONTH_FULL = 10
    YEAR_TWO_DIGIT = 11
    YEAR_FOUR_DIGIT = 12
    YEAR_EXPANDED = 13
    YEAR_OPTIONALLY_EXPANDED = 14
    HOUR_TWO_DIGIT_12_MAX = 15
    HOUR_TWO_DIGIT_12_MAX_PADDED = 16
    HOUR_TWO_DIGIT_24_MAX = 17
    HOUR_TWO_DIGIT_24_MAX_PADDED = 18
    MERIDIAN = 19
    MINUTE_TWO_DIGIT = 20
    SECOND_TWO_DIGIT = 21
    MILLISECOND_THREE_DIGIT = 22
    MICROSECOND_SIX_DIGIT = 23
    EPOCH_SECONDS = 24
    TIMEZONE_OFFSET = 25
    TIMEZONE_OFFSET_MINUTES = 26
    YEAR_ISO = 27
    WEEK_OF_YEAR_ISO = 28
    DAY_OF_WEEK_ISO = 29
    WHITESPACE = 30
    SEPARATOR = 31
    ANY_SEPARATOR = 32
    RANDOM_CHAR = 33
    SKIP_TO_SEPARATOR = 34
    ESCAPE = 35
    RESET_ALL = 36
    RESET_ALL_WHEN_NOT_SET = 37
    ALLOW_EXTRA_CHARACTERS = 38
    LITERAL = 39


FormatMap = Dict[str, FormatSpec]

DEFAULT_FORMAT_MAP: FormatMap = {
    'd': FormatSpec.DAY_TWO_DIGIT_PADDED,
    'j': FormatSpec.DAY_TWO_DIGIT,
    'S': FormatSpec.DAY_SUFFIX,
    'z': FormatSpec.DAY_OF_YEAR,
    'D': FormatSpec.TEXTUAL_DAY_3_LETTER,
    'l': FormatSpec.TEXTUAL_DAY_FULL,
    'm': FormatSpec.MONTH_TWO_DIGIT_PADDED,
    'n': FormatSpec.MONTH_TWO_DIGIT,
    'M': FormatSpec.TEXTUAL_MONTH_3_LETTER,
    'F': FormatSpec.TEXTUAL_MONTH_FULL,
    'y': FormatSpec.YEAR_TWO_DIGIT,
    'Y': FormatSpec.YEAR_FOUR_DIGIT,
    'X': FormatSpec.YEAR_EXPANDED,
    'x': FormatSpec.YEAR_OPTIONALLY_EXPANDED,
    'g': FormatSpec.HOUR_TWO_DIGIT_12_MAX,
    'h': FormatSpec.HOUR_TWO_DIGIT_12_MAX_PADDED,
    'G': FormatSpec.HOUR_TWO_DIGIT_24_MAX,
    'H': FormatSpec.HOUR_TWO_DIGIT_24_MAX_PADDED,
    'a': FormatSpec.MERIDIAN,
    'A': FormatSpec.MERIDIAN,
    'i': FormatSpec.MINUTE_TWO_DIGIT,
    's': FormatSpec.SECOND_TWO_DIGIT,
    'v': FormatSpec.MILLISECOND_THREE_DIGIT,
    'u': FormatSpec.MICROSECOND_SIX_DIGIT,
    'U': FormatSpec.EPOCH_SECONDS,
    'e': FormatSpec.TIMEZONE_OFFSET,
    'T': FormatSpec.TIMEZONE_OFFSET,
    'O': FormatSpec.TIMEZONE_OFFSET,
    'P': FormatSpec.TIMEZONE_OFFSET,
    'p': FormatSpec.TIMEZONE_OFFSET,
    'Z': FormatSpec.TIMEZONE_OFFSET_MINUTES,
    'B': FormatSpec.YEAR_ISO,
    'V': FormatSpec.WEEK_OF_YEAR_ISO,
    'b': FormatSpec.DAY_OF_WEEK_ISO,
    ' ': FormatSpec.WHITESPACE,
    ';': FormatSpec.SEPARATOR,
    ':': FormatSpec.SEPARATOR,
    '/': FormatSpec.SEPARATOR,
    '.': FormatSpec.SEPARATOR,
    ',': FormatSpec.SEPARATOR,
    '-': FormatSpec.SEPARATOR,
    '(': FormatSpec.SEPARATOR,
    ')': FormatSpec.SEPARATOR,
    '#': FormatSpec.ANY_SEPARATOR,
    '?': FormatSpec.RANDOM_CHAR,
    '*': FormatSpec.SKIP_TO_SEPARATOR,
    '\\': FormatSpec.ESCAPE,
    '!': FormatSpec.RESET_ALL,
    '|': FormatSpec.RESET_ALL_WHEN_NOT_SET,
    '+': FormatSpec.ALLOW_EXTRA_CHARACTERS,
}

# Format specifiers that consume no input and may trail the input.
_TRAILING_OK = (
    FormatSpec.RESET_ALL,
    FormatSpec.RESET_ALL_WHEN_NOT_SET,
    FormatSpec.ALLOW_EXTRA_CHARACTERS,
)

_SEPARATORS = ';:/.,-()'
_SKIP_UNTIL = ' \t,;:/.-()'
_BLANKS = ' \t'


class _FormatParser:
    """State for parsing one input against one format."""

    def __init__(
        self,
        fmt: str,
        text: str,
        fmt_map: FormatMap,
        prefix: Optional[str],
        db: Optional[TzDB],
        tz_loader: TzLoader,
    ):
        self.fmt = fmt
        self.fmt_map = fmt_map
        self.prefix = prefix
        self.db = db
        self.tz_loader = tz_loader
        self.cur = Cursor(text)
        self.time = Time.unset()
        self.errors = ErrorContainer()
        self.begin = 0
        self.allow_extra = False
        self.natural_date = False
        self.iso_year = UNSET
        self.iso_week = UNSET
        self.iso_dow = UNSET

    def _char(self, pos: int) -> str:
        return self.cur.text[pos] if pos < len(self.cur.text) else ''

    def add_error(
        self, code: int, message: str, pos: Optional[int] = None
    ) -> None:
        if pos is None:
            pos = self.begin
        self.errors.add_error(code, message, pos, self._char(pos))

    def add_warning(
        self, code: int, message: str, pos: Optional[int] = None
    ) -> None:
        if pos is None:
            pos = self.begin
        self.errors.add_warning(code, message, pos, self._char(pos))

    def check_number(self, signed: bool = False) -> None:
        allowed = '-0123456789' if signed else '0123456789'
        char = self.cur.peek()
        if not char or char not in allowed:
            self.add_error(ERR_UNEXPECTED_DATA, 'Unexpected data found.')

    def get_nr(self, max_length: int) -> Tuple[int, int]:
        return self.cur.get_nr_ex(max_length)

    def parse(self) -> None:
        fmt = self.fmt
        cur = self.cur
        fpos = 0
        while fpos < len(fmt) and not cur.at_end():
            self.begin = cur.pos
            char = fmt[fpos]
            if self.prefix:
                if char != self.prefix or fmt[fpos + 1:fpos + 2] == char:
                    # A literal, "%%" stands for the prefix itself.
                    if char == self.prefix:
                        fpos += 1
                    self.literal(char)
                    fpos += 1
                    continue
                fpos += 1
                if fpos >= len(fmt):
                    self.add_error(
                        ERR_INVALID_SPECIFIER,
                        'A format specifier was expected after the prefix',
                    )
                    break
                char = fmt[fpos]
                spec = self.fmt_map.get(char)
                if spec is None:
                    self.add_error(
                        ERR_INVALID_SPECIFIER,
                        f'The format specifier "{char}" is not known',
                    )
                    fpos += 1
                    continue
            else:
                spec = self.fmt_map.get(char, FormatSpec.LITERAL)
            if spec == FormatSpec.ESCAPE:
                fpos += 1
                if fpos >= len(fmt):
                    self.add_error(
                        ERR_EXPECT_ESCAPED_CHAR, 'Escaped character expected')
                    break
                if cur.peek() == fmt[fpos]:
                    cur.pos += 1
                else:
                    self.add_error(
                        ERR_NO_ESCAPED_CHAR,
                        'The escaped character could not be found',
                    )
            else:
                LOG.debug('format %s: "%s"', spec.name, char)
                self._HANDLERS[spec](self, char)
            fpos += 1

        if not cur.at_end():
            if self.allow_extra:
                self.add_warning(WARN_TRAILING_DATA, 'Trailing data', cur.pos)
            else:
                self.add_error(ERR_TRAILING_DATA, 'Trailing data', cur.pos)

        self._trailing_format(fpos)
        self._finish()

    def _trailing_format(self, fpos: int) -> None:
        """Apply format characters left over after the input ran out."""
        fmt = self.fmt
        while fpos < len(fmt):
            char = fmt[fpos]
            if self.prefix and char == self.prefix:
                fpos += 1
                char = fmt[fpos:fpos + 1]
            spec = self.fmt_map.get(char)
            if spec not in _TRAILING_OK:
                self.add_error(
                    ERR_DATA_MISSING,
                    'Not enough data available to satisfy format',
                    self.cur.pos,
                )
                return
            self._HANDLERS[spec](self, char)
            fpos += 1

    def _finish(self) -> None:
        time = self.time
        iso = (self.iso_year, self.iso_week)
        if UNSET in iso and iso != (UNSET, UNSET):
            self.add_error(
                ERR_DATA_MISSING,
                'An ISO year and ISO week are both required',
                self.cur.pos,
            )
        elif UNSET not in iso:
            if self.natural_date:
                self.add_error(
                    ERR_MIX_ISO_WITH_NATURAL,
                    'Mixing of ISO dates with natural dates is not allowed',
                    self.cur.pos,
                )
            else:
                iso_dow = 1 if self.iso_dow == UNSET else self.iso_dow
                time.y, time.m, time.d = date_from_iso_date(
                    self.iso_year, self.iso_week, iso_dow)
                time.have_date = True

        if any(
            value != UNSET for value in (time.h, time.i, time.s, time.us)
        ):
            for attr in ('h', 'i', 's', 'us'):
                if getattr(time, attr) == UNSET:
                    setattr(time, attr, 0)

        pos = self.cur.pos
        if (
            time.have_time
            and UNSET not in (time.h, time.i, time.s)
            and not valid_time(time.h, time.i, time.s)
        ):
            self.add_warning(
                WARN_INVALID_TIME, 'The parsed time was invalid', pos)
        if (
            time.have_date
            and UNSET not in (time.y, time.m, time.d)
            and not valid_date(time.y, time.m, time.d)
        ):
            self.add_warning(
                WARN_INVALID_DATE, 'The parsed date was invalid', pos)

    def _set_utc(self) -> None:
        time = self.time
        time.z = 0
        time.dst = 0
        time.is_localtime = True
        time.zone_type = ZoneType.OFFSET
        time.have_zone = 1

    def literal(self, char: str) -> None:
        if self.cur.peek() == char:
            self.cur.pos += 1
            if self.prefix and char == 'Z' and not self.time.have_zone:
                # a literal "Z" designates UTC
                self._set_utc()
        elif self.prefix:
            self.add_error(
                ERR_FORMAT_LITERAL_MISMATCH, 'Format literal not found')
        else:
            self.add_error(
                ERR_WRONG_FORMAT_SEP, 'The format separator does not match')

    def separator(self, char: str) -> None:
        if self.cur.peek() == char:
            self.cur.pos += 1
        else:
            self.add_error(
                ERR_NO_SEP_SYMBOL,
                'The separation symbol ([;:/.,-]) could not be found',
            )

    def any_separator(self, _char: str) -> None:
        if self.cur.peek() and self.cur.peek() in _SEPARATORS:
            self.cur.pos += 1
        else:
            self.add_error(
                ERR_NO_SEP_SYMBOL,
                'The separation symbol ([;:/.,-]) could not be found',
            )

    def whitespace(self, _char: str) -> None:
        self.cur.eat_spaces()

    def random_char(self, _char: str) -> None:
        self.cur.pos += 1

    def skip_to_separator(self, _char: str) -> None:
        cur = self.cur
        while not cur.at_end() and cur.peek() not in _SKIP_UNTIL:
            cur.pos += 1

    def reset_all(self, _char: str) -> None:
        self.time.reset_fields()

    def reset_unset(self, _char: str) -> None:
        self.time.reset_unset_fields()

    def allow_extra_characters(self, _char: str) -> None:
        self.allow_extra = True

    def _natural(self) -> None:
        self.natural_date = True
        self.time.have_date = True

    def day(self, _char: str) -> None:
        self.check_number()
        day, _ = self.get_nr(2)
        if day == UNSET:
            self.add_error(
                ERR_NO_TWO_DIGIT_DAY, 'A two digit day could not be found')
            return
        self.time.d = day
        self._natural()

    def day_suffix(self, _char: str) -> None:
        self.cur.skip_day_suffix()

    def day_of_year(self, _char: str) -> None:
        self.check_number()
        day, _ = self.get_nr(3)
        if day == UNSET:
            self.add_error(
                ERR_NO_THREE_DIGIT_DAY_OF_YEAR,
                'A three digit day-of-year could not be found',
            )
            return
        if self.time.y == UNSET:
            self.add_error(
                ERR_NO_THREE_DIGIT_DAY_OF_YEAR,
                "A 'day of year' can only come after a year has been found",
            )
            return
        self.time.m = 1
        self.time.d = day + 1
        do_normalize(self.time)
        self._natural()

    def textual_day(self, _char: str) -> None:
        unit = self.cur.lookup_relunit()
        if unit is None or unit.field != 'weekday':
            self.add_error(
                ERR_NO_TEXTUAL_DAY, 'A textual day could not be found')
            return
        rel = self.time.relative
        self.time.have_relative = True
        rel.have_weekday_relative = True
        rel.weekday_behavior = 1
        rel.weekday = unit.multiplier

    def month(self, _char: str) -> None:
        self.check_number()
        month, _ = self.get_nr(2)
        if month == UNSET:
            self.add_error(
                ERR_NO_TWO_DIGIT_MONTH, 'A two digit month could not be found')
            return
        self.time.m = month
        self._natural()

    def textual_month(self, _char: str) -> None:
        month = self.cur.lookup_month()
        if not month:
            self.add_error(
                ERR_NO_TEXTUAL_MONTH, 'A textual month could not be found')
            return
        self.time.m = month
        self._natural()

    def year_two_digit(self, _char: str) -> None:
        self.check_number()
        year, length = self.get_nr(2)
        if year == UNSET:
            self.add_error(
                ERR_NO_TWO_DIGIT_YEAR, 'A two digit year could not be found')
            return
        self.time.y = process_year(year, length)
        self._natural()

    def year_four_digit(self, _char: str) -> None:
        self.check_number()
        year, _ = self.get_nr(4)
        if year == UNSET:
            self.add_error(
                ERR_NO_FOUR_DIGIT_YEAR, 'A four digit year could not be found')
            return
        self.time.y = year
        self._natural()

    def year_expanded(self, char: str) -> None:
        cur = self.cur
        spec = self.fmt_map.get(char)
        if cur.peek() not in ('+', '-'):
            if spec == FormatSpec.YEAR_OPTIONALLY_EXPANDED:
                self.year_four_digit(char)
                return
            self.add_error(
                ERR_NO_EXPANDED_YEAR, 'An expanded year could not be found')
            return
        negative = cur.peek() == '-'
        cur.pos += 1
        year, length = self.get_nr(19)
        if year == UNSET or length < 4:
            self.add_error(
                ERR_NO_EXPANDED_YEAR, 'An expanded year could not be found')
            return
        self.time.y = -year if negative else year
        self._natural()

    def hour12(self, _char: str) -> None:
        self.check_number()
        hour, _ = self.get_nr(2)
        if hour == UNSET:
            self.add_error(
                ERR_NO_TWO_DIGIT_HOUR, 'A two digit hour could not be found')
            return
        if hour > 12:
            self.add_error(
                ERR_HOUR_LARGER_THAN_12, 'Hour cannot be higher than 12')
            return
        self.time.h = hour
        self.time.have_time = True

    def hour24(self, _char: str) -> None:
        self.check_number()
        hour, _ = self.get_nr(2)
        if hour == UNSET:
            self.add_error(
                ERR_NO_TWO_DIGIT_HOUR, 'A two digit hour could not be found')
            return
        self.time.h = hour
        self.time.have_time = True

    def meridian(self, _char: str) -> None:
        cur = self.cur
        if self.time.h == UNSET:
            self.add_error(
                ERR_MERIDIAN_BEFORE_HOUR,
                'Meridian can only come after an hour has been found',
            )
            return
        text = cur.text
        pos = cur.pos
        marker = text[pos:pos + 1]
        if marker and marker in 'AaPp':
            pos += 1
            if text[pos:pos + 1] == '.':
                pos += 1
            if text[pos:pos + 1] in ('M', 'm'):
                pos += 1
                if text[pos:pos + 1] == '.':
                    pos += 1
                cur.pos = pos
                if marker in 'Aa':
                    if self.time.h == 12:
                        self.time.h = 0
                elif self.time.h != 12:
                    self.time.h += 12
                self.time.have_time = True
                return
        self.add_error(ERR_NO_MERIDIAN, 'A meridian could not be found')

    def minute(self, _char: str) -> None:
        self.check_number()
        minute, length = self.get_nr(2)
        if minute == UNSET or length != 2:
            self.add_error(
                ERR_NO_TWO_DIGIT_MINUTE,
                'A two digit minute could not be found',
            )
            return
        self.time.i = minute
        self.time.have_time = True

    def second(self, _char: str) -> None:
        self.check_number()
        second, length = self.get_nr(2)
        if second == UNSET or length != 2:
            self.add_error(
                ERR_NO_TWO_DIGIT_SECOND,
                'A two digit second could not be found',
            )
            return
        self.time.s = second
        self.time.have_time = True

    def millisecond(self, _char: str) -> None:
        self.check_number()
        value, length = self.get_nr(3)
        if value == UNSET or length < 3:
            self.add_error(
                ERR_NO_THREE_DIGIT_MILLISECOND,
                'A three digit millisecond could not be found',
            )
            return
        self.time.us = value * 1000

    def microsecond(self, _char: str) -> None:
        self.check_number()
        value, length = self.get_nr(6)
        if value == UNSET:
            self.add_error(
                ERR_NO_SIX_DIGIT_MICROSECOND,
                'A six digit microsecond could not be found',
            )
            return
        self.time.us = value * 10 ** (6 - length)

    def epoch_seconds(self, _char: str) -> None:
        self.check_number(signed=True)
        seconds = self.cur.get_signed_digits(24)
        if seconds is None:
            self.add_error(
                ERR_UNEXPECTED_DATA, 'Unexpected data found.')
            return
        time = self.time
        if not INT64_MIN <= time.relative.s + seconds <= INT64_MAX:
            self.add_error(
                ERR_NUMBER_OUT_OF_RANGE, 'Number out of range')
            return
        time.have_relative = True
        time.y, time.m, time.d = 1970, 1, 1
        time.h = time.i = time.s = 0
        time.relative.s += seconds
        self._set_utc()

    def timezone(self, _char: str) -> None:
        cur = self.cur
        offset, rest, not_found = parse_zone(
            cur.text[cur.pos:], self.time, self.db, self.tz_loader)
        cur.pos = len(cur.text) - len(rest)
        if not_found:
            self.add_error(ERR_TZID_NOT_FOUND, MSG_TZID_NOT_FOUND)
            return
        self.time.z = offset
        self.time.have_zone = 1

    def timezone_minutes(self, _char: str) -> None:
        cur = self.cur
        time = self.time
        if cur.peek() == 'Z':
            cur.pos += 1
            minutes = 0
        else:
            negative = cur.peek() == '-'
            if cur.peek() in ('+', '-'):
                cur.pos += 1
            if not cur.peek() or not cur.peek().isdigit():
                self.add_error(
                    ERR_INVALID_TZ_OFFSET,
                    'A timezone offset in minutes could not be found',
                )
                return
            minutes, _ = self.get_nr(4)
            if negative:
                minutes = -minutes
        time.z = minutes * 60
        time.dst = 0
        time.is_localtime = True
        time.zone_type = ZoneType.OFFSET
        time.have_zone = 1

    def year_iso(self, _char: str) -> None:
        self.check_number()
        year, _ = self.get_nr(4)
        if year == UNSET:
            self.add_error(
                ERR_NO_FOUR_DIGIT_YEAR_ISO,
                'A four digit ISO year could not be found',
            )
            return
        self.iso_year = year
        self.time.have_date = True

    def week_iso(self, _char: str) -> None:
        self.check_number()
        week, _ = self.get_nr(2)
        if week == UNSET:
            self.add_error(
                ERR_NO_TWO_DIGIT_WEEK,
                'A two digit ISO week could not be found',
            )
            return
        if not 1 <= week <= 53:
            self.add_error(
                ERR_INVALID_WEEK, 'ISO Week must be between 1 and 53')
            return
        self.iso_week = week
        self.time.have_date = True

    def day_of_week_iso(self, _char: str) -> None:
        self.check_number()
        dow, _ = self.get_nr(1)
        if dow == UNSET:
            self.add_error(
                ERR_NO_DAY_OF_WEEK,
                'A single digit day of week could not be found',
            )
            return
        if not 1 <= dow <= 7:
            self.add_error(
                ERR_INVALID_DAY_OF_WEEK, 'Day of week must be between 1 and 7')
            return
        self.iso_dow = dow
        self.time.have_date = True

    _HANDLERS = {
        FormatSpec.DAY_TWO_DIGIT: day,
        FormatSpec.DAY_TWO_DIGIT_PADDED: day,
        FormatSpec.DAY_SUFFIX: day_suffix,
        FormatSpec.DAY_OF_YEAR: day_of_year,
        FormatSpec.TEXTUAL_DAY_3_LETTER: textual_day,
        FormatSpec.TEXTUAL_DAY_FULL: textual_day,
        FormatSpec.MONTH_TWO_DIGIT: month,
        FormatSpec.MONTH_TWO_DIGIT_PADDED: month,
        FormatSpec.TEXTUAL_MONTH_3_LETTER: textual_month,
        FormatSpec.TEXTUAL_MONTH_FULL: textual_month,
        FormatSpec.YEAR_TWO_DIGIT: year_two_digit,
        FormatSpec.YEAR_FOUR_DIGIT: year_four_digit,
        FormatSpec.YEAR_EXPANDED: year_expanded,
        FormatSpec.YEAR_OPTIONALLY_EXPANDED: year_expanded,
        FormatSpec.HOUR_TWO_DIGIT_12_MAX: hour12,
        FormatSpec.HOUR_TWO_DIGIT_12_MAX_PADDED: hour12,
        FormatSpec.HOUR_TWO_DIGIT_24_MAX: hour24,
        FormatSpec.HOUR_TWO_DIGIT_24_MAX_PADDED: hour24,
        FormatSpec.MERIDIAN: meridian,
        FormatSpec.MINUTE_TWO_DIGIT: minute,
        FormatSpec.SECOND_TWO_DIGIT: second,
        FormatSpec.MILLISECOND_THREE_DIGIT: millisecond,
        FormatSpec.MICROSECOND_SIX_DIGIT: microsecond,
        FormatSpec.EPOCH_SECONDS: epoch_seconds,
        FormatSpec.TIMEZONE_OFFSET: timezone,
        FormatSpec.TIMEZONE_OFFSET_MINUTES: timezone_minutes,
        FormatSpec.YEAR_ISO: year_iso,
        FormatSpec.WEEK_OF_YEAR_ISO: week_iso,
        FormatSpec.DAY_OF_WEEK_ISO: day_of_week_iso,
        FormatSpec.WHITESPACE: whitespace,
        FormatSpec.SEPARATOR: separator,
        FormatSpec.ANY_SEPARATOR: any_separator,
        FormatSpec.RANDOM_CHAR: random_char,
        FormatSpec.SKIP_TO_SEPARATOR: skip_to_separator,
        FormatSpec.RESET_ALL: reset_all,
        FormatSpec.RESET_ALL_WHEN_NOT_SET: reset_unset,
        FormatSpec.ALLOW_EXTRA_CHARACTERS: allow_extra_characters,
        FormatSpec.LITERAL: literal,
    }


def parse_from_format_with_map(
    fmt: str,
    text: str,
    fmt_map: FormatMap,
    prefix: Optional[str] = None,
    db: Optional[TzDB] = None,
    tz_loader: TzLoader = parse_tzfile,
) -> Tuple[Time, ErrorContainer]:
    """Parse text against fmt using a custom format map.

    Args:
        fmt:
            The format, e.g. "Y-m-d" (or "%Y-%m-%d" with a prefix).
        text:
            The string to parse.
        fmt_map:
            Maps format characters to FormatSpec values.
        prefix:
            If set, only characters following it are looked up in
            fmt_map, all other format characters are literals.
        db:
            Database used to resolve zone identifiers.
        tz_loader:
            Called as tz_loader(tz_id, db) to load a zone.

    Returns:
        (time, errors): fields the format does not fill are UNSET.

    """
    parser = _FormatParser(fmt, text, fmt_map, prefix, db, tz_loader)
    parser.parse()
    return parser.time, parser.errors


def parse_from_format(
    fmt: str,
    text: str,
    db: Optional[TzDB] = None,
) -> Tuple[Time, ErrorContainer]:
    """Parse text against a format of bare specifiers such as "Y-m-d"."""
    return parse_from_format_with_map(fmt, text, DEFAULT_FORMAT_MAP, None, db)


def parse_from_format_with_prefix(
    fmt: str,
    text: str,
    prefix: str = '%',
    db: Optional[TzDB] = None,
) -> Tuple[Time, ErrorContainer]:
    """Parse text against a format of prefixed specifiers such as "%Y"."""
    return parse_from_format_with_map(
        fmt, text, DEFAULT_FORMAT_MAP, prefix, db)


# Short names.
parse_format = parse_from_format
parse_format_with_prefix = parse_from_format_with_prefix
