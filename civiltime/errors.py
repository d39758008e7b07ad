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
"""Error and warning container for the parsers.

Parser diagnostics never raise, they are collected here together with the
byte position and character they refer to so that callers can report them.
"""

from typing import List, NamedTuple, Optional


# Timezone file (and database) error codes.
NO_ERROR = 0
CANNOT_ALLOCATE = 1
CORRUPT_TRANSITIONS_DONT_INCREASE = 2
CORRUPT_NO_64BIT_PREAMBLE = 3
CORRUPT_NO_ABBREVIATION = 4
UNSUPPORTED_VERSION = 5
NO_SUCH_TIMEZONE = 6
SLIM_FILE = 7
CORRUPT_POSIX_STRING = 8
EMPTY_POSIX_STRING = 9
CANNOT_OPEN_FILE = 10
CORRUPT_TRANSITION_INDEX = 11
CORRUPT_DATA_LENGTH = 12

# Spelling used by the query interfaces.
NO_SUCH_TZID = NO_SUCH_TIMEZONE

TZ_ERROR_MESSAGES = {
    NO_ERROR: "No error",
    CANNOT_ALLOCATE: "Cannot allocate buffer for parsing",
    CORRUPT_TRANSITIONS_DONT_INCREASE:
        "Corrupt tzfile: The transitions in the file don't always increase",
    CORRUPT_NO_64BIT_PREAMBLE:
        "Corrupt tzfile: The expected 64-bit preamble is missing",
    CORRUPT_NO_ABBREVIATION:
        "Corrupt tzfile: No abbreviation could be found for a transition",
    UNSUPPORTED_VERSION:
        "The version used in this timezone identifier is unsupported",
    NO_SUCH_TIMEZONE: "No timezone with this name could be found",
    SLIM_FILE: "This tzfile is a 'slim' file",
    CORRUPT_POSIX_STRING: "The embedded POSIX string is not valid",
    EMPTY_POSIX_STRING: "The embedded POSIX string is empty",
    CANNOT_OPEN_FILE: "The timezone file could not be opened",
    CORRUPT_TRANSITION_INDEX:
        "Corrupt tzfile: A transition refers to a type that does not exist",
    CORRUPT_DATA_LENGTH:
        "Corrupt tzfile: The data does not match the header counts",
}

# Parser warnings.
WARN_DOUBLE_TZ = 0x101
WARN_INVALID_TIME = 0x102
WARN_INVALID_DATE = 0x103
WARN_TRAILING_DATA = 0x11a

# Parser errors.
ERR_DOUBLE_TZ = 0x201
ERR_TZID_NOT_FOUND = 0x202
ERR_DOUBLE_TIME = 0x203
ERR_DOUBLE_DATE = 0x204
ERR_UNEXPECTED_CHARACTER = 0x205
ERR_EMPTY_STRING = 0x206
ERR_UNEXPECTED_DATA = 0x207
ERR_NO_TEXTUAL_DAY = 0x208
ERR_NO_TWO_DIGIT_DAY = 0x209
ERR_NO_THREE_DIGIT_DAY_OF_YEAR = 0x20a
ERR_NO_TWO_DIGIT_MONTH = 0x20b
ERR_NO_TEXTUAL_MONTH = 0x20c
ERR_NO_TWO_DIGIT_YEAR = 0x20d
ERR_NO_FOUR_DIGIT_YEAR = 0x20e
ERR_NO_TWO_DIGIT_HOUR = 0x20f
ERR_HOUR_LARGER_THAN_12 = 0x210
ERR_MERIDIAN_BEFORE_HOUR = 0x211
ERR_NO_MERIDIAN = 0x212
ERR_NO_TWO_DIGIT_MINUTE = 0x213
ERR_NO_TWO_DIGIT_SECOND = 0x214
ERR_NO_SIX_DIGIT_MICROSECOND = 0x215
ERR_NO_SEP_SYMBOL = 0x216
ERR_EXPECT_ESCAPED_CHAR = 0x217
ERR_NO_ESCAPED_CHAR = 0x218
ERR_WRONG_FORMAT_SEP = 0x219
ERR_TRAILING_DATA = 0x21a
ERR_DATA_MISSING = 0x21b
ERR_NO_THREE_DIGIT_MILLISECOND = 0x21c
ERR_NO_FOUR_DIGIT_YEAR_ISO = 0x21d
ERR_NO_TWO_DIGIT_WEEK = 0x21e
ERR_INVALID_WEEK = 0x21f
ERR_NO_DAY_OF_WEEK = 0x220
ERR_INVALID_DAY_OF_WEEK = 0x221
ERR_INVALID_SPECIFIER = 0x222
ERR_INVALID_TZ_OFFSET = 0x223
ERR_FORMAT_LITERAL_MISMATCH = 0x224
ERR_MIX_ISO_WITH_NATURAL = 0x225
ERR_NUMBER_OUT_OF_RANGE = 0x226
ERR_NO_EXPANDED_YEAR = 0x227


def error_code_to_message(code: int) -> str:
    """Return the stable message text for a timezone error code."""
    try:
        return TZ_ERROR_MESSAGES[code]
    except KeyError:
        return "Unknown error code"


class ErrorMessage(NamedTuple):
    """A single diagnostic recorded by a parser."""
    code: int
    position: int
    character: str
    message: str


class ErrorContainer:
    """Warnings and errors collected while parsing one input."""

    __slots__ = ('warning_messages', 'error_messages')

    def __init__(self):
        self.warning_messages: List[ErrorMessage] = []
        self.error_messages: List[ErrorMessage] = []

    @property
    def warning_count(self) -> int:
        return len(self.warning_messages)

    @property
    def error_count(self) -> int:
        return len(self.error_messages)

    def add_error(
        self,
        code: int,
        message: str,
        position: int = 0,
        character: Optional[str] = None
    ) -> None:
        self.error_messages.append(
            ErrorMessage(code, position, character or '', message))

    def add_warning(
        self,
        code: int,
        message: str,
        position: int = 0,
        character: Optional[str] = None
    ) -> None:
        self.warning_messages.append(
            ErrorMessage(code, position, character or '', message))

    def has_error(self, code: int) -> bool:
        """Return True if an error with this code was recorded."""
        return any(msg.code == code for msg in self.error_messages)

    def has_warning(self, code: int) -> bool:
        """Return True if a warning with this code was recorded."""
        return any(msg.code == code for msg in self.warning_messages)

    def __repr__(self):
        return (
            f'<ErrorContainer warnings={self.warning_count}'
            f' errors={self.error_count}>'
        )
