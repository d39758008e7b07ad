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
"""Exceptions for "expected" errors."""

from typing import Optional

from civiltime.errors import (
    CORRUPT_POSIX_STRING,
    EMPTY_POSIX_STRING,
    error_code_to_message,
)


class CivilTimeError(Exception):
    """Generic exception for civiltime errors.

    Parser diagnostics are reported through an ErrorContainer, this is
    raised for structural problems such as a corrupt timezone file.
    """


class TzFileError(CivilTimeError):
    """Represents a timezone file that could not be loaded.

    Args:
        code:
            One of the timezone error codes from civiltime.errors.
        tz_id:
            The identifier of the timezone being loaded, if known.

    """

    def __init__(self, code: int, tz_id: Optional[str] = None):
        self.code = code
        self.tz_id = tz_id

    def __str__(self) -> str:
        msg = error_code_to_message(self.code)
        if self.tz_id:
            return f'{self.tz_id}: {msg}'
        return msg


class PosixStringError(CivilTimeError):
    """Exception for an unparseable POSIX TZ string.

    The code attribute holds EMPTY_POSIX_STRING for an empty string and
    CORRUPT_POSIX_STRING otherwise.
    """

    def __init__(self, posix_string: str, reason: str = 'invalid'):
        self.posix_string = posix_string
        self.reason = reason
        self.code = (
            CORRUPT_POSIX_STRING if posix_string else EMPTY_POSIX_STRING
        )

    def __str__(self) -> str:
        return f'POSIX TZ string "{self.posix_string}": {self.reason}'


class TzDatabaseError(CivilTimeError):
    """Exception for an unreadable or malformed timezone database."""
