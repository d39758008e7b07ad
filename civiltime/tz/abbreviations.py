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
"""Timezone abbreviations.

The lookup table maps lower case abbreviations to their UTC offset, DST
flag and a representative zone identifier. When an abbreviation occurs
more than once the first entry is the default, later ones are only used
when the caller asks for their offset.
"""

from typing import List, NamedTuple, Optional

from civiltime.calendar import SECS_PER_HOUR

MAX_ABBR_LEN = 6


class TzLookupEntry(NamedTuple):
    name: str
    type: int
    gmtoffset: int
    full_tz_name: Optional[str]


def _h(hours: float) -> int:
    return int(hours * SECS_PER_HOUR)


UTC_ENTRY = TzLookupEntry('utc', 0, 0, 'UTC')

TIMEZONE_LOOKUP = (
    TzLookupEntry('acdt', 1, _h(10.5), 'Australia/Adelaide'),
    TzLookupEntry('acst', 0, _h(9.5), 'Australia/Adelaide'),
    TzLookupEntry('acst', 0, _h(9.5), 'Australia/Darwin'),
    TzLookupEntry('addt', 1, _h(-2), 'America/Goose_Bay'),
    TzLookupEntry('adt', 1, _h(-3), 'America/Halifax'),
    TzLookupEntry('adt', 1, _h(-3), 'Atlantic/Bermuda'),
    TzLookupEntry('aedt', 1, _h(11), 'Australia/Melbourne'),
    TzLookupEntry('aedt', 1, _h(11), 'Australia/Sydney'),
    TzLookupEntry('aest', 0, _h(10), 'Australia/Melbourne'),
    TzLookupEntry('aest', 0, _h(10), 'Australia/Brisbane'),
    TzLookupEntry('aest', 0, _h(10), 'Australia/Sydney'),
    TzLookupEntry('ahdt', 1, _h(-9), 'America/Anchorage'),
    TzLookupEntry('ahst', 0, _h(-10), 'America/Anchorage'),
    TzLookupEntry('akdt', 1, _h(-8), 'America/Anchorage'),
    TzLookupEntry('akst', 0, _h(-9), 'America/Anchorage'),
    TzLookupEntry('apt', 1, _h(-3), 'America/Halifax'),
    TzLookupEntry('ast', 0, _h(-4), 'America/Halifax'),
    TzLookupEntry('ast', 0, _h(-4), 'America/Puerto_Rico'),
    TzLookupEntry('ast', 0, _h(3), 'Asia/Riyadh'),
    TzLookupEntry('awdt', 1, _h(9), 'Australia/Perth'),
    TzLookupEntry('awst', 0, _h(8), 'Australia/Perth'),
    TzLookupEntry('bdst', 1, _h(2), 'Europe/London'),
    TzLookupEntry('bdt', 1, _h(-10), 'America/Adak'),
    TzLookupEntry('bst', 1, _h(1), 'Europe/London'),
    TzLookupEntry('bst', 0, _h(1), 'Europe/London'),
    TzLookupEntry('cast', 0, _h(9.5), 'Australia/Adelaide'),
    TzLookupEntry('cat', 0, _h(2), 'Africa/Maputo'),
    TzLookupEntry('cddt', 1, _h(-4), 'America/Rankin_Inlet'),
    TzLookupEntry('cdt', 1, _h(-5), 'America/Chicago'),
    TzLookupEntry('cdt', 1, _h(-4), 'America/Havana'),
    TzLookupEntry('cdt', 1, _h(9), 'Asia/Shanghai'),
    TzLookupEntry('cemt', 1, _h(3), 'Europe/Berlin'),
    TzLookupEntry('cest', 1, _h(2), 'Europe/Berlin'),
    TzLookupEntry('cest', 1, _h(2), 'Europe/Amsterdam'),
    TzLookupEntry('cest', 1, _h(2), 'Europe/Paris'),
    TzLookupEntry('cet', 0, _h(1), 'Europe/Berlin'),
    TzLookupEntry('cet', 0, _h(1), 'Europe/Amsterdam'),
    TzLookupEntry('cet', 0, _h(1), 'Europe/Paris'),
    TzLookupEntry('chst', 0, _h(10), 'Pacific/Guam'),
    TzLookupEntry('cpt', 1, _h(-5), 'America/Chicago'),
    TzLookupEntry('cst', 0, _h(-6), 'America/Chicago'),
    TzLookupEntry('cst', 0, _h(-5), 'America/Havana'),
    TzLookupEntry('cst', 0, _h(8), 'Asia/Shanghai'),
    TzLookupEntry('cst', 0, _h(8), 'Asia/Taipei'),
    TzLookupEntry('cst', 0, _h(9.5), 'Australia/Adelaide'),
    TzLookupEntry('cwt', 1, _h(-5), 'America/Chicago'),
    TzLookupEntry('eat', 0, _h(3), 'Africa/Nairobi'),
    TzLookupEntry('eddt', 1, _h(-3), 'America/Iqaluit'),
    TzLookupEntry('edt', 1, _h(-4), 'America/New_York'),
    TzLookupEntry('edt', 1, _h(-4), 'America/Toronto'),
    TzLookupEntry('eest', 1, _h(3), 'Europe/Helsinki'),
    TzLookupEntry('eest', 1, _h(3), 'Europe/Athens'),
    TzLookupEntry('eest', 1, _h(3), 'Europe/Kiev'),
    TzLookupEntry('eet', 0, _h(2), 'Europe/Helsinki'),
    TzLookupEntry('eet', 0, _h(2), 'Europe/Athens'),
    TzLookupEntry('eet', 0, _h(2), 'Africa/Cairo'),
    TzLookupEntry('ept', 1, _h(-4), 'America/New_York'),
    TzLookupEntry('est', 0, _h(-5), 'America/New_York'),
    TzLookupEntry('est', 0, _h(-5), 'America/Toronto'),
    TzLookupEntry('est', 0, _h(-5), 'America/Panama'),
    TzLookupEntry('est', 0, _h(10), 'Australia/Melbourne'),
    TzLookupEntry('ewt', 1, _h(-4), 'America/New_York'),
    TzLookupEntry('gdt', 1, _h(11), 'Pacific/Guam'),
    TzLookupEntry('gmt', 0, 0, 'Europe/London'),
    TzLookupEntry('gmt', 0, 0, 'Africa/Abidjan'),
    TzLookupEntry('gst', 0, _h(10), 'Pacific/Guam'),
    TzLookupEntry('gst', 0, _h(4), 'Asia/Dubai'),
    TzLookupEntry('hdt', 1, _h(-9.5), 'Pacific/Honolulu'),
    TzLookupEntry('hdt', 1, _h(-9), 'America/Adak'),
    TzLookupEntry('hkst', 1, _h(9), 'Asia/Hong_Kong'),
    TzLookupEntry('hkt', 0, _h(8), 'Asia/Hong_Kong'),
    TzLookupEntry('hpt', 1, _h(-9.5), 'Pacific/Honolulu'),
    TzLookupEntry('hst', 0, _h(-10), 'Pacific/Honolulu'),
    TzLookupEntry('hst', 0, _h(-10), 'America/Adak'),
    TzLookupEntry('hwt', 1, _h(-9.5), 'Pacific/Honolulu'),
    TzLookupEntry('iddt', 1, _h(4), 'Asia/Jerusalem'),
    TzLookupEntry('idt', 1, _h(3), 'Asia/Jerusalem'),
    TzLookupEntry('ist', 0, _h(2), 'Asia/Jerusalem'),
    TzLookupEntry('ist', 0, _h(5.5), 'Asia/Kolkata'),
    TzLookupEntry('ist', 1, _h(1), 'Europe/Dublin'),
    TzLookupEntry('jdt', 1, _h(10), 'Asia/Tokyo'),
    TzLookupEntry('jst', 0, _h(9), 'Asia/Tokyo'),
    TzLookupEntry('kdt', 1, _h(10), 'Asia/Seoul'),
    TzLookupEntry('kst', 0, _h(9), 'Asia/Seoul'),
    TzLookupEntry('kst', 0, _h(9), 'Asia/Pyongyang'),
    TzLookupEntry('mddt', 1, _h(-5), 'America/Cambridge_Bay'),
    TzLookupEntry('mdt', 1, _h(-6), 'America/Denver'),
    TzLookupEntry('mdt', 1, _h(-6), 'America/Edmonton'),
    TzLookupEntry('mest', 1, _h(2), 'MET'),
    TzLookupEntry('met', 0, _h(1), 'MET'),
    TzLookupEntry('mpt', 1, _h(-6), 'America/Denver'),
    TzLookupEntry('msd', 1, _h(4), 'Europe/Moscow'),
    TzLookupEntry('msk', 0, _h(3), 'Europe/Moscow'),
    TzLookupEntry('msk', 0, _h(3), 'Europe/Simferopol'),
    TzLookupEntry('mst', 0, _h(-7), 'America/Denver'),
    TzLookupEntry('mst', 0, _h(-7), 'America/Phoenix'),
    TzLookupEntry('mst', 0, _h(-7), 'America/Edmonton'),
    TzLookupEntry('mwt', 1, _h(-6), 'America/Denver'),
    TzLookupEntry('nddt', 1, _h(-1.5), 'America/St_Johns'),
    TzLookupEntry('ndt', 1, _h(-2.5), 'America/St_Johns'),
    TzLookupEntry('npt', 1, _h(-2.5), 'America/St_Johns'),
    TzLookupEntry('nst', 0, _h(-3.5), 'America/St_Johns'),
    TzLookupEntry('nwt', 1, _h(-2.5), 'America/St_Johns'),
    TzLookupEntry('nzdt', 1, _h(13), 'Pacific/Auckland'),
    TzLookupEntry('nzmt', 0, _h(11.5), 'Pacific/Auckland'),
    TzLookupEntry('nzst', 0, _h(12), 'Pacific/Auckland'),
    TzLookupEntry('pddt', 1, _h(-6), 'America/Inuvik'),
    TzLookupEntry('pdt', 1, _h(-7), 'America/Los_Angeles'),
    TzLookupEntry('pdt', 1, _h(-7), 'America/Vancouver'),
    TzLookupEntry('pkst', 1, _h(6), 'Asia/Karachi'),
    TzLookupEntry('pkt', 0, _h(5), 'Asia/Karachi'),
    TzLookupEntry('ppt', 1, _h(-7), 'America/Los_Angeles'),
    TzLookupEntry('pst', 0, _h(-8), 'America/Los_Angeles'),
    TzLookupEntry('pst', 0, _h(-8), 'America/Vancouver'),
    TzLookupEntry('pst', 0, _h(8), 'Asia/Manila'),
    TzLookupEntry('pwt', 1, _h(-7), 'America/Los_Angeles'),
    TzLookupEntry('sast', 0, _h(2), 'Africa/Johannesburg'),
    TzLookupEntry('sst', 0, _h(-11), 'Pacific/Pago_Pago'),
    TzLookupEntry('uct', 0, 0, 'Etc/UCT'),
    TzLookupEntry('utc', 0, 0, 'UTC'),
    TzLookupEntry('wast', 1, _h(2), 'Africa/Windhoek'),
    TzLookupEntry('wat', 0, _h(1), 'Africa/Lagos'),
    TzLookupEntry('wemt', 1, _h(2), 'Europe/Lisbon'),
    TzLookupEntry('west', 1, _h(1), 'Europe/Lisbon'),
    TzLookupEntry('west', 1, _h(1), 'Atlantic/Canary'),
    TzLookupEntry('wet', 0, 0, 'Europe/Lisbon'),
    TzLookupEntry('wet', 0, 0, 'Atlantic/Canary'),
    TzLookupEntry('wib', 0, _h(7), 'Asia/Jakarta'),
    TzLookupEntry('wit', 0, _h(9), 'Asia/Jayapura'),
    TzLookupEntry('wita', 0, _h(8), 'Asia/Makassar'),
    TzLookupEntry('yddt', 1, _h(-7), 'America/Dawson'),
    TzLookupEntry('ydt', 1, _h(-8), 'America/Dawson'),
    TzLookupEntry('ypt', 1, _h(-8), 'America/Dawson'),
    TzLookupEntry('yst', 0, _h(-9), 'America/Anchorage'),
    TzLookupEntry('ywt', 1, _h(-8), 'America/Dawson'),
    # Military zones.
    TzLookupEntry('a', 0, _h(1), None),
    TzLookupEntry('b', 0, _h(2), None),
    TzLookupEntry('c', 0, _h(3), None),
    TzLookupEntry('d', 0, _h(4), None),
    TzLookupEntry('e', 0, _h(5), None),
    TzLookupEntry('f', 0, _h(6), None),
    TzLookupEntry('g', 0, _h(7), None),
    TzLookupEntry('h', 0, _h(8), None),
    TzLookupEntry('i', 0, _h(9), None),
    TzLookupEntry('k', 0, _h(10), None),
    TzLookupEntry('l', 0, _h(11), None),
    TzLookupEntry('m', 0, _h(12), None),
    TzLookupEntry('n', 0, _h(-1), None),
    TzLookupEntry('o', 0, _h(-2), None),
    TzLookupEntry('p', 0, _h(-3), None),
    TzLookupEntry('q', 0, _h(-4), None),
    TzLookupEntry('r', 0, _h(-5), None),
    TzLookupEntry('s', 0, _h(-6), None),
    TzLookupEntry('t', 0, _h(-7), None),
    TzLookupEntry('u', 0, _h(-8), None),
    TzLookupEntry('v', 0, _h(-9), None),
    TzLookupEntry('w', 0, _h(-10), None),
    TzLookupEntry('x', 0, _h(-11), None),
    TzLookupEntry('y', 0, _h(-12), None),
    TzLookupEntry('z', 0, 0, 'UTC'),
)

# Used when an abbreviation is unknown, matched on (offset, dst) only.
FALLBACK_MAP = (
    TzLookupEntry('sst', 0, _h(-11), 'Pacific/Apia'),
    TzLookupEntry('hst', 0, _h(-10), 'Pacific/Honolulu'),
    TzLookupEntry('akst', 0, _h(-9), 'America/Anchorage'),
    TzLookupEntry('akdt', 1, _h(-8), 'America/Anchorage'),
    TzLookupEntry('pst', 0, _h(-8), 'America/Los_Angeles'),
    TzLookupEntry('pdt', 1, _h(-7), 'America/Los_Angeles'),
    TzLookupEntry('mst', 0, _h(-7), 'America/Denver'),
    TzLookupEntry('mdt', 1, _h(-6), 'America/Denver'),
    TzLookupEntry('cst', 0, _h(-6), 'America/Chicago'),
    TzLookupEntry('cdt', 1, _h(-5), 'America/Chicago'),
    TzLookupEntry('est', 0, _h(-5), 'America/New_York'),
    TzLookupEntry('vet', 0, _h(-4.5), 'America/Caracas'),
    TzLookupEntry('edt', 1, _h(-4), 'America/New_York'),
    TzLookupEntry('ast', 0, _h(-4), 'America/Halifax'),
    TzLookupEntry('adt', 1, _h(-3), 'America/Halifax'),
    TzLookupEntry('brt', 0, _h(-3), 'America/Sao_Paulo'),
    TzLookupEntry('brst', 1, _h(-2), 'America/Sao_Paulo'),
    TzLookupEntry('azost', 0, _h(-1), 'Atlantic/Azores'),
    TzLookupEntry('azodt', 1, 0, 'Atlantic/Azores'),
    TzLookupEntry('gmt', 0, 0, 'Europe/London'),
    TzLookupEntry('bst', 1, _h(1), 'Europe/London'),
    TzLookupEntry('cet', 0, _h(1), 'Europe/Paris'),
    TzLookupEntry('cest', 1, _h(2), 'Europe/Paris'),
    TzLookupEntry('eet', 0, _h(2), 'Europe/Helsinki'),
    TzLookupEntry('eest', 1, _h(3), 'Europe/Helsinki'),
    TzLookupEntry('msk', 0, _h(3), 'Europe/Moscow'),
    TzLookupEntry('msd', 1, _h(4), 'Europe/Moscow'),
    TzLookupEntry('gst', 0, _h(4), 'Asia/Dubai'),
    TzLookupEntry('pkt', 0, _h(5), 'Asia/Karachi'),
    TzLookupEntry('ist', 0, _h(5.5), 'Asia/Kolkata'),
    TzLookupEntry('npt', 0, _h(5.75), 'Asia/Katmandu'),
    TzLookupEntry('yekt', 1, _h(6), 'Asia/Yekaterinburg'),
    TzLookupEntry('novst', 1, _h(7), 'Asia/Novosibirsk'),
    TzLookupEntry('krat', 0, _h(7), 'Asia/Krasnoyarsk'),
    TzLookupEntry('cst', 0, _h(8), 'Asia/Shanghai'),
    TzLookupEntry('krast', 1, _h(8), 'Asia/Krasnoyarsk'),
    TzLookupEntry('jst', 0, _h(9), 'Asia/Tokyo'),
    TzLookupEntry('est', 0, _h(10), 'Australia/Melbourne'),
    TzLookupEntry('cst', 1, _h(10.5), 'Australia/Adelaide'),
    TzLookupEntry('est', 1, _h(11), 'Australia/Melbourne'),
    TzLookupEntry('nzst', 0, _h(12), 'Pacific/Auckland'),
    TzLookupEntry('nzdt', 1, _h(13), 'Pacific/Auckland'),
)


def abbr_search(
    word: str, gmtoffset: int = -1, isdst: int = 0
) -> Optional[TzLookupEntry]:
    """Find the lookup entry for an abbreviation.

    Args:
        word:
            The abbreviation, in any case.
        gmtoffset:
            The UTC offset the caller expects, -1 to take the first entry
            with a matching name.
        isdst:
            The DST flag used together with gmtoffset when the name is
            unknown.

    Examples:
        >>> abbr_search('EST').full_tz_name
        'America/New_York'
        >>> abbr_search('est', 36000).full_tz_name
        'Australia/Melbourne'
        >>> abbr_search('foobar', -25200, 0).full_tz_name
        'America/Denver'
        >>> abbr_search('foobar', 7201, 1) is None
        True

    """
    lowered = word.lower()
    if lowered in ('utc', 'gmt'):
        return UTC_ENTRY
    first_found = None
    for entry in TIMEZONE_LOOKUP:
        if entry.name != lowered:
            continue
        if first_found is None:
            first_found = entry
            if gmtoffset == -1:
                return entry
        if entry.gmtoffset == gmtoffset:
            return entry
    if first_found is not None:
        return first_found
    for entry in FALLBACK_MAP:
        if entry.gmtoffset == gmtoffset and entry.type == isdst:
            return entry
    return None


def timezone_id_from_abbr(abbr: str, gmtoffset: int, isdst: int) -> str:
    """Return a zone identifier for an abbreviation, or "" if unknown.

    An empty abbreviation finds a zone by offset and DST flag alone.

    Examples:
        >>> timezone_id_from_abbr("", 3600, 0)
        'Europe/Paris'

    """
    entry = abbr_search(abbr, gmtoffset, isdst)
    if entry is None or entry.full_tz_name is None:
        return ''
    return entry.full_tz_name


def timezone_abbreviations_list() -> List[TzLookupEntry]:
    """Return every known abbreviation entry."""
    return list(TIMEZONE_LOOKUP)
