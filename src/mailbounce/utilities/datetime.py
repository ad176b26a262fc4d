# Copyright (C) 2014-2016 by the Free Software Foundation, Inc.
#
# This file is part of mailbounce.
#
# mailbounce is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free
# Software Foundation, either version 3 of the License, or (at your option)
# any later version.
#
# mailbounce is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or
# FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for
# more details.
#
# You should have received a copy of the GNU General Public License along with
# mailbounce.  If not, see <http://www.gnu.org/licenses/>.

"""Datetime utilities.

Date strings found in bounces come in every shape.  `parse()` turns any of
them the standard email package understands into one canonical RFC 5322
form, and `to_utc()` gives the classifier a UTC datetime and offset.
"""

__all__ = [
    'parse',
    'second2tz',
    'to_utc',
    'tz2second',
    'utc',
    ]


import re
import datetime

from email.utils import parsedate_tz


# Day and month names of the canonical form are always English, independent
# of the locale.
DAYS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')
MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
          'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

utc = datetime.timezone.utc

_tz_cre = re.compile(r'\A([-+])(\d\d)(\d\d)\Z')
# A zone after the time of day: numeric, or one of the names meaning UTC.
_zone_cre = re.compile(
    r'\d:\d\d(?::\d\d)?\s*(?:[-+]\d{4}|(?:UT|UTC|GMT|Z)\b)', re.IGNORECASE)



def _parse(value):
    # Return the local time and its offset in seconds.  The offset is None
    # when the string carries no zone.
    if not value or not value.strip():
        return None
    value = value.strip()
    try:
        parsed = parsedate_tz(value)
    except (IndexError, TypeError, ValueError):
        return None
    if parsed is None:
        return None
    year, month, day, hour, minute, second = parsed[:6]
    offset = parsed[9]
    # parsedate_tz() reports 0 for an explicit UTC zone and for no zone.
    if offset == 0 and _zone_cre.search(value) is None:
        offset = None
    try:
        local = datetime.datetime(year, month, day, hour, minute, second)
    except (OverflowError, ValueError):
        return None
    return local, offset


def parse(value):
    """Parse a date string into its canonical form.

    :param value: A date string, e.g. 'Thu, 29 Apr 2014 23:34:45 +0000 (GMT)'.
    :type value: string
    :return: The canonical form, e.g. 'Tue, 29 Apr 2014 23:34:45 +0000', or
        None when the string cannot be parsed.  The offset is omitted when the
        string did not carry one.
    :rtype: string or None
    """
    parsed = _parse(value)
    if parsed is None:
        return None
    local, offset = parsed
    canonical = '{0}, {1:02d} {2} {3:04d} {4:02d}:{5:02d}:{6:02d}'.format(
        DAYS[local.weekday()], local.day, MONTHS[local.month - 1],
        local.year, local.hour, local.minute, local.second)
    if offset is None:
        return canonical
    return '{0} {1}'.format(canonical, second2tz(offset))


def to_utc(value):
    """Parse a date string into a UTC datetime.

    A string without a zone is taken to be UTC.

    :param value: A date string, e.g. 'Fri, 21 Nov 2014 23:34:45 -0500'.
    :type value: string
    :return: A 2-tuple of the timezone aware UTC datetime and the numeric
        offset the string carried ('' when it had none), or None when the
        string cannot be parsed or falls outside the representable range.
    :rtype: tuple or None
    """
    parsed = _parse(value)
    if parsed is None:
        return None
    local, offset = parsed
    if offset is None:
        return local.replace(tzinfo=utc), ''
    try:
        timestamp = (local.replace(tzinfo=utc) -
                     datetime.timedelta(seconds=offset))
    except OverflowError:
        return None
    return timestamp, second2tz(offset)


def tz2second(offset):
    """Convert a numeric timezone offset into seconds.

    :param offset: The offset, e.g. '-0500'.
    :type offset: string
    :return: The signed number of seconds, e.g. -18000, or None if the string
        is not a numeric offset.
    :rtype: int or None
    """
    mo = _tz_cre.match(offset)
    if mo is None:
        return None
    sign, hours, minutes = mo.groups()
    seconds = int(hours) * 3600 + int(minutes) * 60
    return -seconds if sign == '-' else seconds


def second2tz(seconds):
    """Convert a signed number of seconds into a numeric timezone offset.

    :param seconds: The offset in seconds, e.g. 32400.
    :type seconds: int
    :return: The numeric offset, e.g. '+0900'.
    :rtype: string
    """
    sign = '-' if seconds < 0 else '+'
    hours, minutes = divmod(abs(int(seconds)) // 60, 60)
    return '{0}{1:02d}{2:02d}'.format(sign, hours, minutes)
