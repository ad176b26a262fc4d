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

"""RFC 5322 header helpers."""

__all__ = [
    'is_emailaddress',
    'received',
    'weedout',
    ]


import re

from mailbounce.email.address import Address


# field-name = 1*ftext, any printable ASCII character except the colon.
_field_cre = re.compile(r'\A([!-9;-~]+):[ \t]*(.*)\Z')
# from mx.example.jp (mx.example.jp [192.0.2.1]) by mx.example.org
_from_cre = re.compile(
    r'\bfrom\s+([^\s;()]+)(?:\s+\(([^)]*)\))?', re.IGNORECASE)
_by_cre = re.compile(r'\bby\s+([^\s;()]+)', re.IGNORECASE)



def is_emailaddress(text):
    """Does a header value hold a syntactically valid mailbox?"""
    return not Address(text).is_void


def weedout(lines):
    """Rebuild the header block of an original message.

    Leading blank lines are skipped and the block ends at the first blank
    line following a header field.  Folded continuation lines are joined to
    their field with a single space.  Lines which are neither fields nor
    continuations are ignored.  When a field repeats, the first occurrence
    wins.

    :param lines: The captured lines of the original message.
    :type lines: sequence of strings
    :return: The header fields keyed by lower-cased field name.
    :rtype: dict
    """
    headers = {}
    previous = None
    started = False
    for line in lines:
        line = line.rstrip('\r')
        if not line.strip():
            if started:
                break
            continue
        if line[0] in ' \t':
            if previous is not None:
                headers[previous] = '{0} {1}'.format(
                    headers[previous], line.strip()).strip()
            continue
        mo = _field_cre.match(line)
        if mo is None:
            previous = None
            continue
        started = True
        name = mo.group(1).lower()
        if name in headers:
            previous = None
            continue
        headers[name] = mo.group(2).strip()
        previous = name
    return headers


def received(text):
    """Pick the sending and the receiving host out of a Received: field.

    A sending host without a domain part, such as 'localhost', is replaced by
    the first host name or IP address in the comment which follows it.

    :param text: The value of a Received: header field.
    :type text: string
    :return: The host after 'from' and the host after 'by', each empty when
        the field does not name it.
    :rtype: 2-tuple of strings
    """
    from_host = by_host = ''
    mo = _from_cre.search(text)
    if mo:
        from_host = mo.group(1).strip('[]')
        if '.' not in from_host and mo.group(2):
            # from localhost (localhost [127.0.0.1])
            for word in mo.group(2).split():
                word = word.strip('[]')
                if '.' in word:
                    from_host = word
                    break
    mo = _by_cre.search(text)
    if mo:
        by_host = mo.group(1).strip('[]')
    return from_host, by_host
