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

"""Enhanced mail system status codes (RFC 3463)."""

__all__ = [
    'code',
    'find',
    'is_explicit',
    'name',
    ]


import re


# Pseudo status codes, used when a bounce carries no status code at all.  The
# detail number 9xx never appears in real bounces, so a pseudo code can
# always be told apart from a reported one.
PSEUDO_CODES = {
    'blocked':          ('5.7.910', '4.7.910'),
    'contenterror':     ('5.6.910', '4.6.910'),
    'exceedlimit':      ('5.2.913', '4.2.913'),
    'expired':          ('5.4.947', '4.4.947'),
    'filtered':         ('5.2.910', '4.2.910'),
    'hasmoved':         ('5.1.916', '4.1.916'),
    'hostunknown':      ('5.1.912', '4.1.912'),
    'mailboxfull':      ('5.2.922', '4.2.922'),
    'mailererror':      ('5.3.939', '4.3.939'),
    'mesgtoobig':       ('5.3.934', '4.3.934'),
    'networkerror':     ('5.3.924', '4.3.924'),
    'norelaying':       ('5.7.927', '4.7.927'),
    'notaccept':        ('5.3.932', '4.3.932'),
    'onhold':           ('5.0.901', '4.0.901'),
    'rejected':         ('5.7.918', '4.7.918'),
    'securityerror':    ('5.7.919', '4.7.919'),
    'spamdetected':     ('5.7.928', '4.7.928'),
    'suspend':          ('5.2.921', '4.2.921'),
    'syntaxerror':      ('5.5.902', '4.5.902'),
    'systemerror':      ('5.3.931', '4.3.931'),
    'systemfull':       ('5.3.921', '4.3.921'),
    'toomanyconn':      ('5.4.930', '4.4.930'),
    'userunknown':      ('5.1.911', '4.1.911'),
    'virusdetected':    ('5.7.922', '4.7.922'),
    }


# The reason each reported status code stands for.
REASONS = {
    '2.1.5': 'delivered',
    '4.1.6': 'hasmoved',
    '4.1.7': 'rejected',
    '4.1.8': 'rejected',
    '4.1.9': 'systemerror',
    '4.2.1': 'suspend',
    '4.2.2': 'mailboxfull',
    '4.2.3': 'exceedlimit',
    '4.2.4': 'systemerror',
    '4.3.1': 'systemfull',
    '4.3.2': 'notaccept',
    '4.3.3': 'systemerror',
    '4.3.4': 'mesgtoobig',
    '4.3.5': 'systemerror',
    '4.4.1': 'expired',
    '4.4.2': 'networkerror',
    '4.4.3': 'systemerror',
    '4.4.4': 'hostunknown',
    '4.4.5': 'toomanyconn',
    '4.4.6': 'networkerror',
    '4.4.7': 'expired',
    '4.5.3': 'syntaxerror',
    '4.7.1': 'blocked',
    '4.7.5': 'securityerror',
    '4.7.7': 'securityerror',
    '5.1.1': 'userunknown',
    '5.1.2': 'hostunknown',
    '5.1.3': 'userunknown',
    '5.1.4': 'userunknown',
    '5.1.6': 'hasmoved',
    '5.1.7': 'rejected',
    '5.1.8': 'rejected',
    '5.1.9': 'systemerror',
    '5.2.1': 'filtered',
    '5.2.2': 'mailboxfull',
    '5.2.3': 'exceedlimit',
    '5.2.4': 'systemerror',
    '5.3.1': 'systemfull',
    '5.3.2': 'notaccept',
    '5.3.3': 'systemerror',
    '5.3.4': 'mesgtoobig',
    '5.3.5': 'systemerror',
    '5.4.1': 'networkerror',
    '5.4.3': 'systemerror',
    '5.4.4': 'hostunknown',
    '5.4.6': 'networkerror',
    '5.4.7': 'expired',
    '5.5.1': 'syntaxerror',
    '5.5.2': 'syntaxerror',
    '5.5.3': 'syntaxerror',
    '5.5.4': 'syntaxerror',
    '5.5.5': 'syntaxerror',
    '5.5.6': 'syntaxerror',
    '5.6.1': 'contenterror',
    '5.6.2': 'contenterror',
    '5.6.3': 'contenterror',
    '5.6.4': 'contenterror',
    '5.6.5': 'contenterror',
    '5.7.1': 'rejected',
    '5.7.2': 'systemerror',
    '5.7.3': 'securityerror',
    '5.7.4': 'securityerror',
    '5.7.5': 'securityerror',
    '5.7.6': 'securityerror',
    '5.7.7': 'securityerror',
    '5.7.8': 'securityerror',
    '5.7.9': 'securityerror',
    '5.7.25': 'blocked',
    '5.7.26': 'securityerror',
    '5.7.27': 'securityerror',
    }

for _reason, _codes in PSEUDO_CODES.items():
    for _code in _codes:
        REASONS[_code] = _reason
del _reason, _codes, _code


# A status code is not part of a longer dotted number such as an IP address.
_status_cre = re.compile(r'(?<![\d.])([245]\.\d{1,3}\.\d{1,3})(?!\.?\d)')
_explicit_cre = re.compile(r'\A[45]\.[1-9]\d{0,2}\.[1-9]\d{0,2}\Z')



def find(text):
    """Find the first enhanced status code in a text.

    :param text: A diagnostic text, e.g. '550 5.1.1 <kijitora@example.jp>...
        User Unknown'.
    :type text: string
    :return: The status code, e.g. '5.1.1', or the empty string.
    :rtype: string
    """
    if not text:
        return ''
    mo = _status_cre.search(text)
    return mo.group(1) if mo else ''


def is_explicit(status):
    """Is a status code a definite failure code?

    Class 4 or 5 with neither the subject nor the detail being zero, i.e.
    '5.1.1' but not '5.0.0' or '2.1.5'.
    """
    return bool(status) and _explicit_cre.match(status) is not None


def code(reason, temporary=False):
    """Return the pseudo status code of a reason.

    :param reason: The bounce reason.
    :type reason: string
    :param temporary: Return the class 4 code instead of the class 5 one.
    :type temporary: bool
    :return: The pseudo status code, or the empty string for reasons that
        have none.
    :rtype: string
    """
    codes = PSEUDO_CODES.get(reason)
    if codes is None:
        return ''
    return codes[1] if temporary else codes[0]


def name(status):
    """Return the reason a status code stands for, or the empty string."""
    return REASONS.get(status, '')
