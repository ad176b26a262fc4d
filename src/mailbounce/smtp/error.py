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

"""Decide whether a bounce is permanent or transient."""

__all__ = [
    'is_permanent',
    'soft_or_hard',
    ]


import re

from mailbounce.smtp import reply, status


SOFT_REASONS = frozenset((
    'blocked',
    'contenterror',
    'exceedlimit',
    'expired',
    'filtered',
    'mailboxfull',
    'mailererror',
    'mesgtoobig',
    'networkerror',
    'norelaying',
    'rejected',
    'securityerror',
    'spamdetected',
    'suspend',
    'syntaxerror',
    'systemerror',
    'systemfull',
    'toomanyconn',
    'virusdetected',
    ))

HARD_REASONS = frozenset((
    'hasmoved',
    'hostunknown',
    'userunknown',
    ))

# These never describe a failed delivery.
NOT_BOUNCES = frozenset(('delivered', 'feedback', 'vacation'))

_temporary_cre = re.compile(r'temporar|persistent', re.IGNORECASE)
_permanent_cre = re.compile(r'permanent', re.IGNORECASE)



def is_permanent(text):
    """Does a text describe a permanent failure?

    :param text: A status code and/or diagnostic text.
    :type text: string
    :return: True for a permanent failure, False for a transient one, None
        when the text does not tell.
    :rtype: bool or None
    """
    if not text:
        return None
    code = status.find(text) or reply.find(text)
    if code.startswith('5'):
        return True
    if code.startswith('4'):
        return False
    if _temporary_cre.search(text):
        return False
    if _permanent_cre.search(text):
        return True
    return None


def soft_or_hard(reason, text=''):
    """Classify a bounce as soft or hard.

    :param reason: The bounce reason.
    :type reason: string
    :param text: The status code and diagnostic text, used for reasons whose
        permanence depends on the actual failure.
    :type text: string
    :return: 'soft', 'hard', or the empty string when indeterminate.
    :rtype: string
    """
    if not reason or reason in NOT_BOUNCES:
        return ''
    if reason in ('onhold', 'undefined'):
        permanent = is_permanent(text)
        if permanent is None:
            return ''
        return 'hard' if permanent else 'soft'
    if reason == 'notaccept':
        # A 4xx refusal is transient, everything else is permanent.
        code = status.find(text) or reply.find(text)
        return 'soft' if code.startswith('4') else 'hard'
    if reason in SOFT_REASONS:
        return 'soft'
    if reason in HARD_REASONS:
        # A hard reason reported with a temporary status is still soft.
        if is_permanent(text) is False:
            return 'soft'
        return 'hard'
    return ''
