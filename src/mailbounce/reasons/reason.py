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

"""Generic bounce reason inference."""

__all__ = [
    'PATTERNS',
    'ReasonTable',
    ]


import re

from mailbounce.config import config
from mailbounce.smtp import status


def _c(pattern):
    return re.compile(pattern, re.IGNORECASE)


# This is a list of (reason, cre) tuples, tried in order against the
# diagnostic text.  The first match wins, so more specific reasons come
# before the broader ones that would also match their texts.
PATTERNS = (
    ('systemfull',
     _c(r'disk full|insufficient system storage|out of storage')),
    ('mailboxfull',
     _c(r'mailbox (?:is )?full|quota exceeded|over ?quota|exceeded storage'
        r'|mailbox size limit')),
    ('mesgtoobig',
     _c(r'message (?:is )?too (?:large|big)|message size exceeds'
        r'|size limit exceeded|exceeds? (?:the )?maximum (?:message )?size')),
    ('hostunknown',
     _c(r'host (?:or domain name )?(?:unknown|not found)'
        r'|domain (?:does not exist|not found)|illegal host/domain'
        r'|no such domain|unrouteable address|name or service not known')),
    ('userunknown',
     _c(r'user unknown|unknown user|no such (?:user|mailbox|recipient)'
        r'|mailbox (?:not found|unavailable|does not exist)'
        r'|invalid (?:recipient|mailbox)|recipient address rejected'
        r'|not a valid mailbox|address does not exist')),
    ('hasmoved',
     _c(r'has moved|no longer (?:with|at|available at)')),
    ('suspend',
     _c(r'(?:account|mailbox) (?:is |has been )?'
        r'(?:disabled|suspended|inactive|deactivated)')),
    ('norelaying',
     _c(r'relay(?:ing)? (?:access )?denied|not permitted to relay'
        r'|relay not permitted|unable to relay')),
    ('virusdetected',
     _c(r'virus')),
    ('spamdetected',
     _c(r'\bspam\b|junk mail|unsolicited')),
    ('blocked',
     _c(r'\bblocked\b|blacklist|block ?list|client host rejected'
        r'|reverse (?:dns|lookup)')),
    ('securityerror',
     _c(r'authentication (?:required|failed)|not authori[sz]ed'
        r'|\b(?:SPF|DKIM|DMARC)\b')),
    ('filtered',
     _c(r'\bfiltered\b|content rejected|policy violation')),
    ('toomanyconn',
     _c(r'too many (?:connections|sessions)|rate limit|try again later')),
    ('expired',
     _c(r'delivery time expired|retry time(?:out)? (?:exceeded|not reached)'
        r'|message expired|queued too long|could not be delivered for')),
    ('networkerror',
     _c(r'connection (?:timed out|refused|reset)|no route to host'
        r'|network is unreachable|timed out')),
    ('syntaxerror',
     _c(r'syntax error|command (?:unrecognized|not recognized)')),
    ('systemerror',
     _c(r'system error|server error|internal error|local error'
        r'|temporary failure')),
    ('rejected',
     _c(r'sender (?:address )?rejected|\brejected\b')),
    )



class ReasonTable:
    """Infer a bounce reason from the status code and the diagnostic text.

    :param retry: Tentative reasons which are re-inferred.  Defaults to the
        `[reasons] retry` configuration value.
    :type retry: iterable of strings
    :param patterns: The ordered (reason, cre) diagnostic patterns.
    :type patterns: sequence of 2-tuples
    """

    def __init__(self, retry=None, patterns=None):
        self.retry = frozenset(config.retry_reasons if retry is None
                               else retry)
        self.patterns = (PATTERNS if patterns is None else tuple(patterns))

    def is_retryable(self, reason):
        """Should this reason be re-inferred?"""
        return not reason or reason in self.retry

    def match(self, text):
        """Return the reason the diagnostic text describes, or ''."""
        if not text:
            return ''
        for reason, cre in self.patterns:
            if cre.search(text):
                return reason
        return ''

    def get(self, fields):
        """Infer the reason of a bounce.

        :param fields: The normalized fields of a bounce; 'reason', 'status',
            'diagnosis' and 'action' are consulted.
        :type fields: dict
        :return: The reason, or the empty string when nothing can be said.
        :rtype: string
        """
        reason = fields.get('reason', '')
        if not self.is_retryable(reason):
            return reason
        status_code = fields.get('status', '')
        if status_code.startswith('2.'):
            return 'delivered'
        found = status.name(status_code)
        # Status codes are coarse; e.g. 5.1.1 is also reported for policy
        # rejections, so the text has the final word for those.
        if not found or found == 'userunknown' or found in self.retry:
            found = self.match(fields.get('diagnosis', '')) or found
        if not found and fields.get('action', '') == 'delayed':
            found = 'expired'
        if not found and reason != 'undefined':
            found = reason
        return found
