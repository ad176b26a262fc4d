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

"""Remote host specific bounce reasons.

Some large providers phrase their rejections in ways the generic inference
cannot map reliably.  When the remote host of a bounce belongs to one of
them, their own texts decide the reason.
"""

__all__ = [
    'RULES',
    'RemoteHostPolicy',
    ]


import re


def _c(pattern):
    return re.compile(pattern, re.IGNORECASE)


# This is a list of (host cre, rules) tuples, where rules is an ordered list
# of (text cre, reason) tuples tried against the diagnostic text.
RULES = (
    # Google Workspace and Gmail.
    (_c(r'(?:\A|\.)google\.com\Z|\.googlemail\.com\Z'), (
        (_c(r'account that you tried to reach does not exist'),
         'userunknown'),
        (_c(r'account that you tried to reach is over quota'),
         'mailboxfull'),
        (_c(r'account that you tried to reach is disabled'),
         'suspend'),
        (_c(r'receiving mail at a rate that prevents additional messages'),
         'toomanyconn'),
        (_c(r'unusual rate of unsolicited mail|likely unsolicited mail'),
         'blocked'),
        (_c(r'message exceeded Google.s message size limits'),
         'mesgtoobig'),
        )),
    # Microsoft Exchange Online.
    (_c(r'\.(?:prod|protection)\.outlook\.com\Z'), (
        (_c(r'RESOLVER\.ADR\.RecipNotFound|Recipient address rejected: '
            r'Access denied'),
         'userunknown'),
        (_c(r'RESOLVER\.RST\.RecipSizeLimit|message size exceeds'),
         'mesgtoobig'),
        (_c(r'banned sending IP|5\.7\.606|5\.7\.511'),
         'blocked'),
        (_c(r'RESOLVER\.RST\.NotAuthorized|not authorized'),
         'securityerror'),
        )),
    # Yahoo! Mail.
    (_c(r'\.yahoodns\.net\Z|\.yahoo\.com\Z'), (
        (_c(r'user doesn.t have a yahoo\.com account|'
            r'delivery error: dd This user doesn'),
         'userunknown'),
        (_c(r'temporarily deferred due to unexpected volume'),
         'toomanyconn'),
        )),
    )



class RemoteHostPolicy:
    """Resolve reasons for bounces from well known remote hosts.

    :param rules: The ordered (host cre, rules) table.
    :type rules: sequence of 2-tuples
    """

    def __init__(self, rules=None):
        self.rules = (RULES if rules is None else tuple(rules))

    def _rules_for(self, host):
        if not host:
            return None
        for host_cre, rules in self.rules:
            if host_cre.search(host):
                return rules
        return None

    def match(self, host):
        """Does the policy cover this remote host?"""
        return self._rules_for(host) is not None

    def get(self, fields):
        """Return the remote host's verdict for a bounce.

        :param fields: The normalized fields of a bounce; 'remote_host',
            'diagnosis' and 'status' are consulted.
        :type fields: dict
        :return: The reason, or the empty string when the host is unknown to
            the policy or none of its texts match.
        :rtype: string
        """
        rules = self._rules_for(fields.get('remote_host', ''))
        if rules is None:
            return ''
        text = '{0} {1}'.format(
            fields.get('status', ''), fields.get('diagnosis', ''))
        for cre, reason in rules:
            if cre.search(text):
                return reason
        return ''
