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

"""Oracle Communications Messaging Server (and Sun Java System Messaging
Server) bounces.

The delivery status section of these reports is a labeled transcript:

    This report relates to a message you sent with the following header fields:

      Message-id: <CD8C6134-C312-41D5-B083-366F7FA1D752@me.example.com>
      Date: Fri, 21 Nov 2014 23:34:45 +0900
      From: Shironeko <shironeko@me.example.com>
      To: kijitora@example.jp
      Subject: Nyaaaaaaaaaaaaaaaaaaaaaan

    Your message cannot be delivered to the following recipients:

      Recipient address: kijitora@example.jp
      Reason: Remote SMTP server has rejected address
      Diagnostic code: smtp;550 5.1.1 <kijitora@example.jp>... User Unknown
      Remote system: dns;mx.example.jp (TCP|17.111.174.67|47323|192.0.2.225|25) (6jo.example.jp ESMTP SENDMAIL-VM)

followed by an RFC 3464 style message/delivery-status part and the original
message.
"""

__all__ = [
    'MessagingServer',
    ]


import re

from zope.interface import implementer

from mailbounce.bouncers.base import BaseScanner
from mailbounce.email.address import address_of
from mailbounce.interfaces.bounce import IFormatModule


subject_cre = re.compile(r'\ADelivery Notification: ')
boundary_cre = re.compile(r'Boundary_\(ID_.+\)')

start_cre = re.compile(
    r'\AThis report relates to a message you sent with the following '
    r'header fields:')
rfc822_cre = re.compile(r'\A(?:Content-type:[ ]*message/rfc822|Return-path:[ ]*)')

# (TCP|17.111.174.67|47323|192.0.2.225|25)
session_cre = re.compile(r'\A\(TCP\|([^|]+)\|\d+\|([^|]+)\|\d+\)')
# A host name with at least one dot, i.e. not a bare host or an address tag.
domain_cre = re.compile(r'[^.]+\.[^.]+')
qualified_cre = re.compile(r'[^.]+\.[^ ]+')



@implementer(IFormatModule)
class MessagingServer(BaseScanner):
    """Oracle Communications Messaging Server."""

    format_id = 'MessagingServer'
    start_cre = start_cre
    rfc822_cre = rfc822_cre

    rules = (
        (re.compile(r'\A[ \t]+Recipient address:[ \t]*([^ ]+@[^ ]+)\Z'),
         '_recipient'),
        (re.compile(r'\A[ \t]+Original address:[ \t]*([^ ]+@[^ ]+)\Z'),
         '_original_address'),
        (re.compile(r'\A[ \t]+Date:[ \t]*(.+)\Z'),
         '_date'),
        (re.compile(r'\A[ \t]+Reason:[ \t]*(.+)\Z'),
         '_reason'),
        (re.compile(r'\A[ \t]+Diagnostic code:[ \t]*([^ ]+);(.+)\Z'),
         '_diagnostic_code'),
        (re.compile(r'\A[ \t]+Remote system:[ ]*dns;([^ ]+)[ ]*([^ ]*)'),
         '_remote_system'),
        # RFC 3464 fields of the message/delivery-status part.
        (re.compile(r'\A[Ss]tatus:[ ]*(\d\.\d\.\d+)[ ]*\((.+)\)\Z'),
         '_status'),
        (re.compile(r'\A[Aa]rrival-[Dd]ate:[ ]*(.+)\Z'),
         '_arrival_date'),
        (re.compile(r'\A[Rr]eporting-MTA:[ ]*(?:DNS|dns);[ ]*(.+)\Z'),
         '_reporting_mta'),
        )

    failures = (
        ('hostunknown', re.compile(r'Illegal host/domain name found')),
        )

    def matches(self, headers):
        """See `IFormatModule`."""
        return bool(boundary_cre.search(headers.get('content-type', '')) or
                    subject_cre.search(headers.get('subject', '')))

    def _recipient(self, transcript, mo):
        record = transcript.current
        if record.recipient:
            # There are multiple recipient addresses in the message body.
            record = transcript.add_record()
        record.recipient = address_of(mo.group(1))
        transcript.recipients += 1

    def _original_address(self, transcript, mo):
        transcript.current.recipient = address_of(mo.group(1))

    def _date(self, transcript, mo):
        transcript.current.date = mo.group(1)

    def _reason(self, transcript, mo):
        transcript.current.diagnosis = mo.group(1)

    def _diagnostic_code(self, transcript, mo):
        record = transcript.current
        record.diagnostic_spec = mo.group(1).upper()
        record.diagnosis = mo.group(2)

    def _remote_system(self, transcript, mo):
        record = transcript.current
        remote_host, session = mo.groups()
        record.remote_host = remote_host
        session_mo = session_cre.match(session)
        if session_mo:
            record.local_host = session_mo.group(1)
            # Use the IP address when the host name is not qualified.
            if not domain_cre.search(remote_host):
                record.remote_host = session_mo.group(2)

    def _status(self, transcript, mo):
        record = transcript.current
        record.status = mo.group(1)
        record.setdefault('diagnosis', mo.group(2))

    def _arrival_date(self, transcript, mo):
        transcript.current.setdefault('date', mo.group(1))

    def _reporting_mta(self, transcript, mo):
        record = transcript.current
        local_host = mo.group(1)
        current = record.setdefault('local_host', local_host)
        if not qualified_cre.search(current):
            record.local_host = local_host
