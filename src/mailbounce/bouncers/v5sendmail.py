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

"""Sendmail version 5 bounces.

These carry the raw SMTP session transcript written by savemail.c:

       ----- Transcript of session follows -----
    ... while talking to smtp.example.com.:
    >>> RCPT To:<kijitora@example.org>
    <<< 550 <kijitora@example.org>, User Unknown
    550 <kijitora@example.org>... User unknown

       ----- Unsent message follows -----
"""

__all__ = [
    'V5sendmail',
    ]


import re

from zope.interface import implementer

from mailbounce.bouncers.base import BaseScanner, ScanState, Transcript
from mailbounce.email.address import address_of
from mailbounce.email.rfc5322 import weedout
from mailbounce.interfaces.bounce import IFormatModule


subject_cre = re.compile(r'\AReturned mail: [A-Z]')

start_cre = re.compile(r'\A[ \t]+-+ Transcript of session follows -+\Z')
rfc822_cre = re.compile(
    r'\A[ \t]+----- (?:Unsent message follows|No message was collected) -----')
error_cre = re.compile(r'\A\.+ while talking to .+:\Z')
# 421 example.org (smtp)... Deferred: Connection timed out during user open
generic_cre = re.compile(r'\A\d{3}[ ]+.+\.{3}[ \t]*(.+)\Z')
mailbox_cre = re.compile(r'\A[^ ]+@[^ ]+\Z')
bracketed_cre = re.compile(r'<([^ ]+@[^ ]+)>')



class SendmailTranscript(Transcript):
    """The state of a single Sendmail transcript scan."""

    def __init__(self):
        super().__init__()
        # The last command sent and the last response received, keyed by
        # the index of the recipient they belong to.
        self.commands = {}
        self.responses = {}
        # The records which saw a "while talking to" line.
        self.session_errors = set()
        # A diagnosis which applies to every recipient of the message.
        self.diagnosis = None



@implementer(IFormatModule)
class V5sendmail(BaseScanner):
    """Sendmail version 5."""

    format_id = 'V5sendmail'
    start_cre = start_cre
    rfc822_cre = rfc822_cre
    transcript_class = SendmailTranscript

    rules = (
        # 550 <kijitora@example.org>... User unknown
        (re.compile(r'\A\d{3}[ ]+<([^ ]+@[^ ]+)>\.{3}[ ]*(.+)\Z'),
         '_status_line'),
        # >>> RCPT To:<kijitora@example.org>
        (re.compile(r'\A>{3}[ ]*([A-Z]{4})[ ]*'),
         '_command'),
        # <<< 550 Requested User Mailbox not found. No such user here.
        (re.compile(r'\A<{3}[ ]+(.+)\Z'),
         '_response'),
        (re.compile(r'.'),
         '_session_error'),
        )

    def matches(self, headers):
        """See `IFormatModule`."""
        return subject_cre.search(headers.get('subject', '')) is not None

    def _status_line(self, transcript, mo):
        recipient, diagnosis = mo.groups()
        for record in transcript.records:
            if record.recipient == recipient:
                # A later status line for the same address continues its
                # record.
                if diagnosis not in record.diagnosis:
                    record.diagnosis = '{0} {1}'.format(
                        record.diagnosis, diagnosis)
                return
        record = transcript.current
        if record.recipient:
            # There are multiple recipient addresses in the message body.
            record = transcript.add_record()
        record.recipient = recipient
        record.diagnosis = diagnosis
        response = transcript.responses.get(transcript.recipients)
        if response:
            record.diagnosis = '{0}: {1}'.format(diagnosis, response)
        transcript.recipients += 1

    def _command(self, transcript, mo):
        transcript.commands[transcript.recipients] = mo.group(1)

    def _response(self, transcript, mo):
        transcript.responses[transcript.recipients] = mo.group(1)

    def _session_error(self, transcript, mo):
        index = len(transcript.records) - 1
        if index in transcript.session_errors:
            return
        line = mo.string
        if error_cre.search(line):
            transcript.session_errors.add(index)
            return
        generic_mo = generic_cre.search(line)
        if generic_mo:
            transcript.diagnosis = generic_mo.group(1)

    def finish(self, transcript):
        """See `BaseScanner`."""
        if transcript.state not in (ScanState.in_original, ScanState.done):
            return []
        records = transcript.records
        if transcript.recipients == 0:
            # Recover the recipient from the original message.
            to = weedout(transcript.original).get('to')
            if not to:
                return []
            records[0].recipient = address_of(to)
            transcript.recipients = 1
        for index, record in enumerate(records):
            record.command = transcript.commands.get(index, '')
            if transcript.diagnosis:
                record.setdefault('diagnosis', transcript.diagnosis)
            else:
                record.setdefault('diagnosis', transcript.responses.get(index))
            if not mailbox_cre.match(record.recipient or ''):
                # E.g. @example.jp, with no local part.
                mo = bracketed_cre.search(record.diagnosis or '')
                if mo:
                    record.recipient = mo.group(1)
        return records
