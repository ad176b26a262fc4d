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

"""Machinery shared by the line oriented format modules.

Every format module reads the plain text body of a bounce line by line,
passing through up to three sections:

* everything before the delivery status marker, which is ignored;
* the delivery status section, where each line is offered to the module's
  ordered rule table and the first matching rule writes into the current
  raw record;
* the original message section, whose lines are kept verbatim until two
  consecutive blank lines are seen.
"""

__all__ = [
    'BaseScanner',
    'FIELDS',
    'RawRecord',
    'ScanResult',
    'ScanState',
    'Transcript',
    ]


from flufl.enum import Enum

from mailbounce.core.errors import EmptyScanResultError
from mailbounce.email.rfc5322 import weedout
from mailbounce.utilities.string import sweep


FIELDS = (
    'recipient',
    'date',
    'action',
    'reason',
    'status',
    'diagnosis',
    'diagnostic_spec',
    'remote_host',
    'local_host',
    'command',
    'reply_code',
    'feedback_type',
    'format_id',
    'alias',
    )



class ScanState(Enum):
    """Where the scanner is in the body.  Transitions only move forward."""

    before_status = 0
    in_status = 1
    in_original = 2
    done = 3



class RawRecord:
    """The extracted but unnormalized fields for one bounced recipient.

    Every field starts out unset (None).  Format modules assign fields while
    scanning, and `fill()` turns every field that is still unset into the
    empty string before the record leaves the module.
    """

    __slots__ = FIELDS

    def __init__(self, **fields):
        for name in FIELDS:
            setattr(self, name, None)
        for name, value in fields.items():
            setattr(self, name, value)

    def setdefault(self, name, value):
        """Set a field only if it is still unset.

        :return: The value of the field afterward.
        """
        current = getattr(self, name)
        if current is None:
            setattr(self, name, value)
            return value
        return current

    def fill(self):
        """Replace every unset field with the empty string."""
        for name in FIELDS:
            if getattr(self, name) is None:
                setattr(self, name, '')
        return self

    def as_dict(self):
        return dict((name, getattr(self, name)) for name in FIELDS)

    def __repr__(self):
        return '<RawRecord {0!r} at {1:#x}>'.format(self.recipient, id(self))



class ScanResult:
    """The records a format module extracted from one bounce.

    :param records: The filled raw records; there must be at least one.
    :type records: sequence of `RawRecord`
    :param original_headers: The header fields of the original message,
        keyed by lower-cased field name.
    :type original_headers: dict
    :raise EmptyScanResultError: when `records` is empty.
    """

    def __init__(self, records, original_headers):
        self.records = list(records)
        if len(self.records) == 0:
            raise EmptyScanResultError('A scan result needs a record')
        self.original_headers = dict(original_headers)

    def __repr__(self):
        return '<ScanResult of {0} record(s) at {1:#x}>'.format(
            len(self.records), id(self))



class Transcript:
    """The mutable state of a single scan."""

    def __init__(self):
        self.state = ScanState.before_status
        self.records = [RawRecord()]
        # The number of recipients seen in the delivery status section.
        self.recipients = 0
        # The lines of the original message section.
        self.original = []

    @property
    def current(self):
        return self.records[-1]

    def add_record(self):
        """Start a new raw record and return it."""
        self.records.append(RawRecord())
        return self.current



class BaseScanner:
    """Base class for the line oriented format modules.

    Subclasses set `format_id`, the two marker patterns `start_cre` and
    `rfc822_cre`, the ordered `rules` table of (cre, method name) tuples, the
    optional `failures` table of (reason, cre) tuples, and implement
    `matches()`.  Rule methods are called with the transcript and the match
    object.  A method may return False to decline the line, in which case the
    next rule is tried.
    """

    format_id = None
    start_cre = None
    rfc822_cre = None
    rules = ()
    failures = ()
    transcript_class = Transcript

    def description(self):
        """See `IFormatModule`."""
        return self.__doc__.splitlines()[0].rstrip('.')

    def matches(self, headers):
        """See `IFormatModule`."""
        raise NotImplementedError

    def scan(self, headers, body):
        """See `IFormatModule`."""
        if not headers or not body or not self.matches(headers):
            return None
        transcript = self.transcript_class()
        for line in body.splitlines():
            self._read(transcript, line)
            if transcript.state is ScanState.done:
                break
        records = self.finish(transcript)
        if not records:
            return None
        for record in records:
            self._fixup(record)
        return ScanResult(records, weedout(transcript.original))

    def _read(self, transcript, line):
        if transcript.state is ScanState.before_status:
            if self.start_cre.search(line):
                transcript.state = ScanState.in_status
                return
        if transcript.state in (ScanState.before_status, ScanState.in_status):
            if self.rfc822_cre.search(line):
                transcript.state = ScanState.in_original
                return
        if transcript.state is ScanState.in_original:
            if line.strip():
                transcript.original.append(line)
            elif transcript.original and transcript.original[-1] == '':
                # Two consecutive blank lines end the original message.
                transcript.state = ScanState.done
            else:
                transcript.original.append('')
        elif transcript.state is ScanState.in_status and line.strip():
            for cre, method_name in self.rules:
                mo = cre.search(line)
                if mo is None:
                    continue
                if getattr(self, method_name)(transcript, mo) is not False:
                    break

    def finish(self, transcript):
        """Check the transcript after the body has been read.

        :return: The raw records to report, or an empty list when the bounce
            is not usable.
        :rtype: list of `RawRecord`
        """
        if transcript.recipients == 0:
            return []
        return transcript.records

    def _fixup(self, record):
        record.format_id = self.format_id
        record.diagnosis = sweep(record.diagnosis)
        if record.diagnosis:
            for reason, cre in self.failures:
                if cre.search(record.diagnosis):
                    record.reason = reason
                    break
        record.fill()
