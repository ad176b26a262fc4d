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

"""Application level bounce classification.

A format module turns the text of a bounce into raw records.  This module
normalizes those records, resolves the reason and the permanence of each
bounce, and produces the final `BounceRecord` objects.
"""

__all__ = [
    'Classifier',
    'classify',
    ]


import re
import logging

from mailbounce.config import config
from mailbounce.email.address import Address
from mailbounce.email.rfc5322 import is_emailaddress, received
from mailbounce.interfaces.bounce import SoftBounce
from mailbounce.model.bounce import BounceRecord
from mailbounce.reasons.reason import ReasonTable
from mailbounce.reasons.rhost import RemoteHostPolicy
from mailbounce.smtp import reply, status
from mailbounce.smtp.error import NOT_BOUNCES, is_permanent, soft_or_hard
from mailbounce.utilities.datetime import to_utc
from mailbounce.utilities.string import EOM

blog = logging.getLogger('mailbounce.bounce')

HEADER_KINDS = ('addresser', 'recipient', 'date')
SMTP_COMMANDS = frozenset(('EHLO', 'HELO', 'MAIL', 'RCPT', 'DATA', 'QUIT'))
ACTIONS = frozenset(('failed', 'delayed', 'delivered', 'relayed', 'expanded'))
ACTION_SYNONYMS = {
    'failure': 'failed',
    'expired': 'delayed',
    }
SEVERITIES = {
    'soft': SoftBounce.soft,
    'hard': SoftBounce.hard,
    }

EMPTYSTRING = ''
SPACE = ' '

_eom_cre = re.compile(r'[ \t]+' + EOM)
_brackets_cre = re.compile(r'[][()]')
_prefix_cre = re.compile(r'\A.+=')
_angles_cre = re.compile(r'[<>]')
_listid_cre = re.compile(r'\A.*(<.+>).*\Z')



def _sanitize_host(value):
    # Hosts must end up as bare host names or IP address literals.
    value = _brackets_cre.sub(EMPTYSTRING, value.strip())
    value = _prefix_cre.sub(EMPTYSTRING, value)
    value = value.rstrip('\r')
    return value.split(SPACE, 1)[0]


def _list_id(value):
    # List name <list-id@example.org>
    mo = _listid_cre.match(value)
    if mo:
        value = mo.group(1)
    value = _angles_cre.sub(EMPTYSTRING, value).rstrip('\r')
    # A List-Id with an embedded space is malformed.
    return EMPTYSTRING if SPACE in value else value


def _message_id(value):
    value = value.split(SPACE, 1)[0]
    return _angles_cre.sub(EMPTYSTRING, value).rstrip('\r')


def _action(value, fields):
    value = value.strip()
    if value:
        # Action: expanded (to multi-recipient alias)
        value = value.split(None, 1)[0].lower()
        if value not in ACTIONS:
            value = ACTION_SYNONYMS.get(value, value)
        return value
    if fields['reason'] == 'expired':
        return 'delayed'
    if fields['status'][:1] in ('4', '5'):
        return 'failed'
    return EMPTYSTRING



class Classifier:
    """Turn the raw records of a scanned bounce into bounce records.

    The lookup tables are handed in by the caller and only ever read, so one
    classifier may be shared by concurrent callers.

    :param reasons: The generic reason inference; defaults to a
        `ReasonTable` built from the configuration.
    :type reasons: `ReasonTable`
    :param rhost: The remote host policy; defaults to `RemoteHostPolicy`.
    :type rhost: `RemoteHostPolicy`
    :param header_order: Header search orders overriding the configured
        ones, keyed by 'addresser', 'recipient' or 'date'.
    :type header_order: dict
    """

    def __init__(self, reasons=None, rhost=None, header_order=None):
        self.reasons = (ReasonTable() if reasons is None else reasons)
        self.rhost = (RemoteHostPolicy() if rhost is None else rhost)
        self.header_order = self._merge_order(
            dict((kind, config.header_order(kind)) for kind in HEADER_KINDS),
            header_order)

    @staticmethod
    def _merge_order(default, given):
        order = dict(default)
        for kind, names in (given or {}).items():
            # An empty order keeps the default one.
            if kind in order and names:
                order[kind] = [name.lower() for name in names]
        return order

    def classify(self, headers, result, header_search_order=None,
                 include_delivered=None, catch=None):
        """Classify every raw record of a scanned bounce.

        :param headers: The bounce message's own header fields, keyed by
            lower-cased field name.  The value of 'received' may be the list
            of all Received: fields, topmost first.
        :type headers: dict
        :param result: The format module's scan result.
        :type result: `ScanResult` or None
        :param header_search_order: Per-call header search orders, keyed by
            'addresser' or 'recipient'.  Only the addresser is searched for;
            a record without a recipient of its own is skipped.
        :type header_search_order: dict
        :param include_delivered: Report records of delivered messages too.
            Defaults to the `[mailbounce] include_delivered` setting.
        :type include_delivered: bool
        :param catch: An opaque payload attached to every record.
        :return: The bounce records, possibly none.  Records which cannot be
            completed are skipped without affecting the others.
        :rtype: list of `BounceRecord`
        """
        if result is None or not result.records:
            return []
        if include_delivered is None:
            include_delivered = config.include_delivered
        order = self._merge_order(self.header_order, header_search_order)
        records = []
        for raw in result.records:
            try:
                record = self._classify(
                    headers or {}, result.original_headers, raw.as_dict(),
                    order, include_delivered, catch)
            except (IndexError, OverflowError, ValueError):
                # One malformed record never costs the others.
                blog.debug('Skipping malformed record: %s', raw.recipient,
                           exc_info=True)
                continue
            if record is not None:
                records.append(record)
        return records

    def _classify(self, headers, original, fields, order, include_delivered,
                  catch):
        # Work on a private copy; the raw record itself is never changed.
        fields = dict((name, value or EMPTYSTRING)
                      for name, value in fields.items())
        recipient_text = fields.pop('recipient')
        if not include_delivered and fields['status'].startswith('2.'):
            blog.debug('Skipping delivered record: %s', recipient_text)
            return None
        addresser_text = (self._search(original, order['addresser']) or
                          headers.get('to', EMPTYSTRING))
        if not addresser_text or not recipient_text:
            blog.debug('Skipping record without addresses: %s',
                       recipient_text)
            return None
        timestamp, offset = self._timestamp(
            fields.pop('date'), headers, original, order)
        if timestamp is None:
            blog.debug('Skipping record without a date: %s', recipient_text)
            return None
        self._fill_hosts(fields, headers.get('received'))
        for name in ('local_host', 'remote_host'):
            fields[name] = _sanitize_host(fields[name])
        fields['subject'] = original.get('subject', EMPTYSTRING).rstrip('\r')
        fields['listid'] = _list_id(original.get('list-id', EMPTYSTRING))
        fields['messageid'] = _message_id(
            original.get('message-id', EMPTYSTRING))
        # The enhanced status code in the diagnosis overrides the reported
        # one.
        fields['diagnosis'] = _eom_cre.sub(EMPTYSTRING, fields['diagnosis'])
        found = status.find(fields['diagnosis'])
        if status.is_explicit(found):
            fields['status'] = found
        if fields['reason'] == 'mailererror':
            fields['diagnostic_spec'] = fields['diagnostic_spec'] or 'X-UNIX'
        elif fields['reason'] not in ('feedback', 'vacation'):
            fields['diagnostic_spec'] = fields['diagnostic_spec'] or 'SMTP'
        if fields['command'] not in SMTP_COMMANDS:
            fields['command'] = EMPTYSTRING
        fields['action'] = _action(fields['action'], fields)
        addresser = Address(addresser_text)
        recipient = Address(recipient_text)
        if addresser.is_void or recipient.is_void:
            blog.debug('Skipping record with a void address: %s',
                       recipient_text)
            return None
        if not fields['reply_code']:
            fields['reply_code'] = reply.find(fields['diagnosis'])
        fields['reason'] = self._reason(fields)
        soft_bounce = self._severity(fields)
        if (fields['reply_code'] and
                fields['reply_code'][:1] != fields['status'][:1]):
            fields['reply_code'] = EMPTYSTRING
        return BounceRecord(addresser, recipient, timestamp,
                            soft_bounce=soft_bounce, catch=catch,
                            timezone_offset=offset, **fields)

    def _search(self, original, names):
        # The first of the named header fields holding a valid mailbox.
        for name in names:
            value = original.get(name, EMPTYSTRING)
            if value and is_emailaddress(value):
                return value
        return EMPTYSTRING

    def _timestamp(self, date, headers, original, order):
        candidates = []
        if date:
            candidates.append(date)
        for name in order['date']:
            if original.get(name):
                candidates.append(original[name])
        if headers.get('date'):
            candidates.append(headers['date'])
        for candidate in candidates:
            parsed = to_utc(candidate)
            if parsed is None:
                blog.warning('Failed to parse date: %s', candidate)
                continue
            return parsed
        return None, EMPTYSTRING

    def _fill_hosts(self, fields, stamps):
        # Hosts the format module left empty come from the bounce's own
        # Received: fields, topmost first.
        if not stamps:
            return
        if isinstance(stamps, str):
            stamps = [stamps]
        if not fields['local_host']:
            fields['local_host'] = received(stamps[0])[0]
        if not fields['remote_host']:
            fields['remote_host'] = received(stamps[-1])[1]

    def _reason(self, fields):
        reason = fields['reason']
        if not self.reasons.is_retryable(reason):
            return reason
        verdict = EMPTYSTRING
        if self.rhost.match(fields['remote_host']):
            verdict = self.rhost.get(fields)
        if not verdict:
            verdict = self.reasons.get(fields)
        return verdict or 'undefined'

    def _severity(self, fields):
        reason = fields['reason']
        if reason in NOT_BOUNCES:
            if reason != 'delivered':
                fields['reply_code'] = EMPTYSTRING
            return SoftBounce.unknown
        verdict = soft_or_hard(reason, SPACE.join(
            (fields['status'], fields['diagnosis'])).strip())
        if not verdict or not fields['status']:
            # Fall back to a pseudo status code for the reason.
            permanent = is_permanent(SPACE.join(
                (fields['reply_code'], fields['diagnosis'])).strip())
            pseudo = status.code(reason, temporary=(permanent is False))
            if pseudo:
                if not fields['status']:
                    fields['status'] = pseudo
                if not verdict:
                    verdict = soft_or_hard(reason, pseudo)
        return SEVERITIES.get(verdict, SoftBounce.unknown)



def classify(headers, result, header_search_order=None,
             include_delivered=None, catch=None):
    """Classify a scanned bounce with the default lookup tables.

    See `Classifier.classify()` for the arguments.
    """
    return Classifier().classify(
        headers, result, header_search_order=header_search_order,
        include_delivered=include_delivered, catch=catch)
