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

"""Classified bounce records."""

__all__ = [
    'BounceRecord',
    ]


import json

from zope.interface import implementer

from mailbounce.interfaces.bounce import IBounceRecord, SoftBounce
from mailbounce.utilities.string import token


# The plain string fields, exported under their own names.
TEXT_FIELDS = (
    'action',
    'alias',
    'command',
    'destination_domain',
    'diagnosis',
    'diagnostic_spec',
    'feedback_type',
    'format_id',
    'listid',
    'local_host',
    'messageid',
    'reason',
    'remote_host',
    'reply_code',
    'sender_domain',
    'status',
    'subject',
    'timezone_offset',
    'token',
    )



@implementer(IBounceRecord)
class BounceRecord:
    """The final, immutable result of classifying one bounced recipient.

    :param addresser: The sender of the original message; must not be void.
    :type addresser: `IAddress`
    :param recipient: The recipient that bounced; must not be void.
    :type recipient: `IAddress`
    :param timestamp: The time of the original message.
    :type timestamp: aware `datetime.datetime`
    :param soft_bounce: The permanence of the bounce.
    :type soft_bounce: `SoftBounce`
    :param catch: An opaque payload, passed through unmodified.
    :param fields: The other normalized string fields.
    :raise ValueError: when either address is void.
    """

    def __init__(self, addresser, recipient, timestamp,
                 soft_bounce=SoftBounce.unknown, catch=None, **fields):
        if addresser.is_void or recipient.is_void:
            raise ValueError('Bounce records need both addresses')
        values = self.__dict__
        values['addresser'] = addresser
        values['recipient'] = recipient
        values['timestamp'] = timestamp
        values['soft_bounce'] = soft_bounce
        values['catch'] = catch
        for name in TEXT_FIELDS:
            values[name] = fields.pop(name, '') or ''
        if fields:
            raise TypeError('Unknown bounce record fields: {0}'.format(
                ', '.join(sorted(fields))))
        values['sender_domain'] = addresser.host
        values['destination_domain'] = recipient.host
        values['timezone_offset'] = values['timezone_offset'] or '+0000'
        values['token'] = token(
            addresser.address, recipient.address, self.epoch)

    def __setattr__(self, name, value):
        raise AttributeError('Bounce records are read-only: {0}'.format(name))

    def __delattr__(self, name):
        raise AttributeError('Bounce records are read-only: {0}'.format(name))

    @property
    def epoch(self):
        """The timestamp in seconds since the epoch."""
        return int(self.timestamp.timestamp())

    def as_dict(self):
        """See `IBounceRecord`."""
        data = dict((name, getattr(self, name)) for name in TEXT_FIELDS)
        data['addresser'] = self.addresser.address
        data['recipient'] = self.recipient.address
        data['timestamp'] = self.epoch
        data['soft_bounce'] = self.soft_bounce.value
        data['catch'] = self.catch
        return data

    def dump(self, format='json'):
        """See `IBounceRecord`."""
        if format != 'json':
            raise ValueError('Unsupported dump format: {0}'.format(format))
        return json.dumps(self.as_dict(), sort_keys=True)

    def __eq__(self, other):
        if not isinstance(other, BounceRecord):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    __hash__ = None

    def __repr__(self):
        return '<BounceRecord {0} -> {1} ({2}) at {3:#x}>'.format(
            self.addresser.address, self.recipient.address, self.reason,
            id(self))
