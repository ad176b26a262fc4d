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

"""Interface to bounce scanning and classification components."""

__all__ = [
    'IBounceRecord',
    'IFormatModule',
    'SoftBounce',
    ]


from flufl.enum import Enum
from zope.interface import Attribute, Interface



class SoftBounce(Enum):
    """How permanent a bounce is."""

    # The failure is permanent; retrying the delivery will not help.
    hard = 0

    # The failure is transient and the delivery may succeed later.
    soft = 1

    # Nothing could be derived, or the record does not describe a failure at
    # all (delivered, feedback and vacation records).
    unknown = -1



class IFormatModule(Interface):
    """Recognize and scan the bounces of one vendor's dialect."""

    format_id = Attribute(
        """The identifier recorded in every record this module produces.""")

    def description():
        """A human readable label for the dialect.

        :return: The label.
        :rtype: string
        """

    def matches(headers):
        """Is this message plausibly written in this module's dialect?

        The check looks only at header fields and has no side effects.  False
        positives are allowed, `scan()` declines them.

        :param headers: The bounce message's header fields, keyed by the
            lower-cased field name.
        :type headers: dict
        :return: True when the message should be scanned.
        :rtype: bool
        """

    def scan(headers, body):
        """Extract the raw per-recipient records from a bounce.

        :param headers: The bounce message's header fields, keyed by the
            lower-cased field name.
        :type headers: dict
        :param body: The plain text body of the bounce message.
        :type body: string
        :return: The scan result, or None when the message is not recognized
            or no recipient could be extracted.  Malformed input never
            raises.
        :rtype: `ScanResult` or None
        """



class IBounceRecord(Interface):
    """A single classified bounce for one recipient."""

    addresser = Attribute(
        """The sender of the original message, as an `IAddress`.""")

    recipient = Attribute(
        """The recipient whose delivery failed, as an `IAddress`.""")

    sender_domain = Attribute("""The host part of the addresser.""")

    destination_domain = Attribute("""The host part of the recipient.""")

    alias = Attribute("""An alias of the recipient address, if known.""")

    token = Attribute(
        """The fingerprint of (addresser, recipient, timestamp).""")

    timestamp = Attribute(
        """The time of the original message, as an aware UTC datetime.""")

    timezone_offset = Attribute(
        """The original numeric timezone offset, e.g. '-0500'.""")

    reason = Attribute("""The normalized bounce reason.""")

    soft_bounce = Attribute("""A `SoftBounce` value.""")

    status = Attribute("""The enhanced status code, e.g. '5.1.1'.""")

    reply_code = Attribute("""The SMTP reply code, e.g. '550'.""")

    diagnosis = Attribute("""The diagnostic text.""")

    diagnostic_spec = Attribute(
        """The diagnostic transport tag, e.g. 'SMTP' or 'X-UNIX'.""")

    format_id = Attribute("""The format module which scanned the bounce.""")

    catch = Attribute("""An opaque payload passed through unmodified.""")

    def as_dict():
        """Export the record as a mapping of primitive values.

        :return: Addresses as strings, the timestamp as integer epoch
            seconds, the soft bounce flag as an integer and every other
            field as a string.
        :rtype: dict
        """

    def dump(format='json'):
        """Serialize the exported mapping.

        :param format: The output format; only 'json' is supported.
        :type format: string
        :return: The serialized record.
        :rtype: string
        :raise ValueError: for an unsupported format.
        """
