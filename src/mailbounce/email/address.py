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

"""Mailbox address parsing."""

__all__ = [
    'Address',
    'address_of',
    ]


import re

from email.utils import parseaddr
from zope.interface import implementer

from mailbounce.interfaces.address import IAddress


# What other characters should be disallowed?
_badchars = re.compile(r'[][()<>|;^,\000-\037\177]')



def address_of(text):
    """Return the bare address found in a string.

    Scanners use this to clean up recipient values such as
    '"Kijitora" <kijitora@example.jp>' or '<kijitora@example.jp>'.

    :param text: The string holding an address.
    :type text: string
    :return: The bare address, or the stripped argument when no address could
        be found.
    :rtype: string
    """
    if not text:
        return ''
    email = parseaddr(text)[1]
    if email:
        return email
    return text.strip().strip('<>')



@implementer(IAddress)
class Address:
    """A mailbox address, or a void one if the source was unusable."""

    def __init__(self, text):
        self.user = ''
        self.host = ''
        self.address = ''
        self.alias = ''
        if not text:
            return
        alias, email = parseaddr(text)
        if not self._is_valid(email):
            return
        user, host = email.rsplit('@', 1)
        self.user = user
        self.host = host.lower()
        self.address = '{0}@{1}'.format(self.user, self.host)
        self.alias = alias

    @staticmethod
    def _is_valid(email):
        if not email or ' ' in email:
            return False
        if _badchars.search(email) or email[0] == '-':
            return False
        user, at, host = email.rpartition('@')
        # Local, unqualified addresses are not allowed.
        if not at or not user or not host:
            return False
        domain_parts = host.split('.')
        if len(domain_parts) < 2 or not all(domain_parts):
            return False
        return True

    @property
    def is_void(self):
        """See `IAddress`."""
        return self.address == ''

    void = is_void

    def __str__(self):
        return self.address

    def __repr__(self):
        if self.is_void:
            return '<Address (void) at {0:#x}>'.format(id(self))
        return '<Address {0} at {1:#x}>'.format(self.address, id(self))
