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

"""Interface for email address related information."""

__all__ = [
    'IAddress',
    ]


from zope.interface import Interface, Attribute



class IAddress(Interface):
    """A parsed mailbox address."""

    user = Attribute(
        """The local part of the address, or the empty string.""")

    host = Attribute(
        """The lower-cased domain part of the address, or the empty string.""")

    address = Attribute(
        """The bare `user@host` address, or the empty string when void.""")

    alias = Attribute(
        """The display name given alongside the address, if any.""")

    is_void = Attribute(
        """True when the source text could not be parsed into a user and a
        host.  A void address never appears in a finished bounce record.""")
