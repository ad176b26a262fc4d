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

"""mailbounce exceptions raised for programming and configuration errors.

Message content never causes an exception; malformed bounces are declined
or skipped instead.
"""

__all__ = [
    'BadConfigurationError',
    'EmptyScanResultError',
    'MailbounceError',
    ]


from mailbounce.interfaces.errors import MailbounceError



class EmptyScanResultError(MailbounceError, ValueError):
    """A scan result must carry at least one record."""


class BadConfigurationError(MailbounceError):
    """The named configuration file could not be used."""

    def __init__(self, filename):
        super().__init__()
        self.filename = filename

    def __str__(self):
        return 'Cannot load configuration file: {0}'.format(self.filename)
