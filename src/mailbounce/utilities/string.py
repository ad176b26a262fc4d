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

"""String utilities."""

__all__ = [
    'EOM',
    'sweep',
    'token',
    ]


import re
import hashlib


# The sentinel appended to the end of a message body by the message loader.
EOM = '__END_OF_EMAIL_MESSAGE__'

EMPTYSTRING = ''
SPACE = ' '

_eom_cre = re.compile(r'[ \t]*' + EOM)
_whitespace_cre = re.compile(r'\s+')
# A trailing MIME boundary fragment, e.g. ' --Boundary_(ID_0000)--'.
_boundary_cre = re.compile(r' -{2,}[^ \t].+\Z')



def sweep(text):
    """Clean up a diagnostic text.

    The end of message sentinel is removed, runs of whitespace are collapsed
    into a single space, leading and trailing whitespace is stripped, and a
    trailing MIME boundary fragment is dropped.

    :param text: The text to clean up.
    :type text: string or None
    :return: The cleaned text, or the argument itself if it was empty.
    :rtype: string or None
    """
    if not text:
        return text
    text = _eom_cre.sub(EMPTYSTRING, text)
    text = _whitespace_cre.sub(SPACE, text).strip()
    return _boundary_cre.sub(EMPTYSTRING, text)


def token(addresser, recipient, epoch):
    """Calculate the fingerprint of a bounce.

    :param addresser: The sender's address.
    :type addresser: string
    :param recipient: The recipient's address.
    :type recipient: string
    :param epoch: The bounce's timestamp in seconds since the epoch.
    :type epoch: int
    :return: The SHA-1 hex digest, or the empty string when either address
        is missing.
    :rtype: string
    """
    if not addresser or not recipient:
        return EMPTYSTRING
    # The fields are delimited with ASCII record separators and the whole
    # string is framed with STX/ETX, so that no two triples can collide.
    plaintext = '\x02{0}\x1e{1}\x1e{2:d}\x03'.format(
        addresser.lower(), recipient.lower(), int(epoch))
    return hashlib.sha1(plaintext.encode('utf-8')).hexdigest()
