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

"""Various test helpers."""

__all__ = [
    'LogFileMark',
    'read_sample',
    'split_message',
    ]


import os
import logging

from email import message_from_string
from importlib.resources import files



def split_message(text):
    """Split the text of a message into its header mapping and body.

    :param text: The full text of an email message.
    :type text: string
    :return: The header fields keyed by lower-cased name, with the first of
        any repeated field winning, and the plain text body.  The value of
        'received' is the list of all Received: fields, topmost first.
    :rtype: 2-tuple of (dict, string)
    """
    message = message_from_string(text)
    headers = {}
    for name, value in message.items():
        headers.setdefault(name.lower(), str(value))
    if 'received' in headers:
        headers['received'] = [
            str(value) for value in message.get_all('received')]
    # The format modules read the raw text of every MIME part.
    parts = text.replace('\r\n', '\n').split('\n\n', 1)
    body = (parts[1] if len(parts) == 2 else '')
    return headers, body


def read_sample(filename):
    """Read a sample bounce from the test data directory.

    :param filename: The file name under `mailbounce/bouncers/tests/data`.
    :type filename: string
    :return: See `split_message()`.
    """
    resource = files('mailbounce.bouncers.tests') / 'data' / filename
    return split_message(resource.read_text(encoding='utf-8'))



class LogFileMark:
    def __init__(self, log_name):
        self._log = logging.getLogger(log_name)
        self._filename = self._log.handlers[0].filename
        self._filepos = os.stat(self._filename).st_size

    def readline(self):
        with open(self._filename, encoding='utf-8') as fp:
            fp.seek(self._filepos)
            return fp.readline()
