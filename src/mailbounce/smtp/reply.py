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

"""SMTP reply codes (RFC 5321)."""

__all__ = [
    'find',
    ]


import re


# A reply code stands alone: it starts the text or follows whitespace or a
# semicolon, and is followed by whitespace, a hyphen or the end of the text.
_reply_cre = re.compile(r'(?:\A|(?<=[\s;]))([2-5][0-5][0-9])(?=[\s-]|\Z)')



def find(text):
    """Find the first SMTP reply code in a text.

    :param text: A diagnostic text, e.g. '550 5.1.1 User unknown'.
    :type text: string
    :return: The reply code, e.g. '550', or the empty string.  Texts from the
        local mailer ('X-UNIX') never carry one.
    :rtype: string
    """
    if not text or 'X-UNIX' in text.upper():
        return ''
    mo = _reply_cre.search(text)
    return mo.group(1) if mo else ''
