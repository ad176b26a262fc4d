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

"""Test the mailbox address helpers."""

__all__ = [
    'TestAddress',
    'TestAddressOf',
    'TestReceived',
    'TestWeedout',
    ]


import unittest

from mailbounce.email.address import Address, address_of
from mailbounce.email.rfc5322 import is_emailaddress, received, weedout
from mailbounce.interfaces.address import IAddress



class TestAddress(unittest.TestCase):
    def test_simple(self):
        address = Address('kijitora@example.jp')
        self.assertTrue(IAddress.providedBy(address))
        self.assertFalse(address.is_void)
        self.assertEqual(address.user, 'kijitora')
        self.assertEqual(address.host, 'example.jp')
        self.assertEqual(address.address, 'kijitora@example.jp')
        self.assertEqual(str(address), 'kijitora@example.jp')

    def test_display_name(self):
        address = Address('Shironeko <shironeko@ME.Example.COM>')
        self.assertEqual(address.alias, 'Shironeko')
        # Host names are case insensitive, local parts are not.
        self.assertEqual(address.address, 'shironeko@me.example.com')

    def test_void(self):
        for text in ('', None, 'kijitora', 'kijitora@', '@example.jp',
                     'kijitora@localhost', 'kiji tora@example.jp',
                     '-kijitora@example.jp', 'kijitora@example..jp'):
            address = Address(text)
            self.assertTrue(address.is_void, text)
            self.assertTrue(address.void, text)
            self.assertEqual(str(address), '')

    def test_repr(self):
        self.assertTrue(repr(Address('')).startswith('<Address (void)'))
        self.assertTrue(
            repr(Address('kijitora@example.jp')).startswith(
                '<Address kijitora@example.jp'))


class TestAddressOf(unittest.TestCase):
    def test_angle_brackets(self):
        self.assertEqual(address_of('<kijitora@example.jp>'),
                         'kijitora@example.jp')
        self.assertEqual(address_of('"Kijitora" <kijitora@example.jp>'),
                         'kijitora@example.jp')

    def test_empty(self):
        self.assertEqual(address_of(''), '')
        self.assertEqual(address_of(None), '')

    def test_is_emailaddress(self):
        self.assertTrue(is_emailaddress('Neko <neko@example.org>'))
        self.assertFalse(is_emailaddress('MAILER-DAEMON'))
        self.assertFalse(is_emailaddress(''))


class TestWeedout(unittest.TestCase):
    def test_header_block(self):
        headers = weedout([
            '',
            'From: Shironeko <shironeko@example.jp>',
            'Received: from mx.example.jp',
            '\tby mx.example.org;',
            ' Fri, 21 Nov 2014 14:34:46 +0000',
            'Subject: Nyaan',
            'Received: from somewhere.example.net',
            '',
            'To: ignored@example.org',
            ])
        self.assertEqual(headers['from'], 'Shironeko <shironeko@example.jp>')
        self.assertEqual(headers['subject'], 'Nyaan')
        # The first occurrence of a repeated field wins.
        self.assertEqual(
            headers['received'],
            'from mx.example.jp by mx.example.org; '
            'Fri, 21 Nov 2014 14:34:46 +0000')
        # The header block ends at the first blank line.
        self.assertNotIn('to', headers)

    def test_garbage(self):
        self.assertEqual(weedout(['Nyaan', 'nyaan nyaan']), {})
        self.assertEqual(weedout([]), {})


class TestReceived(unittest.TestCase):
    def test_from_and_by(self):
        self.assertEqual(
            received('from mx.example.co.jp (mx.example.co.jp [192.0.2.25])'
                     ' by me.example.com (Oracle Communications Messaging'
                     ' Server 7u4-23.01) with ESMTP;'
                     ' Fri, 21 Nov 2014 14:34:47 +0000 (GMT)'),
            ('mx.example.co.jp', 'me.example.com'))

    def test_address_literal(self):
        self.assertEqual(
            received('from [192.0.2.8] by mx.example.co.jp (8.9.3/8.9.3)'),
            ('192.0.2.8', 'mx.example.co.jp'))

    def test_host_without_domain(self):
        # The comment names the real peer.
        self.assertEqual(
            received('from localhost (localhost [127.0.0.1])'
                     ' by mx.example.org (Postfix) with ESMTP id 3A1B2'),
            ('127.0.0.1', 'mx.example.org'))

    def test_missing_parts(self):
        self.assertEqual(received('by mx.example.org; Mon, 1 Dec 2014'),
                         ('', 'mx.example.org'))
        self.assertEqual(received('from mx.example.jp'),
                         ('mx.example.jp', ''))
        self.assertEqual(received(''), ('', ''))
