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

"""Test the date and string utilities."""

__all__ = [
    'TestDatetime',
    'TestSweep',
    'TestToken',
    ]


import datetime
import unittest

from mailbounce.utilities.datetime import (
    parse, second2tz, to_utc, tz2second, utc)
from mailbounce.utilities.string import EOM, sweep, token



class TestDatetime(unittest.TestCase):
    def test_parse(self):
        self.assertEqual(parse('Wed, 26 Feb 2014 06:05:48 -0500'),
                         'Wed, 26 Feb 2014 06:05:48 -0500')

    def test_parse_normalizes(self):
        # The weekday is recomputed and trailing comments are dropped.
        self.assertEqual(parse('Thu, 21 Nov 2014 14:34:47 +0000 (GMT)'),
                         'Fri, 21 Nov 2014 14:34:47 +0000')
        self.assertEqual(parse('21 Nov 2014 23:34:45 +0900'),
                         'Fri, 21 Nov 2014 23:34:45 +0900')

    def test_parse_without_offset(self):
        self.assertEqual(parse('Fri, 21 Nov 2014 23:34:45'),
                         'Fri, 21 Nov 2014 23:34:45')

    def test_parse_zone_name(self):
        # A zone name meaning UTC is an explicit offset.
        self.assertEqual(parse('Fri, 21 Nov 2014 14:34:47 GMT'),
                         'Fri, 21 Nov 2014 14:34:47 +0000')
        self.assertEqual(parse('Fri, 21 Nov 2014 14:34:47 UT'),
                         'Fri, 21 Nov 2014 14:34:47 +0000')
        self.assertEqual(parse('Fri, 21 Nov 2014 14:34:47 EST'),
                         'Fri, 21 Nov 2014 14:34:47 -0500')

    def test_to_utc(self):
        timestamp, offset = to_utc('Fri, 21 Nov 2014 23:34:45 +0900')
        self.assertEqual(timestamp,
                         datetime.datetime(2014, 11, 21, 14, 34, 45,
                                           tzinfo=utc))
        self.assertEqual(offset, '+0900')

    def test_to_utc_without_offset(self):
        timestamp, offset = to_utc('Fri, 21 Nov 2014 23:34:45')
        self.assertEqual(timestamp,
                         datetime.datetime(2014, 11, 21, 23, 34, 45,
                                           tzinfo=utc))
        self.assertEqual(offset, '')

    def test_to_utc_out_of_range(self):
        # The local time parses but the instant lies past datetime.max.
        self.assertEqual(parse('Fri, 31 Dec 9999 23:00:00 -0500'),
                         'Fri, 31 Dec 9999 23:00:00 -0500')
        self.assertIsNone(to_utc('Fri, 31 Dec 9999 23:00:00 -0500'))
        self.assertIsNone(to_utc('Nyaan'))

    def test_parse_garbage(self):
        self.assertIsNone(parse('Nyaan'))
        self.assertIsNone(parse(''))
        self.assertIsNone(parse(None))
        self.assertIsNone(parse('Fri, 31 Feb 2014 23:34:45 +0900'))

    def test_offsets(self):
        self.assertEqual(tz2second('-0500'), -18000)
        self.assertEqual(tz2second('+0930'), 34200)
        self.assertIsNone(tz2second('JST'))
        self.assertEqual(second2tz(-18000), '-0500')
        self.assertEqual(second2tz(32400), '+0900')
        self.assertEqual(second2tz(0), '+0000')


class TestSweep(unittest.TestCase):
    def test_whitespace(self):
        self.assertEqual(sweep('  550   User\t unknown \n'),
                         '550 User unknown')

    def test_end_of_message(self):
        self.assertEqual(sweep('User unknown ' + EOM), 'User unknown')

    def test_boundary(self):
        self.assertEqual(
            sweep('User unknown --Boundary_(ID_0000000000000000000000)--'),
            'User unknown')

    def test_empty(self):
        self.assertEqual(sweep(''), '')
        self.assertIsNone(sweep(None))


class TestToken(unittest.TestCase):
    def test_equal_triples(self):
        self.assertEqual(
            token('shironeko@example.jp', 'kijitora@example.org', 1393412748),
            token('Shironeko@Example.JP', 'kijitora@example.org', 1393412748))

    def test_different_triples(self):
        first = token('shironeko@example.jp', 'kijitora@example.org', 1)
        self.assertNotEqual(
            first, token('shironeko@example.jp', 'kijitora@example.org', 2))
        self.assertNotEqual(
            first, token('shironeko@example.jp', 'mikeneko@example.org', 1))
        self.assertEqual(len(first), 40)

    def test_missing_address(self):
        self.assertEqual(token('', 'kijitora@example.org', 1), '')
        self.assertEqual(token('shironeko@example.jp', '', 1), '')
