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

"""Test the bounce reason inference."""

__all__ = [
    'TestReasonTable',
    'TestRemoteHostPolicy',
    ]


import re
import unittest

from mailbounce.config import config
from mailbounce.reasons.reason import PATTERNS, ReasonTable
from mailbounce.reasons.rhost import RULES, RemoteHostPolicy



class TestReasonTable(unittest.TestCase):
    def setUp(self):
        self.table = ReasonTable()

    def test_retry_from_configuration(self):
        self.assertEqual(self.table.retry, config.retry_reasons)
        self.assertTrue(self.table.is_retryable(''))
        self.assertTrue(self.table.is_retryable('undefined'))
        self.assertTrue(self.table.is_retryable('userunknown'))
        self.assertFalse(self.table.is_retryable('mailboxfull'))

    def test_retry_override(self):
        config.push('retry', """\
[reasons]
retry: undefined
""")
        try:
            table = ReasonTable()
        finally:
            config.pop('retry')
        self.assertEqual(table.retry, frozenset(['undefined']))
        self.assertFalse(table.is_retryable('userunknown'))

    def test_match(self):
        self.assertEqual(self.table.match('550 User unknown'), 'userunknown')
        self.assertEqual(self.table.match('Mailbox is full'), 'mailboxfull')
        self.assertEqual(self.table.match('Relay access denied'),
                         'norelaying')
        self.assertEqual(self.table.match('Nyaan'), '')
        self.assertEqual(self.table.match(''), '')

    def test_fixed_reason_is_kept(self):
        fields = dict(reason='mailboxfull', status='5.1.1',
                      diagnosis='User unknown')
        self.assertEqual(self.table.get(fields), 'mailboxfull')

    def test_delivered(self):
        self.assertEqual(self.table.get(dict(status='2.1.5')), 'delivered')

    def test_status_code(self):
        fields = dict(reason='', status='4.2.2', diagnosis='Over the limit')
        self.assertEqual(self.table.get(fields), 'mailboxfull')

    def test_text_refines_status(self):
        # 5.1.1 is also reported for policy rejections.
        fields = dict(reason='', status='5.1.1',
                      diagnosis='Message rejected due to spam content')
        self.assertEqual(self.table.get(fields), 'spamdetected')

    def test_delayed(self):
        fields = dict(reason='', status='', diagnosis='Nyaan',
                      action='delayed')
        self.assertEqual(self.table.get(fields), 'expired')

    def test_nothing_found(self):
        self.assertEqual(self.table.get(dict(reason='undefined')), '')
        self.assertEqual(self.table.get(dict(reason='onhold')), 'onhold')

    def test_custom_patterns(self):
        table = ReasonTable(
            retry=['undefined'],
            patterns=[('suspend', re.compile('nyaan'))])
        self.assertEqual(table.get(dict(diagnosis='nyaan')), 'suspend')
        # The shared table is untouched.
        self.assertIs(ReasonTable().patterns, PATTERNS)


class TestRemoteHostPolicy(unittest.TestCase):
    def setUp(self):
        self.policy = RemoteHostPolicy()

    def test_match(self):
        self.assertTrue(self.policy.match('gmail-smtp-in.l.google.com'))
        self.assertTrue(
            self.policy.match('example-jp.mail.protection.outlook.com'))
        self.assertTrue(self.policy.match('mta7.am0.yahoodns.net'))
        self.assertFalse(self.policy.match('mx.example.jp'))
        self.assertFalse(self.policy.match(''))

    def test_get(self):
        fields = dict(
            remote_host='gmail-smtp-in.l.google.com', status='5.2.1',
            diagnosis='The email account that you tried to reach is '
                      'disabled.')
        self.assertEqual(self.policy.get(fields), 'suspend')

    def test_get_nothing(self):
        fields = dict(remote_host='gmail-smtp-in.l.google.com',
                      status='5.0.0', diagnosis='Nyaan')
        self.assertEqual(self.policy.get(fields), '')
        fields['remote_host'] = 'mx.example.jp'
        self.assertEqual(self.policy.get(fields), '')

    def test_default_rules(self):
        self.assertIs(self.policy.rules, RULES)
