# Copyright (c) 2025 NASK. All rights reserved.

import unittest

from unittest_expander import (
    expand,
    foreach,
    param,
)

from n6urldetect.char_helpers import (
    is_alpha,
    is_alpha_numeric,
    is_dot,
    is_encoded_dot,
    is_hard_delimiter,
    is_hex,
    is_international,
    is_numeric,
    is_unreserved,
    split_by_dot,
)


@expand
class TestCharClassification(unittest.TestCase):

    @foreach(
        param(func=is_hex, yes='0123456789abcdefABCDEF', no='gGxz-.% '),
        param(func=is_alpha, yes='azAZ', no='09-_.é '),
        param(func=is_numeric, yes='0123456789', no='aZ-.٣ '),
        param(func=is_alpha_numeric, yes='azAZ09', no='-_.~%é '),
        param(func=is_unreserved, yes='azAZ09-._~', no='%:/?#[]@!$&\'()*+,;= '),
        param(func=is_dot, yes='.。．｡', no=',;:․ '),
        param(func=is_hard_delimiter, yes=' \t\n\r\x0b\x0c\x00\x01\x1f\x7f ',
              no='a0"\'<>{}%é'),
        param(func=is_international, yes='Àéł中\U0001f600',
              no='az09\u007f¿'),
    )
    def test(self, func, yes, no):
        for c in yes:
            with self.subTest(c=c):
                self.assertTrue(func(c))
        for c in no:
            with self.subTest(c=c):
                self.assertFalse(func(c))


@expand
class Test_split_by_dot(unittest.TestCase):

    @foreach(
        param('192.168.1.1', ['192', '168', '1', '1']),
        param('..', ['', '', '']),
        param('192.39%2e1%2E1', ['192', '39', '1', '1']),
        param('as｡awe.a3r23.lkajsf0ijr....',
              ['as', 'awe', 'a3r23', 'lkajsf0ijr', '', '', '', '']),
        param('%2e%2easdf', ['', '', 'asdf']),
        param('sdoijf%2e', ['sdoijf', '']),
        param('ksjdfh.asdfkj.we%2', ['ksjdfh', 'asdfkj', 'we%2']),
        param('0。1．2｡3', ['0', '1', '2', '3']),
        param('no-dots-here', ['no-dots-here']),
        param('', ['']),
    )
    def test(self, text, expected):
        self.assertEqual(split_by_dot(text), expected)


@expand
class Test_is_encoded_dot(unittest.TestCase):

    @foreach(
        param('%2e', True),
        param('%2E', True),
        param('%2f', False),
        param('%2', False),
        param('%2e%', False),
        param('.', False),
        param('', False),
    )
    def test(self, text, expected):
        self.assertIs(is_encoded_dot(text), expected)
