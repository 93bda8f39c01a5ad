# Copyright (c) 2025 NASK. All rights reserved.

import unittest

from unittest_expander import (
    expand,
    foreach,
    param,
)

from n6urldetect.exceptions import IdnaConversionError
from n6urldetect.idna_helpers import (
    Idna2003IdnaConverter,
    Uts46IdnaConverter,
    make_idna_converter,
)


@expand
class TestUts46IdnaConverter(unittest.TestCase):

    @foreach(
        param('www.example.com', 'www.example.com').label('ascii'),
        param('WWW.Example.COM', 'WWW.Example.COM').label('ascii, case kept'),
        param('%77%77%77.example', '%77%77%77.example').label('ascii, percent kept'),
        param('münchen.de', 'xn--mnchen-3ya.de'),
        param('MÜNCHEN.DE', 'xn--mnchen-3ya.de').label('mapped to lowercase'),
        param('bücher。example', 'xn--bcher-kva.example').label('ideographic full stop'),
        param('ｅｘａｍｐｌｅ．ｃｏｍ', 'example.com').label('fullwidth'),
        param('пример.рф', 'xn--e1afmkfd.xn--p1ai'),
        param('[::1]', '[::1]').label('ipv6 literal'),
    )
    def test_to_ascii(self, host, expected):
        self.assertEqual(Uts46IdnaConverter().to_ascii(host), expected)

    def test_unassigned_allowed(self):
        result = Uts46IdnaConverter().to_ascii('a\u0378b.pl')
        self.assertTrue(result.startswith('xn--ab-'))
        self.assertTrue(result.endswith('.pl'))

    def test_unassigned_not_allowed(self):
        with self.assertRaises(IdnaConversionError):
            Uts46IdnaConverter(allow_unassigned=False).to_ascii('a\u0378b.pl')

    def test_repr(self):
        self.assertEqual(repr(Uts46IdnaConverter(transitional=True)),
                         'Uts46IdnaConverter(transitional=True, allow_unassigned=True)')


@expand
class TestIdna2003IdnaConverter(unittest.TestCase):

    @foreach(
        param('www.example.com', 'www.example.com'),
        param('www.münchen.de', 'www.xn--mnchen-3ya.de'),
        param('bücher.example', 'xn--bcher-kva.example'),
    )
    def test_to_ascii(self, host, expected):
        self.assertEqual(Idna2003IdnaConverter().to_ascii(host), expected)

    def test_too_long_label(self):
        with self.assertRaises(IdnaConversionError):
            Idna2003IdnaConverter().to_ascii('ü' * 70 + '.example')


@expand
class Test_make_idna_converter(unittest.TestCase):

    @foreach(
        param('uts46', Uts46IdnaConverter),
        param(' UTS46 ', Uts46IdnaConverter),
        param('idna2003', Idna2003IdnaConverter),
    )
    def test(self, name, expected_class):
        self.assertIsInstance(make_idna_converter(name), expected_class)

    def test_default(self):
        self.assertIsInstance(make_idna_converter(), Uts46IdnaConverter)

    def test_unknown(self):
        with self.assertRaises(ValueError):
            make_idna_converter('idna2042')
