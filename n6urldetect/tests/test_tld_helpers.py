# Copyright (c) 2025 NASK. All rights reserved.

import os
import tempfile
import unittest
from unittest.mock import (
    MagicMock,
    call,
    patch,
)

from unittest_expander import (
    expand,
    foreach,
    param,
)

from n6urldetect.tld_helpers import (
    PublicSuffixListTldRegistry,
    TldRegistry,
    get_default_tld_registry,
)


IANA_FILE_CONTENT = '''\
# Version 2025010100, Last Updated Wed Jan  1 07:07:01 2025 UTC
COM
NET
PL
XN--P1AI

'''


@expand
class TestTldRegistry(unittest.TestCase):

    def setUp(self):
        self.registry = TldRegistry(['COM', 'pl', 'xn--p1ai', ''])

    @foreach(
        param('com', True),
        param('COM', True),
        param('pl.', True),
        param(' pl ', True),
        param('xn--p1ai', True),
        param('рф', True),
        param('РФ', True),
        param('net', False),
        param('notatld', False),
        param('', False),
        param('.', False),
    )
    def test_is_registered(self, tld, expected):
        self.assertIs(self.registry.is_registered(tld), expected)

    def test_tlds(self):
        self.assertTrue({'com', 'pl', 'xn--p1ai'} <= self.registry.tlds)
        self.assertNotIn('', self.registry.tlds)

    def test_disabled(self):
        registry = TldRegistry.make_disabled()
        self.assertFalse(registry.enabled)
        self.assertTrue(registry.is_registered('notatld'))
        self.assertTrue(registry.is_registered(''))
        self.assertIn('disabled', repr(registry))

    def test_repr(self):
        self.assertEqual(repr(TldRegistry(['com', 'net'])), '<TldRegistry (2 TLDs)>')


class TestTldRegistry_from_iana_file(unittest.TestCase):

    def setUp(self):
        with tempfile.NamedTemporaryFile('w', suffix='.txt', encoding='utf-8',
                                         delete=False) as f:
            f.write(IANA_FILE_CONTENT)
        self.path = f.name
        self.addCleanup(os.remove, self.path)

    def test_loaded(self):
        registry = TldRegistry.from_iana_file(self.path)
        self.assertTrue(registry.enabled)
        self.assertEqual(registry.tlds, {'com', 'net', 'pl', 'xn--p1ai'})
        self.assertTrue(registry.is_registered('Net'))
        self.assertTrue(registry.is_registered('рф'))
        self.assertFalse(registry.is_registered('version'))

    def test_nonexistent_file(self):
        with self.assertLogs('n6urldetect.tld_helpers', level='WARNING') as cm:
            registry = TldRegistry.from_iana_file(self.path + '.nonexistent')
        self.assertFalse(registry.enabled)
        self.assertTrue(registry.is_registered('whatever'))
        self.assertIn('Top-level domain validation will be disabled', cm.output[0])


class TestTldRegistry_from_public_suffix_list(unittest.TestCase):

    @patch('n6urldetect.tld_helpers.tldextract.TLDExtract')
    def test_created(self, TLDExtract_mock):
        extractor = TLDExtract_mock.return_value
        registry = TldRegistry.from_public_suffix_list()
        self.assertIsInstance(registry, PublicSuffixListTldRegistry)
        self.assertEqual(TLDExtract_mock.mock_calls[0],
                         call(suffix_list_urls=(), cache_dir=None))
        extractor.assert_called_once_with('example.com')

    @patch('n6urldetect.tld_helpers.tldextract.TLDExtract')
    def test_loading_failed(self, TLDExtract_mock):
        TLDExtract_mock.return_value.side_effect = OSError('no snapshot')
        with self.assertLogs('n6urldetect.tld_helpers', level='WARNING'):
            registry = TldRegistry.from_public_suffix_list()
        self.assertNotIsInstance(registry, PublicSuffixListTldRegistry)
        self.assertFalse(registry.enabled)


@expand
class TestPublicSuffixListTldRegistry(unittest.TestCase):

    def setUp(self):
        known_suffixes = {'com', 'pl', 'xn--p1ai', 'co.uk'}

        def extract(domain):
            _, _, suffix = domain.partition('.')
            return MagicMock(suffix=(suffix if suffix in known_suffixes else ''))

        self.extractor = MagicMock(side_effect=extract)
        self.registry = PublicSuffixListTldRegistry(self.extractor)

    @foreach(
        param('com', True),
        param('COM.', True),
        param('рф', True),
        param('notatld', False),
        param('', False),
    )
    def test_is_registered(self, tld, expected):
        self.assertIs(self.registry.is_registered(tld), expected)

    def test_extractor_is_queried_with_probe_domain(self):
        self.registry.is_registered('PL')
        self.extractor.assert_called_once_with('example.pl')

    def test_enabled(self):
        self.assertTrue(self.registry.enabled)
        self.assertIn('tldextract', repr(self.registry))


class Test_get_default_tld_registry(unittest.TestCase):

    def setUp(self):
        get_default_tld_registry.cache_clear()
        self.addCleanup(get_default_tld_registry.cache_clear)

    @patch('n6urldetect.tld_helpers.TldRegistry.from_public_suffix_list')
    def test_created_once(self, from_public_suffix_list_mock):
        first = get_default_tld_registry()
        second = get_default_tld_registry()
        self.assertIs(first, from_public_suffix_list_mock.return_value)
        self.assertIs(second, first)
        from_public_suffix_list_mock.assert_called_once_with()
