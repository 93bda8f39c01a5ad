# Copyright (c) 2013-2025 NASK. All rights reserved.

import os
import tempfile
import unittest
from unittest.mock import patch

from unittest_expander import (
    expand,
    foreach,
    param,
)

from n6urldetect.config import (
    CONFIG_SPEC,
    Config,
    ConfigError,
    ConfigSection,
    NoConfigOptionError,
    NoConfigSectionError,
    parse_config_spec,
)
from n6urldetect.host_normalizer import HostNormalizer
from n6urldetect.idna_helpers import (
    Idna2003IdnaConverter,
    Uts46IdnaConverter,
)
from n6urldetect.options import (
    DEFAULT,
    HTML,
    JSON,
    VALIDATE_TOP_LEVEL_DOMAIN,
)


TEST_CONFIG_SPEC = '''
    [first]
    req :: idna_implementation
    flag = no :: bool
    options = json :: detector_options
    plain = xyz

    [second]
    path = :: path
'''


class Test_parse_config_spec(unittest.TestCase):

    def test(self):
        self.assertEqual(parse_config_spec(TEST_CONFIG_SPEC), {
            'first': {
                'req': (None, 'idna_implementation'),
                'flag': ('no', 'bool'),
                'options': ('json', 'detector_options'),
                'plain': ('xyz', 'str'),
            },
            'second': {
                'path': ('', 'path'),
            },
        })

    def test_default_spec(self):
        spec = parse_config_spec(CONFIG_SPEC)
        self.assertEqual(set(spec), {'url_detector'})
        self.assertEqual(set(spec['url_detector']),
                         {'options', 'idna_implementation', 'tld_list_file', 'compress_ipv6'})

    def test_unknown_converter(self):
        with self.assertRaises(ConfigError):
            parse_config_spec('[foo]\nbar = 1 :: no_such_converter\n')

    def test_malformed(self):
        with self.assertRaises(ConfigError):
            parse_config_spec('bar = 1 :: bool\n')


@expand
class TestConfig__custom_spec(unittest.TestCase):

    def test_defaults(self):
        config = Config({'first': {'req': 'IDNA2003'}}, TEST_CONFIG_SPEC)
        self.assertEqual(config, {
            'first': {
                'req': 'idna2003',
                'flag': False,
                'options': JSON,
                'plain': 'xyz',
            },
            'second': {
                'path': '',
            },
        })
        self.assertIsInstance(config['first'], ConfigSection)
        self.assertEqual(config['first'].sect_name, 'first')

    def test_given_values(self):
        config = Config({
            'first': {'req': 'uts46', 'flag': 'Yes', 'options': 'html,', 'plain': ''},
            'second': {'path': '~/foo.txt'},
            'ignored_section': {'whatever': 'value'},
        }, TEST_CONFIG_SPEC)
        self.assertEqual(config['first'], {
            'req': 'uts46',
            'flag': True,
            'options': HTML,
            'plain': '',
        })
        self.assertEqual(config['second']['path'], os.path.expanduser('~/foo.txt'))
        self.assertNotIn('ignored_section', config)

    @foreach(
        param({}).label('missing required option'),
        param({'first': {'req': 'uts46', 'illegal': '2'}}).label('illegal option'),
        param({'first': {'req': 'idna2042'}}).label('IDNA implementation conversion failed'),
        param({'first': {'req': 'uts46', 'flag': 'maybe'}}).label('bool conversion failed'),
        param({'first': {'req': 'uts46', 'options': 'nonexistent'}}).label('options conversion failed'),
    )
    def test_error(self, sect_name_to_opt_dict):
        with self.assertRaises(ConfigError) as cm:
            Config(sect_name_to_opt_dict, TEST_CONFIG_SPEC)
        self.assertTrue(str(cm.exception).startswith('[configuration-related error] '))

    def test_missing_section_and_option(self):
        config = Config({'first': {'req': 'uts46'}}, TEST_CONFIG_SPEC)
        with self.assertRaises(NoConfigSectionError) as cm:
            config['third']
        self.assertIsInstance(cm.exception, KeyError)
        self.assertEqual(cm.exception.sect_name, 'third')
        with self.assertRaises(NoConfigOptionError) as cm:
            config['first']['nonexistent']
        self.assertEqual((cm.exception.sect_name, cm.exception.opt_name),
                         ('first', 'nonexistent'))
        self.assertEqual(
            str(cm.exception),
            '[configuration-related error] no config option `nonexistent` in section `first`')


@expand
class TestConfig__url_detector(unittest.TestCase):

    def test_defaults(self):
        section = Config()['url_detector']
        self.assertEqual(section, {
            'options': DEFAULT,
            'idna_implementation': 'uts46',
            'tld_list_file': '',
            'compress_ipv6': False,
        })

    @foreach(
        param('json', JSON),
        param('HTML, validate_top_level_domain', HTML | VALIDATE_TOP_LEVEL_DOMAIN),
        param('json,', JSON),
        param('', DEFAULT),
    )
    def test_options(self, raw, expected):
        config = Config.from_string('[url_detector]\noptions = {}\n'.format(raw))
        self.assertEqual(config['url_detector']['options'], expected)

    @foreach(
        param('options = html, allow_single_level_domain').label('forbidden combination'),
        param('options = nonexistent').label('unknown option'),
        param('idna_implementation = idna2042').label('unknown IDNA implementation'),
        param('compress_ipv6 = perhaps').label('not a bool'),
        param('unknown_option = 1').label('illegal option'),
    )
    def test_error(self, line):
        with self.assertRaises(ConfigError):
            Config.from_string('[url_detector]\n{}\n'.format(line))

    def test_syntax_error(self):
        with self.assertRaises(ConfigError):
            Config.from_string('options = json\n')

    def test_make_detector_kwargs__defaults(self):
        kwargs = Config().make_detector_kwargs()
        self.assertEqual(set(kwargs), {'options', 'host_normalizer', 'tld_registry'})
        self.assertIs(kwargs['options'], DEFAULT)
        self.assertIsInstance(kwargs['host_normalizer'], HostNormalizer)
        self.assertIsInstance(kwargs['host_normalizer'].idna_converter, Uts46IdnaConverter)
        self.assertFalse(kwargs['host_normalizer'].compress_ipv6)
        self.assertIsNone(kwargs['tld_registry'])

    @patch('n6urldetect.config.TldRegistry.from_iana_file')
    def test_make_detector_kwargs__custom(self, from_iana_file_mock):
        config = Config.from_string(
            '[url_detector]\n'
            'options = json\n'
            'idna_implementation = IDNA2003\n'
            'tld_list_file = /some/tlds.txt\n'
            'compress_ipv6 = true\n')
        kwargs = config.make_detector_kwargs()
        self.assertEqual(kwargs['options'], JSON)
        self.assertIsInstance(kwargs['host_normalizer'].idna_converter, Idna2003IdnaConverter)
        self.assertTrue(kwargs['host_normalizer'].compress_ipv6)
        self.assertIs(kwargs['tld_registry'], from_iana_file_mock.return_value)
        from_iana_file_mock.assert_called_once_with('/some/tlds.txt')


class TestConfig_from_files(unittest.TestCase):

    def _make_file(self, content):
        with tempfile.NamedTemporaryFile('w', suffix='.conf', encoding='utf-8',
                                         delete=False) as f:
            f.write(content)
        self.addCleanup(os.remove, f.name)
        return f.name

    def test_later_files_override_earlier_ones(self):
        first = self._make_file('[url_detector]\noptions = html\ncompress_ipv6 = yes\n')
        second = self._make_file('[url_detector]\noptions = json\n')
        config = Config.from_files([first, second])
        self.assertEqual(config['url_detector']['options'], JSON)
        self.assertTrue(config['url_detector']['compress_ipv6'])

    def test_nonexistent_files_are_skipped(self):
        existing = self._make_file('[url_detector]\noptions = html\n')
        config = Config.from_files([existing + '.nonexistent', existing])
        self.assertEqual(config['url_detector']['options'], HTML)

    def test_no_files(self):
        config = Config.from_files([])
        self.assertEqual(config['url_detector']['options'], DEFAULT)

    def test_unparsable_file(self):
        path = self._make_file('[url_detector\noptions = html\n')
        with self.assertRaises(ConfigError):
            Config.from_files([path])

    def test_tld_list_file_path_is_expanded(self):
        path = self._make_file('[url_detector]\ntld_list_file = ~/tlds.txt\n')
        config = Config.from_files([path])
        self.assertEqual(config['url_detector']['tld_list_file'],
                         os.path.expanduser('~/tlds.txt'))
