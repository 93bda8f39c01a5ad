# Copyright (c) 2013-2025 NASK. All rights reserved.

"""
INI-file configuration of the URL detector.

The recognized options are described by a *config spec* (see:
`CONFIG_SPEC` and `parse_config_spec()`): each option line has the
form `<option name> = <default value> :: <converter name>` (with the
default value and/or the converter part omittable; an option without
a default value is required).

>>> config = Config.from_string('''
... [url_detector]
... options = json, validate_top_level_domain
... compress_ipv6 = yes
... ''')
>>> config['url_detector']['options'].names
('QUOTE_MATCH', 'BRACKET_MATCH', 'VALIDATE_TOP_LEVEL_DOMAIN')
>>> config['url_detector']['compress_ipv6']
True
>>> config['url_detector']['idna_implementation']
'uts46'
"""

import configparser
import os.path

from n6urldetect.common_helpers import (
    ascii_str,
    str_to_bool,
)
from n6urldetect.exceptions import (
    N6UrlDetectError,
    UrlDetectorOptionsError,
)
from n6urldetect.host_normalizer import HostNormalizer
from n6urldetect.idna_helpers import (
    IDNA_CONVERTER_CLASSES,
    make_idna_converter,
)
from n6urldetect.log_helpers import get_logger
from n6urldetect.options import UrlDetectorOptions
from n6urldetect.tld_helpers import TldRegistry


LOGGER = get_logger(__name__)


DETECTOR_SECTION = 'url_detector'

CONFIG_SPEC = '''
    [url_detector]

    # comma-separated names of URL detector options and/or presets
    # (e.g.: `json, validate_top_level_domain`); empty means DEFAULT
    options = :: detector_options

    # `uts46` or `idna2003`
    idna_implementation = uts46 :: idna_implementation

    # path to a file in the format of IANA's `tlds-alpha-by-domain.txt`;
    # if empty, the *Public Suffix List* snapshot bundled with `tldextract`
    # is used (only if `validate_top_level_domain` is enabled)
    tld_list_file = :: path

    # whether IPv6 addresses should be formatted in the compressed form
    compress_ipv6 = false :: bool
'''

#: The config files read by the console script if no `--config`
#: option is given (the nonexistent ones are skipped).
DEFAULT_CONFIG_PATHS = (
    '/etc/n6urldetect.conf',
    '~/.n6urldetect.conf',
)

CONFIG_SPEC_CONVERTER_SEP = '::'



#
# Exceptions
#

class ConfigError(N6UrlDetectError):

    """
    A generic, `Config`-related, exception class.

    >>> print(ConfigError('Some Message'))
    [configuration-related error] Some Message
    """

    def __str__(self):
        return '[configuration-related error] ' + super().__str__()


_KeyError_str = getattr(KeyError.__str__, '__func__', KeyError.__str__)

class _KeyErrorSubclassMixin(KeyError):  # a non-public helper

    def __str__(self):
        # `KeyError.__str__()` applies `repr()` to the only argument,
        # so here it is skipped in the MRO.
        method = super().__str__
        if getattr(method, '__objclass__', None) is KeyError or (
              _KeyError_str is not None and
              _KeyError_str is getattr(method, '__func__', None)):
            method = super(KeyError, self).__str__
        return method()


class NoConfigSectionError(_KeyErrorSubclassMixin, ConfigError):

    """
    Raised by `Config.__getitem__()` when the specified section is missing.

    >>> exc = NoConfigSectionError('some_sect')
    >>> isinstance(exc, ConfigError) and isinstance(exc, KeyError)
    True
    >>> print(exc)
    [configuration-related error] no config section `some_sect`
    >>> exc.sect_name
    'some_sect'
    """

    def __init__(self, sect_name=None, *args):
        sect_ref = f'`{sect_name}`' if sect_name is not None else '<unspecified>'
        msg = f'no config section {sect_ref}'
        super().__init__(msg, *args)
        self.sect_name = sect_name


class NoConfigOptionError(_KeyErrorSubclassMixin, ConfigError):

    """
    Raised by `ConfigSection.__getitem__()` when the specified option is missing.

    >>> exc = NoConfigOptionError('mysect', 'myopt')
    >>> print(exc)
    [configuration-related error] no config option `myopt` in section `mysect`
    >>> exc.sect_name, exc.opt_name
    ('mysect', 'myopt')
    """

    def __init__(self, sect_name=None, opt_name=None, *args):
        sect_ref = f'`{sect_name}`' if sect_name is not None else '<unspecified>'
        opt_ref = f'`{opt_name}`' if opt_name is not None else '<unspecified>'
        msg = f'no config option {opt_ref} in section {sect_ref}'
        super().__init__(msg, *args)
        self.sect_name = sect_name
        self.opt_name = opt_name



#
# Converters
#

def _make_list_converter(item_converter, delimiter=','):

    def converter(s):
        s = s.strip()
        if s.endswith(delimiter):
            # remove trailing delimiter
            s = s[:-len(delimiter)].rstrip()
        if s:
            return [item_converter(item.strip())
                    for item in s.split(delimiter)]
        else:
            return []

    return converter


def _detector_options(s):
    return UrlDetectorOptions.from_names(_make_list_converter(str)(s))


def _idna_implementation(s):
    name = s.strip().lower()
    if name not in IDNA_CONVERTER_CLASSES:
        raise ValueError('{!a} is not one of: {}'.format(
            s, ', '.join(sorted(IDNA_CONVERTER_CLASSES))))
    return name


def _path(s):
    s = s.strip()
    return os.path.expanduser(s) if s else ''


CONVERTERS = {
    'str': str,
    'bool': str_to_bool,
    'path': _path,
    'detector_options': _detector_options,
    'idna_implementation': _idna_implementation,
}

DEFAULT_CONVERTER_NAME = 'str'



#
# Config spec parsing
#

def parse_config_spec(config_spec):
    """
    Parse the given config spec.

    Returns:
        A dict that maps section names to dicts that map option names
        to pairs: (<default value as a str, or None if required>,
        <converter name>).

    Raises:
        `ConfigError` if the spec is not valid.

    >>> parse_config_spec('''
    ...     [foo]
    ...     a = ~/tlds.txt :: path
    ...     b :: bool
    ...     c = xyz
    ... ''') == {'foo': {'a': ('~/tlds.txt', 'path'), 'b': (None, 'bool'), 'c': ('xyz', 'str')}}
    True
    """
    parser = configparser.ConfigParser(allow_no_value=True, delimiters=('=',))
    try:
        parser.read_string(_dedent_lines(config_spec))
    except configparser.Error as exc:
        raise ConfigError('invalid config spec ({})'.format(ascii_str(exc))) from exc
    result = {}
    for sect_name in parser.sections():
        opt_specs = result[sect_name] = {}
        for opt_name, raw in parser.items(sect_name, raw=True):
            if raw is None:
                # (no "=": the `<name> :: <converter>` form)
                opt_name, _, converter_name = opt_name.partition(CONFIG_SPEC_CONVERTER_SEP)
                default = None
            else:
                default, _, converter_name = raw.partition(CONFIG_SPEC_CONVERTER_SEP)
                default = default.strip()
            opt_name = opt_name.strip()
            converter_name = converter_name.strip() or DEFAULT_CONVERTER_NAME
            if converter_name not in CONVERTERS:
                raise ConfigError('unknown converter {!a} (option `{}` in '
                                  'section `{}`)'.format(converter_name, opt_name, sect_name))
            opt_specs[opt_name] = (default, converter_name)
    return result



#
# The actual configuration classes
#

class ConfigSection(dict):

    """
    A dict of (already converted) option values of one config section.
    """

    def __init__(self, sect_name, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sect_name = sect_name

    def __repr__(self):
        return '<{} `{}` {}>'.format(type(self).__qualname__, self.sect_name, super().__repr__())

    def __missing__(self, opt_name):
        raise NoConfigOptionError(self.sect_name, opt_name)


class Config(dict):

    """
    A dict that maps section names to `ConfigSection` instances.

    Constructor args/kwargs:
        `sect_name_to_opt_dict`:
            A dict that maps section names to dicts that map option
            names to raw (`str`) values (as read from config files).
        `config_spec` (default: `CONFIG_SPEC`):
            The config spec (see: `parse_config_spec()`).

    Raises:
        `ConfigError` if an option is not declared in the config spec,
        a required one is missing, or a value cannot be converted.

    Sections not declared in the config spec are ignored.

    Typically, instances are created with `from_files()` or
    `from_string()`.
    """

    def __init__(self, sect_name_to_opt_dict=None, config_spec=CONFIG_SPEC):
        super().__init__()
        if sect_name_to_opt_dict is None:
            sect_name_to_opt_dict = {}
        for sect_name, opt_specs in parse_config_spec(config_spec).items():
            opt_dict = sect_name_to_opt_dict.get(sect_name, {})
            self[sect_name] = self._make_section(sect_name, opt_specs, opt_dict)

    def __missing__(self, sect_name):
        raise NoConfigSectionError(sect_name)

    @classmethod
    def from_files(cls, paths=DEFAULT_CONFIG_PATHS, config_spec=CONFIG_SPEC):
        """
        Read the given INI files (the nonexistent ones are skipped,
        the later ones override the earlier ones).
        """
        config_parser = configparser.ConfigParser()
        config_files = [os.path.expanduser(path) for path in paths]
        try:
            ok_config_files = config_parser.read(config_files, encoding='utf-8')
        except (configparser.Error, UnicodeError) as exc:
            raise ConfigError('cannot parse config files ({})'.format(ascii_str(exc))) from exc
        if ok_config_files:
            LOGGER.info('Config files read properly: %s', ', '.join(
                '"{0}"'.format(ascii_str(name))
                for name in ok_config_files))
        else:
            LOGGER.debug('No config files read (tried: %s)', ', '.join(
                '"{0}"'.format(ascii_str(name))
                for name in config_files))
        return cls(cls._get_sect_name_to_opt_dict(config_parser), config_spec)

    @classmethod
    def from_string(cls, s, config_spec=CONFIG_SPEC):
        config_parser = configparser.ConfigParser()
        try:
            config_parser.read_string(s)
        except configparser.Error as exc:
            raise ConfigError('cannot parse config ({})'.format(ascii_str(exc))) from exc
        return cls(cls._get_sect_name_to_opt_dict(config_parser), config_spec)

    def make_detector_kwargs(self):
        """
        Get a dict of keyword arguments for `UrlDetector` (also accepted
        by `detect_urls()` and `parse_url()`): `options`,
        `host_normalizer` and `tld_registry`.

        >>> kwargs = Config().make_detector_kwargs()
        >>> kwargs['options'], kwargs['tld_registry']
        (<UrlDetectorOptions DEFAULT>, None)
        >>> kwargs['host_normalizer']
        HostNormalizer(Uts46IdnaConverter(transitional=False, allow_unassigned=True), compress_ipv6=False)
        """
        section = self[DETECTOR_SECTION]
        host_normalizer = HostNormalizer(
            make_idna_converter(section['idna_implementation']),
            compress_ipv6=section['compress_ipv6'])
        tld_list_file = section['tld_list_file']
        tld_registry = TldRegistry.from_iana_file(tld_list_file) if tld_list_file else None
        return dict(
            options=section['options'],
            host_normalizer=host_normalizer,
            tld_registry=tld_registry)

    @staticmethod
    def _get_sect_name_to_opt_dict(config_parser):
        return {
            sect_name: dict(config_parser.items(sect_name, raw=True))
            for sect_name in config_parser.sections()}

    @staticmethod
    def _make_section(sect_name, opt_specs, opt_dict):
        undeclared = sorted(set(opt_dict).difference(opt_specs))
        if undeclared:
            raise ConfigError('illegal config options in section `{}`: {}'.format(
                sect_name, ', '.join('`{}`'.format(name) for name in undeclared)))
        section = ConfigSection(sect_name)
        for opt_name, (default, converter_name) in opt_specs.items():
            raw_value = opt_dict.get(opt_name, default)
            if raw_value is None:
                raise ConfigError('missing required config option `{}` in section `{}`'.format(
                    opt_name, sect_name))
            try:
                section[opt_name] = CONVERTERS[converter_name](raw_value)
            except (ValueError, UrlDetectorOptionsError) as exc:
                raise ConfigError('error when converting the value of the config '
                                  'option `{}` in section `{}` ({})'.format(
                                      opt_name, sect_name, ascii_str(exc))) from exc
        return section



#
# Non-public local helpers
#

def _dedent_lines(s):
    return '\n'.join(line.strip() for line in s.splitlines())
