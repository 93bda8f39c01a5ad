# Copyright (c) 2025 NASK. All rights reserved.

"""
Top-level domain registries (used by the URL detector when the
`VALIDATE_TOP_LEVEL_DOMAIN` option is enabled).

A registry is any object providing the `is_registered(label)` method.
`TldRegistry` is the basic implementation, based on a set of TLDs:

>>> registry = TldRegistry(['COM', 'pl', 'xn--p1ai'])
>>> registry.is_registered('com'), registry.is_registered('PL.')
(True, True)
>>> registry.is_registered('рф')              # converted to 'xn--p1ai'
True
>>> registry.is_registered('notatld')
False

A *disabled* registry accepts any label:

>>> TldRegistry.make_disabled().is_registered('notatld')
True
"""

import functools

import tldextract

from n6urldetect.exceptions import IdnaConversionError
from n6urldetect.idna_helpers import Uts46IdnaConverter
from n6urldetect.log_helpers import get_logger


LOGGER = get_logger(__name__)


# (a label placed before the examined TLD when querying `tldextract`)
_PROBE_DOMAIN_LABEL = 'example'


class TldRegistry:

    """
    A set of registered top-level domains.

    Constructor args:
        `tlds`:
            An iterable of TLD labels (case-insensitive; IDN ones can be
            given in the Unicode or in the ASCII, "xn--..." form).

    Constructor kwargs:
        `enabled` (default: True):
            If false, the registry is *disabled*: `is_registered()`
            always returns true (i.e., the validation is turned off).

    Instances are immutable, so they can be freely shared.
    """

    def __init__(self, tlds=(), *, enabled=True):
        self._idna_converter = Uts46IdnaConverter()
        self._tlds = frozenset(filter(None, map(self._normalize_label, tlds)))
        self._enabled = enabled

    def __repr__(self):
        return '<{} ({} TLDs{})>'.format(
            type(self).__qualname__,
            len(self._tlds),
            '' if self._enabled else ', disabled')

    @property
    def enabled(self):
        return self._enabled

    @property
    def tlds(self):
        return self._tlds

    def is_registered(self, label):
        if not self._enabled:
            return True
        normalized = self._normalize_label(label)
        return bool(normalized) and self._is_registered_normalized(normalized)

    @classmethod
    def make_disabled(cls):
        return cls(enabled=False)

    @classmethod
    def from_iana_file(cls, path):
        """
        Make a registry from a file in the format of IANA's
        `tlds-alpha-by-domain.txt` (lines starting with "#" are
        comments; any other non-blank line is a TLD).

        If the file cannot be read, a warning is logged and a
        *disabled* registry is returned.
        """
        try:
            with open(path, encoding='utf-8') as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning('Could not load the TLD list from %a (%s). '
                           'Top-level domain validation will be disabled!', path, exc)
            return cls.make_disabled()
        tlds = [line.strip() for line in lines
                if line.strip() and not line.lstrip().startswith('#')]
        LOGGER.debug('%d TLDs loaded from %a', len(tlds), path)
        return cls(tlds)

    @classmethod
    def from_public_suffix_list(cls):
        """
        Make a registry based on the *Public Suffix List* snapshot
        bundled with the `tldextract` library (no network access is
        made).

        If the snapshot cannot be loaded, a warning is logged and a
        *disabled* registry is returned.
        """
        extractor = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)
        try:
            # (the first call makes `tldextract` load its suffix list)
            extractor('{}.com'.format(_PROBE_DOMAIN_LABEL))
        except Exception as exc:
            LOGGER.warning('Could not load the public suffix list bundled with '
                           'tldextract (%s). Top-level domain validation will '
                           'be disabled!', exc, exc_info=True)
            return cls.make_disabled()
        return PublicSuffixListTldRegistry(extractor)

    def _is_registered_normalized(self, normalized_label):
        return normalized_label in self._tlds

    def _normalize_label(self, label):
        label = label.strip().rstrip('.').lower()
        if not label.isascii():
            try:
                label = self._idna_converter.to_ascii(label)
            except IdnaConversionError:
                LOGGER.debug('Could not convert TLD %a to ASCII', label)
                return ''
        return label.lower()


class PublicSuffixListTldRegistry(TldRegistry):

    """
    A registry querying a `tldextract.TLDExtract` instance (see:
    `TldRegistry.from_public_suffix_list()`).
    """

    def __init__(self, extractor):
        super().__init__()
        self._extractor = extractor

    def __repr__(self):
        return '<{} (tldextract-based)>'.format(type(self).__qualname__)

    def _is_registered_normalized(self, normalized_label):
        result = self._extractor('{}.{}'.format(_PROBE_DOMAIN_LABEL, normalized_label))
        return result.suffix.lower() == normalized_label


@functools.lru_cache(maxsize=None)
def get_default_tld_registry():
    """
    Get the default TLD registry (created on the first call, then
    reused): the one based on `tldextract`'s bundled snapshot.
    """
    return TldRegistry.from_public_suffix_list()
