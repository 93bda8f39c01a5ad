# Copyright (c) 2025 NASK. All rights reserved.

"""
IDNA (*Internationalized Domain Names in Applications*) converters.

A converter is any object providing the `to_ascii(host)` method which
returns the ASCII-only (*A-label*) form of the given host, raising
`IdnaConversionError` if that is not possible.  Converters do not
hold any mutable state, so a single instance can be shared by any
number of `HostNormalizer`s (also across threads).

>>> conv = Uts46IdnaConverter()
>>> conv.to_ascii('www.MÜNCHEN.de')
'www.xn--mnchen-3ya.de'
>>> conv.to_ascii('bücher\u3002example')
'xn--bcher-kva.example'
>>> Idna2003IdnaConverter().to_ascii('www.münchen.de')
'www.xn--mnchen-3ya.de'
>>> conv.to_ascii('already-ascii.example.COM')   # ASCII input is returned intact
'already-ascii.example.COM'
"""

from typing import Protocol

import idna

from n6urldetect.char_helpers import DOT_EQUIVALENT_REGEX
from n6urldetect.exceptions import IdnaConversionError
from n6urldetect.log_helpers import get_logger


LOGGER = get_logger(__name__)


class IdnaConverter(Protocol):

    name: str

    def to_ascii(self, host: str) -> str:
        ...


class Uts46IdnaConverter:

    r"""
    Convert hosts according to *Unicode IDNA Compatibility Processing*
    (UTS #46), using the `idna` library.

    First, the whole host is mapped with the UTS #46 mapping table
    (non-transitional processing, *STD3 rules* not applied, so that
    characters such as "%", ":" or "[" survive), then each non-ASCII
    label is converted to its *A-label* form.

    If `allow_unassigned` is true (the default), labels containing
    code points which are unassigned (or otherwise not permitted by the
    IDNA 2008 tables) are still converted (just lower-cased and encoded
    with plain *Punycode*) instead of causing an error.

    >>> Uts46IdnaConverter().to_ascii('xn--mnchen-3ya.MÜNCHEN.de')
    'xn--mnchen-3ya.xn--mnchen-3ya.de'
    >>> Uts46IdnaConverter().to_ascii('a\u0378b.pl').startswith('xn--ab-')
    True
    >>> Uts46IdnaConverter(allow_unassigned=False).to_ascii('a\u0378b.pl')  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    IdnaConversionError: ...
    """

    name = 'uts46'

    def __init__(self, *, transitional=False, allow_unassigned=True):
        self._transitional = transitional
        self._allow_unassigned = allow_unassigned

    def __repr__(self):
        return '{}(transitional={!r}, allow_unassigned={!r})'.format(
            type(self).__qualname__,
            self._transitional,
            self._allow_unassigned)

    def to_ascii(self, host):
        if host.isascii():
            return host
        try:
            mapped = idna.uts46_remap(host, std3_rules=False, transitional=self._transitional)
        except idna.InvalidCodepoint as exc:
            if not self._allow_unassigned:
                raise IdnaConversionError(
                    'cannot map {!a} according to UTS #46 ({})'.format(host, exc)) from exc
            LOGGER.debug('host %a contains code points not permitted by '
                         'UTS #46 (%s), using plain Punycode', host, exc)
            return '.'.join(map(_punycode_label, DOT_EQUIVALENT_REGEX.split(host)))
        except idna.IDNAError as exc:
            raise IdnaConversionError(
                'cannot map {!a} according to UTS #46 ({})'.format(host, exc)) from exc
        return '.'.join(map(self._label_to_ascii, DOT_EQUIVALENT_REGEX.split(mapped)))

    def _label_to_ascii(self, label):
        if label.isascii():
            return label
        try:
            return idna.alabel(label).decode('ascii')
        except idna.InvalidCodepoint as exc:
            if not self._allow_unassigned:
                raise IdnaConversionError(
                    'cannot convert label {!a} to ASCII ({})'.format(label, exc)) from exc
            LOGGER.debug('label %a contains code points not permitted '
                         'by IDNA 2008 (%s), using plain Punycode', label, exc)
            return _punycode_label(label)
        except (idna.IDNAError, UnicodeError) as exc:
            raise IdnaConversionError(
                'cannot convert label {!a} to ASCII ({})'.format(label, exc)) from exc


class Idna2003IdnaConverter:

    """
    Convert hosts according to IDNA 2003 (RFC 3490), using the
    standard library's "idna" codec.

    This is the narrower algorithm (no UTS #46 mapping); it can be
    used as a drop-in replacement of `Uts46IdnaConverter`.

    >>> Idna2003IdnaConverter().to_ascii('bücher.example')
    'xn--bcher-kva.example'
    """

    name = 'idna2003'

    def __repr__(self):
        return '{}()'.format(type(self).__qualname__)

    def to_ascii(self, host):
        if host.isascii():
            return host
        return '.'.join(map(self._label_to_ascii, DOT_EQUIVALENT_REGEX.split(host)))

    @staticmethod
    def _label_to_ascii(label):
        if label.isascii():
            return label
        try:
            return label.encode('idna').decode('ascii')
        except UnicodeError as exc:
            raise IdnaConversionError(
                'cannot convert label {!a} to ASCII ({})'.format(label, exc)) from exc


IDNA_CONVERTER_CLASSES = {
    Uts46IdnaConverter.name: Uts46IdnaConverter,
    Idna2003IdnaConverter.name: Idna2003IdnaConverter,
}


def make_idna_converter(name='uts46'):
    """
    Make an IDNA converter of the given kind ("uts46" or "idna2003").

    >>> make_idna_converter('idna2003')
    Idna2003IdnaConverter()
    >>> make_idna_converter('foo')                      # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    ValueError: ...
    """
    try:
        converter_class = IDNA_CONVERTER_CLASSES[name.strip().lower()]
    except KeyError:
        raise ValueError('unknown IDNA implementation: {!a} (should be one of: {})'.format(
            name, ', '.join(sorted(IDNA_CONVERTER_CLASSES)))) from None
    return converter_class()



#
# Non-public local helpers
#

def _punycode_label(label):
    if label.isascii():
        return label.lower()
    try:
        return 'xn--' + label.lower().encode('punycode').decode('ascii')
    except UnicodeError as exc:
        raise IdnaConversionError(
            'cannot convert label {!a} to Punycode ({})'.format(label, exc)) from exc
