# Copyright (c) 2025 NASK. All rights reserved.

"""
URL detector options.

An option set is an immutable `UrlDetectorOptions` instance.  The
available flags (and the presets built of them) are exposed as module
constants and as class attributes:

>>> HTML.value
27
>>> UrlDetectorOptions.HTML is HTML
True
>>> HTML.has_flag(QUOTE_MATCH), HTML.has_flag(BRACKET_MATCH)
(True, False)
>>> compose(JSON, VALIDATE_TOP_LEVEL_DOMAIN).names
('QUOTE_MATCH', 'BRACKET_MATCH', 'VALIDATE_TOP_LEVEL_DOMAIN')

*Single-level domain* detection cannot be combined with any of the
*formatting* options:

>>> compose(ALLOW_SINGLE_LEVEL_DOMAIN, HTML)           # doctest: +IGNORE_EXCEPTION_DETAIL
Traceback (most recent call last):
  ...
UrlDetectorOptionsError: ...
>>> compose(ALLOW_SINGLE_LEVEL_DOMAIN, VALIDATE_TOP_LEVEL_DOMAIN).value
96
"""

from n6urldetect.exceptions import UrlDetectorOptionsError


#
# Flag bits
#

_QUOTE_MATCH_BIT = 0x1
_SINGLE_QUOTE_MATCH_BIT = 0x2
_BRACKET_MATCH_BIT = 0x4
_XML_BIT = 0x8
_HTML_BIT = 0x10
_ALLOW_SINGLE_LEVEL_DOMAIN_BIT = 0x20
_VALIDATE_TOP_LEVEL_DOMAIN_BIT = 0x40
_ALLOW_COLON_WITHOUT_SLASHES_BIT = 0x80
_EXTENDED_SCHEME_DETECTION_BIT = 0x100

_FORMATTING_BITS = (
    _QUOTE_MATCH_BIT
    | _SINGLE_QUOTE_MATCH_BIT
    | _BRACKET_MATCH_BIT
    | _XML_BIT
    | _HTML_BIT)

_ALL_BITS = (
    _FORMATTING_BITS
    | _ALLOW_SINGLE_LEVEL_DOMAIN_BIT
    | _VALIDATE_TOP_LEVEL_DOMAIN_BIT
    | _ALLOW_COLON_WITHOUT_SLASHES_BIT
    | _EXTENDED_SCHEME_DETECTION_BIT)

# (in the order of bit values; used to produce `UrlDetectorOptions.names`)
_BASIC_FLAG_NAME_TO_BIT = {
    'QUOTE_MATCH': _QUOTE_MATCH_BIT,
    'SINGLE_QUOTE_MATCH': _SINGLE_QUOTE_MATCH_BIT,
    'BRACKET_MATCH': _BRACKET_MATCH_BIT,
    'XML_MATCH': _XML_BIT,
    'HTML_MATCH': _HTML_BIT,
    'ALLOW_SINGLE_LEVEL_DOMAIN': _ALLOW_SINGLE_LEVEL_DOMAIN_BIT,
    'VALIDATE_TOP_LEVEL_DOMAIN': _VALIDATE_TOP_LEVEL_DOMAIN_BIT,
    'ALLOW_COLON_WITHOUT_SLASHES': _ALLOW_COLON_WITHOUT_SLASHES_BIT,
    'EXTENDED_SCHEME_DETECTION': _EXTENDED_SCHEME_DETECTION_BIT,
}


class UrlDetectorOptions:

    """
    An immutable, validated set of URL detector option flags.

    Instances should be obtained by using the module constants (e.g.,
    `HTML`), `compose()`, the `|` operator or `from_names()`;
    constructing from a raw `int` value is also possible.  The value
    is checked at construction time: unknown bits, as well as the
    single-level-domain flag mixed with any formatting flag, cause
    `UrlDetectorOptionsError`.

    >>> UrlDetectorOptions(7) == JAVASCRIPT
    True
    >>> UrlDetectorOptions(0x200)                       # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    UrlDetectorOptionsError: ...
    >>> QUOTE_MATCH | SINGLE_QUOTE_MATCH
    <UrlDetectorOptions QUOTE_MATCH|SINGLE_QUOTE_MATCH>
    >>> DEFAULT
    <UrlDetectorOptions DEFAULT>
    """

    __slots__ = ('_value',)

    def __init__(self, value=0):
        if not isinstance(value, int) or isinstance(value, bool):
            raise UrlDetectorOptionsError(
                'option set value must be an int (got: {!a})'.format(value))
        if value & ~_ALL_BITS or value < 0:
            raise UrlDetectorOptionsError(
                'option set value {!a} contains unknown flags'.format(value))
        if (value & _ALLOW_SINGLE_LEVEL_DOMAIN_BIT) and (value & _FORMATTING_BITS):
            raise UrlDetectorOptionsError(
                'ALLOW_SINGLE_LEVEL_DOMAIN cannot be mixed with '
                'formatting options (e.g., HTML)')
        object.__setattr__(self, '_value', value)

    def __setattr__(self, name, value):
        raise AttributeError('{} instances are immutable'.format(type(self).__qualname__))

    @classmethod
    def from_names(cls, names):
        """
        Make an option set from an iterable of option/preset names
        (case-insensitive; empty strings are ignored).

        >>> UrlDetectorOptions.from_names(['html', 'VALIDATE_TOP_LEVEL_DOMAIN']).value
        91
        >>> UrlDetectorOptions.from_names([]) is DEFAULT
        True
        >>> UrlDetectorOptions.from_names(['nonexistent'])   # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
          ...
        UrlDetectorOptionsError: ...
        """
        options = []
        for name in names:
            name = name.strip().upper()
            if not name:
                continue
            try:
                options.append(NAME_TO_OPTIONS[name])
            except KeyError:
                raise UrlDetectorOptionsError(
                    'unknown URL detector option name: {!a} (the known '
                    'ones are: {})'.format(name, ', '.join(sorted(NAME_TO_OPTIONS)))
                ) from None
        return compose(*options)

    @property
    def value(self):
        return self._value

    @property
    def names(self):
        """The names of the basic flags this option set consists of."""
        return tuple(name for name, bit in _BASIC_FLAG_NAME_TO_BIT.items()
                     if self._value & bit)

    def has_flag(self, flag):
        """
        Whether *all* flags of `flag` (another option set) are set.

        >>> HTML.has_flag(XML), XML.has_flag(HTML)
        (True, False)
        """
        return (self._value & flag.value) == flag.value

    __contains__ = has_flag

    def __or__(self, other):
        if not isinstance(other, UrlDetectorOptions):
            return NotImplemented
        return compose(self, other)

    def __eq__(self, other):
        if not isinstance(other, UrlDetectorOptions):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((UrlDetectorOptions, self._value))

    def __repr__(self):
        return '<{} {}>'.format(type(self).__qualname__,
                                '|'.join(self.names) or 'DEFAULT')

    def __reduce__(self):
        return (type(self), (self._value,))


def compose(*options):
    """
    Compose the given option sets into one.

    Raises:
        `UrlDetectorOptionsError` if `ALLOW_SINGLE_LEVEL_DOMAIN` would
        be mixed with any formatting option.

    >>> compose() is DEFAULT
    True
    >>> compose(QUOTE_MATCH, SINGLE_QUOTE_MATCH, BRACKET_MATCH) == JAVASCRIPT
    True
    """
    value = 0
    for opt in options:
        if not isinstance(opt, UrlDetectorOptions):
            raise UrlDetectorOptionsError(
                '{!a} is not a {} instance'.format(opt, UrlDetectorOptions.__qualname__))
        value |= opt.value
    if not value:
        return DEFAULT
    return UrlDetectorOptions(value)


#
# Public constants (option sets)
#

DEFAULT = UrlDetectorOptions(0)

QUOTE_MATCH = UrlDetectorOptions(_QUOTE_MATCH_BIT)
SINGLE_QUOTE_MATCH = UrlDetectorOptions(_SINGLE_QUOTE_MATCH_BIT)
BRACKET_MATCH = UrlDetectorOptions(_BRACKET_MATCH_BIT)

JSON = UrlDetectorOptions(_QUOTE_MATCH_BIT | _BRACKET_MATCH_BIT)
JAVASCRIPT = UrlDetectorOptions(_QUOTE_MATCH_BIT | _SINGLE_QUOTE_MATCH_BIT | _BRACKET_MATCH_BIT)
XML = UrlDetectorOptions(_XML_BIT | _QUOTE_MATCH_BIT)
HTML = UrlDetectorOptions(_HTML_BIT | _XML_BIT | _SINGLE_QUOTE_MATCH_BIT | _QUOTE_MATCH_BIT)

ALLOW_SINGLE_LEVEL_DOMAIN = UrlDetectorOptions(_ALLOW_SINGLE_LEVEL_DOMAIN_BIT)
VALIDATE_TOP_LEVEL_DOMAIN = UrlDetectorOptions(_VALIDATE_TOP_LEVEL_DOMAIN_BIT)
ALLOW_COLON_WITHOUT_SLASHES = UrlDetectorOptions(_ALLOW_COLON_WITHOUT_SLASHES_BIT)
EXTENDED_SCHEME_DETECTION = UrlDetectorOptions(_EXTENDED_SCHEME_DETECTION_BIT)

NAME_TO_OPTIONS = {
    'DEFAULT': DEFAULT,
    'QUOTE_MATCH': QUOTE_MATCH,
    'SINGLE_QUOTE_MATCH': SINGLE_QUOTE_MATCH,
    'BRACKET_MATCH': BRACKET_MATCH,
    'JSON': JSON,
    'JAVASCRIPT': JAVASCRIPT,
    'XML': XML,
    'HTML': HTML,
    'ALLOW_SINGLE_LEVEL_DOMAIN': ALLOW_SINGLE_LEVEL_DOMAIN,
    'VALIDATE_TOP_LEVEL_DOMAIN': VALIDATE_TOP_LEVEL_DOMAIN,
    'ALLOW_COLON_WITHOUT_SLASHES': ALLOW_COLON_WITHOUT_SLASHES,
    'EXTENDED_SCHEME_DETECTION': EXTENDED_SCHEME_DETECTION,
}

for _name, _opts in NAME_TO_OPTIONS.items():
    setattr(UrlDetectorOptions, _name, _opts)
del _name, _opts
