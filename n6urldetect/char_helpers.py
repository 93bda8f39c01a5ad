# Copyright (c) 2025 NASK. All rights reserved.

"""
Character classification helpers used by the URL scanner and the host
normalizer.

All functions are pure: they take a single character (a `str` of
length 1) or, in the case of `split_by_dot()`, a text string.

>>> is_hex('F'), is_hex('g')
(True, False)
>>> split_by_dot('192%2e168。' '1.1')
['192', '168', '1', '1']
"""

import re
import string


#
# Public constants
#

#: The four characters browsers accept as domain label separators.
DOT_CHARS = frozenset('.\u3002\uff0e\uff61')

#: Case-insensitive percent-encoded form of the ASCII dot.
HEX_ENCODED_DOT = '2e'

#: Matches any *dot-equivalent* (one of `DOT_CHARS` or "%2e"/"%2E").
DOT_EQUIVALENT_REGEX = re.compile('[.\u3002\uff0e\uff61]|%2e|%2E')

ALPHA_CHARS = frozenset(string.ascii_letters)
NUMERIC_CHARS = frozenset(string.digits)
HEX_CHARS = frozenset(string.hexdigits)
ALPHA_NUMERIC_CHARS = ALPHA_CHARS | NUMERIC_CHARS
UNRESERVED_CHARS = ALPHA_NUMERIC_CHARS | frozenset('-._~')

#: Characters from this one on are treated as *international*
#: (i.e., as legitimate domain name characters).
INTERNATIONAL_CHAR_START = '\u00c0'


def is_hex(c):
    """
    >>> [is_hex(c) for c in 'a0F']
    [True, True, True]
    >>> [is_hex(c) for c in 'gG-']
    [False, False, False]
    """
    return c in HEX_CHARS


def is_alpha(c):
    return c in ALPHA_CHARS


def is_numeric(c):
    return c in NUMERIC_CHARS


def is_alpha_numeric(c):
    return c in ALPHA_NUMERIC_CHARS


def is_unreserved(c):
    """
    Whether the character is an URI-unreserved one (RFC 3986).

    >>> all(is_unreserved(c) for c in 'aZ09-._~')
    True
    >>> any(is_unreserved(c) for c in '%:/[]@ ')
    False
    """
    return c in UNRESERVED_CHARS


def is_dot(c):
    """
    >>> [is_dot(c) for c in '.。．｡,']
    [True, True, True, True, False]
    """
    return c in DOT_CHARS


def is_hard_delimiter(c):
    r"""
    Whether the character always terminates a URL candidate.

    These are: whitespace characters, NUL and the remaining ASCII
    control characters.

    >>> [is_hard_delimiter(c) for c in ' \t\n\r\x00\x7f\x1b']
    [True, True, True, True, True, True, True]
    >>> [is_hard_delimiter(c) for c in 'a"<%']
    [False, False, False, False]
    """
    return c.isspace() or c < ' ' or c == '\x7f'


def is_international(c):
    return c >= INTERNATIONAL_CHAR_START


def split_by_dot(text):
    r"""
    Split the given text on any *dot-equivalent*.

    Dot-equivalents are the ASCII dot, its three Unicode look-alikes
    (U+3002, U+FF0E, U+FF61) and the percent-encoded dot ("%2e" or
    "%2E").  Empty segments are preserved (including leading and
    trailing ones).

    >>> split_by_dot('192.168.1.1')
    ['192', '168', '1', '1']
    >>> split_by_dot('..')
    ['', '', '']
    >>> split_by_dot('192.39%2e1%2E1')
    ['192', '39', '1', '1']
    >>> split_by_dot('as｡awe.a3r23.lkajsf0ijr....')
    ['as', 'awe', 'a3r23', 'lkajsf0ijr', '', '', '', '']
    >>> split_by_dot('%2e%2easdf')
    ['', '', 'asdf']
    >>> split_by_dot('ksjdfh.asdfkj.we%2')
    ['ksjdfh', 'asdfkj', 'we%2']
    >>> split_by_dot('')
    ['']
    """
    return DOT_EQUIVALENT_REGEX.split(text)


def is_encoded_dot(text):
    """
    >>> is_encoded_dot('%2e'), is_encoded_dot('%2E'), is_encoded_dot('%2f')
    (True, True, False)
    """
    return len(text) == 3 and text[0] == '%' and text[1:].lower() == HEX_ENCODED_DOT
