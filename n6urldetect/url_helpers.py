# Copyright (c) 2025 NASK. All rights reserved.

"""
URL-component-related helpers: percent-decoding/encoding, host dot
clean-up, path normalization and scheme-related constants.
"""

from urllib.parse import quote, unquote

from n6urldetect.char_helpers import split_by_dot



#
# Public constants
#

# (based on various sources, mainly on some RFCs, but not only...)
URL_SCHEME_TO_DEFAULT_PORT = {
    'ftp': 21,
    'ftps': 990,
    'gopher': 70,
    'http': 80,
    'https': 443,
    'imap': 143,
    'ldap': 389,
    'ldaps': 636,
    'news': 119,
    'nntp': 119,
    'snews': 563,
    'snntp': 563,
    'telnet': 23,
    'ws': 80,
    'wss': 443,
}

#: The scheme assumed when a detected URL has none.
DEFAULT_SCHEME = 'http'

#: The schemes recognized by the URL detector by default.
BASIC_URL_SCHEMES = frozenset({'http', 'https', 'ftp', 'ftps'})

#: The schemes recognized when *extended scheme detection* is enabled
#: (the above ones + a selection of IANA's *permanent* URI schemes
#: which are followed by "//" in real-world URLs).
EXTENDED_URL_SCHEMES = BASIC_URL_SCHEMES | frozenset({
    'acap', 'afp', 'cap', 'coap', 'coaps', 'crid', 'dav', 'dict', 'dns',
    'file', 'geo', 'go', 'gopher', 'h323', 'iax', 'icap', 'im', 'imap',
    'ipp', 'ipps', 'iris', 'ldap', 'mid', 'msrp', 'msrps', 'mtqp',
    'mupdate', 'news', 'nfs', 'ni', 'nih', 'nntp', 'opaquelocktoken',
    'pop', 'pres', 'reload', 'rtsp', 'rtsps', 'rtspu', 'service', 'session',
    'sftp', 'shttp', 'sieve', 'sip', 'sips', 'smb', 'snews', 'snmp', 'soap.beep',
    'soap.beeps', 'ssh', 'stun', 'stuns', 'tag', 'telnet', 'tftp', 'tip',
    'tn3270', 'turn', 'turns', 'tv', 'vemmi', 'vnc', 'ws', 'wss', 'xcon',
    'xcon-userid', 'xmlrpc.beep', 'xmlrpc.beeps', 'xmpp', 'z39.50r',
    'z39.50s',
})

#: The printable ASCII characters which are *not* percent-encoded by
#: `percent_encode()` (all of them except "#" and "%").
PERCENT_ENCODE_SAFE_CHARS = ''.join(
    chr(i) for i in range(33, 127)
    if chr(i) not in '#%')

# (max number of decoding rounds made by `percent_decode()`)
_MAX_DECODING_ROUNDS = 32



#
# Public helpers
#

def percent_decode(s):
    r"""
    Repeatedly decode *%XX* sequences until nothing more can be decoded.

    Each *%XX* becomes the single character whose code point is the
    byte value (so that `percent_encode()` restores the original bytes).

    >>> percent_decode('%77%77%77%2e%67%75%6d%62%6c%61%72%2e%63%6e')
    'www.gumblar.cn'
    >>> percent_decode('%2525252e')
    '.'
    >>> percent_decode('%e9t%41')
    'étA'
    >>> percent_decode('100%')
    '100%'
    """
    for _ in range(_MAX_DECODING_ROUNDS):
        if '%' not in s:
            break
        decoded = unquote(s, encoding='latin-1')
        if decoded == s:
            break
        s = decoded
    return s


def percent_encode(s):
    r"""
    Percent-encode control characters, space, non-ASCII characters as
    well as "#" and "%".

    Characters whose code points are not greater than 255 are encoded
    as single bytes (reverting what `percent_decode()` does); any other
    characters are encoded as UTF-8 (lone surrogates produced by the
    "surrogateescape" error handler become the original bytes).

    >>> percent_encode('a b#c%d\x7f')
    'a%20b%23c%25d%7F'
    >>> percent_encode('\xe9/?ł')
    '%E9/?%C5%82'
    >>> percent_encode(percent_decode('%e9%41%2F'))
    '%E9A/'
    >>> percent_encode(b'\xfe\xc5\x82'.decode('utf-8', 'surrogateescape'))
    '%FE%C5%82'
    """
    return ''.join(
        quote(chunk, safe=PERCENT_ENCODE_SAFE_CHARS,
              encoding=('latin-1' if chunk[0] <= '\xff' else 'utf-8'),
              errors='surrogateescape')
        for chunk in _split_by_latin1_range(s))


def remove_extra_dots(host):
    """
    Collapse any runs of *dot-equivalents* into single ASCII dots,
    dropping leading and trailing dots.

    >>> remove_extra_dots('..www.example..com.')
    'www.example.com'
    >>> remove_extra_dots('www%2eexample。com')
    'www.example.com'
    >>> remove_extra_dots('...')
    ''
    """
    return '.'.join(label for label in split_by_dot(host) if label)


def normalize_path(path):
    """
    Normalize a URL path.

    The path is percent-decoded, runs of slashes are collapsed, the
    "." and ".." segments are resolved and the result is
    percent-encoded again (see: `percent_encode()`).  An empty path
    becomes "/".

    >>> normalize_path('')
    '/'
    >>> normalize_path('/a/./b/../c//d/')
    '/a/c/d/'
    >>> normalize_path('/../../%61%20b/..')
    '/'
    >>> normalize_path('/x/%2e%2e/y')
    '/y'
    >>> normalize_path('/a/b/.')
    '/a/b/'
    """
    if not path:
        return '/'
    decoded = percent_decode(path)
    segments = decoded.split('/')
    resolved = []
    for seg in segments[1:-1] if decoded.startswith('/') else segments[:-1]:
        _apply_path_segment(resolved, seg)
    last = segments[-1]
    trailing_slash = last in ('', '.', '..')
    if trailing_slash:
        _apply_path_segment(resolved, last)
    else:
        resolved.append(last)
    normalized = '/' + '/'.join(resolved)
    if trailing_slash and resolved:
        normalized += '/'
    return percent_encode(normalized)


def get_default_port(scheme):
    """
    >>> get_default_port('https'), get_default_port('HTTP'), get_default_port('foo')
    (443, 80, -1)
    """
    return URL_SCHEME_TO_DEFAULT_PORT.get(scheme.lower(), -1)


def extract_scheme_name(raw_scheme):
    """
    Get the scheme name from the raw scheme part of a URL.

    >>> extract_scheme_name('HTTP://')
    'http'
    >>> extract_scheme_name('https%3A//')
    'https'
    >>> extract_scheme_name('ftp:')
    'ftp'
    """
    raw_scheme = raw_scheme.lower()
    for sep in (':', '%3a'):
        index = raw_scheme.find(sep)
        if index != -1:
            return raw_scheme[:index]
    return raw_scheme



#
# Non-public local helpers
#

def _split_by_latin1_range(s):
    chunk = []
    chunk_is_latin1 = None
    for c in s:
        is_latin1 = c <= '\xff'
        if chunk and is_latin1 != chunk_is_latin1:
            yield ''.join(chunk)
            chunk = []
        chunk.append(c)
        chunk_is_latin1 = is_latin1
    if chunk:
        yield ''.join(chunk)


def _apply_path_segment(resolved, seg):
    if seg in ('', '.'):
        return
    if seg == '..':
        if resolved:
            resolved.pop()
        return
    resolved.append(seg)
