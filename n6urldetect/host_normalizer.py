# Copyright (c) 2025 NASK. All rights reserved.

"""
Host normalization: IDNA conversion, percent-decoding, decoding of
numeric (IPv4 and IPv6) hosts into 16-byte addresses, and producing
the canonical textual form of a host.

>>> normalizer = HostNormalizer()
>>> normalizer.normalize('0x92.168.1.1')
('146.168.1.1', b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\xff\\xff\\x92\\xa8\\x01\\x01')
>>> normalizer.normalize('[fefe::]')[0]
'[fefe:0:0:0:0:0:0:0]'
>>> normalizer.normalize('www.EXAMPLE%2ecom.')
('www.example.com', None)
"""

import ipaddress
import re

from n6urldetect.char_helpers import split_by_dot
from n6urldetect.exceptions import IdnaConversionError
from n6urldetect.idna_helpers import Uts46IdnaConverter
from n6urldetect.log_helpers import get_logger
from n6urldetect.url_helpers import (
    percent_decode,
    percent_encode,
    remove_extra_dots,
)


LOGGER = get_logger(__name__)


#
# Public constants
#

ADDRESS_LENGTH = 16

#: The offset (in a 16-byte address) at which an IPv4 address starts.
IPV4_MAPPED_IPV6_START_OFFSET = 12

#: The prefix of the IPv4-mapped IPv6 address layout.
IPV4_MAPPED_IPV6_PREFIX = bytes(10) + b'\xff\xff'

MAX_IPV4_PART = 0xFF
MAX_NUMERIC_IPV4_VALUE = 0xFFFFFFFF
MAX_IPV6_HEXTET = 0xFFFF

MIN_IPV6_FIELDS = 3
IPV6_HEXTETS = 8
IPV6_HEXTETS_BEFORE_IPV4_TAIL = 6

_IPV4_PART_DIGITS_REGEXES = {
    16: re.compile(r'\A[0-9a-fA-F]+\Z'),
    8: re.compile(r'\A[0-7]+\Z'),
    10: re.compile(r'\A[0-9]+\Z'),
}
_HEX_SECTION_REGEX = re.compile(r'\A[0-9a-fA-F]*\Z')



#
# Address decoding
#

def decode_ipv4(host):
    """
    Try to decode the given host as an IPv4 address, in any of the
    formats browsers accept.

    The host must consist of exactly 4 or exactly 1 *dot-separated*
    parts.  Each part is interpreted as a hexadecimal number (if
    prefixed with "0x"), as an octal one (if prefixed with "0") or as
    a decimal one; an empty part means 0.  With 4 parts, each of them
    must be in the range 0..255; a single part must be in the range
    0..4294967295 (its value is the whole address).

    Returns:
        16 `bytes` (the *IPv4-mapped IPv6* layout: 10 zero bytes, 2
        `0xFF` bytes and the 4 bytes of the IPv4 address) or `None`
        if the host is not an IPv4 address.

    >>> decode_ipv4('192.168.1.1')[12:]
    b'\\xc0\\xa8\\x01\\x01'
    >>> decode_ipv4('192.168.1.1')[:12] == IPV4_MAPPED_IPV6_PREFIX
    True
    >>> decode_ipv4('3279880203')[12:]
    b'\\xc3\\x7f\\x00\\x0b'
    >>> decode_ipv4('0xc0.0250.02.0353%2e') is None      # 5 parts
    True
    >>> decode_ipv4('0xc0.0250.02.0353')[12:]
    b'\\xc0\\xa8\\x02\\xeb'
    >>> decode_ipv4('0x000c0.0x.0.')[12:]
    b'\\xc0\\x00\\x00\\x00'
    >>> decode_ipv4('192.168.-3.1') is None
    True
    >>> decode_ipv4('1.2.3.256') is None
    True
    >>> decode_ipv4('4294967296') is None
    True
    >>> decode_ipv4('') is None
    True
    """
    if not host:
        return None
    parts = split_by_dot(host)
    if len(parts) not in (1, 4):
        return None
    values = []
    for part in parts:
        value = _parse_ipv4_part(part)
        if value is None:
            return None
        values.append(value)
    if len(values) == 4:
        if any(value > MAX_IPV4_PART for value in values):
            return None
        octets = bytes(values)
    else:
        [value] = values
        if value > MAX_NUMERIC_IPV4_VALUE:
            return None
        octets = value.to_bytes(4, 'big')
    return IPV4_MAPPED_IPV6_PREFIX + octets


def decode_ipv6(host):
    """
    Try to decode the given text (the content between the brackets,
    *without* the brackets) as an IPv6 address.

    Returns:
        A pair: 16 `bytes` (or `None` if the text is not an IPv6
        address) and the *zone index* (`str`; possibly empty).

    An IPv4 address (in any format accepted by `decode_ipv4()`) can be
    used as the last part.  Only one "::" (zero compression point) is
    accepted.

    >>> addr, zone = decode_ipv6('fe80::1%eth0')
    >>> addr.hex(), zone
    ('fe800000000000000000000000000001', 'eth0')
    >>> decode_ipv6('::ffff:0xC0.0x00.0x02.0xEB%1')[0].hex()
    '00000000000000000000ffffc00002eb'
    >>> decode_ipv6('0::ffff:077.0x22.222.11')[0].hex()
    '00000000000000000000ffff3f22de0b'
    >>> decode_ipv6('0:ffff::077.0x22.222.11')[0].hex()
    '0000ffff00000000000000003f22de0b'
    >>> decode_ipv6('::')[0] == bytes(16)
    True
    >>> decode_ipv6(':::')
    (None, '')
    >>> decode_ipv6('1::2::3')
    (None, '')
    >>> decode_ipv6('1:2:3')
    (None, '')
    >>> decode_ipv6('::-34:50')
    (None, '')
    >>> decode_ipv6('::10000')
    (None, '')
    >>> decode_ipv6('::1:2:3:4:5:6:7')[0].hex()
    '00000001000200030004000500060007'
    """
    parts = host.split(':')
    if len(parts) < MIN_IPV6_FIELDS:
        return None, ''
    last_part, _, zone = parts[-1].partition('%')
    ipv4_address = None
    if not _HEX_SECTION_REGEX.search(last_part):
        ipv4_address = decode_ipv4(last_part)
        if ipv4_address is None:
            return None, ''
    hextet_fields = parts[:-1] + ([] if ipv4_address else [last_part])
    target = IPV6_HEXTETS if ipv4_address is None else IPV6_HEXTETS_BEFORE_IPV4_TAIL
    # (an empty first or last field already counts as a zero hextet
    # so "::" at either end may stand for no extra hextets at all)
    missing = target - len(hextet_fields)
    hextets = []
    expanded = False
    for i, field in enumerate(hextet_fields):
        if not field and 0 < i < len(parts) - 1:
            if expanded:
                return None, ''
            expanded = True
            hextets.extend([0] * max(missing + 1, 0))
            continue
        value = _parse_hextet(field)
        if value is None:
            return None, ''
        hextets.append(value)
    if len(hextets) != target:
        return None, ''
    address = b''.join(h.to_bytes(2, 'big') for h in hextets)
    if ipv4_address is not None:
        address += ipv4_address[IPV4_MAPPED_IPV6_START_OFFSET:]
    assert len(address) == ADDRESS_LENGTH
    return address, zone


def is_ipv4_mapped(address):
    """
    >>> is_ipv4_mapped(decode_ipv4('1.2.3.4'))
    True
    >>> is_ipv4_mapped(bytes(16))
    False
    """
    return address[:IPV4_MAPPED_IPV6_START_OFFSET] == IPV4_MAPPED_IPV6_PREFIX


def format_address(address, zone='', compress_ipv6=False):
    """
    Produce the canonical textual form of a 16-byte address.

    IPv4-mapped addresses are formatted as dotted-decimal IPv4
    addresses; other ones as bracketed IPv6 addresses -- with all
    8 hextets written out (lowercase, no leading zeros) or, if
    `compress_ipv6` is true, in the RFC 5952 compressed form.  A
    non-empty `zone` is appended (after the "%25" separator).

    >>> format_address(decode_ipv4('0300.0250.0x1.1'))
    '192.168.1.1'
    >>> format_address(decode_ipv6('Aaaa::1')[0])
    '[aaaa:0:0:0:0:0:0:1]'
    >>> format_address(decode_ipv6('Aaaa::1')[0], compress_ipv6=True)
    '[aaaa::1]'
    >>> format_address(decode_ipv6('0:0:1:0:0:1:0:0')[0], compress_ipv6=True)
    '[::1:0:0:1:0:0]'
    >>> format_address(*decode_ipv6('fe80::1%eth0'))
    '[fe80:0:0:0:0:0:0:1%25eth0]'
    """
    if len(address) != ADDRESS_LENGTH:
        raise ValueError('{!a} is not a {}-byte address'.format(address, ADDRESS_LENGTH))
    if is_ipv4_mapped(address):
        return '.'.join(map(str, address[IPV4_MAPPED_IPV6_START_OFFSET:]))
    if compress_ipv6:
        text = ipaddress.IPv6Address(address).compressed
    else:
        text = ':'.join('{:x}'.format(int.from_bytes(address[i:i+2], 'big'))
                        for i in range(0, ADDRESS_LENGTH, 2))
    if zone:
        text += '%25' + percent_encode(zone)
    return '[' + text + ']'



#
# Host normalizer
#

class HostNormalizer:

    """
    Normalize hosts (see: `normalize()`).

    Constructor args/kwargs:
        `idna_converter` (optional):
            An object providing the `to_ascii()` method (see:
            `n6urldetect.idna_helpers`); by default, a new
            `Uts46IdnaConverter` is used.  Constructing a converter is
            cheap, and converters are stateless, so one converter can
            be shared by many normalizers.
        `compress_ipv6` (default: False):
            Whether IPv6 addresses shall be formatted in the RFC 5952
            compressed form.

    A `HostNormalizer` does not have any mutable state, so it can be
    freely shared (also between threads).
    """

    def __init__(self, idna_converter=None, *, compress_ipv6=False):
        self._idna_converter = (idna_converter if idna_converter is not None
                                else Uts46IdnaConverter())
        self._compress_ipv6 = compress_ipv6

    def __repr__(self):
        return '{}({!r}, compress_ipv6={!r})'.format(
            type(self).__qualname__,
            self._idna_converter,
            self._compress_ipv6)

    @property
    def idna_converter(self):
        return self._idna_converter

    @property
    def compress_ipv6(self):
        return self._compress_ipv6

    def normalize(self, host):
        """
        Normalize the given host.

        Returns:
            A pair: the normalized (canonical) host (`str`) and the
            16-byte address (`bytes`) if the host is a numeric one,
            otherwise `None`.

        This method never raises exceptions because of the host's
        content: if the IDNA conversion fails, the lower-cased host
        is returned (with `None`).

        Steps:

        1. convert the host to ASCII (using the IDNA converter);
        2. lowercase it and percent-decode it;
        3. try to decode it as an IPv6 address (if bracketed) or as
           an IPv4 address (otherwise);
        4. if decoded: format the address (see: `format_address()`);
        5. otherwise: remove extra dots and percent-encode the host.

        >>> n = HostNormalizer()
        >>> n.normalize('[0::ffff:077.0x22.222.11]')[0]
        '63.34.222.11'
        >>> n.normalize('[::192.167.2.2]')[0]
        '[0:0:0:0:0:0:c0a7:202]'
        >>> n.normalize('[-34::192.168.34.-3]')
        ('[-34::192.168.34.-3]', None)
        >>> n.normalize('sALes.com')
        ('sales.com', None)
        >>> n.normalize('%77%77%77%2e%67%75%6d%62%6c%61%72%2e%63%6e')
        ('www.gumblar.cn', None)
        >>> n.normalize('')
        ('', None)
        """
        if not host:
            return '', None
        try:
            ascii_host = self._idna_converter.to_ascii(host)
        except IdnaConversionError as exc:
            LOGGER.debug('IDNA conversion of %a failed (%s)', host, exc)
            return host.lower(), None
        decoded = percent_decode(ascii_host.lower()).lower()
        zone = ''
        if decoded.startswith('[') and decoded.endswith(']'):
            address, zone = decode_ipv6(decoded[1:-1])
        else:
            address = decode_ipv4(decoded)
        if address is not None:
            return format_address(address, zone, self._compress_ipv6), address
        return percent_encode(remove_extra_dots(decoded)), None



#
# Non-public local helpers
#

def _parse_ipv4_part(part):
    if part[:2] in ('0x', '0X'):
        digits, base = part[2:], 16
    elif part.startswith('0'):
        digits, base = part[1:], 8
    else:
        digits, base = part, 10
    if not digits:
        return 0
    if not _IPV4_PART_DIGITS_REGEXES[base].search(digits):
        return None
    return int(digits, base)


def _parse_hextet(field):
    if not field:
        return 0
    if not _HEX_SECTION_REGEX.search(field):
        return None
    value = int(field, 16)
    if value > MAX_IPV6_HEXTET:
        return None
    return value
