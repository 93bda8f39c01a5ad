# Copyright (c) 2025 NASK. All rights reserved.

"""
The host (domain name, IPv4 or IPv6 address) sub-scanner used by
`n6urldetect.detector.UrlDetector`.
"""

import enum
import re

from n6urldetect.char_helpers import (
    is_alpha,
    is_alpha_numeric,
    is_dot,
    is_encoded_dot,
    is_hard_delimiter,
    is_hex,
    is_international,
    is_numeric,
    is_unreserved,
    split_by_dot,
)
from n6urldetect.options import (
    ALLOW_SINGLE_LEVEL_DOMAIN,
    VALIDATE_TOP_LEVEL_DOMAIN,
)


#
# Public constants
#

MAX_LABEL_LENGTH = 63
MAX_NUMBER_OF_LABELS = 127
MAX_DOMAIN_LENGTH = 255

MIN_TOP_LEVEL_DOMAIN_LENGTH = 2
MAX_TOP_LEVEL_DOMAIN_LENGTH = 22
INTERNATIONAL_TLD_PREFIX = 'xn--'

#: The range of single-number IPv4 addresses accepted in free text
#: (smaller numbers, i.e., below 1.1.1.0, are too likely to be
#: something else).
MIN_NUMERIC_DOMAIN_VALUE = 16843008
MAX_NUMERIC_DOMAIN_VALUE = 4294967295

MAX_IPV4_PART = 255
MAX_IPV6_SECTIONS = 8
MAX_IPV6_HEX_DIGITS = 4

_DIGITS_REGEXES = {
    16: re.compile(r'\A[0-9a-fA-F]+\Z'),
    8: re.compile(r'\A[0-7]+\Z'),
    10: re.compile(r'\A[0-9]+\Z'),
}


class ReaderNextState(enum.Enum):
    INVALID_DOMAIN_NAME = 1
    VALID_DOMAIN_NAME = 2
    READ_FRAGMENT = 3
    READ_PATH = 4
    READ_PORT = 5
    READ_QUERY_STRING = 6
    READ_USER_PASS = 7


class DomainNameReader:

    """
    Read (and validate) the host part of a URL candidate.

    Constructor args:
        `reader`:
            The `InputTextReader` the detector reads from.
        `buffer`:
            The detector's `CandidateBuffer` (the characters making up
            the host are appended to it).
        `current`:
            The already read (and buffered) beginning of the host or
            `None` (if nothing of the host has been read yet).
        `options`:
            The detector's `UrlDetectorOptions`.
        `url_marker`:
            The detector's `UrlMarker` (updated if the beginning of
            the candidate turns out to be invalid and is cut off).
        `character_handler`:
            A callable taking one character: called for the character
            which terminated the host (so that the detector can count
            quotes, brackets, etc.).
        `tld_registry` (optional):
            Used if the `VALIDATE_TOP_LEVEL_DOMAIN` option is set.
    """

    def __init__(self, reader, buffer, current, options, url_marker,
                 character_handler, tld_registry=None):
        self._reader = reader
        self._buffer = buffer
        self._current = current
        self._url_marker = url_marker
        self._character_handler = character_handler
        self._allow_single_level_domain = options.has_flag(ALLOW_SINGLE_LEVEL_DOMAIN)
        self._tld_registry = (tld_registry if options.has_flag(VALIDATE_TOP_LEVEL_DOMAIN)
                              else None)

        # the position (within the buffer) at which the host starts
        self._start_domain_name = 0
        self._dots = 0
        self._current_label_length = 0
        self._top_level_length = 0
        self._numeric = False
        self._seen_bracket = False
        self._seen_complete_bracket_set = False
        self._zone_index = False

    def read_domain_name(self):
        """
        Read the host, returning a `ReaderNextState` member that tells
        the detector what to do next.
        """
        if self._read_current() is ReaderNextState.INVALID_DOMAIN_NAME:
            return ReaderNextState.INVALID_DOMAIN_NAME

        reader = self._reader
        buffer = self._buffer

        # a hexadecimal IP address (such as 0xC00002EB)?
        if (not self._current
              and reader.can_read_chars(3)
              and reader.peek(2).lower() == '0x'):
            for _ in range(2):
                reader.read()
                buffer.append_last_read()
            self._current_label_length += 2
            self._top_level_length = self._current_label_length

        done = False
        while not done and not reader.eof():
            c = reader.read()
            if is_hard_delimiter(c):
                done = True
            elif c == '/':
                return self._check_domain_name_valid(ReaderNextState.READ_PATH, c)
            elif c == ':' and (not self._seen_bracket or self._seen_complete_bracket_set):
                return self._check_domain_name_valid(ReaderNextState.READ_PORT, c)
            elif c == '?':
                return self._check_domain_name_valid(ReaderNextState.READ_QUERY_STRING, c)
            elif c == '#':
                return self._check_domain_name_valid(ReaderNextState.READ_FRAGMENT, c)
            elif c == '@':
                # it was a username (or username:password), not a host
                reader.go_back()
                return ReaderNextState.READ_USER_PASS
            elif is_dot(c) or (c == '%'
                               and reader.can_read_chars(2)
                               and is_encoded_dot(c + reader.peek(2))):
                if self._current_label_length < 1:
                    # an empty label ("hello..")
                    done = True
                else:
                    buffer.append_last_read()
                    if not is_dot(c):
                        for _ in range(2):
                            reader.read()
                            buffer.append_last_read()
                    # (dots within an IPv6 zone index are not label separators)
                    if not self._zone_index:
                        if self._current_label_length > MAX_LABEL_LENGTH:
                            return ReaderNextState.INVALID_DOMAIN_NAME
                        self._dots += 1
                        self._current_label_length = 0
            elif (self._seen_bracket
                  and not self._seen_complete_bracket_set
                  and (is_hex(c) or c in ':[]%')):
                # within an IPv6 address
                if c == ':':
                    self._current_label_length = 0
                elif c == '[':
                    # restart from this bracket
                    reader.go_back()
                    return ReaderNextState.INVALID_DOMAIN_NAME
                elif c == ']':
                    self._seen_complete_bracket_set = True
                    self._zone_index = False
                elif c == '%':
                    self._zone_index = True
                else:
                    self._current_label_length += 1
                self._numeric = False
                buffer.append_last_read()
            elif is_alpha_numeric(c) or c == '-' or is_international(c):
                if self._seen_complete_bracket_set:
                    # e.g., "[fe80::]www.example.com"
                    reader.go_back()
                    done = True
                else:
                    # (x/X are allowed in hexadecimal IP addresses)
                    if c not in 'xX' and not is_numeric(c):
                        self._numeric = False
                    buffer.append_last_read()
                    self._current_label_length += 1
                    self._top_level_length = self._current_label_length
            elif c == '[' and not self._seen_bracket:
                self._seen_bracket = True
                self._numeric = False
                buffer.append_last_read()
            elif c == '[' and self._seen_complete_bracket_set:
                # e.g., "[::][..."
                reader.go_back()
                done = True
            elif (c == '%'
                  and reader.can_read_chars(2)
                  and is_hex(reader.peek_char(0))
                  and is_hex(reader.peek_char(1))):
                buffer.append_last_read()
                for _ in range(2):
                    reader.read()
                    buffer.append_last_read()
                self._current_label_length += 3
                self._top_level_length = self._current_label_length
            else:
                self._character_handler(c)
                done = True

        return self._check_domain_name_valid(ReaderNextState.VALID_DOMAIN_NAME)

    def _read_current(self):
        current = self._current
        buffer = self._buffer
        if current is None:
            self._start_domain_name = len(buffer)
            return ReaderNextState.VALID_DOMAIN_NAME

        # e.g., ".hello"
        if (len(current) == 1 and is_dot(current)) or is_encoded_dot(current):
            return ReaderNextState.INVALID_DOMAIN_NAME

        self._start_domain_name = len(buffer) - len(current)
        self._numeric = True

        # if invalid characters are found, the domain name is
        # restarted just after the last of them
        new_start = 0

        length = len(current)
        is_all_hex_so_far = length > 2 and current[0] == '0' and current[1] in 'xX'
        index = 2 if is_all_hex_so_far else 0
        while index < length:
            c = current[index]
            if is_dot(c) or (c == '%' and is_encoded_dot(current[index:index + 3])):
                self._dots += 1
                self._current_label_length = 0
                index += 1 if is_dot(c) else 3
                continue
            self._current_label_length += 1
            self._top_level_length = self._current_label_length
            if self._current_label_length > MAX_LABEL_LENGTH:
                return ReaderNextState.INVALID_DOMAIN_NAME
            if c == '[':
                self._seen_bracket = True
                self._numeric = False
            elif (c == '%'
                  and index + 2 < length
                  and is_hex(current[index + 1])
                  and is_hex(current[index + 2])):
                # (an encoded character counts as 3 characters, as in the text)
                self._current_label_length += 2
                self._top_level_length = self._current_label_length
                self._numeric = False
                index += 2
            elif is_all_hex_so_far:
                if not is_hex(c):
                    self._numeric = False
                    is_all_hex_so_far = False
                    # (re-examine this character as a non-hex one)
                    self._current_label_length -= 1
                    index -= 1
            elif is_alpha(c) or c == '-' or is_international(c):
                self._numeric = False
            elif not is_numeric(c) and not self._allow_single_level_domain:
                new_start = index + 1
                self._current_label_length = 0
                self._top_level_length = 0
                self._numeric = True
                self._dots = 0
                self._seen_bracket = False
            index += 1

        if new_start > 0:
            if new_start < length:
                new_absolute_start = buffer.end - length + new_start
                buffer.cut_front(new_absolute_start)
                self._url_marker.cut_front(new_absolute_start)
                self._start_domain_name = 0
            if new_start >= length or buffer.text == '.':
                return ReaderNextState.INVALID_DOMAIN_NAME

        return ReaderNextState.VALID_DOMAIN_NAME

    def _check_domain_name_valid(self, valid_state, last_char=None):
        buffer = self._buffer
        text = buffer.text
        domain = text[self._start_domain_name:]

        # (the maximum domain length includes the trailing dot, and the
        # number of labels includes the root one)
        has_last_label = self._current_label_length > 0
        domain_length = len(domain) + (1 if has_last_label else 0)
        label_count = self._dots + (1 if has_last_label else 0)

        if domain_length >= MAX_DOMAIN_LENGTH or label_count > MAX_NUMBER_OF_LABELS:
            valid = False
        elif self._current_label_length > MAX_LABEL_LENGTH and not self._seen_bracket:
            valid = False
        elif self._numeric:
            valid = is_valid_ipv4(domain.lower())
        elif self._seen_bracket:
            valid = is_valid_ipv6(domain.lower())
        elif ((has_last_label and self._dots >= 1)
              or (self._dots >= 2 and not has_last_label)
              or (self._allow_single_level_domain and self._dots == 0)):
            if has_last_label:
                trailing_dot_length = 0
            else:
                trailing_dot_length = 3 if is_encoded_dot(text[-3:]) else 1
            top_start = len(text) - self._top_level_length - trailing_dot_length
            top_start = max(top_start, 0)
            tld = text[top_start:top_start + self._top_level_length]
            valid = (tld[:len(INTERNATIONAL_TLD_PREFIX)].lower() == INTERNATIONAL_TLD_PREFIX
                     or (MIN_TOP_LEVEL_DOMAIN_LENGTH
                         <= self._top_level_length
                         <= MAX_TOP_LEVEL_DOMAIN_LENGTH))
            if valid and self._tld_registry is not None:
                valid = self._tld_registry.is_registered(tld)
        else:
            valid = False

        if valid:
            if last_char is not None:
                buffer.append_last_read()
            return valid_state

        # (unread the last character, so that, e.g., "00:41.<br />"
        # is not detected as "00:41.br")
        if last_char is not None:
            self._reader.go_back()
        return ReaderNextState.INVALID_DOMAIN_NAME



#
# Address validation (for the purposes of detection)
#

def is_valid_ipv4(domain):
    """
    Check whether the given (lowercase) text is an IPv4 address in
    one of the formats accepted in free text: 4 dot-separated,
    non-empty parts (each of them being a decimal, octal or hex
    number between 0 and 255) or a single number between 16843008
    and 4294967295.

    >>> is_valid_ipv4('192.168.1.1'), is_valid_ipv4('0xc0.0250.0x1.01')
    (True, True)
    >>> is_valid_ipv4('3232235521'), is_valid_ipv4('0xc00002eb'), is_valid_ipv4('030000001353')
    (True, True, True)
    >>> is_valid_ipv4('192%2e168%2e1%2e1')
    True
    >>> is_valid_ipv4('1.1.1'), is_valid_ipv4('1.1.1.1.1'), is_valid_ipv4('0.0.0.256')
    (False, False, False)
    >>> is_valid_ipv4('10..1.1'), is_valid_ipv4('10.1.1.'), is_valid_ipv4('3.1415')
    (False, False, False)
    >>> is_valid_ipv4('1234'), is_valid_ipv4('4294967296'), is_valid_ipv4('')
    (False, False, False)
    """
    if not domain:
        return False
    parts = split_by_dot(domain)
    if len(parts) == 1:
        value = _parse_ip_number(domain, allow_empty=False)
        return (value is not None
                and MIN_NUMERIC_DOMAIN_VALUE <= value <= MAX_NUMERIC_DOMAIN_VALUE)
    if len(parts) == 4:
        for part in parts:
            if not part:
                return False
            value = _parse_ip_number(part, allow_empty=True)
            if value is None or value > MAX_IPV4_PART:
                return False
        return True
    return False


def is_valid_ipv6(domain):
    """
    Check (syntactically) whether the given (lowercase) text is an IPv6
    address enclosed in brackets.

    An IPv4 address can be the last part; a zone index can follow the
    address (after "%").

    >>> is_valid_ipv6('[fe80:aaaa:aaaa:aaaa:3dd0:7f8e:57b7:34d5]')
    True
    >>> is_valid_ipv6('[::]'), is_valid_ipv6('[::1]'), is_valid_ipv6('[dead::85a3:0:0:8a2e:370:7334]')
    (True, True, True)
    >>> is_valid_ipv6('[bcad::aaaa:aaaa:3dd0:7f8e:222.168.1.1]')
    True
    >>> is_valid_ipv6('[::ffff:0xc0%2e0x00%2e0x02%2e0xeb%251]')
    True
    >>> is_valid_ipv6('[::bad:ffff:0301.0250.0002.0353%-.-.-.-....-....--]')
    True
    >>> is_valid_ipv6('[:::]'), is_valid_ipv6('[:0]'), is_valid_ipv6('[adf]'), is_valid_ipv6('[]')
    (False, False, False, False)
    >>> is_valid_ipv6('[fe80:aaaa:aaaa:aaaa:3dd0:7f8e:57b7:34d5f]')
    False
    >>> is_valid_ipv6('[fe80:aaaa:aaaa:aaaa:3dd0:7f8e:57b7:34d5:addd]')
    False
    >>> is_valid_ipv6('[0:ffff:192.168.1.1::]')
    False
    >>> is_valid_ipv6('[::1:2:3:4:5:6:7]'), is_valid_ipv6('[1:2:3:4:5:6:7::%eth0]')
    (True, True)
    >>> is_valid_ipv6('[::1:2:3:4:5:1.2.3.4]')
    True
    >>> is_valid_ipv6('[1::2:3:4:5:6:7:8]'), is_valid_ipv6('[::1:2:3:4:5:6:7:8]')
    (False, False)
    """
    length = len(domain)
    # not "[...]", or just "[]", or "[:x..." where x is not ":"
    if (length < 3
          or domain[0] != '['
          or domain[-1] != ']'
          or (domain[1] == ':' and domain[2] != ':')):
        return False

    sections = 1
    hex_digits = 0
    prev_char = ''
    last_section = []
    hex_section = True
    zone_index_mode = False
    double_colon_seen = False
    double_colon_end = None

    index = 0
    while index < length:
        c = domain[index]
        if c == '[':
            pass
        elif c in '%]':
            if c == '%':
                if is_encoded_dot(domain[index:index + 3]):
                    last_section.append(domain[index:index + 3])
                    index += 3
                    hex_section = False
                    prev_char = domain[index - 1]
                    continue
                zone_index_mode = True
            if not hex_section and (not zone_index_mode or c == '%'):
                # an IPv4 address takes 2 sections
                if is_valid_ipv4(''.join(last_section)):
                    sections += 1
                else:
                    return False
        elif c == ':':
            if prev_char == ':':
                if double_colon_seen:
                    return False
                double_colon_seen = True
                double_colon_end = index
            if not hex_section:
                return False
            hex_section = True
            hex_digits = 0
            sections += 1
            last_section = []
        elif zone_index_mode:
            if not is_unreserved(c):
                return False
        else:
            last_section.append(c)
            if hex_section and is_hex(c):
                hex_digits += 1
            else:
                hex_section = False
        max_sections = MAX_IPV6_SECTIONS + 1 if double_colon_seen else MAX_IPV6_SECTIONS
        if hex_digits > MAX_IPV6_HEX_DIGITS or sections > max_sections:
            return False
        prev_char = c
        index += 1

    if sections > MAX_IPV6_SECTIONS:
        # (only a "::" at either end counts as one section more than it stands for)
        if double_colon_end != 2 and domain[double_colon_end + 1] not in '%]':
            return False

    # (a single section means something like "[adf]")
    return sections != 1 and (sections >= MAX_IPV6_SECTIONS or double_colon_seen)



#
# Non-public local helpers
#

def _parse_ip_number(text, allow_empty):
    if len(text) > 2 and text.startswith('0x'):
        digits, base = text[2:], 16
    elif text.startswith('0'):
        digits, base = text[1:], 8
    else:
        digits, base = text, 10
    if not digits:
        return 0 if allow_empty else None
    if not _DIGITS_REGEXES[base].search(digits):
        return None
    return int(digits, base)
