# Copyright (c) 2025 NASK. All rights reserved.

"""
Detection of URLs in free text.

>>> [url.original_url for url in detect_urls('this is a link: www.google.com')]
['www.google.com']
>>> [url.original_url for url in detect_urls('http://http://www.google.com')]
['http://www.google.com']
>>> detect_urls('check out my http:///hello')
[]
>>> [str(url) for url in detect_urls('mail me: john@example.com or see [::1]:8080/x')]
['http://john@example.com/', 'http://[::1]:8080/x']
"""

import collections
import enum

from n6urldetect.char_helpers import (
    is_alpha,
    is_alpha_numeric,
    is_dot,
    is_hard_delimiter,
    is_hex,
)
from n6urldetect.domain_name_reader import (
    DomainNameReader,
    ReaderNextState,
)
from n6urldetect.exceptions import UrlDetectorOptionsError
from n6urldetect.host_normalizer import HostNormalizer
from n6urldetect.log_helpers import get_logger
from n6urldetect.options import (
    ALLOW_COLON_WITHOUT_SLASHES,
    ALLOW_SINGLE_LEVEL_DOMAIN,
    BRACKET_MATCH,
    DEFAULT,
    EXTENDED_SCHEME_DETECTION,
    HTML,
    QUOTE_MATCH,
    SINGLE_QUOTE_MATCH,
    VALIDATE_TOP_LEVEL_DOMAIN,
    XML,
    UrlDetectorOptions,
)
from n6urldetect.text_reader import (
    CandidateBuffer,
    InputTextReader,
)
from n6urldetect.tld_helpers import get_default_tld_registry
from n6urldetect.url import (
    HOST,
    PATH,
    PORT,
    FRAGMENT,
    QUERY,
    SCHEME,
    USERINFO,
    UrlMarker,
)
from n6urldetect.url_helpers import (
    BASIC_URL_SCHEMES,
    EXTENDED_URL_SCHEMES,
)


LOGGER = get_logger(__name__)


HTML_MAILTO = 'mailto:'

#: The separators between a scheme name and the rest of a URL
#: (the encoded colon included).
SCHEME_SEPARATORS = ('://', '%3a//')
SCHEME_SEPARATORS_WITHOUT_SLASHES = (':', '%3a')

#: The total distance the scanner may move backwards is limited to
#: this number multiplied by the length of the text (plus a constant).
REWIND_BUDGET_FACTOR = 16
MIN_REWIND_BUDGET = 256

#: How many times the scanner may start a new candidate at the same
#: position (further attempts skip the character at that position).
MAX_CLEAN_STATE_VISITS = 8

_CLOSING_TO_OPENING_CHARS = {
    ']': '[',
    '}': '{',
    ')': '(',
    '>': '<',
}


class CharacterMatch(enum.Enum):
    NOT_MATCHED = 1
    MATCH_START = 2
    MATCH_STOP = 3


class UrlDetector:

    """
    Detect URLs in the given text.

    Constructor args/kwargs:
        `content`:
            The text (a `str`).
        `options` (default: `n6urldetect.options.DEFAULT`):
            A `UrlDetectorOptions` instance.
        `host_normalizer` (optional):
            A `HostNormalizer` instance used to normalize the hosts of
            detected URLs (by default, a new one is created).
        `tld_registry` (optional):
            An object providing the `is_registered(label)` method (such
            as a `n6urldetect.tld_helpers.TldRegistry`); used only if
            the `VALIDATE_TOP_LEVEL_DOMAIN` option is set (by default,
            the one returned by `get_default_tld_registry()` is used).

    Each call of `detect()`/`iter_urls()` scans the text anew (the
    detector itself does not keep any scanning state).

    >>> detector = UrlDetector('ftp:example.com', ALLOW_COLON_WITHOUT_SLASHES)
    >>> [(url.scheme, url.host) for url in detector.detect()]
    [('ftp', 'example.com')]
    >>> [(url.scheme, url.host) for url in UrlDetector('ftp:example.com').detect()]
    [('http', 'example.com')]
    """

    def __init__(self, content, options=None, *, host_normalizer=None, tld_registry=None):
        if not isinstance(content, str):
            raise TypeError('{!a} is not a str'.format(content))
        if options is None:
            options = DEFAULT
        if not isinstance(options, UrlDetectorOptions):
            raise UrlDetectorOptionsError(
                '{!a} is not a {} instance'.format(options, UrlDetectorOptions.__qualname__))
        if options.has_flag(VALIDATE_TOP_LEVEL_DOMAIN) and tld_registry is None:
            tld_registry = get_default_tld_registry()
        self._content = content
        self._options = options
        self._host_normalizer = (host_normalizer if host_normalizer is not None
                                 else HostNormalizer())
        self._tld_registry = tld_registry

    def __repr__(self):
        return '{}(<{} characters>, {!r})'.format(
            type(self).__qualname__,
            len(self._content),
            self._options)

    @property
    def options(self):
        return self._options

    def detect(self):
        """
        Get a list of the detected URLs (`DetectedUrl` instances),
        ordered by their positions in the text, not overlapping.
        """
        return list(self.iter_urls())

    def iter_urls(self):
        """Like `detect()` but return an iterator."""
        scanner = _UrlScanner(
            self._content,
            self._options,
            self._host_normalizer,
            self._tld_registry)
        return iter(scanner.scan())


def detect_urls(text, options=None, **kwargs):
    """
    Detect URLs in the given text (a shortcut for `UrlDetector(text,
    options, **kwargs).detect()`).
    """
    return UrlDetector(text, options, **kwargs).detect()



#
# Non-public local classes
#

class _RewindLimitedReader(InputTextReader):

    """
    An `InputTextReader` with a limited total distance of rewinding.

    When the limit is exhausted, `go_back()` and backward `seek()`
    calls are ignored (so the scanning is guaranteed to end in time
    proportional to the length of the text).
    """

    def __init__(self, content):
        super().__init__(content)
        self._rewind_budget = REWIND_BUDGET_FACTOR * len(content) + MIN_REWIND_BUDGET

    @property
    def rewind_budget(self):
        return self._rewind_budget

    def go_back(self):
        if self._consume_rewind_budget(1):
            super().go_back()

    def seek(self, position):
        distance = self.position - position
        if distance <= 0 or self._consume_rewind_budget(distance):
            super().seek(position)

    def _consume_rewind_budget(self, distance):
        if distance > self._rewind_budget:
            if self._rewind_budget > 0:
                LOGGER.debug('The rewind limit has been reached at position %d '
                             '(text length: %d); from now on the text is scanned '
                             'forward only', self.position, len(self.content))
                self._rewind_budget = 0
            return False
        self._rewind_budget -= distance
        return True


class _UrlScanner:

    """A single scan of a text (holds the whole scanning state)."""

    def __init__(self, content, options, host_normalizer, tld_registry):
        self._content = content
        self._options = options
        self._host_normalizer = host_normalizer
        self._tld_registry = tld_registry

        self._quote_match = options.has_flag(QUOTE_MATCH)
        self._single_quote_match = options.has_flag(SINGLE_QUOTE_MATCH)
        self._bracket_match = options.has_flag(BRACKET_MATCH)
        self._xml_match = options.has_flag(XML)
        self._html_match = options.has_flag(HTML)
        self._allow_single_level_domain = options.has_flag(ALLOW_SINGLE_LEVEL_DOMAIN)
        self._allow_colon_without_slashes = options.has_flag(ALLOW_COLON_WITHOUT_SLASHES)
        self._valid_schemes = (EXTENDED_URL_SCHEMES if options.has_flag(EXTENDED_SCHEME_DETECTION)
                               else BASIC_URL_SCHEMES)

        self._reader = _RewindLimitedReader(content)
        self._buffer = CandidateBuffer(self._reader)
        self._url_marker = UrlMarker()
        self._has_scheme = False
        self._dont_match_ipv6 = False
        self._quote_start = False
        self._single_quote_start = False
        self._character_match = collections.Counter()
        self._clean_state_visits = collections.Counter()
        self._found = []

    def scan(self):
        self._read_default()
        result = []
        last_end = 0
        # (the rewinds after a failed IPv6 or user info attempt can
        # produce candidates overlapping or preceding earlier ones)
        for url in sorted(self._found, key=lambda url: (url.start, -url.end)):
            if url.start >= last_end:
                result.append(url)
                last_end = url.end
        return result

    #
    # The main loop

    def _read_default(self):
        reader = self._reader
        buffer = self._buffer
        length = 0
        while not reader.eof():
            if not buffer:
                length = 0
                if self._is_clean_state_visit_limit_exceeded():
                    reader.read()
                    self._read_end(False)
                    continue

            c = reader.read()

            if is_hard_delimiter(c):
                # a single-level domain with a scheme (such as "http://localhost")?
                if self._allow_single_level_domain and buffer and self._has_scheme:
                    reader.go_back()
                    self._read_domain_name(buffer.substring(length))
                self._read_end(False)
                length = 0

            elif c == '%':
                if reader.can_read_chars(2) and reader.peek(2).lower() == '3a':
                    # an encoded colon
                    self._append_last_read_and_next(2)
                    length = self._process_colon(length)
                elif (reader.can_read_chars(2)
                      and is_hex(reader.peek_char(0))
                      and is_hex(reader.peek_char(1))):
                    self._append_last_read_and_next(2)
                    if not self._read_domain_name(buffer.substring(length)):
                        self._read_end(False)
                    length = 0
                else:
                    buffer.append_last_read()

            elif is_dot(c):
                buffer.append_last_read()
                self._read_domain_name(buffer.substring(length))
                length = 0

            elif c == '@':
                # the host after a username
                if buffer:
                    self._url_marker.set_index(USERINFO, buffer.start + length)
                    buffer.append_last_read()
                    self._read_domain_name(None)
                    length = 0

            elif c == '[':
                bracket_counted = False
                if self._dont_match_ipv6:
                    if self._check_matching_character(c) is not CharacterMatch.NOT_MATCHED:
                        bracket_counted = True
                        self._read_end(False)
                        length = 0
                beginning = reader.position
                if not self._has_scheme:
                    buffer.clear()
                    length = 0
                buffer.append_last_read()
                if not self._read_domain_name(buffer.substring(length)):
                    # not an IPv6 address: look for URLs inside the brackets
                    reader.seek(beginning)
                    self._dont_match_ipv6 = True
                    if not bracket_counted:
                        self._check_matching_character(c)
                length = 0

            elif c == '/':
                if self._has_scheme or (self._allow_single_level_domain and len(buffer) > 1):
                    # e.g., "http://3232235521/..." or "localhost/..."
                    reader.go_back()
                    self._read_domain_name(buffer.substring(length))
                    length = 0
                else:
                    # maybe a scheme-relative URL ("//example.com/...")?
                    self._read_end(False)
                    buffer.append_last_read()
                    self._has_scheme = self._read_html5_root()
                    length = len(buffer)

            elif c == ':':
                buffer.append_last_read()
                length = self._process_colon(length)

            else:
                if self._check_matching_character(c) is not CharacterMatch.NOT_MATCHED:
                    self._read_end(False)
                    length = 0
                else:
                    buffer.append_last_read()

        if self._allow_single_level_domain and buffer and self._has_scheme:
            self._read_domain_name(buffer.substring(length))

    def _is_clean_state_visit_limit_exceeded(self):
        position = self._reader.position
        self._clean_state_visits[position] += 1
        if self._clean_state_visits[position] > MAX_CLEAN_STATE_VISITS:
            LOGGER.debug('Skipping the character at position %d '
                         '(scanned too many times)', position)
            return True
        return False

    #
    # Parts of URLs

    def _process_colon(self, length):
        reader = self._reader
        buffer = self._buffer
        if self._has_scheme:
            # the colon after a username?
            if not self._read_user_pass(length) and buffer:
                # no: unread the colon so that the domain name reader
                # can take care of it (as a port separator)
                reader.go_back()
                buffer.delete_last()
                backtrack_on_fail = buffer.start + length
                if not self._read_domain_name(buffer.substring(length)):
                    reader.seek(backtrack_on_fail)
                    self._read_end(False)
                length = 0
        elif self._read_scheme() and buffer:
            self._has_scheme = True
            length = len(buffer)
        elif buffer and self._allow_single_level_domain and reader.can_read_chars(1):
            # e.g., "localhost:8000"
            reader.go_back()
            buffer.delete_last()
            if buffer:
                self._read_domain_name(buffer.text)
            else:
                # (a lone colon: skip it)
                reader.read()
                self._read_end(False)
            length = 0
        else:
            self._read_end(False)
            length = 0
        if not buffer:
            length = 0
        return length

    def _read_scheme(self):
        reader = self._reader
        buffer = self._buffer
        if (self._html_match
              and len(buffer) >= len(HTML_MAILTO)
              and buffer.text[-len(HTML_MAILTO):].lower() == HTML_MAILTO):
            return self._read_end(False)

        original_length = len(buffer)
        slashes = 0
        while not reader.eof():
            c = reader.read()
            if c == '/':
                buffer.append_last_read()
                if slashes == 1:
                    return self._accept_scheme(SCHEME_SEPARATORS)
                slashes += 1
            elif (is_hard_delimiter(c)
                  or self._check_matching_character(c) is not CharacterMatch.NOT_MATCHED):
                buffer.append_last_read()
                return False
            elif c == '[':
                # maybe an IPv6 address follows
                reader.go_back()
                return False
            elif original_length > 0 or slashes > 0 or not is_alpha(c):
                # not a scheme; maybe a username and password
                reader.go_back()
                if (slashes == 0
                      and self._allow_colon_without_slashes
                      and self._accept_scheme(SCHEME_SEPARATORS_WITHOUT_SLASHES)):
                    return True
                return self._read_user_pass(0)
        return False

    def _accept_scheme(self, separators):
        # A scheme is accepted if the buffer ends with a known scheme
        # name followed by a separator; then anything before the scheme
        # name is cut off (e.g., `href=http://...` -> `http://...`).
        buffer = self._buffer
        text = buffer.text.lower()
        for separator in separators:
            if text.endswith(separator):
                scheme_start = self._find_scheme_name_start(text, len(text) - len(separator))
                if scheme_start is not None:
                    buffer.cut_front(buffer.start + scheme_start)
                    self._url_marker.set_index(SCHEME, buffer.start)
                    return True
        return False

    def _find_scheme_name_start(self, text, name_end):
        run_start = name_end
        while run_start > 0 and _is_scheme_name_char(text[run_start - 1]):
            run_start -= 1
        for start in range(run_start, name_end):
            if is_alpha(text[start]) and text[start:name_end] in self._valid_schemes:
                return start
        return None

    def _read_user_pass(self, beginning_of_username):
        reader = self._reader
        buffer = self._buffer
        start = len(buffer)
        done = False
        # (a dot or "[" means that it might be a host, not a username)
        rollback = False
        while not done and not reader.eof():
            c = reader.read()
            if c == '@':
                buffer.append_last_read()
                self._url_marker.set_index(USERINFO, buffer.start + beginning_of_username)
                return self._read_domain_name('')
            elif is_dot(c) or c == '[':
                buffer.append_last_read()
                rollback = True
            elif (c in '#/'
                  or is_hard_delimiter(c)
                  or self._is_matching_character(c)):
                rollback = True
                done = True
            else:
                buffer.append_last_read()
        if rollback:
            # no username and password (no "@" found)
            distance = len(buffer) - start
            buffer.truncate(start)
            reader.seek(max(reader.position - distance - (1 if done else 0), 0))
            return False
        return self._read_end(False)

    def _read_html5_root(self):
        reader = self._reader
        if reader.eof():
            return False
        c = reader.read()
        if c == '/':
            self._buffer.append_last_read()
            self._url_marker.set_index(SCHEME, self._buffer.start)
            return True
        reader.go_back()
        self._read_end(False)
        return False

    def _read_domain_name(self, current):
        buffer = self._buffer
        host_index = buffer.end if current is None else buffer.end - len(current)
        self._url_marker.set_index(HOST, host_index)
        domain_name_reader = DomainNameReader(
            self._reader,
            buffer,
            current,
            self._options,
            self._url_marker,
            self._check_matching_character,
            self._tld_registry)
        state = domain_name_reader.read_domain_name()
        if state is ReaderNextState.VALID_DOMAIN_NAME:
            return self._read_end(True)
        if state is ReaderNextState.READ_FRAGMENT:
            return self._read_fragment()
        if state is ReaderNextState.READ_PATH:
            return self._read_path()
        if state is ReaderNextState.READ_PORT:
            return self._read_port()
        if state is ReaderNextState.READ_QUERY_STRING:
            return self._read_query_string()
        if state is ReaderNextState.READ_USER_PASS:
            if self._url_marker.get_index(USERINFO) is not None:
                # (at most one user info part per URL)
                return self._read_end(False)
            host_index = self._url_marker.get_index(HOST)
            self._url_marker.unset_index(HOST)
            found_count = len(self._found)
            self._process_colon(host_index - buffer.start)
            return len(self._found) > found_count
        return self._read_end(False)

    def _read_port(self):
        reader = self._reader
        buffer = self._buffer
        # (the port part starts with the colon)
        self._url_marker.set_index(PORT, buffer.end - 1)
        port_length = 0
        while not reader.eof():
            c = reader.read()
            port_length += 1
            if c == '/':
                buffer.append_last_read()
                return self._read_path()
            elif c == '?':
                buffer.append_last_read()
                return self._read_query_string()
            elif c == '#':
                buffer.append_last_read()
                return self._read_fragment()
            elif not c.isascii() or not c.isdigit():
                # the URL ends here
                reader.go_back()
                if port_length == 1:
                    # no port digits (e.g., "example.com:hello"): drop the colon
                    self._drop_lone_port_colon()
                return self._read_end(True)
            else:
                buffer.append_last_read()
        if port_length == 0:
            self._drop_lone_port_colon()
        return self._read_end(True)

    def _drop_lone_port_colon(self):
        self._buffer.delete_last()
        self._url_marker.unset_index(PORT)

    def _read_path(self):
        reader = self._reader
        buffer = self._buffer
        self._url_marker.set_index(PATH, buffer.end - 1)
        while not reader.eof():
            c = reader.read()
            if (is_hard_delimiter(c)
                  or self._check_matching_character(c) is CharacterMatch.MATCH_STOP):
                return self._read_end(True)
            buffer.append_last_read()
            if c == '?':
                return self._read_query_string()
            if c == '#':
                return self._read_fragment()
        return self._read_end(True)

    def _read_query_string(self):
        reader = self._reader
        buffer = self._buffer
        self._url_marker.set_index(QUERY, buffer.end - 1)
        while not reader.eof():
            c = reader.read()
            if c == '#':
                buffer.append_last_read()
                return self._read_fragment()
            if (is_hard_delimiter(c)
                  or self._check_matching_character(c) is CharacterMatch.MATCH_STOP):
                return self._read_end(True)
            buffer.append_last_read()
        return self._read_end(True)

    def _read_fragment(self):
        reader = self._reader
        buffer = self._buffer
        self._url_marker.set_index(FRAGMENT, buffer.end - 1)
        while not reader.eof():
            c = reader.read()
            if (is_hard_delimiter(c)
                  or self._check_matching_character(c) is CharacterMatch.MATCH_STOP):
                return self._read_end(True)
            buffer.append_last_read()
        return self._read_end(True)

    def _read_end(self, valid):
        buffer = self._buffer
        if valid and buffer:
            # cut off the trailing quote if the URL was preceded by one
            if self._quote_start and buffer.last_char() == '"':
                buffer.delete_last()
            if buffer:
                self._found.append(self._url_marker.make_url(
                    self._content,
                    buffer.start,
                    buffer.end,
                    self._host_normalizer))
        buffer.clear()
        self._quote_start = False
        self._single_quote_start = False
        self._has_scheme = False
        self._dont_match_ipv6 = False
        self._url_marker = UrlMarker()
        return valid

    #
    # Quotes, brackets, etc.

    def _check_matching_character(self, c):
        """
        Count the given character (if it is a quote, bracket, etc.
        and matching of such characters is enabled), telling whether
        it starts or stops a range (or is not matched at all).
        """
        if (c == '"' and self._quote_match) or (c == "'" and self._single_quote_match):
            if c == '"':
                quote_start = self._quote_start
                self._quote_start = True
            else:
                quote_start = self._single_quote_start
                self._single_quote_start = True
            self._character_match[c] += 1
            if quote_start or self._character_match[c] % 2 == 0:
                return CharacterMatch.MATCH_STOP
            return CharacterMatch.MATCH_START
        if (self._bracket_match and c in '[{(') or (self._xml_match and c == '<'):
            self._character_match[c] += 1
            return CharacterMatch.MATCH_START
        if (self._bracket_match and c in ']})') or (self._xml_match and c == '>'):
            self._character_match[c] += 1
            opening = _CLOSING_TO_OPENING_CHARS[c]
            # (a closing character ends a range only if its opening one was seen)
            if self._character_match[opening] >= self._character_match[c]:
                return CharacterMatch.MATCH_STOP
            return CharacterMatch.MATCH_START
        return CharacterMatch.NOT_MATCHED

    def _is_matching_character(self, c):
        return ((c == '"' and self._quote_match)
                or (c == "'" and self._single_quote_match)
                or (self._bracket_match and c in '[]{}()')
                or (self._xml_match and c in '<>'))

    #
    # Helpers

    def _append_last_read_and_next(self, number_of_chars):
        self._buffer.append_last_read()
        for _ in range(number_of_chars):
            self._reader.read()
            self._buffer.append_last_read()



#
# Non-public local helpers
#

def _is_scheme_name_char(c):
    return is_alpha_numeric(c) or c in '+-.'
