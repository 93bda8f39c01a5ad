# Copyright (c) 2025 NASK. All rights reserved.

"""
*n6urldetect*: detection of URLs in free text, with host normalization.

The most important names are exported here:

>>> [str(url.normalized()) for url in detect_urls('see: WWW.Example.COM/a/../b')]
['http://www.example.com/b']
"""

from n6urldetect.detector import (
    UrlDetector,
    detect_urls,
)
from n6urldetect.exceptions import (
    EndOfInputError,
    IdnaConversionError,
    MalformedUrlError,
    N6UrlDetectError,
    UrlDetectorOptionsError,
)
from n6urldetect.host_normalizer import (
    HostNormalizer,
    decode_ipv4,
    decode_ipv6,
)
from n6urldetect.options import (
    UrlDetectorOptions,
    compose,
)
from n6urldetect.tld_helpers import (
    TldRegistry,
    get_default_tld_registry,
)
from n6urldetect.url import (
    DetectedUrl,
    NormalizedUrl,
    parse_url,
)


__all__ = [
    'UrlDetector',
    'detect_urls',
    'EndOfInputError',
    'IdnaConversionError',
    'MalformedUrlError',
    'N6UrlDetectError',
    'UrlDetectorOptionsError',
    'HostNormalizer',
    'decode_ipv4',
    'decode_ipv6',
    'UrlDetectorOptions',
    'compose',
    'TldRegistry',
    'get_default_tld_registry',
    'DetectedUrl',
    'NormalizedUrl',
    'parse_url',
]
