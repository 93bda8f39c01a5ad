# Copyright (c) 2025 NASK. All rights reserved.

"""
Exception classes of *n6urldetect*.

>>> issubclass(UrlDetectorOptionsError, N6UrlDetectError)
True
>>> issubclass(UrlDetectorOptionsError, ValueError)
True
>>> issubclass(EndOfInputError, IndexError)
True
"""


class N6UrlDetectError(Exception):
    """The base class of all *n6urldetect*-specific exceptions."""


class UrlDetectorOptionsError(N6UrlDetectError, ValueError):

    """
    Raised when URL detector options are invalid.

    For example, when the *single-level domain* option is composed
    with any of the *formatting* options (such as *HTML*), or when an
    unknown option name is given.
    """


class EndOfInputError(N6UrlDetectError, IndexError):

    """
    Raised by `InputTextReader.read()` when there is nothing more to read.

    >>> exc = EndOfInputError(11)
    >>> print(exc)
    end of input reached (position: 11)
    >>> exc.position
    11
    """

    def __init__(self, position, *args):
        super().__init__('end of input reached (position: {})'.format(position), *args)
        self.position = position


class IdnaConversionError(N6UrlDetectError, UnicodeError):
    """Raised by IDNA converters when a host cannot be converted to ASCII."""


class MalformedUrlError(N6UrlDetectError, ValueError):
    """Raised by `parse_url()` when the text is not exactly one URL."""
