# Copyright (c) 2013-2025 NASK. All rights reserved.

import collections
import contextlib
import logging
import os.path
import sys
import time


TOPLEVEL_PACKAGES = frozenset({'n6urldetect'})

DEFAULT_LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


#
# Logging preparation'n'configuration

def get_logger(name=None):
    """
    Like logging.getLogger(...) but replacing '__main__' with a sensible name.

    For example, if the script path is '/whatever/n6urldetect/scripts.py'
    get_logger('__main__') is equivalent to logging.getLogger('n6urldetect.scripts').
    """
    if name == '__main__':
        # try to get the script path from __main__.__file__
        script_path = getattr(sys.modules['__main__'], '__file__', None)
        if not script_path:
            # or, if __main__ does not have a non-blank __file__ attribute,
            # extract the script path from sys.argv...
            script_path = sys.argv[0]
        # strip off the filename extension...
        remaining = os.path.splitext(script_path)[0]
        # ..and pop path name segments up to
        # (and including) the toplevel package name
        aggregated_segments = collections.deque()
        while True:
            remaining, segment = os.path.split(remaining)
            segment = segment.replace('.', 'D')  # just in case of '.' or '..'
            aggregated_segments.appendleft(segment)
            if segment in TOPLEVEL_PACKAGES or remaining in ('', '/'):
                break
        name = '.'.join(aggregated_segments)
    return logging.getLogger(name)


_LOGGER = get_logger(__name__)


class UTCFormatter(logging.Formatter):

    """
    A formatter that *always* uses UTC time.

    >>> record = logging.makeLogRecord({'created': 0.0, 'msecs': 7.0})
    >>> UTCFormatter().formatTime(record)
    '1970-01-01 00:00:00,007 UTC'
    """

    converter = time.gmtime

    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        if datefmt:
            s = time.strftime(datefmt, ct)
        else:
            t = time.strftime("%Y-%m-%d %H:%M:%S", ct)
            s = "%s,%03d" % (t, record.msecs)
        # the ' UTC' suffix is added *only* if it
        # is certain that we have a UTC time
        return s + ' UTC'


def configure_logging(level=logging.WARNING, fmt=DEFAULT_LOG_FORMAT, stream=None):
    """
    Configure the root logger to emit records to `stream` (by default:
    `sys.stderr`) using `UTCFormatter`.

    `level` can be a level number or name (e.g., 'DEBUG').

    Note: libraries should never call this function; it is intended to
    be called by scripts only (see: `n6urldetect.scripts`).
    """
    if isinstance(level, str):
        level_name = level.strip().upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError('unknown logging level: {!a}'.format(level_name))
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(UTCFormatter(fmt))
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    _LOGGER.debug('logging configured (level: %s)', logging.getLevelName(level))
    return handler


@contextlib.contextmanager
def logging_configured(level=logging.WARNING, fmt=DEFAULT_LOG_FORMAT, stream=None):
    handler = configure_logging(level, fmt, stream)
    try:
        yield
    except SystemExit as exc:
        if exc.code:
            _LOGGER.critical("SystemExit(%r) occurred. Exiting...", exc.code)
        else:
            _LOGGER.info("SystemExit(%r) occurred. Exiting...", exc.code)
        raise
    except KeyboardInterrupt:
        _LOGGER.warning("KeyboardInterrupt occurred. Exiting...")
        sys.exit(1)
    except Exception:
        _LOGGER.critical('Irrecoverable problem. Exiting...', exc_info=True)
        raise
    finally:
        logging.getLogger().removeHandler(handler)
