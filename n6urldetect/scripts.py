# Copyright (c) 2013-2025 NASK. All rights reserved.

import argparse
import json
import sys
import textwrap

from n6urldetect.common_helpers import (
    ascii_str,
    limit_str,
)
from n6urldetect.config import (
    DEFAULT_CONFIG_PATHS,
    Config,
    ConfigError,
)
from n6urldetect.detector import UrlDetector
from n6urldetect.exceptions import UrlDetectorOptionsError
from n6urldetect.log_helpers import (
    get_logger,
    logging_configured,
)
from n6urldetect.options import (
    NAME_TO_OPTIONS,
    UrlDetectorOptions,
)
from n6urldetect.tld_helpers import TldRegistry


LOGGER = get_logger(__name__)


OUTPUT_FORMATS = ('text', 'json')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# (max length of input file names in error messages)
_FILE_NAME_LIMIT = 200


class DetectUrlsScript:

    """
    Detect URLs in the given text files (or in the standard input) and
    print them, one per line (either as plain text or as JSON objects).
    """

    @classmethod
    def run_from_commandline(cls, argv=None):
        parser = cls.make_argument_parser()
        arguments = cls.parse_arguments(parser, argv)
        try:
            script = cls(**arguments)
        except (ConfigError, UrlDetectorOptionsError) as exc:
            sys.exit(ascii_str(exc))
        return script.run()

    @classmethod
    def make_argument_parser(cls):
        parser = argparse.ArgumentParser(
            prog='n6urldetect',
            description=textwrap.dedent(cls.__doc__))
        parser.add_argument('files', metavar='FILE', nargs='*',
                            help=('the text file(s) to scan (if none is '
                                  'given, the standard input is read)'))
        parser.add_argument('-f', '--format', choices=OUTPUT_FORMATS, default='text',
                            help='the output format (default: text)')
        parser.add_argument('-n', '--normalize', action='store_true',
                            help='print the normalized URLs')
        parser.add_argument('-o', '--options', metavar='NAME[,NAME...]', default=None,
                            help=('URL detector options/presets (case-insensitive; '
                                  'override those from the config), one or more '
                                  'of: {}'.format(', '.join(sorted(NAME_TO_OPTIONS)))))
        parser.add_argument('-c', '--config', metavar='PATH', action='append', default=None,
                            help=('the config file(s) to read (can be given multiple '
                                  'times; by default: {})'.format(
                                      ', '.join(DEFAULT_CONFIG_PATHS))))
        parser.add_argument('-t', '--tld-file', metavar='PATH', default=None,
                            help=('a list of top-level domains, in the format of '
                                  "IANA's tlds-alpha-by-domain.txt (used if TLD "
                                  'validation is enabled)'))
        parser.add_argument('-l', '--log-level', type=str.upper, choices=LOG_LEVELS,
                            default='WARNING',
                            help='the logging level (default: WARNING)')
        return parser

    @classmethod
    def parse_arguments(cls, parser, argv=None):
        arguments_namespace = parser.parse_args(argv)
        return vars(arguments_namespace)


    def __init__(self, files=(), format='text', normalize=False, options=None,
                 config=None, tld_file=None, log_level='WARNING', stdin=None, stdout=None):
        self.files = list(files)
        self.format = format
        self.normalize = normalize
        self.log_level = log_level
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        config_obj = Config.from_files(config if config is not None else DEFAULT_CONFIG_PATHS)
        self.detector_kwargs = config_obj.make_detector_kwargs()
        if options is not None:
            self.detector_kwargs['options'] = UrlDetectorOptions.from_names(options.split(','))
        if tld_file is not None:
            self.detector_kwargs['tld_registry'] = TldRegistry.from_iana_file(tld_file)
        LOGGER.debug('URL detector options: %r', self.detector_kwargs['options'])

    def run(self):
        exit_code = 0
        if not self.files:
            self.process_text(self.stdin.read())
        for path in self.files:
            try:
                with open(path, encoding='utf-8', errors='surrogateescape') as f:
                    text = f.read()
            except OSError as exc:
                sys.stderr.write('n6urldetect: cannot read {} ({})\n'.format(
                    limit_str(ascii_str(path), _FILE_NAME_LIMIT, middle_cut=True),
                    ascii_str(exc)))
                exit_code = 1
                continue
            self.process_text(text)
        return exit_code

    def process_text(self, text):
        detector = UrlDetector(text, **self.detector_kwargs)
        for url in detector.iter_urls():
            self.stdout.write(self.format_url(url) + '\n')

    def format_url(self, url):
        if self.format == 'json':
            d = url.to_dict()
            if self.normalize:
                d['normalized_url'] = str(url.normalized())
            return json.dumps(d, sort_keys=True)
        if self.normalize:
            return str(url.normalized())
        return url.original_url


def main():
    # (the logging level is taken from the command line before
    # anything else is done, so that config-related messages are
    # logged as requested)
    parser = DetectUrlsScript.make_argument_parser()
    log_level = parser.parse_known_args()[0].log_level
    with logging_configured(log_level):
        sys.exit(DetectUrlsScript.run_from_commandline())


if __name__ == '__main__':
    main()
