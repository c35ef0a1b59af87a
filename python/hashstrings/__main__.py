'''hashstrings CLI - process hash files into header files.

Usage:
    python -m hashstrings tokens.hash
    python -m hashstrings -x .inc --reproducible a.hash b.hash
'''

import argparse
import logging
import sys
from pathlib import Path

from . import __version__, generate
from . import config as cfg
from .errors import HashStringsError

log = logging.getLogger('hashstrings')


def build_parser(prog: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description='process hash file into a header file.',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'{prog}, version {__version__}',
        help='display version info (and exit)',
    )
    parser.add_argument(
        '-x',
        '--extension',
        metavar='<extension>',
        default=cfg.get_default('extension', '.h'),
        help='set the extension to use for output files (default: %(default)s)',
    )
    parser.add_argument(
        '-p',
        '--prefix',
        metavar='<prefix>',
        default=cfg.get_default('prefix'),
        help='override the prefix given in the input files',
    )
    parser.add_argument(
        '--reproducible',
        action='store_true',
        default=cfg.get_default('reproducible', False),
        help='derive the include guard from the input instead of the clock',
    )
    parser.add_argument(
        '-c',
        '--check',
        action='store_true',
        default=cfg.get_default('check', False),
        help='compile each generated table and verify every keyword resolves',
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=1 if cfg.get_default('verbose', False) else 0,
        help='report progress (twice for debug output)',
    )
    parser.add_argument('files', metavar='<file>', nargs='+', type=Path, help='input files')
    return parser


def main(argv=None) -> int:
    '''Main entry point.'''
    prog = Path(sys.argv[0]).name if argv is None else 'hashstrings'
    if prog in ('__main__.py', ''):
        prog = 'hashstrings'
    args = build_parser(prog).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format=f'### {prog}: %(message)s',
    )

    for path in args.files:
        try:
            generate(
                path,
                extension=args.extension,
                prefix=args.prefix,
                reproducible=args.reproducible,
                check=args.check,
                tool=prog,
            )
        except HashStringsError as e:
            log.error('%s', e)
            return 1
        except OSError as e:
            log.error('unable to process "%s" (%s: %s)', e.filename or path, e.errno, e.strerror)
            return e.errno or 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
