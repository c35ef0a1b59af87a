'''Input files.

    The format is libconfig, as in

        prefix = "Token";
        mappings = { ignoreCase = true; digit = "0-9"; };
        keywords = [ "if", "else", "elif,elif,elsif" ];

    Files ending in `.json` may hold the same structure as a JSON object.

'''
import collections
import json
import logging
import re
from pathlib import Path

import libconf

from .errors import SpecError

log = logging.getLogger(__name__)

PREFIX_RE = re.compile(r'[A-Za-z0-9_]*\Z')
LINE_RE   = re.compile(r'row (\d+)')

Source = collections.namedtuple('Source', 'filename prefix mappings keywords')


def parse_libconfig(text: str, filename=None):
    try:
        return libconf.loads(text, filename=filename)
    except libconf.ConfigParseError as e:
        line = LINE_RE.search(str(e))
        raise SpecError('syntax error: {}'.format(e), filename, line and int(line.group(1))) from e


def parse_json(text: str, filename=None):
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SpecError('syntax error: {}'.format(e.msg), filename, e.lineno) from e


def parse(text: str, filename=None, format=None) -> Source:
    '''str -> Source. `format` is 'json' or 'libconfig'; guessed from `filename` when omitted.'''
    if format is None:
        format = 'json' if filename is not None and str(filename).endswith('.json') else 'libconfig'
    document = (parse_json if format == 'json' else parse_libconfig)(text, filename)
    if not isinstance(document, dict):
        raise SpecError('top level must be a group', filename)

    prefix = document.get('prefix', '')
    if not isinstance(prefix, str) or not PREFIX_RE.match(prefix):
        raise SpecError('invalid prefix {!r}'.format(prefix), filename)

    mappings = document.get('mappings')
    if mappings is not None:
        if not isinstance(mappings, dict):
            raise SpecError('\'mappings\' must be a group', filename)
        mappings = list(mappings.items())

    keywords = document.get('keywords')
    if keywords is None:
        log.warning('no \'keywords\' in %s', filename)
    elif not isinstance(keywords, (list, tuple)):
        raise SpecError('\'keywords\' must be an array', filename)
    else:
        keywords = list(keywords)

    for key in document:
        if key not in ('prefix', 'mappings', 'keywords'):
            log.warning('ignoring unknown setting "%s" in %s', key, filename)
    return Source(None if filename is None else str(filename), prefix, mappings, keywords)


def load(path) -> Source:
    path = Path(path)
    try:
        text = path.read_bytes().decode('utf-8')
    except UnicodeDecodeError as e:
        raise SpecError('not valid UTF-8 ({})'.format(e.reason), str(path)) from e
    return parse(text, str(path))
