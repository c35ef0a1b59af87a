'''Keyword lookup tables for C.

    A table is built from an input file (see `hashstrings.source`) in three steps:
    the byte -> code map, one hash per keyword alias, and a flat binary search
    tree over those hashes. `Table.render` turns the result into a header.

        table = Table.build(source.load('tokens.hash'))
        table.lookup('while')   # -> index of the `While` keyword, 0 if unknown
        open('tokens.h', 'w').write(table.render())

'''
import logging
from pathlib import Path

from . import emit, source
from .charmap import build_charmap
from .errors import CapacityError, CollisionError, HashStringsError, SpecError
from .hasher import hash_char, hash_keywords, hash_text
from .tree import LEAF, build_tree, check_tree, find

__version__ = '0.1.0'

log = logging.getLogger(__name__)

# Names libhashstrings.h already defines.
RUNTIME_NAMES = {'kLeaf', 'kHashSeed', 'kHashPrime'}


def check_names(prefix, charmap, entries):
    '''Raise SpecError if two emitted enumerators would share a name.'''
    names = ['Unknown', 'MaxIndex'] + [e.identifier for e in entries]
    if charmap.symbols:
        names += ['Max'] + list(charmap.symbols)
    seen = set(RUNTIME_NAMES)
    for name in names:
        full = 'k' + prefix + name
        if full in seen:
            raise SpecError('"{}" is defined twice'.format(full))
        seen.add(full)


class Table:
    def __init__(self, filename, prefix, charmap, entries, records, nodes, mix=hash_char):
        self.filename = filename
        self.prefix   = prefix
        self.charmap  = charmap
        self.entries  = entries
        self.records  = records
        self.nodes    = nodes
        self.mix      = mix

    @classmethod
    def build(cls, src, mix=hash_char, prefix=None):
        '''source.Source -> Table

            :param mix: hash combiner step, see `hasher.hash_char`.
            :param prefix: overrides the prefix given in the source.

        '''
        try:
            if prefix is not None and not source.PREFIX_RE.match(prefix):
                raise SpecError('invalid prefix {!r}'.format(prefix))
            charmap = build_charmap(src.mappings)
            records, entries = hash_keywords(charmap, src.keywords or (), mix)
            nodes = build_tree(records)
            check_names(src.prefix if prefix is None else prefix, charmap, entries)
        except SpecError as e:
            if e.filename is None:
                e.filename = src.filename
            raise
        log.info('%s: %d keywords, %d aliases, %d symbol classes',
                 src.filename, len(entries), len(records), len(charmap.symbols))
        return cls(src.filename, src.prefix if prefix is None else prefix, charmap, entries, records, nodes, mix)

    def hash(self, text: str) -> int:
        return hash_text(self.charmap, text, self.mix)

    def lookup(self, text: str) -> int:
        '''str -> keyword index, 0 if the text is not one of the aliases.'''
        i = find(self.nodes, self.hash(text))
        return 0 if i == LEAF else self.nodes[i].target

    def name(self, index: int) -> str:
        return self.entries[index - 1].name if 0 < index <= len(self.entries) else '(unknown)'

    def render(self, stamp=None, tool='hashstrings') -> str:
        if not self.nodes:
            log.warning('%s: no keywords, the search table is omitted', self.filename)
        return emit.render(self, emit.make_stamp() if stamp is None else stamp, tool)


def output_path(path, extension='.h'):
    '''Input path with its suffix replaced by `extension`.'''
    path = Path(path)
    if not extension.startswith('.'):
        extension = '.' + extension
    output = path.with_suffix(extension)
    if output == path:
        raise SpecError('output would overwrite the input', str(path))
    return output


def generate(path, output=None, extension='.h', prefix=None, reproducible=False, check=False, tool='hashstrings'):
    '''Turn one input file into a header. Returns the path written.

        Nothing is written unless the whole table could be built.

    '''
    path = Path(path)
    output = Path(output) if output is not None else output_path(path, extension)
    content = path.read_bytes()
    try:
        text = content.decode('utf-8')
    except UnicodeDecodeError as e:
        raise SpecError('not valid UTF-8 ({})'.format(e.reason), str(path)) from e

    table = Table.build(source.parse(text, str(path)), prefix=prefix)
    if check:
        from . import raw
        try:
            check_tree(table.nodes)
        except HashStringsError as e:
            raise HashStringsError('{}: bad search tree: {}'.format(path, e)) from e
        raw.verify(table)
        log.info('%s: native lookup verified', path)

    stamp = emit.make_stamp(str(path).encode('utf-8') + content) if reproducible else None
    output.write_text(table.render(stamp, tool), encoding='utf-8')
    log.info('wrote %s', output)
    return output
