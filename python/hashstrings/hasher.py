import collections
import logging
import re

from .errors import SpecError

log = logging.getLogger(__name__)

HASH_SEED  = 0xcbf29ce484222325
HASH_PRIME = 0x100000001b3
HASH_MASK  = (1 << 64) - 1

SEPARATORS = re.compile(r'[,;]')
# Emitted next to the keyword identifiers in the same enumeration.
RESERVED   = {'Unknown', 'MaxIndex'}

KeywordEntry = collections.namedtuple('KeywordEntry', 'name identifier aliases index')
HashRecord   = collections.namedtuple('HashRecord', 'hash text target')


def hash_char(hash: int, code: int) -> int:
    '''One FNV-1a step over a 9-bit code. Must match `hashChar` in libhashstrings.h.'''
    return (hash ^ code) * HASH_PRIME & HASH_MASK


def hash_text(charmap, text: str, mix=hash_char, seed=HASH_SEED) -> int:
    hash = seed
    for code in charmap.remap(text.encode('utf-8')):
        hash = mix(hash, code)
    return hash


def identifier(name: str) -> str:
    '''Turn a keyword into the tail of a C identifier: `content-type` -> `ContentType`.'''
    return ''.join(part[:1].upper() + part[1:] for part in re.split(r'[^0-9A-Za-z_]+', name))


def split_keyword(raw: str):
    '''`primary[,alias]*` -> (primary, [alias])

        Whitespace around each segment is dropped, and so are empty aliases. With
        no aliases the primary name is the only text that gets hashed.

    '''
    primary, *aliases = [part.strip() for part in SEPARATORS.split(raw)]
    if not primary:
        raise SpecError('empty keyword in {!r}'.format(raw))
    return primary, [alias for alias in aliases if alias] or [primary]


class KeywordHasher:
    '''Turns keyword strings into `KeywordEntry`s and one `HashRecord` per alias.

        :param mix: the combiner step; anything deterministic mapping
                    (64-bit hash, code) to a 64-bit hash will do.

    '''
    def __init__(self, charmap, mix=hash_char):
        self.charmap = charmap
        self.mix     = mix
        self.entries = []
        self.records = []
        self._names  = {}

    def hash(self, text: str) -> int:
        return hash_text(self.charmap, text, self.mix)

    def add(self, raw) -> KeywordEntry:
        if not isinstance(raw, str):
            raise SpecError('keyword must be a string, got {!r}'.format(raw))

        name, aliases = split_keyword(raw)
        ident = identifier(name)
        if not ident:
            raise SpecError('keyword "{}" has no usable identifier'.format(name))
        if ident in RESERVED:
            raise SpecError('keyword "{}" clashes with the reserved identifier "{}"'.format(name, ident))
        if ident in self._names:
            raise SpecError('keywords "{}" and "{}" both map to identifier "{}"'.format(
                self._names[ident], name, ident))
        self._names[ident] = name

        entry = KeywordEntry(name, ident, tuple(aliases), len(self.entries) + 1)
        self.entries.append(entry)
        for alias in aliases:
            self.records.append(HashRecord(self.hash(alias), alias, entry.index))
        log.debug('keyword %s = %d (%s)', ident, entry.index, ', '.join(aliases))
        return entry


def hash_keywords(charmap, keywords, mix=hash_char):
    '''(CharMap, [str]) -> ([HashRecord], [KeywordEntry]); the records are not sorted.'''
    hasher = KeywordHasher(charmap, mix)
    for raw in keywords:
        hasher.add(raw)
    return hasher.records, hasher.entries
