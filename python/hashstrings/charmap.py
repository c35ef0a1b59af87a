'''Byte -> code remapping, packed into 9-bit fields.

    Codes below `SYMBOL_OFFSET` are literal bytes; codes at or above it name a
    symbol class. Seven fields go into each 64-bit word:

        -------- ________ -------- ________ -------- ________ -------- ________
        .ggggggg ggFFFFFF FFFeeeee eeeeDDDD DDDDDccc ccccccBB BBBBBBBa aaaaaaaa

'''
import logging
import re

from .errors import CapacityError, SpecError

log = logging.getLogger(__name__)

FIELD_BITS      = 9
FIELD_MASK      = (1 << FIELD_BITS) - 1
FIELDS_PER_WORD = 64 // FIELD_BITS
WORD_COUNT      = 256 // FIELDS_PER_WORD + 1
SYMBOL_OFFSET   = 256
# Upper limit on the number of symbol classes: their codes must fit into a field.
SYMBOL_LIMIT    = (1 << FIELD_BITS) - SYMBOL_OFFSET

NAME_RE = re.compile(r'[A-Za-z0-9_]+\Z')


class CharMap:
    '''An immutable table of 256 codes plus the names of the symbol classes they use.'''
    def __init__(self, codes, symbols=()):
        assert len(codes) == 256
        self._codes   = tuple(codes)
        self.symbols  = tuple(symbols)

    def __getitem__(self, byte: int) -> int:
        return self._codes[byte]

    def __iter__(self):
        return iter(self._codes)

    def __eq__(self, other):
        return isinstance(other, CharMap) and (self._codes, self.symbols) == (other._codes, other.symbols)

    def __repr__(self):
        return 'CharMap(symbols={!r})'.format(self.symbols)

    @staticmethod
    def is_symbol(code: int) -> bool:
        return code >= SYMBOL_OFFSET

    def symbol(self, code: int) -> str:
        '''Name of the class behind a symbol code.'''
        return self.symbols[code - SYMBOL_OFFSET]

    def remap(self, data: bytes):
        '''bytes -> [code]'''
        return [self._codes[b] for b in data]

    def packed(self):
        '''[int] -> WORD_COUNT unsigned 64-bit words, byte `b` in word `b // 7`.'''
        words = [0] * WORD_COUNT
        for b, code in enumerate(self._codes):
            words[b // FIELDS_PER_WORD] |= code << (b % FIELDS_PER_WORD * FIELD_BITS)
        return words

    @classmethod
    def unpack(cls, words, symbols=()):
        '''Inverse of `packed`.'''
        if len(words) != WORD_COUNT:
            raise ValueError('expected {} words, got {}'.format(WORD_COUNT, len(words)))
        return cls([words[b // FIELDS_PER_WORD] >> (b % FIELDS_PER_WORD * FIELD_BITS) & FIELD_MASK
                    for b in range(256)], symbols)

    def describe(self, code: int) -> str:
        '''Render one field the way it is shown in the comments of the emitted table.'''
        if self.is_symbol(code):
            return '({})'.format(self.symbol(code))
        if code == ord("'"):
            return "'\\''"
        if code == ord('\\'):
            return "'\\\\'"
        if 0x21 <= code <= 0x7e:
            return "'{}' ".format(chr(code))
        return '0x{:02X}'.format(code)


class CharMapBuilder:
    '''Accumulates case folding and symbol classes into a `CharMap`.

        Symbol ids are handed out in the order the classes are added, so the
        builder owns the counter and two builders never interfere.

    '''
    def __init__(self):
        self._codes   = list(range(256))
        self._symbols = []

    @property
    def next_symbol(self) -> int:
        return SYMBOL_OFFSET + len(self._symbols)

    def ignore_case(self):
        for b in range(ord('A'), ord('Z') + 1):
            self._codes[b] = b | 0x20

    def add_class(self, name: str, members: str) -> int:
        '''Classify every byte of `members`; `x-y` in the middle is an inclusive range.'''
        if not isinstance(name, str) or not NAME_RE.match(name):
            raise SpecError('invalid symbol class name {!r}'.format(name))
        if name in self._symbols:
            raise SpecError('symbol class "{}" defined twice'.format(name))
        if not members:
            raise SpecError('symbol class "{}" has no members'.format(name))
        if len(self._symbols) >= SYMBOL_LIMIT:
            raise CapacityError('too many symbol classes (at most {})'.format(SYMBOL_LIMIT))

        code = self.next_symbol
        data = members.encode('utf-8')
        for i, c in enumerate(data):
            if c == ord('-') and 0 < i < len(data) - 1:
                low, high = data[i - 1], data[i + 1]
                if low > high:
                    raise SpecError('reversed range "{}-{}" in symbol class "{}"'.format(
                        chr(low), chr(high), name))
                for b in range(low, high + 1):
                    self._codes[b] = code
            else:
                self._codes[c] = code

        self._symbols.append(name)
        log.debug('symbol class %s = %d', name, code)
        return code

    def build(self) -> CharMap:
        return CharMap(self._codes, self._symbols)


def build_charmap(mappings=None) -> CharMap:
    '''[(str, bool | str)] -> CharMap

        Case folding is applied first no matter where `ignoreCase` appears, then
        the classes in declaration order.

    '''
    builder = CharMapBuilder()
    mappings = list(mappings or ())

    for name, value in mappings:
        if isinstance(value, bool):
            if name.lower() != 'ignorecase':
                log.warning('ignoring unknown flag "%s" in mappings', name)
            elif value:
                builder.ignore_case()
        elif not isinstance(value, str):
            raise SpecError('unsupported mapping type for "{}" (expected a boolean or a string)'.format(name))

    for name, value in mappings:
        if isinstance(value, str):
            builder.add_class(name, value)
    return builder.build()
