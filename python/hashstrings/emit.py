'''Rendering of a built table into a C header.

    Nothing here computes anything; node order and indices are written exactly
    as the tree builder produced them.

'''
import time
import zlib

from .charmap import FIELDS_PER_WORD, SYMBOL_OFFSET
from .tree import LEAF

HEADER = '''/*
    This file was automatically generated by the {tool} tool.
    **** any changes you make here will be overwritten ****
    Please edit the original file '{source}' instead.
*/

#ifndef Once_{stamp:08x}
#define Once_{stamp:08x}

#include <libhashstrings.h>

'''

FOOTER = '''#endif

/* end of automatically-generated file */
'''

TEMPLATE_SYMBOL = '    k{prefix}{name:<16} = {code},\n'
TEMPLATE_SYMBOLS = '''
typedef enum {{
{SYMBOLS}    k{prefix}Max
}} t{prefix}Mapping;

'''

TEMPLATE_CHARMAP = '''tCharMap g{prefix}CharMap[] = {{
{WORDS}}};

'''

TEMPLATE_KEYWORD = '    k{prefix}{identifier:<16} = {index},\n'
TEMPLATE_KEYWORDS = '''
typedef enum {{
    k{prefix}Unknown = 0,
{KEYWORDS}    k{prefix}MaxIndex = {count}
}} t{prefix}Index;

'''

TEMPLATE_NAME = '    [ k{prefix}{identifier:<16} ] = {name},\n'
TEMPLATE_NAMES = '''const char * lookup{prefix}AsString[] =
{{
    [ k{prefix}Unknown ] = "(unknown)",
{NAMES}    [ k{prefix}MaxIndex ] = NULL
}};

'''

TEMPLATE_SEARCH = '''/* pre-computed binary search tree */

tRecord map{prefix}Search[] = {{
{ROWS}}};

'''


def c_string(text: str) -> str:
    '''str -> C string literal; anything outside printable ASCII becomes an octal escape.'''
    out = []
    for b in text.encode('utf-8'):
        if b in b'"\\':
            out.append('\\' + chr(b))
        elif 0x20 <= b < 0x7f:
            out.append(chr(b))
        else:
            out.append('\\{:03o}'.format(b))
    return '"{}"'.format(''.join(out))


def c_index(index: int) -> str:
    return 'kLeaf' if index == LEAF else str(index)


def make_stamp(key=None) -> int:
    '''Include guard key. Differs on every run unless `key` (bytes) is given to derive it from.'''
    if key is None:
        now = time.time_ns()
        return (now // 1000000000 ^ now % 1000000000) & 0xffffffff
    return zlib.crc32(key)


def render_symbols(charmap, prefix):
    return TEMPLATE_SYMBOLS.format(prefix=prefix, SYMBOLS=''.join(
        TEMPLATE_SYMBOL.format(prefix=prefix, name=name, code=SYMBOL_OFFSET + i)
        for i, name in enumerate(charmap.symbols)))


def render_charmap(charmap, prefix):
    '''One packed word per line, each followed by a comment decoding its fields.'''
    words = charmap.packed()
    lines = []
    for i, word in enumerate(words):
        fields = range(i * FIELDS_PER_WORD, min(256, (i + 1) * FIELDS_PER_WORD))
        lines.append('    0x{:016x}{}    /* {} */\n'.format(
            word, ',' if i < len(words) - 1 else ' ',
            ' '.join(charmap.describe(charmap[b]) for b in fields)))
    return TEMPLATE_CHARMAP.format(prefix=prefix, WORDS=''.join(lines))


def render_keywords(entries, prefix):
    return TEMPLATE_KEYWORDS.format(prefix=prefix, count=len(entries) + 1, KEYWORDS=''.join(
        TEMPLATE_KEYWORD.format(prefix=prefix, identifier=e.identifier, index=e.index) for e in entries))


def render_names(entries, prefix):
    return TEMPLATE_NAMES.format(prefix=prefix, NAMES=''.join(
        TEMPLATE_NAME.format(prefix=prefix, identifier=e.identifier, name=c_string(e.name)) for e in entries))


def render_search(nodes, entries, prefix):
    identifiers = {e.index: e.identifier for e in entries}
    rows = []
    for node in nodes:
        text = c_string(node.text)
        head = '    {{ 0x{:016x}, {},{}k{}{},'.format(
            node.hash, text, ' ' * max(1, 19 - len(text)), prefix, identifiers[node.target])
        rows.append('{}{}{:>5}, {:>5} }},\n'.format(
            head, ' ' * max(1, 72 - len(head)), c_index(node.lower), c_index(node.higher)))
    return TEMPLATE_SEARCH.format(prefix=prefix, ROWS=''.join(rows))


def render(table, stamp, tool='hashstrings') -> str:
    '''Table -> header text.'''
    parts = [HEADER.format(tool=tool, source=table.filename, stamp=stamp)]
    if table.charmap.symbols:
        parts.append(render_symbols(table.charmap, table.prefix))
        parts.append(render_charmap(table.charmap, table.prefix))
    parts.append(render_keywords(table.entries, table.prefix))
    parts.append(render_names(table.entries, table.prefix))
    if table.nodes:
        parts.append(render_search(table.nodes, table.entries, table.prefix))
    parts.append(FOOTER)
    return ''.join(parts)
