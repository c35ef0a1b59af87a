import sys
import os.path

import hashstrings
from hashstrings import raw, source


if len(sys.argv) < 2:
    exit('usage: {0} <word> ...'.format(sys.argv[0]))

table = hashstrings.Table.build(source.load(os.path.join(os.path.dirname(__file__), 'tokens.hash')))
native = raw.Compiled(table)

for word in sys.argv[1:]:
    index = table.lookup(word)
    assert native.lookup(word) == index
    print('\033[1;34m{}\033[0m -> {} ({}), hash 0x{:016x}'.format(word, table.name(index), index, table.hash(word)))
