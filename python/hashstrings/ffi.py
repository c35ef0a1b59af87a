import os
import zlib

import cffi

CDEF = '''
    typedef uint64_t tHash;
    typedef uint16_t tNodeIndex;
    typedef uint64_t tCharMap;

    typedef struct {{
        tHash         hash;
        const char *  hashedString;
        int           index;
        tNodeIndex    lower;
        tNodeIndex    higher;
    }} tRecord;

    tHash      hashString (const tCharMap *, const char *);
    tNodeIndex findHash   (const tRecord *, tHash);

    extern const char * lookup{prefix}AsString[...];
'''

CDEF_SEARCH  = 'extern tRecord map{prefix}Search[...];\n'
CDEF_CHARMAP = 'extern tCharMap g{prefix}CharMap[...];\n'


def include_dir():
    '''Directory holding libhashstrings.h.'''
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), 'include')


def module_name(header):
    return '_hashstrings_{:08x}'.format(zlib.crc32(header.encode('utf-8')))


def create(header, prefix, search=True, charmap=False, name=None):
    '''Build an FFI whose extension module is the generated `header` itself.

        :param search: whether the header has a `map<prefix>Search` table.
        :param charmap: whether the header has a `g<prefix>CharMap` table.

    '''
    ffi = cffi.FFI()
    ffi.set_source(name or module_name(header), header, include_dirs=[include_dir()])
    ffi.cdef(
        CDEF.format(prefix=prefix)
        + (CDEF_SEARCH.format(prefix=prefix) if search else '')
        + (CDEF_CHARMAP.format(prefix=prefix) if charmap else '')
    )
    return ffi
