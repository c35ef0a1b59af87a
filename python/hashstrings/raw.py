import importlib.util
import itertools
import logging
import tempfile

import cffi

from . import ffi as _ffi
from .errors import HashStringsError
from .hasher import hash_char
from .tree import LEAF

log = logging.getLogger(__name__)

_serial = itertools.count()


def _load(path, name):
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class Compiled:
    '''A table rendered to C, compiled with cffi and loaded back.

        Lookups go through `hashString` and `findHash` from libhashstrings.h, so
        this exercises exactly what a C consumer of the header would run.

        :param tmpdir: where to build; a fresh temporary directory by default.

    '''
    def __init__(self, table, tmpdir=None):
        if table.mix is not hash_char:
            raise ValueError('only tables hashed with hash_char can be compiled')
        self.table = table
        header = table.render(stamp=0)
        name = '{}_{}'.format(_ffi.module_name(header), next(_serial))
        ffi = _ffi.create(header, table.prefix, bool(table.nodes), bool(table.charmap.symbols), name)
        if tmpdir is None:
            tmpdir = self.__tmpdir = tempfile.TemporaryDirectory(prefix='hashstrings-')
            tmpdir = tmpdir.name
        log.debug('compiling %s in %s', table.filename, tmpdir)
        try:
            path = ffi.compile(tmpdir=tmpdir)
        except cffi.VerificationError as e:
            raise HashStringsError('{}: could not compile the table: {}'.format(table.filename, e)) from e
        module = _load(path, name)
        self.ffi = module.ffi
        self.lib = module.lib

    def __charmap(self):
        if self.table.charmap.symbols:
            return getattr(self.lib, 'g{}CharMap'.format(self.table.prefix))
        return self.ffi.NULL

    def hash(self, text: str) -> int:
        return self.lib.hashString(self.__charmap(), text.encode('utf-8'))

    def lookup(self, text: str) -> int:
        '''str -> keyword index, 0 if unknown.'''
        if not self.table.nodes:
            return 0
        search = getattr(self.lib, 'map{}Search'.format(self.table.prefix))
        i = self.lib.findHash(search, self.hash(text))
        return 0 if i == LEAF else search[i].index

    def name(self, index: int) -> str:
        names = getattr(self.lib, 'lookup{}AsString'.format(self.table.prefix))
        return self.ffi.string(names[index]).decode('utf-8')


def verify(table, tmpdir=None):
    '''Compile `table` and make sure every alias resolves to its keyword.'''
    compiled = Compiled(table, tmpdir)
    for record in table.records:
        if compiled.hash(record.text) != record.hash:
            raise HashStringsError('"{}" hashes to 0x{:016x} in C but 0x{:016x} in Python'.format(
                record.text, compiled.hash(record.text), record.hash))
        found = compiled.lookup(record.text)
        if found != record.target:
            raise HashStringsError('"{}" resolves to {} instead of {}'.format(record.text, found, record.target))
    return compiled
