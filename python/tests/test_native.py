'''Compile generated headers with cffi and look keywords up from C.'''

import shutil
import warnings

import pytest

cffi = pytest.importorskip('cffi')

from hashstrings import Table, ffi, raw, source
from hashstrings.errors import HashStringsError
from hashstrings.hasher import HASH_MASK


@pytest.fixture(scope='module')
def compiler(tmp_path_factory):
    '''Skip unless a trivial extension module can be built here.'''
    if not (shutil.which('cc') or shutil.which('gcc') or shutil.which('clang')):
        pytest.skip('no C compiler')
    trial = cffi.FFI()
    trial.set_source('_hashstrings_trial', 'static int answer(void) { return 42; }')
    trial.cdef('int answer(void);')
    try:
        trial.compile(tmpdir=str(tmp_path_factory.mktemp('trial')))
    except Exception as e:
        pytest.skip('cannot build extension modules: {}'.format(e))


def test_include_dir():
    assert (ffi.include_dir() + '/libhashstrings.h').endswith('include/libhashstrings.h')
    with open(ffi.include_dir() + '/libhashstrings.h') as f:
        assert 'findHash' in f.read()


def test_cdef_declares_tables_extern(example_table):
    header = example_table.render(stamp=0)
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        built = ffi.create(header, example_table.prefix, search=True, charmap=True)
    assert built.sizeof('tRecord') > 0


def test_example(compiler, example_table, tmp_path):
    native = raw.verify(example_table, str(tmp_path))
    assert native.lookup('WHILE') == example_table.lookup('while') == 6
    assert native.lookup('else if') == native.lookup('elsif') == 4
    assert native.lookup('func') == example_table.lookup('def')
    assert native.lookup('wend') == 0
    assert native.name(6) == 'while'
    assert native.name(0) == '(unknown)'


def test_hashes_agree(compiler, example_table, tmp_path):
    native = raw.Compiled(example_table, str(tmp_path))
    for text in ['', 'x', 'IF', 'else if', 'x1', 'x9', 'é', 'a' * 100]:
        assert native.hash(text) == example_table.hash(text)


def test_identity_map(compiler, basic_table, tmp_path):
    native = raw.verify(basic_table, str(tmp_path))
    assert native.lookup('while') == 3
    assert native.lookup('While') == 0


def test_no_keywords(compiler, tmp_path):
    table = Table.build(source.Source('empty.hash', 'E', None, []))
    assert raw.Compiled(table, str(tmp_path)).lookup('if') == 0


def test_many_keywords(compiler, tmp_path):
    words = ['kw{},kw{},KW{}'.format(i, i, i) for i in range(500)]
    table = Table.build(source.Source('many.hash', 'M', None, words))
    native = raw.verify(table, str(tmp_path))
    assert native.lookup('KW499') == 500
    assert native.lookup('kw500') == 0


def test_weak_mix_is_rejected(tmp_path):
    table = Table.build(source.Source('weak.hash', '', None, ['ab']), mix=lambda h, c: (h + c) & HASH_MASK)
    with pytest.raises(ValueError):
        raw.Compiled(table, str(tmp_path))


def test_verify_reports_mismatch(compiler, basic_table, tmp_path, monkeypatch):
    monkeypatch.setattr(raw.Compiled, 'lookup', lambda self, text: 0)
    with pytest.raises(HashStringsError):
        raw.verify(basic_table, str(tmp_path))
