'''Pytest configuration and fixtures.'''

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from hashstrings import Table, source


EXAMPLE = Path(__file__).parent.parent / 'example' / 'tokens.hash'


@pytest.fixture
def sample_libconfig():
    '''A small input file in libconfig syntax.'''
    return '''# test input
prefix = "Kw";

mappings =
{
    ignoreCase = true;
    digit      = "0-9";
};

keywords = [ "if", "else", "elif,elif,elsif", "while" ];
'''


@pytest.fixture
def sample_json():
    '''The same input as `sample_libconfig`, as JSON.'''
    return '''{
    "prefix": "Kw",
    "mappings": {"ignoreCase": true, "digit": "0-9"},
    "keywords": ["if", "else", "elif,elif,elsif", "while"]
}
'''


@pytest.fixture
def basic_table():
    '''No mappings, three keywords.'''
    return Table.build(source.Source('basic.hash', '', None, ['if', 'else', 'while']))


@pytest.fixture
def example_table():
    return Table.build(source.load(EXAMPLE))
