import json
import struct

import pytest

from sqrlid import HEADER, BlockDefinitionResolver, IdentityParser, PackageSource


SALT = bytes(range(1, 17))


def rescue_block(iterations=150):
    '''Block of type 2, 73 bytes'''
    return struct.pack('<HH', 73, 2) + SALT + bytes([9]) + struct.pack('<I', iterations) + b'\xaa' * 32 + b'\xbb' * 16


def previous_keys_block():
    '''Block of type 3 with two previous keys'''
    return struct.pack('<HHH', 86, 3, 2) + b'\x11' * 32 + b'\x22' * 32 + b'\x33' * 16


def unknown_block(block_type=999, data=b'hello'):
    return struct.pack('<HH', 4 + len(data), block_type) + data


class DictSource(object):
    '''Block definitions given as python dictionaries.'''

    def __init__(self, *definitions):
        self.definitions = {_['block_type']: _ for _ in definitions}

    def fetch(self, block_type):
        definition = self.definitions.get(block_type)
        return json.dumps(definition).encode() if definition is not None else None

    def fetch_unknown_fallback(self):
        return PackageSource().fetch_unknown_fallback()


def framing_items():
    return [
        {'name': 'Length', 'description': 'block length', 'type': 'UINT_16', 'bytes': 2},
        {'name': 'Type', 'description': 'block type', 'type': 'UINT_16', 'bytes': 2},
    ]


@pytest.fixture
def identity_data():
    return HEADER + rescue_block() + previous_keys_block() + unknown_block()


@pytest.fixture
def parser():
    return IdentityParser()


@pytest.fixture
def make_parser():
    '''Build a parser knowing only the definitions passed as arguments.'''
    def _make(*definitions):
        return IdentityParser(BlockDefinitionResolver(DictSource(*definitions)))

    return _make
