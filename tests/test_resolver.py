import pytest

from sqrlid import HEADER, IdentityParser
from sqrlid.exceptions import SchemaError
from sqrlid.resolver import BlockDefinitionResolver, ChainSource, DirectorySource, PackageSource

from conftest import DictSource, framing_items


def test_bundled_definitions():
    resolver = BlockDefinitionResolver()

    for block_type in (1, 2, 3):
        definition = resolver.resolve(block_type)

        assert definition.block_type == block_type
        assert resolver.is_known(block_type)
        assert [_.name for _ in definition.items[:2]] == ['Length', 'Type']

    # the sizes of the bundled definitions are the ones of the format
    assert sum(_.size for _ in resolver.resolve(1).items) == 125
    assert sum(_.size for _ in resolver.resolve(2).items) == 73


def test_unknown_block_type_fallback():
    resolver = BlockDefinitionResolver()

    definition = resolver.resolve(999)

    assert definition is resolver.unknown
    assert not resolver.is_known(999)
    assert definition.items[-1].remaining


def test_resolve_is_cached():
    resolver = BlockDefinitionResolver()

    assert resolver.resolve(2) is resolver.resolve(2)


def test_directory_source(tmp_path):
    (tmp_path / '7.json').write_text(
        '{"block_type": 7, "description": "Seven", "color": "red", "items": []}')
    (tmp_path / '8.json').write_text('this is not json')

    resolver = BlockDefinitionResolver(DirectorySource(tmp_path))

    assert resolver.resolve(7).description == 'Seven'
    # a malformed definition degrades to the unknown one
    assert resolver.resolve(8) is resolver.unknown
    # the fallback comes from the package
    assert resolver.unknown.description == 'Unknown block type'


def test_chain_source(tmp_path):
    (tmp_path / '2.json').write_text(
        '{"block_type": 2, "description": "Overridden", "color": "red", "items": []}')

    resolver = BlockDefinitionResolver(ChainSource(DirectorySource(tmp_path), PackageSource()))

    assert resolver.resolve(2).description == 'Overridden'
    assert resolver.resolve(3).description == 'Previous identity unlock keys'

    with pytest.raises(ValueError):
        ChainSource()


def test_missing_fallback_is_fatal():
    class BrokenSource(DictSource):
        def fetch_unknown_fallback(self):
            return b'{"items": '

    with pytest.raises(SchemaError):
        BlockDefinitionResolver(BrokenSource())


def test_create_empty():
    resolver = BlockDefinitionResolver()

    block = resolver.create_empty(2)

    assert block.block_type == 2
    assert block.description == resolver.resolve(2).description
    assert block.size == 73
    assert block.items[0].value == '73'
    assert block.items[1].value == '2'
    assert block.items[2].value == '00' * 16
    assert block.raw[:4] == b'\x49\x00\x02\x00'


def test_create_empty_without_repetitions():
    """A zeroed counter produces no repeated items."""
    resolver = BlockDefinitionResolver()

    block = resolver.create_empty(3)

    assert [_.name for _ in block.items] == ['Length', 'Type', 'Edition', 'Verification tag']
    assert block.items[0].value == str(2 + 2 + 2 + 16)


def test_create_empty_unknown_type():
    resolver = BlockDefinitionResolver()

    assert resolver.create_empty(999) is None


def test_create_empty_remaining():
    resolver = BlockDefinitionResolver(DictSource({
        'block_type': 10,
        'description': 'Freeform',
        'color': 'white',
        'items': framing_items() + [
            {'name': 'Data', 'description': 'data', 'type': 'BYTE_ARRAY', 'bytes': -1},
        ],
    }))

    block = resolver.create_empty(10)

    assert block.items[2].value == ''
    assert block.size == 4


def test_create_empty_repeat_like_parsing():
    """A new block decodes back to the same items."""
    resolver = BlockDefinitionResolver(DictSource({
        'block_type': 11,
        'items': framing_items() + [
            {'name': 'Count', 'type': 'UINT_8', 'bytes': 1},
            {'name': 'Value', 'type': 'UINT_8', 'bytes': 1, 'repeat_index': 2},
            {'name': 'Other', 'type': 'UINT_8', 'bytes': 1, 'repeat_index': -1},
        ],
    }))

    block = resolver.create_empty(11)

    assert [_.name for _ in block.items] == ['Length', 'Type', 'Count', 'Other']

    identity = IdentityParser(resolver).parse(HEADER + block.raw)

    assert [(_.name, _.value) for _ in identity[0]] == [(_.name, _.value) for _ in block]


def test_create_empty_repeat_index_not_integer():
    resolver = BlockDefinitionResolver(DictSource({
        'block_type': 12,
        'items': framing_items() + [
            {'name': 'Key', 'type': 'BYTE_ARRAY', 'bytes': 2},
            {'name': 'Value', 'type': 'UINT_8', 'bytes': 1, 'repeat_index': 2},
        ],
    }))

    with pytest.raises(SchemaError):
        resolver.create_empty(12)
