import pytest

from sqrlid.core import Block, Identity
from sqrlid.enum import Direction
from sqrlid.exceptions import ArgumentError
from sqrlid.fields import ByteArrayItem, Uint8Item, Uint16Item


def _block(block_type):
    return Block(block_type=block_type, description=f'block {block_type}', items=[
        Uint16Item(name='Length', size=2),
        Uint16Item(name='Type', size=2),
        Uint8Item(name='Value', size=1, value=block_type),
    ])


@pytest.fixture
def identity():
    return Identity([_block(_) for _ in range(1, 5)])


def _types(identity):
    return [_.block_type for _ in identity]


def test_block():
    """Check that a block derives size and raw data from its items."""
    block = Block(block_type=7, items=[
        Uint16Item(name='Length', size=2),
        Uint16Item(name='Type', size=2),
        ByteArrayItem(name='Data', size=0, remaining=True, value='cafe'),
    ])

    assert block.size == 6
    assert block.raw == b'\x00\x00\x00\x00\xca\xfe'

    assert block.relayout() == 6
    assert block.raw == b'\x06\x00\x07\x00\xca\xfe'

    block.items[2].value = 'cafebabe'
    block.relayout()

    assert block.items[0].value == '8'


def test_relayout_without_framing():
    block = Block(block_type=7, items=[ByteArrayItem(name='Data', size=2)])

    assert block.relayout() == 2
    assert block.raw == b'\x00\x00'


def test_move_block_boundaries(identity):
    first, last = identity[0], identity[-1]

    assert not identity.move_block(first, Direction.UP)
    assert not identity.move_block(last, Direction.DOWN)
    assert _types(identity) == [1, 2, 3, 4]


def test_move_block(identity):
    middle = identity[1]

    assert identity.move_block(middle, Direction.UP)
    assert _types(identity) == [2, 1, 3, 4]

    assert identity.move_block(middle, Direction.DOWN)
    assert _types(identity) == [1, 2, 3, 4]

    # also by uid and by name of the direction
    assert identity.move_block(middle.uid, 'down')
    assert _types(identity) == [1, 3, 2, 4]


def test_move_block_not_enough_blocks():
    block = _block(1)
    identity = Identity([block])

    assert not identity.move_block(block, Direction.UP)
    assert not identity.move_block(block, Direction.DOWN)
    assert not Identity().move_block(block, Direction.DOWN)


def test_move_block_absent(identity):
    assert not identity.move_block(_block(1), Direction.UP)
    assert _types(identity) == [1, 2, 3, 4]


def test_references_survive_mutations(identity):
    """A reference is resolved at the time of the operation, not cached."""
    third = identity[2]

    assert identity.delete_block(identity[0])
    assert _types(identity) == [2, 3, 4]

    assert identity.move_block(third, Direction.DOWN)
    assert _types(identity) == [2, 4, 3]

    assert identity.get_block(third.uid) is third


def test_delete_block(identity):
    second = identity[1]

    assert identity.delete_block(second)
    assert _types(identity) == [1, 3, 4]

    assert not identity.delete_block(second)

    assert identity.delete_block(identity[0].uid)
    assert _types(identity) == [3, 4]


def test_delete_block_by_identity():
    """Equal blocks are different blocks."""
    identity = Identity([_block(1), _block(1)])
    second = identity[1]

    assert identity.delete_block(second)
    assert len(identity) == 1
    assert identity[0] is not second


def test_delete_item(identity):
    block = identity[2]
    item = block.items[2]

    assert identity.delete_item(block, item)
    assert [_.name for _ in block] == ['Length', 'Type']

    assert not identity.delete_item(block, item)
    assert not identity.delete_item(_block(9), block.items[0])

    assert identity.delete_item(block.uid, block.items[0].uid)
    assert [_.name for _ in block] == ['Type']


def test_insert_block(identity):
    new = _block(10)

    assert identity.insert_block(identity[1], new) is new
    assert _types(identity) == [1, 2, 10, 3, 4]

    identity.insert_block(None, _block(11))
    assert _types(identity) == [11, 1, 2, 10, 3, 4]

    identity.insert_block(identity[-1].uid, _block(12))
    assert _types(identity) == [11, 1, 2, 10, 3, 4, 12]

    identity.append_block(_block(13))
    assert _types(identity)[-1] == 13


def test_insert_block_errors(identity):
    with pytest.raises(KeyError):
        identity.insert_block(_block(1), _block(10))

    with pytest.raises(ArgumentError):
        identity.insert_block(None, None)

    assert _types(identity) == [1, 2, 3, 4]
