"""
Core module for the in-memory representation of an identity.

An Identity is an ordered sequence of Blocks, each Block is an ordered
sequence of Items. The identity owns its blocks and the blocks own their items.

Everything can be mutated in place by an editor, for this reason when a block or
an item needs to be found we never use a cached position: the reference passed by
the caller (the instance itself or its "uid") is resolved against the actual
content at the time of the operation.
"""
import logging
import uuid
from typing import Iterable, List, Optional

from .enum import Direction
from .exceptions import ArgumentError
from .fields import Item, StructItem


def _matches(element, ref):
    return element is ref or (isinstance(ref, str) and element.uid == ref)


def _index_of(elements, ref) -> Optional[int]:
    for idx, element in enumerate(elements):
        if _matches(element, ref):
            return idx

    return None


class Block(object):
    """
    A self-describing binary record: its size is derived from the items
    contained and its raw data is the concatenation of the raw data of the items.

    NOTE: the first two items of a block are usually the length and the type
    of the block itself, they are plain items and nobody keeps them in sync with
    the rest of the block unless relayout() is called.
    """

    def __init__(self, block_type=0, description='', color='', items: Optional[Iterable[Item]] = None):
        self.logger = logging.getLogger(__name__)
        self.uid = uuid.uuid4().hex
        self.block_type = block_type
        self.description = description
        self.color = color
        self.items: List[Item] = list(items) if items is not None else []

    def __repr__(self):
        return '<%s(%d,%s)>' % (self.__class__.__name__, self.block_type, ','.join(repr(_) for _ in self.items))

    def __str__(self):
        msg = '[%d] %s\n' % (self.block_type, self.description)
        for item in self.items:
            msg += '  %s: %s\n' % (item.name, item.value)
        return msg

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def size(self):
        '''the size MUST not be set but MUST be derived from the items'''
        return sum(len(_.raw) for _ in self.items)

    @property
    def raw(self):
        value = b''
        for item in self.items:
            item_raw = item.raw
            self.logger.debug("item '{}' raw={}".format(item.name, item_raw.hex()))
            value += item_raw

        return value

    def relayout(self):
        '''Write the actual size and type of the block into its first two
        items, if they are integers. It returns the size.'''
        size = self.size

        framing = self.items[:2]
        if len(framing) == 2 and all(isinstance(_, StructItem) for _ in framing):
            length, block_type = framing
            length.value = size
            block_type.value = self.block_type
        else:
            self.logger.warning('block %d has no framing items to relayout' % self.block_type)

        return size

    def append(self, item: Item):
        self.items.append(item)

    def get_item(self, ref) -> Optional[Item]:
        idx = _index_of(self.items, ref)
        return self.items[idx] if idx is not None else None

    def delete_item(self, ref) -> bool:
        idx = _index_of(self.items, ref)
        if idx is None:
            self.logger.debug('no item %r to delete in block %d' % (ref, self.block_type))
            return False

        del self.items[idx]

        return True


class Identity(object):
    '''The root of the representation: the blocks in the order they
    are in the file.

    is_base64 tells if the data this identity comes from used the
    textual transport encoding.'''

    def __init__(self, blocks: Optional[Iterable[Block]] = None, is_base64=False):
        self.logger = logging.getLogger(__name__)
        self.blocks: List[Block] = list(blocks) if blocks is not None else []
        self.is_base64 = is_base64

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(repr(_) for _ in self.blocks))

    def __str__(self):
        return ''.join(str(_) for _ in self.blocks)

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self):
        return len(self.blocks)

    def __getitem__(self, idx):
        return self.blocks[idx]

    def get_block(self, ref) -> Optional[Block]:
        idx = _index_of(self.blocks, ref)
        return self.blocks[idx] if idx is not None else None

    def append_block(self, block: Block) -> Block:
        if block is None:
            raise ArgumentError('a block is needed')

        self.blocks.append(block)

        return block

    def insert_block(self, after_ref, block: Block) -> Block:
        '''Insert the block after the one referenced, if the reference is None
        the block becomes the first one.'''
        if block is None:
            raise ArgumentError('a block is needed')

        if after_ref is None:
            position = 0
        else:
            idx = _index_of(self.blocks, after_ref)
            if idx is None:
                raise KeyError(f'no block {after_ref!r} in the identity')
            position = idx + 1

        self.logger.debug('inserting block %d at position %d' % (block.block_type, position))
        self.blocks.insert(position, block)

        return block

    def delete_block(self, ref) -> bool:
        idx = _index_of(self.blocks, ref)
        if idx is None:
            self.logger.debug('no block %r to delete' % (ref,))
            return False

        del self.blocks[idx]

        return True

    def move_block(self, ref, direction) -> bool:
        '''Swap the block with the previous (Direction.UP) or the following
        (Direction.DOWN) one. Returns False if it was not possible.'''
        direction = Direction(direction)

        if len(self.blocks) < 2:
            return False

        idx = _index_of(self.blocks, ref)
        if idx is None:
            return False

        swap_with = idx - 1 if direction == Direction.UP else idx + 1

        if swap_with < 0 or swap_with >= len(self.blocks):
            return False

        self.blocks[idx], self.blocks[swap_with] = self.blocks[swap_with], self.blocks[idx]

        return True

    def delete_item(self, block_ref, item_ref) -> bool:
        block = self.get_block(block_ref)
        if block is None:
            return False

        return block.delete_item(item_ref)
