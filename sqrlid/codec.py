'''
# SQRL identity container

An identity starts with an 8 bytes header followed by a sequence of blocks

    .---------------------------------------.
    | "sqrldata"                            |
    | block 1: length(2) type(2) data(...)  |
    | block 2: length(2) type(2) data(...)  |
      ...
    | block N: length(2) type(2) data(...)  |
    '---------------------------------------'

where length and type are little endian unsigned integers and the length
includes the four bytes of length and type themselves.

The same container can be transported as text: in that case the header is
"SQRLDATA" and what follows is the rest of the container encoded with
URL-safe base64 without padding.

The layout of the data of a block is not fixed, it's described by the block
definition of its type (see sqrlid.schema).
'''
import base64
import binascii
import logging
import struct
from typing import List

from .core import Block, Identity
from .enum import ItemType
from .exceptions import ArgumentError, FormatError, SchemaError, SqrlIdException
from .fields import Item, StructItem, repeat_count
from .resolver import BlockDefinitionResolver
from .schema import BlockDefinition, ItemDefinition
from .streams import Stream


logger = logging.getLogger(__name__)

HEADER = b'sqrldata'
HEADER_BASE64 = b'SQRLDATA'

# length and type
FRAMING_FORMAT = '<HH'
FRAMING_SIZE = struct.calcsize(FRAMING_FORMAT)


class IdentityParser(object):
    '''Un/Pack identities using the definitions given by the resolver.

    The parser doesn't keep any state about the data parsed, so the same
    instance can be used for any number of identities.'''

    def __init__(self, resolver: BlockDefinitionResolver = None):
        self.resolver = resolver if resolver is not None else BlockDefinitionResolver()

    def check_header(self, data: bytes) -> bool:
        '''It returns True if the data uses the base64 transport encoding.'''
        header = bytes(data[:len(HEADER)])

        if header == HEADER:
            return False
        elif header == HEADER_BASE64:
            return True

        raise FormatError('Invalid header %r' % header)

    def decode_transport(self, data: bytes) -> bytes:
        '''Convert the base64 transport encoding into the binary one.'''
        payload = bytes(data[len(HEADER_BASE64):]).strip().rstrip(b'=')

        try:
            decoded = base64.b64decode(payload + b'=' * (-len(payload) % 4), altchars=b'-_', validate=True)
        except (binascii.Error, ValueError) as e:
            raise FormatError('Invalid base64-format on identity: %s' % e) from e

        if not decoded:
            raise FormatError('Invalid base64-format on identity: no data')

        return HEADER + decoded

    def parse(self, data: bytes) -> Identity:
        '''This is the main API: it takes the binary data and transforms it in
        an Identity.

        The length of each block tells us where the next one starts, so if
        something is wrong with a block we can't go on: the whole parsing fails.'''
        if not data:
            raise ArgumentError('no data to parse')

        if isinstance(data, str):
            # the textual form of an identity
            try:
                data = data.encode('ascii')
            except UnicodeEncodeError as e:
                raise FormatError('an identity in textual form must be ASCII') from e

        is_base64 = self.check_header(data)

        if is_base64:
            logger.debug('identity uses the base64 transport encoding')
            data = self.decode_transport(data)

        stream = Stream(bytes(data))
        stream.seek(len(HEADER))

        identity = Identity(is_base64=is_base64)

        while stream.remaining():
            index = len(identity.blocks)
            offset = stream.tell()

            try:
                block_length, block_type = self.parse_framing(stream)

                logger.debug('unpacking block %d of type %d and length %d at offset %d' % (
                    index, block_type, block_length, offset))

                block = self.parse_block(stream.slice(offset, block_length), block_type)
            except SqrlIdException as e:
                e.chain.insert(0, 'block[%d]' % index)
                raise

            identity.append_block(block)

            # skip whatever the definition didn't take
            stream.seek(offset + block_length)

        return identity

    def parse_framing(self, stream: Stream):
        if stream.remaining() < FRAMING_SIZE:
            raise FormatError('Truncated block: only %d bytes left' % stream.remaining())

        block_length, block_type = struct.unpack(FRAMING_FORMAT, stream.peek(FRAMING_SIZE))

        if block_length < FRAMING_SIZE:
            raise FormatError('Invalid block length %d' % block_length)

        if block_length > stream.remaining():
            raise FormatError('Block length %d goes beyond the end of the data (%d bytes left)' % (
                block_length, stream.remaining()))

        return block_length, block_type

    def parse_block(self, stream: Stream, block_type: int) -> Block:
        definition = self.resolver.resolve(block_type)

        block = Block(
            block_type=block_type,
            description=definition.description,
            color=definition.color,
        )

        for item in self.parse_items(stream, definition):
            block.append(item)

        return block

    def parse_items(self, stream: Stream, definition: BlockDefinition) -> List[Item]:
        '''Decode the items following the definition, the offsets are relative
        to the start of the block.'''
        items: List[Item] = []

        for item_definition in definition.items:
            try:
                repeat = self.get_repeat_count(item_definition, items)

                # without a width of its own nothing bounds the count read from the data
                if repeat > 1 and item_definition.size <= 0:
                    raise SchemaError('\'%s\' has no fixed width, it can\'t be repeated %d times' % (
                        item_definition.name, repeat))

                if item_definition.size > 0 and repeat * item_definition.size > stream.remaining():
                    raise FormatError('%d repetitions of %d bytes go beyond the end of the block' % (
                        repeat, item_definition.size))

                for _ in range(repeat):
                    size = None
                    if item_definition.remaining and item_definition.type == ItemType.BYTE_ARRAY:
                        size = self.get_remaining_size(stream, items)

                    item = Item.from_definition(item_definition, size=size)
                    item.unpack(stream)

                    items.append(item)
            except SqrlIdException as e:
                if item_definition.name not in e.chain:
                    e.chain.insert(0, item_definition.name)
                raise

        return items

    def get_repeat_count(self, definition: ItemDefinition, items: List[Item]) -> int:
        return repeat_count(definition, items)

    def get_remaining_size(self, stream: Stream, items: List[Item]) -> int:
        '''The size of an item taking the remaining bytes is the length of the
        block, that is the value of the first item, minus the actual offset.'''
        if not items or not isinstance(items[0], StructItem):
            raise SchemaError('an item taking the remaining bytes needs a length as first item')

        size = items[0].number - stream.tell()

        if size < 0:
            raise FormatError('the block length %d is smaller than the data already read (%d bytes)' % (
                items[0].number, stream.tell()))

        return size

    def pack(self, identity: Identity, base64=False) -> bytes:
        '''Encode the identity. The length and type of each block are written
        only through the items of the block: nobody recomputes them here.'''
        if identity is None:
            raise ArgumentError('no identity to pack')

        payload = b''.join(block.raw for block in identity)

        if base64:
            return HEADER_BASE64 + _b64encode(payload)

        return HEADER + payload


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b'=')


def load_from_bytes(data: bytes, resolver: BlockDefinitionResolver = None) -> Identity:
    return IdentityParser(resolver).parse(data)


def load_from_path(path, resolver: BlockDefinitionResolver = None) -> Identity:
    if not path:
        raise ArgumentError('a path to the identity is needed')

    logger.debug('loading identity from \'%s\'' % path)
    stream = Stream(path)

    return load_from_bytes(stream.read_all(), resolver)


def save_to_path(identity: Identity, path, base64=False) -> int:
    '''Write the identity into the file, it returns the number of bytes written.'''
    if not path:
        raise ArgumentError('a path where to save the identity is needed')

    data = IdentityParser().pack(identity, base64=base64)

    with open(path, 'wb') as f:
        f.write(data)

    logger.debug('saved %d bytes into \'%s\'' % (len(data), path))

    return len(data)
