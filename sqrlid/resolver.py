'''
Where the block definitions come from.

A source is anything with the following two methods

    fetch(block_type) -> Optional[bytes]
    fetch_unknown_fallback() -> bytes

the first one returns the JSON of the definition for the given block type (None if
the source doesn't know the type), the second the definition to use for the
block types nobody knows about. Without the latter nothing can be parsed.
'''
import logging
from importlib import resources
from pathlib import Path
from typing import Optional

from .core import Block
from .exceptions import SchemaError
from .fields import Item, repeat_count
from .schema import BlockDefinition


logger = logging.getLogger(__name__)

UNKNOWN_DEFINITION_NAME = 'unknown.json'


def _definition_name(block_type: int) -> str:
    return '%d.json' % block_type


class PackageSource(object):
    '''The definitions distributed together with this package.'''

    def __init__(self, package='sqrlid.blockdef'):
        self.package = package

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.package)

    def _read(self, name) -> Optional[bytes]:
        resource = resources.files(self.package) / name
        if not resource.is_file():
            return None

        return resource.read_bytes()

    def fetch(self, block_type: int) -> Optional[bytes]:
        return self._read(_definition_name(block_type))

    def fetch_unknown_fallback(self) -> bytes:
        data = self._read(UNKNOWN_DEFINITION_NAME)
        if data is None:
            raise SchemaError('missing definition for unknown blocks in %s' % self.package)

        return data


class DirectorySource(object):
    '''The definitions are files named "<block type>.json" in a directory;
    if the directory doesn't contain an "unknown.json" we ask the fallback source.'''

    def __init__(self, path, fallback=None):
        self.path = Path(path)
        self.fallback = fallback if fallback is not None else PackageSource()

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.path)

    def _read(self, name) -> Optional[bytes]:
        path = self.path / name
        if not path.is_file():
            return None

        logger.debug('reading definition \'%s\'' % path)
        return path.read_bytes()

    def fetch(self, block_type: int) -> Optional[bytes]:
        return self._read(_definition_name(block_type))

    def fetch_unknown_fallback(self) -> bytes:
        data = self._read(UNKNOWN_DEFINITION_NAME)
        return data if data is not None else self.fallback.fetch_unknown_fallback()


class ChainSource(object):
    '''Ask the sources in order, the first one knowing the block type wins.'''

    def __init__(self, *sources):
        if not sources:
            raise ValueError('at least a source is needed')
        self.sources = sources

    def fetch(self, block_type: int) -> Optional[bytes]:
        for source in self.sources:
            data = source.fetch(block_type)
            if data is not None:
                return data

        return None

    def fetch_unknown_fallback(self) -> bytes:
        return self.sources[0].fetch_unknown_fallback()


class BlockDefinitionResolver(object):
    '''Given a block type returns its definition.

    A block type without a (valid) definition is not an error: we use the
    definition for unknown blocks, that preserves the data as a byte array.
    The definition for unknown blocks is loaded at construction, if it's not
    available a SchemaError is raised.'''

    def __init__(self, source=None):
        self.source = source if source is not None else PackageSource()
        self._cache = {}
        self.unknown = BlockDefinition.from_json(self.source.fetch_unknown_fallback())

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.source)

    def lookup(self, block_type: int) -> Optional[BlockDefinition]:
        '''Returns the definition for the block type, None if there is no valid one.'''
        if block_type in self._cache:
            return self._cache[block_type]

        definition = None
        data = self.source.fetch(block_type)

        if data is not None:
            try:
                definition = BlockDefinition.from_json(data)
            except SchemaError:
                logger.warning('definition for block type %d is malformed, ignoring it' % block_type)

        if definition is not None and definition.block_type != block_type:
            logger.warning('definition for block type %d declares type %d' % (block_type, definition.block_type))

        self._cache[block_type] = definition

        return definition

    def resolve(self, block_type: int) -> BlockDefinition:
        definition = self.lookup(block_type)

        if definition is None:
            logger.debug('no definition for block type %d, using the one for unknown blocks' % block_type)
            return self.unknown

        return definition

    def is_known(self, block_type: int) -> bool:
        return self.lookup(block_type) is not None

    def create_empty(self, block_type: int) -> Optional[Block]:
        '''Build a block of the given type with all the items zeroed, the
        framing items are filled with the actual size and type.'''
        definition = self.lookup(block_type)

        if definition is None:
            return None

        block = Block(
            block_type=block_type,
            description=definition.description,
            color=definition.color,
        )

        for item_definition in definition.items:
            # a zeroed counter means no repetition at all
            for _ in range(repeat_count(item_definition, block.items)):
                block.append(Item.from_definition(item_definition))

        block.relayout()

        return block
