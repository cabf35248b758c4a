from enum import Enum


class ItemType(Enum):
    '''Semantic type of an item as named into the block definitions.

    UNKNOWN is used for every type string we don't know how to handle: such
    items decode to an empty value but keep their bytes untouched.'''
    UINT_8     = 'UINT_8'
    UINT_16    = 'UINT_16'
    UINT_32    = 'UINT_32'
    BYTE_ARRAY = 'BYTE_ARRAY'
    UNKNOWN    = 'UNKNOWN'

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class Direction(Enum):
    UP   = 'up'
    DOWN = 'down'
