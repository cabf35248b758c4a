'''
# Block definitions

Each block type of an identity is described by a JSON document like the following

    {
        "block_type": 2,
        "description": "Rescue code protected identity unlock key",
        "color": "rgb(214, 234, 248)",
        "items": [
            {"name": "Length", "description": "...", "type": "UINT_16", "bytes": 2},
            {"name": "Type", "description": "...", "type": "UINT_16", "bytes": 2},
            ...
        ]
    }

An item with a negative "bytes" value takes all the bytes remaining in the block,
where the size of the block is the value of the first item. An item with a
"repeat_index" is repeated as many times as the value of the item (already
decoded) at that index.
'''
import logging
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .enum import ItemType
from .exceptions import SchemaError


logger = logging.getLogger(__name__)

# sentinel for the "bytes" of an item taking all the remaining bytes of the block
REMAINING = -1


class ItemDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')

    name: str
    description: str = ''
    type: ItemType
    size: int = Field(alias='bytes')
    repeat_index: Optional[int] = None

    @field_validator('type', mode='before')
    @classmethod
    def unknown_type(cls, value):
        # any type we don't handle becomes ItemType.UNKNOWN instead of failing
        if isinstance(value, str):
            return ItemType(value)

        return value

    @property
    def remaining(self) -> bool:
        return self.size < 0


class BlockDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')

    block_type: int = Field(ge=0, le=0xffff)
    description: str = ''
    color: str = ''
    items: Tuple[ItemDefinition, ...] = ()

    def __str__(self):
        return '%d: %s' % (self.block_type, self.description)

    @classmethod
    def from_json(cls, data) -> 'BlockDefinition':
        '''Parse and validate the definition, any problem is a SchemaError.'''
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            logger.debug('invalid block definition: %s' % e)
            raise SchemaError('invalid block definition: %s' % e) from e
