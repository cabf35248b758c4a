"""
# SQRL identities for humans.

A SQRL identity is a container of binary blocks, each one tagged with its
length and its type. What a block contains is not hard-coded here but
described by a block definition (a JSON document, see sqrlid.schema) looked
up by type when parsing: types without a definition are kept as opaque bytes,
so nothing is lost.

Two basic operations are defined

 1. parse: read the binary data (or its base64 textual form) and build an
    Identity, i.e. an ordered list of Blocks each one with its ordered list
    of Items.

 2. pack: encode the Identity back into binary data.

In between an editor can change the value of the items, add, remove
and reorder blocks.

    from sqrlid import load_from_path, save_to_path
    identity = load_from_path('identity.sqrl')
    identity.move_block(identity[1], 'up')
    save_to_path(identity, 'identity.sqrl')
"""
from .codec import (
    HEADER,
    HEADER_BASE64,
    IdentityParser,
    load_from_bytes,
    load_from_path,
    save_to_path,
)
from .core import Block, Identity
from .enum import Direction, ItemType
from .exceptions import ArgumentError, FormatError, SchemaError, SqrlIdException
from .resolver import BlockDefinitionResolver, ChainSource, DirectorySource, PackageSource
