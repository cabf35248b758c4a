#!/usr/bin/env python3
'''
Dump the content of a SQRL identity, block by block.

 $ SQRLID_BLOCKDEF_PATH=blockdef/ python3 scripts/sqrldump.py identity.sqrl
'''
import logging
import os
import sys

from sqrlid import (
    BlockDefinitionResolver,
    ChainSource,
    DirectorySource,
    PackageSource,
    SqrlIdException,
    load_from_path,
)


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print('usage: %s <identity file>' % progname)
    sys.exit(1)


def get_resolver():
    path = os.environ.get('SQRLID_BLOCKDEF_PATH')
    source = ChainSource(DirectorySource(path), PackageSource()) if path else PackageSource()

    return BlockDefinitionResolver(source)


def dump_block(idx, block, known):
    print(f'''[{idx:02d}] type {block.block_type}{"" if known else " (unknown)"}: {block.description}''')
    for item in block.items:
        value = item.value if len(item.value) <= 50 else item.value[:40] + '...'
        print(f'''     {item.name:<30} {item.type.value:<10} {item.size:>4}  {value}''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]
    resolver = get_resolver()

    try:
        identity = load_from_path(path, resolver)
    except SqrlIdException as e:
        logger.error('cannot parse \'%s\': %s' % (path, e))
        sys.exit(2)

    print(f'''Identity: {path}
  Transport:                         {"base64" if identity.is_base64 else "binary"}
  Number of blocks:                  {len(identity)}''')

    for idx, block in enumerate(identity):
        dump_block(idx, block, resolver.is_known(block.block_type))
