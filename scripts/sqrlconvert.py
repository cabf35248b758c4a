#!/usr/bin/env python3
'''
Re-serialize a SQRL identity switching between the binary and the
base64 textual transport.

 $ python3 scripts/sqrlconvert.py identity.sqrl identity.txt
'''
import logging
import os
import sys

from sqrlid import SqrlIdException, load_from_path, save_to_path


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print('usage: %s <input identity> <output identity>' % progname)
    sys.exit(1)


if __name__ == '__main__':
    if len(sys.argv) < 3:
        usage(sys.argv[0])

    path_in, path_out = sys.argv[1:3]

    try:
        identity = load_from_path(path_in)
    except SqrlIdException as e:
        logger.error('cannot parse \'%s\': %s' % (path_in, e))
        sys.exit(2)

    to_base64 = not identity.is_base64
    size = save_to_path(identity, path_out, base64=to_base64)

    logger.info('written %d bytes of %s identity into \'%s\'' % (size, 'base64' if to_base64 else 'binary', path_out))
