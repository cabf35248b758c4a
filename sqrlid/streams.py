import logging
from contextlib import contextmanager

from bitstring import ConstBitStream, ReadError

from .exceptions import FormatError


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around a path or raw bytes to uniform
    its properties: every read is bounded so that a length coming from
    the data itself can't make us read past the end of the buffer.

    Offsets are always expressed in bytes.'''
    def __init__(self, obj):
        self.history = []

        init_method_name = 'init_%s' % obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of object to build a stream from' % obj.__class__.__name__)

        self.obj = init_method(obj)

    def __repr__(self):
        return '<%s(offset=%d, size=%d)>' % (self.__class__.__name__, self.tell(), self.size)

    def __len__(self):
        return self.size

    def init_str(self, path):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % path)
        with open(path, 'rb') as f:
            return ConstBitStream(bytes=f.read())

    def init_PosixPath(self, path):
        return self.init_str(str(path))

    init_WindowsPath = init_PosixPath

    def init_bytes(self, data):
        '''We think these are raw bytes'''
        return ConstBitStream(bytes=data)

    def init_bytearray(self, data):
        return self.init_bytes(bytes(data))

    @property
    def size(self):
        return len(self.obj) // 8

    def tell(self):
        return self.obj.bytepos

    def remaining(self):
        return self.size - self.tell()

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        if offset < 0 or offset > self.size:
            raise FormatError('offset %d is outside of the stream (size %d)' % (offset, self.size))

        self.obj.bytepos = offset

    def read(self, n):
        if n < 0:
            raise FormatError('trying to read a negative amount of bytes (%d)' % n)

        if n > self.remaining():
            raise FormatError('trying to read %d bytes at offset %d but only %d are available' % (
                n, self.tell(), self.remaining()))

        if n == 0:
            return b''

        try:
            return self.obj.read('bytes:%d' % n)
        except ReadError as e:
            raise FormatError(str(e)) from e

    def peek(self, n):
        with self.saved():
            return self.read(n)

    def read_all(self):
        '''Returns all the data from the actual offset to the end'''
        return self.read(self.remaining())

    def slice(self, offset, size):
        '''Returns a new stream containing only "size" bytes starting at "offset",
        reading past its end is an error even if the original stream continues.'''
        with self.saved():
            self.seek(offset)
            data = self.read(size)

        return Stream(data)

    def save(self):
        self.history.append(self.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.seek(old_seek)

    @contextmanager
    def saved(self):
        self.save()
        try:
            yield self
        finally:
            self.restore()
