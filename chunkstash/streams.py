import io
import logging
import os
import shutil
import tempfile

from .exceptions import TruncatedException, FileException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/file object to
    uniform its properties: mainly we need a read() method that
    never returns less than what was asked.

    Before each read the remaining bytes are checked and a
    TruncatedException is raised if they are not enough, so
    that nobody downstream has to deal with short reads.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        if isinstance(obj, os.PathLike):
            obj = os.fspath(obj)

        self.obj = None

        init_method_name = 'init_%s' % obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of object to stream from' % obj.__class__.__name__)

        init_method(obj)

        self.obj.seek(0, io.SEEK_END)
        self._size = self.obj.tell()
        self.obj.seek(0)

    def __repr__(self):
        return f'<{self.__class__.__name__}(offset={self.tell()}, size={self._size})>'

    def __del__(self):
        self.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        obj = self.__dict__.get('obj')
        if obj is not None:
            obj.close()

    def init_str(self, path):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % path)
        try:
            self.obj = open(path, 'rb')
        except OSError as e:
            raise FileException(f"unable to open '{path}': {e.strerror}", path) from e

    def init_bytes(self, data):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(data)

    def init_bytearray(self, data):
        self.obj = io.BytesIO(bytes(data))

    def init_memoryview(self, data):
        self.obj = io.BytesIO(data.tobytes())

    @property
    def size(self) -> int:
        return self._size

    def tell(self) -> int:
        return self.obj.tell()

    def remaining(self) -> int:
        return self._size - self.obj.tell()

    def is_exhausted(self) -> bool:
        return self.remaining() <= 0

    def read(self, n: int) -> bytes:
        available = self.remaining()
        if n > available:
            raise TruncatedException(needed=n, available=available)

        return self.obj.read(n)

    def read_all(self) -> bytes:
        return self.obj.read()


def read_all_bytes(path) -> bytes:
    '''Return the whole content of the file at path.'''
    logger.debug('reading \'%s\'' % path)
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise FileException(f"unable to read '{path}': {e.strerror}", path) from e


def write_all_bytes(path, data: bytes) -> None:
    '''Replace the content of the file at path with data.

    The data is written into a temporary file living in the same directory
    that then takes the place of the original one, so that a failed write
    leaves the original untouched.'''
    path = os.fspath(path)
    directory = os.path.dirname(os.path.abspath(path))

    logger.debug('writing %d bytes to \'%s\'' % (len(data), path))

    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(dir=directory, delete=False) as tmp:
            tmp_path = tmp.name
            tmp.write(data)

        if os.path.exists(path):
            shutil.copymode(path, tmp_path)
        else:
            # the temporary file is private, a new file follows the umask
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(tmp_path, 0o666 & ~umask)

        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise FileException(f"unable to write '{path}': {e.strerror}", path) from e
