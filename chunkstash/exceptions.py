class StashException(Exception):
    '''Base class to extend in order to throw exception in chunkstash.

    It takes a message and the chain of the layers that the exception
    crossed while propagating: each chunk unpacking a field prepends
    the name of the field, each array the index of the element.
    '''

    def __init__(self, msg='', chain=None):
        self.msg = msg
        self.chain = chain if chain is not None else []
        super().__init__(msg)

    @property
    def path(self):
        path = ''
        for component in self.chain:
            if path and not str(component).startswith('['):
                path += '.'
            path += str(component)

        return path

    def __str__(self):
        if not self.chain:
            return self.msg

        return f'{self.path}: {self.msg}'


class UnpackException(StashException):
    pass


class TruncatedException(UnpackException):

    def __init__(self, needed, available, chain=None):
        self.needed = needed
        self.available = available
        super().__init__(f'truncated input: needed {needed} bytes but only {available} available', chain=chain)


class MagicException(UnpackException):

    def __init__(self, expected, found, chain=None):
        self.expected = expected
        self.found = found
        super().__init__(f'bad signature: expected {expected!r}, found {found!r}', chain=chain)


class ChecksumException(UnpackException):

    def __init__(self, expected, found, chain=None):
        self.expected = expected
        self.found = found
        super().__init__(f'checksum mismatch: expected 0x{expected:08x}, found 0x{found:08x}', chain=chain)


class ChunkTypeException(StashException):
    '''The type code is not made of four ASCII letters (or, when parsing,
    it doesn't respect the reserved bit).'''
    pass


class PackException(StashException):
    '''A value cannot be represented by its field.'''
    pass


class ChunkNotFoundException(StashException):
    pass


class TextDecodeException(StashException):
    pass


class FileException(StashException):

    def __init__(self, msg, path, chain=None):
        self.filepath = path
        super().__init__(msg, chain=chain)
