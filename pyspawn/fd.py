__all__ = 'FD', 'CHUNK_SIZE'

import os
from errno import EBADF
from select import select

from .errors import ResourceError

CHUNK_SIZE = 4096


class FD:
    """file descriptor wrapper

    A glorified integer with a close() method that only ever closes once,
    since the OS is free to hand the same number out again afterwards.

    >>> r, w = os.pipe()
    >>> rfd, wfd = FD(r, 'rb'), FD(w, 'wb')
    >>> with wfd.open() as file: file.write(b'test')
    ...
    4
    >>> wfd.closed, rfd.drain()
    (True, b'test')
    >>> rfd.close(); rfd.close(); rfd.closed
    True
    """
    def __init__(self, fd, mode='r'):
        self.fd = int(fd)
        self.mode = mode
        self._closed = False

    def fileno(self):
        return self.fd

    def open(self):
        """wrap in a file object; the file object takes over closing the FD"""
        self._closed = True
        return open(self.fd, self.mode)

    def close(self, invalid_ok=True):
        if self._closed:
            return
        self._closed = True
        try:
            os.close(self.fd)
        except OSError as e:
            if not invalid_ok or e.errno != EBADF:
                raise

    @property
    def closed(self):
        return self._closed

    @property
    def inheritable(self):
        """whether the FD gets duplicated into child processes"""
        return os.get_inheritable(self.fd)

    @inheritable.setter
    def inheritable(self, value):
        os.set_inheritable(self.fd, value)

    def mark_not_inherited(self):
        """make sure the FD does not leak into any child process

        >>> r, w = os.pipe(); os.set_inheritable(r, True)
        >>> fd = FD(r); fd.mark_not_inherited(); fd.inheritable
        False
        >>> fd.close(); os.close(w)
        """
        try:
            self.inheritable = False
        except OSError as e:
            raise ResourceError(f'cannot clear inheritable flag on fd {self.fd}: {e.strerror}') from e

    def drain(self, chunk_size=CHUNK_SIZE):
        """read until end-of-stream, however many reads that takes

        Only an empty read counts as end-of-stream; short reads just mean the
        writer has not caught up. Non-blocking FDs are waited on with select().

        >>> r, w = os.pipe(); os.write(w, b'x' * 10000); os.close(w)
        10000
        >>> with FD(r) as fd: len(fd.drain(chunk_size=7))
        ...
        10000
        """
        chunks = []
        while True:
            try:
                chunk = os.read(self.fd, chunk_size)
            except BlockingIOError:
                select([self.fd], [], [])
                continue
            if not chunk:
                break
            chunks.append(chunk)
        return b''.join(chunks)

    def readable(self):
        return any(c in self.mode for c in 'r+') and not self.closed

    def writable(self):
        return any(c in self.mode for c in 'wxa+') and not self.closed

    def __repr__(self):
        return f'{type(self).__name__}({self.fd}, {repr(self.mode)})'

    def __int__(self):
        return self.fd

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.close()
