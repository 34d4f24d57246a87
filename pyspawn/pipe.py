__all__ = 'Pipe', 'OutputPipe'

from .fd import FD, CHUNK_SIZE
from .errors import ResourceError
import os


class Pipe:
    """wrapper around os.pipe

    Each Pipe owns both of its ends and creates them fresh, so no settings
    are ever shared between two pipes.

    >>> p = Pipe()
    >>> p.write(b'hello')
    5
    >>> p.read()
    b'hello'
    >>> p.close()
    """
    def __init__(self, mode='b'):
        """initialize the pipe

        mode: whatever would be passed to open(), except 'r' and 'w' since the
              read endpoint gets and 'r' and the write endpoint a 'w'
        """
        try:
            fds = os.pipe()
        except OSError as e:
            raise ResourceError(f'cannot create pipe: {e.strerror}') from e
        self.fds = tuple(
            FD(fd, f'{rw}{mode}')
            for fd, rw in zip(fds, 'rw')
        )

    @property
    def read_fd(self):
        return self.fds[0]

    @property
    def write_fd(self):
        return self.fds[1]

    @property
    def closed(self):
        return all(fd.closed for fd in self.fds)

    def close(self, invalid_ok=True):
        for fd in self.fds:
            fd.close(invalid_ok)

    def write(self, data):
        """write some data to the pipe and close the write end

        >>> p = Pipe(); p.write(b'123'); p.write_fd.closed
        3
        True
        >>> p.close()
        """
        with self.write_fd.open() as file:
            return file.write(data)

    def read(self, chunk_size=CHUNK_SIZE):
        """read everything up to end-of-stream"""
        return self.read_fd.drain(chunk_size)

    def __repr__(self):
        return f'{type(self).__name__}()<{self.read_fd}, {self.write_fd}>'

    def readable(self):
        return self.read_fd.readable()

    def writable(self):
        return self.write_fd.writable()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.close()


class OutputPipe(Pipe):
    """Pipe designed for use as the output of a process

    The write end goes to the child, so that is what fileno() reports. The
    read end stays with the parent and is never inherited by anyone.

    >>> with OutputPipe() as p: p.read_fd.inheritable
    ...
    False
    """
    def __init__(self, mode='b'):
        super().__init__(mode)
        try:
            self.read_fd.mark_not_inherited()
        except BaseException:
            self.close()
            raise

    def fileno(self):
        return int(self.write_fd)

    def close_local(self):
        self.write_fd.close()
