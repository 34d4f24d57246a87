"""the standard streams of a single child process

A Stdio owns everything the parent has to allocate for one child: an FD on
the null device for stdin and an OutputPipe each for stdout and stderr.

>>> with Stdio.allocate() as stdio:
...     os.write(stdio.stdout.fileno(), b'out'); os.write(stdio.stderr.fileno(), b'err')
...     stdio.close_local()
...     stdio.drain()
3
3
(b'out', b'err')
"""

__all__ = 'Stdio', 'STD_NAMES'

import os
import logging

from .fd import FD, CHUNK_SIZE
from .pipe import OutputPipe
from .thread import Thread
from .errors import ResourceError

logger = logging.getLogger(__name__)

STD_NAMES = 'stdin', 'stdout', 'stderr'


def open_null():
    try:
        return FD(os.open(os.devnull, os.O_RDONLY), 'rb')
    except OSError as e:
        raise ResourceError(f'cannot open {os.devnull}: {e.strerror}') from e


class Stdio:
    """stdin, stdout and stderr of a child process, as seen by the parent"""
    def __init__(self, stdin=None, stdout=None, stderr=None):
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr

    @classmethod
    def allocate(cls):
        """create the streams, releasing whatever was created if anything fails

        >>> stdio = Stdio.allocate()
        >>> [stream.closed for stream in stdio]
        [False, False, False]
        >>> stdio.close(); [stream.closed for stream in stdio]
        [True, True, True]
        """
        stdio = cls()
        try:
            stdio.stdin = open_null()
            stdio.stdout = OutputPipe()
            stdio.stderr = OutputPipe()
        except BaseException:
            logger.debug('releasing partially allocated %r', stdio)
            stdio.close()
            raise
        return stdio

    def __iter__(self):
        return iter((self.stdin, self.stdout, self.stderr))

    def streams(self, std_names=False):
        """map child FDs (or their names) to the streams that should back them

        Each stream's fileno() is the parent-side FD to duplicate into the child.
        """
        return {
            STD_NAMES[fd] if std_names else fd: stream
            for fd, stream in enumerate(self)
            if stream is not None
        }

    def close_local(self):
        """close the parent's copies of the child's ends

        This has to happen before draining, since a pipe only reaches
        end-of-stream once every write end is closed, including the parent's.
        """
        if self.stdin is not None:
            self.stdin.close()
        for pipe in self.stdout, self.stderr:
            if pipe is not None:
                pipe.close_local()

    def drain(self, chunk_size=CHUNK_SIZE):
        """read stdout and stderr to end-of-stream

        stderr is read on a separate thread so that a child filling one pipe
        never blocks while the parent waits on the other.
        """
        stderr = None
        thread = None
        if self.stderr is not None:
            thread = Thread(lambda: self.stderr.read(chunk_size)).start()
        try:
            stdout = None if self.stdout is None else self.stdout.read(chunk_size)
        finally:
            if thread is not None:
                stderr = thread.join()
        logger.debug(
            'drained %s bytes of stdout and %s bytes of stderr',
            None if stdout is None else len(stdout),
            None if stderr is None else len(stderr),
        )
        return stdout, stderr

    def close(self):
        for stream in self:
            if stream is not None:
                stream.close()

    @property
    def closed(self):
        return all(stream is None or stream.closed for stream in self)

    def __repr__(self):
        return f'{type(self).__name__}({self.stdin}, {self.stdout}, {self.stderr})'

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.close()
