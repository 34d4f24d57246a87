"""low-level module for spawning and waiting for processes with posix_spawn

It contains spawn(), wait() and poll()


>>> from tempfile import TemporaryDirectory
>>> with TemporaryDirectory() as dir:
...     with open(f'{dir}/file', 'wb') as file:
...         wait(spawn(['pwd'], cwd=dir, streams={1: file}))
...     with open(f'{dir}/file') as file:
...         file.read() == f'{os.path.realpath(dir)}\\n'
...
0
True
"""

__all__ = 'spawn', 'wait', 'poll'

import os
from .posix_wait import wait, poll


def spawn(argv, cwd=None, streams=()):
    """spawn a process and return its pid

    cwd:     directory to run in; posix_spawn has no notion of this, so the
             parent's own directory is switched (under a lock) around the call
    streams: {child_fd: stream} where each stream has a fileno()

    >>> from time import time
    >>> start = time(); pid = spawn(['sleep', '0.2']); wait(pid); print(round(time() - start, 1))
    0
    0.2
    """
    import signal
    from contextlib import nullcontext
    from .util import cwd as working_directory

    streams = dict(streams)
    # a stream already sitting on its target FD only has to survive exec
    in_place = [ fd for fd, stream in streams.items() if stream.fileno() == fd ]
    file_actions = [
        (os.POSIX_SPAWN_DUP2, stream.fileno(), child_fd)
        for child_fd, stream in streams.items()
        if child_fd not in in_place
    ] + [
        (os.POSIX_SPAWN_CLOSE, stream.fileno())
        for stream in streams.values()
        if stream.fileno() not in streams
    ]

    setsigdef = (getattr(signal, sig, None) for sig in ('SIGPIPE', 'SIGXFSZ'))
    setsigdef = [ sig for sig in setsigdef if sig is not None ]

    inheritable = { fd: os.get_inheritable(fd) for fd in in_place }
    for fd in in_place:
        os.set_inheritable(fd, True)
    try:
        with nullcontext() if cwd is None else working_directory(cwd):
            return os.posix_spawnp(
                argv[0], argv, os.environ,
                file_actions=file_actions,
                setsigdef=setsigdef,
            )
    finally:
        for fd, value in inheritable.items():
            os.set_inheritable(fd, value)
