"""low-level module for spawning and waiting for processes with os.fork and os.exec

It contains spawn(), wait() and poll()


>>> from tempfile import TemporaryDirectory
>>> with TemporaryDirectory() as dir:
...     with open(f'{dir}/file', 'wb') as file:
...         wait(spawn(['echo', 'hello world'], streams={1: file}))
...     with open(f'{dir}/file') as file:
...         print(file.read(), end='')
...
0
hello world
"""

__all__ = 'spawn', 'wait', 'poll'

import os
import signal
import builtins
from .posix_wait import wait, poll
from .pipe import Pipe


def spawn(argv, cwd=None, streams=()):
    """fork, set up the child and exec argv in it, returning the pid

    Errors in the child between fork and exec are sent back through a pipe
    that exec closes, and re-raised here:

    >>> spawn(['/nonexistent/program'])
    Traceback (most recent call last):
    ...
    FileNotFoundError: [Errno 2] No such file or directory
    """
    streams = dict(streams)
    launch_pipe = Pipe()

    try:
        pid = os.fork()
    except BaseException:
        launch_pipe.close()
        raise

    if pid:
        launch_pipe.write_fd.close()
        with launch_pipe:
            error = launch_pipe.read()
        if error:
            from ast import literal_eval
            wait(pid)
            name, argstr = error.decode().split('\n', maxsplit=1)
            error = getattr(builtins, name)
            args = literal_eval(argstr)
            raise error(*args)
        return pid

    try:
        for name in 'SIGPIPE', 'SIGXFSZ':
            sig = getattr(signal, name, None)
            if sig is None:
                continue
            signal.signal(sig, signal.SIG_DFL)

        if cwd is not None:
            os.chdir(cwd)

        for i, stream in streams.items():
            if stream.fileno() == i:
                os.set_inheritable(i, True)
            else:
                os.dup2(stream.fileno(), i)
        for i, stream in streams.items():
            if stream.fileno() not in streams:
                os.close(stream.fileno())

        launch_pipe.read_fd.close()
        os.execvp(argv[0], argv)
    except BaseException as e:
        os.write(launch_pipe.write_fd.fileno(), '\n'.join((
            type(e).__name__ if hasattr(builtins, type(e).__name__) else 'OSError',
            repr(e.args),
        )).encode())
    finally:
        os._exit(127)
