"""low-level module for spawning and waiting for processes with subprocess.Popen

It contains spawn(), wait() and poll()

This is the only backend that works on Windows, where argv may also be a
plain command line that is handed to CreateProcess untouched.

>>> import os
>>> from tempfile import TemporaryDirectory
>>> with TemporaryDirectory() as dir:
...     with open(f'{dir}/file', 'wb') as file:
...         wait(spawn(['echo', 'hello world'], streams={'stdout': file}))
...     with open(f'{dir}/file') as file:
...         print(file.read(), end='')
...
0
hello world
"""

__all__ = 'spawn', 'wait', 'poll', 'release'

from subprocess import Popen
from threading import Lock
from .stdio import STD_NAMES

spawned = {}
spawned_lock = Lock()


def spawn(argv, cwd=None, streams=()):
    """spawn a process and return its pid

    streams: {child_fd: stream} or {std_name: stream}; only the standard
             streams are supported
    """
    streams = {
        STD_NAMES[fd] if isinstance(fd, int) else fd: stream
        for fd, stream in dict(streams).items()
    }
    popen = Popen(argv, cwd=cwd, **streams)
    with spawned_lock:
        spawned[popen.pid] = popen
    return popen.pid


def wait(pid):
    with spawned_lock:
        popen = spawned.get(pid)
    if popen is None:
        from .posix_wait import wait
        return wait(pid)
    returncode = popen.wait()
    with spawned_lock:
        spawned.pop(pid, None)
    return returncode


def poll(pid):
    with spawned_lock:
        popen = spawned.get(pid)
    if popen is None:
        from .posix_wait import poll
        return poll(pid)
    returncode = popen.poll()
    if returncode is not None:
        with spawned_lock:
            spawned.pop(pid, None)
    return returncode


def release(pid):
    """stop tracking pid and return its Popen, if it was still tracked"""
    with spawned_lock:
        return spawned.pop(pid, None)
