r"""shell-like helpers on top of Command

`cmd` builds a Command and, being a funcpipes.Pipe, composes with `|` and `&`:

>>> cmd('echo', 'abc') | to.output | check | get.stdout
'abc\n'

`run` is literally `cmd & to.output`:

>>> run('sh', '-c', "'exit 3'")
Output(exit_status=3, stdout='', stderr='')
>>> run('pwd', cwd='/').stdout
'/\n'

and `wait` picks up a spawned Child:

>>> wait(cmd('echo', 'xyz') | to.spawn)
Output(exit_status=0, stdout='xyz\n', stderr='')
"""

__all__ = (
    'pwd', 'cd', 'cwd', 'lsof', 'lsof_iter', 'children',
    'to', 'get', 'now', 'Arguments',
    'cmd', 'run', 'wait', 'check',
)

import os
from contextlib import contextmanager
from threading import RLock

from funcpipes import Pipe, to, now, get, Arguments
from .command import Command


def lsof_iter(pid=None, return_targets=True):
    """list open file descriptors

    if return_targets is True (default), yields (fd, target) tuples
    otherwise, only yields the file descriptors

    This needs /proc to be properly mounted.
    """
    if pid is None:
        pid = os.getpid()
    fd_dir = f'/proc/{pid}/fd'
    for name in os.listdir(fd_dir):
        if not return_targets:
            yield int(name)
            continue
        try:
            yield int(name), os.readlink(f'{fd_dir}/{name}')
        except FileNotFoundError:
            # the FD listdir() used to read the directory
            continue


@Pipe
def lsof(pid=None):
    """list open file descriptors

    returns a dict of the form {fd: target}

    >>> r, w = os.pipe(); lsof()[r].startswith('pipe:')
    True
    >>> os.close(r); os.close(w)
    """
    return dict(lsof_iter(pid))


def children(pid=None):
    """yield the PIDs of the direct children of pid (by default, this process)

    >>> from pyspawn import Command
    >>> child = Command.create('sleep').arg('0.1').spawn()
    >>> child.pid in children()
    True
    >>> child.wait_with_output().exit_status
    0
    """
    if pid is None:
        pid = os.getpid()
    try:
        for task in os.listdir(f'/proc/{pid}/task'):
            with open(f'/proc/{pid}/task/{task}/children') as file:
                yield from (int(child) for child in file.read().split())
    except FileNotFoundError as e:
        raise ProcessLookupError(pid) from e


@Pipe
def pwd():
    """alias for os.getcwdb()"""
    return os.getcwdb()


@Pipe
def cd(path):
    """alias for os.chdir(), but returns the resultant directory"""
    os.chdir(path)
    return pwd()


@contextmanager
def cwd(path, locked=True):
    """temporarily changes the working directory

    Threadsafe if locked is set (default). The effect is to simply wrap the
    context with a lock. The lock is reentrant, so nested cwd() blocks and
    spawning from inside one work. It is reasonable to keep the code
    inside the `with cwd(...):` block minimal. In the case of launching a
    child process, the working directory of the parent only matters until the
    child is created, so there is no benefit to waiting on the child inside
    the cwd() context.

    >>> before = pwd()
    >>> with cwd('/') as dir: print(dir)
    ...
    b'/'
    >>> pwd() == before
    True
    """
    if locked:
        with cwd.lock:
            yield from cwd.__wrapped__(path, False)
    else:
        orig = pwd()
        try:
            yield cd(path)
        finally:
            cd(orig)
cwd.lock = RLock()  # noqa: E305


@Pipe
def cmd(program, *args, cwd=None):
    r"""creates a Command, see help(Command)

    >>> cmd('echo', 'a', 'b')
    Command('echo')
    """
    command = Command.create(program).args(args)
    if cwd is not None:
        command.current_dir(cwd)
    return command


run = cmd & to.output
wait = to.wait_with_output
check = to.check
