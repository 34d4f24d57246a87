__all__ = (
    'Child', 'Output', 'ProcessHandle',
    'spawn', 'wait_with_output',
    'change_default_backend', 'get_backend',
)

from .fd import CHUNK_SIZE
from .stdio import Stdio
from .errors import OutputError, PyspawnError, SpawnError
from sys import platform
from time import sleep
import logging
import os

logger = logging.getLogger(__name__)


def get_backend(name=None):
    if name == 'subprocess':
        from . import subprocess as backend
        return backend
    if name == 'posix_spawn':
        from . import posix_spawn as backend
        return backend
    if name == 'fork_exec':
        from . import fork_exec as backend
        return backend
    if name == 'default':
        return get_backend.default
    raise ValueError(f'unknown backend: {name}')


if 'PYSPAWN_BACKEND' in os.environ:
    get_backend.default = get_backend(os.environ['PYSPAWN_BACKEND'])
elif platform == 'win32':
    get_backend.default = get_backend('subprocess')
elif hasattr(os, 'posix_spawnp'):
    get_backend.default = get_backend('posix_spawn')
else:
    get_backend.default = get_backend('fork_exec')


def change_default_backend(name_or_namespace):
    if isinstance(name_or_namespace, str):
        get_backend.default = get_backend(name_or_namespace)
    else:
        name_or_namespace.spawn
        name_or_namespace.wait
        name_or_namespace.poll
        get_backend.default = name_or_namespace
    return get_backend.default


def wait_interval(interval='default'):
    """None to block until exit, or the number of seconds between polls"""
    return wait_interval.default if interval == 'default' else interval


wait_interval.default = (
    float(os.environ['PYSPAWN_POLL_INTERVAL'])
    if os.environ.get('PYSPAWN_POLL_INTERVAL') else None
)


class ProcessHandle:
    """a spawned process, from creation until it is released

    >>> from pyspawn.command import Invocation
    >>> child = spawn(Invocation('sh', ('-c', "'exit 5'")))
    >>> child.stdio.close()
    >>> with child.process as process: process.wait(interval=0.01)
    ...
    5
    >>> process.returncode, process.released
    (5, True)
    """
    def __init__(self, pid, backend, line=None):
        self.pid = pid
        self.backend = backend
        self.line = line
        self.returncode = None
        self.released = False

    def poll(self):
        """the exit status if the process has terminated, otherwise None"""
        if self.returncode is None:
            self.returncode = self.backend.poll(self.pid)
            if self.returncode is not None:
                logger.debug('pid %d exited with status %d', self.pid, self.returncode)
        return self.returncode

    def wait(self, interval='default'):
        """wait for the process to terminate and return its exit status

        interval: None to block in the OS until the process exits, or the
                  number of seconds to sleep between polls
        """
        interval = wait_interval(interval)
        if self.returncode is not None:
            return self.returncode
        if interval is None:
            self.returncode = self.backend.wait(self.pid)
            logger.debug('pid %d exited with status %d', self.pid, self.returncode)
            return self.returncode
        while self.poll() is None:
            sleep(interval)
        return self.returncode

    def release(self):
        """forget about the process; a terminated one is reaped first"""
        if self.released:
            return
        self.released = True
        if self.poll() is None:
            logger.warning('releasing pid %d (%s) while it is still running', self.pid, self.line)
        # backends that keep per-process state get to drop it
        release = getattr(self.backend, 'release', None)
        if release is not None:
            release(self.pid)

    def __repr__(self):
        return f'{type(self).__name__}(pid={self.pid}, line={repr(self.line)}, returncode={self.returncode})'

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.release()


class Output:
    r"""the result after waiting on a process

    >>> Output(0, 'Hello World\n', '')
    Output(exit_status=0, stdout='Hello World\n', stderr='')
    >>> Output(0, 'abc', '').check().stdout
    'abc'
    >>> exit_status, stdout, stderr = Output(1, '', 'oops')
    >>> exit_status
    1
    """
    def __init__(self, exit_status, stdout=None, stderr=None):
        self.exit_status = exit_status
        self.stdout = stdout
        self.stderr = stderr

    def check(self):
        """raise an error if exit_status != 0

        >>> Output(2, '', 'oops').check()
        Traceback (most recent call last):
        ...
        pyspawn.errors.OutputError: process exited with status 2
        """
        if self.exit_status != 0:
            raise OutputError(*self)
        return self

    def __repr__(self):
        param_str = ', '.join(f'{n}={repr(a)}' for n, a in vars(self).items())
        return f'{type(self).__name__}({param_str})'

    def __iter__(self):
        return iter(vars(self).values())

    def __eq__(self, other):
        if not isinstance(other, Output):
            return NotImplemented
        return tuple(self) == tuple(other)


def wait_with_output(
    process, stdio,
    *,
    encoding='utf-8', errors='replace', interval='default', chunk_size=CHUNK_SIZE,
):
    r"""collect everything a spawned process writes and wait for it to exit

    The parent's write ends are closed first, then stdout and stderr are
    drained to end-of-stream, and only then is the process waited on. The
    process and all the pipes are released no matter how this returns.

    encoding: how to decode stdout and stderr; None to keep bytes
    errors:   passed to bytes.decode()
    interval: see ProcessHandle.wait()
    chunk_size: maximum size of a single read

    >>> from pyspawn.command import Invocation
    >>> child = spawn(Invocation('sh', ('-c', "'echo abc; echo xyz >&2; exit 1'")))
    >>> wait_with_output(child.process, child.stdio)
    Output(exit_status=1, stdout='abc\n', stderr='xyz\n')
    >>> child.stdio.closed, child.process.released
    (True, True)
    """
    with process, stdio:
        stdio.close_local()
        stdout, stderr = stdio.drain(chunk_size)
        exit_status = process.wait(interval)
    if encoding is not None:
        stdout = stdout.decode(encoding, errors)
        stderr = stderr.decode(encoding, errors)
    return Output(exit_status, stdout, stderr)


class Child:
    """a process spawned with its standard streams still attached"""
    def __init__(self, process, stdio):
        self.process = process
        self.stdio = stdio

    @property
    def pid(self):
        return self.process.pid

    def wait_with_output(self, **kwargs):
        """see wait_with_output()"""
        return wait_with_output(self.process, self.stdio, **kwargs)

    def __repr__(self):
        return f'{type(self).__name__}({self.process}, {self.stdio})'


def spawn(invocation, backend='default'):
    """start an Invocation with its stdout and stderr going to fresh pipes

    Either a Child comes back or nothing is left behind: if spawning fails,
    every pipe allocated along the way is closed before the error propagates.

    >>> from pyspawn.command import Invocation
    >>> spawn(Invocation('/nonexistent/program'))
    Traceback (most recent call last):
    ...
    pyspawn.errors.SpawnError: cannot spawn '/nonexistent/program': No such file or directory
    """
    backend = get_backend(backend) if isinstance(backend, str) else backend
    argv = invocation.line if platform == 'win32' else invocation.argv
    cwd = invocation.resolve_cwd()

    stdio = Stdio.allocate()
    try:
        pid = backend.spawn(argv, None if invocation.cwd is None else str(cwd), stdio.streams())
    except BaseException as e:
        stdio.close()
        if isinstance(e, OSError) and not isinstance(e, PyspawnError):
            raise SpawnError(f'cannot spawn {repr(invocation.line)}: {e.strerror or e}') from e
        raise

    logger.debug('spawned %r in %s as pid %d with %s', invocation.line, cwd, pid, getattr(backend, '__name__', backend))
    return Child(ProcessHandle(pid, backend, invocation.line), stdio)

