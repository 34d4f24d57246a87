__all__ = 'wait', 'poll', 'decode_status'

import os


def decode_status(pid, status):
    """turn a raw waitpid() status into a returncode

    Negative values mean the process was killed (or stopped) by that signal.
    """
    if os.WIFSIGNALED(status):
        return -os.WTERMSIG(status)
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    if os.WIFSTOPPED(status):
        return -os.WSTOPSIG(status)
    raise RuntimeError(f'weird exit status for pid {pid}: {hex(status)}')


def wait(pid):
    """block until pid terminates and return its returncode

    >>> from pyspawn.posix_spawn import spawn
    >>> wait(spawn(['sh', '-c', 'exit 3']))
    3
    """
    pid_, status = os.waitpid(pid, 0)
    if pid_ != pid:
        raise RuntimeError(f'pid is {pid_}, expected {pid}')
    return decode_status(pid, status)


def poll(pid):
    """return the returncode of pid if it has terminated, else None

    >>> from time import sleep
    >>> from pyspawn.posix_spawn import spawn
    >>> pid = spawn(['sleep', '0.2'])
    >>> poll(pid) is None
    True
    >>> sleep(0.5); poll(pid)
    0
    """
    pid_, status = os.waitpid(pid, os.WNOHANG)
    if pid_ == 0:
        return None
    if pid_ != pid:
        raise RuntimeError(f'pid is {pid_}, expected {pid}')
    return decode_status(pid, status)
