import errno
import os

import pytest

from pyspawn import OutputPipe, Pipe, ResourceError, Stdio
from conftest import needs_proc


def test_pipe_ends():
    with Pipe() as p:
        assert p.readable() and p.writable()
        assert p.write(b'abc') == 3
        assert not p.writable()
        assert p.read() == b'abc'
    assert p.closed


def test_output_pipe_read_end_not_inherited():
    with OutputPipe() as p:
        assert not p.read_fd.inheritable
        assert p.fileno() == int(p.write_fd)
        p.close_local()
        assert p.write_fd.closed and not p.read_fd.closed


def test_pipe_creation_failure(monkeypatch):
    def exhausted():
        raise OSError(errno.EMFILE, 'Too many open files')
    monkeypatch.setattr(os, 'pipe', exhausted)
    with pytest.raises(ResourceError, match='Too many open files'):
        Pipe()


@needs_proc
def test_output_pipe_inheritance_failure_releases_both_ends(monkeypatch, fd_snapshot):
    from pyspawn import lsof

    def refuse(fd, value):
        raise OSError(errno.EPERM, 'Operation not permitted')
    monkeypatch.setattr(os, 'set_inheritable', refuse)
    with pytest.raises(ResourceError):
        OutputPipe()
    assert set(lsof()) == fd_snapshot


def test_stdio_close_local_then_drain():
    with Stdio.allocate() as stdio:
        os.write(stdio.stdout.fileno(), b'x' * 100)
        stdio.close_local()
        assert stdio.stdin.closed
        assert stdio.drain(chunk_size=7) == (b'x' * 100, b'')
    assert stdio.closed


def test_stdio_streams():
    with Stdio.allocate() as stdio:
        assert stdio.streams() == {0: stdio.stdin, 1: stdio.stdout, 2: stdio.stderr}
        assert list(stdio.streams(std_names=True)) == ['stdin', 'stdout', 'stderr']


@needs_proc
def test_stdio_allocation_failure_releases_everything(monkeypatch, fd_snapshot):
    from pyspawn import lsof
    from pyspawn import stdio as stdio_module

    created = []

    class FailingSecond(OutputPipe):
        def __init__(self, mode='b'):
            if created:
                raise ResourceError('cannot create pipe: Too many open files')
            super().__init__(mode)
            created.append(self)

    monkeypatch.setattr(stdio_module, 'OutputPipe', FailingSecond)
    with pytest.raises(ResourceError):
        Stdio.allocate()
    assert len(created) == 1 and created[0].closed
    assert set(lsof()) == fd_snapshot

