import errno
import os

import pytest

from pyspawn import FD, ResourceError
from pyspawn.thread import Thread


def test_close_only_once():
    r, w = os.pipe()
    fd = FD(r)
    fd.close()
    # the number may be handed out again; a second close must not touch it
    r2, w2 = os.pipe()
    try:
        fd.close()
        assert os.fstat(r2)
    finally:
        for n in w, r2, w2:
            os.close(n)


def test_mark_not_inherited():
    r, w = os.pipe()
    with FD(r) as rfd, FD(w) as wfd:
        wfd.inheritable = True
        assert wfd.inheritable
        wfd.mark_not_inherited()
        assert not wfd.inheritable
        assert not rfd.inheritable


def test_mark_not_inherited_failure(monkeypatch):
    def refuse(fd, value):
        raise OSError(errno.EBADF, 'Bad file descriptor')
    monkeypatch.setattr(os, 'set_inheritable', refuse)
    r, w = os.pipe()
    with FD(r) as fd, FD(w):
        with pytest.raises(ResourceError):
            fd.mark_not_inherited()


def test_drain_keeps_reading_past_short_reads():
    r, w = os.pipe()
    payload = bytes(range(256)) * 4096

    def write():
        with FD(w, 'wb').open() as file:
            for i in range(0, len(payload), 1000):
                file.write(payload[i:i + 1000])
                file.flush()

    thread = Thread(write).start()
    with FD(r) as fd:
        data = fd.drain(chunk_size=4096)
    thread.join()
    assert data == payload


def test_drain_nonblocking():
    r, w = os.pipe()
    os.set_blocking(r, False)

    def write():
        with FD(w, 'wb').open() as file:
            file.write(b'a' * 100000)

    thread = Thread(write).start()
    with FD(r) as fd:
        assert fd.drain() == b'a' * 100000
    thread.join()


def test_drain_empty():
    r, w = os.pipe()
    os.close(w)
    with FD(r) as fd:
        assert fd.drain() == b''
