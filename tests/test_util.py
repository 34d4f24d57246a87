import os

import pytest

from pyspawn import Command, Output, OutputError, cmd, run, wait, check, get, to, cwd, pwd
from conftest import needs_proc


def test_cmd_builds_a_command(tmp_path):
    command = cmd('echo', 'a', 'b', cwd=tmp_path)
    assert isinstance(command, Command)
    invocation = command.build()
    assert invocation.line == 'echo a b'
    assert invocation.cwd == str(tmp_path)


def test_run_and_check():
    assert run('echo', 'hi') | check | get.stdout == 'hi\n'
    with pytest.raises(OutputError):
        run('sh', '-c', "'exit 2'") | check


def test_wait_on_a_spawned_child():
    child = cmd('sh', '-c', "'echo out; echo err >&2'") | to.spawn
    assert wait(child) == Output(0, 'out\n', 'err\n')


def test_partial_application():
    in_root = run.partial(cwd='/')
    assert in_root('pwd').stdout == '/\n'


def test_cwd_restores_on_error(tmp_path):
    before = pwd()
    with pytest.raises(ZeroDivisionError):
        with cwd(tmp_path):
            assert os.path.samefile(os.getcwd(), tmp_path)
            1 / 0
    assert pwd() == before


@needs_proc
def test_lsof_sees_new_fds():
    from pyspawn import lsof
    r, w = os.pipe()
    try:
        fds = lsof()
        assert fds[r].startswith('pipe:') and fds[w] == fds[r]
    finally:
        os.close(r)
        os.close(w)
    assert r not in lsof()


@needs_proc
def test_children_of_missing_process():
    from pyspawn import children
    with pytest.raises(ProcessLookupError):
        list(children(2 ** 22 + 1))
