import sys
from doctest import testmod

import pytest

import pyspawn
from pyspawn import errors, fd, thread, pipe, stdio, process, command, util
from pyspawn import posix_wait, posix_spawn, fork_exec, subprocess
from pyspawn.process import change_default_backend, get_backend
from conftest import BACKENDS

pytestmark = pytest.mark.skipif(sys.platform == 'win32', reason='doctests use POSIX tools')

MODULES = errors, fd, thread, pipe, stdio, process, command, util, pyspawn


@pytest.mark.parametrize('module', [posix_wait, posix_spawn, fork_exec, subprocess], ids=lambda m: m.__name__)
def test_backend_doctests(module):
    assert testmod(module).failed == 0


@pytest.mark.parametrize('module', MODULES, ids=lambda m: m.__name__)
@pytest.mark.parametrize('backend', BACKENDS)
def test_doctests(backend, module):
    original = get_backend('default')
    change_default_backend(backend)
    try:
        assert testmod(module).failed == 0
    finally:
        change_default_backend(original)
