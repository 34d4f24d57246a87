import os
import sys
from shlex import quote

import pytest

from pyspawn import Command

BACKENDS = (
    ('subprocess',) if sys.platform == 'win32'
    else ('posix_spawn', 'fork_exec', 'subprocess')
)

needs_proc = pytest.mark.skipif(
    not os.path.isdir('/proc/self/fd'), reason='needs /proc',
)


@pytest.fixture(params=BACKENDS)
def backend(request):
    return request.param


def python(*lines):
    """a Command running sys.executable on the given lines of code"""
    code = '\n'.join(lines)
    return Command.create(quote(sys.executable)).args(['-c', quote(code)])


@pytest.fixture
def fd_snapshot():
    """the set of open FDs before the test; compare against lsof() after it"""
    from pyspawn import lsof
    return set(lsof())
