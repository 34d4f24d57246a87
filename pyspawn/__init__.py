r"""pyspawn - run a child process and collect everything it writes

A Command is built up piece by piece and then run:

>>> Command.create('echo').current_dir('./').arg('Hello').args(['World']).output()
Output(exit_status=0, stdout='Hello World\n', stderr='')

output() is just spawn() followed by wait_with_output(), which can be done
separately:

>>> child = Command.create('sh').args(['-c', "'echo out; echo err >&2; exit 4'"]).spawn()
>>> child.wait_with_output()
Output(exit_status=4, stdout='out\n', stderr='err\n')

The command line is the program and its arguments joined by single spaces,
and nothing is escaped, so arguments that need quoting must come quoted:

>>> from shlex import quote
>>> Command.create('printf').args(['%s|', quote('a b'), 'c']).output().stdout
'a b|c|'

Both streams are read until the child closes them, however much it writes:

>>> script = "'head -c 1000000 /dev/zero; head -c 1000000 /dev/zero >&2'"
>>> output = Command.create('sh').args(['-c', script]).output(encoding=None)
>>> len(output.stdout), len(output.stderr)
(1000000, 1000000)

Failures raise, and whatever had been allocated is released first:

>>> Command.create('/nonexistent/program').output()
Traceback (most recent call last):
...
pyspawn.errors.SpawnError: cannot spawn '/nonexistent/program': No such file or directory
>>> Command.create('true').current_dir('/nonexistent').output()
Traceback (most recent call last):
...
pyspawn.errors.PathError: not a directory: /nonexistent

The same thing can be written with funcpipes-style helpers:

>>> run('echo', 'abc') | check | get.stdout
'abc\n'

The process is started by one of several backends: 'posix_spawn',
'fork_exec' or 'subprocess'. The default can be set through the
PYSPAWN_BACKEND environment variable or with change_default_backend(), and a
backend can be chosen per call:

>>> Command.create('echo').arg('hi').output(backend='subprocess').stdout
'hi\n'

Waiting blocks in the OS by default. Setting PYSPAWN_POLL_INTERVAL (or
passing interval=...) polls instead:

>>> Command.create('sleep').arg('0.1').output(interval=0.01).exit_status
0
"""

from .errors import *  # noqa: F401 F403
from .fd import FD  # noqa: F401
from .pipe import Pipe, OutputPipe  # noqa: F401
from .stdio import Stdio  # noqa: F401
from .process import *  # noqa: F401 F403
from .command import Command, Invocation  # noqa: F401
from .util import *  # noqa: F401 F403
from . import errors, process, util


__all__ = (
    ('FD', 'Pipe', 'OutputPipe', 'Stdio', 'Command', 'Invocation')
    + errors.__all__ + process.__all__ + util.__all__
)
