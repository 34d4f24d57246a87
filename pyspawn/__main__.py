import sys
from doctest import testmod
from . import errors, fd, thread, pipe, stdio, process, command, util
from . import posix_wait, posix_spawn, fork_exec, subprocess
import pyspawn

from .process import change_default_backend, get_backend

failed = 0

print('checking backends...')
for mod in posix_wait, posix_spawn, fork_exec, subprocess:
    print(f'\t{mod.__name__}...')
    failed += testmod(mod).failed
print()

original = get_backend('default')
for backend in 'posix_spawn', 'fork_exec', 'subprocess':
    change_default_backend(backend)
    print(f'with backend {get_backend.default.__name__}...')
    for mod in errors, fd, thread, pipe, stdio, process, command, util, pyspawn:
        print(f'\t{mod.__name__}...')
        failed += testmod(mod).failed
    print()
change_default_backend(original)

sys.exit(1 if failed else 0)
