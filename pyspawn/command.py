r"""building up a command line one piece at a time

>>> Command.create('echo').current_dir('.').arg('Hello').args(['World']).output()
Output(exit_status=0, stdout='Hello World\n', stderr='')

A Command is used up once it is built, spawned or run:

>>> command = Command.create('true'); child = command.spawn()
>>> command.arg('again')
Traceback (most recent call last):
...
pyspawn.errors.UsageError: Command('true') has already been used
>>> child.wait_with_output().exit_status
0
"""

__all__ = 'Command', 'Invocation'

import os
from pathlib import Path
from shlex import split

from .errors import PathError, UsageError
from .process import spawn


class Invocation:
    """what a Command turns into once it is built

    The command line is the program and the arguments joined by single
    spaces. Nothing is escaped, so arguments with spaces or quotes in them
    must already be quoted the way they should reach the child:

    >>> invocation = Invocation('printf', ('%s-', "'a b'", 'c'))
    >>> invocation.line
    "printf %s- 'a b' c"
    >>> invocation.argv
    ['printf', '%s-', 'a b', 'c']
    >>> invocation.output().stdout
    'a b-c-'
    """
    def __init__(self, program, arguments=(), cwd=None):
        self.program = program
        self.arguments = tuple(arguments)
        self.cwd = cwd

    @property
    def line(self):
        return ' '.join((self.program,) + self.arguments)

    @property
    def argv(self):
        """the line split into words the way a POSIX shell would

        >>> Invocation('echo', ("don't",)).argv
        Traceback (most recent call last):
        ...
        pyspawn.errors.UsageError: cannot split "echo don't": No closing quotation
        """
        try:
            argv = split(self.line)
        except ValueError as e:
            raise UsageError(f'cannot split {repr(self.line)}: {e}') from e
        if not argv:
            raise UsageError('no program to run')
        return argv

    def resolve_cwd(self):
        """the absolute directory to run in, which has to exist

        >>> Invocation('true', cwd='/').resolve_cwd()
        PosixPath('/')
        >>> Invocation('true', cwd='/nonexistent').resolve_cwd()
        Traceback (most recent call last):
        ...
        pyspawn.errors.PathError: not a directory: /nonexistent
        """
        from .util import cwd as working_directory

        # util.cwd() moves the whole process, so relative paths are only
        # meaningful while nobody else holds its lock
        with working_directory.lock:
            try:
                cwd = Path.cwd() if self.cwd is None else Path(self.cwd).absolute()
            except OSError as e:
                raise PathError(f'cannot resolve working directory {self.cwd}: {e.strerror}') from e
        if not cwd.is_dir():
            raise PathError(f'not a directory: {cwd}')
        return cwd

    def spawn(self, backend='default'):
        """start the process; see pyspawn.process.spawn()"""
        return spawn(self, backend)

    def output(self, backend='default', **kwargs):
        """start the process and wait for its Output

        kwargs go to Child.wait_with_output()
        """
        return self.spawn(backend).wait_with_output(**kwargs)

    def __repr__(self):
        return f'{type(self).__name__}({repr(self.line)}, cwd={repr(self.cwd)})'


class Builder:
    def __init__(self, program):
        self.program = program
        self.cwd = None
        self.arguments = []


def normalize(value):
    try:
        return os.fsdecode(value)
    except TypeError:
        raise TypeError(f'expected str, bytes or os.PathLike, not {type(value).__name__}') from None


class Command:
    """a fluent builder for an Invocation

    create(program), then any number of current_dir(), arg() and args(),
    then exactly one of build(), spawn() or output().

    >>> command = Command.create('ls').current_dir('/').arg('-d').args(['.', '..'])
    >>> command.build()
    Invocation('ls -d . ..', cwd='/')
    >>> command.build()
    Traceback (most recent call last):
    ...
    pyspawn.errors.UsageError: Command('ls') has already been used
    """
    def __init__(self, program):
        self._program = normalize(program)
        self._builder = Builder(self._program)

    @classmethod
    def create(cls, program):
        return cls(program)

    def _building(self):
        if self._builder is None:
            raise UsageError(f'{self} has already been used')
        return self._builder

    def current_dir(self, path):
        self._building().cwd = normalize(path)
        return self

    def arg(self, arg):
        self._building().arguments.append(normalize(arg))
        return self

    def args(self, args):
        """append every element of an iterable of arguments

        >>> Command.create('echo').args('abc')
        Traceback (most recent call last):
        ...
        TypeError: args() takes an iterable of arguments, not 'str'; use arg() for one
        """
        if isinstance(args, (str, bytes, os.PathLike)):
            raise TypeError(f'args() takes an iterable of arguments, not {repr(type(args).__name__)}; use arg() for one')
        builder = self._building()
        builder.arguments.extend([ normalize(arg) for arg in args ])
        return self

    def build(self):
        """hand the accumulated state over to an Invocation

        >>> Command.create('').build()
        Traceback (most recent call last):
        ...
        pyspawn.errors.UsageError: no program to run
        """
        builder = self._building()
        if not builder.program.strip():
            raise UsageError('no program to run')
        self._builder = None
        return Invocation(builder.program, builder.arguments, builder.cwd)

    def spawn(self, backend='default'):
        """build() and spawn; returns a Child"""
        return self.build().spawn(backend)

    def output(self, backend='default', **kwargs):
        """build(), spawn and wait; returns an Output"""
        return self.build().output(backend, **kwargs)

    @property
    def consumed(self):
        return self._builder is None

    def __repr__(self):
        return f'{type(self).__name__}({repr(self._program)})'
