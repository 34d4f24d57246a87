__all__ = 'PyspawnError', 'PathError', 'ResourceError', 'SpawnError', 'UsageError', 'OutputError'


class PyspawnError(Exception):
    """base class for everything raised by pyspawn"""


class PathError(PyspawnError, OSError):
    """the working directory could not be resolved"""


class ResourceError(PyspawnError, OSError):
    """a pipe or file descriptor could not be allocated or configured"""


class SpawnError(PyspawnError, OSError):
    """the OS refused to create the process

    >>> e = SpawnError('no such program: nope')
    >>> e.reason
    'no such program: nope'
    """
    def __init__(self, reason, *args):
        super().__init__(reason, *args)
        self.reason = reason

    def __str__(self):
        return self.reason


class UsageError(PyspawnError, RuntimeError):
    """the API was used out of order, e.g., a consumed Command was reused"""


class OutputError(PyspawnError):
    """the output of a process as an error, usually raised if exit_status != 0"""
    def __init__(self, exit_status, stdout=None, stderr=None):
        super().__init__(exit_status, stdout, stderr)
        self.exit_status = exit_status
        self.stdout = stdout
        self.stderr = stderr

    def __str__(self):
        return f'process exited with status {self.exit_status}'
