"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~cachecell.exceptions.CacheCellError` subclass.
Shell wrappers can inspect the exit code to tell a missing cache apart from
a broken cache directory without parsing stderr.

Example::

    $ cachecell show versions.json
    $ echo $?
    4   # EXIT_CACHE_UNAVAILABLE -- nothing on disk and no bootstrap
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments or cell configuration (bad file name, negative TTL)."""

EXIT_DIRECTORY_ERROR = 3
"""The cache root directory could not be created."""

EXIT_CACHE_UNAVAILABLE = 4
"""Neither a refresh, the disk copy, nor a bootstrap file produced a value."""

EXIT_REFRESH_ERROR = 5
"""The refresh operation failed."""

EXIT_IO_ERROR = 6
"""A cache file could not be read, decoded, written, copied or removed."""
