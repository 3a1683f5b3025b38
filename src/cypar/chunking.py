"""Split an ordered spec file list into balanced contiguous chunks"""

import math
from collections.abc import Sequence

from cypar.errors import ConfigurationError


def chunk_size(total: int, threads: int) -> int:
    """Number of files per chunk: ceil(total / threads).

    Raises:
        ConfigurationError: If threads is not a positive integer
    """
    if isinstance(threads, bool) or not isinstance(threads, int) or threads < 1:
        raise ConfigurationError(f'Thread count must be a positive integer, got {threads!r}')
    return math.ceil(total / threads)


def chunk_files(files: Sequence[str], threads: int) -> list[list[str]]:
    """Partition files into at most `threads` contiguous chunks.

    Every chunk but possibly the last holds exactly ceil(len(files) / threads)
    files. Concatenating the chunks in order gives back `files` unchanged. When
    there are fewer files than threads, each file gets its own chunk and the
    remaining slots stay unused. An empty file list yields no chunks.
    """
    size = chunk_size(len(files), threads)
    if size == 0:
        return []
    return [list(files[i : i + size]) for i in range(0, len(files), size)]
