"""Resolve command-line values and environment defaults into a RunConfig"""

import logging
from collections.abc import Sequence

import psutil
from pydantic import ValidationError

from cypar.errors import ConfigurationError
from cypar.models import DEFAULT_CONCURRENT_RUNNER, DEFAULT_EXTENSION, DEFAULT_RUNNER, RunConfig
from cypar.utils import get_float_env, get_str_env


logger = logging.getLogger(__name__)


def get_default_extension() -> str:
    return get_str_env('CYPAR_EXTENSION', DEFAULT_EXTENSION)


def get_default_runner() -> str:
    return get_str_env('CYPAR_RUNNER', DEFAULT_RUNNER)


def get_default_concurrent_runner() -> str:
    return get_str_env('CYPAR_CONCURRENT_RUNNER', DEFAULT_CONCURRENT_RUNNER)


def get_default_timeout() -> float | None:
    """Get dispatch timeout from CYPAR_TIMEOUT (seconds). 0, unset or invalid means no timeout."""
    seconds = get_float_env('CYPAR_TIMEOUT')
    return seconds if seconds > 0 else None


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for err in error.errors():
        field = '.'.join(str(part) for part in err['loc'])
        messages.append(f'{field}: {err["msg"]}')
    return '; '.join(messages)


def resolve_config(
    directory: str | None,
    threads: str | int | None,
    extension: str | None = None,
    passthrough_args: Sequence[str] = (),
    runner: str | None = None,
    concurrent_runner: str | None = None,
    timeout: float | None = None,
) -> RunConfig:
    """Build a validated RunConfig from raw command-line values.

    Values left as None fall back to the CYPAR_* environment variables and then
    to the built-in defaults. Nothing here touches the filesystem or spawns
    processes.

    Args:
        directory: Directory with spec files (-d / -directory)
        threads: Number of chunks (-t / -threads), as given on the command line
        extension: Spec file substring filter (-ext)
        passthrough_args: Tokens after the `--` terminator
        runner: Test runner command prefix
        concurrent_runner: Concurrency runner command prefix
        timeout: Dispatch timeout in seconds

    Returns:
        RunConfig

    Raises:
        ConfigurationError: If directory or threads is missing or any value is invalid
    """
    if directory is None or directory == '':
        raise ConfigurationError('Missing directory: pass -d/-directory with the folder containing spec files')
    if threads is None or threads == '':
        raise ConfigurationError('Missing thread count: pass -t/-threads with a positive integer')

    try:
        config = RunConfig(
            directory=directory,
            threads=threads,
            extension=extension if extension is not None else get_default_extension(),
            passthrough_args=list(passthrough_args),
            runner=runner if runner is not None else get_default_runner(),
            concurrent_runner=concurrent_runner if concurrent_runner is not None else get_default_concurrent_runner(),
            timeout=timeout if timeout is not None else get_default_timeout(),
        )
    except ValidationError as e:
        raise ConfigurationError(f'Invalid configuration: {_format_validation_error(e)}') from e

    cpu_count = psutil.cpu_count(logical=True)
    if cpu_count and config.threads > cpu_count:
        logger.warning(f'Requested {config.threads} threads but only {cpu_count} logical CPUs are available')

    logger.debug(f'Resolved configuration: {config.model_dump()}')
    return config
