"""Build runner commands for each chunk and dispatch them through the concurrency runner"""

import logging
import os
import shlex
import signal
import subprocess
from collections.abc import Sequence
from time import time

import anyio
import anyio.abc
import sh

from cypar.chunking import chunk_files
from cypar.models import DispatchResult, RunConfig, RunPlan


logger = logging.getLogger(__name__)


def build_runner_command(chunk: Sequence[str], passthrough_args: Sequence[str], runner: str) -> str:
    """Build the shell command that runs one chunk of spec files.

    The concurrency runner hands each command to a shell, so the comma-joined
    spec list and every pass-through token are quoted.

    Example:
        >>> build_runner_command(['e2e/a.cy.js', 'e2e/b.cy.js'], ['--browser', 'chrome'], 'npx cypress run')
        'npx cypress run --spec e2e/a.cy.js,e2e/b.cy.js --browser chrome'
    """
    parts = [runner, '--spec', shlex.quote(','.join(chunk))]
    if passthrough_args:
        parts.append(shlex.join(passthrough_args))
    return ' '.join(parts)


def build_concurrent_argv(commands: Sequence[str], concurrent_runner: str) -> list[str]:
    """Concurrency runner argv: the runner prefix split into words, then one argument per command."""
    return shlex.split(concurrent_runner) + list(commands)


def build_plan(config: RunConfig, files: Sequence[str]) -> RunPlan:
    """Partition files and build every command for them."""
    chunks = chunk_files(files, config.threads)
    commands = [build_runner_command(chunk, config.passthrough_args, config.runner) for chunk in chunks]
    argv = build_concurrent_argv(commands, config.concurrent_runner) if commands else []

    logger.info(f'Planned {len(chunks)} chunks for {len(files)} spec files ({config.threads} threads requested)')
    for i, chunk in enumerate(chunks, start=1):
        logger.debug(f'Chunk {i}: {len(chunk)} files: {", ".join(chunk)}')

    return RunPlan(
        directory=config.directory,
        extension=config.extension,
        threads=config.threads,
        files=list(files),
        chunks=chunks,
        commands=commands,
        argv=argv,
    )


def _decode(data: bytes | None) -> str:
    if not data:
        return ''
    return data.decode('utf-8', errors='replace')


async def _collect_output(process: anyio.abc.Process) -> tuple[bytes, bytes]:
    """Drain stdout and stderr while waiting for the process to exit."""
    buffers: dict[str, list[bytes]] = {'stdout': [], 'stderr': []}

    async def drain(stream, key: str):
        async for data in stream:
            buffers[key].append(data)

    async with anyio.create_task_group() as tg:
        tg.start_soon(drain, process.stdout, 'stdout')
        tg.start_soon(drain, process.stderr, 'stderr')
        await process.wait()

    return b''.join(buffers['stdout']), b''.join(buffers['stderr'])


def _kill_process_group(process: anyio.abc.Process) -> None:
    """Kill the child and everything it started; the child leads its own session."""
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


async def dispatch(argv: Sequence[str], timeout: float | None = None) -> DispatchResult:
    """Spawn argv as a single child process and wait for it to finish.

    The child runs in a new session so that on timeout its whole process
    group is killed, including the test runners the concurrency runner
    started. Spawn failures, timeouts and non-zero exit codes are reported
    through DispatchResult.error instead of being raised.

    Args:
        argv: Full command line, argv[0] is looked up on PATH
        timeout: Seconds to wait before killing the process group, None waits forever

    Returns:
        DispatchResult with captured output
    """
    argv = list(argv)
    start_time = time()

    if not argv:
        return DispatchResult(argv=argv, error='Nothing to dispatch: empty command')

    try:
        executable = str(sh.Command(argv[0]))
    except sh.CommandNotFound:
        logger.warning(f'{argv[0]} not found on PATH')
        return DispatchResult(argv=argv, error=f'Command not found: {argv[0]}')

    logger.info(f'Dispatching: {shlex.join(argv)}')
    logger.debug(f'Resolved {argv[0]} to {executable}')

    try:
        process = await anyio.open_process(
            [executable, *argv[1:]], stdin=subprocess.DEVNULL, start_new_session=True
        )
    except OSError as e:
        elapsed = time() - start_time
        logger.error(f'Failed to start {argv[0]}: {e}')
        return DispatchResult(argv=argv, error=f'Failed to start {argv[0]}: {e}', duration=elapsed)

    try:
        async with process:
            try:
                with anyio.fail_after(timeout):
                    stdout, stderr = await _collect_output(process)
            except BaseException:
                _kill_process_group(process)
                raise
    except TimeoutError:
        elapsed = time() - start_time
        logger.error(f'{argv[0]} timed out after {elapsed:.1f}s, killed process group {process.pid}')
        return DispatchResult(argv=argv, error=f'Timed out after {timeout}s', duration=elapsed)

    elapsed = time() - start_time
    error = None
    if process.returncode != 0:
        error = f'{argv[0]} exited with code {process.returncode}'

    logger.info(f'{argv[0]} finished with code {process.returncode} in {elapsed:.1f}s')
    return DispatchResult(
        argv=argv,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        exit_code=process.returncode,
        error=error,
        duration=elapsed,
    )


def run_plan(plan: RunPlan, timeout: float | None = None) -> DispatchResult:
    """Dispatch a plan's concurrency runner argv and block until it completes."""
    return anyio.run(dispatch, plan.argv, timeout)
