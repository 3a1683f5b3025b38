"""CLI run command: split spec files into chunks and run them concurrently"""

import logging
import sys

import click

from cypar.config import resolve_config
from cypar.discovery import discover_spec_files
from cypar.dispatch import build_plan, run_plan
from cypar.errors import ConfigurationError
from cypar.models import RunConfig, RunPlan
from cypar.utils import get_bool_env, setup_logging


logger = logging.getLogger(__name__)


def plan_options(func):
    """Options shared by the run and plan commands."""
    decorators = [
        click.option(
            '-d', '-directory', '--directory', 'directory', default=None, help='Directory with spec files (required)'
        ),
        click.option(
            '-t', '-threads', '--threads', 'threads', default=None, help='Number of parallel chunks (required)'
        ),
        click.option(
            '-ext',
            '--ext',
            'extension',
            default=None,
            help='Substring a spec file path must contain. Default: cy.js (or CYPAR_EXTENSION)',
        ),
        click.option(
            '--runner',
            default=None,
            help='Test runner command for each chunk. Default: "npx cypress run" (or CYPAR_RUNNER)',
        ),
        click.option(
            '--concurrent-runner',
            default=None,
            help='Command that runs chunk commands in parallel. Default: "npx concurrently" (or CYPAR_CONCURRENT_RUNNER)',
        ),
        click.option('--verbose', '-v', is_flag=True, help='Enable debug logging'),
        click.argument('passthrough_args', nargs=-1, type=click.UNPROCESSED),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def verbose_requested(verbose: bool) -> bool:
    """True when --verbose was given to the command or to the cypar group."""
    root = click.get_current_context().find_root()
    return verbose or bool((root.obj or {}).get('verbose'))


def resolve_or_exit(**kwargs) -> RunConfig:
    """Resolve configuration, printing the problem and exiting on ConfigurationError."""
    try:
        return resolve_config(**kwargs)
    except ConfigurationError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)


def discover_and_plan(config: RunConfig) -> RunPlan:
    files = discover_spec_files(config.directory, config.extension)
    return build_plan(config, files)


@click.command('run')
@plan_options
@click.option('--timeout', type=float, default=None, help='Kill the runner after this many seconds (or CYPAR_TIMEOUT)')
@click.option('--strict', is_flag=True, help="Exit with the runner's exit code (or CYPAR_STRICT=1)")
def run_command(
    directory: str | None,
    threads: str | None,
    extension: str | None,
    runner: str | None,
    concurrent_runner: str | None,
    verbose: bool,
    passthrough_args: tuple[str, ...],
    timeout: float | None,
    strict: bool,
):
    """Split spec files into chunks and run each chunk in its own runner process.

    Everything after `--` is passed to every runner invocation.

    \b
    Examples:
        cypar -d cypress/e2e -t 4
        cypar -d cypress/e2e -t 4 -ext spec.ts
        cypar -d cypress/e2e -t 3 -- --browser chrome --headed
        cypar run -d cypress/e2e -t 4 --timeout 1800 --strict

    \b
    Exit codes:
        0  runner finished (its own exit code is only used with --strict)
        1  invalid configuration, or no spec files found
    """
    setup_logging(verbose_requested(verbose))

    config = resolve_or_exit(
        directory=directory,
        threads=threads,
        extension=extension,
        passthrough_args=passthrough_args,
        runner=runner,
        concurrent_runner=concurrent_runner,
        timeout=timeout,
    )

    plan = discover_and_plan(config)
    if plan.is_empty:
        click.echo(f'No spec files found matching "{config.extension}" in {config.directory}. Nothing to run.', err=True)
        sys.exit(1)

    click.echo(f'Running {len(plan.files)} spec files in {len(plan.chunks)} chunks', err=True)
    result = run_plan(plan, config.timeout)

    if result.stdout:
        click.echo(result.stdout, nl=not result.stdout.endswith('\n'))
    if result.stderr:
        click.echo(result.stderr, err=True, nl=not result.stderr.endswith('\n'))

    if result.error:
        logger.error(f'Dispatch failed: {result.error}')
        click.echo(f'Error: {result.error}', err=True)
    else:
        logger.info(result.summary())

    if strict or get_bool_env('CYPAR_STRICT', False):
        if result.exit_code is not None:
            sys.exit(result.exit_code)
        sys.exit(0 if result.ok else 1)
    sys.exit(0)
