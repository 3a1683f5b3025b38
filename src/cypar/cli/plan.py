"""CLI plan command: show how spec files would be chunked without running them"""

import click

from cypar.cli.run import discover_and_plan, plan_options, resolve_or_exit, verbose_requested
from cypar.utils import setup_logging


@click.command('plan')
@plan_options
@click.option('--json', 'output_json', is_flag=True, help='Output in JSON format')
@click.option('--no-color', is_flag=True, help='Disable colored output')
def plan_command(
    directory: str | None,
    threads: str | None,
    extension: str | None,
    runner: str | None,
    concurrent_runner: str | None,
    verbose: bool,
    passthrough_args: tuple[str, ...],
    output_json: bool,
    no_color: bool,
):
    """Print the chunks and runner commands without starting anything.

    \b
    Examples:
        cypar plan -d cypress/e2e -t 4
        cypar plan -d cypress/e2e -t 4 --json
        cypar plan -d cypress/e2e -t 2 -- --browser firefox
    """
    setup_logging(verbose_requested(verbose))

    config = resolve_or_exit(
        directory=directory,
        threads=threads,
        extension=extension,
        passthrough_args=passthrough_args,
        runner=runner,
        concurrent_runner=concurrent_runner,
    )

    plan = discover_and_plan(config)

    if output_json:
        click.echo(plan.model_dump_json(indent=2))
    else:
        click.echo(plan.to_cli(colorize=not no_color))

    if plan.is_empty:
        click.echo(f'No spec files found matching "{config.extension}" in {config.directory}.', err=True)
