"""Main CLI entry point with command groups"""

import click

from cypar.__version__ import __version__
from cypar.cli.plan import plan_command
from cypar.cli.run import run_command


class DefaultCommandGroup(click.Group):
    """Custom Click Group that allows a default command"""

    # Group flags that may precede the subcommand name
    group_flags = ('--verbose', '-v')

    def parse_args(self, ctx, args):
        # During shell completion, don't redirect to default command
        if ctx.resilient_parsing:
            return super().parse_args(ctx, args)

        index = 0
        while index < len(args) and args[index] in self.group_flags:
            index += 1

        # If --help or --version is requested, show group help/version
        if index == len(args) or args[index] in ('--help', '-h', '--version'):
            return super().parse_args(ctx, args)

        if args[index] in self.commands:
            return super().parse_args(ctx, args)

        # Otherwise, treat as run command (default)
        return super().parse_args(ctx, args[:index] + ['run'] + args[index:])


@click.group(
    cls=DefaultCommandGroup,
    invoke_without_command=True,
    context_settings={'help_option_names': ['-h', '--help']},
)
@click.version_option(version=__version__, prog_name='cypar')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging for any command')
@click.pass_context
def cli(ctx, verbose):
    """
    cypar - run Cypress spec files in parallel chunks.

    \b
    Commands:
      cypar -d DIR -t N [-- ARGS]    Split specs into N chunks and run them (default command)
      cypar plan -d DIR -t N         Show the chunks and commands without running them

    \b
    Examples:
      cypar -d cypress/e2e -t 4
      cypar -d cypress/e2e -t 4 -- --browser chrome
      cypar plan -d cypress/e2e -t 4 --json

    \b
    Environment:
      CYPAR_RUNNER              Test runner command (default: npx cypress run)
      CYPAR_CONCURRENT_RUNNER   Concurrency runner command (default: npx concurrently)
      CYPAR_EXTENSION           Default spec file filter (default: cy.js)
      CYPAR_TIMEOUT             Runner timeout in seconds (default: none)
      CYPAR_STRICT              Exit with the runner's exit code (default: false)
      CYPAR_LOG_LEVEL           Log level (default: WARNING)
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


cli.add_command(run_command, name='run')
cli.add_command(plan_command, name='plan')


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
