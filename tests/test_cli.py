"""Tests for the cypar command line."""

import json
import logging
import os
import shlex
import sys

from click.testing import CliRunner

from cypar.__version__ import __version__
from cypar.cli.main import cli


FAKE_CONCURRENTLY = """\
import os
import sys

for command in sys.argv[1:]:
    print('CMD', command)
print('fake runner warning', file=sys.stderr)
sys.exit(int(os.environ.get('FAKE_EXIT_CODE', '0')))
"""


class TestCLIConfiguration:
    """Test configuration errors surface before any work starts."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_missing_threads(self, spec_dir, monkeypatch):
        def fail_discovery(*args, **kwargs):
            raise AssertionError('discovery must not run without a thread count')

        monkeypatch.setattr('cypar.cli.run.discover_spec_files', fail_discovery)

        result = self.runner.invoke(cli, ['-d', str(spec_dir)])

        assert result.exit_code == 1
        assert 'Missing thread count' in result.output

    def test_missing_directory(self):
        result = self.runner.invoke(cli, ['-t', '2'])
        assert result.exit_code == 1
        assert 'Missing directory' in result.output

    def test_invalid_threads(self, spec_dir):
        result = self.runner.invoke(cli, ['-d', str(spec_dir), '-t', 'zero'])
        assert result.exit_code == 1
        assert 'Invalid configuration' in result.output

    def test_no_arguments_shows_help(self):
        result = self.runner.invoke(cli, [])
        assert result.exit_code == 0
        assert 'Commands:' in result.output

    def test_short_help(self):
        result = self.runner.invoke(cli, ['-h'])
        assert result.exit_code == 0
        assert 'Commands:' in result.output

    def test_group_verbose_before_plan_stays_a_dry_run(self, spec_dir, monkeypatch):
        def fail_dispatch(*args, **kwargs):
            raise AssertionError('plan must never dispatch')

        monkeypatch.setattr('cypar.cli.run.run_plan', fail_dispatch)

        result = self.runner.invoke(cli, ['--verbose', 'plan', '-d', str(spec_dir), '-t', '2', '--no-color'])

        assert result.exit_code == 0
        assert 'Spec files: 4 in 2 chunks (2 requested)' in result.output
        assert logging.getLogger('cypar').level == logging.DEBUG

    def test_group_verbose_before_default_command(self, spec_dir, monkeypatch):
        def fail_dispatch(*args, **kwargs):
            raise AssertionError('configuration error must stop before dispatch')

        monkeypatch.setattr('cypar.cli.run.run_plan', fail_dispatch)

        result = self.runner.invoke(cli, ['-v', '-d', str(spec_dir)])

        assert result.exit_code == 1
        assert 'Missing thread count' in result.output
        assert logging.getLogger('cypar').level == logging.DEBUG

    def test_version(self):
        result = self.runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestCLIPlan:
    """Test the plan command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_plan_json(self, spec_dir):
        result = self.runner.invoke(cli, ['plan', '-d', str(spec_dir), '-t', '3', '--json'])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['threads'] == 3
        assert len(data['files']) == 4
        assert [len(chunk) for chunk in data['chunks']] == [2, 2]
        assert data['argv'][:2] == ['npx', 'concurrently']
        assert len(data['commands']) == 2

    def test_plan_long_flags(self, spec_dir):
        result = self.runner.invoke(
            cli, ['plan', '-directory', str(spec_dir), '-threads', '1', '-ext', 'spec.ts', '--no-color']
        )

        assert result.exit_code == 0
        assert 'Spec files: 1 in 1 chunks (1 requested)' in result.output
        assert 'search.spec.ts' in result.output

    def test_plan_passthrough(self, spec_dir):
        result = self.runner.invoke(
            cli, ['plan', '-d', str(spec_dir), '-t', '2', '--json', '--', '--browser', 'chrome', '--headed']
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert all(cmd.endswith('--browser chrome --headed') for cmd in data['commands'])

    def test_plan_no_files(self, tmp_path):
        result = self.runner.invoke(cli, ['plan', '-d', str(tmp_path), '-t', '2', '--no-color'])

        assert result.exit_code == 0
        assert 'Spec files: 0 in 0 chunks' in result.output
        assert 'No spec files found' in result.output


class TestCLIRun:
    """Test the default run command against a fake concurrency runner."""

    def setup_method(self):
        self.runner = CliRunner()

    def fake_runner(self, tmp_path) -> str:
        script = tmp_path / 'fake_concurrently.py'
        script.write_text(FAKE_CONCURRENTLY)
        return shlex.join([sys.executable, str(script)])

    def test_run_is_default_command(self, spec_dir, tmp_path):
        result = self.runner.invoke(
            cli,
            ['-d', str(spec_dir), '-t', '2', '--concurrent-runner', self.fake_runner(tmp_path), '--', '--browser', 'chrome'],
        )

        assert result.exit_code == 0
        assert 'Running 4 spec files in 2 chunks' in result.output
        cmd_lines = [line for line in result.output.splitlines() if line.startswith('CMD ')]
        assert len(cmd_lines) == 2
        assert cmd_lines[0] == (
            f"CMD npx cypress run --spec "
            f"{os.path.join(str(spec_dir), 'cart.cy.js')},{os.path.join(str(spec_dir), 'checkout.cy.js')} "
            f"--browser chrome"
        )
        assert 'fake runner warning' in result.output

    def test_explicit_run_command(self, spec_dir, tmp_path):
        result = self.runner.invoke(
            cli, ['run', '-d', str(spec_dir), '-t', '8', '--concurrent-runner', self.fake_runner(tmp_path)]
        )

        assert result.exit_code == 0
        cmd_lines = [line for line in result.output.splitlines() if line.startswith('CMD ')]
        assert len(cmd_lines) == 4

    def test_runner_override(self, spec_dir, tmp_path):
        result = self.runner.invoke(
            cli,
            [
                '-d',
                str(spec_dir),
                '-t',
                '1',
                '--runner',
                'yarn cypress run',
                '--concurrent-runner',
                self.fake_runner(tmp_path),
            ],
        )

        assert result.exit_code == 0
        assert 'CMD yarn cypress run --spec ' in result.output

    def test_no_files_is_an_error(self, tmp_path):
        result = self.runner.invoke(cli, ['-d', str(tmp_path), '-t', '2'])

        assert result.exit_code == 1
        assert 'No spec files found' in result.output

    def test_missing_directory_reports_nothing_to_run(self, tmp_path):
        result = self.runner.invoke(cli, ['-d', str(tmp_path / 'missing'), '-t', '2'])

        assert result.exit_code == 1
        assert 'Nothing to run' in result.output

    def test_runner_failure_keeps_exit_code_zero(self, spec_dir, tmp_path, monkeypatch):
        monkeypatch.setenv('FAKE_EXIT_CODE', '4')

        result = self.runner.invoke(
            cli, ['-d', str(spec_dir), '-t', '2', '--concurrent-runner', self.fake_runner(tmp_path)]
        )

        assert result.exit_code == 0
        assert 'exited with code 4' in result.output

    def test_strict_propagates_exit_code(self, spec_dir, tmp_path, monkeypatch):
        monkeypatch.setenv('FAKE_EXIT_CODE', '4')

        result = self.runner.invoke(
            cli, ['-d', str(spec_dir), '-t', '2', '--strict', '--concurrent-runner', self.fake_runner(tmp_path)]
        )

        assert result.exit_code == 4

    def test_strict_from_environment(self, spec_dir, tmp_path, monkeypatch):
        monkeypatch.setenv('FAKE_EXIT_CODE', '2')
        monkeypatch.setenv('CYPAR_STRICT', 'true')

        result = self.runner.invoke(
            cli, ['-d', str(spec_dir), '-t', '2', '--concurrent-runner', self.fake_runner(tmp_path)]
        )

        assert result.exit_code == 2

    def test_strict_missing_runner(self, spec_dir):
        result = self.runner.invoke(
            cli, ['-d', str(spec_dir), '-t', '2', '--strict', '--concurrent-runner', 'cypar-missing-concurrently']
        )

        assert result.exit_code == 1
        assert 'Command not found: cypar-missing-concurrently' in result.output

    def test_group_verbose_runs_default_command(self, spec_dir, tmp_path):
        result = self.runner.invoke(
            cli, ['--verbose', '-d', str(spec_dir), '-t', '2', '--concurrent-runner', self.fake_runner(tmp_path)]
        )

        assert result.exit_code == 0
        cmd_lines = [line for line in result.output.splitlines() if line.startswith('CMD ')]
        assert len(cmd_lines) == 2
