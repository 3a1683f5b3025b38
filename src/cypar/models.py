"""Pydantic models for run configuration, plans and dispatch results"""

from pydantic import BaseModel, Field


DEFAULT_EXTENSION = 'cy.js'
DEFAULT_RUNNER = 'npx cypress run'
DEFAULT_CONCURRENT_RUNNER = 'npx concurrently'


class RunConfig(BaseModel):
    """Resolved command-line configuration, passed explicitly through every stage

    Attributes:
        directory: Root directory scanned for spec files
        threads: Requested number of chunks (and concurrent runner processes)
        extension: Substring a spec file path must contain
        passthrough_args: Tokens forwarded verbatim to every runner invocation
        runner: Test runner command prefix
        concurrent_runner: Concurrency runner command prefix
        timeout: Seconds to wait for the dispatched process, None waits forever
    """

    directory: str = Field(..., min_length=1, example='cypress/e2e')
    threads: int = Field(..., gt=0, example=4, description='Number of chunks to split spec files into')
    extension: str = Field(DEFAULT_EXTENSION, min_length=1, example='cy.js')
    passthrough_args: list[str] = Field(default_factory=list, example=['--browser', 'chrome'])
    runner: str = Field(DEFAULT_RUNNER, min_length=1)
    concurrent_runner: str = Field(DEFAULT_CONCURRENT_RUNNER, min_length=1)
    timeout: float | None = Field(None, gt=0, description='Dispatch timeout in seconds')


class RunPlan(BaseModel):
    """Spec file chunks and the commands built for them"""

    directory: str
    extension: str
    threads: int
    files: list[str] = Field(default_factory=list)
    chunks: list[list[str]] = Field(default_factory=list)
    commands: list[str] = Field(default_factory=list, description='One test runner command per chunk')
    argv: list[str] = Field(default_factory=list, description='Concurrency runner argv wrapping all commands')

    @property
    def is_empty(self) -> bool:
        return not self.chunks

    def to_cli(self, colorize: bool = False) -> str:
        """Format plan for CLI output"""
        GREY = '\033[90m'
        CYAN = '\033[36m'
        BOLD_CYAN = '\033[1;36m'
        YELLOW = '\033[33m'
        RESET = '\033[0m'

        lines = []

        if colorize:
            lines.append(f"{GREY}Directory:{RESET} {BOLD_CYAN}{self.directory}{RESET}")
            lines.append(f"{GREY}Extension:{RESET} {self.extension}")
            lines.append(
                f"{GREY}Spec files:{RESET} {YELLOW}{len(self.files)}{RESET} "
                f"{GREY}in{RESET} {YELLOW}{len(self.chunks)}{RESET} {GREY}chunks "
                f"({self.threads} requested){RESET}"
            )
        else:
            lines.append(f"Directory: {self.directory}")
            lines.append(f"Extension: {self.extension}")
            lines.append(f"Spec files: {len(self.files)} in {len(self.chunks)} chunks ({self.threads} requested)")

        for i, (chunk, command) in enumerate(zip(self.chunks, self.commands), start=1):
            lines.append("")
            if colorize:
                lines.append(f"{CYAN}Chunk {i}{RESET} {GREY}({len(chunk)} files){RESET}")
            else:
                lines.append(f"Chunk {i} ({len(chunk)} files)")
            for path in chunk:
                lines.append(f"  {path}")
            lines.append(f"  $ {command}")

        return "\n".join(lines)


class DispatchResult(BaseModel):
    """Outcome of the single concurrency runner process

    Attributes:
        argv: The argv that was (or would have been) spawned
        stdout: Captured standard output
        stderr: Captured standard error
        exit_code: Process exit code, None when the process never finished
        error: Description of a spawn failure, timeout or non-zero exit
        duration: Wall time in seconds
    """

    argv: list[str]
    stdout: str = ''
    stderr: str = ''
    exit_code: int | None = None
    error: str | None = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and self.exit_code == 0

    def summary(self) -> str:
        if self.ok:
            return f'Finished in {self.duration:.1f}s'
        return f'Failed after {self.duration:.1f}s: {self.error}'
