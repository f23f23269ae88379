"""Batch processing of named test cases.

For each name, in order: resolve the test case, run the configured
conversion, then run the internal and external test commands against the
result. The first fatal error stops the whole batch.
"""

import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from neatest.config import BatchConfig, ConversionMode
from neatest.converter import convert_to_external, convert_to_internal
from neatest.test_case import TestCase

# Shell convention for a command that could not be found
COMMAND_NOT_FOUND = 127


class CommandRun(BaseModel):
    """One test command invocation and its exit status."""

    command: str
    path: Path
    returncode: int


class BatchResult(BaseModel):
    """Names processed and test commands run during a batch."""

    processed: list[str] = []
    command_runs: list[CommandRun] = []

    @property
    def failed_runs(self) -> list[CommandRun]:
        return [run for run in self.command_runs if run.returncode != 0]


def run_test_command(command: str, path: Path) -> int:
    """Run a test command with the path appended as its final argument.

    Args:
        command: Command line, split shell-style into arguments
        path: File passed as the last argument

    Returns:
        Exit status of the command
    """
    args = [*shlex.split(command), str(path)]
    logger.debug(f"Running {args}")
    try:
        completed = subprocess.run(args, check=False)  # noqa: S603
    except FileNotFoundError:
        logger.error(f"Test command not found: {args[0]}")
        return COMMAND_NOT_FOUND
    logger.debug(f"Command exited with status {completed.returncode}")
    return completed.returncode


class BatchCoordinator:
    """Runs conversions and test commands for a list of test case names.

    Attributes:
        config: Explicit batch configuration
        trace: Callable receiving one trace line before each command runs
        runner: Callable executing a test command, returning its exit status
    """

    def __init__(
        self,
        config: BatchConfig,
        trace: Callable[[str], None] = print,
        runner: Callable[[str, Path], int] = run_test_command,
    ):
        self.config = config
        self.trace = trace
        self.runner = runner

    def resolve(self, name: str) -> TestCase:
        return TestCase(name, self.config.internal_dir, self.config.external_dir)

    def convert(self, test_case: TestCase) -> None:
        """Run the configured conversion for one test case."""
        if self.config.mode is ConversionMode.TO_INTERNAL:
            convert_to_internal(test_case)
        elif self.config.mode is ConversionMode.TO_EXTERNAL:
            convert_to_external(test_case, strict=self.config.strict)

    def _run(self, command: str, path: Path, result: BatchResult) -> None:
        self.trace(f"Executing {command} {path}")
        returncode = self.runner(command, path)
        result.command_runs.append(CommandRun(command=command, path=path, returncode=returncode))

    def process(self, name: str, result: BatchResult) -> None:
        """Convert and test a single named test case."""
        test_case = self.resolve(name)
        self.convert(test_case)

        if self.config.internal_test_command:
            self._run(self.config.internal_test_command, test_case.internal_path, result)
        if self.config.external_test_command:
            self._run(self.config.external_test_command, test_case.dic_path, result)

        result.processed.append(test_case.name)

    def run(self, names: list[str]) -> BatchResult:
        """Process every name in order, stopping at the first fatal error.

        Raises:
            MissingArtifactError: If a required file is missing
            UnclassifiedBlockError: If strict and a block is unclassified
        """
        result = BatchResult()
        logger.info(f"Processing {len(names)} test case(s) in mode {self.config.mode.value}")
        for name in names:
            self.process(name, result)
        logger.info(f"Processed {len(result.processed)} test case(s)")
        return result
