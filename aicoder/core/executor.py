"""
Command execution for approved blocks.
Each block runs as one shell subprocess; failures never abort the batch.
"""

import subprocess
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from aicoder.core.blocks import CodeBlock
from aicoder.core.status import StatusReporter

DEFAULT_SHELL = "bash"


@dataclass
class ExecutionResult:
    """Outcome of running one approved block."""
    order: int
    exit_status: Optional[int]
    succeeded: bool
    error: Optional[str] = None
    stdout: str = ""
    stderr: str = ""

    def describe(self) -> str:
        if self.error:
            return self.error
        if self.exit_status is not None and self.exit_status < 0:
            return f"terminated by signal {-self.exit_status}"
        return f"exit status: {self.exit_status}"


class CommandExecutor:
    """Runs approved blocks sequentially, one subprocess at a time."""

    def __init__(
        self,
        shell: str = DEFAULT_SHELL,
        capture_output: bool = False,
        status: Optional[StatusReporter] = None,
    ):
        """
        Initialize the executor.

        Args:
            shell: Interpreter invoked as `<shell> -c <content>`
            capture_output: Capture stdout/stderr and reprint them on the status channel
            status: Reporter for captured output
        """
        self.shell = shell
        self.capture_output = capture_output
        self.status = status or StatusReporter()

    def run(self, block: CodeBlock) -> ExecutionResult:
        """Run a block and wait for it to finish."""
        logger.info(f"Executing block {block.order} with {self.shell}")

        try:
            proc = subprocess.run(
                [self.shell, "-c", block.content],
                capture_output=self.capture_output,
                text=True,
                errors="replace",
            )
        except OSError as e:
            logger.error(f"Failed to launch {self.shell}: {e}")
            return ExecutionResult(
                order=block.order,
                exit_status=None,
                succeeded=False,
                error=f"failed to launch {self.shell}: {e}",
            )

        result = ExecutionResult(
            order=block.order,
            exit_status=proc.returncode,
            succeeded=proc.returncode == 0,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )

        if self.capture_output:
            self.status.show_output("stdout", result.stdout)
            self.status.show_output("stderr", result.stderr, level="error")

        if result.succeeded:
            logger.debug(f"Block {block.order} succeeded")
        else:
            logger.warning(f"Block {block.order} failed: {result.describe()}")
        return result
