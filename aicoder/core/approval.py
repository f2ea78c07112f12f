"""
Approval gate for extracted command blocks.

With auto-approve every block runs. Otherwise each block is shown and the
user confirms it with a single `y` line. The read blocks the pipeline, which
is fine: nothing else runs while the user decides.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO

from loguru import logger

from aicoder.core.blocks import CodeBlock
from aicoder.core.errors import ApprovalIOError
from aicoder.core.status import StatusReporter


class ExecutionDecision(Enum):
    APPROVED = "approved"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ApprovalPolicy:
    """
    Process-wide approval policy.

    Attributes:
        auto_approve: Run every block without asking
        allow_unsafe_exec: Acknowledge the risk of auto-approval (silences the warning)
    """
    auto_approve: bool = False
    allow_unsafe_exec: bool = False

    @property
    def needs_warning(self) -> bool:
        return self.auto_approve and not self.allow_unsafe_exec


class ApprovalGate:
    """Produces one ExecutionDecision per code block."""

    def __init__(
        self,
        policy: ApprovalPolicy,
        status: Optional[StatusReporter] = None,
        input_stream: Optional[TextIO] = None,
    ):
        """
        Initialize the approval gate.

        Args:
            policy: Approval policy for the run
            status: Reporter used to display blocks and the prompt
            input_stream: Where answers are read from (defaults to stdin)
        """
        self.policy = policy
        self.status = status or StatusReporter()
        self.input_stream = input_stream

    def decide(self, block: CodeBlock) -> ExecutionDecision:
        """
        Decide whether a block may run.

        Raises:
            ApprovalIOError: If no answer can be read
        """
        if self.policy.auto_approve:
            logger.debug(f"Block {block.order} auto-approved")
            return ExecutionDecision.APPROVED

        self.status.blank()
        self.status.prompt("Execute? (y/n): ")
        answer = self._read_answer()

        if answer.strip().lower() == "y":
            logger.debug(f"Block {block.order} approved by user")
            return ExecutionDecision.APPROVED

        logger.debug(f"Block {block.order} skipped (answer={answer.strip()!r})")
        return ExecutionDecision.SKIPPED

    def _read_answer(self) -> str:
        stream = self.input_stream if self.input_stream is not None else sys.stdin
        try:
            line = stream.readline()
        except (OSError, ValueError) as e:
            raise ApprovalIOError(str(e)) from e

        if line == "":
            raise ApprovalIOError("input stream is closed")
        return line
