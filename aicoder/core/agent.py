"""
Agent loop: extract shell blocks from a response, gate them, run them.
"""

from typing import List, Optional

from loguru import logger

from aicoder.core.approval import ApprovalGate, ExecutionDecision
from aicoder.core.blocks import extract_code_blocks
from aicoder.core.executor import CommandExecutor, ExecutionResult
from aicoder.core.status import StatusReporter


def run_agent(
    response: str,
    gate: ApprovalGate,
    executor: CommandExecutor,
    status: Optional[StatusReporter] = None,
) -> List[ExecutionResult]:
    """
    Offer every shell block in the response for execution, in order.

    A failed command is reported and the next block is still offered.

    Returns:
        One result per approved block

    Raises:
        ApprovalIOError: If the approval answer cannot be read
    """
    status = status or gate.status

    if gate.policy.needs_warning:
        status.blank()
        status.agent(
            "⚠️  WARNING: Auto-approving commands without --allow-unsafe-exec.",
            level="warning",
        )
        status.agent(
            "⚠️  This is risky as model-generated commands could be harmful.",
            level="warning",
        )

    blocks = extract_code_blocks(response)
    logger.info(f"Found {len(blocks)} shell block(s) in response")

    results: List[ExecutionResult] = []
    for block in blocks:
        status.blank()
        status.agent("Found bash command(s):")
        status.show_block(block.content)

        decision = gate.decide(block)
        if decision is ExecutionDecision.SKIPPED:
            status.agent("Skipped.")
            continue

        status.blank()
        status.agent("Executing...")
        result = executor.run(block)
        results.append(result)

        if result.succeeded:
            status.agent("✓ Command succeeded", level="success")
        else:
            status.agent(f"⚠️  Command failed with {result.describe()}", level="error")

    return results
