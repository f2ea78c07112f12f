"""
Tests for the agent loop (extract -> approve -> execute).
"""

import io
import shutil

import pytest

from aicoder.core.agent import run_agent
from aicoder.core.approval import ApprovalGate, ApprovalPolicy
from aicoder.core.errors import ApprovalIOError
from aicoder.core.executor import CommandExecutor, ExecutionResult

pytestmark = pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")

RESPONSE = (
    "First, fail:\n"
    "```bash\nexit 1\n```\n"
    "Some python you should not run:\n"
    "```python\nprint('no')\n```\n"
    "Then succeed:\n"
    "```sh\necho second\n```\n"
)


class RecordingExecutor(CommandExecutor):
    """Executor that records blocks instead of running them."""

    def __init__(self, status):
        super().__init__(status=status)
        self.ran = []

    def run(self, block):
        self.ran.append(block)
        return ExecutionResult(order=block.order, exit_status=0, succeeded=True)


def make_gate(status, answers=None, auto=False, unsafe=False):
    policy = ApprovalPolicy(auto_approve=auto, allow_unsafe_exec=unsafe)
    stream = io.StringIO(answers) if answers is not None else None
    return ApprovalGate(policy, status=status, input_stream=stream)


class TestRunAgent:

    def test_failure_does_not_stop_the_batch(self, status):
        gate = make_gate(status, auto=True, unsafe=True)
        executor = CommandExecutor(capture_output=True, status=status)

        results = run_agent(RESPONSE, gate, executor)

        assert [(r.order, r.succeeded) for r in results] == [(0, False), (1, True)]
        assert results[0].exit_status == 1
        assert "Command failed with exit status: 1" in status.output
        assert "✓ Command succeeded" in status.output

    def test_binary_output_does_not_stop_the_batch(self, status):
        gate = make_gate(status, auto=True, unsafe=True)
        executor = CommandExecutor(capture_output=True, status=status)
        response = "```bash\nprintf '\\xff'\n```\n```bash\necho after\n```\n"

        results = run_agent(response, gate, executor)

        assert [r.succeeded for r in results] == [True, True]
        assert results[1].stdout == "after\n"

    def test_skipped_blocks_are_not_run(self, status):
        gate = make_gate(status, answers="n\ny\n")
        executor = RecordingExecutor(status)

        results = run_agent(RESPONSE, gate, executor)

        assert [b.content for b in executor.ran] == ["echo second\n"]
        assert [r.order for r in results] == [1]
        assert "Skipped." in status.output

    def test_all_skipped(self, status):
        executor = RecordingExecutor(status)

        results = run_agent(RESPONSE, make_gate(status, answers="n\nn\n"), executor)

        assert results == []
        assert executor.ran == []

    def test_blocks_are_shown(self, status):
        run_agent(RESPONSE, make_gate(status, answers="n\nn\n"), RecordingExecutor(status))

        assert status.output.count("Found bash command(s):") == 2
        assert "echo second" in status.output

    def test_approval_io_error_aborts_remaining_blocks(self, status):
        executor = RecordingExecutor(status)

        with pytest.raises(ApprovalIOError):
            run_agent(RESPONSE, make_gate(status, answers="y\n"), executor)

        assert len(executor.ran) == 1

    def test_auto_approve_warning(self, status):
        run_agent("no blocks here", make_gate(status, auto=True), RecordingExecutor(status))

        assert "WARNING: Auto-approving commands without --allow-unsafe-exec." in status.output

    def test_no_warning_with_unsafe_flag(self, status):
        run_agent("no blocks here", make_gate(status, auto=True, unsafe=True), RecordingExecutor(status))

        assert "WARNING" not in status.output

    def test_no_blocks(self, status):
        assert run_agent("Nothing to run.", make_gate(status, answers=""), RecordingExecutor(status)) == []
