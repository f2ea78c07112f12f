"""
Pipeline - one prompt from request to executed commands.

    prompt -> stream frames -> accumulate (echo live) -> [agent mode]
           -> extract shell blocks -> approve -> execute

Everything runs on one thread. The only waits are the next network chunk,
the approval answer and the running command.
"""

from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from loguru import logger

from aicoder.core.accumulator import GenerationOutcome, OutputSink, ResponseAccumulator
from aicoder.core.agent import run_agent
from aicoder.core.approval import ApprovalGate, ApprovalPolicy
from aicoder.core.executor import DEFAULT_SHELL, CommandExecutor, ExecutionResult
from aicoder.core.model_profile import ModelProfile
from aicoder.core.runtime import LocalRuntime
from aicoder.core.status import StatusReporter


@dataclass
class AgentSettings:
    """How agent mode runs extracted commands."""
    enabled: bool = False
    policy: ApprovalPolicy = field(default_factory=ApprovalPolicy)
    shell: str = DEFAULT_SHELL
    capture_output: bool = False
    fail_on_error: bool = False


@dataclass
class RunResult:
    """Result of one pipeline run."""
    outcome: GenerationOutcome
    results: List[ExecutionResult] = field(default_factory=list)
    fail_on_error: bool = False

    @property
    def failed_blocks(self) -> List[ExecutionResult]:
        return [r for r in self.results if not r.succeeded]

    @property
    def exit_code(self) -> int:
        if self.outcome.failed:
            return 1
        if self.fail_on_error and self.failed_blocks:
            return 1
        return 0


class Pipeline:
    """
    Runs the generation phase and, in agent mode, the execution phase.

    Fatal errors (DecodeError, StreamError, ApprovalIOError, transport
    errors) propagate to the caller.
    """

    def __init__(
        self,
        runtime: LocalRuntime,
        profile: ModelProfile,
        agent: Optional[AgentSettings] = None,
        status: Optional[StatusReporter] = None,
        sink: Optional[OutputSink] = None,
        input_stream: Optional[TextIO] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            runtime: Runtime wrapping the provider
            profile: Model profile used for the request
            agent: Agent mode settings (disabled by default)
            status: Reporter for the status channel
            sink: Receives response text as it streams in
            input_stream: Source of approval answers (defaults to stdin)
        """
        self.runtime = runtime
        self.profile = profile
        self.agent = agent or AgentSettings()
        self.status = status or StatusReporter()
        self.sink = sink
        self.input_stream = input_stream

    def announce(self) -> None:
        mode = "AGENT" if self.agent.enabled else "CHAT"
        self.status.info(f"Mode: {mode}")
        self.status.info(f"Using model: {self.profile.name}")
        self.status.info(f"Connecting to: {self.runtime.config.endpoint}")
        self.status.info("---")
        self.status.blank()

    def generate(self, prompt: str) -> GenerationOutcome:
        """Run the generation phase, echoing text to the sink."""
        frames = self.runtime.stream_frames(prompt, self.profile)
        accumulator = ResponseAccumulator(sink=self.sink)
        outcome = accumulator.consume(frames)

        if self.sink is not None:
            self.sink("\n\n")

        if outcome.failed:
            self.status.error(f"Ollama Error: {outcome.error}")
        return outcome

    def run(self, prompt: str) -> RunResult:
        """
        Run the full pipeline for one prompt.

        Returns:
            RunResult with the generation outcome and per-block results
        """
        logger.info(f"Pipeline run: model={self.profile.name} agent={self.agent.enabled}")
        self.announce()

        outcome = self.generate(prompt)
        result = RunResult(outcome=outcome, fail_on_error=self.agent.fail_on_error)

        if outcome.failed:
            logger.info("Skipping command extraction after provider error")
        elif self.agent.enabled:
            gate = ApprovalGate(self.agent.policy, status=self.status, input_stream=self.input_stream)
            executor = CommandExecutor(
                shell=self.agent.shell,
                capture_output=self.agent.capture_output,
                status=self.status,
            )
            result.results = run_agent(outcome.text, gate, executor, status=self.status)

            failed = len(result.failed_blocks)
            if failed:
                logger.warning(f"{failed} of {len(result.results)} executed block(s) failed")

        self.status.info("Complete")
        return result
