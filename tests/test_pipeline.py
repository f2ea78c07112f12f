"""
Tests for the end-to-end pipeline with a mock provider.
"""

import io
import shutil

import pytest

from aicoder.core.approval import ApprovalPolicy
from aicoder.core.errors import ApprovalIOError
from aicoder.core.frames import Frame
from aicoder.core.model_profile import ModelProfile
from aicoder.core.pipeline import AgentSettings, Pipeline, RunResult
from aicoder.core.runtime import LocalRuntime, ProviderConfig
from aicoder.llm.mock_client import MockProvider

needs_bash = pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")


class ErrorFrameProvider(MockProvider):
    """Streams some text, then an error frame."""

    def stream_frames(self, request):
        self.requests.append(request)
        yield Frame.text_fragment("```bash\necho partial\n")
        yield Frame.failure("model crashed")


def make_pipeline(provider, status, agent=None, answers=None):
    echoed = []
    runtime = LocalRuntime(ProviderConfig(provider="mock", endpoint="http://mock"), provider)
    pipeline = Pipeline(
        runtime,
        ModelProfile.new("test-model", 4096, 512),
        agent=agent,
        status=status,
        sink=echoed.append,
        input_stream=io.StringIO(answers) if answers is not None else None,
    )
    return pipeline, echoed


class TestPipelineChat:

    def test_chat_mode_echoes_full_response(self, status):
        provider = MockProvider(response="Hello\nworld\n")
        pipeline, echoed = make_pipeline(provider, status)

        result = pipeline.run("hi")

        assert "".join(echoed) == "Hello\nworld\n\n\n"
        assert result.outcome.text == "Hello\nworld\n"
        assert result.results == []
        assert result.exit_code == 0
        assert provider.requests[0].prompt == "hi"

    def test_chat_mode_does_not_execute(self, status):
        pipeline, _ = make_pipeline(MockProvider(), status)

        result = pipeline.run("where am I")

        assert result.results == []
        assert "Found bash command(s):" not in status.output

    def test_announce(self, status):
        pipeline, _ = make_pipeline(MockProvider(), status, agent=AgentSettings(enabled=True))
        pipeline.announce()

        assert "Mode: AGENT" in status.output
        assert "Using model: test-model" in status.output
        assert "Connecting to: http://mock" in status.output

    def test_complete_is_reported(self, status):
        pipeline, _ = make_pipeline(MockProvider(), status)
        pipeline.run("hi")

        assert status.output.rstrip().endswith("Complete")


class TestPipelineAgent:

    @needs_bash
    def test_auto_approved_block_runs(self, status):
        agent = AgentSettings(
            enabled=True,
            policy=ApprovalPolicy(auto_approve=True, allow_unsafe_exec=True),
            capture_output=True,
        )
        provider = MockProvider(response="Run:\n```bash\necho from-agent\n```\n")
        pipeline, _ = make_pipeline(provider, status, agent=agent)

        result = pipeline.run("go")

        assert len(result.results) == 1
        assert result.results[0].stdout == "from-agent\n"
        assert result.exit_code == 0

    def test_interactive_skip(self, status):
        agent = AgentSettings(enabled=True)
        pipeline, _ = make_pipeline(MockProvider(), status, agent=agent, answers="n\n")

        result = pipeline.run("go")

        assert result.results == []
        assert "Skipped." in status.output

    def test_closed_input_is_fatal(self, status):
        agent = AgentSettings(enabled=True)
        pipeline, _ = make_pipeline(MockProvider(), status, agent=agent, answers="")

        with pytest.raises(ApprovalIOError):
            pipeline.run("go")

    @needs_bash
    def test_failed_block_exit_code_depends_on_flag(self, status):
        response = "```bash\nexit 2\n```\n"
        policy = ApprovalPolicy(auto_approve=True, allow_unsafe_exec=True)

        lenient, _ = make_pipeline(
            MockProvider(response=response), status,
            agent=AgentSettings(enabled=True, policy=policy, capture_output=True),
        )
        strict, _ = make_pipeline(
            MockProvider(response=response), status,
            agent=AgentSettings(enabled=True, policy=policy, capture_output=True, fail_on_error=True),
        )

        assert lenient.run("go").exit_code == 0
        assert strict.run("go").exit_code == 1


class TestPipelineErrors:

    def test_error_frame_skips_extraction(self, status):
        agent = AgentSettings(enabled=True)
        # No answers: reading one would raise ApprovalIOError
        pipeline, echoed = make_pipeline(ErrorFrameProvider(), status, agent=agent, answers="")

        result = pipeline.run("go")

        assert result.outcome.failed
        assert result.outcome.error == "model crashed"
        assert result.results == []
        assert result.exit_code == 1
        assert "Ollama Error: model crashed" in status.output
        assert echoed[0] == "```bash\necho partial\n"

    def test_long_prompt_is_sent(self, status):
        provider = MockProvider(response="ok")
        runtime = LocalRuntime(ProviderConfig(), provider)
        pipeline = Pipeline(runtime, ModelProfile.new("tiny", 100, 50), status=status)

        result = pipeline.run("x" * 1000)

        assert result.exit_code == 0
        assert provider.requests[0].prompt == "x" * 1000


class TestRunResult:

    def test_exit_code_rules(self):
        from aicoder.core.accumulator import GenerationOutcome
        from aicoder.core.executor import ExecutionResult

        ok = GenerationOutcome(text="", completed=True)
        failed_gen = GenerationOutcome(text="", completed=False, error="boom")
        bad = ExecutionResult(order=0, exit_status=1, succeeded=False)

        assert RunResult(outcome=ok).exit_code == 0
        assert RunResult(outcome=failed_gen).exit_code == 1
        assert RunResult(outcome=ok, results=[bad]).exit_code == 0
        assert RunResult(outcome=ok, results=[bad], fail_on_error=True).exit_code == 1
        assert RunResult(outcome=ok, results=[bad]).failed_blocks == [bad]
