"""
ai-coder Command-Line Interface
Main entry point for user interaction.
"""

import sys
from typing import Optional

import typer
from loguru import logger
from rich.console import Console

from aicoder import __version__
from aicoder.core.approval import ApprovalPolicy
from aicoder.core.config import config
from aicoder.core.errors import AICoderError
from aicoder.core.model_profile import profile_for
from aicoder.core.pipeline import AgentSettings, Pipeline
from aicoder.core.status import StatusReporter
from aicoder.github.context import inject_github_context
from aicoder.llm.llm_factory import create_runtime

app = typer.Typer(
    name="ai-coder",
    help="Local GPU-Accelerated AI Coding CLI",
    add_completion=False,
)

console = Console(soft_wrap=True, highlight=False)


def _stream_to_stdout(text: str) -> None:
    """Write streamed text as-is and flush so tokens show up immediately."""
    console.out(text, end="", highlight=False)
    console.file.flush()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ai-coder {__version__}")
        raise typer.Exit()


@app.command()
def main(
    prompt: str = typer.Argument(..., help="The coding prompt or question"),
    model: Optional[str] = typer.Option(
        None,
        "--model", "-m",
        help="The model to use (default: qwen2.5-coder, or DEFAULT_MODEL)"
    ),
    host: Optional[str] = typer.Option(
        None,
        "--host", "-H",
        help="Ollama host (can also be set via OLLAMA_HOST env var)"
    ),
    agent: bool = typer.Option(
        False,
        "--agent", "-a",
        help="Enable agent mode - execute bash code blocks from the response"
    ),
    yes: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Auto-approve commands without confirmation in agent mode"
    ),
    allow_unsafe_exec: bool = typer.Option(
        False,
        "--allow-unsafe-exec",
        help="Acknowledge the risk of auto-approved execution"
    ),
    github: bool = typer.Option(
        False,
        "--github",
        help="Add pull request context from GitHub when the prompt mentions #<number>"
    ),
    repo: Optional[str] = typer.Option(
        None,
        "--repo",
        help="GitHub repository as owner/repo"
    ),
    github_token: Optional[str] = typer.Option(
        None,
        "--github-token",
        help="GitHub token (defaults to GITHUB_TOKEN)"
    ),
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        help="Provider backend: ollama or mock"
    ),
    capture_output: bool = typer.Option(
        False,
        "--capture-output",
        help="Capture command output and reprint it instead of streaming it"
    ),
    fail_on_error: bool = typer.Option(
        False,
        "--fail-on-error",
        help="Exit non-zero when any executed command fails"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
):
    """
    Send a prompt to a local model and stream the answer.

    Examples:
        ai-coder "Write a function that reverses a string"
        ai-coder "List the largest files here" --agent
        ai-coder "Review #42" --github --repo owner/repo
    """
    config.set_verbose(verbose)
    status = StatusReporter(verbose=verbose)

    if github:
        prompt = inject_github_context(
            prompt,
            repo,
            token=github_token or config.github_token,
            status=status,
        )

    model_name = model or config.default_model
    agent_settings = AgentSettings(
        enabled=agent,
        policy=ApprovalPolicy(auto_approve=yes, allow_unsafe_exec=allow_unsafe_exec),
        shell=config.shell,
        capture_output=capture_output or config.capture_output,
        fail_on_error=fail_on_error,
    )

    try:
        runtime = create_runtime(config, host=host, provider=provider)
        try:
            pipeline = Pipeline(
                runtime,
                profile_for(model_name),
                agent=agent_settings,
                status=status,
                sink=_stream_to_stdout,
            )
            result = pipeline.run(prompt)
        finally:
            runtime.close()
    except AICoderError as e:
        logger.debug(f"Run aborted: {e!r}")
        status.blank()
        status.error(f"Error: {e}")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        status.blank()
        status.warning("Interrupted.")
        raise typer.Exit(code=130)

    if result.exit_code:
        raise typer.Exit(code=result.exit_code)


def run() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    sys.exit(run())
