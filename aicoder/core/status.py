"""
Status reporting on the diagnostic channel (stderr).
Keeps status lines out of the streamed response on stdout.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

CLI_PREFIX = "[ai-coder]"
AGENT_PREFIX = "[ai-coder-agent]"


def stderr_console() -> Console:
    return Console(stderr=True, soft_wrap=True, highlight=False)


class StatusReporter:
    """Prints prefixed status lines, warnings and command blocks."""

    COLORS = {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red",
        "plain": "default",
    }

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or stderr_console()
        self.verbose = verbose

    def update(self, message: str, level: str = "plain", prefix: str = CLI_PREFIX) -> None:
        """Report a status line."""
        color = self.COLORS.get(level, "default")
        line = Text.assemble((prefix, "dim"), " ", (message, color))
        self.console.print(line)

    def info(self, message: str) -> None:
        self.update(message, level="plain")

    def success(self, message: str) -> None:
        self.update(message, level="success")

    def warning(self, message: str) -> None:
        self.update(message, level="warning")

    def error(self, message: str) -> None:
        self.update(message, level="error")

    def agent(self, message: str, level: str = "plain") -> None:
        self.update(message, level=level, prefix=AGENT_PREFIX)

    def blank(self) -> None:
        self.console.print()

    def show_block(self, content: str, language: str = "bash") -> None:
        """Show a command block before it is approved or executed."""
        syntax = Syntax(content.rstrip("\n") or " ", language or "bash", word_wrap=True)
        self.console.print(Panel(syntax, border_style="yellow", expand=False))

    def show_output(self, title: str, output: str, level: str = "plain") -> None:
        """Reprint captured subprocess output."""
        if not output:
            return
        color = self.COLORS.get(level, "default")
        self.console.print(Panel(Text(output.rstrip("\n")), title=title, border_style=color, expand=False))

    def prompt(self, message: str) -> None:
        """Print an input prompt without a trailing newline."""
        line = Text.assemble((AGENT_PREFIX, "dim"), " ", (message, "bold"))
        self.console.print(line, end="")
        self.console.file.flush()
