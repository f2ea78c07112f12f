"""
Shared fixtures for ai-coder tests.
"""

import io

import pytest
from rich.console import Console

from aicoder.config import ConfigLoader
from aicoder.core.blocks import CodeBlock
from aicoder.core.status import StatusReporter


class RecordingStatus(StatusReporter):
    """StatusReporter writing to an in-memory console."""

    def __init__(self):
        self.buffer = io.StringIO()
        super().__init__(console=Console(file=self.buffer, width=120, soft_wrap=True))

    @property
    def output(self) -> str:
        return self.buffer.getvalue()


@pytest.fixture
def status():
    return RecordingStatus()


@pytest.fixture
def make_block():
    def _make(content: str, order: int = 0, tag: str = "bash") -> CodeBlock:
        return CodeBlock(order=order, language_tag=tag, content=content)
    return _make


@pytest.fixture
def isolated_config(tmp_path):
    """Point the YAML loader at an empty project directory."""
    ConfigLoader.set_project_root(tmp_path)
    yield tmp_path
    ConfigLoader._project_root = None
    ConfigLoader.reload()
