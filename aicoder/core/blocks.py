"""
Fenced code block extraction.

Scans a finished response once, line by line, with two states (outside a
block, inside a block) and keeps only blocks tagged as shell scripts.
"""

from dataclasses import dataclass
from typing import List

FENCE = "```"
SHELL_TAGS = {"", "bash", "sh"}


@dataclass(frozen=True)
class CodeBlock:
    """A fenced block found in the response, in discovery order."""
    order: int
    language_tag: str
    content: str


def is_fence(line: str) -> bool:
    """A fence marker is any line whose trimmed text starts with three backticks."""
    return line.strip().startswith(FENCE)


def is_shell_tag(language_tag: str) -> bool:
    """True when the first token of the tag is empty, `bash` or `sh`."""
    tokens = language_tag.split()
    first = tokens[0] if tokens else ""
    return first in SHELL_TAGS


def split_lines(text: str) -> List[str]:
    """
    Split text into lines on `\\n`, dropping a trailing `\\r` per line.

    A final terminator does not produce an extra empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def extract_code_blocks(text: str) -> List[CodeBlock]:
    """
    Extract every shell-script fenced block from the response text.

    Args:
        text: Full response text

    Returns:
        Blocks in document order; an unterminated final block is included
    """
    blocks: List[CodeBlock] = []
    inside = False
    language_tag = ""
    content: List[str] = []

    def close_block() -> None:
        if is_shell_tag(language_tag):
            blocks.append(CodeBlock(
                order=len(blocks),
                language_tag=language_tag,
                content="".join(content),
            ))

    for line in split_lines(text):
        if is_fence(line):
            if inside:
                close_block()
                inside = False
                language_tag = ""
                content = []
            else:
                inside = True
                language_tag = line.strip()[len(FENCE):].strip()
        elif inside:
            content.append(line + "\n")

    if inside:
        close_block()

    return blocks


def extract_commands(text: str) -> List[str]:
    """Convenience wrapper returning only block contents."""
    return [block.content for block in extract_code_blocks(text)]
