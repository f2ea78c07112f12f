"""
GitHub API data models.
Only the fields ai-coder reads are kept; everything else is ignored.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from aicoder.github.errors import GitHubParseError


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise GitHubParseError(f"missing field '{key}' in {kind}")
    return data[key]


@dataclass
class BranchRef:
    """Branch reference (base or head of a PR)."""
    ref_name: str
    sha: str
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BranchRef":
        return cls(
            ref_name=_require(data, "ref", "branch ref"),
            sha=_require(data, "sha", "branch ref"),
            label=data.get("label"),
        )


@dataclass
class PullRequest:
    """Pull request information."""
    number: int
    title: str
    state: str
    base: BranchRef
    head: BranchRef
    body: Optional[str] = None
    html_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PullRequest":
        return cls(
            number=_require(data, "number", "pull request"),
            title=_require(data, "title", "pull request"),
            state=_require(data, "state", "pull request"),
            base=BranchRef.from_dict(_require(data, "base", "pull request")),
            head=BranchRef.from_dict(_require(data, "head", "pull request")),
            body=data.get("body"),
            html_url=data.get("html_url"),
        )


@dataclass
class FileContent:
    """File content entry from the contents API (content is base64)."""
    name: str
    path: str
    sha: str
    content: Optional[str] = None
    encoding: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileContent":
        return cls(
            name=_require(data, "name", "file content"),
            path=_require(data, "path", "file content"),
            sha=_require(data, "sha", "file content"),
            content=data.get("content"),
            encoding=data.get("encoding"),
        )


@dataclass
class PullRequestReview:
    """Review to post on a pull request."""
    body: str
    # APPROVE, REQUEST_CHANGES or COMMENT
    event: str = "COMMENT"


@dataclass
class Commit:
    """Commit created through the git data API."""
    sha: str
    message: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Commit":
        return cls(sha=_require(data, "sha", "commit"), message=data.get("message", ""))
