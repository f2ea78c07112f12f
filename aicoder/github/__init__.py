"""
GitHub integration: REST client and pull request context injection.
"""

from aicoder.github.client import GitHubClient
from aicoder.github.context import detect_pr_number, inject_github_context
from aicoder.github.errors import GitHubError

__all__ = ["GitHubClient", "GitHubError", "detect_pr_number", "inject_github_context"]
