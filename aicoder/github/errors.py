"""
GitHub API errors.
"""

from typing import Optional


class GitHubError(Exception):
    """Base class for GitHub API errors."""


class GitHubRequestError(GitHubError):
    """Network request failed."""

    def __init__(self, message: str):
        super().__init__(f"Request failed: {message}")


class GitHubAuthenticationError(GitHubError):
    """Missing or invalid token."""

    def __init__(self):
        super().__init__("Authentication failed: invalid token")


class GitHubNotFoundError(GitHubError):
    """Resource not found (404)."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"Not found: {resource}")


class GitHubRateLimitedError(GitHubError):
    """Rate limited by GitHub API."""

    def __init__(self, reset_at: Optional[int] = None):
        self.reset_at = reset_at
        if reset_at is not None:
            super().__init__(f"Rate limited. Reset at: {reset_at}")
        else:
            super().__init__("Rate limited by GitHub API")


class GitHubInvalidInputError(GitHubError):
    """Invalid input."""

    def __init__(self, message: str):
        super().__init__(f"Invalid input: {message}")


class GitHubParseError(GitHubError):
    """Response could not be parsed."""

    def __init__(self, message: str):
        super().__init__(f"Parse error: {message}")


class GitHubApiError(GitHubError):
    """Other GitHub API error."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"GitHub API error ({status}): {message}")
