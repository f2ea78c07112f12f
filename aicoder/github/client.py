"""
GitHub REST API client.
"""

import base64
import binascii
import os
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from aicoder.github.errors import (
    GitHubApiError,
    GitHubAuthenticationError,
    GitHubError,
    GitHubInvalidInputError,
    GitHubNotFoundError,
    GitHubParseError,
    GitHubRateLimitedError,
    GitHubRequestError,
)
from aicoder.github.models import Commit, FileContent, PullRequest, PullRequestReview

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "ai-coder"


class GitHubClient:
    """GitHub API client authenticated with a personal access token."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_API_URL,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Create a new GitHub client.

        Args:
            token: Access token; falls back to the GITHUB_TOKEN env var
            base_url: API root
            http_client: Pre-built httpx client (tests pass a mock transport)

        Raises:
            GitHubAuthenticationError: If no token is available
        """
        token = token or os.getenv("GITHUB_TOKEN")
        if not token:
            raise GitHubAuthenticationError()

        self.token = token
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client or httpx.Client(timeout=30.0)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }

    def _repo_url(self, owner: str, repo: str) -> str:
        if not owner or not repo or "/" in owner or "/" in repo:
            raise GitHubInvalidInputError(f"bad repository '{owner}/{repo}'")
        return f"{self.base_url}/repos/{owner}/{repo}"

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> PullRequest:
        """Get a pull request."""
        url = f"{self._repo_url(owner, repo)}/pulls/{pr_number}"
        return PullRequest.from_dict(self._get(url))

    def get_file_content(self, owner: str, repo: str, path: str, branch: str) -> str:
        """Get a file's decoded content from a branch."""
        url = f"{self._repo_url(owner, repo)}/contents/{path}"
        file = FileContent.from_dict(self._get(url, params={"ref": branch}))

        if not file.content:
            raise GitHubParseError("Could not decode file content")
        try:
            # GitHub wraps base64 content across lines
            raw = base64.b64decode("".join(file.content.split()), validate=True)
            return raw.decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise GitHubParseError("Could not decode file content") from e

    def get_readme(self, owner: str, repo: str) -> str:
        """Get a repository's README from main, falling back to master."""
        try:
            return self.get_file_content(owner, repo, "README.md", "main")
        except GitHubError as e:
            logger.debug(f"README not found on main ({e}), trying master")
            return self.get_file_content(owner, repo, "README.md", "master")

    def post_pr_review(self, owner: str, repo: str, pr_number: int, review: PullRequestReview) -> None:
        """Post a review on a pull request."""
        url = f"{self._repo_url(owner, repo)}/pulls/{pr_number}/reviews"
        self._post(url, {"body": review.body, "event": review.event})

    def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree: str,
        parents: List[str],
    ) -> str:
        """Create a commit and return its sha."""
        url = f"{self._repo_url(owner, repo)}/git/commits"
        body = {"message": message, "tree": tree, "parents": parents}
        return Commit.from_dict(self._post(url, body)).sha

    def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            response = self.http_client.get(url, headers=self._headers(), params=params)
        except httpx.HTTPError as e:
            raise GitHubRequestError(str(e)) from e
        return self._handle_response(response)

    def _post(self, url: str, body: Dict[str, Any]) -> Any:
        try:
            response = self.http_client.post(url, headers=self._headers(), json=body)
        except httpx.HTTPError as e:
            raise GitHubRequestError(str(e)) from e
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Any:
        status = response.status_code

        if 200 <= status < 300:
            try:
                return response.json()
            except ValueError as e:
                raise GitHubParseError(str(e)) from e
        if status == 401:
            raise GitHubAuthenticationError()
        if status == 404:
            raise GitHubNotFoundError("Resource not found")
        if status == 403:
            if "API rate limit exceeded" in response.text:
                reset = response.headers.get("x-ratelimit-reset")
                raise GitHubRateLimitedError(int(reset) if reset and reset.isdigit() else None)
            raise GitHubApiError(403, "Forbidden")

        raise GitHubApiError(status, response.text or "Unknown error")
