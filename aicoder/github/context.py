"""
Pull request context injection.

When the prompt mentions `#<number>` and a repository is given, the PR's
title, body, state and branches are appended to the prompt before it is sent.
"""

from typing import Optional

from loguru import logger

from aicoder.core.status import StatusReporter
from aicoder.github.client import GitHubClient
from aicoder.github.errors import GitHubError
from aicoder.github.models import PullRequest

MAX_PR_NUMBER = 2**32 - 1


def detect_pr_number(prompt: str) -> Optional[int]:
    """Return the first `#<digits>` word in the prompt, if any."""
    for word in prompt.split():
        if not word.startswith("#"):
            continue
        digits = word[1:]
        if digits.isascii() and digits.isdigit():
            number = int(digits)
            if number <= MAX_PR_NUMBER:
                return number
    return None


def format_pr_context(pr: PullRequest) -> str:
    return (
        f"\n\n--- GitHub Context: PR #{pr.number} ---\n"
        f"Title: {pr.title}\n"
        f"Body: {pr.body or ''}\n"
        f"State: {pr.state}\n"
        f"Base: {pr.base.ref_name}\n"
        f"Head: {pr.head.ref_name}\n"
        f"--- End Context ---\n"
    )


def inject_github_context(
    prompt: str,
    repo: Optional[str],
    token: Optional[str] = None,
    status: Optional[StatusReporter] = None,
    client: Optional[GitHubClient] = None,
) -> str:
    """
    Append PR context to the prompt when it references a pull request.

    Failures are reported as warnings; the prompt is then returned unchanged.

    Args:
        prompt: User prompt
        repo: Repository as "owner/name"
        token: GitHub token (falls back to GITHUB_TOKEN)
        status: Reporter for progress and warnings
        client: Pre-built client (mostly for tests)

    Returns:
        The prompt, possibly with a context block appended
    """
    status = status or StatusReporter()

    if not repo:
        status.warning("GitHub Warning: --repo <owner/repo> is required for GitHub operations.")
        return prompt

    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        status.warning("GitHub Warning: Invalid repo format. Use 'owner/repo'.")
        return prompt
    owner, name = parts

    pr_number = detect_pr_number(prompt)
    if pr_number is None:
        logger.debug("No PR reference in prompt; skipping GitHub context")
        return prompt

    status.info(f"GitHub: Fetching PR #{pr_number} from {repo}...")
    try:
        github = client or GitHubClient(token)
        pr = github.get_pull_request(owner, name, pr_number)
    except GitHubError as e:
        status.warning(f"GitHub Warning: Could not fetch PR: {e}")
        return prompt

    status.info("GitHub: Context added.")
    return prompt + format_pr_context(pr)
