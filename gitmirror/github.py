"""Remote git provider client.

``RemoteGitClient`` is the interface the sync core depends on;
``GitHubClient`` implements it against the GitHub REST API.
"""

import os
from datetime import datetime
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from gitmirror.exceptions import (
    ConfigurationError,
    ForceUpdateError,
    MergeConflictError,
    RemoteError,
    TransientNetworkError,
)
from gitmirror.transport import HTTPTransport
from gitmirror.types.git import BranchRef, CommitInfo, MergeOutcome


class RemoteGitClient(Protocol):
    """Commit, branch, ref and merge operations on a hosted repository."""

    def get_default_branch_name(self, owner: str, repo: str) -> str: ...

    def get_commit(self, owner: str, repo: str, ref: str) -> CommitInfo: ...

    def get_branch(self, owner: str, repo: str, branch: str) -> BranchRef: ...

    def create_branch(self, owner: str, repo: str, branch: str, sha: str) -> None: ...

    def force_update_branch(self, owner: str, repo: str, branch: str, sha: str) -> None: ...

    def merge_branch(
        self, owner: str, repo: str, base: str, head_sha: str, message: str
    ) -> MergeOutcome: ...


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp with an optional Z suffix."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _parse_commit(data: dict[str, Any]) -> CommitInfo:
    commit = data.get("commit") or {}
    author = commit.get("author") or {}
    return CommitInfo(
        sha=data["sha"],
        author_date=parse_timestamp(author.get("date")),
        message=commit.get("message", ""),
        raw=data,
    )


def _path(value: str) -> str:
    return quote(value, safe="/")


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


class GitHubClient:
    """
    GitHub REST v3 implementation of ``RemoteGitClient``.

    Example:
        ```python
        from gitmirror.github import GitHubClient

        with GitHubClient.from_env() as github:
            branch = github.get_default_branch_name("acme", "app")
            commit = github.get_commit("acme", "app", branch)
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0
    API_VERSION = "2022-11-28"

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: Access token with contents write permission on the target
            base_url: API base URL (GitHub Enterprise installs differ)
            timeout: Request timeout in seconds
            http_transport: Optional httpx transport (tests pass httpx.MockTransport)

        Raises:
            ConfigurationError: If the token is empty
        """
        if not token:
            raise ConfigurationError("GitHub token not configured")

        self.base_url = base_url
        self._transport = HTTPTransport(
            base_url=base_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": self.API_VERSION,
            },
            timeout=timeout,
            http_transport=http_transport,
        )

    @classmethod
    def from_env(cls, timeout: float = DEFAULT_TIMEOUT) -> "GitHubClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITHUB_ACCESS_TOKEN: Provider access token (required)
            GITHUB_API_URL: API base URL (optional, default: https://api.github.com)

        Raises:
            ConfigurationError: If GITHUB_ACCESS_TOKEN is missing
        """
        token = os.environ.get("GITHUB_ACCESS_TOKEN")
        if not token:
            raise ConfigurationError("GITHUB_ACCESS_TOKEN environment variable not set")

        return cls(
            token=token,
            base_url=os.environ.get("GITHUB_API_URL", cls.DEFAULT_BASE_URL),
            timeout=timeout,
        )

    @property
    def transport(self) -> HTTPTransport:
        return self._transport

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def get_default_branch_name(self, owner: str, repo: str) -> str:
        data = self._transport.request(
            "GET", _repo_path(owner, repo), operation="get_default_branch_name"
        )
        return data["default_branch"]

    def get_commit(self, owner: str, repo: str, ref: str) -> CommitInfo:
        data = self._transport.request(
            "GET", f"{_repo_path(owner, repo)}/commits/{_path(ref)}", operation="get_commit"
        )
        return _parse_commit(data)

    def get_branch(self, owner: str, repo: str, branch: str) -> BranchRef:
        """
        Read a branch.

        Raises:
            RemoteNotFoundError: If the branch does not exist
        """
        data = self._transport.request(
            "GET", f"{_repo_path(owner, repo)}/branches/{_path(branch)}", operation="get_branch"
        )
        return BranchRef(name=data["name"], sha=data["commit"]["sha"])

    def create_branch(self, owner: str, repo: str, branch: str, sha: str) -> None:
        self._transport.request(
            "POST",
            f"{_repo_path(owner, repo)}/git/refs",
            operation="create_branch",
            body={"ref": f"refs/heads/{branch}", "sha": sha},
        )

    def force_update_branch(self, owner: str, repo: str, branch: str, sha: str) -> None:
        """
        Unconditionally repoint a branch at ``sha``.

        Raises:
            ForceUpdateError: If the provider rejects the update
            TransientNetworkError: If the provider could not be reached
        """
        try:
            self._transport.request(
                "PATCH",
                f"{_repo_path(owner, repo)}/git/refs/heads/{_path(branch)}",
                operation="force_update_branch",
                body={"sha": sha, "force": True},
            )
        except RemoteError as e:
            if e.status_code is None:
                raise
            raise ForceUpdateError(
                f"Force push failed: {e.message}",
                e.details,
                e.operation,
                e.status_code,
            ) from e

    def merge_branch(
        self, owner: str, repo: str, base: str, head_sha: str, message: str
    ) -> MergeOutcome:
        """
        Merge ``head_sha`` into ``base`` on the provider.

        Returns:
            MergeOutcome with the merge commit SHA, or ``head_sha`` with
            ``merged=False`` when the base already contains the head

        Raises:
            MergeConflictError: If the histories cannot be merged cleanly
        """
        try:
            data = self._transport.request(
                "POST",
                f"{_repo_path(owner, repo)}/merges",
                operation="merge_branch",
                body={"base": base, "head": head_sha, "commit_message": message},
            )
        except TransientNetworkError as e:
            if e.status_code != 409:
                raise
            raise MergeConflictError(
                f"Merge conflict merging {head_sha} into {base}", e.details, e.operation
            ) from e

        if data is None:
            return MergeOutcome(sha=head_sha, merged=False)
        return MergeOutcome(sha=data["sha"], merged=True)
