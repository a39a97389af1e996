"""
In-memory remote git provider for testing.

Provides a FakeGitHub that implements ``RemoteGitClient`` against a dict of
repositories and branches, records every call, and can be told to fail
specific methods.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from gitmirror.exceptions import MergeConflictError, RemoteNotFoundError
from gitmirror.types.git import BranchRef, CommitInfo, MergeOutcome


@dataclass
class FakeCall:
    """Record of a method call."""

    method: str
    args: tuple[Any, ...]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class FakeRepository:
    """A hosted repository: default branch, branch heads and known commits."""

    default_branch: str = "main"
    branches: dict[str, str] = field(default_factory=dict)
    commits: dict[str, CommitInfo] = field(default_factory=dict)
    # Heads that cannot be merged into this repository's branches.
    conflicting_heads: set[str] = field(default_factory=set)


class FakeGitHub:
    """
    Fake provider for testing sync logic without network access.

    Example:
        ```python
        from gitmirror.testing import FakeGitHub

        github = FakeGitHub()
        github.add_repository("acme", "app", branches={"main": "abc123"})
        github.add_repository("acme", "mirror")

        orchestrator = SyncOrchestrator(registry, github, status)
        orchestrator.push("src", "dst", PushStrategy.FORCE)

        assert github.call_count("create_branch") == 1
        assert github.branch_sha("acme", "mirror", "main") == "abc123"
        ```
    """

    def __init__(self) -> None:
        self.repositories: dict[tuple[str, str], FakeRepository] = {}
        self._calls: list[FakeCall] = []
        self._errors: dict[str, Exception] = {}
        self._merge_counter = 0

    def add_repository(
        self,
        owner: str,
        repo: str,
        default_branch: str = "main",
        branches: dict[str, str] | None = None,
        commit_dates: dict[str, datetime] | None = None,
    ) -> FakeRepository:
        """Register a repository; every branch head becomes a known commit."""
        fake = FakeRepository(default_branch=default_branch, branches=dict(branches or {}))
        for sha in fake.branches.values():
            date = (commit_dates or {}).get(sha, datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
            fake.commits[sha] = CommitInfo(sha=sha, author_date=date, message=f"commit {sha}")
        self.repositories[(owner, repo)] = fake
        return fake

    def configure_error(self, method: str, error: Exception | None) -> None:
        """Make ``method`` raise ``error`` on every call (None clears it)."""
        if error is None:
            self._errors.pop(method, None)
        else:
            self._errors[method] = error

    def mark_conflicting(self, owner: str, repo: str, head_sha: str) -> None:
        self._repository(owner, repo, "mark_conflicting").conflicting_heads.add(head_sha)

    def branch_sha(self, owner: str, repo: str, branch: str) -> str | None:
        return self.repositories[(owner, repo)].branches.get(branch)

    # Call recording

    def _record(self, method: str, *args: Any) -> None:
        self._calls.append(FakeCall(method=method, args=args))
        if method in self._errors:
            raise self._errors[method]

    def was_called(self, method: str) -> bool:
        return any(call.method == method for call in self._calls)

    def call_count(self, method: str | None = None) -> int:
        if method is None:
            return len(self._calls)
        return sum(1 for call in self._calls if call.method == method)

    def get_calls(self, method: str | None = None) -> list[FakeCall]:
        if method is None:
            return list(self._calls)
        return [call for call in self._calls if call.method == method]

    def reset_calls(self) -> None:
        self._calls.clear()

    # RemoteGitClient

    def _repository(self, owner: str, repo: str, operation: str) -> FakeRepository:
        try:
            return self.repositories[(owner, repo)]
        except KeyError:
            raise RemoteNotFoundError(
                f"{operation} failed: HTTP 404 (Not Found)", {"message": "Not Found"}, operation
            ) from None

    def get_default_branch_name(self, owner: str, repo: str) -> str:
        self._record("get_default_branch_name", owner, repo)
        return self._repository(owner, repo, "get_default_branch_name").default_branch

    def get_commit(self, owner: str, repo: str, ref: str) -> CommitInfo:
        self._record("get_commit", owner, repo, ref)
        fake = self._repository(owner, repo, "get_commit")
        sha = fake.branches.get(ref, ref)
        if sha not in fake.commits:
            raise RemoteNotFoundError(
                "get_commit failed: HTTP 404 (No commit found)", {"ref": ref}, "get_commit"
            )
        return fake.commits[sha]

    def get_branch(self, owner: str, repo: str, branch: str) -> BranchRef:
        self._record("get_branch", owner, repo, branch)
        fake = self._repository(owner, repo, "get_branch")
        if branch not in fake.branches:
            raise RemoteNotFoundError(
                "get_branch failed: HTTP 404 (Branch not found)", {"branch": branch}, "get_branch"
            )
        return BranchRef(name=branch, sha=fake.branches[branch])

    def create_branch(self, owner: str, repo: str, branch: str, sha: str) -> None:
        self._record("create_branch", owner, repo, branch, sha)
        self._repository(owner, repo, "create_branch").branches[branch] = sha

    def force_update_branch(self, owner: str, repo: str, branch: str, sha: str) -> None:
        self._record("force_update_branch", owner, repo, branch, sha)
        fake = self._repository(owner, repo, "force_update_branch")
        if branch not in fake.branches:
            raise RemoteNotFoundError(
                "force_update_branch failed: HTTP 404 (Reference does not exist)",
                {"branch": branch},
                "force_update_branch",
            )
        fake.branches[branch] = sha

    def merge_branch(
        self, owner: str, repo: str, base: str, head_sha: str, message: str
    ) -> MergeOutcome:
        self._record("merge_branch", owner, repo, base, head_sha, message)
        fake = self._repository(owner, repo, "merge_branch")
        if base not in fake.branches:
            raise RemoteNotFoundError(
                "merge_branch failed: HTTP 404 (Base does not exist)", {"base": base}, "merge_branch"
            )
        if head_sha in fake.conflicting_heads:
            raise MergeConflictError(
                f"Merge conflict merging {head_sha} into {base}",
                {"message": "Merge conflict"},
                "merge_branch",
            )
        if fake.branches[base] == head_sha:
            return MergeOutcome(sha=head_sha, merged=False)

        self._merge_counter += 1
        merge_sha = f"merge{self._merge_counter:035d}"
        fake.commits[merge_sha] = CommitInfo(
            sha=merge_sha, author_date=datetime.now(timezone.utc), message=message
        )
        fake.branches[base] = merge_sha
        return MergeOutcome(sha=merge_sha, merged=True)

    def close(self) -> None:
        """No-op for compatibility with the real client."""
        pass


__all__ = [
    "FakeGitHub",
    "FakeCall",
    "FakeRepository",
]
