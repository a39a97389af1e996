"""Branch existence guarantees on the target repository."""

from gitmirror.exceptions import RemoteNotFoundError
from gitmirror.github import RemoteGitClient
from gitmirror.observer import NullObserver, SyncObserver
from gitmirror.types.git import BranchRef


class BranchEnsurer:
    """
    Makes sure a branch exists, creating it from a fallback commit if needed.

    This is the only place the sync core creates branches.
    """

    def __init__(self, remote: RemoteGitClient, observer: SyncObserver | None = None) -> None:
        self.remote = remote
        self.observer = observer or NullObserver()

    def ensure(self, owner: str, repo: str, branch: str, fallback_sha: str) -> BranchRef:
        """
        Return the branch, creating it at ``fallback_sha`` if it is missing.

        Only a RemoteNotFoundError from the initial read triggers creation;
        every other failure propagates unchanged.
        """
        try:
            return self.remote.get_branch(owner, repo, branch)
        except RemoteNotFoundError:
            self.observer.event(
                "push", "creating_branch", owner=owner, repo=repo, branch=branch, sha=fallback_sha
            )

        self.remote.create_branch(owner, repo, branch, fallback_sha)
        return self.remote.get_branch(owner, repo, branch)
