"""Push strategies applied to the target branch."""

from gitmirror.github import RemoteGitClient
from gitmirror.types.git import TargetBranch
from gitmirror.types.sync import PushStrategy


def merge_message(source_name: str, strategy: PushStrategy) -> str:
    return f"Merge from {source_name} using {strategy.value} strategy"


class MergeStrategyExecutor:
    """Applies exactly one ``PushStrategy`` to a target branch."""

    def __init__(self, remote: RemoteGitClient) -> None:
        self.remote = remote

    def apply(
        self,
        strategy: PushStrategy,
        target: TargetBranch,
        source_sha: str,
        message: str,
    ) -> str:
        """
        Update ``target`` towards ``source_sha``.

        ``force`` and ``force-with-lease`` both overwrite the ref without
        looking at its current value.

        Returns:
            The SHA the target branch now points to

        Raises:
            MergeConflictError: If a merge cannot be completed cleanly
            ForceUpdateError: If the provider rejects a forced update
        """
        if strategy in (PushStrategy.FORCE, PushStrategy.FORCE_WITH_LEASE):
            self.remote.force_update_branch(target.owner, target.repo, target.branch, source_sha)
            return source_sha

        outcome = self.remote.merge_branch(
            target.owner, target.repo, target.branch, source_sha, message
        )
        return outcome.sha
