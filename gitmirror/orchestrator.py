"""
Sync orchestration.

Composes the registry, remote client, branch ensurer, strategy executor and
status recorder into the two supported operations. Each operation runs as
one sequential chain of blocking calls through the stages

    resolving -> branch_ensuring (push only) -> executing
              -> status_updating -> done

and any failing stage short-circuits the rest into a failed ``SyncResult``.
Side effects of completed stages are not rolled back.
"""

from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from gitmirror.branches import BranchEnsurer
from gitmirror.exceptions import GitMirrorError, InvalidRequestError
from gitmirror.github import RemoteGitClient
from gitmirror.locks import TargetLocks
from gitmirror.observer import NullObserver, SyncObserver
from gitmirror.registry import RepositoryRegistry
from gitmirror.status import StatusRecorder
from gitmirror.strategies import MergeStrategyExecutor, merge_message
from gitmirror.types.git import TargetBranch
from gitmirror.types.sync import (
    FetchLatestCommitRequest,
    PushRequest,
    PushStrategy,
    SyncRequest,
    SyncResult,
    SyncStage,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Progress:
    """Tracks the current stage and the records already marked as syncing."""

    def __init__(self, operation: str, observer: SyncObserver) -> None:
        self.operation = operation
        self.observer = observer
        self.stage = SyncStage.RESOLVING
        self.touched: list[str] = []

    def enter(self, stage: SyncStage, **fields: object) -> None:
        self.stage = stage
        self.observer.stage_started(self.operation, stage, **fields)


class SyncOrchestrator:
    """
    Entry point for sync operations.

    Example:
        ```python
        orchestrator = SyncOrchestrator(registry, github, status)
        result = orchestrator.push("src-id", "dst-id", PushStrategy.FORCE)
        if not result.success:
            print(result.error, result.details)
        ```
    """

    def __init__(
        self,
        registry: RepositoryRegistry,
        remote: RemoteGitClient,
        status: StatusRecorder,
        locks: TargetLocks | None = None,
        observer: SyncObserver | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.registry = registry
        self.remote = remote
        self.status = status
        self.locks = locks or TargetLocks()
        self.observer = observer or NullObserver()
        self.clock = clock
        self.branches = BranchEnsurer(remote, self.observer)
        self.executor = MergeStrategyExecutor(remote)

    def execute(self, request: SyncRequest) -> SyncResult:
        """Dispatch a validated request to the matching operation."""
        if isinstance(request, PushRequest):
            return self.push(request.source_repo_id, request.target_repo_id, request.strategy)
        if isinstance(request, FetchLatestCommitRequest):
            return self.fetch_latest_commit(request.source_repo_id)
        raise TypeError(f"Unsupported sync request: {type(request).__name__}")

    def fetch_latest_commit(self, source_repo_id: str) -> SyncResult:
        """Read the head commit of the source's default branch and record it."""
        progress = _Progress("fetch_latest_commit", self.observer)
        progress.enter(SyncStage.RESOLVING, source=source_repo_id)

        try:
            source = self.registry.resolve(source_repo_id)
            self._mark_syncing(progress, [source.id])

            progress.enter(SyncStage.EXECUTING, owner=source.owner, repo=source.repo_name)
            branch = self.remote.get_default_branch_name(source.owner, source.repo_name)
            commit = self.remote.get_commit(source.owner, source.repo_name, branch)

            progress.enter(SyncStage.STATUS_UPDATING, sha=commit.sha)
            self.status.record_success([source.id], commit.sha, commit.author_date, self.clock())
        except GitMirrorError as e:
            return self._fail(progress, e)
        except Exception:
            self._record_failure(progress)
            raise

        progress.enter(SyncStage.DONE)
        self.observer.succeeded(progress.operation, sha=commit.sha, branch=branch)
        return SyncResult(
            success=True,
            message=f"Latest commit on {branch} is {commit.sha}",
            sha=commit.sha,
            commit=commit,
        )

    def push(
        self, source_repo_id: str, target_repo_id: str, strategy: PushStrategy
    ) -> SyncResult:
        """
        Mirror the source's default branch head onto the same-named target branch.

        Holds the target repository lock for the whole operation.
        """
        progress = _Progress("push", self.observer)
        progress.enter(
            SyncStage.RESOLVING,
            source=source_repo_id,
            target=target_repo_id,
            strategy=strategy.value,
        )

        try:
            if source_repo_id == target_repo_id:
                raise InvalidRequestError(
                    "Source and target repositories must differ",
                    {"repository_id": source_repo_id},
                )
            with self.locks.hold(target_repo_id):
                sha = self._push(progress, source_repo_id, target_repo_id, strategy)
        except GitMirrorError as e:
            return self._fail(progress, e)
        except Exception:
            self._record_failure(progress)
            raise

        progress.enter(SyncStage.DONE)
        self.observer.succeeded(progress.operation, sha=sha, strategy=strategy.value)
        return SyncResult(success=True, message="Push operation completed successfully", sha=sha)

    def _push(
        self,
        progress: _Progress,
        source_repo_id: str,
        target_repo_id: str,
        strategy: PushStrategy,
    ) -> str:
        source, target = self.registry.resolve_many([source_repo_id, target_repo_id])
        self._mark_syncing(progress, [source.id, target.id])

        branch = self.remote.get_default_branch_name(source.owner, source.repo_name)
        head = self.remote.get_commit(source.owner, source.repo_name, branch)

        progress.enter(
            SyncStage.BRANCH_ENSURING, owner=target.owner, repo=target.repo_name, branch=branch
        )
        self.branches.ensure(target.owner, target.repo_name, branch, head.sha)

        progress.enter(SyncStage.EXECUTING, sha=head.sha)
        sha = self.executor.apply(
            strategy,
            TargetBranch(owner=target.owner, repo=target.repo_name, branch=branch),
            head.sha,
            merge_message(source.record.display_name, strategy),
        )

        progress.enter(SyncStage.STATUS_UPDATING, sha=sha)
        self.status.record_success([source.id, target.id], sha, head.author_date, self.clock())
        return sha

    def _mark_syncing(self, progress: _Progress, repository_ids: Sequence[str]) -> None:
        self.status.mark_syncing(repository_ids)
        progress.touched = list(repository_ids)

    def _record_failure(self, progress: _Progress) -> None:
        if not progress.touched:
            return
        try:
            self.status.record_failure(progress.touched)
        except Exception as e:
            # The original failure is what the caller needs to see.
            self.observer.event(
                progress.operation, "status_update_failed", error=str(e), ids=progress.touched
            )

    def _fail(self, progress: _Progress, error: GitMirrorError) -> SyncResult:
        self._record_failure(progress)
        self.observer.failed(progress.operation, progress.stage, error)
        return SyncResult(
            success=False,
            message=error.message,
            error=error.code,
            details=error.details,
            stage=progress.stage,
        )
