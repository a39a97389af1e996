"""
gitmirror main client.

Builds the sync core from process-wide configuration.
"""

import os
from typing import Any

from gitmirror.exceptions import ConfigurationError
from gitmirror.github import GitHubClient, RemoteGitClient
from gitmirror.handler import handle_safely
from gitmirror.locks import TargetLocks
from gitmirror.observer import LoggingObserver, SyncObserver
from gitmirror.orchestrator import SyncOrchestrator
from gitmirror.registry import RepositoryRegistry
from gitmirror.status import StatusRecorder
from gitmirror.store import RepositoryStore, SupabaseRepositoryStore
from gitmirror.types.sync import PushStrategy, SyncRequest, SyncResult


class GitMirrorClient:
    """
    Composition root for the sync core.

    Example:
        ```python
        from gitmirror import GitMirrorClient, PushStrategy

        with GitMirrorClient.from_env() as mirror:
            result = mirror.push("source-id", "target-id", PushStrategy.MERGE)
            print(result.success, result.sha)
        ```
    """

    DEFAULT_ALLOWED_HOST = "github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        remote: RemoteGitClient,
        store: RepositoryStore,
        allowed_host: str | None = DEFAULT_ALLOWED_HOST,
        lock_timeout: float = TargetLocks.DEFAULT_TIMEOUT,
        observer: SyncObserver | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            remote: Provider client (a GitHubClient in production)
            store: Repository record store
            allowed_host: Host every repository URL must be on (None allows any)
            lock_timeout: Seconds a push waits for the target repository lock
            observer: Event sink (default: LoggingObserver)
        """
        self.remote = remote
        self.store = store
        self.orchestrator = SyncOrchestrator(
            registry=RepositoryRegistry(store, allowed_host),
            remote=remote,
            status=StatusRecorder(store),
            locks=TargetLocks(lock_timeout),
            observer=observer or LoggingObserver(),
        )

    @classmethod
    def from_env(cls, timeout: float = DEFAULT_TIMEOUT) -> "GitMirrorClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITHUB_ACCESS_TOKEN: Provider access token (required)
            GITHUB_API_URL: Provider API base URL (optional)
            SUPABASE_URL: Record store project URL (required)
            SUPABASE_SERVICE_ROLE_KEY: Record store key (required)
            GITMIRROR_ALLOWED_HOST: Repository host (optional, default: github.com)
            GITMIRROR_LOCK_TIMEOUT: Push lock timeout in seconds (optional, default: 30)

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        remote = GitHubClient.from_env(timeout=timeout)
        try:
            store = SupabaseRepositoryStore.from_env(timeout=timeout)
        except ConfigurationError:
            remote.close()
            raise
        allowed_host = os.environ.get("GITMIRROR_ALLOWED_HOST", cls.DEFAULT_ALLOWED_HOST)
        lock_timeout = os.environ.get("GITMIRROR_LOCK_TIMEOUT", str(TargetLocks.DEFAULT_TIMEOUT))

        try:
            parsed_timeout = float(lock_timeout)
        except ValueError:
            remote.close()
            store.close()
            raise ConfigurationError(
                f"Invalid GITMIRROR_LOCK_TIMEOUT: {lock_timeout}. Must be a number of seconds"
            ) from None

        return cls(
            remote=remote,
            store=store,
            allowed_host=allowed_host or None,
            lock_timeout=parsed_timeout,
        )

    def fetch_latest_commit(self, source_repo_id: str) -> SyncResult:
        return self.orchestrator.fetch_latest_commit(source_repo_id)

    def push(
        self, source_repo_id: str, target_repo_id: str, strategy: PushStrategy
    ) -> SyncResult:
        return self.orchestrator.push(source_repo_id, target_repo_id, strategy)

    def execute(self, request: SyncRequest) -> SyncResult:
        return self.orchestrator.execute(request)

    def handle(self, payload: Any) -> tuple[int, dict[str, Any]]:
        """Handle a raw request payload, returning ``(status_code, body)``."""
        return handle_safely(self.orchestrator, payload)

    def close(self) -> None:
        """Close the client and release HTTP connections."""
        for resource in (self.remote, self.store):
            close = getattr(resource, "close", None)
            if close is not None:
                close()

    def __enter__(self) -> "GitMirrorClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
