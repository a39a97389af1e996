"""gitmirror - mirror a repository's default branch head onto another via the provider API."""

from gitmirror.client import GitMirrorClient
from gitmirror.exceptions import (
    ConfigurationError,
    ForceUpdateError,
    GitMirrorError,
    InvalidRequestError,
    InvalidUrlFormatError,
    MergeConflictError,
    NotFoundError,
    RemoteError,
    RemoteNotFoundError,
    SyncInProgressError,
    TransientNetworkError,
)
from gitmirror.github import GitHubClient, RemoteGitClient
from gitmirror.handler import handle, parse_request, render_result
from gitmirror.logging import configure_logging, get_logger
from gitmirror.observer import LoggingObserver, NullObserver, SyncObserver
from gitmirror.orchestrator import SyncOrchestrator
from gitmirror.registry import RepositoryRegistry, parse_repository_url
from gitmirror.store import InMemoryRepositoryStore, RepositoryStore, SupabaseRepositoryStore
from gitmirror.transport import HTTPTransport
from gitmirror.types import (
    BranchRef,
    CommitInfo,
    FetchLatestCommitRequest,
    PushRequest,
    PushStrategy,
    RepositoryRecord,
    RepositoryStatus,
    SyncResult,
    SyncStage,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main client
    "GitMirrorClient",
    "SyncOrchestrator",
    # Collaborators
    "GitHubClient",
    "RemoteGitClient",
    "RepositoryRegistry",
    "parse_repository_url",
    "RepositoryStore",
    "InMemoryRepositoryStore",
    "SupabaseRepositoryStore",
    # Exceptions
    "GitMirrorError",
    "ConfigurationError",
    "InvalidRequestError",
    "NotFoundError",
    "InvalidUrlFormatError",
    "SyncInProgressError",
    "RemoteError",
    "RemoteNotFoundError",
    "MergeConflictError",
    "ForceUpdateError",
    "TransientNetworkError",
    # Types
    "BranchRef",
    "CommitInfo",
    "FetchLatestCommitRequest",
    "PushRequest",
    "PushStrategy",
    "RepositoryRecord",
    "RepositoryStatus",
    "SyncResult",
    "SyncStage",
    # Boundary
    "handle",
    "parse_request",
    "render_result",
    # Transport
    "HTTPTransport",
    # Logging
    "configure_logging",
    "get_logger",
    "SyncObserver",
    "LoggingObserver",
    "NullObserver",
]
