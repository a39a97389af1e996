"""gitmirror type definitions.

This module exports all data model types used by the package.
"""

from gitmirror.types.git import BranchRef, CommitInfo, MergeOutcome, TargetBranch
from gitmirror.types.repositories import (
    RepositoryRecord,
    RepositoryStatus,
    ResolvedRepository,
)
from gitmirror.types.sync import (
    FetchLatestCommitRequest,
    PushRequest,
    PushStrategy,
    SyncRequest,
    SyncResult,
    SyncStage,
)

__all__ = [
    # Repository records
    "RepositoryRecord",
    "RepositoryStatus",
    "ResolvedRepository",
    # Remote git
    "BranchRef",
    "CommitInfo",
    "MergeOutcome",
    "TargetBranch",
    # Sync
    "FetchLatestCommitRequest",
    "PushRequest",
    "PushStrategy",
    "SyncRequest",
    "SyncResult",
    "SyncStage",
]
