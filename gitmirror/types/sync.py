"""Sync request and result data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from gitmirror.types.git import CommitInfo


class PushStrategy(str, Enum):
    """How the target branch is updated."""

    MERGE = "merge"
    FORCE = "force"
    # Same behaviour as FORCE: the target's current SHA is not checked.
    FORCE_WITH_LEASE = "force-with-lease"


class SyncStage(str, Enum):
    """Stages of a sync operation, in order."""

    RESOLVING = "resolving"
    BRANCH_ENSURING = "branch_ensuring"
    EXECUTING = "executing"
    STATUS_UPDATING = "status_updating"
    DONE = "done"


@dataclass(frozen=True)
class FetchLatestCommitRequest:
    """Read the head of the source's default branch."""

    source_repo_id: str


@dataclass(frozen=True)
class PushRequest:
    """Mirror the source's default branch head onto the target."""

    source_repo_id: str
    target_repo_id: str
    strategy: PushStrategy


SyncRequest = Union[FetchLatestCommitRequest, PushRequest]


@dataclass
class SyncResult:
    """Outcome of a sync operation."""

    success: bool
    message: str = ""
    sha: str | None = None
    commit: CommitInfo | None = None
    error: str | None = None
    details: Any = None
    stage: SyncStage | None = None
