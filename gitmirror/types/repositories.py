"""Repository record data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class RepositoryStatus(str, Enum):
    """Synchronization status shown on the dashboard."""

    IDLE = "idle"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"

    def can_transition_to(self, new: "RepositoryStatus") -> bool:
        return new in _TRANSITIONS[self]


_ANY_OUTCOME = frozenset(
    {RepositoryStatus.SYNCING, RepositoryStatus.SYNCED, RepositoryStatus.ERROR}
)

# Overlapping operations on one repository are last-write-wins, so any
# record that has left idle accepts any later outcome.
_TRANSITIONS: dict[RepositoryStatus, frozenset[RepositoryStatus]] = {
    RepositoryStatus.IDLE: frozenset({RepositoryStatus.SYNCING}),
    RepositoryStatus.SYNCING: _ANY_OUTCOME,
    RepositoryStatus.SYNCED: _ANY_OUTCOME,
    RepositoryStatus.ERROR: _ANY_OUTCOME,
}


@dataclass
class RepositoryRecord:
    """A repository row as stored by the dashboard backend."""

    id: str
    url: str
    nickname: str | None = None
    last_commit: str | None = None
    last_commit_date: datetime | None = None
    last_sync: datetime | None = None
    status: RepositoryStatus = RepositoryStatus.IDLE

    @property
    def display_name(self) -> str:
        return self.nickname or self.url


@dataclass(frozen=True)
class ResolvedRepository:
    """A record together with the owner/repo pair parsed from its URL."""

    record: RepositoryRecord
    owner: str
    repo_name: str

    @property
    def id(self) -> str:
        return self.record.id
