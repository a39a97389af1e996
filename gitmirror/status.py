"""Persistence of sync status onto repository records."""

from collections.abc import Sequence
from datetime import datetime

from gitmirror.store import RepositoryStore
from gitmirror.types.repositories import RepositoryStatus


class StatusRecorder:
    """Writes status and last-known commit fields through the store."""

    def __init__(self, store: RepositoryStore) -> None:
        self.store = store

    def mark_syncing(self, repository_ids: Sequence[str]) -> None:
        self.store.update(repository_ids, {"status": RepositoryStatus.SYNCING})

    def record_success(
        self,
        repository_ids: Sequence[str],
        sha: str,
        commit_date: datetime | None,
        now: datetime,
    ) -> None:
        """Mark every id synced at ``sha`` in a single store update."""
        self.store.update(
            repository_ids,
            {
                "status": RepositoryStatus.SYNCED,
                "last_commit": sha,
                "last_commit_date": commit_date,
                "last_sync": now,
            },
        )

    def record_failure(self, repository_ids: Sequence[str]) -> None:
        # Commit and sync fields keep their previous values.
        self.store.update(repository_ids, {"status": RepositoryStatus.ERROR})
