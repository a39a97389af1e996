"""Per-target-repository advisory locks for push operations."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from gitmirror.exceptions import SyncInProgressError


class TargetLocks:
    """
    One lock per target repository id, held for the duration of a push.

    Locks are process-local; pushes from other processes are not excluded.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, repository_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(repository_id, threading.Lock())

    @contextmanager
    def hold(self, repository_id: str) -> Iterator[None]:
        """
        Hold the lock for ``repository_id``.

        Raises:
            SyncInProgressError: If the lock is not acquired within the timeout
        """
        lock = self._lock_for(repository_id)
        if not lock.acquire(timeout=self.timeout):
            raise SyncInProgressError(repository_id, self.timeout)
        try:
            yield
        finally:
            lock.release()

    def is_held(self, repository_id: str) -> bool:
        return self._lock_for(repository_id).locked()
