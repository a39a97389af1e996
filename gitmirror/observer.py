"""Sync event observers.

The orchestrator and its collaborators never log directly; they report
progress to a ``SyncObserver`` injected at construction time.
"""

import logging
from typing import Any, Protocol

from gitmirror.exceptions import GitMirrorError
from gitmirror.logging import get_logger, safe_log_dict
from gitmirror.types.sync import SyncStage


class SyncObserver(Protocol):
    """Receives structured events from a sync operation."""

    def stage_started(self, operation: str, stage: SyncStage, **fields: Any) -> None: ...

    def event(self, operation: str, name: str, **fields: Any) -> None: ...

    def succeeded(self, operation: str, **fields: Any) -> None: ...

    def failed(self, operation: str, stage: SyncStage, error: GitMirrorError) -> None: ...


class NullObserver:
    """Observer that discards every event."""

    def stage_started(self, operation: str, stage: SyncStage, **fields: Any) -> None:
        pass

    def event(self, operation: str, name: str, **fields: Any) -> None:
        pass

    def succeeded(self, operation: str, **fields: Any) -> None:
        pass

    def failed(self, operation: str, stage: SyncStage, error: GitMirrorError) -> None:
        pass


class LoggingObserver:
    """Observer that writes events to the ``gitmirror.sync`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or get_logger("sync")

    def stage_started(self, operation: str, stage: SyncStage, **fields: Any) -> None:
        self.logger.debug("%s: entering %s %s", operation, stage.value, safe_log_dict(fields))

    def event(self, operation: str, name: str, **fields: Any) -> None:
        self.logger.info("%s: %s %s", operation, name, safe_log_dict(fields))

    def succeeded(self, operation: str, **fields: Any) -> None:
        self.logger.info("%s: completed %s", operation, safe_log_dict(fields))

    def failed(self, operation: str, stage: SyncStage, error: GitMirrorError) -> None:
        self.logger.error(
            "%s: failed during %s: %s (operation=%s)",
            operation,
            stage.value,
            error,
            error.operation,
        )
