"""
Pytest fixtures for gitmirror testing.

Provides a fake provider, an in-memory store and a wired orchestrator for
the common "source repository mirrored onto target repository" setup.
"""

from collections.abc import Generator
from datetime import datetime, timezone

import pytest

from gitmirror.observer import NullObserver, SyncObserver
from gitmirror.orchestrator import SyncOrchestrator
from gitmirror.registry import RepositoryRegistry
from gitmirror.status import StatusRecorder
from gitmirror.store import InMemoryRepositoryStore
from gitmirror.testing.fake import FakeGitHub
from gitmirror.types.repositories import RepositoryRecord, RepositoryStatus

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def create_repository_record(
    id: str = "source-id",
    url: str = "https://github.com/acme/app.git",
    nickname: str | None = None,
    last_commit: str | None = None,
    status: RepositoryStatus = RepositoryStatus.IDLE,
) -> RepositoryRecord:
    """Create a RepositoryRecord with sensible defaults."""
    return RepositoryRecord(
        id=id,
        url=url,
        nickname=nickname,
        last_commit=last_commit,
        status=status,
    )


def build_orchestrator(
    github: FakeGitHub,
    store: InMemoryRepositoryStore,
    now: datetime = FIXED_NOW,
    allowed_host: str | None = "github.com",
    observer: SyncObserver | None = None,
) -> SyncOrchestrator:
    """Wire a SyncOrchestrator around a fake provider and in-memory store."""
    return SyncOrchestrator(
        registry=RepositoryRegistry(store, allowed_host),
        remote=github,
        status=StatusRecorder(store),
        observer=observer or NullObserver(),
        clock=lambda: now,
    )


@pytest.fixture
def fake_github() -> Generator[FakeGitHub, None, None]:
    """
    Provide a FakeGitHub with ``acme/app`` (main at abc123) and an empty ``acme/mirror``.

    Example:
        ```python
        def test_push(fake_github, orchestrator):
            orchestrator.push("source-id", "target-id", PushStrategy.FORCE)
            assert fake_github.was_called("create_branch")
        ```
    """
    github = FakeGitHub()
    github.add_repository("acme", "app", branches={"main": "abc123"})
    github.add_repository("acme", "mirror", branches={})
    yield github
    github.reset_calls()


@pytest.fixture
def repository_store() -> InMemoryRepositoryStore:
    """Provide a store holding ``source-id`` (acme/app) and ``target-id`` (acme/mirror)."""
    return InMemoryRepositoryStore(
        [
            create_repository_record(id="source-id", nickname="App"),
            create_repository_record(
                id="target-id", url="https://github.com/acme/mirror.git"
            ),
        ]
    )


@pytest.fixture
def orchestrator(
    fake_github: FakeGitHub, repository_store: InMemoryRepositoryStore
) -> SyncOrchestrator:
    """Provide an orchestrator wired to ``fake_github`` and ``repository_store``."""
    return build_orchestrator(fake_github, repository_store)
