"""
Tests for GitMirrorClient composition and environment configuration.
"""

import pytest

from gitmirror.client import GitMirrorClient
from gitmirror.exceptions import ConfigurationError
from gitmirror.github import GitHubClient
from gitmirror.observer import NullObserver
from gitmirror.store import InMemoryRepositoryStore, SupabaseRepositoryStore
from gitmirror.testing import FakeGitHub
from gitmirror.types.sync import PushStrategy

ENV = {
    "GITHUB_ACCESS_TOKEN": "ghp_env",
    "SUPABASE_URL": "https://project.supabase.co",
    "SUPABASE_SERVICE_ROLE_KEY": "service-key",
}


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (*ENV, "GITHUB_API_URL", "GITMIRROR_ALLOWED_HOST", "GITMIRROR_LOCK_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_from_env_builds_github_and_supabase(clean_env: pytest.MonkeyPatch) -> None:
    for name, value in ENV.items():
        clean_env.setenv(name, value)

    with GitMirrorClient.from_env() as client:
        assert isinstance(client.remote, GitHubClient)
        assert isinstance(client.store, SupabaseRepositoryStore)
        assert client.orchestrator.registry.allowed_host == "github.com"
        assert client.orchestrator.locks.timeout == 30.0


def test_from_env_reads_optional_settings(clean_env: pytest.MonkeyPatch) -> None:
    for name, value in ENV.items():
        clean_env.setenv(name, value)
    clean_env.setenv("GITMIRROR_ALLOWED_HOST", "")
    clean_env.setenv("GITMIRROR_LOCK_TIMEOUT", "2.5")

    with GitMirrorClient.from_env() as client:
        assert client.orchestrator.registry.allowed_host is None
        assert client.orchestrator.locks.timeout == 2.5


@pytest.mark.parametrize("missing", list(ENV))
def test_from_env_missing_credentials(clean_env: pytest.MonkeyPatch, missing: str) -> None:
    for name, value in ENV.items():
        if name != missing:
            clean_env.setenv(name, value)

    with pytest.raises(ConfigurationError) as exc_info:
        GitMirrorClient.from_env()

    assert exc_info.value.code == "AuthConfigurationError"
    assert missing in exc_info.value.message


def test_from_env_invalid_lock_timeout(clean_env: pytest.MonkeyPatch) -> None:
    for name, value in ENV.items():
        clean_env.setenv(name, value)
    clean_env.setenv("GITMIRROR_LOCK_TIMEOUT", "soon")

    with pytest.raises(ConfigurationError):
        GitMirrorClient.from_env()


def test_client_runs_operations(
    fake_github: FakeGitHub, repository_store: InMemoryRepositoryStore
) -> None:
    client = GitMirrorClient(fake_github, repository_store, observer=NullObserver())

    fetched = client.fetch_latest_commit("source-id")
    pushed = client.push("source-id", "target-id", PushStrategy.FORCE_WITH_LEASE)
    status, body = client.handle({"type": "getLastCommit", "sourceRepoId": "source-id"})

    assert fetched.sha == "abc123"
    assert pushed.sha == "abc123"
    assert status == 200
    assert body["success"] is True
    assert body["commit"]["sha"] == "abc123"


def test_close_tolerates_collaborators_without_close(
    fake_github: FakeGitHub, repository_store: InMemoryRepositoryStore
) -> None:
    with GitMirrorClient(fake_github, repository_store):
        pass
