from gitmirror.testing.fixtures import fake_github, orchestrator, repository_store  # noqa: F401
