"""
Pytest plugin for gitmirror testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gitmirror.testing.conftest"]
"""

from gitmirror.testing.fixtures import fake_github, orchestrator, repository_store

__all__ = [
    "fake_github",
    "orchestrator",
    "repository_store",
]
