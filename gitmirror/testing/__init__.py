"""gitmirror testing utilities.

Provides a fake provider and fixtures for testing code that uses gitmirror.
"""

from gitmirror.testing.fake import FakeCall, FakeGitHub, FakeRepository
from gitmirror.testing.fixtures import (
    FIXED_NOW,
    build_orchestrator,
    create_repository_record,
)

__all__ = [
    # Fake provider
    "FakeGitHub",
    "FakeCall",
    "FakeRepository",
    # Helper functions
    "FIXED_NOW",
    "build_orchestrator",
    "create_repository_record",
]
