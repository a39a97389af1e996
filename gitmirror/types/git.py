"""Remote git data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class BranchRef:
    """A branch and the commit it currently points to."""

    name: str
    sha: str


@dataclass
class CommitInfo:
    """A commit as reported by the provider."""

    sha: str
    author_date: datetime | None
    message: str = ""
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MergeOutcome:
    """Result of a provider-side merge."""

    sha: str
    merged: bool  # False when the base already contained the head


@dataclass(frozen=True)
class TargetBranch:
    """The branch a push strategy writes to."""

    owner: str
    repo: str
    branch: str
