"""Repository identity resolution."""

import re
from collections.abc import Sequence

from gitmirror.exceptions import InvalidUrlFormatError, NotFoundError
from gitmirror.store import RepositoryStore
from gitmirror.types.repositories import ResolvedRepository

# host/owner/repo with an optional scheme or scp-style ``git@host:`` prefix,
# an optional ``.git`` suffix and an optional trailing slash.
_URL_PATTERN = re.compile(
    r"^(?:[a-z][a-z0-9+.\-]*://)?(?:[^@/\s]+@)?"
    r"(?P<host>[^/:\s]+)(?::\d+)?[/:]"
    r"(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?/?$",
    re.IGNORECASE,
)


def parse_repository_url(url: str, allowed_host: str | None = None) -> tuple[str, str]:
    """
    Split a repository URL into ``(owner, repo_name)``.

    Args:
        url: e.g. "https://github.com/acme/app.git" or "git@github.com:acme/app"
        allowed_host: If set, URLs on any other host are rejected

    Raises:
        InvalidUrlFormatError: If the URL does not match host/owner/repo
    """
    match = _URL_PATTERN.match(url.strip())
    if match is None:
        raise InvalidUrlFormatError(url)

    host = match.group("host").lower()
    if allowed_host is not None and host != allowed_host.lower():
        raise InvalidUrlFormatError(url)

    owner, repo_name = match.group("owner"), match.group("repo")
    if not owner or not repo_name or repo_name == ".git":
        raise InvalidUrlFormatError(url)
    return owner, repo_name


class RepositoryRegistry:
    """Resolves repository ids to records and provider coordinates."""

    def __init__(self, store: RepositoryStore, allowed_host: str | None = None) -> None:
        self.store = store
        self.allowed_host = allowed_host

    def resolve(self, repository_id: str) -> ResolvedRepository:
        """
        Look up a record and parse its URL.

        Raises:
            NotFoundError: If the id is unknown
            InvalidUrlFormatError: If the stored URL is not host/owner/repo
        """
        record = self.store.get(repository_id)
        if record is None:
            raise NotFoundError(repository_id)

        owner, repo_name = parse_repository_url(record.url, self.allowed_host)
        return ResolvedRepository(record=record, owner=owner, repo_name=repo_name)

    def resolve_many(self, repository_ids: Sequence[str]) -> list[ResolvedRepository]:
        return [self.resolve(repository_id) for repository_id in repository_ids]
