"""Repository record stores.

The sync core reads and updates repository records through
``RepositoryStore``; it never creates or deletes them.
"""

import os
import threading
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime
from typing import Any, Protocol

import httpx

from gitmirror.exceptions import ConfigurationError, NotFoundError
from gitmirror.github import parse_timestamp
from gitmirror.transport import HTTPTransport
from gitmirror.types.repositories import RepositoryRecord, RepositoryStatus

# Columns the sync core is allowed to write.
WRITABLE_FIELDS = frozenset({"status", "last_commit", "last_commit_date", "last_sync"})


class RepositoryStore(Protocol):
    """Lookup and update of repository records by id."""

    def get(self, repository_id: str) -> RepositoryRecord | None: ...

    def update(self, repository_ids: Sequence[str], fields: dict[str, Any]) -> None:
        """Apply ``fields`` to every id in one write, or to none of them."""
        ...


def _check_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - WRITABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields not writable by the sync core: {sorted(unknown)}")


class InMemoryRepositoryStore:
    """Thread-safe store holding records in a dict. Used for tests and local runs."""

    def __init__(self, records: Iterable[RepositoryRecord] = ()) -> None:
        self._records: dict[str, RepositoryRecord] = {r.id: r for r in records}
        self._lock = threading.Lock()
        self.update_calls: list[tuple[tuple[str, ...], dict[str, Any]]] = []

    def add(self, record: RepositoryRecord) -> None:
        with self._lock:
            self._records[record.id] = record

    def get(self, repository_id: str) -> RepositoryRecord | None:
        with self._lock:
            record = self._records.get(repository_id)
            return replace(record) if record is not None else None

    def update(self, repository_ids: Sequence[str], fields: dict[str, Any]) -> None:
        _check_fields(fields)
        with self._lock:
            missing = [i for i in repository_ids if i not in self._records]
            if missing:
                raise NotFoundError(missing[0])
            if "status" in fields:
                for repository_id in repository_ids:
                    current = self._records[repository_id].status
                    if not current.can_transition_to(fields["status"]):
                        raise ValueError(
                            f"Invalid status transition for {repository_id}: "
                            f"{current.value} -> {fields['status'].value}"
                        )
            for repository_id in repository_ids:
                self._records[repository_id] = replace(self._records[repository_id], **fields)
            self.update_calls.append((tuple(repository_ids), dict(fields)))


def _serialize(value: Any) -> Any:
    if isinstance(value, RepositoryStatus):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _parse_record(data: dict[str, Any]) -> RepositoryRecord:
    status = data.get("status")
    return RepositoryRecord(
        id=str(data["id"]),
        url=data.get("url") or "",
        nickname=data.get("nickname"),
        last_commit=data.get("last_commit"),
        last_commit_date=parse_timestamp(data.get("last_commit_date")),
        last_sync=parse_timestamp(data.get("last_sync")),
        status=RepositoryStatus(status) if status else RepositoryStatus.IDLE,
    )


class SupabaseRepositoryStore:
    """
    Store backed by a Supabase ``repositories`` table via PostgREST.

    A multi-row update is a single PATCH filtered with ``id=in.(...)``, so
    the database applies it to every row or to none.
    """

    DEFAULT_TABLE = "repositories"
    DEFAULT_TIMEOUT = 30.0
    _COLUMNS = "id,url,nickname,last_commit,last_commit_date,last_sync,status"

    def __init__(
        self,
        url: str,
        service_key: str,
        table: str = DEFAULT_TABLE,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not url or not service_key:
            raise ConfigurationError("Supabase URL and service role key are required")

        self.table = table
        self._transport = HTTPTransport(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            http_transport=http_transport,
        )

    @classmethod
    def from_env(cls, timeout: float = DEFAULT_TIMEOUT) -> "SupabaseRepositoryStore":
        """
        Create a store from environment variables.

        Environment variables:
            SUPABASE_URL: Project URL (required)
            SUPABASE_SERVICE_ROLE_KEY: Service role key (required)

        Raises:
            ConfigurationError: If either variable is missing
        """
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

        if not url:
            raise ConfigurationError("SUPABASE_URL environment variable not set")
        if not key:
            raise ConfigurationError("SUPABASE_SERVICE_ROLE_KEY environment variable not set")

        return cls(url=url, service_key=key, timeout=timeout)

    def close(self) -> None:
        self._transport.close()

    def get(self, repository_id: str) -> RepositoryRecord | None:
        rows = self._transport.request(
            "GET",
            f"/{self.table}",
            operation="get_repository",
            params={"id": f"eq.{repository_id}", "select": self._COLUMNS},
        )
        if not rows:
            return None
        return _parse_record(rows[0])

    def update(self, repository_ids: Sequence[str], fields: dict[str, Any]) -> None:
        _check_fields(fields)
        id_list = ",".join(f'"{i}"' for i in repository_ids)
        self._transport.request(
            "PATCH",
            f"/{self.table}",
            operation="update_repositories",
            params={"id": f"in.({id_list})"},
            body={key: _serialize(value) for key, value in fields.items()},
            headers={"Prefer": "return=minimal"},
        )
