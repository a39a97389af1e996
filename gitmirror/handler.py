"""
Request/response boundary.

Validates incoming payloads of the form::

    {"type": "getLastCommit" | "push", "sourceRepoId": str,
     "targetRepoId"?: str, "pushType"?: "merge" | "force" | "force-with-lease"}

into a ``SyncRequest`` before any collaborator is touched, and renders
``SyncResult`` objects back into response bodies.
"""

from typing import Any

from gitmirror.exceptions import InvalidRequestError
from gitmirror.orchestrator import SyncOrchestrator
from gitmirror.types.git import CommitInfo
from gitmirror.types.sync import (
    FetchLatestCommitRequest,
    PushRequest,
    PushStrategy,
    SyncRequest,
    SyncResult,
)

OPERATION_TYPES = ("getLastCommit", "push")


def _require_id(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(f"{key} is required", {"field": key})
    return value


def parse_request(payload: Any) -> SyncRequest:
    """
    Validate a raw payload into a ``SyncRequest``.

    Raises:
        InvalidRequestError: If the type is unknown or a required field is missing
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    operation = payload.get("type")
    if operation not in OPERATION_TYPES:
        raise InvalidRequestError(
            f"Unsupported operation type: {operation!r}",
            {"field": "type", "allowed": list(OPERATION_TYPES)},
        )

    source_repo_id = _require_id(payload, "sourceRepoId")
    if operation == "getLastCommit":
        return FetchLatestCommitRequest(source_repo_id=source_repo_id)

    target_repo_id = _require_id(payload, "targetRepoId")
    push_type = payload.get("pushType")
    try:
        strategy = PushStrategy(push_type)
    except ValueError:
        raise InvalidRequestError(
            f"Unsupported pushType: {push_type!r}",
            {"field": "pushType", "allowed": [s.value for s in PushStrategy]},
        ) from None

    if source_repo_id == target_repo_id:
        raise InvalidRequestError(
            "sourceRepoId and targetRepoId must differ", {"field": "targetRepoId"}
        )
    return PushRequest(source_repo_id, target_repo_id, strategy)


def render_commit(commit: CommitInfo) -> dict[str, Any]:
    if commit.raw:
        return commit.raw
    return {
        "sha": commit.sha,
        "commit": {
            "message": commit.message,
            "author": {
                "date": commit.author_date.isoformat() if commit.author_date else None
            },
        },
    }


def render_result(result: SyncResult) -> dict[str, Any]:
    """Render a result into a response body."""
    if not result.success:
        body: dict[str, Any] = {
            "success": False,
            "error": result.error,
            "message": result.message,
        }
        if result.stage is not None:
            body["stage"] = result.stage.value
        if result.details is not None:
            body["details"] = result.details
        return body

    body = {"success": True, "message": result.message}
    if result.commit is not None:
        body["commit"] = render_commit(result.commit)
    elif result.sha is not None:
        body["sha"] = result.sha
    return body


def handle(orchestrator: SyncOrchestrator, payload: Any) -> tuple[int, dict[str, Any]]:
    """
    Handle one request.

    Returns:
        ``(status_code, body)``: 200 for successes and handled failures,
        malformed requests included. Unexpected exceptions propagate so the
        hosting layer can answer 500.
    """
    try:
        request = parse_request(payload)
    except InvalidRequestError as e:
        return 200, {
            "success": False,
            "error": e.code,
            "message": e.message,
            "details": e.details,
        }

    return 200, render_result(orchestrator.execute(request))


def handle_safely(orchestrator: SyncOrchestrator, payload: Any) -> tuple[int, dict[str, Any]]:
    """Like ``handle`` but turns unexpected exceptions into a 500 body."""
    try:
        return handle(orchestrator, payload)
    except Exception as e:
        orchestrator.observer.event("handler", "internal_error", error=repr(e))
        return 500, {
            "success": False,
            "error": "InternalError",
            "message": str(e),
        }
