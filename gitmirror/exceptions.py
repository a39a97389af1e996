"""gitmirror exception classes."""

from typing import Any


class GitMirrorError(Exception):
    """Base exception for all gitmirror errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Any = None,
        operation: str | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details
        self.operation = operation
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitMirrorError):
    """Raised when provider or store credentials are missing."""

    def __init__(self, message: str) -> None:
        super().__init__("AuthConfigurationError", message)


class InvalidRequestError(GitMirrorError):
    """Raised when an incoming sync request is malformed."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__("InvalidRequest", message, details)


class NotFoundError(GitMirrorError):
    """Raised when a repository id is unknown to the store."""

    def __init__(self, repository_id: str) -> None:
        super().__init__(
            "NotFound",
            f"Repository not found: {repository_id}",
            {"repository_id": repository_id},
        )


class InvalidUrlFormatError(GitMirrorError):
    """Raised when a repository URL does not decompose into owner/repo."""

    def __init__(self, url: str) -> None:
        super().__init__(
            "InvalidUrlFormat",
            f"Invalid repository URL format: {url}",
            {"url": url},
        )


class SyncInProgressError(GitMirrorError):
    """Raised when another push holds the target repository lock."""

    def __init__(self, repository_id: str, timeout: float) -> None:
        super().__init__(
            "SyncInProgress",
            f"Another push to {repository_id} did not finish within {timeout}s",
            {"repository_id": repository_id},
        )


class RemoteError(GitMirrorError):
    """Base for failures reported by the remote provider or store."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Any = None,
        operation: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(code, message, details, operation)
        self.status_code = status_code


class RemoteNotFoundError(RemoteError):
    """Raised on 404 for a branch, ref or repository lookup."""

    def __init__(
        self, message: str, details: Any = None, operation: str | None = None
    ) -> None:
        super().__init__("RemoteNotFound", message, details, operation, 404)


class MergeConflictError(RemoteError):
    """Raised when the provider cannot merge the head into the base cleanly."""

    def __init__(
        self, message: str, details: Any = None, operation: str | None = None
    ) -> None:
        super().__init__("MergeConflict", message, details, operation, 409)


class ForceUpdateError(RemoteError):
    """Raised when an unconditional ref update is rejected."""

    def __init__(
        self,
        message: str,
        details: Any = None,
        operation: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__("ForceUpdateFailure", message, details, operation, status_code)


class TransientNetworkError(RemoteError):
    """Raised on any other remote call failure (HTTP error or connection)."""

    def __init__(
        self,
        message: str,
        details: Any = None,
        operation: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__("TransientNetworkError", message, details, operation, status_code)
