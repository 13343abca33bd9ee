"""Errors raised by the cblite client."""

from __future__ import annotations

from typing import Any


class CBLiteError(Exception):
    """Base cblite error."""


class InvalidPayloadKind(CBLiteError, TypeError):
    """A document payload that is not a mapping."""

    def __init__(self, kind: str):
        self.kind = kind
        if kind == "null":
            message = "You can't save a null document"
        else:
            message = f"You can't save this type: {kind}"
        super().__init__(message)


class InvalidNameError(CBLiteError, ValueError):
    """Empty database name or document id."""


class NotReadyError(CBLiteError):
    """The server locator has not resolved (or failed, or the client is closed)."""


class RemoteError(CBLiteError):
    """Non-2xx response from the server.

    ``body`` is the server's JSON body, untouched.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error: str = "unknown",
        body: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error = error
        self.body = body if body is not None else {}
        super().__init__(message)

    @property
    def reason(self) -> str | None:
        return self.body.get("reason")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status_code={self.status_code}, error={self.error!r})"


class UnauthorizedError(RemoteError):
    pass


class NotFoundError(RemoteError):
    pass


class ConflictError(RemoteError):
    pass


class PreconditionFailedError(RemoteError):
    pass


_STATUS_ERRORS: dict[int, type[RemoteError]] = {
    401: UnauthorizedError,
    404: NotFoundError,
    409: ConflictError,
    412: PreconditionFailedError,
}


def remote_error(status_code: int, url: str, body: Any) -> RemoteError:
    """Build the RemoteError subclass matching ``status_code``.

    A body that is not a JSON object (a proxy's plain string, say) is kept
    under ``reason``.
    """
    if not isinstance(body, dict):
        body = {"reason": body}
    error = body.get("error", "unknown")
    reason = body.get("reason")
    if not isinstance(reason, str) or not reason:
        reason = f"{error} ({status_code}) for {url}"
    cls = _STATUS_ERRORS.get(status_code, RemoteError)
    return cls(reason, status_code, error, body)


class SyncError(CBLiteError):
    """One or both directions of a sync failed.

    Each slot holds either that direction's ``ReplicationResult`` or the
    ``RemoteError`` it raised.
    """

    def __init__(self, local_to_remote: Any, remote_to_local: Any):
        self.local_to_remote = local_to_remote
        self.remote_to_local = remote_to_local
        super().__init__(f"Sync failed: {', '.join(self.failed_directions)}")

    @property
    def failed_directions(self) -> list[str]:
        return [
            name
            for name in ("local_to_remote", "remote_to_local")
            if isinstance(getattr(self, name), BaseException)
        ]
