"""Async client for Couchbase Lite / CouchDB style REST servers."""

from cblite.client import CBLite
from cblite.config import Settings, get_settings, settings_locator
from cblite.credentials import ServerHandle, basic_auth_header
from cblite.database import Database
from cblite.document import Document
from cblite.errors import (
    CBLiteError,
    ConflictError,
    InvalidNameError,
    InvalidPayloadKind,
    NotFoundError,
    NotReadyError,
    PreconditionFailedError,
    RemoteError,
    SyncError,
    UnauthorizedError,
)
from cblite.identity import DocumentIdentity, IdentityState, SaveTarget
from cblite.logging_config import JSONFormatter, configure_logging
from cblite.models import ReplicationRequest, ReplicationResult, SaveResult, SyncResult
from cblite.replication import Direction
from cblite.transport import AiohttpTransport, Transport

__all__ = [
    "AiohttpTransport",
    "CBLite",
    "CBLiteError",
    "ConflictError",
    "Database",
    "Direction",
    "Document",
    "DocumentIdentity",
    "IdentityState",
    "InvalidNameError",
    "InvalidPayloadKind",
    "JSONFormatter",
    "NotFoundError",
    "NotReadyError",
    "PreconditionFailedError",
    "RemoteError",
    "ReplicationRequest",
    "ReplicationResult",
    "SaveResult",
    "SaveTarget",
    "ServerHandle",
    "Settings",
    "SyncError",
    "SyncResult",
    "Transport",
    "UnauthorizedError",
    "basic_auth_header",
    "configure_logging",
    "get_settings",
    "settings_locator",
]
