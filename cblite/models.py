"""Pydantic models for request bodies and server responses."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


class ReplicationRequest(BaseModel):
    """Body of ``POST /_replicate``."""

    source: str
    target: str
    continuous: bool = False


class ReplicationResult(BaseModel):
    """Response of a successful ``POST /_replicate``."""

    model_config = ConfigDict(extra="allow")

    session_id: str | None = None
    ok: bool = True


class SaveResult(BaseModel):
    """Response of a document PUT/POST."""

    model_config = ConfigDict(extra="allow")

    id: str
    rev: str | None = None
    ok: bool = True


@dataclass(frozen=True)
class SyncResult:
    """Both directions of a successful sync."""

    local_to_remote: ReplicationResult
    remote_to_local: ReplicationResult
