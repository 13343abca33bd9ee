"""One-way replication and two-way sync through ``POST /_replicate``."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING

from .errors import SyncError
from .models import ReplicationRequest, ReplicationResult, SyncResult
from .paths import remote_database_url, replicate_path

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    TO = "to"  # local -> remote
    FROM = "from"  # remote -> local


def build_replication_request(
    db_name: str,
    direction: Direction,
    remote_url: str,
    continuous: bool = False,
) -> ReplicationRequest:
    """Build the ``_replicate`` body for one direction.

    The local side is the bare database name; the remote side is
    ``remote_url/db_name``.
    """
    local = db_name
    remote = remote_database_url(remote_url, db_name)
    if Direction(direction) is Direction.TO:
        return ReplicationRequest(source=local, target=remote, continuous=continuous)
    return ReplicationRequest(source=remote, target=local, continuous=continuous)


async def replicate(
    database: "Database",
    direction: Direction,
    remote_url: str,
    *,
    continuous: bool = False,
) -> ReplicationResult:
    """Start a replication between ``database`` and its remote counterpart.

    Success is decided by HTTP status only; a 2xx body with ``ok: false`` is
    still returned as a result, and a non-2xx raises ``RemoteError``.
    """
    request = build_replication_request(database.name, direction, remote_url, continuous)
    server = await database.client.resolve_server()
    logger.info(
        "Replicating %s -> %s (continuous=%s)",
        request.source,
        request.target,
        request.continuous,
        extra={
            "extra_fields": {
                "database": database.name,
                "direction": Direction(direction).value,
                "continuous": request.continuous,
            }
        },
    )
    body = await database.client.transport.post(
        replicate_path(server.base_url),
        request.model_dump(),
        headers=server.headers,
    )
    return ReplicationResult.model_validate(body)


async def sync(
    database: "Database",
    remote_url: str,
    *,
    continuous: bool = False,
) -> SyncResult:
    """Replicate both ways at once.

    Both requests are in flight together and each settles on its own. If
    either fails, ``SyncError`` carries both outcomes so the caller can see
    which half succeeded.
    """
    local_to_remote, remote_to_local = await asyncio.gather(
        replicate(database, Direction.TO, remote_url, continuous=continuous),
        replicate(database, Direction.FROM, remote_url, continuous=continuous),
        return_exceptions=True,
    )

    # Cancellation is not an outcome.
    for outcome in (local_to_remote, remote_to_local):
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome

    if isinstance(local_to_remote, Exception) or isinstance(remote_to_local, Exception):
        error = SyncError(local_to_remote, remote_to_local)
        logger.warning(
            "Sync of %s with %s failed: %s",
            database.name,
            remote_url,
            error,
            extra={
                "extra_fields": {
                    "database": database.name,
                    "failed_directions": error.failed_directions,
                }
            },
        )
        cause = local_to_remote if isinstance(local_to_remote, Exception) else remote_to_local
        raise error from cause

    return SyncResult(local_to_remote=local_to_remote, remote_to_local=remote_to_local)
