"""Database handle: info/exists/create, documents and replication."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .document import Document
from .errors import PreconditionFailedError, RemoteError
from .models import ReplicationResult, SyncResult
from .paths import check_database_name, database_path
from .replication import Direction, replicate, sync

if TYPE_CHECKING:
    from .client import CBLite

logger = logging.getLogger(__name__)


class Database:
    """A named database on the server. Holds nothing but the name."""

    def __init__(self, client: "CBLite", name: str):
        self.client = client
        self.name = check_database_name(name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"

    async def info(self) -> dict[str, Any]:
        """Database metadata (``doc_count``, ``update_seq``, ...)."""
        server = await self.client.resolve_server()
        return await self.client.transport.get(
            database_path(server.base_url, self.name), headers=server.headers
        )

    async def exists(self) -> bool:
        try:
            await self.info()
        except RemoteError as e:
            logger.debug("Database %s not available: %s", self.name, e.status_code)
            return False
        return True

    async def create(self) -> dict[str, Any]:
        """Create the database. Raises ``PreconditionFailedError`` if it exists."""
        server = await self.client.resolve_server()
        result = await self.client.transport.put(
            database_path(server.base_url, self.name), None, headers=server.headers
        )
        logger.info("Created database %s", self.name)
        return result

    async def ensure(self) -> bool:
        """Create the database if missing. Returns True if it was created."""
        try:
            await self.create()
        except PreconditionFailedError:
            logger.debug("Database %s already exists", self.name)
            return False
        return True

    def document(self, doc_id: str | None = None) -> Document:
        """Handle for a document; without an id the server assigns one on first save."""
        return Document(self, doc_id)

    # Replication

    async def replicate(
        self, direction: Direction, url: str, *, continuous: bool = False
    ) -> ReplicationResult:
        return await replicate(self, direction, url, continuous=continuous)

    async def replicate_to(self, url: str, *, continuous: bool = False) -> ReplicationResult:
        return await replicate(self, Direction.TO, url, continuous=continuous)

    async def replicate_from(self, url: str, *, continuous: bool = False) -> ReplicationResult:
        return await replicate(self, Direction.FROM, url, continuous=continuous)

    async def sync_with(self, url: str, *, continuous: bool = False) -> SyncResult:
        return await sync(self, url, continuous=continuous)
