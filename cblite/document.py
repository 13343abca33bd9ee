"""Document handle with lazy id binding."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

from .errors import InvalidNameError
from .identity import MISSING, DocumentIdentity, resolve_save_target, validate_payload
from .models import SaveResult
from .paths import database_path, document_path

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)


class Document:
    """A (possibly not yet identified) document in a database.

    Saves on one handle run one at a time, so a save issued while a POST is
    still pending sees the id that POST returns.
    """

    def __init__(self, database: "Database", doc_id: str | None = None):
        self.database = database
        self.identity = DocumentIdentity(doc_id)
        self._save_lock = asyncio.Lock()

    @property
    def id(self) -> str | None:
        return self.identity.id

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.database.name!r}, {self.id!r})"

    def save(self, document: Any = MISSING) -> Coroutine[Any, Any, SaveResult]:
        """Save ``document``; PUT when the id is known, POST otherwise.

        The payload is checked here, before anything is awaited, so an
        invalid payload raises ``InvalidPayloadKind`` at the call site.
        """
        payload = validate_payload(document)
        return self._save(payload)

    async def _save(self, payload: dict[str, Any]) -> SaveResult:
        client = self.database.client
        async with self._save_lock:
            server = await client.resolve_server()
            target = resolve_save_target(self.identity, payload)

            if target.method == "PUT":
                url = document_path(server.base_url, self.database.name, target.doc_id)
                body = await client.transport.put(url, payload, headers=server.headers)
            else:
                url = database_path(server.base_url, self.database.name)
                body = await client.transport.post(url, payload, headers=server.headers)

            result = SaveResult.model_validate(body)
            if not self.identity.is_bound:
                self.identity.bind(result.id)
            logger.debug("Saved %s/%s rev=%s", self.database.name, result.id, result.rev)
            return result

    async def fetch(self) -> dict[str, Any]:
        """Current revision of the document."""
        if not self.identity.is_bound:
            raise InvalidNameError("Document has no id yet; save it first")
        client = self.database.client
        server = await client.resolve_server()
        return await client.transport.get(
            document_path(server.base_url, self.database.name, self.identity.id),
            headers=server.headers,
        )
