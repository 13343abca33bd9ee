from __future__ import annotations

from urllib.parse import quote

from .errors import InvalidNameError

REPLICATE_ENDPOINT = "_replicate"

# Special document namespaces whose separator is part of the id.
_PREFIXED_IDS = ("_design/", "_local/")


def _segment(value: str, what: str) -> str:
    stripped = (value or "").strip("/")
    if not stripped:
        raise InvalidNameError(f"{what} must not be empty")
    return stripped


def check_database_name(name: str) -> str:
    return _segment(name, "Database name")


def server_root(base_url: str) -> str:
    return base_url.rstrip("/")


def database_path(base_url: str, name: str) -> str:
    """URL of a named database, e.g. ``http://host:5984/my-database``."""
    return f"{server_root(base_url)}/{quote(_segment(name, 'Database name'), safe='')}"


def document_path(base_url: str, db_name: str, doc_id: str) -> str:
    """URL of a document inside a database."""
    doc_id = _segment(doc_id, "Document id")
    if f"{doc_id}/" in _PREFIXED_IDS:
        raise InvalidNameError(f"Document id needs a name after {doc_id}/")
    for prefix in _PREFIXED_IDS:
        if doc_id.startswith(prefix):
            encoded = prefix + quote(_segment(doc_id[len(prefix):], "Document id"), safe="")
            break
    else:
        encoded = quote(doc_id, safe="")
    return f"{database_path(base_url, db_name)}/{encoded}"


def replicate_path(base_url: str) -> str:
    return f"{server_root(base_url)}/{REPLICATE_ENDPOINT}"


def remote_database_url(remote_url: str, name: str) -> str:
    """Replication peer URL for ``name`` on a remote server.

    The database name is appended verbatim; the remote side decodes it.
    """
    return f"{server_root(remote_url)}/{_segment(name, 'Database name')}"
