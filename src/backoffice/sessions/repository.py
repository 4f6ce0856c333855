"""Persistence boundaries for session storage."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from backoffice.repositories.base import DynamoDbDocumentTable

from .model import SessionRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionStore(Protocol):
    """Storage interface for session records."""

    def save(self, record: SessionRecord) -> None:
        """Persist a session record."""

    def get(self, token: str) -> SessionRecord | None:
        """Lookup a session record by token value."""


class DynamoDbSessionStore:
    """DynamoDB adapter that stores session records in a table keyed by token."""

    def __init__(self, table: Any) -> None:
        self._documents = DynamoDbDocumentTable(table, key_attribute="token", label="session")

    def save(self, record: SessionRecord) -> None:
        self._documents.put(record.to_item())

    def get(self, token: str) -> SessionRecord | None:
        item = self._documents.get(token)
        if item is None:
            return None
        try:
            return SessionRecord.from_item(item)
        except ValueError:
            logger.warning("Ignoring malformed session record")
            return None

    def revoke(self, token: str, *, revoked_at: str) -> SessionRecord | None:
        """Revoke an existing session if present and return the updated record."""
        record = self.get(token)
        if record is None:
            return None
        if record.revoked:
            return record

        revoked = record.revoke(revoked_at=revoked_at)
        self.save(revoked)
        return revoked
