"""Explicitly managed DynamoDB connection shared by the repositories."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .config import Collection, ConfigurationError, Settings

logger = logging.getLogger(__name__)

ResourceFactory = Callable[[Settings], Any]


def default_resource_factory(settings: Settings) -> Any:
    """Create the boto3 DynamoDB service resource."""
    import boto3

    if settings.aws_region:
        return boto3.resource("dynamodb", region_name=settings.aws_region)
    return boto3.resource("dynamodb")


class DocumentStore:
    """
    Owns the DynamoDB service resource for the lifetime of the process.

    The store must be opened before tables are requested and closed at
    shutdown; it can also be used as a context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        resource_factory: ResourceFactory = default_resource_factory,
    ) -> None:
        self._settings = settings
        self._resource_factory = resource_factory
        self._resource: Any | None = None
        self._tables: dict[Collection, Any] = {}

    @property
    def is_open(self) -> bool:
        return self._resource is not None

    def open(self) -> "DocumentStore":
        if self._resource is None:
            self._resource = self._resource_factory(self._settings)
            logger.info("Document store opened")
        return self

    def close(self) -> None:
        if self._resource is None:
            return
        client = getattr(getattr(self._resource, "meta", None), "client", None)
        close = getattr(client, "close", None)
        if callable(close):
            close()
        self._resource = None
        self._tables.clear()
        logger.info("Document store closed")

    def __enter__(self) -> "DocumentStore":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def table(self, collection: Collection) -> Any:
        if self._resource is None:
            raise ConfigurationError("document store is not open")
        table = self._tables.get(collection)
        if table is None:
            table = self._resource.Table(self._settings.table_name(collection))
            self._tables[collection] = table
        return table

    def ping(self) -> bool:
        """Return True when the courses table answers a metadata request."""
        try:
            self.table(Collection.COURSES).load()
        except Exception:
            logger.exception("Document store ping failed")
            return False
        return True
