"""DynamoDB document table adapter shared by every repository."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Generic, Iterator, Mapping, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from backoffice.models.validation import ModelValidationError, format_rfc3339_utc, utc_now

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
RecordT = TypeVar("RecordT")

_CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class RepositoryError(RuntimeError):
    """Raised when the document store fails; the cause is already logged."""


def _is_conditional_failure(exc: ClientError) -> bool:
    error = exc.response.get("Error", {}) if isinstance(exc.response, dict) else {}
    return error.get("Code") == _CONDITIONAL_CHECK_FAILED


class DynamoDbDocumentTable:
    """Single-table document operations keyed by one string attribute."""

    def __init__(self, table: Any, *, key_attribute: str = "id", label: str = "document") -> None:
        self._table = table
        self._key_attribute = key_attribute
        self._label = label

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (BotoCoreError, ClientError) as exc:
            logger.exception("%s %s failed", self._label, operation)
            raise RepositoryError(f"{self._label} {operation} failed") from exc

    def _key(self, key_value: str) -> dict[str, str]:
        return {self._key_attribute: key_value}

    def put(self, item: Mapping[str, Any]) -> None:
        with self._translate_errors("put"):
            self._table.put_item(Item=dict(item))

    def put_if_absent(self, item: Mapping[str, Any]) -> bool:
        """Insert only when no document has the same key; False if one exists."""
        with self._translate_errors("conditional put"):
            try:
                self._table.put_item(
                    Item=dict(item),
                    ConditionExpression="attribute_not_exists(#pk)",
                    ExpressionAttributeNames={"#pk": self._key_attribute},
                )
            except ClientError as exc:
                if _is_conditional_failure(exc):
                    return False
                raise
        return True

    def get(self, key_value: str) -> dict[str, Any] | None:
        with self._translate_errors("get"):
            response = self._table.get_item(Key=self._key(key_value))
        item = response.get("Item")
        if not isinstance(item, dict):
            return None
        return item

    def scan_all(self) -> list[dict[str, Any]]:
        with self._translate_errors("scan"):
            response = self._table.scan()
            rows = list(response.get("Items", []))
            while "LastEvaluatedKey" in response:
                response = self._table.scan(ExclusiveStartKey=response["LastEvaluatedKey"])
                rows.extend(response.get("Items", []))
        return [row for row in rows if isinstance(row, dict)]

    def update_fields(self, key_value: str, changes: Mapping[str, Any]) -> dict[str, Any] | None:
        """Set attributes on an existing document; None when it does not exist."""
        if not changes:
            raise ValueError("changes must not be empty")

        names = {"#pk": self._key_attribute}
        values: dict[str, Any] = {}
        clauses: list[str] = []
        for index, (attribute, value) in enumerate(changes.items()):
            names[f"#f{index}"] = attribute
            values[f":v{index}"] = value
            clauses.append(f"#f{index} = :v{index}")

        with self._translate_errors("update"):
            try:
                response = self._table.update_item(
                    Key=self._key(key_value),
                    UpdateExpression="SET " + ", ".join(clauses),
                    ConditionExpression="attribute_exists(#pk)",
                    ExpressionAttributeNames=names,
                    ExpressionAttributeValues=values,
                    ReturnValues="ALL_NEW",
                )
            except ClientError as exc:
                if _is_conditional_failure(exc):
                    return None
                raise
        attributes = response.get("Attributes")
        return attributes if isinstance(attributes, dict) else None

    def delete(self, key_value: str) -> bool:
        with self._translate_errors("delete"):
            response = self._table.delete_item(Key=self._key(key_value), ReturnValues="ALL_OLD")
        return isinstance(response.get("Attributes"), dict)


class DocumentRepository(Generic[RecordT]):
    """Typed access to one collection; subclasses set the record type."""

    label = "document"
    key_attribute = "id"

    def __init__(self, table: Any, *, clock: Clock = utc_now) -> None:
        self._documents = DynamoDbDocumentTable(
            table,
            key_attribute=self.key_attribute,
            label=self.label,
        )
        self._clock = clock

    def _now(self) -> str:
        return format_rfc3339_utc(self._clock())

    def _hydrate(self, item: Mapping[str, Any]) -> RecordT:
        raise NotImplementedError

    def _hydrate_or_skip(self, item: Mapping[str, Any]) -> RecordT | None:
        try:
            return self._hydrate(item)
        except ModelValidationError:
            logger.warning("Skipping malformed %s %s", self.label, item.get(self.key_attribute))
            return None

    def get(self, key_value: str) -> RecordT | None:
        item = self._documents.get(key_value)
        if item is None:
            return None
        return self._hydrate_or_skip(item)

    def _all(self) -> list[RecordT]:
        records: list[RecordT] = []
        for item in self._documents.scan_all():
            record = self._hydrate_or_skip(item)
            if record is not None:
                records.append(record)
        return records
