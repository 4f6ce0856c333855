"""Course and event documents with their archival lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from .validation import (
    ModelValidationError,
    new_document_id,
    optional_string,
    parse_bool,
    validate_event_date,
    validate_non_empty_string,
    validate_timestamp,
)

READ_ONLY_FIELDS = frozenset(("id", "_id", "createdAt", "updatedAt", "registrationCount"))

_TEXT = "text"
_REQUIRED_TEXT = "required_text"
_EVENT_DATE = "event_date"
_BOOL = "bool"

_COURSE_EDITABLE: dict[str, str] = {
    "title": _REQUIRED_TEXT,
    "description": _TEXT,
    "imageUrl": _TEXT,
    "program": _TEXT,
    "instructor": _TEXT,
    "dates": _TEXT,
    "isArchived": _BOOL,
}

_EVENT_EDITABLE: dict[str, str] = {
    "title": _REQUIRED_TEXT,
    "description": _TEXT,
    "eventDate": _EVENT_DATE,
    "location": _REQUIRED_TEXT,
    "imageUrl": _TEXT,
    "isArchived": _BOOL,
}


class ArchiveFilter(str, Enum):
    """Server-side visibility filter for catalog listings."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    ALL = "all"

    def admits(self, is_archived: bool) -> bool:
        if self is ArchiveFilter.ALL:
            return True
        if self is ArchiveFilter.ARCHIVED:
            return is_archived
        return not is_archived


def _parse_patch(payload: Mapping[str, Any], editable: Mapping[str, str]) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    unknown = sorted(set(payload.keys()) - set(editable) - READ_ONLY_FIELDS)
    if unknown:
        raise ModelValidationError(f"unknown field(s): {', '.join(unknown)}")

    for field_name, kind in editable.items():
        if field_name not in payload:
            continue
        value = payload[field_name]
        if kind == _BOOL:
            changes[field_name] = parse_bool(value, field_name)
        elif kind == _TEXT:
            changes[field_name] = optional_string(payload, field_name)
        elif kind == _EVENT_DATE:
            changes[field_name] = validate_event_date(
                validate_non_empty_string(value, field_name).strip()
            )
        else:
            changes[field_name] = validate_non_empty_string(value, field_name).strip()

    if not changes:
        raise ModelValidationError("No updatable fields provided")
    return changes


def parse_course_patch(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a partial course update and return storage attribute changes."""
    return _parse_patch(payload, _COURSE_EDITABLE)


def parse_event_patch(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a partial event update and return storage attribute changes."""
    return _parse_patch(payload, _EVENT_EDITABLE)


def _optional_bool(payload: Mapping[str, Any], field_name: str) -> bool:
    value = payload.get(field_name)
    if value is None:
        return False
    return parse_bool(value, field_name)


@dataclass(frozen=True)
class Course:
    """Training course shown on the public site unless archived."""

    id: str
    title: str
    created_at: str
    updated_at: str
    description: str = ""
    image_url: str = ""
    program: str = ""
    instructor: str = ""
    dates: str = ""
    is_archived: bool = False

    def __post_init__(self) -> None:
        validate_non_empty_string(self.id, "id")
        validate_non_empty_string(self.title, "title")
        validate_timestamp(self.created_at, "createdAt")
        validate_timestamp(self.updated_at, "updatedAt")
        if self.updated_at < self.created_at:
            raise ModelValidationError("updatedAt must be >= createdAt")

    @classmethod
    def create(
        cls,
        payload: Mapping[str, Any],
        *,
        now: str,
        id_factory: Callable[[], str] = new_document_id,
    ) -> "Course":
        """Build a new course from an admin form submission."""
        title = payload.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ModelValidationError("Title is required")
        return cls(
            id=id_factory(),
            title=title.strip(),
            description=optional_string(payload, "description"),
            image_url=optional_string(payload, "imageUrl"),
            program=optional_string(payload, "program"),
            instructor=optional_string(payload, "instructor"),
            dates=optional_string(payload, "dates"),
            is_archived=_optional_bool(payload, "isArchived"),
            created_at=now,
            updated_at=now,
        )

    def to_item(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "program": self.program,
            "instructor": self.instructor,
            "dates": self.dates,
            "isArchived": self.is_archived,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "Course":
        return cls(
            id=item.get("id"),
            title=item.get("title"),
            description=item.get("description") or "",
            image_url=item.get("imageUrl") or "",
            program=item.get("program") or "",
            instructor=item.get("instructor") or "",
            dates=item.get("dates") or "",
            is_archived=bool(item.get("isArchived", False)),
            created_at=item.get("createdAt"),
            updated_at=item.get("updatedAt"),
        )


@dataclass(frozen=True)
class Event:
    """Dated event open for registrations while active."""

    id: str
    title: str
    event_date: str
    location: str
    created_at: str
    updated_at: str
    description: str = ""
    image_url: str = ""
    is_archived: bool = False

    def __post_init__(self) -> None:
        validate_non_empty_string(self.id, "id")
        validate_non_empty_string(self.title, "title")
        validate_non_empty_string(self.location, "location")
        validate_event_date(validate_non_empty_string(self.event_date, "eventDate"))
        validate_timestamp(self.created_at, "createdAt")
        validate_timestamp(self.updated_at, "updatedAt")
        if self.updated_at < self.created_at:
            raise ModelValidationError("updatedAt must be >= createdAt")

    @property
    def event_day(self) -> str:
        """Calendar day of the event (YYYY-MM-DD)."""
        return self.event_date[:10]

    @classmethod
    def create(
        cls,
        payload: Mapping[str, Any],
        *,
        now: str,
        id_factory: Callable[[], str] = new_document_id,
    ) -> "Event":
        """Build a new event from an admin form submission."""
        required = {}
        for field_name in ("title", "eventDate", "location"):
            value = payload.get(field_name)
            if not isinstance(value, str) or not value.strip():
                raise ModelValidationError("Required fields missing")
            required[field_name] = value.strip()

        return cls(
            id=id_factory(),
            title=required["title"],
            event_date=validate_event_date(required["eventDate"]),
            location=required["location"],
            description=optional_string(payload, "description"),
            image_url=optional_string(payload, "imageUrl"),
            is_archived=_optional_bool(payload, "isArchived"),
            created_at=now,
            updated_at=now,
        )

    def to_item(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "eventDate": self.event_date,
            "location": self.location,
            "imageUrl": self.image_url,
            "isArchived": self.is_archived,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "Event":
        return cls(
            id=item.get("id"),
            title=item.get("title"),
            description=item.get("description") or "",
            event_date=item.get("eventDate"),
            location=item.get("location"),
            image_url=item.get("imageUrl") or "",
            is_archived=bool(item.get("isArchived", False)),
            created_at=item.get("createdAt"),
            updated_at=item.get("updatedAt"),
        )
