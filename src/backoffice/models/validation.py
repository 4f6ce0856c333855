"""Shared validation and timestamp helpers for document models."""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, TypeVar

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[0-9\s\-\(\)]{8,20}$")
_RFC3339_UTC_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")

MISSING_FIELDS_MESSAGE = "Missing required fields"
INVALID_EMAIL_MESSAGE = "Invalid email format"
INVALID_PHONE_MESSAGE = "Invalid phone number format"
INVALID_STATUS_MESSAGE = "Invalid status value"

EnumT = TypeVar("EnumT", bound=Enum)


class ModelValidationError(ValueError):
    """Raised when payloads or stored documents fail validation."""


def format_rfc3339_utc(value: datetime) -> str:
    """Render a timestamp as RFC3339 UTC with a trailing Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_rfc3339() -> str:
    """Return the current UTC timestamp in RFC3339 form with trailing Z."""
    return format_rfc3339_utc(utc_now())


def parse_rfc3339_utc(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def new_document_id() -> str:
    return uuid.uuid4().hex


def validate_timestamp(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not _RFC3339_UTC_RE.match(value):
        raise ModelValidationError(f"{field_name} must be RFC3339 UTC with trailing Z")
    return value


def validate_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ModelValidationError(f"{field_name} must be a string")
    if not value.strip():
        raise ModelValidationError(f"{field_name} must not be empty")
    return value


def optional_string(payload: Mapping[str, Any], field_name: str) -> str:
    """Read an optional text field, defaulting to an empty string."""
    value = payload.get(field_name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ModelValidationError(f"{field_name} must be a string")
    return value.strip()


def require_fields(payload: Mapping[str, Any], fields: tuple[str, ...]) -> dict[str, str]:
    """Return stripped values for required text fields or fail as a group."""
    values: dict[str, str] = {}
    for field_name in fields:
        value = payload.get(field_name)
        if not isinstance(value, str) or not value.strip():
            raise ModelValidationError(MISSING_FIELDS_MESSAGE)
        values[field_name] = value.strip()
    return values


def validate_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise ModelValidationError(INVALID_EMAIL_MESSAGE)
    return value


def validate_phone(value: str) -> str:
    if not PHONE_PATTERN.match(value):
        raise ModelValidationError(INVALID_PHONE_MESSAGE)
    return value


def validate_event_date(value: str) -> str:
    """Accept an ISO date or ISO datetime."""
    try:
        if len(value) == 10:
            date.fromisoformat(value)
        else:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ModelValidationError("eventDate must be an ISO date (YYYY-MM-DD)") from exc
    return value


def parse_enum(enum_type: type[EnumT], value: Any, *, message: str) -> EnumT:
    if isinstance(value, enum_type):
        return value
    if not isinstance(value, str):
        raise ModelValidationError(message)
    try:
        return enum_type(value.strip())
    except ValueError as exc:
        raise ModelValidationError(message) from exc


def parse_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ModelValidationError(f"{field_name} must be a boolean")
    return value
