"""Lead documents (inquiries, demo bookings, event registrations, contacts)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from .validation import (
    INVALID_STATUS_MESSAGE,
    ModelValidationError,
    new_document_id,
    optional_string,
    parse_enum,
    require_fields,
    validate_email,
    validate_non_empty_string,
    validate_phone,
    validate_timestamp,
)


class InquiryStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class DemoBookingStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class RegistrationStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    CONFIRMED = "confirmed"
    ATTENDED = "attended"
    CANCELLED = "cancelled"


def parse_status(status_type: type[Enum], value: Any) -> Any:
    """Parse a transition target; anything outside the closed set is rejected."""
    return parse_enum(status_type, value, message=INVALID_STATUS_MESSAGE)


def _validate_lead_fields(record: Any) -> None:
    validate_non_empty_string(record.id, "id")
    validate_non_empty_string(record.full_name, "fullName")
    validate_non_empty_string(record.email, "email")
    validate_non_empty_string(record.phone, "phone")
    validate_timestamp(record.created_at, "createdAt")
    validate_timestamp(record.updated_at, "updatedAt")
    if record.updated_at < record.created_at:
        raise ModelValidationError("updatedAt must be >= createdAt")


def _contact_fields(payload: Mapping[str, Any], extra_required: tuple[str, ...] = ()) -> dict[str, str]:
    """Validate required fields first, then email and phone formats."""
    values = require_fields(payload, ("fullName", "email", "phone", *extra_required))
    validate_email(values["email"])
    validate_phone(values["phone"])
    return values


@dataclass(frozen=True)
class InquiryRequest:
    """Validated public inquiry submission, before the course lookup."""

    full_name: str
    email: str
    phone: str
    course_id: str
    message: str = ""

    @classmethod
    def parse(cls, payload: Mapping[str, Any]) -> "InquiryRequest":
        values = _contact_fields(payload, ("courseId",))
        return cls(
            full_name=values["fullName"],
            email=values["email"],
            phone=values["phone"],
            course_id=values["courseId"],
            message=optional_string(payload, "message"),
        )

    def to_inquiry(
        self,
        *,
        course_title: str,
        now: str,
        id_factory: Callable[[], str] = new_document_id,
    ) -> "Inquiry":
        return Inquiry(
            id=id_factory(),
            full_name=self.full_name,
            email=self.email,
            phone=self.phone,
            message=self.message,
            course_id=self.course_id,
            course_title=course_title,
            status=InquiryStatus.NEW,
            created_at=now,
            updated_at=now,
        )


@dataclass(frozen=True)
class Inquiry:
    """Course inquiry left by a prospective attendee."""

    id: str
    full_name: str
    email: str
    phone: str
    course_id: str
    course_title: str
    status: InquiryStatus
    created_at: str
    updated_at: str
    message: str = ""

    def __post_init__(self) -> None:
        _validate_lead_fields(self)
        validate_non_empty_string(self.course_id, "courseId")

    def to_item(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "message": self.message,
            "courseId": self.course_id,
            "courseTitle": self.course_title,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "Inquiry":
        return cls(
            id=item.get("id"),
            full_name=item.get("fullName"),
            email=item.get("email"),
            phone=item.get("phone"),
            message=item.get("message") or "",
            course_id=item.get("courseId"),
            course_title=item.get("courseTitle") or "",
            status=parse_status(InquiryStatus, item.get("status")),
            created_at=item.get("createdAt"),
            updated_at=item.get("updatedAt"),
        )


@dataclass(frozen=True)
class DemoBookingRequest:
    """Validated public demo booking submission."""

    full_name: str
    email: str
    phone: str
    company: str = ""
    message: str = ""
    preferred_date: str = ""

    @classmethod
    def parse(cls, payload: Mapping[str, Any]) -> "DemoBookingRequest":
        values = _contact_fields(payload)
        return cls(
            full_name=values["fullName"],
            email=values["email"],
            phone=values["phone"],
            company=optional_string(payload, "company"),
            message=optional_string(payload, "message"),
            preferred_date=optional_string(payload, "preferredDate"),
        )

    def to_booking(
        self,
        *,
        now: str,
        id_factory: Callable[[], str] = new_document_id,
    ) -> "DemoBooking":
        return DemoBooking(
            id=id_factory(),
            full_name=self.full_name,
            email=self.email,
            phone=self.phone,
            company=self.company,
            message=self.message,
            preferred_date=self.preferred_date,
            status=DemoBookingStatus.NEW,
            created_at=now,
            updated_at=now,
        )


@dataclass(frozen=True)
class DemoBooking:
    """Product demo request."""

    id: str
    full_name: str
    email: str
    phone: str
    status: DemoBookingStatus
    created_at: str
    updated_at: str
    company: str = ""
    message: str = ""
    preferred_date: str = ""

    def __post_init__(self) -> None:
        _validate_lead_fields(self)

    def to_item(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "message": self.message,
            "preferredDate": self.preferred_date,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "DemoBooking":
        return cls(
            id=item.get("id"),
            full_name=item.get("fullName"),
            email=item.get("email"),
            phone=item.get("phone"),
            company=item.get("company") or "",
            message=item.get("message") or "",
            preferred_date=item.get("preferredDate") or "",
            status=parse_status(DemoBookingStatus, item.get("status")),
            created_at=item.get("createdAt"),
            updated_at=item.get("updatedAt"),
        )


@dataclass(frozen=True)
class RegistrationRequest:
    """Validated public event registration, before the event lookup."""

    event_id: str
    full_name: str
    email: str
    phone: str
    organization: str = ""
    message: str = ""

    @classmethod
    def parse(cls, payload: Mapping[str, Any]) -> "RegistrationRequest":
        values = _contact_fields(payload, ("eventId",))
        return cls(
            event_id=values["eventId"],
            full_name=values["fullName"],
            email=values["email"],
            phone=values["phone"],
            organization=optional_string(payload, "organization"),
            message=optional_string(payload, "message"),
        )

    def to_registration(
        self,
        *,
        now: str,
        id_factory: Callable[[], str] = new_document_id,
    ) -> "EventRegistration":
        return EventRegistration(
            id=id_factory(),
            event_id=self.event_id,
            full_name=self.full_name,
            email=self.email,
            phone=self.phone,
            organization=self.organization,
            message=self.message,
            status=RegistrationStatus.NEW,
            created_at=now,
            updated_at=now,
        )


@dataclass(frozen=True)
class EventRegistration:
    """Attendee registration for one event."""

    id: str
    event_id: str
    full_name: str
    email: str
    phone: str
    status: RegistrationStatus
    created_at: str
    updated_at: str
    organization: str = ""
    message: str = ""

    def __post_init__(self) -> None:
        _validate_lead_fields(self)
        validate_non_empty_string(self.event_id, "eventId")

    def to_item(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "eventId": self.event_id,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "organization": self.organization,
            "message": self.message,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "EventRegistration":
        return cls(
            id=item.get("id"),
            event_id=item.get("eventId"),
            full_name=item.get("fullName"),
            email=item.get("email"),
            phone=item.get("phone"),
            organization=item.get("organization") or "",
            message=item.get("message") or "",
            status=parse_status(RegistrationStatus, item.get("status")),
            created_at=item.get("createdAt"),
            updated_at=item.get("updatedAt"),
        )


@dataclass(frozen=True)
class ContactMessage:
    """General contact form submission."""

    id: str
    name: str
    email: str
    message: str
    created_at: str
    updated_at: str
    phone: str = ""
    company: str = ""
    status: InquiryStatus = InquiryStatus.NEW

    def __post_init__(self) -> None:
        validate_non_empty_string(self.id, "id")
        validate_non_empty_string(self.email, "email")
        validate_timestamp(self.created_at, "createdAt")
        validate_timestamp(self.updated_at, "updatedAt")

    @classmethod
    def create(
        cls,
        payload: Mapping[str, Any],
        *,
        now: str,
        id_factory: Callable[[], str] = new_document_id,
    ) -> "ContactMessage":
        try:
            values = require_fields(payload, ("name", "email", "message"))
        except ModelValidationError as exc:
            raise ModelValidationError("Required fields missing") from exc
        validate_email(values["email"])
        return cls(
            id=id_factory(),
            name=values["name"],
            email=values["email"],
            message=values["message"],
            phone=optional_string(payload, "phone"),
            company=optional_string(payload, "company"),
            created_at=now,
            updated_at=now,
        )

    def to_item(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "message": self.message,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "ContactMessage":
        return cls(
            id=item.get("id"),
            name=item.get("name") or "",
            email=item.get("email"),
            message=item.get("message") or "",
            phone=item.get("phone") or "",
            company=item.get("company") or "",
            status=parse_status(InquiryStatus, item.get("status")),
            created_at=item.get("createdAt"),
            updated_at=item.get("updatedAt"),
        )
