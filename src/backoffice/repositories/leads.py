"""Repositories for status-driven leads and contact messages."""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from typing import Any, Mapping

from backoffice.models.leads import (
    ContactMessage,
    DemoBooking,
    DemoBookingRequest,
    DemoBookingStatus,
    EventRegistration,
    Inquiry,
    InquiryRequest,
    InquiryStatus,
    RegistrationRequest,
    RegistrationStatus,
)
from backoffice.statistics import course_breakdown, daily_histogram, status_breakdown

from .base import DocumentRepository

logger = logging.getLogger(__name__)


class LeadRepository(DocumentRepository):
    """Shared create/transition/read paths over a closed status set."""

    status_type: type[Enum]

    def _insert(self, record: Any) -> Any:
        self._documents.put(record.to_item())
        logger.info("Created %s %s", self.label, record.id)
        return record

    def transition(self, key_value: str, status: Enum) -> Any | None:
        """Move a lead to a new status; None when the lead does not exist."""
        if not isinstance(status, self.status_type):
            raise TypeError(f"{self.label} status must be a {self.status_type.__name__}")
        item = self._documents.update_fields(
            key_value,
            {"status": status.value, "updatedAt": self._now()},
        )
        if item is None:
            return None
        logger.info("Moved %s %s to %s", self.label, key_value, status.value)
        return self._hydrate_or_skip(item)

    def _newest_first(self, records: list[Any]) -> list[Any]:
        records.sort(key=lambda record: (record.created_at, record.id), reverse=True)
        return records

    def list(self) -> list[Any]:
        return self._newest_first(self._all())

    def _breakdown(self, records: list[Any]) -> dict[str, Any]:
        return status_breakdown((record.status for record in records), self.status_type)


class InquiryRepository(LeadRepository):
    label = "inquiry"
    status_type = InquiryStatus

    def _hydrate(self, item: Mapping[str, Any]) -> Inquiry:
        return Inquiry.from_item(item)

    def create(self, request: InquiryRequest, *, course_title: str) -> Inquiry:
        return self._insert(request.to_inquiry(course_title=course_title, now=self._now()))

    def list(self, *, course_id: str | None = None) -> list[Inquiry]:
        inquiries = self._all()
        if course_id is not None:
            inquiries = [inquiry for inquiry in inquiries if inquiry.course_id == course_id]
        return self._newest_first(inquiries)

    def statistics(self) -> dict[str, Any]:
        inquiries = self._all()
        summary = self._breakdown(inquiries)
        summary["byCourse"] = course_breakdown(
            (inquiry.course_id, inquiry.course_title) for inquiry in inquiries
        )
        summary["byDate"] = daily_histogram(
            (inquiry.created_at for inquiry in inquiries),
            today=self._clock().date(),
        )
        return summary


class DemoBookingRepository(LeadRepository):
    label = "demo booking"
    status_type = DemoBookingStatus

    def _hydrate(self, item: Mapping[str, Any]) -> DemoBooking:
        return DemoBooking.from_item(item)

    def create(self, request: DemoBookingRequest) -> DemoBooking:
        return self._insert(request.to_booking(now=self._now()))

    def statistics(self) -> dict[str, Any]:
        bookings = self._all()
        summary = self._breakdown(bookings)
        summary["byDate"] = daily_histogram(
            (booking.created_at for booking in bookings),
            today=self._clock().date(),
        )
        return summary


class EventRegistrationRepository(LeadRepository):
    label = "event registration"
    status_type = RegistrationStatus

    def _hydrate(self, item: Mapping[str, Any]) -> EventRegistration:
        return EventRegistration.from_item(item)

    def create(self, request: RegistrationRequest) -> EventRegistration:
        return self._insert(request.to_registration(now=self._now()))

    def list(self, *, event_id: str | None = None) -> list[EventRegistration]:
        registrations = self._all()
        if event_id is not None:
            registrations = [row for row in registrations if row.event_id == event_id]
        return self._newest_first(registrations)

    def count_by_event(self) -> Counter[str]:
        return Counter(registration.event_id for registration in self._all())

    def statistics(self, *, event_id: str | None = None) -> dict[str, Any]:
        return self._breakdown(self.list(event_id=event_id))


class ContactRepository(DocumentRepository):
    label = "contact message"

    def _hydrate(self, item: Mapping[str, Any]) -> ContactMessage:
        return ContactMessage.from_item(item)

    def create(self, payload: Mapping[str, Any]) -> ContactMessage:
        message = ContactMessage.create(payload, now=self._now())
        self._documents.put(message.to_item())
        logger.info("Stored contact message %s", message.id)
        return message
