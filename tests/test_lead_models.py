"""Unit tests for lead submission parsing and status handling."""

from __future__ import annotations

import unittest

from backoffice.models.leads import (
    ContactMessage,
    DemoBookingRequest,
    DemoBookingStatus,
    Inquiry,
    InquiryRequest,
    InquiryStatus,
    RegistrationRequest,
    RegistrationStatus,
    parse_status,
)
from backoffice.models.validation import ModelValidationError

NOW = "2026-10-17T09:00:00Z"


def _inquiry_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "fullName": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "+44 20 7946 0958",
        "courseId": "course-1",
        "message": "Is there a weekend cohort?",
    }
    payload.update(overrides)
    return payload


class SubmissionValidationTests(unittest.TestCase):
    def test_missing_required_field_is_reported_first(self) -> None:
        payload = _inquiry_payload(fullName="  ", email="not-an-email")
        with self.assertRaisesRegex(ModelValidationError, "^Missing required fields$"):
            InquiryRequest.parse(payload)

    def test_email_is_checked_before_phone(self) -> None:
        payload = _inquiry_payload(email="ada@example", phone="12")
        with self.assertRaisesRegex(ModelValidationError, "^Invalid email format$"):
            InquiryRequest.parse(payload)

    def test_invalid_phone_is_rejected(self) -> None:
        for phone in ("1234567", "call me maybe", "+1 (555) 010-0000-0000-0000"):
            with self.subTest(phone=phone):
                with self.assertRaisesRegex(ModelValidationError, "^Invalid phone number format$"):
                    InquiryRequest.parse(_inquiry_payload(phone=phone))

    def test_accepts_formatted_phone_numbers(self) -> None:
        for phone in ("+1 (555) 010-0000", "0612345678", "+33-6-12-34-56-78"):
            with self.subTest(phone=phone):
                self.assertEqual(InquiryRequest.parse(_inquiry_payload(phone=phone)).phone, phone)

    def test_non_string_optional_field_is_rejected(self) -> None:
        with self.assertRaisesRegex(ModelValidationError, "message must be a string"):
            InquiryRequest.parse(_inquiry_payload(message=42))

    def test_registration_requires_event_id(self) -> None:
        payload = _inquiry_payload()
        payload.pop("courseId")
        with self.assertRaisesRegex(ModelValidationError, "^Missing required fields$"):
            RegistrationRequest.parse(payload)

    def test_demo_booking_optional_fields_default_to_empty(self) -> None:
        request = DemoBookingRequest.parse(
            {"fullName": "Grace Hopper", "email": "grace@example.com", "phone": "+1 555 010 0000"}
        )
        booking = request.to_booking(now=NOW, id_factory=lambda: "booking-1")

        self.assertEqual(booking.company, "")
        self.assertEqual(booking.preferred_date, "")
        self.assertIs(booking.status, DemoBookingStatus.NEW)


class LeadCreationTests(unittest.TestCase):
    def test_new_inquiry_starts_new_with_equal_timestamps(self) -> None:
        inquiry = InquiryRequest.parse(_inquiry_payload()).to_inquiry(
            course_title="DDMRP Foundations",
            now=NOW,
            id_factory=lambda: "inquiry-1",
        )

        self.assertIs(inquiry.status, InquiryStatus.NEW)
        self.assertEqual(inquiry.created_at, inquiry.updated_at)
        item = inquiry.to_item()
        self.assertEqual(item["status"], "new")
        self.assertEqual(item["courseTitle"], "DDMRP Foundations")
        self.assertEqual(Inquiry.from_item(item), inquiry)

    def test_registration_round_trip(self) -> None:
        payload = _inquiry_payload(eventId="event-1", organization="Acme")
        registration = RegistrationRequest.parse(payload).to_registration(
            now=NOW,
            id_factory=lambda: "registration-1",
        )

        self.assertIs(registration.status, RegistrationStatus.NEW)
        self.assertEqual(registration.to_item()["organization"], "Acme")

    def test_stored_inquiry_with_unknown_status_is_rejected(self) -> None:
        item = InquiryRequest.parse(_inquiry_payload()).to_inquiry(course_title="x", now=NOW).to_item()
        item["status"] = "pending"
        with self.assertRaisesRegex(ModelValidationError, "Invalid status value"):
            Inquiry.from_item(item)


class StatusParsingTests(unittest.TestCase):
    def test_each_entity_accepts_only_its_own_statuses(self) -> None:
        self.assertIs(parse_status(InquiryStatus, "completed"), InquiryStatus.COMPLETED)
        self.assertIs(parse_status(RegistrationStatus, "attended"), RegistrationStatus.ATTENDED)
        with self.assertRaisesRegex(ModelValidationError, "^Invalid status value$"):
            parse_status(InquiryStatus, "attended")
        with self.assertRaisesRegex(ModelValidationError, "^Invalid status value$"):
            parse_status(RegistrationStatus, "completed")

    def test_non_string_status_is_rejected(self) -> None:
        for value in (None, 3, ["new"]):
            with self.subTest(value=value):
                with self.assertRaisesRegex(ModelValidationError, "Invalid status value"):
                    parse_status(DemoBookingStatus, value)


class ContactMessageTests(unittest.TestCase):
    def test_requires_name_email_and_message(self) -> None:
        with self.assertRaisesRegex(ModelValidationError, "Required fields missing"):
            ContactMessage.create({"name": "Ada", "email": "ada@example.com"}, now=NOW)

    def test_rejects_bad_email(self) -> None:
        with self.assertRaisesRegex(ModelValidationError, "Invalid email format"):
            ContactMessage.create({"name": "Ada", "email": "ada", "message": "Hi"}, now=NOW)

    def test_stores_new_status(self) -> None:
        message = ContactMessage.create(
            {"name": "Ada", "email": "ada@example.com", "message": "Hi", "company": "Acme"},
            now=NOW,
        )
        item = message.to_item()
        self.assertEqual(item["status"], "new")
        self.assertEqual(item["company"], "Acme")
        self.assertEqual(item["createdAt"], NOW)
        self.assertEqual(ContactMessage.from_item(item), message)


if __name__ == "__main__":
    unittest.main()
