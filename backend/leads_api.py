"""Lead handlers (inquiries, demo bookings, event registrations) and the contact form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict

from backoffice.models.leads import (
    DemoBookingRequest,
    DemoBookingStatus,
    InquiryRequest,
    InquiryStatus,
    RegistrationRequest,
    RegistrationStatus,
    parse_status,
)

from backend.http import Request, error_response, json_response


@dataclass(frozen=True)
class LeadResource:
    """
    Binds one lead collection to its repository, status set and submission flow.

    `submit` returns None when the referenced course or event cannot accept
    submissions; `parent_missing` is the 404 message for that case.
    `filtered_statistics` applies the listing filter to the statistics route too.
    """

    noun: str
    repository: Callable[[Any], Any]
    status_type: type[Enum]
    submit: Callable[[Any, dict[str, Any]], Any]
    parent_missing: str = ""
    filter_param: str | None = None
    filter_field: str | None = None
    filtered_statistics: bool = False


def _submit_inquiry(app: Any, payload: dict[str, Any]) -> Any:
    inquiry = InquiryRequest.parse(payload)
    course = app.courses.get(inquiry.course_id)
    if course is None or course.is_archived:
        return None
    return app.inquiries.create(inquiry, course_title=course.title)


def _submit_demo_booking(app: Any, payload: dict[str, Any]) -> Any:
    return app.demo_bookings.create(DemoBookingRequest.parse(payload))


def _submit_registration(app: Any, payload: dict[str, Any]) -> Any:
    registration = RegistrationRequest.parse(payload)
    event = app.events.get(registration.event_id)
    if event is None or event.is_archived:
        return None
    return app.registrations.create(registration)


INQUIRIES = LeadResource(
    noun="Inquiry",
    repository=lambda app: app.inquiries,
    status_type=InquiryStatus,
    submit=_submit_inquiry,
    parent_missing="Course not found",
    filter_param="courseId",
    filter_field="course_id",
)
DEMO_BOOKINGS = LeadResource(
    noun="Demo booking",
    repository=lambda app: app.demo_bookings,
    status_type=DemoBookingStatus,
    submit=_submit_demo_booking,
)
EVENT_REGISTRATIONS = LeadResource(
    noun="Registration",
    repository=lambda app: app.registrations,
    status_type=RegistrationStatus,
    submit=_submit_registration,
    parent_missing="Event not found",
    filter_param="eventId",
    filter_field="event_id",
    filtered_statistics=True,
)


def _filters(resource: LeadResource, request: Request) -> dict[str, str]:
    if resource.filter_param is None or resource.filter_field is None:
        return {}
    value = request.query_value(resource.filter_param)
    return {resource.filter_field: value} if value is not None else {}


def list_leads(resource: LeadResource, app: Any, request: Request) -> Dict[str, Any]:
    records = resource.repository(app).list(**_filters(resource, request))
    return json_response(200, [record.to_item() for record in records])


def create_lead(resource: LeadResource, app: Any, request: Request) -> Dict[str, Any]:
    record = resource.submit(app, request.json_body())
    if record is None:
        return error_response(404, resource.parent_missing)
    return json_response(200, record.to_item())


def get_lead(resource: LeadResource, app: Any, request: Request, lead_id: str) -> Dict[str, Any]:
    record = resource.repository(app).get(lead_id)
    if record is None:
        return error_response(404, f"{resource.noun} not found")
    return json_response(200, record.to_item())


def update_lead_status(resource: LeadResource, app: Any, request: Request, lead_id: str) -> Dict[str, Any]:
    status = parse_status(resource.status_type, request.json_body().get("status"))
    record = resource.repository(app).transition(lead_id, status)
    if record is None:
        return error_response(404, f"{resource.noun} not found or could not be updated")
    return json_response(200, record.to_item())


def lead_statistics(resource: LeadResource, app: Any, request: Request) -> Dict[str, Any]:
    filters = _filters(resource, request) if resource.filtered_statistics else {}
    return json_response(200, resource.repository(app).statistics(**filters))


def submit_contact(app: Any, request: Request) -> Dict[str, Any]:
    message = app.contacts.create(request.json_body())
    return json_response(
        200,
        {
            "success": True,
            "message": "Contact message submitted successfully",
            "contactId": message.id,
        },
    )
