"""Document models used by repositories and API handlers."""

from .catalog import ArchiveFilter, Course, Event, parse_course_patch, parse_event_patch
from .leads import (
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
    parse_status,
)
from .user import Role, User
from .validation import ModelValidationError

__all__ = [
    "ArchiveFilter",
    "ContactMessage",
    "Course",
    "DemoBooking",
    "DemoBookingRequest",
    "DemoBookingStatus",
    "Event",
    "EventRegistration",
    "Inquiry",
    "InquiryRequest",
    "InquiryStatus",
    "ModelValidationError",
    "RegistrationRequest",
    "RegistrationStatus",
    "Role",
    "User",
    "parse_course_patch",
    "parse_event_patch",
    "parse_status",
]
