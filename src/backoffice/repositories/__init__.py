"""Repositories: one per document collection."""

from .base import DynamoDbDocumentTable, RepositoryError
from .catalog import CourseRepository, EventRepository
from .leads import (
    ContactRepository,
    DemoBookingRepository,
    EventRegistrationRepository,
    InquiryRepository,
    LeadRepository,
)
from .users import UserRepository

__all__ = [
    "ContactRepository",
    "CourseRepository",
    "DemoBookingRepository",
    "DynamoDbDocumentTable",
    "EventRegistrationRepository",
    "EventRepository",
    "InquiryRepository",
    "LeadRepository",
    "RepositoryError",
    "UserRepository",
]
