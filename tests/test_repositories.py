"""Unit tests for the catalog, lead and user repositories."""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from _fakes import MemoryTable, SteppingClock

from backoffice.models.catalog import ArchiveFilter
from backoffice.models.leads import (
    DemoBookingRequest,
    DemoBookingStatus,
    InquiryRequest,
    InquiryStatus,
    RegistrationRequest,
    RegistrationStatus,
)
from backoffice.models.user import Role
from backoffice.repositories import (
    ContactRepository,
    CourseRepository,
    DemoBookingRepository,
    EventRegistrationRepository,
    EventRepository,
    InquiryRepository,
    UserRepository,
)

CONTACT = {"fullName": "Ada Lovelace", "email": "ada@example.com", "phone": "+44 20 7946 0958"}


class CourseRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.table = MemoryTable()
        self.repository = CourseRepository(self.table, clock=SteppingClock())

    def test_list_filters_archived_and_orders_newest_first(self) -> None:
        first = self.repository.create({"title": "Foundations"})
        second = self.repository.create({"title": "Advanced"})
        archived = self.repository.create({"title": "Legacy", "isArchived": True})

        active = self.repository.list()
        self.assertEqual([course.id for course in active], [second.id, first.id])
        self.assertEqual([course.id for course in self.repository.list(ArchiveFilter.ARCHIVED)], [archived.id])
        self.assertEqual(len(self.repository.list(ArchiveFilter.ALL)), 3)

    def test_archive_and_unarchive_refresh_updated_at(self) -> None:
        course = self.repository.create({"title": "Foundations"})

        archived = self.repository.archive(course.id)
        if archived is None:
            self.fail("Expected archived course")
        self.assertTrue(archived.is_archived)
        self.assertGreater(archived.updated_at, course.updated_at)
        self.assertEqual(archived.created_at, course.created_at)

        restored = self.repository.unarchive(course.id)
        if restored is None:
            self.fail("Expected restored course")
        self.assertFalse(restored.is_archived)
        self.assertGreater(restored.updated_at, archived.updated_at)

    def test_archive_missing_course_returns_none(self) -> None:
        self.assertIsNone(self.repository.archive("missing"))
        self.assertEqual(self.table.items, {})

    def test_update_applies_changes(self) -> None:
        course = self.repository.create({"title": "Foundations"})
        updated = self.repository.update(course.id, {"instructor": "Chad Smith"})
        if updated is None:
            self.fail("Expected updated course")
        self.assertEqual(updated.instructor, "Chad Smith")
        self.assertEqual(updated.title, "Foundations")

    def test_delete_is_permanent(self) -> None:
        course = self.repository.create({"title": "Foundations"})
        self.assertTrue(self.repository.delete(course.id))
        self.assertIsNone(self.repository.get(course.id))
        self.assertFalse(self.repository.delete(course.id))

    def test_statistics(self) -> None:
        self.repository.create({"title": "Foundations"})
        self.repository.create({"title": "Legacy", "isArchived": True})
        self.assertEqual(self.repository.statistics(), {"total": 2, "active": 1, "archived": 1})

    def test_malformed_rows_are_skipped(self) -> None:
        self.repository.create({"title": "Foundations"})
        self.table.items["broken"] = {"id": "broken", "title": ""}
        with self.assertLogs("backoffice.repositories.base", level="WARNING"):
            courses = self.repository.list(ArchiveFilter.ALL)
        self.assertEqual(len(courses), 1)


class EventRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = EventRepository(
            MemoryTable(),
            clock=SteppingClock(datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)),
        )

    def test_list_orders_by_event_date(self) -> None:
        later = self.repository.create({"title": "Summit", "eventDate": "2026-12-01", "location": "Paris"})
        sooner = self.repository.create({"title": "Meetup", "eventDate": "2026-11-01", "location": "Lyon"})
        self.assertEqual([event.id for event in self.repository.list()], [sooner.id, later.id])

    def test_statistics_counts_upcoming_active_events(self) -> None:
        self.repository.create({"title": "Past", "eventDate": "2026-10-01", "location": "Paris"})
        self.repository.create({"title": "Today", "eventDate": "2026-10-17", "location": "Paris"})
        self.repository.create({"title": "Next", "eventDate": "2026-11-01T18:00:00Z", "location": "Lyon"})
        self.repository.create(
            {"title": "Hidden", "eventDate": "2026-11-02", "location": "Nice", "isArchived": True}
        )

        self.assertEqual(
            self.repository.statistics(),
            {"total": 4, "active": 3, "archived": 1, "upcoming": 2},
        )


class InquiryRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.table = MemoryTable()
        self.repository = InquiryRepository(self.table, clock=SteppingClock())

    def _create(self, course_id: str = "course-1", course_title: str = "Foundations"):
        request = InquiryRequest.parse({**CONTACT, "courseId": course_id})
        return self.repository.create(request, course_title=course_title)

    def test_create_starts_new(self) -> None:
        inquiry = self._create()
        self.assertIs(inquiry.status, InquiryStatus.NEW)
        self.assertEqual(inquiry.created_at, inquiry.updated_at)
        self.assertEqual(self.repository.get(inquiry.id), inquiry)

    def test_transition_updates_status_and_timestamp(self) -> None:
        inquiry = self._create()
        moved = self.repository.transition(inquiry.id, InquiryStatus.COMPLETED)
        if moved is None:
            self.fail("Expected transitioned inquiry")
        self.assertIs(moved.status, InquiryStatus.COMPLETED)
        self.assertGreater(moved.updated_at, inquiry.updated_at)

    def test_transition_missing_inquiry_leaves_collection_unchanged(self) -> None:
        self._create()
        before = dict(self.table.items)
        self.assertIsNone(self.repository.transition("missing", InquiryStatus.CONTACTED))
        self.assertEqual(self.table.items, before)

    def test_transition_rejects_foreign_status_type(self) -> None:
        inquiry = self._create()
        with self.assertRaises(TypeError):
            self.repository.transition(inquiry.id, RegistrationStatus.ATTENDED)

    def test_list_filters_by_course(self) -> None:
        self._create("course-1")
        other = self._create("course-2", "Advanced")
        self.assertEqual([row.id for row in self.repository.list(course_id="course-2")], [other.id])
        self.assertEqual(len(self.repository.list()), 2)

    def test_statistics(self) -> None:
        first = self._create("course-1")
        self._create("course-2", "Advanced")
        self._create("course-2", "Advanced")
        self.repository.transition(first.id, InquiryStatus.CONTACTED)

        stats = self.repository.statistics()

        self.assertEqual(stats["total"], 3)
        self.assertEqual(stats["total"], sum(stats["byStatus"].values()))
        self.assertEqual(stats["byStatus"], {"new": 2, "contacted": 1, "completed": 0, "archived": 0})
        self.assertEqual(stats["byCourse"][0], {"courseId": "course-2", "courseTitle": "Advanced", "count": 2})
        self.assertEqual(len(stats["byDate"]), 7)
        self.assertEqual(stats["byDate"][-1], {"date": "2026-10-17", "count": 3})


class DemoBookingRepositoryTests(unittest.TestCase):
    def test_create_transition_and_statistics(self) -> None:
        repository = DemoBookingRepository(MemoryTable(), clock=SteppingClock())
        booking = repository.create(DemoBookingRequest.parse({**CONTACT, "company": "Acme"}))

        moved = repository.transition(booking.id, DemoBookingStatus.ARCHIVED)
        if moved is None:
            self.fail("Expected transitioned booking")

        stats = repository.statistics()
        self.assertEqual(stats["byStatus"]["archived"], 1)
        self.assertEqual(stats["byStatusPercent"]["archived"], 100.0)
        self.assertEqual(len(stats["byDate"]), 7)


class EventRegistrationRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = EventRegistrationRepository(MemoryTable(), clock=SteppingClock())

    def _register(self, event_id: str):
        return self.repository.create(RegistrationRequest.parse({**CONTACT, "eventId": event_id}))

    def test_count_by_event(self) -> None:
        self._register("event-1")
        self._register("event-1")
        self._register("event-2")
        counts = self.repository.count_by_event()
        self.assertEqual(counts["event-1"], 2)
        self.assertEqual(counts["event-2"], 1)
        self.assertEqual(counts["event-3"], 0)

    def test_statistics_filters_by_event(self) -> None:
        first = self._register("event-1")
        self._register("event-2")
        self.repository.transition(first.id, RegistrationStatus.CONFIRMED)

        self.assertEqual(self.repository.statistics()["total"], 2)
        scoped = self.repository.statistics(event_id="event-1")
        self.assertEqual(scoped["total"], 1)
        self.assertEqual(scoped["byStatus"]["confirmed"], 1)
        self.assertNotIn("byDate", scoped)


class ContactRepositoryTests(unittest.TestCase):
    def test_create_persists_message(self) -> None:
        table = MemoryTable()
        message = ContactRepository(table, clock=SteppingClock()).create(
            {"name": "Ada", "email": "ada@example.com", "message": "Hello"}
        )
        self.assertEqual(table.items[message.id]["status"], "new")

    def test_get_reads_back_stored_message(self) -> None:
        table = MemoryTable()
        repository = ContactRepository(table, clock=SteppingClock())
        message = repository.create({"name": "Ada", "email": "ada@example.com", "message": "Hello"})

        self.assertEqual(repository.get(message.id), message)
        self.assertIsNone(repository.get("missing"))


class UserRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.table = MemoryTable("email")
        self.repository = UserRepository(self.table, clock=SteppingClock())

    def test_ensure_admin_creates_account_once(self) -> None:
        with self.assertLogs("backoffice.repositories.users", level="INFO"):
            created = self.repository.ensure_admin(email="admin@ddmrp.com", password="secret", name="Admin")
        self.assertTrue(created)
        self.assertFalse(self.repository.ensure_admin(email="admin@ddmrp.com", password="secret", name="Admin"))
        self.assertEqual(list(self.table.items), ["admin@ddmrp.com"])
        self.assertEqual(self.table.items["admin@ddmrp.com"]["role"], "admin")

    def test_ensure_admin_without_password_is_skipped(self) -> None:
        with self.assertLogs("backoffice.repositories.users", level="WARNING"):
            self.assertFalse(self.repository.ensure_admin(email="admin@ddmrp.com", password=None, name="Admin"))
        self.assertEqual(self.table.items, {})

    def test_authenticate(self) -> None:
        self.repository.create(email="Member@Example.com", password="pw-1", name="Member")

        user = self.repository.authenticate("member@example.com", "pw-1")
        if user is None:
            self.fail("Expected authenticated user")
        self.assertIs(user.role, Role.MEMBER)
        self.assertIsNone(self.repository.authenticate("member@example.com", "pw-2"))
        self.assertIsNone(self.repository.authenticate("nobody@example.com", "pw-1"))

    def test_create_refuses_duplicate_email(self) -> None:
        self.assertIsNotNone(self.repository.create(email="m@example.com", password="a", name="M"))
        self.assertIsNone(self.repository.create(email="m@example.com", password="b", name="M2"))


if __name__ == "__main__":
    unittest.main()
