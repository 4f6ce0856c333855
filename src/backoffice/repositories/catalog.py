"""Course and event repositories with archive/unarchive/delete lifecycle."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from backoffice.models.catalog import ArchiveFilter, Course, Event
from backoffice.statistics import archive_breakdown

from .base import DocumentRepository

logger = logging.getLogger(__name__)


class _ArchivableRepository(DocumentRepository):
    def update(self, key_value: str, changes: Mapping[str, Any]) -> Any | None:
        """Apply validated attribute changes and refresh updatedAt."""
        item = self._documents.update_fields(key_value, {**changes, "updatedAt": self._now()})
        if item is None:
            return None
        return self._hydrate_or_skip(item)

    def archive(self, key_value: str) -> Any | None:
        return self.update(key_value, {"isArchived": True})

    def unarchive(self, key_value: str) -> Any | None:
        return self.update(key_value, {"isArchived": False})

    def delete(self, key_value: str) -> bool:
        deleted = self._documents.delete(key_value)
        if deleted:
            logger.info("Deleted %s %s", self.label, key_value)
        return deleted


class CourseRepository(_ArchivableRepository):
    label = "course"

    def _hydrate(self, item: Mapping[str, Any]) -> Course:
        return Course.from_item(item)

    def create(self, payload: Mapping[str, Any]) -> Course:
        course = Course.create(payload, now=self._now())
        self._documents.put(course.to_item())
        logger.info("Created course %s", course.id)
        return course

    def list(self, archive_filter: ArchiveFilter = ArchiveFilter.ACTIVE) -> list[Course]:
        """Courses visible under the filter, newest first."""
        courses = [course for course in self._all() if archive_filter.admits(course.is_archived)]
        courses.sort(key=lambda course: (course.created_at, course.id), reverse=True)
        return courses

    def statistics(self) -> dict[str, int]:
        return archive_breakdown(course.is_archived for course in self._all())


class EventRepository(_ArchivableRepository):
    label = "event"

    def _hydrate(self, item: Mapping[str, Any]) -> Event:
        return Event.from_item(item)

    def create(self, payload: Mapping[str, Any]) -> Event:
        event = Event.create(payload, now=self._now())
        self._documents.put(event.to_item())
        logger.info("Created event %s", event.id)
        return event

    def list(self, archive_filter: ArchiveFilter = ArchiveFilter.ACTIVE) -> list[Event]:
        """Events visible under the filter, soonest first."""
        events = [event for event in self._all() if archive_filter.admits(event.is_archived)]
        events.sort(key=lambda event: (event.event_date, event.id))
        return events

    def statistics(self) -> dict[str, int]:
        events = self._all()
        today = self._clock().date().isoformat()
        summary = archive_breakdown(event.is_archived for event in events)
        summary["upcoming"] = sum(
            1 for event in events if not event.is_archived and event.event_day >= today
        )
        return summary
