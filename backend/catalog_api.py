"""Course and event handlers: listing, CRUD, archival and statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

from backoffice.models.catalog import parse_course_patch, parse_event_patch

from backend.access import archive_filter_for
from backend.http import Request, error_response, json_response


@dataclass(frozen=True)
class CatalogResource:
    """Binds one catalog collection to its repository and patch rules."""

    noun: str
    repository: Callable[[Any], Any]
    parse_patch: Callable[[Mapping[str, Any]], dict[str, Any]]
    decorate: Callable[[Any, list[dict[str, Any]]], list[dict[str, Any]]]

    def not_found(self, suffix: str = "") -> Dict[str, Any]:
        return error_response(404, f"{self.noun} not found{suffix}")

    def render(self, app: Any, record: Any) -> dict[str, Any]:
        return self.decorate(app, [record.to_item()])[0]


def _plain(_app: Any, items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return items


def _with_registration_count(app: Any, items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    counts = app.registrations.count_by_event()
    return [{**item, "registrationCount": counts.get(item["id"], 0)} for item in items]


COURSES = CatalogResource(
    noun="Course",
    repository=lambda app: app.courses,
    parse_patch=parse_course_patch,
    decorate=_plain,
)
EVENTS = CatalogResource(
    noun="Event",
    repository=lambda app: app.events,
    parse_patch=parse_event_patch,
    decorate=_with_registration_count,
)


def list_documents(resource: CatalogResource, app: Any, request: Request) -> Dict[str, Any]:
    records = resource.repository(app).list(archive_filter_for(request))
    return json_response(200, resource.decorate(app, [record.to_item() for record in records]))


def create_document(resource: CatalogResource, app: Any, request: Request) -> Dict[str, Any]:
    record = resource.repository(app).create(request.json_body())
    return json_response(201, resource.render(app, record))


def get_document(resource: CatalogResource, app: Any, request: Request, document_id: str) -> Dict[str, Any]:
    record = resource.repository(app).get(document_id)
    # Archived documents stay hidden from the public site.
    if record is None or (record.is_archived and not request.is_admin):
        return resource.not_found()
    return json_response(200, resource.render(app, record))


def update_document(resource: CatalogResource, app: Any, request: Request, document_id: str) -> Dict[str, Any]:
    changes = resource.parse_patch(request.json_body())
    record = resource.repository(app).update(document_id, changes)
    if record is None:
        return resource.not_found(" or could not be updated")
    return json_response(200, resource.render(app, record))


def delete_document(resource: CatalogResource, app: Any, request: Request, document_id: str) -> Dict[str, Any]:
    if not resource.repository(app).delete(document_id):
        return resource.not_found(" or could not be deleted")
    return json_response(200, {"success": True})


def archive_document(resource: CatalogResource, app: Any, request: Request, document_id: str) -> Dict[str, Any]:
    record = resource.repository(app).archive(document_id)
    if record is None:
        return resource.not_found()
    return json_response(200, resource.render(app, record))


def unarchive_document(resource: CatalogResource, app: Any, request: Request, document_id: str) -> Dict[str, Any]:
    record = resource.repository(app).unarchive(document_id)
    if record is None:
        return resource.not_found()
    return json_response(200, resource.render(app, record))


def document_statistics(resource: CatalogResource, app: Any, request: Request) -> Dict[str, Any]:
    return json_response(200, resource.repository(app).statistics())


def event_registrations(app: Any, request: Request, event_id: str) -> Dict[str, Any]:
    if app.events.get(event_id) is None:
        return EVENTS.not_found()
    registrations = app.registrations.list(event_id=event_id)
    return json_response(200, [registration.to_item() for registration in registrations])
