"""Route access levels and the session gate in front of every handler."""

from __future__ import annotations

from enum import Enum

from backoffice.models.catalog import ArchiveFilter
from backoffice.sessions.model import SessionRecord

from backend.http import Request


class Access(str, Enum):
    PUBLIC = "public"
    SESSION = "session"
    ADMIN = "admin"


class Decision(str, Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


def evaluate(session: SessionRecord | None, required: Access) -> Decision:
    """Decide whether a resolved session (or none) satisfies a route's access level."""
    if required is Access.PUBLIC:
        return Decision.ALLOW
    if session is None:
        return Decision.UNAUTHENTICATED
    if required is Access.ADMIN and not session.is_admin:
        return Decision.FORBIDDEN
    return Decision.ALLOW


def archive_filter_for(request: Request) -> ArchiveFilter:
    """
    Pick the catalog visibility filter for a listing request.

    Non-admin callers only ever see active documents. Admins see everything
    unless they narrow the listing with activeOnly, archivedOnly or
    includeArchived=false.
    """
    if not request.is_admin:
        return ArchiveFilter.ACTIVE
    if request.query_flag("activeOnly"):
        return ArchiveFilter.ACTIVE
    if request.query_flag("archivedOnly"):
        return ArchiveFilter.ARCHIVED
    if request.query_flag("includeArchived") is False:
        return ArchiveFilter.ACTIVE
    return ArchiveFilter.ALL
