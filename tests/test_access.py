"""Unit tests for route access decisions and catalog visibility."""

from __future__ import annotations

import unittest

from backend.access import Access, Decision, archive_filter_for, evaluate
from backend.http import Request
from backoffice.models.catalog import ArchiveFilter
from backoffice.models.user import Role
from backoffice.sessions.model import SessionRecord


def _session(role: Role) -> SessionRecord:
    return SessionRecord(
        token="token-abc",
        user_id="someone@example.com",
        role=role,
        created_at="2026-10-17T09:00:00Z",
        updated_at="2026-10-17T09:00:00Z",
        expires_at="2026-10-18T09:00:00Z",
    )


class EvaluateTests(unittest.TestCase):
    def test_public_routes_allow_everyone(self) -> None:
        self.assertIs(evaluate(None, Access.PUBLIC), Decision.ALLOW)
        self.assertIs(evaluate(_session(Role.MEMBER), Access.PUBLIC), Decision.ALLOW)

    def test_session_routes_require_a_session(self) -> None:
        self.assertIs(evaluate(None, Access.SESSION), Decision.UNAUTHENTICATED)
        self.assertIs(evaluate(_session(Role.MEMBER), Access.SESSION), Decision.ALLOW)

    def test_admin_routes_require_admin_role(self) -> None:
        self.assertIs(evaluate(None, Access.ADMIN), Decision.UNAUTHENTICATED)
        self.assertIs(evaluate(_session(Role.MEMBER), Access.ADMIN), Decision.FORBIDDEN)
        self.assertIs(evaluate(_session(Role.ADMIN), Access.ADMIN), Decision.ALLOW)


class ArchiveFilterForTests(unittest.TestCase):
    def _request(self, role: Role | None, **query: str) -> Request:
        session = _session(role) if role is not None else None
        return Request(method="GET", path="/courses", query=query, session=session)

    def test_non_admin_always_sees_active(self) -> None:
        self.assertIs(archive_filter_for(self._request(None)), ArchiveFilter.ACTIVE)
        self.assertIs(
            archive_filter_for(self._request(Role.MEMBER, archivedOnly="true")),
            ArchiveFilter.ACTIVE,
        )

    def test_admin_defaults_to_all(self) -> None:
        self.assertIs(archive_filter_for(self._request(Role.ADMIN)), ArchiveFilter.ALL)
        self.assertIs(
            archive_filter_for(self._request(Role.ADMIN, includeArchived="true")),
            ArchiveFilter.ALL,
        )

    def test_admin_flags_narrow_listing(self) -> None:
        self.assertIs(archive_filter_for(self._request(Role.ADMIN, activeOnly="true")), ArchiveFilter.ACTIVE)
        self.assertIs(
            archive_filter_for(self._request(Role.ADMIN, archivedOnly="1")),
            ArchiveFilter.ARCHIVED,
        )
        self.assertIs(
            archive_filter_for(self._request(Role.ADMIN, includeArchived="false")),
            ArchiveFilter.ACTIVE,
        )


if __name__ == "__main__":
    unittest.main()
