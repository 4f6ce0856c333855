"""Domain model for issued back office sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Mapping

from backoffice.models.user import Role
from backoffice.models.validation import (
    format_rfc3339_utc,
    parse_rfc3339_utc,
    validate_non_empty_string,
    validate_timestamp,
)


@dataclass(frozen=True)
class SessionRecord:
    """Stored session that maps an opaque bearer token to a user and role."""

    token: str
    user_id: str
    role: Role
    created_at: str
    updated_at: str
    expires_at: str
    revoked: bool = False
    revoked_at: str | None = None

    def __post_init__(self) -> None:
        validate_non_empty_string(self.token, "token")
        validate_non_empty_string(self.user_id, "user_id")
        if not isinstance(self.role, Role):
            raise ValueError("role must be a Role")
        validate_timestamp(self.created_at, "created_at")
        validate_timestamp(self.updated_at, "updated_at")
        validate_timestamp(self.expires_at, "expires_at")

        if self.revoked and not self.revoked_at:
            raise ValueError("revoked_at is required when revoked=True")
        if not self.revoked and self.revoked_at is not None:
            raise ValueError("revoked_at must be omitted when revoked=False")
        if self.revoked_at is not None:
            validate_timestamp(self.revoked_at, "revoked_at")

        created = parse_rfc3339_utc(self.created_at)
        if parse_rfc3339_utc(self.updated_at) < created:
            raise ValueError("updated_at must be >= created_at")
        if parse_rfc3339_utc(self.expires_at) <= created:
            raise ValueError("expires_at must be after created_at")

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def issue(
        cls,
        *,
        token: str,
        user_id: str,
        role: Role,
        issued_at: datetime,
        ttl: timedelta,
    ) -> "SessionRecord":
        """Construct a freshly issued session record."""
        now = format_rfc3339_utc(issued_at)
        return cls(
            token=token,
            user_id=user_id,
            role=role,
            created_at=now,
            updated_at=now,
            expires_at=format_rfc3339_utc(issued_at + ttl),
        )

    def is_active(self, now: datetime) -> bool:
        return not self.revoked and now < parse_rfc3339_utc(self.expires_at)

    def revoke(self, *, revoked_at: str) -> "SessionRecord":
        """Return a new record marked as revoked."""
        return SessionRecord(
            token=self.token,
            user_id=self.user_id,
            role=self.role,
            created_at=self.created_at,
            updated_at=revoked_at,
            expires_at=self.expires_at,
            revoked=True,
            revoked_at=revoked_at,
        )

    def to_item(self) -> dict[str, Any]:
        """Serialize to a DynamoDB item; ttl drives table expiry."""
        item: dict[str, Any] = {
            "token": self.token,
            "userId": self.user_id,
            "role": self.role.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "expiresAt": self.expires_at,
            "revoked": self.revoked,
            "ttl": int(parse_rfc3339_utc(self.expires_at).timestamp()),
        }
        if self.revoked_at is not None:
            item["revokedAt"] = self.revoked_at
        return item

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "SessionRecord":
        revoked = item.get("revoked", False)
        if not isinstance(revoked, bool):
            raise ValueError("revoked must be a boolean")
        ttl = item.get("ttl")
        if ttl is not None and not isinstance(ttl, (int, Decimal)):
            raise ValueError("ttl must be a number")

        return cls(
            token=item.get("token"),
            user_id=item.get("userId"),
            role=Role.from_stored(item.get("role")),
            created_at=item.get("createdAt"),
            updated_at=item.get("updatedAt"),
            expires_at=item.get("expiresAt"),
            revoked=revoked,
            revoked_at=item.get("revokedAt"),
        )
