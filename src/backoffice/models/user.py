"""Back office user accounts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from werkzeug.security import check_password_hash, generate_password_hash

from .validation import validate_email, validate_non_empty_string, validate_timestamp


class Role(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"

    @classmethod
    def from_stored(cls, value: Any) -> "Role":
        """Anything other than an explicit admin role is a plain member."""
        if value == cls.ADMIN.value:
            return cls.ADMIN
        return cls.MEMBER


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class User:
    """Account keyed by its (lower-cased) email address."""

    email: str
    password_hash: str
    name: str
    role: Role
    created_at: str
    updated_at: str

    def __post_init__(self) -> None:
        validate_email(validate_non_empty_string(self.email, "email"))
        validate_non_empty_string(self.password_hash, "passwordHash")
        validate_timestamp(self.created_at, "createdAt")
        validate_timestamp(self.updated_at, "updatedAt")

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def register(
        cls,
        *,
        email: str,
        password: str,
        name: str,
        role: Role,
        now: str,
    ) -> "User":
        validate_non_empty_string(password, "password")
        return cls(
            email=normalize_email(email),
            password_hash=generate_password_hash(password),
            name=name.strip(),
            role=role,
            created_at=now,
            updated_at=now,
        )

    def check_password(self, candidate: str) -> bool:
        return check_password_hash(self.password_hash, candidate)

    def to_item(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "passwordHash": self.password_hash,
            "name": self.name,
            "role": self.role.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "User":
        return cls(
            email=item.get("email"),
            password_hash=item.get("passwordHash"),
            name=item.get("name") or "",
            role=Role.from_stored(item.get("role")),
            created_at=item.get("createdAt"),
            updated_at=item.get("updatedAt"),
        )

    def to_public_dict(self) -> dict[str, Any]:
        return {"email": self.email, "name": self.name, "role": self.role.value}
